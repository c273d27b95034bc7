import tempfile
import unittest
from pathlib import Path

from specdesk.parsers.specs import SpecReader, dependency_matches, spec_number_from_name


def _write_spec(root: Path, name: str, frontmatter: str, content: str = "") -> Path:
    spec_dir = root / name
    spec_dir.mkdir(parents=True, exist_ok=True)
    readme = spec_dir / "README.md"
    readme.write_text(f"---\n{frontmatter}\n---\n\n{content}", encoding="utf-8")
    return readme


class SpecReaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.specs_dir = Path(self.tmpdir.name) / "specs"
        self.specs_dir.mkdir()
        self.reader = SpecReader(self.specs_dir, "test-project")

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_load_specs(self) -> None:
        _write_spec(
            self.specs_dir,
            "001-first-spec",
            "status: planned\npriority: high\ntags:\n  - test\ncreatedAt: '2025-01-02T03:04:05Z'",
            "# First Spec\n\nContent here.",
        )
        _write_spec(
            self.specs_dir,
            "002-second-spec",
            "status: in-progress\ndepends_on:\n  - 001-first-spec",
            "# Second Spec\n\nMore content.",
        )

        specs = self.reader.load_all()

        self.assertEqual(len(specs), 2)
        first, second = specs
        self.assertEqual(first.id, "fs-001-first-spec")
        self.assertEqual(first.projectId, "test-project")
        self.assertEqual(first.specNumber, 1)
        self.assertEqual(first.status, "planned")
        self.assertEqual(first.title, "First Spec")
        self.assertEqual(first.tags, ["test"])
        self.assertEqual(first.filePath, "specs/001-first-spec/README.md")
        self.assertIsNotNone(first.createdAt)
        self.assertIsNone(first.contentHtml)
        self.assertTrue(first.contentMd.startswith("---\nstatus: planned"))

        self.assertEqual(second.specNumber, 2)
        self.assertEqual(second.status, "in-progress")
        self.assertEqual(second.dependsOn, ["001-first-spec"])
        self.assertEqual(first.requiredBy, ["002-second-spec"])
        self.assertEqual(second.requiredBy, [])

    def test_missing_root_returns_empty(self) -> None:
        reader = SpecReader(self.specs_dir / "nope", "p")
        self.assertEqual(reader.load_all(), [])

    def test_skips_non_spec_directories(self) -> None:
        _write_spec(self.specs_dir, "001-real", "status: planned", "# Real")
        _write_spec(self.specs_dir, "notes", "status: planned", "# Not a spec dir")
        _write_spec(self.specs_dir, "002-no-status", "priority: high", "# No status")
        (self.specs_dir / "003-no-readme").mkdir()
        (self.specs_dir / "004-file.md").write_text("---\nstatus: planned\n---\n", encoding="utf-8")

        names = [spec.specName for spec in self.reader.load_all()]
        self.assertEqual(names, ["001-real"])

    def test_malformed_frontmatter_never_raises(self) -> None:
        _write_spec(self.specs_dir, "001-broken", "status: [unclosed", "# Broken")
        _write_spec(self.specs_dir, "002-fine", "status: planned", "# Fine")
        (self.specs_dir / "003-binary").mkdir()
        (self.specs_dir / "003-binary" / "README.md").write_bytes(b"\xff\xfe\x00garbage")
        _write_spec(self.specs_dir, "004-bad-date", "status: planned\ncreated: 2024-13-01", "# Bad date")
        _write_spec(
            self.specs_dir,
            "005-edge-time",
            "status: planned\ncreatedAt: '0001-01-01T00:00:00+01:00'\nupdatedAt: '9999-12-31T23:59:59-01:00'",
            "# Edge time",
        )

        with self.assertLogs("specdesk.frontmatter", level="WARNING"):
            specs = self.reader.load_all()

        self.assertEqual([s.specName for s in specs], ["002-fine", "005-edge-time"])
        edge = specs[1]
        self.assertIsNone(edge.createdAt)
        self.assertIsNone(edge.updatedAt)

    def test_archived_specs_are_forced_to_archived(self) -> None:
        _write_spec(self.specs_dir, "001-active", "status: planned", "# Active")
        _write_spec(self.specs_dir / "archived", "002-old", "status: complete", "# Old")

        with self.assertLogs("specdesk.specs", level="WARNING") as logs:
            specs = self.reader.load_all()

        archived = [s for s in specs if s.specName == "002-old"][0]
        self.assertEqual(archived.status, "archived")
        self.assertEqual(archived.filePath, "specs/archived/002-old/README.md")
        self.assertTrue(any("DEPRECATED" in line for line in logs.output))
        self.assertEqual(self.reader.spec_path(archived), self.specs_dir / "archived" / "002-old" / "README.md")

    def test_sorted_by_number_with_unnumbered_first(self) -> None:
        _write_spec(self.specs_dir, "010-ten", "status: planned", "# Ten")
        _write_spec(self.specs_dir, "2-two", "status: planned", "# Two")
        _write_spec(self.specs_dir, "1x-odd", "status: planned", "# Odd")
        _write_spec(self.specs_dir, "003-three", "status: planned", "# Three")

        specs = self.reader.load_all()
        self.assertEqual([s.specName for s in specs], ["1x-odd", "2-two", "003-three", "010-ten"])
        self.assertIsNone(specs[0].specNumber)

    def test_required_by_is_inverse_of_depends_on(self) -> None:
        _write_spec(self.specs_dir, "001-base", "status: planned", "# Base")
        _write_spec(self.specs_dir, "002-feature", "status: planned\ndepends_on: ['1']", "# Feature")
        _write_spec(self.specs_dir, "003-extension", "status: planned\ndepends_on: ['002-feature', '001']", "# Ext")
        _write_spec(self.specs_dir, "004-self", "status: planned\ndepends_on: ['004-self', '999']", "# Self")

        specs = {s.specName: s for s in self.reader.load_all()}

        self.assertEqual(specs["001-base"].requiredBy, ["002-feature", "003-extension"])
        self.assertEqual(specs["002-feature"].requiredBy, ["003-extension"])
        self.assertEqual(specs["003-extension"].requiredBy, [])
        self.assertEqual(specs["004-self"].requiredBy, [])

        for target in specs.values():
            for other in specs.values():
                if other is target:
                    continue
                declared = any(
                    dependency_matches(dep, target.specName, target.specNumber) for dep in other.dependsOn
                )
                self.assertEqual(other.specName in target.requiredBy, declared)

    def test_load_spec_lookup_rules(self) -> None:
        _write_spec(self.specs_dir, "001-base", "status: planned", "# Base")
        _write_spec(self.specs_dir, "035-my-spec", "status: planned", "# Mine")

        self.assertEqual(self.reader.load_spec("35").specName, "035-my-spec")
        self.assertEqual(self.reader.load_spec("035").specName, "035-my-spec")
        self.assertEqual(self.reader.load_spec("035-my-spec").specName, "035-my-spec")
        self.assertEqual(self.reader.load_spec("035-my").specName, "035-my-spec")
        self.assertEqual(self.reader.load_spec("fs-001-base").specName, "001-base")
        self.assertIsNone(self.reader.load_spec("99"))
        self.assertIsNone(self.reader.load_spec("unknown"))

    def test_queries(self) -> None:
        _write_spec(self.specs_dir, "001-test-spec", "status: planned\ntags: [rust, Core]", "# Test Spec\n\nSearchable content about rust.")
        _write_spec(self.specs_dir, "002-other-spec", "status: complete\ntags: [ui]", "# Other Spec\n\nDifferent content.")

        self.assertEqual([s.specName for s in self.reader.search("RUST")], ["001-test-spec"])
        self.assertEqual(len(self.reader.search("content")), 2)
        self.assertEqual([s.specName for s in self.reader.search("core")], ["001-test-spec"])
        self.assertEqual([s.specName for s in self.reader.get_by_status("complete")], ["002-other-spec"])
        self.assertEqual(self.reader.get_all_tags(), ["Core", "rust", "ui"])

    def test_count_sub_specs(self) -> None:
        _write_spec(self.specs_dir, "001-split", "status: planned", "# Split")
        (self.specs_dir / "001-split" / "DESIGN.md").write_text("# Design\n", encoding="utf-8")
        (self.specs_dir / "001-split" / "diagram.png").write_bytes(b"")
        spec = self.reader.load_all()[0]
        self.assertEqual(self.reader.count_sub_specs(spec), 1)


class DependencyMatchTests(unittest.TestCase):
    def test_dependency_matches(self) -> None:
        self.assertTrue(dependency_matches("001-first-spec", "001-first-spec", 1))
        self.assertTrue(dependency_matches("001", "001-first-spec", 1))
        self.assertTrue(dependency_matches("1", "001-first-spec", 1))
        self.assertTrue(dependency_matches(" 001-renamed ", "001-first-spec", 1))
        self.assertFalse(dependency_matches("002", "001-first-spec", 1))
        self.assertFalse(dependency_matches("first-spec", "001-first-spec", 1))
        self.assertFalse(dependency_matches("1", "1x-odd", None))

    def test_spec_number_from_name(self) -> None:
        self.assertEqual(spec_number_from_name("042-answer"), 42)
        self.assertEqual(spec_number_from_name("7"), 7)
        self.assertIsNone(spec_number_from_name("1x-odd"))


if __name__ == "__main__":
    unittest.main()
