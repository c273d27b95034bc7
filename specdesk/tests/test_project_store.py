import json
import re
import tempfile
import unittest
from pathlib import Path

import yaml

from specdesk.errors import ProjectValidationError
from specdesk.project_manager import ProjectStore, discover_projects, hash_path


class ProjectStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.base = Path(self.tmpdir.name)
        self.config_dir = self.base / "config"

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def _project(self, name: str, nested: bool = False) -> Path:
        root = self.base / name
        specs = root / ".lean-spec" / "specs" if nested else root / "specs"
        specs.mkdir(parents=True)
        return root

    def test_add_project_registers_and_persists(self) -> None:
        root = self._project("alpha")
        store = ProjectStore(self.config_dir)

        project = store.add_project(root)

        self.assertRegex(project.id, re.compile(r"^[0-9a-f]{12}$"))
        self.assertEqual(project.id, hash_path(root.resolve()))
        self.assertEqual(project.name, "alpha")
        self.assertEqual(project.specsDir, str(root.resolve() / "specs"))
        self.assertEqual(store.recent_projects(), [project.id])

        saved = json.loads((self.config_dir / "projects.json").read_text(encoding="utf-8"))
        self.assertEqual(saved["projects"][0]["id"], project.id)

        reopened = ProjectStore(self.config_dir)
        self.assertEqual([p.id for p in reopened.all()], [project.id])

    def test_nested_specs_dir_and_description(self) -> None:
        root = self._project("beta", nested=True)
        (root / "leanspec.yaml").write_text("description: Beta project\n", encoding="utf-8")

        project = ProjectStore(self.config_dir).add_project(root)

        self.assertTrue(project.specsDir.endswith(str(Path(".lean-spec") / "specs")))
        self.assertEqual(project.description, "Beta project")

    def test_readding_same_root_does_not_duplicate(self) -> None:
        alpha = self._project("alpha")
        beta = self._project("beta")
        store = ProjectStore(self.config_dir)

        first = store.add_project(alpha)
        second = store.add_project(beta)
        again = store.add_project(alpha)

        self.assertEqual(again.id, first.id)
        self.assertEqual(len(store.all()), 2)
        self.assertEqual(store.recent_projects(), [first.id, second.id])

    def test_rejects_invalid_roots(self) -> None:
        store = ProjectStore(self.config_dir)
        with self.assertRaises(ProjectValidationError):
            store.add_project(self.base / "missing")

        plain = self.base / "plain"
        plain.mkdir()
        with self.assertRaises(ProjectValidationError):
            store.add_project(plain)

        afile = self.base / "file.txt"
        afile.write_text("x", encoding="utf-8")
        with self.assertRaises(ProjectValidationError):
            store.add_project(afile)

        self.assertEqual(store.all(), [])

    def test_set_active_moves_project_to_front(self) -> None:
        store = ProjectStore(self.config_dir)
        alpha = store.add_project(self._project("alpha"))
        beta = store.add_project(self._project("beta"))
        self.assertEqual(store.recent_projects(), [beta.id, alpha.id])

        with self.assertLogs("specdesk.projects", level="INFO") as logs:
            active = store.set_active(alpha.id)

        self.assertEqual(active.id, alpha.id)
        self.assertEqual(store.recent_projects(), [alpha.id, beta.id])
        self.assertIn("Switched active project to: alpha", "\n".join(logs.output))
        self.assertIsNone(store.set_active("unknown"))

    def test_find_returns_copies(self) -> None:
        store = ProjectStore(self.config_dir)
        project = store.add_project(self._project("alpha"))

        found = store.find(project.id)
        found.name = "changed"

        self.assertEqual(store.find(project.id).name, "alpha")
        self.assertIsNone(store.find("unknown"))

    def test_remove_project(self) -> None:
        store = ProjectStore(self.config_dir)
        project = store.add_project(self._project("alpha"))

        self.assertTrue(store.remove_project(project.id))
        self.assertFalse(store.remove_project(project.id))
        self.assertEqual(store.all(), [])
        self.assertEqual(store.recent_projects(), [])

    def test_corrupt_registry_falls_back_to_empty(self) -> None:
        self.config_dir.mkdir()
        (self.config_dir / "projects.json").write_text("{not json", encoding="utf-8")

        with self.assertLogs("specdesk.projects", level="ERROR") as logs:
            store = ProjectStore(self.config_dir)

        self.assertEqual(store.all(), [])
        self.assertIn("Failed to load projects file", "\n".join(logs.output))

    def test_legacy_yaml_registry(self) -> None:
        self.config_dir.mkdir()
        payload = {
            "projects": [
                {
                    "id": "abc123abc123",
                    "name": "legacy",
                    "path": "/tmp/legacy",
                    "specsDir": "/tmp/legacy/specs",
                    "lastAccessed": "2025-01-01T00:00:00+00:00",
                }
            ],
            "recentProjects": ["abc123abc123"],
        }
        (self.config_dir / "projects.yaml").write_text(yaml.safe_dump(payload), encoding="utf-8")

        store = ProjectStore(self.config_dir)

        self.assertEqual([p.name for p in store.all()], ["legacy"])
        self.assertEqual(store.recent_projects(), ["abc123abc123"])

    def test_refresh_picks_up_external_edits(self) -> None:
        store = ProjectStore(self.config_dir)
        store.add_project(self._project("alpha"))

        other = ProjectStore(self.config_dir)
        other.add_project(self._project("beta"))

        self.assertEqual(len(store.all()), 1)
        self.assertEqual(len(store.refresh()), 2)


class DiscoverProjectsTests(unittest.TestCase):
    def test_breadth_first_with_depth_and_limit(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir)
            (base / "a" / "specs").mkdir(parents=True)
            (base / "a" / "inner" / "specs").mkdir(parents=True)
            (base / "b" / "c" / ".lean-spec" / "specs").mkdir(parents=True)
            (base / "d" / "e" / "f" / "g" / "specs").mkdir(parents=True)

            found = discover_projects(base, limit=10, max_depth=3)
            self.assertEqual(found, [base / "a", base / "b" / "c"])

            self.assertEqual(discover_projects(base, limit=1, max_depth=3), [base / "a"])


if __name__ == "__main__":
    unittest.main()
