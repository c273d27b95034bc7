"""Load spec directories from disk into Spec snapshots."""
from __future__ import annotations

import logging
import re
from pathlib import Path

from specdesk.constants import ARCHIVED_DIR, ARCHIVED_STATUS, SPEC_DOCUMENT, SPEC_ID_PREFIX
from specdesk.date_utils import utc_now
from specdesk.models import Spec
from specdesk.parsers.frontmatter import extract_title, parse_frontmatter

logger = logging.getLogger("specdesk.specs")

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def parse_integer(token: str) -> int | None:
    """Strict integer parse: optional sign and ASCII digits, nothing else."""
    if not _INTEGER_RE.fullmatch(token):
        return None
    return int(token)


def reference_number(reference: str) -> int | None:
    """Number named by the segment before the first hyphen of ``reference``."""
    return parse_integer(reference.strip().split("-", 1)[0])


def spec_number_from_name(spec_name: str) -> int | None:
    return parse_integer(spec_name.split("-", 1)[0])


def dependency_matches(dep: str, spec_name: str, spec_number: int | None) -> bool:
    """Whether the raw reference ``dep`` names the given spec.

    An exact name match wins. Otherwise, for numbered specs, a reference
    with a numeric prefix ("035", "35", "035-other") matches on number alone.
    """
    if dep == spec_name:
        return True
    if spec_number is not None:
        dep_number = reference_number(dep)
        if dep_number is not None:
            return dep_number == spec_number
    return False


def _is_spec_dir_name(name: str) -> bool:
    return bool(name) and name[0] in "0123456789"


def _sort_key(spec: Spec) -> tuple[bool, int]:
    # Specs without a number sort ahead of every numbered spec.
    return (spec.specNumber is not None, spec.specNumber or 0)


def build_required_by(specs: list[Spec]) -> list[Spec]:
    """Return copies of ``specs`` with ``requiredBy`` filled in.

    B lands in A.requiredBy when any of B's references matches A. The
    resulting lists follow the order of ``specs``.
    """
    linked: list[Spec] = []
    for spec in specs:
        required_by = [
            other.specName
            for other in specs
            if other is not spec
            and any(dependency_matches(dep, spec.specName, spec.specNumber) for dep in other.dependsOn)
        ]
        linked.append(spec.model_copy(update={"requiredBy": required_by}))
    return linked


class SpecReader:
    """Reads the spec directories under one specs root."""

    def __init__(self, specs_dir: Path | str, project_id: str):
        self.specs_dir = Path(specs_dir)
        self.project_id = project_id

    def load_all(self) -> list[Spec]:
        """Load every spec under the root, sorted by number, with reverse links."""
        if not self.specs_dir.exists():
            return []

        specs = self._load_specs_from_dir(self.specs_dir, is_archived=False)

        archived_dir = self.specs_dir / ARCHIVED_DIR
        if archived_dir.is_dir():
            specs.extend(self._load_specs_from_dir(archived_dir, is_archived=True))

        specs.sort(key=_sort_key)
        return build_required_by(specs)

    def _load_specs_from_dir(self, directory: Path, is_archived: bool) -> list[Spec]:
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            logger.warning("Unable to read specs directory %s: %s", directory, exc)
            return []

        specs: list[Spec] = []
        for path in entries:
            if not path.is_dir():
                continue
            if path.name == ARCHIVED_DIR and not is_archived:
                continue
            if not _is_spec_dir_name(path.name):
                continue
            spec = self._load_spec_from_dir(path, is_archived)
            if spec is not None:
                specs.append(spec)
        return specs

    def _load_spec_from_dir(self, spec_dir: Path, is_archived: bool) -> Spec | None:
        spec_name = spec_dir.name
        readme_path = spec_dir / SPEC_DOCUMENT
        try:
            content = readme_path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping %s: %s", spec_dir, exc)
            return None

        frontmatter, body = parse_frontmatter(content)
        if frontmatter.status is None:
            logger.debug("Skipping %s: frontmatter has no status", spec_dir)
            return None

        if is_archived:
            logger.warning(
                "DEPRECATED: Spec '%s' is in archived/ folder. "
                "Run 'lean-spec migrate-archived' to migrate.",
                spec_name,
            )
            file_path = f"specs/{ARCHIVED_DIR}/{spec_name}/{SPEC_DOCUMENT}"
            status = ARCHIVED_STATUS
        else:
            file_path = f"specs/{spec_name}/{SPEC_DOCUMENT}"
            status = frontmatter.status_or_default()

        return Spec(
            id=f"{SPEC_ID_PREFIX}{spec_name}",
            projectId=self.project_id,
            specNumber=spec_number_from_name(spec_name),
            specName=spec_name,
            title=extract_title(body),
            status=status,
            priority=frontmatter.priority,
            tags=list(frontmatter.tags),
            assignee=frontmatter.assignee,
            contentMd=content,
            contentHtml=None,
            createdAt=frontmatter.get_created(),
            updatedAt=frontmatter.get_updated(),
            completedAt=frontmatter.get_completed(),
            filePath=file_path,
            githubUrl=None,
            syncedAt=utc_now(),
            dependsOn=list(frontmatter.dependsOn),
        )

    def load_spec(self, spec_id: str) -> Spec | None:
        """Find a spec by number, full or partial name, or id."""
        specs = self.load_all()

        number = parse_integer(spec_id)
        if number is not None:
            return next((s for s in specs if s.specNumber == number), None)

        for spec in specs:
            if (
                spec.specName == spec_id
                or spec.specName.startswith(f"{spec_id}-")
                or spec.id == spec_id
                or spec.id == f"{SPEC_ID_PREFIX}{spec_id}"
            ):
                return spec
        return None

    def get_by_status(self, status: str) -> list[Spec]:
        return [spec for spec in self.load_all() if spec.status == status]

    def search(self, query: str) -> list[Spec]:
        """Case-insensitive substring search over name, title, content and tags."""
        needle = query.lower()
        return [
            spec
            for spec in self.load_all()
            if needle in spec.specName.lower()
            or needle in (spec.title or "").lower()
            or needle in spec.contentMd.lower()
            or any(needle in tag.lower() for tag in spec.tags)
        ]

    def get_all_tags(self) -> list[str]:
        tags: set[str] = set()
        for spec in self.load_all():
            tags.update(spec.tags)
        return sorted(tags)

    def spec_dir(self, spec: Spec) -> Path:
        if spec.filePath.startswith(f"specs/{ARCHIVED_DIR}/"):
            return self.specs_dir / ARCHIVED_DIR / spec.specName
        return self.specs_dir / spec.specName

    def spec_path(self, spec: Spec) -> Path:
        """Absolute path of the document backing ``spec``."""
        return self.spec_dir(spec) / SPEC_DOCUMENT

    def count_sub_specs(self, spec: Spec) -> int:
        """Number of Markdown files beside the main document."""
        try:
            return sum(
                1
                for path in self.spec_dir(spec).iterdir()
                if path.is_file() and path.suffix == ".md" and path.name != SPEC_DOCUMENT
            )
        except OSError:
            return 0
