"""Project registry: maps on-disk roots to opaque project identifiers."""
from __future__ import annotations

import hashlib
import json
import logging
import threading
from collections import deque
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from specdesk import config
from specdesk.date_utils import utc_now_rfc3339
from specdesk.errors import ProjectValidationError
from specdesk.models import Project, ProjectsFile

logger = logging.getLogger("specdesk.projects")

_DESCRIPTOR_FILES = ("leanspec.yaml", "leanspec.yml", "lean-spec.yaml", "lean-spec.yml")


def detect_specs_dir(root: Path) -> Optional[Path]:
    """Return the specs directory of a project root, if it has one."""
    for candidate in (root / "specs", root / ".lean-spec" / "specs"):
        if candidate.is_dir():
            return candidate
    return None


def infer_name(root: Path) -> str:
    return root.name or "LeanSpec Project"


def infer_description(root: Path) -> Optional[str]:
    for name in _DESCRIPTOR_FILES:
        path = root / name
        if not path.is_file():
            continue
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            logger.debug("Ignoring unreadable descriptor %s: %s", path, exc)
            continue
        if isinstance(data, dict) and isinstance(data.get("description"), str):
            return data["description"]
    return None


def hash_path(path: Path) -> str:
    return hashlib.sha256(str(path).encode("utf-8")).hexdigest()[:12]


def validate_project(path: Path) -> Project:
    """Build a registry entry for ``path`` or raise ProjectValidationError."""
    if not path.exists():
        raise ProjectValidationError(f"{path} is not accessible")
    if not path.is_dir():
        raise ProjectValidationError(f"{path} is not a directory")

    normalized = path.resolve()
    specs_dir = detect_specs_dir(normalized)
    if specs_dir is None:
        raise ProjectValidationError(f"No specs directory found for {normalized}")

    return Project(
        id=hash_path(normalized),
        name=infer_name(normalized),
        path=str(normalized),
        specsDir=str(specs_dir),
        lastAccessed=utc_now_rfc3339(),
        favorite=False,
        color=None,
        description=infer_description(normalized),
    )


def discover_projects(
    root: Path,
    limit: int = config.DISCOVERY_LIMIT,
    max_depth: int = config.DISCOVERY_MAX_DEPTH,
) -> list[Path]:
    """Breadth-first search for project roots (directories holding specs).

    A directory that is a project is not searched further.
    """
    found: list[Path] = []
    queue: deque[tuple[Path, int]] = deque([(root, 0)])

    while queue:
        directory, depth = queue.popleft()
        if depth > max_depth:
            continue

        if detect_specs_dir(directory) is not None:
            found.append(directory)
            if len(found) >= limit:
                break
            continue

        try:
            children = sorted(p for p in directory.iterdir() if p.is_dir())
        except OSError:
            continue
        queue.extend((child, depth + 1) for child in children)

    return found


class ProjectStore:
    """Registry of known projects persisted as JSON in the config directory."""

    def __init__(self, config_dir: Path = config.CONFIG_DIR):
        self.path_json = config_dir / config.PROJECTS_JSON
        self.path_yaml = config_dir / config.PROJECTS_YAML
        self._lock = threading.RLock()
        self._data = self._read()

    def _read(self) -> ProjectsFile:
        """Load the registry; JSON first, legacy YAML second, empty otherwise."""
        try:
            if self.path_json.exists():
                return ProjectsFile.model_validate(json.loads(self.path_json.read_text(encoding="utf-8")))
            if self.path_yaml.exists():
                return ProjectsFile.model_validate(yaml.safe_load(self.path_yaml.read_text(encoding="utf-8")) or {})
        except (OSError, ValueError, yaml.YAMLError, ValidationError) as e:
            logger.error(f"Failed to load projects file: {e}")
        return ProjectsFile()

    def _save(self) -> None:
        self.path_json.parent.mkdir(parents=True, exist_ok=True)
        self.path_json.write_text(json.dumps(self._data.model_dump(), indent=2), encoding="utf-8")

    def all(self) -> list[Project]:
        with self._lock:
            return [p.model_copy() for p in self._data.projects]

    def recent_projects(self) -> list[str]:
        with self._lock:
            return list(self._data.recentProjects)

    def find(self, project_id: str) -> Optional[Project]:
        with self._lock:
            for project in self._data.projects:
                if project.id == project_id:
                    return project.model_copy()
        return None

    def refresh(self) -> list[Project]:
        """Re-read the registry from disk, picking up external edits."""
        with self._lock:
            self._data = self._read()
        return self.all()

    def _touch(self, project: Project) -> Project:
        project.lastAccessed = utc_now_rfc3339()
        recent = [pid for pid in self._data.recentProjects if pid != project.id]
        self._data.recentProjects = [project.id, *recent]
        self._save()
        return project.model_copy()

    def set_active(self, project_id: str) -> Optional[Project]:
        with self._lock:
            for project in self._data.projects:
                if project.id == project_id:
                    snapshot = self._touch(project)
                    logger.info(f"Switched active project to: {snapshot.name}")
                    return snapshot
        return None

    def add_project(self, project_path: Path) -> Project:
        """Register ``project_path``; re-adding a known root just touches it."""
        candidate = validate_project(project_path)
        with self._lock:
            for existing in self._data.projects:
                if existing.id == candidate.id:
                    return self._touch(existing)
            self._data.projects.append(candidate)
            logger.info(f"Registered project {candidate.name} ({candidate.id})")
            return self._touch(candidate)

    def remove_project(self, project_id: str) -> bool:
        with self._lock:
            remaining = [p for p in self._data.projects if p.id != project_id]
            if len(remaining) == len(self._data.projects):
                return False
            self._data.projects = remaining
            self._data.recentProjects = [pid for pid in self._data.recentProjects if pid != project_id]
            self._save()
            return True
