"""Project-scoped spec operations exposed to the desktop shell.

Every call resolves the project through the registry and loads a fresh
snapshot of its specs; nothing is cached between calls.
"""
from __future__ import annotations

import logging

from specdesk.constants import SPEC_ID_PREFIX, VALID_STATUSES
from specdesk.date_utils import utc_now_rfc3339
from specdesk.errors import InvalidStatusError, NotFoundError, SpecDeskError, TransitionError
from specdesk.models import (
    DependencyGraph,
    LightweightSpec,
    Spec,
    SpecDependencies,
    StatsResult,
    ValidationResult,
)
from specdesk.parsers.specs import SpecReader
from specdesk.parsers.status_writer import frontmatter_has_field, update_frontmatter_file
from specdesk.project_manager import ProjectStore
from specdesk.services.dependencies import build_dependency_graph, get_spec_dependencies
from specdesk.services.stats import calculate_stats
from specdesk.services.validation import validate_all_specs, validate_spec

logger = logging.getLogger("specdesk.commands")

_SKIP_PLANNED_TARGETS = {"in-progress", "complete"}
_UPDATED_KEYS = ("updatedAt", "updated_at")


class SpecCommands:
    def __init__(self, project_store: ProjectStore):
        self.project_store = project_store

    def reader(self, project_id: str) -> SpecReader:
        project = self.project_store.find(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return SpecReader(project.specsDir, project.id)

    def _lightweight(self, reader: SpecReader, specs: list[Spec]) -> list[LightweightSpec]:
        return [LightweightSpec.from_spec(spec, reader.count_sub_specs(spec)) for spec in specs]

    def _load_spec(self, reader: SpecReader, spec_id: str) -> Spec:
        spec = reader.load_spec(spec_id)
        if spec is None:
            raise NotFoundError(f"Spec '{spec_id}' not found")
        return spec

    def get_specs(self, project_id: str) -> list[LightweightSpec]:
        reader = self.reader(project_id)
        return self._lightweight(reader, reader.load_all())

    def get_spec_detail(self, project_id: str, spec_id: str) -> Spec:
        return self._load_spec(self.reader(project_id), spec_id)

    def get_project_stats(self, project_id: str) -> StatsResult:
        return calculate_stats(self.reader(project_id).load_all())

    def get_dependency_graph(self, project_id: str) -> DependencyGraph:
        return build_dependency_graph(self.reader(project_id).load_all())

    def get_spec_dependencies(self, project_id: str, spec_id: str) -> SpecDependencies:
        specs = self.reader(project_id).load_all()
        spec = next(
            (
                s for s in specs
                if s.specName == spec_id or s.id == spec_id or s.id == f"{SPEC_ID_PREFIX}{spec_id}"
            ),
            None,
        )
        if spec is None:
            raise NotFoundError(f"Spec '{spec_id}' not found")
        return get_spec_dependencies(spec, specs)

    def search_specs(self, project_id: str, query: str) -> list[LightweightSpec]:
        reader = self.reader(project_id)
        return self._lightweight(reader, reader.search(query))

    def get_specs_by_status(self, project_id: str, status: str) -> list[LightweightSpec]:
        reader = self.reader(project_id)
        return self._lightweight(reader, reader.get_by_status(status))

    def get_all_tags(self, project_id: str) -> list[str]:
        return self.reader(project_id).get_all_tags()

    def validate_spec(self, project_id: str, spec_id: str) -> ValidationResult:
        return validate_spec(self._load_spec(self.reader(project_id), spec_id))

    def validate_all_specs(self, project_id: str) -> list[ValidationResult]:
        return validate_all_specs(self.reader(project_id).load_all())

    def update_spec_status(
        self,
        project_id: str,
        spec_id: str,
        new_status: str,
        force: bool = False,
    ) -> Spec:
        """Rewrite a spec's status on disk and return the reloaded spec."""
        if new_status not in VALID_STATUSES:
            raise InvalidStatusError(
                f"Invalid status '{new_status}'. Must be one of: {', '.join(VALID_STATUSES)}"
            )

        reader = self.reader(project_id)
        spec = self._load_spec(reader, spec_id)

        if spec.status == "draft" and new_status in _SKIP_PLANNED_TARGETS and not force:
            raise TransitionError("Cannot skip 'planned' stage. Use force to override.")

        path = reader.spec_path(spec)
        # rewrite the timestamp key the document already uses; the parser prefers updatedAt
        updated_key = next(
            (key for key in _UPDATED_KEYS if frontmatter_has_field(spec.contentMd, key)),
            _UPDATED_KEYS[0],
        )
        try:
            update_frontmatter_file(
                path,
                [
                    ("status", new_status),
                    (updated_key, f"'{utc_now_rfc3339()}'"),
                ],
            )
        except (OSError, UnicodeDecodeError) as exc:
            raise SpecDeskError(f"Failed to update spec file: {exc}") from exc

        logger.info("Updated %s status: %s -> %s", spec.specName, spec.status, new_status)

        updated = reader.load_spec(spec_id)
        if updated is None:
            raise NotFoundError("Failed to reload spec after update")
        return updated
