"""Pydantic models matching the desktop UI's TypeScript types."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from specdesk.constants import DEFAULT_PRIORITY, DEFAULT_STATUS
from specdesk.date_utils import parse_timestamp


# ── Frontmatter models ──────────────────────────────────────────────

class StatusTransition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field("", alias="from")
    to: str = ""
    at: str = ""


class Frontmatter(BaseModel):
    """Recognised frontmatter fields plus every other key, kept verbatim."""

    status: Optional[str] = None
    priority: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    assignee: Optional[str] = None
    created: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    completedAt: Optional[str] = None
    dependsOn: list[str] = Field(default_factory=list)
    transitions: list[StatusTransition] = Field(default_factory=list)
    extra: dict[str, Any] = Field(default_factory=dict)

    def status_or_default(self) -> str:
        return self.status if self.status is not None else DEFAULT_STATUS

    def priority_or_default(self) -> str:
        return self.priority if self.priority is not None else DEFAULT_PRIORITY

    def get_created(self) -> Optional[datetime]:
        """Creation time, preferring ``createdAt`` over the legacy ``created``."""
        raw = self.createdAt if self.createdAt is not None else self.created
        return parse_timestamp(raw)

    def get_updated(self) -> Optional[datetime]:
        return parse_timestamp(self.updatedAt)

    def get_completed(self) -> Optional[datetime]:
        return parse_timestamp(self.completedAt)


# ── Spec models ─────────────────────────────────────────────────────

class Spec(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    projectId: str
    specNumber: Optional[int] = None
    specName: str
    title: Optional[str] = None
    status: str = DEFAULT_STATUS
    priority: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    assignee: Optional[str] = None
    contentMd: str = ""
    contentHtml: Optional[str] = None  # never rendered by the engine
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None
    filePath: str
    githubUrl: Optional[str] = None
    syncedAt: datetime
    dependsOn: list[str] = Field(default_factory=list)
    requiredBy: list[str] = Field(default_factory=list)


class LightweightSpec(BaseModel):
    id: str
    projectId: str
    specNumber: Optional[int] = None
    specName: str
    title: Optional[str] = None
    status: str = DEFAULT_STATUS
    priority: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    assignee: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None
    filePath: str
    githubUrl: Optional[str] = None
    dependsOn: list[str] = Field(default_factory=list)
    requiredBy: list[str] = Field(default_factory=list)
    subSpecsCount: int = 0

    @classmethod
    def from_spec(cls, spec: Spec, sub_specs_count: int = 0) -> "LightweightSpec":
        return cls(
            id=spec.id,
            projectId=spec.projectId,
            specNumber=spec.specNumber,
            specName=spec.specName,
            title=spec.title,
            status=spec.status,
            priority=spec.priority,
            tags=list(spec.tags),
            assignee=spec.assignee,
            createdAt=spec.createdAt,
            updatedAt=spec.updatedAt,
            completedAt=spec.completedAt,
            filePath=spec.filePath,
            githubUrl=spec.githubUrl,
            dependsOn=list(spec.dependsOn),
            requiredBy=list(spec.requiredBy),
            subSpecsCount=sub_specs_count,
        )


# ── Dependency models ──────────────────────────────────────────────

class DependencyNode(BaseModel):
    id: str
    name: str
    number: int
    status: str
    priority: str = DEFAULT_PRIORITY
    tags: list[str] = Field(default_factory=list)


class DependencyEdge(BaseModel):
    source: str  # the spec depended upon
    target: str  # the dependent spec
    type: str = "dependsOn"


class DependencyGraph(BaseModel):
    nodes: list[DependencyNode] = Field(default_factory=list)
    edges: list[DependencyEdge] = Field(default_factory=list)


class DependencyInfo(BaseModel):
    specName: str
    title: Optional[str] = None
    status: str


class SpecDependencies(BaseModel):
    dependsOn: list[DependencyInfo] = Field(default_factory=list)
    requiredBy: list[DependencyInfo] = Field(default_factory=list)


# ── Validation models ──────────────────────────────────────────────

class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIssue(BaseModel):
    severity: IssueSeverity
    code: str
    message: str
    line: Optional[int] = None


class ValidationResult(BaseModel):
    specName: str
    valid: bool = True
    issues: list[ValidationIssue] = Field(default_factory=list)

    def has_errors(self) -> bool:
        return any(issue.severity == IssueSeverity.ERROR for issue in self.issues)


# ── Stats models ───────────────────────────────────────────────────

class StatusCount(BaseModel):
    status: str
    count: int = 0


class PriorityCount(BaseModel):
    priority: str
    count: int = 0


class StatsResult(BaseModel):
    totalProjects: int = 1
    totalSpecs: int = 0
    specsByStatus: list[StatusCount] = Field(default_factory=list)
    specsByPriority: list[PriorityCount] = Field(default_factory=list)
    completionRate: float = 0.0
    activeSpecs: int = 0
    totalTags: int = 0  # unique tags across the set
    avgTagsPerSpec: float = 0.0
    specsWithDependencies: int = 0


# ── Project model ──────────────────────────────────────────────────

class Project(BaseModel):
    id: str
    name: str
    path: str
    specsDir: str
    lastAccessed: str = ""
    favorite: bool = False
    color: Optional[str] = None
    description: Optional[str] = None


class ProjectsFile(BaseModel):
    projects: list[Project] = Field(default_factory=list)
    recentProjects: list[str] = Field(default_factory=list)


# ── Desktop preference models ──────────────────────────────────────

class WindowPreferences(BaseModel):
    width: int = 1400
    height: int = 900
    x: Optional[int] = None
    y: Optional[int] = None
    maximized: bool = False


class BehaviorPreferences(BaseModel):
    startMinimized: bool = False
    minimizeToTray: bool = True
    launchAtLogin: bool = False


class ShortcutPreferences(BaseModel):
    toggleWindow: str = "CommandOrControl+Shift+L"
    quickSwitcher: str = "CommandOrControl+Shift+K"
    newSpec: str = "CommandOrControl+Shift+N"


class UpdatePreferences(BaseModel):
    autoCheck: bool = True
    autoInstall: bool = False
    channel: str = "stable"  # "stable" | "beta"


class AppearancePreferences(BaseModel):
    theme: str = "system"  # "light" | "dark" | "system"


class DesktopConfig(BaseModel):
    window: WindowPreferences = Field(default_factory=WindowPreferences)
    behavior: BehaviorPreferences = Field(default_factory=BehaviorPreferences)
    shortcuts: ShortcutPreferences = Field(default_factory=ShortcutPreferences)
    updates: UpdatePreferences = Field(default_factory=UpdatePreferences)
    appearance: AppearancePreferences = Field(default_factory=AppearancePreferences)
    activeProjectId: Optional[str] = None
