"""Constants shared across the spec engine."""
from __future__ import annotations

VALID_STATUSES = ("draft", "planned", "in-progress", "complete", "archived")
VALID_PRIORITIES = ("critical", "high", "medium", "low")

ACTIVE_STATUSES = ("draft", "planned", "in-progress")
COMPLETE_STATUS = "complete"
ARCHIVED_STATUS = "archived"

DEFAULT_STATUS = "planned"
DEFAULT_PRIORITY = "medium"

SPEC_DOCUMENT = "README.md"
ARCHIVED_DIR = "archived"
SPEC_ID_PREFIX = "fs-"

DEPENDS_ON_EDGE = "dependsOn"

MAX_SPEC_LINES = 400
HIGH_TOKEN_THRESHOLD = 5000
MODERATE_TOKEN_THRESHOLD = 3500
