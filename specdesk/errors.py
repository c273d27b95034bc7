"""Exception types raised at the engine's caller-facing boundary."""
from __future__ import annotations


class SpecDeskError(Exception):
    """Base class for errors surfaced to callers."""


class NotFoundError(SpecDeskError):
    """Raised when a project, spec, or reference cannot be found."""


class PolicyViolationError(SpecDeskError):
    """Raised when a write would break a status policy."""


class InvalidStatusError(PolicyViolationError):
    """Raised when a status outside the allowed set is submitted."""


class TransitionError(PolicyViolationError):
    """Raised when a status transition skips a required stage."""


class FrontmatterUpdateError(SpecDeskError):
    """Raised when a document's frontmatter block cannot be rewritten."""


class ProjectValidationError(SpecDeskError):
    """Raised when a directory cannot be registered as a project."""
