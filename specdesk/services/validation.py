"""Spec validation: structure, frontmatter, content size and cross-spec references.

Validation is advisory. Problems are reported as issues with a severity and
a stable code; nothing here raises on bad input.
"""
from __future__ import annotations

import math
import re

from specdesk.constants import (
    HIGH_TOKEN_THRESHOLD,
    MAX_SPEC_LINES,
    MODERATE_TOKEN_THRESHOLD,
    VALID_PRIORITIES,
    VALID_STATUSES,
)
from specdesk.models import IssueSeverity, Spec, ValidationIssue, ValidationResult
from specdesk.parsers.frontmatter import parse_frontmatter
from specdesk.parsers.specs import reference_number


# str.isspace also accepts the \x1c-\x1f separators, which are not Unicode White_Space.
_NON_BLANK_SEPARATORS = "\x1c\x1d\x1e\x1f"
_WORD_RE = re.compile(r"(?:\S|[\x1c-\x1f])+")


def _is_blank(char: str) -> bool:
    return char.isspace() and char not in _NON_BLANK_SEPARATORS


def count_lines(content: str) -> int:
    """Lines split on ``\\n`` only; a trailing newline does not start another line."""
    if not content:
        return 0
    return content.count("\n") + (0 if content.endswith("\n") else 1)


def estimate_tokens(content: str) -> int:
    """Rough token estimate: 1.3 per word plus 0.5 per symbol character."""
    word_count = len(_WORD_RE.findall(content))
    special_chars = sum(1 for char in content if not char.isalnum() and not _is_blank(char))
    return math.ceil(word_count * 1.3 + special_chars * 0.5)


def _issue(severity: IssueSeverity, code: str, message: str) -> ValidationIssue:
    return ValidationIssue(severity=severity, code=code, message=message)


def validate_spec(spec: Spec) -> ValidationResult:
    """Validate one spec from its stored document text."""
    issues: list[ValidationIssue] = []
    frontmatter, body = parse_frontmatter(spec.contentMd)

    if frontmatter.status is None:
        issues.append(_issue(
            IssueSeverity.ERROR,
            "missing-status",
            "Spec must have a status field in frontmatter",
        ))
    elif frontmatter.status not in VALID_STATUSES:
        issues.append(_issue(
            IssueSeverity.ERROR,
            "invalid-status",
            f"Invalid status '{frontmatter.status}'. Must be one of: {', '.join(VALID_STATUSES)}",
        ))

    if frontmatter.priority is not None and frontmatter.priority not in VALID_PRIORITIES:
        issues.append(_issue(
            IssueSeverity.WARNING,
            "invalid-priority",
            f"Invalid priority '{frontmatter.priority}'. Recommended: {', '.join(VALID_PRIORITIES)}",
        ))

    if spec.title is None:
        issues.append(_issue(
            IssueSeverity.WARNING,
            "missing-title",
            "Spec should have a title (H1 heading)",
        ))

    line_count = count_lines(spec.contentMd)
    if line_count > MAX_SPEC_LINES:
        issues.append(_issue(
            IssueSeverity.WARNING,
            "excessive-length",
            f"Spec has {line_count} lines, which exceeds recommended maximum of {MAX_SPEC_LINES}",
        ))

    if "## Overview" not in body and "## overview" not in body:
        issues.append(_issue(
            IssueSeverity.INFO,
            "missing-overview",
            "Consider adding an ## Overview section",
        ))

    for dep in frontmatter.dependsOn:
        if not dep.strip():
            issues.append(_issue(
                IssueSeverity.WARNING,
                "empty-dependency",
                "Empty dependency in depends_on list",
            ))

    estimated_tokens = estimate_tokens(spec.contentMd)
    if estimated_tokens > HIGH_TOKEN_THRESHOLD:
        issues.append(_issue(
            IssueSeverity.WARNING,
            "high-token-count",
            f"Estimated {estimated_tokens} tokens. Consider splitting if over {HIGH_TOKEN_THRESHOLD}.",
        ))
    elif estimated_tokens > MODERATE_TOKEN_THRESHOLD:
        issues.append(_issue(
            IssueSeverity.INFO,
            "moderate-token-count",
            f"Estimated {estimated_tokens} tokens. Consider splitting if content grows.",
        ))

    result = ValidationResult(specName=spec.specName, issues=issues)
    result.valid = not result.has_errors()
    return result


def _known_references(specs: list[Spec]) -> set[str]:
    names: set[str] = set()
    for spec in specs:
        names.add(spec.specName)
        if spec.specNumber is not None:
            names.add(f"{spec.specNumber:03d}")
            names.add(str(spec.specNumber))
    return names


def validate_all_specs(specs: list[Spec]) -> list[ValidationResult]:
    """Validate every spec, then flag references to specs that do not exist.

    A broken dependency is a warning, so it never turns a valid result
    invalid; validity is only re-derived when an error is already present.
    """
    results = [validate_spec(spec) for spec in specs]
    known = _known_references(specs)

    for result, spec in zip(results, specs):
        frontmatter, _ = parse_frontmatter(spec.contentMd)
        for dep in frontmatter.dependsOn:
            trimmed = dep.strip()
            if not trimmed:
                continue

            number = reference_number(trimmed)
            exists = trimmed in known or (number is not None and str(number) in known)
            if exists:
                continue

            result.issues.append(_issue(
                IssueSeverity.WARNING,
                "broken-dependency",
                f"Dependency '{dep}' not found",
            ))
            if result.valid and result.has_errors():
                result.valid = False

    return results
