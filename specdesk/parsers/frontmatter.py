"""Split spec documents into YAML frontmatter and a Markdown body."""
from __future__ import annotations

import logging
import re
from typing import Any

import yaml

from specdesk.date_utils import scalar_to_string
from specdesk.models import Frontmatter, StatusTransition

logger = logging.getLogger("specdesk.frontmatter")

_OPENING_RE = re.compile(r"\A---[ \t]*\r?\n")
_CLOSING_RE = re.compile(r"^---[ \t]*\r?$", re.MULTILINE)

# Recognised keys; snake_case spellings are accepted as legacy aliases.
_FIELD_ALIASES = {
    "status": "status",
    "priority": "priority",
    "assignee": "assignee",
    "created": "created",
    "createdAt": "createdAt",
    "created_at": "createdAt",
    "updatedAt": "updatedAt",
    "updated_at": "updatedAt",
    "completedAt": "completedAt",
    "completed_at": "completedAt",
    "tags": "tags",
    "dependsOn": "dependsOn",
    "depends_on": "dependsOn",
    "transitions": "transitions",
}
_LIST_FIELDS = {"tags", "dependsOn"}


def frontmatter_span(content: str) -> tuple[int, int, int] | None:
    """Locate the frontmatter block inside ``content``.

    Returns ``(block_start, block_end, closing_end)`` offsets, where the YAML
    text is ``content[block_start:block_end]`` and the closing ``---`` line
    ends at ``closing_end``. ``None`` when the document has no complete block.
    """
    opening = _OPENING_RE.match(content)
    if not opening:
        return None
    closing = _CLOSING_RE.search(content, opening.end())
    if not closing:
        return None
    return opening.end(), closing.start(), closing.end()


def split_frontmatter(content: str) -> tuple[str, str] | None:
    """Return ``(yaml_block, body)`` or ``None`` when no delimited block exists."""
    span = frontmatter_span(content)
    if span is None:
        return None
    block_start, block_end, closing_end = span
    return content[block_start:block_end], content[closing_end:].lstrip("\r\n")


def _to_string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        items: list[str] = []
        for entry in value:
            text = scalar_to_string(entry)
            if text is not None:
                items.append(text)
        return items
    text = scalar_to_string(value)
    return [text] if text is not None else []


def _to_transitions(value: Any) -> list[StatusTransition]:
    if not isinstance(value, list):
        return []
    transitions: list[StatusTransition] = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        transitions.append(
            StatusTransition(
                from_=scalar_to_string(entry.get("from")) or "",
                to=scalar_to_string(entry.get("to")) or "",
                at=scalar_to_string(entry.get("at")) or "",
            )
        )
    return transitions


def _convert(field: str, value: Any) -> Any:
    if field in _LIST_FIELDS:
        return _to_string_list(value)
    if field == "transitions":
        return _to_transitions(value)
    return scalar_to_string(value)


def frontmatter_from_mapping(data: dict[Any, Any]) -> Frontmatter:
    """Build a Frontmatter from a decoded YAML mapping.

    The canonical spelling of a key wins over its legacy alias when a
    document carries both. Unrecognised keys land in ``extra`` untouched.
    """
    fields: dict[str, Any] = {}
    legacy: dict[str, Any] = {}
    extra: dict[str, Any] = {}

    for raw_key, value in data.items():
        key = str(raw_key)
        field = _FIELD_ALIASES.get(key)
        if field is None:
            extra[key] = value
        elif key == field:
            fields[field] = _convert(field, value)
        else:
            legacy.setdefault(field, _convert(field, value))

    for field, value in legacy.items():
        fields.setdefault(field, value)

    return Frontmatter(**fields, extra=extra)


def parse_frontmatter(content: str) -> tuple[Frontmatter, str]:
    """Parse ``content`` into ``(frontmatter, body)``.

    Documents without a delimited block, or whose block is not a valid YAML
    mapping, yield default frontmatter and the original text. Never raises.
    """
    parts = split_frontmatter(content)
    if parts is None:
        return Frontmatter(), content

    block, body = parts
    try:
        data = yaml.safe_load(block)
    except (yaml.YAMLError, ValueError) as exc:
        # ValueError: well-formed YAML holding an impossible date such as 2024-02-30
        logger.warning("Failed to parse frontmatter YAML: %s", exc)
        return Frontmatter(), content

    if data is None:
        return Frontmatter(), body
    if not isinstance(data, dict):
        logger.warning("Frontmatter is not a mapping (got %s)", type(data).__name__)
        return Frontmatter(), content

    return frontmatter_from_mapping(data), body


def extract_title(content: str) -> str | None:
    """Return the text of the first level-1 heading, if any."""
    for line in content.split("\n"):
        trimmed = line.strip()
        if trimmed.startswith("# "):
            return trimmed[2:].strip()
    return None
