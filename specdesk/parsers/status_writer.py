"""Utilities for writing status changes back to markdown frontmatter.

Fields are patched textually, one line at a time, so that every other byte of
the document (key order, quoting, comments, the body) survives a write.
Only single-line scalar values are detected; a key whose value spans several
lines keeps its continuation lines.
"""
from __future__ import annotations

import re
from pathlib import Path

from specdesk.errors import FrontmatterUpdateError
from specdesk.parsers.frontmatter import frontmatter_span

_LINE_END_RE = re.compile(r"(?<=\n)")


def _block_lines(block: str) -> list[str]:
    """Split on ``\\n`` only, keeping line endings."""
    return [line for line in _LINE_END_RE.split(block) if line]


def update_frontmatter_field(content: str, field: str, value: str) -> str:
    """Return ``content`` with ``field: value`` set in its frontmatter block.

    The first line whose key matches is replaced; otherwise the field is
    appended to the end of the block.
    """
    if not content.startswith("---"):
        raise FrontmatterUpdateError("No frontmatter found")

    span = frontmatter_span(content)
    if span is None:
        raise FrontmatterUpdateError("Malformed frontmatter")
    block_start, block_end, _ = span

    prefix = f"{field}:"
    new_line = f"{field}: {value}"
    lines = _block_lines(content[block_start:block_end])

    for index, line in enumerate(lines):
        if line.lstrip().startswith(prefix):
            ending = line[len(line.rstrip("\r\n")):]
            lines[index] = new_line + ending
            break
    else:
        if lines and not lines[-1].endswith("\n"):
            lines[-1] += "\n"
        lines.append(new_line + "\n")

    return content[:block_start] + "".join(lines) + content[block_end:]


def frontmatter_has_field(content: str, field: str) -> bool:
    """True when the frontmatter block of ``content`` has a line keyed by ``field``."""
    span = frontmatter_span(content)
    if span is None:
        return False
    block_start, block_end, _ = span
    prefix = f"{field}:"
    return any(line.lstrip().startswith(prefix) for line in _block_lines(content[block_start:block_end]))


def update_frontmatter_file(file_path: Path, updates: list[tuple[str, str]]) -> str:
    """Apply ``updates`` in order to the document at ``file_path`` and write it back."""
    # Bytes in and out, so line endings are not translated.
    text = file_path.read_bytes().decode("utf-8")
    for field, value in updates:
        text = update_frontmatter_field(text, field, value)
    file_path.write_bytes(text.encode("utf-8"))
    return text
