"""Build-variable placeholder detection utilities."""
from __future__ import annotations


PLACEHOLDER_START = "${"
PLACEHOLDER_END = "}"


def _find_next_marker(text: str, start: int) -> tuple[int, str] | None:
    """Return the position and marker of the earliest opening or closing marker."""

    end_index = text.find(PLACEHOLDER_END, start)
    start_index = text.find(PLACEHOLDER_START, start)
    if end_index < 0 and start_index < 0:
        return None
    if start_index < 0 or (0 <= end_index < start_index):
        return end_index, PLACEHOLDER_END
    return start_index, PLACEHOLDER_START


def has_unresolved_placeholder(text: str | None) -> bool:
    """Return ``True`` when *text* still contains a ``${...}`` build variable.

    The scan walks forward from the first opening marker. Further openings met
    before a closing brace are skipped. An opening marker that is never closed
    does not count as unresolved.
    """

    if not text:
        return False
    opening = text.find(PLACEHOLDER_START)
    if opening < 0:
        return False

    cursor = opening + 1
    while cursor < len(text):
        found = _find_next_marker(text, cursor)
        if found is None:
            return False
        index, marker = found
        if marker == PLACEHOLDER_END:
            return True
        cursor = index + len(PLACEHOLDER_START)
    return False


def resolved_text_or_none(text: str | None) -> str | None:
    """Return the trimmed *text* unless it is empty or still templated."""

    if text is None:
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    if has_unresolved_placeholder(trimmed):
        return None
    return trimmed


def parse_bool(text: str | None) -> bool:
    """Interpret *text* the way the build tool reads boolean flags."""

    if text is None:
        return False
    return text.strip().lower() == "true"


__all__ = [
    "PLACEHOLDER_END",
    "PLACEHOLDER_START",
    "has_unresolved_placeholder",
    "parse_bool",
    "resolved_text_or_none",
]
