"""Markdown text helpers: line splitting, section and context extraction."""

from __future__ import annotations

import re
from typing import List, Sequence

from mermaiddocs.models import MatchWindow, Section

HEADER_RE = re.compile(r"^(#{1,6})\s")
DEFAULT_SECTION_LEVEL = 3

_LINE_BREAK_RE = re.compile(r"\r?\n")


def split_lines(text: str) -> List[str]:
    """Split text on LF or CRLF line endings."""
    return _LINE_BREAK_RE.split(text)


def contains(haystack: str, needle: str, *, case_sensitive: bool = False) -> bool:
    if case_sensitive:
        return needle in haystack
    return needle.lower() in haystack.lower()


def header_level(line: str) -> int | None:
    """Return the markdown header depth of ``line`` (1-6) or ``None``."""
    match = HEADER_RE.match(line)
    if match is None:
        return None
    return len(match.group(1))


def _section_bounds(lines: Sequence[str], index: int) -> tuple[int, int, int]:
    start = index
    level = DEFAULT_SECTION_LEVEL
    for candidate in range(index, -1, -1):
        candidate_level = header_level(lines[candidate])
        if candidate_level is not None:
            start, level = candidate, candidate_level
            break

    end = len(lines)
    for candidate in range(start + 1, len(lines)):
        candidate_level = header_level(lines[candidate])
        if candidate_level is not None and candidate_level <= level:
            end = candidate
            break
    return start, end, level


def extract_sections(text: str, term: str, *, case_sensitive: bool = False) -> List[Section]:
    """Return the header-delimited sections of ``text`` that contain ``term``.

    Each match is widened to the nearest enclosing header and runs until the
    next header of equal or shallower depth. A match without an enclosing
    header starts its own section at the default depth. Scanning resumes after
    the emitted section, so further matches inside it do not repeat it.
    """
    lines = split_lines(text)
    sections: List[Section] = []
    index = 0
    while index < len(lines):
        if not contains(lines[index], term, case_sensitive=case_sensitive):
            index += 1
            continue
        start, end, level = _section_bounds(lines, index)
        sections.append(Section(start=start, end=end, level=level, text="\n".join(lines[start:end])))
        index = max(end, index + 1)
    return sections


def context_window(lines: Sequence[str], index: int, radius: int) -> MatchWindow:
    """Build the match window for ``lines[index]`` with ``radius`` lines each side."""
    radius = max(radius, 0)
    before = list(lines[max(0, index - radius) : index])
    after = list(lines[index + 1 : min(len(lines), index + radius + 1)])
    return MatchWindow(
        line=index + 1,
        text=lines[index].rstrip(),
        context_before=before,
        context_after=after,
    )
