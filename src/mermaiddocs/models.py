"""Core data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class SearchMode(str, Enum):
    """Shape of a section search result."""

    SNIPPET = "snippet"
    FULL = "full"


@dataclass(frozen=True, slots=True)
class Document:
    """A loaded documentation file."""

    id: str
    text: str


@dataclass(frozen=True, slots=True)
class Section:
    """Header-delimited excerpt covering lines ``[start, end)`` of a document."""

    start: int
    end: int
    level: int
    text: str


@dataclass(slots=True)
class MatchWindow:
    """A matching line together with its surrounding context."""

    line: int
    text: str
    context_before: List[str] = field(default_factory=list)
    context_after: List[str] = field(default_factory=list)

    def render(self) -> List[str]:
        """Return display lines, marking the match with ``>>>``."""
        rendered = [f"    {line}" for line in self.context_before]
        rendered.append(f">>> {self.text}")
        rendered.extend(f"    {line}" for line in self.context_after)
        return rendered


@dataclass(slots=True)
class FileMatches:
    """Line search hits for one document."""

    file: str
    matches: List[MatchWindow] = field(default_factory=list)

    @property
    def match_count(self) -> int:
        return len(self.matches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "matchCount": self.match_count,
            "matches": [
                {"line": match.line, "text": match.text, "context": match.render()}
                for match in self.matches
            ],
        }


@dataclass(slots=True)
class SectionHit:
    """Section search hit for one document."""

    file: str
    match_count: int
    mode: SearchMode
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "matchCount": self.match_count, "content": self.content}


@dataclass(slots=True)
class LineSearchReport:
    query: str
    results: List[FileMatches] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.results)

    @property
    def total_matches(self) -> int:
        return sum(result.match_count for result in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "totalFiles": self.total_files,
            "totalMatches": self.total_matches,
            "results": [result.to_dict() for result in self.results],
        }


@dataclass(slots=True)
class SectionSearchReport:
    query: str
    mode: SearchMode
    category: str | None = None
    results: List[SectionHit] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.results)

    @property
    def total_matches(self) -> int:
        return sum(result.match_count for result in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "mode": self.mode.value,
            "diagramType": self.category,
            "totalFiles": self.total_files,
            "totalMatches": self.total_matches,
            "results": [result.to_dict() for result in self.results],
        }


@dataclass(slots=True)
class ValidationOutcome:
    """Result of validating a diagram; ``valid`` ignores warnings."""

    valid: bool
    error: str | None = None
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str) -> "ValidationOutcome":
        return cls(valid=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"valid": self.valid}
        if self.error is not None:
            payload["error"] = self.error
        if self.warnings:
            payload["warnings"] = list(self.warnings)
        return payload
