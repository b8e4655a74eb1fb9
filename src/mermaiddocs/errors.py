"""Exception types shared across the package."""

from __future__ import annotations

from enum import Enum


class MermaidDocsError(Exception):
    """Base class for package errors."""


class CorpusUnavailableError(MermaidDocsError):
    """Raised when a search runs against a corpus with no documents."""

    def __init__(self, docs_dir: object) -> None:
        super().__init__(f"Mermaid documentation not available: {docs_dir}")
        self.docs_dir = docs_dir


class DiagramSyntaxError(MermaidDocsError):
    """Raised by a parser oracle when a diagram does not parse."""


class EnvironmentCondition(str, Enum):
    """Host conditions under which a parser oracle cannot give a verdict."""

    NO_DOM = "no_dom"
    NO_BROWSER = "no_browser"
    NO_DISPLAY = "no_display"
    NO_PARSER = "no_parser"


class OracleEnvironmentError(MermaidDocsError):
    """Raised by a parser oracle when the host environment is the problem."""

    def __init__(self, condition: EnvironmentCondition, message: str) -> None:
        super().__init__(message)
        self.condition = condition
