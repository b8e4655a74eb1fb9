"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _get_default_docs_dir() -> Path:
    """Get the documentation directory from the environment or the checkout layout."""
    env_dir = os.environ.get("MERMAID_DOCS_DIR")
    if env_dir:
        return Path(env_dir)
    # Layout of a checkout with the mermaid repository cloned next to the guides
    return Path("mermaid/docs/syntax")


def _get_default_guides_dir() -> Path:
    env_dir = os.environ.get("MERMAID_GUIDES_DIR")
    if env_dir:
        return Path(env_dir)
    return Path("guides")


def _get_default_parser_command() -> str | None:
    return os.environ.get("MERMAID_PARSER_CMD") or None


@dataclass(slots=True)
class AppConfig:
    docs_dir: Path | None = None
    guides_dir: Path | None = None
    reference_file: str = "reference.md"
    prompts_file: str = "prompts.json"
    parser_command: str | None = None
    max_results: int = 50
    context_lines: int = 3
    section_max_results: int = 5

    def __post_init__(self) -> None:
        if self.docs_dir is None:
            self.docs_dir = _get_default_docs_dir()
        if self.guides_dir is None:
            self.guides_dir = _get_default_guides_dir()
        if self.parser_command is None:
            self.parser_command = _get_default_parser_command()

    def resolve_docs_dir(self, base_dir: Path | None = None) -> Path:
        if self.docs_dir is None:
            self.docs_dir = _get_default_docs_dir()
        return _resolve(Path(self.docs_dir), base_dir)

    def resolve_guides_dir(self, base_dir: Path | None = None) -> Path:
        if self.guides_dir is None:
            self.guides_dir = _get_default_guides_dir()
        return _resolve(Path(self.guides_dir), base_dir)


def _resolve(path: Path, base_dir: Path | None) -> Path:
    if path.is_absolute() or base_dir is None:
        return path
    return base_dir / path
