"""Read-only documents and prompts served alongside the search tools.

Syntax documentation comes from the static catalog; additional resources and
prompts are declared in a ``prompts.json`` file in the guides directory::

    {
      "resources": [{"name": "...", "uri": "...", "file": "...", "description": "..."}],
      "prompts": [{"name": "...", "title": "...", "file": "...", "description": "..."}]
    }

Bindings are built once into plain tuples; a binding whose file is missing
reads as a placeholder message instead of failing.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from mermaiddocs.catalog import SYNTAX_FILES
from mermaiddocs.utils.files import read_text_or

LOGGER = logging.getLogger(__name__)

MARKDOWN_MIME = "text/markdown"
RESOURCE_HINT = " Use the search_resource tool to query this reference."
PROMPT_HINT = " Read this prompt before working with any Mermaid diagram."


@dataclass(frozen=True, slots=True)
class ResourceEntry:
    name: str
    uri: str
    file: str
    description: str = ""
    mime_type: str = MARKDOWN_MIME


@dataclass(frozen=True, slots=True)
class PromptEntry:
    name: str
    file: str
    title: str | None = None
    description: str = ""


@dataclass(slots=True)
class PromptsConfig:
    resources: List[ResourceEntry] = field(default_factory=list)
    prompts: List[PromptEntry] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ResourceBinding:
    name: str
    uri: str
    description: str
    mime_type: str
    path: Path
    missing_message: str

    def read(self) -> str:
        return read_text_or(self.path, self.missing_message)


@dataclass(frozen=True, slots=True)
class PromptBinding:
    name: str
    title: str | None
    description: str
    path: Path
    missing_message: str

    def read(self) -> str:
        return read_text_or(self.path, self.missing_message)


def _parse_resource(raw: Dict[str, Any]) -> ResourceEntry:
    return ResourceEntry(
        name=raw["name"],
        uri=raw["uri"],
        file=raw["file"],
        description=raw.get("description", ""),
        mime_type=raw.get("mimeType") or MARKDOWN_MIME,
    )


def _parse_prompt(raw: Dict[str, Any]) -> PromptEntry:
    return PromptEntry(
        name=raw["name"],
        file=raw["file"],
        title=raw.get("title"),
        description=raw.get("description", ""),
    )


def load_prompts_config(path: Path) -> PromptsConfig:
    """Load ``prompts.json``; any problem yields an empty configuration."""
    if not path.is_file():
        return PromptsConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return PromptsConfig(
            resources=[_parse_resource(item) for item in raw.get("resources") or []],
            prompts=[_parse_prompt(item) for item in raw.get("prompts") or []],
        )
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        LOGGER.error("Failed to parse %s; skipping dynamic prompts/resources: %s", path, exc)
        return PromptsConfig()


def build_resource_bindings(
    docs_dir: Path, guides_dir: Path, config: PromptsConfig
) -> Tuple[ResourceBinding, ...]:
    bindings = [
        ResourceBinding(
            name=syntax_file.name,
            uri=syntax_file.uri,
            description=syntax_file.description,
            mime_type=MARKDOWN_MIME,
            path=docs_dir / syntax_file.file,
            missing_message=f"Documentation file not found: {syntax_file.file}",
        )
        for syntax_file in SYNTAX_FILES
    ]
    bindings.extend(
        ResourceBinding(
            name=entry.name,
            uri=entry.uri,
            description=entry.description + RESOURCE_HINT,
            mime_type=entry.mime_type,
            path=guides_dir / entry.file,
            missing_message=f"Resource file not found: {entry.file}",
        )
        for entry in config.resources
    )
    return tuple(bindings)


def build_prompt_bindings(guides_dir: Path, config: PromptsConfig) -> Tuple[PromptBinding, ...]:
    return tuple(
        PromptBinding(
            name=entry.name,
            title=entry.title,
            description=entry.description + PROMPT_HINT,
            path=guides_dir / entry.file,
            missing_message=f"Prompt file not found: {entry.file}",
        )
        for entry in config.prompts
    )
