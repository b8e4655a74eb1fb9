"""Tool operations shared by the MCP, HTTP and command line surfaces.

Every operation returns a :class:`ToolResult`; failures are reported through
``is_error`` and an ``error`` message in the payload, never raised.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from mermaiddocs.analysis import analyze_diagram
from mermaiddocs.catalog import DIAGRAM_TYPES, diagram_type_names, find_examples
from mermaiddocs.config import AppConfig
from mermaiddocs.errors import CorpusUnavailableError
from mermaiddocs.index.search import SearchEngine
from mermaiddocs.index.store import CorpusStore
from mermaiddocs.models import SearchMode
from mermaiddocs.resources import (
    PromptBinding,
    ResourceBinding,
    build_prompt_bindings,
    build_resource_bindings,
    load_prompts_config,
)
from mermaiddocs.validation.oracle import MermaidCliOracle
from mermaiddocs.validation.validator import Validator

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ToolResult:
    payload: Dict[str, Any]
    is_error: bool = False
    reason: str | None = None

    @classmethod
    def error(cls, message: str, reason: str = "internal", **extra: Any) -> "ToolResult":
        return cls(payload={"error": message, **extra}, is_error=True, reason=reason)

    def to_json(self) -> str:
        return json.dumps(self.payload, indent=2)


@dataclass(slots=True)
class DocsToolkit:
    """Composition of the corpus, search engine, validator and guides."""

    store: CorpusStore
    validator: Validator
    guides_dir: Path
    config: AppConfig = field(default_factory=AppConfig)
    engine: SearchEngine = field(init=False)

    def __post_init__(self) -> None:
        self.engine = SearchEngine(self.store)

    @classmethod
    def from_config(cls, config: AppConfig, base_dir: Path | None = None) -> "DocsToolkit":
        oracle = MermaidCliOracle(config.parser_command) if config.parser_command else None
        return cls(
            store=CorpusStore(config.resolve_docs_dir(base_dir)),
            validator=Validator(oracle),
            guides_dir=config.resolve_guides_dir(base_dir),
            config=config,
        )

    @property
    def reference_path(self) -> Path:
        return self.guides_dir / self.config.reference_file

    def resource_bindings(self) -> tuple[ResourceBinding, ...]:
        prompts_config = load_prompts_config(self.guides_dir / self.config.prompts_file)
        return build_resource_bindings(self.store.docs_dir, self.guides_dir, prompts_config)

    def prompt_bindings(self) -> tuple[PromptBinding, ...]:
        prompts_config = load_prompts_config(self.guides_dir / self.config.prompts_file)
        return build_prompt_bindings(self.guides_dir, prompts_config)

    def search_lines(
        self,
        query: str,
        *,
        case_sensitive: bool = False,
        max_results: int | None = None,
        context_lines: int | None = None,
    ) -> ToolResult:
        if not query or not query.strip():
            return ToolResult.error("Empty query", reason="invalid_input")
        try:
            report = self.engine.search_lines(
                query,
                case_sensitive=case_sensitive,
                max_results=self.config.max_results if max_results is None else max_results,
                context_lines=self.config.context_lines if context_lines is None else context_lines,
            )
        except CorpusUnavailableError as exc:
            return ToolResult.error(str(exc), reason="no_corpus")
        except Exception as exc:
            LOGGER.exception("Search failed")
            return ToolResult.error(f"Search failed: {exc}")
        return ToolResult(report.to_dict())

    def search_sections(
        self,
        query: str,
        *,
        diagram_type: str | None = None,
        mode: str = SearchMode.SNIPPET.value,
        case_sensitive: bool = False,
        max_results: int | None = None,
    ) -> ToolResult:
        if not query or not query.strip():
            return ToolResult.error("Empty query", reason="invalid_input")
        try:
            search_mode = SearchMode(mode)
        except ValueError:
            return ToolResult.error(
                f"Unsupported mode: {mode}",
                reason="invalid_input",
                supportedModes=[item.value for item in SearchMode],
            )
        try:
            report = self.engine.search_sections(
                query,
                category=diagram_type or None,
                mode=search_mode,
                case_sensitive=case_sensitive,
                max_results=self.config.section_max_results if max_results is None else max_results,
            )
        except CorpusUnavailableError as exc:
            return ToolResult.error(str(exc), reason="no_corpus")
        except Exception as exc:
            LOGGER.exception("Search failed")
            return ToolResult.error(f"Search failed: {exc}")
        return ToolResult(report.to_dict())

    def validate(self, code: str) -> ToolResult:
        try:
            outcome = self.validator.validate(code)
        except Exception as exc:
            LOGGER.exception("Validation failed")
            return ToolResult(
                payload={"valid": False, "error": f"Validation failed: {exc}"},
                is_error=True,
                reason="internal",
            )
        return ToolResult(outcome.to_dict(), is_error=not outcome.valid)

    def list_diagram_types(self) -> ToolResult:
        return ToolResult(
            {
                "diagramTypes": [diagram_type.to_dict() for diagram_type in DIAGRAM_TYPES],
                "totalCount": len(DIAGRAM_TYPES),
            }
        )

    def get_examples(self, diagram_type: str) -> ToolResult:
        if not diagram_type or not diagram_type.strip():
            return ToolResult.error(
                "Empty diagram type", reason="invalid_input", availableTypes=diagram_type_names()
            )
        try:
            if not self.reference_path.is_file():
                return ToolResult.error("Reference file not found", reason="not_found")
            reference = self.reference_path.read_text(encoding="utf-8")
            examples = find_examples(reference, diagram_type)
        except Exception as exc:
            LOGGER.exception("Example lookup failed")
            return ToolResult.error(f"Example lookup failed: {exc}")
        if examples is None:
            return ToolResult.error(
                f"No examples found for diagram type: {diagram_type}",
                reason="not_found",
                availableTypes=diagram_type_names(),
            )
        return ToolResult(examples.to_dict())

    def analyze(self, code: str) -> ToolResult:
        try:
            return ToolResult(analyze_diagram(code, self.validator))
        except Exception as exc:
            LOGGER.exception("Analysis failed")
            return ToolResult.error(f"Analysis failed: {exc}")
