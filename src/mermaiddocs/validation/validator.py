"""Heuristic structural validation of Mermaid diagrams.

The checks here are deliberately shallow: they catch empty input, a missing
diagram keyword and unbalanced brackets without a grammar. When a parser
oracle is configured it gets the final word on documents that pass them.
"""

from __future__ import annotations

import logging
import re
from typing import FrozenSet, List, Tuple

from mermaiddocs.catalog import DIAGRAM_KEYWORDS
from mermaiddocs.errors import DiagramSyntaxError, EnvironmentCondition, OracleEnvironmentError
from mermaiddocs.models import ValidationOutcome
from mermaiddocs.validation.oracle import ParserOracle

LOGGER = logging.getLogger(__name__)

# Oracle conditions that say nothing about the diagram itself.
NON_SIGNAL_CONDITIONS: FrozenSet[EnvironmentCondition] = frozenset(
    {
        EnvironmentCondition.NO_DOM,
        EnvironmentCondition.NO_BROWSER,
        EnvironmentCondition.NO_DISPLAY,
    }
)

KEYWORD_SAMPLE_SIZE = 10

_PAIRS: Tuple[Tuple[str, str, str], ...] = (
    ("brackets", "[", "]"),
    ("parentheses", "(", ")"),
    ("braces", "{", "}"),
)
_LABEL_RE = re.compile(r"\[[^\]]*\]")


def has_diagram_keyword(code: str) -> bool:
    return any(code.startswith(keyword) or f"\n{keyword}" in code for keyword in DIAGRAM_KEYWORDS)


def check_balance(code: str) -> str | None:
    """Return an error for the first unbalanced pair, or ``None``."""
    for label, opener, closer in _PAIRS:
        opened, closed = code.count(opener), code.count(closer)
        if opened != closed:
            return f"Unmatched {label}: {opened} '{opener}' vs {closed} '{closer}'"
    return None


def collect_warnings(code: str) -> List[str]:
    warnings: List[str] = []
    lowered = code.lower()
    if "\nend\n" in lowered or lowered.endswith("\nend"):
        warnings.append(
            "Using 'end' as a node name may cause issues. Consider using 'End' or '[end]' instead."
        )
    for label in _LABEL_RE.findall(code):
        if label.count('"') % 2 != 0:
            warnings.append(f"Possible unclosed quote in label: {label}")
    return warnings


class Validator:
    """Structural checks, optionally confirmed by a full parser."""

    def __init__(self, oracle: ParserOracle | None = None) -> None:
        self.oracle = oracle

    def validate(self, code: str) -> ValidationOutcome:
        try:
            return self._validate(code)
        except Exception as exc:
            LOGGER.exception("Unexpected validation failure")
            return ValidationOutcome.failure(f"Validation error: {exc}")

    def _validate(self, code: str) -> ValidationOutcome:
        trimmed = code.strip()
        if not trimmed:
            return ValidationOutcome.failure("Empty diagram code")

        if not has_diagram_keyword(trimmed):
            sample = ", ".join(DIAGRAM_KEYWORDS[:KEYWORD_SAMPLE_SIZE])
            return ValidationOutcome.failure(
                f"No valid diagram type found. Must start with one of: {sample}, etc."
            )

        imbalance = check_balance(trimmed)
        if imbalance is not None:
            return ValidationOutcome.failure(imbalance)

        warnings = collect_warnings(trimmed)

        if self.oracle is not None:
            parser_error = self._consult_oracle(code)
            if parser_error is not None:
                return ValidationOutcome.failure(parser_error)

        return ValidationOutcome(valid=True, warnings=warnings)

    def _consult_oracle(self, code: str) -> str | None:
        try:
            self.oracle.parse(code)  # type: ignore[union-attr]
        except OracleEnvironmentError as exc:
            if exc.condition in NON_SIGNAL_CONDITIONS:
                LOGGER.debug("Ignoring parser environment failure (%s): %s", exc.condition.value, exc)
                return None
            return f"Parser error: {exc}"
        except DiagramSyntaxError as exc:
            return f"Parser error: {exc}"
        except Exception as exc:
            LOGGER.warning("Parser oracle failed: %s", exc)
            return f"Parser error: {exc}"
        return None
