"""Structural validation of Mermaid diagrams."""

from mermaiddocs.validation.oracle import MermaidCliOracle, ParserOracle
from mermaiddocs.validation.validator import NON_SIGNAL_CONDITIONS, Validator

__all__ = ["MermaidCliOracle", "NON_SIGNAL_CONDITIONS", "ParserOracle", "Validator"]
