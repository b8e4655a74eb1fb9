"""Structure statistics and suggestions for a Mermaid diagram."""

from __future__ import annotations

import re
from typing import Any, Dict, List

from mermaiddocs.catalog import detect_diagram_type
from mermaiddocs.validation.validator import Validator

_NODE_RE = re.compile(r"[\[\(]\w+")
_ARROW_RE = re.compile(r"--+>|==+>|\.\.+>")


def analyze_diagram(code: str, validator: Validator) -> Dict[str, Any]:
    validation = validator.validate(code)
    trimmed = code.strip()
    diagram_type = detect_diagram_type(trimmed)

    line_count = len(trimmed.split("\n"))
    node_count = len(_NODE_RE.findall(trimmed))
    arrow_count = len(_ARROW_RE.findall(trimmed))
    has_subgraphs = "subgraph" in trimmed
    has_styles = "style " in trimmed or "classDef" in trimmed
    has_comments = "%%" in trimmed

    suggestions: List[str] = []
    if line_count > 50:
        suggestions.append(
            "Consider breaking this into multiple diagrams or using subgraphs for better organization"
        )
    if node_count > 20:
        suggestions.append(
            "Large number of nodes detected - consider grouping related nodes in subgraphs"
        )
    if not has_comments and line_count > 20:
        suggestions.append("Add comments (using %%) to document complex parts of the diagram")
    if not has_styles and node_count > 10:
        suggestions.append("Consider adding styles or classes to highlight important nodes")

    return {
        "valid": validation.valid,
        "errors": [validation.error] if validation.error else [],
        "warnings": list(validation.warnings),
        "diagramType": diagram_type.name if diagram_type else "unknown",
        "statistics": {
            "lineCount": line_count,
            "estimatedNodeCount": node_count,
            "estimatedConnectionCount": arrow_count,
            "hasSubgraphs": has_subgraphs,
            "hasStyles": has_styles,
            "hasComments": has_comments,
        },
        "suggestions": suggestions,
    }
