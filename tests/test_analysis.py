"""Tests for diagram analysis."""

from __future__ import annotations

from mermaiddocs.analysis import analyze_diagram
from mermaiddocs.validation.validator import Validator


class TestAnalyzeDiagram:
    """Tests for analyze_diagram."""

    def test_small_flowchart(self) -> None:
        """Should report statistics for a simple diagram."""
        report = analyze_diagram("flowchart LR\n  A[Start] --> B(End)\n  B ==> C", Validator())

        assert report["valid"] is True
        assert report["errors"] == []
        assert report["diagramType"] == "flowchart"
        assert report["statistics"] == {
            "lineCount": 3,
            "estimatedNodeCount": 2,
            "estimatedConnectionCount": 2,
            "hasSubgraphs": False,
            "hasStyles": False,
            "hasComments": False,
        }
        assert report["suggestions"] == []

    def test_invalid_diagram(self) -> None:
        """Validation errors should be listed."""
        report = analyze_diagram("A --> B", Validator())

        assert report["valid"] is False
        assert len(report["errors"]) == 1
        assert report["diagramType"] == "unknown"

    def test_large_diagram_suggestions(self) -> None:
        """Should suggest structure for large diagrams."""
        lines = ["flowchart TD"] + [f"  N{i}[Node{i}] --> N{i + 1}" for i in range(60)]

        report = analyze_diagram("\n".join(lines), Validator())

        assert len(report["suggestions"]) == 4
        assert report["suggestions"][0].startswith("Consider breaking")

    def test_flags(self) -> None:
        """Should detect subgraphs, styles and comments."""
        code = "flowchart LR\n  %% note\n  subgraph one\n  A\n  end\n  classDef hot fill:#f00"

        stats = analyze_diagram(code, Validator())["statistics"]

        assert stats["hasSubgraphs"] and stats["hasStyles"] and stats["hasComments"]
