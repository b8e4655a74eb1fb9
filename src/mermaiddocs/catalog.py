"""Static catalog of Mermaid diagram types and example extraction."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

SECTION_PREVIEW_CHARS = 500

_LEVEL2_SPLIT_RE = re.compile(r"^## ", re.MULTILINE)
_MERMAID_BLOCK_RE = re.compile(r"```mermaid\n([\s\S]*?)```")
_TYPE_STRIP_RE = re.compile(r"[- ]")


@dataclass(frozen=True, slots=True)
class DiagramType:
    name: str
    description: str
    aliases: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": self.name}
        if self.aliases:
            payload["alias"] = list(self.aliases)
        payload["description"] = self.description
        return payload


@dataclass(frozen=True, slots=True)
class SyntaxFile:
    """A documentation file served as a read-only resource."""

    name: str
    file: str
    description: str

    @property
    def uri(self) -> str:
        return f"mermaid://syntax/{self.name}"


DIAGRAM_TYPES: Tuple[DiagramType, ...] = (
    DiagramType("flowchart", "General purpose flow diagrams with nodes and edges", ("graph",)),
    DiagramType("sequenceDiagram", "Message flows and interactions between actors over time"),
    DiagramType("classDiagram", "Object-oriented class structures and relationships"),
    DiagramType("stateDiagram-v2", "State machines and transitions", ("stateDiagram",)),
    DiagramType("erDiagram", "Entity-relationship diagrams for databases"),
    DiagramType("gantt", "Project timelines and schedules"),
    DiagramType("pie", "Pie charts for proportional data"),
    DiagramType("quadrantChart", "2x2 prioritization matrices"),
    DiagramType("requirementDiagram", "Requirements engineering diagrams"),
    DiagramType("gitGraph", "Git commit history visualization"),
    DiagramType(
        "C4Context",
        "C4 model architecture diagrams",
        ("C4Container", "C4Component", "C4Dynamic", "C4Deployment"),
    ),
    DiagramType("mindmap", "Hierarchical mind mapping"),
    DiagramType("timeline", "Historical events and milestones"),
    DiagramType("zenuml", "Alternative sequence diagram syntax"),
    DiagramType("sankey-beta", "Flow quantities between nodes"),
    DiagramType("xychart-beta", "XY coordinate charts and graphs"),
    DiagramType("block-beta", "Block-based diagrams"),
    DiagramType("packet-beta", "Network packet structures"),
    DiagramType("architecture-beta", "System architecture diagrams"),
    DiagramType("kanban", "Kanban boards"),
    DiagramType("treemap", "Hierarchical treemap visualizations"),
    DiagramType("radar", "Multi-dimensional radar charts"),
)

# Leading keywords accepted by the structural validator.
DIAGRAM_KEYWORDS: Tuple[str, ...] = (
    "flowchart",
    "graph",
    "sequenceDiagram",
    "classDiagram",
    "stateDiagram-v2",
    "stateDiagram",
    "erDiagram",
    "gantt",
    "pie",
    "quadrantChart",
    "requirementDiagram",
    "gitGraph",
    "C4Context",
    "C4Container",
    "C4Component",
    "C4Dynamic",
    "C4Deployment",
    "mindmap",
    "timeline",
    "zenuml",
    "sankey-beta",
    "xychart-beta",
    "block-beta",
    "packet-beta",
    "architecture-beta",
    "kanban",
    "treemap",
    "radar",
    "journey",
)

SYNTAX_FILES: Tuple[SyntaxFile, ...] = (
    SyntaxFile("flowchart", "flowchart.md", "Flowchart syntax and examples"),
    SyntaxFile("sequence", "sequenceDiagram.md", "Sequence diagram syntax"),
    SyntaxFile("class", "classDiagram.md", "Class diagram syntax"),
    SyntaxFile("state", "stateDiagram.md", "State diagram syntax"),
    SyntaxFile("er", "entityRelationshipDiagram.md", "Entity relationship diagram syntax"),
    SyntaxFile("gantt", "gantt.md", "Gantt chart syntax"),
    SyntaxFile("pie", "pie.md", "Pie chart syntax"),
    SyntaxFile("quadrant", "quadrantChart.md", "Quadrant chart syntax"),
    SyntaxFile("requirement", "requirementDiagram.md", "Requirement diagram syntax"),
    SyntaxFile("gitgraph", "gitgraph.md", "Git graph syntax"),
    SyntaxFile("c4", "c4.md", "C4 diagram syntax"),
    SyntaxFile("mindmap", "mindmap.md", "Mindmap syntax"),
    SyntaxFile("timeline", "timeline.md", "Timeline syntax"),
    SyntaxFile("zenuml", "zenuml.md", "ZenUML syntax"),
    SyntaxFile("sankey", "sankey.md", "Sankey diagram syntax"),
    SyntaxFile("xychart", "xyChart.md", "XY chart syntax"),
    SyntaxFile("block", "block.md", "Block diagram syntax"),
    SyntaxFile("packet", "packet.md", "Packet diagram syntax"),
    SyntaxFile("architecture", "architecture.md", "Architecture diagram syntax"),
    SyntaxFile("kanban", "kanban.md", "Kanban board syntax"),
    SyntaxFile("user-journey", "userJourney.md", "User journey syntax"),
    SyntaxFile("treemap", "treemap.md", "Treemap syntax"),
    SyntaxFile("radar", "radar.md", "Radar chart syntax"),
)


def diagram_type_names() -> List[str]:
    return [diagram_type.name for diagram_type in DIAGRAM_TYPES]


def normalize_type_name(value: str) -> str:
    return _TYPE_STRIP_RE.sub("", value.lower())


def detect_diagram_type(code: str) -> DiagramType | None:
    """Return the catalog entry named on the first line of ``code``."""
    first_line = code.strip().split("\n", 1)[0]
    for diagram_type in DIAGRAM_TYPES:
        if diagram_type.name in first_line:
            return diagram_type
        if any(alias in first_line for alias in diagram_type.aliases):
            return diagram_type
    return None


@dataclass(frozen=True, slots=True)
class ExampleSet:
    diagram_type: str
    examples: Tuple[str, ...]
    section: str

    def preview(self) -> str:
        if len(self.section) > SECTION_PREVIEW_CHARS:
            return self.section[:SECTION_PREVIEW_CHARS] + "..."
        return self.section

    def to_dict(self) -> Dict[str, Any]:
        return {
            "diagramType": self.diagram_type,
            "examplesCount": len(self.examples),
            "examples": list(self.examples),
            "section": self.preview(),
        }


def extract_mermaid_blocks(text: str) -> List[str]:
    """Return the bodies of the ```mermaid fenced blocks in ``text``, in order."""
    return [match.group(1).strip() for match in _MERMAID_BLOCK_RE.finditer(text)]


def find_examples(reference_text: str, diagram_type: str) -> ExampleSet | None:
    """Find the level-2 section of the reference guide for ``diagram_type``."""
    wanted = normalize_type_name(diagram_type)
    for section in _LEVEL2_SPLIT_RE.split(reference_text):
        if normalize_type_name(section).startswith(wanted):
            return ExampleSet(
                diagram_type=diagram_type,
                examples=tuple(extract_mermaid_blocks(section)),
                section=section,
            )
    return None
