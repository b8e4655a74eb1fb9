"""Shared fixtures: a small documentation tree and guides directory on disk."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mermaiddocs.config import AppConfig
from mermaiddocs.tools import DocsToolkit

FLOWCHART_DOC = """# Flowcharts - Basic Syntax

Flowcharts are composed of nodes and edges.

## Links between nodes

Nodes can be connected with links/edges. A link with an arrow head:

```mermaid
flowchart LR
    A-->B
```

### Thick link

Use `==>` for a thick arrow.

## Subgraphs

Group nodes with subgraph blocks.
"""

SEQUENCE_DOC = """# Sequence diagrams

A sequence diagram shows how participants interact.

## Participants

Declare a participant explicitly to control the order.

## Messages

Messages can use a solid arrow `->>` or a dotted arrow `-->>`.
"""

PIE_DOC = """# Pie chart diagrams

Pie charts show proportions.
"""

REFERENCE_DOC = """# Mermaid reference

Intro text.

## Flowchart

```mermaid
flowchart TD
    A[Start] --> B[End]
```

Some prose.

```mermaid
flowchart LR
    X --> Y
```

## Sequence Diagram

```mermaid
sequenceDiagram
    Alice->>Bob: Hello
```

## State-Diagram

```mermaid
stateDiagram-v2
    [*] --> Still
```
"""


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "syntax"
    directory.mkdir()
    (directory / "flowchart.md").write_text(FLOWCHART_DOC, encoding="utf-8")
    (directory / "sequenceDiagram.md").write_text(SEQUENCE_DOC, encoding="utf-8")
    (directory / "pie.md").write_text(PIE_DOC, encoding="utf-8")
    (directory / "notes.txt").write_text("arrow in a non-markdown file", encoding="utf-8")
    return directory


@pytest.fixture
def guides_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "guides"
    directory.mkdir()
    (directory / "reference.md").write_text(REFERENCE_DOC, encoding="utf-8")
    (directory / "rules.md").write_text("Always quote labels.", encoding="utf-8")
    (directory / "prompts.json").write_text(
        json.dumps(
            {
                "resources": [
                    {
                        "name": "reference",
                        "uri": "mermaid://guides/reference",
                        "file": "reference.md",
                        "description": "Curated examples.",
                    },
                    {
                        "name": "missing",
                        "uri": "mermaid://guides/missing",
                        "file": "missing.md",
                        "description": "Not on disk.",
                    },
                ],
                "prompts": [
                    {
                        "name": "mermaid-rules",
                        "title": "Mermaid rules",
                        "file": "rules.md",
                        "description": "House rules for diagrams.",
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    return directory


@pytest.fixture
def toolkit(docs_dir: Path, guides_dir: Path) -> DocsToolkit:
    config = AppConfig(docs_dir=docs_dir, guides_dir=guides_dir, parser_command="")
    return DocsToolkit.from_config(config)
