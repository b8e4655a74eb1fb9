"""Command line interface for mermaid-docs."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from mermaiddocs.config import AppConfig
from mermaiddocs.tools import DocsToolkit

console = Console()
app = typer.Typer(help="mermaid-docs - Mermaid documentation search and syntax checks")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s", stream=sys.stderr)


def _build_toolkit(docs: Optional[Path], guides: Optional[Path]) -> DocsToolkit:
    config = AppConfig(docs_dir=docs, guides_dir=guides)
    return DocsToolkit.from_config(config, Path.cwd())


def _read_code(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        raise typer.BadParameter(f"Diagram file not found: {path}")
    return path.read_text(encoding="utf-8")


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to search for"),
    docs: Path = typer.Option(None, "--docs", help="Mermaid syntax documentation directory"),
    case_sensitive: bool = typer.Option(False, "--case-sensitive", help="Match case exactly"),
    max_results: int = typer.Option(AppConfig().max_results, help="Maximum matches per file"),
    context_lines: int = typer.Option(AppConfig().context_lines, help="Context lines around matches"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search documentation lines and show each match with context."""
    _setup_logging(verbose)
    if not query.strip():
        raise typer.BadParameter("Empty query")
    toolkit = _build_toolkit(docs, None)
    result = toolkit.search_lines(
        query,
        case_sensitive=case_sensitive,
        max_results=max_results,
        context_lines=context_lines,
    )
    if result.is_error:
        console.print(f"[red]{result.payload['error']}[/red]")
        raise typer.Exit(code=1)

    payload = result.payload
    if not payload["results"]:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("File")
    table.add_column("Line")
    table.add_column("Text")
    for file_result in payload["results"]:
        for match in file_result["matches"]:
            table.add_row(file_result["file"], str(match["line"]), match["text"][:180])
    console.print(table)
    console.print(
        f"{payload['totalMatches']} matches in {payload['totalFiles']} files"
    )


@app.command()
def sections(
    query: str = typer.Argument(..., help="Text to search for"),
    docs: Path = typer.Option(None, "--docs", help="Mermaid syntax documentation directory"),
    diagram_type: Optional[str] = typer.Option(None, "--type", "-t", help="Only search this diagram type"),
    mode: str = typer.Option("snippet", help="snippet or full"),
    case_sensitive: bool = typer.Option(False, "--case-sensitive", help="Match case exactly"),
    max_results: int = typer.Option(AppConfig().section_max_results, help="Maximum files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the documentation sections (or whole files) matching a query."""
    _setup_logging(verbose)
    toolkit = _build_toolkit(docs, None)
    result = toolkit.search_sections(
        query,
        diagram_type=diagram_type,
        mode=mode,
        case_sensitive=case_sensitive,
        max_results=max_results,
    )
    if result.is_error:
        if result.reason == "invalid_input":
            raise typer.BadParameter(result.payload["error"])
        console.print(f"[red]{result.payload['error']}[/red]")
        raise typer.Exit(code=1)

    if not result.payload["results"]:
        console.print("[yellow]No matches found.[/yellow]")
        return
    for hit in result.payload["results"]:
        console.rule(f"{hit['file']} ({hit['matchCount']} matches)")
        console.print(hit["content"], markup=False, highlight=False)


@app.command()
def validate(
    source: str = typer.Argument("-", help="Diagram file, or - to read stdin"),
    parser: Optional[str] = typer.Option(None, "--parser", help="Full parser command, e.g. mmdc"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Check a Mermaid diagram for structural errors."""
    _setup_logging(verbose)
    code = _read_code(source)
    config = AppConfig(parser_command=parser)
    toolkit = DocsToolkit.from_config(config, Path.cwd())
    result = toolkit.validate(code)
    payload = result.payload
    if payload["valid"]:
        console.print("[green]Valid diagram.[/green]")
        for warning in payload.get("warnings", []):
            console.print(f"[yellow]Warning:[/yellow] {warning}", markup=True, highlight=False)
        return
    console.print(f"[red]Invalid diagram:[/red] {payload['error']}", highlight=False)
    raise typer.Exit(code=1)


@app.command()
def types() -> None:
    """List the supported diagram types."""
    toolkit = DocsToolkit.from_config(AppConfig(), Path.cwd())
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Type")
    table.add_column("Aliases")
    table.add_column("Description")
    for entry in toolkit.list_diagram_types().payload["diagramTypes"]:
        table.add_row(entry["name"], ", ".join(entry.get("alias", [])), entry["description"])
    console.print(table)


@app.command()
def examples(
    diagram_type: str = typer.Argument(..., help="Diagram type, e.g. flowchart"),
    guides: Path = typer.Option(None, "--guides", help="Directory holding reference.md"),
) -> None:
    """Print the reference examples for a diagram type."""
    toolkit = _build_toolkit(None, guides)
    result = toolkit.get_examples(diagram_type)
    if result.is_error:
        console.print(f"[red]{result.payload['error']}[/red]")
        available = result.payload.get("availableTypes")
        if available:
            console.print("Available types: " + ", ".join(available))
        raise typer.Exit(code=1)
    for index, example in enumerate(result.payload["examples"], start=1):
        console.rule(f"Example {index}")
        console.print(example, markup=False, highlight=False)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    docs: Path = typer.Option(None, "--docs", help="Mermaid syntax documentation directory"),
    guides: Path = typer.Option(None, "--guides", help="Guides directory"),
) -> None:
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    from mermaiddocs.web.app import create_app

    toolkit = _build_toolkit(docs, guides)
    if not toolkit.store.docs_dir.is_dir():
        console.print("[yellow]Warning: documentation directory not found, searches will fail.[/yellow]")

    console.print(f"Starting HTTP API on http://{host}:{port} (docs: {toolkit.store.docs_dir})")
    uvicorn.run(
        create_app(toolkit),
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )


@app.command()
def mcp(
    docs: Path = typer.Option(None, "--docs", help="Mermaid syntax documentation directory"),
    guides: Path = typer.Option(None, "--guides", help="Guides directory"),
    parser: Optional[str] = typer.Option(None, "--parser", help="Full parser command, e.g. mmdc"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Run the MCP server on stdio."""
    _setup_logging(verbose)
    from mermaiddocs.mcp_server.server import main as run_server

    run_server(AppConfig(docs_dir=docs, guides_dir=guides, parser_command=parser))
