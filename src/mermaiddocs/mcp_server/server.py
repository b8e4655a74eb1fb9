"""MCP stdio server exposing the documentation tools, resources and prompts."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import anyio
from anyio import to_thread
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server

from mermaiddocs.config import AppConfig
from mermaiddocs.tools import DocsToolkit, ToolResult

LOGGER = logging.getLogger(__name__)

VALIDATE_REMINDER = " After finding syntax, always validate the final diagram with validate_mermaid."

SEARCH_RESOURCE_SCHEMA = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "minLength": 1,
            "description": "Text to search for (e.g. 'arrows', 'participant', 'classDef')",
        },
        "caseSensitive": {"type": "boolean", "default": False},
        "maxResults": {
            "type": "integer",
            "default": 50,
            "description": "Maximum matches per file (1-200)",
        },
        "contextLines": {
            "type": "integer",
            "default": 3,
            "minimum": 0,
            "description": "Lines of context before and after each match",
        },
    },
    "required": ["query"],
}

SEARCH_DOCS_SCHEMA = {
    "type": "object",
    "properties": {
        "query": {"type": "string", "minLength": 1, "description": "Text to search for"},
        "diagramType": {
            "type": "string",
            "description": "Only search documentation files for this diagram type",
        },
        "mode": {
            "type": "string",
            "enum": ["snippet", "full"],
            "default": "snippet",
            "description": "snippet returns matching sections, full returns whole files",
        },
        "caseSensitive": {"type": "boolean", "default": False},
        "maxResults": {"type": "integer", "default": 5, "description": "Maximum files (1-20)"},
    },
    "required": ["query"],
}

CODE_SCHEMA = {
    "type": "object",
    "properties": {"code": {"type": "string", "description": "The Mermaid diagram code"}},
    "required": ["code"],
}

EMPTY_SCHEMA = {"type": "object", "properties": {}}

GET_EXAMPLES_SCHEMA = {
    "type": "object",
    "properties": {
        "diagramType": {
            "type": "string",
            "description": "The diagram type (e.g. 'flowchart', 'sequenceDiagram')",
        },
    },
    "required": ["diagramType"],
}


class ToolCallError(Exception):
    """Carries an error payload back through the SDK as an ``isError`` result."""


def _dispatch(toolkit: DocsToolkit, name: str, args: dict) -> ToolResult:
    if name == "search_resource":
        return toolkit.search_lines(
            args.get("query", ""),
            case_sensitive=bool(args.get("caseSensitive", False)),
            max_results=int(args.get("maxResults", 50)),
            context_lines=int(args.get("contextLines", 3)),
        )
    if name == "search_docs":
        return toolkit.search_sections(
            args.get("query", ""),
            diagram_type=args.get("diagramType"),
            mode=args.get("mode", "snippet"),
            case_sensitive=bool(args.get("caseSensitive", False)),
            max_results=int(args.get("maxResults", 5)),
        )
    if name == "validate_mermaid":
        return toolkit.validate(args.get("code", ""))
    if name == "list_diagram_types":
        return toolkit.list_diagram_types()
    if name == "get_examples":
        return toolkit.get_examples(args.get("diagramType", ""))
    if name == "analyze_diagram":
        return toolkit.analyze(args.get("code", ""))
    return ToolResult.error(f"Unknown tool: {name}", reason="not_found")


def create_mcp_server(toolkit: DocsToolkit) -> Server:
    """Create the MCP server bound to ``toolkit``."""
    server = Server("mermaid-docs", version="0.1.0")
    resources = {binding.uri: binding for binding in toolkit.resource_bindings()}
    prompts = {binding.name: binding for binding in toolkit.prompt_bindings()}

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name="search_resource",
                description=(
                    "Search the Mermaid documentation line by line. "
                    "Returns matching lines with context." + VALIDATE_REMINDER
                ),
                inputSchema=SEARCH_RESOURCE_SCHEMA,
            ),
            types.Tool(
                name="search_docs",
                description=(
                    "Search the Mermaid documentation and return the matching markdown "
                    "sections or whole files." + VALIDATE_REMINDER
                ),
                inputSchema=SEARCH_DOCS_SCHEMA,
            ),
            types.Tool(
                name="validate_mermaid",
                description=(
                    "Validate Mermaid diagram syntax before presenting it. "
                    "Returns validation status, error and warnings."
                ),
                inputSchema=CODE_SCHEMA,
            ),
            types.Tool(
                name="list_diagram_types",
                description="List all available Mermaid diagram types with descriptions.",
                inputSchema=EMPTY_SCHEMA,
            ),
            types.Tool(
                name="get_examples",
                description="Get working examples for a specific diagram type." + VALIDATE_REMINDER,
                inputSchema=GET_EXAMPLES_SCHEMA,
            ),
            types.Tool(
                name="analyze_diagram",
                description=(
                    "Analyze a Mermaid diagram: validation, structure statistics "
                    "and improvement suggestions."
                ),
                inputSchema=CODE_SCHEMA,
            ),
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict | None) -> list[types.TextContent]:
        result = await to_thread.run_sync(_dispatch, toolkit, name, arguments or {})
        if result.is_error:
            raise ToolCallError(result.to_json())
        return [types.TextContent(type="text", text=result.to_json())]

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return [
            types.Resource(
                uri=binding.uri,
                name=binding.name,
                description=binding.description,
                mimeType=binding.mime_type,
            )
            for binding in resources.values()
        ]

    @server.read_resource()
    async def read_resource(uri) -> list[ReadResourceContents]:
        binding = resources.get(str(uri))
        if binding is None:
            raise ValueError(f"Unknown resource: {uri}")
        return [ReadResourceContents(content=binding.read(), mime_type=binding.mime_type)]

    @server.list_prompts()
    async def list_prompts() -> list[types.Prompt]:
        return [
            types.Prompt(name=binding.name, title=binding.title, description=binding.description)
            for binding in prompts.values()
        ]

    @server.get_prompt()
    async def get_prompt(name: str, arguments: dict[str, str] | None) -> types.GetPromptResult:
        binding = prompts.get(name)
        if binding is None:
            raise ValueError(f"Unknown prompt: {name}")
        return types.GetPromptResult(
            description=binding.description,
            messages=[
                types.PromptMessage(
                    role="user",
                    content=types.TextContent(type="text", text=binding.read()),
                )
            ],
        )

    return server


async def run_mcp_server(toolkit: DocsToolkit) -> None:
    """Run the MCP server with stdio transport."""
    server = create_mcp_server(toolkit)
    stats = toolkit.store.load()
    LOGGER.info("Mermaid docs MCP server ready with %d documents", stats.loaded)
    async with stdio_server() as (read_stream, write_stream):
        init_options = server.create_initialization_options(
            notification_options=NotificationOptions(),
        )
        await server.run(read_stream, write_stream, init_options)


def main(config: AppConfig | None = None) -> None:
    # stdout carries the protocol; logs go to stderr
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s", stream=sys.stderr)
    toolkit = DocsToolkit.from_config(config or AppConfig(), Path.cwd())
    anyio.run(run_mcp_server, toolkit)
