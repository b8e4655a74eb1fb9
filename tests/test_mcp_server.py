"""Tests for the MCP server handlers."""

from __future__ import annotations

import asyncio
import json
import time
from unittest.mock import patch

import pytest
from mcp import types

from mermaiddocs.catalog import diagram_type_names
from mermaiddocs.mcp_server.server import _dispatch, create_mcp_server, main
from mermaiddocs.tools import DocsToolkit
from mermaiddocs.validation.validator import Validator


async def _call(server, name: str, arguments: dict) -> types.CallToolResult:
    result = await server.request_handlers[types.CallToolRequest](
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name=name, arguments=arguments),
        )
    )
    return result.root


class TestTools:
    def test_server_creation(self, toolkit: DocsToolkit) -> None:
        assert create_mcp_server(toolkit) is not None

    @pytest.mark.asyncio
    async def test_list_tools(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        result = await server.request_handlers[types.ListToolsRequest](
            types.ListToolsRequest(method="tools/list")
        )
        tools = {tool.name: tool for tool in result.root.tools}

        assert set(tools) == {
            "search_resource",
            "search_docs",
            "validate_mermaid",
            "list_diagram_types",
            "get_examples",
            "analyze_diagram",
        }
        assert tools["search_resource"].inputSchema["required"] == ["query"]
        assert "validate_mermaid" in tools["search_docs"].description

    @pytest.mark.asyncio
    async def test_search_resource(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        result = await _call(server, "search_resource", {"query": "arrow", "contextLines": 0})

        assert not result.isError
        payload = json.loads(result.content[0].text)
        assert payload["totalMatches"] == 3
        assert payload["results"][0]["matches"][0]["context"] == [
            ">>> Nodes can be connected with links/edges. A link with an arrow head:"
        ]

    @pytest.mark.asyncio
    async def test_search_docs_full(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        result = await _call(
            server, "search_docs", {"query": "pie", "mode": "full", "diagramType": "pie"}
        )

        payload = json.loads(result.content[0].text)
        assert payload["mode"] == "full"
        assert payload["results"][0]["content"].startswith("# Pie chart diagrams")

    @pytest.mark.asyncio
    async def test_search_without_corpus_is_error(self, tmp_path) -> None:
        from mermaiddocs.config import AppConfig

        toolkit = DocsToolkit.from_config(
            AppConfig(docs_dir=tmp_path / "absent", guides_dir=tmp_path, parser_command="")
        )
        server = create_mcp_server(toolkit)

        result = await _call(server, "search_resource", {"query": "arrow"})

        assert result.isError
        assert "Mermaid documentation not available" in result.content[0].text

    @pytest.mark.asyncio
    async def test_validate_invalid(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        result = await _call(server, "validate_mermaid", {"code": "flowchart LR\n A[Start --> B[End]"})

        assert result.isError
        payload = json.loads(result.content[0].text)
        assert payload == {"valid": False, "error": "Unmatched brackets: 2 '[' vs 1 ']'"}

    @pytest.mark.asyncio
    async def test_validate_valid(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        result = await _call(server, "validate_mermaid", {"code": "sequenceDiagram\n A->>B: hi"})

        assert not result.isError
        assert json.loads(result.content[0].text) == {"valid": True}

    @pytest.mark.asyncio
    async def test_get_examples_unknown(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        result = await _call(server, "get_examples", {"diagramType": "gantt"})

        assert result.isError
        assert json.loads(result.content[0].text)["availableTypes"] == diagram_type_names()

    @pytest.mark.asyncio
    async def test_list_diagram_types(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        result = await _call(server, "list_diagram_types", {})

        assert json.loads(result.content[0].text)["totalCount"] == 22

    @pytest.mark.asyncio
    async def test_analyze(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        result = await _call(server, "analyze_diagram", {"code": "graph TD\n A --> B"})

        assert json.loads(result.content[0].text)["diagramType"] == "flowchart"

    @pytest.mark.asyncio
    async def test_slow_validation_does_not_block_event_loop(self, toolkit: DocsToolkit) -> None:
        class SlowOracle:
            def parse(self, code: str) -> None:
                time.sleep(0.5)

        toolkit.validator = Validator(SlowOracle())
        server = create_mcp_server(toolkit)
        gaps: list[float] = []
        done = asyncio.Event()

        async def ticker() -> None:
            last = time.monotonic()
            while not done.is_set():
                await asyncio.sleep(0.05)
                now = time.monotonic()
                gaps.append(now - last)
                last = now

        ticking = asyncio.create_task(ticker())
        result = await _call(server, "validate_mermaid", {"code": "flowchart LR\n A --> B"})
        done.set()
        await ticking

        assert not result.isError
        assert len(gaps) >= 3
        assert max(gaps) < 0.3

    def test_dispatch_unknown_tool(self, toolkit: DocsToolkit) -> None:
        result = _dispatch(toolkit, "draw", {})

        assert result.is_error
        assert result.payload["error"] == "Unknown tool: draw"

    def test_dispatch_maps_camel_case_arguments(self, toolkit: DocsToolkit) -> None:
        with patch.object(DocsToolkit, "search_lines", autospec=True) as mock_search:
            _dispatch(
                toolkit,
                "search_resource",
                {"query": "x", "caseSensitive": True, "maxResults": 7, "contextLines": 1},
            )

        mock_search.assert_called_once_with(
            toolkit, "x", case_sensitive=True, max_results=7, context_lines=1
        )


class TestResourcesAndPrompts:
    @pytest.mark.asyncio
    async def test_list_resources(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        result = await server.request_handlers[types.ListResourcesRequest](
            types.ListResourcesRequest(method="resources/list")
        )
        uris = [str(resource.uri) for resource in result.root.resources]

        assert uris[0] == "mermaid://syntax/flowchart"
        assert "mermaid://guides/reference" in uris

    @pytest.mark.asyncio
    async def test_read_resource(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        result = await server.request_handlers[types.ReadResourceRequest](
            types.ReadResourceRequest(
                method="resources/read",
                params=types.ReadResourceRequestParams(uri="mermaid://syntax/pie"),
            )
        )
        contents = result.root.contents[0]

        assert contents.text.startswith("# Pie chart diagrams")
        assert contents.mimeType == "text/markdown"

    @pytest.mark.asyncio
    async def test_read_missing_resource_file(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        result = await server.request_handlers[types.ReadResourceRequest](
            types.ReadResourceRequest(
                method="resources/read",
                params=types.ReadResourceRequestParams(uri="mermaid://guides/missing"),
            )
        )

        assert result.root.contents[0].text == "Resource file not found: missing.md"

    @pytest.mark.asyncio
    async def test_read_unknown_resource(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        with pytest.raises(ValueError, match="Unknown resource"):
            await server.request_handlers[types.ReadResourceRequest](
                types.ReadResourceRequest(
                    method="resources/read",
                    params=types.ReadResourceRequestParams(uri="mermaid://syntax/nope"),
                )
            )

    @pytest.mark.asyncio
    async def test_prompts(self, toolkit: DocsToolkit) -> None:
        server = create_mcp_server(toolkit)

        listed = await server.request_handlers[types.ListPromptsRequest](
            types.ListPromptsRequest(method="prompts/list")
        )
        fetched = await server.request_handlers[types.GetPromptRequest](
            types.GetPromptRequest(
                method="prompts/get",
                params=types.GetPromptRequestParams(name="mermaid-rules"),
            )
        )

        assert [prompt.name for prompt in listed.root.prompts] == ["mermaid-rules"]
        assert listed.root.prompts[0].title == "Mermaid rules"
        message = fetched.root.messages[0]
        assert message.role == "user"
        assert message.content.text == "Always quote labels."


class TestMain:
    def test_main_runs_server(self, docs_dir, guides_dir) -> None:
        from mermaiddocs.config import AppConfig

        with patch("mermaiddocs.mcp_server.server.anyio.run") as mock_run:
            main(AppConfig(docs_dir=docs_dir, guides_dir=guides_dir, parser_command=""))

        toolkit = mock_run.call_args[0][1]
        assert toolkit.store.docs_dir == docs_dir
