"""Tests for the FastMCP tool surface, driven through the in-memory client."""

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from core.gemini import GeminiDeepProvider
from core.perplexity import PerplexityDeepProvider
from core.profiles import gemini_config, perplexity_config
from tests.mocks import Recorder, gemini_payload, perplexity_payload, reply
from tools import mcp_server


@pytest.fixture
def gemini_http(env, monkeypatch):
    recorder = Recorder(reply(payload=gemini_payload("Gemini says hi")))
    provider = GeminiDeepProvider(gemini_config(), environ=env, transport=recorder.transport)
    monkeypatch.setattr(mcp_server, "gemini_provider", provider)
    return recorder


@pytest.fixture
def perplexity_http(env, monkeypatch):
    recorder = Recorder(reply(payload=perplexity_payload("Sonar says hi", citations=["https://a"])))
    provider = PerplexityDeepProvider(perplexity_config(), environ=env, transport=recorder.transport)
    monkeypatch.setattr(mcp_server, "perplexity_provider", provider)
    return recorder


@pytest.mark.asyncio
async def test_tools_are_registered_with_schemas_and_annotations():
    async with Client(mcp_server.mcp) as client:
        tools = {tool.name: tool for tool in await client.list_tools()}

    assert set(tools) == {"google-deep", "perplexity-deep"}

    google = tools["google-deep"]
    assert set(google.inputSchema["properties"]) == {"query", "depth", "max_output_tokens"}
    assert google.inputSchema["required"] == ["query"]
    assert google.annotations.title == "Google Deep"
    assert google.annotations.readOnlyHint is True
    assert google.annotations.openWorldHint is True

    perplexity = tools["perplexity-deep"]
    assert set(perplexity.inputSchema["properties"]) == {"query", "messages", "mode"}
    assert perplexity.inputSchema.get("required", []) == []
    assert perplexity.annotations.title == "Perplexity Deep Research"
    assert "Perplexity" in perplexity.description


@pytest.mark.asyncio
async def test_google_deep_returns_single_text_block(gemini_http):
    async with Client(mcp_server.mcp) as client:
        result = await client.call_tool("google-deep", {"query": "explain X", "depth": 2})

    assert len(result.content) == 1
    assert result.content[0].type == "text"
    assert result.content[0].text == "Gemini says hi"
    assert gemini_http.body()["generationConfig"]["temperature"] == pytest.approx(0.2)


@pytest.mark.asyncio
async def test_perplexity_deep_with_messages(perplexity_http):
    async with Client(mcp_server.mcp) as client:
        result = await client.call_tool(
            "perplexity-deep",
            {"messages": [{"role": "user", "content": "hello"}], "mode": "analysis"},
        )

    assert result.content[0].text == "Sonar says hi\n\nCitations:\n[1] https://a"
    assert perplexity_http.body() == {
        "model": "sonar-pro",
        "messages": [{"role": "user", "content": "hello"}],
    }


@pytest.mark.asyncio
async def test_provider_errors_become_tool_errors(env, monkeypatch):
    recorder = Recorder(reply(500, {"error": {"message": "internal"}}))
    provider = GeminiDeepProvider(gemini_config(), environ=env, transport=recorder.transport)
    monkeypatch.setattr(mcp_server, "gemini_provider", provider)

    async with Client(mcp_server.mcp) as client:
        with pytest.raises(ToolError, match="gemini request failed: HTTP 500: internal"):
            await client.call_tool("google-deep", {"query": "explain X"})


@pytest.mark.asyncio
async def test_missing_credentials_become_tool_errors(monkeypatch):
    provider = PerplexityDeepProvider(perplexity_config(), environ={})
    monkeypatch.setattr(mcp_server, "perplexity_provider", provider)

    async with Client(mcp_server.mcp) as client:
        with pytest.raises(ToolError, match="PERPLEXITY_API_KEY"):
            await client.call_tool("perplexity-deep", {"query": "q"})


@pytest.mark.asyncio
async def test_perplexity_needs_query_or_messages(perplexity_http):
    async with Client(mcp_server.mcp) as client:
        with pytest.raises(ToolError, match="query"):
            await client.call_tool("perplexity-deep", {"mode": "research"})

    assert perplexity_http.requests == []
