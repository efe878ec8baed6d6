# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (both deep-research tools)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Registers the two deep-research tools with FastMCP.  Each tool is a thin
#   wrapper around a core/ provider adapter: it collects the arguments,
#   hands them to the adapter, and turns core errors into MCP tool errors.
#
# HOW IT WORKS (the flow):
#   1. An MCP client calls a tool by name (e.g., "perplexity-deep")
#   2. FastMCP checks the arguments against the published schema and
#      routes the call to the decorated function below
#   3. The function passes the arguments to the provider adapter, which
#      validates them again, builds the provider request, calls the API
#      and normalizes the answer (core/provider.py)
#   4. The normalized text goes back to the client as a single text block
#
# TOOLS:
#   google-deep      → Google Gemini generateContent   (no explicit timeout)
#   perplexity-deep  → Perplexity chat/completions     (30s timeout)
#   Both are read-only but reach out to external services, and say so in
#   their annotations.
#
# RUNNING THIS SERVER:
#   a) python main.py                 (stdio transport)
#   b) python main.py --http-stream   (streamable HTTP on :3000/stream)
#   c) python -m tools.mcp_server     (stdio, no .env loading)
# =============================================================================

import logging
import sys
from typing import Annotated, Any, Optional

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from core.config import load_settings
from core.errors import DeepResearchError
from core.gemini import GeminiDeepProvider
from core.models import NormalizedResult
from core.params import MessageParam, Mode
from core.perplexity import PerplexityDeepProvider
from core.provider import InvocationLog, ProviderAdapter
from core.redaction import preview_text

# =============================================================================
# Logging Setup
# =============================================================================
# Log to STDERR: with the stdio transport, STDOUT *is* the MCP message stream
# and any stray print would corrupt it.
#
#   CYAN   → incoming tool calls
#   GREEN  → responses (length only, never the generated text)
#   YELLOW → intermediate status
#   RED    → failures
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call in CYAN; long text is shortened."""
    shown = {k: preview_text(v) if isinstance(v, str) else v for k, v in params.items() if v is not None}
    param_str = ", ".join(f"{k}={v!r}" for k, v in shown.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: NormalizedResult) -> str:
    """Log the response size in GREEN, then return the text for the client."""
    logging.info(
        f"{_GREEN}  ← {tool_name} response: {len(result.text)} chars, "
        f"{len(result.citations)} citations{_RESET}"
    )
    return result.text


def _log_failure(tool_name: str, exc: Exception) -> None:
    logging.error(f"{_RED}  ✗ {tool_name} failed ({type(exc).__name__}){_RESET}")


# =============================================================================
# Providers
# =============================================================================
# Built once from settings.  They hold only frozen config (API keys are read
# per call), so sharing them between concurrent calls is safe.
# =============================================================================
gemini_provider: ProviderAdapter = GeminiDeepProvider(settings.gemini())
perplexity_provider: ProviderAdapter = PerplexityDeepProvider(settings.perplexity())


async def _run(tool_name: str, provider: ProviderAdapter, arguments: dict[str, Any], ctx: Optional[Context]) -> str:
    """Run ``provider`` and translate core failures into MCP tool errors."""
    try:
        result = await provider.run(arguments, InvocationLog(ctx, name=provider.config.name))
    except DeepResearchError as exc:
        _log_failure(tool_name, exc)
        raise ToolError(f"{provider.config.name} request failed: {exc}") from exc
    return _log_response(tool_name, result)


mcp = FastMCP("deep-research")


# =============================================================================
# TOOL 1: google-deep
# =============================================================================
# Single prompt in, single answer out.  ``depth`` steers creativity:
#   depth 0  → temperature 0.0 (most deterministic)
#   depth 10 → temperature 1.0
#   omitted  → temperature 0.7
# =============================================================================
@mcp.tool(
    name="google-deep",
    annotations={
        "title": "Google Deep",
        "readOnlyHint": True,
        "openWorldHint": True,
    },
)
async def google_deep(
    query: Annotated[str, Field(strict=True, description="The prompt to send to Google Gemini API")],
    depth: Annotated[
        Optional[float],
        Field(
            strict=True,
            description="Controls the creativity of the response (0-10, higher values increase temperature)",
        ),
    ] = None,
    max_output_tokens: Annotated[
        Optional[int],
        Field(strict=True, description="Maximum number of tokens to generate (default: 2048)"),
    ] = None,
    ctx: Context = None,
) -> str:
    """Conduct in-depth research and generate high-quality content using the Google Gemini API.

    The tool sends the prompt to Gemini and returns the generated text.  Use
    it to analyze, summarize, and synthesize large volumes of information.
    """
    _log_request("google-deep", query=query, depth=depth, max_output_tokens=max_output_tokens)
    arguments = {"query": query, "depth": depth, "max_output_tokens": max_output_tokens}
    return await _run("google-deep", gemini_provider, _drop_unset(arguments), ctx)


# =============================================================================
# TOOL 2: perplexity-deep
# =============================================================================
# Either a plain ``query`` (wrapped with the mode's system prompt) or a full
# ``messages`` conversation, which takes precedence over ``query``.
#
#   research  → sonar-deep-research   (default)
#   analysis  → sonar-pro
#   creative  → sonar-pro
#
# Answers carry a numbered "Citations:" block when Perplexity returns sources.
# =============================================================================
@mcp.tool(
    name="perplexity-deep",
    annotations={
        "title": "Perplexity Deep Research",
        "readOnlyHint": True,
        "openWorldHint": True,
    },
)
async def perplexity_deep(
    query: Annotated[Optional[str], Field(strict=True, description="The query to process")] = None,
    messages: Annotated[
        Optional[list[MessageParam]],
        Field(description="Array of conversation messages (if provided, will override query)"),
    ] = None,
    mode: Annotated[Mode, Field(description="The processing mode")] = "research",
    ctx: Context = None,
) -> str:
    """Perform deep research and analysis using the Perplexity API.

    Provides comprehensive, well-researched answers with source citations.
    Pass ``query`` for a one-off question, or ``messages`` to continue an
    existing conversation (``messages`` overrides ``query``).
    """
    _log_request(
        "perplexity-deep",
        query=query,
        messages=f"<{len(messages)} messages>" if messages is not None else None,
        mode=mode,
    )
    if messages is not None and query is not None:
        _log_status("messages supplied; query will be ignored")
    arguments = {
        "query": query,
        "messages": [m.model_dump() for m in messages] if messages is not None else None,
        "mode": mode,
    }
    return await _run("perplexity-deep", perplexity_provider, _drop_unset(arguments), ctx)


def _drop_unset(arguments: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in arguments.items() if v is not None}


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    mcp.run()
