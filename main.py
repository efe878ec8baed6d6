# =============================================================================
# main.py  —  Entry Point for the Deep Research MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py                  # stdio (for desktop MCP clients)
#   uv run python main.py --http-stream    # streamable HTTP on :3000/stream
#
# WHAT HAPPENS:
#   1. Loads .env (GOOGLE_API_KEY, PERPLEXITY_API_KEY, server settings)
#   2. Imports the FastMCP server, which registers google-deep and
#      perplexity-deep (tools/mcp_server.py)
#   3. Starts the chosen transport and serves tool calls until stopped
#
# TRANSPORTS:
#   stdio        : the client launches this process and talks over
#                  stdin/stdout.  Nothing else may write to stdout.
#   http-stream  : a long-running HTTP server; host/port/path come from
#                  --host/--port or DEEP_RESEARCH_HOST/PORT/PATH.
# =============================================================================

import argparse
import logging
import sys

from dotenv import load_dotenv

# Load .env BEFORE importing the server: tools/mcp_server.py reads settings
# from the environment at import time.
load_dotenv()

from core.errors import ConfigurationError  # noqa: E402


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Deep research MCP server (Gemini + Perplexity)")
    parser.add_argument(
        "--http-stream",
        action="store_true",
        help="serve over streamable HTTP instead of stdio",
    )
    parser.add_argument("--host", default=None, help="bind host for --http-stream")
    parser.add_argument("--port", type=int, default=None, help="port for --http-stream")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        from tools.mcp_server import mcp, settings
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    if args.http_stream:
        host = args.host or settings.host
        port = args.port or settings.port
        logging.info(f"Server started with streamable HTTP transport on http://{host}:{port}{settings.path}")
        mcp.run(transport="streamable-http", host=host, port=port, path=settings.path)
    else:
        logging.info("Started stdio transport")
        mcp.run(transport="stdio")
    return 0


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    sys.exit(main())
