# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool wrappers.
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between MCP clients and core/.  The
#   server module here:
#     1. Declares each tool's name, description, annotations and typed
#        parameters (FastMCP publishes these as the tool's JSON schema)
#     2. Hands the arguments to a core/ provider adapter
#     3. Turns core errors into MCP tool errors with a readable message
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build provider requests or parse provider responses
#   - They do NOT hold credentials (adapters read them per call)
#   - They do NOT retry, cache, or fail over between providers
# =============================================================================
