# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL request-translation and response-normalization
# logic for the deep-research tools.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any other server framework.
#   The MCP Context is only ever duck-typed (see provider.InvocationLog), so
#   every module here can be exercised with a mocked HTTP transport and no
#   server at all.
#
# MODULE MAP:
#   models.py      dataclasses for requests, configs and results
#   params.py      pydantic argument schemas (the validator)
#   profiles.py    per-provider configuration factories
#   config.py      environment-driven runtime settings
#   provider.py    the shared validate → build → invoke → normalize pipeline
#   gemini.py      Google Gemini request/response mapping
#   perplexity.py  Perplexity request/response mapping
#   invoker.py     the single outbound HTTP call and its deadline
#   redaction.py   credential masking and log previews
#   errors.py      error taxonomy
# =============================================================================
