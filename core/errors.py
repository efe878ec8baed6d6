# =============================================================================
# core/errors.py  —  Error Taxonomy
# =============================================================================
#
# Every failure a deep-research call can hit falls into one of four buckets.
# The tools/ layer turns any of them into an MCP tool error; none of them is
# ever retried or downgraded to an empty success.
#
#   ValidationError         → caller input does not match the tool schema
#   ConfigurationError      → a required credential/setting is missing
#   TransportError          → network failure, timeout, or non-2xx status
#   ContentExtractionError  → 2xx response, but no usable generated text
# =============================================================================

from typing import Optional


class DeepResearchError(Exception):
    """Base class for every error raised by the core layer."""


class ValidationError(DeepResearchError):
    """Raised when tool arguments fail the declared parameter schema."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class ConfigurationError(DeepResearchError):
    """Raised when a credential or setting is missing or malformed."""


class TransportError(DeepResearchError):
    """Raised when the provider call itself fails.

    ``status`` is the HTTP status code when the provider answered, and None
    for timeouts and connection-level failures.
    """

    def __init__(self, message: str, status: Optional[int] = None, detail: str = ""):
        super().__init__(message)
        self.status = status
        self.detail = detail


class ContentExtractionError(DeepResearchError):
    """Raised when a successful response has no extractable text."""
