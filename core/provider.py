# =============================================================================
# core/provider.py  —  Provider Adapter (validate → build → invoke → normalize)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Holds the pipeline every deep-research tool runs, once per call:
#
#     arguments ──validate──▶ OperationRequest
#               ──credential──▶ API key (or ConfigurationError)
#               ──build──▶ WireRequest      (provider-specific)
#               ──invoke──▶ raw JSON        (core/invoker.py)
#               ──normalize──▶ NormalizedResult  (provider-specific)
#
#   Subclasses (core/gemini.py, core/perplexity.py) only supply the two
#   provider-specific steps plus their parameter schema.  Credential lookup, logging,
#   timeouts and error reporting all live here.
#
# STATE:
#   An adapter holds only immutable config.  Nothing is stored between
#   calls, so concurrent invocations need no locking.
#
# WHY NOT IMPORT FASTMCP?
#   core/ stays framework-agnostic.  The MCP Context is duck-typed: anything
#   with async ``info(msg)`` / ``error(msg)`` methods works (see InvocationLog).
# =============================================================================

import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

import httpx

from core.errors import ConfigurationError, DeepResearchError
from core.invoker import CancellationTimer, HttpInvoker
from core.models import NormalizedResult, OperationRequest, ProviderConfig, WireRequest
from core.params import ToolParams, validate_params
from core.redaction import mask_secret, mask_url


def derive_temperature(depth: Optional[float], default: float) -> float:
    """Map depth 0-10 onto temperature 0-1, clamped; no depth → ``default``."""
    if depth is None:
        return default
    return min(max(depth / 10, 0.0), 1.0)


def derive_max_tokens(requested: Optional[int], default: int) -> int:
    return requested if requested is not None else default


class InvocationLog:
    """Sends each log line to Python logging and, if given, the MCP client."""

    def __init__(self, context: Any = None, name: str = "provider"):
        self._context = context
        self._logger = logging.getLogger(f"{__name__}.{name}")

    async def info(self, message: str) -> None:
        self._logger.info(message)
        if self._context is not None:
            await self._context.info(message)

    async def error(self, message: str) -> None:
        self._logger.error(message)
        if self._context is not None:
            await self._context.error(message)


class ProviderAdapter(ABC):
    """One deep-research operation bound to exactly one provider."""

    #: pydantic schema the tool arguments are validated against
    params_schema: type[ToolParams]

    def __init__(
        self,
        config: ProviderConfig,
        environ: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timer_factory=CancellationTimer,
    ):
        self.config = config
        self._environ = environ
        self._invoker = HttpInvoker(
            timeout_seconds=config.timeout_seconds,
            transport=transport,
            timer_factory=timer_factory,
        )

    # -------------------------------------------------------------------------
    # Provider-specific steps
    # -------------------------------------------------------------------------
    @abstractmethod
    def build_request(self, request: OperationRequest, api_key: str) -> WireRequest:
        """Translate a validated request into the provider's wire format."""

    @abstractmethod
    def extract_text(self, payload: Any) -> NormalizedResult:
        """Pull the generated text out of a 2xx payload.

        Must raise ContentExtractionError rather than return empty text.
        """

    # -------------------------------------------------------------------------
    # Shared pipeline
    # -------------------------------------------------------------------------
    def api_key(self) -> str:
        """Read the credential at call time; never defaulted."""
        env = os.environ if self._environ is None else self._environ
        key = (env.get(self.config.credential_env) or "").strip()
        if not key:
            raise ConfigurationError(f"{self.config.credential_env} environment variable is not set")
        return key

    async def run(self, arguments: Optional[dict[str, Any]], log: Optional[InvocationLog] = None) -> NormalizedResult:
        log = log or InvocationLog(name=self.config.name)
        api_key = None
        try:
            request = validate_params(self.params_schema, arguments)
            api_key = self.api_key()
            wire = self.build_request(request, api_key)
            await self._log_request(log, wire, api_key)
            status, payload = await self._invoker.post_json(wire)
            result = self.extract_text(payload)
        except DeepResearchError as exc:
            await log.error(f"❌ {self.config.name} call failed: {mask_url(str(exc), api_key)}")
            raise
        await log.info(f"✅ Status: {status} | Response length: {len(result.text)} chars")
        return result

    async def execute(self, arguments: Optional[dict[str, Any]], context: Any = None) -> dict:
        """Dispatcher contract: ``execute(params, context) -> {"content": [...]}``."""
        result = await self.run(arguments, InvocationLog(context, name=self.config.name))
        return result.as_content()

    async def _log_request(self, log: InvocationLog, wire: WireRequest, api_key: str) -> None:
        details = [f"Model: {wire.model}"]
        if wire.mode is not None:
            details.append(f"Mode: {wire.mode}")
        if wire.temperature is not None:
            details.append(f"Temperature: {wire.temperature:g}")
        await log.info(f"🔗 ENDPOINT: POST {wire.log_url}")
        await log.info(f"🔐 API Key: {mask_secret(api_key)} | " + " | ".join(details))
        await log.info(f"📝 Prompt: {wire.preview}")
