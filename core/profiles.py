# =============================================================================
# core/profiles.py  —  Provider Configuration Tables
# =============================================================================
#
# Each provider gets a factory that returns a FROZEN ProviderConfig.  There are
# no module-level lookup tables: callers (tools/mcp_server.py, tests) build the
# config they need and hand it to the adapter.
#
# TIMEOUT ASYMMETRY:
#   Perplexity calls carry a 30s deadline.  Gemini calls carry none unless
#   an operator sets one; they are bounded only by the transport.  This is
#   kept as-is on purpose rather than silently equalised.
# =============================================================================

from typing import Optional

from core.models import ProviderConfig, ProviderProfile

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
GEMINI_DEFAULT_MODEL = "gemini-2.0-flash"

PERPLEXITY_ENDPOINT = "https://api.perplexity.ai/chat/completions"
PERPLEXITY_TIMEOUT_SECONDS = 30.0


def gemini_config(
    model: str = GEMINI_DEFAULT_MODEL,
    timeout_seconds: Optional[float] = None,
) -> ProviderConfig:
    """Config for the single-shot Gemini ``generateContent`` provider."""
    return ProviderConfig(
        name="gemini",
        endpoint=GEMINI_ENDPOINT,
        credential_env="GOOGLE_API_KEY",
        profiles={"default": ProviderProfile(model=model)},
        default_mode="default",
        timeout_seconds=timeout_seconds,
    )


def perplexity_config(timeout_seconds: Optional[float] = PERPLEXITY_TIMEOUT_SECONDS) -> ProviderConfig:
    """Config for the Perplexity chat-completions provider, one profile per mode."""
    research = ProviderProfile(
        model="sonar-deep-research",
        system_preamble=(
            "You are a research assistant that provides comprehensive information with citations."
        ),
    )
    return ProviderConfig(
        name="perplexity",
        endpoint=PERPLEXITY_ENDPOINT,
        credential_env="PERPLEXITY_API_KEY",
        profiles={
            "research": research,
            "analysis": ProviderProfile(
                model="sonar-pro",
                system_preamble=(
                    "You are an analytical assistant that provides detailed analysis and insights."
                ),
            ),
            "creative": ProviderProfile(
                model="sonar-pro",
                system_preamble=(
                    "You are a creative assistant that provides imaginative and expressive responses."
                ),
            ),
        },
        default_mode="research",
        timeout_seconds=timeout_seconds,
    )
