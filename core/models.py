# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses describe every piece of data that flows through one
# deep-research invocation:
#
#   tool arguments ──▶ OperationRequest ──▶ WireRequest ──▶ NormalizedResult
#                            ▲
#                      ProviderConfig / ProviderProfile  (static, per provider)
#
# LIFECYCLE:
#   Requests, wire requests and results are created fresh for each call and
#   thrown away afterwards.  Configs are frozen, so two adapters with
#   different configurations can live side by side (handy in tests).
# =============================================================================

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping, Optional

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class Message:
    """One turn of a chat conversation."""

    role: Role
    content: str

    def as_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


# -----------------------------------------------------------------------------
# OperationRequest — validated, provider-agnostic tool input
# -----------------------------------------------------------------------------
# Only core/params.py builds these, so every instance has already passed the
# schema.  Out-of-range ``depth`` values are allowed through here and clamped
# later by the request builder.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class OperationRequest:
    query: Optional[str] = None
    conversation_history: tuple[Message, ...] = ()
    mode: Optional[str] = None
    depth: Optional[float] = None
    max_output_tokens: Optional[int] = None


@dataclass(frozen=True)
class ProviderProfile:
    """Model + default system instruction for one mode."""

    model: str
    system_preamble: str = ""


# -----------------------------------------------------------------------------
# ProviderConfig — everything static about one provider
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ProviderConfig:
    name: str
    endpoint: str
    credential_env: str
    profiles: Mapping[str, ProviderProfile]
    default_mode: str
    # None means "no explicit deadline": the call is bounded only by whatever
    # the HTTP transport does on its own.
    timeout_seconds: Optional[float] = None
    default_temperature: float = 0.7
    default_max_output_tokens: int = 2048

    def __post_init__(self):
        if self.default_mode not in self.profiles:
            raise ValueError(
                f"default mode {self.default_mode!r} has no profile in {self.name} config"
            )
        # Freeze the table too, not just the attribute.
        object.__setattr__(self, "profiles", MappingProxyType(dict(self.profiles)))

    def profile_for(self, mode: Optional[str]) -> ProviderProfile:
        """Return the profile for ``mode``; unknown or missing modes get the default."""
        if mode is not None and mode in self.profiles:
            return self.profiles[mode]
        return self.profiles[self.default_mode]


@dataclass
class WireRequest:
    """A fully built provider request plus its pre-masked log fields.

    ``url`` and ``headers`` carry the real credential and must never be
    logged; use ``log_url`` instead.
    """

    url: str
    headers: dict[str, str]
    body: dict[str, Any]
    log_url: str
    model: str
    preview: str
    temperature: Optional[float] = None
    mode: Optional[str] = None


@dataclass
class NormalizedResult:
    """The single text payload handed back to the MCP client."""

    text: str
    citations: list[str] = field(default_factory=list)

    def as_content(self) -> dict[str, list[dict[str, str]]]:
        return {"content": [{"type": "text", "text": self.text}]}
