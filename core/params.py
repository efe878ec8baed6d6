# =============================================================================
# core/params.py  —  Parameter Schemas & Validation
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares the argument schema of each deep-research tool and turns raw
#   tool arguments into an OperationRequest, or rejects them before any
#   request is built.
#
# VALIDATION POLICY:
#   - Wrong SHAPE is a hard error: missing required fields, wrong primitive
#     types (a number where text is expected, a bool where a number is
#     expected), unknown fields, roles or modes outside their enum.
#   - Out-of-range MAGNITUDE is not: ``depth`` is documented as 0-10 but a
#     12 or a -3 is accepted here and clamped by the request builder.
# =============================================================================

from typing import Any, Literal, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.errors import ValidationError
from core.models import Message, OperationRequest

Mode = Literal["research", "analysis", "creative"]


class ToolParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def to_request(self) -> OperationRequest:
        raise NotImplementedError


class MessageParam(BaseModel):
    model_config = ConfigDict(extra="forbid")

    role: Literal["system", "user", "assistant"] = Field(description="Role of the message")
    content: str = Field(strict=True, description="The content of the message")


class GoogleDeepParams(ToolParams):
    """Arguments accepted by the ``google-deep`` tool."""

    query: str = Field(strict=True, description="The prompt to send to Google Gemini API")
    depth: Optional[float] = Field(
        default=None,
        strict=True,
        description="Controls the creativity of the response (0-10, higher values increase temperature)",
    )
    max_output_tokens: Optional[int] = Field(
        default=None,
        strict=True,
        ge=1,
        description="Maximum number of tokens to generate (default: 2048)",
    )

    def to_request(self) -> OperationRequest:
        return OperationRequest(
            query=self.query,
            depth=self.depth,
            max_output_tokens=self.max_output_tokens,
        )


class PerplexityDeepParams(ToolParams):
    """Arguments accepted by the ``perplexity-deep`` tool."""

    query: Optional[str] = Field(default=None, strict=True, description="The query to process")
    messages: Optional[list[MessageParam]] = Field(
        default=None,
        description="Array of conversation messages (if provided, will override query)",
    )
    mode: Mode = Field(default="research", description="The processing mode")

    @model_validator(mode="after")
    def check_query_or_messages(self):
        # Both may be given (messages win); at least one must be usable.
        if not self.messages and self.query is None:
            raise ValueError("either 'query' or a non-empty 'messages' list is required")
        return self

    def to_request(self) -> OperationRequest:
        history = tuple(Message(role=m.role, content=m.content) for m in self.messages or ())
        return OperationRequest(
            query=self.query,
            conversation_history=history,
            mode=self.mode,
        )


def validate_params(schema: type[ToolParams], raw: Optional[dict[str, Any]]) -> OperationRequest:
    """Validate ``raw`` tool arguments against ``schema``.

    Raises:
        ValidationError: listing every offending field.  Nothing downstream
            runs when this is raised.
    """
    if raw is not None and not isinstance(raw, dict):
        raise ValidationError(f"arguments must be an object, got {type(raw).__name__}")
    try:
        params = schema.model_validate(raw or {})
    except pydantic.ValidationError as exc:
        problems = [_describe(err) for err in exc.errors()]
        raise ValidationError("invalid arguments: " + "; ".join(problems), problems) from None
    return params.to_request()


def _describe(err: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in err.get("loc", ())) or "arguments"
    return f"{location}: {err.get('msg', 'invalid value')}"
