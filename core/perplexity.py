# =============================================================================
# core/perplexity.py  —  Perplexity "chat/completions" Provider
# =============================================================================
#
# CONVERSATION-DRIVEN:
#   - If the caller sends ``messages``, they are forwarded verbatim, in order,
#     and ``query`` is ignored even when present.
#   - Otherwise a two-turn conversation is synthesized: the mode's system
#     preamble, then the query as the user turn.
#
#   ``mode`` picks both the model and the preamble (core/profiles.py).  An
#   unknown mode quietly uses the research profile.
#
# CITATIONS:
#   Perplexity returns source URLs in a top-level ``citations`` list.  When
#   present they are appended to the answer as a numbered block:
#
#       <answer>
#
#       Citations:
#       [1] https://...
#       [2] https://...
# =============================================================================

from typing import Any

from core.errors import ContentExtractionError
from core.models import Message, NormalizedResult, OperationRequest, WireRequest
from core.params import PerplexityDeepParams
from core.provider import ProviderAdapter
from core.redaction import mask_url, preview_text


def build_messages(request: OperationRequest, system_preamble: str) -> list[Message]:
    if request.conversation_history:
        return list(request.conversation_history)
    return [
        Message(role="system", content=system_preamble),
        Message(role="user", content=request.query or ""),
    ]


def format_citations(text: str, citations: list[str]) -> str:
    if not citations:
        return text
    lines = [f"[{index}] {citation}" for index, citation in enumerate(citations, start=1)]
    return text + "\n\nCitations:\n" + "\n".join(lines)


class PerplexityDeepProvider(ProviderAdapter):
    params_schema = PerplexityDeepParams

    def build_request(self, request: OperationRequest, api_key: str) -> WireRequest:
        profile = self.config.profile_for(request.mode)
        messages = build_messages(request, profile.system_preamble)

        # Preview whatever the model will actually answer: the last user turn.
        user_turns = [m.content for m in messages if m.role == "user"]
        preview_source = user_turns[-1] if user_turns else messages[-1].content

        return WireRequest(
            url=self.config.endpoint,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            body={"model": profile.model, "messages": [m.as_dict() for m in messages]},
            log_url=mask_url(self.config.endpoint, api_key),
            model=profile.model,
            preview=preview_text(preview_source),
            mode=request.mode or self.config.default_mode,
        )

    def extract_text(self, payload: Any) -> NormalizedResult:
        if not isinstance(payload, dict):
            raise ContentExtractionError("Perplexity response was not a JSON object")

        choices = payload.get("choices")
        first = choices[0] if isinstance(choices, list) and choices else None
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content:
            raise ContentExtractionError("Perplexity response contained no message content")

        raw_citations = payload.get("citations")
        citations = [str(c) for c in raw_citations] if isinstance(raw_citations, list) else []
        return NormalizedResult(text=format_citations(content, citations), citations=citations)
