# =============================================================================
# core/gemini.py  —  Google Gemini "generateContent" Provider
# =============================================================================
#
# PROFILE-DRIVEN, SINGLE-SHOT:
#   The caller's query becomes one user turn.  ``depth`` (0-10) becomes the
#   sampling temperature (0-1) and ``max_output_tokens`` caps the reply.
#
# CREDENTIAL:
#   Gemini takes the API key as a ``key=`` URL parameter, so the URL itself is
#   secret.  Only ``WireRequest.log_url`` (masked) is ever logged.
#
# NO DEADLINE:
#   gemini_config() leaves ``timeout_seconds`` unset, so this call has no
#   explicit timeout (see core/profiles.py).
# =============================================================================

from typing import Any

from core.errors import ContentExtractionError
from core.models import NormalizedResult, OperationRequest, WireRequest
from core.params import GoogleDeepParams
from core.provider import ProviderAdapter, derive_max_tokens, derive_temperature
from core.redaction import mask_url, preview_text


class GeminiDeepProvider(ProviderAdapter):
    params_schema = GoogleDeepParams

    def build_request(self, request: OperationRequest, api_key: str) -> WireRequest:
        profile = self.config.profile_for(request.mode)
        temperature = derive_temperature(request.depth, self.config.default_temperature)
        max_tokens = derive_max_tokens(request.max_output_tokens, self.config.default_max_output_tokens)

        body: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": request.query}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        if profile.system_preamble:
            body["systemInstruction"] = {"parts": [{"text": profile.system_preamble}]}

        url = f"{self.config.endpoint.format(model=profile.model)}?key={api_key}"
        return WireRequest(
            url=url,
            headers={"Content-Type": "application/json"},
            body=body,
            log_url=mask_url(url, api_key),
            model=profile.model,
            preview=preview_text(request.query or ""),
            temperature=temperature,
        )

    def extract_text(self, payload: Any) -> NormalizedResult:
        """Join the text parts of the first candidate.

        Gemini answers 200 even when it refuses: a blocked prompt has no
        candidates, a safety stop has a candidate with no parts.  Both are
        reported with the reason Gemini gave.
        """
        if not isinstance(payload, dict):
            raise ContentExtractionError("Gemini response was not a JSON object")

        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            reason = (payload.get("promptFeedback") or {}).get("blockReason")
            if reason:
                raise ContentExtractionError(f"Gemini blocked the prompt (blockReason: {reason})")
            raise ContentExtractionError("Gemini response contained no candidates")

        candidate = candidates[0] if isinstance(candidates[0], dict) else {}
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(
            part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
        if not text:
            reason = candidate.get("finishReason")
            suffix = f" (finishReason: {reason})" if reason else ""
            raise ContentExtractionError(f"Gemini response contained no generated text{suffix}")
        return NormalizedResult(text=text)
