# =============================================================================
# core/invoker.py  —  Provider Invoker (the one outbound HTTP call)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Sends a built WireRequest as a single POST and returns the decoded JSON
#   body.  It never retries.  Every way the call can go wrong becomes a
#   TransportError:
#
#     timeout            → "request timed out after 30s"     (status None)
#     no response        → underlying httpx error text       (status None)
#     non-2xx response   → status + best-effort error detail
#
# DEADLINES:
#   When the provider config has ``timeout_seconds``, a CancellationTimer is
#   armed before the request and released in ``finally``, so the timer never
#   outlives the call whichever way it ends.  Without ``timeout_seconds`` the
#   httpx client is built with ``timeout=None`` and the call has no deadline.
# =============================================================================

import asyncio
import logging
from typing import Any, Callable, Optional

import httpx

from core.errors import ContentExtractionError, TransportError
from core.models import WireRequest
from core.redaction import mask_url

# httpx logs every request URL at INFO, and Gemini URLs carry the API key.
logging.getLogger("httpx").setLevel(logging.WARNING)


class CancellationTimer:
    """Cancels the current task after ``seconds`` unless released first."""

    def __init__(self, seconds: float):
        self.seconds = seconds
        self.fired = False
        self._handle: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

    def arm(self) -> None:
        self._task = asyncio.current_task()
        self._handle = asyncio.get_running_loop().call_later(self.seconds, self._fire)

    def _fire(self) -> None:
        self.fired = True
        if self._task is not None:
            self._task.cancel()

    def release(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def absorb_cancellation(self) -> None:
        """Undo the cancellation this timer requested (Python 3.11+ bookkeeping)."""
        uncancel = getattr(self._task, "uncancel", None)
        if uncancel is not None:
            uncancel()


class HttpInvoker:
    """Performs exactly one POST per call.

    ``transport`` is passed straight to ``httpx.AsyncClient`` so tests can use
    ``httpx.MockTransport``; ``timer_factory`` lets them observe the timer.
    """

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timer_factory: Callable[[float], CancellationTimer] = CancellationTimer,
    ):
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._timer_factory = timer_factory

    async def post_json(self, request: WireRequest) -> tuple[int, Any]:
        """POST ``request`` and return ``(status, decoded_json_body)``."""
        timer = None
        if self.timeout_seconds is not None:
            timer = self._timer_factory(self.timeout_seconds)
            timer.arm()
        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.post(request.url, headers=request.headers, json=request.body)
        except asyncio.CancelledError:
            if timer is None or not timer.fired:
                raise
            timer.absorb_cancellation()
            raise TransportError(f"request timed out after {self.timeout_seconds:g}s") from None
        except httpx.HTTPError as exc:
            raise TransportError(_describe_exception(exc)) from exc
        finally:
            if timer is not None:
                timer.release()

        if not response.is_success:
            detail = error_detail(response)
            message = f"HTTP {response.status_code}"
            if detail:
                message = f"{message}: {detail}"
            raise TransportError(message, status=response.status_code, detail=detail)

        try:
            return response.status_code, response.json()
        except ValueError:
            raise ContentExtractionError(
                f"provider returned a non-JSON body (HTTP {response.status_code})"
            ) from None


def error_detail(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error body, or return ''."""
    try:
        payload = response.json()
    except ValueError:
        return ""
    if not isinstance(payload, dict):
        return ""
    error = payload.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return message if isinstance(message, str) else ""
    if isinstance(error, str):
        return error
    detail = payload.get("detail")
    return detail if isinstance(detail, str) else ""


def _describe_exception(exc: Exception) -> str:
    text = mask_url(str(exc))
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__
