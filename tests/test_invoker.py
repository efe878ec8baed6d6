"""Tests for the HTTP invoker: deadlines, timer cleanup, transport failures."""

import asyncio

import httpx
import pytest

from core.errors import ContentExtractionError, TransportError
from core.invoker import CancellationTimer, HttpInvoker, error_detail
from core.models import WireRequest
from core.perplexity import PerplexityDeepProvider
from core.profiles import perplexity_config
from tests.mocks import Recorder, perplexity_payload, reply


class RecordingTimer(CancellationTimer):
    """CancellationTimer that counts how often it is released."""

    created = []

    def __init__(self, seconds):
        super().__init__(seconds)
        self.releases = 0
        RecordingTimer.created.append(self)

    def release(self):
        self.releases += 1
        super().release()


@pytest.fixture(autouse=True)
def _reset_timers():
    RecordingTimer.created = []


def wire(url="https://provider.test/generate?key=AIzaSyTEST0google0key0123456789abcd"):
    return WireRequest(url=url, headers={}, body={"q": 1}, log_url="", model="m", preview="")


async def hang(request):
    await asyncio.sleep(10)
    return httpx.Response(200, json={})


@pytest.mark.asyncio
async def test_timeout_raises_transport_error_and_releases_timer_once(env):
    provider = PerplexityDeepProvider(
        perplexity_config(timeout_seconds=0.05),
        environ=env,
        transport=httpx.MockTransport(hang),
        timer_factory=RecordingTimer,
    )

    with pytest.raises(TransportError, match="timed out after 0.05s") as excinfo:
        await provider.run({"query": "slow question"})

    assert excinfo.value.status is None
    [timer] = RecordingTimer.created
    assert timer.fired
    assert timer.releases == 1


@pytest.mark.asyncio
async def test_timer_released_once_on_success(env):
    recorder = Recorder(reply(payload=perplexity_payload("fast")))
    provider = PerplexityDeepProvider(
        perplexity_config(), environ=env, transport=recorder.transport, timer_factory=RecordingTimer
    )

    result = await provider.run({"query": "q"})

    assert result.text == "fast"
    [timer] = RecordingTimer.created
    assert timer.seconds == 30.0
    assert not timer.fired
    assert timer.releases == 1


@pytest.mark.asyncio
async def test_timer_released_once_on_http_error():
    invoker = HttpInvoker(
        timeout_seconds=30,
        transport=httpx.MockTransport(reply(500, {"error": "boom"})),
        timer_factory=RecordingTimer,
    )

    with pytest.raises(TransportError, match="HTTP 500: boom"):
        await invoker.post_json(wire())

    assert RecordingTimer.created[0].releases == 1


@pytest.mark.asyncio
async def test_no_deadline_means_no_timer():
    invoker = HttpInvoker(
        timeout_seconds=None,
        transport=httpx.MockTransport(reply(payload={"ok": True})),
        timer_factory=RecordingTimer,
    )

    assert await invoker.post_json(wire()) == (200, {"ok": True})
    assert RecordingTimer.created == []


@pytest.mark.asyncio
async def test_outside_cancellation_is_not_a_timeout():
    invoker = HttpInvoker(timeout_seconds=30, transport=httpx.MockTransport(hang), timer_factory=RecordingTimer)

    task = asyncio.ensure_future(invoker.post_json(wire()))
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert RecordingTimer.created[0].releases == 1


@pytest.mark.asyncio
async def test_network_failure_carries_cause_and_masks_key():
    def refuse(request):
        raise httpx.ConnectError(f"cannot reach {request.url}", request=request)

    invoker = HttpInvoker(transport=httpx.MockTransport(refuse))

    with pytest.raises(TransportError) as excinfo:
        await invoker.post_json(wire())

    message = str(excinfo.value)
    assert message.startswith("ConnectError: cannot reach")
    assert "AIzaSyTEST0google0key0123456789abcd" not in message
    assert excinfo.value.status is None


@pytest.mark.asyncio
async def test_exactly_one_post_and_no_retry():
    recorder = Recorder(reply(503, {"error": {"message": "overloaded"}}))
    invoker = HttpInvoker(transport=recorder.transport)

    with pytest.raises(TransportError) as excinfo:
        await invoker.post_json(wire())

    assert excinfo.value.status == 503
    assert len(recorder.requests) == 1


@pytest.mark.asyncio
async def test_non_json_success_body():
    invoker = HttpInvoker(transport=httpx.MockTransport(reply(200, text="not json")))

    with pytest.raises(ContentExtractionError):
        await invoker.post_json(wire())


@pytest.mark.parametrize(
    "response, expected",
    [
        (httpx.Response(400, json={"error": {"message": "bad key"}}), "bad key"),
        (httpx.Response(400, json={"error": "plain"}), "plain"),
        (httpx.Response(422, json={"detail": "unprocessable"}), "unprocessable"),
        (httpx.Response(400, json={"error": {"code": 400}}), ""),
        (httpx.Response(400, json=["list"]), ""),
        (httpx.Response(400, text="<html>"), ""),
        (httpx.Response(400, text=""), ""),
    ],
)
def test_error_detail_is_best_effort(response, expected):
    assert error_detail(response) == expected
