"""Unit tests for the chunk transport."""

import asyncio
import httpx
import pytest
from uranium_sdk.config.settings import Settings
from uranium_sdk.core.cancellation import CancellationToken
from uranium_sdk.core.exceptions import ErrorKind, UraniumError
from uranium_sdk.repositories import storage_repo
from uranium_sdk.repositories.storage_repo import ChunkTransport

PART_URL = "https://storage.test/part/1"


def make_transport(handler, **overrides) -> ChunkTransport:
    settings = Settings(api_key="key", chunk_progress_slice_bytes=4, **overrides)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ChunkTransport(client, settings)


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays instead of sleeping."""
    delays = []

    async def fake_sleep(delay, token=None):
        delays.append(delay)

    monkeypatch.setattr(storage_repo, "cancellable_sleep", fake_sleep)
    return delays


@pytest.mark.asyncio
async def test_send_returns_normalized_etag(sleeps):
    """The quoted ETag header is unquoted."""
    received = {}

    async def handler(request):
        received["body"] = await request.aread()
        received["headers"] = request.headers
        return httpx.Response(200, headers={"ETag": '"abc123"'})

    transport = make_transport(handler)
    etag = await transport.send(PART_URL, b"0123456789")

    assert etag == "abc123"
    assert received["body"] == b"0123456789"
    assert received["headers"]["content-type"] == "application/octet-stream"
    assert received["headers"]["content-length"] == "10"
    assert "x-auth-token" not in received["headers"]
    assert sleeps == []


@pytest.mark.asyncio
async def test_send_reports_chunk_progress(sleeps):
    """Progress fractions rise to 1.0 as slices are sent."""
    async def handler(request):
        await request.aread()
        return httpx.Response(200, headers={"etag": "e"})

    fractions = []
    transport = make_transport(handler)
    await transport.send(PART_URL, b"0123456789", on_progress=fractions.append)

    assert fractions == [0.4, 0.8, 1.0]


@pytest.mark.asyncio
async def test_send_retries_with_exponential_backoff(sleeps):
    """Two failures then success wait 1s and 2s."""
    attempts = []

    async def handler(request):
        attempts.append(1)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(200, headers={"ETag": "ok"})

    transport = make_transport(handler)
    etag = await transport.send(PART_URL, b"data")

    assert etag == "ok"
    assert len(attempts) == 3
    assert sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_send_gives_up_after_max_attempts(sleeps):
    """Three failed attempts raise a retries-exhausted error."""
    attempts = []

    async def handler(request):
        attempts.append(1)
        return httpx.Response(500)

    transport = make_transport(handler)
    with pytest.raises(UraniumError) as exc_info:
        await transport.send(PART_URL, b"data")

    assert exc_info.value.kind == ErrorKind.RETRIES_EXHAUSTED
    assert exc_info.value.code == "UPLOAD_FAILED"
    assert exc_info.value.details["retry_attempts"] == 3
    assert len(attempts) == 3
    assert sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_send_treats_missing_etag_as_failure(sleeps):
    """A 200 without ETag is retried, then reported as ETAG_MISSING."""
    async def handler(request):
        return httpx.Response(200)

    transport = make_transport(handler)
    with pytest.raises(UraniumError) as exc_info:
        await transport.send(PART_URL, b"data")

    assert exc_info.value.kind == ErrorKind.RETRIES_EXHAUSTED
    assert exc_info.value.code == "ETAG_MISSING"


@pytest.mark.asyncio
async def test_send_retries_network_errors(sleeps):
    """Transport errors are retried like HTTP errors."""
    attempts = []

    async def handler(request):
        attempts.append(1)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, headers={"ETag": "ok"})

    transport = make_transport(handler)
    assert await transport.send(PART_URL, b"data") == "ok"
    assert sleeps == [1.0]


@pytest.mark.asyncio
async def test_send_respects_configured_attempts(sleeps):
    """Attempts and base delay come from settings."""
    async def handler(request):
        return httpx.Response(500)

    transport = make_transport(handler, chunk_max_attempts=2, chunk_retry_base_delay=0.5)
    with pytest.raises(UraniumError):
        await transport.send(PART_URL, b"data")

    assert sleeps == [0.5]


@pytest.mark.asyncio
async def test_send_rejects_cancelled_token_before_put(sleeps):
    """A cancelled token stops the transport before any request."""
    attempts = []

    async def handler(request):
        attempts.append(1)
        return httpx.Response(200, headers={"ETag": "ok"})

    token = CancellationToken()
    token.cancel()

    transport = make_transport(handler)
    with pytest.raises(UraniumError) as exc_info:
        await transport.send(PART_URL, b"data", cancel_token=token)

    assert exc_info.value.kind == ErrorKind.CANCELLED
    assert exc_info.value.code == "UPLOAD_ABORTED"
    assert attempts == []


@pytest.mark.asyncio
async def test_send_aborts_in_flight_request():
    """Cancelling during a hanging PUT aborts it promptly."""
    async def handler(request):
        await asyncio.sleep(3600)
        return httpx.Response(200, headers={"ETag": "late"})

    token = CancellationToken()
    asyncio.get_running_loop().call_later(0.05, token.cancel)

    transport = make_transport(handler)
    with pytest.raises(UraniumError) as exc_info:
        await asyncio.wait_for(transport.send(PART_URL, b"data", cancel_token=token), timeout=5)

    assert exc_info.value.kind == ErrorKind.CANCELLED


@pytest.mark.asyncio
async def test_backoff_wait_is_cut_short_by_cancel():
    """Cancelling during the backoff wait ends the retries."""
    attempts = []

    async def handler(request):
        attempts.append(1)
        return httpx.Response(500)

    token = CancellationToken()
    asyncio.get_running_loop().call_later(0.05, token.cancel)

    transport = make_transport(handler, chunk_retry_base_delay=60.0)
    with pytest.raises(UraniumError) as exc_info:
        await asyncio.wait_for(transport.send(PART_URL, b"data", cancel_token=token), timeout=5)

    assert exc_info.value.kind == ErrorKind.CANCELLED
    assert attempts == [1]
