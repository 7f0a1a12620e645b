from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from handlers.async_comm import AsyncCommError, AsyncCommInvalidContentTypeError, AsyncCommTimeoutError, AsyncHttp


class FakeRequestContext:
    def __init__(self, response: Any = None, error: BaseException | None = None) -> None:
        self.response = response
        self.error = error

    async def __aenter__(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.response

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb


class FakeSession:
    def __init__(self, context: FakeRequestContext) -> None:
        self.context = context
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs) -> FakeRequestContext:
        self.calls.append(kwargs)
        return self.context


def _response(body: bytes, content_type: str = "application/json", status: int = 200) -> SimpleNamespace:
    return SimpleNamespace(
        headers={"Content-Type": content_type},
        status=status,
        read=AsyncMock(return_value=body),
    )


def _use_session(monkeypatch: pytest.MonkeyPatch, session: FakeSession) -> None:
    monkeypatch.setattr(AsyncHttp, "session", property(lambda self: session))


@pytest.mark.asyncio
async def test_session_is_created_lazily_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="TransClient")

    http = AsyncHttp()
    assert http.is_open is False
    assert not any("session initialized" in rec.message for rec in caplog.records)

    _ = http.session

    assert http.is_open is True
    assert any("AsyncHttp session initialized" in rec.message for rec in caplog.records)
    await http.close()


@pytest.mark.asyncio
async def test_session_is_recreated_after_close() -> None:
    http = AsyncHttp()

    first = http.session
    await http.close()
    assert http.is_open is False

    second = http.session
    assert second is not first
    assert http.is_open is True
    await http.close()

    async with http:
        second = http.session
        assert second is not first
    assert http.is_open is False


@pytest.mark.asyncio
async def test_request_decodes_json_and_passes_arguments(monkeypatch: pytest.MonkeyPatch) -> None:
    session = FakeSession(FakeRequestContext(_response(b'[[["Hello world","Hola mundo"]],null,"es"]')))
    _use_session(monkeypatch, session)
    http = AsyncHttp()

    body: Any = await http.request(
        "GET",
        url="https://example.invalid/translate",
        total_timeout=8.0,
        params={"q": "Hola mundo"},
        headers={"User-Agent": "agent"},
    )

    assert body == [[["Hello world", "Hola mundo"]], None, "es"]
    call: dict[str, Any] = session.calls[0]
    assert call["method"] == "GET"
    assert call["params"] == {"q": "Hola mundo"}
    assert call["headers"] == {"User-Agent": "agent"}
    assert call["timeout"].total == 8.0
    assert call["timeout"].connect is None


@pytest.mark.asyncio
async def test_request_maps_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_session(monkeypatch, FakeSession(FakeRequestContext(error=TimeoutError())))

    with pytest.raises(AsyncCommTimeoutError) as excinfo:
        await AsyncHttp().request("GET", url="https://example.invalid", total_timeout=1.0)

    assert excinfo.value.status is None


@pytest.mark.asyncio
async def test_request_maps_error_status(monkeypatch: pytest.MonkeyPatch) -> None:
    error = aiohttp.ClientResponseError(request_info=MagicMock(), history=(), status=429, message="Too Many")
    _use_session(monkeypatch, FakeSession(FakeRequestContext(error=error)))

    with pytest.raises(AsyncCommError) as excinfo:
        await AsyncHttp().request("GET", url="https://example.invalid", total_timeout=1.0)

    assert excinfo.value.status == 429
    assert not isinstance(excinfo.value, AsyncCommTimeoutError)


@pytest.mark.asyncio
async def test_request_maps_connection_failure_without_status(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_session(monkeypatch, FakeSession(FakeRequestContext(error=aiohttp.ClientConnectionError("refused"))))

    with pytest.raises(AsyncCommError) as excinfo:
        await AsyncHttp().request("POST", url="https://example.invalid", total_timeout=1.0, json={"q": "x"})

    assert excinfo.value.status is None


@pytest.mark.asyncio
async def test_request_maps_truncated_body_without_status(monkeypatch: pytest.MonkeyPatch) -> None:
    response = _response(b"")
    response.read = AsyncMock(side_effect=aiohttp.ClientPayloadError("Response payload is not completed"))
    _use_session(monkeypatch, FakeSession(FakeRequestContext(response)))

    with pytest.raises(AsyncCommError) as excinfo:
        await AsyncHttp().request("GET", url="https://example.invalid", total_timeout=1.0)

    assert excinfo.value.status is None
    assert not isinstance(excinfo.value, AsyncCommTimeoutError)
    assert isinstance(excinfo.value.__cause__, aiohttp.ClientPayloadError)


@pytest.mark.asyncio
async def test_decode_response_rejects_unknown_content_type() -> None:
    http = AsyncHttp()

    with pytest.raises(AsyncCommInvalidContentTypeError) as excinfo:
        await http.decode_response(_response(b"\x00\x01", content_type="application/octet-stream"))

    assert excinfo.value.status == 200


@pytest.mark.asyncio
async def test_decode_response_rejects_broken_json() -> None:
    http = AsyncHttp()

    with pytest.raises(AsyncCommInvalidContentTypeError):
        await http.decode_response(_response(b"{not json"))


@pytest.mark.asyncio
async def test_decode_response_handles_text_and_empty_bodies() -> None:
    http = AsyncHttp()

    assert await http.decode_response(_response(b"plain", content_type="text/plain; charset=utf-8")) == "plain"
    assert await http.decode_response(_response(b"")) is None

