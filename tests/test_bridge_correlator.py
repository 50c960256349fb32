import asyncio
import json

import pytest

from remnotebridge.bridge.correlator import (
    DEFAULT_TIMEOUT_MS,
    Exchange,
    ExchangeState,
    send_create_request,
)
from remnotebridge.utils.exceptions import (
    ApplicationError,
    FailureKind,
    ProtocolError,
    RequestTimeoutError,
    TransportError,
    ValidationError,
)

from conftest import FakeConnection


@pytest.mark.asyncio
async def test_success_reply_is_returned_verbatim_and_connection_closed(fake_connector):
    reply = {"success": True, "remId": "r1", "extra": {"a": 1}}
    conn = FakeConnection([reply])
    connect = fake_connector(conn)

    out = await send_create_request("hello", None, 3333, connect=connect)

    assert out == reply
    assert connect.urls == ["ws://localhost:3333"]
    assert [json.loads(frame) for frame in conn.sent] == [
        {"action": "createRem", "text": "hello", "parentId": None}
    ]
    assert conn.close_calls == 1


@pytest.mark.asyncio
async def test_parent_id_is_sent_and_empty_parent_normalized(fake_connector):
    conn = FakeConnection([{"success": True}])
    await send_create_request("child", "parent-1", 4000, connect=fake_connector(conn))
    assert json.loads(conn.sent[0])["parentId"] == "parent-1"

    conn = FakeConnection([{"success": True}])
    await send_create_request("top", "", 4000, connect=fake_connector(conn))
    assert json.loads(conn.sent[0])["parentId"] is None


@pytest.mark.asyncio
async def test_whitespace_content_and_parent_go_out_unchanged(fake_connector):
    conn = FakeConnection([{"success": True}])

    out = await send_create_request("   ", " p1 ", 3333, connect=fake_connector(conn))

    assert out == {"success": True}
    assert [json.loads(frame) for frame in conn.sent] == [
        {"action": "createRem", "text": "   ", "parentId": " p1 "}
    ]
    assert conn.close_calls == 1


@pytest.mark.asyncio
async def test_application_error_carries_remote_message(fake_connector):
    conn = FakeConnection([{"success": False, "error": "duplicate"}])

    with pytest.raises(ApplicationError) as info:
        await send_create_request("hello", None, 3333, connect=fake_connector(conn))

    assert info.value.message == "duplicate"
    assert info.value.kind is FailureKind.APPLICATION_ERROR
    assert info.value.port == 3333
    assert conn.close_calls == 1


@pytest.mark.asyncio
async def test_missing_success_flag_is_application_error(fake_connector):
    conn = FakeConnection([{"error": "not allowed"}])
    with pytest.raises(ApplicationError, match="not allowed"):
        await send_create_request("hello", None, 3333, connect=fake_connector(conn))


@pytest.mark.asyncio
async def test_unparseable_reply_is_protocol_error_and_stops_reading(fake_connector):
    conn = FakeConnection(["not json at all", {"success": True}])

    with pytest.raises(ProtocolError) as info:
        await send_create_request("hello", None, 3333, connect=fake_connector(conn))

    assert "invalid reply frame" in info.value.message
    assert info.value.kind is FailureKind.PROTOCOL_ERROR
    assert conn.recv_calls == 1
    assert conn.close_calls == 1


@pytest.mark.asyncio
async def test_only_first_frame_is_consumed(fake_connector):
    conn = FakeConnection([{"success": True, "n": 1}, {"success": True, "n": 2}])
    out = await send_create_request("hello", None, 3333, connect=fake_connector(conn))
    assert out["n"] == 1
    assert conn.recv_calls == 1


@pytest.mark.asyncio
async def test_no_reply_times_out_and_closes_once(fake_connector):
    conn = FakeConnection([])

    with pytest.raises(RequestTimeoutError) as info:
        await send_create_request("hello", None, 3333, timeout_ms=50, connect=fake_connector(conn))

    assert info.value.message == "connection timed out."
    assert info.value.kind is FailureKind.TIMEOUT
    assert len(conn.sent) == 1
    assert conn.close_calls == 1


@pytest.mark.asyncio
async def test_refused_connection_is_transport_error_without_frames():
    async def _refuse(url: str):
        raise ConnectionRefusedError(111, "Connect call failed")

    with pytest.raises(TransportError) as info:
        await send_create_request("hello", None, 3333, connect=_refuse)

    assert "Connect call failed" in info.value.message
    assert info.value.kind is FailureKind.TRANSPORT_ERROR


@pytest.mark.asyncio
async def test_open_that_never_completes_times_out_without_sending():
    conn = FakeConnection([{"success": True}])

    async def _hang(url: str):
        await asyncio.Event().wait()
        return conn

    with pytest.raises(RequestTimeoutError):
        await send_create_request("hello", None, 3333, timeout_ms=30, connect=_hang)

    assert conn.sent == []
    assert conn.close_calls == 0


@pytest.mark.asyncio
async def test_reset_while_waiting_is_transport_error(fake_connector):
    conn = FakeConnection(recv_error=ConnectionResetError("connection reset by peer"))

    with pytest.raises(TransportError, match="reset"):
        await send_create_request("hello", None, 3333, connect=fake_connector(conn))

    assert conn.close_calls == 1


@pytest.mark.asyncio
async def test_send_failure_is_transport_error(fake_connector):
    conn = FakeConnection(send_error=BrokenPipeError("broken pipe"))

    with pytest.raises(TransportError):
        await send_create_request("hello", None, 3333, connect=fake_connector(conn))

    assert conn.recv_calls == 0
    assert conn.close_calls == 1


@pytest.mark.asyncio
async def test_unexpected_driver_failure_propagates(fake_connector):
    async def _broken(url: str):
        raise KeyError("boom")

    with pytest.raises(KeyError):
        await send_create_request("hello", None, 3333, connect=_broken)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("content", "port", "field"),
    [("", 3333, "content"), (None, 3333, "content"), ("x", 0, "port"), ("x", "3333", "port")],
)
async def test_invalid_inputs_never_connect(content, port, field):
    calls: list[str] = []

    async def _connect(url: str):
        calls.append(url)
        return FakeConnection([{"success": True}])

    with pytest.raises(ValidationError) as info:
        await send_create_request(content, None, port, connect=_connect)

    assert info.value.details == {"field": field}
    assert calls == []


def test_default_timeout_is_ten_seconds():
    assert DEFAULT_TIMEOUT_MS == 10_000


@pytest.mark.asyncio
async def test_exchange_settles_once_and_defuses_timer():
    exchange = Exchange(url="ws://localhost:1", port=1, timeout_ms=DEFAULT_TIMEOUT_MS)

    assert exchange.resolve({"success": True}) is True
    assert exchange.reject(RequestTimeoutError(port=1)) is False
    assert exchange.resolve({"success": True, "again": True}) is False
    assert exchange.state is ExchangeState.RESOLVED
    assert exchange._timer.cancelled()
    assert await exchange.wait() == {"success": True}


@pytest.mark.asyncio
async def test_exchange_close_is_idempotent():
    exchange = Exchange(url="ws://localhost:1", port=1, timeout_ms=DEFAULT_TIMEOUT_MS)
    conn = FakeConnection()
    exchange.attach(conn)
    exchange.reject(RequestTimeoutError(port=1))

    await exchange.close()
    await exchange.close()

    assert conn.close_calls == 1
    assert exchange.closed is True
    with pytest.raises(RequestTimeoutError):
        await exchange.wait()


@pytest.mark.asyncio
async def test_timeout_racing_reply_settles_once():
    exchange = Exchange(url="ws://localhost:1", port=1, timeout_ms=1)
    await asyncio.sleep(0.01)
    # Timer fired first; the reply arriving now must be ignored.
    assert exchange.state is ExchangeState.REJECTED
    assert exchange.resolve({"success": True}) is False
    with pytest.raises(RequestTimeoutError):
        await exchange.wait()
