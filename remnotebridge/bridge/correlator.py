"""One-shot request/reply correlation over an ephemeral websocket.

Every call opens its own connection to ``ws://<host>:<port>``, sends a single
``createRem`` frame and waits for the first terminal event:

- transport failure (refused, reset, name resolution...)
- a reply frame (success, application error or unparseable)
- the deadline

The :class:`Exchange` holds the outcome. Only the first terminal event takes
effect; later events are no-ops. The connection is closed exactly once before
the caller resumes, and the deadline timer is cancelled as soon as the
exchange settles.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable

import websockets
from loguru import logger
from websockets.exceptions import WebSocketException

from remnotebridge.utils.exceptions import (
    ApplicationError,
    ProtocolError,
    RequestTimeoutError,
    TransportError,
    ValidationError,
    sanitize_error_message,
)

from .protocol import CreateRemRequest
from .serialization import decode_reply_frame, encode_request_frame, normalize_parent_id

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3333
DEFAULT_TIMEOUT_MS = 10_000

Connector = Callable[[str], Awaitable[Any]]

_TRANSPORT_ERRORS = (OSError, WebSocketException)


class ExchangeState(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    REJECTED = "rejected"


async def open_connection(url: str) -> Any:
    """Open a websocket; the exchange deadline bounds the handshake."""
    return await websockets.connect(url, open_timeout=None, ping_interval=None)


def build_url(host: str, port: int) -> str:
    return f"ws://{host}:{port}"


def validate_port(port: Any) -> int:
    if isinstance(port, bool) or not isinstance(port, int):
        raise ValidationError(f"port must be an integer, got {port!r}", field="port")
    if not 0 < port < 65536:
        raise ValidationError(f"port out of range: {port}", field="port")
    return port


def build_create_request(content: Any, parent_id: Any = None) -> CreateRemRequest:
    """Validate inputs and build the request frame model."""
    if not isinstance(content, str) or not content:
        raise ValidationError("content must be a non-empty string", field="content")
    return CreateRemRequest(text=content, parent_id=normalize_parent_id(parent_id))


class Exchange:
    """State holder for one request/reply exchange."""

    def __init__(self, *, url: str, port: int, timeout_ms: int):
        loop = asyncio.get_running_loop()
        self.url = url
        self.port = port
        self.timeout_ms = timeout_ms
        self.state = ExchangeState.PENDING
        self.connection: Any = None
        self.closed = False
        self._outcome: asyncio.Future[dict[str, Any]] = loop.create_future()
        self._timer = loop.call_later(timeout_ms / 1000.0, self._on_timeout)

    @property
    def settled(self) -> bool:
        return self.state is not ExchangeState.PENDING

    def attach(self, connection: Any) -> None:
        self.connection = connection

    def resolve(self, payload: dict[str, Any]) -> bool:
        if not self._settle(ExchangeState.RESOLVED):
            return False
        self._outcome.set_result(payload)
        return True

    def reject(self, error: BaseException) -> bool:
        if not self._settle(ExchangeState.REJECTED):
            return False
        self._outcome.set_exception(error)
        return True

    def _settle(self, state: ExchangeState) -> bool:
        if self.settled or self._outcome.done():
            logger.debug("Ignoring late {} event for {}", state.value, self.url)
            return False
        self.state = state
        self._timer.cancel()
        logger.debug("Exchange with {} {}", self.url, state.value)
        return True

    def _on_timeout(self) -> None:
        self.reject(RequestTimeoutError(port=self.port, timeout_ms=self.timeout_ms))

    def on_driver_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        if not self.reject(exc):
            logger.debug("Driver for {} failed after settle: {}", self.url, exc)

    async def wait(self) -> dict[str, Any]:
        return await self._outcome

    async def close(self) -> None:
        """Close the connection; repeated calls are no-ops."""
        if self.closed:
            return
        self.closed = True
        self._timer.cancel()
        connection, self.connection = self.connection, None
        if connection is None:
            return
        try:
            await connection.close()
        except _TRANSPORT_ERRORS as exc:
            logger.debug("Closing {} failed: {}", self.url, exc)


def _describe(exc: BaseException) -> str:
    return sanitize_error_message(str(exc) or exc.__class__.__name__)


async def _drive(exchange: Exchange, request: CreateRemRequest, connect: Connector) -> None:
    try:
        connection = await connect(exchange.url)
    except _TRANSPORT_ERRORS as exc:
        exchange.reject(TransportError(_describe(exc), port=exchange.port))
        return
    exchange.attach(connection)
    if exchange.settled:
        return

    try:
        await connection.send(encode_request_frame(request))
        logger.debug("Sent {} frame to {}", request.action, exchange.url)
        raw = await connection.recv()
    except _TRANSPORT_ERRORS as exc:
        exchange.reject(TransportError(_describe(exc), port=exchange.port))
        return

    try:
        reply = decode_reply_frame(raw, port=exchange.port)
    except ProtocolError as exc:
        exchange.reject(exc)
        return
    if reply.success:
        exchange.resolve(reply.payload)
    else:
        exchange.reject(ApplicationError(reply.error or "remote request failed", port=exchange.port))


async def send_create_request(
    content: str,
    parent_id: str | None = None,
    port: int = DEFAULT_PORT,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    host: str = DEFAULT_HOST,
    connect: Connector | None = None,
) -> dict[str, Any]:
    """Create one rem through the local listener and return its reply payload.

    Raises TransportError, ProtocolError, ApplicationError or
    RequestTimeoutError. Nothing is retried.
    """
    request = build_create_request(content, parent_id)
    port = validate_port(port)
    if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms <= 0:
        raise ValidationError(f"timeout_ms must be a positive integer, got {timeout_ms!r}", field="timeout_ms")

    exchange = Exchange(url=build_url(host, port), port=port, timeout_ms=timeout_ms)
    driver = asyncio.create_task(_drive(exchange, request, connect or open_connection))
    driver.add_done_callback(exchange.on_driver_done)
    try:
        return await exchange.wait()
    finally:
        if not driver.done():
            driver.cancel()
            await asyncio.wait({driver})
        await exchange.close()
