"""Pytest hooks and fixtures."""

import asyncio
import json
import os

import pytest

from remnotebridge.config.access import clear_config_cache


def pytest_configure(config):
    """Register custom markers (also in pyproject.toml)."""
    config.addinivalue_line(
        "markers",
        "loopback: opens a real websocket server on 127.0.0.1",
    )


def pytest_collection_modifyitems(config, items):
    """Skip loopback tests where binding local sockets is not allowed."""
    if os.environ.get("REMNOTE_BRIDGE_SKIP_LOOPBACK") != "true":
        return
    skip = pytest.mark.skip(reason="Loopback sockets disabled")
    for item in items:
        if "loopback" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def _isolated_config_cache():
    clear_config_cache()
    yield
    clear_config_cache()


class FakeConnection:
    """In-memory stand-in for a websocket client connection."""

    def __init__(self, frames=None, *, send_error=None, recv_error=None):
        self._frames = list(frames or [])
        self._send_error = send_error
        self._recv_error = recv_error
        self.sent: list[str] = []
        self.recv_calls = 0
        self.close_calls = 0

    async def send(self, data: str) -> None:
        if self._send_error is not None:
            raise self._send_error
        self.sent.append(data)

    async def recv(self) -> str:
        self.recv_calls += 1
        if self._recv_error is not None:
            raise self._recv_error
        if not self._frames:
            await asyncio.Event().wait()
        frame = self._frames.pop(0)
        return frame if isinstance(frame, (str, bytes)) else json.dumps(frame)

    async def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def fake_connector():
    """Build a connector returning the given FakeConnection and recording URLs."""

    def _build(connection: FakeConnection):
        urls: list[str] = []

        async def _connect(url: str) -> FakeConnection:
            urls.append(url)
            return connection

        _connect.urls = urls  # type: ignore[attr-defined]
        return _connect

    return _build
