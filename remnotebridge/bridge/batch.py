"""Sequential batch driver for create-rem exchanges."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Sequence

from loguru import logger

from remnotebridge.utils.exceptions import RemBridgeError

from .correlator import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TIMEOUT_MS, send_create_request

Sender = Callable[..., Awaitable[dict[str, Any]]]


@dataclass(slots=True)
class RemItem:
    """Correlator inputs resolved for one batch item."""

    content: str
    parent_id: str | None = None
    port: int = DEFAULT_PORT


@dataclass(slots=True)
class ResultSequence:
    """Ordered output builder; one record per processed item."""

    records: list[dict[str, Any]] = field(default_factory=list)
    failures: int = 0

    def append_success(self, payload: dict[str, Any]) -> None:
        self.records.append(payload)

    def append_failure(self, message: str) -> None:
        self.records.append({"error": message})
        self.failures += 1

    def to_list(self) -> list[dict[str, Any]]:
        return list(self.records)

    def __len__(self) -> int:
        return len(self.records)


async def run_batch(
    items: Sequence[RemItem],
    *,
    continue_on_fail: bool = False,
    host: str = DEFAULT_HOST,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    send: Sender = send_create_request,
) -> list[dict[str, Any]]:
    """Run one exchange per item, strictly in order.

    With ``continue_on_fail`` a failed item yields ``{"error": message}`` and
    processing continues; otherwise the first failure is re-raised.
    """
    results = ResultSequence()
    for index, item in enumerate(items):
        try:
            payload = await send(item.content, item.parent_id, item.port, timeout_ms, host=host)
        except RemBridgeError as exc:
            if not continue_on_fail:
                logger.error("Batch aborted at item {}: {}", index, exc)
                raise
            logger.warning("Item {} failed: {}", index, exc)
            results.append_failure(exc.message)
            continue
        results.append_success(payload)
    logger.debug("Batch finished: {} records, {} failures", len(results), results.failures)
    return results.to_list()
