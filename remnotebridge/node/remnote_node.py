"""RemNote workflow node: resolves item parameters and runs the batch driver."""

from __future__ import annotations

from typing import Any

from loguru import logger

from remnotebridge.bridge.batch import RemItem, Sender, run_batch
from remnotebridge.bridge.correlator import DEFAULT_HOST, DEFAULT_TIMEOUT_MS, send_create_request
from remnotebridge.bridge.serialization import safe_dict
from remnotebridge.utils.exceptions import ValidationError

from .description import REMNOTE_NODE_DESCRIPTION, NodeDescription

# Item JSON fields read when a parameter is not configured on the node.
_ITEM_ALIASES: dict[str, tuple[str, ...]] = {
    "content": ("content", "text"),
    "parentId": ("parentId", "parent_id"),
    "port": ("port",),
}


def _coerce_port(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


class RemNoteNode:
    """Host-facing node.

    ``items`` are host item records, either ``{"json": {...}}`` or a bare
    dict. ``parameters`` are node-level values keyed by property name.
    """

    description: NodeDescription = REMNOTE_NODE_DESCRIPTION

    def __init__(
        self,
        items: list[dict[str, Any]] | None = None,
        *,
        parameters: dict[str, Any] | None = None,
        continue_on_fail: bool = False,
        host: str = DEFAULT_HOST,
        send: Sender = send_create_request,
    ):
        self.items = list(items or [])
        self.parameters = dict(parameters or {})
        self.continue_on_fail = continue_on_fail
        self.host = host
        self._send = send

    def get_input_data(self) -> list[dict[str, Any]]:
        return [self._item_json(item) for item in self.items]

    @staticmethod
    def _item_json(item: Any) -> dict[str, Any]:
        row = safe_dict(item)
        nested = row.get("json")
        return nested if isinstance(nested, dict) else row

    def get_node_parameter(self, name: str, index: int) -> Any:
        """Configured parameter first, then the item's own field, then the default."""
        prop = self.description.get_property(name)
        if prop is None:
            raise ValidationError(f"unknown node parameter: {name}", field=name)
        if name in self.parameters:
            return self.parameters[name]
        if 0 <= index < len(self.items):
            row = self._item_json(self.items[index])
            for key in _ITEM_ALIASES.get(name, ()):
                value = row.get(key)
                if value is not None:
                    return value
        return prop.default

    def resolve_item(self, index: int) -> RemItem:
        # Invalid values are left for the correlator to reject per item.
        return RemItem(
            content=self.get_node_parameter("content", index),
            parent_id=self.get_node_parameter("parentId", index),
            port=_coerce_port(self.get_node_parameter("port", index)),
        )

    def _check_operation(self) -> None:
        resource = str(self.get_node_parameter("resource", 0))
        if resource not in self.description.option_values("resource"):
            raise ValidationError(f"unsupported resource: {resource}", field="resource")
        operation = str(self.get_node_parameter("operation", 0))
        if operation not in self.description.option_values("operation"):
            raise ValidationError(f"unsupported operation: {operation}", field="operation")

    async def execute(self, *, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> list[list[dict[str, Any]]]:
        self._check_operation()
        rem_items = [self.resolve_item(i) for i in range(len(self.items))]
        logger.info("Creating {} rem(s) (continue_on_fail={})", len(rem_items), self.continue_on_fail)
        records = await run_batch(
            rem_items,
            continue_on_fail=self.continue_on_fail,
            host=self.host,
            timeout_ms=timeout_ms,
            send=self._send,
        )
        return [[{"json": record} for record in records]]
