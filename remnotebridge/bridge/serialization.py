"""Serialization helpers for create-rem frames."""

from __future__ import annotations

import json
from typing import Any

from remnotebridge.utils.exceptions import ProtocolError

from .protocol import CreateRemRequest, RemReply


def safe_dict(value: Any) -> dict[str, Any]:
    """Return the value when dict-like, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def normalize_parent_id(parent_id: Any) -> str | None:
    """Map empty parent identifiers to ``None``; anything else goes out as given."""
    if parent_id is None or parent_id == "":
        return None
    return parent_id if isinstance(parent_id, str) else str(parent_id)


def encode_request_frame(request: CreateRemRequest) -> str:
    """Encode a request into one JSON text frame."""
    payload = {"action": request.action, "text": request.text, "parentId": request.parent_id}
    return json.dumps(payload, ensure_ascii=False)


def decode_reply_frame(raw: str | bytes, *, port: int | None = None) -> RemReply:
    """Decode one reply frame.

    Raises ProtocolError when the frame is not a JSON object.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ProtocolError(f"invalid reply frame: {exc}", port=port) from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"invalid reply frame: {exc}", port=port) from exc
    if not isinstance(data, dict):
        raise ProtocolError(
            f"invalid reply frame: expected a JSON object, got {type(data).__name__}",
            port=port,
        )
    if data.get("success") is True:
        return RemReply(success=True, payload=data)
    error = data.get("error")
    if isinstance(error, dict):
        error = error.get("message")
    if error is None or isinstance(error, str):
        message = error or ""
    else:
        message = str(error)
    return RemReply(success=False, payload=data, error=message or "remote request failed")
