"""Wire models for the create-rem websocket exchange."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

CREATE_REM_ACTION = "createRem"


@dataclass(slots=True)
class CreateRemRequest:
    """Request frame sent once per connection."""

    text: str
    parent_id: str | None = None
    action: str = CREATE_REM_ACTION


@dataclass(slots=True)
class RemReply:
    """Parsed reply frame.

    ``payload`` keeps the full decoded object so successful replies can be
    surfaced verbatim.
    """

    success: bool
    payload: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
