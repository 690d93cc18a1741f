"""Wire format of events relayed over Redis Pub/Sub.

Envelope: ``{"event": "<type>", "data": {...}}``. Timestamps travel as ISO
8601 strings and are not parsed back; WebSocket clients receive them as-is.
"""
from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any


def _encode(value: object) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Cannot serialize {type(value).__name__} in event payload")


def serialize_event(event_type: str, payload: dict[str, Any]) -> str:
    return json.dumps({"event": event_type, "data": payload}, default=_encode)


def deserialize_event(raw: str | bytes) -> tuple[str, dict[str, Any]]:
    envelope = json.loads(raw)
    if not isinstance(envelope, dict) or "event" not in envelope:
        raise ValueError("Malformed event envelope")
    return envelope["event"], envelope.get("data") or {}
