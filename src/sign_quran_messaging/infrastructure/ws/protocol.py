"""Frames exchanged on ``/api/messages/ws``.

The socket is push-only apart from keepalives: clients may send ``ping`` and
get ``pong``; everything else flows server -> client.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class WsInbound(BaseModel):
    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class WsOutbound(BaseModel):
    # message.created | message.read | pong | error
    type: str
    data: dict[str, Any] = Field(default_factory=dict)
