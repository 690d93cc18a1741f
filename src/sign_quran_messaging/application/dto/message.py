from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class SendMessageDTO:
    receiver_id: int | None
    body: str | None


@dataclass(frozen=True, slots=True)
class ThreadMessageDTO:
    """A message as shown inside a thread, with both parties' profiles.

    Clients draw the conversation header from these names without a
    separate user lookup.
    """

    id: int
    sender_id: int
    receiver_id: int
    body: str
    created_at: datetime
    is_read: bool
    sender_name: str
    sender_email: str
    receiver_name: str
    receiver_email: str
