from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    """Inbox row: one correspondent of the requesting user."""

    user_id: int
    name: str
    email: str
    role: str
    last_message: str
    last_message_time: datetime
    unread_count: int
