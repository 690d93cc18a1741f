from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class MessageCreated:
    message_id: int
    sender_id: int
    receiver_id: int
    body: str
    created_at: datetime

    @property
    def recipients(self) -> list[int]:
        return [self.sender_id, self.receiver_id]

    def to_payload(self) -> dict[str, Any]:
        return {
            "message_id": self.message_id,
            "sender_id": self.sender_id,
            "receiver_id": self.receiver_id,
            "message": self.body,
            "created_at": self.created_at.isoformat(),
            "recipients": self.recipients,
        }
