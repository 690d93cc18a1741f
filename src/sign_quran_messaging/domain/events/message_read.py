from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class MessagesRead:
    reader_id: int
    sender_id: int
    message_ids: list[int] = field(default_factory=list)

    @property
    def recipients(self) -> list[int]:
        # the reader's other sessions need the badge update too
        return [self.sender_id, self.reader_id]

    def to_payload(self) -> dict[str, Any]:
        return {
            "reader_id": self.reader_id,
            "sender_id": self.sender_id,
            "message_ids": list(self.message_ids),
            "recipients": self.recipients,
        }
