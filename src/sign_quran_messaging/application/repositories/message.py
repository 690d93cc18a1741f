from __future__ import annotations

from datetime import datetime
from typing import Protocol

from sign_quran_messaging.application.dto.message import ThreadMessageDTO
from sign_quran_messaging.domain.entities.conversation import ConversationSummary
from sign_quran_messaging.domain.entities.message import Message


class MessageReader(Protocol):
    async def get_by_id(self, message_id: int) -> Message | None: ...

    async def list_thread(self, user_a: int, user_b: int) -> list[ThreadMessageDTO]:
        """All messages between the pair, oldest first (created_at, id), with both profiles."""
        ...

    async def list_conversations(self, user_id: int) -> list[ConversationSummary]: ...

    async def count_unread(self, user_id: int) -> int: ...


class MessageWriter(Protocol):
    async def create(
        self,
        sender_id: int,
        receiver_id: int,
        body: str,
        created_at: datetime,
    ) -> Message:
        """Insert an unread message; the store assigns the id."""
        ...

    async def mark_read(self, message_id: int) -> Message | None:
        """Flip one unread message to read. Return it, or None if it was already read."""
        ...

    async def mark_conversation_read(self, receiver_id: int, sender_id: int) -> list[int]:
        """Flip every unread message from sender to receiver. Return the ids updated."""
        ...
