from __future__ import annotations

from typing import Protocol

from sign_quran_messaging.application.repositories.message import MessageReader, MessageWriter
from sign_quran_messaging.application.repositories.outbox import OutboxWriter
from sign_quran_messaging.application.repositories.user import UserReader


class UnitOfWork(Protocol):
    users: UserReader
    messages: MessageReader
    messages_w: MessageWriter
    outbox: OutboxWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...
