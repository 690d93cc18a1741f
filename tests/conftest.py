"""Shared test fixtures."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from sign_quran_messaging.application.dto.message import ThreadMessageDTO
from sign_quran_messaging.application.dto.principal import Principal
from sign_quran_messaging.application.repositories.outbox import OutboxRecord
from sign_quran_messaging.domain.entities.conversation import ConversationSummary
from sign_quran_messaging.domain.entities.message import Message
from sign_quran_messaging.domain.entities.user import User
from sign_quran_messaging.domain.value_objects.enums import UserRole
from tests import projections

GURU_ID = 1
MURID_ID = 2
OTHER_MURID_ID = 3

T0 = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def guru() -> Principal:
    return Principal(user_id=GURU_ID, role=UserRole.GURU, email="guru@example.com")


@pytest.fixture
def murid() -> Principal:
    return Principal(user_id=MURID_ID, role=UserRole.MURID, email="murid@example.com")


@pytest.fixture
def other_murid() -> Principal:
    return Principal(user_id=OTHER_MURID_ID, role=UserRole.MURID, email="murid2@example.com")


def make_user(user_id: int, role: str = UserRole.MURID, name: str | None = None) -> User:
    return User(
        id=user_id,
        name=name or f"User {user_id}",
        email=f"user{user_id}@example.com",
        role=role,
    )


def default_users() -> list[User]:
    return [
        make_user(GURU_ID, UserRole.GURU, "Ustadzah Aisyah"),
        make_user(MURID_ID, UserRole.MURID, "Fatimah"),
        make_user(OTHER_MURID_ID, UserRole.MURID, "Yusuf"),
    ]


class StepClock:
    """Deterministic clock: every call advances by ``step``."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(seconds=1)) -> None:
        self._current = start
        self._step = step

    def now(self) -> datetime:
        value = self._current
        self._current += self._step
        return value


class FrozenClock:
    def __init__(self, at: datetime = T0) -> None:
        self._at = at

    def now(self) -> datetime:
        return self._at


@dataclass
class FakeUserReader:
    _users: dict[int, User] = field(default_factory=dict)

    async def get_by_id(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    async def exists(self, user_id: int) -> bool:
        return user_id in self._users


@dataclass
class FakeMessageReader:
    _users: FakeUserReader
    _messages: list[Message] = field(default_factory=list)

    async def get_by_id(self, message_id: int) -> Message | None:
        for m in self._messages:
            if m.id == message_id:
                return m
        return None

    async def list_thread(self, user_a: int, user_b: int) -> list[ThreadMessageDTO]:
        return projections.thread_between(self._messages, user_a, user_b, self._users._users)

    async def list_conversations(self, user_id: int) -> list[ConversationSummary]:
        return projections.summarize_conversations(self._messages, user_id, self._users._users)

    async def count_unread(self, user_id: int) -> int:
        return projections.count_unread(self._messages, user_id)


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    _next_id: int = 1

    async def create(
        self,
        sender_id: int,
        receiver_id: int,
        body: str,
        created_at: datetime,
    ) -> Message:
        msg = Message(
            id=self._next_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            body=body,
            created_at=created_at,
            is_read=False,
        )
        self._next_id += 1
        self._reader._messages.append(msg)
        return msg

    async def mark_read(self, message_id: int) -> Message | None:
        for i, m in enumerate(self._reader._messages):
            if m.id == message_id and not m.is_read:
                updated = dataclasses.replace(m, is_read=True)
                self._reader._messages[i] = updated
                return updated
        return None

    async def mark_conversation_read(self, receiver_id: int, sender_id: int) -> list[int]:
        ids = []
        for i, m in enumerate(self._reader._messages):
            if m.sender_id == sender_id and m.receiver_id == receiver_id and not m.is_read:
                self._reader._messages[i] = dataclasses.replace(m, is_read=True)
                ids.append(m.id)
        return ids


@dataclass
class FakeOutboxWriter:
    _records: list[dict[str, Any]] = field(default_factory=list)

    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        self._records.append(
            {
                "id": len(self._records) + 1,
                "event_type": event_type,
                "payload": payload,
                "status": "pending",
                "attempts": 0,
                "next_retry_at": None,
            }
        )

    async def fetch_pending(self, batch_size: int, now: datetime) -> list[OutboxRecord]:
        due = [
            r for r in self._records
            if r["status"] in ("pending", "failed")
            and (r["next_retry_at"] is None or r["next_retry_at"] <= now)
        ][:batch_size]
        for r in due:
            r["status"] = "processing"
        return [
            OutboxRecord(id=r["id"], event_type=r["event_type"], payload=r["payload"], attempts=r["attempts"])
            for r in due
        ]

    def _get(self, record_id: int) -> dict[str, Any]:
        return next(r for r in self._records if r["id"] == record_id)

    async def mark_sent(self, ids: list[int]) -> None:
        for record_id in ids:
            self._get(record_id)["status"] = "sent"

    async def reschedule(self, record_id: int, next_retry_at: datetime) -> None:
        record = self._get(record_id)
        record["status"] = "failed"
        record["attempts"] += 1
        record["next_retry_at"] = next_retry_at

    async def mark_dead(self, record_id: int) -> None:
        self._get(record_id)["status"] = "dead"


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    users: FakeUserReader = field(default_factory=FakeUserReader)
    messages: FakeMessageReader | None = None
    messages_w: FakeMessageWriter | None = None
    outbox: FakeOutboxWriter = field(default_factory=FakeOutboxWriter)
    _committed: bool = False
    _commits: int = 0

    def __post_init__(self) -> None:
        if self.messages is None:
            self.messages = FakeMessageReader(self.users)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True
        self._commits += 1

    async def rollback(self) -> None:
        pass


def make_uow(users: list[User] | None = None) -> FakeUoW:
    uow = FakeUoW()
    for user in default_users() if users is None else users:
        uow.users._users[user.id] = user
    return uow


@pytest.fixture
def uow() -> FakeUoW:
    return make_uow()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()
