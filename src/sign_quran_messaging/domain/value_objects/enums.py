from __future__ import annotations

from enum import StrEnum


class UserRole(StrEnum):
    GURU = "guru"
    MURID = "murid"


class EventType(StrEnum):
    MESSAGE_CREATED = "message.created"
    MESSAGE_READ = "message.read"
