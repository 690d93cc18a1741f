from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from sign_quran_messaging.application.dto.message import ThreadMessageDTO
from sign_quran_messaging.domain.entities.message import Message


class SendMessageRequest(BaseModel):
    # Optional here so that missing fields surface as a 400 from the service
    receiver_id: int | None = None
    message: str | None = None


class MarkConversationReadRequest(BaseModel):
    sender_id: int | None = None


class MessageResponse(BaseModel):
    message_id: int
    sender_id: int
    receiver_id: int
    message: str
    created_at: datetime
    is_read: bool

    @classmethod
    def from_entity(cls, msg: Message) -> MessageResponse:
        return cls(
            message_id=msg.id,
            sender_id=msg.sender_id,
            receiver_id=msg.receiver_id,
            message=msg.body,
            created_at=msg.created_at,
            is_read=msg.is_read,
        )


class ThreadMessageResponse(MessageResponse):
    sender_name: str
    sender_email: str
    receiver_name: str
    receiver_email: str

    @classmethod
    def from_row(cls, row: ThreadMessageDTO) -> ThreadMessageResponse:
        return cls(
            message_id=row.id,
            sender_id=row.sender_id,
            receiver_id=row.receiver_id,
            message=row.body,
            created_at=row.created_at,
            is_read=row.is_read,
            sender_name=row.sender_name,
            sender_email=row.sender_email,
            receiver_name=row.receiver_name,
            receiver_email=row.receiver_email,
        )


class MessageEnvelope(BaseModel):
    message: str
    data: MessageResponse


class ThreadResponse(BaseModel):
    messages: list[ThreadMessageResponse]
    count: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkConversationReadResponse(BaseModel):
    message: str
    updated_count: int
