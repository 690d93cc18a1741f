from __future__ import annotations

from sign_quran_messaging.application.dto.message import ThreadMessageDTO
from sign_quran_messaging.domain.entities.message import Message
from sign_quran_messaging.infrastructure.db.models.message import MessageModel
from sign_quran_messaging.infrastructure.db.models.user import UserModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        sender_id=model.sender_id,
        receiver_id=model.receiver_id,
        body=model.body,
        created_at=model.created_at,
        is_read=model.is_read,
    )


def model_to_thread_row(
    model: MessageModel,
    sender: UserModel,
    receiver: UserModel,
) -> ThreadMessageDTO:
    return ThreadMessageDTO(
        id=model.id,
        sender_id=model.sender_id,
        receiver_id=model.receiver_id,
        body=model.body,
        created_at=model.created_at,
        is_read=model.is_read,
        sender_name=sender.name,
        sender_email=sender.email,
        receiver_name=receiver.name,
        receiver_email=receiver.email,
    )
