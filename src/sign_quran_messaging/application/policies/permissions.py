from __future__ import annotations

from sign_quran_messaging.application.dto.principal import Principal
from sign_quran_messaging.application.exceptions import (
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from sign_quran_messaging.domain.entities.message import Message


def assert_receiver(principal: Principal, message: Message | None) -> Message:
    """Raise if the message doesn't exist or the caller is not its receiver."""
    if message is None:
        raise NotFoundError("Message not found")

    # Senders may never flip their own outgoing messages
    if message.receiver_id != principal.user_id:
        raise ForbiddenError("Only receiver can mark message as read")

    return message


def assert_not_self(principal: Principal, other_user_id: int) -> None:
    if other_user_id == principal.user_id:
        raise ValidationError("Cannot send message to yourself")
