from __future__ import annotations

import logging

from sign_quran_messaging.application.dto.principal import Principal
from sign_quran_messaging.application.exceptions import ValidationError
from sign_quran_messaging.application.policies.permissions import assert_receiver
from sign_quran_messaging.application.uow import UnitOfWork
from sign_quran_messaging.domain.entities.message import Message
from sign_quran_messaging.domain.events.message_read import MessagesRead
from sign_quran_messaging.domain.value_objects.enums import EventType

logger = logging.getLogger(__name__)


async def mark_message_read(
    message_id: int,
    principal: Principal,
    uow: UnitOfWork,
) -> Message:
    """Mark one message read on behalf of its receiver.

    Marking an already-read message succeeds without writing anything.
    """
    message = assert_receiver(principal, await uow.messages.get_by_id(message_id))
    if message.is_read:
        return message

    updated = await uow.messages_w.mark_read(message_id)
    if updated is None:
        # another request flipped it first; report the stored row
        return assert_receiver(principal, await uow.messages.get_by_id(message_id))

    event = MessagesRead(
        reader_id=principal.user_id,
        sender_id=updated.sender_id,
        message_ids=[updated.id],
    )
    await uow.outbox.add(EventType.MESSAGE_READ, event.to_payload())
    await uow.commit()
    return updated


async def mark_conversation_read(
    principal: Principal,
    other_user_id: int | None,
    uow: UnitOfWork,
) -> int:
    """Mark every unread message from ``other_user_id`` to the caller as read.

    Returns the number of messages that changed state.
    """
    if other_user_id is None:
        raise ValidationError("sender_id is required")

    ids = await uow.messages_w.mark_conversation_read(principal.user_id, other_user_id)
    if not ids:
        return 0

    event = MessagesRead(
        reader_id=principal.user_id,
        sender_id=other_user_id,
        message_ids=ids,
    )
    await uow.outbox.add(EventType.MESSAGE_READ, event.to_payload())
    await uow.commit()

    logger.debug(
        "User %d read %d messages from user %d", principal.user_id, len(ids), other_user_id,
    )
    return len(ids)
