from __future__ import annotations

import logging

from sign_quran_messaging.application.dto.message import SendMessageDTO, ThreadMessageDTO
from sign_quran_messaging.application.dto.principal import Principal
from sign_quran_messaging.application.exceptions import NotFoundError, ValidationError
from sign_quran_messaging.application.policies.permissions import assert_not_self
from sign_quran_messaging.application.ports.clock import Clock, system_clock
from sign_quran_messaging.application.uow import UnitOfWork
from sign_quran_messaging.domain.entities.message import Message
from sign_quran_messaging.domain.events.message_created import MessageCreated
from sign_quran_messaging.domain.value_objects.enums import EventType

logger = logging.getLogger(__name__)


async def send_message(
    principal: Principal,
    data: SendMessageDTO,
    uow: UnitOfWork,
    clock: Clock = system_clock,
) -> Message:
    """Store a new unread message from the caller to ``data.receiver_id``.

    The ``message.created`` event is written to the outbox in the same
    transaction, so subscribers never see a message that was rolled back.
    """
    if data.receiver_id is None or data.body is None or not data.body.strip():
        raise ValidationError("receiver_id and message are required")
    assert_not_self(principal, data.receiver_id)

    if not await uow.users.exists(data.receiver_id):
        raise NotFoundError("Receiver not found")

    msg = await uow.messages_w.create(
        principal.user_id,
        data.receiver_id,
        data.body,
        clock.now(),
    )

    event = MessageCreated(
        message_id=msg.id,
        sender_id=msg.sender_id,
        receiver_id=msg.receiver_id,
        body=msg.body,
        created_at=msg.created_at,
    )
    await uow.outbox.add(EventType.MESSAGE_CREATED, event.to_payload())
    await uow.commit()

    logger.info("Message %d sent from user %d to user %d", msg.id, msg.sender_id, msg.receiver_id)
    return msg


async def fetch_thread(
    principal: Principal,
    other_user_id: int | None,
    uow: UnitOfWork,
) -> list[ThreadMessageDTO]:
    """Return the conversation between the caller and another user, oldest first.

    Each row carries the sender and receiver name and email. Reading a thread
    never changes read state; callers mark it read explicitly.
    """
    if other_user_id is None:
        raise ValidationError("conversation_with parameter is required")
    return await uow.messages.list_thread(principal.user_id, other_user_id)


async def count_unread(principal: Principal, uow: UnitOfWork) -> int:
    return await uow.messages.count_unread(principal.user_id)
