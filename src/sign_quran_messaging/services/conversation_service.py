from __future__ import annotations

from sign_quran_messaging.application.dto.principal import Principal
from sign_quran_messaging.application.uow import UnitOfWork
from sign_quran_messaging.domain.entities.conversation import ConversationSummary


async def list_conversations(
    principal: Principal,
    uow: UnitOfWork,
) -> list[ConversationSummary]:
    """Inbox for the caller: one row per correspondent, most recent first."""
    return await uow.messages.list_conversations(principal.user_id)
