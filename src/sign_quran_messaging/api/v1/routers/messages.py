from __future__ import annotations

from fastapi import APIRouter, Query

from sign_quran_messaging.api.deps import CurrentPrincipal, UoWDep
from sign_quran_messaging.api.v1.schemas.conversation import (
    ConversationListResponse,
    ConversationResponse,
)
from sign_quran_messaging.api.v1.schemas.message import (
    MarkConversationReadRequest,
    MarkConversationReadResponse,
    MessageEnvelope,
    MessageResponse,
    SendMessageRequest,
    ThreadMessageResponse,
    ThreadResponse,
    UnreadCountResponse,
)
from sign_quran_messaging.application.dto.message import SendMessageDTO
from sign_quran_messaging.services import conversation_service, message_service, read_state_service

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.post("", response_model=MessageEnvelope, status_code=201)
async def send_message(
    body: SendMessageRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MessageEnvelope:
    msg = await message_service.send_message(
        principal,
        SendMessageDTO(receiver_id=body.receiver_id, body=body.message),
        uow,
    )
    return MessageEnvelope(
        message="Message sent successfully",
        data=MessageResponse.from_entity(msg),
    )


@router.get("", response_model=ThreadResponse)
async def get_thread(
    principal: CurrentPrincipal,
    uow: UoWDep,
    conversation_with: int | None = Query(None),
) -> ThreadResponse:
    messages = await message_service.fetch_thread(principal, conversation_with, uow)
    return ThreadResponse(
        messages=[ThreadMessageResponse.from_row(m) for m in messages],
        count=len(messages),
    )


@router.get("/conversations", response_model=ConversationListResponse)
async def list_conversations(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ConversationListResponse:
    summaries = await conversation_service.list_conversations(principal, uow)
    return ConversationListResponse(
        conversations=[ConversationResponse.model_validate(s, from_attributes=True) for s in summaries],
        count=len(summaries),
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=await message_service.count_unread(principal, uow))


@router.put("/mark-conversation-read", response_model=MarkConversationReadResponse)
async def mark_conversation_read(
    body: MarkConversationReadRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MarkConversationReadResponse:
    updated = await read_state_service.mark_conversation_read(principal, body.sender_id, uow)
    return MarkConversationReadResponse(
        message="Conversation marked as read",
        updated_count=updated,
    )


@router.put("/{message_id}/read", response_model=MessageEnvelope)
async def mark_message_read(
    message_id: int,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MessageEnvelope:
    msg = await read_state_service.mark_message_read(message_id, principal, uow)
    return MessageEnvelope(
        message="Message marked as read",
        data=MessageResponse.from_entity(msg),
    )
