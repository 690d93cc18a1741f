from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from sign_quran_messaging.application.dto.message import ThreadMessageDTO
from sign_quran_messaging.domain.entities.conversation import ConversationSummary
from sign_quran_messaging.domain.entities.message import Message
from sign_quran_messaging.infrastructure.db.mappers import message as mapper
from sign_quran_messaging.infrastructure.db.models.message import MessageModel
from sign_quran_messaging.infrastructure.db.models.user import UserModel


def _between(user_a: int, user_b: int):
    return or_(
        and_(MessageModel.sender_id == user_a, MessageModel.receiver_id == user_b),
        and_(MessageModel.sender_id == user_b, MessageModel.receiver_id == user_a),
    )


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, message_id: int) -> Message | None:
        result = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(result) if result else None

    async def list_thread(self, user_a: int, user_b: int) -> list[ThreadMessageDTO]:
        sender = aliased(UserModel, name="sender")
        receiver = aliased(UserModel, name="receiver")
        stmt = (
            select(MessageModel, sender, receiver)
            .join(sender, sender.id == MessageModel.sender_id)
            .join(receiver, receiver.id == MessageModel.receiver_id)
            .where(_between(user_a, user_b))
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_thread_row(m, s, r) for m, s, r in result.all()]

    async def list_conversations(self, user_id: int) -> list[ConversationSummary]:
        peer = case(
            (MessageModel.sender_id == user_id, MessageModel.receiver_id),
            else_=MessageModel.sender_id,
        )
        # newest message per correspondent gets rn = 1
        ranked = (
            select(
                peer.label("peer_id"),
                MessageModel.id.label("message_id"),
                MessageModel.body.label("body"),
                MessageModel.created_at.label("created_at"),
                func.row_number()
                .over(
                    partition_by=peer,
                    order_by=(MessageModel.created_at.desc(), MessageModel.id.desc()),
                )
                .label("rn"),
            )
            .where(or_(MessageModel.sender_id == user_id, MessageModel.receiver_id == user_id))
            .subquery()
        )
        unread = (
            select(
                MessageModel.sender_id.label("peer_id"),
                func.count().label("unread_count"),
            )
            .where(MessageModel.receiver_id == user_id, MessageModel.is_read.is_(False))
            .group_by(MessageModel.sender_id)
            .subquery()
        )
        stmt = (
            select(
                UserModel,
                ranked.c.body,
                ranked.c.created_at,
                func.coalesce(unread.c.unread_count, 0),
            )
            .join(ranked, ranked.c.peer_id == UserModel.id)
            .outerjoin(unread, unread.c.peer_id == UserModel.id)
            .where(ranked.c.rn == 1)
            .order_by(ranked.c.created_at.desc(), ranked.c.message_id.desc())
        )
        result = await self._session.execute(stmt)
        return [
            ConversationSummary(
                user_id=user.id,
                name=user.name,
                email=user.email,
                role=user.role,
                last_message=body,
                last_message_time=created_at,
                unread_count=int(unread_count),
            )
            for user, body, created_at, unread_count in result.all()
        ]

    async def count_unread(self, user_id: int) -> int:
        stmt = select(func.count()).select_from(MessageModel).where(
            MessageModel.receiver_id == user_id,
            MessageModel.is_read.is_(False),
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        sender_id: int,
        receiver_id: int,
        body: str,
        created_at: datetime,
    ) -> Message:
        model = MessageModel(
            sender_id=sender_id,
            receiver_id=receiver_id,
            body=body,
            created_at=created_at,
            is_read=False,
        )
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def mark_read(self, message_id: int) -> Message | None:
        # is_read only ever moves false -> true
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id, MessageModel.is_read.is_(False))
            .values(is_read=True)
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def mark_conversation_read(self, receiver_id: int, sender_id: int) -> list[int]:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.sender_id == sender_id,
                MessageModel.receiver_id == receiver_id,
                MessageModel.is_read.is_(False),
            )
            .values(is_read=True)
            .returning(MessageModel.id)
        )
        result = await self._session.execute(stmt)
        return sorted(result.scalars().all())
