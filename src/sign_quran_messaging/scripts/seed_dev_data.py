"""Seed development data: creates tables, a guru, two murid and a few messages."""
from __future__ import annotations

import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sign_quran_messaging.application.dto.message import SendMessageDTO
from sign_quran_messaging.application.dto.principal import Principal
from sign_quran_messaging.config import settings
from sign_quran_messaging.domain.value_objects.enums import UserRole
from sign_quran_messaging.infrastructure.db.base import Base
from sign_quran_messaging.infrastructure.db.models import MessageModel, UserModel
from sign_quran_messaging.infrastructure.db.session import build_engine, build_session_factory
from sign_quran_messaging.infrastructure.db.uow import SqlAlchemyUoW
from sign_quran_messaging.logging_config import setup_logging
from sign_quran_messaging.services import message_service

logger = logging.getLogger(__name__)

USERS = [
    (1, "Ustadzah Aisyah", "aisyah@example.com", UserRole.GURU),
    (2, "Fatimah", "fatimah@example.com", UserRole.MURID),
    (3, "Yusuf", "yusuf@example.com", UserRole.MURID),
]

MESSAGES = [
    (2, 1, "Assalamualaikum, Ustadzah. Saya sudah selesai huruf Alif sampai Tsa."),
    (1, 2, "Waalaikumsalam. Bagus sekali, lanjutkan ke huruf Jim ya."),
    (3, 1, "Ustadzah, nilai tes Ba saya belum muncul."),
]


async def seed_data(session: AsyncSession) -> int:
    """Insert missing users, and the sample messages if the table is empty.

    Returns the number of messages sent; reruns send none.
    """
    existing = set((await session.execute(select(UserModel.id))).scalars().all())
    for user_id, name, email, role in USERS:
        if user_id not in existing:
            session.add(UserModel(id=user_id, name=name, email=email, role=role, is_verified=True))
    await session.commit()

    if await session.scalar(select(func.count()).select_from(MessageModel)):
        logger.info("Messages already present, skipping message seed")
        return 0

    uow = SqlAlchemyUoW(session)
    for sender_id, receiver_id, body in MESSAGES:
        await message_service.send_message(
            Principal(user_id=sender_id),
            SendMessageDTO(receiver_id=receiver_id, body=body),
            uow,
        )
    logger.info("Seeded %d messages", len(MESSAGES))
    return len(MESSAGES)


async def seed() -> None:
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        await seed_data(session)

    await engine.dispose()


def main() -> None:
    setup_logging(logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
