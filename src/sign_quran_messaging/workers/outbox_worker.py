"""Outbox worker: relays committed message events to Redis Pub/Sub."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta

import redis.asyncio as aioredis

from sign_quran_messaging.application.ports.bus import EventPublisher
from sign_quran_messaging.application.ports.clock import Clock, system_clock
from sign_quran_messaging.application.uow import UnitOfWork
from sign_quran_messaging.config import settings
from sign_quran_messaging.infrastructure.bus.redis_pubsub import RedisPubSubPublisher
from sign_quran_messaging.infrastructure.db.session import build_engine, build_session_factory
from sign_quran_messaging.infrastructure.db.uow import SqlAlchemyUoW
from sign_quran_messaging.logging_config import setup_logging

logger = logging.getLogger(__name__)

BASE_DELAY_SECONDS = 5
MAX_DELAY_SECONDS = 300


def calc_backoff(attempts: int, now: datetime) -> datetime:
    delay = min(BASE_DELAY_SECONDS * (2 ** attempts), MAX_DELAY_SECONDS)
    return now + timedelta(seconds=delay)


async def process_batch(
    uow: UnitOfWork,
    publisher: EventPublisher,
    clock: Clock = system_clock,
) -> int:
    """Publish one batch of due outbox records. Returns how many were sent."""
    now = clock.now()
    batch = await uow.outbox.fetch_pending(settings.OUTBOX_BATCH_SIZE, now)
    if not batch:
        return 0

    sent_ids: list[int] = []
    for record in batch:
        if record.attempts >= settings.OUTBOX_MAX_ATTEMPTS:
            logger.warning("Outbox record %d exceeded max attempts, giving up", record.id)
            await uow.outbox.mark_dead(record.id)
            continue
        try:
            await publisher.publish(settings.REDIS_PUBSUB_CHANNEL, record.event_type, record.payload)
            sent_ids.append(record.id)
        except Exception:
            logger.exception("Failed to publish outbox record %d", record.id)
            await uow.outbox.reschedule(record.id, calc_backoff(record.attempts, now))

    await uow.outbox.mark_sent(sent_ids)
    await uow.commit()
    if sent_ids:
        logger.info("Published %d outbox records", len(sent_ids))
    return len(sent_ids)


async def run_outbox_worker() -> None:
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    publisher = RedisPubSubPublisher(redis)

    logger.info(
        "Outbox worker started (poll=%.1fs, batch=%d, max_attempts=%d)",
        settings.OUTBOX_POLL_INTERVAL,
        settings.OUTBOX_BATCH_SIZE,
        settings.OUTBOX_MAX_ATTEMPTS,
    )

    try:
        while True:
            try:
                async with session_factory() as session:
                    async with SqlAlchemyUoW(session) as uow:
                        await process_batch(uow, publisher)
            except Exception:
                logger.exception("Outbox worker loop error")
            await asyncio.sleep(settings.OUTBOX_POLL_INTERVAL)
    finally:
        await redis.aclose()
        await engine.dispose()


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(run_outbox_worker())


if __name__ == "__main__":
    main()
