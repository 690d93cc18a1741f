from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from sign_quran_messaging.api.middleware.correlation_id import CorrelationIdMiddleware
from sign_quran_messaging.api.middleware.metrics import RequestTimingMiddleware
from sign_quran_messaging.api.v1.routers import health, messages, ws
from sign_quran_messaging.application.exceptions import (
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from sign_quran_messaging.config import settings
from sign_quran_messaging.infrastructure.bus.redis_pubsub import RedisPubSubSubscriber
from sign_quran_messaging.infrastructure.db.session import build_engine, build_session_factory

logger = logging.getLogger(__name__)


async def _on_pubsub_event(event_type: str, data: dict[str, Any]) -> None:
    """Dispatch a Redis Pub/Sub event to the local WS connections of its recipients."""
    recipients = data.get("recipients") or []
    if not recipients:
        return

    payload = {k: v for k, v in data.items() if k != "recipients"}
    await ws.get_manager().send_to_users([int(r) for r in recipients], event_type, payload)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    engine = build_engine(settings)
    app.state.session_factory = build_session_factory(engine)
    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    logger.info("Database engine and Redis connection pool created")

    subscriber = RedisPubSubSubscriber(
        app.state.redis,
        settings.REDIS_PUBSUB_CHANNEL,
        _on_pubsub_event,
    )
    await subscriber.start()
    app.state.pubsub_subscriber = subscriber

    yield

    await subscriber.stop()
    await app.state.redis.aclose()
    await engine.dispose()
    logger.info("Database engine and Redis connection pool closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Sign Quran Messaging Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(messages.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.detail})

    @app.exception_handler(SQLAlchemyError)
    async def _storage(req: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Storage failure on %s %s", req.method, req.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
