"""Integration smoke tests for REST API (using in-memory UoW via dependency override)."""
from __future__ import annotations

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from sign_quran_messaging.api.deps import get_uow
from sign_quran_messaging.app import create_app
from sign_quran_messaging.config import settings
from tests.conftest import GURU_ID, MURID_ID, OTHER_MURID_ID, make_uow


def _make_token(user_id: int = GURU_ID, role: str = "guru") -> str:
    return jwt.encode(
        {"userId": user_id, "email": f"user{user_id}@example.com", "role": role},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def _auth(user_id: int = GURU_ID, role: str = "guru") -> dict[str, str]:
    return {"Authorization": f"Bearer {_make_token(user_id, role)}"}


@pytest.fixture
def app_with_uow():
    app = create_app()
    uow = make_uow()

    async def _override():
        yield uow

    app.dependency_overrides[get_uow] = _override
    return app, uow


@pytest.fixture
def client(app_with_uow):
    app, _ = app_with_uow
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def uow(app_with_uow):
    _, uow = app_with_uow
    return uow


def _send(client, sender: int, receiver: int, text: str, role: str = "guru"):
    return client.post(
        "/api/messages",
        headers=_auth(sender, role),
        json={"receiver_id": receiver, "message": text},
    )


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_unauthenticated_returns_401(client):
    resp = client.get("/api/messages/unread-count")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Not authenticated"


def test_invalid_token_returns_401(client):
    resp = client.get(
        "/api/messages/unread-count",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert resp.status_code == 401


def test_cookie_authentication(client):
    client.cookies.set(settings.AUTH_COOKIE_NAME, _make_token(MURID_ID, "murid"))
    resp = client.get("/api/messages/unread-count")
    assert resp.status_code == 200
    assert resp.json() == {"unread_count": 0}


def test_send_message(client):
    resp = _send(client, GURU_ID, MURID_ID, "Halo")

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Message sent successfully"
    data = body["data"]
    assert data["sender_id"] == GURU_ID
    assert data["receiver_id"] == MURID_ID
    assert data["message"] == "Halo"
    assert data["is_read"] is False
    assert isinstance(data["message_id"], int)


def test_send_message_to_self_rejected(client):
    resp = _send(client, GURU_ID, GURU_ID, "test")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cannot send message to yourself"


def test_send_message_missing_fields(client):
    resp = client.post("/api/messages", headers=_auth(), json={"receiver_id": MURID_ID})
    assert resp.status_code == 400


def test_send_message_unknown_receiver(client):
    resp = _send(client, GURU_ID, 404, "Halo")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Receiver not found"


def test_thread_requires_conversation_with(client):
    resp = client.get("/api/messages", headers=_auth())
    assert resp.status_code == 400


def test_message_flow(client):
    # 1. guru sends, thread shows it unread
    _send(client, GURU_ID, MURID_ID, "Halo")
    resp = client.get(f"/api/messages?conversation_with={MURID_ID}", headers=_auth())
    thread = resp.json()
    assert thread["count"] == 1
    assert thread["messages"][0]["message"] == "Halo"
    assert thread["messages"][0]["is_read"] is False
    assert thread["messages"][0]["sender_name"] == "Ustadzah Aisyah"
    assert thread["messages"][0]["receiver_name"] == "Fatimah"
    assert thread["messages"][0]["receiver_email"] == "user2@example.com"

    unread = client.get("/api/messages/unread-count", headers=_auth(MURID_ID, "murid"))
    assert unread.json() == {"unread_count": 1}

    # 2. murid opens the conversation and marks it read
    resp = client.put(
        "/api/messages/mark-conversation-read",
        headers=_auth(MURID_ID, "murid"),
        json={"sender_id": GURU_ID},
    )
    assert resp.status_code == 200
    assert resp.json() == {"message": "Conversation marked as read", "updated_count": 1}

    resp = client.get(f"/api/messages?conversation_with={GURU_ID}", headers=_auth(MURID_ID, "murid"))
    assert resp.json()["messages"][0]["is_read"] is True

    # 5. guru's inbox shows one conversation with nothing unread
    resp = client.get("/api/messages/conversations", headers=_auth())
    body = resp.json()
    assert body["count"] == 1
    [conv] = body["conversations"]
    assert conv["user_id"] == MURID_ID
    assert conv["role"] == "murid"
    assert conv["last_message"] == "Halo"
    assert conv["unread_count"] == 0


def test_mark_message_read(client):
    msg_id = _send(client, GURU_ID, MURID_ID, "Halo").json()["data"]["message_id"]

    resp = client.put(f"/api/messages/{msg_id}/read", headers=_auth(MURID_ID, "murid"))
    assert resp.status_code == 200
    assert resp.json()["message"] == "Message marked as read"
    assert resp.json()["data"]["is_read"] is True

    again = client.put(f"/api/messages/{msg_id}/read", headers=_auth(MURID_ID, "murid"))
    assert again.status_code == 200
    assert again.json()["data"]["is_read"] is True


def test_mark_message_read_forbidden_for_others(client):
    msg_id = _send(client, GURU_ID, MURID_ID, "Halo").json()["data"]["message_id"]

    for user_id, role in ((GURU_ID, "guru"), (OTHER_MURID_ID, "murid")):
        resp = client.put(f"/api/messages/{msg_id}/read", headers=_auth(user_id, role))
        assert resp.status_code == 403


def test_mark_message_read_not_found(client):
    resp = client.put("/api/messages/999/read", headers=_auth(MURID_ID, "murid"))
    assert resp.status_code == 404


def test_conversations_empty_for_fresh_user(client):
    resp = client.get("/api/messages/conversations", headers=_auth(OTHER_MURID_ID, "murid"))
    assert resp.status_code == 200
    assert resp.json() == {"conversations": [], "count": 0}


def test_storage_failure_returns_500(client, uow, monkeypatch):
    async def _boom(user_id: int) -> int:
        raise OperationalError("SELECT count(*)", {}, Exception("connection reset"))

    monkeypatch.setattr(uow.messages, "count_unread", _boom)

    resp = client.get("/api/messages/unread-count", headers=_auth())
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}


def test_request_id_header_echoed(client):
    resp = client.get("/healthz", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"


def test_request_id_header_replaced_when_unsafe(client):
    resp = client.get("/healthz", headers={"X-Request-ID": "bad id\twith spaces"})
    echoed = resp.headers["X-Request-ID"]
    assert echoed != "bad id\twith spaces"
    assert len(echoed) == 32
