"""Integration smoke tests for REST API (using in-memory UoW via dependency override)."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from chat_store.api.deps import get_pair_lock, get_uow
from chat_store.app import create_app
from tests.conftest import FakePairLock, FakeUoW

BASE = "/api/v1/chat"


@pytest.fixture
def app_with_uow():
    app = create_app()
    uow = FakeUoW()
    lock = FakePairLock()

    async def _override():
        yield uow

    app.dependency_overrides[get_uow] = _override
    app.dependency_overrides[get_pair_lock] = lambda: lock
    return app, uow


@pytest.fixture
def client(app_with_uow):
    app, _ = app_with_uow
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def uow(app_with_uow):
    _, uow = app_with_uow
    return uow


def _create(client, user_id="u1", user_id2="u2", **extra):
    resp = client.post(
        f"{BASE}/conversations",
        json={"user_id": user_id, "user_id2": user_id2, **extra},
    )
    assert resp.status_code == 201
    return resp.json()


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_request_id_is_echoed(client):
    resp = client.get("/healthz", headers={"X-Request-ID": "req-1"})
    assert resp.headers["X-Request-ID"] == "req-1"


def test_create_and_get_conversation(client):
    created = _create(client, subject="hello")

    resp = client.get(f"{BASE}/conversations/{created['id']}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["user_id"] == "u1"
    assert data["user_id2"] == "u2"
    assert data["delete"] is False
    assert data["attributes"] == {"subject": "hello"}


def test_get_missing_conversation(client):
    resp = client.get(f"{BASE}/conversations/missing")
    assert resp.status_code == 404


def test_availability_conflict_carries_conversation(client):
    resp = client.get(f"{BASE}/conversations/availability", params={"user_id": "u1", "user_id2": "u2"})
    assert resp.status_code == 204

    created = _create(client)

    resp = client.get(f"{BASE}/conversations/availability", params={"user_id": "u2", "user_id2": "u1"})
    assert resp.status_code == 409
    assert resp.json()["conversation"]["id"] == created["id"]


def test_open_conversation(client):
    first = client.post(f"{BASE}/conversations/open", json={"user_id": "u1", "user_id2": "u2"})
    second = client.post(f"{BASE}/conversations/open", json={"user_id": "u2", "user_id2": "u1"})

    assert first.status_code == 200
    assert first.json()["created"] is True
    assert second.json()["created"] is False
    assert second.json()["conversation"]["id"] == first.json()["conversation"]["id"]


def test_patch_rejects_invalid_participant(client):
    created = _create(client)

    resp = client.patch(f"{BASE}/conversations/{created['id']}", json={"userId": 7})
    assert resp.status_code == 422

    assert client.get(f"{BASE}/conversations/{created['id']}").status_code == 200
    for user_id in ("u1", "u2"):
        resp = client.get(f"{BASE}/users/{user_id}/conversations")
        assert resp.status_code == 200
        assert [c["id"] for c in resp.json()] == [created["id"]]


def test_patch_merges_and_delete_is_soft(client):
    created = _create(client, subject="a", color="blue")

    resp = client.patch(f"{BASE}/conversations/{created['id']}", json={"subject": "b"})
    assert resp.status_code == 200
    assert resp.json()["attributes"] == {"subject": "b", "color": "blue"}

    resp = client.delete(f"{BASE}/conversations/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["delete"] is True

    resp = client.get(f"{BASE}/users/u1/conversations")
    assert [c["id"] for c in resp.json()] == [created["id"]]

    resp = client.get(f"{BASE}/conversations/availability", params={"user_id": "u1", "user_id2": "u2"})
    assert resp.status_code == 204


def test_messages_flow(client):
    conv = _create(client)
    for ts in (30, 10, 20):
        resp = client.post(
            f"{BASE}/conversations/{conv['id']}/messages",
            json={"timestamp": ts, "sender": "u1", "body": f"m{ts}"},
        )
        assert resp.status_code == 201
        assert resp.json()["attributes"]["body"] == f"m{ts}"

    resp = client.get(f"{BASE}/conversations/{conv['id']}/messages")
    assert [m["timestamp"] for m in resp.json()] == [10, 20, 30]

    resp = client.get(
        f"{BASE}/conversations/{conv['id']}/messages/page",
        params={"page": 1, "page_size": 2},
    )
    assert [m["timestamp"] for m in resp.json()] == [30]

    resp = client.get(f"{BASE}/conversations/{conv['id']}/messages/feed", params={"limit": 2})
    data = resp.json()
    assert [m["timestamp"] for m in data["items"]] == [10, 20]
    assert data["next_cursor"]

    resp = client.get(
        f"{BASE}/conversations/{conv['id']}/messages/feed",
        params={"limit": 2, "cursor": data["next_cursor"]},
    )
    data = resp.json()
    assert [m["timestamp"] for m in data["items"]] == [30]
    assert data["next_cursor"] is None


def test_bad_page_size_rejected(client):
    resp = client.get(f"{BASE}/conversations/c1/messages/page", params={"page_size": 0})
    assert resp.status_code == 422


def test_bad_cursor_rejected(client):
    resp = client.get(f"{BASE}/conversations/c1/messages/feed", params={"cursor": "!!"})
    assert resp.status_code == 422


def test_store_failure_maps_to_503(client, uow):
    uow.store.fail_on.add("list_by")

    resp = client.get(f"{BASE}/users/u1/conversations")
    assert resp.status_code == 503
