"""Project CRUD endpoint tests: visibility, ownership and anti-enumeration."""

from datetime import datetime
from uuid import uuid4

import pytest


def _parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def _create(client, headers, **body):
    payload = {"name": "Demo", "technology": "React", **body}
    resp = await client.post("/api/projects", headers=headers, json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _list_ids(client, headers) -> list[str]:
    resp = await client.get("/api/projects", headers=headers)
    assert resp.status_code == 200
    return [p["id"] for p in resp.json()]


async def test_create_project(test_client, alice):
    user, headers = alice
    data = await _create(
        test_client, headers, name="Demo", technology="React", description="A demo"
    )
    assert data["name"] == "Demo"
    assert data["technology"] == "React"
    assert data["description"] == "A demo"
    assert data["status"] == "planning"
    assert data["owner"]["id"] == user["id"]
    assert data["owner"]["username"] == "alice"
    assert data["collaborators"] == []
    assert data["createdAt"] and data["updatedAt"]


@pytest.mark.parametrize(
    "payload",
    [{"technology": "React"}, {"name": "Demo"}, {"name": "", "technology": "React"}],
    ids=["no-name", "no-technology", "empty-name"],
)
async def test_create_project_missing_field(test_client, alice, payload):
    _, headers = alice
    resp = await test_client.post("/api/projects", headers=headers, json=payload)
    assert resp.status_code == 400
    assert "Missing required field" in resp.json()["error"]


async def test_create_then_list_round_trip(test_client, alice):
    _, headers = alice
    created = await _create(
        test_client, headers, name="Shop", technology="Vue", description="Storefront"
    )

    resp = await test_client.get("/api/projects", headers=headers)
    assert resp.status_code == 200
    [listed] = [p for p in resp.json() if p["id"] == created["id"]]
    assert listed["name"] == "Shop"
    assert listed["technology"] == "Vue"
    assert listed["description"] == "Storefront"
    assert listed["status"] == "planning"


async def test_list_excludes_other_users_projects(test_client, alice, bob):
    _, alice_headers = alice
    _, bob_headers = bob
    project = await _create(test_client, alice_headers)

    assert project["id"] in await _list_ids(test_client, alice_headers)
    assert project["id"] not in await _list_ids(test_client, bob_headers)


async def test_collaborator_sees_and_updates_project(test_client, alice, bob):
    _, alice_headers = alice
    bob_user, bob_headers = bob
    project = await _create(test_client, alice_headers)

    resp = await test_client.put(
        f"/api/projects/{project['id']}",
        headers=alice_headers,
        json={"collaborators": [bob_user["id"]]},
    )
    assert resp.status_code == 200
    assert [c["username"] for c in resp.json()["collaborators"]] == ["bob"]

    assert project["id"] in await _list_ids(test_client, bob_headers)

    resp = await test_client.put(
        f"/api/projects/{project['id']}",
        headers=bob_headers,
        json={"status": "testing"},
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "testing"
    assert resp.json()["owner"]["username"] == "alice"


async def test_collaborator_cannot_delete(test_client, alice, bob):
    _, alice_headers = alice
    bob_user, bob_headers = bob
    project = await _create(test_client, alice_headers)
    await test_client.put(
        f"/api/projects/{project['id']}",
        headers=alice_headers,
        json={"collaborators": [bob_user["id"]]},
    )

    resp = await test_client.delete(
        f"/api/projects/{project['id']}", headers=bob_headers
    )
    assert resp.status_code == 404
    assert project["id"] in await _list_ids(test_client, alice_headers)


async def test_update_by_stranger_looks_like_missing_project(test_client, alice, bob):
    _, alice_headers = alice
    _, bob_headers = bob
    project = await _create(test_client, alice_headers)

    forbidden = await test_client.put(
        f"/api/projects/{project['id']}", headers=bob_headers, json={"name": "Mine"}
    )
    missing = await test_client.put(
        f"/api/projects/{uuid4()}", headers=bob_headers, json={"name": "Mine"}
    )

    assert forbidden.status_code == missing.status_code == 404
    assert forbidden.json() == missing.json() == {"error": "Project not found"}


async def test_delete_by_stranger_looks_like_missing_project(test_client, alice, bob):
    _, alice_headers = alice
    _, bob_headers = bob
    project = await _create(test_client, alice_headers)

    forbidden = await test_client.delete(
        f"/api/projects/{project['id']}", headers=bob_headers
    )
    missing = await test_client.delete(f"/api/projects/{uuid4()}", headers=bob_headers)

    assert forbidden.status_code == missing.status_code == 404
    assert forbidden.json() == missing.json()


async def test_malformed_project_id_is_not_found(test_client, alice):
    _, headers = alice
    resp = await test_client.put(
        "/api/projects/not-a-uuid", headers=headers, json={"name": "x"}
    )
    assert resp.status_code == 404


async def test_update_rejects_unknown_status(test_client, alice):
    _, headers = alice
    project = await _create(test_client, headers)
    resp = await test_client.put(
        f"/api/projects/{project['id']}", headers=headers, json={"status": "archived"}
    )
    assert resp.status_code == 400
    assert "status must be one of" in resp.json()["error"]


async def test_update_rejects_unknown_collaborator(test_client, alice):
    _, headers = alice
    project = await _create(test_client, headers)
    resp = await test_client.put(
        f"/api/projects/{project['id']}",
        headers=headers,
        json={"collaborators": [str(uuid4())]},
    )
    assert resp.status_code == 400


async def test_update_never_reassigns_owner(test_client, alice, bob):
    alice_user, headers = alice
    bob_user, _ = bob
    project = await _create(test_client, headers)

    resp = await test_client.put(
        f"/api/projects/{project['id']}",
        headers=headers,
        json={"owner": bob_user["id"], "ownerId": bob_user["id"], "name": "Renamed"},
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Renamed"
    assert resp.json()["owner"]["id"] == alice_user["id"]


async def test_update_only_touches_provided_fields(test_client, alice):
    _, headers = alice
    project = await _create(test_client, headers, description="keep me")
    resp = await test_client.put(
        f"/api/projects/{project['id']}", headers=headers, json={"technology": "Svelte"}
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["technology"] == "Svelte"
    assert data["description"] == "keep me"
    assert data["name"] == "Demo"


async def test_full_project_lifecycle(test_client):
    resp = await test_client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "alice@x.com", "password": "pw"},
    )
    assert resp.status_code == 201

    resp = await test_client.post(
        "/api/auth/login", json={"email": "alice@x.com", "password": "pw"}
    )
    assert resp.status_code == 200
    headers = {"Authorization": f"Bearer {resp.json()['token']}"}

    project = await _create(test_client, headers, name="Demo", technology="React")
    assert project["status"] == "planning"
    assert project["owner"]["username"] == "alice"

    resp = await test_client.put(
        f"/api/projects/{project['id']}", headers=headers, json={"status": "deployed"}
    )
    assert resp.status_code == 200

    resp = await test_client.get("/api/projects", headers=headers)
    [fetched] = resp.json()
    assert fetched["status"] == "deployed"
    assert _parse_ts(fetched["updatedAt"]) > _parse_ts(fetched["createdAt"])

    resp = await test_client.delete(f"/api/projects/{project['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Project deleted successfully"}

    assert await _list_ids(test_client, headers) == []


async def test_listing_uses_factory_data(test_client, alice, db_session, project_factory):
    from projecthub.models.users import User
    from sqlalchemy import select

    alice_user, headers = alice
    owner = (
        await db_session.execute(select(User).where(User.username == "alice"))
    ).scalar_one()
    await project_factory(owner, name="Seeded", technology="Go")

    resp = await test_client.get("/api/projects", headers=headers)
    assert [p["name"] for p in resp.json()] == ["Seeded"]
    assert resp.json()[0]["owner"]["id"] == alice_user["id"]


async def test_unexpected_error_returns_generic_500(db_session, monkeypatch, alice):
    from httpx import ASGITransport, AsyncClient

    from projecthub.main import app
    from projecthub.services.projects import ProjectService

    _, headers = alice

    async def boom(self, user_id):
        raise RuntimeError("database exploded with secrets")

    monkeypatch.setattr(ProjectService, "list_visible", boom)

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        resp = await client.get("/api/projects", headers=headers)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
    assert "secrets" not in resp.text
    assert resp.headers["X-Frame-Options"] == "DENY"


async def test_store_timeout_returns_503(test_client, alice, monkeypatch):
    from projecthub.services.base import StoreService
    from projecthub.services.errors import ServiceUnavailable

    _, headers = alice

    async def stalled(self, awaitable):
        awaitable.close()
        raise ServiceUnavailable()

    monkeypatch.setattr(StoreService, "_store", stalled)

    resp = await test_client.get("/api/projects", headers=headers)
    assert resp.status_code == 503
    assert resp.json() == {"error": "Service temporarily unavailable"}
