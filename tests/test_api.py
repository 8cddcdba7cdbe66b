from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import inspect
from sqlalchemy.orm import sessionmaker

from conftest import ACTOR, OUTSIDER, Seeded, add_keys
from lexibranch.config import settings
from lexibranch.database import build_engine, build_session_factory, get_session
from lexibranch.infrastructure.database.db import DB
from lexibranch.main import create_app


def _auth(user_id: str = ACTOR) -> dict[str, str]:
    token = jwt.encode({"sub": user_id}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(session_factory: sessionmaker) -> Iterator[TestClient]:
    with TestClient(create_app(session_factory)) as test_client:
        yield test_client


def _create_feature(client: TestClient, seeded: Seeded, name: str = "Feature Branch!!") -> dict:
    response = client.post(
        f"/api/spaces/{seeded.space_id}/branches",
        json={"name": name, "from_branch_id": seeded.main_id},
        headers=_auth(),
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_requests_without_valid_token_are_rejected(client: TestClient, seeded: Seeded) -> None:
    assert client.get(f"/api/branches/{seeded.main_id}").status_code == 401
    bad = client.get(
        f"/api/branches/{seeded.main_id}", headers={"Authorization": "Bearer nonsense"}
    )
    assert bad.status_code == 401


def test_create_and_list_branches(client: TestClient, seeded: Seeded, session_factory: sessionmaker) -> None:
    add_keys(session_factory, seeded.main_id, {"greeting": {"en": "Hi"}})

    created = _create_feature(client, seeded)
    listed = client.get(f"/api/spaces/{seeded.space_id}/branches", headers=_auth()).json()

    assert created["slug"] == "feature-branch"
    assert created["key_count"] == 1
    assert created["source_branch_id"] == seeded.main_id
    assert [b["slug"] for b in listed["branches"]] == ["main", "feature-branch"]


def test_error_responses_map_to_status_codes(client: TestClient, seeded: Seeded) -> None:
    _create_feature(client, seeded)

    duplicate = client.post(
        f"/api/spaces/{seeded.space_id}/branches",
        json={"name": "feature branch", "from_branch_id": seeded.main_id},
        headers=_auth(),
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == {
        "field": "name",
        "code": "BRANCH_NAME_EXISTS",
        "message": "Branch with this name already exists in the space",
    }

    missing = client.get("/api/branches/missing", headers=_auth())
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Branch not found"

    forbidden = client.get(f"/api/branches/{seeded.main_id}", headers=_auth(OUTSIDER))
    assert forbidden.status_code == 403

    default_delete = client.delete(f"/api/branches/{seeded.main_id}", headers=_auth())
    assert default_delete.status_code == 400
    assert default_delete.json()["detail"] == "Cannot delete the default branch"


def test_diff_preview_and_merge_flow(client: TestClient, seeded: Seeded, session_factory: sessionmaker) -> None:
    add_keys(session_factory, seeded.main_id, {"greeting": {"en": "Hi"}})
    feature = _create_feature(client, seeded, "feature")

    key = client.post(
        f"/api/branches/{feature['id']}/keys",
        json={"name": "farewell", "translations": {"en": "Bye"}},
        headers=_auth(),
    )
    assert key.status_code == 201, key.text
    listed = client.get(f"/api/spaces/{seeded.space_id}/branches", headers=_auth()).json()
    feature_row = next(b for b in listed["branches"] if b["id"] == feature["id"])
    assert feature_row["key_count"] == 2

    diff = client.get(
        f"/api/branches/{feature['id']}/diff/{seeded.main_id}", headers=_auth()
    ).json()
    assert [entry["key"] for entry in diff["added"]] == ["farewell"]
    assert diff["conflicts"] == []

    with get_session(session_factory) as session:
        greeting_id = DB(session).translation_keys.get_by_name(feature["id"], "greeting").id
    updated = client.put(
        f"/api/keys/{greeting_id}/translations",
        json={"translations": {"en": "Hello"}},
        headers=_auth(),
    )
    assert updated.json()["translations"] == [
        {"language": "en", "value": "Hello", "status": "pending"}
    ]

    preview = client.get(
        f"/api/branches/{feature['id']}/merge-preview/{seeded.main_id}", headers=_auth()
    ).json()
    assert preview["conflicts"] == [
        {"key": "greeting", "source": {"en": "Hello"}, "target": {"en": "Hi"}}
    ]

    blocked = client.post(
        f"/api/branches/{feature['id']}/merge",
        json={"target_branch_id": seeded.main_id},
        headers=_auth(),
    ).json()
    assert blocked["success"] is False
    assert [entry["key"] for entry in blocked["conflicts"]] == ["greeting"]

    merged = client.post(
        f"/api/branches/{feature['id']}/merge",
        json={
            "target_branch_id": seeded.main_id,
            "resolutions": [{"key": "greeting", "resolution": "source"}],
        },
        headers=_auth(),
    ).json()
    assert merged == {"success": True, "merged": 2, "conflicts": None}

    after = client.get(
        f"/api/branches/{feature['id']}/diff/{seeded.main_id}", headers=_auth()
    ).json()
    assert after["added"] == after["modified"] == after["conflicts"] == []


def test_delete_branch(client: TestClient, seeded: Seeded) -> None:
    feature = _create_feature(client, seeded)

    response = client.delete(f"/api/branches/{feature['id']}", headers=_auth())

    assert response.status_code == 204
    assert client.get(f"/api/branches/{feature['id']}", headers=_auth()).status_code == 404


def test_create_space_returns_default_branch(client: TestClient, seeded: Seeded) -> None:
    response = client.post(
        "/api/spaces",
        json={"project_id": seeded.project_id, "name": "Docs Site"},
        headers=_auth(),
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["slug"] == "docs-site"
    branch = client.get(f"/api/branches/{body['default_branch_id']}", headers=_auth()).json()
    assert (branch["name"], branch["is_default"], branch["key_count"]) == ("main", True, 0)


def test_startup_bootstraps_schema_on_injected_engine(monkeypatch: pytest.MonkeyPatch) -> None:
    engine = build_engine("sqlite+pysqlite:///:memory:")
    monkeypatch.setattr(settings, "bootstrap_schema", True)
    try:
        assert not inspect(engine).has_table("branches")
        with TestClient(create_app(build_session_factory(engine))) as test_client:
            assert test_client.get("/health").status_code == 200
        assert inspect(engine).has_table("branches")
        assert inspect(engine).has_table("translation_keys")
    finally:
        engine.dispose()
