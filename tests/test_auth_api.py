from __future__ import annotations

from registry.auth.security import hash_password
from registry.models.user import Role
from registry.models.user import User


def test_login_and_whoami(client, db_session):
    role = Role(name="User")
    user = User(email="secretaria@example.com", full_name="Secretaria", hashed_password=hash_password("s3nha-forte"))
    user.roles.append(role)
    db_session.add(user)
    db_session.commit()

    bad = client.post("/auth/login", json={"email": "secretaria@example.com", "password": "errada"})
    assert bad.status_code == 401

    login = client.post("/auth/login", json={"email": "secretaria@example.com", "password": "s3nha-forte"})
    assert login.status_code == 200, login.text
    token = login.json()["access_token"]
    assert login.json()["token_type"] == "bearer"

    whoami = client.get("/auth/whoami", headers={"Authorization": f"Bearer {token}"})
    assert whoami.status_code == 200, whoami.text
    assert whoami.json()["user"] == "secretaria@example.com"
    assert whoami.json()["roles"] == ["User"]

    members = client.get("/members", headers={"Authorization": f"Bearer {token}"})
    assert members.status_code == 200


def test_invalid_token_is_rejected(client):
    resp = client.get("/auth/whoami", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_user_without_role_is_forbidden(client, authorize, db_session):
    user = User(email="visitante@example.com", hashed_password="hash", is_active=True)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    authorize(user)
    assert client.get("/members").status_code == 403


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_user_edits_own_profile(client, authorize, db_session, registry_user):
    authorize(registry_user)
    resp = client.patch(
        "/auth/me",
        json={"full_name": "  Secretária da Igreja ", "avatar_url": "avatars/clerk.png"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["full_name"] == "Secretária da Igreja"
    assert resp.json()["avatar_url"] == "avatars/clerk.png"
    assert resp.json()["user"] == "clerk@example.com"

    cleared = client.patch("/auth/me", json={"avatar_url": None})
    assert cleared.json()["avatar_url"] is None
    assert cleared.json()["full_name"] == "Secretária da Igreja"

    db_session.refresh(registry_user)
    assert registry_user.full_name == "Secretária da Igreja"
    assert registry_user.avatar_url is None


def test_profile_edit_requires_authentication(client):
    assert client.patch("/auth/me", json={"full_name": "Anônimo"}).status_code == 401


def test_user_accounts_are_keyed_by_email_only():
    assert "username" not in User.__table__.columns
    assert User.__table__.columns["email"].unique
