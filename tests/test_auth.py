from datetime import timedelta

from jose import jwt

from careerlink.database import SessionLocal
from careerlink.models.user import User
from careerlink.utils import jwt_handler


def test_register_login_and_profile_flow(client) -> None:
    register_payload = {
        "email": "tester@example.com",
        "password": "SecretPass123",
        "first_name": "Test",
        "last_name": "User",
        "skills": ["Python", " ", "SQL"],
    }
    register_response = client.post("/auth/register", json=register_payload)
    assert register_response.status_code == 201
    created_user = register_response.json()
    assert created_user["email"] == register_payload["email"]
    assert created_user["role"] == "student"
    assert created_user["skills"] == ["Python", "SQL"]

    login_payload = {"email": register_payload["email"], "password": register_payload["password"]}
    login_response = client.post("/auth/login", json=login_payload)
    assert login_response.status_code == 200
    token_body = login_response.json()
    assert token_body["token_type"] == "bearer"

    headers = {"Authorization": f"Bearer {token_body['access_token']}"}
    profile_response = client.get("/users/me", headers=headers)
    assert profile_response.status_code == 200
    profile = profile_response.json()
    assert profile["email"] == register_payload["email"]
    assert profile["is_admin"] is False

    update_payload = {"skills": "React, node.js", "university": "KAIST"}
    update_response = client.put("/users/me", json=update_payload, headers=headers)
    assert update_response.status_code == 200
    updated_profile = update_response.json()
    assert updated_profile["skills"] == ["React", "node.js"]
    assert updated_profile["university"] == "KAIST"


def test_register_rejects_admin_role(client) -> None:
    register_payload = {"email": "evil@example.com", "password": "SecretPass123", "role": "admin"}
    register_response = client.post("/auth/register", json=register_payload)
    assert register_response.status_code == 422


def test_admin_allowlist_marks_admin(client) -> None:
    payload = {"email": "admin@example.com", "password": "SecretPass123"}
    assert client.post("/auth/register", json=payload).status_code == 201
    token = client.post("/auth/login", json=payload).json()["access_token"]
    me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["is_admin"] is True


def test_duplicate_email_and_bad_password(client) -> None:
    payload = {"email": "dup@example.com", "password": "SecretPass123"}
    assert client.post("/auth/register", json=payload).status_code == 201
    assert client.post("/auth/register", json=payload).status_code == 400

    r = client.post("/auth/login", json={"email": "dup@example.com", "password": "WrongPass123"})
    assert r.status_code == 401


def test_deactivated_user_is_rejected(client) -> None:
    payload = {"email": "gone@example.com", "password": "SecretPass123"}
    client.post("/auth/register", json=payload)
    token = client.post("/auth/login", json=payload).json()["access_token"]

    with SessionLocal() as db:
        user = db.query(User).filter(User.email == "gone@example.com").one()
        user.is_active = False
        db.commit()

    r = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_protected_routes_require_token(client) -> None:
    assert client.get("/users/me").status_code == 401
    assert client.get("/api/search/unified", params={"query": "x"}).status_code == 401


def test_health(client) -> None:
    r = client.get("/health/")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = client.get("/health/db")
    assert r.status_code == 200
    body = r.json()
    assert body["orm"] == "ok"
    assert body["dialect"] == "sqlite"


def test_login_token_carries_user_claims(client) -> None:
    payload = {"email": "claims@example.com", "password": "SecretPass123", "role": "alumni"}
    user_id = client.post("/auth/register", json=payload).json()["id"]
    token = client.post("/auth/login", json={"email": payload["email"], "password": payload["password"]}).json()[
        "access_token"
    ]

    claims = jwt_handler.decode_access_token(token)
    assert claims["sub"] == str(user_id)
    assert claims["role"] == "alumni"
    assert jwt_handler.token_user_id(token) == user_id


def test_expired_and_malformed_tokens_are_rejected(client) -> None:
    payload = {"email": "late@example.com", "password": "SecretPass123"}
    client.post("/auth/register", json=payload)
    with SessionLocal() as db:
        user = db.query(User).filter(User.email == "late@example.com").one()
        expired = jwt_handler.create_access_token(user, timedelta(seconds=-1))

    r = client.get("/users/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Token expired"

    settings = jwt_handler.settings
    not_a_user = jwt.encode({"sub": "late@example.com"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    r = client.get("/users/me", headers={"Authorization": f"Bearer {not_a_user}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token subject"

    no_subject = jwt.encode({"role": "student"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    r = client.get("/users/me", headers={"Authorization": f"Bearer {no_subject}"})
    assert r.json()["detail"] == "Invalid token payload"
