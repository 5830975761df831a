from datetime import timedelta

from conftest import auth, register
from utils.utils import create_access_token, decode_access_token


def test_register_returns_token_with_id_and_role(client) -> None:
    response = client.post(
        "/api/auth/register",
        json={"name": "Ana", "email": "ana@college.edu", "password": "pw-12345", "role": "student"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["name"] == "Ana"
    assert body["user"]["role"] == "student"
    payload = decode_access_token(body["token"])
    assert payload["id"] == body["user"]["id"]
    assert payload["role"] == "student"
    assert "exp" in payload


def test_register_rejects_unknown_role(client) -> None:
    response = client.post(
        "/api/auth/register",
        json={"name": "Eve", "email": "eve@college.edu", "password": "pw", "role": "teacher"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Role must be admin or student"


def test_register_same_email_twice_conflicts(client) -> None:
    register(client, "ana@college.edu", "student")

    response = client.post(
        "/api/auth/register",
        json={"name": "Ana Again", "email": "ANA@college.edu", "password": "other", "role": "student"},
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Email already registered"


def test_login_flow(client) -> None:
    register(client, "admin@college.edu", "admin", password="correct-horse")

    ok = client.post("/api/auth/login", json={"email": "admin@college.edu", "password": "correct-horse"})
    assert ok.status_code == 200
    assert ok.json()["user"]["role"] == "admin"

    wrong = client.post("/api/auth/login", json={"email": "admin@college.edu", "password": "nope"})
    assert wrong.status_code == 401

    missing = client.post("/api/auth/login", json={"email": "ghost@college.edu", "password": "x"})
    assert missing.status_code == 404


def test_me_requires_valid_token(client) -> None:
    token = register(client, "ana@college.edu", "student")

    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers=auth("garbage")).status_code == 401

    response = client.get("/api/auth/me", headers=auth(token))
    assert response.status_code == 200
    assert response.json()["email"] == "ana@college.edu"


def test_expired_token_is_rejected(client) -> None:
    register(client, "ana@college.edu", "student")
    expired = create_access_token({"id": 1, "role": "student"}, expires_delta=timedelta(seconds=-10))

    assert client.get("/api/auth/me", headers=auth(expired)).status_code == 401


def test_token_accepted_from_cookie(client) -> None:
    token = register(client, "ana@college.edu", "student")
    client.cookies.set("access_token", token)

    assert client.get("/api/auth/me").status_code == 200


def test_blocking_auth_handlers_run_in_threadpool() -> None:
    import inspect

    from routes.auth.auth import login, me, register
    from utils.utils import get_current_user, get_notice_reader

    # bcrypt and synchronous queries must stay off the event loop
    for handler in (register, login, me, get_current_user, get_notice_reader):
        assert not inspect.iscoroutinefunction(handler), handler.__name__
