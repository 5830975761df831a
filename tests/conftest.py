"""
Pytest configuration for the notice board tests.

- Puts the project root on sys.path so `import config`, `import routes.*` work.
- Provides a SQLite-backed Database per test, a recording mail sender and an
  application/TestClient factory with the background scheduler disabled.
"""

import os
import sys
import threading
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SECRET_KEY", "tests-secret-key")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from config import Database, Settings
from store.noticeStore import create_user


class RecordingSender:
    """Collects (email, notice) pairs instead of talking to SMTP."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)
        self._lock = threading.Lock()

    def __call__(self, to, notice):
        if to in self.fail_for:
            raise RuntimeError(f"mailbox unavailable: {to}")
        with self._lock:
            self.sent.append((to, notice))

    def for_notice(self, notice_id):
        return sorted(to for to, notice in self.sent if notice.id == notice_id)


@pytest.fixture()
def database(tmp_path: Path) -> Database:
    db = Database(f"sqlite:///{tmp_path / 'notices.sqlite3'}")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture()
def session(database: Database):
    db = database.session()
    yield db
    db.close()


@pytest.fixture()
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture()
def settings() -> Settings:
    test_settings = Settings()
    test_settings.PUBLIC_NOTICE_READS = False
    test_settings.ADMIN_EMAIL = None
    test_settings.ADMIN_PASSWORD = None
    test_settings.FRONTEND_URL = "https://notices.example.edu"
    return test_settings


@pytest.fixture()
def make_client(database, sender, settings):
    from main import create_app

    clients = []

    def _make(**overrides):
        app = create_app(
            database=database,
            settings=overrides.pop("settings", settings),
            send=overrides.pop("send", sender),
            start_scheduler=False,
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture()
def add_user(session):
    """Insert an account directly, skipping bcrypt for speed."""

    def _add(email, role="student", name=None):
        return create_user(
            session,
            name=name or email.split("@")[0],
            email=email,
            password_hash="not-a-real-hash",
            role=role,
        )

    return _add


def register(client: TestClient, email: str, role: str, password: str = "s3cret-pass") -> str:
    response = client.post(
        "/api/auth/register",
        json={"name": email.split("@")[0], "email": email, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    return response.json()["token"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
