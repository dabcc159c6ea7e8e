"""Shared fixtures for fitcore tests."""

import os

os.environ.setdefault("RATE_LIMIT_BACKEND", "memory")
os.environ.setdefault("DATABASE_BACKEND", "memory")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from fitcore.api import create_app
from fitcore.infrastructure.database import Repositories
from fitcore.infrastructure.rate_limit import InMemoryTokenBucket
from fitcore.infrastructure.storage import ObjectStorage

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_ms: int = 1_714_564_800_000):
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, delta: timedelta) -> None:
        self.now_ms += int(delta.total_seconds() * 1000)


class FakeStorage(ObjectStorage):
    """Records presign requests and returns predictable URLs."""

    def __init__(self):
        self.calls = []

    async def presign_put(self, key, content_type, size_bytes, ttl):
        self.calls.append((key, content_type, size_bytes, ttl))
        return f"https://uploads.example.com/{key}?sig=test"


def make_token(user_id: str = "user-1", secret: str = "test-secret", **claims) -> str:
    payload = {"user_id": user_id, "exp": datetime.now(timezone.utc) + timedelta(hours=1)}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def _test_env(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_BACKEND", "memory")
    monkeypatch.setenv("DATABASE_BACKEND", "memory")
    monkeypatch.delenv("S3_BUCKET", raising=False)
    monkeypatch.setenv("JWT_SECRET", "test-secret")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repos():
    return Repositories.in_memory()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def upload_limiter(clock):
    return InMemoryTokenBucket("videos:upload", 5, timedelta(minutes=1), clock=clock)


@pytest.fixture
def report_limiter(clock):
    return InMemoryTokenBucket("reports", 5, timedelta(minutes=1), clock=clock)


@pytest.fixture
def client(repos, storage, upload_limiter, report_limiter):
    app = create_app(
        repositories=repos,
        object_storage=storage,
        upload_limiter=upload_limiter,
        report_limiter=report_limiter,
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}
