"""Pytest configuration for the job portal API."""
import pytest
from fastapi.testclient import TestClient

from job_portal.core.config import Settings
from job_portal.core.security import TokenCodec
from job_portal.db.memory import MemoryStore
from job_portal.main import create_app

SECRET = "test-secret"
TTL_SECONDS = 10 * 3600


class FakeClock:
    """Callable clock the tests can move forward."""

    def __init__(self, now: float = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def codec(clock):
    return TokenCodec(SECRET, ttl=TTL_SECONDS, clock=clock)


@pytest.fixture
def settings():
    return Settings(
        access_token_secret=SECRET,
        token_ttl_hours=10,
        store_backend="memory",
        cors_origins="http://localhost:5173",
        log_level="WARNING",
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def app(settings, store, codec):
    return create_app(settings, store=store, codec=codec)


@pytest.fixture
def client(app):
    return TestClient(app)


def login(client: TestClient, email: str, **claims):
    """Sign in through POST /jwt; the cookie lands in the client's jar."""
    response = client.post("/jwt", json={"email": email, **claims})
    assert response.status_code == 200
    return response


def make_job(store: MemoryStore, **fields) -> str:
    """Insert a job straight into the store and return its id as a string."""
    doc = {
        "title": "Backend Engineer",
        "hr_email": "a@x.com",
        "location": "Dhaka",
        "company": "Acme",
        "company_logo": "https://acme.test/logo.png",
        "salaryRange": {"min": 40000, "max": 60000, "currency": "bdt"},
    }
    doc.update(fields)
    return str(store.jobs.insert_one(doc).inserted_id)
