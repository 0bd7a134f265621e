# tests/conftest.py
import itertools
import os
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
TEST_TOKEN = "test-token"

# Env must be in place before ufo_timeline.db.session builds its engine
_TMP = Path(tempfile.mkdtemp(prefix="ufo-tests-"))
DB_URL = f"sqlite:///{_TMP / 'app.db'}"
os.environ["DATABASE_URL"] = DB_URL
os.environ["API_TOKEN"] = TEST_TOKEN
os.environ["UFO_STATE_DIR"] = str(_TMP / "state")
os.environ.pop("UFO_API_URL", None)

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402
from sqlalchemy import delete  # noqa: E402

from ufo_timeline.models.event import Event  # noqa: E402
from ufo_timeline.models.schemas import UFOEvent  # noqa: E402


def alembic_config(url: str) -> Config:
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


@pytest.fixture(scope="session", autouse=True)
def migrate():
    command.upgrade(alembic_config(DB_URL), "head")
    yield


@pytest.fixture
def session(migrate):
    # DB session for DB-level tests
    from ufo_timeline.db.session import get_session
    with get_session() as s:
        yield s


@pytest.fixture(autouse=True)
def _clean_db(session):
    """Each test starts with an empty events table."""
    session.exec(delete(Event))
    session.commit()


@pytest.fixture
def seeded(session):
    from scripts import ingest_seeds
    ingest_seeds.upsert_events(session)
    return session


@pytest.fixture
def client(migrate):
    from fastapi.testclient import TestClient
    from ufo_timeline.main import api
    return TestClient(api)


@pytest.fixture
def admin_client(client):
    # Default auth header so admin tests don't pass it each time
    client.headers.update({"X-API-Key": TEST_TOKEN})
    return client


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_event():
    ids = itertools.count(1)

    def _make(**fields) -> UFOEvent:
        data = {
            "id": str(next(ids)),
            "title": "Untitled",
            "category": "Sighting",
            "date": "January 1, 1980",
        }
        data.update(fields)
        return UFOEvent(**data)

    return _make
