# ufo_timeline/db/session.py
import os
from contextlib import contextmanager

from sqlmodel import SQLModel, Session, create_engine

from ufo_timeline.config import get_settings

# Same DB for API, UI and scripts; DATABASE_URL overrides it.
_settings = get_settings()
DATABASE_URL = _settings.database_url

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(
    DATABASE_URL,
    echo=_settings.sql_echo,
    connect_args=connect_args,
)


def _ensure_sqlite_dir(url: str) -> None:
    if url.startswith("sqlite:///") and url != "sqlite:///:memory:":
        path = url[len("sqlite:///"):]
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)


@contextmanager
def get_session():
    with Session(engine) as s:
        yield s


def create_all():
    # Side-effect import registers the events table on the metadata
    from ufo_timeline.models import event  # noqa: F401

    _ensure_sqlite_dir(DATABASE_URL)
    SQLModel.metadata.create_all(engine)
