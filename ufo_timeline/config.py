# ufo_timeline/config.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

SERVICE_NAME = "ufo-timeline"
VERSION = "1.0.0"


class Settings(BaseModel):
    database_url: str = "sqlite:///./data/ufo.db"
    sql_echo: bool = False
    api_token: Optional[str] = None
    api_url: Optional[str] = None
    state_dir: Path = Path("data/state")
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Read settings from the environment (and .env) at call time."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./data/ufo.db"),
        sql_echo=os.getenv("SQL_ECHO", "0") == "1",
        api_token=os.getenv("API_TOKEN") or None,
        api_url=os.getenv("UFO_API_URL") or None,
        state_dir=Path(os.getenv("UFO_STATE_DIR", "data/state")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, level or get_settings().log_level, logging.INFO),
        format=LOG_FORMAT,
    )
