# scripts/ingest_seeds.py

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Tuple

from pydantic import ValidationError

from ufo_timeline.config import configure_logging
from ufo_timeline.core.dates import parse_event_date
from ufo_timeline.db.session import create_all, get_session
from ufo_timeline.models.event import Event
from ufo_timeline.models.schemas import UFOEvent
from ufo_timeline.models.taxonomy import CATEGORIES

logger = logging.getLogger(__name__)

# Resolve to the bundled dataset regardless of CWD
SEEDS = Path(__file__).resolve().parents[1] / "ufo_timeline" / "data"


def load_events() -> list[dict]:
    p = SEEDS / "events.json"
    if not p.exists():
        return []
    with p.open(encoding="utf-8") as f:
        rows = json.load(f)
    return rows if isinstance(rows, list) else []


def upsert_events(session) -> Tuple[int, int, int]:
    """Insert or update by id; returns (inserted, updated, skipped)."""
    inserted = updated = skipped = 0
    for r in load_events():
        try:
            ev = UFOEvent.model_validate(r)
        except ValidationError as e:
            logger.warning("skipping malformed record %r: %s", r.get("id"), e)
            skipped += 1
            continue
        if ev.category not in CATEGORIES:
            logger.warning("skipping event %s: unknown category %r", ev.id, ev.category)
            skipped += 1
            continue
        if not parse_event_date(ev.date).valid:
            logger.warning("event %s has an unparseable date %r; it will be flagged", ev.id, ev.date)

        row = session.get(Event, ev.id)
        if row is None:
            session.add(Event(**ev.model_dump()))
            inserted += 1
        else:
            for name, value in ev.model_dump(exclude={"id", "likes", "dislikes"}).items():
                setattr(row, name, value)
            session.add(row)
            updated += 1
    session.commit()
    return inserted, updated, skipped


def main() -> None:
    configure_logging()
    create_all()
    with get_session() as s:
        inserted, updated, skipped = upsert_events(s)
    print(f"Events: inserted={inserted} updated={updated} skipped={skipped}")


if __name__ == "__main__":
    main()
