# ufo_timeline/core/keys.py
from typing import Dict, Iterable

from ufo_timeline.models.schemas import UFOEvent


def event_key(event: UFOEvent) -> str:
    """Stable identity for favorites, selection and navigation."""
    return event.id


def composite_key(event: UFOEvent) -> str:
    """Legacy ``category-date-time`` key; not unique, kept for old persisted data."""
    return f"{event.category}-{event.date}-{event.time or ''}"


def composite_index(events: Iterable[UFOEvent]) -> Dict[str, str]:
    """composite key -> id; first event wins when two collide."""
    out: Dict[str, str] = {}
    for e in events:
        out.setdefault(composite_key(e), event_key(e))
    return out
