# ufo_timeline/db/crud.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ufo_timeline.models.event import Event
from ufo_timeline.models.schemas import EventCreate, EventUpdate

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = [
    Event.title, Event.detailed_summary, Event.category, Event.craft_type,
    Event.entity_type, Event.city, Event.state, Event.country, Event.witnesses,
    Event.location,
]



def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _filtered(category: Optional[str], search: Optional[str]):
    stmt = select(Event)
    if category and category != "all":
        stmt = stmt.where(Event.category == category)
    if search:
        pattern = _like_pattern(search)
        stmt = stmt.where(or_(*[c.ilike(pattern, escape="\\") for c in SEARCH_COLUMNS]))
    return stmt


def list_events(
    s: Session,
    category: Optional[str] = None,
    search: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> Tuple[List[Event], int]:
    """One page of events plus the total matching count."""
    stmt = _filtered(category, search)
    total = s.exec(select(func.count()).select_from(stmt.subquery())).one()
    # numeric ids stored as text: shorter first, then lexical, gives 1, 2, ..., 10
    stmt = stmt.order_by(func.length(Event.id), Event.id).offset(offset)
    if limit:
        stmt = stmt.limit(limit)
    return list(s.exec(stmt).all()), int(total)


def get_event(s: Session, event_id: str) -> Optional[Event]:
    return s.get(Event, event_id)


def next_event_id(s: Session) -> str:
    ids = s.exec(select(Event.id)).all()
    numeric = [int(i) for i in ids if str(i).isdigit()]
    return str(max(numeric) + 1 if numeric else 1)


def create_event(s: Session, data: EventCreate) -> Event:
    event = Event(id=next_event_id(s), **data.model_dump(exclude={"id"}))
    s.add(event)
    s.commit()
    s.refresh(event)
    logger.info("created event %s (%s)", event.id, event.title)
    return event


def update_event(s: Session, event: Event, data: EventUpdate) -> Event:
    changes = data.model_dump(exclude_unset=True, exclude={"id"})
    for name, value in changes.items():
        setattr(event, name, value)
    s.add(event)
    s.commit()
    s.refresh(event)
    logger.info("updated event %s: %s", event.id, ", ".join(sorted(changes)) or "no fields")
    return event


def delete_event(s: Session, event: Event) -> None:
    s.delete(event)
    s.commit()
    logger.info("deleted event %s", event.id)


def rate_event(s: Session, event: Event, vote: str) -> Event:
    if vote == "LIKE":
        event.likes = (event.likes or 0) + 1
    else:
        event.dislikes = (event.dislikes or 0) + 1
    s.add(event)
    s.commit()
    s.refresh(event)
    logger.info("rated event %s: %s (%s likes, %s dislikes)", event.id, vote, event.likes, event.dislikes)
    return event


def category_counts(s: Session) -> Dict[str, int]:
    rows = s.exec(select(Event.category, func.count()).group_by(Event.category)).all()
    return {cat: int(n) for cat, n in rows}
