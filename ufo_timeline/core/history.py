# ufo_timeline/core/history.py
from __future__ import annotations

from datetime import date
from typing import Iterable, List, NamedTuple, Optional

from ufo_timeline.core.dates import parse_event_date
from ufo_timeline.core.filters import event_score
from ufo_timeline.models.schemas import UFOEvent


class TodayInHistory(NamedTuple):
    events: List[UFOEvent]
    featured: Optional[UFOEvent]
    years_ago: Optional[int]


def todays_events(events: Iterable[UFOEvent], today: Optional[date] = None) -> TodayInHistory:
    """Events that happened on today's month/day, most recent first.

    The featured one is the highest credibility + notoriety among them.
    """
    today = today or date.today()
    matched = []
    for e in events:
        p = parse_event_date(e.date)
        if p.valid and p.month == today.month and p.day == today.day:
            matched.append((p.year, e))
    matched.sort(key=lambda pair: pair[0], reverse=True)
    hits = [e for _, e in matched]
    if not hits:
        return TodayInHistory([], None, None)
    featured = max(hits, key=event_score)
    return TodayInHistory(hits, featured, today.year - parse_event_date(featured.date).year)
