# ufo_timeline/core/dates.py
"""Lenient parsing of the free-text event dates ("November 17, 1986").

Unparseable dates are not dropped. They resolve to ``FALLBACK_DATE`` with
``valid=False`` so every caller can decide what to do with them.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import Optional

logger = logging.getLogger(__name__)

FALLBACK_DATE = date(1947, 1, 1)

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

_MONTHS = {name.lower(): i for i, name in enumerate(MONTH_NAMES, start=1)}
_MONTHS.update({name[:3].lower(): i for i, name in enumerate(MONTH_NAMES, start=1)})
_MONTHS["sept"] = 9

_MONTH_DAY_YEAR = re.compile(r"^([A-Za-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})$")
_MONTH_YEAR = re.compile(r"^([A-Za-z]+)\.?,?\s+(\d{4})$")
_ISO = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_YEAR = re.compile(r"^(\d{4})$")


@dataclass(frozen=True)
class ParsedDate:
    value: date
    valid: bool

    @property
    def year(self) -> int:
        return self.value.year

    @property
    def month(self) -> int:
        return self.value.month

    @property
    def day(self) -> int:
        return self.value.day

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.value.month - 1]


def _build(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse(text: str) -> Optional[date]:
    s = " ".join(text.strip().split())
    m = _MONTH_DAY_YEAR.match(s)
    if m:
        month = _MONTHS.get(m.group(1).lower())
        return _build(int(m.group(3)), month, int(m.group(2))) if month else None
    m = _MONTH_YEAR.match(s)
    if m:
        month = _MONTHS.get(m.group(1).lower())
        return _build(int(m.group(2)), month, 1) if month else None
    m = _ISO.match(s)
    if m:
        return _build(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    m = _YEAR.match(s)
    if m:
        return _build(int(m.group(1)), 1, 1)
    return None


@lru_cache(maxsize=4096)
def parse_event_date(text: Optional[str]) -> ParsedDate:
    if not text:
        return ParsedDate(FALLBACK_DATE, False)
    d = _parse(text)
    if d is None:
        logger.debug("unparseable event date %r, using fallback %s", text, FALLBACK_DATE)
        return ParsedDate(FALLBACK_DATE, False)
    return ParsedDate(d, True)


def decimal_year(d: date) -> float:
    """1986-07-02 -> ~1986.5; the timeline's x domain is in these units."""
    start = date(d.year, 1, 1)
    days_in_year = (date(d.year + 1, 1, 1) - start).days
    return d.year + (d - start).days / days_in_year


def from_decimal_year(y: float) -> date:
    year = int(y // 1)
    start = date(year, 1, 1)
    days_in_year = (date(year + 1, 1, 1) - start).days
    return date.fromordinal(start.toordinal() + int((y - year) * days_in_year))


def format_date(d: date) -> str:
    return f"{MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"
