# ufo_timeline/core/timeline.py
"""Time scale, zoom state and row layout for the horizontal timeline."""
from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ufo_timeline.core.dates import (
    MONTH_NAMES,
    decimal_year,
    from_decimal_year,
    parse_event_date,
)
from ufo_timeline.core.favorites import FavoriteRegistry, favorite_chains
from ufo_timeline.core.filters import chronological_key
from ufo_timeline.core.easing import ease_cubic_in_out
from ufo_timeline.core.keys import event_key
from ufo_timeline.models.schemas import UFOEvent
from ufo_timeline.models.taxonomy import CATEGORIES, category_color

MARGIN = {"top": 30, "right": 50, "bottom": 30, "left": 200}
EVENT_BOX = (60, 30)
HEIGHT = 420
DEFAULT_WIDTH = 1200

SCALE_EXTENT = (0.5, 75.0)
# Panning stops this many domain spans beyond either end of the base domain
TRANSLATE_SLACK = 1.0
DECADE_ZOOM_DURATION = 0.75
WHEEL_DURATION = 0.2
WHEEL_IN, WHEEL_OUT = 1.1, 0.9
ROW_PADDING = 0.1
EDGE_SLACK = 50.0
STAGGER = 8.0


def default_domain(today: Optional[date] = None) -> Tuple[date, date]:
    """1940 through the end of next year."""
    today = today or date.today()
    return date(1940, 1, 1), date(today.year + 1, 12, 31)


# --- scale + zoom ---------------------------------------------------------------

@dataclass(frozen=True)
class ZoomTransform:
    k: float = 1.0
    x: float = 0.0

    def apply(self, px: float) -> float:
        return px * self.k + self.x

    def invert(self, px: float) -> float:
        return (px - self.x) / self.k

    def scale_by(self, factor: float, center: float) -> "ZoomTransform":
        """Zoom about ``center`` (screen px), keeping k inside SCALE_EXTENT."""
        k = max(SCALE_EXTENT[0], min(SCALE_EXTENT[1], self.k * factor))
        return ZoomTransform(k, center - (center - self.x) * (k / self.k))

    def translate_by(self, dx: float) -> "ZoomTransform":
        return replace(self, x=self.x + dx)

    def lerp(self, other: "ZoomTransform", t: float) -> "ZoomTransform":
        return ZoomTransform(self.k + (other.k - self.k) * t, self.x + (other.x - self.x) * t)


IDENTITY = ZoomTransform()


@dataclass(frozen=True)
class TimeScale:
    """Linear map from decimal years to pixels in [0, width]."""

    start: float
    end: float
    width: float

    @classmethod
    def from_dates(cls, start: date, end: date, width: float) -> "TimeScale":
        return cls(decimal_year(start), decimal_year(end), width)

    def x(self, value) -> float:
        y = decimal_year(value) if isinstance(value, date) else float(value)
        return (y - self.start) / (self.end - self.start) * self.width

    def invert(self, px: float) -> float:
        return self.start + px / self.width * (self.end - self.start)

    def rescale(self, t: ZoomTransform) -> "TimeScale":
        return TimeScale(self.invert(t.invert(0.0)), self.invert(t.invert(self.width)), self.width)

    @property
    def pixels_per_year(self) -> float:
        return self.width / (self.end - self.start)


def tick_months(pixels_per_year: float) -> int:
    """Tick spacing in months for the current zoom level."""
    if pixels_per_year > 150:
        return 3
    if pixels_per_year > 50:
        return 12
    if pixels_per_year > 25:
        return 24
    return 120


@dataclass(frozen=True)
class Tick:
    value: date
    x: float
    label: str
    bold: bool = False
    decade: Optional[int] = None  # set on clickable decade labels


def axis_ticks(scale: TimeScale) -> List[Tick]:
    months = tick_months(scale.pixels_per_year)
    first = from_decimal_year(scale.start)
    last = from_decimal_year(scale.end)
    ticks: List[Tick] = []

    if months < 12:
        y, m = first.year, 1
        while date(y, m, 1) <= last:
            d = date(y, m, 1)
            if d >= first:
                label = str(y) if m == 1 else MONTH_NAMES[m - 1][:3]
                ticks.append(Tick(d, scale.x(d), label, bold=(m == 1), decade=y if m == 1 and y % 10 == 0 else None))
            m += months
            if m > 12:
                y, m = y + 1, m - 12
        return ticks

    step = months // 12
    y = first.year - first.year % step
    while y <= last.year:
        d = date(y, 1, 1)
        if d >= first:
            is_decade = y % 10 == 0
            ticks.append(Tick(d, scale.x(d), str(y), bold=is_decade, decade=y if is_decade else None))
        y += step
    return ticks


def decade_transform(base: TimeScale, decade: int) -> ZoomTransform:
    """Transform under which [decade, decade + 10) fills the full width."""
    x0 = base.x(float(decade))
    x1 = base.x(float(decade + 10))
    k = base.width / (x1 - x0)
    return ZoomTransform(k, -x0 * k)


@dataclass
class ZoomAnimation:
    source: ZoomTransform
    target: ZoomTransform
    started: float
    duration: float

    def at(self, now: float) -> Tuple[ZoomTransform, bool]:
        t = min(1.0, max(0.0, (now - self.started) / self.duration))
        return self.source.lerp(self.target, ease_cubic_in_out(t)), t >= 1.0


class TimelineViewport:
    """Owns the zoom transform; wheel and decade clicks animate, pans are immediate."""

    def __init__(
        self,
        width: float = DEFAULT_WIDTH,
        domain: Optional[Tuple[date, date]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        start, end = domain or default_domain()
        self.inner_width = width - MARGIN["left"] - MARGIN["right"]
        self.base = TimeScale.from_dates(start, end, self.inner_width)
        self.clock = clock
        self._transform = IDENTITY
        self._animation: Optional[ZoomAnimation] = None

    def _advance(self) -> ZoomTransform:
        if self._animation is not None:
            current, done = self._animation.at(self.clock())
            self._transform = current
            if done:
                self._animation = None
        return self._transform

    @property
    def transform(self) -> ZoomTransform:
        return self._advance()

    @property
    def animating(self) -> bool:
        self._advance()
        return self._animation is not None

    @property
    def target(self) -> ZoomTransform:
        return self._animation.target if self._animation else self.transform

    def scale(self) -> TimeScale:
        return self.base.rescale(self.transform)

    def visible_range(self) -> Tuple[float, float]:
        s = self.scale()
        return s.start, s.end

    def constrain(self, t: ZoomTransform) -> ZoomTransform:
        """Clamp x so the visible range stays inside the translate extent."""
        span = self.base.width * TRANSLATE_SLACK
        lo, hi = -span, self.base.width + span
        x_max = -t.k * lo
        x_min = self.base.width - t.k * hi
        return replace(t, x=max(x_min, min(x_max, t.x)))

    def _animate(self, target: ZoomTransform, duration: float) -> None:
        self._animation = ZoomAnimation(self.transform, self.constrain(target), self.clock(), duration)

    def wheel(self, delta_y: float) -> None:
        factor = WHEEL_OUT if delta_y > 0 else WHEEL_IN
        self._animate(self.target.scale_by(factor, self.inner_width / 2), WHEEL_DURATION)

    def pan(self, dx: float) -> None:
        self._transform = self.constrain(self.transform.translate_by(dx))
        self._animation = None

    def zoom_to_decade(self, decade: int) -> None:
        self._animate(decade_transform(self.base, decade), DECADE_ZOOM_DURATION)

    def reset(self) -> None:
        self._animation = None
        self._transform = IDENTITY

    def settle(self) -> ZoomTransform:
        """Jump to the end of any running animation."""
        if self._animation is not None:
            self._transform = self._animation.target
            self._animation = None
        return self._transform

    def ticks(self) -> List[Tick]:
        return axis_ticks(self.scale())


# --- layout --------------------------------------------------------------------

@dataclass(frozen=True)
class Row:
    category: str
    y: float
    band: float


@dataclass(frozen=True)
class TimelineMark:
    event: UFOEvent
    x: float
    y: float
    color: str
    selected: bool = False
    favorite: Optional[str] = None


@dataclass
class TimelineLayout:
    rows: List[Row]
    marks: List[TimelineMark]
    undated: List[UFOEvent] = field(default_factory=list)

    def mark_for(self, key: str) -> Optional[TimelineMark]:
        for m in self.marks:
            if event_key(m.event) == key:
                return m
        return None


def category_rows(active: Iterable[str], inner_height: float) -> List[Row]:
    cats = [c for c in CATEGORIES if c in set(active)]
    if not cats:
        return []
    step = inner_height / (len(cats) - ROW_PADDING)
    band = step * (1 - ROW_PADDING)
    return [Row(c, i * step + band / 2, band) for i, c in enumerate(cats)]


def layout_timeline(
    events: Iterable[UFOEvent],
    active_categories: Iterable[str],
    scale: TimeScale,
    height: float = HEIGHT,
    selected_id: Optional[str] = None,
    favorites: Optional[FavoriteRegistry] = None,
) -> TimelineLayout:
    """One row per active category, marks positioned by parsed date.

    Events with flagged dates are not plotted; they are returned in
    ``undated`` instead of piling up at the fallback date.
    """
    rows = category_rows(active_categories, height - MARGIN["top"] - MARGIN["bottom"])
    row_by_cat: Dict[str, Row] = {r.category: r for r in rows}

    grouped: Dict[str, List[UFOEvent]] = {}
    undated: List[UFOEvent] = []
    for e in events:
        if e.category not in row_by_cat:
            continue
        if not parse_event_date(e.date).valid:
            undated.append(e)
            continue
        grouped.setdefault(e.category, []).append(e)

    marks: List[TimelineMark] = []
    selected: Optional[TimelineMark] = None
    for cat, evs in grouped.items():
        row = row_by_cat[cat]
        for i, e in enumerate(sorted(evs, key=chronological_key)):
            x = scale.x(parse_event_date(e.date).value)
            if x < -EDGE_SLACK or x > scale.width + EDGE_SLACK:
                continue
            key = event_key(e)
            mark = TimelineMark(
                event=e,
                x=x,
                y=row.y + ((i % 3) - 1) * STAGGER,
                color=category_color(cat),
                selected=key == selected_id,
                favorite=favorites.color_of(key) if favorites else None,
            )
            if mark.selected:
                selected = mark
            else:
                marks.append(mark)
    if selected is not None:
        marks.append(selected)  # drawn last, above its siblings
    return TimelineLayout(rows, marks, undated)


def timeline_connections(
    layout: TimelineLayout,
    favorites: FavoriteRegistry,
    active_colors: Sequence[str],
) -> List[Tuple[str, List[Tuple[float, float]]]]:
    """Dashed-line paths through chronologically consecutive favorites on screen."""
    events = [m.event for m in layout.marks]
    out = []
    for color, chain in favorite_chains(events, favorites, active_colors).items():
        pts = []
        for e in chain:
            m = layout.mark_for(event_key(e))
            if m is not None:
                pts.append((m.x, m.y))
        if len(pts) > 1:
            out.append((color, pts))
    return out
