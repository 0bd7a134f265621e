# ufo_timeline/core/donut.py
from __future__ import annotations

import math
import time
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ufo_timeline.core.easing import ease_cubic_in_out, lerp
from ufo_timeline.models.schemas import UFOEvent
from ufo_timeline.models.taxonomy import CATEGORIES, category_color

INNER_RATIO = 0.6
TRANSITION = 0.75
TAU = 2 * math.pi


@dataclass(frozen=True)
class DonutSlice:
    category: str
    count: int
    start: float  # radians, clockwise from 12 o'clock
    end: float
    color: str


@dataclass(frozen=True)
class ArcFrame:
    category: str
    start: float
    end: float
    opacity: float
    color: str

    @property
    def extent(self) -> float:
        return self.end - self.start


def donut_radii(size: float, margin: float = 10.0) -> Tuple[float, float]:
    outer = size / 2 - margin
    return outer * INNER_RATIO, outer


def category_counts(events: Iterable[UFOEvent], active: Iterable[str]) -> List[Tuple[str, int]]:
    """Counts per active category in fixed category order (zeros kept)."""
    counts = Counter(e.category for e in events)
    active = set(active)
    return [(c, counts.get(c, 0)) for c in CATEGORIES if c in active]


def donut_slices(events: Iterable[UFOEvent], active: Iterable[str]) -> List[DonutSlice]:
    counts = category_counts(events, active)
    total = sum(n for _, n in counts)
    out: List[DonutSlice] = []
    angle = 0.0
    for cat, n in counts:
        span = TAU * n / total if total else 0.0
        out.append(DonutSlice(cat, n, angle, angle + span, category_color(cat)))
        angle += span
    return out


class DonutTransition:
    """Angle interpolation between two snapshots.

    Categories in both snapshots tween their angles; newly active ones fade
    in at their final angles; deactivated ones fade out where they were.
    """

    def __init__(
        self,
        previous: Sequence[DonutSlice],
        current: Sequence[DonutSlice],
        duration: float = TRANSITION,
    ):
        self.previous = list(previous)
        self.current = list(current)
        self.duration = duration

    def frames(self, t: float) -> List[ArcFrame]:
        e = ease_cubic_in_out(max(0.0, min(1.0, t)))
        before = {s.category: s for s in self.previous}
        after = {s.category for s in self.current}
        out: List[ArcFrame] = []
        for s in self.current:
            old = before.get(s.category)
            if old is None:
                out.append(ArcFrame(s.category, s.start, s.end, e, s.color))
            else:
                out.append(ArcFrame(
                    s.category, lerp(old.start, s.start, e), lerp(old.end, s.end, e), 1.0, s.color,
                ))
        for s in self.previous:
            if s.category not in after:
                out.append(ArcFrame(s.category, s.start, s.end, 1.0 - e, s.color))
        return out

    def total(self, t: float) -> int:
        e = ease_cubic_in_out(max(0.0, min(1.0, t)))
        return int(round(lerp(sum(s.count for s in self.previous), sum(s.count for s in self.current), e)))


class DonutChart:
    """Keeps the last snapshot and animates toward each new one."""

    def __init__(self, clock: Callable[[], float] = time.monotonic, duration: float = TRANSITION):
        self.clock = clock
        self.duration = duration
        self.slices: List[DonutSlice] = []
        self._transition: Optional[DonutTransition] = None
        self._started = 0.0

    def update(self, events: Iterable[UFOEvent], active: Iterable[str]) -> None:
        new = donut_slices(events, active)
        if new == self.slices:
            return
        self._transition = DonutTransition(self.frame_slices(), new, self.duration)
        self._started = self.clock()
        self.slices = new

    def _t(self) -> float:
        if self._transition is None or self.duration <= 0:
            return 1.0
        return (self.clock() - self._started) / self.duration

    def frame_slices(self) -> List[DonutSlice]:
        """The arcs currently on screen, as slices (fading arcs excluded)."""
        if self._transition is None:
            return list(self.slices)
        shown = {s.category: s for s in self.slices}
        return [
            DonutSlice(f.category, shown[f.category].count, f.start, f.end, f.color)
            for f in self._transition.frames(self._t()) if f.category in shown
        ]

    def frame(self) -> Tuple[List[ArcFrame], int]:
        """Arcs and center total for the current instant."""
        total = sum(s.count for s in self.slices)
        if self._transition is None:
            return [ArcFrame(s.category, s.start, s.end, 1.0, s.color) for s in self.slices], total
        t = self._t()
        frames = self._transition.frames(t)
        if t >= 1.0:
            self._transition = None
            return [f for f in frames if f.opacity > 0], total
        return frames, self._transition.total(t)

    @property
    def total(self) -> int:
        return sum(s.count for s in self.slices)

    def settle(self) -> Tuple[List[ArcFrame], int]:
        """Skip to the end of any running transition."""
        self._transition = None
        return self.frame()
