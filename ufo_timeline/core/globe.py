# ufo_timeline/core/globe.py
"""Orthographic globe: projection math, the rotation driver and favorite arcs.

Angles are degrees at the edges of this module. Rotation follows the
``[lambda, phi, gamma]`` convention of an orthographic projection, so
centering a point means rotating to ``[-lon, -lat, 0]``.
"""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ufo_timeline.core.easing import ease_cubic_in_out, ease_quad_out
from ufo_timeline.core.favorites import FavoriteRegistry, favorite_chains
from ufo_timeline.core.keys import event_key
from ufo_timeline.models.schemas import UFOEvent
from ufo_timeline.models.taxonomy import FAVORITE_COLORS

logger = logging.getLogger(__name__)

Rotation = Tuple[float, float, float]
LonLat = Tuple[float, float]

ROTATION_SPEED = 0.2  # degrees per tick
ROTATION_TICK = 0.05  # seconds
RESUME_AFTER = 3.0
TWEEN_DURATION = 1.0
PULSE_DURATION = 2.0
PULSE_RADIUS = (4.0, 12.0)
ZOOM_EXTENT = (1.0, 8.0)
DRAG_SENSITIVITY = 0.5
WHEEL_IN, WHEEL_OUT = 1.1, 0.9
ARC_STEP = 0.01  # 100 segments per arc


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


# --- coordinates -------------------------------------------------------------

def event_coordinates(event: UFOEvent) -> Optional[LonLat]:
    """(lon, lat) or None when either value is missing, NaN or out of range."""
    try:
        lat = float(event.latitude)
        lon = float(event.longitude)
    except (TypeError, ValueError):
        return None
    if math.isnan(lat) or math.isnan(lon):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return lon, lat


def rotate_point(lon: float, lat: float, rotation: Sequence[float]) -> LonLat:
    """Apply a [lambda, phi, gamma] rotation to a point; returns rotated (lon, lat)."""
    d_lambda, d_phi, d_gamma = (math.radians(r) for r in rotation)
    lam = math.radians(lon) + d_lambda
    lam = (lam + math.pi) % (2 * math.pi) - math.pi
    phi = math.radians(lat)

    cos_phi = math.cos(phi)
    x = math.cos(lam) * cos_phi
    y = math.sin(lam) * cos_phi
    z = math.sin(phi)
    cdp, sdp = math.cos(d_phi), math.sin(d_phi)
    cdg, sdg = math.cos(d_gamma), math.sin(d_gamma)
    k = z * cdp + x * sdp
    out_lam = math.atan2(y * cdg - k * sdg, x * cdp - z * sdp)
    out_phi = math.asin(_clamp(k * cdg + y * sdg, -1.0, 1.0))
    return math.degrees(out_lam), math.degrees(out_phi)


def view_center(rotation: Sequence[float]) -> LonLat:
    return -rotation[0], -rotation[1]


def cos_distance(a: LonLat, b: LonLat) -> float:
    """Cosine of the great-circle angle between two (lon, lat) points."""
    lon1, lat1 = (math.radians(v) for v in a)
    lon2, lat2 = (math.radians(v) for v in b)
    return (math.sin(lat1) * math.sin(lat2)
            + math.cos(lat1) * math.cos(lat2) * math.cos(lon2 - lon1))


def is_visible(lon: float, lat: float, rotation: Sequence[float]) -> bool:
    """Near hemisphere test: positive cosine distance to the view center."""
    r_lon, r_lat = rotate_point(lon, lat, rotation)
    return math.cos(math.radians(r_lat)) * math.cos(math.radians(r_lon)) > 1e-12


@dataclass
class Projection:
    rotation: Rotation = (0.0, 0.0, 0.0)
    radius: float = 200.0
    zoom: float = 1.0
    center: Tuple[float, float] = (200.0, 200.0)

    @property
    def scale(self) -> float:
        return self.radius * self.zoom

    def project(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        """Screen position, or None when the point is on the far side."""
        if not is_visible(lon, lat, self.rotation):
            return None
        r_lon, r_lat = (math.radians(v) for v in rotate_point(lon, lat, self.rotation))
        x = math.cos(r_lat) * math.sin(r_lon)
        y = math.sin(r_lat)
        cx, cy = self.center
        return cx + x * self.scale, cy - y * self.scale


# --- rotation driver -----------------------------------------------------------

class RotationMode(str, Enum):
    AUTO_ROTATING = "auto_rotating"
    DRAGGING = "dragging"
    COOLDOWN = "cooldown"
    TWEENING = "tweening"
    HOLDING = "holding"


@dataclass(frozen=True)
class Pulse:
    lon: float
    lat: float
    radius: float
    opacity: float


class RotationDriver:
    """Sole owner of the globe rotation.

    Exactly one mode mutates the rotation at a time: auto-rotation, a user
    drag, or a tween toward a selected point. Entering one mode ends the
    others, so no two drivers ever fight over the vector.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        rotation: Rotation = (0.0, 0.0, 0.0),
        zoom: float = 1.0,
    ):
        self.clock = clock
        self._initial = tuple(rotation)
        self.rotation: List[float] = list(rotation)
        self.zoom = _clamp(zoom, *ZOOM_EXTENT)
        self.mode = RotationMode.AUTO_ROTATING
        self._last_tick = clock()
        self._resume_at: Optional[float] = None
        self._tween_start = 0.0
        self._tween_from: Rotation = (0.0, 0.0, 0.0)
        self._tween_to: Rotation = (0.0, 0.0, 0.0)
        self._target: Optional[LonLat] = None
        self._pulse_start: Optional[float] = None

    @property
    def projection_rotation(self) -> Rotation:
        return tuple(self.rotation)  # type: ignore[return-value]

    def tick(self) -> Rotation:
        """Advance whichever driver currently owns the rotation."""
        now = self.clock()
        if self.mode is RotationMode.AUTO_ROTATING:
            self.rotation[0] += ROTATION_SPEED * (now - self._last_tick) / ROTATION_TICK
        elif self.mode is RotationMode.COOLDOWN and now >= (self._resume_at or now):
            logger.debug("globe auto-rotation resumed")
            self.mode = RotationMode.AUTO_ROTATING
        elif self.mode is RotationMode.TWEENING:
            t = _clamp((now - self._tween_start) / TWEEN_DURATION, 0.0, 1.0)
            e = ease_cubic_in_out(t)
            self.rotation = [a + (b - a) * e for a, b in zip(self._tween_from, self._tween_to)]
            if t >= 1.0:
                self.mode = RotationMode.HOLDING
                self._pulse_start = now
        self._last_tick = now
        return self.projection_rotation

    # --- user drag ------------------------------------------------------------

    def start_drag(self) -> None:
        self.mode = RotationMode.DRAGGING
        self._resume_at = None

    def drag(self, dx: float, dy: float) -> None:
        if self.mode is not RotationMode.DRAGGING:
            return
        step = DRAG_SENSITIVITY / self.zoom
        self.rotation[0] += dx * step
        self.rotation[1] = _clamp(self.rotation[1] - dy * step, -90.0, 90.0)

    def end_drag(self) -> None:
        if self.mode is not RotationMode.DRAGGING:
            return
        now = self.clock()
        self.mode = RotationMode.COOLDOWN
        self._resume_at = now + RESUME_AFTER
        self._last_tick = now

    # --- selection ------------------------------------------------------------

    def center_on(self, lon: float, lat: float) -> None:
        """Start a tween that brings (lon, lat) to the view center."""
        current = self.projection_rotation
        target_lambda = -lon
        # Shortest way round; auto-rotation lets lambda grow without bound
        target_lambda += 360.0 * round((current[0] - target_lambda) / 360.0)
        self._tween_from = current
        self._tween_to = (target_lambda, -lat, 0.0)
        self._tween_start = self.clock()
        self._target = (lon, lat)
        self._pulse_start = None
        self.mode = RotationMode.TWEENING

    def release(self) -> None:
        """Drop any selection hold and hand the rotation back to auto-rotation."""
        self._target = None
        self._pulse_start = None
        self._resume_at = None
        self._last_tick = self.clock()
        self.mode = RotationMode.AUTO_ROTATING

    def pulse(self) -> Optional[Pulse]:
        if self._pulse_start is None or self._target is None:
            return None
        elapsed = self.clock() - self._pulse_start
        if elapsed >= PULSE_DURATION:
            return None
        e = ease_quad_out(elapsed / PULSE_DURATION)
        r0, r1 = PULSE_RADIUS
        return Pulse(self._target[0], self._target[1], r0 + (r1 - r0) * e, 1.0 - e)

    # --- zoom -----------------------------------------------------------------

    def zoom_by(self, factor: float) -> float:
        self.zoom = _clamp(self.zoom * factor, *ZOOM_EXTENT)
        return self.zoom

    def wheel(self, delta_y: float) -> float:
        return self.zoom_by(WHEEL_OUT if delta_y > 0 else WHEEL_IN)

    def pinch(self, start_zoom: float, distance_ratio: float) -> float:
        self.zoom = _clamp(start_zoom * distance_ratio, *ZOOM_EXTENT)
        return self.zoom

    def reset(self) -> None:
        self.rotation = list(self._initial)
        self.zoom = 1.0
        self.release()


# --- points and arcs -----------------------------------------------------------

@dataclass(frozen=True)
class GlobePoint:
    event: UFOEvent
    lon: float
    lat: float
    visible: bool
    selected: bool = False


def globe_points(
    events: Iterable[UFOEvent],
    rotation: Sequence[float],
    selected_id: Optional[str] = None,
) -> List[GlobePoint]:
    """Events with usable coordinates; visibility is recomputed for this rotation."""
    out: List[GlobePoint] = []
    for e in events:
        coords = event_coordinates(e)
        if coords is None:
            continue
        lon, lat = coords
        out.append(GlobePoint(e, lon, lat, is_visible(lon, lat, rotation), event_key(e) == selected_id))
    return out


def interpolate_great_circle(a: LonLat, b: LonLat) -> Callable[[float], LonLat]:
    lon0, lat0 = (math.radians(v) for v in a)
    lon1, lat1 = (math.radians(v) for v in b)
    cy0, sy0 = math.cos(lat0), math.sin(lat0)
    cy1, sy1 = math.cos(lat1), math.sin(lat1)
    kx0, ky0 = cy0 * math.cos(lon0), cy0 * math.sin(lon0)
    kx1, ky1 = cy1 * math.cos(lon1), cy1 * math.sin(lon1)
    hav = (math.sin((lat1 - lat0) / 2) ** 2
           + cy0 * cy1 * math.sin((lon1 - lon0) / 2) ** 2)
    d = 2 * math.asin(math.sqrt(_clamp(hav, 0.0, 1.0)))
    if d == 0:
        return lambda t: (a[0], a[1])
    k = math.sin(d)

    def interpolate(t: float) -> LonLat:
        t *= d
        b0 = math.sin(t) / k
        a0 = math.sin(d - t) / k
        x = a0 * kx0 + b0 * kx1
        y = a0 * ky0 + b0 * ky1
        z = a0 * sy0 + b0 * sy1
        return math.degrees(math.atan2(y, x)), math.degrees(math.atan2(z, math.sqrt(x * x + y * y)))

    return interpolate


def great_circle_arc(a: LonLat, b: LonLat, step: float = ARC_STEP) -> List[LonLat]:
    f = interpolate_great_circle(a, b)
    n = int(round(1.0 / step))
    return [f(i / n) for i in range(n + 1)]


@dataclass(frozen=True)
class Arc:
    color: str
    source_id: str
    target_id: str
    points: List[LonLat]

    @property
    def hex(self) -> str:
        return FAVORITE_COLORS[self.color]

    def visible_points(self, rotation: Sequence[float]) -> List[Optional[LonLat]]:
        """Points on the near side; far-side points become None (line breaks)."""
        return [p if is_visible(p[0], p[1], rotation) else None for p in self.points]


def favorite_arcs(
    events: Iterable[UFOEvent],
    registry: FavoriteRegistry,
    active_colors: Iterable[str],
) -> List[Arc]:
    """Great-circle arcs between chronologically consecutive favorites of each active color."""
    arcs: List[Arc] = []
    chains: Dict[str, List[UFOEvent]] = favorite_chains(events, registry, active_colors)
    for color, chain in chains.items():
        located = [(e, event_coordinates(e)) for e in chain]
        located = [(e, c) for e, c in located if c is not None]
        for (e0, c0), (e1, c1) in zip(located, located[1:]):
            arcs.append(Arc(color, event_key(e0), event_key(e1), great_circle_arc(c0, c1)))
    return arcs
