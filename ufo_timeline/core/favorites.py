# ufo_timeline/core/favorites.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Set

from ufo_timeline.core.filters import chronological_key
from ufo_timeline.core.keys import composite_index, event_key
from ufo_timeline.models.schemas import UFOEvent
from ufo_timeline.models.taxonomy import FAVORITE_COLORS

logger = logging.getLogger(__name__)

COLORS = list(FAVORITE_COLORS)  # yellow, orange, red


@dataclass(frozen=True)
class FavoriteRegistry:
    """Three disjoint sets of event keys, one per favorite color."""

    yellow: FrozenSet[str] = frozenset()
    orange: FrozenSet[str] = frozenset()
    red: FrozenSet[str] = frozenset()

    def members(self, color: str) -> FrozenSet[str]:
        if color not in FAVORITE_COLORS:
            raise ValueError(f"unknown favorite color {color!r}")
        return getattr(self, color)

    def colors_of(self, key: str) -> Set[str]:
        return {c for c in COLORS if key in getattr(self, c)}

    def color_of(self, key: str) -> Optional[str]:
        for c in COLORS:
            if key in getattr(self, c):
                return c
        return None

    def toggle(self, key: str, color: str) -> "FavoriteRegistry":
        """Mark ``key`` with ``color``; marking it again with the same color unmarks it."""
        current = self.members(color)
        if key in current:
            return replace(self, **{color: current - {key}})
        cleared = self.remove(key)
        return replace(cleared, **{color: cleared.members(color) | {key}})

    def remove(self, key: str) -> "FavoriteRegistry":
        return FavoriteRegistry(**{c: getattr(self, c) - {key} for c in COLORS})

    def __len__(self) -> int:
        return sum(len(getattr(self, c)) for c in COLORS)

    # --- serialization --------------------------------------------------------

    def to_json(self) -> Dict[str, List[str]]:
        return {c: sorted(getattr(self, c)) for c in COLORS}

    @classmethod
    def from_json(
        cls,
        data: Mapping[str, Iterable[str]],
        events: Optional[Sequence[UFOEvent]] = None,
    ) -> "FavoriteRegistry":
        """Rebuild from ``{color: [keys]}``.

        With ``events`` given, legacy ``category-date-time`` keys are resolved
        to event ids and keys matching no event are dropped.
        """
        ids: Optional[Set[str]] = None
        legacy: Dict[str, str] = {}
        if events is not None:
            ids = {event_key(e) for e in events}
            legacy = composite_index(events)

        seen: Set[str] = set()
        sets: Dict[str, FrozenSet[str]] = {}
        for color in COLORS:
            keep = set()
            for raw in data.get(color, []) or []:
                key = str(raw)
                if ids is not None and key not in ids:
                    key = legacy.get(key, "")
                    if not key:
                        continue
                if key in seen:
                    continue  # sets stay disjoint, earlier color wins
                seen.add(key)
                keep.add(key)
            sets[color] = frozenset(keep)
        return cls(**sets)


def favorite_chains(
    events: Iterable[UFOEvent],
    registry: FavoriteRegistry,
    colors: Iterable[str],
) -> Dict[str, List[UFOEvent]]:
    """Per color, the favorited events in chronological order (for connection lines)."""
    pool = list(events)
    out: Dict[str, List[UFOEvent]] = {}
    for color in colors:
        members = registry.members(color)
        chain = [e for e in pool if event_key(e) in members]
        out[color] = sorted(chain, key=chronological_key)
    return out


class FavoritesFile:
    """Durable storage for the registry (JSON, arrays per color)."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self, events: Optional[Sequence[UFOEvent]] = None) -> FavoriteRegistry:
        if not self.path.exists():
            return FavoriteRegistry()
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("could not read favorites from %s: %s", self.path, e)
            return FavoriteRegistry()
        if not isinstance(data, dict):
            return FavoriteRegistry()
        return FavoriteRegistry.from_json(data, events)

    def save(self, registry: FavoriteRegistry) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(registry.to_json(), f, indent=2)
