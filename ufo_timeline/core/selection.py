# ufo_timeline/core/selection.py
from __future__ import annotations

import logging
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from ufo_timeline.core.filters import chronological_key
from ufo_timeline.core.globe import RotationDriver, event_coordinates
from ufo_timeline.core.keys import event_key
from ufo_timeline.core.state import Store, deselect, select
from ufo_timeline.core.timers import SearchBox
from ufo_timeline.models.schemas import UFOEvent

logger = logging.getLogger(__name__)


class Neighbors(NamedTuple):
    prev: Optional[UFOEvent]
    next: Optional[UFOEvent]


def find_next_prev(events: Sequence[UFOEvent], current: UFOEvent) -> Neighbors:
    """Chronological neighbours of ``current`` within ``events``.

    Sorted afresh on every call; the list is the live filtered set.
    """
    ordered: List[UFOEvent] = sorted(events, key=chronological_key)
    key = event_key(current)
    for i, e in enumerate(ordered):
        if event_key(e) == key:
            prev = ordered[i - 1] if i > 0 else None
            nxt = ordered[i + 1] if i + 1 < len(ordered) else None
            return Neighbors(prev, nxt)
    return Neighbors(None, None)


class SelectionCoordinator:
    """Single owner of "the selected event".

    Selecting stores the id (timeline highlight and detail panel read it from
    the store), recenters the globe and drops search focus. Clearing undoes
    all of it and gives the globe back to auto-rotation.
    """

    def __init__(
        self,
        store: Store,
        globe: Optional[RotationDriver] = None,
        search_box: Optional[SearchBox] = None,
    ):
        self.store = store
        self.globe = globe
        self.search_box = search_box
        self._last_pick: Dict[str, Tuple[str, ...]] = {}

    @property
    def selected(self) -> Optional[UFOEvent]:
        return self.store.state.selected

    def select_event(self, event: UFOEvent) -> None:
        self.store.update(select, event_key(event))
        if self.search_box is not None:
            self.search_box.blur()
        if self.globe is not None:
            coords = event_coordinates(event)
            if coords is not None:
                self.globe.center_on(*coords)
        logger.debug("selected event %s", event_key(event))

    def clear_selection(self) -> None:
        self.store.update(deselect)
        if self.globe is not None:
            self.globe.release()

    def toggle(self, event: UFOEvent) -> Optional[UFOEvent]:
        """Click on a mark: select it, or deselect when it is already selected."""
        if self.store.state.selected_id == event_key(event):
            self.clear_selection()
            return None
        self.select_event(event)
        return event

    def pick(self, source: str, ids: Sequence[str]) -> bool:
        """Apply a chart selection (ids of the picked marks); True when it acted.

        Chart selections persist between renders, so only a change counts.
        An emptied timeline pick that held the selected event is a second
        click on that mark and deselects it.
        """
        ids = tuple(ids)
        previous = self._last_pick.get(source, ())
        if ids == previous:
            return False
        self._last_pick[source] = ids
        if not ids:
            if source == "timeline" and self.store.state.selected_id in previous:
                self.clear_selection()
                return True
            return False
        event = self.store.state.find(ids[0])
        if event is None:
            return False
        if source == "timeline":
            self.toggle(event)
        else:
            self.select_event(event)
        return True

    def forget_picks(self) -> None:
        """Drop remembered chart selections (the charts were reset)."""
        self._last_pick.clear()

    def select_by_key(self, key: str) -> Optional[UFOEvent]:
        event = self.store.state.find(key)
        if event is not None:
            self.select_event(event)
        return event

    def find_next_prev(self, current: Optional[UFOEvent] = None) -> Neighbors:
        current = current or self.selected
        if current is None:
            return Neighbors(None, None)
        return find_next_prev(self.store.visible(), current)

    def navigate(self, direction: str) -> Optional[UFOEvent]:
        """Move the selection one step ``"next"`` or ``"prev"``; no-op at either end."""
        if direction not in ("next", "prev"):
            raise ValueError(f"unknown direction {direction!r}")
        neighbors = self.find_next_prev()
        target = neighbors.next if direction == "next" else neighbors.prev
        if target is not None:
            self.select_event(target)
        return target
