# ufo_timeline/core/state.py
"""Explicit application state and the store views subscribe to.

State changes only through reducers: pure functions taking the current
``AppState`` (plus arguments) and returning a new one.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ufo_timeline.core.favorites import FavoriteRegistry
from ufo_timeline.core.filters import FilterState, visible_events
from ufo_timeline.core.keys import event_key
from ufo_timeline.models.schemas import UFOEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppState:
    events: Tuple[UFOEvent, ...] = ()
    filters: FilterState = field(default_factory=FilterState)
    favorites: FavoriteRegistry = field(default_factory=FavoriteRegistry)
    selected_id: Optional[str] = None

    def find(self, key: Optional[str]) -> Optional[UFOEvent]:
        if key is None:
            return None
        for e in self.events:
            if event_key(e) == key:
                return e
        return None

    @property
    def selected(self) -> Optional[UFOEvent]:
        return self.find(self.selected_id)


# --- reducers ----------------------------------------------------------------

def set_events(state: AppState, events: Sequence[UFOEvent]) -> AppState:
    events = tuple(events)
    keys = {event_key(e) for e in events}
    selected = state.selected_id if state.selected_id in keys else None
    return replace(state, events=events, selected_id=selected)


def replace_event(state: AppState, event: UFOEvent) -> AppState:
    key = event_key(event)
    return replace(state, events=tuple(event if event_key(e) == key else e for e in state.events))


def update_filters(state: AppState, reducer: Callable[..., FilterState], *args: Any) -> AppState:
    return replace(state, filters=reducer(state.filters, *args))


def toggle_favorite(state: AppState, key: str, color: str) -> AppState:
    return replace(state, favorites=state.favorites.toggle(key, color))


def set_favorites(state: AppState, favorites: FavoriteRegistry) -> AppState:
    return replace(state, favorites=favorites)


def select(state: AppState, key: str) -> AppState:
    return replace(state, selected_id=key)


def deselect(state: AppState) -> AppState:
    return replace(state, selected_id=None)


# --- store ---------------------------------------------------------------------

Selector = Callable[["Store"], Any]
Listener = Callable[[Any], None]


class Store:
    """Holds the current ``AppState`` and notifies slice subscribers on change."""

    def __init__(self, state: Optional[AppState] = None):
        self._state = state or AppState()
        self._subs: List[List[Any]] = []  # [selector, listener, last slice]
        self._visible_key: Optional[tuple] = None
        self._visible: List[UFOEvent] = []

    @property
    def state(self) -> AppState:
        return self._state

    def visible(self) -> List[UFOEvent]:
        """Derived visible set, recomputed only when its inputs change."""
        s = self._state
        key = (s.events, s.filters, s.favorites)
        last = self._visible_key
        # events compared by identity; the key holds the tuple so it stays alive
        if last is None or last[0] is not s.events or last[1:] != key[1:]:
            self._visible = visible_events(s.events, s.filters, s.favorites)
            self._visible_key = key
        return self._visible

    def update(self, reducer: Callable[..., AppState], *args: Any) -> AppState:
        new = reducer(self._state, *args)
        if new is self._state or new == self._state:
            return self._state
        self._state = new
        self._notify()
        return new

    def subscribe(self, selector: Selector, listener: Listener) -> Callable[[], None]:
        entry = [selector, listener, selector(self)]
        self._subs.append(entry)

        def unsubscribe() -> None:
            self._subs = [e for e in self._subs if e is not entry]

        return unsubscribe

    def _notify(self) -> None:
        for entry in list(self._subs):
            selector, listener, last = entry
            current = selector(self)
            if current != last:
                entry[2] = current
                listener(current)
