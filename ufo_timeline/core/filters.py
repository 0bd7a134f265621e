# ufo_timeline/core/filters.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, FrozenSet, Iterable, List, Optional, Sequence

from ufo_timeline.core.dates import parse_event_date
from ufo_timeline.core.keys import event_key
from ufo_timeline.models.schemas import UFOEvent
from ufo_timeline.models.taxonomy import CATEGORIES, FAVORITE_COLORS, split_multi

if TYPE_CHECKING:
    from ufo_timeline.core.favorites import FavoriteRegistry

SEARCH_FIELDS = [
    "title", "detailed_summary", "category", "craft_type", "entity_type",
    "city", "state", "country", "witnesses", "location",
]


@dataclass(frozen=True)
class FilterState:
    categories: FrozenSet[str] = field(default_factory=lambda: frozenset(CATEGORIES))
    craft_types: FrozenSet[str] = frozenset()
    entity_types: FrozenSet[str] = frozenset()
    favorite_colors: FrozenSet[str] = frozenset()  # "showing only favorites" toggles
    search: str = ""


def _toggle(items: FrozenSet[str], item: str) -> FrozenSet[str]:
    return items - {item} if item in items else items | {item}


# --- reducers ----------------------------------------------------------------

def toggle_category(state: FilterState, category: str) -> FilterState:
    return replace(state, categories=_toggle(state.categories, category))


def solo_category(state: FilterState, category: str) -> FilterState:
    """Long-press on a category: show only it, or restore all if it already is alone."""
    if state.categories == frozenset({category}):
        return replace(state, categories=frozenset(CATEGORIES))
    return replace(state, categories=frozenset({category}))


def toggle_craft_type(state: FilterState, craft_type: str) -> FilterState:
    return replace(state, craft_types=_toggle(state.craft_types, craft_type))


def toggle_entity_type(state: FilterState, entity_type: str) -> FilterState:
    return replace(state, entity_types=_toggle(state.entity_types, entity_type))


def toggle_favorite_filter(state: FilterState, color: str) -> FilterState:
    if color not in FAVORITE_COLORS:
        raise ValueError(f"unknown favorite color {color!r}")
    return replace(state, favorite_colors=_toggle(state.favorite_colors, color))


def set_search(state: FilterState, term: str) -> FilterState:
    return replace(state, search=term)


def reset_filters(state: FilterState) -> FilterState:
    return FilterState()


# --- predicates --------------------------------------------------------------

def _to_float(v) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return 0.0


def event_score(event: UFOEvent) -> float:
    """credibility + notoriety; unparseable parts count as 0."""
    return _to_float(event.credibility) + _to_float(event.notoriety)


def matches_search(event: UFOEvent, term: str) -> bool:
    term = (term or "").strip().lower()
    if not term:
        return True
    for name in SEARCH_FIELDS:
        value = getattr(event, name, None)
        if value and term in str(value).lower():
            return True
    return False


def _matches_multi(value: Optional[str], active: FrozenSet[str]) -> bool:
    # Empty active set means no filter; unlike categories it never hides everything.
    if not active:
        return True
    return bool(set(split_multi(value)) & active)


def passes_filters(
    event: UFOEvent,
    state: FilterState,
    favorites: Optional["FavoriteRegistry"] = None,
) -> bool:
    if not matches_search(event, state.search):
        return False
    if event.category not in state.categories:
        return False
    if not _matches_multi(event.craft_type, state.craft_types):
        return False
    if not _matches_multi(event.entity_type, state.entity_types):
        return False
    if state.favorite_colors:
        colors = favorites.colors_of(event_key(event)) if favorites else set()
        if not colors & state.favorite_colors:
            return False
    return True


def visible_events(
    events: Iterable[UFOEvent],
    state: FilterState,
    favorites: Optional["FavoriteRegistry"] = None,
) -> List[UFOEvent]:
    """Events passing every filter, highest credibility + notoriety first."""
    kept = [e for e in events if passes_filters(e, state, favorites)]
    return sorted(kept, key=event_score, reverse=True)


# --- ordering ----------------------------------------------------------------

def chronological_key(event: UFOEvent):
    parsed = parse_event_date(event.date)
    # Flagged dates go last instead of clustering at the fallback date
    return (not parsed.valid, parsed.value, event.title.lower())


def sort_events(events: Sequence[UFOEvent], by: str = "date") -> List[UFOEvent]:
    if by == "date":
        return sorted(events, key=chronological_key)
    if by == "title":
        return sorted(events, key=lambda e: e.title.lower())
    if by == "score":
        return sorted(events, key=event_score, reverse=True)
    raise ValueError(f"unknown sort {by!r}")
