# tests/test_filters.py
import itertools

import pytest

from ufo_timeline.core import filters as f
from ufo_timeline.core.favorites import FavoriteRegistry
from ufo_timeline.models.taxonomy import CATEGORIES


@pytest.fixture
def events(make_event):
    return [
        make_event(title="Orb over lake", category="Sighting", craft_type="Orb, Lights",
                   entity_type=None, credibility="3", notoriety="2", city="Lakeview"),
        make_event(title="Grey visitors", category="Beings", craft_type="Saucer",
                   entity_type="Grey", credibility="5", notoriety="5"),
        make_event(title="Radar return", category="Military Contact", craft_type="Tic Tac",
                   entity_type="None Reported", credibility="8", notoriety="x"),
        make_event(title="No craft noted", category="Sighting", craft_type=None,
                   credibility=None, notoriety="1"),
    ]


def test_default_state_shows_everything(events):
    state = f.FilterState()
    assert state.categories == frozenset(CATEGORIES)
    assert len(f.visible_events(events, state)) == len(events)


def test_visible_sorted_by_score(events):
    scores = [f.event_score(e) for e in f.visible_events(events, f.FilterState())]
    assert scores == sorted(scores, reverse=True)
    # "x" notoriety counts as 0
    assert f.event_score(events[2]) == 8.0
    assert f.event_score(events[3]) == 1.0


def test_toggle_twice_is_identity():
    state = f.FilterState()
    assert f.toggle_category(f.toggle_category(state, "Beings"), "Beings") == state
    assert f.toggle_craft_type(f.toggle_craft_type(state, "Orb"), "Orb") == state


def test_empty_categories_hide_everything(events):
    state = f.FilterState(categories=frozenset())
    assert f.visible_events(events, state) == []


def test_solo_category_and_restore():
    state = f.solo_category(f.FilterState(), "Abduction")
    assert state.categories == {"Abduction"}
    assert f.solo_category(state, "Abduction").categories == frozenset(CATEGORIES)


def test_multi_value_fields(events):
    state = f.toggle_craft_type(f.FilterState(), "Lights")
    assert [e.title for e in f.visible_events(events, state)] == ["Orb over lake"]

    # an event with no craft type never matches an active craft filter
    state = f.toggle_craft_type(f.FilterState(), "Other")
    assert f.visible_events(events, state) == []

    state = f.toggle_entity_type(f.FilterState(), "Grey")
    assert [e.title for e in f.visible_events(events, state)] == ["Grey visitors"]


def test_search_is_case_insensitive_over_fields(events):
    assert f.matches_search(events[0], "LAKEVIEW")
    assert f.matches_search(events[2], "tic")
    assert not f.matches_search(events[1], "lake")
    assert f.matches_search(events[1], "   ")


def test_favorite_filter(events):
    reg = FavoriteRegistry().toggle(events[1].id, "yellow")
    state = f.toggle_favorite_filter(f.FilterState(), "yellow")
    assert [e.id for e in f.visible_events(events, state, reg)] == [events[1].id]
    assert f.visible_events(events, state) == []

    with pytest.raises(ValueError):
        f.toggle_favorite_filter(state, "green")


def test_filters_are_a_conjunction(events):
    reg = FavoriteRegistry().toggle(events[0].id, "red")
    choices = itertools.product(
        [frozenset(CATEGORIES), frozenset({"Sighting"})],
        [frozenset(), frozenset({"Orb"}), frozenset({"Saucer"})],
        [frozenset(), frozenset({"red"})],
        ["", "o"],
    )
    for cats, crafts, favs, term in choices:
        state = f.FilterState(categories=cats, craft_types=crafts, favorite_colors=favs, search=term)
        expected = {
            e.id for e in events
            if e.category in cats
            and (not crafts or set(f.split_multi(e.craft_type)) & crafts)
            and (not favs or reg.colors_of(e.id) & favs)
            and f.matches_search(e, term)
        }
        assert {e.id for e in f.visible_events(events, state, reg)} == expected


def test_reset_filters():
    state = f.set_search(f.toggle_category(f.FilterState(), "Tech"), "roswell")
    assert f.reset_filters(state) == f.FilterState()


def test_sort_events(make_event):
    a = make_event(title="b", date="March 1, 1990")
    b = make_event(title="a", date="someday")
    c = make_event(title="c", date="1952")
    # unparseable dates go last
    assert [e.title for e in f.sort_events([a, b, c])] == ["c", "b", "a"]
    assert [e.title for e in f.sort_events([a, b, c], by="title")] == ["a", "b", "c"]
    with pytest.raises(ValueError):
        f.sort_events([a], by="color")
