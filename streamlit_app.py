# streamlit_app.py
from typing import List, Optional, Set
import time

import streamlit as st

from ufo_timeline.client import ApiError, EventsClient, load_events
from ufo_timeline.config import configure_logging, get_settings
from ufo_timeline.core import filters as F
from ufo_timeline.core.donut import DonutChart
from ufo_timeline.core.favorites import FavoritesFile
from ufo_timeline.core.globe import RotationDriver, favorite_arcs, globe_points
from ufo_timeline.core.history import todays_events
from ufo_timeline.core.keys import event_key
from ufo_timeline.core.rating import AlreadyRatedError, RatingController, RatingError, VoteLedger
from ufo_timeline.core.selection import SelectionCoordinator
from ufo_timeline.core.state import (
    AppState,
    Store,
    replace_event,
    set_events,
    set_favorites,
    toggle_favorite,
    update_filters,
)
from ufo_timeline.core.timeline import TimelineViewport, layout_timeline, timeline_connections
from ufo_timeline.core.timers import SearchBox
from ufo_timeline.models.schemas import UFOEvent
from ufo_timeline.models.taxonomy import CATEGORIES, CRAFT_TYPES, ENTITY_TYPES, FAVORITE_COLORS
from ufo_timeline.views.details import deep_dive_tabs, detail_rows, search_stats
from ufo_timeline.views.donut_fig import build_donut_figure
from ufo_timeline.views.globe_fig import build_globe_figure
from ufo_timeline.views.timeline_fig import build_timeline_figure

configure_logging()

FAV_EMOJI = {"yellow": "🟡", "orange": "🟠", "red": "🔴"}
GLOBE_NUDGE = 40  # px of simulated drag per rotate button press
GLOBE_FRAME = 0.2  # seconds between globe redraws while idle


# ---------- session bootstrap ----------
def _client() -> Optional[EventsClient]:
    settings = get_settings()
    if not settings.api_url:
        return None
    return EventsClient(settings.api_url)


def _boot() -> None:
    ss = st.session_state
    if "store" in ss:
        return
    settings = get_settings()
    client = _client()
    result = load_events(client)

    store = Store(AppState())
    store.update(set_events, result.events)
    favorites_file = FavoritesFile(settings.state_dir / "favorites.json")
    store.update(set_favorites, favorites_file.load(result.events))
    # Favorites are durable: every change is written straight back
    store.subscribe(lambda s: s.state.favorites, favorites_file.save)

    globe = RotationDriver()
    search_box = SearchBox(on_commit=lambda term: store.update(update_filters, F.set_search, term))

    def _submit(event_id: str, vote: str):
        if client is None:
            raise ApiError("ratings need the events API (UFO_API_URL is not set)")
        return client.rate_event(event_id, vote)

    ss.store = store
    ss.client = client
    ss.data_source = result.source
    ss.globe = globe
    ss.search_box = search_box
    ss.coordinator = SelectionCoordinator(store, globe, search_box)
    ss.viewport = TimelineViewport()
    ss.donut = DonutChart()
    ss.rating = RatingController(_submit, VoteLedger(settings.state_dir / "votes.json"),
                                 on_change=lambda e: store.update(replace_event, e))
    ss.chart_epoch = 0
    ss.rating_notice = None
    for cat in CATEGORIES:
        ss[f"cat_{cat}"] = True
    for color in FAVORITE_COLORS:
        ss[f"only_{color}"] = False


def _store() -> Store:
    return st.session_state.store


# ---------- callbacks ----------
def _sync_category_widgets() -> None:
    active = _store().state.filters.categories
    for cat in CATEGORIES:
        st.session_state[f"cat_{cat}"] = cat in active


def _on_toggle_category(cat: str) -> None:
    _store().update(update_filters, F.toggle_category, cat)
    _sync_category_widgets()


def _on_solo_category(cat: str) -> None:
    _store().update(update_filters, F.solo_category, cat)
    _sync_category_widgets()


def _on_multi_change(widget_key: str, current: Set[str], reducer) -> None:
    chosen = set(st.session_state.get(widget_key, []))
    for item in sorted(chosen ^ set(current)):
        _store().update(update_filters, reducer, item)


def _on_favorite_filter(color: str) -> None:
    _store().update(update_filters, F.toggle_favorite_filter, color)


def _on_search() -> None:
    st.session_state.search_box.type(st.session_state.get("search_raw", ""))


def _on_reset_filters() -> None:
    _store().update(update_filters, F.reset_filters)
    st.session_state.search_box.clear()
    st.session_state["search_raw"] = ""
    st.session_state["craft_pick"] = []
    st.session_state["entity_pick"] = []
    for color in FAVORITE_COLORS:
        st.session_state[f"only_{color}"] = False
    _sync_category_widgets()


def _picked_ids(chart_state) -> tuple:
    try:
        points = chart_state.selection.points
    except AttributeError:
        return ()
    return tuple(p.get("customdata") for p in points if p.get("customdata") is not None)


def _handle_pick(source: str, chart_state) -> bool:
    return st.session_state.coordinator.pick(source, _picked_ids(chart_state))


def _on_close() -> None:
    coordinator: SelectionCoordinator = st.session_state.coordinator
    coordinator.clear_selection()
    coordinator.forget_picks()
    # fresh chart keys drop the selections plotly still holds
    st.session_state.chart_epoch += 1


def _rate(event: UFOEvent, vote: str) -> None:
    # runs as a button callback; the message is shown by the rerun that follows
    try:
        st.session_state.rating.rate(event, vote)
    except AlreadyRatedError:
        st.session_state.rating_notice = ("info", "You already rated this event.")
    except RatingError as e:
        st.session_state.rating_notice = ("error", str(e))


# ---------- sidebar ----------
def _render_filters() -> None:
    store = _store()
    fs = store.state.filters

    st.sidebar.text_input("Search events", key="search_raw", on_change=_on_search,
                          placeholder="title, place, craft, entity...")
    box: SearchBox = st.session_state.search_box
    if box.pending:
        time.sleep(box.remaining())
        box.poll()

    with st.sidebar.expander("Categories", expanded=True):
        for cat in CATEGORIES:
            c1, c2 = st.columns([5, 2], gap="small")
            with c1:
                st.checkbox(cat, key=f"cat_{cat}", on_change=_on_toggle_category, args=(cat,))
            with c2:
                st.button("solo", key=f"solo_{cat}", on_click=_on_solo_category, args=(cat,),
                          help="Show only this category (again to show all)")

    st.sidebar.multiselect("Craft types", options=CRAFT_TYPES, key="craft_pick",
                           on_change=_on_multi_change, args=("craft_pick", fs.craft_types, F.toggle_craft_type))
    st.sidebar.multiselect("Entity types", options=ENTITY_TYPES, key="entity_pick",
                           on_change=_on_multi_change, args=("entity_pick", fs.entity_types, F.toggle_entity_type))

    st.sidebar.caption("Only favorites")
    cols = st.sidebar.columns(len(FAVORITE_COLORS))
    for col, color in zip(cols, FAVORITE_COLORS):
        with col:
            st.checkbox(f"{FAV_EMOJI[color]} {color}", key=f"only_{color}",
                        on_change=_on_favorite_filter, args=(color,))

    st.sidebar.button("Reset filters", on_click=_on_reset_filters, use_container_width=True)


# ---------- main panels ----------
def _render_timeline(visible: List[UFOEvent]) -> None:
    state = _store().state
    viewport: TimelineViewport = st.session_state.viewport

    c_in, c_out, c_left, c_right, c_reset = st.columns(5)
    if c_in.button("Zoom in", use_container_width=True):
        viewport.wheel(-1)
    if c_out.button("Zoom out", use_container_width=True):
        viewport.wheel(1)
    if c_left.button("◀ Pan", use_container_width=True):
        viewport.pan(viewport.inner_width / 5)
    if c_right.button("Pan ▶", use_container_width=True):
        viewport.pan(-viewport.inner_width / 5)
    if c_reset.button("Reset zoom", use_container_width=True):
        viewport.reset()
    viewport.settle()  # plotly animates the range change itself

    decades = [t.decade for t in viewport.ticks() if t.decade is not None]
    if decades:
        dcols = st.columns(len(decades))
        for col, decade in zip(dcols, decades):
            if col.button(f"{decade}s", key=f"decade_{decade}", use_container_width=True):
                viewport.zoom_to_decade(decade)
                viewport.settle()

    scale = viewport.scale()
    layout = layout_timeline(visible, state.filters.categories, scale,
                             selected_id=state.selected_id, favorites=state.favorites)
    connections = timeline_connections(layout, state.favorites, sorted(state.filters.favorite_colors))
    fig = build_timeline_figure(layout, scale, viewport.ticks(), connections)
    picked = st.plotly_chart(fig, use_container_width=True, key=f"timeline_chart_{st.session_state.chart_epoch}",
                             on_select="rerun", selection_mode="points")
    if _handle_pick("timeline", picked):
        st.rerun()
    if layout.undated:
        st.caption(f"{len(layout.undated)} event(s) with an unreadable date are not on the timeline: "
                   + ", ".join(e.title for e in layout.undated))


def _nudge(globe: RotationDriver, dx: float) -> None:
    # a button press is a short drag, so auto-rotation pauses the same way
    globe.start_drag()
    globe.drag(dx, 0)
    globe.end_drag()


@st.fragment(run_every=GLOBE_FRAME)
def _render_globe(visible: List[UFOEvent]) -> None:
    """Redrawn on its own timer so auto-rotation, the centering tween and the pulse animate."""
    state = _store().state
    globe: RotationDriver = st.session_state.globe

    g1, g2, g3, g4, g5 = st.columns(5)
    if g1.button("⟲", help="Rotate west"):
        _nudge(globe, -GLOBE_NUDGE)
    if g2.button("⟳", help="Rotate east"):
        _nudge(globe, GLOBE_NUDGE)
    if g3.button("＋", help="Zoom in"):
        globe.wheel(-1)
    if g4.button("－", help="Zoom out"):
        globe.wheel(1)
    if g5.button("⌂", help="Reset globe"):
        globe.reset()

    rotation = globe.tick()
    points = globe_points(visible, rotation, state.selected_id)
    arcs = favorite_arcs(visible, state.favorites, sorted(state.filters.favorite_colors))
    fig = build_globe_figure(points, rotation, globe.zoom, arcs, globe.pulse())
    picked = st.plotly_chart(fig, use_container_width=True, key=f"globe_chart_{st.session_state.chart_epoch}",
                             on_select="rerun", selection_mode="points")
    if _handle_pick("globe", picked):
        st.rerun()
    st.caption(f"{sum(p.visible for p in points)} of {len(points)} located events on this side · {globe.mode.value}")


def _render_donut(visible: List[UFOEvent]) -> None:
    donut: DonutChart = st.session_state.donut
    donut.update(visible, _store().state.filters.categories)
    frames, total = donut.settle()
    st.plotly_chart(build_donut_figure(frames, total), use_container_width=True, key="donut_chart")


def _render_details() -> None:
    store = _store()
    coordinator: SelectionCoordinator = st.session_state.coordinator
    notice = st.session_state.rating_notice
    if notice is not None:
        st.session_state.rating_notice = None
        kind, message = notice
        (st.error if kind == "error" else st.info)(message)

    event = store.state.selected
    if event is None:
        st.caption("Select an event on the timeline or the globe.")
        return

    st.subheader(event.title)
    st.caption(f"{event.category} · {event.date}")
    if event.detailed_summary:
        st.write(event.detailed_summary)

    nav = coordinator.find_next_prev(event)
    p, n, x = st.columns(3)
    p.button("◀ Previous", disabled=nav.prev is None, use_container_width=True,
             on_click=coordinator.navigate, args=("prev",))
    n.button("Next ▶", disabled=nav.next is None, use_container_width=True,
             on_click=coordinator.navigate, args=("next",))
    x.button("Close", use_container_width=True, on_click=_on_close)

    like, dislike = st.columns(2)
    voted = st.session_state.rating.ledger.vote_for(event.id)
    like.button(f"👍 {event.likes}", key="rate_like", disabled=voted is not None,
                use_container_width=True, on_click=_rate, args=(event, "LIKE"))
    dislike.button(f"👎 {event.dislikes}", key="rate_dislike", disabled=voted is not None,
                   use_container_width=True, on_click=_rate, args=(event, "DISLIKE"))

    key = event_key(event)
    current = store.state.favorites.color_of(key)
    st.caption("Favorite" + (f": {FAV_EMOJI[current]} {current}" if current else ""))
    fcols = st.columns(len(FAVORITE_COLORS))
    for col, color in zip(fcols, FAVORITE_COLORS):
        col.button(FAV_EMOJI[color], key=f"fav_{color}", use_container_width=True,
                   on_click=store.update, args=(toggle_favorite, key, color),
                   help=f"Mark {color} (again to unmark)")

    with st.expander("Details", expanded=False):
        for label, value in detail_rows(event):
            st.write(f"**{label}:** {value}")
        if event.media_link:
            st.markdown(f"[Media]({event.media_link})")

    tabs = deep_dive_tabs(event)
    if tabs:
        with st.expander("Deep dive", expanded=False):
            content = event.deep_dive_content or {}
            for tab, name in zip(st.tabs(tabs), tabs):
                with tab:
                    for item in content.get(name, []):
                        body = item.get("content")
                        if item.get("type") == "slider":
                            for url in body or []:
                                st.image(url)
                        elif item.get("type") == "video":
                            for v in (body or {}).get("video", []):
                                st.video(v.get("video_link"))
                        else:
                            st.markdown(f"[{body.get('title')}]({body.get('url')})")


def _render_today(events: List[UFOEvent]) -> None:
    today = todays_events(events)
    if today.featured is None:
        return
    e = today.featured
    st.info(f"**Today in UFO history** · {today.years_ago} years ago: {e.title} ({e.date})")
    if st.button("Show it", key="today_show"):
        st.session_state.coordinator.select_event(e)
        st.rerun()


def _render_event_list(visible: List[UFOEvent]) -> None:
    with st.expander("Event list", expanded=False):
        by = st.radio("Sort", options=["date", "title"], horizontal=True, key="list_sort",
                      format_func={"date": "Chronological", "title": "Alphabetical"}.get)
        for e in F.sort_events(visible, by=by):
            if st.button(f"{e.date} · {e.title}", key=f"list_{event_key(e)}"):
                st.session_state.coordinator.select_event(e)
                st.rerun()


# ---------- MAIN APP ----------
def _render_app():
    st.set_page_config(page_title="The UFO Timeline", layout="wide")
    _boot()
    store = _store()

    _render_filters()
    visible = store.visible()

    st.title("The UFO Timeline")
    st.caption(search_stats(visible, len(store.state.events))
               + (" · offline dataset" if st.session_state.data_source == "fallback" else ""))
    _render_today(list(store.state.events))

    _render_timeline(visible)

    left, mid, right = st.columns([3, 4, 3])
    with left:
        _render_details()
    with mid:
        _render_globe(visible)
    with right:
        _render_donut(visible)

    _render_event_list(visible)


if __name__ == "__main__":
    _render_app()
