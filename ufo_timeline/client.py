# ufo_timeline/client.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Union

import requests
from pydantic import BaseModel, ValidationError

from ufo_timeline.models.schemas import EventsPage, RatingOut, UFOEvent

logger = logging.getLogger(__name__)

# Bundled static dataset, used when the API cannot be reached
FALLBACK_DATA = Path(__file__).resolve().parent / "data" / "events.json"


class ApiError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


def load_bundled_events(path: Path = FALLBACK_DATA) -> List[UFOEvent]:
    with Path(path).open("r", encoding="utf-8") as f:
        rows = json.load(f)
    return [UFOEvent.model_validate(r) for r in rows]


def _payload(data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return dict(data)


class EventsClient:
    """Thin requests wrapper around the events API."""

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        api_key: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        if api_key:
            self.session.headers.update({"X-API-Key": api_key})

    def _request(self, method: str, path: str, **kwargs) -> Any:
        r = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        if not r.ok:
            try:
                message = r.json().get("error") or r.reason
            except ValueError:
                message = r.reason or f"HTTP {r.status_code}"
            raise ApiError(str(message), r.status_code)
        return r.json() if r.content else None

    def list_events(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> EventsPage:
        params: Dict[str, Any] = {"offset": offset}
        if category:
            params["category"] = category
        if search:
            params["search"] = search
        if limit:
            params["limit"] = limit
        return EventsPage.model_validate(self._request("GET", "/api/events", params=params))

    def get_event(self, event_id: str) -> UFOEvent:
        return UFOEvent.model_validate(self._request("GET", f"/api/events/{event_id}"))

    def create_event(self, data: Union[BaseModel, Dict[str, Any]]) -> UFOEvent:
        return UFOEvent.model_validate(self._request("POST", "/api/events", json=_payload(data)))

    def update_event(self, event_id: str, data: Union[BaseModel, Dict[str, Any]]) -> UFOEvent:
        body = self._request("PUT", f"/api/events/{event_id}", json=_payload(data))
        return UFOEvent.model_validate(body)

    def delete_event(self, event_id: str) -> bool:
        body = self._request("DELETE", f"/api/events/{event_id}") or {}
        return bool(body.get("success"))

    def rate_event(self, event_id: str, vote: str) -> RatingOut:
        body = self._request("POST", f"/api/events/{event_id}/rating", json={"rating": vote})
        return RatingOut.model_validate(body)


class LoadResult(NamedTuple):
    events: List[UFOEvent]
    source: str  # "api" or "fallback"


def load_events(client: Optional[EventsClient]) -> LoadResult:
    """Fetch every event once; on any failure use the bundled dataset (no retry)."""
    if client is None:
        return LoadResult(load_bundled_events(), "fallback")
    try:
        page = client.list_events()
    except (requests.RequestException, ApiError, ValidationError) as e:
        logger.warning("event fetch failed, using bundled dataset: %s", e)
        return LoadResult(load_bundled_events(), "fallback")
    return LoadResult(page.events, "api")
