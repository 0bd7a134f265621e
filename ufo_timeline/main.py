# ufo_timeline/main.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Generator, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from ufo_timeline.config import SERVICE_NAME, VERSION, configure_logging, get_settings
from ufo_timeline.db import crud
from ufo_timeline.db.session import create_all, get_session
from ufo_timeline.models.event import Event
from ufo_timeline.models.schemas import (
    CategoryCount,
    EventCreate,
    EventsPage,
    EventUpdate,
    HealthOut,
    RatingIn,
    RatingOut,
    UFOEvent,
)
from ufo_timeline.models.taxonomy import CATEGORIES, CRAFT_TYPES, ENTITY_TYPES, category_color

configure_logging()
logger = logging.getLogger(__name__)

# FastAPI instance (uvicorn target is "ufo_timeline.main:api")
api = FastAPI(title="UFO Timeline API", version=VERSION)


# --- helpers -----------------------------------------------------------------

def db() -> Generator[Session, None, None]:
    """Yield a DB session per request."""
    with get_session() as s:
        yield s


def require_api_key(x_api_key: Optional[str] = Header(default=None)) -> None:
    token = get_settings().api_token
    if not token or x_api_key != token:
        raise HTTPException(status_code=401, detail="Unauthorized")


def _out(e: Event) -> UFOEvent:
    return UFOEvent.model_validate(e)


def _get_or_404(s: Session, event_id: str) -> Event:
    event = crud.get_event(s, event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


# Ensure tables exist (safe alongside Alembic in dev)
@api.on_event("startup")
def _create_tables() -> None:
    create_all()
    logger.info("%s %s ready (db: %s)", SERVICE_NAME, VERSION, get_settings().database_url)


# --- errors: every failure is {"error": "..."} --------------------------------

@api.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)


@api.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        where = ".".join(str(p) for p in err.get("loc", ())[1:])
        parts.append(f"{where}: {err.get('msg')}" if where else str(err.get("msg")))
    return JSONResponse({"error": "; ".join(parts) or "Invalid request"}, status_code=422)


@api.exception_handler(SQLAlchemyError)
async def _store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("store failure on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Event store failure"}, status_code=500)


# --- routes: health + meta ----------------------------------------------------

@api.get("/health", response_model=HealthOut)
def health() -> HealthOut:
    return HealthOut(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        service=SERVICE_NAME,
        version=VERSION,
    )


@api.get("/api/categories", response_model=List[CategoryCount])
def list_categories(s: Session = Depends(db)) -> List[CategoryCount]:
    counts = crud.category_counts(s)
    return [CategoryCount(category=c, color=category_color(c), count=counts.get(c, 0)) for c in CATEGORIES]


@api.get("/api/meta/vocabulary")
def vocabulary() -> dict:
    return {"categories": CATEGORIES, "craft_types": CRAFT_TYPES, "entity_types": ENTITY_TYPES}


# --- routes: events -----------------------------------------------------------

@api.get("/api/events", response_model=EventsPage)
def list_events(
    category: Optional[str] = Query(default=None, description="Exact category; 'all' or empty for every category."),
    search: Optional[str] = Query(default=None, description="Case-insensitive substring over the searchable fields."),
    limit: Optional[int] = Query(default=None, ge=1, le=10000),
    offset: int = Query(default=0, ge=0),
    s: Session = Depends(db),
) -> EventsPage:
    rows, total = crud.list_events(s, category, search, limit, offset)
    return EventsPage(
        events=[_out(e) for e in rows],
        totalCount=total,
        hasMore=bool(limit) and offset + (limit or 0) < total,
    )


@api.get("/api/events/{event_id}", response_model=UFOEvent)
def get_event(event_id: str, s: Session = Depends(db)) -> UFOEvent:
    return _out(_get_or_404(s, event_id))


@api.post("/api/events", response_model=UFOEvent, status_code=201)
def create_event(body: EventCreate, s: Session = Depends(db)) -> UFOEvent:
    return _out(crud.create_event(s, body))


@api.put("/api/events/{event_id}", response_model=UFOEvent)
def update_event(event_id: str, body: EventUpdate, s: Session = Depends(db)) -> UFOEvent:
    return _out(crud.update_event(s, _get_or_404(s, event_id), body))


@api.delete("/api/events/{event_id}")
def delete_event(event_id: str, s: Session = Depends(db)) -> dict:
    crud.delete_event(s, _get_or_404(s, event_id))
    return {"success": True}


@api.post("/api/events/{event_id}/rating", response_model=RatingOut)
def rate_event(event_id: str, body: RatingIn, s: Session = Depends(db)) -> RatingOut:
    event = crud.rate_event(s, _get_or_404(s, event_id), body.rating)
    return RatingOut(likes=event.likes, dislikes=event.dislikes)


# --- routes: admin mirror (X-API-Key) ------------------------------------------

@api.get("/api/admin/events", dependencies=[Depends(require_api_key)])
def admin_list_events(s: Session = Depends(db)) -> dict:
    rows, _ = crud.list_events(s)
    return {"events": [_out(e).model_dump() for e in rows]}


@api.get("/api/admin/events/{event_id}", dependencies=[Depends(require_api_key)])
def admin_get_event(event_id: str, s: Session = Depends(db)) -> dict:
    return {"event": _out(_get_or_404(s, event_id)).model_dump()}


@api.post("/api/admin/events", status_code=201, dependencies=[Depends(require_api_key)])
def admin_create_event(body: EventCreate, s: Session = Depends(db)) -> dict:
    return {"event": _out(crud.create_event(s, body)).model_dump()}


@api.put("/api/admin/events/{event_id}", dependencies=[Depends(require_api_key)])
def admin_update_event(event_id: str, body: EventUpdate, s: Session = Depends(db)) -> dict:
    return {"event": _out(crud.update_event(s, _get_or_404(s, event_id), body)).model_dump()}


@api.delete("/api/admin/events/{event_id}", dependencies=[Depends(require_api_key)])
def admin_delete_event(event_id: str, s: Session = Depends(db)) -> dict:
    crud.delete_event(s, _get_or_404(s, event_id))
    return {"success": True}
