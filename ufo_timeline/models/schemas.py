# ufo_timeline/models/schemas.py
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, field_validator

from ufo_timeline.models.deep_dive import DeepDiveContent
from ufo_timeline.models.event import EventBase
from ufo_timeline.models.taxonomy import CATEGORIES


def _check_category(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in CATEGORIES:
        raise ValueError(f"unknown category {v!r}; expected one of {', '.join(CATEGORIES)}")
    return v


def _check_deep_dive(v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if v is None:
        return v
    parsed = DeepDiveContent.model_validate(v)
    return parsed.model_dump(by_alias=True, exclude_defaults=True)


class UFOEvent(EventBase):
    """Read model shared by the API, the client and the visualization core.

    Lenient: legacy records with an unknown category
    still load and render in the fallback color.
    """

    id: str


class EventCreate(EventBase):
    check_category = field_validator("category")(_check_category)
    check_deep_dive = field_validator("deep_dive_content")(_check_deep_dive)


class EventUpdate(EventBase):
    title: Optional[str] = None
    category: Optional[str] = None
    date: Optional[str] = None

    check_category = field_validator("category")(_check_category)
    check_deep_dive = field_validator("deep_dive_content")(_check_deep_dive)


class EventsPage(BaseModel):
    events: List[UFOEvent]
    totalCount: int
    hasMore: bool


class RatingIn(BaseModel):
    rating: Literal["LIKE", "DISLIKE"]


class RatingOut(BaseModel):
    success: bool = True
    likes: int
    dislikes: int


class CategoryCount(BaseModel):
    category: str
    color: str
    count: int


class HealthOut(BaseModel):
    status: str
    timestamp: datetime
    service: str
    version: str
