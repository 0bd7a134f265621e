# ufo_timeline/models/event.py
from typing import Any, Dict, Optional

from sqlalchemy import JSON
from sqlmodel import Field, SQLModel


class EventBase(SQLModel):
    title: str
    category: str = Field(index=True)
    date: str  # "November 17, 1986"; parsed leniently, see core.dates
    time: Optional[str] = None

    location: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None

    craft_type: Optional[str] = None
    craft_size: Optional[str] = None
    craft_behavior: Optional[str] = None
    color: Optional[str] = None
    sound_or_noise: Optional[str] = None
    light_characteristics: Optional[str] = None

    witnesses: Optional[str] = None
    eyewitness: Optional[str] = None
    duration: Optional[str] = None
    weather: Optional[str] = None
    photo: Optional[str] = None
    video: Optional[str] = None
    radar: Optional[str] = None

    entity_type: Optional[str] = None
    close_encounter_scale: Optional[str] = None
    telepathic_communication: Optional[str] = None

    physical_effects: Optional[str] = None
    temporal_distortions: Optional[str] = None

    credibility: Optional[str] = None
    notoriety: Optional[str] = None
    government_involvement: Optional[str] = None
    recurring_sightings: Optional[str] = None
    artifacts_or_relics: Optional[str] = None

    media_link: Optional[str] = None
    detailed_summary: Optional[str] = None
    symbols: Optional[str] = None

    deep_dive_content: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)

    likes: int = 0
    dislikes: int = 0


class Event(EventBase, table=True):
    __tablename__ = "events"

    id: str = Field(primary_key=True)
