# ufo_timeline/views/details.py
from typing import List, Sequence, Tuple

from pydantic import ValidationError

from ufo_timeline.models.deep_dive import DeepDiveContent, has_deep_dive
from ufo_timeline.models.schemas import UFOEvent

UNKNOWN = "Unknown"

DETAIL_FIELDS = [
    ("Date", "date"),
    ("Time", "time"),
    ("Craft Type", "craft_type"),
    ("Craft Size", "craft_size"),
    ("Craft Behavior", "craft_behavior"),
    ("Color", "color"),
    ("Sound or Noise", "sound_or_noise"),
    ("Light Characteristics", "light_characteristics"),
    ("Witnesses", "witnesses"),
    ("Eyewitness", "eyewitness"),
    ("Duration", "duration"),
    ("Weather", "weather"),
    ("Photo", "photo"),
    ("Video", "video"),
    ("Radar", "radar"),
    ("Entity Type", "entity_type"),
    ("Close Encounter Scale", "close_encounter_scale"),
    ("Telepathic Communication", "telepathic_communication"),
    ("Physical Effects", "physical_effects"),
    ("Temporal Distortions", "temporal_distortions"),
    ("Credibility", "credibility"),
    ("Notoriety", "notoriety"),
    ("Government Involvement", "government_involvement"),
    ("Recurring Sightings", "recurring_sightings"),
    ("Artifacts or Relics", "artifacts_or_relics"),
    ("Symbols", "symbols"),
]


def location_text(event: UFOEvent) -> str:
    parts = [p for p in (event.location, event.city, event.state, event.country) if p]
    return ", ".join(dict.fromkeys(parts)) or UNKNOWN


def detail_rows(event: UFOEvent) -> List[Tuple[str, str]]:
    rows = [("Location", location_text(event))]
    for label, name in DETAIL_FIELDS:
        value = getattr(event, name, None)
        rows.append((label, str(value).strip() if value not in (None, "") else UNKNOWN))
    return rows


def deep_dive_tabs(event: UFOEvent) -> List[str]:
    """Content types with at least one item; empty when no deep dive is available."""
    if not has_deep_dive(event.deep_dive_content):
        return []
    try:
        return DeepDiveContent.model_validate(event.deep_dive_content).tabs()
    except ValidationError:
        return []


def search_stats(visible: Sequence[UFOEvent], total: int) -> str:
    return f"Showing {len(visible)} of {total} events"
