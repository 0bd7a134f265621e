# ufo_timeline/models/deep_dive.py
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ufo_timeline.models.taxonomy import DEEP_DIVE_KEYS


class VideoLink(BaseModel):
    video_link: str


class VideoContent(BaseModel):
    video: List[VideoLink]


class DeepDiveVideo(BaseModel):
    type: Literal["video"]
    content: VideoContent


class DeepDiveImage(BaseModel):
    type: Literal["slider"]
    content: List[str]


class ReportContent(BaseModel):
    url: str
    title: str
    thumbnail: Optional[str] = None


class DeepDiveReport(BaseModel):
    type: Literal["report"]
    content: ReportContent


class NewsContent(BaseModel):
    url: str
    title: str
    source: Optional[str] = None


class DeepDiveNews(BaseModel):
    type: Literal["news"]
    content: NewsContent


class DeepDiveContent(BaseModel):
    """Rich media attached to an event, keyed by the four content types."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    images: List[DeepDiveImage] = Field(default_factory=list, alias="Images")
    videos: List[DeepDiveVideo] = Field(default_factory=list, alias="Videos")
    reports: List[DeepDiveReport] = Field(default_factory=list, alias="Reports")
    news: List[DeepDiveNews] = Field(default_factory=list, alias="News Coverage")

    def tabs(self) -> List[str]:
        filled = {
            "Images": self.images,
            "Videos": self.videos,
            "Reports": self.reports,
            "News Coverage": self.news,
        }
        return [k for k in DEEP_DIVE_KEYS if filled[k]]


def has_deep_dive(raw: Optional[Dict[str, Any]]) -> bool:
    """True when any of the four content types holds at least one item."""
    if not raw:
        return False
    return any(isinstance(raw.get(k), list) and raw.get(k) for k in DEEP_DIVE_KEYS)
