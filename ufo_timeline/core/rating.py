# ufo_timeline/core/rating.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ufo_timeline.models.schemas import UFOEvent

logger = logging.getLogger(__name__)

VOTES = ("LIKE", "DISLIKE")


class RatingError(Exception):
    """A rating could not be stored; the optimistic update was reverted."""


class AlreadyRatedError(RatingError):
    pass


class VoteLedger:
    """Votes cast from this browser, persisted as ``{event_id: "LIKE"|"DISLIKE"}``."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self._votes: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("could not read votes from %s: %s", self.path, e)
            return {}
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(self._votes, f, indent=2)

    def vote_for(self, event_id: str) -> Optional[str]:
        return self._votes.get(event_id)

    def has_voted(self, event_id: str) -> bool:
        return event_id in self._votes

    def record(self, event_id: str, vote: str) -> None:
        self._votes[event_id] = vote
        self._save()


def apply_vote(event: UFOEvent, vote: str) -> UFOEvent:
    if vote == "LIKE":
        return event.model_copy(update={"likes": event.likes + 1})
    return event.model_copy(update={"dislikes": event.dislikes + 1})


def _counts(result: Any) -> Optional[Dict[str, int]]:
    if result is None:
        return None
    if not isinstance(result, dict):
        result = getattr(result, "model_dump", lambda: {})()
    if "likes" in result and "dislikes" in result:
        return {"likes": int(result["likes"]), "dislikes": int(result["dislikes"])}
    return None


class RatingController:
    """Optimistic like/dislike with a compensating revert.

    ``on_change`` sees the incremented event before ``submit`` runs; if
    ``submit`` raises, ``on_change`` gets the original event back and the
    failure surfaces as ``RatingError``.
    """

    def __init__(
        self,
        submit: Callable[[str, str], Any],
        ledger: VoteLedger,
        on_change: Callable[[UFOEvent], None],
    ):
        self.submit = submit
        self.ledger = ledger
        self.on_change = on_change

    def rate(self, event: UFOEvent, vote: str) -> UFOEvent:
        vote = vote.upper()
        if vote not in VOTES:
            raise ValueError(f"rating must be one of {VOTES}, got {vote!r}")
        if self.ledger.has_voted(event.id):
            raise AlreadyRatedError(f"already rated event {event.id}")

        optimistic = apply_vote(event, vote)
        self.on_change(optimistic)
        try:
            result = self.submit(event.id, vote)
        except Exception as e:
            self.on_change(event)
            logger.warning("rating %s for event %s failed, reverted: %s", vote, event.id, e)
            raise RatingError(f"Could not save your rating: {e}") from e

        self.ledger.record(event.id, vote)
        counts = _counts(result)
        if counts is None:
            return optimistic
        confirmed = event.model_copy(update=counts)
        self.on_change(confirmed)
        return confirmed
