# scripts/export_seeds.py
"""Write every event in the DB back to a JSON dataset (default: the bundled one)."""
from __future__ import annotations

import argparse
import json
from pathlib import Path

from sqlalchemy import func
from sqlmodel import select

from ufo_timeline.db.session import get_session
from ufo_timeline.models.event import Event
from ufo_timeline.models.schemas import UFOEvent

DEFAULT_OUT = Path(__file__).resolve().parents[1] / "ufo_timeline" / "data" / "events.json"


def export_events(out: Path) -> int:
    with get_session() as s:
        rows = s.exec(select(Event).order_by(func.length(Event.id), Event.id)).all()
        data = [UFOEvent.model_validate(r).model_dump(exclude_none=True) for r in rows]
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    return len(data)


def main(argv=None) -> None:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--out", type=Path, default=DEFAULT_OUT)
    args = ap.parse_args(argv)
    n = export_events(args.out)
    print(f"Exported {n} events -> {args.out}")


if __name__ == "__main__":
    main()
