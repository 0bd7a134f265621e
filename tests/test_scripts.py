# tests/test_scripts.py
import json
import sqlite3

from scripts import backup_db, export_seeds, ingest_seeds
from ufo_timeline.models.event import Event


def test_ingest_is_idempotent_and_keeps_ratings(session):
    assert ingest_seeds.upsert_events(session) == (21, 0, 0)

    row = session.get(Event, "17")
    row.likes = 12
    session.add(row)
    session.commit()

    assert ingest_seeds.upsert_events(session) == (0, 21, 0)
    session.refresh(row)
    assert row.likes == 12


def test_ingest_skips_unknown_category_and_malformed(session, tmp_path, monkeypatch):
    rows = [
        {"id": "1", "title": "ok", "category": "Tech", "date": "1990"},
        {"id": "2", "title": "odd", "category": "Cryptids", "date": "1990"},
        {"id": "3", "category": "Tech"},
        {"id": "4", "title": "vague", "category": "Beings", "date": "the seventies"},
    ]
    (tmp_path / "events.json").write_text(json.dumps(rows))
    monkeypatch.setattr(ingest_seeds, "SEEDS", tmp_path)

    assert ingest_seeds.upsert_events(session) == (2, 0, 2)
    assert session.get(Event, "2") is None
    # flagged dates are stored as-is
    assert session.get(Event, "4").date == "the seventies"


def test_export_round_trips_the_dataset(seeded, tmp_path):
    out = tmp_path / "export" / "events.json"
    assert export_seeds.export_events(out) == 21
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [r["id"] for r in data[:3]] == ["1", "2", "3"]
    roswell = next(r for r in data if r["id"] == "2")
    assert "News Coverage" in roswell["deep_dive_content"]


def test_export_cli(seeded, tmp_path, capsys):
    out = tmp_path / "cli.json"
    export_seeds.main(["--out", str(out)])
    assert "Exported 21 events" in capsys.readouterr().out
    assert out.exists()


def test_backup_copies_sqlite(seeded, tmp_path):
    dst = backup_db.main(dest_dir=tmp_path / "backups")
    assert dst.exists()
    with sqlite3.connect(str(dst)) as conn:
        (count,) = conn.execute("SELECT COUNT(*) FROM events").fetchone()
    assert count == 21


def test_backup_prunes_old_files(seeded, tmp_path):
    dest = tmp_path / "b"
    dest.mkdir()
    for i in range(3):
        (dest / f"backup_2000010{i}_000000.sqlite3").write_bytes(b"")
    src = backup_db._detect_sqlite_path()
    backup_db.backup_sqlite(src, dest, keep=2)
    names = sorted(p.name for p in dest.glob("backup_*.sqlite3"))
    assert len(names) == 2
    assert names[0] == "backup_20000102_000000.sqlite3"
