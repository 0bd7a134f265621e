# scripts/backup_db.py
from __future__ import annotations

import os
import sqlite3
import time
from pathlib import Path

from sqlalchemy.engine import make_url


def _detect_sqlite_path() -> Path:
    url = make_url(os.getenv("DATABASE_URL", "sqlite:///./data/ufo.db"))
    if url.get_backend_name() != "sqlite" or not url.database:
        raise SystemExit(f"Only SQLite databases can be backed up, got {url.get_backend_name()}")
    return Path(url.database).resolve()


def backup_sqlite(src: Path, dest_dir: Path, keep: int = 14) -> Path:
    dest_dir.mkdir(parents=True, exist_ok=True)
    stamp = time.strftime("%Y%m%d_%H%M%S")
    dst = dest_dir / f"backup_{stamp}.sqlite3"
    with sqlite3.connect(str(src)) as src_conn, sqlite3.connect(str(dst)) as dst_conn:
        src_conn.backup(dst_conn)
    files = sorted(dest_dir.glob("backup_*.sqlite3"))
    for old in files[:-keep]:
        old.unlink(missing_ok=True)
    return dst


def main(dest_dir: Path = Path("backups")) -> Path:
    src = _detect_sqlite_path()
    if not src.exists():
        raise SystemExit(f"DB not found: {src}")
    dst = backup_sqlite(src, dest_dir)
    print(f"Backup created: {dst}")
    return dst


if __name__ == "__main__":
    main()
