#!/usr/bin/env python3
"""
Quick checks so the backend can start. Run from repo root or backend/:
  python backend/scripts/check_backend.py
"""
import os
import socket
import sys
from pathlib import Path

# Run from backend/
backend_dir = Path(__file__).resolve().parent.parent
os.chdir(backend_dir)
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))


def main():
    errors = []

    env_file = backend_dir / ".env"
    if not env_file.exists():
        print("INFO backend/.env missing; using defaults (SQLite at ./cheapeats.db)")
    else:
        print("OK  .env exists")

    # DB connection and tables
    try:
        from sqlalchemy import inspect, text

        from cheapeats.db.session import engine
        from cheapeats.db.tables import ALL_TABLE_NAMES

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
        missing = set(ALL_TABLE_NAMES) - set(inspect(engine).get_table_names())
        if missing:
            errors.append(f"Tables missing: {sorted(missing)}. Run: cd backend && alembic upgrade head")
            print("FAIL Tables missing:", sorted(missing))
        else:
            print("OK  Tables present")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # Thumbnail dir writable
    try:
        from cheapeats.config import settings

        thumb_dir = Path(settings.thumbnail_dir)
        thumb_dir.mkdir(parents=True, exist_ok=True)
        probe = thumb_dir / ".write_probe"
        probe.write_bytes(b"")
        probe.unlink()
        print("OK  Thumbnail dir writable:", thumb_dir)
    except Exception as e:
        errors.append(f"Thumbnail dir: {e}")
        print("FAIL Thumbnail dir:", e)

    # App import (catches missing deps, bad imports)
    try:
        from cheapeats.main import app  # noqa: F401

        print("OK  App import (cheapeats.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)
        return 1

    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 8000))
        print("OK  Port 8000 is free")
    except OSError:
        errors.append("Port 8000 is in use. Stop the other process or use another port (e.g. --port 8001).")
        print("FAIL Port 8000 is in use")

    if errors:
        print("\n---")
        for e in errors:
            print("-", e)
        return 1

    print("\nAll checks passed. Start with: cd backend && uvicorn cheapeats.main:app --reload --port 8000")
    return 0


if __name__ == "__main__":
    sys.exit(main())
