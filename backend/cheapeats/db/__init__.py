from cheapeats.db.base import Base
from cheapeats.db.session import SessionLocal, engine, get_db, init_db
from cheapeats.db.tables import ALL_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "init_db", "ALL_TABLE_NAMES"]
