from justmoved.db.base import Base
from justmoved.db.session import get_db, engine, SessionLocal
from justmoved.db.tables import ALL_TABLE_NAMES, CACHE_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "ALL_TABLE_NAMES", "CACHE_TABLE_NAMES"]
