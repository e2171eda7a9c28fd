"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter: SQLite-specific implementation (default)
- Session management: Database session creation and management
"""

from shortify.db.interface import DatabaseAdapter
from shortify.db.session import async_session_maker, create_tables, db_adapter, engine, get_session

__all__ = [
    "DatabaseAdapter",
    "get_session",
    "async_session_maker",
    "create_tables",
    "db_adapter",
    "engine",
]
