"""Analysis storage backends."""

from .memory_store import InMemoryAnalysisStore
from .database import DatabaseManager, get_database_url
from .sql_store import SqlAnalysisStore

__all__ = [
    "InMemoryAnalysisStore",
    "DatabaseManager",
    "SqlAnalysisStore",
    "get_database_url",
]
