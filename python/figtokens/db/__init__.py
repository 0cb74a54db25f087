"""Database module for figtokens.

Provides engine creation, session management, transaction helpers, and ORM models.
"""

from figtokens.db.engine import create_db_engine, get_engine
from figtokens.db.models import Base, DesignFile, TokenEntry
from figtokens.db.session import get_db, transaction

__all__ = [
    # Engine and session
    "create_db_engine",
    "get_engine",
    "get_db",
    "transaction",
    # Base
    "Base",
    # Models
    "DesignFile",
    "TokenEntry",
]
