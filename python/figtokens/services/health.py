"""Readiness checks for the token store."""

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from figtokens.errors import DatabaseUnavailableError
from figtokens.logging import get_logger

logger = get_logger(__name__)


def check_database(db: Session) -> None:
    """Raise DatabaseUnavailableError unless the database answers `SELECT 1`."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("database_check_failed", error_type=type(e).__name__)
        raise DatabaseUnavailableError() from e
