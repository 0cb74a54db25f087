"""Sessions and write transactions for the token store.

Routes receive one session per request from get_db(). Services wrap each
write (a file sync, a delete) in transaction(), so a failure part way
through leaves the stored file and its tokens as they were.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from figtokens.db.engine import get_engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return create_session_factory(get_engine())


def get_db() -> Iterator[Session]:
    """Request-scoped session, closed once the response has been produced."""
    with get_session_factory()() as db:
        yield db


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or roll it back and re-raise."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
