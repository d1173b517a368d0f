"""Database access for the SQL document store."""

import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

logger = logging.getLogger(__name__)

DATABASE_URL_ENV = "INLINE_DIFF_REVIEW_DATABASE_URL"
DEFAULT_DATABASE_URL = "sqlite:///inline_diff_review.db"


def get_database_url(database_url: Optional[str] = None) -> str:
    """
    Resolve the database URL.

    Args:
        database_url: Explicit URL. If None, INLINE_DIFF_REVIEW_DATABASE_URL
                      is used, falling back to a local SQLite file.

    Returns:
        SQLAlchemy connection URL string.
    """
    return database_url or os.environ.get(DATABASE_URL_ENV) or DEFAULT_DATABASE_URL


class DatabaseManager:
    """
    Owns the engine and transactions of the documents database.

    The engine is created on first use, so building a manager never
    touches the database.
    """

    def __init__(self, database_url: Optional[str] = None):
        self._database_url = get_database_url(database_url)
        self._engine: Optional[Engine] = None
        self._sessions: Optional[sessionmaker] = None

    @property
    def database_url(self) -> str:
        return self._database_url

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_engine(self._database_url, pool_pre_ping=True)
            logger.debug(f"Created engine for {self._engine.url.render_as_string(hide_password=True)}")
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._sessions is None:
            self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._sessions

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """
        Run a block inside one transaction.

        The transaction commits when the block returns and rolls back
        when it raises; the session is closed either way.
        """
        with self.session_factory.begin() as session:
            yield session

    def init_database(self) -> None:
        """Create the documents table if it does not exist."""
        Base.metadata.create_all(self.engine)

    def close(self) -> None:
        """Dispose of the engine; the next access creates a fresh one."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._sessions = None

    def health_check(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"Database health check failed: {e}")
            return False
        return True
