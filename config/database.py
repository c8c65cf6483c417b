"""Database engine ownership and session management."""

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import Settings

logger = logging.getLogger(__name__)


class Database:
    """Owns one engine and its session factory.

    Built once by the application factory and handed to request handlers
    through ``app.state``; nothing in the package holds a global engine.
    """

    def __init__(self, settings: Settings):
        self.url = settings.database_url
        self.engine = create_engine(self.url, **self._engine_options(settings))
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )

    def _engine_options(self, settings: Settings) -> dict[str, Any]:
        options: dict[str, Any] = {"echo": settings.db_echo}
        if self.url.startswith("sqlite"):
            options["connect_args"] = {"check_same_thread": False}
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                options["poolclass"] = StaticPool
            return options

        options.update(
            pool_pre_ping=True,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
        return options

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session that is always closed on exit."""
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        """Release every pooled connection."""
        self.engine.dispose()
        logger.info("Database engine disposed")


def get_db(request: Request) -> Generator[Session, Any, None]:
    """Dependency that provides a database session.

    Yields a SQLAlchemy session from the application's Database and ensures
    proper cleanup after use.
    """
    database: Database = request.app.state.database
    with database.session() as db:
        yield db


def get_settings(request: Request) -> Settings:
    """Dependency returning the settings the application was built with."""
    return request.app.state.settings
