"""
Store client: one engine + session factory per process, opened at startup and
disposed at shutdown (see app.main lifespan). An empty database_url leaves the
store unconfigured; repositories then receive db=None and degrade.
"""
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    def __init__(self, url: str, *, echo: bool = False):
        self.url = (url or "").strip()
        self.echo = echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._session_factory is not None

    def open(self) -> None:
        """Create the engine once. A second call is a no-op."""
        if self._engine is not None:
            return
        if not self.url:
            logger.warning("DATABASE_URL not set; running without a store")
            return
        kwargs = {"echo": self.echo}
        # SQLite needs check_same_thread=False for FastAPI
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.url or self.url in ("sqlite://", "sqlite:///"):
                kwargs["poolclass"] = StaticPool
        try:
            self._engine = create_engine(self.url, **kwargs)
        except Exception as e:
            logger.warning("Failed to create database engine: %s", e)
            self._engine = None
            return
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self._engine
        )
        logger.info("Database engine ready: %s", self._engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None

    def create_all(self) -> None:
        """Create tables from the ORM metadata (tests and local dev; production uses alembic)."""
        import app.models  # noqa: F401 - load models

        if self._engine is not None:
            Base.metadata.create_all(bind=self._engine)

    def ping(self) -> bool:
        if self._engine is None:
            return False
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", e)
            return False

    @contextmanager
    def session(self) -> Iterator[Session | None]:
        """One session per operation; yields None when the store is not configured."""
        if self._session_factory is None:
            yield None
            return
        db = self._session_factory()
        try:
            yield db
        finally:
            db.close()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session | None]:
    with get_database(request).session() as db:
        yield db
