"""
Engine construction and the transactional Store.

The Store is created once by the application (or a test) and handed to every
service. Nothing in this module keeps a process-wide engine or session.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from practice_planner.core.db import register_query_timing
from practice_planner.core.exceptions import ConflictError, InternalError, PlannerError

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


def _configure_sqlite(engine: Engine) -> None:
    """Enforce foreign keys and take the write lock when a transaction begins.

    pysqlite's own transaction handling is switched off so that ``BEGIN
    IMMEDIATE`` serializes writers the way row locks do on PostgreSQL.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine configured for the backend named in ``database_url``."""
    url = make_url(database_url)

    if url.drivername.startswith("postgres"):
        engine = create_engine(
            database_url,
            pool_size=20,
            max_overflow=40,
            pool_pre_ping=True,  # Detects and refreshes stale connections
            pool_recycle=3600,
            connect_args={
                "application_name": "practice_planner",
                "connect_timeout": 10,
            },
            echo=echo,
        )
    elif url.drivername.startswith("sqlite"):
        if url.database in (None, "", ":memory:"):
            # One shared connection so DDL survives across sessions
            engine = create_engine(
                database_url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine = create_engine(
                database_url, echo=echo, connect_args={"check_same_thread": False}
            )
        _configure_sqlite(engine)
    else:
        engine = create_engine(database_url, echo=echo)

    register_query_timing(engine)
    logger.debug(
        "SQLAlchemy engine created",
        extra={"context": {"dialect": engine.dialect.name}},
    )
    return engine


class Store:
    """Transactional access to the relational store.

    Usage:
        store = Store.from_url("sqlite:///./practice_planner.db")
        with store.transaction() as session:
            ...
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sessionmaker = sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "Store":
        return cls(build_engine(database_url, echo=echo))

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Open a session, commit on success and roll back on any error.

        Storage errors are translated: integrity violations become
        ConflictError, every other SQLAlchemy error becomes InternalError.
        """
        session = self._sessionmaker()
        try:
            yield session
            session.commit()
        except PlannerError:
            session.rollback()
            raise
        except IntegrityError as exc:
            session.rollback()
            logger.warning(
                "Transaction rolled back on integrity violation",
                extra={"context": {"error": str(exc.orig)}},
            )
            raise ConflictError("Operation violates a storage constraint") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error(
                "Transaction rolled back on storage failure",
                extra={"context": {"error": str(exc)}},
                exc_info=True,
            )
            raise InternalError("Storage failure") from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self) -> None:
        """Create all tables in the database."""
        # Ensure models are imported so Base.metadata is populated
        from practice_planner.db import base  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def create_store(database_url: str, echo: bool = False, create: bool = True) -> Store:
    """Build a Store and, by default, make sure the schema exists."""
    store = Store.from_url(database_url, echo=echo)
    if create:
        store.create_tables()
    return store
