"""Catalog database session management."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager

import sqlalchemy.engine
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from catalog_search.catalog.models import CatalogBase
from catalog_search.exceptions import DatabaseError

log = logging.getLogger(__name__)


def get_engine(url: str) -> sqlalchemy.engine.Engine:
    """Create SQLAlchemy engine for the catalog database.

    Args:
        url: SQLAlchemy database URL, e.g. ``sqlite:///catalog.db``.

    Returns:
        SQLAlchemy engine.
    """
    connect_args: dict[str, object] = {}
    if url.startswith("sqlite"):
        connect_args = {"timeout": 30, "check_same_thread": False}
    return create_engine(url, connect_args=connect_args)


@contextmanager
def get_session(url: str) -> Generator[Session, None, None]:
    """Create a session for the catalog database.

    Auto-creates tables on first use.

    Args:
        url: SQLAlchemy database URL.

    Yields:
        SQLAlchemy Session for the catalog database.

    Raises:
        DatabaseError: If the database cannot be opened.
    """
    engine = get_engine(url)
    try:
        CatalogBase.metadata.create_all(engine)
    except SQLAlchemyError as e:
        engine.dispose()
        raise DatabaseError(f"Cannot open catalog database {url}: {e}") from e
    log.debug("Opened catalog database: %s", engine.url)

    session_factory = sessionmaker(bind=engine)
    session = session_factory()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        engine.dispose()
