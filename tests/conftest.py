"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from catalog_search.catalog.models import CatalogBase, Category, Product, ProductStatus
from catalog_search.catalog.session import get_session

if TYPE_CHECKING:
    from collections.abc import Generator


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def populate_catalog(session: Session) -> None:
    """Insert a small fixed catalog of four products in two categories."""
    audio = Category(slug="audio", title="Audio Gear")
    electronics = Category(slug="electronics", title="Electronics")
    session.add_all([audio, electronics])
    session.flush()

    session.add_all(
        [
            Product(
                title="Wireless Headphones",
                slug="wireless-headphones",
                description="Noise cancelling over-ear headphones",
                status=ProductStatus.PUBLISHED,
                created_at=_utc(2024, 1, 15, 10, 0),
                updated_at=_utc(2024, 3, 1, 12, 0),
                category=audio,
            ),
            Product(
                title="Smart Watch",
                slug="smart-watch",
                description="Fitness tracking watch",
                status=ProductStatus.DRAFT,
                created_at=_utc(2024, 2, 1, 0, 0),
                category=electronics,
            ),
            Product(
                title="Vintage Radio",
                slug="vintage-radio",
                description=None,
                status=ProductStatus.ARCHIVED,
                created_at=_utc(2023, 12, 31, 23, 59),
                category=electronics,
            ),
            Product(
                title="USB Cable 100%",
                slug="usb-cable",
                description="Braided cable",
                status=ProductStatus.PUBLISHED,
                created_at=_utc(2024, 1, 16, 0, 0),
                category=None,
            ),
        ]
    )
    session.commit()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def catalog_session() -> Generator[Session, None, None]:
    """In-memory catalog database populated with the sample products."""
    engine = create_engine("sqlite:///:memory:")
    CatalogBase.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    populate_catalog(session)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def catalog_url(temp_dir: Path) -> str:
    """SQLite file database populated with the sample products."""
    url = f"sqlite:///{temp_dir / 'catalog.db'}"
    with get_session(url) as session:
        populate_catalog(session)
    return url


@pytest.fixture
def sample_config(temp_dir: Path, catalog_url: str) -> Path:
    """Create a sample config file pointing at the sample catalog."""
    config_path = temp_dir / "config.toml"
    config_path.write_text(f"""[catalog]
database = "{catalog_url}"

[search]
max_query_length = 200
default_limit = 50

[display]
colored_output = false
""")
    return config_path
