"""Compile search predicates to SQL and execute them against the catalog."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, func, not_, or_, true

from catalog_search.catalog.models import Category, Product
from catalog_search.exceptions import SearchError
from catalog_search.search.ast_nodes import SearchQuery
from catalog_search.search.predicates import (
    CASE_INSENSITIVE,
    AllOf,
    AnyOf,
    Comparison,
    FieldPredicate,
    MatchAll,
    Negation,
    Predicate,
    Unsupported,
)
from catalog_search.search.translator import translate

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# Map predicate paths to Product columns.
_PRODUCT_COLUMNS: dict[str, Any] = {
    "title": Product.title,
    "description": Product.description,
    "slug": Product.slug,
    "status": Product.status,
    "created_at": Product.created_at,
    "updated_at": Product.updated_at,
}

# Joined relations: relationship attribute plus the columns reachable through it.
_JOINS: dict[str, tuple[Any, dict[str, Any]]] = {
    "category": (
        Product.category,
        {
            "slug": Category.slug,
            "title": Category.title,
        },
    ),
}


def _compare(col, predicate: FieldPredicate):
    """Build the actual column comparison clause."""
    kind = predicate.comparison

    if kind is Comparison.EQUAL:
        return col == predicate.value
    if kind is Comparison.NOT_EQUAL:
        return col != predicate.value
    if kind is Comparison.GREATER:
        return col > predicate.value
    if kind is Comparison.GREATER_EQUAL:
        return col >= predicate.value
    if kind is Comparison.LESS:
        return col < predicate.value
    if kind is Comparison.LESS_EQUAL:
        return col <= predicate.value
    if kind is Comparison.WITHIN:
        low, high = predicate.values
        return and_(col >= low, col < high)

    if kind not in CASE_INSENSITIVE:
        raise SearchError(f"Unsupported comparison: {kind}")

    # Literals arrive lower-cased
    lowered = func.lower(col)
    if kind is Comparison.CONTAINS:
        return lowered.contains(predicate.value, autoescape=True)
    if kind is Comparison.STARTS_WITH:
        return lowered.startswith(predicate.value, autoescape=True)
    return lowered.endswith(predicate.value, autoescape=True)


def _build_field_clause(predicate: FieldPredicate):
    """Build a SQL clause for a FieldPredicate, joining related tables as needed."""
    relation = predicate.join
    if relation is None:
        col = _PRODUCT_COLUMNS.get(predicate.path)
        if col is None:
            raise SearchError(f"Unknown predicate path: {predicate.path}")
        return _compare(col, predicate)

    join = _JOINS.get(relation)
    if join is None:
        raise SearchError(f"Unknown predicate join: {relation}")
    attribute, columns = join
    col = columns.get(predicate.path.split(".", 1)[1])
    if col is None:
        raise SearchError(f"Unknown predicate path: {predicate.path}")
    return attribute.has(_compare(col, predicate))


def build_clause(predicate: Predicate):
    """Compile a predicate tree into a SQLAlchemy boolean clause.

    ``MatchAll`` and ``Unsupported`` compile to an always-true clause.

    Raises:
        SearchError: If a field predicate names a path the catalog lacks.
    """
    if isinstance(predicate, FieldPredicate):
        return _build_field_clause(predicate)
    if isinstance(predicate, AllOf):
        return and_(*(build_clause(part) for part in predicate.parts))
    if isinstance(predicate, AnyOf):
        return or_(*(build_clause(part) for part in predicate.parts))
    if isinstance(predicate, Negation):
        return not_(build_clause(predicate.part))
    if isinstance(predicate, Unsupported):
        logger.debug("Ignoring unsupported predicate for %s", predicate.field)
    return true()


def execute_search(session: Session, query: SearchQuery, limit: int | None = None) -> list[Product]:
    """Execute a parsed SearchQuery against the catalog database.

    Args:
        session: SQLAlchemy session connected to the catalog database.
        query: Parsed SearchQuery AST.
        limit: Optional maximum number of products to return.

    Returns:
        List of Product objects matching the query, ordered by title.
    """
    predicate = translate(query)

    db_query = session.query(Product)
    if not isinstance(predicate, MatchAll):
        db_query = db_query.filter(build_clause(predicate))

    db_query = db_query.order_by(Product.title, Product.id)
    if limit is not None:
        db_query = db_query.limit(limit)
    return list(db_query.all())
