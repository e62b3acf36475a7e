"""Translate a SearchQuery AST into backend-neutral predicates.

Supported fields:
    - status: product status (draft, published, archived)
    - title, description, slug: text matching
    - price: recognised, not implemented
    - created, updated: dates with day granularity
    - category: category slug or title (needs a join)
    - tags: recognised, not implemented
    - text: free text across title, description and slug

Translation never raises for malformed data. Unknown fields, unsupported
operators and unparseable literals are logged and contribute nothing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal, InvalidOperation

from catalog_search.catalog.models import ProductStatus
from catalog_search.search.ast_nodes import QueryOperator, SearchQuery, SearchTerm, TermOperator
from catalog_search.search.predicates import (
    AllOf,
    AnyOf,
    Comparison,
    MatchAll,
    Negation,
    Predicate,
    Unsupported,
    field_predicate,
)

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)

# YYYYMMDD or YYYY-MM-DD; week and ordinal dates are rejected.
_CALENDAR_DATE = re.compile(r"[0-9]{8}|[0-9]{4}-[0-9]{2}-[0-9]{2}")

_TEXT_OPERATORS: dict[TermOperator, Comparison] = {
    TermOperator.EQUALS: Comparison.EQUAL,
    TermOperator.NOT_EQUALS: Comparison.NOT_EQUAL,
    TermOperator.CONTAINS: Comparison.CONTAINS,
    TermOperator.STARTS_WITH: Comparison.STARTS_WITH,
    TermOperator.ENDS_WITH: Comparison.ENDS_WITH,
}

# Columns searched by the free-text field.
FULL_TEXT_PATHS: tuple[str, ...] = ("title", "description", "slug")

# Date fields and the attribute they filter on.
DATE_PATHS: dict[str, str] = {
    "created": "created_at",
    "updated": "updated_at",
}


def _translate_status(term: SearchTerm) -> Predicate | None:
    try:
        status = ProductStatus[term.value.upper()]
    except KeyError:
        logger.warning("Invalid status value: %s", term.value)
        return None

    if term.operator is TermOperator.EQUALS:
        return field_predicate("status", Comparison.EQUAL, status)
    if term.operator is TermOperator.NOT_EQUALS:
        return field_predicate("status", Comparison.NOT_EQUAL, status)
    logger.warning("Unsupported operator %s for status field", term.operator.name)
    return None


def _translate_text(term: SearchTerm, path: str) -> Predicate | None:
    comparison = _TEXT_OPERATORS.get(term.operator)
    if comparison is None:
        logger.warning("Unsupported operator %s for text field %s", term.operator.name, path)
        return None
    if comparison in (Comparison.EQUAL, Comparison.NOT_EQUAL):
        return field_predicate(path, comparison, term.value)
    return field_predicate(path, comparison, term.value.lower())


def _translate_price(term: SearchTerm) -> Predicate | None:
    # Prices live on variant price sets; filtering on them needs a join
    # the catalog model does not expose yet.
    literals = [term.range_start, term.range_end] if term.is_range else [term.value]
    try:
        for literal in literals:
            Decimal(literal)
    except InvalidOperation:
        logger.warning("Invalid price value: %s", term.value)
        return None

    logger.warning("Price queries not implemented yet: %s", term)
    return Unsupported(field="price", reason="price filtering requires variant price sets")


def _start_of_day(value: str) -> datetime:
    if not _CALENDAR_DATE.fullmatch(value):
        raise ValueError(f"not a calendar date: {value!r}")
    return datetime.combine(date.fromisoformat(value), time.min, tzinfo=timezone.utc)


def _translate_date(term: SearchTerm, path: str) -> Predicate | None:
    try:
        if term.is_range:
            start = _start_of_day(term.range_start)
            end = _start_of_day(term.range_end) + ONE_DAY
            return field_predicate(path, Comparison.WITHIN, start, end)
        day = _start_of_day(term.value)
        next_day = day + ONE_DAY
    except (ValueError, OverflowError):
        logger.warning("Invalid date value: %s", term.value)
        return None

    operator = term.operator
    if operator is TermOperator.EQUALS:
        return field_predicate(path, Comparison.WITHIN, day, next_day)
    if operator is TermOperator.GREATER_THAN:
        return field_predicate(path, Comparison.GREATER, next_day)
    if operator is TermOperator.LESS_THAN:
        return field_predicate(path, Comparison.LESS, day)
    if operator is TermOperator.GREATER_THAN_OR_EQUAL:
        return field_predicate(path, Comparison.GREATER_EQUAL, day)
    if operator is TermOperator.LESS_THAN_OR_EQUAL:
        return field_predicate(path, Comparison.LESS, next_day)
    logger.warning("Unsupported operator %s for date field %s", operator.name, path)
    return None


def _translate_category(term: SearchTerm) -> Predicate | None:
    if term.operator is TermOperator.EQUALS:
        return field_predicate("category.slug", Comparison.EQUAL, term.value)
    if term.operator is TermOperator.CONTAINS:
        return field_predicate("category.title", Comparison.CONTAINS, term.value.lower())
    logger.warning("Unsupported operator %s for category field", term.operator.name)
    return None


def _translate_tags(term: SearchTerm) -> Predicate | None:
    logger.warning("Tags search not implemented yet: %s", term)
    return Unsupported(field="tags", reason="tag membership matching is not implemented")


def _translate_full_text(term: SearchTerm) -> Predicate | None:
    needle = term.value.lower()
    return AnyOf(
        tuple(field_predicate(path, Comparison.CONTAINS, needle) for path in FULL_TEXT_PATHS)
    )


_FIELD_HANDLERS: dict[str, Callable[[SearchTerm], Predicate | None]] = {
    "status": _translate_status,
    "title": lambda term: _translate_text(term, "title"),
    "description": lambda term: _translate_text(term, "description"),
    "slug": lambda term: _translate_text(term, "slug"),
    "price": _translate_price,
    "created": lambda term: _translate_date(term, DATE_PATHS["created"]),
    "updated": lambda term: _translate_date(term, DATE_PATHS["updated"]),
    "category": _translate_category,
    "tags": _translate_tags,
    "text": _translate_full_text,
}

KNOWN_FIELDS: frozenset[str] = frozenset(_FIELD_HANDLERS)


def translate_term(term: SearchTerm) -> Predicate | None:
    """Translate one search term.

    Returns:
        A predicate fragment, an ``Unsupported`` marker for recognised but
        unimplemented fields, or None when the term contributes nothing.
    """
    logger.debug("Translating search term: %s", term)
    handler = _FIELD_HANDLERS.get(term.field.lower())
    if handler is None:
        logger.warning("Unknown search field: %s", term.field)
        return None
    return handler(term)


def combine(predicates: list[Predicate], operator: QueryOperator) -> Predicate:
    """Join term predicates according to the query's logical mode."""
    if not predicates:
        return MatchAll()
    if operator is QueryOperator.NOT:
        return Negation(AllOf(tuple(predicates)))
    if len(predicates) == 1:
        return predicates[0]
    if operator is QueryOperator.OR:
        return AnyOf(tuple(predicates))
    return AllOf(tuple(predicates))


def translate(query: SearchQuery) -> Predicate:
    """Translate a SearchQuery into a single combined predicate.

    Args:
        query: Parsed search query.

    Returns:
        ``MatchAll`` when nothing restricts the result, otherwise the
        conjunction, disjunction or negated conjunction of all term
        predicates.
    """
    logger.debug("Translating search query: %s", query)

    predicates: list[Predicate] = []
    for term in query.terms:
        predicate = translate_term(term)
        if predicate is None or isinstance(predicate, Unsupported):
            continue
        predicates.append(predicate)

    return combine(predicates, query.operator)
