"""Parse GitHub-style catalog search syntax into a SearchQuery.

Supported syntax:
    - Field queries: ``status:published``, ``category:electronics``
    - Range queries: ``price:100..200``
    - Comparisons: ``price:>100``, ``created:<=20240101``
    - Quoted values: ``title:"wireless headphones"``
    - Boolean connectors: ``status:published AND category:electronics``

Anything that is not a recognised ``field:value`` shape becomes a free-text
term on the ``text`` field. Parsing never fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from typing import Any

from lark import Lark, Token, Transformer, UnexpectedInput

from catalog_search.search.ast_nodes import (
    TEXT_FIELD,
    QueryOperator,
    SearchQuery,
    SearchTerm,
    TermOperator,
)
from catalog_search.search.segmenter import is_operator, split_segments

logger = logging.getLogger(__name__)

# Comparison symbols with a dedicated operator; any other run of <, > and =
# is treated as equality.
_COMPARISON_OPERATORS: dict[str, TermOperator] = {
    ">": TermOperator.GREATER_THAN,
    "<": TermOperator.LESS_THAN,
    ">=": TermOperator.GREATER_THAN_OR_EQUAL,
    "<=": TermOperator.LESS_THAN_OR_EQUAL,
}

_OR_MARKER = " OR "


# ---------------------------------------------------------------------------
# Term shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QuotedShape:
    """``field:"value with spaces"``"""

    field: str
    value: str


@dataclass(frozen=True)
class RangeShape:
    """``field:start..end``"""

    field: str
    start: str
    end: str


@dataclass(frozen=True)
class ComparisonShape:
    """``field:>value`` and friends; ``symbol`` is the raw comparison run."""

    field: str
    symbol: str
    value: str


@dataclass(frozen=True)
class EqualityShape:
    """``field:value``"""

    field: str
    value: str


@dataclass(frozen=True)
class FreeTextShape:
    """Any segment that is not a field filter."""

    text: str


TermShape = QuotedShape | RangeShape | ComparisonShape | EqualityShape | FreeTextShape


def _load_grammar() -> str:
    """Load the Lark grammar from the package resources."""
    return resources.files("catalog_search.search").joinpath("grammar.lark").read_text()


_GRAMMAR_TEXT = _load_grammar()

_parser = Lark(
    _GRAMMAR_TEXT,
    parser="earley",
    ambiguity="resolve",
)


class _ShapeTransformer(Transformer):
    """Transform a Lark parse tree into a term shape."""

    def start(self, items: list[Any]) -> TermShape:
        return items[0]

    def quoted_term(self, items: list[Any]) -> QuotedShape:
        return QuotedShape(field=items[0], value=items[1])

    def range_term(self, items: list[Any]) -> RangeShape:
        return RangeShape(field=items[0], start=items[1], end=items[2])

    def comparison_term(self, items: list[Any]) -> ComparisonShape:
        return ComparisonShape(field=items[0], symbol=items[1], value=items[2])

    def equality_term(self, items: list[Any]) -> EqualityShape:
        return EqualityShape(field=items[0], value=items[1])

    def WORD(self, token: Token) -> str:
        return str(token)

    def CMP_OP(self, token: Token) -> str:
        return str(token)

    def QUOTED_TEXT(self, token: Token) -> str:
        return str(token)


_transformer = _ShapeTransformer()


def classify_segment(segment: str) -> TermShape:
    """Recognise the shape of a single non-operator segment."""
    try:
        tree = _parser.parse(segment)
    except UnexpectedInput:
        return FreeTextShape(text=segment)
    return _transformer.transform(tree)


def shape_to_term(shape: TermShape) -> SearchTerm:
    """Map a recognised term shape onto a SearchTerm with a lower-cased field."""
    if isinstance(shape, FreeTextShape):
        return SearchTerm(TEXT_FIELD, TermOperator.CONTAINS, shape.text)

    field = shape.field.lower()
    if isinstance(shape, QuotedShape):
        return SearchTerm(field, TermOperator.EQUALS, shape.value)
    if isinstance(shape, RangeShape):
        return SearchTerm(field, TermOperator.RANGE, f"{shape.start}..{shape.end}")
    if isinstance(shape, ComparisonShape):
        operator = _COMPARISON_OPERATORS.get(shape.symbol, TermOperator.EQUALS)
        return SearchTerm(field, operator, shape.value)
    return SearchTerm(field, TermOperator.EQUALS, shape.value)


def parse_segment(segment: str) -> SearchTerm | None:
    """Parse one non-operator segment into a SearchTerm.

    Returns:
        The parsed term, or None for an empty segment.
    """
    if not segment:
        return None
    return shape_to_term(classify_segment(segment))


def detect_operator(query_string: str) -> QueryOperator:
    """Detect the primary logical mode: OR if ``" OR "`` occurs anywhere."""
    if _OR_MARKER in query_string:
        return QueryOperator.OR
    return QueryOperator.AND


def parse_query(query_string: str | None) -> SearchQuery:
    """Parse a catalog search string into a SearchQuery.

    ``NOT`` tokens are dropped like the other connectors and have no effect
    on the result. Parentheses stay inside whichever segment they occur in.

    Args:
        query_string: The raw search query. None is treated as empty.

    Returns:
        A SearchQuery with terms in source order.
    """
    logger.debug("Parsing search query: %s", query_string)

    if query_string is None or not query_string.strip():
        return SearchQuery()

    clean_query = query_string.strip()
    operator = detect_operator(clean_query)

    terms: list[SearchTerm] = []
    for segment in split_segments(clean_query):
        if is_operator(segment):
            continue
        term = parse_segment(segment)
        if term is not None:
            terms.append(term)

    result = SearchQuery(terms=tuple(terms), operator=operator)
    logger.debug("Parsed search query: %s", result)
    return result
