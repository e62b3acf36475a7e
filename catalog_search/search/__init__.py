"""Catalog search query parsing, validation and translation."""

from catalog_search.search.ast_nodes import (
    QueryOperator,
    SearchQuery,
    SearchQueryValidation,
    SearchTerm,
    TermOperator,
)
from catalog_search.search.parser import parse_query, parse_segment
from catalog_search.search.query import build_clause, execute_search
from catalog_search.search.segmenter import split_segments
from catalog_search.search.translator import translate, translate_term
from catalog_search.search.validation import validate_query

__all__ = [
    "QueryOperator",
    "SearchQuery",
    "SearchQueryValidation",
    "SearchTerm",
    "TermOperator",
    "build_clause",
    "execute_search",
    "parse_query",
    "parse_segment",
    "split_segments",
    "translate",
    "translate_term",
    "validate_query",
]
