"""Unit tests for search query execution."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from catalog_search.catalog.models import Product
from catalog_search.exceptions import SearchError
from catalog_search.search.ast_nodes import QueryOperator, SearchQuery, SearchTerm, TermOperator
from catalog_search.search.parser import parse_query
from catalog_search.search.predicates import (
    Comparison,
    FieldPredicate,
    MatchAll,
    Unsupported,
    field_predicate,
)
from catalog_search.search.query import build_clause, execute_search

ALL_SLUGS = {"wireless-headphones", "smart-watch", "vintage-radio", "usb-cable"}


def _slugs(session: Session, query: SearchQuery) -> set[str]:
    return {p.slug for p in execute_search(session, query)}


def _search(session: Session, query_string: str) -> set[str]:
    return _slugs(session, parse_query(query_string))


def _single(field: str, operator: TermOperator, value: str) -> SearchQuery:
    return SearchQuery(terms=(SearchTerm(field, operator, value),))


# ---------------------------------------------------------------------------
# Unrestricted queries
# ---------------------------------------------------------------------------


class TestUnrestricted:
    def test_empty_query_returns_everything(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "") == ALL_SLUGS

    def test_unknown_field_returns_everything(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "foo:bar") == ALL_SLUGS

    def test_price_is_not_applied(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "price:100..200") == ALL_SLUGS

    def test_results_ordered_by_title(self, catalog_session: Session) -> None:
        titles = [p.title for p in execute_search(catalog_session, SearchQuery())]
        assert titles == sorted(titles)

    def test_limit(self, catalog_session: Session) -> None:
        assert len(execute_search(catalog_session, SearchQuery(), limit=2)) == 2


# ---------------------------------------------------------------------------
# Field filters
# ---------------------------------------------------------------------------


class TestFieldFilters:
    def test_status_published(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "status:published") == {
            "wireless-headphones",
            "usb-cable",
        }

    def test_status_not_equals(self, catalog_session: Session) -> None:
        q = _single("status", TermOperator.NOT_EQUALS, "published")
        assert _slugs(catalog_session, q) == {"smart-watch", "vintage-radio"}

    def test_quoted_title_exact(self, catalog_session: Session) -> None:
        assert _search(catalog_session, 'title:"Smart Watch"') == {"smart-watch"}

    def test_title_exact_is_case_sensitive(self, catalog_session: Session) -> None:
        assert _search(catalog_session, 'title:"smart watch"') == set()

    def test_title_starts_with(self, catalog_session: Session) -> None:
        q = _single("title", TermOperator.STARTS_WITH, "VINTAGE")
        assert _slugs(catalog_session, q) == {"vintage-radio"}

    def test_description_ends_with(self, catalog_session: Session) -> None:
        q = _single("description", TermOperator.ENDS_WITH, "Watch")
        assert _slugs(catalog_session, q) == {"smart-watch"}

    def test_category_slug(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "category:electronics") == {
            "smart-watch",
            "vintage-radio",
        }

    def test_category_title_contains(self, catalog_session: Session) -> None:
        q = _single("category", TermOperator.CONTAINS, "GEAR")
        assert _slugs(catalog_session, q) == {"wireless-headphones"}


class TestFullText:
    def test_matches_title(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "wireless") == {"wireless-headphones"}

    def test_matches_description(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "FITNESS") == {"smart-watch"}

    def test_matches_slug(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "usb-cable") == {"usb-cable"}

    def test_wildcards_are_literal(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "100%") == {"usb-cable"}
        assert _search(catalog_session, "%") == {"usb-cable"}
        assert _search(catalog_session, "_") == set()


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


class TestDates:
    def test_equals_whole_day(self, catalog_session: Session) -> None:
        q = _single("created", TermOperator.EQUALS, "2024-01-15")
        assert _slugs(catalog_session, q) == {"wireless-headphones"}

    def test_range_from_parser(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "created:20240101..20240131") == {
            "wireless-headphones",
            "usb-cable",
        }

    def test_range_end_day_inclusive(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "created:20231231..20240115") == {
            "vintage-radio",
            "wireless-headphones",
        }

    def test_less_than(self, catalog_session: Session) -> None:
        q = _single("created", TermOperator.LESS_THAN, "2024-01-15")
        assert _slugs(catalog_session, q) == {"vintage-radio"}

    def test_less_than_or_equal_includes_day(self, catalog_session: Session) -> None:
        q = _single("created", TermOperator.LESS_THAN_OR_EQUAL, "2024-01-15")
        assert _slugs(catalog_session, q) == {"vintage-radio", "wireless-headphones"}

    def test_greater_than_or_equal_includes_day(self, catalog_session: Session) -> None:
        q = _single("created", TermOperator.GREATER_THAN_OR_EQUAL, "2024-01-15")
        assert _slugs(catalog_session, q) == {"wireless-headphones", "usb-cable", "smart-watch"}

    def test_greater_than_skips_following_midnight(self, catalog_session: Session) -> None:
        # The bound is the start of the next day and is exclusive.
        q = _single("created", TermOperator.GREATER_THAN, "2024-01-15")
        assert _slugs(catalog_session, q) == {"smart-watch"}

    def test_updated_skips_null(self, catalog_session: Session) -> None:
        q = _single("updated", TermOperator.GREATER_THAN_OR_EQUAL, "2024-01-01")
        assert _slugs(catalog_session, q) == {"wireless-headphones"}


# ---------------------------------------------------------------------------
# Combination
# ---------------------------------------------------------------------------


class TestCombination:
    def test_and(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "category:electronics AND status:draft") == {
            "smart-watch"
        }

    def test_or(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "category:audio OR status:archived") == {
            "wireless-headphones",
            "vintage-radio",
        }

    def test_not_negates_whole_query(self, catalog_session: Session) -> None:
        q = SearchQuery(
            terms=(SearchTerm("status", TermOperator.EQUALS, "published"),),
            operator=QueryOperator.NOT,
        )
        assert _slugs(catalog_session, q) == {"smart-watch", "vintage-radio"}

    def test_not_token_is_inert(self, catalog_session: Session) -> None:
        assert _search(catalog_session, "status:published NOT category:audio") == {
            "wireless-headphones"
        }


# ---------------------------------------------------------------------------
# Clause compilation
# ---------------------------------------------------------------------------


class TestBuildClause:
    def test_match_all_and_unsupported_filter_nothing(self, catalog_session: Session) -> None:
        for predicate in (MatchAll(), Unsupported(field="tags", reason="n/a")):
            rows = catalog_session.query(Product).filter(build_clause(predicate)).all()
            assert len(rows) == 4

    def test_less_equal(self, catalog_session: Session) -> None:
        clause = build_clause(field_predicate("slug", Comparison.LESS_EQUAL, "smart-watch"))
        slugs = {p.slug for p in catalog_session.query(Product).filter(clause)}
        assert slugs == {"smart-watch"}

    def test_unknown_path_raises(self) -> None:
        with pytest.raises(SearchError):
            build_clause(FieldPredicate("price", Comparison.EQUAL, (1,)))

    def test_unknown_join_raises(self) -> None:
        with pytest.raises(SearchError):
            build_clause(FieldPredicate("tags.name", Comparison.EQUAL, ("sale",)))
