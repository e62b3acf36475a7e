"""Pre-flight syntax checks for raw search query strings."""

from __future__ import annotations

from catalog_search.search.ast_nodes import SearchQueryValidation

NULL_QUERY = "Query cannot be null"
UNCLOSED_QUOTE = "Unclosed quote in query"
UNMATCHED_PARENTHESES = "Unmatched parentheses in query"
QUERY_TOO_LONG = "Search query too long"


def validate_query(
    query_string: str | None, max_length: int | None = None
) -> SearchQueryValidation:
    """Check a raw query for syntax errors without parsing it.

    Every rule is evaluated and all errors are reported together. Blank
    queries are valid.

    Args:
        query_string: The raw query, possibly None.
        max_length: Optional upper bound on the query length.

    Returns:
        A SearchQueryValidation listing the errors found, in rule order.
    """
    if query_string is None:
        return SearchQueryValidation.error(NULL_QUERY)

    if not query_string.strip():
        return SearchQueryValidation.success()

    errors: list[str] = []

    if query_string.count('"') % 2 != 0:
        errors.append(UNCLOSED_QUOTE)

    if query_string.count("(") != query_string.count(")"):
        errors.append(UNMATCHED_PARENTHESES)

    if max_length is not None and len(query_string) > max_length:
        errors.append(QUERY_TOO_LONG)

    if errors:
        return SearchQueryValidation.failure(errors)
    return SearchQueryValidation.success()
