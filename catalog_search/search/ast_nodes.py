"""AST data classes for parsed catalog search queries."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from catalog_search.exceptions import NotARangeError

RANGE_SEPARATOR = ".."
TEXT_FIELD = "text"


class TermOperator(enum.Enum):
    """Comparison applied between a term's field and its value."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    RANGE = "range"
    IN = "in"
    NOT_IN = "not_in"


class QueryOperator(enum.Enum):
    """Primary logical mode joining all terms of a query."""

    AND = "AND"
    OR = "OR"
    NOT = "NOT"


# Prefix/suffix used when rendering a term back into query syntax.
_RENDER: dict[TermOperator, tuple[str, str]] = {
    TermOperator.GREATER_THAN: (">", ""),
    TermOperator.LESS_THAN: ("<", ""),
    TermOperator.GREATER_THAN_OR_EQUAL: (">=", ""),
    TermOperator.LESS_THAN_OR_EQUAL: ("<=", ""),
    TermOperator.NOT_EQUALS: ("!", ""),
    TermOperator.CONTAINS: ("*", "*"),
}


def _split_range(value: str) -> list[str]:
    """Split a range literal on ``..``, dropping trailing empty parts."""
    parts = value.split(RANGE_SEPARATOR)
    while parts and parts[-1] == "":
        parts.pop()
    return parts


@dataclass(frozen=True)
class SearchTerm:
    """A single ``field:value`` filter.

    Examples:
        - ``status:published`` -> ``SearchTerm("status", EQUALS, "published")``
        - ``price:100..200`` -> ``SearchTerm("price", RANGE, "100..200")``
        - ``price:>100`` -> ``SearchTerm("price", GREATER_THAN, "100")``
        - ``wireless`` -> ``SearchTerm("text", CONTAINS, "wireless")``
    """

    field: str
    operator: TermOperator
    value: str

    @property
    def is_range(self) -> bool:
        return self.operator is TermOperator.RANGE and RANGE_SEPARATOR in self.value

    @property
    def range_start(self) -> str:
        """Lower bound of a range term.

        Raises:
            NotARangeError: If the term is not a range.
        """
        if not self.is_range:
            raise NotARangeError(self)
        parts = _split_range(self.value)
        return parts[0] if parts else ""

    @property
    def range_end(self) -> str:
        """Upper bound of a range term; equals the start when no end is given.

        Raises:
            NotARangeError: If the term is not a range.
        """
        if not self.is_range:
            raise NotARangeError(self)
        parts = _split_range(self.value)
        if len(parts) > 1:
            return parts[1]
        return parts[0] if parts else ""

    @property
    def is_text_search(self) -> bool:
        return self.field == TEXT_FIELD or self.operator is TermOperator.CONTAINS

    def is_for_field(self, field_name: str) -> bool:
        return self.field == field_name

    def __str__(self) -> str:
        prefix, suffix = _RENDER.get(self.operator, ("", ""))
        return f"{self.field}:{prefix}{self.value}{suffix}"


@dataclass(frozen=True)
class SearchQuery:
    """Top-level search query: ordered terms joined by one logical operator.

    An empty term sequence matches every record.
    """

    terms: tuple[SearchTerm, ...] = ()
    operator: QueryOperator = QueryOperator.AND

    @property
    def is_empty(self) -> bool:
        return not self.terms

    def __len__(self) -> int:
        return len(self.terms)

    def has_field(self, field_name: str) -> bool:
        return any(term.field == field_name for term in self.terms)

    def terms_for_field(self, field_name: str) -> list[SearchTerm]:
        return [term for term in self.terms if term.field == field_name]

    def __str__(self) -> str:
        if self.is_empty:
            return "SearchQuery[empty]"
        return f"SearchQuery[terms={len(self.terms)}, operator={self.operator.value}]"


@dataclass(frozen=True)
class SearchQueryValidation:
    """Result of a syntax check over a raw query string."""

    valid: bool
    errors: tuple[str, ...] = ()

    @classmethod
    def success(cls) -> SearchQueryValidation:
        return cls(valid=True)

    @classmethod
    def error(cls, message: str) -> SearchQueryValidation:
        return cls(valid=False, errors=(message,))

    @classmethod
    def failure(cls, messages: list[str]) -> SearchQueryValidation:
        return cls(valid=False, errors=tuple(messages))

    @property
    def first_error(self) -> str | None:
        return self.errors[0] if self.errors else None

    @property
    def all_errors(self) -> str:
        return "\n".join(self.errors)
