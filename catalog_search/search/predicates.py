"""Backend-neutral predicate fragments produced by the translator.

A storage layer interprets these: field paths are dotted (``category.slug``
means the storage layer joins the category before comparing its slug), and
the case-insensitive comparisons expect the path to be lower-cased at
evaluation time since the literal already is.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class Comparison(enum.Enum):
    """Comparison kinds a FieldPredicate may carry."""

    EQUAL = "eq"
    NOT_EQUAL = "ne"
    GREATER = "gt"
    GREATER_EQUAL = "ge"
    LESS = "lt"
    LESS_EQUAL = "le"
    # Case-insensitive text matching
    CONTAINS = "contains"
    STARTS_WITH = "startswith"
    ENDS_WITH = "endswith"
    # Half-open interval: values == (low, high), low <= x < high
    WITHIN = "within"


CASE_INSENSITIVE: frozenset[Comparison] = frozenset(
    {Comparison.CONTAINS, Comparison.STARTS_WITH, Comparison.ENDS_WITH}
)


@dataclass(frozen=True)
class FieldPredicate:
    """Compare the value at ``path`` against ``values``."""

    path: str
    comparison: Comparison
    values: tuple[Any, ...]

    @property
    def value(self) -> Any:
        return self.values[0]

    @property
    def join(self) -> str | None:
        """The relation that must be joined to reach the field, if any."""
        if "." not in self.path:
            return None
        return self.path.split(".", 1)[0]


@dataclass(frozen=True)
class AllOf:
    """Conjunction of predicates."""

    parts: tuple[Predicate, ...]


@dataclass(frozen=True)
class AnyOf:
    """Disjunction of predicates."""

    parts: tuple[Predicate, ...]


@dataclass(frozen=True)
class Negation:
    part: Predicate


@dataclass(frozen=True)
class MatchAll:
    """Unrestricted predicate; matches every record."""


@dataclass(frozen=True)
class Unsupported:
    """A recognised field whose filtering is deliberately not implemented."""

    field: str
    reason: str


Predicate = FieldPredicate | AllOf | AnyOf | Negation | MatchAll | Unsupported


def field_predicate(path: str, comparison: Comparison, *values: Any) -> FieldPredicate:
    return FieldPredicate(path=path, comparison=comparison, values=values)
