"""Split raw query text into term segments and boolean operator tokens."""

from __future__ import annotations

import re

OPERATOR_TOKENS: frozenset[str] = frozenset({"AND", "OR", "NOT"})

# ASCII whitespace only; other Unicode spaces stay inside tokens.
_WHITESPACE = re.compile(r"[ \t\n\x0b\f\r]+")


def is_operator(token: str) -> bool:
    """Return whether a token is a boolean connector (case-sensitive)."""
    return token in OPERATOR_TOKENS


def split_segments(query: str) -> list[str]:
    """Split a query into segments, keeping AND/OR/NOT as their own segments.

    Consecutive non-operator tokens are grouped into one segment and joined
    with single spaces, so ``a:b c:d OR e`` yields ``["a:b c:d", "OR", "e"]``.
    No returned segment is ever empty.
    """
    segments: list[str] = []
    current: list[str] = []

    for token in _WHITESPACE.split(query):
        if not token:
            continue
        if is_operator(token):
            if current:
                segments.append(" ".join(current))
                current = []
            segments.append(token)
        else:
            current.append(token)

    if current:
        segments.append(" ".join(current))

    return segments
