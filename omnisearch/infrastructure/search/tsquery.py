"""Convert user search text into a Postgres tsquery expression.

Supported syntax:
- words are ANDed: ``sales report`` -> ``sales & report:*``
- ``or`` between terms makes an OR: ``sales or revenue`` -> ``sales | revenue:*``
- a leading ``-`` negates a word: ``-draft`` -> ``!draft``
- ``"quoted phrases"`` match adjacent words: ``"monthly sales"`` -> ``(monthly <-> sales)``
- the last bare word matches as a prefix (search-as-you-type)

Only word characters reach the tsquery, so operator characters in user
input can never produce a syntax error.
"""

from __future__ import annotations

import re
from typing import Any

from sqlalchemy import ColumnElement, cast, func, literal
from sqlalchemy.dialects.postgresql import REGCONFIG

_TOKEN_RE = re.compile(r'"[^"]*"?|\S+')
_WORD_RE = re.compile(r"\w+")


def _phrase(words: list[str]) -> str:
    if len(words) == 1:
        return words[0]
    return "(" + " <-> ".join(words) + ")"


def to_tsquery_string(search_term: str | None) -> str | None:
    """Return a to_tsquery() expression for search_term, or None when it has no words."""
    if not search_term or not search_term.strip():
        return None

    terms: list[str] = []
    operators: list[str] = []
    pending_or = False
    last_is_bare_word = False

    for token in _TOKEN_RE.findall(search_term):
        if token.lower() == "or":
            pending_or = bool(terms)
            continue
        if token.startswith('"'):
            words = _WORD_RE.findall(token)
            term = _phrase(words) if words else None
            bare = False
        elif token.startswith("-") and len(token) > 1:
            words = _WORD_RE.findall(token[1:])
            term = "!" + _phrase(words) if words else None
            bare = False
        else:
            words = _WORD_RE.findall(token)
            term = _phrase(words) if words else None
            bare = len(words) == 1
        if term is None:
            continue
        if terms:
            operators.append(" | " if pending_or else " & ")
        terms.append(term)
        pending_or = False
        last_is_bare_word = bare

    if not terms:
        return None
    if last_is_bare_word:
        terms[-1] = f"{terms[-1]}:*"

    parts = [terms[0]]
    for op, term in zip(operators, terms[1:]):
        parts.append(op)
        parts.append(term)
    return "".join(parts)


def tsquery_clause(search_term: str | None, language: str) -> ColumnElement[Any] | None:
    """Return to_tsquery(<language>, <expression>) for search_term, or None when blank."""
    expression = to_tsquery_string(search_term)
    if expression is None:
        return None
    return func.to_tsquery(cast(literal(language), REGCONFIG), expression)
