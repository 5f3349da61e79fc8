"""
Query and candidate normalization for the ranking engine.

Turns raw catalog entries into case-folded keyword units that the scorer can
compare against the user's query.
"""

import re
from typing import Iterable, List, Optional, Tuple

from archlink.core.exceptions import InvalidQueryError
from archlink.core.interfaces import NormalizedCandidate, PackageCandidate


# Anything that is not a letter or a digit separates tokens
_TOKEN_SEPARATOR = re.compile(r'[\W_]+')


def normalize_text(text: Optional[str]) -> str:
    """Case-fold text independently of the current locale."""
    if not text:
        return ""
    return text.casefold()


def tokenize(text: Optional[str]) -> Tuple[str, ...]:
    """
    Split text into case-folded tokens on whitespace and punctuation.

    Args:
        text: Text to tokenize

    Returns:
        Tuple of non-empty tokens, in order of appearance
    """
    return tuple(token for token in _TOKEN_SEPARATOR.split(normalize_text(text)) if token)


def normalize_query(query: Optional[str]) -> str:
    """
    Normalize a user query.

    Args:
        query: Raw query string

    Returns:
        Stripped, case-folded query

    Raises:
        InvalidQueryError: If the query is empty or whitespace-only
    """
    if query is None or not query.strip():
        raise InvalidQueryError("Query cannot be empty")
    return normalize_text(query.strip())


def normalize_candidate(candidate: PackageCandidate) -> NormalizedCandidate:
    return NormalizedCandidate(
        candidate=candidate,
        name=normalize_text(candidate.name.strip()),
        name_tokens=tokenize(candidate.name),
        description_tokens=tokenize(candidate.description),
    )


def normalize(
    query: Optional[str],
    candidates: Iterable[PackageCandidate]
) -> Tuple[str, List[NormalizedCandidate]]:
    """
    Normalize a query together with its candidate set.

    The query is validated before any candidate is touched.

    Args:
        query: Raw query string
        candidates: Candidates to normalize

    Returns:
        Tuple of (normalized query, normalized candidates in input order)

    Raises:
        InvalidQueryError: If the query is empty or whitespace-only
    """
    normalized_query = normalize_query(query)
    return normalized_query, [normalize_candidate(candidate) for candidate in candidates]
