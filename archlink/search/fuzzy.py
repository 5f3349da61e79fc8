"""
Fuzzy matching and scoring for package suggestions.

This module provides the three relevance signals used by the ranking engine
(name match, edit-distance similarity and keyword relevance) and the scorer
that combines them into one comparable score.
"""

import logging
from typing import FrozenSet, Optional, Sequence, Tuple

from rapidfuzz.distance import Levenshtein

from archlink.core.interfaces import NormalizedCandidate, ScoredCandidate, ScoringWeights
from archlink.search.normalizer import tokenize


logger = logging.getLogger(__name__)


class FuzzyMatcher:
    """
    Relevance signals between a normalized query and a package.

    All methods expect already case-folded input and return values between
    0.0 and 1.0.
    """

    EXACT_MATCH = 1.0
    PREFIX_MATCH = 0.8
    SUBSTRING_MATCH = 0.6

    def edit_distance(self, query: str, target: str) -> int:
        """
        Levenshtein distance between two strings.

        Insertions, deletions and substitutions each cost 1.
        """
        return Levenshtein.distance(query, target)

    def match_signal(self, query: str, name: str) -> float:
        """
        Score exact, prefix and substring matches of the query on a name.

        Args:
            query: Normalized query
            name: Normalized package name

        Returns:
            1.0 for an exact match, 0.8 for a prefix, 0.6 for a substring, else 0.0
        """
        if not query or not name:
            return 0.0
        if query == name:
            return self.EXACT_MATCH
        if name.startswith(query):
            return self.PREFIX_MATCH
        if query in name:
            return self.SUBSTRING_MATCH
        return 0.0

    def similarity(self, query: str, name: str) -> float:
        """
        Normalized edit-distance similarity.

        Computed as 1 - distance / max(len(query), len(name)), so a single
        typo in a six letter name still scores above 0.8.
        """
        longest = max(len(query), len(name))
        if longest == 0:
            return 0.0
        return 1.0 - self.edit_distance(query, name) / longest

    def keyword_relevance(
        self,
        query_tokens: Sequence[str],
        candidate: NormalizedCandidate
    ) -> Tuple[float, FrozenSet[str]]:
        """
        Fraction of query tokens found inside the candidate's tokens.

        A query token counts as found when it is a substring of any name or
        description token. Candidates without a description are matched on
        their name tokens only.

        Args:
            query_tokens: Tokens of the normalized query
            candidate: Normalized candidate

        Returns:
            Tuple of (relevance between 0.0 and 1.0, matched query tokens)
        """
        unique_tokens = set(query_tokens)
        if not unique_tokens:
            return 0.0, frozenset()

        candidate_tokens = set(candidate.name_tokens) | set(candidate.description_tokens)
        matched = frozenset(
            token for token in unique_tokens
            if any(token in candidate_token for candidate_token in candidate_tokens)
        )
        return len(matched) / len(unique_tokens), matched


class CandidateScorer:
    """
    Combines the fuzzy signals into one composite score.

    The name-match signal carries the largest weight so an exact name always
    wins. Similarity outweighs keywords once names are four characters or
    longer, so a single typo there beats an unrelated description hit; for
    shorter names the two only tie.
    """

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        matcher: Optional[FuzzyMatcher] = None
    ):
        self.weights = weights or ScoringWeights()
        self.matcher = matcher or FuzzyMatcher()

    def score(
        self,
        query: str,
        candidate: NormalizedCandidate,
        query_tokens: Optional[Sequence[str]] = None
    ) -> ScoredCandidate:
        """
        Score one normalized candidate against a normalized query.

        Args:
            query: Normalized query
            candidate: Normalized candidate
            query_tokens: Pre-computed query tokens, tokenized from query if None

        Returns:
            ScoredCandidate with a score between 0.0 and 1.0
        """
        if query_tokens is None:
            query_tokens = tokenize(query)

        match = self.matcher.match_signal(query, candidate.name)
        similarity = self.matcher.similarity(query, candidate.name)
        keyword, matched_tokens = self.matcher.keyword_relevance(query_tokens, candidate)

        score = (
            self.weights.exact * match
            + self.weights.similarity * similarity
            + self.weights.keyword * keyword
        )
        logger.debug(
            f"Scored {candidate.name!r}: match={match:.2f} similarity={similarity:.2f} "
            f"keyword={keyword:.2f} total={score:.3f}"
        )
        return ScoredCandidate(
            candidate=candidate.candidate,
            normalized_name=candidate.name,
            score=score,
            matched_tokens=matched_tokens,
        )
