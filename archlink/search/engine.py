"""
Package search engine for querying the official repositories and the AUR.

This module provides ``rank_suggestions``, the pure ranking pipeline
(normalize, score, select), and ``PackageSearchEngine``, which fetches both
catalogs in parallel and feeds whatever arrives into that pipeline.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Dict, Iterable, List, Optional, Tuple

from archlink.core.interfaces import (
    PackageCandidate, RankedSuggestion, ScoringWeights, SearchResult
)
from archlink.fetcher.base import RepositoryFetcher
from archlink.search.fuzzy import CandidateScorer
from archlink.search.normalizer import normalize_query, normalize_candidate, tokenize
from archlink.search.ranking import SuggestionSelector, validate_max_results


logger = logging.getLogger(__name__)

OFFICIAL = "official"
AUR = "aur"


def rank_suggestions(
    query: str,
    official_candidates: Iterable[PackageCandidate],
    aur_candidates: Iterable[PackageCandidate],
    max_results: int,
    weights: Optional[ScoringWeights] = None
) -> List[RankedSuggestion]:
    """
    Rank package candidates from both catalogs against a query.

    This is a pure function: it performs no I/O, keeps no state between calls
    and never mutates its inputs. Calling it twice with the same arguments
    returns equal results.

    Args:
        query: User query, possibly misspelled or descriptive
        official_candidates: Candidates from the official repositories
        aur_candidates: Candidates from the AUR
        max_results: Maximum number of suggestions, must be positive
        weights: Scoring weights, defaults to ScoringWeights()

    Returns:
        Ranked, deduplicated suggestions; empty when there are no candidates

    Raises:
        InvalidQueryError: If the query is empty or whitespace-only
        InvalidConfigurationError: If max_results is not a positive integer
    """
    normalized_query = normalize_query(query)
    validate_max_results(max_results)

    candidates: Tuple[PackageCandidate, ...] = tuple(official_candidates) + tuple(aur_candidates)
    query_tokens = tokenize(normalized_query)
    scorer = CandidateScorer(weights)

    scored = [
        scorer.score(normalized_query, normalize_candidate(candidate), query_tokens)
        for candidate in candidates
    ]
    suggestions = SuggestionSelector().select(scored, max_results)

    logger.debug(
        f"Ranked {len(candidates)} candidates for '{normalized_query}' "
        f"into {len(suggestions)} suggestions"
    )
    return suggestions


class PackageSearchEngine:
    """
    Search engine that queries the official repositories and the AUR.

    Both catalogs are fetched concurrently. A catalog that fails is logged and
    skipped, so a search still succeeds with the other one.
    """

    def __init__(
        self,
        official_fetcher: Optional[RepositoryFetcher] = None,
        aur_fetcher: Optional[RepositoryFetcher] = None,
        weights: Optional[ScoringWeights] = None,
        fetch_timeout: Optional[float] = 30
    ):
        """
        Initialize the package search engine.

        Args:
            official_fetcher: Fetcher for official candidates. None skips the catalog.
            aur_fetcher: Fetcher for AUR candidates. None skips the catalog.
            weights: Scoring weights passed to the ranking pipeline
            fetch_timeout: Seconds to wait for all catalogs together. None waits indefinitely.
        """
        self.official_fetcher = official_fetcher
        self.aur_fetcher = aur_fetcher
        self.weights = weights
        self.fetch_timeout = fetch_timeout

    def search(self, query: str, max_results: int) -> SearchResult:
        """
        Search both catalogs and rank the combined candidates.

        Args:
            query: Search query
            max_results: Maximum number of suggestions, must be positive

        Returns:
            SearchResult with the ranked suggestions and per-catalog errors

        Raises:
            InvalidQueryError: If the query is empty or whitespace-only
            InvalidConfigurationError: If max_results is not a positive integer
        """
        normalize_query(query)
        validate_max_results(max_results)
        query = query.strip()

        fetchers = {
            role: fetcher
            for role, fetcher in ((OFFICIAL, self.official_fetcher), (AUR, self.aur_fetcher))
            if fetcher is not None
        }
        logger.info(f"Searching for '{query}' across {len(fetchers)} catalogs")

        result = SearchResult(query=query)
        candidates = self._parallel_fetch(query, fetchers, result)

        result.suggestions = rank_suggestions(
            query,
            candidates.get(OFFICIAL, []),
            candidates.get(AUR, []),
            max_results,
            self.weights,
        )

        logger.info(f"Found {len(result.suggestions)} suggestions for '{query}'")
        return result

    def _parallel_fetch(
        self,
        query: str,
        fetchers: Dict[str, RepositoryFetcher],
        result: SearchResult
    ) -> Dict[str, List[PackageCandidate]]:
        """
        Run every fetcher concurrently and collect its candidates.

        All catalogs share one ``fetch_timeout`` deadline. A catalog that
        fails or misses the deadline is recorded in ``result.errors`` and
        contributes no candidates; its worker is abandoned, not awaited.
        """
        candidates: Dict[str, List[PackageCandidate]] = {}
        if not fetchers:
            return candidates

        executor = ThreadPoolExecutor(max_workers=len(fetchers))
        try:
            futures = {
                executor.submit(fetcher.search_packages, query): (role, fetcher)
                for role, fetcher in fetchers.items()
            }
            done, _ = wait(futures, timeout=self.fetch_timeout)

            for future, (role, fetcher) in futures.items():
                name = fetcher.get_repository_name()
                result.sources_searched.append(name)

                if future not in done:
                    logger.warning(f"{name} search timed out after {self.fetch_timeout}s")
                    result.errors[name] = f"timed out after {self.fetch_timeout}s"
                    continue

                try:
                    found = future.result()
                except Exception as e:
                    logger.warning(f"{name} search failed: {e}")
                    result.errors[name] = str(e) or type(e).__name__
                    continue

                candidates[role] = found
                logger.debug(f"Catalog {name} returned {len(found)} candidates")
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return candidates

    def close(self) -> None:
        """Close the underlying fetchers."""
        for fetcher in (self.official_fetcher, self.aur_fetcher):
            if fetcher is not None:
                fetcher.close()
