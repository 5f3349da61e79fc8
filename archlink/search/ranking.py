"""
Suggestion ranking and deduplication.

This module turns scored candidates from both catalogs into the final ordered,
deduplicated and bounded list of suggestions.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from archlink.core.exceptions import InvalidConfigurationError
from archlink.core.interfaces import PackageSource, RankedSuggestion, ScoredCandidate


logger = logging.getLogger(__name__)


# Lower value sorts first
SOURCE_PRIORITY = {
    PackageSource.OFFICIAL: 0,
    PackageSource.AUR: 1,
}


class SuggestionSelector:
    """
    Deduplicates, orders and truncates scored candidates.

    Official repositories are authoritative: when the same package name shows
    up in both catalogs only the official entry survives.
    """

    def deduplicate(self, scored: Iterable[ScoredCandidate]) -> List[ScoredCandidate]:
        """
        Keep one candidate per normalized package name.

        An official candidate replaces an AUR one. Between candidates from the
        same source the higher score wins, and the first one seen on a tie.

        Args:
            scored: Scored candidates from both catalogs

        Returns:
            Deduplicated candidates in order of first appearance
        """
        best: Dict[str, ScoredCandidate] = {}

        for item in scored:
            current = best.get(item.normalized_name)
            if current is None or self._replaces(item, current):
                if current is not None:
                    logger.debug(
                        f"Dropping duplicate {current.candidate.name} "
                        f"({current.candidate.source.value}) in favour of "
                        f"{item.candidate.source.value}"
                    )
                best[item.normalized_name] = item

        return list(best.values())

    def _replaces(self, challenger: ScoredCandidate, current: ScoredCandidate) -> bool:
        challenger_priority = SOURCE_PRIORITY[challenger.candidate.source]
        current_priority = SOURCE_PRIORITY[current.candidate.source]
        if challenger_priority != current_priority:
            return challenger_priority < current_priority
        return challenger.score > current.score

    def sort_key(self, item: ScoredCandidate) -> Tuple[float, int, int, str]:
        return (
            -item.score,
            SOURCE_PRIORITY[item.candidate.source],
            len(item.normalized_name),
            item.normalized_name,
        )

    def sort(self, scored: Iterable[ScoredCandidate]) -> List[ScoredCandidate]:
        """Order by score descending, then official first, shorter name, name."""
        return sorted(scored, key=self.sort_key)

    def select(
        self,
        scored: Iterable[ScoredCandidate],
        max_results: int
    ) -> List[RankedSuggestion]:
        """
        Produce the final ranked suggestions.

        Args:
            scored: Scored candidates from both catalogs
            max_results: Maximum number of suggestions, must be positive

        Returns:
            Ranked suggestions with 1-based ranks, empty if there are no candidates

        Raises:
            InvalidConfigurationError: If max_results is not a positive integer
        """
        validate_max_results(max_results)

        ordered = self.sort(self.deduplicate(scored))
        return [
            RankedSuggestion(
                rank=position,
                name=item.candidate.name,
                description=item.candidate.description,
                source=item.candidate.source,
                version=item.candidate.version,
                score=item.score,
            )
            for position, item in enumerate(ordered[:max_results], start=1)
        ]


def validate_max_results(max_results: int) -> None:
    """
    Reject result limits the ranking engine cannot honour.

    Raises:
        InvalidConfigurationError: If max_results is not an integer greater than 0
    """
    if isinstance(max_results, bool) or not isinstance(max_results, int):
        raise InvalidConfigurationError(
            f"max_results must be an integer, got {type(max_results).__name__}"
        )
    if max_results <= 0:
        raise InvalidConfigurationError(f"max_results must be greater than 0, got {max_results}")
