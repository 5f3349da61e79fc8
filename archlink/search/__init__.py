"""
Package search and suggestion ranking.

This module ranks package candidates from the official repositories and the
AUR using name matching, edit-distance similarity and keyword relevance.
"""

from .engine import PackageSearchEngine, rank_suggestions
from .fuzzy import CandidateScorer, FuzzyMatcher
from .normalizer import normalize, tokenize
from .ranking import SuggestionSelector

__all__ = [
    'rank_suggestions',
    'PackageSearchEngine',
    'CandidateScorer',
    'FuzzyMatcher',
    'SuggestionSelector',
    'normalize',
    'tokenize'
]
