"""
Core interfaces for archlink.

This module contains the data models shared by the ranking engine, the catalog
fetchers and the command-line interface.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


class PackageSource(Enum):
    """
    Catalog a package candidate was found in.
    """
    OFFICIAL = "official"
    AUR = "aur"


@dataclass(frozen=True)
class PackageCandidate:
    """
    One catalog entry under consideration for suggestion.
    """
    name: str
    source: PackageSource
    description: str = ""
    version: Optional[str] = None


@dataclass(frozen=True)
class NormalizedCandidate:
    """
    Case-folded, tokenized view of a candidate.
    """
    candidate: PackageCandidate
    name: str
    name_tokens: Tuple[str, ...] = ()
    description_tokens: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ScoredCandidate:
    """
    Candidate with its composite relevance score.
    """
    candidate: PackageCandidate
    normalized_name: str
    score: float
    matched_tokens: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class RankedSuggestion:
    """
    Externally visible suggestion, ordered by rank.
    """
    rank: int
    name: str
    description: str
    source: PackageSource
    version: Optional[str] = None
    score: float = 0.0


@dataclass(frozen=True)
class ScoringWeights:
    """
    Weights of the three scoring signals. They should sum to 1.0.
    """
    exact: float = 0.5
    similarity: float = 0.3
    keyword: float = 0.2


@dataclass
class FetcherConfig:
    """
    Configuration for catalog fetchers.
    """
    request_timeout: int = 10
    retry_count: int = 3
    user_agent: str = "archlink"


@dataclass
class SearchResult:
    """
    Result of a search across both catalogs.
    """
    query: str
    suggestions: List[RankedSuggestion] = field(default_factory=list)
    sources_searched: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)
