"""Core components for archlink."""

from .configuration import ArchlinkConfig, ConfigurationManager
from .installer import PackageInstaller
from .interfaces import (
    FetcherConfig,
    NormalizedCandidate,
    PackageCandidate,
    PackageSource,
    RankedSuggestion,
    ScoredCandidate,
    ScoringWeights,
    SearchResult
)
from .exceptions import (
    ArchlinkError,
    InvalidQueryError,
    InvalidConfigurationError,
    ConfigurationError,
    FetchError,
    InstallError
)

__all__ = [
    "ArchlinkConfig",
    "ConfigurationManager",
    "PackageInstaller",
    "FetcherConfig",
    "NormalizedCandidate",
    "PackageCandidate",
    "PackageSource",
    "RankedSuggestion",
    "ScoredCandidate",
    "ScoringWeights",
    "SearchResult",
    "ArchlinkError",
    "InvalidQueryError",
    "InvalidConfigurationError",
    "ConfigurationError",
    "FetchError",
    "InstallError"
]
