"""
ArchLink - find and install Arch Linux packages by approximate name.

This package ranks candidates from the official repositories and the AUR
against misspelled, abbreviated or descriptive queries.
"""

__version__ = "0.1.1"

from .core.exceptions import (
    ArchlinkError,
    InvalidQueryError,
    InvalidConfigurationError,
)
from .core.interfaces import PackageCandidate, PackageSource, RankedSuggestion
from .search.engine import PackageSearchEngine, rank_suggestions

__all__ = [
    "rank_suggestions",
    "PackageSearchEngine",
    "PackageCandidate",
    "PackageSource",
    "RankedSuggestion",
    "ArchlinkError",
    "InvalidQueryError",
    "InvalidConfigurationError",
]
