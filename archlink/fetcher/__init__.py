"""
Catalog fetcher module for archlink.

This module provides functionality to fetch package candidates from the
official repositories and the AUR.
"""

from archlink.fetcher.base import HttpRepositoryFetcher, RepositoryFetcher
from archlink.fetcher.official import OfficialRepositoryFetcher
from archlink.fetcher.pacman import PacmanSyncDatabaseFetcher
from archlink.fetcher.aur import AURFetcher

__all__ = [
    "RepositoryFetcher",
    "HttpRepositoryFetcher",
    "OfficialRepositoryFetcher",
    "PacmanSyncDatabaseFetcher",
    "AURFetcher",
]
