"""
Official repository fetcher for archlink.

This module searches the Arch Linux official repositories through the
archlinux.org package search JSON API.
"""

import logging
from typing import Dict, List, Optional

from archlink.core.interfaces import FetcherConfig, PackageCandidate, PackageSource
from archlink.fetcher.base import HttpRepositoryFetcher


logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available"


class OfficialRepositoryFetcher(HttpRepositoryFetcher):
    """
    Fetcher for the Arch Linux official repositories (core, extra, multilib).
    """

    source = PackageSource.OFFICIAL

    def __init__(
        self,
        base_url: str = "https://archlinux.org",
        config: Optional[FetcherConfig] = None
    ):
        super().__init__(base_url=base_url, config=config)

    def get_repository_name(self) -> str:
        return "official"

    def search_packages(self, query: str) -> List[PackageCandidate]:
        """
        Search the official repositories.

        The same package name can be listed once per repository and
        architecture; only the first entry is kept.

        Args:
            query: Search query.

        Returns:
            List of official PackageCandidate objects.

        Raises:
            FetchError: If the search API cannot be reached or parsed.
        """
        data = self._fetch_json("packages/search/json/", params={"q": query})

        candidates: Dict[str, PackageCandidate] = {}
        for entry in data.get("results") or []:
            name = entry.get("pkgname")
            if not name or name in candidates:
                continue

            candidates[name] = PackageCandidate(
                name=name,
                source=self.source,
                description=entry.get("pkgdesc") or NO_DESCRIPTION,
                version=self._format_version(entry),
            )

        logger.debug(f"Official repositories returned {len(candidates)} packages for '{query}'")
        return list(candidates.values())

    def _format_version(self, entry: Dict[str, str]) -> Optional[str]:
        pkgver = entry.get("pkgver")
        if not pkgver:
            return None
        pkgrel = entry.get("pkgrel")
        version = f"{pkgver}-{pkgrel}" if pkgrel else pkgver
        epoch = entry.get("epoch")
        if epoch:
            version = f"{epoch}:{version}"
        return version
