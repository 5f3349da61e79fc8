"""
AUR fetcher for archlink.

This module searches the Arch User Repository through its RPC interface.
"""

import logging
from typing import List, Optional

from archlink.core.exceptions import FetchError
from archlink.core.interfaces import FetcherConfig, PackageCandidate, PackageSource
from archlink.fetcher.base import HttpRepositoryFetcher
from archlink.fetcher.official import NO_DESCRIPTION


logger = logging.getLogger(__name__)


class AURFetcher(HttpRepositoryFetcher):
    """
    Fetcher for the Arch User Repository (AUR).
    """

    source = PackageSource.AUR

    def __init__(
        self,
        base_url: str = "https://aur.archlinux.org",
        config: Optional[FetcherConfig] = None
    ):
        super().__init__(base_url=base_url, config=config)

    def get_repository_name(self) -> str:
        return "aur"

    def search_packages(self, query: str) -> List[PackageCandidate]:
        """
        Search the AUR by name and description.

        Args:
            query: Search query.

        Returns:
            List of AUR PackageCandidate objects.

        Raises:
            FetchError: If the RPC call fails or reports an error.
        """
        data = self._fetch_json("rpc/", params={"v": 5, "type": "search", "arg": query})

        if data.get("type") == "error":
            raise FetchError(f"AUR search failed: {data.get('error', 'unknown error')}")

        candidates = [
            PackageCandidate(
                name=entry["Name"],
                source=self.source,
                description=entry.get("Description") or NO_DESCRIPTION,
                version=entry.get("Version"),
            )
            for entry in data.get("results") or []
            if entry.get("Name")
        ]

        logger.debug(f"AUR returned {len(candidates)} packages for '{query}'")
        return candidates
