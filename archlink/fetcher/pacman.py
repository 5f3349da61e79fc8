"""
Local pacman sync database reader for archlink.

This module reads the official repository databases that pacman keeps on disk
(``/var/lib/pacman/sync/*.db``) so official candidates can be found without
network access.
"""

import logging
import os
import tarfile
from typing import Dict, List, Optional

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from archlink.core.exceptions import FetchError
from archlink.core.interfaces import FetcherConfig, PackageCandidate, PackageSource
from archlink.fetcher.base import RepositoryFetcher
from archlink.fetcher.official import NO_DESCRIPTION
from archlink.search.normalizer import normalize_text


logger = logging.getLogger(__name__)

DEFAULT_SYNC_DB_PATH = "/var/lib/pacman/sync"

# Minimum normalized Levenshtein similarity for a name-only match
FUZZY_NAME_CUTOFF = 0.7


class PacmanSyncDatabaseFetcher(RepositoryFetcher):
    """
    Fetcher for the official repositories using pacman's local sync databases.

    Databases are parsed once per fetcher and kept in memory for the lifetime
    of the instance.
    """

    source = PackageSource.OFFICIAL

    def __init__(
        self,
        sync_db_path: str = DEFAULT_SYNC_DB_PATH,
        config: Optional[FetcherConfig] = None
    ):
        """
        Initialize the sync database fetcher.

        Args:
            sync_db_path: Directory holding the ``<repo>.db`` archives.
            config: Configuration for the fetcher.
        """
        super().__init__(config)
        self.sync_db_path = os.path.expanduser(sync_db_path)
        self._packages: Optional[Dict[str, Dict[str, str]]] = None

    def get_repository_name(self) -> str:
        return "pacman"

    def search_packages(self, query: str) -> List[PackageCandidate]:
        """
        Search the local sync databases.

        A package matches when its name or description contains any word of
        the query, or when its name is within a few edits of the query or of
        one of its words, so misspelled names still reach the ranker. A
        missing sync directory yields no candidates.

        Args:
            query: Search query.

        Returns:
            List of official PackageCandidate objects.

        Raises:
            FetchError: If a database archive cannot be read.
        """
        words = [normalize_text(word) for word in query.split()]
        if not words:
            return []

        packages = self._load_packages()
        matched = set()

        for name, pkg_data in packages.items():
            haystack = f"{normalize_text(name)} {normalize_text(pkg_data.get('DESC'))}"
            if any(word in haystack for word in words):
                matched.add(name)

        names = list(packages)
        for term in set(words + [normalize_text(query)]):
            for name, _, _ in process.extract(
                term,
                names,
                scorer=Levenshtein.normalized_similarity,
                processor=normalize_text,
                score_cutoff=FUZZY_NAME_CUTOFF,
                limit=None,
            ):
                matched.add(name)

        results = [
            PackageCandidate(
                name=name,
                source=self.source,
                description=pkg_data.get("DESC") or NO_DESCRIPTION,
                version=pkg_data.get("VERSION"),
            )
            for name, pkg_data in packages.items()
            if name in matched
        ]

        logger.debug(f"Sync databases returned {len(results)} packages for '{query}'")
        return results

    def _load_packages(self) -> Dict[str, Dict[str, str]]:
        if self._packages is not None:
            return self._packages

        packages: Dict[str, Dict[str, str]] = {}
        if not os.path.isdir(self.sync_db_path):
            logger.warning(f"Pacman sync directory not found: {self.sync_db_path}")
            self._packages = packages
            return packages

        for file_name in sorted(os.listdir(self.sync_db_path)):
            if not file_name.endswith(".db"):
                continue
            db_path = os.path.join(self.sync_db_path, file_name)
            for name, pkg_data in self._parse_database(db_path).items():
                # Repositories are read in name order; first one wins
                packages.setdefault(name, pkg_data)

        logger.info(f"Loaded {len(packages)} packages from {self.sync_db_path}")
        self._packages = packages
        return packages

    def _parse_database(self, db_path: str) -> Dict[str, Dict[str, str]]:
        """
        Parse one pacman repository database.

        Args:
            db_path: Path to the database archive.

        Returns:
            Dictionary mapping package names to their desc fields.

        Raises:
            FetchError: If the archive cannot be opened.
        """
        result = {}

        try:
            with tarfile.open(db_path, 'r:*') as tar:
                for member in tar.getmembers():
                    if not member.isfile() or not member.name.endswith('/desc'):
                        continue

                    handle = tar.extractfile(member)
                    if handle is None:
                        continue
                    try:
                        content = handle.read().decode('utf-8')
                    except UnicodeDecodeError as e:
                        logger.warning(f"Skipping unreadable entry {member.name}: {e}")
                        continue

                    pkg_data = parse_desc(content)
                    if pkg_data.get("NAME"):
                        result[pkg_data["NAME"]] = pkg_data
        except (tarfile.TarError, OSError) as e:
            raise FetchError(f"Failed to read pacman database {db_path}: {e}") from e

        return result


def parse_desc(content: str) -> Dict[str, str]:
    """
    Parse the ``desc`` file of a sync database entry.

    Fields look like ``%NAME%`` followed by one or more value lines;
    multi-line values are joined with spaces.
    """
    pkg_data: Dict[str, str] = {}
    current_key = None

    for line in content.splitlines():
        line = line.strip()
        if not line:
            continue

        if line.startswith('%') and line.endswith('%') and len(line) > 2:
            current_key = line[1:-1]
            pkg_data[current_key] = ""
        elif current_key:
            if pkg_data[current_key]:
                pkg_data[current_key] += " " + line
            else:
                pkg_data[current_key] = line

    return pkg_data
