"""
Base classes and interfaces for catalog fetchers.

This module provides the abstract base classes for fetching package candidates
from the official repositories and the AUR.
"""

import abc
import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from urllib3.util.retry import Retry

from archlink.core.exceptions import FetchError
from archlink.core.interfaces import FetcherConfig, PackageCandidate, PackageSource


logger = logging.getLogger(__name__)


class RepositoryFetcher(abc.ABC):
    """
    Abstract base class for catalog fetchers.

    A fetcher turns a query into the package candidates of one catalog. It
    never ranks them; ranking is left to the search engine.
    """

    #: Catalog the produced candidates are tagged with
    source: PackageSource = PackageSource.OFFICIAL

    def __init__(self, config: Optional[FetcherConfig] = None):
        """
        Initialize the repository fetcher.

        Args:
            config: Configuration for the fetcher. If None, uses default configuration.
        """
        self.config = config or FetcherConfig()

    @abc.abstractmethod
    def search_packages(self, query: str) -> List[PackageCandidate]:
        """
        Search the catalog for packages matching the query.

        Args:
            query: Search query.

        Returns:
            List of PackageCandidate objects tagged with this fetcher's source.

        Raises:
            FetchError: If the catalog cannot be reached or parsed.
        """
        pass

    @abc.abstractmethod
    def get_repository_name(self) -> str:
        """
        Get the name of the repository.

        Returns:
            Name of the repository.
        """
        pass

    def close(self) -> None:
        """Release any resources held by the fetcher."""
        pass


class HttpRepositoryFetcher(RepositoryFetcher):
    """
    Base class for catalog fetchers that talk to a JSON HTTP API.
    """

    def __init__(
        self,
        base_url: str,
        config: Optional[FetcherConfig] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        """
        Initialize the HTTP repository fetcher.

        Args:
            base_url: Base URL for the repository.
            config: Configuration for the fetcher.
            headers: Optional headers to include in all requests.
        """
        super().__init__(config)
        self.base_url = base_url.rstrip('/')
        self.headers = {"User-Agent": self.config.user_agent}
        self.headers.update(headers or {})
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """
        Create a requests session with retry logic for transient server errors.

        Returns:
            A configured requests session.
        """
        session = requests.Session()

        retry_strategy = Retry(
            total=self.config.retry_count,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "HEAD"],
            raise_on_status=False
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _get_url(self, path: str) -> str:
        path = path.lstrip('/')
        return f"{self.base_url}/{path}"

    @retry(
        retry=retry_if_exception_type((
            requests.exceptions.ConnectionError,
            requests.exceptions.Timeout,
        )),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        reraise=True,
    )
    def _fetch_url(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """
        Fetch a URL with exponential backoff on network errors.

        Args:
            url: URL to fetch.
            params: Query string parameters.

        Returns:
            Response object.

        Raises:
            requests.exceptions.RequestException: If the request fails after retries.
        """
        response = self.session.get(
            url,
            params=params,
            headers=self.headers,
            timeout=self.config.request_timeout
        )
        response.raise_for_status()
        return response

    def _fetch_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Fetch JSON data from a path below the base URL.

        Args:
            path: Path to append to the base URL.
            params: Query string parameters.

        Returns:
            Parsed JSON data.

        Raises:
            FetchError: If the request fails or the response is not valid JSON.
        """
        url = self._get_url(path)

        try:
            response = self._fetch_url(url, params=params)
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Request to {url} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.debug(f"Response content (first 500 chars): {response.text[:500]}")
            raise FetchError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(data, dict):
            raise FetchError(f"Unexpected JSON payload from {url}")

        return data

    def close(self) -> None:
        self.session.close()
