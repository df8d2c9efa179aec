"""
Upstream Cranelift lookups.

Finds the newest published ``cranelift-codegen`` release on crates.io and the
current HEAD commit of the wasmtime repository on GitHub.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from cranelift_tools.exceptions import UpstreamError

logger = logging.getLogger(__name__)

__all__ = ["UpstreamClient", "CRATES_API_URL", "GITHUB_API_URL"]

CRATES_API_URL = "https://crates.io/api/v1/crates/{crate}"
GITHUB_API_URL = "https://api.github.com/repos/{repository}/commits/HEAD"


class UpstreamClient:
    """
    Client for the crates.io and GitHub REST APIs.

    Example::

        with UpstreamClient() as client:
            version = client.newest_version("cranelift-codegen")
            sha = client.head_commit("bytecodealliance/wasmtime")
    """

    # crates.io and GitHub both reject requests without a user agent, and
    # some mirrors filter obviously scripted ones.
    DEFAULT_HEADERS = {
        "User-Agent": "Mozilla/5.0 (X11; Linux x86_64; rv:68.0) Gecko Firefox/68.0",
        "Accept": "application/json",
    }

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout
        self._session = None

    def _get_session(self):
        """Get or create requests session with default headers."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.DEFAULT_HEADERS)
        return self._session

    def _get_json(self, url: str) -> dict[str, Any]:
        session = self._get_session()
        logger.debug("GET %s", url)
        try:
            response = session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise UpstreamError(
                f"Request failed: {e}",
                context={"url": url},
                suggestions=["Check your network connection and try again"],
            ) from e
        except ValueError as e:
            raise UpstreamError(
                "Response is not valid JSON",
                context={"url": url},
            ) from e

    def newest_version(self, crate: str) -> str:
        """Return the newest published version of ``crate`` on crates.io."""
        url = CRATES_API_URL.format(crate=crate)
        data = self._get_json(url)
        try:
            version = data["crate"]["newest_version"]
        except (KeyError, TypeError) as e:
            raise UpstreamError(
                "Unexpected crates.io response: no crate.newest_version",
                context={"url": url},
            ) from e
        logger.info("Newest %s version: %s", crate, version)
        return str(version)

    def head_commit(self, repository: str) -> str:
        """Return the sha of the HEAD commit of a GitHub ``owner/name`` repository."""
        url = GITHUB_API_URL.format(repository=repository)
        data = self._get_json(url)
        try:
            sha = data["sha"]
        except (KeyError, TypeError) as e:
            raise UpstreamError(
                "Unexpected GitHub response: no sha",
                context={"url": url},
            ) from e
        logger.info("Last %s commit: %s", repository, sha)
        return str(sha)

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
