"""GitHub REST API client: user search and profile lookups."""

import os
import time
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

import requests

from .logger import get_logger
from .retry import DEFAULT_MAX_RETRIES, with_retry

logger = get_logger()

GITHUB_API = "https://api.github.com"
GITHUB_API_TIMEOUT = 30
USER_AGENT = "gitfast-uganda-scraper/1.0.0"


class GitHubClient:
    """
    Thin wrapper over requests.Session for the GitHub API.

    Every request goes through with_retry(), so rate limits and timeouts
    are handled in one place. Non-success responses surface as
    GitHubAPIError / RetryError.

    Example:
        client = GitHubClient()
        page = client.search_users('location:"Uganda"', page=1, per_page=100)
        profile = client.get_user(page["items"][0]["login"])
    """

    def __init__(
        self,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        base_url: str = GITHUB_API,
        timeout: float = GITHUB_API_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self.token = token if token is not None else os.getenv("GITHUB_TOKEN")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._sleep = sleep
        self._clock = clock

        self._session = session if session is not None else requests.Session()
        self._session.headers.update({
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        })
        if self.token:
            self._session.headers["Authorization"] = f"Bearer {self.token}"
        else:
            logger.warning(
                "GITHUB_TOKEN is not set. Unauthenticated requests are "
                "severely rate-limited (60 req/h)."
            )

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self.base_url}{path}"

        def call() -> requests.Response:
            logger.record_api_call()
            return self._session.get(url, params=params, timeout=self.timeout)

        return with_retry(call, max_retries=self.max_retries, sleep=self._sleep, clock=self._clock)

    def search_users(self, query: str, page: int, per_page: int) -> Dict[str, Any]:
        """Fetch one page of /search/users. Returns the decoded JSON body."""
        resp = self._get(
            "/search/users",
            params={"q": query, "per_page": per_page, "page": page},
        )
        return resp.json()

    def get_user(self, login: str) -> Dict[str, Any]:
        """Fetch the full public profile for a login."""
        resp = self._get(f"/users/{quote(login, safe='')}")
        return resp.json()

    def close(self) -> None:
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
