"""
Tests for the GitHub API client.

These tests mock requests.Session to avoid hitting the real API.
"""

from unittest.mock import Mock

import pytest
import requests

from gitfast.github import GITHUB_API_TIMEOUT, USER_AGENT, GitHubClient
from gitfast.retry import GitHubAPIError, RetryError

NOW = 1_700_000_000.0


@pytest.fixture
def session():
    s = Mock(spec=requests.Session)
    s.headers = {}
    return s


def make_client(session, sleep, **kwargs):
    return GitHubClient(token="test-token", session=session, sleep=sleep, clock=lambda: NOW, **kwargs)


class TestGitHubClient:

    def test_headers(self, session, no_sleep):
        make_client(session, no_sleep)
        assert session.headers["Authorization"] == "Bearer test-token"
        assert session.headers["User-Agent"] == USER_AGENT
        assert session.headers["Accept"] == "application/vnd.github+json"

    def test_no_token(self, session, no_sleep, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        GitHubClient(session=session, sleep=no_sleep)
        assert "Authorization" not in session.headers

    def test_token_from_env(self, session, no_sleep, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        GitHubClient(session=session, sleep=no_sleep)
        assert session.headers["Authorization"] == "Bearer env-token"

    def test_search_users(self, session, no_sleep, response_factory):
        page = {"total_count": 1, "items": [{"login": "amy"}]}
        session.get.return_value = response_factory(200, json_data=page)
        client = make_client(session, no_sleep)

        assert client.search_users('location:"Uganda"', page=2, per_page=50) == page
        session.get.assert_called_once_with(
            "https://api.github.com/search/users",
            params={"q": 'location:"Uganda"', "per_page": 50, "page": 2},
            timeout=GITHUB_API_TIMEOUT,
        )

    def test_get_user_quotes_login(self, session, no_sleep, response_factory):
        session.get.return_value = response_factory(200, json_data={"login": "a/b"})
        client = make_client(session, no_sleep)

        client.get_user("a/b")

        assert session.get.call_args[0][0] == "https://api.github.com/users/a%2Fb"

    def test_rate_limited_detail_call_recovers(self, session, no_sleep, response_factory):
        """A 403 with remaining=0 and reset 10s ahead waits >= 10s, then succeeds."""
        limited = response_factory(
            403,
            headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": str(int(NOW) + 10)},
            text='{"message": "API rate limit exceeded"}',
        )
        ok = response_factory(200, json_data={"login": "user2"})
        session.get.side_effect = [limited, ok]
        client = make_client(session, no_sleep)

        assert client.get_user("user2") == {"login": "user2"}
        assert session.get.call_count == 2
        assert no_sleep.calls[0] >= 12.0

    def test_terminal_error(self, session, no_sleep, response_factory):
        session.get.return_value = response_factory(404)
        client = make_client(session, no_sleep)

        with pytest.raises(GitHubAPIError):
            client.get_user("ghost")

    def test_max_retries_configurable(self, session, no_sleep, response_factory):
        session.get.return_value = response_factory(429, headers={"x-ratelimit-remaining": "0"})
        client = make_client(session, no_sleep, max_retries=1)

        with pytest.raises(RetryError):
            client.get_user("busy")
        assert session.get.call_count == 2

    def test_context_manager_closes_session(self, session, no_sleep):
        with make_client(session, no_sleep):
            pass
        session.close.assert_called_once()
