"""
Pytest configuration and shared fixtures.
"""

import threading
from typing import Any, Dict, List
from unittest.mock import Mock

import pytest

from gitfast.retry import GitHubAPIError


def make_response(
    status_code: int = 200,
    json_data: Any = None,
    headers: Dict[str, str] = None,
    text: str = "",
    url: str = "https://api.github.com/test",
) -> Mock:
    """Build a Mock that looks like a requests.Response."""
    resp = Mock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.headers = headers or {}
    resp.text = text
    resp.url = url
    resp.json.return_value = json_data if json_data is not None else {}
    return resp


class FakeGitHubClient:
    """
    In-memory stand-in for GitHubClient.

    search_pages: query -> list of page payloads ({"items", "total_count"})
    profiles: login -> profile payload
    failing_logins: logins whose get_user raises GitHubAPIError
    errors: login or (query, page) -> exception raised instead of answering
    """

    def __init__(self, search_pages=None, profiles=None, failing_logins=None, failing_queries=None, errors=None):
        self.search_pages = search_pages or {}
        self.profiles = profiles or {}
        self.failing_logins = set(failing_logins or [])
        self.failing_queries = failing_queries or {}
        self.errors = errors or {}
        self.search_calls: List[tuple] = []
        self.user_calls: List[str] = []
        self._lock = threading.Lock()

    def search_users(self, query, page, per_page):
        self.search_calls.append((query, page, per_page))
        if (query, page) in self.errors:
            raise self.errors[(query, page)]
        if self.failing_queries.get(query) == page:
            raise GitHubAPIError(f"GitHub API 422: {query}", status_code=422)
        pages = self.search_pages.get(query, [])
        if page > len(pages):
            return {"items": [], "total_count": 0}
        return pages[page - 1]

    def get_user(self, login):
        with self._lock:
            self.user_calls.append(login)
        if login in self.errors:
            raise self.errors[login]
        if login in self.failing_logins:
            raise GitHubAPIError(f"GitHub API 404: {login}", status_code=404)
        return self.profiles[login]


def make_profile(login: str, location: str = "Kampala, Uganda", followers: int = 10, **extra) -> Dict[str, Any]:
    profile = {
        "login": login,
        "id": sum(map(ord, login)),
        "avatar_url": f"https://avatars.githubusercontent.com/{login}",
        "html_url": f"https://github.com/{login}",
        "name": login.title(),
        "location": location,
        "bio": None,
        "company": None,
        "blog": "",
        "twitter_username": None,
        "email": None,
        "followers": followers,
        "following": 3,
        "public_repos": 12,
        "created_at": "2019-03-01T10:00:00Z",
        "updated_at": "2024-05-01T10:00:00Z",
    }
    profile.update(extra)
    return profile


def search_page(logins: List[str], total_count: int) -> Dict[str, Any]:
    return {
        "total_count": total_count,
        "items": [
            {
                "login": login,
                "id": i,
                "avatar_url": f"https://avatars.githubusercontent.com/{login}",
                "html_url": f"https://github.com/{login}",
            }
            for i, login in enumerate(logins)
        ],
    }


@pytest.fixture
def response_factory():
    """Factory for fake requests.Response objects."""
    return make_response


@pytest.fixture
def profile_factory():
    """Factory for raw /users/{login} payloads."""
    return make_profile


@pytest.fixture
def page_factory():
    """Factory for raw /search/users page payloads."""
    return search_page


@pytest.fixture
def fake_client_factory():
    return FakeGitHubClient


@pytest.fixture
def no_sleep():
    """A sleep replacement that records requested delays."""
    calls: List[float] = []

    def sleep(seconds: float) -> None:
        calls.append(seconds)

    sleep.calls = calls
    return sleep


@pytest.fixture
def sample_user_dict() -> Dict[str, Any]:
    """A serialized GitHubUser."""
    return {
        "login": "testuser",
        "id": 123,
        "avatar_url": "https://example.com/avatar.png",
        "html_url": "https://github.com/testuser",
        "name": "Test User",
        "location": "Kampala, Uganda",
        "bio": "A developer",
        "company": "TestCorp",
        "blog": "https://blog.example.com",
        "twitter_username": "testuser",
        "email": "test@example.com",
        "followers": 50,
        "following": 30,
        "public_repos": 10,
        "created_at": "2020-01-01T00:00:00Z",
        "updated_at": "2023-06-01T00:00:00Z",
        "confidence_score": 100,
        "is_likely_uganda": True,
        "source_queries": ['location:"Uganda"', 'location:"Kampala"'],
        "web3_skills": [],
    }
