from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

TEXT_FIELDS = [
    "name",
    "location",
    "bio",
    "company",
    "blog",
    "twitter_username",
    "email",
]
COUNT_FIELDS = ["followers", "following", "public_repos"]

REQUEST_INT_FIELDS = [
    "minRepos",
    "minFollowers",
    "maxPagesPerQuery",
    "perPage",
    "concurrency",
    "minScore",
]


class InvalidScrapeRequest(ValueError):
    """Raised when a run configuration is rejected before any remote call."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass(frozen=True)
class SearchItem:
    """Lightweight candidate returned by the user search endpoint."""
    login: str
    id: int = 0
    avatar_url: str = ""
    html_url: str = ""


@dataclass
class CandidateEntry:
    item: SearchItem
    source_queries: List[str] = field(default_factory=list)

    @property
    def login(self) -> str:
        return self.item.login


@dataclass(frozen=True)
class GitHubUser:
    """A resolved, scored GitHub profile."""
    login: str
    id: int
    avatar_url: str
    html_url: str
    name: Optional[str]
    location: Optional[str]
    bio: Optional[str]
    company: Optional[str]
    blog: Optional[str]
    twitter_username: Optional[str]
    email: Optional[str]
    followers: int
    following: int
    public_repos: int
    created_at: Optional[str]
    updated_at: Optional[str]
    confidence_score: int
    is_likely_uganda: bool
    source_queries: Tuple[str, ...] = ()
    web3_skills: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["source_queries"] = list(self.source_queries)
        data["web3_skills"] = list(self.web3_skills)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GitHubUser":
        values = dict(data)
        values["source_queries"] = tuple(values.get("source_queries") or ())
        values["web3_skills"] = tuple(values.get("web3_skills") or ())
        return cls(**values)


@dataclass
class ScrapeResult:
    users: List[GitHubUser]
    total_candidates: int
    unique_users: int

    @property
    def kept_after_filter(self) -> int:
        return len(self.users)

    def stats(self) -> Dict[str, int]:
        return {
            "totalCandidates": self.total_candidates,
            "uniqueUsers": self.unique_users,
            "keptAfterFilter": self.kept_after_filter,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats": self.stats(),
            "users": [user.to_dict() for user in self.users],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScrapeResult":
        stats = data.get("stats", {})
        return cls(
            users=[GitHubUser.from_dict(u) for u in data.get("users", [])],
            total_candidates=stats.get("totalCandidates", 0),
            unique_users=stats.get("uniqueUsers", 0),
        )


def as_text(v: Any) -> Optional[str]:
    if v is None:
        return None
    if isinstance(v, str):
        return v
    return str(v)


def as_count(v: Any) -> int:
    if isinstance(v, bool) or v is None:
        return 0
    try:
        return int(v)
    except (TypeError, ValueError):
        return 0


def _login(data: Dict[str, Any]) -> str:
    login = data.get("login")
    if not isinstance(login, str) or login.strip() == "":
        raise ValueError(f"Payload is missing a login: {data!r:.200}")
    return login


def search_item_from_payload(data: Dict[str, Any]) -> SearchItem:
    """Coerce one raw /search/users item into a SearchItem."""
    return SearchItem(
        login=_login(data),
        id=as_count(data.get("id")),
        avatar_url=as_text(data.get("avatar_url")) or "",
        html_url=as_text(data.get("html_url")) or "",
    )


def user_from_profile(
    profile: Dict[str, Any],
    confidence_score: int,
    is_likely_uganda: bool,
    source_queries: List[str],
    web3_skills: Optional[List[str]] = None,
) -> GitHubUser:
    """
    Build a GitHubUser from a raw /users/{login} payload.

    Text fields become str or None and counts become int (missing or
    malformed counts are 0). A payload without a login raises ValueError.
    """
    return GitHubUser(
        login=_login(profile),
        id=as_count(profile.get("id")),
        avatar_url=as_text(profile.get("avatar_url")) or "",
        html_url=as_text(profile.get("html_url")) or "",
        **{f: as_text(profile.get(f)) for f in TEXT_FIELDS},
        **{f: as_count(profile.get(f)) for f in COUNT_FIELDS},
        created_at=as_text(profile.get("created_at")),
        updated_at=as_text(profile.get("updated_at")),
        confidence_score=confidence_score,
        is_likely_uganda=is_likely_uganda,
        source_queries=tuple(source_queries),
        web3_skills=tuple(web3_skills or ()),
    )


def validate_scrape_request(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Numeric knobs are optional; clamping happens later in the pipeline.
    """
    if not isinstance(data, dict):
        return ["Request body must be a JSON object"]

    errors: List[str] = []

    locations = data.get("locations")
    if not isinstance(locations, list) or len(locations) == 0:
        errors.append("locations must be a non-empty array")
    else:
        for i, loc in enumerate(locations):
            if not isinstance(loc, str) or loc.strip() == "":
                errors.append(f"locations[{i}] must be a non-empty string")

    for f in REQUEST_INT_FIELDS:
        if f in data and (isinstance(data[f], bool) or not isinstance(data[f], int)):
            errors.append(f"Field '{f}' must be an integer if provided")

    return errors
