"""
Scrape orchestration: search every location, merge duplicates,
resolve profiles in parallel and return the sorted result.

Phases run one after another. Searches are sequential (one query at a
time, page after page) to stay within GitHub's shared rate budget;
only profile resolution runs in parallel.
"""

import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

from .github import GitHubClient
from .dedupe import merge_candidates
from .logger import get_logger
from .resolver import MAX_CONCURRENCY, resolve_profiles
from .schema import InvalidScrapeRequest, ScrapeResult, validate_scrape_request
from .search import build_query, search_users

logger = get_logger()

# Courtesy delay between distinct queries, in seconds
QUERY_DELAY = 1.0

MAX_PER_PAGE = 100
MAX_PAGES_PER_QUERY = 10
MAX_SCORE = 100

# Defaults for request/response callers that omit a knob
REQUEST_DEFAULTS: Dict[str, Any] = {
    "locations": ["Uganda", "Kampala"],
    "minRepos": 0,
    "minFollowers": 0,
    "maxPagesPerQuery": 3,
    "perPage": 100,
    "concurrency": 5,
    "minScore": 50,
}


def _clamp(value: int, low: int, high: Optional[int] = None) -> int:
    value = max(value, low)
    return min(value, high) if high is not None else value


@dataclass
class ScrapeOptions:
    locations: List[str] = field(default_factory=list)
    min_repos: int = 0
    min_followers: int = 0
    max_pages_per_query: int = 3
    per_page: int = 100
    concurrency: int = 5
    min_score: int = 50

    def clamped(self) -> "ScrapeOptions":
        """Copy with every numeric knob forced into its allowed range."""
        return replace(
            self,
            min_repos=_clamp(self.min_repos, 0),
            min_followers=_clamp(self.min_followers, 0),
            max_pages_per_query=_clamp(self.max_pages_per_query, 1, MAX_PAGES_PER_QUERY),
            per_page=_clamp(self.per_page, 1, MAX_PER_PAGE),
            concurrency=_clamp(self.concurrency, 1, MAX_CONCURRENCY),
            min_score=_clamp(self.min_score, 0, MAX_SCORE),
        )

    def queries(self) -> List[str]:
        return [build_query(loc, self.min_repos, self.min_followers) for loc in self.locations]

    @classmethod
    def from_request(cls, data: Any) -> "ScrapeOptions":
        """
        Build clamped options from a camelCase request body.

        Missing knobs take REQUEST_DEFAULTS. Raises InvalidScrapeRequest
        when the body is rejected.
        """
        if isinstance(data, dict):
            data = {**REQUEST_DEFAULTS, **data}
        errors = validate_scrape_request(data)
        if errors:
            raise InvalidScrapeRequest(errors)

        return cls(
            locations=[loc.strip() for loc in data["locations"]],
            min_repos=data["minRepos"],
            min_followers=data["minFollowers"],
            max_pages_per_query=data["maxPagesPerQuery"],
            per_page=data["perPage"],
            concurrency=data["concurrency"],
            min_score=data["minScore"],
        ).clamped()


def validate_options(options: ScrapeOptions) -> List[str]:
    errors = []
    if not options.locations:
        errors.append("locations must be a non-empty array")
    for i, loc in enumerate(options.locations):
        if not isinstance(loc, str) or loc.strip() == "":
            errors.append(f"locations[{i}] must be a non-empty string")
    return errors


def run_scrape(
    options: ScrapeOptions,
    client: Optional[GitHubClient] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ScrapeResult:
    """
    Run the full pipeline and return deduplicated, scored users.

    Per-query and per-profile failures are logged and absorbed; the
    counts on the result show how much was lost. Only an invalid
    configuration raises, before any request is made.

    Args:
        options: Run configuration (clamped again here)
        client: GitHub client; when omitted a GitHubClient is created and
            closed once the run finishes
        sleep: Used for courtesy delays between pages and queries

    Raises:
        InvalidScrapeRequest: If the configuration is invalid
    """
    errors = validate_options(options)
    if errors:
        raise InvalidScrapeRequest(errors)
    options = options.clamped()

    if client is None:
        with GitHubClient() as owned_client:
            return _run_phases(options, owned_client, sleep)
    return _run_phases(options, client, sleep)


def _run_phases(options: ScrapeOptions, client, sleep: Callable[[float], None]) -> ScrapeResult:
    queries = options.queries()
    logger.info("Starting search phase", queries=len(queries))

    results_by_query = []
    for i, query in enumerate(queries):
        items = search_users(
            client,
            query,
            max_pages=options.max_pages_per_query,
            per_page=options.per_page,
            sleep=sleep,
        )
        logger.info(f"Searched {query}", found=len(items))
        results_by_query.append((query, items))
        if i < len(queries) - 1:
            sleep(QUERY_DELAY)

    entries, total_candidates = merge_candidates(results_by_query)
    logger.info(
        "Search phase complete",
        total_candidates=total_candidates,
        unique_users=len(entries),
    )

    users = resolve_profiles(
        client,
        list(entries.values()),
        concurrency=options.concurrency,
        min_score=options.min_score,
    )

    result = ScrapeResult(
        users=users,
        total_candidates=total_candidates,
        unique_users=len(entries),
    )
    logger.info("Scrape complete", **result.stats())
    return result
