import time
from typing import Callable, List, Optional

import requests

from .logger import get_logger
from .retry import GitHubAPIError
from .schema import SearchItem, search_item_from_payload

logger = get_logger()

# Courtesy delay between search pages, in seconds
PAGE_DELAY = 0.5

DEFAULT_LOCATIONS = [
    "Uganda",
    "Kampala",
    "Entebbe",
    "Jinja",
    "Mbarara",
    "Gulu",
    "Mbale",
    "Mukono",
    "Wakiso",
]


def build_query(location: str, min_repos: int = 0, min_followers: int = 0) -> str:
    """
    Returns a GitHub user-search query for one location.
    location: free text matched against the profile location field.
    min_repos / min_followers: added as repos:>N / followers:>N when > 0.
    """
    query = f'location:"{location}"'
    if min_repos > 0:
        query += f" repos:>{min_repos}"
    if min_followers > 0:
        query += f" followers:>{min_followers}"
    return query


def search_users(
    client,
    query: str,
    max_pages: int,
    per_page: int,
    sleep: Callable[[float], None] = time.sleep,
) -> List[SearchItem]:
    """
    Collect search items for one query across up to max_pages pages.

    Pages are requested strictly in order. Iteration stops on an empty
    page or once total_count items have been collected. A failed page
    ends pagination for this query; items already collected are kept.

    Args:
        client: GitHubClient (or anything with a compatible search_users)
        query: GitHub search query, see build_query()
        max_pages: Upper bound on pages requested
        per_page: Page size
        sleep: Used for the courtesy delay between pages

    Returns:
        Items in the order the API returned them
    """
    items: List[SearchItem] = []
    pages = 0

    for page in range(1, max_pages + 1):
        try:
            data = client.search_users(query, page=page, per_page=per_page)
        except (GitHubAPIError, requests.exceptions.RequestException, ValueError) as e:
            logger.error(
                "Search failed, keeping partial results",
                query=query,
                page=page,
                collected=len(items),
                error=str(e),
            )
            break

        raw_items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(raw_items, list):
            logger.error(
                "Unexpected search payload, keeping partial results",
                query=query,
                page=page,
                collected=len(items),
            )
            break

        pages += 1
        page_items = _parse_items(raw_items, query)
        items.extend(page_items)
        logger.debug("Search page fetched", query=query, page=page, count=len(page_items))

        total_count = _total_count(data)
        if not page_items or (total_count is not None and len(items) >= total_count):
            break

        sleep(PAGE_DELAY)

    logger.record_query(query, pages=pages, items=len(items))
    return items


def _parse_items(raw_items: list, query: str) -> List[SearchItem]:
    parsed = []
    for raw in raw_items:
        try:
            parsed.append(search_item_from_payload(raw))
        except (ValueError, AttributeError) as e:
            logger.warning("Skipping malformed search item", query=query, error=str(e))
    return parsed


def _total_count(data: dict) -> Optional[int]:
    total = data.get("total_count")
    if isinstance(total, bool) or not isinstance(total, int):
        return None
    return total
