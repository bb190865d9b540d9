"""
Request/response handlers for hosting gitfast behind a web framework.

Handlers take already-decoded input and return a status code plus a
payload; HTTP framing is left to the host.
"""

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from .cache import get_run_cache
from .env import Settings
from .export import build_csv, build_json
from .logger import get_logger
from .pipeline import ScrapeOptions, run_scrape
from .schema import InvalidScrapeRequest

logger = get_logger()

EXPORT_FORMATS = {
    "csv": ("text/csv", "uganda_github_users.csv"),
    "json": ("application/json", "uganda_github_users.json"),
}


@dataclass
class ExportResponse:
    status: int
    content_type: str
    body: str
    filename: Optional[str] = None


def _error(status: int, message: str) -> Tuple[int, Dict[str, Any]]:
    return status, {"error": message}


def handle_scrape(
    body: Any,
    cache=None,
    client=None,
    sleep: Callable[[float], None] = time.sleep,
) -> Tuple[int, Dict[str, Any]]:
    """
    Run a scrape for a decoded JSON body and cache the result.

    Returns:
        (200, {"runId", "stats", "users"}) on success,
        (400, {"error"}) for an invalid body,
        (500, {"error"}) for anything unexpected
    """
    if not isinstance(body, dict):
        return _error(400, "Invalid JSON body")

    try:
        options = ScrapeOptions.from_request(body)
    except InvalidScrapeRequest as e:
        return _error(400, str(e))

    cache = cache if cache is not None else default_cache()
    try:
        result = run_scrape(options, client=client, sleep=sleep)
    except Exception as e:
        logger.error("Scrape failed", error=str(e), error_type=type(e).__name__)
        return _error(500, str(e) or "Unknown error")

    run_id = cache.put(result)
    payload = result.to_dict()
    return 200, {"runId": run_id, **payload}


def handle_export(run_id: Optional[str], fmt: str = "json", cache=None) -> ExportResponse:
    """Render a cached run as CSV or JSON."""
    if not run_id:
        return ExportResponse(400, "application/json", build_error_body("Missing runId query parameter"))
    if fmt not in EXPORT_FORMATS:
        return ExportResponse(400, "application/json", build_error_body(f"Unsupported format: {fmt}"))

    cache = cache if cache is not None else default_cache()
    result = cache.get(run_id)
    if result is None:
        return ExportResponse(404, "application/json", build_error_body("Run not found or expired"))

    content_type, filename = EXPORT_FORMATS[fmt]
    body = build_csv(result.users) if fmt == "csv" else build_json(result.users)
    return ExportResponse(200, content_type, body, filename)


def build_error_body(message: str) -> str:
    return json.dumps({"error": message})


def default_cache():
    """Process-wide run cache configured from the environment."""
    settings = Settings.from_env()
    return get_run_cache(ttl_seconds=settings.cache_ttl_seconds, db_path=settings.cache_db)
