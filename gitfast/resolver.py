"""
Resolve unique candidates to full, scored GitHub profiles.

A fixed pool of worker threads drains one shared queue of candidates.
Each worker fetches the profile, scores its location and keeps it when
the score reaches the minimum. A candidate whose profile cannot be
fetched is logged and skipped; it never aborts the run.
"""

import queue
import threading
from typing import List, Optional, Sequence

import requests

from .logger import get_logger
from .normalize import normalize_location
from .retry import GitHubAPIError
from .schema import CandidateEntry, GitHubUser, as_text, user_from_profile
from .scoring import compute_confidence_score, is_likely_uganda
from .skills import detect_web3_skills

logger = get_logger()

MAX_CONCURRENCY = 10


def sort_users(users: List[GitHubUser]) -> List[GitHubUser]:
    """Score desc, then followers desc, then login for a stable order."""
    return sorted(users, key=lambda u: (-u.confidence_score, -u.followers, u.login))


def resolve_candidate(client, entry: CandidateEntry, min_score: int) -> Optional[GitHubUser]:
    """
    Fetch and score one candidate.

    Returns:
        The GitHubUser, or None when its score is below min_score

    Raises:
        GitHubAPIError: When the profile cannot be fetched
        requests.RequestException: On a transport error that is not retried
        ValueError: When the profile payload is malformed
    """
    profile = client.get_user(entry.login)
    if not isinstance(profile, dict):
        raise ValueError(f"Unexpected profile payload for {entry.login}")

    normalized = normalize_location(as_text(profile.get("location")))
    score = compute_confidence_score(normalized)
    if score < min_score:
        return None

    return user_from_profile(
        profile,
        confidence_score=score,
        is_likely_uganda=is_likely_uganda(normalized),
        source_queries=entry.source_queries,
        web3_skills=detect_web3_skills(
            as_text(profile.get("bio")),
            as_text(profile.get("company")),
            as_text(profile.get("blog")),
        ),
    )


class ProfileResolver:
    """
    Bounded worker pool over a shared candidate queue.

    Example:
        resolver = ProfileResolver(client, concurrency=5, min_score=50)
        users = resolver.resolve(entries)
    """

    def __init__(self, client, concurrency: int = 5, min_score: int = 50):
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.client = client
        self.concurrency = min(concurrency, MAX_CONCURRENCY)
        self.min_score = min_score

        self._queue: "queue.Queue[CandidateEntry]" = queue.Queue()
        self._lock = threading.Lock()
        self._results: List[GitHubUser] = []

    def resolve(self, entries: Sequence[CandidateEntry]) -> List[GitHubUser]:
        """Resolve all entries and return kept users, sorted."""
        if not entries:
            return []

        self._results = []
        for entry in entries:
            self._queue.put(entry)

        workers = [
            threading.Thread(target=self._work, name=f"resolver-{i}", daemon=True)
            for i in range(min(self.concurrency, len(entries)))
        ]
        for t in workers:
            t.start()
        for t in workers:
            t.join()

        logger.info(
            "Profile resolution finished",
            candidates=len(entries),
            kept=len(self._results),
            workers=len(workers),
        )
        return sort_users(self._results)

    def _work(self) -> None:
        while True:
            try:
                entry = self._queue.get_nowait()
            except queue.Empty:
                return
            try:
                self._resolve_one(entry)
            finally:
                self._queue.task_done()

    def _resolve_one(self, entry: CandidateEntry) -> None:
        logger.record_profile_attempt()
        try:
            user = resolve_candidate(self.client, entry, self.min_score)
        except GitHubAPIError as e:
            logger.record_profile_failure(type(e).__name__)
            logger.warning(
                "Failed to fetch user, skipping",
                login=entry.login,
                status=e.status_code,
                error=str(e),
            )
            return
        except requests.exceptions.RequestException as e:
            logger.record_profile_failure(type(e).__name__)
            logger.warning("Request failed, skipping", login=entry.login, error=str(e))
            return
        except ValueError as e:
            logger.record_profile_failure("MalformedProfile")
            logger.warning("Malformed profile, skipping", login=entry.login, error=str(e))
            return
        except Exception as e:
            logger.record_profile_failure(type(e).__name__)
            logger.error(
                "Unexpected error resolving user, skipping",
                login=entry.login,
                error=str(e),
                error_type=type(e).__name__,
            )
            return

        logger.record_profile_resolved()
        if user is None:
            logger.record_profile_filtered()
            return

        with self._lock:
            self._results.append(user)


def resolve_profiles(
    client,
    entries: Sequence[CandidateEntry],
    concurrency: int = 5,
    min_score: int = 50,
) -> List[GitHubUser]:
    return ProfileResolver(client, concurrency=concurrency, min_score=min_score).resolve(entries)
