"""
Ephemeral cache of completed scrape runs, keyed by run id.

Entries expire ttl_seconds after they are stored; an expired entry is
never returned. Expiry is checked lazily on get() and can also be swept
with evict_expired().

Two backends share the same contract:
- RunCache: in-process dict, for a single server process.
- SQLRunCache: SQLite via SQLAlchemy, for several processes sharing a file.
"""

import json
import secrets
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from .database import CachedRun, get_session_factory, init_database
from .logger import get_logger
from .schema import ScrapeResult

logger = get_logger()

DEFAULT_TTL_SECONDS = 30 * 60


def new_run_id(clock: Callable[[], float] = time.time) -> str:
    """Run ids look like <epoch-ms>-<6 hex chars>."""
    return f"{int(clock() * 1000)}-{secrets.token_hex(3)}"


class RunCache:
    """In-memory run cache guarded by a lock."""

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._store: Dict[str, Tuple[ScrapeResult, float]] = {}

    def put(self, result: ScrapeResult) -> str:
        run_id = new_run_id(self._clock)
        with self._lock:
            self._store[run_id] = (result, self._clock())
        return run_id

    def get(self, run_id: str) -> Optional[ScrapeResult]:
        """Return the stored result, or None when unknown or expired."""
        with self._lock:
            entry = self._store.get(run_id)
            if entry is None:
                return None
            result, created_at = entry
            if self._clock() - created_at > self.ttl_seconds:
                del self._store[run_id]
                return None
            return result

    def evict_expired(self) -> int:
        """Remove expired entries. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (_, created_at) in self._store.items() if now - created_at > self.ttl_seconds]
            for k in expired:
                del self._store[k]
        if expired:
            logger.debug("Evicted expired runs", count=len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


class SQLRunCache:
    """Run cache stored in a SQLite table, same contract as RunCache."""

    def __init__(
        self,
        db_path: Path,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._engine = init_database(Path(db_path))
        self._Session = get_session_factory(self._engine)

    def _is_expired(self, created_at: datetime) -> bool:
        return self._clock() - created_at.timestamp() > self.ttl_seconds

    def put(self, result: ScrapeResult) -> str:
        run_id = new_run_id(self._clock)
        with self._Session() as session:
            session.add(CachedRun(
                run_id=run_id,
                payload=json.dumps(result.to_dict()),
                created_at=datetime.fromtimestamp(self._clock()),
            ))
            session.commit()
        return run_id

    def get(self, run_id: str) -> Optional[ScrapeResult]:
        with self._Session() as session:
            row = session.get(CachedRun, run_id)
            if row is None:
                return None
            if self._is_expired(row.created_at):
                session.delete(row)
                session.commit()
                return None
            return ScrapeResult.from_dict(json.loads(row.payload))

    def evict_expired(self) -> int:
        cutoff = datetime.fromtimestamp(self._clock() - self.ttl_seconds)
        with self._Session() as session:
            removed = session.query(CachedRun).filter(CachedRun.created_at < cutoff).delete()
            session.commit()
        if removed:
            logger.debug("Evicted expired runs", count=removed)
        return removed

    def __len__(self) -> int:
        with self._Session() as session:
            return session.query(CachedRun).count()

    def close(self) -> None:
        self._engine.dispose()


# Process-wide cache, created on first use
_global_cache = None


def get_run_cache(ttl_seconds: float = DEFAULT_TTL_SECONDS, db_path: Optional[Path] = None):
    """
    Get or create the process-wide run cache.

    Args:
        ttl_seconds: Entry lifetime in seconds
        db_path: When given, use a SQLRunCache backed by this SQLite file

    Returns:
        RunCache or SQLRunCache instance
    """
    global _global_cache

    if _global_cache is None:
        if db_path is not None:
            _global_cache = SQLRunCache(db_path, ttl_seconds=ttl_seconds)
        else:
            _global_cache = RunCache(ttl_seconds=ttl_seconds)

    return _global_cache


def reset_run_cache():
    """Drop the process-wide cache (useful for testing)."""
    global _global_cache
    _global_cache = None
