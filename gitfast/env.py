import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_env() -> None:
    """Load .env from the working directory if present (GITHUB_TOKEN, etc.)."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}")


@dataclass
class Settings:
    """Runtime settings read from the environment."""

    github_token: Optional[str] = None
    output_dir: Path = Path(".")
    max_pages: int = 10
    concurrency: int = 5
    min_score: int = 50
    log_level: str = "INFO"
    cache_ttl_seconds: int = 30 * 60
    cache_db: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        cache_db = os.getenv("RUN_CACHE_DB")
        return cls(
            github_token=os.getenv("GITHUB_TOKEN") or None,
            output_dir=Path(os.getenv("OUTPUT_DIR") or "."),
            max_pages=_int_env("MAX_PAGES", 10),
            concurrency=_int_env("CONCURRENCY", 5),
            min_score=_int_env("MIN_SCORE", 50),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
            cache_ttl_seconds=_int_env("RUN_CACHE_TTL_SECONDS", 30 * 60),
            cache_db=Path(cache_db) if cache_db else None,
        )
