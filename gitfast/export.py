"""
CSV and JSON writers for resolved users.

List-valued fields are joined with "|" so that the CSV stays one value
per cell. Values containing a comma, quote or line break are quoted
with embedded quotes doubled.
"""

import csv
import io
import json
from pathlib import Path
from typing import Any, Iterable, List, Tuple

from .schema import GitHubUser

COLUMNS = [
    "login",
    "name",
    "location",
    "followers",
    "following",
    "public_repos",
    "confidence_score",
    "is_likely_uganda",
    "company",
    "blog",
    "email",
    "twitter_username",
    "html_url",
    "bio",
    "created_at",
    "updated_at",
    "source_queries",
    "web3_skills",
]

LIST_DELIMITER = "|"

JSON_FILENAME = "uganda_users.json"
CSV_FILENAME = "uganda_users.csv"


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return LIST_DELIMITER.join(str(v) for v in value)
    return str(value)


def _row(values: List[str]) -> str:
    # A "\r\n" terminator makes QUOTE_MINIMAL quote both \r and \n in cells
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\r\n", quoting=csv.QUOTE_MINIMAL).writerow(values)
    return buf.getvalue()[:-2]


def build_csv(users: Iterable[GitHubUser]) -> str:
    """Render users as CSV text: a header row, then one row per user."""
    rows = [_row(COLUMNS)]
    rows.extend(_row([_cell(getattr(user, col)) for col in COLUMNS]) for user in users)
    return "\n".join(rows)


def build_json(users: Iterable[GitHubUser]) -> str:
    return json.dumps([u.to_dict() for u in users], indent=2, ensure_ascii=False)


def write_outputs(users: List[GitHubUser], output_dir: Path) -> Tuple[Path, Path]:
    """
    Write uganda_users.json and uganda_users.csv into output_dir.

    Returns:
        Tuple of (json_path, csv_path)
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / JSON_FILENAME
    csv_path = output_dir / CSV_FILENAME

    with json_path.open("w", encoding="utf-8") as f:
        f.write(build_json(users))
    with csv_path.open("w", encoding="utf-8", newline="") as f:
        f.write(build_csv(users))

    return json_path, csv_path
