"""
Uganda confidence scoring for normalized GitHub locations.

Responsibilities:
- Map a normalized location string to a 0-100 confidence score.
- Flag likely false positives that mention another country.

Non-Responsibilities:
- No normalization (callers pass normalize_location() output).
- No threshold decisions; the resolver applies the minimum score.

Invariant:
Given identical inputs, this module must always return the same score.
Rules are evaluated in priority order and the first match wins:

    100  contains "uganda"
     85  contains "kampala"
     75  contains another known Ugandan city as a whole token
     50  contains the "ug" / "u.g." abbreviation as a standalone token
      0  no match
"""

import re
from typing import List

COUNTRY_NAME = "uganda"
CAPITAL_CITY = "kampala"

# Known Ugandan city / region names (lowercase)
UGANDA_CITIES: List[str] = [
    "kampala",
    "entebbe",
    "jinja",
    "mbarara",
    "gulu",
    "mbale",
    "mukono",
    "wakiso",
    "lira",
    "kasese",
    "fort portal",
    "arua",
    "soroti",
    "kabale",
    "masaka",
]

# Countries that cause false positives when a profile lists several places
FALSE_POSITIVE_MARKERS = [
    "united states",
    "united kingdom",
    "canada",
    " us ",
    " uk ",
    ", us",
    ", uk",
]

SCORE_COUNTRY = 100
SCORE_CAPITAL = 85
SCORE_CITY = 75
SCORE_ABBREVIATION = 50

_CITY_PATTERNS = [
    re.compile(rf"(?:^|[^a-z]){re.escape(city)}(?:[^a-z]|$)")
    for city in UGANDA_CITIES
    if city != CAPITAL_CITY
]
_ABBREVIATION_RE = re.compile(r"(?:,\s*| )ug(?:\s*,|\s+|$)")
_DOTTED_ABBREVIATION_RE = re.compile(r"\bu\.g\.?\b")


def compute_confidence_score(normalized_location: str) -> int:
    """Return the Uganda confidence score (0-100) for a normalized location."""
    if not normalized_location:
        return 0

    loc = normalized_location
    if COUNTRY_NAME in loc:
        return SCORE_COUNTRY
    if CAPITAL_CITY in loc:
        return SCORE_CAPITAL
    if any(pattern.search(loc) for pattern in _CITY_PATTERNS):
        return SCORE_CITY
    if _ABBREVIATION_RE.search(loc) or _DOTTED_ABBREVIATION_RE.search(loc):
        return SCORE_ABBREVIATION
    return 0


def is_uganda_location(normalized_location: str) -> bool:
    return compute_confidence_score(normalized_location) > 0


def is_likely_uganda(normalized_location: str) -> bool:
    """True when the location scores above zero and names no other country."""
    if compute_confidence_score(normalized_location) == 0:
        return False
    return not any(marker in normalized_location for marker in FALSE_POSITIVE_MARKERS)
