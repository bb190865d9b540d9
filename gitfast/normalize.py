import re

# Extended_Pictographic code points plus emoji modifiers, so flags, hearts
# and pins go but ordinary technical symbols and arrows stay.
EMOJI_RE = re.compile(
    "["
    "\u00A9\u00AE\u203C\u2049\u2122\u2139"
    "\u2194-\u2199\u21A9-\u21AA"
    "\u231A-\u231B\u2328\u2388\u23CF\u23E9-\u23F3\u23F8-\u23FA"
    "\u24C2\u25AA-\u25AB\u25B6\u25C0\u25FB-\u25FE"
    "\u2600-\u2605\u2607-\u2612\u2614-\u2685\u2690-\u2705"
    "\u2708-\u2712\u2714\u2716\u271D\u2721\u2728\u2733-\u2734"
    "\u2744\u2747\u274C\u274E\u2753-\u2755\u2757\u2763-\u2767"
    "\u2795-\u2797\u27A1\u27B0\u27BF"
    "\u2934-\u2935\u2B05-\u2B07\u2B1B-\u2B1C\u2B50\u2B55"
    "\u3030\u303D\u3297\u3299"
    "\U0001F000-\U0001FAFF"  # cards, emoticons, pictographs, flags, skin tones
    "\U0001FC00-\U0001FFFD"
    "\uFE0F\u200D"  # variation selector, zero-width joiner
    "]"
)

# Exact full-string aliases (after lowercasing), never substrings.
LOCATION_ALIASES = {
    "kampala ug": "kampala, uganda",
    "kampala, ug": "kampala, uganda",
    "ug": "uganda",
}


def normalize_text(s: str) -> str:
    return " ".join(s.strip().lower().split())


def strip_emoji(s: str) -> str:
    return EMOJI_RE.sub("", s)


def normalize_location(raw: str | None) -> str:
    """Canonicalize a free-text GitHub location.

    Trims, drops emoji, collapses whitespace, lowercases, then applies
    LOCATION_ALIASES when the whole string is a known shorthand.
    """
    if not raw:
        return ""
    loc = normalize_text(strip_emoji(raw.strip()))
    return LOCATION_ALIASES.get(loc, loc)
