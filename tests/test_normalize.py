"""
Tests for location normalization.
"""

import pytest

from gitfast.normalize import LOCATION_ALIASES, normalize_location, strip_emoji


class TestNormalizeLocation:
    """Test normalize_location()."""

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_input(self, raw):
        """Missing or blank input normalizes to the empty string."""
        assert normalize_location(raw) == ""

    def test_trims_and_lowercases(self):
        assert normalize_location("  Uganda  ") == "uganda"
        assert normalize_location("Kampala") == "kampala"

    def test_collapses_internal_whitespace(self):
        assert normalize_location("Fort  \t Portal") == "fort portal"

    def test_strips_emoji(self):
        """Flags and pictographs are dropped before whitespace is collapsed."""
        assert normalize_location("Kampala \U0001F1FA\U0001F1EC Uganda") == "kampala uganda"
        assert normalize_location("\U0001F30D Jinja ❤️") == "jinja"

    def test_alias_country_code(self):
        assert normalize_location("UG") == "uganda"

    def test_alias_city_and_country_code(self):
        assert normalize_location("Kampala UG") == "kampala, uganda"
        assert normalize_location("Kampala, UG") == "kampala, uganda"

    def test_alias_is_exact_match_only(self):
        """Aliases never apply to substrings."""
        assert normalize_location("Entebbe UG") == "entebbe ug"
        assert normalize_location("ugx") == "ugx"

    def test_padded_alias(self):
        """Whitespace around an alias still matches after trimming."""
        assert normalize_location("  Kampala UG  ") == "kampala, uganda"

    def test_unrecognised_location_untouched(self):
        assert normalize_location("Nairobi, Kenya") == "nairobi, kenya"

    @pytest.mark.parametrize("raw", [
        "  Kampala UG  ",
        "UG",
        "Fort   Portal \U0001F334",
        "London, UK",
        "☀ Gulu, Northern Uganda",
        "",
    ])
    def test_idempotent(self, raw):
        once = normalize_location(raw)
        assert normalize_location(once) == once

    def test_alias_values_are_stable(self):
        """No alias expands into another alias key."""
        for value in LOCATION_ALIASES.values():
            assert value not in LOCATION_ALIASES


class TestStripEmoji:

    def test_plain_text_unchanged(self):
        assert strip_emoji("Kampala, Uganda") == "Kampala, Uganda"

    def test_non_ascii_letters_kept(self):
        """Accented letters are text, not symbols."""
        assert strip_emoji("Kōbe, São Paulo") == "Kōbe, São Paulo"

    @pytest.mark.parametrize("raw", ["▶ Kampala", "Kampala Ⓜ", "⤴ Kampala ⭐"])
    def test_pictographs_removed(self, raw):
        assert normalize_location(raw) == "kampala"

    @pytest.mark.parametrize("symbol", ["⌀", "⌘", "⬌", "→"])
    def test_plain_symbols_kept(self, symbol):
        """Technical symbols and arrows without emoji presentation are text."""
        assert strip_emoji(f"Gulu {symbol}") == f"Gulu {symbol}"
