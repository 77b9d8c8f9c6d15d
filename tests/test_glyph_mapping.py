# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for fonts/glyph_mapping.py: glyph name to Unicode lookup."""

import pytest

from pdfglyphmap.fonts.glyph_mapping import (
    SYMBOL_GLYPH_TO_UNICODE,
    ZAPFDINGBATS_GLYPH_TO_UNICODE,
    glyph_name_to_codepoint,
    glyph_name_to_unicode,
    glyph_name_to_unicode_with_variants,
    is_invalid_unicode,
)


class TestExtensionTables:
    """Tests for the Symbol and ZapfDingbats extension tables."""

    def test_zapfdingbats_mapping_has_required_glyphs(self):
        """ZapfDingbats mapping contains the a1-a206 glyphs."""
        assert ZAPFDINGBATS_GLYPH_TO_UNICODE["space"] == 0x0020
        assert ZAPFDINGBATS_GLYPH_TO_UNICODE["a1"] == 0x2701  # UPPER BLADE SCISSORS
        assert ZAPFDINGBATS_GLYPH_TO_UNICODE["a2"] == 0x2702  # BLACK SCISSORS
        assert "a206" in ZAPFDINGBATS_GLYPH_TO_UNICODE

    def test_symbol_construction_glyphs_have_no_unicode(self):
        """Construction pieces are present but map to None."""
        assert SYMBOL_GLYPH_TO_UNICODE["radicalex"] is None
        assert SYMBOL_GLYPH_TO_UNICODE["arrowvertex"] is None


class TestGlyphNameToCodepoint:
    """Tests for glyph_name_to_codepoint()."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("A", 0x0041),
            ("space", 0x0020),
            ("Euro", 0x20AC),
            ("alpha", 0x03B1),
            ("quoteright", 0x2019),
        ],
    )
    def test_agl_names(self, name, expected):
        """Adobe Glyph List names resolve."""
        assert glyph_name_to_codepoint(name) == expected

    def test_zapfdingbats_name(self):
        """a-names resolve via the ZapfDingbats table."""
        assert glyph_name_to_codepoint("a1") == 0x2701

    def test_symbol_override_beats_agl(self):
        """Symbol sans-serif variants extract as the plain character."""
        assert glyph_name_to_codepoint("copyrightsans") == 0x00A9

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("uni00E9", 0x00E9),
            ("u00E9", 0x00E9),
            ("u1F600", 0x1F600),
        ],
    )
    def test_uni_names(self, name, expected):
        """uniXXXX and uXXXX[XX] names are decoded."""
        assert glyph_name_to_codepoint(name) == expected

    @pytest.mark.parametrize("name", ["uniZZZZ", "u110000", "g123", ".notdef"])
    def test_unresolvable_names(self, name):
        """Unknown or malformed names give None."""
        assert glyph_name_to_codepoint(name) is None

    def test_construction_glyph(self):
        """A construction glyph has no codepoint."""
        assert glyph_name_to_codepoint("radicalex") is None

    @pytest.mark.parametrize("name", ["uni0000", "uniFEFF", "uniFFFE", "uniD800"])
    def test_invalid_values_rejected(self, name):
        """NUL, BOM, non-characters and surrogates are not text."""
        assert glyph_name_to_codepoint(name) is None


class TestGlyphNameToUnicode:
    """Tests for the string-returning lookups."""

    def test_returns_single_character(self):
        """The result is a one-character string."""
        assert glyph_name_to_unicode("Adieresis") == "Ä"

    def test_unknown_name(self):
        """Unknown names give None."""
        assert glyph_name_to_unicode("nonexistentglyph") is None

    def test_variant_suffix_retried(self):
        """A.sc falls back to A."""
        assert glyph_name_to_unicode("A.sc") is None
        assert glyph_name_to_unicode_with_variants("A.sc") == "A"

    def test_only_first_period_splits(self):
        """Everything from the first period on is dropped."""
        assert glyph_name_to_unicode_with_variants("g.alt.ss01") == "g"

    def test_full_name_preferred(self):
        """A name that resolves as-is is not split."""
        assert glyph_name_to_unicode_with_variants("period") == "."

    def test_leading_period(self):
        """A name with nothing before the period stays unresolved."""
        assert glyph_name_to_unicode_with_variants(".null") is None

    def test_unresolved_variant(self):
        """Variants of unknown names give None."""
        assert glyph_name_to_unicode_with_variants("foo.bar") is None


class TestIsInvalidUnicode:
    """Tests for is_invalid_unicode()."""

    @pytest.mark.parametrize("value", [0x0000, 0xFEFF, 0xFFFE, 0xD800, 0xDFFF])
    def test_invalid(self, value):
        assert is_invalid_unicode(value)

    @pytest.mark.parametrize("value", [0x0020, 0xE000, 0xF041, 0x1F600])
    def test_valid(self, value):
        assert not is_invalid_unicode(value)
