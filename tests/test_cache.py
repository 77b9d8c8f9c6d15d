# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for fonts/cache.py: per-document font resolution."""

from unittest.mock import MagicMock

import pytest
from conftest import add_page, new_pdf
from font_helpers import make_truetype_font_dict, make_type0_font_dict
from pikepdf import Dictionary, Name

from pdfglyphmap.exceptions import FontLoadError
from pdfglyphmap.fonts.cache import FontCache, resolve_pdf_font
from pdfglyphmap.fonts.resolver import CID_PASSTHROUGH, ExplicitMap
from pdfglyphmap.fonts.traversal import iter_page_fonts


def _direct_font(base_font: str) -> Dictionary:
    return Dictionary(
        Type=Name.Font, Subtype=Name.Type1, BaseFont=Name("/" + base_font)
    )


class TestResolvePdfFont:
    """End-to-end tests for resolve_pdf_font()."""

    def test_simple_truetype(self):
        pdf = new_pdf()

        font = resolve_pdf_font(make_truetype_font_dict(pdf))

        assert font.name == "GlyphMapTest"
        assert not font.is_cid
        assert isinstance(font.encoding, ExplicitMap)
        assert font.glyph_for_code(0x41) == 2
        assert font.unicode_for_code(0x41) == "A"
        assert font.widths.width_for(0x21) == 600.0

    def test_winansi_bullet(self):
        """WinAnsi 0x95 reaches the bullet glyph through Unicode."""
        pdf = new_pdf()

        font = resolve_pdf_font(make_truetype_font_dict(pdf))

        assert font.glyph_for_code(0x95) == 5

    def test_type0_identity(self):
        pdf = new_pdf()

        font = resolve_pdf_font(make_type0_font_dict(pdf))

        assert font.is_cid
        assert font.encoding is CID_PASSTHROUGH
        assert font.glyph_for_code(7) == 7

    def test_type0_cid_to_gid_map(self):
        pdf = new_pdf()
        font_dict = make_type0_font_dict(pdf, cid_to_gid_map=b"\x00\x00\x00\x03")

        font = resolve_pdf_font(font_dict)

        assert font.is_cid
        assert font.glyph_for_code(1) == 3

    def test_not_embedded(self):
        pdf = new_pdf()

        with pytest.raises(FontLoadError):
            resolve_pdf_font(make_truetype_font_dict(pdf, embed=False))


class TestFontCache:
    """Tests for FontCache."""

    def test_same_object_resolved_once(self):
        pdf = new_pdf()
        font_dict = make_truetype_font_dict(pdf)
        resolver = MagicMock()
        cache = FontCache(resolver)

        first = cache.get(font_dict)
        second = cache.get(pdf.get_object(font_dict.objgen))

        assert first is second
        assert resolver.call_count == 1
        assert len(cache) == 1
        assert font_dict in cache

    def test_distinct_objects(self):
        pdf = new_pdf()
        resolver = MagicMock(side_effect=lambda font: MagicMock())
        cache = FontCache(resolver)

        cache.get(make_truetype_font_dict(pdf, "One"))
        cache.get(make_truetype_font_dict(pdf, "Two"))

        assert resolver.call_count == 2
        assert len(cache) == 2

    def test_direct_font_resolved_once_across_visits(self):
        """A direct /Font entry read repeatedly from a page is resolved once."""
        pdf = new_pdf()
        page = add_page(pdf, {"/F1": _direct_font("A")})
        resolver = MagicMock()
        cache = FontCache(resolver)

        for _ in range(3):
            for _key, font in iter_page_fonts(page):
                cache.get(font)

        assert resolver.call_count == 1
        assert len(cache) == 1

    def test_distinct_direct_fonts(self):
        pdf = new_pdf()
        page = add_page(pdf, {"/F1": _direct_font("A"), "/F2": _direct_font("B")})
        resolver = MagicMock(side_effect=lambda font: MagicMock())
        cache = FontCache(resolver)

        for _key, font in iter_page_fonts(page):
            cache.get(font)

        assert resolver.call_count == 2
        assert len(cache) == 2

    def test_failures_not_cached(self):
        pdf = new_pdf()
        font_dict = make_truetype_font_dict(pdf)
        resolver = MagicMock(side_effect=FontLoadError("boom"))
        cache = FontCache(resolver)

        for _ in range(2):
            with pytest.raises(FontLoadError, match="boom"):
                cache.get(font_dict)

        assert resolver.call_count == 2
        assert len(cache) == 0
        assert font_dict not in cache

    def test_clear(self):
        pdf = new_pdf()
        cache = FontCache(MagicMock())
        cache.get(make_truetype_font_dict(pdf))

        cache.clear()

        assert len(cache) == 0

    def test_default_resolver(self):
        pdf = new_pdf()
        cache = FontCache()

        font = cache.get(make_truetype_font_dict(pdf))

        assert font.name == "GlyphMapTest"
