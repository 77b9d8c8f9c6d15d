# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for fonts/loader.py: embedded font program loading."""

import pytest
from conftest import new_pdf
from font_helpers import make_truetype_font_dict, make_type0_font_dict
from pikepdf import Array, Dictionary, Name

from pdfglyphmap.exceptions import FontLoadError
from pdfglyphmap.fonts.glyph_source import OpenTypeGlyphSource
from pdfglyphmap.fonts.loader import (
    find_font_file,
    get_font_descriptor,
    load_glyph_source,
)


class TestGetFontDescriptor:
    """Tests for get_font_descriptor()."""

    def test_simple_font(self):
        pdf = new_pdf()
        font = make_truetype_font_dict(pdf)

        fd = get_font_descriptor(font)

        assert str(fd.FontName) == "/GlyphMapTest"

    def test_type0_uses_descendant(self):
        pdf = new_pdf()
        font = make_type0_font_dict(pdf)

        fd = get_font_descriptor(font)

        assert str(fd.FontName) == "/GlyphMapTest-Identity"

    def test_type0_without_descendants(self):
        font = Dictionary(Type=Name.Font, Subtype=Name.Type0, DescendantFonts=Array())

        assert get_font_descriptor(font) is None

    def test_no_descriptor(self):
        font = Dictionary(Type=Name.Font, Subtype=Name.Type1, BaseFont=Name.Courier)

        assert get_font_descriptor(font) is None


class TestFindFontFile:
    """Tests for find_font_file()."""

    def test_truetype(self):
        pdf = new_pdf()

        key, stream = find_font_file(make_truetype_font_dict(pdf))

        assert key == "/FontFile2"
        assert len(stream.read_bytes()) > 0

    def test_not_embedded(self):
        pdf = new_pdf()

        assert find_font_file(make_truetype_font_dict(pdf, embed=False)) is None


class TestLoadGlyphSource:
    """Tests for load_glyph_source()."""

    def test_embedded_truetype(self):
        pdf = new_pdf()

        source = load_glyph_source(make_truetype_font_dict(pdf))

        assert isinstance(source, OpenTypeGlyphSource)
        assert source.glyph_for_unicode("A") == 2

    def test_type0(self):
        pdf = new_pdf()

        source = load_glyph_source(make_type0_font_dict(pdf))

        assert source.glyph_for_name("bullet") == 5

    def test_not_embedded(self):
        pdf = new_pdf()
        font = make_truetype_font_dict(pdf, "Helvetica", embed=False)

        with pytest.raises(FontLoadError, match="Helvetica is not embedded"):
            load_glyph_source(font)

    def test_unparsable_program(self):
        pdf = new_pdf()
        font = make_truetype_font_dict(pdf, "Broken")
        font.FontDescriptor.FontFile2 = pdf.make_stream(b"garbage")

        with pytest.raises(FontLoadError, match="Broken"):
            load_glyph_source(font)
