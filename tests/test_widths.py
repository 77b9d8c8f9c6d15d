# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for fonts/widths.py: /Widths and /W parsing."""

import pytest
from pikepdf import Array, Name

from pdfglyphmap.exceptions import FontStructureError
from pdfglyphmap.fonts.widths import Widths, parse_cid_widths, parse_simple_widths


class TestWidths:
    """Tests for the Widths table."""

    def test_width_for_explicit_code(self):
        widths = Widths({65: 722.0}, 500.0)

        assert widths.width_for(65) == 722.0

    def test_width_for_falls_back_to_default(self):
        widths = Widths({65: 722.0}, 500.0)

        assert widths.width_for(66) == 500.0

    def test_read_only(self):
        widths = Widths({65: 722.0})

        with pytest.raises(TypeError):
            widths.widths[66] = 1.0

    def test_len(self):
        assert len(Widths({1: 1.0, 2: 2.0})) == 2


class TestParseSimpleWidths:
    """Tests for parse_simple_widths()."""

    def test_first_char_offset(self):
        """Widths start at /FirstChar."""
        widths = parse_simple_widths(32, Array([250, 333, 408]))

        assert dict(widths.widths) == {32: 250.0, 33: 333.0, 34: 408.0}
        assert widths.default == 0.0

    def test_missing_width(self):
        """/MissingWidth is the default."""
        widths = parse_simple_widths(32, Array([250]), missing_width=300)

        assert widths.width_for(200) == 300.0

    def test_real_numbers(self):
        widths = parse_simple_widths(0, Array([250.5]))

        assert widths.width_for(0) == 250.5

    def test_not_an_array(self):
        with pytest.raises(FontStructureError, match="not an array"):
            parse_simple_widths(0, Name.Foo)

    def test_non_numeric_entry(self):
        with pytest.raises(FontStructureError, match="not a number"):
            parse_simple_widths(0, Array([250, Name.Bad]))


class TestParseCidWidths:
    """Tests for parse_cid_widths()."""

    def test_individual_widths(self):
        """[cid [w1 w2 ...]] assigns consecutive CIDs."""
        widths = parse_cid_widths(Array([1, Array([500, 600, 700])]))

        assert dict(widths.widths) == {1: 500.0, 2: 600.0, 3: 700.0}

    def test_range_width(self):
        """[first last w] assigns one width to a range."""
        widths = parse_cid_widths(Array([10, 12, 250]))

        assert dict(widths.widths) == {10: 250.0, 11: 250.0, 12: 250.0}

    def test_mixed_formats(self):
        widths = parse_cid_widths(Array([1, Array([500]), 5, 6, 300]))

        assert dict(widths.widths) == {1: 500.0, 5: 300.0, 6: 300.0}

    def test_default_width(self):
        """Without /DW, CIDs default to 1000."""
        assert parse_cid_widths(None).default == 1000.0
        assert parse_cid_widths(None, 750).default == 750.0

    def test_truncated_start_cid(self):
        with pytest.raises(FontStructureError):
            parse_cid_widths(Array([1, Array([500]), 7]))

    def test_truncated_range(self):
        with pytest.raises(FontStructureError, match="missing its width"):
            parse_cid_widths(Array([1, 5]))

    def test_not_an_array(self):
        with pytest.raises(FontStructureError):
            parse_cid_widths(Name.W)

    def test_inverted_range_is_empty(self):
        widths = parse_cid_widths(Array([5, 1, 250]))

        assert len(widths) == 0

    def test_huge_range_clamped_to_cid_space(self):
        """A range past CID 65535 stops at the last valid CID."""
        widths = parse_cid_widths(Array([65530, 2147483647, 500]))

        assert len(widths) == 6
        assert widths.width_for(65535) == 500.0
        assert 65536 not in widths.widths

    def test_negative_range_start_clamped(self):
        widths = parse_cid_widths(Array([-5, 1, 250]))

        assert dict(widths.widths) == {0: 250.0, 1: 250.0}

    def test_individual_widths_past_cid_space_dropped(self):
        widths = parse_cid_widths(Array([65535, Array([300, 400, 500])]))

        assert dict(widths.widths) == {65535: 300.0}
