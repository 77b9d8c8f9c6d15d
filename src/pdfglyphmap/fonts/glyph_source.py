# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Glyph sources: glyph lookup by code, Unicode value or glyph name.

A glyph source is anything implementing the ``GlyphSource`` protocol. The
fontTools-backed sources below read every table they need up front, so a
constructed source is immutable and safe to share between threads.
"""

import logging
import os
import struct
import tempfile
from io import BytesIO
from typing import Protocol, runtime_checkable

from fontTools.agl import UV2AGL
from fontTools.ttLib import TTFont

from ..exceptions import FontLoadError
from .constants import SYMBOL_CMAP_RANGE
from .encodings import NamedEncoding, encoding_vector
from .glyph_mapping import glyph_name_to_codepoint

logger = logging.getLogger(__name__)

NOTDEF = ".notdef"

# cmap subtables whose codes are Unicode, in order of preference
_UNICODE_CMAP_IDS = (
    (3, 10),
    (0, 6),
    (0, 4),
    (3, 1),
    (0, 3),
    (0, 2),
    (0, 1),
    (0, 0),
)
_MAC_ROMAN_CMAP_ID = (1, 0)
_SYMBOL_CMAP_ID = (3, 0)


@runtime_checkable
class GlyphSource(Protocol):
    """Glyph lookup capabilities of a font program.

    Glyph ids are only meaningful relative to the font that returned them.
    """

    def native_encoding(self) -> NamedEncoding | None: ...

    def glyph_for_codepoint(self, codepoint: int) -> int | None: ...

    def glyph_for_unicode(self, char: str) -> int | None: ...

    def glyph_for_name(self, name: str) -> int | None: ...


class _NamedGlyphSource:
    """Shared lookups for sources with named glyphs.

    Subclasses fill ``_gids`` (glyph name -> gid), ``_code_map`` (native
    code -> glyph name), ``_unicode_map`` (codepoint -> glyph name) and
    ``_native_encoding``.
    """

    def __init__(self) -> None:
        self._gids: dict[str, int] = {}
        self._code_map: dict[int, str] = {}
        self._unicode_map: dict[int, str] = {}
        self._native_encoding: NamedEncoding | None = None

    @property
    def num_glyphs(self) -> int:
        return len(self._gids)

    def native_encoding(self) -> NamedEncoding | None:
        return self._native_encoding

    def _gid(self, glyph_name: str | None) -> int | None:
        if glyph_name is None or glyph_name == NOTDEF:
            return None
        return self._gids.get(glyph_name)

    def glyph_for_codepoint(self, codepoint: int) -> int | None:
        return self._gid(self._code_map.get(codepoint))

    def glyph_for_unicode(self, char: str) -> int | None:
        codepoint = ord(char)
        gid = self._gid(self._unicode_map.get(codepoint))
        if gid is not None:
            return gid
        # Fonts without a Unicode cmap: try the conventional glyph names
        for glyph_name in (
            UV2AGL.get(codepoint),
            f"uni{codepoint:04X}",
            f"u{codepoint:04X}",
        ):
            gid = self._gid(glyph_name)
            if gid is not None:
                return gid
        return None

    def glyph_for_name(self, name: str) -> int | None:
        return self._gids.get(name)

    def _unicode_map_from_names(self) -> dict[int, str]:
        """Derives codepoint -> glyph name from the glyph names themselves."""
        result: dict[int, str] = {}
        for glyph_name in self._gids:
            if glyph_name == NOTDEF:
                continue
            codepoint = glyph_name_to_codepoint(glyph_name)
            if codepoint is not None:
                result.setdefault(codepoint, glyph_name)
        return result


class OpenTypeGlyphSource(_NamedGlyphSource):
    """Glyph source for TrueType and OpenType (CFF) font programs.

    The native encoding follows the font's cmap: a Unicode subtable makes it
    UNICODE, a Mac Roman (1,0) subtable MAC_ROMAN. A symbolic (3,0) subtable
    or a custom CFF encoding has no named encoding; codes are then looked up
    directly, with (3,0) codes also tried at U+F000 + code. Bare CFF fonts
    without a cmap use their built-in CFF encoding.

    Args:
        tt_font: A parsed fontTools TTFont.
        font_name: Name used in log messages.
    """

    def __init__(self, tt_font: TTFont, font_name: str = "") -> None:
        super().__init__()
        self.font_name = font_name
        try:
            glyph_order = tt_font.getGlyphOrder()
            self._gids = {name: gid for gid, name in enumerate(glyph_order)}
            self._load_cmaps(tt_font)
        except Exception as e:
            raise FontLoadError(
                f"Cannot read glyph tables of {font_name}: {e}"
            ) from e

    def _load_cmaps(self, tt_font: TTFont) -> None:
        subtables: dict[tuple[int, int], dict[int, str]] = {}
        if "cmap" in tt_font:
            for subtable in tt_font["cmap"].tables:
                key = (subtable.platformID, subtable.platEncID)
                subtables.setdefault(key, dict(subtable.cmap))

        unicode_cmap: dict[int, str] = {}
        for key in _UNICODE_CMAP_IDS:
            for codepoint, glyph_name in subtables.get(key, {}).items():
                unicode_cmap.setdefault(codepoint, glyph_name)

        if unicode_cmap:
            self._native_encoding = NamedEncoding.UNICODE
            self._code_map = unicode_cmap
            self._unicode_map = unicode_cmap
            return

        if _MAC_ROMAN_CMAP_ID in subtables:
            self._native_encoding = NamedEncoding.MAC_ROMAN
            self._code_map = subtables[_MAC_ROMAN_CMAP_ID]
        elif _SYMBOL_CMAP_ID in subtables:
            self._code_map = self._fold_symbol_cmap(subtables[_SYMBOL_CMAP_ID])
        elif "CFF " in tt_font:
            self._load_cff_encoding(tt_font)

        self._unicode_map = self._unicode_map_from_names()

    @staticmethod
    def _fold_symbol_cmap(symbol_cmap: dict[int, str]) -> dict[int, str]:
        """Makes (3,0) entries at U+F0xx reachable by their byte code."""
        folded = dict(symbol_cmap)
        for code, glyph_name in symbol_cmap.items():
            if code in SYMBOL_CMAP_RANGE:
                folded.setdefault(code - SYMBOL_CMAP_RANGE.start, glyph_name)
        return folded

    def _load_cff_encoding(self, tt_font: TTFont) -> None:
        top_dict = tt_font["CFF "].cff.topDictIndex[0]
        if hasattr(top_dict, "ROS"):
            # CID-keyed CFF: no code -> name encoding
            return
        encoding = getattr(top_dict, "Encoding", "StandardEncoding")
        if encoding == "StandardEncoding":
            self._native_encoding = NamedEncoding.STANDARD
            self._code_map = dict(encoding_vector(NamedEncoding.STANDARD) or {})
        elif isinstance(encoding, list):
            self._code_map = {
                code: glyph_name
                for code, glyph_name in enumerate(encoding)
                if glyph_name != NOTDEF
            }
        else:
            logger.debug(
                "Font %s: unsupported CFF encoding %r", self.font_name, encoding
            )

    def __repr__(self) -> str:
        return (
            f"OpenTypeGlyphSource({self.font_name!r}, glyphs={self.num_glyphs}, "
            f"encoding={self._native_encoding})"
        )


class Type1GlyphSource(_NamedGlyphSource):
    """Glyph source for Type 1 font programs (PFA/PFB).

    Type 1 fonts address glyphs by name only; glyph ids are positions in
    the CharStrings dictionary with ``.notdef`` first.

    Args:
        charstring_names: Glyph names from the CharStrings dictionary.
        encoding: Built-in encoding, either "StandardEncoding" or a
            256-entry list of glyph names.
        font_name: Name used in log messages.
    """

    def __init__(
        self,
        charstring_names: list[str],
        encoding: str | list[str] | None,
        font_name: str = "",
    ) -> None:
        super().__init__()
        self.font_name = font_name
        names = [name for name in charstring_names if name != NOTDEF]
        self._gids = {name: gid for gid, name in enumerate([NOTDEF, *names])}

        if encoding == "StandardEncoding":
            self._native_encoding = NamedEncoding.STANDARD
            self._code_map = dict(encoding_vector(NamedEncoding.STANDARD) or {})
        elif isinstance(encoding, list):
            self._code_map = {
                code: glyph_name
                for code, glyph_name in enumerate(encoding)
                if glyph_name and glyph_name != NOTDEF
            }
        self._unicode_map = self._unicode_map_from_names()

    def __repr__(self) -> str:
        return f"Type1GlyphSource({self.font_name!r}, glyphs={self.num_glyphs})"


def wrap_cff_in_otf(cff_data: bytes) -> bytes:
    """Wraps standalone CFF data in a minimal OTF container."""
    tag = b"CFF "
    offset = 12 + 16  # sfnt header (12) + one table record (16)
    length = len(cff_data)
    pad_len = (4 - length % 4) % 4
    padded = cff_data + b"\x00" * pad_len
    checksum = 0
    for i in range(0, len(padded), 4):
        checksum = (checksum + struct.unpack(">I", padded[i : i + 4])[0]) & 0xFFFFFFFF
    header = struct.pack(">4sHHHH", b"OTTO", 1, 16, 0, 16)
    table_record = struct.pack(">4sIII", tag, checksum, offset, length)
    return header + table_record + cff_data


def _parse_type1(font_data: bytes, font_name: str) -> Type1GlyphSource:
    """Parses Type 1 PFA/PFB data with fontTools.t1Lib."""
    from fontTools.t1Lib import T1Font

    # T1Font requires a file path, not a BytesIO
    suffix = ".pfa" if font_data[:2] == b"%!" else ".pfb"
    tmp_fd, tmp_path = tempfile.mkstemp(suffix=suffix)
    try:
        os.write(tmp_fd, font_data)
    finally:
        os.close(tmp_fd)
    try:
        t1 = T1Font(tmp_path)
        t1.parse()
        charstrings = t1.font["CharStrings"]
        encoding = t1.font.get("Encoding")
        return Type1GlyphSource(list(charstrings.keys()), encoding, font_name)
    except Exception as e:
        raise FontLoadError(f"Cannot parse Type 1 font {font_name}: {e}") from e
    finally:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass


def open_glyph_source(
    font_data: bytes,
    font_file_key: str,
    subtype: str | None = None,
    font_name: str = "",
) -> GlyphSource:
    """Parses an embedded font program into a glyph source.

    Args:
        font_data: Decoded bytes of the font file stream.
        font_file_key: "/FontFile", "/FontFile2" or "/FontFile3".
        subtype: /Subtype of a /FontFile3 stream ("/Type1C",
            "/CIDFontType0C" or "/OpenType").
        font_name: Name used in log and error messages.

    Returns:
        A glyph source for the font program.

    Raises:
        FontLoadError: If the font program cannot be parsed.
    """
    if font_file_key == "/FontFile":
        return _parse_type1(font_data, font_name)

    if font_file_key == "/FontFile3" and subtype in ("/Type1C", "/CIDFontType0C"):
        font_data = wrap_cff_in_otf(font_data)

    try:
        tt_font = TTFont(BytesIO(font_data))
    except Exception as e:
        raise FontLoadError(f"Cannot parse font program of {font_name}: {e}") from e
    try:
        return OpenTypeGlyphSource(tt_font, font_name)
    finally:
        tt_font.close()
