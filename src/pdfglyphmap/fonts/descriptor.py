# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Font descriptor: the encoding metadata of a PDF font dictionary.

``FontDescriptor`` is the read-only view the resolver needs. The pikepdf
backed ``PdfFontDescriptor`` implements it for simple fonts (Type1,
TrueType, Type3, MMType1) and Type0 composite fonts.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Protocol, runtime_checkable

import pikepdf
from pikepdf import Array, Dictionary, Name, Stream

from ..exceptions import FontStructureError
from ..utils import resolve_indirect as _resolve
from ..utils import safe_str as _safe_str
from .constants import SIMPLE_CODE_COUNT
from .tounicode import parse_cidtogidmap_stream, parse_tounicode_cmap
from .widths import Widths, parse_cid_widths, parse_simple_widths

logger = logging.getLogger(__name__)


class BaseEncoding(Enum):
    """Base encodings a PDF font dictionary can declare."""

    NONE = "None"
    STANDARD = "StandardEncoding"
    SYMBOL = "SymbolEncoding"
    WIN_ANSI = "WinAnsiEncoding"
    MAC_ROMAN = "MacRomanEncoding"
    MAC_EXPERT = "MacExpertEncoding"
    IDENTITY_H = "Identity-H"
    IDENTITY_V = "Identity-V"
    OTHER = "Other"

    @classmethod
    def from_name(cls, name: str) -> "BaseEncoding":
        """Maps a PDF name (with or without leading slash) to a member."""
        value = name.lstrip("/")
        for member in cls:
            if member.value == value and member not in (cls.NONE, cls.OTHER):
                return member
        return cls.OTHER


@dataclass(frozen=True)
class FontEncoding:
    """A font's declared base encoding plus its /Differences overrides."""

    base: BaseEncoding
    differences: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "differences", MappingProxyType(dict(self.differences))
        )


@runtime_checkable
class FontDescriptor(Protocol):
    """What the resolver reads from a font dictionary.

    ``cid_to_gid_map``, ``to_unicode`` and ``widths`` may raise
    ``FontStructureError`` when the underlying data is malformed.
    """

    @property
    def name(self) -> str | None: ...

    def is_cid(self) -> bool: ...

    def encoding(self) -> FontEncoding | None: ...

    def cid_to_gid_map(self) -> list[int] | None: ...

    def to_unicode(self) -> dict[int, str] | None: ...

    def widths(self) -> Widths | None: ...


def parse_differences(differences: pikepdf.Object) -> dict[int, str]:
    """Expands a /Differences array into code -> glyph name.

    The array alternates a starting code with the glyph names assigned to
    consecutive codes: ``[32 /space /exclam 65 /A]``.

    Args:
        differences: The /Differences array.

    Returns:
        Mapping of codes 0-255 to glyph names (without leading slash).
        Codes outside the byte range are dropped.

    Raises:
        FontStructureError: If the array is not an array or holds items that
            are neither integers nor names.
    """
    differences = _resolve(differences)
    if not isinstance(differences, Array):
        raise FontStructureError("/Differences is not an array")

    result: dict[int, str] = {}
    current_code = 0
    for item in differences:
        item = _resolve(item)
        if isinstance(item, Name):
            glyph_name = _safe_str(item).lstrip("/")
            if 0 <= current_code < SIMPLE_CODE_COUNT:
                result[current_code] = glyph_name
            else:
                logger.debug(
                    "Ignoring /Differences code %d (/%s)", current_code, glyph_name
                )
            current_code += 1
            continue
        try:
            current_code = int(item)
        except (TypeError, ValueError) as e:
            raise FontStructureError(
                f"Unexpected /Differences entry: {item!r}"
            ) from e
    return result


def _read_stream(obj: pikepdf.Object, what: str) -> bytes:
    """Reads decoded stream data, mapping failures to FontStructureError."""
    obj = _resolve(obj)
    if not isinstance(obj, Stream):
        raise FontStructureError(f"{what} is not a stream")
    try:
        return bytes(obj.read_bytes())
    except Exception as e:
        raise FontStructureError(f"{what} stream cannot be decoded: {e}") from e


class PdfFontDescriptor:
    """FontDescriptor backed by a pikepdf font dictionary.

    Args:
        font: The font dictionary (``/Type /Font``).
    """

    def __init__(self, font: pikepdf.Object) -> None:
        font = _resolve(font)
        if not isinstance(font, Dictionary):
            raise FontStructureError("Font object is not a dictionary")
        self._font = font
        self._descendant = self._find_descendant()

    def _find_descendant(self) -> Dictionary | None:
        """Returns the CIDFont of a Type0 font, or None."""
        if _safe_str(self._font.get("/Subtype", b"")) != "/Type0":
            return None
        descendants = _resolve(self._font.get("/DescendantFonts"))
        if not isinstance(descendants, Array) or len(descendants) == 0:
            raise FontStructureError("Type0 font has no /DescendantFonts")
        descendant = _resolve(descendants[0])
        if not isinstance(descendant, Dictionary):
            raise FontStructureError("Descendant font is not a dictionary")
        return descendant

    @property
    def font_dict(self) -> Dictionary:
        """The underlying font dictionary."""
        return self._font

    @property
    def name(self) -> str | None:
        base_font = self._font.get("/BaseFont")
        if base_font is None:
            return None
        return _safe_str(_resolve(base_font)).lstrip("/")

    def is_cid(self) -> bool:
        return self._descendant is not None

    def encoding(self) -> FontEncoding | None:
        encoding = self._font.get("/Encoding")
        if encoding is None:
            return None
        encoding = _resolve(encoding)

        if isinstance(encoding, Name):
            return FontEncoding(BaseEncoding.from_name(_safe_str(encoding)))

        if isinstance(encoding, Stream):
            # Embedded CMap; Identity CMaps are still recognised by name
            cmap_name = encoding.get("/CMapName")
            if cmap_name is not None:
                base = BaseEncoding.from_name(_safe_str(cmap_name))
                if base in (BaseEncoding.IDENTITY_H, BaseEncoding.IDENTITY_V):
                    return FontEncoding(base)
            return FontEncoding(BaseEncoding.OTHER)

        if isinstance(encoding, Dictionary):
            base = BaseEncoding.NONE
            base_name = encoding.get("/BaseEncoding")
            if base_name is not None:
                base = BaseEncoding.from_name(_safe_str(_resolve(base_name)))
            differences: dict[int, str] = {}
            if encoding.get("/Differences") is not None:
                differences = parse_differences(encoding["/Differences"])
            return FontEncoding(base, differences)

        logger.debug("Ignoring /Encoding of unexpected type %s", type(encoding))
        return FontEncoding(BaseEncoding.OTHER)

    def cid_to_gid_map(self) -> list[int] | None:
        if self._descendant is None:
            return None
        entry = self._descendant.get("/CIDToGIDMap")
        if entry is None:
            return None
        entry = _resolve(entry)
        if isinstance(entry, Name):
            if _safe_str(entry) != "/Identity":
                logger.debug("Unknown /CIDToGIDMap name %s", _safe_str(entry))
            return None
        return parse_cidtogidmap_stream(_read_stream(entry, "/CIDToGIDMap"))

    def to_unicode(self) -> dict[int, str] | None:
        entry = self._font.get("/ToUnicode")
        if entry is None:
            return None
        entry = _resolve(entry)
        if isinstance(entry, Name):
            # /Identity-H etc. carry no character information
            return None
        return parse_tounicode_cmap(_read_stream(entry, "/ToUnicode"))

    def widths(self) -> Widths | None:
        if self._descendant is not None:
            return parse_cid_widths(
                self._descendant.get("/W"), self._descendant.get("/DW")
            )

        widths_array = self._font.get("/Widths")
        if widths_array is None:
            return None
        missing_width = None
        fd = _resolve(self._font.get("/FontDescriptor"))
        if isinstance(fd, Dictionary):
            missing_width = fd.get("/MissingWidth")
        return parse_simple_widths(
            self._font.get("/FirstChar", 0), widths_array, missing_width
        )

    def __repr__(self) -> str:
        return f"PdfFontDescriptor(name={self.name!r}, cid={self.is_cid()})"
