# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Resolution of character codes to glyphs and Unicode.

A PDF font can carry several, sometimes conflicting, statements about how
the codes in a content stream select glyphs: a CIDToGIDMap, an Identity
CMap, a base encoding, the font program's own encoding and /Differences
overrides. ``resolve_font`` reconciles them into one ``ResolvedFont``.

Resolution strategies are tried in a fixed order and the first that
applies wins:

1. CIDToGIDMap array: CID ``i`` selects glyph ``array[i]``.
2. Identity-H/V encoding: codes are used as glyph ids directly.
3. Simple encoding: the base encoding is transcoded into the font's own
   encoding (or Unicode), /Differences are laid on top, and a font with no
   usable information falls back to using its codes as-is.
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import NamedTuple, Union

from ..exceptions import FontResolutionError
from .constants import CID_CODE_COUNT, PUA_SYMBOL_BASE, SIMPLE_CODE_COUNT
from .descriptor import BaseEncoding, FontDescriptor, FontEncoding
from .encodings import NamedEncoding, forward_map, get_transcoder
from .glyph_mapping import glyph_name_to_unicode_with_variants
from .glyph_source import GlyphSource
from .widths import Widths

logger = logging.getLogger(__name__)

# Base encodings that name one of the standard byte encodings
SOURCE_ENCODINGS: dict[BaseEncoding, NamedEncoding] = {
    BaseEncoding.STANDARD: NamedEncoding.STANDARD,
    BaseEncoding.SYMBOL: NamedEncoding.SYMBOL,
    BaseEncoding.WIN_ANSI: NamedEncoding.WIN_ANSI,
    BaseEncoding.MAC_ROMAN: NamedEncoding.MAC_ROMAN,
    BaseEncoding.MAC_EXPERT: NamedEncoding.MAC_EXPERT,
}

IDENTITY_ENCODINGS = frozenset({BaseEncoding.IDENTITY_H, BaseEncoding.IDENTITY_V})


class GlyphMapping(NamedTuple):
    """Glyph selected by a character code, plus its Unicode text if known."""

    gid: int
    unicode: str | None


@dataclass(frozen=True)
class CidPassthrough:
    """Codes are CIDs and CIDs are glyph ids; no table is carried."""

    def glyph_for_code(self, code: int) -> int | None:
        return code

    def unicode_for_code(self, code: int) -> str | None:
        return None

    def __len__(self) -> int:
        return 0


CID_PASSTHROUGH = CidPassthrough()


@dataclass(frozen=True)
class ExplicitMap:
    """Read-only table from character code to ``GlyphMapping``."""

    entries: Mapping[int, GlyphMapping] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def get(self, code: int) -> GlyphMapping | None:
        return self.entries.get(code)

    def glyph_for_code(self, code: int) -> int | None:
        mapping = self.entries.get(code)
        return mapping.gid if mapping is not None else None

    def unicode_for_code(self, code: int) -> str | None:
        mapping = self.entries.get(code)
        return mapping.unicode if mapping is not None else None

    def __getitem__(self, code: int) -> GlyphMapping:
        return self.entries[code]

    def __contains__(self, code: object) -> bool:
        return code in self.entries

    def __iter__(self) -> Iterator[int]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


TextEncoding = Union[CidPassthrough, ExplicitMap]


@dataclass(frozen=True)
class ResolvedFont:
    """A font ready for text rendering and extraction.

    Built once per font resource and shared read-only afterwards.

    Attributes:
        glyph_source: The font program glyphs are looked up in.
        descriptor: The font dictionary view the font was resolved from.
        encoding: Code -> glyph table, or passthrough for CID fonts.
        widths: Glyph widths from the font dictionary, if present.
        is_cid: True for CID-keyed fonts. A CID font may still carry an
            ExplicitMap (for example from a CIDToGIDMap).
        name: The font's /BaseFont name.
    """

    glyph_source: GlyphSource = field(repr=False)
    descriptor: FontDescriptor = field(repr=False)
    encoding: TextEncoding = field(repr=False)
    widths: Widths | None = field(repr=False)
    is_cid: bool
    name: str

    @property
    def is_passthrough(self) -> bool:
        return isinstance(self.encoding, CidPassthrough)

    def glyph_for_code(self, code: int) -> int | None:
        """Returns the glyph id for a character code, or None if unmapped."""
        return self.encoding.glyph_for_code(code)

    def unicode_for_code(self, code: int) -> str | None:
        """Returns the Unicode text for a character code, if known."""
        return self.encoding.unicode_for_code(code)


@dataclass(frozen=True)
class _ResolveContext:
    glyph_source: GlyphSource
    descriptor: FontDescriptor
    font_encoding: FontEncoding | None
    to_unicode: dict[int, str] | None
    font_name: str

    @property
    def base_encoding(self) -> BaseEncoding | None:
        if self.font_encoding is None:
            return None
        return self.font_encoding.base


class _Resolution(NamedTuple):
    encoding: TextEncoding
    is_cid: bool


def _from_cid_to_gid_map(ctx: _ResolveContext) -> _Resolution | None:
    """CIDToGIDMap array: takes precedence over any encoding."""
    cid_to_gid = ctx.descriptor.cid_to_gid_map()
    if cid_to_gid is None:
        return None

    if len(cid_to_gid) > CID_CODE_COUNT:
        logger.debug(
            "Font %s: ignoring %d CIDToGIDMap entries beyond CID 65535",
            ctx.font_name,
            len(cid_to_gid) - CID_CODE_COUNT,
        )

    entries: dict[int, GlyphMapping] = {}
    for cid, gid in enumerate(cid_to_gid[:CID_CODE_COUNT]):
        unicode = None
        if ctx.to_unicode is not None:
            text = ctx.to_unicode.get(cid)
            if text:
                unicode = text[0]
        entries[cid] = GlyphMapping(gid, unicode)

    logger.debug("Font %s: %d CIDs from CIDToGIDMap", ctx.font_name, len(entries))
    return _Resolution(ExplicitMap(entries), True)


def _from_identity_encoding(ctx: _ResolveContext) -> _Resolution | None:
    """Identity CMap: codes are CIDs are glyph ids."""
    if ctx.base_encoding not in IDENTITY_ENCODINGS:
        return None
    return _Resolution(CID_PASSTHROUGH, True)


def _map_via_font_encoding(
    ctx: _ResolveContext,
    source: NamedEncoding,
    destination: NamedEncoding,
    entries: dict[int, GlyphMapping],
) -> bool:
    """Transcodes into the font's own encoding and looks codes up there."""
    transcoder = get_transcoder(source, destination)
    if transcoder is None:
        return False
    source_chars = forward_map(source)
    for code in range(SIMPLE_CODE_COUNT):
        codepoint = transcoder.translate(code)
        if codepoint is None:
            continue
        gid = ctx.glyph_source.glyph_for_codepoint(codepoint)
        if gid is not None:
            entries[code] = GlyphMapping(gid, source_chars.get(code))
    return True


def _map_via_unicode(
    ctx: _ResolveContext,
    source: NamedEncoding,
    entries: dict[int, GlyphMapping],
) -> bool:
    """Transcodes to Unicode and looks codes up by Unicode value."""
    transcoder = get_transcoder(source, NamedEncoding.UNICODE)
    if transcoder is None:
        return False
    for code in range(SIMPLE_CODE_COUNT):
        codepoint = transcoder.translate(code)
        if codepoint is None:
            continue
        char = chr(codepoint)
        gid = ctx.glyph_source.glyph_for_unicode(char)
        if gid is not None:
            entries[code] = GlyphMapping(gid, char)
    return True


def _map_identity(ctx: _ResolveContext, entries: dict[int, GlyphMapping]) -> None:
    """Assumes codes already are the font's own codes.

    Best-effort policy for symbolic fonts: the Unicode value is synthesized
    in the Private Use Area at U+F000 + code and carries no meaning beyond
    keeping codes distinguishable in extracted text.
    """
    for code in range(SIMPLE_CODE_COUNT):
        gid = ctx.glyph_source.glyph_for_codepoint(code)
        if gid is not None:
            entries[code] = GlyphMapping(gid, chr(PUA_SYMBOL_BASE + code))


def _apply_differences(
    ctx: _ResolveContext, entries: dict[int, GlyphMapping]
) -> None:
    """Lays /Differences over the table; they win over transcoded entries."""
    if ctx.font_encoding is None:
        return
    for code, glyph_name in sorted(ctx.font_encoding.differences.items()):
        gid = ctx.glyph_source.glyph_for_name(glyph_name)
        if gid is None:
            logger.info("Font %s: no glyph for name %s", ctx.font_name, glyph_name)
            continue
        entries[code] = GlyphMapping(
            gid, glyph_name_to_unicode_with_variants(glyph_name)
        )


def _from_simple_encoding(ctx: _ResolveContext) -> _Resolution:
    """Byte encoding: transcode, fall back to identity, then apply differences."""
    base = ctx.base_encoding
    source = SOURCE_ENCODINGS.get(base) if base is not None else None
    if source is None:
        if base in (None, BaseEncoding.NONE):
            logger.info("Font %s: no base encoding", ctx.font_name)
        else:
            logger.warning(
                "Font %s: unsupported PDF encoding %s", ctx.font_name, base.value
            )

    destination = ctx.glyph_source.native_encoding()
    logger.debug("Font %s: %s -> %s", ctx.font_name, source, destination)

    entries: dict[int, GlyphMapping] = {}
    transcoded = False
    if source is not None and destination is not None:
        transcoded = _map_via_font_encoding(ctx, source, destination, entries)
    elif source is not None:
        transcoded = _map_via_unicode(ctx, source, entries)

    if not transcoded:
        logger.warning(
            "Font %s: can't translate from text encoding %s to font encoding %s; "
            "assuming the font's own codes",
            ctx.font_name,
            base.value if base is not None else None,
            destination.value if destination is not None else None,
        )
        _map_identity(ctx, entries)

    _apply_differences(ctx, entries)

    is_cid = ctx.descriptor.is_cid()
    if not entries:
        logger.debug("Font %s: empty code table, using passthrough", ctx.font_name)
        return _Resolution(CID_PASSTHROUGH, is_cid)
    return _Resolution(ExplicitMap(entries), is_cid)


Strategy = Callable[[_ResolveContext], Union[_Resolution, None]]

RESOLUTION_STRATEGIES: tuple[Strategy, ...] = (
    _from_cid_to_gid_map,
    _from_identity_encoding,
    _from_simple_encoding,
)


def resolve_font(
    glyph_source: GlyphSource, descriptor: FontDescriptor
) -> ResolvedFont:
    """Resolves a font's encoding into a ``ResolvedFont``.

    Args:
        glyph_source: The font program.
        descriptor: The font dictionary view.

    Returns:
        The resolved font.

    Raises:
        FontStructureError: If a descriptor entry (ToUnicode, CIDToGIDMap,
            Differences, widths) is malformed.
        FontResolutionError: If the font has no name.
    """
    display_name = descriptor.name or "<unnamed>"
    ctx = _ResolveContext(
        glyph_source=glyph_source,
        descriptor=descriptor,
        font_encoding=descriptor.encoding(),
        to_unicode=descriptor.to_unicode(),
        font_name=display_name,
    )

    resolution = None
    for strategy in RESOLUTION_STRATEGIES:
        resolution = strategy(ctx)
        if resolution is not None:
            break
    if resolution is None:
        raise FontResolutionError(f"Font {display_name}: no strategy applied")

    widths = descriptor.widths()

    name = descriptor.name
    if name is None:
        raise FontResolutionError("font has no name")

    logger.debug(
        "Font %s resolved: cid=%s, encoding=%s, %d entries",
        name,
        resolution.is_cid,
        type(resolution.encoding).__name__,
        len(resolution.encoding),
    )
    return ResolvedFont(
        glyph_source=glyph_source,
        descriptor=descriptor,
        encoding=resolution.encoding,
        widths=widths,
        is_cid=resolution.is_cid,
        name=name,
    )
