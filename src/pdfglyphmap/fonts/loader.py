# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Loading of embedded font programs from PDF font dictionaries."""

import logging

import pikepdf
from pikepdf import Array, Dictionary, Stream

from ..exceptions import FontLoadError
from ..utils import resolve_indirect as _resolve
from ..utils import safe_str as _safe_str
from .constants import FONT_FILE_KEYS
from .glyph_source import GlyphSource, open_glyph_source

logger = logging.getLogger(__name__)


def get_font_descriptor(font: pikepdf.Object) -> Dictionary | None:
    """Returns the /FontDescriptor of a font, looking through Type0 fonts.

    Args:
        font: A font dictionary.

    Returns:
        The FontDescriptor dictionary, or None if there is none.
    """
    font = _resolve(font)
    if _safe_str(font.get("/Subtype", b"")) == "/Type0":
        descendants = _resolve(font.get("/DescendantFonts"))
        if not isinstance(descendants, Array) or len(descendants) == 0:
            return None
        font = _resolve(descendants[0])
        if not isinstance(font, Dictionary):
            return None

    fd = _resolve(font.get("/FontDescriptor"))
    if isinstance(fd, Dictionary):
        return fd
    return None


def find_font_file(
    font: pikepdf.Object,
) -> tuple[str, Stream] | None:
    """Finds the embedded font file stream of a font.

    Args:
        font: A font dictionary.

    Returns:
        Tuple of (font file key, stream), or None if the font is not embedded.
    """
    fd = get_font_descriptor(font)
    if fd is None:
        return None
    for key in FONT_FILE_KEYS:
        stream = _resolve(fd.get(key))
        if isinstance(stream, Stream):
            return key, stream
    return None


def load_glyph_source(font: pikepdf.Object) -> GlyphSource:
    """Parses the embedded font program of a PDF font.

    Args:
        font: A font dictionary.

    Returns:
        A glyph source for the embedded font program.

    Raises:
        FontLoadError: If the font is not embedded or its program cannot be
            read or parsed.
    """
    font = _resolve(font)
    font_name = _safe_str(font.get("/BaseFont", b""), "").lstrip("/")

    found = find_font_file(font)
    if found is None:
        raise FontLoadError(f"Font {font_name or '<unnamed>'} is not embedded")
    key, stream = found

    try:
        font_data = bytes(stream.read_bytes())
    except Exception as e:
        raise FontLoadError(
            f"Cannot decode {key} stream of font {font_name}: {e}"
        ) from e

    subtype = None
    if stream.get("/Subtype") is not None:
        subtype = _safe_str(stream["/Subtype"])

    logger.debug(
        "Loading %s (%s, %d bytes) of font %s",
        key,
        subtype or "no subtype",
        len(font_data),
        font_name,
    )
    return open_glyph_source(font_data, key, subtype, font_name)
