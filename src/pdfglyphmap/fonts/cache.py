# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Per-document cache of resolved fonts."""

import logging
import threading
from collections.abc import Callable

import pikepdf

from ..utils import obj_key
from ..utils import resolve_indirect as _resolve
from .descriptor import PdfFontDescriptor
from .loader import load_glyph_source
from .resolver import ResolvedFont, resolve_font

logger = logging.getLogger(__name__)

FontKey = tuple[str, int, int] | tuple[str, bytes]


def resolve_pdf_font(font: pikepdf.Object) -> ResolvedFont:
    """Loads and resolves a PDF font dictionary.

    Args:
        font: A font dictionary.

    Returns:
        The resolved font.

    Raises:
        FontLoadError: If the font program is missing or unparsable.
        FontStructureError: If the font dictionary is malformed.
        FontResolutionError: If the font has no name.
    """
    font = _resolve(font)
    descriptor = PdfFontDescriptor(font)
    glyph_source = load_glyph_source(font)
    return resolve_font(glyph_source, descriptor)


class FontCache:
    """Resolves each distinct font resource of a document once.

    Indirect fonts are keyed by object number and generation. Direct font
    dictionaries have no identity of their own; pikepdf hands out a new
    wrapper on every access, so they are keyed by their serialized content.
    Failed resolutions are not cached, so the caller sees the error every
    time and may substitute a fallback.

    Args:
        resolver: Callable building a ResolvedFont from a font dictionary.
    """

    def __init__(
        self,
        resolver: Callable[[pikepdf.Object], ResolvedFont] = resolve_pdf_font,
    ) -> None:
        self._resolver = resolver
        self._fonts: dict[FontKey, ResolvedFont] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(font: pikepdf.Object) -> FontKey:
        objgen = obj_key(font)
        if objgen is not None:
            return ("obj", *objgen)
        return ("direct", bytes(font.unparse()))

    def get(self, font: pikepdf.Object) -> ResolvedFont:
        """Returns the resolved font for a font dictionary, resolving it once.

        Raises:
            FontLoadError, FontStructureError, FontResolutionError: As
                raised by the resolver; nothing is cached in that case.
        """
        font = _resolve(font)
        key = self._key(font)
        with self._lock:
            cached = self._fonts.get(key)
            if cached is not None:
                return cached
            resolved = self._resolver(font)
            self._fonts[key] = resolved
            logger.debug("Cached font %s under %s", resolved.name, key)
            return resolved

    def __contains__(self, font: pikepdf.Object) -> bool:
        with self._lock:
            return self._key(_resolve(font)) in self._fonts

    def __len__(self) -> int:
        with self._lock:
            return len(self._fonts)

    def clear(self) -> None:
        with self._lock:
            self._fonts.clear()
