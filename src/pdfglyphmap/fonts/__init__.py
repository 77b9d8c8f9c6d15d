# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Font encoding resolution for PDF text."""

from .cache import FontCache, resolve_pdf_font
from .descriptor import (
    BaseEncoding,
    FontDescriptor,
    FontEncoding,
    PdfFontDescriptor,
)
from .encodings import NamedEncoding, Transcoder, get_transcoder
from .glyph_source import (
    GlyphSource,
    OpenTypeGlyphSource,
    Type1GlyphSource,
    open_glyph_source,
)
from .loader import load_glyph_source
from .resolver import (
    CID_PASSTHROUGH,
    CidPassthrough,
    ExplicitMap,
    GlyphMapping,
    ResolvedFont,
    TextEncoding,
    resolve_font,
)
from .traversal import iter_page_fonts
from .widths import Widths

__all__ = [
    # Resolver
    "CID_PASSTHROUGH",
    "CidPassthrough",
    "ExplicitMap",
    "GlyphMapping",
    "ResolvedFont",
    "TextEncoding",
    "resolve_font",
    # Descriptor
    "BaseEncoding",
    "FontDescriptor",
    "FontEncoding",
    "PdfFontDescriptor",
    "Widths",
    # Encodings
    "NamedEncoding",
    "Transcoder",
    "get_transcoder",
    # Glyph sources
    "GlyphSource",
    "OpenTypeGlyphSource",
    "Type1GlyphSource",
    "open_glyph_source",
    "load_glyph_source",
    # Documents
    "FontCache",
    "iter_page_fonts",
    "resolve_pdf_font",
]
