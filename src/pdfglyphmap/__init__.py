# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""pdfglyphmap - Map PDF character codes to font glyphs and Unicode."""

from importlib.metadata import PackageNotFoundError, version

from .exceptions import (
    FontLoadError,
    FontResolutionError,
    FontStructureError,
    PdfGlyphMapError,
)
from .fonts import (
    CidPassthrough,
    ExplicitMap,
    FontCache,
    GlyphMapping,
    ResolvedFont,
    iter_page_fonts,
    resolve_font,
    resolve_pdf_font,
)

try:
    __version__ = version("pdfglyphmap")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "__version__",
    "resolve_font",
    "resolve_pdf_font",
    "iter_page_fonts",
    "FontCache",
    "ResolvedFont",
    "CidPassthrough",
    "ExplicitMap",
    "GlyphMapping",
    "PdfGlyphMapError",
    "FontResolutionError",
    "FontStructureError",
    "FontLoadError",
]
