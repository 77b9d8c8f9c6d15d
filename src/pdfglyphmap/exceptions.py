# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Custom exceptions for pdfglyphmap."""


class PdfGlyphMapError(Exception):
    """Base exception for all pdfglyphmap errors."""


class FontResolutionError(PdfGlyphMapError):
    """A resolved font could not be constructed."""


class FontStructureError(PdfGlyphMapError):
    """A font dictionary entry is malformed."""


class FontLoadError(PdfGlyphMapError):
    """The font program is missing or cannot be parsed."""
