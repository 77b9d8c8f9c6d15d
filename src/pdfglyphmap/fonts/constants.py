# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Font constants shared by the resolver and its collaborators."""

# Simple (byte) fonts address codes 0-255
SIMPLE_CODE_COUNT = 256

# CID-keyed fonts address codes 0-65535
CID_CODE_COUNT = 0x10000

# Synthetic Unicode base for symbolic fonts whose codes have no known meaning
PUA_SYMBOL_BASE = 0xF000

# Windows symbol cmaps (3,0) place byte codes at U+F000-U+F0FF
SYMBOL_CMAP_RANGE = range(0xF000, 0xF100)

# Default glyph width for CIDFonts without /DW (PDF 1.7, Table 117)
DEFAULT_CID_WIDTH = 1000.0

# Names of the font file streams in a FontDescriptor, in lookup order
FONT_FILE_KEYS = ("/FontFile2", "/FontFile3", "/FontFile")

