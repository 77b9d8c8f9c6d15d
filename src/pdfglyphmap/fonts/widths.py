# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Glyph width tables from PDF font dictionaries."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import pikepdf
from pikepdf import Array

from ..exceptions import FontStructureError
from ..utils import resolve_indirect as _resolve
from .constants import CID_CODE_COUNT, DEFAULT_CID_WIDTH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Widths:
    """Advance widths per character code, in glyph space units (1/1000 em).

    Attributes:
        widths: Explicit widths keyed by code (simple fonts) or CID.
        default: Width for codes without an explicit entry.
    """

    widths: Mapping[int, float] = field(default_factory=dict)
    default: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "widths", MappingProxyType(dict(self.widths)))

    def width_for(self, code: int) -> float:
        """Returns the width of ``code``, falling back to the default."""
        return self.widths.get(code, self.default)

    def __len__(self) -> int:
        return len(self.widths)


def _number(value: pikepdf.Object, what: str) -> float:
    """Converts a PDF numeric object, raising FontStructureError otherwise."""
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise FontStructureError(f"{what} is not a number: {value!r}") from e


def parse_simple_widths(
    first_char: pikepdf.Object,
    widths_array: pikepdf.Object,
    missing_width: pikepdf.Object | None = None,
) -> Widths:
    """Builds a width table from /FirstChar and /Widths.

    Args:
        first_char: The /FirstChar value.
        widths_array: The /Widths array.
        missing_width: Optional /MissingWidth from the FontDescriptor.

    Returns:
        Widths keyed by character code.

    Raises:
        FontStructureError: If /Widths is not an array of numbers.
    """
    widths_array = _resolve(widths_array)
    if not isinstance(widths_array, Array):
        raise FontStructureError("/Widths is not an array")
    first = int(_number(first_char, "/FirstChar"))
    default = 0.0
    if missing_width is not None:
        default = _number(missing_width, "/MissingWidth")

    widths = {
        first + i: _number(_resolve(w), "/Widths entry")
        for i, w in enumerate(widths_array)
    }
    return Widths(widths, default)


def parse_cid_widths(
    w_array: pikepdf.Object | None,
    default_width: pikepdf.Object | None = None,
) -> Widths:
    """Builds a width table from a CIDFont /W array and /DW.

    The /W array uses two formats:
    - [cid [w1 w2 ...]] - individual widths for consecutive CIDs
    - [cid_first cid_last width] - same width for a range of CIDs

    Args:
        w_array: The /W array, or None.
        default_width: The /DW value, or None (defaults to 1000).

    Returns:
        Widths keyed by CID.

    Raises:
        FontStructureError: If the /W array is malformed.
    """
    default = DEFAULT_CID_WIDTH
    if default_width is not None:
        default = _number(default_width, "/DW")
    result: dict[int, float] = {}
    if w_array is None:
        return Widths(result, default)

    w_array = _resolve(w_array)
    if not isinstance(w_array, Array):
        raise FontStructureError("/W is not an array")

    items = [_resolve(item) for item in w_array]
    i = 0
    while i < len(items):
        start_cid = int(_number(items[i], "/W start CID"))
        if i + 1 >= len(items):
            raise FontStructureError("/W array ends after a start CID")

        next_item = items[i + 1]
        if isinstance(next_item, Array):
            for j, w in enumerate(next_item):
                cid = start_cid + j
                if 0 <= cid < CID_CODE_COUNT:
                    result[cid] = _number(_resolve(w), "/W width")
            if start_cid < 0 or start_cid + len(next_item) > CID_CODE_COUNT:
                logger.debug("Ignoring /W widths outside CIDs 0-65535")
            i += 2
        else:
            if i + 2 >= len(items):
                raise FontStructureError("/W range is missing its width")
            end_cid = int(_number(next_item, "/W end CID"))
            width = _number(items[i + 2], "/W width")
            if end_cid < start_cid:
                logger.debug("Ignoring inverted /W range %d-%d", start_cid, end_cid)
            elif start_cid < 0 or end_cid >= CID_CODE_COUNT:
                logger.debug(
                    "Clamping /W range %d-%d to CIDs 0-65535", start_cid, end_cid
                )
            first = max(start_cid, 0)
            last = min(end_cid, CID_CODE_COUNT - 1)
            for cid in range(first, last + 1):
                result[cid] = width
            i += 3

    return Widths(result, default)
