# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Parsing of ToUnicode CMaps and CIDToGIDMap streams."""

import logging
import re

from ..exceptions import FontStructureError

logger = logging.getLogger(__name__)

_BFCHAR_PATTERN = re.compile(r"beginbfchar\s*(.*?)\s*endbfchar", re.DOTALL)
_BFRANGE_PATTERN = re.compile(r"beginbfrange\s*(.*?)\s*endbfrange", re.DOTALL)
_CHAR_ENTRY_PATTERN = re.compile(r"<([0-9A-Fa-f\s]+)>\s*<([0-9A-Fa-f\s]*)>")
_RANGE_TOKEN_PATTERN = re.compile(r"<([0-9A-Fa-f\s]*)>|(\[)|(\])")

# bfrange entries wider than this are treated as garbage
_MAX_RANGE_SPAN = 0x10000


def decode_unicode_hex(hex_str: str) -> str:
    """Decodes a CMap destination string (UTF-16BE hex) to text.

    Args:
        hex_str: Hex digits such as "0041", "00660069" or "D83DDE00".

    Returns:
        Decoded text; may be empty or longer than one character.

    Raises:
        ValueError: If the hex string is not valid hex.
    """
    digits = "".join(hex_str.split())
    if len(digits) <= 2:
        return chr(int(digits, 16)) if digits else ""
    if len(digits) % 4:
        digits = "0" * (4 - len(digits) % 4) + digits
    return bytes.fromhex(digits).decode("utf-16-be", errors="replace")


def _increment_last_char(text: str, offset: int) -> str:
    """Returns ``text`` with its last character advanced by ``offset``."""
    if not text:
        return text
    last = ord(text[-1]) + offset
    if last > 0x10FFFF:
        raise ValueError("bfrange destination out of Unicode range")
    return text[:-1] + chr(last)


def _parse_bfrange_block(block: str, code_to_unicode: dict[int, str]) -> None:
    """Adds the entries of one bfrange block to ``code_to_unicode``.

    Handles both ``<start> <end> <dst>`` and ``<start> <end> [<d1> ...]``.
    """
    tokens: list[str | list[str]] = []
    array: list[str] | None = None
    for hex_value, open_bracket, close_bracket in _RANGE_TOKEN_PATTERN.findall(
        block
    ):
        if open_bracket:
            array = []
        elif close_bracket:
            if array is not None:
                tokens.append(array)
            array = None
        elif array is not None:
            array.append(hex_value)
        else:
            tokens.append(hex_value)

    for i in range(0, len(tokens) - 2, 3):
        start_hex, end_hex, destination = tokens[i : i + 3]
        try:
            if not isinstance(start_hex, str) or not isinstance(end_hex, str):
                raise ValueError("bfrange bounds must be hex strings")
            start_code = int("".join(start_hex.split()), 16)
            end_code = int("".join(end_hex.split()), 16)
            span = end_code - start_code
            if not 0 <= span < _MAX_RANGE_SPAN:
                raise ValueError(f"bfrange span {span} out of bounds")
            if isinstance(destination, list):
                for offset, elem_hex in enumerate(destination[: span + 1]):
                    code_to_unicode[start_code + offset] = decode_unicode_hex(
                        elem_hex
                    )
            else:
                first = decode_unicode_hex(destination)
                for offset in range(span + 1):
                    code_to_unicode[start_code + offset] = _increment_last_char(
                        first, offset
                    )
        except ValueError as e:
            logger.debug("Skipping bfrange entry %d: %s", i // 3, e)


def parse_tounicode_cmap(data: bytes) -> dict[int, str]:
    """Parses a ToUnicode CMap stream into a code-to-text mapping.

    Extracts entries from beginbfchar/endbfchar and beginbfrange/endbfrange
    blocks. Entries with unparsable values are skipped.

    Args:
        data: Raw (decoded) CMap stream bytes.

    Returns:
        Dictionary mapping character codes to Unicode strings.
    """
    code_to_unicode: dict[int, str] = {}
    text = data.decode("latin-1")

    for block_match in _BFCHAR_PATTERN.finditer(text):
        for entry_match in _CHAR_ENTRY_PATTERN.finditer(block_match.group(1)):
            try:
                code = int("".join(entry_match.group(1).split()), 16)
                code_to_unicode[code] = decode_unicode_hex(entry_match.group(2))
            except ValueError:
                logger.debug("Skipping bfchar entry %r", entry_match.group(0))

    for block_match in _BFRANGE_PATTERN.finditer(text):
        _parse_bfrange_block(block_match.group(1), code_to_unicode)

    return code_to_unicode


def parse_cidtogidmap_stream(stream_data: bytes) -> list[int]:
    """Parses a CIDToGIDMap stream into a GID list indexed by CID.

    The stream contains 2-byte big-endian GID values; CID 0 is the first
    pair of bytes, CID 1 the next, and so on.

    Args:
        stream_data: Raw bytes of the CIDToGIDMap stream.

    Returns:
        List where index ``cid`` holds the glyph id for that CID.

    Raises:
        FontStructureError: If the stream length is odd.
    """
    if len(stream_data) % 2 != 0:
        raise FontStructureError(
            f"CIDToGIDMap stream has odd length {len(stream_data)}"
        )
    return [
        (stream_data[i] << 8) | stream_data[i + 1]
        for i in range(0, len(stream_data), 2)
    ]
