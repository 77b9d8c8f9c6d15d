# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Glyph name to Unicode lookup.

The Adobe Glyph List (via fontTools) covers the names used by the Latin
text encodings. Symbol and ZapfDingbats use names that the AGL either lacks
(``a1``-``a206``) or maps differently, so both get extension tables here.
"""

import logging

from fontTools.agl import AGL2UV

logger = logging.getLogger(__name__)

# Unicode values that never make sense as extracted text
INVALID_UNICODE_VALUES = frozenset({0x0000, 0xFEFF, 0xFFFE})

_SURROGATE_RANGE = range(0xD800, 0xE000)

# ZapfDingbats: Adobe glyph names (a1-a206) -> Unicode codepoints
ZAPFDINGBATS_GLYPH_TO_UNICODE: dict[str, int | None] = {
    "space": 0x0020, "a1": 0x2701, "a2": 0x2702, "a3": 0x2704, "a4": 0x260E,
    "a5": 0x2706, "a6": 0x2709, "a7": 0x275B, "a8": 0x275C, "a9": 0x275D,
    "a10": 0x275E, "a11": 0x2761, "a12": 0x2762, "a13": 0x2763, "a14": 0x2764,
    "a15": 0x2765, "a16": 0x2766, "a17": 0x2767, "a18": 0x2663, "a19": 0x2666,
    "a20": 0x2665, "a21": 0x2660, "a22": 0x2460, "a23": 0x2461, "a24": 0x2462,
    "a25": 0x2463, "a26": 0x2464, "a27": 0x2465, "a28": 0x2466, "a29": 0x2467,
    "a30": 0x2468, "a31": 0x2469, "a32": 0x2776, "a33": 0x2777, "a34": 0x2778,
    "a35": 0x2779, "a36": 0x277A, "a37": 0x277B, "a38": 0x277C, "a39": 0x277D,
    "a40": 0x277E, "a41": 0x277F, "a42": 0x2780, "a43": 0x2781, "a44": 0x2782,
    "a45": 0x2783, "a46": 0x2784, "a47": 0x2785, "a48": 0x2786, "a49": 0x2787,
    "a50": 0x2788, "a51": 0x2789, "a52": 0x278A, "a53": 0x278B, "a54": 0x278C,
    "a55": 0x278D, "a56": 0x278E, "a57": 0x278F, "a58": 0x2790, "a59": 0x2791,
    "a60": 0x2792, "a61": 0x2793, "a62": 0x2794, "a63": 0x2192, "a64": 0x27A3,
    "a65": 0x2195, "a66": 0x2799, "a67": 0x279B, "a68": 0x279C, "a69": 0x279D,
    "a70": 0x279E, "a71": 0x279F, "a72": 0x27A0, "a73": 0x27A1, "a74": 0x27A2,
    "a75": 0x27A4, "a76": 0x27A5, "a77": 0x27A6, "a78": 0x27A7, "a79": 0x27A8,
    "a81": 0x27A9, "a82": 0x27AA, "a83": 0x27AB, "a84": 0x27AC, "a85": 0x27AD,
    "a86": 0x27AE, "a87": 0x27AF, "a88": 0x27B1, "a89": 0x27B2, "a90": 0x27B3,
    "a91": 0x27B4, "a92": 0x27B5, "a93": 0x27B6, "a94": 0x27B7, "a95": 0x27B8,
    "a96": 0x27B9, "a97": 0x27BA, "a98": 0x27BB, "a99": 0x27BC, "a100": 0x27BD,
    "a101": 0x27BE, "a102": 0x279A, "a103": 0x27B0, "a104": 0x27BF, "a105": 0x2768,
    "a106": 0x2769, "a107": 0x276A, "a108": 0x276B, "a109": 0x276C, "a110": 0x276D,
    "a111": 0x276E, "a112": 0x276F, "a117": 0x2770, "a118": 0x2771, "a119": 0x2772,
    "a120": 0x2773, "a121": 0x2774, "a122": 0x2775, "a123": 0x2761, "a124": 0x2022,
    "a125": 0x25CF, "a126": 0x274D, "a127": 0x25A0, "a128": 0x274F, "a129": 0x2750,
    "a130": 0x2751, "a131": 0x2752, "a132": 0x25B2, "a133": 0x25BC, "a134": 0x25C6,
    "a135": 0x2756, "a136": 0x25D7, "a137": 0x2758, "a138": 0x2759, "a139": 0x275A,
    "a140": 0x2762, "a141": 0x2767, "a142": 0x2639, "a143": 0x263A, "a144": 0x263B,
    "a145": 0x2620, "a146": 0x2625, "a147": 0x262F, "a148": 0x2638, "a149": 0x2648,
    "a150": 0x2649, "a151": 0x264A, "a152": 0x264B, "a153": 0x264C, "a154": 0x264D,
    "a155": 0x264E, "a156": 0x264F, "a157": 0x2650, "a158": 0x2651, "a159": 0x2652,
    "a160": 0x2653, "a161": 0x2660, "a162": 0x2663, "a163": 0x2665, "a164": 0x2666,
    "a165": 0x2667, "a166": 0x2664, "a167": 0x2661, "a168": 0x2662, "a169": 0x2721,
    "a170": 0x261B, "a171": 0x261E, "a172": 0x270C, "a173": 0x270D, "a174": 0x270E,
    "a175": 0x270F, "a176": 0x2710, "a177": 0x2711, "a178": 0x2712, "a179": 0x2713,
    "a180": 0x2714, "a181": 0x2715, "a182": 0x2716, "a183": 0x2717, "a184": 0x2718,
    "a185": 0x2719, "a186": 0x271A, "a187": 0x271B, "a188": 0x271C, "a189": 0x271D,
    "a190": 0x271E, "a191": 0x271F, "a192": 0x2720, "a193": 0x2721, "a194": 0x2722,
    "a195": 0x2723, "a196": 0x2724, "a197": 0x2725, "a198": 0x2726, "a199": 0x2727,
    "a200": 0x2605, "a201": 0x2729, "a202": 0x2703, "a203": 0x272A, "a204": 0x272B,
    "a205": 0x272C, "a206": 0x272D,
}

# Symbol font: names the AGL maps into the Private Use Area (or not at all).
# Checked before the AGL so bracket pieces and serif/sans variants extract
# as real characters. Construction-only glyphs map to None.
SYMBOL_GLYPH_TO_UNICODE: dict[str, int | None] = {
    "radicalex": None,
    "arrowvertex": None,
    "integralex": None,
    "arrowhorizex": 0x23AF,
    "registerserif": 0x00AE,
    "copyrightserif": 0x00A9,
    "trademarkserif": 0x2122,
    "registersans": 0x00AE,
    "copyrightsans": 0x00A9,
    "trademarksans": 0x2122,
    "parenlefttp": 0x239B,
    "parenleftex": 0x239C,
    "parenleftbt": 0x239D,
    "parenrighttp": 0x239E,
    "parenrightex": 0x239F,
    "parenrightbt": 0x23A0,
    "bracketlefttp": 0x23A1,
    "bracketleftex": 0x23A2,
    "bracketleftbt": 0x23A3,
    "bracketrighttp": 0x23A4,
    "bracketrightex": 0x23A5,
    "bracketrightbt": 0x23A6,
    "bracelefttp": 0x23A7,
    "braceleftmid": 0x23A8,
    "braceleftbt": 0x23A9,
    "braceex": 0x23AA,
    "bracerighttp": 0x23AB,
    "bracerightmid": 0x23AC,
    "bracerightbt": 0x23AD,
}


def is_invalid_unicode(value: int) -> bool:
    """Return True if a codepoint is not usable as extracted text."""
    return value in INVALID_UNICODE_VALUES or value in _SURROGATE_RANGE


def _parse_uni_name(glyph_name: str) -> int | None:
    """Decodes ``uniXXXX`` and ``uXXXX``/``uXXXXXX`` glyph names."""
    if glyph_name.startswith("uni") and len(glyph_name) == 7:
        digits = glyph_name[3:]
    elif glyph_name.startswith("u") and len(glyph_name) in (5, 6, 7):
        digits = glyph_name[1:]
    else:
        return None
    try:
        value = int(digits, 16)
    except ValueError:
        return None
    if value > 0x10FFFF:
        return None
    return value


def glyph_name_to_codepoint(glyph_name: str) -> int | None:
    """Resolves a glyph name to a Unicode codepoint.

    Lookup order:
    1. Symbol font overrides
    2. Adobe Glyph List (AGL2UV)
    3. ZapfDingbats names (a1-a206)
    4. ``uniXXXX`` / ``uXXXX`` naming conventions

    Args:
        glyph_name: Glyph name without a leading slash.

    Returns:
        Unicode codepoint, or None if the name has no usable Unicode value
        (unknown name, construction glyph, or a forbidden codepoint).
    """
    if glyph_name in SYMBOL_GLYPH_TO_UNICODE:
        value = SYMBOL_GLYPH_TO_UNICODE[glyph_name]
    elif glyph_name in AGL2UV:
        value = AGL2UV[glyph_name]
    elif glyph_name in ZAPFDINGBATS_GLYPH_TO_UNICODE:
        value = ZAPFDINGBATS_GLYPH_TO_UNICODE[glyph_name]
    else:
        value = _parse_uni_name(glyph_name)

    if value is None or is_invalid_unicode(value):
        return None
    return value


def glyph_name_to_unicode(glyph_name: str) -> str | None:
    """Resolves a glyph name to a single Unicode character.

    Args:
        glyph_name: Glyph name without a leading slash.

    Returns:
        One-character string, or None if the name cannot be resolved.
    """
    value = glyph_name_to_codepoint(glyph_name)
    if value is None:
        return None
    return chr(value)


def glyph_name_to_unicode_with_variants(glyph_name: str) -> str | None:
    """Resolves a glyph name, retrying without a ``.suffix`` variant marker.

    Names such as ``a.sc`` or ``f_f.liga`` carry a variant suffix after the
    first period. When the full name does not resolve, the part before the
    first ``.`` is looked up instead.

    Args:
        glyph_name: Glyph name without a leading slash.

    Returns:
        One-character string, or None if neither form resolves.
    """
    unicode = glyph_name_to_unicode(glyph_name)
    if unicode is None and "." in glyph_name:
        base_name = glyph_name.split(".", 1)[0]
        if base_name:
            unicode = glyph_name_to_unicode(base_name)
    if unicode is None:
        logger.debug("No Unicode value for glyph name %s", glyph_name)
    return unicode
