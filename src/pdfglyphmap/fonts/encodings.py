# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Named text encodings and transcoders between them.

Each byte encoding is a 256-entry vector of glyph names (PDF 1.7, Annex D).
Characters are derived from the glyph names, so every encoding has a
byte -> Unicode forward map and a Unicode -> byte reverse map. A transcoder
between two encodings goes through Unicode.
"""

import functools
import logging
from dataclasses import dataclass, field
from enum import Enum

from fontTools.encodings.StandardEncoding import StandardEncoding

from .constants import SIMPLE_CODE_COUNT
from .glyph_mapping import glyph_name_to_unicode

logger = logging.getLogger(__name__)


class NamedEncoding(Enum):
    """Encodings known to the resolver."""

    STANDARD = "StandardEncoding"
    SYMBOL = "SymbolEncoding"
    WIN_ANSI = "WinAnsiEncoding"
    MAC_ROMAN = "MacRomanEncoding"
    MAC_EXPERT = "MacExpertEncoding"
    ZAPF_DINGBATS = "ZapfDingbatsEncoding"
    UNICODE = "Unicode"

    @property
    def is_byte_encoding(self) -> bool:
        """True for encodings with a 256-entry code table."""
        return self is not NamedEncoding.UNICODE


# Vectors list eight codes per row; "-" marks an undefined code.
_WIN_ANSI_VECTOR = """
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    space exclam quotedbl numbersign dollar percent ampersand quotesingle
    parenleft parenright asterisk plus comma hyphen period slash
    zero one two three four five six seven
    eight nine colon semicolon less equal greater question
    at A B C D E F G
    H I J K L M N O
    P Q R S T U V W
    X Y Z bracketleft backslash bracketright asciicircum underscore
    grave a b c d e f g
    h i j k l m n o
    p q r s t u v w
    x y z braceleft bar braceright asciitilde bullet
    Euro bullet quotesinglbase florin quotedblbase ellipsis dagger daggerdbl
    circumflex perthousand Scaron guilsinglleft OE bullet Zcaron bullet
    bullet quoteleft quoteright quotedblleft quotedblright bullet endash emdash
    tilde trademark scaron guilsinglright oe bullet zcaron Ydieresis
    space exclamdown cent sterling currency yen brokenbar section
    dieresis copyright ordfeminine guillemotleft logicalnot hyphen registered macron
    degree plusminus twosuperior threesuperior acute mu paragraph periodcentered
    cedilla onesuperior ordmasculine guillemotright onequarter onehalf threequarters questiondown
    Agrave Aacute Acircumflex Atilde Adieresis Aring AE Ccedilla
    Egrave Eacute Ecircumflex Edieresis Igrave Iacute Icircumflex Idieresis
    Eth Ntilde Ograve Oacute Ocircumflex Otilde Odieresis multiply
    Oslash Ugrave Uacute Ucircumflex Udieresis Yacute Thorn germandbls
    agrave aacute acircumflex atilde adieresis aring ae ccedilla
    egrave eacute ecircumflex edieresis igrave iacute icircumflex idieresis
    eth ntilde ograve oacute ocircumflex otilde odieresis divide
    oslash ugrave uacute ucircumflex udieresis yacute thorn ydieresis
"""

_MAC_ROMAN_VECTOR = """
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    space exclam quotedbl numbersign dollar percent ampersand quotesingle
    parenleft parenright asterisk plus comma hyphen period slash
    zero one two three four five six seven
    eight nine colon semicolon less equal greater question
    at A B C D E F G
    H I J K L M N O
    P Q R S T U V W
    X Y Z bracketleft backslash bracketright asciicircum underscore
    grave a b c d e f g
    h i j k l m n o
    p q r s t u v w
    x y z braceleft bar braceright asciitilde -
    Adieresis Aring Ccedilla Eacute Ntilde Odieresis Udieresis aacute
    agrave acircumflex adieresis atilde aring ccedilla eacute egrave
    ecircumflex edieresis iacute igrave icircumflex idieresis ntilde oacute
    ograve ocircumflex odieresis otilde uacute ugrave ucircumflex udieresis
    dagger degree cent sterling section bullet paragraph germandbls
    registered copyright trademark acute dieresis - AE Oslash
    - plusminus - - yen mu - -
    - - - ordfeminine ordmasculine - ae oslash
    questiondown exclamdown logicalnot - florin - - guillemotleft
    guillemotright ellipsis space Agrave Atilde Otilde OE oe
    endash emdash quotedblleft quotedblright quoteleft quoteright divide -
    ydieresis Ydieresis fraction currency guilsinglleft guilsinglright fi fl
    daggerdbl periodcentered quotesinglbase quotedblbase perthousand Acircumflex Ecircumflex Aacute
    Edieresis Egrave Iacute Icircumflex Idieresis Igrave Oacute Ocircumflex
    - Ograve Uacute Ucircumflex Ugrave dotlessi circumflex tilde
    macron breve dotaccent ring cedilla hungarumlaut ogonek caron
"""

_SYMBOL_VECTOR = """
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    space exclam universal numbersign existential percent ampersand suchthat
    parenleft parenright asteriskmath plus comma minus period slash
    zero one two three four five six seven
    eight nine colon semicolon less equal greater question
    congruent Alpha Beta Chi Delta Epsilon Phi Gamma
    Eta Iota theta1 Kappa Lambda Mu Nu Omicron
    Pi Theta Rho Sigma Tau Upsilon sigma1 Omega
    Xi Psi Zeta bracketleft therefore bracketright perpendicular underscore
    radicalex alpha beta chi delta epsilon phi gamma
    eta iota phi1 kappa lambda mu nu omicron
    pi theta rho sigma tau upsilon omega1 omega
    xi psi zeta braceleft bar braceright similar -
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    Euro Upsilon1 minute lessequal fraction infinity florin club
    diamond heart spade arrowboth arrowleft arrowup arrowright arrowdown
    degree plusminus second greaterequal multiply proportional partialdiff bullet
    divide notequal equivalence approxequal ellipsis arrowvertex arrowhorizex carriagereturn
    aleph Ifraktur Rfraktur weierstrass circlemultiply circleplus emptyset intersection
    union propersuperset reflexsuperset notsubset propersubset reflexsubset element notelement
    angle gradient registerserif copyrightserif trademarkserif product radical dotmath
    logicalnot logicaland logicalor arrowdblboth arrowdblleft arrowdblup arrowdblright arrowdbldown
    lozenge angleleft registersans copyrightsans trademarksans summation parenlefttp parenleftex
    parenleftbt bracketlefttp bracketleftex bracketleftbt bracelefttp braceleftmid braceleftbt braceex
    - angleright integral integraltp integralex integralbt parenrighttp parenrightex
    parenrightbt bracketrighttp bracketrightex bracketrightbt bracerighttp bracerightmid bracerightbt -
"""

_ZAPF_DINGBATS_VECTOR = """
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    space a1 a2 a202 a3 a4 a5 a119
    a118 a117 a11 a12 a13 a14 a15 a16
    a105 a17 a18 a19 a20 a21 a22 a23
    a24 a25 a26 a27 a28 a6 a7 a8
    a9 a10 a29 a30 a31 a32 a33 a34
    a35 a36 a37 a38 a39 a40 a41 a42
    a43 a44 a45 a46 a47 a48 a49 a50
    a51 a52 a53 a54 a55 a56 a57 a58
    a59 a60 a61 a62 a63 a64 a65 a66
    a67 a68 a69 a70 a71 a72 a73 a74
    a203 a75 a204 a76 a77 a78 a79 a81
    a82 a83 a84 a97 a98 a99 a100 -
    a89 a90 a93 a94 a91 a92 a205 a85
    a206 a86 a87 a88 a95 a96 - -
    - - - - - - - -
    - - - - - - - -
    - a101 a102 a103 a104 a106 a107 a108
    a112 a111 a110 a109 a120 a121 a122 a123
    a124 a125 a126 a127 a128 a129 a130 a131
    a132 a133 a134 a135 a136 a137 a138 a139
    a140 a141 a142 a143 a144 a145 a146 a147
    a148 a149 a150 a151 a152 a153 a154 a155
    a156 a157 a158 a159 a160 a161 a163 a164
    a196 a165 a192 a166 a167 a168 a169 a170
    a171 a172 a173 a162 a174 a175 a176 a177
    a178 a179 a193 a180 a199 a181 a200 a182
    - a201 a183 a184 a197 a185 a194 a198
    a186 a195 a187 a188 a189 a190 a191 -
"""

_MAC_EXPERT_VECTOR = """
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    - - - - - - - -
    space exclamsmall Hungarumlautsmall centoldstyle dollaroldstyle dollarsuperior ampersandsmall Acutesmall
    parenleftsuperior parenrightsuperior twodotenleader onedotenleader comma hyphen period fraction
    zerooldstyle oneoldstyle twooldstyle threeoldstyle fouroldstyle fiveoldstyle sixoldstyle sevenoldstyle
    eightoldstyle nineoldstyle colon semicolon - threequartersemdash - questionsmall
    - - - - Ethsmall - - onequarter
    onehalf threequarters oneeighth threeeighths fiveeighths seveneighths onethird twothirds
    - - - - - - ff fi
    fl ffi ffl parenleftinferior - parenrightinferior Circumflexsmall hypheninferior
    Gravesmall Asmall Bsmall Csmall Dsmall Esmall Fsmall Gsmall
    Hsmall Ismall Jsmall Ksmall Lsmall Msmall Nsmall Osmall
    Psmall Qsmall Rsmall Ssmall Tsmall Usmall Vsmall Wsmall
    Xsmall Ysmall Zsmall colonmonetary onefitted rupiah Tildesmall -
    - asuperior centsuperior - - - - Aacutesmall
    Agravesmall Acircumflexsmall Adieresissmall Atildesmall Aringsmall Ccedillasmall Eacutesmall Egravesmall
    Ecircumflexsmall Edieresissmall Iacutesmall Igravesmall Icircumflexsmall Idieresissmall Ntildesmall Oacutesmall
    Ogravesmall Ocircumflexsmall Odieresissmall Otildesmall Uacutesmall Ugravesmall Ucircumflexsmall Udieresissmall
    - eightsuperior fourinferior threeinferior sixinferior eightinferior seveninferior Scaronsmall
    - centinferior twoinferior - Dieresissmall - Caronsmall osuperior
    fiveinferior - commainferior periodinferior Yacutesmall - dollarinferior -
    - Thornsmall - nineinferior zeroinferior Zcaronsmall AEsmall Oslashsmall
    questiondownsmall oneinferior Lslashsmall - - - - -
    - Cedillasmall - - - - - OEsmall
    figuredash hyphensuperior - - - - exclamdownsmall -
    Ydieresissmall - onesuperior twosuperior threesuperior foursuperior fivesuperior sixsuperior
    sevensuperior ninesuperior zerosuperior - esuperior rsuperior tsuperior -
    - isuperior ssuperior dsuperior - - - -
    - lsuperior Ogoneksmall Brevesmall Macronsmall bsuperior nsuperior msuperior
    commasuperior periodsuperior Dotaccentsmall Ringsmall - - - -
"""


def _parse_vector(vector: str) -> dict[int, str]:
    """Turns a whitespace-separated glyph name vector into code -> name."""
    names = vector.split()
    if len(names) != SIMPLE_CODE_COUNT:
        raise ValueError(f"Encoding vector has {len(names)} entries, expected 256")
    return {code: name for code, name in enumerate(names) if name != "-"}


STANDARD_ENCODING: dict[int, str] = {
    code: name for code, name in enumerate(StandardEncoding) if name != ".notdef"
}
WIN_ANSI_ENCODING = _parse_vector(_WIN_ANSI_VECTOR)
MAC_ROMAN_ENCODING = _parse_vector(_MAC_ROMAN_VECTOR)
SYMBOL_ENCODING = _parse_vector(_SYMBOL_VECTOR)
ZAPFDINGBATS_ENCODING = _parse_vector(_ZAPF_DINGBATS_VECTOR)
MAC_EXPERT_ENCODING = _parse_vector(_MAC_EXPERT_VECTOR)

_ENCODING_VECTORS: dict[NamedEncoding, dict[int, str]] = {
    NamedEncoding.STANDARD: STANDARD_ENCODING,
    NamedEncoding.SYMBOL: SYMBOL_ENCODING,
    NamedEncoding.WIN_ANSI: WIN_ANSI_ENCODING,
    NamedEncoding.MAC_ROMAN: MAC_ROMAN_ENCODING,
    NamedEncoding.MAC_EXPERT: MAC_EXPERT_ENCODING,
    NamedEncoding.ZAPF_DINGBATS: ZAPFDINGBATS_ENCODING,
}


def encoding_vector(encoding: NamedEncoding) -> dict[int, str] | None:
    """Returns the code -> glyph name table of a byte encoding.

    Args:
        encoding: The named encoding.

    Returns:
        Mapping of codes 0-255 to glyph names, or None for UNICODE.
    """
    return _ENCODING_VECTORS.get(encoding)


@functools.cache
def forward_map(encoding: NamedEncoding) -> dict[int, str]:
    """Returns the byte -> Unicode character table of a byte encoding.

    Codes whose glyph name has no Unicode value are left out.

    Args:
        encoding: A byte encoding.

    Returns:
        Mapping of codes to one-character strings (empty for UNICODE).
    """
    vector = encoding_vector(encoding)
    if vector is None:
        return {}
    result: dict[int, str] = {}
    for code, glyph_name in vector.items():
        unicode = glyph_name_to_unicode(glyph_name)
        if unicode is not None:
            result[code] = unicode
    return result


@functools.cache
def reverse_map(encoding: NamedEncoding) -> dict[int, int]:
    """Returns the Unicode codepoint -> byte table of a byte encoding.

    A codepoint reachable from several codes maps to the lowest one.

    Args:
        encoding: A byte encoding.

    Returns:
        Mapping of codepoints to codes (empty for UNICODE).
    """
    result: dict[int, int] = {}
    for code, char in sorted(forward_map(encoding).items()):
        result.setdefault(ord(char), code)
    return result


@dataclass(frozen=True)
class Transcoder:
    """Converts codes of one named encoding into codepoints of another.

    Attributes:
        source: Encoding of the input codes.
        destination: Encoding of the output codepoints.
        table: Precomputed code -> codepoint conversions.
    """

    source: NamedEncoding
    destination: NamedEncoding
    table: dict[int, int] = field(repr=False)

    def translate(self, code: int) -> int | None:
        """Returns the destination codepoint for ``code``, or None."""
        return self.table.get(code)

    def __len__(self) -> int:
        return len(self.table)


@functools.cache
def get_transcoder(
    source: NamedEncoding, destination: NamedEncoding
) -> Transcoder | None:
    """Builds a transcoder from ``source`` codes to ``destination`` codepoints.

    For ``destination`` UNICODE the output is a Unicode codepoint. For a byte
    destination the output is the destination's code for the same character.

    Args:
        source: A byte encoding.
        destination: Any named encoding.

    Returns:
        The transcoder, or None if ``source`` is not a byte encoding or the
        two encodings have no character in common.
    """
    if not source.is_byte_encoding:
        return None

    forward = forward_map(source)
    if destination is NamedEncoding.UNICODE:
        table = {code: ord(char) for code, char in forward.items()}
    else:
        reverse = reverse_map(destination)
        table = {}
        for code, char in forward.items():
            target = reverse.get(ord(char))
            if target is not None:
                table[code] = target

    if not table:
        logger.debug("No common characters between %s and %s", source, destination)
        return None
    return Transcoder(source, destination, table)
