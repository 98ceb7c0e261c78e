"""Character set lookup and conversion of text into UTF-8."""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass
from typing import BinaryIO, Dict, Optional, Tuple, Union

UTF8 = "utf-8"


class UnsupportedCharsetError(ValueError):
    """Raised when a charset label is not known."""

    def __init__(self, charset: str) -> None:
        super().__init__(f'unsupported charset "{charset}"')
        self.charset = charset


class _UserDefinedDecoder(codecs.IncrementalDecoder):
    """x-user-defined: high bytes map into the private use area at U+F780."""

    def decode(self, input: bytes, final: bool = False) -> str:
        return "".join(chr(b) if b < 0x80 else chr(0xF780 + b - 0x80) for b in input)


class _ReplacementDecoder(codecs.IncrementalDecoder):
    """Decodes any non-empty input to a single replacement character."""

    def __init__(self, errors: str = "strict") -> None:
        super().__init__(errors)
        self._emitted = False

    def decode(self, input: bytes, final: bool = False) -> str:
        if input and not self._emitted:
            self._emitted = True
            return "\ufffd"
        return ""

    def reset(self) -> None:
        self._emitted = False


_CUSTOM_DECODERS = {
    "x-user-defined": _UserDefinedDecoder,
    "replacement": _ReplacementDecoder,
}

# Canonical name -> Python codec (None means bytes pass through unchanged).
_CODECS: Dict[str, Optional[str]] = {
    "utf-8": None,
    "utf-7": "utf-7",
    "ibm866": "cp866",
    "iso-8859-1": "latin-1",
    "iso-8859-2": "iso8859_2",
    "iso-8859-3": "iso8859_3",
    "iso-8859-4": "iso8859_4",
    "iso-8859-5": "iso8859_5",
    "iso-8859-6": "iso8859_6",
    "iso-8859-7": "iso8859_7",
    "iso-8859-8": "iso8859_8",
    "iso-8859-8-i": "iso8859_8",
    "iso-8859-10": "iso8859_10",
    "iso-8859-13": "iso8859_13",
    "iso-8859-14": "iso8859_14",
    "iso-8859-15": "iso8859_15",
    "iso-8859-16": "iso8859_16",
    "koi8-r": "koi8_r",
    "koi8-u": "koi8_u",
    "macintosh": "mac_roman",
    "windows-874": "cp874",
    "windows-1250": "cp1250",
    "windows-1251": "cp1251",
    "windows-1252": "cp1252",
    "windows-1253": "cp1253",
    "windows-1254": "cp1254",
    "windows-1255": "cp1255",
    "windows-1256": "cp1256",
    "windows-1257": "cp1257",
    "windows-1258": "cp1258",
    "x-mac-cyrillic": "mac_cyrillic",
    "gbk": "gbk",
    "gb18030": "gb18030",
    "hz-gb-2312": "hz",
    "big5": "big5",
    "euc-jp": "euc_jp",
    "iso-2022-jp": "iso2022_jp",
    "shift_jis": "cp932",
    "euc-kr": "cp949",
    "replacement": "replacement",
    "utf-16be": "utf-16-be",
    "utf-16le": "utf-16-le",
    "x-user-defined": "x-user-defined",
    "cp850": "cp850",
}

_ALIASES_BY_NAME: Dict[str, Tuple[str, ...]] = {
    "utf-8": ("unicode-1-1-utf-8", "utf-8", "utf8", "utf8mb4"),
    "utf-7": ("utf-7", "utf7"),
    "ibm866": ("866", "cp866", "csibm866", "ibm866"),
    "iso-8859-2": (
        "csisolatin2", "iso-8859-2", "iso-ir-101", "iso8859-2", "iso88592",
        "iso_8859-2", "iso_8859-2:1987", "l2", "latin2", "8859-2", "8859_2",
    ),
    "iso-8859-3": (
        "csisolatin3", "iso-8859-3", "iso-ir-109", "iso8859-3", "iso88593",
        "iso_8859-3", "iso_8859-3:1988", "l3", "latin3", "8859-3", "8859_3",
    ),
    "iso-8859-4": (
        "csisolatin4", "iso-8859-4", "iso-ir-110", "iso8859-4", "iso88594",
        "iso_8859-4", "iso_8859-4:1988", "l4", "latin4", "8859-4", "8859_4",
    ),
    "iso-8859-5": (
        "csisolatincyrillic", "cyrillic", "iso-8859-5", "iso-ir-144", "iso8859-5",
        "iso88595", "iso_8859-5", "iso_8859-5:1988", "8859-5", "8859_5",
    ),
    "iso-8859-6": (
        "arabic", "asmo-708", "csiso88596e", "csiso88596i", "csisolatinarabic",
        "ecma-114", "iso-8859-6", "iso-8859-6-e", "iso-8859-6-i", "iso-ir-127",
        "iso8859-6", "iso88596", "iso_8859-6", "iso_8859-6:1987", "8859-6", "8859_6",
    ),
    "iso-8859-7": (
        "csisolatingreek", "ecma-118", "elot_928", "greek", "greek8", "iso-8859-7",
        "iso-ir-126", "iso8859-7", "iso88597", "iso_8859-7", "iso_8859-7:1987",
        "sun_eu_greek", "8859-7", "8859_7",
    ),
    "iso-8859-8": (
        "csiso88598e", "csisolatinhebrew", "hebrew", "iso-8859-8", "iso-8859-8-e",
        "iso-ir-138", "iso8859-8", "iso88598", "iso_8859-8", "iso_8859-8:1988",
        "visual", "8859-8", "8859_8",
    ),
    "iso-8859-8-i": ("csiso88598i", "iso-8859-8-i", "logical"),
    "iso-8859-10": (
        "csisolatin6", "iso-8859-10", "iso-ir-157", "iso8859-10", "iso885910",
        "l6", "latin6", "8859-10", "8859_10",
    ),
    "iso-8859-13": ("iso-8859-13", "iso8859-13", "iso885913", "8859-13", "8859_13"),
    "iso-8859-14": ("iso-8859-14", "iso8859-14", "iso885914", "8859-14", "8859_14"),
    "iso-8859-15": (
        "csisolatin9", "iso-8859-15", "iso8859-15", "iso885915", "iso_8859-15",
        "l9", "8859-15", "8859_15",
    ),
    "iso-8859-16": ("iso-8859-16", "8859-16", "8859_16"),
    "koi8-r": ("cskoi8r", "koi", "koi8", "koi8-r", "koi8_r"),
    "koi8-u": ("koi8-u",),
    "macintosh": ("csmacintosh", "mac", "macintosh", "x-mac-roman"),
    "windows-874": (
        "dos-874", "iso-8859-11", "iso8859-11", "iso885911", "tis-620", "windows-874",
    ),
    "windows-1250": ("cp1250", "windows-1250", "x-cp1250", "238"),
    "windows-1251": ("cp1251", "windows-1251", "x-cp1251"),
    "windows-1252": (
        "ansi_x3.4-1968", "ascii", "cp1252", "cp819", "csisolatin1", "ibm819",
        "iso-ir-100", "l1", "latin1", "us-ascii", "windows-1252", "x-cp1252",
        "iso646-us", "iso: western", "we8iso8859p1", "8859-1", "8859_1",
    ),
    "iso-8859-1": (
        "iso-8859-1", "iso8859-1", "iso8859_1", "iso88591", "iso_8859-1",
        "iso_8859-1:1987",
    ),
    "windows-1253": ("cp1253", "windows-1253", "x-cp1253"),
    "windows-1254": (
        "cp1254", "csisolatin5", "iso-8859-9", "iso-ir-148", "iso8859-9", "iso88599",
        "iso_8859-9", "iso_8859-9:1989", "l5", "latin5", "windows-1254", "x-cp1254",
    ),
    "windows-1255": ("cp1255", "windows-1255", "x-cp1255"),
    "windows-1256": ("cp1256", "windows-1256", "x-cp1256"),
    "windows-1257": ("cp1257", "windows-1257", "x-cp1257"),
    "windows-1258": ("cp1258", "windows-1258", "x-cp1258"),
    "x-mac-cyrillic": ("x-mac-cyrillic", "x-mac-ukrainian"),
    "gbk": (
        "chinese", "csgb2312", "csiso58gb231280", "gb2312", "gb_2312", "gb_2312-80",
        "gbk", "iso-ir-58", "x-gbk", "cp936",
    ),
    "gb18030": ("gb18030",),
    "hz-gb-2312": ("hz-gb-2312",),
    "big5": ("big5", "big5-hkscs", "cn-big5", "csbig5", "x-x-big5", "136"),
    "euc-jp": ("cseucpkdfmtjapanese", "euc-jp", "x-euc-jp"),
    "iso-2022-jp": ("csiso2022jp", "iso-2022-jp"),
    "shift_jis": (
        "csshiftjis", "ms_kanji", "shift-jis", "shift_jis", "sjis", "windows-31j",
        "x-sjis", "cp932",
    ),
    "euc-kr": (
        "cseuckr", "csksc56011987", "euc-kr", "iso-ir-149", "korean",
        "ks_c_5601-1987", "ks_c_5601-1989", "ksc5601", "ksc_5601", "windows-949",
    ),
    "replacement": ("csiso2022kr", "iso-2022-kr", "iso-2022-cn", "iso-2022-cn-ext"),
    "utf-16be": ("utf-16be",),
    "utf-16le": ("utf-16", "utf-16le"),
    "x-user-defined": ("x-user-defined",),
    "cp850": ("cp850", "cp-850", "ibm850"),
}

_ALIASES: Dict[str, str] = {
    alias: name for name, aliases in _ALIASES_BY_NAME.items() for alias in aliases
}

_META_CHARSET = re.compile(
    r'<meta.*charset="?\s*(?P<charset>[a-zA-Z0-9_.:-]+)\s*"?', re.IGNORECASE
)


@dataclass(frozen=True)
class Charset:
    """A known character set: its canonical name and the codec that decodes it."""

    name: str
    codec: Optional[str]

    @property
    def passthrough(self) -> bool:
        """True when input bytes are already UTF-8 and pass through unchanged."""
        return self.codec is None

    def new_decoder(self) -> codecs.IncrementalDecoder:
        """Return a fresh incremental decoder for this charset."""
        custom = _CUSTOM_DECODERS.get(self.name)
        if custom is not None:
            return custom()
        return codecs.getincrementaldecoder(self.codec or UTF8)("replace")

    def decode(self, data: bytes) -> str:
        """Decode ``data`` completely into a string."""
        return self.new_decoder().decode(bytes(data), final=True)


def lookup_charset(charset: str) -> Charset:
    """Return the charset for a label, ignoring case."""
    name = _ALIASES.get(charset.lower())
    if name is None:
        raise UnsupportedCharsetError(charset)
    return Charset(name, _CODECS[name])


def convert_to_utf8_string(charset: str, data: bytes) -> str:
    """Decode ``data`` written in ``charset`` into a string."""
    return lookup_charset(charset).decode(data)


class _DecodingReader:
    """A binary reader yielding the UTF-8 form of another stream's text."""

    _CHUNK = 4096

    def __init__(self, stream: BinaryIO, decoder: codecs.IncrementalDecoder) -> None:
        self._stream = stream
        self._decoder = decoder
        self._pending = b""
        self._eof = False

    def _fill(self, chunk: bytes) -> None:
        if chunk:
            self._pending += self._decoder.decode(chunk).encode(UTF8)
        else:
            self._pending += self._decoder.decode(b"", final=True).encode(UTF8)
            self._eof = True

    def read(self, size: Optional[int] = -1) -> bytes:
        """Read up to ``size`` bytes of UTF-8, or everything when ``size`` is negative."""
        if size is None or size < 0:
            while not self._eof:
                self._fill(self._stream.read(self._CHUNK))
            out, self._pending = self._pending, b""
            return out
        while len(self._pending) < size and not self._eof:
            self._fill(self._stream.read(self._CHUNK))
        out, self._pending = self._pending[:size], self._pending[size:]
        return out


def new_charset_reader(charset: str, stream: BinaryIO) -> Union[BinaryIO, _DecodingReader]:
    """Wrap ``stream`` so that reading it yields UTF-8 bytes.

    UTF-8 input is returned as is.
    """
    if charset.lower() == UTF8:
        return stream
    found = lookup_charset(charset)
    if found.passthrough:
        return stream
    return _DecodingReader(stream, found.new_decoder())


def find_charset_in_html(html: str) -> str:
    """Return the charset named in an HTML meta tag, or an empty string."""
    match = _META_CHARSET.search(html)
    return match.group("charset") if match else ""