"""nestedqs codec primitives — percent-decoding and percent-encoding of one token.

Both functions share the calling convention of user-supplied hooks:
`(value, default_fn, charset)`.  The second argument is ignored here; it
exists so a custom decoder/encoder can fall back to these defaults.

utf-8 encoding follows the RFC 3986 unreserved set exactly.  iso-8859-1
encoding writes code points outside Latin-1 as a percent-encoded
numeric character reference (`&#9786;` -> `%26%239786%3B`), which is
what browsers do for forms submitted in that charset.
"""

from __future__ import annotations

import datetime
import logging
import re
from typing import Any, Callable, Optional
from urllib.parse import unquote_to_bytes

from ._constants import CHARSET_ISO, CHARSET_UTF8, HEX_TABLE, UNRESERVED

logger = logging.getLogger(__name__)

_PCT_TRIPLET = re.compile(r"%[0-9A-Fa-f]{2}")
_BROKEN_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_NUMERIC_ENTITY = re.compile(r"&#(\d+);")

_MAX_CODE_POINT = 0x10FFFF


def scalar_text(value: Any) -> str:
    """Render a scalar the way it appears on the wire.

    Booleans are lower-case words and integral floats drop their
    fraction, so `True` -> "true" and `2.0` -> "2".
    """
    if isinstance(value, str):
        return value
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def default_serialize_date(value: datetime.date) -> str:
    """ISO-8601 rendering used when no serialize_date hook is configured."""
    return value.isoformat()


# ── Decoding ─────────────────────────────────────────────────

def decode(text: str, default_decoder: Optional[Callable[..., Any]] = None,
           charset: str = CHARSET_UTF8) -> str:
    """Decode one key or value token.

    `+` always becomes a space.  iso-8859-1 maps each `%XX` to the byte
    it names and cannot fail.  utf-8 decoding of a malformed sequence
    returns the token untouched (apart from the `+` substitution).
    """
    plain = text.replace("+", " ")

    if charset == CHARSET_ISO:
        return _PCT_TRIPLET.sub(lambda m: chr(int(m.group(0)[1:], 16)), plain)

    if "%" not in plain:
        return plain
    if _BROKEN_ESCAPE.search(plain):
        logger.debug("malformed percent-escape kept literally: %r", plain)
        return plain
    try:
        return unquote_to_bytes(plain).decode("utf-8")
    except UnicodeError:
        logger.debug("undecodable utf-8 sequence kept literally: %r", plain)
        return plain


def interpret_numeric_entities(text: str) -> str:
    """Replace `&#NNNN;` references with the characters they name."""
    def _sub(m: "re.Match[str]") -> str:
        cp = int(m.group(1))
        if cp > _MAX_CODE_POINT:
            return m.group(0)
        return chr(cp)

    return _NUMERIC_ENTITY.sub(_sub, text)


# ── Encoding ─────────────────────────────────────────────────

def _encode_octets(raw: bytes) -> str:
    return "".join(chr(b) if b in UNRESERVED else HEX_TABLE[b] for b in raw)


def _encode_latin1(text: str) -> str:
    out = []
    for ch in text:
        cp = ord(ch)
        if cp < 0x100:
            out.append(ch if cp in UNRESERVED else HEX_TABLE[cp])
        else:
            out.append("%26%23{}%3B".format(cp))
    return "".join(out)


def encode(value: Any, default_encoder: Optional[Callable[..., Any]] = None,
           charset: str = CHARSET_UTF8) -> str:
    """Percent-encode one key or value token.

    Empty input comes back as "".  Raw bytes are escaped octet by octet
    regardless of charset.
    """
    if isinstance(value, (bytes, bytearray)):
        return _encode_octets(bytes(value))

    text = scalar_text(value)
    if not text:
        return text

    if charset == CHARSET_ISO:
        return _encode_latin1(text)

    # surrogatepass keeps lone surrogates encodable (3-byte form)
    return _encode_octets(text.encode("utf-8", errors="surrogatepass"))
