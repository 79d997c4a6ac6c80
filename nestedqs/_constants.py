"""nestedqs constants — charsets, sentinels, option defaults, reserved names.

Everything here is immutable after import and shared read-only by every
parse/stringify call.
"""

from __future__ import annotations

from typing import FrozenSet, Tuple

# ── Charsets ─────────────────────────────────────────────────
CHARSET_UTF8: str = "utf-8"
CHARSET_ISO: str = "iso-8859-1"
CHARSETS: FrozenSet[str] = frozenset((CHARSET_UTF8, CHARSET_ISO))

# ── Charset sentinel (the `utf8=` pair) ──────────────────────
# Browsers submitting a form with accept-charset mismatches send a
# checkmark; how it arrives tells us which charset the rest is in.
SENTINEL_KEY: str = "utf8"
SENTINEL_VALUE_UTF8: str = "\u2713"             # checkmark
SENTINEL_VALUE_ISO: str = "&#10003;"            # checkmark as a numeric entity
SENTINEL_TOKEN_UTF8: str = "utf8=%E2%9C%93"
SENTINEL_TOKEN_ISO: str = "utf8=%26%2310003%3B"

# ── Parse defaults ───────────────────────────────────────────
DEFAULT_DELIMITER: str = "&"
DEFAULT_DEPTH: int = 5
DEFAULT_ARRAY_LIMIT: int = 20
DEFAULT_PARAMETER_LIMIT: int = 1000

# ── Array serialization strategies ───────────────────────────
ARRAY_FORMAT_INDICES: str = "indices"
ARRAY_FORMAT_BRACKETS: str = "brackets"
ARRAY_FORMAT_REPEAT: str = "repeat"
ARRAY_FORMATS: FrozenSet[str] = frozenset(
    (ARRAY_FORMAT_INDICES, ARRAY_FORMAT_BRACKETS, ARRAY_FORMAT_REPEAT)
)

# ── Reserved member names ────────────────────────────────────
# Query strings are routinely re-consumed by JavaScript front ends, where
# these names shadow Object.prototype members.  Keys matching them are
# refused unless allow_prototypes or plain_objects is set.
RESERVED_KEYS: FrozenSet[str] = frozenset((
    "__defineGetter__",
    "__defineSetter__",
    "__lookupGetter__",
    "__lookupSetter__",
    "__proto__",
    "constructor",
    "hasOwnProperty",
    "isPrototypeOf",
    "propertyIsEnumerable",
    "toLocaleString",
    "toString",
    "valueOf",
))

# ── Percent-encoding tables ──────────────────────────────────
# RFC 3986 unreserved set.  Stricter than most platform encoders:
# !*'() are escaped.
UNRESERVED: FrozenSet[int] = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~"
)

HEX_TABLE: Tuple[str, ...] = tuple("%{:02X}".format(i) for i in range(256))


# ── Absent-value marker ──────────────────────────────────────

class _Undefined:
    """Marker for "no value here", distinct from None (an explicit null).

    Used for holes in sparse lists while merging and as the value a
    stringify filter returns to drop a node.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: dict) -> "_Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()
