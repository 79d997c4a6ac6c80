"""Space-encoding formats for stringify.

RFC 3986 leaves `%20` alone; RFC 1738 (HTML form encoding) writes a
space as `+`.  The formatter runs on each already-encoded key and value.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping

RFC1738: str = "RFC1738"
RFC3986: str = "RFC3986"
DEFAULT: str = RFC3986


def _rfc1738(value: str) -> str:
    return value.replace("%20", "+")


def _rfc3986(value: str) -> str:
    return value


FORMATTERS: Mapping[str, Callable[[str], str]] = MappingProxyType({
    RFC1738: _rfc1738,
    RFC3986: _rfc3986,
})
