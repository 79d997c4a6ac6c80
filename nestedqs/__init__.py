"""nestedqs — nested query strings for Python.

Parse `a[b][0]=c` style query strings into nested dicts and lists, and
turn nested structures back into query strings.

Quick start:
    >>> from nestedqs import parse, stringify
    >>> parse("a[b]=c&a[d][]=e&a[d][]=f")
    {'a': {'b': 'c', 'd': ['e', 'f']}}
    >>> stringify({"a": {"b": "c"}}, encode=False)
    'a[b]=c'

Repeated keys become lists, and array indices above `array_limit` fall
back to mapping keys:
    >>> parse("a=b&a=c")
    {'a': ['b', 'c']}
    >>> parse("a[21]=x")
    {'a': {'21': 'x'}}
"""

from __future__ import annotations

from . import formats
from ._codec import decode, encode, interpret_numeric_entities
from ._constants import UNDEFINED
from ._errors import (
    ERR_CHARSET,
    ERR_DECODER,
    ERR_ENCODER,
    ERR_FORMAT,
    ERR_INPUT,
    ERR_SERIALIZER,
    ERR_SORT,
    QsError,
)
from ._options import ParseOptions, StringifyOptions
from ._parse import parse
from ._stringify import stringify
from ._utils import array_to_object, combine, compact, merge

__version__ = "1.0.0"

__all__ = [
    # Public API functions
    "parse",
    "stringify",
    "ParseOptions",
    "StringifyOptions",
    "formats",
    # Building blocks
    "decode",
    "encode",
    "interpret_numeric_entities",
    "merge",
    "compact",
    "combine",
    "array_to_object",
    "UNDEFINED",
    # Exception
    "QsError",
    # Error codes
    "ERR_CHARSET",
    "ERR_DECODER",
    "ERR_ENCODER",
    "ERR_FORMAT",
    "ERR_INPUT",
    "ERR_SERIALIZER",
    "ERR_SORT",
]
