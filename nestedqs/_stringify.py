"""nestedqs stringify engine — nested structure to query string.

Walks the value depth-first, carrying the key prefix built so far, and
emits one `key=value` token per leaf.  Lists extend the prefix through
the active array format; mappings through `[key]` or `.key`.
"""

from __future__ import annotations

import datetime
import logging
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Optional

from ._codec import encode as default_encode
from ._codec import scalar_text
from ._constants import (
    ARRAY_FORMAT_BRACKETS,
    ARRAY_FORMAT_INDICES,
    ARRAY_FORMAT_REPEAT,
    CHARSET_ISO,
    SENTINEL_TOKEN_ISO,
    SENTINEL_TOKEN_UTF8,
    UNDEFINED,
)
from ._options import StringifyOptions, resolve

logger = logging.getLogger(__name__)

_SEQUENCE_TYPES = (list, tuple)
_CONTAINER_TYPES = (dict, list, tuple)


def _indices_prefix(prefix: str, key: str) -> str:
    return "{}[{}]".format(prefix, key)


def _brackets_prefix(prefix: str, key: str) -> str:
    return prefix + "[]"


def _repeat_prefix(prefix: str, key: str) -> str:
    return prefix


ARRAY_PREFIX_GENERATORS: Dict[str, Callable[[str, str], str]] = {
    ARRAY_FORMAT_INDICES: _indices_prefix,
    ARRAY_FORMAT_BRACKETS: _brackets_prefix,
    ARRAY_FORMAT_REPEAT: _repeat_prefix,
}


def _own_keys(obj: Any) -> List[Any]:
    if isinstance(obj, dict):
        return list(obj.keys())
    return list(range(len(obj)))


def _child(obj: Any, key: Any) -> Any:
    """Look up `key` in a container; UNDEFINED when it is not there.

    Filter lists mix names and indices, so a mapping also answers to the
    string form of an integer key and a sequence to a digit string.
    """
    if isinstance(obj, dict):
        if key in obj:
            return obj[key]
        text = scalar_text(key)
        return obj.get(text, UNDEFINED)
    if isinstance(key, bool):
        return UNDEFINED
    if isinstance(key, str):
        if not key.isdigit():
            return UNDEFINED
        key = int(key)
    if isinstance(key, int) and 0 <= key < len(obj):
        return obj[key]
    return UNDEFINED


def _child_keys(obj: Any, opts: StringifyOptions, root: bool = False) -> List[Any]:
    """Keys to visit below `obj`, in output order.

    A filter list replaces the own keys.  `sort` orders own keys at every
    level but a filter list only at the root.
    """
    if isinstance(opts.filter, _SEQUENCE_TYPES):
        keys = list(opts.filter)
        if not root:
            return keys
    else:
        keys = _own_keys(obj)
    if opts.sort is not None:
        keys.sort(key=cmp_to_key(opts.sort))
    return keys


def _leaf_token(value: Any, prefix: str, opts: StringifyOptions,
                encoder: Optional[Callable[..., Any]]) -> str:
    formatter = opts.formatter
    if encoder is None:
        return formatter(prefix) + "=" + formatter(scalar_text(value))
    key = prefix if opts.encode_values_only else encoder(prefix, default_encode, opts.charset)
    return formatter(key) + "=" + formatter(encoder(value, default_encode, opts.charset))


def _walk(value: Any, prefix: str, opts: StringifyOptions,
          encoder: Optional[Callable[..., Any]]) -> List[str]:
    obj = value
    if callable(opts.filter):
        obj = opts.filter(prefix, obj)
    if isinstance(obj, datetime.date):
        obj = opts.serialize_date(obj)

    if obj is None:
        if opts.strict_null_handling:
            if encoder is None or opts.encode_values_only:
                return [opts.formatter(prefix)]
            return [opts.formatter(encoder(prefix, default_encode, opts.charset))]
        obj = ""

    if obj is UNDEFINED:
        return []

    if not isinstance(obj, _CONTAINER_TYPES):
        return [_leaf_token(obj, prefix, opts, encoder)]

    generate_prefix = ARRAY_PREFIX_GENERATORS[opts.array_format]
    tokens: List[str] = []
    for key in _child_keys(obj, opts):
        child = _child(obj, key)
        if opts.skip_nulls and child is None:
            continue
        key_text = scalar_text(key)
        if isinstance(obj, _SEQUENCE_TYPES):
            child_prefix = generate_prefix(prefix, key_text)
        elif opts.allow_dots:
            child_prefix = prefix + "." + key_text
        else:
            child_prefix = prefix + "[" + key_text + "]"
        tokens.extend(_walk(child, child_prefix, opts, encoder))
    return tokens


def stringify(value: Any, options: Optional[StringifyOptions] = None, **kwargs: Any) -> str:
    """Serialize a dict (or list) into a query string.

    Keyword arguments are StringifyOptions fields and override `options`.
    Anything that is not a dict, list or tuple yields "".
    """
    opts = resolve(StringifyOptions, options, kwargs)

    obj = value
    if callable(opts.filter):
        obj = opts.filter("", obj)

    if not isinstance(obj, _CONTAINER_TYPES):
        return ""

    encoder = opts.encoder if opts.encode else None

    tokens: List[str] = []
    for key in _child_keys(obj, opts, root=True):
        child = _child(obj, key)
        if opts.skip_nulls and child is None:
            continue
        tokens.extend(_walk(child, scalar_text(key), opts, encoder))

    joined = opts.delimiter.join(tokens)
    if not joined:
        return ""

    prefix = "?" if opts.add_query_prefix else ""
    if opts.charset_sentinel:
        sentinel = SENTINEL_TOKEN_ISO if opts.charset == CHARSET_ISO else SENTINEL_TOKEN_UTF8
        prefix += sentinel + "&"
    logger.debug("stringified %d token(s)", len(tokens))
    return prefix + joined
