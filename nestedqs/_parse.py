"""nestedqs parse engine — query string (or pre-split mapping) to nested structure.

Pipeline:

    1. split the string into raw `key=value` parts (delimiter, limit)
    2. pick up the charset sentinel, if enabled
    3. decode every part; identical raw keys are combined into a list
    4. tokenize each key and build one single-branch structure for it
    5. merge the branches together in input order
    6. compact: drop the holes index segments left in lists
"""

from __future__ import annotations

import copy
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ._codec import decode as default_decode
from ._codec import interpret_numeric_entities
from ._constants import (
    CHARSET_ISO,
    CHARSET_UTF8,
    SENTINEL_KEY,
    SENTINEL_VALUE_ISO,
    SENTINEL_VALUE_UTF8,
    UNDEFINED,
)
from ._errors import ERR_INPUT, QsError
from ._keys import SEG_INDEX, Segment, split_key
from ._options import ParseOptions, resolve
from ._utils import combine, compact, merge

logger = logging.getLogger(__name__)

_SENTINEL_PREFIX = SENTINEL_KEY + "="


def _split_parts(text: str, opts: ParseOptions) -> List[str]:
    if opts.ignore_query_prefix and text.startswith("?"):
        text = text[1:]

    if isinstance(opts.delimiter, re.Pattern):
        parts = opts.delimiter.split(text)
    else:
        parts = text.split(opts.delimiter)

    limit = opts.parameter_limit
    if limit is not None and len(parts) > limit:
        logger.debug("parameter limit %s reached; dropping %d part(s)",
                     limit, len(parts) - int(limit))
        parts = parts[:int(limit)]
    return parts


def _find_sentinel(parts: List[str], charset: str) -> Tuple[int, str]:
    """Return (index of the sentinel part or -1, effective charset)."""
    for i, part in enumerate(parts):
        if not part.startswith(_SENTINEL_PREFIX):
            continue
        value = default_decode(part[len(_SENTINEL_PREFIX):], None, CHARSET_UTF8)
        if value == SENTINEL_VALUE_UTF8:
            charset = CHARSET_UTF8
        elif value == SENTINEL_VALUE_ISO:
            charset = CHARSET_ISO
        return i, charset
    return -1, charset


def _split_pair(part: str) -> Tuple[str, Optional[str]]:
    """Split a part into raw key and raw value (None when there is no `=`).

    A `]=` wins over an earlier `=` so that keys like `a[<=>]` survive.
    """
    bracket_equals = part.find("]=")
    pos = part.find("=") if bracket_equals == -1 else bracket_equals + 1
    if pos == -1:
        return part, None
    return part[:pos], part[pos + 1:]


def parse_values(text: str, opts: ParseOptions) -> Dict[str, Any]:
    """Decode a raw query string into a flat {decoded key: value} mapping.

    A repeated key collects its values into a list in input order.
    """
    parts = _split_parts(text, opts)

    skip_index = -1
    charset = opts.charset
    if opts.charset_sentinel:
        skip_index, charset = _find_sentinel(parts, charset)

    decoder = opts.decoder
    flat: Dict[str, Any] = {}
    for i, part in enumerate(parts):
        if i == skip_index:
            continue

        raw_key, raw_value = _split_pair(part)
        key = decoder(raw_key, default_decode, charset)
        if raw_value is None:
            value: Any = None if opts.strict_null_handling else ""
        else:
            value = decoder(raw_value, default_decode, charset)

        if value and opts.interpret_numeric_entities and charset == CHARSET_ISO:
            value = interpret_numeric_entities(value)

        if key in flat:
            flat[key] = combine(flat[key], value)
        else:
            flat[key] = value
    return flat


def build_branch(segments: List[Segment], leaf: Any, opts: ParseOptions) -> Any:
    """Wrap `leaf` in one container per segment, innermost first."""
    for segment in reversed(segments):
        if segment.kind == SEG_INDEX:
            if opts.parse_arrays:
                if segment.text == "":
                    leaf = list(leaf) if isinstance(leaf, list) else [leaf]
                    continue
                index = int(segment.text)
                if index <= opts.array_limit:
                    leaf = [UNDEFINED] * index + [leaf]
                    continue
            elif segment.text == "":
                leaf = {"0": leaf}
                continue
        leaf = {segment.text: leaf}
    return leaf


def parse_key(key: Any, value: Any, opts: ParseOptions) -> Any:
    """Build the structure for one key, or UNDEFINED when the key yields nothing."""
    if not isinstance(key, str):
        key = "" if key is None else str(key)

    segments = split_key(key, allow_dots=opts.allow_dots, depth=opts.depth,
                         guard_reserved=opts.guard_reserved)
    if not segments:
        return UNDEFINED
    return build_branch(segments, value, opts)


def parse(source: Any, options: Optional[ParseOptions] = None, **kwargs: Any) -> Dict[str, Any]:
    """Parse a query string, or a mapping of raw keys to values, into a nested dict.

    Keyword arguments are ParseOptions fields and override `options`.
    Values of a mapping input are copied, never re-parsed or decoded;
    only the keys are tokenized.  The caller's mapping is left untouched.
    """
    opts = resolve(ParseOptions, options, kwargs)

    if source is None or source == "":
        return {}

    if isinstance(source, str):
        flat: Mapping[Any, Any] = parse_values(source, opts)
    elif isinstance(source, Mapping):
        # Merging and compaction rewrite containers in place; one memo
        # keeps cycles and shared values intact in the copy.
        memo: Dict[int, Any] = {}
        flat = {key: copy.deepcopy(value, memo) for key, value in source.items()}
    else:
        raise QsError(ERR_INPUT,
                      "cannot parse input of type {}".format(type(source).__name__))

    result: Any = {}
    for key, value in flat.items():
        result = merge(result, parse_key(key, value, opts), opts)
    return compact(result)
