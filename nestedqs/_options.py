"""nestedqs option sets for parse and stringify.

Options are frozen dataclasses.  All validation happens in
`__post_init__`, so a bad configuration fails before any input is
looked at.  Lenient values (an unusable delimiter, None for a hook) are
normalized to their defaults here as well.
"""

from __future__ import annotations

import dataclasses
import datetime
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Union

from . import formats
from ._codec import decode as default_decode
from ._codec import default_serialize_date
from ._codec import encode as default_encode
from ._constants import (
    ARRAY_FORMAT_INDICES,
    ARRAY_FORMAT_REPEAT,
    ARRAY_FORMATS,
    CHARSET_UTF8,
    CHARSETS,
    DEFAULT_ARRAY_LIMIT,
    DEFAULT_DELIMITER,
    DEFAULT_DEPTH,
    DEFAULT_PARAMETER_LIMIT,
)
from ._errors import (
    ERR_CHARSET,
    ERR_DECODER,
    ERR_ENCODER,
    ERR_FORMAT,
    ERR_SERIALIZER,
    ERR_SORT,
    QsError,
)

Decoder = Callable[[str, Callable[..., Any], str], Optional[str]]
Encoder = Callable[[Any, Callable[..., Any], str], str]


def _check_charset(charset: Optional[str]) -> str:
    if charset is None:
        return CHARSET_UTF8
    if charset not in CHARSETS:
        raise QsError(ERR_CHARSET,
                      "charset must be utf-8, iso-8859-1, or None; got {!r}".format(charset))
    return charset


def _usable_delimiter(delimiter: Any) -> bool:
    if isinstance(delimiter, str):
        return delimiter != ""
    return isinstance(delimiter, re.Pattern)


def _set(obj: Any, name: str, value: Any) -> None:
    object.__setattr__(obj, name, value)


@dataclass(frozen=True)
class ParseOptions:
    """Configuration for `parse`.

    `array_limit` is the highest index that still produces a list; a
    negative limit never produces one.  `parameter_limit` may be None or
    math.inf for no limit.  `delimiter` is a string or compiled pattern.
    """

    allow_dots: bool = False
    allow_prototypes: bool = False
    array_limit: int = DEFAULT_ARRAY_LIMIT
    charset: Optional[str] = CHARSET_UTF8
    charset_sentinel: bool = False
    decoder: Optional[Decoder] = default_decode
    delimiter: Union[str, "re.Pattern[str]"] = DEFAULT_DELIMITER
    depth: int = DEFAULT_DEPTH
    ignore_query_prefix: bool = False
    interpret_numeric_entities: bool = False
    parameter_limit: Optional[float] = DEFAULT_PARAMETER_LIMIT
    parse_arrays: bool = True
    plain_objects: bool = False
    strict_null_handling: bool = False

    def __post_init__(self) -> None:
        _set(self, "charset", _check_charset(self.charset))
        if self.decoder is None:
            _set(self, "decoder", default_decode)
        elif not callable(self.decoder):
            raise QsError(ERR_DECODER, "decoder has to be callable")
        if not _usable_delimiter(self.delimiter):
            _set(self, "delimiter", DEFAULT_DELIMITER)
        if self.parameter_limit is not None and math.isinf(self.parameter_limit):
            _set(self, "parameter_limit", None)

    @property
    def guard_reserved(self) -> bool:
        return not (self.allow_prototypes or self.plain_objects)


@dataclass(frozen=True)
class StringifyOptions:
    """Configuration for `stringify`.

    `filter` is either a callable `(prefix, value) -> value` or a list
    of keys/indices to keep.  `sort` is a two-argument comparator.
    `indices` is the legacy switch between "indices" and "repeat"; an
    explicit `array_format` takes precedence.
    """

    add_query_prefix: bool = False
    allow_dots: bool = False
    array_format: Optional[str] = None
    charset: Optional[str] = CHARSET_UTF8
    charset_sentinel: bool = False
    delimiter: str = DEFAULT_DELIMITER
    encode: bool = True
    encoder: Optional[Encoder] = default_encode
    encode_values_only: bool = False
    filter: Union[None, Callable[[str, Any], Any], Sequence[Any]] = None
    format: Optional[str] = None
    indices: Optional[bool] = None
    serialize_date: Optional[Callable[[datetime.date], Any]] = default_serialize_date
    skip_nulls: bool = False
    sort: Optional[Callable[[Any, Any], int]] = None
    strict_null_handling: bool = False

    def __post_init__(self) -> None:
        if self.encoder is None:
            _set(self, "encoder", default_encode)
        elif not callable(self.encoder):
            raise QsError(ERR_ENCODER, "encoder has to be callable")

        _set(self, "charset", _check_charset(self.charset))

        if self.format is None:
            _set(self, "format", formats.DEFAULT)
        elif not isinstance(self.format, str) or self.format not in formats.FORMATTERS:
            raise QsError(ERR_FORMAT, "unknown format option {!r}".format(self.format))

        if self.serialize_date is None:
            _set(self, "serialize_date", default_serialize_date)
        elif not callable(self.serialize_date):
            raise QsError(ERR_SERIALIZER, "serialize_date has to be callable")

        if self.sort is not None and not callable(self.sort):
            raise QsError(ERR_SORT, "sort has to be a callable comparator")

        if self.array_format not in ARRAY_FORMATS:
            if self.indices is None:
                _set(self, "array_format", ARRAY_FORMAT_INDICES)
            else:
                _set(self, "array_format",
                     ARRAY_FORMAT_INDICES if self.indices else ARRAY_FORMAT_REPEAT)

    @property
    def formatter(self) -> Callable[[str], str]:
        return formats.FORMATTERS[self.format]


def resolve(cls: Any, options: Any, overrides: dict) -> Any:
    """Build the effective options from an optional base plus keyword overrides."""
    if options is None:
        return cls(**overrides)
    if not isinstance(options, cls):
        raise TypeError("options must be a {} instance".format(cls.__name__))
    if overrides:
        return dataclasses.replace(options, **overrides)
    return options
