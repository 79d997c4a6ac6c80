"""nestedqs error codes and exception class.

Only configuration problems raise.  They are detected while the options
are built, before any input is touched.  Malformed input (bad escapes,
unbalanced brackets, too many parameters) is never an error.
"""

from __future__ import annotations

# ── Error codes ──────────────────────────────────────────────

ERR_CHARSET: str = "ERR_CHARSET"        # charset not utf-8 / iso-8859-1
ERR_DECODER: str = "ERR_DECODER"        # decoder is not callable
ERR_ENCODER: str = "ERR_ENCODER"        # encoder is not callable
ERR_FORMAT: str = "ERR_FORMAT"          # unknown format name
ERR_SERIALIZER: str = "ERR_SERIALIZER"  # serialize_date is not callable
ERR_SORT: str = "ERR_SORT"              # sort is not callable
ERR_INPUT: str = "ERR_INPUT"            # parse input is not str / mapping


class QsError(Exception):
    """Exception for invalid nestedqs configuration or input type.

    The `.code` attribute is one of the ERR_* strings above.
    """

    def __init__(self, code: str, msg: str = "") -> None:
        super().__init__(msg or code)
        self.code = code
