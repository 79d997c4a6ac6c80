"""nestedqs key-path tokenizer.

Turns one decoded key such as `a[b][0]` (or `a.b[0]` with allow_dots)
into a list of path segments.  The grammar has no reject state: any
string tokenizes, with unbalanced brackets kept as literal text.

Segment kinds:

    NAMED     — a plain name (the root, or `[b]`)
    INDEX     — `[]` or `[n]` where n is a canonical non-negative integer
    OVERFLOW  — the untokenized tail once `depth` groups are consumed,
                e.g. `[g][h]` for `a[b][c][d][e][f][g][h]` at depth 5
"""

from __future__ import annotations

import logging
import re
from typing import List, NamedTuple, Optional

from ._constants import DEFAULT_DEPTH, RESERVED_KEYS

logger = logging.getLogger(__name__)

SEG_NAMED: str = "named"
SEG_INDEX: str = "index"
SEG_OVERFLOW: str = "overflow"

# A bracket group with no brackets inside it.  Groups need not be
# adjacent: `a[b]x[c]` yields b and c and ignores the x.
_BRACKET_GROUP = re.compile(r"\[[^\[\]]*\]")
_DOTTED = re.compile(r"\.([^.\[]+)")
_CANONICAL_INDEX = re.compile(r"0|[1-9][0-9]*")


class Segment(NamedTuple):
    kind: str
    text: str


def _classify(inner: str) -> Segment:
    if inner == "" or _CANONICAL_INDEX.fullmatch(inner):
        return Segment(SEG_INDEX, inner)
    return Segment(SEG_NAMED, inner)


def is_reserved(name: str) -> bool:
    return name in RESERVED_KEYS


def split_key(key: str, *, allow_dots: bool = False, depth: int = DEFAULT_DEPTH,
              guard_reserved: bool = True) -> Optional[List[Segment]]:
    """Tokenize `key` into segments.

    Returns None when `guard_reserved` is set and the root or any
    bracket group names a reserved member; the caller drops the pair.
    Returns an empty list for an empty key.
    """
    if not key:
        return []

    if allow_dots:
        key = _DOTTED.sub(r"[\1]", key)

    first = _BRACKET_GROUP.search(key) if depth > 0 else None
    root = key[:first.start()] if first else key

    segments: List[Segment] = []
    if root:
        if guard_reserved and is_reserved(root):
            logger.debug("dropping key with reserved root %r", root)
            return None
        segments.append(Segment(SEG_NAMED, root))

    if first is None:
        return segments

    consumed = 0
    for match in _BRACKET_GROUP.finditer(key):
        if consumed >= depth:
            logger.debug("key %r exceeds depth %d; folding tail", key, depth)
            segments.append(Segment(SEG_OVERFLOW, key[match.start():]))
            break
        inner = match.group(0)[1:-1]
        if guard_reserved and is_reserved(inner):
            logger.debug("dropping key with reserved segment %r", inner)
            return None
        segments.append(_classify(inner))
        consumed += 1

    return segments
