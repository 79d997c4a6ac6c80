"""nestedqs structure helpers — merge, compaction, and friends.

The parse engine builds one single-branch structure per key and folds
them together with `merge`.  Index segments create lists padded with
UNDEFINED holes (`a[2]=x` -> [UNDEFINED, UNDEFINED, "x"]); `compact`
removes those holes once everything has been merged.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Set, Tuple

from ._codec import scalar_text
from ._constants import UNDEFINED
from ._keys import is_reserved


def is_composite(value: Any) -> bool:
    return isinstance(value, (dict, list))


def _is_blank(value: Any) -> bool:
    """Falsy scalars: None, UNDEFINED, False, "", 0.  Empty containers are not blank."""
    if value is None or value is UNDEFINED or value is False:
        return True
    if isinstance(value, (str, int, float)):
        return not value
    return False


def _present(target: list, index: int) -> bool:
    return index < len(target) and target[index] is not UNDEFINED


def _set_index(target: list, index: int, value: Any) -> None:
    if index >= len(target):
        target.extend([UNDEFINED] * (index + 1 - len(target)))
    target[index] = value


def _entries(source: Any) -> Iterator[Tuple[str, Any]]:
    """(key, value) pairs of a mapping or list; list holes are skipped."""
    if isinstance(source, dict):
        yield from source.items()
        return
    for i, item in enumerate(source):
        if item is not UNDEFINED:
            yield str(i), item


def _may_assign(key: str, options: Any) -> bool:
    if options is not None and (options.plain_objects or options.allow_prototypes):
        return True
    return not is_reserved(key)


def array_to_object(source: list) -> Dict[str, Any]:
    """Convert a (possibly sparse) list to a mapping keyed by index string."""
    return {key: value for key, value in _entries(source)}


def combine(a: Any, b: Any) -> List[Any]:
    """Concatenate two values into a new list, wrapping non-list operands."""
    left = a if isinstance(a, list) else [a]
    right = b if isinstance(b, list) else [b]
    return left + right


def _merge_level(target: Any, source: Any, options: Any,
                 pending: List[Tuple[Any, Any, Any]]) -> Any:
    """Merge one level and return the new value for the target's slot.

    Nested pairs that both need merging are pushed onto `pending` as
    (holder, slot, source) instead of being descended into.
    """
    if _is_blank(source):
        return target

    if not is_composite(source):
        if isinstance(target, list):
            target.append(source)
        elif isinstance(target, dict):
            key = scalar_text(source)
            if _may_assign(key, options):
                target[key] = True
        else:
            return [target, source]
        return target

    if not is_composite(target):
        if isinstance(source, list):
            return [target] + source
        return [target, source]

    if isinstance(target, list) and isinstance(source, list):
        for i, item in enumerate(source):
            if item is UNDEFINED:
                continue
            if _present(target, i):
                if is_composite(target[i]) and is_composite(item):
                    pending.append((target, i, item))
                else:
                    target.append(item)
            else:
                _set_index(target, i, item)
        return target

    merge_target = array_to_object(target) if isinstance(target, list) else target
    for key, value in _entries(source):
        if key in merge_target:
            pending.append((merge_target, key, value))
        else:
            merge_target[key] = value
    return merge_target


def merge(target: Any, source: Any, options: Any = None) -> Any:
    """Merge `source` into `target` and return the result.

    `target` may be modified in place; `source` never is.  Callers that
    still need the original target must copy it first.  `options` only
    needs `plain_objects` and `allow_prototypes` attributes.

    Shared paths are walked with an explicit stack, so two keys sharing a
    prefix thousands of levels long merge without hitting the recursion
    limit.
    """
    root = [target]
    pending: List[Tuple[Any, Any, Any]] = [(root, 0, source)]
    while pending:
        holder, slot, src = pending.pop()
        holder[slot] = _merge_level(holder[slot], src, options, pending)
    return root[0]


# ── Compaction ───────────────────────────────────────────────
# Breadth-first over (container, key) slots with an explicit queue, so
# stack use stays flat however deep the structure is.  Lists are rebuilt
# deepest-first: replacing an outer list before its inner ones would
# leave the inner rewrites pointing at a discarded container.

def _children(node: Any) -> Iterator[Tuple[Any, Any]]:
    if isinstance(node, dict):
        return iter(list(node.items()))
    if isinstance(node, list):
        return iter(list(enumerate(node)))
    return iter(())


def compact(value: Any) -> Any:
    """Drop UNDEFINED holes from every nested list, in place.

    The top-level value itself is never replaced.  Shared and cyclic
    references are visited once.
    """
    queue: List[Tuple[Any, Any]] = [({"o": value}, "o")]
    seen: Set[int] = set()

    i = 0
    while i < len(queue):
        container, slot = queue[i]
        node = container[slot]
        for key, child in _children(node):
            if is_composite(child) and id(child) not in seen:
                seen.add(id(child))
                queue.append((node, key))
        i += 1

    while len(queue) > 1:
        container, slot = queue.pop()
        node = container[slot]
        if isinstance(node, list):
            container[slot] = [item for item in node if item is not UNDEFINED]

    return value
