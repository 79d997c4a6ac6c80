#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Property checks for nestedqs over seeded random inputs.
#
# This runner:
# - generates random nested mappings with string leaves and plain keys
# - checks parse(stringify(m)) == m under every array format
# - checks stringify output is stable across a parse/stringify cycle
# - checks compact() is idempotent and leaves no holes behind
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, copy, json, random
from typing import Any, Dict, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from nestedqs import UNDEFINED, compact, parse, stringify
from nestedqs._constants import ARRAY_FORMATS, RESERVED_KEYS

SEED = int(os.environ.get("NESTEDQS_SEED", "1337"))
TRIALS = int(os.environ.get("NESTEDQS_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("NESTEDQS_GEN_MAX_DEPTH", "4"))
MAX_KEYS = int(os.environ.get("NESTEDQS_GEN_MAX_KEYS", "5"))
MAX_LIST = int(os.environ.get("NESTEDQS_GEN_MAX_LIST", "6"))
MAX_STR = int(os.environ.get("NESTEDQS_GEN_MAX_STR", "16"))

random.seed(SEED)

# Brackets and dots are key syntax; they never round-trip as literal key text.
KEY_EXCLUDED = set("[].")

def rand_text(nmin: int) -> str:
    # Unicode scalars only; a lone surrogate has no utf-8 decoding.
    out = []
    for _ in range(random.randint(nmin, MAX_STR)):
        r = random.random()
        if r < 0.75:
            out.append(chr(random.randint(0x20, 0x7E)))
        elif r < 0.90:
            out.append(chr(random.randint(0xA0, 0xFF)))
        elif r < 0.97:
            out.append(chr(random.randint(0x0100, 0xD7FF)))
        else:
            out.append(chr(random.randint(0x10000, 0x10FFFF)))
    return "".join(out)

def rand_key() -> str:
    while True:
        k = "".join(c for c in rand_text(1) if c not in KEY_EXCLUDED)
        if k and not k.isdigit() and k not in RESERVED_KEYS:
            return k

def gen_mapping(depth: int) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    for _ in range(random.randint(1, MAX_KEYS)):
        d[rand_key()] = gen_value(depth + 1)
    return d

def gen_value(depth: int) -> Any:
    r = random.random()
    if depth >= MAX_GEN_DEPTH or r < 0.5:
        return rand_text(1)
    if r < 0.8:
        return gen_mapping(depth)
    # A one-element list under "repeat" reads back as a scalar.
    return [rand_text(1) for _ in range(random.randint(2, MAX_LIST))]

def gen_holey(depth: int) -> Any:
    # Structures shaped like merge output: lists padded with UNDEFINED.
    r = random.random()
    if depth >= MAX_GEN_DEPTH or r < 0.4:
        return random.choice([rand_text(0), None])
    if r < 0.7:
        return {rand_key(): gen_holey(depth + 1) for _ in range(random.randint(0, MAX_KEYS))}
    return [UNDEFINED if random.random() < 0.3 else gen_holey(depth + 1)
            for _ in range(random.randint(0, MAX_LIST))]

def has_holes(value: Any) -> bool:
    stack: List[Any] = [value]
    while stack:
        node = stack.pop()
        if node is UNDEFINED:
            return True
        if isinstance(node, dict):
            stack.extend(node.values())
        elif isinstance(node, list):
            stack.extend(node)
    return False

def fail(label: str, ctx: Dict[str, Any]) -> int:
    print("INVARIANT FAIL:", label)
    print("CTX:", json.dumps(ctx, ensure_ascii=False, default=repr)[:2000])
    return 1

def main() -> int:
    for t in range(TRIALS):
        m = gen_mapping(0)

        # (1) Round-trip law, under every array format
        for array_format in sorted(ARRAY_FORMATS):
            text = stringify(m, array_format=array_format)
            back = parse(text)
            if back != m:
                return fail("round trip ({})".format(array_format),
                            {"trial": t, "value": m, "query": text, "parsed": back})

        # (2) Stringify stability
        q1 = stringify(m)
        q2 = stringify(m)
        if q1 != q2:
            return fail("stringify determinism", {"trial": t, "value": m})
        if stringify(parse(q1)) != q1:
            return fail("stringify fixpoint", {"trial": t, "query": q1})

        # (3) Compaction idempotence
        holey = {"root": gen_holey(0)}
        once = compact(copy.deepcopy(holey))
        if has_holes(once):
            return fail("compaction left holes", {"trial": t, "value": holey})
        twice = compact(copy.deepcopy(once))
        if twice != once:
            return fail("compaction idempotence", {"trial": t, "value": holey})

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
