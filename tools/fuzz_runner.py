#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Robustness fuzzing for nestedqs.
#
# Generates three fuzz categories:
#   A) random query strings built from syntax-heavy fragments -> parse
#   B) random parse options over the same strings
#   C) deep bracket chains -> parse must terminate with the right depth
#
# parse must never raise, must return a dict, and must not leak list
# holes; its output must stringify without raising.  Any failure prints
# a minimal repro payload and exits non-zero.

import os, sys, json, random
from typing import Any, Dict, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from nestedqs import UNDEFINED, parse, stringify

SEED = int(os.environ.get("NESTEDQS_SEED", "4242"))
ROUNDS = int(os.environ.get("NESTEDQS_FUZZ_ROUNDS", "5000"))
MAX_CHAIN = int(os.environ.get("NESTEDQS_FUZZ_MAX_CHAIN", "3000"))

random.seed(SEED)

FRAGMENTS = [
    "a", "b", "0", "1", "20", "21", "01", "-1", "[", "]", "[]", "[0]", "[1]",
    "[a]", "[]=", "]=", "=", "==", "&", "&&", ".", "..", "%", "%2", "%zz",
    "%5B", "%5D", "%E2%9C%93", "%C3%B8", "%FF", "%26%2310003%3B", "+", "?",
    "utf8=", "toString", "__proto__", "[constructor]", "ø", "✓", " ",
]

def rand_query() -> str:
    return "".join(random.choice(FRAGMENTS) for _ in range(random.randint(0, 24)))

def rand_options() -> Dict[str, Any]:
    opts: Dict[str, Any] = {}
    if random.random() < 0.3:
        opts["allow_dots"] = True
    if random.random() < 0.3:
        opts["depth"] = random.randint(-1, 8)
    if random.random() < 0.3:
        opts["array_limit"] = random.randint(-1, 25)
    if random.random() < 0.2:
        opts["strict_null_handling"] = True
    if random.random() < 0.2:
        opts["parse_arrays"] = False
    if random.random() < 0.2:
        opts["allow_prototypes"] = True
    if random.random() < 0.2:
        opts["charset"] = "iso-8859-1"
    if random.random() < 0.2:
        opts["charset_sentinel"] = True
    if random.random() < 0.2:
        opts["interpret_numeric_entities"] = True
    if random.random() < 0.1:
        opts["ignore_query_prefix"] = True
    if random.random() < 0.1:
        opts["parameter_limit"] = random.randint(1, 5)
    return opts

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

def failure(label: str, ctx: Dict[str, Any]) -> None:
    print("FAIL:", label)
    print("CTX:", json.dumps(ctx, ensure_ascii=False, default=repr)[:4000])
    raise SystemExit(1)

def check_parse(query: str, opts: Dict[str, Any], ctx: Dict[str, Any]) -> None:
    try:
        result = parse(query, **opts)
    except Exception as e:
        failure("parse raised {}: {}".format(type(e).__name__, e), ctx)
    if not isinstance(result, dict):
        failure("parse returned {}".format(type(result).__name__), ctx)
    if has_holes(result):
        failure("parse leaked list holes", ctx)
    try:
        text = stringify(result)
    except Exception as e:
        failure("stringify raised {}: {}".format(type(e).__name__, e), ctx)
    if not isinstance(text, str):
        failure("stringify returned {}".format(type(text).__name__), ctx)

def chain_depth(value: Any, key: str) -> int:
    depth = 0
    while isinstance(value, dict) and key in value:
        value = value[key]
        depth += 1
    return depth

def main() -> int:
    for i in range(ROUNDS):
        r = random.random()

        # A) default options
        if r < 0.45:
            q = rand_query()
            check_parse(q, {}, {"round": i, "query": q})
            continue

        # B) random options
        if r < 0.95:
            q = rand_query()
            opts = rand_options()
            check_parse(q, opts, {"round": i, "query": q, "options": opts})
            continue

        # C) deep chains
        n = random.randint(1, MAX_CHAIN)
        q = "root" + "[p]" * n + "=leaf"
        result = parse(q, depth=n)
        if chain_depth(result.get("root"), "p") != n:
            failure("deep chain depth", {"round": i, "levels": n})

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED} (no failures)")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
