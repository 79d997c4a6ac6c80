"""nestedqs golden-vector suite.

Runs every vector in conformance/vectors.json and compares the outcome
with conformance/expected.json.  Each outcome is either
{"result": <parsed structure or query string>} or {"err": <ERR_* code>}.

Usage:
    python tests/test_conformance.py [--vectors-dir DIR]
    python -m pytest tests/test_conformance.py -v
    NESTEDQS_VECTORS_DIR=path/to/conformance python tests/test_conformance.py
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import unittest
from typing import Any, Dict

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from nestedqs import QsError, parse, stringify

VECTORS_DIR = os.environ.get(
    "NESTEDQS_VECTORS_DIR",
    os.path.join(os.path.dirname(__file__), "..", "conformance"),
)

_OPS = {"parse": parse, "stringify": stringify}


def _load(name: str) -> Dict[str, Any]:
    with open(os.path.join(VECTORS_DIR, name), "r", encoding="utf-8") as f:
        return json.load(f)


def run_vector(vec: dict) -> Dict[str, Any]:
    """Execute one vector.  Returns {"result": ...} or {"err": ...}."""
    try:
        return {"result": _OPS[vec["op"]](vec["input"], **vec.get("options", {}))}
    except QsError as e:
        return {"err": e.code}


class ConformanceTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.vectors = _load("vectors.json")["vectors"]
        cls.expected = _load("expected.json")["expected"]

    def test_every_vector_has_an_outcome(self):
        ids = [vec["test_id"] for vec in self.vectors]
        self.assertEqual(len(ids), len(set(ids)))
        self.assertEqual(set(ids), set(self.expected))

    def test_vectors(self):
        for vec in self.vectors:
            with self.subTest(vec["test_id"]):
                self.assertEqual(run_vector(vec), self.expected[vec["test_id"]])


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="nestedqs conformance runner")
    parser.add_argument("--vectors-dir", default=None,
                        help="Directory with vectors.json and expected.json")
    args, remaining = parser.parse_known_args()
    if args.vectors_dir:
        VECTORS_DIR = args.vectors_dir
    unittest.main(argv=[sys.argv[0]] + remaining)
