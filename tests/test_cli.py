"""Tests for the nestedqs command-line front end."""

from __future__ import annotations

import contextlib
import io
import json
import os
import sys
import tempfile
import unittest
from typing import List, Optional, Tuple
from unittest import mock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from nestedqs import __version__
from nestedqs._cli import main


def _run(argv: List[str], stdin: Optional[str] = None) -> Tuple[int, str, str]:
    """Run the CLI in-process.  Returns (exit status, stdout, stderr)."""
    out, err = io.StringIO(), io.StringIO()
    status = 0
    with mock.patch.object(sys, "stdin", io.StringIO(stdin or "")), \
            contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        try:
            main(argv)
        except SystemExit as e:
            status = e.code if isinstance(e.code, int) else 1
    return status, out.getvalue(), err.getvalue()


# ── parse ─────────────────────────────────────────────────────

class TestParseCommand(unittest.TestCase):
    def test_positional_query(self):
        status, out, _ = _run(["parse", "a[b]=c&a[d][]=e"])
        self.assertEqual(status, 0)
        self.assertEqual(json.loads(out), {"a": {"b": "c", "d": ["e"]}})

    def test_stdin(self):
        _, out, _ = _run(["parse"], stdin="a=b&a=c\n")
        self.assertEqual(json.loads(out), {"a": ["b", "c"]})

    def test_input_file(self):
        with tempfile.NamedTemporaryFile("w", suffix=".txt", delete=False,
                                         encoding="utf-8") as f:
            f.write("x=%E2%82%AC")
            path = f.name
        try:
            _, out, _ = _run(["parse", "--input", path])
        finally:
            os.unlink(path)
        self.assertEqual(json.loads(out), {"x": "€"})

    def test_options(self):
        _, out, _ = _run(["parse", "--allow-dots", "a.b=c"])
        self.assertEqual(json.loads(out), {"a": {"b": "c"}})

        _, out, _ = _run(["parse", "--depth", "1", "a[b][c]=d"])
        self.assertEqual(json.loads(out), {"a": {"b": {"[c]": "d"}}})

        _, out, _ = _run(["parse", "--strict-null-handling", "a"])
        self.assertEqual(json.loads(out), {"a": None})

        _, out, _ = _run(["parse", "--ignore-query-prefix", "--delimiter", ";", "?a=b;c=d"])
        self.assertEqual(json.loads(out), {"a": "b", "c": "d"})

    def test_array_limit_zero_is_honoured(self):
        _, out, _ = _run(["parse", "--array-limit", "0", "a[1]=b"])
        self.assertEqual(json.loads(out), {"a": {"1": "b"}})

    def test_output_keeps_unicode(self):
        _, out, _ = _run(["parse", "a=%C3%B8"])
        self.assertIn("ø", out)


# ── stringify ─────────────────────────────────────────────────

class TestStringifyCommand(unittest.TestCase):
    def test_stdin(self):
        status, out, _ = _run(["stringify"], stdin='{"a": {"b": "c"}}')
        self.assertEqual(status, 0)
        self.assertEqual(out.strip(), "a%5Bb%5D=c")

    def test_no_encode(self):
        _, out, _ = _run(["stringify", "--no-encode"], stdin='{"a": {"b": "c"}}')
        self.assertEqual(out.strip(), "a[b]=c")

    def test_array_format(self):
        _, out, _ = _run(["stringify", "--no-encode", "--array-format", "brackets"],
                         stdin='{"a": ["b", "c"]}')
        self.assertEqual(out.strip(), "a[]=b&a[]=c")

    def test_format(self):
        _, out, _ = _run(["stringify", "--format", "RFC1738"], stdin='{"a": "b c"}')
        self.assertEqual(out.strip(), "a=b+c")

    def test_nulls(self):
        _, out, _ = _run(["stringify", "--strict-null-handling"], stdin='{"a": null, "b": ""}')
        self.assertEqual(out.strip(), "a&b=")

        _, out, _ = _run(["stringify", "--skip-nulls"], stdin='{"a": null, "b": "c"}')
        self.assertEqual(out.strip(), "b=c")

    def test_prefix_and_sentinel(self):
        _, out, _ = _run(["stringify", "--add-query-prefix", "--charset-sentinel"],
                         stdin='{"a": "b"}')
        self.assertEqual(out.strip(), "?utf8=%E2%9C%93&a=b")

    def test_invalid_json(self):
        status, out, err = _run(["stringify"], stdin="{not json")
        self.assertEqual(status, 2)
        self.assertEqual(out, "")
        self.assertIn("JSON parse error", err)


# ── Misc ──────────────────────────────────────────────────────

class TestMisc(unittest.TestCase):
    def test_version(self):
        status, out, _ = _run(["version"])
        self.assertEqual(status, 0)
        self.assertEqual(out.strip(), "nestedqs {}".format(__version__))

    def test_no_command(self):
        status, out, _ = _run([])
        self.assertEqual(status, 1)
        self.assertIn("usage", out)

    def test_unknown_choice(self):
        status, _, err = _run(["stringify", "--array-format", "commas"])
        self.assertEqual(status, 2)
        self.assertIn("invalid choice", err)


if __name__ == "__main__":
    unittest.main()
