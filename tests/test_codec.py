"""Unit tests for the percent-codec primitives and format table."""

from __future__ import annotations

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from nestedqs import decode, encode, formats, interpret_numeric_entities
from nestedqs._codec import scalar_text


# ── decode ────────────────────────────────────────────────────

class TestDecode(unittest.TestCase):
    def test_plain(self):
        self.assertEqual(decode("abc"), "abc")

    def test_plus_is_space(self):
        self.assertEqual(decode("a+b"), "a b")
        self.assertEqual(decode("a+b", charset="iso-8859-1"), "a b")

    def test_utf8(self):
        self.assertEqual(decode("%E2%82%AC"), "€")
        self.assertEqual(decode("%c3%b8"), "ø")
        self.assertEqual(decode("%F0%90%90%B7"), "\U00010437")

    def test_iso_8859_1(self):
        self.assertEqual(decode("%A2%BD", charset="iso-8859-1"), "¢½")
        self.assertEqual(decode("%C3%B8", charset="iso-8859-1"), "Ã¸")

    def test_broken_escape_is_literal(self):
        self.assertEqual(decode("%"), "%")
        self.assertEqual(decode("100%"), "100%")
        self.assertEqual(decode("%zz%41"), "%zz%41")
        self.assertEqual(decode("%u263A"), "%u263A")

    def test_invalid_utf8_is_literal(self):
        self.assertEqual(decode("%E6"), "%E6")
        self.assertEqual(decode("a+%FF"), "a %FF")

    def test_iso_never_fails(self):
        self.assertEqual(decode("%zz%41", charset="iso-8859-1"), "%zzA")


# ── encode ────────────────────────────────────────────────────

class TestEncode(unittest.TestCase):
    def test_unreserved_untouched(self):
        text = "ABCXYZabcxyz0189-._~"
        self.assertEqual(encode(text), text)

    def test_reserved_escaped(self):
        self.assertEqual(encode(" !'()*"), "%20%21%27%28%29%2A")
        self.assertEqual(encode("a[b]=c&d"), "a%5Bb%5D%3Dc%26d")

    def test_multibyte(self):
        self.assertEqual(encode("€"), "%E2%82%AC")
        self.assertEqual(encode("\U0001F600"), "%F0%9F%98%80")

    def test_lone_surrogate(self):
        self.assertEqual(encode("\ud83d"), "%ED%A0%BD")

    def test_empty(self):
        self.assertEqual(encode(""), "")

    def test_scalars(self):
        self.assertEqual(encode(12), "12")
        self.assertEqual(encode(True), "true")

    def test_bytes(self):
        self.assertEqual(encode(b"a b\xff"), "a%20b%FF")
        self.assertEqual(encode(bytearray(b"~")), "~")

    def test_iso_8859_1(self):
        self.assertEqual(encode("æ", charset="iso-8859-1"), "%E6")
        self.assertEqual(encode("a b", charset="iso-8859-1"), "a%20b")
        self.assertEqual(encode("☺", charset="iso-8859-1"), "%26%239786%3B")
        self.assertEqual(encode("\U0001F600", charset="iso-8859-1"), "%26%23128512%3B")

    def test_round_trip(self):
        for text in ("plain", "a b&c=d", "ünïcödé", "\U0001F600 ok"):
            with self.subTest(text=text):
                self.assertEqual(decode(encode(text)), text)


# ── Numeric entities ──────────────────────────────────────────

class TestNumericEntities(unittest.TestCase):
    def test_replaced(self):
        self.assertEqual(interpret_numeric_entities("&#9786;"), "☺")
        self.assertEqual(interpret_numeric_entities("a&#65;b&#66;"), "aAbB")

    def test_out_of_range_kept(self):
        self.assertEqual(interpret_numeric_entities("&#99999999;"), "&#99999999;")

    def test_non_entities_untouched(self):
        self.assertEqual(interpret_numeric_entities("&#x41;"), "&#x41;")
        self.assertEqual(interpret_numeric_entities("&#;"), "&#;")
        self.assertEqual(interpret_numeric_entities("plain"), "plain")


# ── Scalars and formats ───────────────────────────────────────

class TestScalarText(unittest.TestCase):
    def test_rendering(self):
        self.assertEqual(scalar_text("x"), "x")
        self.assertEqual(scalar_text(False), "false")
        self.assertEqual(scalar_text(-3), "-3")
        self.assertEqual(scalar_text(4.0), "4")
        self.assertEqual(scalar_text(0.25), "0.25")
        self.assertEqual(scalar_text(b"hi"), "hi")


class TestFormats(unittest.TestCase):
    def test_names(self):
        self.assertEqual(formats.DEFAULT, formats.RFC3986)
        self.assertEqual(set(formats.FORMATTERS), {"RFC1738", "RFC3986"})

    def test_formatters(self):
        self.assertEqual(formats.FORMATTERS[formats.RFC1738]("a%20b"), "a+b")
        self.assertEqual(formats.FORMATTERS[formats.RFC3986]("a%20b"), "a%20b")

    def test_table_is_read_only(self):
        with self.assertRaises(TypeError):
            formats.FORMATTERS["custom"] = str


if __name__ == "__main__":
    unittest.main()
