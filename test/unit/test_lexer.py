"""
Unit tests for the C identifier lexer
"""

import unittest

from ldpsc.bindings.lexer import (
    nondigit, digit, hexadecimal_digit, hex_quad, universal_character_name,
    identifier_nondigit, identifier, scan_identifier,
)
from ldpsc.errors import LexicalError, IncompleteInputError


class TestCharacterClasses(unittest.TestCase):
    """Single-character productions"""

    def test_nondigit(self):
        for ch in "_aGz":
            self.assertEqual(nondigit(ch), 1)
        for ch in "+-5~":
            with self.assertRaises(LexicalError):
                nondigit(ch)
        with self.assertRaises(IncompleteInputError):
            nondigit("")

    def test_hexadecimal_digit(self):
        for ch in "a08DfF":
            self.assertEqual(hexadecimal_digit(ch), 1)
        for ch in "g~":
            with self.assertRaises(LexicalError):
                hexadecimal_digit(ch)
        with self.assertRaises(IncompleteInputError):
            hexadecimal_digit("")

    def test_digit(self):
        for ch in "0359":
            self.assertEqual(digit(ch), 1)
        for ch in "gaA`":
            with self.assertRaises(LexicalError):
                digit(ch)
        with self.assertRaises(IncompleteInputError):
            digit("")

    def test_offset_is_respected(self):
        self.assertEqual(digit("ab7", 2), 3)
        with self.assertRaises(LexicalError) as ctx:
            digit("ab7", 1)
        self.assertEqual(ctx.exception.offset, 1)


class TestHexQuad(unittest.TestCase):

    def test_accepts_four_hex_digits(self):
        self.assertEqual(hex_quad("abcd"), 4)
        self.assertEqual(hex_quad("f00d"), 4)
        self.assertEqual(hex_quad("1337"), 4)

    def test_stops_after_four(self):
        self.assertEqual(hex_quad("12345"), 4)

    def test_short_input_is_incomplete(self):
        with self.assertRaises(IncompleteInputError):
            hex_quad("123")
        with self.assertRaises(IncompleteInputError):
            hex_quad("")

    def test_non_hex_character_rejected(self):
        with self.assertRaises(LexicalError) as ctx:
            hex_quad("123g")
        self.assertEqual(ctx.exception.offset, 3)


class TestUniversalCharacterName(unittest.TestCase):

    def test_short_form(self):
        self.assertEqual(universal_character_name("\\u1337"), 6)
        self.assertEqual(universal_character_name("\\u78ba"), 6)

    def test_long_form(self):
        self.assertEqual(universal_character_name("\\UffAC1234"), 10)

    def test_short_runs_fail(self):
        with self.assertRaises(IncompleteInputError):
            universal_character_name("\\UffAC123")
        with self.assertRaises(IncompleteInputError):
            universal_character_name("\\u12")
        with self.assertRaises(LexicalError):
            universal_character_name("\\UffAC123 ")
        with self.assertRaises(LexicalError):
            universal_character_name("\\u12 x")

    def test_requires_backslash_escape(self):
        with self.assertRaises(LexicalError):
            universal_character_name("a123g")
        with self.assertRaises(LexicalError):
            universal_character_name("\\x1234")
        with self.assertRaises(IncompleteInputError):
            universal_character_name("")
        with self.assertRaises(IncompleteInputError):
            universal_character_name("\\")


class TestIdentifier(unittest.TestCase):

    def test_identifier_nondigit(self):
        self.assertEqual(identifier_nondigit("\\u1337"), 6)
        self.assertEqual(identifier_nondigit("a"), 1)
        self.assertEqual(identifier_nondigit("_"), 1)
        with self.assertRaises(LexicalError):
            identifier_nondigit("5")
        with self.assertRaises(IncompleteInputError):
            identifier_nondigit("")

    def test_maximal_munch(self):
        self.assertEqual(scan_identifier("_abc789 "), ("_abc789", 7))
        self.assertEqual(scan_identifier("a+"), ("a", 1))
        self.assertEqual(scan_identifier("qr\\u1289 "), ("qr\\u1289", 8))
        self.assertEqual(scan_identifier("x\\U0001F600y("), ("x\\U0001F600y", 12))

    def test_runs_to_end_of_buffer(self):
        self.assertEqual(identifier("abc"), 3)
        self.assertEqual(identifier("  name", 2), 6)

    def test_truncated_escape_ends_token(self):
        self.assertEqual(identifier("ab\\u12"), 2)
        self.assertEqual(identifier("ab\\n"), 2)

    def test_cannot_start_with_digit(self):
        with self.assertRaises(LexicalError):
            identifier("5abc")
        with self.assertRaises(IncompleteInputError):
            identifier("")


if __name__ == '__main__':
    unittest.main()
