"""
Unit tests for the whole prototype -> C source transformation
"""

import unittest

from ldpsc import transform, Config
from ldpsc.errors import ParseError, TypeParseError, DeclarationSyntaxError
from ldpsc.transform import PREAMBLE, assemble


class TestTransform(unittest.TestCase):

    def test_preamble_only_for_empty_input(self):
        self.assertEqual(transform(b""), PREAMBLE)
        self.assertEqual(PREAMBLE, "#define _GNU_SOURCE\n#include <dlfcn.h>\n#include <stdio.h>\n")

    def test_two_definitions_in_order(self):
        text = transform(b"int open(const char *path, int flags);\nint close(int fd);\n")
        self.assertTrue(text.startswith(PREAMBLE + "\nint open(const char *path, int flags) {\n"))

        body = text[len(PREAMBLE):]
        chunks = body.split("\n\n")
        self.assertEqual(len(chunks), 2)
        first, second = chunks
        self.assertTrue(first.lstrip("\n").startswith("int open("))
        self.assertTrue(second.startswith("int close("))
        self.assertTrue(second.endswith("}\n"))

        # each definition only uses its own parameters
        self.assertNotIn("fd", first)
        self.assertNotIn("path", second)
        self.assertNotIn("flags", second)

    def test_exactly_one_blank_line_between(self):
        text = transform("void a();void b();")
        self.assertIn("}\n\nvoid b() {\n", text)
        self.assertNotIn("\n\n\n", text)

    def test_config_reaches_generator(self):
        text = transform("int close(int fd);", Config(log_path="/var/log/x.log"))
        self.assertIn('fopen("/var/log/x.log", "a")', text)

    def test_atomic_failure(self):
        bad_inputs = [
            (b"int close(int fd)", DeclarationSyntaxError),
            (b"unsigned long strlen(const char *s);", TypeParseError),
            (b"int add(int a, int b;", DeclarationSyntaxError),
            (b"int zero() { return 0; }", DeclarationSyntaxError),
            (b"int ok(int a);\nint close(int fd)", DeclarationSyntaxError),
        ]
        for content, exc_type in bad_inputs:
            with self.subTest(content=content):
                with self.assertRaises(exc_type):
                    transform(content)

    def test_all_errors_are_parse_errors(self):
        with self.assertRaises(ParseError):
            transform(b"struct stat *s;")

    def test_assemble_matches_transform(self):
        from ldpsc.bindings.c_parser import parse_declarations
        source = "size_t read(int fd, char *buf, size_t count);"
        self.assertEqual(assemble(parse_declarations(source)), transform(source))


if __name__ == '__main__':
    unittest.main()
