"""
Unit tests for the ldpsc command line
"""

import io
import logging
import os
import sys
import tempfile
import unittest
from unittest import mock

from ldpsc.cli import build_parser, main
from ldpsc.logger import _ContextFormatter


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def _write_input(self, text):
        path = os.path.join(self.tmp.name, 'protos.h')
        with open(path, 'w') as f:
            f.write(text)
        return path

    def test_generate_to_file(self):
        src = self._write_input("int close(int fd);\n")
        out = os.path.join(self.tmp.name, 'stubs.c')
        self.assertEqual(main(['generate', src, '-o', out, '--log-path', '/tmp/l.log']), 0)
        with open(out) as f:
            text = f.read()
        self.assertTrue(text.startswith("#define _GNU_SOURCE\n"))
        self.assertIn('fopen("/tmp/l.log", "a")', text)

    def test_generate_stdin_to_stdout(self):
        stdin = mock.Mock()
        stdin.buffer = io.BytesIO(b"void noop();")
        stdout = io.StringIO()
        with mock.patch.object(sys, 'stdin', stdin), mock.patch.object(sys, 'stdout', stdout):
            self.assertEqual(main(['generate']), 0)
        self.assertIn('fprintf(output, "noop()\\n");', stdout.getvalue())

    def test_parse_error_writes_nothing(self):
        src = self._write_input("int close(int fd)\n")
        out = os.path.join(self.tmp.name, 'stubs.c')
        with self.assertLogs('ldpsc', level=logging.ERROR) as captured:
            self.assertEqual(main(['generate', src, '-o', out]), 1)
        self.assertFalse(os.path.exists(out))
        self.assertIn(src, captured.records[0].getMessage())
        self.assertIn("expected ';'", captured.records[0].getMessage())
        self.assertNotIn('[cli.py:', _ContextFormatter().format(captured.records[0]))

    def test_missing_input_file(self):
        with self.assertLogs('ldpsc', level=logging.ERROR):
            self.assertEqual(main(['generate', os.path.join(self.tmp.name, 'nope.h')]), 1)

    def test_run_requires_command(self):
        src = self._write_input("void noop();")
        with self.assertLogs('ldpsc', level=logging.ERROR):
            self.assertEqual(main(['run', '-i', src, '--']), 2)

    def test_parser_options(self):
        args = build_parser().parse_args(
            ['build', 'in.h', '-o', 'lib.so', '--cc', 'clang', '--keep-source'])
        self.assertEqual(args.input, 'in.h')
        self.assertEqual(args.output, 'lib.so')
        self.assertEqual(args.cc, 'clang')
        self.assertTrue(args.keep_source)

        args = build_parser().parse_args(['run', '-i', 'in.h', '--', 'ls', '-l'])
        self.assertEqual([c for c in args.command if c != '--'], ['ls', '-l'])


if __name__ == '__main__':
    unittest.main()
