"""
Unit tests for the preload launcher environment
"""

import os
import sys
import unittest

from ldpsc.preload import get_preload_env, preload_variable, run_with_preload


@unittest.skipIf(sys.platform == 'darwin', "LD_PRELOAD semantics")
class TestPreloadEnv(unittest.TestCase):

    def test_sets_absolute_path(self):
        env = get_preload_env('lib/libstubs.so', {'PATH': '/bin'})
        self.assertEqual(env['LD_PRELOAD'], os.path.abspath('lib/libstubs.so'))
        self.assertEqual(env['PATH'], '/bin')

    def test_prepends_to_existing(self):
        base = {'LD_PRELOAD': '/opt/other.so'}
        env = get_preload_env('/tmp/libstubs.so', base)
        self.assertEqual(env['LD_PRELOAD'], '/tmp/libstubs.so:/opt/other.so')
        self.assertEqual(base['LD_PRELOAD'], '/opt/other.so')

    def test_variable_name(self):
        self.assertEqual(preload_variable(), 'LD_PRELOAD')


class TestRunWithPreload(unittest.TestCase):

    def test_empty_command(self):
        with self.assertRaises(ValueError):
            run_with_preload('/tmp/libstubs.so', [])

    def test_missing_library(self):
        with self.assertRaises(FileNotFoundError):
            run_with_preload('/nonexistent/libstubs.so', ['true'])


if __name__ == '__main__':
    unittest.main()
