"""
This module contains tests for the command line headless export.
"""
import logging
import os
import tempfile
import unittest

import matplotlib
matplotlib.use('Agg')

from emotion_heatmap.__main__ import build_parser, export_headless, main
from emotion_heatmap.example_data import generate_example_json
from emotion_heatmap.visual_params import VisualParameters


class TestExportHeadless(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = self._tmp.name
        self.out = os.path.join(self.dir, 'heatmap.png')

    def tearDown(self):
        package_logger = logging.getLogger('emotion_heatmap')
        package_logger.handlers.clear()
        package_logger.setLevel(logging.NOTSET)
        self._tmp.cleanup()

    def _export(self, *argv) -> int:
        args = build_parser().parse_args(list(argv) + ['--export', self.out])
        with matplotlib.rc_context():
            return export_headless(args, VisualParameters())

    def test_example_writes_png(self):
        with matplotlib.rc_context():
            with self.assertRaises(SystemExit) as ctx:
                main(['--example', '--export', self.out, '--log-level', 'ERROR'])
        self.assertEqual(ctx.exception.code, 0)
        self.assertTrue(os.path.isfile(self.out))
        self.assertGreater(os.path.getsize(self.out), 0)

    def test_generated_files_export(self):
        paths = generate_example_json(self.dir, n_local=20, n_global=50)
        status = self._export('--local', paths['local'], '--global', paths['global'])
        self.assertEqual(status, 0)
        self.assertTrue(os.path.isfile(self.out))

    def test_unreadable_local_returns_one(self):
        paths = generate_example_json(self.dir, n_local=20, n_global=50)
        missing = os.path.join(self.dir, 'nope.json')
        with self.assertLogs('emotion_heatmap.data_loader', level='ERROR'):
            status = self._export('--local', missing, '--global', paths['global'])
        self.assertEqual(status, 1)
        self.assertFalse(os.path.exists(self.out))

    def test_missing_global_returns_two(self):
        paths = generate_example_json(self.dir, n_local=20, n_global=50)
        with self.assertLogs('emotion_heatmap', level='ERROR'):
            status = self._export('--local', paths['local'])
        self.assertEqual(status, 2)
        self.assertFalse(os.path.exists(self.out))


if __name__ == '__main__':
    unittest.main()
