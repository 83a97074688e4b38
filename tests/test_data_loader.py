"""
This module contains tests for dataset loading.
"""
import json
import os
import tempfile
import unittest
from unittest import mock
from urllib.error import URLError

from emotion_heatmap.data_loader import (
    DataFetchFailure, fetch_samples, load_dataset, parse_samples,
)
from emotion_heatmap.data_model import Scope
from emotion_heatmap.example_data import generate_example_json


class TestLoadDataset(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name: str, text: str) -> str:
        path = os.path.join(self.dir, name)
        with open(path, 'w', encoding='utf-8') as fh:
            fh.write(text)
        return path

    def test_valid_file(self):
        path = self._write('local.json', json.dumps([
            {'x': 0.1, 'y': 0.2, 'scope': 'local'},
            {'x': 0.95, 'y': 0.95, 'scope': 'local'},
        ]))
        dataset = load_dataset(path, Scope.LOCAL)
        self.assertIsNotNone(dataset)
        self.assertEqual(len(dataset), 2)
        self.assertIs(dataset.scope, Scope.LOCAL)
        self.assertEqual((dataset.points[1].x, dataset.points[1].y), (0.95, 0.95))
        self.assertEqual(dataset.source, path)

    def test_bom_and_missing_scope(self):
        path = self._write('global.json', '\ufeff[{"x": 0, "y": 1}]')
        dataset = load_dataset(path, Scope.GLOBAL)
        self.assertEqual(len(dataset), 1)
        self.assertIs(dataset.points[0].scope, Scope.GLOBAL)

    def test_empty_array(self):
        path = self._write('empty.json', '[]')
        dataset = load_dataset(path, Scope.LOCAL)
        self.assertIsNotNone(dataset)
        self.assertEqual(len(dataset), 0)

    def test_unparsable_file_returns_none(self):
        path = self._write('broken.json', '[{"x": 0.1,')
        with self.assertLogs('emotion_heatmap.data_loader', level='ERROR'):
            self.assertIsNone(load_dataset(path, Scope.LOCAL))

    def test_non_array_returns_none(self):
        path = self._write('object.json', '{"x": 0.1, "y": 0.2}')
        with self.assertLogs('emotion_heatmap.data_loader', level='ERROR'):
            self.assertIsNone(load_dataset(path, Scope.GLOBAL))

    def test_missing_file_returns_none(self):
        with self.assertLogs('emotion_heatmap.data_loader', level='ERROR'):
            self.assertIsNone(load_dataset(os.path.join(self.dir, 'nope.json'), Scope.LOCAL))

    def test_fetch_raises(self):
        with self.assertRaises(DataFetchFailure):
            fetch_samples(os.path.join(self.dir, 'nope.json'))

    def test_example_files_load(self):
        paths = generate_example_json(self.dir, n_local=20, n_global=50)
        local = load_dataset(paths['local'], Scope.LOCAL)
        global_ = load_dataset(paths['global'], Scope.GLOBAL)
        self.assertGreater(len(local), 0)
        self.assertGreater(len(global_), 0)
        for pt in list(local) + list(global_):
            self.assertTrue(0.0 <= pt.x <= 1.0 and 0.0 <= pt.y <= 1.0)


def _response(body: bytes, charset: str = 'utf-8'):
    response = mock.MagicMock()
    response.__enter__.return_value = response
    response.headers.get_content_charset.return_value = charset
    response.read.return_value = body
    return response


class TestFetchUrl(unittest.TestCase):
    URL = 'https://example.org/samples/local.json'

    @mock.patch('emotion_heatmap.data_loader.urlopen')
    def test_url_source(self, urlopen):
        urlopen.return_value = _response(b'[{"x": 0.25, "y": 0.5, "scope": "local"}]')
        dataset = load_dataset(self.URL, Scope.LOCAL)
        self.assertEqual(len(dataset), 1)
        self.assertEqual(dataset.source, self.URL)
        request = urlopen.call_args[0][0]
        self.assertEqual(request.full_url, self.URL)

    @mock.patch('emotion_heatmap.data_loader.urlopen')
    def test_unknown_charset_is_fetch_failure(self, urlopen):
        urlopen.return_value = _response(b'[]', charset='x-no-such-charset')
        with self.assertRaises(DataFetchFailure):
            fetch_samples(self.URL)
        with self.assertLogs('emotion_heatmap.data_loader', level='ERROR'):
            self.assertIsNone(load_dataset(self.URL, Scope.LOCAL))

    @mock.patch('emotion_heatmap.data_loader.urlopen')
    def test_unreachable_url(self, urlopen):
        urlopen.side_effect = URLError('connection refused')
        with self.assertLogs('emotion_heatmap.data_loader', level='ERROR'):
            self.assertIsNone(load_dataset(self.URL, Scope.GLOBAL))


class TestParseSamples(unittest.TestCase):
    def test_malformed_records_skipped(self):
        records = [
            {'x': 0.1, 'y': 0.1, 'scope': 'local'},
            {'x': 'a', 'y': 0.1},
            {'y': 0.3},
            [0.1, 0.2],
            {'x': True, 'y': 0.2},
            {'x': 0.4, 'y': 0.4, 'scope': 'regional'},
        ]
        with self.assertWarns(UserWarning):
            dataset = parse_samples(records, Scope.LOCAL)
        self.assertEqual(len(dataset), 1)

    def test_scope_mismatch_skipped(self):
        records = [
            {'x': 0.1, 'y': 0.1, 'scope': 'GLOBAL'},
            {'x': 0.2, 'y': 0.2, 'scope': 'local'},
        ]
        with self.assertWarns(UserWarning):
            dataset = parse_samples(records, Scope.LOCAL)
        self.assertEqual([p.x for p in dataset], [0.2])

    def test_integer_coordinates(self):
        dataset = parse_samples([{'x': 1, 'y': 0}], Scope.GLOBAL)
        self.assertEqual(dataset.points[0].x, 1.0)
        self.assertIsInstance(dataset.points[0].x, float)


if __name__ == '__main__':
    unittest.main()
