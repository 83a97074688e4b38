"""
This module contains tests for the reference annotation catalog and the data model.
"""
import unittest

from emotion_heatmap.annotations import (
    annotations, find_annotation, to_display_color, to_mpl_color,
)
from emotion_heatmap.data_model import (
    AnnotationColor, ColorSource, Dataset, ReferenceAnnotation, SamplePoint, Scope,
)


class TestCatalog(unittest.TestCase):
    def test_names_in_order(self):
        self.assertEqual(
            [a.name for a in annotations()],
            ['joy', 'excited', 'alarmed', 'annoyed', 'anxious',
             'bored', 'serious', 'relaxed', 'neutral'],
        )

    def test_constant(self):
        self.assertIs(annotations(), annotations())
        self.assertIsInstance(annotations(), tuple)

    def test_positions_in_unit_square(self):
        for ann in annotations():
            x, y = ann.position
            self.assertTrue(0 <= x <= 1 and 0 <= y <= 1, ann.name)

    def test_single_colour_source(self):
        for ann in annotations():
            self.assertIs(ann.color.source, ColorSource.RGB)

    def test_find(self):
        self.assertEqual(find_annotation('joy').position, (0.97, 0.56))
        with self.assertRaises(KeyError):
            find_annotation('sleepy')


class TestColours(unittest.TestCase):
    def test_rgb_string(self):
        self.assertEqual(to_display_color(find_annotation('joy')), 'rgb(255, 248, 77)')
        self.assertEqual(to_display_color(find_annotation('alarmed')), 'rgb(210, 37, 25)')

    def test_hsl_resolves_to_rgb(self):
        ann = ReferenceAnnotation('red', AnnotationColor.hsl(0, 1.0, 0.5), (0.5, 0.5))
        self.assertEqual(to_display_color(ann), 'rgb(255, 0, 0)')

    def test_mpl_colour(self):
        r, g, b = to_mpl_color(find_annotation('neutral'))
        self.assertAlmostEqual(r, 128 / 255)
        self.assertAlmostEqual(g, 128 / 255)
        self.assertAlmostEqual(b, 128 / 255)

    def test_invalid_channels(self):
        with self.assertRaises(ValueError):
            AnnotationColor.rgb(256, 0, 0)
        with self.assertRaises(ValueError):
            AnnotationColor.hsl(10, 1.5, 0.5)


class TestDataModel(unittest.TestCase):
    def test_scope_parse(self):
        self.assertIs(Scope.parse('Local'), Scope.LOCAL)
        self.assertIs(Scope.parse(' global '), Scope.GLOBAL)
        with self.assertRaises(ValueError):
            Scope.parse('regional')

    def test_dataset_rejects_foreign_scope(self):
        with self.assertRaises(ValueError):
            Dataset(Scope.LOCAL, (SamplePoint(0.1, 0.1, Scope.GLOBAL),))

    def test_dataset_sequence(self):
        dataset = Dataset.from_xy(Scope.GLOBAL, [(0.1, 0.2), (0.3, 0.4)])
        self.assertEqual(len(dataset), 2)
        self.assertEqual([p.x for p in dataset], [0.1, 0.3])
        self.assertEqual(list(dataset.ys), [0.2, 0.4])
        self.assertEqual(len(Dataset.empty(Scope.LOCAL)), 0)


if __name__ == '__main__':
    unittest.main()
