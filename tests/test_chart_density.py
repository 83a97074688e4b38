"""
This module contains tests for the density map renderer and PNG export.
"""
import os
import tempfile
import unittest

import numpy as np
import matplotlib
matplotlib.use('Agg')
from matplotlib.figure import Figure

from emotion_heatmap.chart_density import clamp_alpha, density_surface, render_density_map
from emotion_heatmap.constants import FIGURE_CAPTION
from emotion_heatmap.data_model import Dataset, Scope
from emotion_heatmap.export import export_png
from emotion_heatmap.layers import compose_layers
from emotion_heatmap.visual_params import VisualParameters


def _render(local, global_, params, fig=None):
    fig = fig if fig is not None else Figure(figsize=(5, 5))
    render_density_map(fig, local, global_, compose_layers(local, global_, params))
    return fig


def _has_scatter_of(ax, n: int) -> bool:
    return any(len(coll.get_offsets()) == n for coll in ax.collections)


class TestDensitySurface(unittest.TestCase):
    def test_empty_dataset(self):
        surface = density_surface(Dataset.empty(Scope.LOCAL), 20, resolution=32)
        self.assertEqual(surface.shape, (32, 32))
        self.assertFalse(surface.any())

    def test_normalised_peak_near_sample(self):
        dataset = Dataset.from_xy(Scope.LOCAL, [(0.25, 0.75)])
        surface = density_surface(dataset, 40, resolution=64)
        self.assertAlmostEqual(float(surface.max()), 1.0)
        row, col = np.unravel_index(np.argmax(surface), surface.shape)
        self.assertEqual((row, col), (48, 16))

    def test_wider_bandwidth_spreads_density(self):
        dataset = Dataset.from_xy(Scope.GLOBAL, [(0.5, 0.5)])
        narrow = density_surface(dataset, 10, resolution=64)
        wide = density_surface(dataset, 80, resolution=64)
        self.assertGreater(int((wide > 0.5).sum()), int((narrow > 0.5).sum()))


class TestClampAlpha(unittest.TestCase):
    def test_clamp(self):
        self.assertEqual(clamp_alpha(1.4), 1.0)
        self.assertEqual(clamp_alpha(-0.5), 0.0)
        self.assertEqual(clamp_alpha(0.3), 0.3)
        self.assertEqual(clamp_alpha(None), 0.0)


class TestRenderDensityMap(unittest.TestCase):
    def setUp(self):
        self.local = Dataset.from_xy(Scope.LOCAL, [(0.95, 0.95), (0.3, 0.3), (0.32, 0.28)])
        self.global_ = Dataset.from_xy(
            Scope.GLOBAL, [(0.5, 0.5), (0.55, 0.45), (0.1, 0.9), (0.12, 0.88)])

    def test_layout(self):
        fig = _render(self.local, self.global_, VisualParameters())
        axes = fig.get_axes()
        self.assertEqual(len(axes), 2)
        ax = axes[0]
        self.assertEqual(ax.get_xlim(), (0.0, 1.0))
        self.assertEqual(ax.get_ylim(), (0.0, 1.0))
        self.assertEqual(len(ax.get_xticks()), 21)
        self.assertEqual([t.get_text() for t in fig.texts], [FIGURE_CAPTION])

    def test_emotion_labels_and_dots(self):
        fig = _render(self.local, self.global_, VisualParameters())
        ax = fig.get_axes()[0]
        labels = [t.get_text() for t in ax.texts]
        self.assertEqual(len(labels), 9)
        self.assertIn('neutral', labels)
        self.assertTrue(_has_scatter_of(ax, 9))

    def test_point_overlay_follows_show_points(self):
        fig = _render(self.local, self.global_, VisualParameters(show_points=False))
        self.assertFalse(_has_scatter_of(fig.get_axes()[0], len(self.local)))

        fig = _render(self.local, self.global_, VisualParameters(show_points=True))
        self.assertTrue(_has_scatter_of(fig.get_axes()[0], len(self.local)))

    def test_overflowing_opacity_renders(self):
        fig = _render(self.local, self.global_, VisualParameters(opacity=0.9, skew=0.5))
        self.assertEqual(len(fig.get_axes()), 2)

    def test_empty_datasets(self):
        fig = _render(Dataset.empty(Scope.LOCAL), Dataset.empty(Scope.GLOBAL),
                      VisualParameters(show_points=True))
        self.assertEqual(len(fig.get_axes()[0].texts), 9)

    def test_rerender_clears_figure(self):
        fig = _render(self.local, self.global_, VisualParameters())
        _render(self.local, self.global_, VisualParameters(bandwidth=60), fig=fig)
        self.assertEqual(len(fig.get_axes()), 2)
        self.assertEqual(len(fig.texts), 1)


class TestExport(unittest.TestCase):
    def test_export_png_restores_figure(self):
        local = Dataset.from_xy(Scope.LOCAL, [(0.4, 0.6), (0.42, 0.61)])
        global_ = Dataset.from_xy(Scope.GLOBAL, [(0.5, 0.5)])
        fig = _render(local, global_, VisualParameters(show_points=True))
        facecolor = fig.get_facecolor()
        size = tuple(fig.get_size_inches())

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'heatmap.png')
            export_png(fig, path, dpi=50, width_inches=4.0)
            self.assertTrue(os.path.isfile(path))
            self.assertGreater(os.path.getsize(path), 0)

        self.assertEqual(fig.get_facecolor(), facecolor)
        self.assertEqual(tuple(fig.get_size_inches()), size)


if __name__ == '__main__':
    unittest.main()
