"""
This module contains tests for the heatmap session state and recompute cycle.
"""
import unittest

import matplotlib
matplotlib.use('Agg')
from matplotlib.figure import Figure

from emotion_heatmap.data_model import Dataset, Scope
from emotion_heatmap.session import HeatmapSession
from emotion_heatmap.visual_params import VisualParameters


def _local():
    return Dataset.from_xy(Scope.LOCAL, [(0.95, 0.95), (0.2, 0.3), (0.21, 0.32)])


def _global():
    return Dataset.from_xy(Scope.GLOBAL, [(0.5, 0.5), (0.52, 0.49), (0.8, 0.1)])


class TestHeatmapSession(unittest.TestCase):
    def setUp(self):
        self.fig = Figure(figsize=(4, 4))
        self.params = VisualParameters()
        self.renders = []
        self.session = HeatmapSession(
            self.fig, self.params, on_rendered=lambda: self.renders.append(1),
        )

    def tearDown(self):
        self.session.close()

    def test_nothing_rendered_until_both_loaded(self):
        self.assertFalse(self.session.set_local(_local()))
        self.assertFalse(self.session.is_attached)
        self.assertEqual(self.fig.get_axes(), [])

        self.assertTrue(self.session.set_global(_global()))
        self.assertTrue(self.session.is_attached)
        self.assertEqual(len(self.renders), 1)
        self.assertEqual(len(self.fig.get_axes()), 2)

    def test_loads_in_either_order(self):
        self.assertFalse(self.session.set_global(_global()))
        self.assertTrue(self.session.set_local(_local()))

    def test_failed_load_keeps_dataset_unset(self):
        self.session.set_local(_local())
        self.assertFalse(self.session.set_global(None))
        self.assertFalse(self.session.is_ready)

    def test_clearing_dataset_releases_drawing(self):
        self.session.set_local(_local())
        self.session.set_global(_global())
        count = len(self.renders)

        self.assertFalse(self.session.set_local(None))
        self.assertFalse(self.session.is_attached)
        self.assertEqual(self.session.instructions, ())
        self.assertEqual(self.fig.get_axes(), [])
        self.assertEqual(len(self.renders), count + 1)

        self.assertTrue(self.session.set_local(_local()))
        self.assertTrue(self.session.is_attached)

    def test_parameter_edit_recomposes(self):
        self.session.set_local(_local())
        self.session.set_global(_global())
        self.assertNotIn('local-points', [i.name for i in self.session.instructions])

        self.params.show_points = True
        self.assertEqual(len(self.renders), 2)
        self.assertIn('local-points', [i.name for i in self.session.instructions])

        self.params.skew = 0.3
        self.assertEqual(len(self.renders), 3)

    def test_redraw_replaces_previous_artifact(self):
        self.session.set_local(_local())
        self.session.set_global(_global())
        self.params.opacity = 0.8
        self.params.bandwidth = 60
        # One main axes plus one colour bar, never accumulated
        self.assertEqual(len(self.fig.get_axes()), 2)
        self.assertEqual(len(self.fig.texts), 1)

    def test_replacing_dataset(self):
        self.session.set_local(_local())
        self.session.set_global(_global())
        replacement = Dataset.from_xy(Scope.LOCAL, [(0.1, 0.1)])
        self.assertTrue(self.session.set_local(replacement))
        self.assertIs(self.session.local, replacement)

    def test_wrong_scope_rejected(self):
        with self.assertRaises(ValueError):
            self.session.set_local(_global())

    def test_grid(self):
        self.session.set_local(_local())
        grid = self.session.grid(Scope.LOCAL)
        self.assertEqual(int(grid.sum()), 3)
        self.assertEqual(grid[95, 95], 1)
        with self.assertRaises(LookupError):
            self.session.grid(Scope.GLOBAL)

    def test_close_releases_and_ignores_later_triggers(self):
        self.session.set_local(_local())
        self.session.set_global(_global())
        self.session.close()

        self.assertTrue(self.session.closed)
        self.assertFalse(self.session.is_attached)
        self.assertEqual(self.fig.get_axes(), [])

        count = len(self.renders)
        self.params.opacity = 0.1
        self.assertFalse(self.session.set_local(_local()))
        self.assertFalse(self.session.recompute())
        self.assertEqual(len(self.renders), count)
        self.assertEqual(self.fig.get_axes(), [])

    def test_context_manager(self):
        fig = Figure(figsize=(4, 4))
        with HeatmapSession(fig) as session:
            session.set_local(_local())
            session.set_global(_global())
            self.assertTrue(session.is_attached)
        self.assertTrue(session.closed)
        self.assertEqual(fig.get_axes(), [])


if __name__ == '__main__':
    unittest.main()
