"""
Heatmap canvas widget (right side) for the Session Emotion Heatmap.

Hosts the single matplotlib FigureCanvas the density map is attached
to, with a navigation toolbar and export buttons.  The widget owns the
``HeatmapSession``; closing the widget releases the drawing.
"""

import os

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QFileDialog, QMessageBox,
)

import matplotlib
matplotlib.use('QtAgg')
from matplotlib.figure import Figure
from matplotlib.backends.backend_qtagg import (
    FigureCanvasQTAgg as FigureCanvas,
    NavigationToolbar2QT as NavigationToolbar,
)

from .constants import (
    CANVAS_DPI, CANVAS_SIZE_PX, DARK_COLORS, PLOT_STYLE_DARK,
)
from .data_model import Dataset, Scope
from .export import copy_to_clipboard, export_png
from .session import HeatmapSession
from .theme import apply_plot_style
from .visual_params import VisualParameters


class HeatmapView(QWidget):
    """Square figure canvas bound to one ``HeatmapSession``."""

    def __init__(self, params: VisualParameters, parent=None):
        super().__init__(parent)
        apply_plot_style(PLOT_STYLE_DARK)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        # ── Toolbar row ──────────────────────────────────────────────
        toolbar_row = QHBoxLayout()
        toolbar_row.setSpacing(4)

        side = CANVAS_SIZE_PX / CANVAS_DPI
        self._fig = Figure(figsize=(side, side), dpi=CANVAS_DPI)
        self._fig.set_facecolor(DARK_COLORS['bg_alt'])
        self._canvas = FigureCanvas(self._fig)
        self._toolbar = NavigationToolbar(self._canvas, self)

        toolbar_row.addWidget(self._toolbar)
        toolbar_row.addStretch()

        self._btn_copy = QPushButton("Copy to Clipboard")
        self._btn_copy.setFixedHeight(28)
        self._btn_copy.clicked.connect(lambda *_: self._on_copy())
        toolbar_row.addWidget(self._btn_copy)

        self._btn_export = QPushButton("Export PNG...")
        self._btn_export.setFixedHeight(28)
        self._btn_export.clicked.connect(lambda *_: self.export_dialog())
        toolbar_row.addWidget(self._btn_export)

        layout.addLayout(toolbar_row)
        layout.addWidget(self._canvas, 1)

        self._session = HeatmapSession(
            self._fig, params, on_rendered=self.refresh,
        )
        self._set_export_enabled(False)

    @property
    def fig(self) -> Figure:
        return self._fig

    @property
    def session(self) -> HeatmapSession:
        return self._session

    def refresh(self):
        """Redraw the canvas after figure changes."""
        self._set_export_enabled(self._session.is_attached)
        self._canvas.draw_idle()

    def _set_export_enabled(self, enabled: bool):
        self._btn_copy.setEnabled(enabled)
        self._btn_export.setEnabled(enabled)

    def set_dataset(self, dataset: Dataset) -> bool:
        """Replace the local or global dataset; ``True`` if a map was drawn."""
        if dataset.scope is Scope.LOCAL:
            return self._session.set_local(dataset)
        return self._session.set_global(dataset)

    def close_session(self):
        self._session.close()

    def _on_copy(self):
        if copy_to_clipboard(self._fig):
            self.window().statusBar().showMessage("Heatmap copied to clipboard", 3000)
        else:
            QMessageBox.warning(self, "Copy Failed", "Could not copy heatmap to clipboard.")

    def export_dialog(self):
        if not self._session.is_attached:
            QMessageBox.warning(
                self, "Nothing to Export",
                "Load both datasets before exporting.",
            )
            return
        path, _ = QFileDialog.getSaveFileName(
            self, "Export Heatmap as PNG",
            "", "PNG Files (*.png);;All Files (*)",
        )
        if not path:
            return
        if not path.lower().endswith('.png'):
            path += '.png'
        try:
            export_png(self._fig, path)
            self.window().statusBar().showMessage(
                f"Exported to {os.path.basename(path)}", 3000
            )
        except (OSError, ValueError) as exc:
            QMessageBox.critical(self, "Export Error", f"Failed to export: {exc}")
