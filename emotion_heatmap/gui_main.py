"""
Main window for the Session Emotion Heatmap.

Hosts the ControlPanel (left) and HeatmapView (right) in a horizontal
splitter, with a menu bar and status bar.  Both widgets share one
``VisualParameters`` instance.
"""

import logging

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QSplitter, QScrollArea, QMessageBox,
)
from PySide6.QtGui import QAction
from PySide6.QtCore import Qt

from . import APP_NAME, APP_VERSION
from .data_model import Scope
from .gui_control_panel import ControlPanel
from .gui_heatmap_view import HeatmapView
from .visual_params import VisualParameters

logger = logging.getLogger(__name__)


class HeatmapMainWindow(QMainWindow):
    """Main window for the Session Emotion Heatmap."""

    def __init__(self, params: VisualParameters = None):
        super().__init__()
        self._params = params if params is not None else VisualParameters()

        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.setMinimumSize(1100, 800)

        self._setup_ui()
        self._setup_menu()
        self._connect_signals()

        self.statusBar().showMessage("Ready — load the local and global datasets to begin")

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(4, 4, 4, 4)
        main_layout.setSpacing(4)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        self._control_panel = ControlPanel(self._params)
        scroll = QScrollArea()
        scroll.setWidget(self._control_panel)
        scroll.setWidgetResizable(True)
        scroll.setMinimumWidth(300)
        scroll.setMaximumWidth(420)

        self._view = HeatmapView(self._params)

        splitter.addWidget(scroll)
        splitter.addWidget(self._view)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([320, 880])

        main_layout.addWidget(splitter)

    def _setup_menu(self):
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")

        act_export = QAction("Export Heatmap...", self)
        act_export.triggered.connect(lambda *_: self._view.export_dialog())
        file_menu.addAction(act_export)

        file_menu.addSeparator()

        act_exit = QAction("Exit", self)
        act_exit.triggered.connect(self.close)
        file_menu.addAction(act_exit)

        examples_menu = menubar.addMenu("Examples")
        act_load_example = QAction("Load Example Datasets", self)
        act_load_example.triggered.connect(lambda *_: self._control_panel.load_example())
        examples_menu.addAction(act_load_example)

        help_menu = menubar.addMenu("Help")
        act_about = QAction("About", self)
        act_about.triggered.connect(lambda *_: self._show_about())
        help_menu.addAction(act_about)

    def _connect_signals(self):
        self._control_panel.dataset_loaded.connect(self._on_dataset_loaded)
        self._control_panel.load_failed.connect(self._on_load_failed)

    # ── Slots ────────────────────────────────────────────────────────

    def _on_dataset_loaded(self, dataset):
        try:
            drawn = self._view.set_dataset(dataset)
        except Exception as exc:
            logger.exception("Rendering the heatmap failed")
            QMessageBox.critical(
                self, "Heatmap Error",
                f"An error occurred while rendering the heatmap:\n\n{exc}",
            )
            self.statusBar().showMessage("Heatmap rendering failed")
            return
        if drawn:
            session = self._view.session
            self.statusBar().showMessage(
                f"Showing {len(session.local)} local and "
                f"{len(session.global_)} global samples", 5000,
            )
        else:
            waiting = Scope.GLOBAL if dataset.scope is Scope.LOCAL else Scope.LOCAL
            self.statusBar().showMessage(
                f"Loaded {dataset.scope.value} dataset — waiting for {waiting.value}"
            )

    def _on_load_failed(self, scope, source):
        # Fetch failures are logged by the loader; only the status bar reflects them
        self.statusBar().showMessage(f"Could not load {scope} dataset from {source}", 8000)

    def load_sources(self, local_source: str = None, global_source: str = None):
        """Load datasets given on the command line."""
        if local_source:
            self._control_panel.load_source(Scope.LOCAL, local_source)
        if global_source:
            self._control_panel.load_source(Scope.GLOBAL, global_source)

    def load_example(self):
        self._control_panel.load_example()

    def closeEvent(self, event):
        logger.debug("Main window closing, releasing heatmap session")
        self._control_panel.detach()
        self._view.close_session()
        super().closeEvent(event)

    def _show_about(self):
        QMessageBox.about(
            self,
            f"About {APP_NAME}",
            f"<h3>{APP_NAME} v{APP_VERSION}</h3>"
            f"<p>Superimposed kernel-density maps of local and global "
            f"session positions over the emotion plane.</p>"
            f"<p>Skew shifts opacity between the two densities to "
            f"emphasise one population over the other.</p>",
        )
