"""
Control panel (left side) for the Session Emotion Heatmap.

Dataset inputs (local / global JSON files), the Points checkbox, and
the Opacity, Bandwidth and Skew sliders.  Widget edits are written
straight into the shared ``VisualParameters``; its listeners drive the
redraw.
"""

import logging
import os

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox, QLabel, QPushButton,
    QLineEdit, QCheckBox, QSlider, QFileDialog, QGridLayout,
)
from PySide6.QtCore import Qt, Signal

from .constants import (
    DARK_COLORS, OPACITY_RANGE, BANDWIDTH_RANGE, SKEW_RANGE, slider_steps,
)
from .data_loader import load_dataset
from .data_model import Scope
from .visual_params import VisualParameters

logger = logging.getLogger(__name__)


class _RangeSlider(QWidget):
    """Horizontal QSlider mapped onto a ``(min, max, step, default)`` float range."""

    value_changed = Signal(float)

    def __init__(self, label: str, value_range, decimals: int, parent=None):
        super().__init__(parent)
        self._lo, self._hi, self._step, _ = value_range
        self._decimals = decimals

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        lbl = QLabel(label)
        lbl.setFixedWidth(72)
        self._slider = QSlider(Qt.Orientation.Horizontal)
        self._slider.setRange(0, slider_steps(value_range))
        self._slider.setSingleStep(1)
        self._value_label = QLabel("")
        self._value_label.setFixedWidth(44)
        self._value_label.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)

        layout.addWidget(lbl)
        layout.addWidget(self._slider, 1)
        layout.addWidget(self._value_label)

        self._slider.valueChanged.connect(self._on_slider_moved)

    def _to_value(self, position: int) -> float:
        return round(self._lo + position * self._step, self._decimals)

    def _to_position(self, value: float) -> int:
        return int(round((value - self._lo) / self._step))

    def _on_slider_moved(self, position: int) -> None:
        value = self._to_value(position)
        self._value_label.setText(f"{value:.{self._decimals}f}")
        self.value_changed.emit(value)

    def set_value(self, value: float) -> None:
        """Move the handle without emitting ``value_changed``."""
        self._slider.blockSignals(True)
        self._slider.setValue(self._to_position(value))
        self._slider.blockSignals(False)
        self._value_label.setText(f"{value:.{self._decimals}f}")


class ControlPanel(QWidget):
    """Left-side panel with dataset inputs and visual controls."""

    # Signals
    dataset_loaded = Signal(object)   # emits Dataset
    load_failed = Signal(str, str)    # scope value, source

    def __init__(self, params: VisualParameters, parent=None):
        super().__init__(parent)
        self._params = params
        self._sources = {Scope.LOCAL: '', Scope.GLOBAL: ''}
        self._setup_ui()
        self._connect_signals()
        self._sync_from_params(params)
        self._params.add_listener(self._sync_from_params)

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(8)

        # ── Group 1: Datasets ────────────────────────────────────────
        grp_data = QGroupBox("Datasets")
        data_layout = QGridLayout(grp_data)
        data_layout.setSpacing(4)

        self._edits = {}
        self._browse_buttons = {}
        for row, scope in enumerate((Scope.LOCAL, Scope.GLOBAL)):
            lbl = QLabel(scope.value.capitalize())
            edit = QLineEdit()
            edit.setReadOnly(True)
            edit.setPlaceholderText("No file selected")
            btn = QPushButton("Browse...")
            btn.setFixedWidth(80)
            data_layout.addWidget(lbl, row, 0)
            data_layout.addWidget(edit, row, 1)
            data_layout.addWidget(btn, row, 2)
            self._edits[scope] = edit
            self._browse_buttons[scope] = btn

        self._btn_example = QPushButton("Load Example Data")
        data_layout.addWidget(self._btn_example, 2, 0, 1, 3)

        self._lbl_status = QLabel("")
        self._lbl_status.setWordWrap(True)
        self._lbl_status.setStyleSheet(f"color: {DARK_COLORS['fg_dim']}; font-size: 11px;")
        data_layout.addWidget(self._lbl_status, 3, 0, 1, 3)

        layout.addWidget(grp_data)

        # ── Group 2: Display ─────────────────────────────────────────
        grp_display = QGroupBox("Display")
        disp_layout = QVBoxLayout(grp_display)
        disp_layout.setSpacing(6)

        self._chk_points = QCheckBox("Points")
        self._chk_points.setToolTip("Overlay the raw local samples")
        disp_layout.addWidget(self._chk_points)

        self._sld_opacity = _RangeSlider("Opacity", OPACITY_RANGE, 1)
        self._sld_bandwidth = _RangeSlider("Bandwidth", BANDWIDTH_RANGE, 0)
        self._sld_skew = _RangeSlider("Skew", SKEW_RANGE, 2)
        self._sld_skew.setToolTip(
            "Positive skew emphasises the local density,\n"
            "negative skew the global density."
        )
        disp_layout.addWidget(self._sld_opacity)
        disp_layout.addWidget(self._sld_bandwidth)
        disp_layout.addWidget(self._sld_skew)

        self._btn_reset = QPushButton("Reset")
        disp_layout.addWidget(self._btn_reset)

        layout.addWidget(grp_display)
        layout.addStretch()

    # ── Signal connections ───────────────────────────────────────────

    def _connect_signals(self):
        for scope, btn in self._browse_buttons.items():
            btn.clicked.connect(lambda checked=False, s=scope: self._browse(s))
        self._btn_example.clicked.connect(lambda *_: self.load_example())
        self._btn_reset.clicked.connect(lambda *_: self._params.reset())

        self._chk_points.toggled.connect(self._on_points_toggled)
        self._sld_opacity.value_changed.connect(self._on_opacity_changed)
        self._sld_bandwidth.value_changed.connect(self._on_bandwidth_changed)
        self._sld_skew.value_changed.connect(self._on_skew_changed)

    # ── Parameter slots ──────────────────────────────────────────────

    def _on_points_toggled(self, checked):
        self._params.show_points = checked

    def _on_opacity_changed(self, value):
        self._params.opacity = value

    def _on_bandwidth_changed(self, value):
        self._params.bandwidth = value

    def _on_skew_changed(self, value):
        self._params.skew = value

    def _sync_from_params(self, params: VisualParameters):
        self._chk_points.blockSignals(True)
        self._chk_points.setChecked(params.show_points)
        self._chk_points.blockSignals(False)
        self._sld_opacity.set_value(params.opacity)
        self._sld_bandwidth.set_value(params.bandwidth)
        self._sld_skew.set_value(params.skew)

    # ── Dataset loading ──────────────────────────────────────────────

    def _browse(self, scope: Scope):
        path, _ = QFileDialog.getOpenFileName(
            self, f"Select {scope.value} dataset",
            "", "JSON Files (*.json);;All Files (*)",
        )
        if path:
            self.load_source(scope, path)

    def load_source(self, scope: Scope, source: str) -> bool:
        """Load *source* as the *scope* dataset; return ``True`` on success."""
        self._sources[scope] = source
        self._edits[scope].setText(os.path.basename(source) or source)
        self._edits[scope].setToolTip(source)

        dataset = load_dataset(source, scope)
        if dataset is None:
            self._set_status(f"Could not load {scope.value} dataset", 'red')
            self.load_failed.emit(scope.value, source)
            return False

        self._set_status(f"Loaded {len(dataset)} {scope.value} samples", 'green')
        self.dataset_loaded.emit(dataset)
        return True

    def load_example(self):
        """Generate the example datasets and load both."""
        from .example_data import generate_example_json
        import tempfile

        paths = generate_example_json(
            os.path.join(tempfile.gettempdir(), 'emotion_heatmap_example')
        )
        logger.info("Example datasets written to %s", os.path.dirname(paths["local"]))
        self.load_source(Scope.LOCAL, paths['local'])
        self.load_source(Scope.GLOBAL, paths['global'])

    def _set_status(self, text: str, color_key: str):
        self._lbl_status.setText(text)
        self._lbl_status.setStyleSheet(
            f"color: {DARK_COLORS[color_key]}; font-size: 11px;"
        )

    def detach(self):
        """Stop mirroring parameter changes (called on window close)."""
        self._params.remove_listener(self._sync_from_params)
