"""
View state for one heatmap display.

``HeatmapSession`` owns everything that changes at runtime: the two
datasets, the ``VisualParameters``, and the single figure the map is
drawn on.  Every trigger (either dataset arriving, any parameter edit)
funnels into :meth:`HeatmapSession.recompute`, which composes the
layers and redraws the figure in place, releasing the previous drawing
first.

Datasets start unset (``None``).  Nothing is rendered until both have
arrived; a failed load leaves its dataset unset.  After :meth:`close`
the session ignores late loads and edits.
"""

import logging
from typing import Callable, Optional, Tuple

import numpy as np
from matplotlib.figure import Figure

from .chart_density import render_density_map
from .data_model import Dataset, Scope
from .grid import build_grid
from .layers import LayerInstruction, compose_layers
from .visual_params import VisualParameters

logger = logging.getLogger(__name__)


class HeatmapSession:
    """Owned state plus the recompute/teardown cycle for one display."""

    def __init__(
        self,
        figure: Figure,
        params: Optional[VisualParameters] = None,
        *,
        for_export: bool = False,
        on_rendered: Optional[Callable[[], None]] = None,
    ):
        self._figure = figure
        self._params = params if params is not None else VisualParameters()
        self._for_export = for_export
        self._on_rendered = on_rendered
        self._local: Optional[Dataset] = None
        self._global: Optional[Dataset] = None
        self._instructions: Tuple[LayerInstruction, ...] = ()
        self._attached = False
        self._closed = False
        self._params.add_listener(self._on_params_changed)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    # ── State access ─────────────────────────────────────────────────

    @property
    def figure(self) -> Figure:
        return self._figure

    @property
    def params(self) -> VisualParameters:
        return self._params

    @property
    def local(self) -> Optional[Dataset]:
        return self._local

    @property
    def global_(self) -> Optional[Dataset]:
        return self._global

    @property
    def instructions(self) -> Tuple[LayerInstruction, ...]:
        """Instructions used for the current drawing (empty if none)."""
        return self._instructions

    @property
    def is_ready(self) -> bool:
        return self._local is not None and self._global is not None

    @property
    def is_attached(self) -> bool:
        return self._attached

    @property
    def closed(self) -> bool:
        return self._closed

    def grid(self, scope: Scope) -> np.ndarray:
        """Fresh occupancy grid for the loaded dataset of *scope*."""
        dataset = self._local if scope is Scope.LOCAL else self._global
        if dataset is None:
            raise LookupError(f"{scope.value} dataset is not loaded")
        return build_grid(dataset)

    # ── Triggers ─────────────────────────────────────────────────────

    def set_local(self, dataset: Optional[Dataset]) -> bool:
        return self._set_dataset(Scope.LOCAL, dataset)

    def set_global(self, dataset: Optional[Dataset]) -> bool:
        return self._set_dataset(Scope.GLOBAL, dataset)

    def _set_dataset(self, scope: Scope, dataset: Optional[Dataset]) -> bool:
        if self._closed:
            logger.debug("Ignoring %s dataset for closed session", scope.value)
            return False
        if dataset is not None and dataset.scope is not scope:
            raise ValueError(
                f"expected a {scope.value} dataset, got {dataset.scope.value}"
            )
        if scope is Scope.LOCAL:
            self._local = dataset
        else:
            self._global = dataset
        return self.recompute()

    def _on_params_changed(self, params: VisualParameters) -> None:
        self.recompute()

    # ── Recompute / release ──────────────────────────────────────────

    def recompute(self) -> bool:
        """Redraw the figure from the current state.

        Returns ``True`` if a new drawing was attached, ``False`` when
        the session is closed or a dataset is still missing.  A
        missing dataset also releases any earlier drawing.
        """
        if self._closed:
            return False
        if not self.is_ready:
            # A cleared dataset takes the previous drawing with it
            if self._attached:
                self._release()
                if self._on_rendered is not None:
                    self._on_rendered()
            return False

        instructions = compose_layers(self._local, self._global, self._params)
        self._release()
        render_density_map(
            self._figure, self._local, self._global, instructions,
            for_export=self._for_export,
        )
        self._instructions = instructions
        self._attached = True
        logger.debug(
            "Rendered %d layers (%d local, %d global samples)",
            len(instructions), len(self._local), len(self._global),
        )
        if self._on_rendered is not None:
            self._on_rendered()
        return True

    def _release(self) -> None:
        if self._attached:
            self._figure.clf()
            self._attached = False
            self._instructions = ()

    def close(self) -> None:
        """Release the drawing and stop reacting to further triggers."""
        if self._closed:
            return
        self._release()
        self._params.remove_listener(self._on_params_changed)
        self._closed = True
        if self._on_rendered is not None:
            self._on_rendered()
