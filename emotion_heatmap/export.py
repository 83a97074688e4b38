"""
Export utilities for the Session Emotion Heatmap.

PNG export with automatic light-theme switching (dark GUI theme →
white-background export) and clipboard copy.  The figure is restored
with ``try/finally`` so the on-screen map is untouched even if saving
fails.

White point-overlay markers would vanish on a white page, so near-white
scatter colours are darkened for the export and restored afterwards.
"""

import io
import logging

from matplotlib.figure import Figure

from .constants import (
    EXPORT_DPI, EXPORT_WIDTH_INCHES, CLIPBOARD_DPI, EXPORT_BG_COLOR,
    EXPORT_TEXT_COLOR, PLOT_STYLE_LIGHT, DARK_COLORS,
)

logger = logging.getLogger(__name__)

_NEAR_BLACK = (0.1, 0.1, 0.1)


def _text_artists(fig: Figure) -> list:
    texts = list(fig.texts)
    for ax in fig.get_axes():
        texts.extend(ax.texts)
        texts.append(ax.xaxis.label)
        texts.append(ax.yaxis.label)
        texts.extend(ax.get_xticklabels())
        texts.extend(ax.get_yticklabels())
    return texts


def _save_figure_state(fig: Figure) -> dict:
    """Capture every colour that ``_apply_light_theme`` changes."""
    state = {
        'fig_facecolor': fig.get_facecolor(),
        'text_colors': [t.get_color() for t in _text_artists(fig)],
        'axes_states': [],
    }
    for ax in fig.get_axes():
        state['axes_states'].append({
            'facecolor': ax.get_facecolor(),
            'spine_colors': {
                name: spine.get_edgecolor() for name, spine in ax.spines.items()
            },
            'grid_colors': [
                line.get_color() for line in ax.get_xgridlines() + ax.get_ygridlines()
            ],
            'collection_facecolors': [
                coll.get_facecolor().copy() for coll in ax.collections
            ],
            'collection_edgecolors': [
                coll.get_edgecolor().copy() for coll in ax.collections
            ],
        })
    return state


def _darken_near_white(colors):
    out = colors.copy()
    for row in range(out.shape[0]):
        r, g, b = out[row, :3]
        if r > 0.9 and g > 0.9 and b > 0.9:
            out[row, :3] = _NEAR_BLACK
    return out


def _apply_light_theme(fig: Figure) -> None:
    light = PLOT_STYLE_LIGHT
    fig.set_facecolor(EXPORT_BG_COLOR)

    dark_fg = frozenset((DARK_COLORS['fg'], DARK_COLORS['fg_dim'], DARK_COLORS['fg_bright']))
    for text in _text_artists(fig):
        if text.get_color() in dark_fg:
            text.set_color(EXPORT_TEXT_COLOR)

    for ax in fig.get_axes():
        ax.set_facecolor(light['axes.facecolor'])
        for spine in ax.spines.values():
            spine.set_edgecolor(light['axes.edgecolor'])
        ax.tick_params(colors=light['xtick.color'], labelcolor=light['xtick.color'])
        for line in ax.get_xgridlines() + ax.get_ygridlines():
            line.set_color(light['grid.color'])
        for coll in ax.collections:
            fc = coll.get_facecolor()
            if fc.size > 0:
                coll.set_facecolor(_darken_near_white(fc))
            ec = coll.get_edgecolor()
            if ec.size > 0:
                coll.set_edgecolor(_darken_near_white(ec))


def _restore_figure_state(fig: Figure, state: dict) -> None:
    fig.set_facecolor(state['fig_facecolor'])

    for ax, ax_state in zip(fig.get_axes(), state['axes_states']):
        ax.set_facecolor(ax_state['facecolor'])
        for name, color in ax_state['spine_colors'].items():
            ax.spines[name].set_edgecolor(color)
        for line, color in zip(
            ax.get_xgridlines() + ax.get_ygridlines(), ax_state['grid_colors']
        ):
            line.set_color(color)
        for coll, fc, ec in zip(
            ax.collections,
            ax_state['collection_facecolors'],
            ax_state['collection_edgecolors'],
        ):
            coll.set_facecolor(fc)
            coll.set_edgecolor(ec)

    # Text colours last: tick_params above would otherwise overwrite labels
    for text, color in zip(_text_artists(fig), state['text_colors']):
        text.set_color(color)


def export_png(
    fig: Figure,
    filepath: str,
    *,
    dpi: int = EXPORT_DPI,
    width_inches: float = EXPORT_WIDTH_INCHES,
) -> None:
    """Export *fig* as a light-theme PNG at *width_inches* wide.

    Size and theme are restored afterwards, including on error.
    """
    current_w = fig.get_figwidth()
    current_h = fig.get_figheight()
    state = _save_figure_state(fig)
    try:
        scale = width_inches / current_w if current_w > 0 else 1.0
        fig.set_size_inches(width_inches, current_h * scale)
        _apply_light_theme(fig)
        fig.savefig(
            filepath,
            dpi=dpi,
            bbox_inches='tight',
            facecolor=fig.get_facecolor(),
            edgecolor='none',
            pad_inches=0.1,
        )
        logger.info("Exported density map to %s", filepath)
    finally:
        fig.set_size_inches(current_w, current_h)
        _restore_figure_state(fig, state)


def copy_to_clipboard(fig: Figure, dpi: int = CLIPBOARD_DPI) -> bool:
    """Copy *fig* to the system clipboard as a PNG image.

    Returns ``True`` on success, ``False`` if no clipboard is available.
    """
    from PySide6.QtWidgets import QApplication
    from PySide6.QtGui import QImage

    buf = io.BytesIO()
    state = _save_figure_state(fig)
    try:
        _apply_light_theme(fig)
        fig.savefig(
            buf, format='png', dpi=dpi,
            bbox_inches='tight',
            facecolor=fig.get_facecolor(),
            edgecolor='none',
        )
    finally:
        _restore_figure_state(fig, state)

    img = QImage()
    img.loadFromData(buf.getvalue())

    clipboard = QApplication.clipboard()
    if clipboard is None:
        return False
    clipboard.setImage(img)
    return True
