"""
Constants for the Session Emotion Heatmap.

Centralises grid resolution, control ranges and defaults, layer
styling, canvas geometry, the GUI colour palette, and the dark/light
matplotlib style dicts.
"""

# ── Occupancy grid ───────────────────────────────────────────────────────
GRID_RESOLUTION = 100

# Finer binning used by the density renderer before smoothing
RENDER_RESOLUTION = 256

# ── Control ranges: (minimum, maximum, slider step, default) ────────────
OPACITY_RANGE = (0.0, 1.0, 0.1, 0.5)
BANDWIDTH_RANGE = (10.0, 80.0, 2.0, 20.0)
SKEW_RANGE = (-1.0, 1.0, 0.01, 0.0)
DEFAULT_SHOW_POINTS = False

# ── Layer composition ───────────────────────────────────────────────────
GLOBAL_LAYER_WEIGHT = 0.2
LOCAL_LAYER_WEIGHT = 1.0
DENSITY_THRESHOLDS = 100

POINT_RADIUS = 1.5
POINT_FILL_OPACITY = 0.2
POINT_STROKE_OPACITY = 0.5
POINT_COLOR = 'white'

LABEL_OFFSET_POINTS = 8

# ── Canvas / figure ─────────────────────────────────────────────────────
CANVAS_SIZE_PX = 1024
CANVAS_DPI = 128
AXIS_DOMAIN = (0.0, 1.0)
AXIS_TICKS = 20
COLOR_SCHEME = 'turbo'
COLOR_DOMAIN = (0.0, 1.0)
COLOR_LEGEND_LABEL = 'Intensity'
FIGURE_CAPTION = 'Figure 1. An example of two superimposed density maps.'

# ── Dataset sources ─────────────────────────────────────────────────────
LOCAL_DATASET_NAME = 'local-heatmap.json'
GLOBAL_DATASET_NAME = 'global-heatmap.json'
FETCH_TIMEOUT_SECONDS = 10.0

# ── Font family fallback chain ──────────────────────────────────────────
FONT_FAMILIES = [
    "Segoe UI", "DejaVu Sans", "Liberation Sans", "Noto Sans",
    "Ubuntu", "Helvetica", "Arial", "sans-serif",
]

# ── Dark GUI colour palette ─────────────────────────────────────────────
DARK_COLORS = {
    'bg':           '#1e1e2e',
    'bg_alt':       '#252536',
    'surface0':     '#313244',
    'bg_widget':    '#2a2a3c',
    'bg_input':     '#333348',
    'fg':           '#cdd6f4',
    'fg_dim':       '#9399b2',
    'fg_bright':    '#ffffff',
    'accent':       '#89b4fa',
    'accent_hover': '#74c7ec',
    'green':        '#a6e3a1',
    'yellow':       '#f9e2af',
    'red':          '#f38ba8',
    'border':       '#45475a',
    'overlay0':     '#6c7086',
    'selection':    '#45475a',
}

# ── Export settings ─────────────────────────────────────────────────────
EXPORT_DPI = 300
EXPORT_WIDTH_INCHES = 8.0
CLIPBOARD_DPI = 150

# ── Export / light-theme text colours ───────────────────────────────────
EXPORT_TEXT_COLOR = '#333333'
EXPORT_BG_COLOR = '#ffffff'

# ── Matplotlib dark-theme style dict (GUI preview) ──────────────────────
PLOT_STYLE_DARK = {
    'figure.facecolor':  DARK_COLORS['bg_alt'],
    'axes.facecolor':    DARK_COLORS['bg_widget'],
    'axes.edgecolor':    DARK_COLORS['border'],
    'axes.labelcolor':   DARK_COLORS['fg'],
    'text.color':        DARK_COLORS['fg'],
    'xtick.color':       DARK_COLORS['fg_dim'],
    'ytick.color':       DARK_COLORS['fg_dim'],
    'xtick.labelsize':   7,
    'ytick.labelsize':   7,
    'axes.labelsize':    8,
    'grid.color':        DARK_COLORS['border'],
}

# ── Matplotlib light-theme style dict (export) ──────────────────────────
PLOT_STYLE_LIGHT = {
    'figure.facecolor':  '#ffffff',
    'axes.facecolor':    '#ffffff',
    'axes.edgecolor':    '#333333',
    'axes.labelcolor':   '#1a1a2e',
    'text.color':        '#1a1a2e',
    'xtick.color':       '#333333',
    'ytick.color':       '#333333',
    'xtick.labelsize':   7,
    'ytick.labelsize':   7,
    'axes.labelsize':    8,
    'grid.color':        '#cccccc',
}


def slider_steps(value_range) -> int:
    """Number of discrete slider positions for a ``(min, max, step, default)`` range.

    Examples
    --------
    >>> slider_steps(OPACITY_RANGE)
    10
    >>> slider_steps(BANDWIDTH_RANGE)
    35
    """
    lo, hi, step, _ = value_range
    if step <= 0:
        raise ValueError(f"slider step must be positive, got {step}")
    return int(round((hi - lo) / step))
