"""
Entry point for the Session Emotion Heatmap.

Usage:
    python -m emotion_heatmap [--local PATH_OR_URL] [--global PATH_OR_URL]
    python -m emotion_heatmap --example --export heatmap.png
"""

import argparse
import logging
import os
import sys
import traceback

from .constants import BANDWIDTH_RANGE, OPACITY_RANGE, SKEW_RANGE

logger = logging.getLogger("emotion_heatmap")


def _check_dependencies(gui: bool):
    """Verify required packages are installed."""
    required = ["matplotlib", "numpy", "scipy"]
    if gui:
        required.insert(0, "PySide6")
    missing = []
    for name in required:
        try:
            __import__(name)
        except ImportError:
            missing.append(name)

    if missing:
        print(
            f"Missing required packages: {', '.join(missing)}\n"
            f"Install with: pip install {' '.join(missing)}",
            file=sys.stderr,
        )
        sys.exit(1)


def _exception_hook(exc_type, exc_value, exc_tb):
    """Global exception handler to prevent silent crashes."""
    msg = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
    logger.critical("Unhandled exception:\n%s", msg)

    from PySide6.QtWidgets import QMessageBox, QApplication
    if QApplication.instance() is not None:
        QMessageBox.critical(
            None, "Unhandled Error",
            f"An unexpected error occurred:\n\n"
            f"{exc_type.__name__}: {exc_value}\n\n"
            f"See console for full traceback.",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emotion_heatmap",
        description="Superimposed local/global session density maps.",
    )
    parser.add_argument("--local", dest="local_source", metavar="PATH_OR_URL",
                        help="JSON array of local samples")
    parser.add_argument("--global", dest="global_source", metavar="PATH_OR_URL",
                        help="JSON array of global samples")
    parser.add_argument("--example", action="store_true",
                        help="use generated example datasets")
    parser.add_argument("--export", metavar="PNG",
                        help="render headless to PNG instead of opening the GUI")
    parser.add_argument("--opacity", type=float, default=OPACITY_RANGE[3])
    parser.add_argument("--bandwidth", type=float, default=BANDWIDTH_RANGE[3])
    parser.add_argument("--skew", type=float, default=SKEW_RANGE[3])
    parser.add_argument("--points", action="store_true",
                        help="overlay the raw local samples")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    return parser


def _example_sources() -> dict:
    import tempfile
    from .example_data import generate_example_json
    return generate_example_json(
        os.path.join(tempfile.gettempdir(), 'emotion_heatmap_example')
    )


def export_headless(args, params) -> int:
    """Render both datasets straight to a PNG; returns an exit status."""
    from matplotlib.figure import Figure

    from .constants import CANVAS_DPI, CANVAS_SIZE_PX, PLOT_STYLE_LIGHT
    from .data_loader import load_dataset
    from .data_model import Scope
    from .export import export_png
    from .session import HeatmapSession
    from .theme import apply_plot_style

    if not (args.local_source and args.global_source):
        logger.error("--export needs both --local and --global (or --example)")
        return 2

    local = load_dataset(args.local_source, Scope.LOCAL)
    global_ = load_dataset(args.global_source, Scope.GLOBAL)
    if local is None or global_ is None:
        return 1

    apply_plot_style(PLOT_STYLE_LIGHT)
    side = CANVAS_SIZE_PX / CANVAS_DPI
    fig = Figure(figsize=(side, side), dpi=CANVAS_DPI)
    with HeatmapSession(fig, params, for_export=True) as session:
        session.set_local(local)
        session.set_global(global_)
        export_png(fig, args.export, width_inches=side)
    return 0


def main(argv=None):
    """Launch the GUI, or export headless when ``--export`` is given."""
    args = build_parser().parse_args(argv)
    headless = bool(args.export)
    _check_dependencies(gui=not headless)

    from .logging_config import setup_logging
    from .visual_params import VisualParameters

    setup_logging(getattr(logging, args.log_level), args.log_file)

    params = VisualParameters(
        opacity=args.opacity,
        bandwidth=args.bandwidth,
        skew=args.skew,
        show_points=args.points,
    )

    if args.example:
        paths = _example_sources()
        args.local_source = args.local_source or paths['local']
        args.global_source = args.global_source or paths['global']

    if headless:
        sys.exit(export_headless(args, params))

    sys.excepthook = _exception_hook

    # Configure matplotlib backend before importing Qt widgets
    os.environ.setdefault("QT_API", "pyside6")
    import matplotlib
    matplotlib.use('QtAgg')

    from PySide6.QtWidgets import QApplication
    from PySide6.QtGui import QFont, QFontDatabase

    from .constants import FONT_FAMILIES
    from .theme import get_dark_stylesheet
    from .gui_main import HeatmapMainWindow

    app = QApplication(sys.argv[:1])
    app.setStyle("Fusion")

    font = QFont()
    for family in FONT_FAMILIES:
        if QFontDatabase.hasFamily(family):
            font.setFamily(family)
            break
    font.setPointSize(10)
    app.setFont(font)
    app.setStyleSheet(get_dark_stylesheet())

    window = HeatmapMainWindow(params)
    window.show()
    window.load_sources(args.local_source, args.global_source)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
