"""
Session Emotion Heatmap v1.0.0

Visualises local and global session-position samples as two
superimposed kernel-density maps over the unit square, annotated with
nine fixed reference emotions.  Opacity, bandwidth and a skew control
rebalance the two layers interactively; maps export as PNG.
"""

APP_NAME = "Session Emotion Heatmap"
APP_VERSION = "1.0.0"
__version__ = APP_VERSION
