"""
canvas package

Arrow geometry, painting, anchor resolution and PyQt6 host items.
"""

from canvas.anchors import RectLookup, SceneRectLookup, WidgetRectLookup, resolve_endpoints
from canvas.geometry import ArrowCurve, build_arrow_path, build_curve
from canvas.painter import ArrowPainter, render_arrow
from canvas.items import ArrowItem, ArrowConnectorItem
from canvas.overlay import ArrowOverlay, WidgetConnector

__all__ = [
    "RectLookup",
    "SceneRectLookup",
    "WidgetRectLookup",
    "resolve_endpoints",
    "ArrowCurve",
    "build_arrow_path",
    "build_curve",
    "ArrowPainter",
    "render_arrow",
    "ArrowItem",
    "ArrowConnectorItem",
    "ArrowOverlay",
    "WidgetConnector",
]
