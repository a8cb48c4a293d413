"""
canvas/painter.py

Strokes an arrow onto a drawing surface: solid or dashed line plus a filled
arrowhead.

The surface is anything with the QPainter methods used here (``save``,
``restore``, ``setRenderHint``, ``strokePath``, ``fillPath``).
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import QBrush, QColor, QPainter, QPen

from models import ArrowStyle, LineCap
from canvas.geometry import (
    ArrowCurve,
    arrow_bounds,
    arrowhead_path,
    build_curve,
    dash_paths,
    dash_pattern_progresses,
)
from settings import get_settings
from utils import hex_to_qcolor
from debug_trace import trace


# =============================================================================
# Cached canvas settings - initialized once at first access to avoid
# repeated settings lookups during paint operations.
# =============================================================================

class _CachedCanvasSettings:
    """Cache for canvas settings values to avoid repeated lookups during paint."""

    _instance = None

    def __init__(self):
        self._initialized = False
        # Default values (used if settings unavailable)
        self.antialiasing = True
        self.flatten_tolerance = 1.0

    def _ensure_initialized(self):
        """Load settings on first access."""
        if self._initialized:
            return
        s = get_settings().settings.canvas
        self.antialiasing = bool(s.antialiasing)
        try:
            self.flatten_tolerance = float(s.flatten_tolerance)
        except (TypeError, ValueError):
            pass  # Use default
        self._initialized = True

    @classmethod
    def get(cls) -> "_CachedCanvasSettings":
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        cls._instance._ensure_initialized()
        return cls._instance

    @classmethod
    def reset(cls):
        """Drop the cache so the next access re-reads settings."""
        cls._instance = None


_CAP_STYLES = {
    LineCap.BUTT: Qt.PenCapStyle.FlatCap,
    LineCap.ROUND: Qt.PenCapStyle.RoundCap,
    LineCap.SQUARE: Qt.PenCapStyle.SquareCap,
}


def style_color(style: ArrowStyle) -> QColor:
    return hex_to_qcolor(style.color, QColor(148, 163, 184))


def make_pen(style: ArrowStyle) -> QPen:
    """Solid pen for the arrow line; dashing is done by splitting the path."""
    pen = QPen(style_color(style), style.thickness)
    pen.setStyle(Qt.PenStyle.SolidLine)
    pen.setCapStyle(_CAP_STYLES[style.line_cap])
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    return pen


class ArrowPainter:
    """Paints one arrow from ``start`` to ``end`` with ``style``.

    Example:
        ArrowPainter(QPointF(50, 100), QPointF(200, 100), ArrowStyle()).paint(painter)
    """

    def __init__(self, start: QPointF, end: QPointF, style: ArrowStyle):
        self.start = QPointF(start)
        self.end = QPointF(end)
        self.style = style

    def curve(self) -> ArrowCurve:
        return build_curve(self.start, self.end, self.style)

    def bounds(self) -> QRectF:
        return arrow_bounds(self.curve(), self.style)

    def paint(self, painter: QPainter) -> None:
        style = self.style
        cached = _CachedCanvasSettings.get()
        curve = self.curve()
        pen = make_pen(style)

        trace(f"arrow {curve!r} style={style.curve_style.value} dotted={style.dotted}", "PAINT")

        painter.save()
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, cached.antialiasing)

            if style.dotted and dash_pattern_progresses(style.dash_length, style.dash_gap):
                for dash in dash_paths(curve, style.dash_length, style.dash_gap, cached.flatten_tolerance):
                    painter.strokePath(dash, pen)
            else:
                if style.dotted:
                    trace(f"dash pattern {style.dash_length}/{style.dash_gap} cannot advance, stroking solid", "PATH")
                painter.strokePath(curve.to_path(), pen)

            if style.show_arrowhead:
                head = arrowhead_path(self.end, curve.end_tangent_angle(),
                                      style.arrowhead_size, style.arrowhead_angle)
                painter.fillPath(head, QBrush(style_color(style)))
        finally:
            painter.restore()

    def should_repaint(self, old: Optional["ArrowPainter"]) -> bool:
        """True when start, end or style differ by value from *old*."""
        if old is None:
            return True
        return old.start != self.start or old.end != self.end or old.style != self.style


def render_arrow(painter: QPainter, start: QPointF, end: QPointF, style: ArrowStyle) -> None:
    """Draw an arrow from *start* to *end* onto *painter*."""
    ArrowPainter(start, end, style).paint(painter)
