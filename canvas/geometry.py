"""
canvas/geometry.py

Arrow path geometry: control points for each curve style, arc-length
dashing over a flattened curve, end tangent and arrowhead triangle.

All functions are pure; points are QPointF in surface-local coordinates.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from typing import Callable, Dict, List, Sequence, Tuple

from PyQt6.QtCore import QLineF, QPointF, QRectF
from PyQt6.QtGui import QPainterPath, QPolygonF

from models import ArrowStyle, CurveStyle

EPSILON = 1e-6

# Upper bound on polyline steps when flattening a single curve
MAX_FLATTEN_STEPS = 4096
MIN_FLATTEN_STEPS = 8

Controls = Tuple[QPointF, ...]


# =============================================================================
# Control points per curve style
# =============================================================================

def _delta(start: QPointF, end: QPointF) -> Tuple[float, float]:
    return end.x() - start.x(), end.y() - start.y()


def _straight_controls(start: QPointF, end: QPointF, intensity: float) -> Controls:
    return ()


def _smooth_controls(start: QPointF, end: QPointF, intensity: float) -> Controls:
    # Horizontal bend always at the midpoint, vertical bias by intensity
    dx, dy = _delta(start, end)
    return (QPointF(start.x() + dx * 0.5, start.y() + dy * intensity),)


def _s_curve_controls(start: QPointF, end: QPointF, intensity: float) -> Controls:
    dx, dy = _delta(start, end)
    cp1 = QPointF(start.x() + dx * 0.25, start.y() + dy * (0.5 + intensity * 0.3))
    cp2 = QPointF(start.x() + dx * 0.75, start.y() + dy * (0.5 - intensity * 0.3))
    return (cp1, cp2)


def _arc_controls(start: QPointF, end: QPointF, intensity: float, side: float) -> Controls:
    """Single control point pushed off the chord midpoint.

    ``side`` is +1 for the (-dy, dx) perpendicular and -1 for (dy, -dx).
    A zero-length chord has no perpendicular and yields a straight path.
    """
    dx, dy = _delta(start, end)
    distance = math.hypot(dx, dy)
    if distance < EPSILON:
        return ()

    radius = distance * (0.5 + intensity)
    offset = radius * intensity * 0.5

    mid_x = (start.x() + end.x()) / 2
    mid_y = (start.y() + end.y()) / 2
    perp_x = -dy / distance * side
    perp_y = dx / distance * side

    return (QPointF(mid_x + perp_x * offset, mid_y + perp_y * offset),)


_CURVE_BUILDERS: Dict[CurveStyle, Callable[[QPointF, QPointF, float], Controls]] = {
    CurveStyle.STRAIGHT: _straight_controls,
    CurveStyle.SMOOTH: _smooth_controls,
    CurveStyle.S_CURVE: _s_curve_controls,
    CurveStyle.ARC: lambda s, e, i: _arc_controls(s, e, i, 1.0),
    CurveStyle.REVERSED_ARC: lambda s, e, i: _arc_controls(s, e, i, -1.0),
}


def custom_controls(start: QPointF, end: QPointF,
                    relative: Sequence[Tuple[float, float]]) -> Controls:
    """Map relative control points onto the start->end vector.

    Only the first two points are used.
    """
    dx, dy = _delta(start, end)
    return tuple(
        QPointF(start.x() + dx * rx, start.y() + dy * ry)
        for rx, ry in list(relative)[:2]
    )


def control_points(start: QPointF, end: QPointF, style: ArrowStyle) -> Controls:
    """Absolute control points for *style*; custom points take precedence."""
    if style.has_custom_control_points:
        return custom_controls(start, end, style.custom_control_points)
    builder = _CURVE_BUILDERS[style.curve_style]
    return builder(start, end, style.curve_intensity)


# =============================================================================
# Curve
# =============================================================================

class ArrowCurve:
    """A line, quadratic or cubic bezier from ``start`` to ``end``.

    The variant is given by the number of control points (0, 1 or 2).
    """

    __slots__ = ("start", "end", "controls")

    def __init__(self, start: QPointF, end: QPointF, controls: Controls = ()):
        self.start = QPointF(start)
        self.end = QPointF(end)
        self.controls: Controls = tuple(QPointF(c) for c in controls)

    def __repr__(self) -> str:
        pts = ", ".join(f"({p.x():g}, {p.y():g})" for p in self._points())
        return f"ArrowCurve[{pts}]"

    @property
    def degree(self) -> int:
        return len(self.controls) + 1

    def _points(self) -> List[QPointF]:
        return [self.start, *self.controls, self.end]

    def point_at(self, t: float) -> QPointF:
        """Curve point at parameter *t* in [0, 1] (de Casteljau)."""
        pts = [(p.x(), p.y()) for p in self._points()]
        while len(pts) > 1:
            pts = [
                ((1 - t) * ax + t * bx, (1 - t) * ay + t * by)
                for (ax, ay), (bx, by) in zip(pts, pts[1:])
            ]
        return QPointF(pts[0][0], pts[0][1])

    def to_path(self) -> QPainterPath:
        path = QPainterPath(self.start)
        if not self.controls:
            path.lineTo(self.end)
        elif len(self.controls) == 1:
            path.quadTo(self.controls[0], self.end)
        else:
            path.cubicTo(self.controls[0], self.controls[1], self.end)
        return path

    def flatten(self, tolerance: float = 1.0) -> List[QPointF]:
        """Approximate the curve by a polyline.

        Lines are returned exactly. Curves are sampled uniformly in t with a
        step count derived from the control polygon length.
        """
        if not self.controls:
            return [QPointF(self.start), QPointF(self.end)]

        pts = self._points()
        hull = sum(QLineF(a, b).length() for a, b in zip(pts, pts[1:]))
        tolerance = tolerance if tolerance > 0 else 1.0
        steps = int(math.ceil(hull / tolerance))
        steps = max(MIN_FLATTEN_STEPS, min(MAX_FLATTEN_STEPS, steps))
        return [self.point_at(i / steps) for i in range(steps + 1)]

    def end_tangent_angle(self) -> float:
        """Direction of travel at ``end`` in radians.

        Walks back over the control polygon to the last point distinct from
        ``end``; the bezier end tangent points from there. When every point
        coincides with ``end`` the start->end direction is used.
        """
        for pt in reversed([self.start, *self.controls]):
            if QLineF(pt, self.end).length() > EPSILON:
                return math.atan2(self.end.y() - pt.y(), self.end.x() - pt.x())
        return math.atan2(self.end.y() - self.start.y(), self.end.x() - self.start.x())


def build_curve(start: QPointF, end: QPointF, style: ArrowStyle) -> ArrowCurve:
    return ArrowCurve(start, end, control_points(start, end, style))


def build_arrow_path(start: QPointF, end: QPointF, style: ArrowStyle) -> QPainterPath:
    """QPainterPath from start to end for *style*."""
    return build_curve(start, end, style).to_path()


# =============================================================================
# Arc-length dashing
# =============================================================================

def polyline_lengths(points: Sequence[QPointF]) -> List[float]:
    """Cumulative arc length at each polyline vertex, starting at 0."""
    cumulative = [0.0]
    for a, b in zip(points, points[1:]):
        cumulative.append(cumulative[-1] + QLineF(a, b).length())
    return cumulative


def dash_pattern_progresses(dash_length: float, dash_gap: float) -> bool:
    """True when walking the dash pattern always advances along the path."""
    return dash_length > 0 and dash_gap >= 0


def dash_runs(total_length: float, dash_length: float, dash_gap: float) -> List[Tuple[float, float]]:
    """Arc-length intervals to draw, alternating dash/gap from 0.

    The last dash is clipped to ``total_length``.

    Raises:
        ValueError: if the pattern would never advance.
    """
    if not dash_pattern_progresses(dash_length, dash_gap):
        raise ValueError(f"dash pattern {dash_length}/{dash_gap} does not advance")

    runs: List[Tuple[float, float]] = []
    distance = 0.0
    draw = True
    # Remainders within EPSILON of the end are not drawn
    while total_length - distance > EPSILON:
        length = dash_length if draw else dash_gap
        end = min(distance + length, total_length)
        if draw:
            runs.append((distance, end))
        distance = end
        draw = not draw
    return runs


def _point_at_length(points: Sequence[QPointF], cumulative: Sequence[float], s: float) -> QPointF:
    i = bisect_right(cumulative, s) - 1
    i = max(0, min(i, len(points) - 2))
    seg = cumulative[i + 1] - cumulative[i]
    if seg <= 0:
        return QPointF(points[i])
    t = (s - cumulative[i]) / seg
    a, b = points[i], points[i + 1]
    return QPointF(a.x() + (b.x() - a.x()) * t, a.y() + (b.y() - a.y()) * t)


def extract_polyline(points: Sequence[QPointF], cumulative: Sequence[float],
                     s0: float, s1: float) -> List[QPointF]:
    """Sub-polyline covering arc lengths [s0, s1]."""
    out = [_point_at_length(points, cumulative, s0)]
    for pt, s in zip(points, cumulative):
        if s0 < s < s1:
            out.append(QPointF(pt))
    out.append(_point_at_length(points, cumulative, s1))
    return out


def dash_paths(curve: ArrowCurve, dash_length: float, dash_gap: float,
               tolerance: float = 1.0) -> List[QPainterPath]:
    """One independent QPainterPath per drawn dash along *curve*."""
    points = curve.flatten(tolerance)
    cumulative = polyline_lengths(points)
    paths = []
    for s0, s1 in dash_runs(cumulative[-1], dash_length, dash_gap):
        pts = extract_polyline(points, cumulative, s0, s1)
        path = QPainterPath(pts[0])
        for pt in pts[1:]:
            path.lineTo(pt)
        paths.append(path)
    return paths


# =============================================================================
# Arrowhead
# =============================================================================

def arrowhead_points(tip: QPointF, angle: float, size: float,
                     angle_degrees: float) -> Tuple[QPointF, QPointF, QPointF]:
    """Apex and the two base vertices of the arrowhead.

    ``angle_degrees`` is the angle between each wing and the shaft.
    """
    half = math.radians(angle_degrees)
    left = QPointF(tip.x() - size * math.cos(angle - half),
                   tip.y() - size * math.sin(angle - half))
    right = QPointF(tip.x() - size * math.cos(angle + half),
                    tip.y() - size * math.sin(angle + half))
    return QPointF(tip), left, right


def arrowhead_path(tip: QPointF, angle: float, size: float, angle_degrees: float) -> QPainterPath:
    path = QPainterPath()
    path.addPolygon(QPolygonF(list(arrowhead_points(tip, angle, size, angle_degrees))))
    path.closeSubpath()
    return path


def arrow_bounds(curve: ArrowCurve, style: ArrowStyle) -> QRectF:
    """Rect enclosing the stroked curve and the arrowhead."""
    rect = curve.to_path().controlPointRect()
    if style.show_arrowhead:
        head = arrowhead_path(curve.end, curve.end_tangent_angle(),
                              style.arrowhead_size, style.arrowhead_angle)
        rect = rect.united(head.controlPointRect())
    margin = max(style.thickness, 0.0) + 1.0
    return rect.adjusted(-margin, -margin, margin, margin)
