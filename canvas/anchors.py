"""
canvas/anchors.py

Resolve two referenced elements to arrow start/end points.

Element rectangles come from an injected lookup so the resolver works with
graphics items, widgets, or test fakes alike.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Tuple

from PyQt6.QtCore import QPoint, QPointF, QRectF, QSizeF
from PyQt6.QtWidgets import QGraphicsItem, QWidget

from models import DEFAULT_END_FRACTION, DEFAULT_START_FRACTION, EndpointSpec

Fraction = Tuple[float, float]


class RectLookup(Protocol):
    """Host service that maps references to absolute rectangles."""

    def rect_of(self, ref: Any) -> Optional[QRectF]:
        """Absolute rect of an element, or None if not laid out yet."""
        ...

    def frame_of(self, surface: Any) -> Optional[QRectF]:
        """Absolute rect of the surface, or None if it is not laid out yet.

        A surface of ``None`` means absolute coordinates and always resolves.
        """
        ...

    def to_local(self, surface: Any, point: QPointF) -> QPointF:
        """Map an absolute point into the surface's local coordinates."""
        ...


class SceneRectLookup:
    """Rect lookup for QGraphicsItems; absolute means scene coordinates.

    A surface of ``None`` is the scene itself. Points are mapped into an item
    surface with ``mapFromScene``, so its scale and rotation (and those of
    its parents) are honoured.
    """

    def rect_of(self, ref: Optional[QGraphicsItem]) -> Optional[QRectF]:
        if ref is None or ref.scene() is None or not ref.isVisible():
            return None
        # Prefer the geometric rect over boundingRect, which includes the pen
        local = ref.rect() if hasattr(ref, "rect") else ref.boundingRect()
        return ref.mapRectToScene(QRectF(local))

    def frame_of(self, surface: Optional[QGraphicsItem]) -> Optional[QRectF]:
        if surface is None:
            return QRectF()
        if surface.scene() is None:
            return None
        return QRectF(surface.scenePos(), QSizeF())

    def to_local(self, surface: Optional[QGraphicsItem], point: QPointF) -> QPointF:
        if surface is None:
            return QPointF(point)
        return surface.mapFromScene(point)


class WidgetRectLookup:
    """Rect lookup for QWidgets; absolute means global screen coordinates.

    A surface of ``None`` means global coordinates.
    """

    def rect_of(self, ref: Optional[QWidget]) -> Optional[QRectF]:
        if ref is None or not ref.isVisible():
            return None
        top_left = ref.mapToGlobal(QPoint(0, 0))
        return QRectF(QPointF(top_left), QSizeF(ref.size()))

    def frame_of(self, surface: Optional[QWidget]) -> Optional[QRectF]:
        if surface is None:
            return QRectF()
        return self.rect_of(surface)

    def to_local(self, surface: Optional[QWidget], point: QPointF) -> QPointF:
        if surface is None:
            return QPointF(point)
        return QPointF(surface.mapFromGlobal(point))


def endpoint_on_rect(rect: QRectF, fraction: Fraction, x_offset: float = 0.0,
                     y_offset: float = 0.0) -> QPointF:
    """``rect.topLeft + rect.size * fraction + offset``."""
    fx, fy = fraction
    return QPointF(
        rect.x() + rect.width() * fx + x_offset,
        rect.y() + rect.height() * fy + y_offset,
    )


def resolve_endpoints(lookup: RectLookup, start_ref: Any, end_ref: Any, surface_ref: Any = None,
                      start: Optional[EndpointSpec] = None, end: Optional[EndpointSpec] = None,
                      defaults: Tuple[Fraction, Fraction] = (DEFAULT_START_FRACTION, DEFAULT_END_FRACTION),
                      ) -> Optional[Tuple[QPointF, QPointF]]:
    """Compute (start, end) points in the coordinate space of *surface_ref*.

    Anchors are placed on the absolute rects and mapped into the surface
    through ``lookup.to_local``; offsets are then added in surface pixels.

    Returns None when either element or the surface cannot be resolved yet.
    The caller should skip painting for that frame.
    """
    start = start or EndpointSpec()
    end = end or EndpointSpec()

    start_rect = lookup.rect_of(start_ref)
    end_rect = lookup.rect_of(end_ref)
    if start_rect is None or end_rect is None or lookup.frame_of(surface_ref) is None:
        return None

    points = []
    for rect, spec, default in ((start_rect, start, defaults[0]), (end_rect, end, defaults[1])):
        local = lookup.to_local(surface_ref, endpoint_on_rect(rect, spec.fraction(default)))
        points.append(QPointF(local.x() + spec.x_offset, local.y() + spec.y_offset))
    return points[0], points[1]
