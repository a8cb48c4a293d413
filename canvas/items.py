"""
canvas/items.py

Graphics items that draw arrows on a QGraphicsScene: between literal points,
or between two other items that move independently.
"""

from __future__ import annotations

from typing import Optional, Tuple

from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import QPainter, QPainterPath
from PyQt6.QtWidgets import QGraphicsItem, QGraphicsScene

from models import ArrowStyle, EndpointSpec, default_connector_specs, default_endpoint_fractions
from canvas.anchors import SceneRectLookup, resolve_endpoints
from canvas.painter import ArrowPainter


class ArrowItem(QGraphicsItem):
    """Arrow between two points given in item coordinates.

    Purely decorative: the item takes no mouse buttons and has an empty
    shape, so it never takes part in hit-testing.
    """

    KIND = "arrow"

    def __init__(self, start: QPointF, end: QPointF, style: Optional[ArrowStyle] = None,
                 parent: Optional[QGraphicsItem] = None):
        super().__init__(parent)
        self._painter = ArrowPainter(start, end, style or ArrowStyle.from_settings())
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
        self.setAcceptHoverEvents(False)

    def start(self) -> QPointF:
        return QPointF(self._painter.start)

    def end(self) -> QPointF:
        return QPointF(self._painter.end)

    def style(self) -> ArrowStyle:
        return self._painter.style

    def set_endpoints(self, start: QPointF, end: QPointF) -> bool:
        """Move the arrow. Returns True if anything changed."""
        return self._replace_painter(ArrowPainter(start, end, self._painter.style))

    def set_style(self, style: ArrowStyle) -> bool:
        """Restyle the arrow. Returns True if anything changed."""
        return self._replace_painter(ArrowPainter(self._painter.start, self._painter.end, style))

    def _replace_painter(self, new_painter: ArrowPainter) -> bool:
        if not new_painter.should_repaint(self._painter):
            return False
        self.prepareGeometryChange()
        self._painter = new_painter
        self.update()
        return True

    def boundingRect(self) -> QRectF:
        return self._painter.bounds()

    def shape(self) -> QPainterPath:
        return QPainterPath()

    def paint(self, painter: QPainter, option, widget=None):
        self._painter.paint(painter)


class ArrowConnectorItem(ArrowItem):
    """Arrow from one graphics item to another.

    Endpoints are resolved from the live item rectangles at every paint, so
    the arrow follows items as they move or resize. Between paints the item
    listens to ``QGraphicsScene.changed`` to keep its bounds current.
    Nothing is drawn while either item is outside a scene or hidden.
    """

    KIND = "connector"

    def __init__(self, start_item: QGraphicsItem, end_item: QGraphicsItem,
                 style: Optional[ArrowStyle] = None,
                 start_spec: Optional[EndpointSpec] = None,
                 end_spec: Optional[EndpointSpec] = None,
                 parent: Optional[QGraphicsItem] = None):
        # Parent is attached last: it may put us in a scene, which triggers itemChange
        super().__init__(QPointF(), QPointF(), style)
        default_start, default_end = default_connector_specs()
        self._start_item = start_item
        self._end_item = end_item
        self._start_spec = start_spec or default_start
        self._end_spec = end_spec or default_end
        self._lookup = SceneRectLookup()
        self._resolved = False
        self._scene: Optional[QGraphicsScene] = None
        if parent is not None:
            self.setParentItem(parent)

    # ---- Configuration ----

    def start_item(self) -> QGraphicsItem:
        return self._start_item

    def end_item(self) -> QGraphicsItem:
        return self._end_item

    def endpoint_specs(self) -> Tuple[EndpointSpec, EndpointSpec]:
        return self._start_spec, self._end_spec

    def set_items(self, start_item: QGraphicsItem, end_item: QGraphicsItem):
        self._start_item = start_item
        self._end_item = end_item
        self.refresh()

    def set_endpoint_specs(self, start_spec: EndpointSpec, end_spec: EndpointSpec):
        self._start_spec = start_spec
        self._end_spec = end_spec
        self.refresh()

    # ---- Resolution ----

    def resolve(self) -> Optional[Tuple[QPointF, QPointF]]:
        """Current (start, end) in this item's coordinates, or None."""
        return resolve_endpoints(
            self._lookup, self._start_item, self._end_item, self,
            self._start_spec, self._end_spec, default_endpoint_fractions(),
        )

    def is_resolved(self) -> bool:
        return self._resolved

    def refresh(self):
        """Re-resolve endpoints and update cached geometry if they moved."""
        points = self.resolve()
        if points is None:
            if self._resolved:
                self.prepareGeometryChange()
                self._resolved = False
                self.update()
            return
        if not self._resolved:
            self.prepareGeometryChange()
            self._resolved = True
        self.set_endpoints(*points)

    def _on_scene_changed(self, _regions):
        self.refresh()

    # ---- QGraphicsItem overrides ----

    def boundingRect(self) -> QRectF:
        if not self._resolved:
            return QRectF()
        return super().boundingRect()

    def paint(self, painter: QPainter, option, widget=None):
        points = self.resolve()
        if points is None:
            return
        ArrowPainter(points[0], points[1], self.style()).paint(painter)

    def itemChange(self, change, value):
        if change == QGraphicsItem.GraphicsItemChange.ItemSceneHasChanged:
            if self._scene is not None:
                try:
                    self._scene.changed.disconnect(self._on_scene_changed)
                except (TypeError, RuntimeError):
                    pass  # Scene already being destroyed
                self._scene = None
            if value is not None:
                self._scene = value
                self._scene.changed.connect(self._on_scene_changed)
            self.refresh()
        return super().itemChange(change, value)
