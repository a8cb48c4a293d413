"""
canvas/overlay.py

Transparent widget that draws connectors between sibling widgets of any
layout, without those widgets knowing about the arrows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from PyQt6.QtCore import Qt, QEvent, QObject, QPointF
from PyQt6.QtGui import QPainter
from PyQt6.QtWidgets import QWidget

from models import ArrowStyle, EndpointSpec, default_connector_specs, default_endpoint_fractions
from canvas.anchors import WidgetRectLookup, resolve_endpoints
from canvas.painter import ArrowPainter
from debug_trace import trace_call

# Events on a connected widget that can move one of its arrow ends
_TRACKED_EVENTS = (
    QEvent.Type.Move,
    QEvent.Type.Resize,
    QEvent.Type.Show,
    QEvent.Type.Hide,
)


@dataclass(eq=False)
class WidgetConnector:
    """One arrow between two widgets."""
    start_widget: QWidget
    end_widget: QWidget
    style: ArrowStyle = field(default_factory=ArrowStyle.from_settings)
    start: EndpointSpec = field(default_factory=lambda: default_connector_specs()[0])
    end: EndpointSpec = field(default_factory=lambda: default_connector_specs()[1])


class ArrowOverlay(QWidget):
    """Paints connectors on top of its parent widget.

    The overlay always covers the parent, stays on top of its siblings and
    is transparent to mouse input. It repaints when a connected widget, or
    any of its ancestors below the parent, moves, resizes, shows or hides.
    Every paint resolves endpoints from the current widget geometry;
    connectors whose widgets are hidden or not yet shown are skipped.
    """

    def __init__(self, parent: QWidget):
        super().__init__(parent)
        self._connectors: List[WidgetConnector] = []
        self._lookup = WidgetRectLookup()

        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)

        parent.installEventFilter(self)
        self.setGeometry(parent.rect())
        self.raise_()

    # ---- Connector management ----

    def connectors(self) -> List[WidgetConnector]:
        return list(self._connectors)

    @trace_call("OVERLAY")
    def add_connector(self, start_widget: QWidget, end_widget: QWidget,
                      style: Optional[ArrowStyle] = None,
                      start: Optional[EndpointSpec] = None,
                      end: Optional[EndpointSpec] = None) -> WidgetConnector:
        """Connect two widgets and return the connector handle."""
        default_start, default_end = default_connector_specs()
        connector = WidgetConnector(
            start_widget,
            end_widget,
            style or ArrowStyle.from_settings(),
            start or default_start,
            end or default_end,
        )
        self._connectors.append(connector)
        for w in self._watched_widgets(connector):
            w.installEventFilter(self)
        self.raise_()
        self.update()
        return connector

    @trace_call("OVERLAY")
    def remove_connector(self, connector: WidgetConnector):
        if connector not in self._connectors:
            return
        self._connectors.remove(connector)
        still_used = {id(w) for c in self._connectors for w in self._watched_widgets(c)}
        for w in self._watched_widgets(connector):
            if id(w) not in still_used:
                w.removeEventFilter(self)
        self.update()

    def clear(self):
        for connector in list(self._connectors):
            self.remove_connector(connector)

    def _watched_widgets(self, connector: WidgetConnector) -> List[QWidget]:
        """Connected widgets plus their ancestors below the overlay's parent.

        Moving any of these changes an arrow end without the connected widget
        itself receiving a Move event.
        """
        watched: List[QWidget] = []
        for w in (connector.start_widget, connector.end_widget):
            while w is not None and w is not self.parentWidget():
                if all(w is not seen for seen in watched):
                    watched.append(w)
                w = w.parentWidget()
        return watched

    # ---- Resolution / painting ----

    def resolve(self, connector: WidgetConnector) -> Optional[Tuple[QPointF, QPointF]]:
        """Endpoints of *connector* in overlay coordinates, or None."""
        return resolve_endpoints(
            self._lookup, connector.start_widget, connector.end_widget, self,
            connector.start, connector.end, default_endpoint_fractions(),
        )

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if obj is self.parent() and event.type() == QEvent.Type.Resize:
            self.setGeometry(self.parentWidget().rect())
        elif event.type() in _TRACKED_EVENTS:
            self.update()
        return super().eventFilter(obj, event)

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            for connector in self._connectors:
                points = self.resolve(connector)
                if points is None:
                    continue
                ArrowPainter(points[0], points[1], connector.style).paint(painter)
        finally:
            painter.end()
