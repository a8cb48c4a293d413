"""Tests for ArrowOverlay connecting plain widgets."""
from __future__ import annotations

import pytest
from PyQt6.QtCore import Qt, QPointF
from PyQt6.QtWidgets import QWidget

from models import AnchorPosition, ArrowStyle, CurveStyle, EndpointSpec
from canvas.overlay import ArrowOverlay, WidgetConnector


def _xy(p: QPointF):
    return (p.x(), p.y())


@pytest.fixture()
def container(qapp):
    w = QWidget()
    w.resize(500, 400)
    a = QWidget(w)
    a.setGeometry(50, 50, 100, 50)
    b = QWidget(w)
    b.setGeometry(150, 225, 100, 50)
    w.a, w.b = a, b
    yield w
    w.close()
    w.deleteLater()


class TestOverlaySetup:
    def test_covers_parent(self, container):
        overlay = ArrowOverlay(container)
        assert overlay.geometry() == container.rect()
        assert overlay.testAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)

    def test_follows_parent_resize(self, container):
        overlay = ArrowOverlay(container)
        container.show()
        container.resize(640, 480)
        assert overlay.size() == container.size()


class TestConnectors:
    def test_add_and_remove(self, container):
        overlay = ArrowOverlay(container)
        first = overlay.add_connector(container.a, container.b)
        second = overlay.add_connector(container.a, container.b)
        assert isinstance(first, WidgetConnector)
        assert overlay.connectors() == [first, second]
        overlay.remove_connector(first)
        assert overlay.connectors() == [second]
        overlay.remove_connector(first)
        overlay.clear()
        assert overlay.connectors() == []

    def test_defaults_from_settings(self, container):
        connector = ArrowOverlay(container).add_connector(container.a, container.b)
        assert connector.style == ArrowStyle.from_settings()
        assert connector.start.anchor is AnchorPosition.CENTER_RIGHT
        assert connector.end.anchor is AnchorPosition.CENTER_LEFT

    def test_unresolved_before_show(self, container):
        overlay = ArrowOverlay(container)
        connector = overlay.add_connector(container.a, container.b)
        assert overlay.resolve(connector) is None

    def test_resolve_in_overlay_coordinates(self, container):
        overlay = ArrowOverlay(container)
        style = ArrowStyle(curve_style=CurveStyle.S_CURVE, dotted=False, thickness=3.0)
        connector = overlay.add_connector(
            container.a, container.b, style,
            EndpointSpec(AnchorPosition.CENTER_RIGHT),
            EndpointSpec(AnchorPosition.TOP_CENTER),
        )
        container.show()
        start, end = overlay.resolve(connector)
        assert _xy(start) == (150.0, 75.0)
        assert _xy(end) == (200.0, 225.0)
        assert connector.style.dotted is False
        assert connector.style.thickness == 3.0

    def test_follows_moved_widget(self, container):
        overlay = ArrowOverlay(container)
        connector = overlay.add_connector(container.a, container.b)
        container.show()
        container.b.move(300, 100)
        _, end = overlay.resolve(connector)
        assert _xy(end) == (300.0, 125.0)

    def test_hidden_widget_skipped(self, container):
        overlay = ArrowOverlay(container)
        connector = overlay.add_connector(container.a, container.b)
        container.show()
        container.b.hide()
        assert overlay.resolve(connector) is None
        overlay.repaint()

    def test_paints_without_error(self, container):
        overlay = ArrowOverlay(container)
        overlay.add_connector(container.a, container.b)
        container.show()
        image = overlay.grab()
        assert not image.isNull()


class TestNestedWidgets:
    @pytest.fixture()
    def nested(self, qapp):
        root = QWidget()
        root.resize(500, 400)
        box = QWidget(root)
        box.setGeometry(0, 0, 200, 100)
        inner = QWidget(box)
        inner.setGeometry(10, 10, 100, 50)
        target = QWidget(root)
        target.setGeometry(300, 300, 100, 50)
        root.box, root.inner, root.target = box, inner, target
        yield root
        root.close()
        root.deleteLater()

    def _count_updates(self, overlay):
        calls = []
        overlay.update = lambda *args: calls.append(args)
        return calls

    def test_moving_container_repaints(self, nested):
        overlay = ArrowOverlay(nested)
        connector = overlay.add_connector(
            nested.inner, nested.target, start=EndpointSpec(AnchorPosition.CENTER),
        )
        nested.show()
        start, _ = overlay.resolve(connector)
        assert _xy(start) == (60.0, 35.0)

        calls = self._count_updates(overlay)
        nested.box.move(0, 150)
        assert calls
        start, _ = overlay.resolve(connector)
        assert _xy(start) == (60.0, 185.0)

    def test_removed_connector_stops_watching_ancestors(self, nested):
        overlay = ArrowOverlay(nested)
        connector = overlay.add_connector(nested.inner, nested.target)
        nested.show()
        overlay.remove_connector(connector)

        calls = self._count_updates(overlay)
        nested.box.move(0, 150)
        assert calls == []

    def test_shared_ancestor_kept_while_used(self, nested):
        overlay = ArrowOverlay(nested)
        first = overlay.add_connector(nested.inner, nested.target)
        overlay.add_connector(nested.box, nested.target)
        nested.show()
        overlay.remove_connector(first)

        calls = self._count_updates(overlay)
        nested.box.move(0, 150)
        assert calls
