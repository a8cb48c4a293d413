"""Tests for anchor resolution against fake, scene and widget rect lookups."""
from __future__ import annotations

import pytest
from PyQt6.QtCore import QPoint, QPointF, QRectF
from PyQt6.QtWidgets import QGraphicsRectItem, QGraphicsScene, QWidget

from models import AnchorPosition, EndpointSpec
from canvas.anchors import (
    SceneRectLookup,
    WidgetRectLookup,
    endpoint_on_rect,
    resolve_endpoints,
)


class DictLookup:
    """Rect lookup backed by plain dicts; missing keys are unresolved."""

    def __init__(self, rects, frames=None):
        self.rects = rects
        self.frames = frames or {}

    def rect_of(self, ref):
        return self.rects.get(ref)

    def frame_of(self, surface):
        if surface is None:
            return QRectF()
        return self.frames.get(surface)

    def to_local(self, surface, point):
        if surface is None:
            return QPointF(point)
        origin = self.frames[surface].topLeft()
        return QPointF(point.x() - origin.x(), point.y() - origin.y())


def _xy(p: QPointF):
    return (p.x(), p.y())


BOX = QRectF(10, 10, 100, 50)


class TestEndpointOnRect:
    @pytest.mark.parametrize("anchor, expected", [
        (AnchorPosition.TOP_LEFT, (10.0, 10.0)),
        (AnchorPosition.TOP_CENTER, (60.0, 10.0)),
        (AnchorPosition.CENTER, (60.0, 35.0)),
        (AnchorPosition.CENTER_RIGHT, (110.0, 35.0)),
        (AnchorPosition.BOTTOM_RIGHT, (110.0, 60.0)),
    ])
    def test_named_anchors(self, anchor, expected):
        fraction = EndpointSpec(anchor).fraction((0.0, 0.0))
        assert _xy(endpoint_on_rect(BOX, fraction)) == expected

    def test_offset_added(self):
        assert _xy(endpoint_on_rect(BOX, (0.0, 0.0), 5, -3)) == (15.0, 7.0)


class TestResolveEndpoints:
    def test_defaults(self):
        lookup = DictLookup({"a": QRectF(0, 0, 100, 50), "b": QRectF(200, 0, 100, 50)})
        start, end = resolve_endpoints(lookup, "a", "b")
        assert _xy(start) == (80.0, 25.0)
        assert _xy(end) == (220.0, 25.0)

    def test_named_and_custom(self):
        lookup = DictLookup({"a": BOX, "b": BOX})
        start, end = resolve_endpoints(
            lookup, "a", "b",
            start=EndpointSpec(AnchorPosition.TOP_LEFT),
            end=EndpointSpec(AnchorPosition.CUSTOM, x_fraction=0.25, y_fraction=1.0),
        )
        assert _xy(start) == (10.0, 10.0)
        assert _xy(end) == (35.0, 60.0)

    def test_offsets(self):
        lookup = DictLookup({"a": BOX, "b": BOX})
        start, end = resolve_endpoints(
            lookup, "a", "b",
            start=EndpointSpec(AnchorPosition.CENTER, x_offset=4, y_offset=-2),
            end=EndpointSpec(AnchorPosition.CENTER, y_offset=10),
        )
        assert _xy(start) == (64.0, 33.0)
        assert _xy(end) == (60.0, 45.0)

    def test_surface_translation(self):
        lookup = DictLookup(
            {"a": QRectF(100, 100, 100, 50), "b": QRectF(150, 250, 100, 50)},
            {"surface": QRectF(50, 50, 400, 400)},
        )
        start, end = resolve_endpoints(
            lookup, "a", "b", "surface",
            start=EndpointSpec(AnchorPosition.CENTER_RIGHT),
            end=EndpointSpec(AnchorPosition.TOP_CENTER),
        )
        assert _xy(start) == (150.0, 75.0)
        assert _xy(end) == (150.0, 200.0)

    def test_custom_defaults(self):
        lookup = DictLookup({"a": BOX, "b": BOX})
        start, end = resolve_endpoints(lookup, "a", "b", defaults=((0.0, 0.0), (1.0, 1.0)))
        assert _xy(start) == (10.0, 10.0)
        assert _xy(end) == (110.0, 60.0)

    @pytest.mark.parametrize("start_ref, end_ref, surface", [
        ("missing", "b", None),
        ("a", "missing", None),
        ("a", "b", "no-frame"),
    ])
    def test_unresolved(self, start_ref, end_ref, surface):
        lookup = DictLookup({"a": BOX, "b": BOX})
        assert resolve_endpoints(lookup, start_ref, end_ref, surface) is None


class TestSceneRectLookup:
    def test_rect_in_scene_coordinates(self, qapp):
        scene = QGraphicsScene()
        item = QGraphicsRectItem(0, 0, 100, 50)
        item.setPos(30, 40)
        scene.addItem(item)
        assert SceneRectLookup().rect_of(item) == QRectF(30, 40, 100, 50)

    def test_item_without_scene(self, qapp):
        assert SceneRectLookup().rect_of(QGraphicsRectItem(0, 0, 10, 10)) is None

    def test_hidden_item(self, qapp):
        scene = QGraphicsScene()
        item = scene.addRect(0, 0, 10, 10)
        item.hide()
        assert SceneRectLookup().rect_of(item) is None

    def test_frames(self, qapp):
        scene = QGraphicsScene()
        surface = scene.addRect(0, 0, 10, 10)
        surface.setPos(7, 8)
        lookup = SceneRectLookup()
        assert lookup.frame_of(None).topLeft() == QPointF(0, 0)
        assert lookup.frame_of(surface).topLeft() == QPointF(7, 8)
        assert lookup.frame_of(QGraphicsRectItem()) is None

    def test_resolve_between_items(self, qapp):
        scene = QGraphicsScene()
        a = scene.addRect(0, 0, 100, 50)
        b = scene.addRect(0, 0, 100, 50)
        b.setPos(200, 100)
        start, end = resolve_endpoints(SceneRectLookup(), a, b)
        assert _xy(start) == (80.0, 25.0)
        assert _xy(end) == (220.0, 125.0)

    def test_points_mapped_through_surface_transform(self, qapp):
        scene = QGraphicsScene()
        a = scene.addRect(0, 0, 100, 50)
        b = scene.addRect(0, 0, 100, 50)
        b.setPos(200, 100)
        surface = scene.addRect(0, 0, 10, 10)
        surface.setPos(10, 10)
        surface.setScale(2.0)
        start, end = resolve_endpoints(
            SceneRectLookup(), a, b, surface,
            start=EndpointSpec(AnchorPosition.CENTER_RIGHT),
            end=EndpointSpec(AnchorPosition.CENTER_LEFT),
        )
        assert _xy(start) == pytest.approx((45.0, 7.5))
        assert _xy(surface.mapToScene(end)) == pytest.approx((200.0, 125.0))

    def test_offsets_in_surface_pixels(self, qapp):
        scene = QGraphicsScene()
        a = scene.addRect(0, 0, 100, 50)
        surface = scene.addRect(0, 0, 10, 10)
        surface.setScale(2.0)
        start, _ = resolve_endpoints(
            SceneRectLookup(), a, a, surface,
            start=EndpointSpec(AnchorPosition.TOP_LEFT, x_offset=4, y_offset=6),
        )
        assert _xy(start) == pytest.approx((4.0, 6.0))


class TestWidgetRectLookup:
    def test_hidden_widget_unresolved(self, qapp):
        assert WidgetRectLookup().rect_of(QWidget()) is None

    def test_relative_to_container(self, qapp):
        container = QWidget()
        container.resize(400, 300)
        a = QWidget(container)
        a.setGeometry(20, 30, 100, 40)
        b = QWidget(container)
        b.setGeometry(200, 150, 80, 60)
        container.show()
        try:
            start, end = resolve_endpoints(
                WidgetRectLookup(), a, b, container,
                start=EndpointSpec(AnchorPosition.TOP_LEFT),
                end=EndpointSpec(AnchorPosition.BOTTOM_RIGHT),
            )
            assert _xy(start) == (20.0, 30.0)
            assert _xy(end) == (280.0, 210.0)
        finally:
            container.close()

    def test_no_surface_means_global(self, qapp):
        container = QWidget()
        container.resize(400, 300)
        a = QWidget(container)
        a.setGeometry(20, 30, 100, 40)
        container.show()
        try:
            lookup = WidgetRectLookup()
            assert lookup.frame_of(None) == QRectF()
            start, end = resolve_endpoints(
                lookup, a, a,
                start=EndpointSpec(AnchorPosition.TOP_LEFT),
                end=EndpointSpec(AnchorPosition.BOTTOM_RIGHT),
            )
            origin = container.mapToGlobal(QPoint(0, 0))
            assert _xy(start) == (origin.x() + 20.0, origin.y() + 30.0)
            assert _xy(end) == (origin.x() + 120.0, origin.y() + 70.0)
        finally:
            container.close()
