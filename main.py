"""
main.py

ArrowLink demo application.

PyQt6 window showing decorative connectors:
- Flow chart: arrows between plain widgets in a layout-free container
- Decision tree: arrows following movable items on a QGraphicsScene
- Curve gallery: every curve style between literal points

Usage:
    python main.py

Dependencies:
    pip install PyQt6 platformdirs tomli-w
"""

from __future__ import annotations

import sys
from typing import List, Tuple

from PyQt6.QtCore import Qt, QPointF
from PyQt6.QtGui import QBrush, QColor, QPainter, QPen
from PyQt6.QtWidgets import (
    QApplication,
    QFrame,
    QGraphicsItem,
    QGraphicsRectItem,
    QGraphicsScene,
    QGraphicsSimpleTextItem,
    QGraphicsView,
    QLabel,
    QMainWindow,
    QTabWidget,
    QWidget,
)

from models import AnchorPosition, ArrowStyle, CurveStyle, EndpointSpec
from canvas import ArrowConnectorItem, ArrowItem, ArrowOverlay
from settings import SettingsManager, get_settings
import debug_trace
from debug_trace import close_log, trace, trace_exception


# ----------------------------
# Flow chart (widget overlay)
# ----------------------------

def _make_step(parent: QWidget, text: str, x: int, y: int, color: str) -> QLabel:
    label = QLabel(text, parent)
    label.setAlignment(Qt.AlignmentFlag.AlignCenter)
    label.setFrameShape(QFrame.Shape.Box)
    label.setStyleSheet(
        f"background: {color}; color: white; border-radius: 8px; padding: 6px; font-weight: bold;"
    )
    label.setGeometry(x, y, 140, 56)
    return label


class FlowChartPage(QWidget):
    """Process steps as plain labels; arrows come from an overlay."""

    def __init__(self, parent=None):
        super().__init__(parent)
        start = _make_step(self, "Start", 40, 60, "#2563EB")
        collect = _make_step(self, "Collect data", 260, 60, "#7C3AED")
        review = _make_step(self, "Review", 480, 200, "#DB2777")
        publish = _make_step(self, "Publish", 260, 340, "#059669")
        done = _make_step(self, "Done", 40, 340, "#475569")

        base = ArrowStyle.from_settings()
        self.overlay = ArrowOverlay(self)
        self.overlay.add_connector(start, collect, base.copy_with(curve_style=CurveStyle.SMOOTH))
        self.overlay.add_connector(
            collect, review, base.copy_with(curve_style=CurveStyle.S_CURVE),
            EndpointSpec(AnchorPosition.CENTER_RIGHT), EndpointSpec(AnchorPosition.TOP_CENTER),
        )
        self.overlay.add_connector(
            review, publish, base.copy_with(curve_style=CurveStyle.ARC, dotted=False, color="#DB2777"),
            EndpointSpec(AnchorPosition.BOTTOM_CENTER), EndpointSpec(AnchorPosition.CENTER_RIGHT),
        )
        self.overlay.add_connector(
            publish, done, base.copy_with(curve_style=CurveStyle.STRAIGHT, dotted=False),
            EndpointSpec(AnchorPosition.CENTER_LEFT), EndpointSpec(AnchorPosition.CENTER_RIGHT),
        )
        # Custom anchor with pixel offset and hand-placed control points
        self.overlay.add_connector(
            done, collect,
            base.copy_with(custom_control_points=[(-0.6, 0.3), (-0.6, 0.7)], color="#F59E0B"),
            EndpointSpec(AnchorPosition.CUSTOM, x_fraction=0.2, y_fraction=0.0, y_offset=-4),
            EndpointSpec(AnchorPosition.CUSTOM, x_fraction=0.2, y_fraction=1.0, y_offset=4),
        )


# ----------------------------
# Decision tree (graphics scene)
# ----------------------------

def _make_node(scene: QGraphicsScene, text: str, x: float, y: float, color: str) -> QGraphicsRectItem:
    node = QGraphicsRectItem(0, 0, 150, 54)
    node.setPos(x, y)
    node.setBrush(QBrush(QColor(color)))
    node.setPen(QPen(Qt.PenStyle.NoPen))
    node.setFlags(
        QGraphicsItem.GraphicsItemFlag.ItemIsMovable
        | QGraphicsItem.GraphicsItemFlag.ItemIsSelectable
    )
    caption = QGraphicsSimpleTextItem(text, node)
    caption.setBrush(QBrush(QColor("white")))
    r = caption.boundingRect()
    caption.setPos((150 - r.width()) / 2, (54 - r.height()) / 2)
    scene.addItem(node)
    return node


class DecisionTreePage(QGraphicsView):
    """Drag the nodes: connectors re-resolve their anchors on every paint."""

    def __init__(self, parent=None):
        scene = QGraphicsScene(0, 0, 900, 600)
        super().__init__(scene, parent)
        self._scene = scene  # QGraphicsView does not own its scene
        self.setRenderHint(QPainter.RenderHint.Antialiasing)

        root = _make_node(scene, "Is it urgent?", 375, 40, "#1D4ED8")
        yes = _make_node(scene, "Do it now", 150, 220, "#15803D")
        no = _make_node(scene, "Is it important?", 600, 220, "#B45309")
        plan = _make_node(scene, "Schedule it", 450, 420, "#6D28D9")
        drop = _make_node(scene, "Drop it", 750, 420, "#B91C1C")

        base = ArrowStyle.from_settings()
        down = (EndpointSpec(AnchorPosition.BOTTOM_CENTER), EndpointSpec(AnchorPosition.TOP_CENTER))
        edges: List[Tuple[QGraphicsItem, QGraphicsItem, ArrowStyle]] = [
            (root, yes, base.copy_with(curve_style=CurveStyle.ARC)),
            (root, no, base.copy_with(curve_style=CurveStyle.REVERSED_ARC)),
            (no, plan, base.copy_with(curve_style=CurveStyle.ARC, dotted=False)),
            (no, drop, base.copy_with(curve_style=CurveStyle.REVERSED_ARC, dotted=False)),
        ]
        for start, end, style in edges:
            connector = ArrowConnectorItem(start, end, style, *down)
            connector.setZValue(-1)
            scene.addItem(connector)


# ----------------------------
# Curve gallery (literal points)
# ----------------------------

class CurveGalleryPage(QGraphicsView):
    """One row per curve style, solid and dotted side by side."""

    def __init__(self, parent=None):
        scene = QGraphicsScene(0, 0, 900, 700)
        super().__init__(scene, parent)
        self._scene = scene  # QGraphicsView does not own its scene
        self.setRenderHint(QPainter.RenderHint.Antialiasing)

        base = ArrowStyle.from_settings().copy_with(color="#0F172A", curve_intensity=0.6)
        rows = [(style.value, base.copy_with(curve_style=style)) for style in CurveStyle]
        rows.append(("custom", base.copy_with(custom_control_points=[(0.1, 1.4), (0.9, -0.4)])))

        for i, (name, style) in enumerate(rows):
            y = 40 + i * 110
            scene.addSimpleText(name).setPos(20, y + 20)
            scene.addItem(ArrowItem(QPointF(160, y), QPointF(460, y + 60), style.copy_with(dotted=False)))
            scene.addItem(ArrowItem(QPointF(540, y), QPointF(840, y + 60), style.copy_with(dotted=True)))


class MainWindow(QMainWindow):
    """Demo window.

    Args:
        settings_manager: The SettingsManager instance for application settings.
    """

    def __init__(self, settings_manager: SettingsManager):
        super().__init__()
        self.settings_manager = settings_manager
        self.setWindowTitle("ArrowLink - Decorative Connectors")

        tabs = QTabWidget(self)
        tabs.addTab(FlowChartPage(), "Flow Chart")
        tabs.addTab(DecisionTreePage(), "Decision Tree")
        tabs.addTab(CurveGalleryPage(), "Curve Gallery")
        self.setCentralWidget(tabs)


def main():
    """Application entry point."""
    app = QApplication(sys.argv)

    # Load settings (use singleton to ensure single instance)
    settings_manager = get_settings()
    settings_manager.ensure_file_complete()

    dbg = settings_manager.settings.debug
    debug_trace.configure(dbg.trace, dbg.trace_paint, dbg.log_file)
    trace("Application starting", "MAIN")

    # Save settings on application quit
    def save_on_quit():
        trace("Saving settings on quit", "MAIN")
        settings_manager.save()
        close_log()

    app.aboutToQuit.connect(save_on_quit)

    trace("Creating MainWindow", "MAIN")
    w = MainWindow(settings_manager)
    demo = settings_manager.settings.demo
    w.resize(demo.window_width, demo.window_height)
    trace("Showing MainWindow", "MAIN")
    w.show()
    trace("Entering event loop", "MAIN")
    sys.exit(app.exec())


if __name__ == "__main__":
    # Set up global exception handler to catch crashes
    def excepthook(exc_type, exc_value, exc_tb):
        import traceback
        trace("UNCAUGHT EXCEPTION:", "CRASH")
        trace("".join(traceback.format_exception(exc_type, exc_value, exc_tb)), "CRASH")
        close_log()
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = excepthook

    try:
        main()
    except Exception as e:
        trace(f"FATAL: {type(e).__name__}: {e}", "CRASH")
        trace_exception("Fatal exception")
        close_log()
        raise
