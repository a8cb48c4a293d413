"""Shared fixtures: offscreen QApplication, isolated settings, recording surface."""
from __future__ import annotations

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from PyQt6.QtWidgets import QApplication

import settings as settings_module
from canvas.painter import _CachedCanvasSettings


class RecordingSurface:
    """Stands in for QPainter and records every stroke and fill."""

    def __init__(self):
        self.strokes = []   # (QPainterPath, QPen)
        self.fills = []     # (QPainterPath, QBrush)
        self.hints = []
        self.depth = 0

    def save(self):
        self.depth += 1

    def restore(self):
        self.depth -= 1

    def setRenderHint(self, hint, on=True):
        self.hints.append((hint, on))

    def strokePath(self, path, pen):
        self.strokes.append((path, pen))

    def fillPath(self, path, brush):
        self.fills.append((path, brush))


@pytest.fixture(scope="session")
def qapp():
    """Provide a single QApplication for the entire test session."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path):
    """Point the settings singleton at an empty temp directory."""
    manager = settings_module.SettingsManager(settings_dir=tmp_path / "config")
    settings_module.set_settings(manager)
    _CachedCanvasSettings.reset()
    yield manager
    settings_module.set_settings(None)
    _CachedCanvasSettings.reset()


@pytest.fixture()
def surface():
    return RecordingSurface()
