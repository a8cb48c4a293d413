"""
utils.py

Utility functions shared by the arrow models and canvas code.
"""

from __future__ import annotations

from typing import Any, Tuple

from PyQt6.QtCore import QPointF
from PyQt6.QtGui import QColor


def qcolor_to_hex(c: QColor, include_alpha: bool = False) -> str:
    """
    Convert a QColor to a hex string.

    Args:
        c: The QColor to convert
        include_alpha: If True, include alpha channel as 4th byte

    Returns:
        Hex string like "#RRGGBB" or "#RRGGBBAA"
    """
    if include_alpha:
        return "#{:02X}{:02X}{:02X}{:02X}".format(c.red(), c.green(), c.blue(), c.alpha())
    return "#{:02X}{:02X}{:02X}".format(c.red(), c.green(), c.blue())


def hex_to_qcolor(s: str, fallback: QColor) -> QColor:
    """
    Parse a hex string to a QColor.

    Args:
        s: Hex string like "#RRGGBB" or "#RRGGBBAA"
        fallback: Color to return if parsing fails

    Returns:
        Parsed QColor or fallback
    """
    try:
        if not s:
            return QColor(fallback)
        s = s.strip()
        if s.startswith("#"):
            s = s[1:]
        if len(s) == 6:
            r = int(s[0:2], 16)
            g = int(s[2:4], 16)
            b = int(s[4:6], 16)
            return QColor(r, g, b)
        if len(s) == 8:
            r = int(s[0:2], 16)
            g = int(s[2:4], 16)
            b = int(s[4:6], 16)
            a = int(s[6:8], 16)
            return QColor(r, g, b, a)
    except ValueError:
        pass
    return QColor(fallback)


def normalize_hex_color(value: Any, fallback: str) -> str:
    """Return *value* (QColor or hex string) as an uppercase ``#RRGGBBAA`` string.

    Unparseable strings resolve to *fallback*.
    """
    if isinstance(value, QColor):
        return qcolor_to_hex(value, include_alpha=True)
    color = hex_to_qcolor(value if isinstance(value, str) else "", hex_to_qcolor(fallback, QColor(0, 0, 0)))
    return qcolor_to_hex(color, include_alpha=True)


def point_tuple(value: Any) -> Tuple[float, float]:
    """Convert a QPointF or an (x, y) sequence to a float tuple."""
    if isinstance(value, QPointF):
        return (float(value.x()), float(value.y()))
    x, y = value
    return (float(x), float(y))
