"""
models.py

Data models and constants for arrow connectors.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from settings import ArrowDefaultSettings, ConnectorSettings, get_settings
from utils import normalize_hex_color, point_tuple


# ----------------------------
# Enumerations
# ----------------------------

class CurveStyle(str, Enum):
    """Shape of the path between start and end."""
    STRAIGHT = "straight"
    SMOOTH = "smooth"              # single quadratic bend
    S_CURVE = "s_curve"            # inflected cubic
    ARC = "arc"
    REVERSED_ARC = "reversed_arc"  # arc bending to the other side


class LineCap(str, Enum):
    """Cap style applied to stroke ends."""
    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"


class AnchorPosition(str, Enum):
    """Named point on an element's rectangle."""
    TOP_LEFT = "top_left"
    TOP_CENTER = "top_center"
    TOP_RIGHT = "top_right"
    CENTER_LEFT = "center_left"
    CENTER = "center"
    CENTER_RIGHT = "center_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_CENTER = "bottom_center"
    BOTTOM_RIGHT = "bottom_right"
    CUSTOM = "custom"


# ----------------------------
# Anchor fraction table
# ----------------------------

# Relative (x, y) position inside the element rectangle for each anchor.
# CUSTOM falls back to the center when the caller gives no fraction.
ANCHOR_FRACTIONS: Dict[AnchorPosition, Tuple[float, float]] = {
    AnchorPosition.TOP_LEFT:      (0.0, 0.0),
    AnchorPosition.TOP_CENTER:    (0.5, 0.0),
    AnchorPosition.TOP_RIGHT:     (1.0, 0.0),
    AnchorPosition.CENTER_LEFT:   (0.0, 0.5),
    AnchorPosition.CENTER:        (0.5, 0.5),
    AnchorPosition.CENTER_RIGHT:  (1.0, 0.5),
    AnchorPosition.BOTTOM_LEFT:   (0.0, 1.0),
    AnchorPosition.BOTTOM_CENTER: (0.5, 1.0),
    AnchorPosition.BOTTOM_RIGHT:  (1.0, 1.0),
    AnchorPosition.CUSTOM:        (0.5, 0.5),
}

# Endpoint fractions used when an endpoint has no anchor at all
# ("right side of source, left side of target").
DEFAULT_START_FRACTION: Tuple[float, float] = (0.8, 0.5)
DEFAULT_END_FRACTION: Tuple[float, float] = (0.2, 0.5)


def anchor_fraction(anchor: AnchorPosition,
                    x_override: Optional[float] = None,
                    y_override: Optional[float] = None) -> Tuple[float, float]:
    """Return the effective (x, y) fraction for *anchor*.

    Overrides are honoured per axis, and only for ``AnchorPosition.CUSTOM``.
    """
    fx, fy = ANCHOR_FRACTIONS[anchor]
    if anchor is AnchorPosition.CUSTOM:
        if x_override is not None:
            fx = float(x_override)
        if y_override is not None:
            fy = float(y_override)
    return fx, fy


def _enum_or_default(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


# ----------------------------
# Arrow style
# ----------------------------

SLATE_GRAY = "#94A3B8FF"


@dataclass(frozen=True)
class ArrowStyle:
    """Immutable visual configuration of an arrow.

    ``color`` accepts a QColor or a hex string and is stored as
    ``#RRGGBBAA``. ``custom_control_points`` holds up to two points relative
    to the start->end vector; when non-empty it overrides ``curve_style``.
    ``arrowhead_angle`` is the angle between each wing and the shaft, not the
    full opening of the head.

    None of the numeric fields are validated.
    """
    dotted: bool = True
    dash_length: float = 8.0
    dash_gap: float = 6.0
    thickness: float = 2.0
    color: str = SLATE_GRAY
    show_arrowhead: bool = True
    arrowhead_size: float = 12.0
    arrowhead_angle: float = 25.0
    curve_style: CurveStyle = CurveStyle.S_CURVE
    curve_intensity: float = 0.5
    custom_control_points: Optional[Tuple[Tuple[float, float], ...]] = None
    line_cap: LineCap = LineCap.ROUND

    def __post_init__(self):
        # Normalize so equal-looking styles compare (and hash) equal.
        object.__setattr__(self, "color", normalize_hex_color(self.color, SLATE_GRAY))
        object.__setattr__(self, "curve_style", CurveStyle(self.curve_style))
        object.__setattr__(self, "line_cap", LineCap(self.line_cap))
        if self.custom_control_points is not None:
            object.__setattr__(
                self, "custom_control_points",
                tuple(point_tuple(p) for p in self.custom_control_points),
            )

    def copy_with(self, **changes) -> "ArrowStyle":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @property
    def has_custom_control_points(self) -> bool:
        return bool(self.custom_control_points)

    @classmethod
    def from_settings(cls, arrow: Optional[ArrowDefaultSettings] = None) -> "ArrowStyle":
        """Build a style from the ``[arrow]`` settings section.

        Unknown enum strings fall back to the built-in defaults.
        """
        if arrow is None:
            arrow = get_settings().settings.arrow
        return cls(
            dotted=bool(arrow.dotted),
            dash_length=float(arrow.dash_length),
            dash_gap=float(arrow.dash_gap),
            thickness=float(arrow.thickness),
            color=arrow.color,
            show_arrowhead=bool(arrow.show_arrowhead),
            arrowhead_size=float(arrow.arrowhead_size),
            arrowhead_angle=float(arrow.arrowhead_angle),
            curve_style=_enum_or_default(CurveStyle, arrow.curve_style, CurveStyle.S_CURVE),
            curve_intensity=float(arrow.curve_intensity),
            line_cap=_enum_or_default(LineCap, arrow.line_cap, LineCap.ROUND),
        )


# ----------------------------
# Endpoint positioning
# ----------------------------

@dataclass(frozen=True)
class EndpointSpec:
    """Where an arrow end attaches to an element.

    ``anchor=None`` means the default endpoint fraction for that end.
    ``x_fraction``/``y_fraction`` are only read for ``AnchorPosition.CUSTOM``.
    Offsets are in surface pixels and applied after the fraction.
    """
    anchor: Optional[AnchorPosition] = None
    x_fraction: Optional[float] = None
    y_fraction: Optional[float] = None
    x_offset: float = 0.0
    y_offset: float = 0.0

    def fraction(self, default: Tuple[float, float]) -> Tuple[float, float]:
        """Effective (x, y) fraction, using *default* when there is no anchor."""
        if self.anchor is None:
            return default
        return anchor_fraction(AnchorPosition(self.anchor), self.x_fraction, self.y_fraction)


def default_connector_specs(connector: Optional[ConnectorSettings] = None) -> Tuple[EndpointSpec, EndpointSpec]:
    """Start/end specs for a connector created without explicit anchors."""
    if connector is None:
        connector = get_settings().settings.connector
    start = _enum_or_default(AnchorPosition, connector.start_anchor, AnchorPosition.CENTER_RIGHT)
    end = _enum_or_default(AnchorPosition, connector.end_anchor, AnchorPosition.CENTER_LEFT)
    return EndpointSpec(anchor=start), EndpointSpec(anchor=end)


def default_endpoint_fractions(connector: Optional[ConnectorSettings] = None) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Fractions used for endpoints without an anchor, from settings."""
    if connector is None:
        connector = get_settings().settings.connector
    return (
        (float(connector.start_x_fraction), float(connector.start_y_fraction)),
        (float(connector.end_x_fraction), float(connector.end_y_fraction)),
    )
