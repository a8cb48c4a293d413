"""
settings.py

Persistent settings management for ArrowLink.

Handles cross-platform settings storage using TOML format with platformdirs
for proper user config directory detection.

Settings file location:
    - Windows: %APPDATA%/arrowlink/settings.toml
    - macOS: ~/Library/Application Support/arrowlink/settings.toml
    - Linux: ~/.config/arrowlink/settings.toml

Default values are documented in comments throughout this file.
If settings.toml is corrupted, these defaults will be used.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

# TOML reading - use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

APP_NAME = "arrowlink"

# Global settings manager instance (singleton)
_settings_manager: Optional["SettingsManager"] = None


def get_settings() -> "SettingsManager":
    """Get the global settings manager instance.

    Returns:
        The singleton SettingsManager instance.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager


def set_settings(manager: Optional["SettingsManager"]) -> None:
    """Replace the global settings manager (``None`` resets to lazy default)."""
    global _settings_manager
    _settings_manager = manager


# =============================================================================
# Arrow Settings
# =============================================================================

@dataclass
class ArrowDefaultSettings:
    """Default arrow style used when an arrow is created without one.

    Enum-valued fields are stored by their string value.

    Defaults:
        dotted: True
        dash_length: 8.0
        dash_gap: 6.0
        thickness: 2.0
        color: "#94A3B8"
        show_arrowhead: True
        arrowhead_size: 12.0
        arrowhead_angle: 25.0
        curve_style: "s_curve"
        curve_intensity: 0.5
        line_cap: "round"
    """
    dotted: bool = True                 # Default: True
    dash_length: float = 8.0            # Default: 8.0 pixels
    dash_gap: float = 6.0               # Default: 6.0 pixels
    thickness: float = 2.0              # Default: 2.0 pixels
    color: str = "#94A3B8"              # Default: slate gray
    show_arrowhead: bool = True         # Default: True
    arrowhead_size: float = 12.0        # Default: 12.0 pixels
    arrowhead_angle: float = 25.0       # Default: 25.0 degrees (half-angle)
    curve_style: str = "s_curve"        # Default: "s_curve"
    curve_intensity: float = 0.5        # Default: 0.5
    line_cap: str = "round"             # Default: "round"


@dataclass
class ConnectorSettings:
    """Endpoint defaults for connectors.

    The anchors apply to connector items and overlays. The fractions apply
    when an endpoint has no anchor at all.

    Defaults:
        start_anchor: "center_right"
        end_anchor: "center_left"
        start_x_fraction: 0.8
        start_y_fraction: 0.5
        end_x_fraction: 0.2
        end_y_fraction: 0.5
    """
    start_anchor: str = "center_right"  # Default: "center_right"
    end_anchor: str = "center_left"     # Default: "center_left"
    start_x_fraction: float = 0.8       # Default: 0.8
    start_y_fraction: float = 0.5       # Default: 0.5
    end_x_fraction: float = 0.2         # Default: 0.2
    end_y_fraction: float = 0.5         # Default: 0.5


# =============================================================================
# Canvas Settings
# =============================================================================

@dataclass
class CanvasSettings:
    """Rendering settings.

    Defaults:
        antialiasing: True
        flatten_tolerance: 1.0
    """
    antialiasing: bool = True           # Default: True
    flatten_tolerance: float = 1.0      # Default: 1.0 pixel per polyline step


# =============================================================================
# Debug / Demo Settings
# =============================================================================

@dataclass
class DebugSettings:
    """Trace instrumentation settings.

    Defaults:
        trace: False
        trace_paint: False
        log_file: ""
    """
    trace: bool = False                 # Default: False
    trace_paint: bool = False           # Default: False (very verbose)
    log_file: str = ""                  # Default: "" (stderr only)


@dataclass
class DemoSettings:
    """Demo window settings.

    Defaults:
        window_width: 1200
        window_height: 800
    """
    window_width: int = 1200            # Default: 1200 pixels
    window_height: int = 800            # Default: 800 pixels


# =============================================================================
# Main App Settings
# =============================================================================

@dataclass
class AppSettings:
    """Application settings with default values.

    Attributes:
        arrow: Default arrow style values.
        connector: Default connector endpoints.
        canvas: Rendering settings.
        debug: Trace settings.
        demo: Demo window settings.
    """
    arrow: ArrowDefaultSettings = field(default_factory=ArrowDefaultSettings)
    connector: ConnectorSettings = field(default_factory=ConnectorSettings)
    canvas: CanvasSettings = field(default_factory=CanvasSettings)
    debug: DebugSettings = field(default_factory=DebugSettings)
    demo: DemoSettings = field(default_factory=DemoSettings)


# =============================================================================
# Settings Manager
# =============================================================================

class SettingsManager:
    """Manages loading, saving, and accessing application settings.

    Settings are stored in a TOML file at the platform-appropriate location.
    If the settings file doesn't exist, defaults are used and the file is
    created on first save.

    Args:
        app_name: Application name used for the config directory.
        settings_dir: Explicit directory for the settings file. Overrides
            the platformdirs location when given.
    """

    def __init__(self, app_name: str = APP_NAME, settings_dir: Optional[Path] = None):
        if settings_dir is None:
            settings_dir = Path(platformdirs.user_config_dir(app_name))
        self.settings_dir = Path(settings_dir)
        self.settings_file = self.settings_dir / "settings.toml"
        self.settings = self.load()
        self._needs_save = not self.settings_file.exists()  # Save if file didn't exist

    def ensure_file_complete(self) -> None:
        """Ensure settings file exists with all sections. Call once at startup."""
        if self._needs_save or not self.settings_file.exists():
            self.save()
            self._needs_save = False

    def load(self) -> AppSettings:
        """Load settings from the TOML file.

        Returns:
            AppSettings instance with values from file or defaults if file
            doesn't exist or is invalid.
        """
        if not self.settings_file.exists():
            return AppSettings()

        try:
            with open(self.settings_file, "rb") as f:
                data = tomllib.load(f)

            return self._parse_toml(data)
        except (OSError, tomllib.TOMLDecodeError, AttributeError, TypeError):
            # If file is corrupted or invalid, return defaults
            return AppSettings()

    def _parse_toml(self, data: Dict[str, Any]) -> AppSettings:
        """Parse TOML data into AppSettings.

        Args:
            data: Parsed TOML dictionary.

        Returns:
            AppSettings instance populated from TOML data.
        """
        settings = AppSettings()

        # Arrow section
        a = data.get("arrow", {})
        settings.arrow.dotted = a.get("dotted", settings.arrow.dotted)
        settings.arrow.dash_length = a.get("dash_length", settings.arrow.dash_length)
        settings.arrow.dash_gap = a.get("dash_gap", settings.arrow.dash_gap)
        settings.arrow.thickness = a.get("thickness", settings.arrow.thickness)
        settings.arrow.color = a.get("color", settings.arrow.color)
        settings.arrow.show_arrowhead = a.get("show_arrowhead", settings.arrow.show_arrowhead)
        settings.arrow.arrowhead_size = a.get("arrowhead_size", settings.arrow.arrowhead_size)
        settings.arrow.arrowhead_angle = a.get("arrowhead_angle", settings.arrow.arrowhead_angle)
        settings.arrow.curve_style = a.get("curve_style", settings.arrow.curve_style)
        settings.arrow.curve_intensity = a.get("curve_intensity", settings.arrow.curve_intensity)
        settings.arrow.line_cap = a.get("line_cap", settings.arrow.line_cap)

        # Connector section
        c = data.get("connector", {})
        settings.connector.start_anchor = c.get("start_anchor", settings.connector.start_anchor)
        settings.connector.end_anchor = c.get("end_anchor", settings.connector.end_anchor)
        settings.connector.start_x_fraction = c.get("start_x_fraction", settings.connector.start_x_fraction)
        settings.connector.start_y_fraction = c.get("start_y_fraction", settings.connector.start_y_fraction)
        settings.connector.end_x_fraction = c.get("end_x_fraction", settings.connector.end_x_fraction)
        settings.connector.end_y_fraction = c.get("end_y_fraction", settings.connector.end_y_fraction)

        # Canvas section
        cv = data.get("canvas", {})
        settings.canvas.antialiasing = cv.get("antialiasing", settings.canvas.antialiasing)
        settings.canvas.flatten_tolerance = cv.get("flatten_tolerance", settings.canvas.flatten_tolerance)

        # Debug section
        d = data.get("debug", {})
        settings.debug.trace = d.get("trace", settings.debug.trace)
        settings.debug.trace_paint = d.get("trace_paint", settings.debug.trace_paint)
        settings.debug.log_file = d.get("log_file", settings.debug.log_file)

        # Demo section
        dm = data.get("demo", {})
        settings.demo.window_width = dm.get("window_width", settings.demo.window_width)
        settings.demo.window_height = dm.get("window_height", settings.demo.window_height)

        return settings

    def save(self) -> None:
        """Save current settings to the TOML file.

        Creates the settings directory if it doesn't exist.
        """
        # Ensure directory exists
        self.settings_dir.mkdir(parents=True, exist_ok=True)

        # Convert settings to TOML structure
        data = self._to_toml_dict()

        with open(self.settings_file, "wb") as f:
            tomli_w.dump(data, f)

    def _to_toml_dict(self) -> Dict[str, Any]:
        """Convert settings to a TOML-compatible dictionary structure.

        Returns:
            Dictionary organized by TOML sections.
        """
        s = self.settings
        return {
            "arrow": {
                "dotted": s.arrow.dotted,
                "dash_length": s.arrow.dash_length,
                "dash_gap": s.arrow.dash_gap,
                "thickness": s.arrow.thickness,
                "color": s.arrow.color,
                "show_arrowhead": s.arrow.show_arrowhead,
                "arrowhead_size": s.arrow.arrowhead_size,
                "arrowhead_angle": s.arrow.arrowhead_angle,
                "curve_style": s.arrow.curve_style,
                "curve_intensity": s.arrow.curve_intensity,
                "line_cap": s.arrow.line_cap,
            },
            "connector": {
                "start_anchor": s.connector.start_anchor,
                "end_anchor": s.connector.end_anchor,
                "start_x_fraction": s.connector.start_x_fraction,
                "start_y_fraction": s.connector.start_y_fraction,
                "end_x_fraction": s.connector.end_x_fraction,
                "end_y_fraction": s.connector.end_y_fraction,
            },
            "canvas": {
                "antialiasing": s.canvas.antialiasing,
                "flatten_tolerance": s.canvas.flatten_tolerance,
            },
            "debug": {
                "trace": s.debug.trace,
                "trace_paint": s.debug.trace_paint,
                "log_file": s.debug.log_file,
            },
            "demo": {
                "window_width": s.demo.window_width,
                "window_height": s.demo.window_height,
            },
        }

    def to_toml(self) -> str:
        """Convert current settings to a TOML-formatted string.

        Returns:
            TOML representation of the current settings.
        """
        data = self._to_toml_dict()
        return tomli_w.dumps(data)

    def get_settings_path(self) -> Path:
        """Get the path to the settings file.

        Returns:
            Path object pointing to the settings file location.
        """
        return self.settings_file
