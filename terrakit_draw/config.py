"""
Configuration schema for the drawing, measurement and analysis tools.

Every option has an explicit default, is validated at construction and is
immutable afterwards (frozen dataclasses). A whole toolkit configuration can
be loaded from YAML.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from terrakit_geometry.buffers import DEFAULT_CIRCLE_SEGMENTS
from terrakit_geometry.geodesy import SOLVER_ELLIPSOID, SURFACE_SOLVERS


@dataclass(frozen=True)
class DrawConfig:
    """Interactive draw session settings."""

    drawing_cursor: str = "crosshair"
    point_height_offset: float = 50.0  # metres, display only
    preview_line_width: float = 3.0
    polygon_fill_opacity: float = 0.4
    warning_message: str = "At least {required} points are needed to finish a {shape}"

    def __post_init__(self):
        """Validate draw configuration."""
        if not self.drawing_cursor:
            raise ValueError("drawing_cursor cannot be empty")
        if self.preview_line_width <= 0:
            raise ValueError(
                f"preview_line_width must be > 0, got {self.preview_line_width}"
            )
        if not 0.0 <= self.polygon_fill_opacity <= 1.0:
            raise ValueError(
                f"polygon_fill_opacity must be in [0.0, 1.0], got {self.polygon_fill_opacity}"
            )


@dataclass(frozen=True)
class MeasureConfig:
    """Measurement label settings."""

    label_decimals: int = 2
    distance_unit_label: str = "km"
    area_unit_label: str = "km²"

    def __post_init__(self):
        """Validate measure configuration."""
        if not 0 <= self.label_decimals <= 10:
            raise ValueError(
                f"label_decimals must be in [0, 10], got {self.label_decimals}"
            )


@dataclass(frozen=True)
class AnalysisConfig:
    """Spatial analysis settings."""

    circle_segments: int = DEFAULT_CIRCLE_SEGMENTS
    geodesic_solver: str = SOLVER_ELLIPSOID
    buffer_fill_opacity: float = 0.5

    def __post_init__(self):
        """Validate analysis configuration."""
        if self.circle_segments < 3:
            raise ValueError(
                f"circle_segments must be >= 3, got {self.circle_segments}"
            )
        if self.geodesic_solver not in SURFACE_SOLVERS:
            raise ValueError(
                f"Invalid geodesic_solver: {self.geodesic_solver}. "
                f"Must be one of {sorted(SURFACE_SOLVERS)}"
            )
        if not 0.0 <= self.buffer_fill_opacity <= 1.0:
            raise ValueError(
                f"buffer_fill_opacity must be in [0.0, 1.0], got {self.buffer_fill_opacity}"
            )


@dataclass(frozen=True)
class ToolkitConfig:
    """
    Main configuration for a GlobeToolkit.

    Loaded from YAML (optional) and validated at startup.
    """

    draw: DrawConfig = field(default_factory=DrawConfig)
    measure: MeasureConfig = field(default_factory=MeasureConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate toolkit configuration."""
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log_level: {self.log_level}")

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level.upper())

    @classmethod
    def from_dict(cls, data: dict) -> "ToolkitConfig":
        """
        Build from a plain mapping.

        Raises:
            ValueError: If a section has unknown keys or invalid values
        """
        data = data or {}
        try:
            return cls(
                draw=DrawConfig(**data.get("draw", {})),
                measure=MeasureConfig(**data.get("measure", {})),
                analysis=AnalysisConfig(**data.get("analysis", {})),
                log_level=data.get("log_level", "INFO"),
            )
        except TypeError as e:
            raise ValueError(f"Invalid toolkit configuration: {e}") from e

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "ToolkitConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            log_level: "INFO"

            draw:
              drawing_cursor: "crosshair"
              point_height_offset: 50.0

            measure:
              label_decimals: 2

            analysis:
              circle_segments: 64
              geodesic_solver: "ellipsoid"
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}")

        return cls.from_dict(data)
