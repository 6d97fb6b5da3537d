"""
terrakit Tools
==============

Bounded Context: Interactive drawing, measurement and spatial analysis over
a 3D globe engine.

Architecture:

    terrakit_draw/
    ├── preview.py     # LivePreview (lazy view of the shape being drawn)
    ├── session.py     # DrawSession state machine
    ├── measure.py     # MeasureSession, MeasurementResult
    ├── analysis.py    # SpatialAnalysisService, AnalysisEntity
    ├── toolkit.py     # GlobeToolkit context object
    ├── config.py      # Typed configuration (YAML)
    └── logging/       # Structured JSON logging

Usage:

    from terrakit_engine import HeadlessEngine
    from terrakit_draw import GlobeToolkit

    toolkit = GlobeToolkit(HeadlessEngine())
    toolkit.measure.measure_area(on_complete=lambda r: print(r.display_text))
    buffer_id = toolkit.analysis.create_buffer([10.0, 45.0], 500.0)
"""

from terrakit_draw.config import AnalysisConfig, DrawConfig, MeasureConfig, ToolkitConfig
from terrakit_draw.preview import LivePreview
from terrakit_draw.session import DrawSession, DrawSessionError, DrawShape, DrawState
from terrakit_draw.measure import MeasurementKind, MeasurementResult, MeasureSession
from terrakit_draw.analysis import (
    AnalysisEntity,
    AnalysisKind,
    IntersectionResult,
    SpatialAnalysisService,
)
from terrakit_draw.toolkit import GlobeToolkit

__all__ = [
    # Config
    "AnalysisConfig",
    "DrawConfig",
    "MeasureConfig",
    "ToolkitConfig",
    # Drawing
    "LivePreview",
    "DrawSession",
    "DrawSessionError",
    "DrawShape",
    "DrawState",
    # Measurement
    "MeasurementKind",
    "MeasurementResult",
    "MeasureSession",
    # Analysis
    "AnalysisEntity",
    "AnalysisKind",
    "IntersectionResult",
    "SpatialAnalysisService",
    # Context
    "GlobeToolkit",
]

__version__ = "0.1.0"
