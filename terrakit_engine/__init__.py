"""
Engine Layer
============

Bounded Context: The globe rendering engine as seen by the tools.

Architecture:

    terrakit_engine/
    ├── protocol.py       # RenderingEngine protocol, pointer events, geometry descriptions
    ├── events.py         # PointerHandlerRegistry (explicit pointer bindings)
    ├── headless.py       # HeadlessEngine, EquirectangularPicker
    └── rendering/        # SceneVisualizer (supervision drawing)

Usage:

    from terrakit_engine import HeadlessEngine, EquirectangularPicker

    picker = EquirectangularPicker()
    engine = HeadlessEngine(picker=picker)
    engine.click(picker.to_screen(2.35, 48.85))
"""

from terrakit_engine.protocol import (
    GeometryDescription,
    GeometryHandle,
    GeometryKind,
    GeometryStyle,
    PointerEvent,
    PointerEventKind,
    PointerHandler,
    RenderingEngine,
    ScreenPoint,
)
from terrakit_engine.events import PointerHandlerRegistry
from terrakit_engine.headless import EquirectangularPicker, HeadlessEngine
from terrakit_engine.rendering.visualizer import SceneVisualizer

__all__ = [
    # Protocol
    "GeometryDescription",
    "GeometryHandle",
    "GeometryKind",
    "GeometryStyle",
    "PointerEvent",
    "PointerEventKind",
    "PointerHandler",
    "RenderingEngine",
    "ScreenPoint",
    # Implementations
    "PointerHandlerRegistry",
    "EquirectangularPicker",
    "HeadlessEngine",
    "SceneVisualizer",
]
