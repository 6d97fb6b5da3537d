"""
Rendering Layer
===============

Bounded Context: Headless scene visualisation.

Responsibilities:
- Draw polygons, polylines, point markers and labels on frames
- Pure rendering - no logic, no state

Design:
- Stateless drawing functions
- Uses supervision drawing utilities
"""

from terrakit_engine.rendering.visualizer import SceneVisualizer

__all__ = [
    "SceneVisualizer",
]
