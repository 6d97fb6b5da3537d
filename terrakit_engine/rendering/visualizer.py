"""
Scene Visualizer Module
=======================

Rasterises a HeadlessEngine scene onto an image.

Design:
- Stateless rendering (pure functions of the scene)
- No business logic
- Configurable styles
- Uses supervision drawing utilities

Dependencies:
- supervision (draw utilities, Color, Point)
- numpy (arrays)
"""

from typing import Tuple

import numpy as np
import supervision as sv

from terrakit_engine.headless import EquirectangularPicker, HeadlessEngine
from terrakit_engine.protocol import GeometryDescription, GeometryKind


class SceneVisualizer:
    """
    Draws every entity of a headless scene in an equirectangular view.

    Design Philosophy:
    - SRP: Only draws, doesn't compute
    - Live geometry is resolved at draw time (always current)
    - Projection shared with the picker, so drawn pixels line up with clicks

    Usage:
        visualizer = SceneVisualizer(projection=picker)
        frame = visualizer.render(engine)
    """

    def __init__(
        self,
        projection: EquirectangularPicker,
        background_color: sv.Color = sv.Color(r=20, g=30, b=48),
        text_color: sv.Color = sv.Color(r=255, g=255, b=255),
        text_background_color: sv.Color = sv.Color(r=42, g=42, b=42),
        text_scale: float = 0.5,
        text_thickness: int = 1,
        text_padding: int = 6,
        point_radius: int = 5,
        dash_length: int = 12,
        dash_gap: int = 8,
    ):
        """
        Initialize visualizer with style configuration.

        Args:
            projection: Viewport mapping (same one the engine picks with)
            background_color: Canvas colour
            text_color: Label text colour
            text_background_color: Label background colour
            text_scale: Scale factor for text
            text_thickness: Thickness for text
            text_padding: Padding for text background
            point_radius: Radius of point markers in pixels
            dash_length: Dash length in pixels for dashed polylines
            dash_gap: Gap between dashes in pixels
        """
        self.projection = projection
        self.background_color = background_color
        self.text_color = text_color
        self.text_background_color = text_background_color
        self.text_scale = text_scale
        self.text_thickness = text_thickness
        self.text_padding = text_padding
        self.point_radius = point_radius
        self.dash_length = dash_length
        self.dash_gap = dash_gap

    def blank_frame(self) -> np.ndarray:
        """Canvas of the projection's size filled with the background colour."""
        frame = np.zeros((self.projection.height, self.projection.width, 3), dtype=np.uint8)
        frame[:] = self.background_color.as_bgr()
        return frame

    def render(self, engine: HeadlessEngine, frame: np.ndarray | None = None) -> np.ndarray:
        """
        Draw all entities, polygons first so lines and labels stay on top.

        Returns:
            Frame with the scene drawn
        """
        frame = self.blank_frame() if frame is None else frame.copy()
        order = {GeometryKind.POLYGON: 0, GeometryKind.POLYLINE: 1, GeometryKind.POINT: 2, GeometryKind.LABEL: 3}
        descriptions = sorted(engine.entities.values(), key=lambda d: order[d.kind])
        for description in descriptions:
            pixels = self._to_pixels(engine, description)
            if len(pixels) == 0:
                continue
            if description.kind == GeometryKind.POLYGON:
                frame = self.draw_polygon(frame, pixels, description)
            elif description.kind == GeometryKind.POLYLINE:
                frame = self.draw_polyline(frame, pixels, description)
            elif description.kind == GeometryKind.POINT:
                frame = self.draw_points(frame, pixels, description)
            elif description.kind == GeometryKind.LABEL:
                frame = self.draw_label(frame, pixels[0], description)
        return frame

    def _to_pixels(self, engine: HeadlessEngine, description: GeometryDescription) -> np.ndarray:
        points = []
        for position in description.resolve():
            geo = engine.world_to_geographic(position)
            screen = self.projection.to_screen(geo.longitude, geo.latitude)
            points.append([int(round(screen.x)), int(round(screen.y))])
        return np.array(points, dtype=np.int64).reshape(-1, 2)

    def draw_polygon(self, frame: np.ndarray, pixels: np.ndarray, description: GeometryDescription) -> np.ndarray:
        style = description.style
        if len(pixels) >= 3:
            frame = sv.draw_filled_polygon(
                scene=frame,
                polygon=pixels,
                color=style.fill_color,
                opacity=style.fill_opacity,
            )
        if style.outline:
            frame = sv.draw_polygon(
                scene=frame,
                polygon=pixels,
                color=style.outline_color,
                thickness=max(1, int(style.width)),
            )
        return frame

    def draw_polyline(self, frame: np.ndarray, pixels: np.ndarray, description: GeometryDescription) -> np.ndarray:
        style = description.style
        segments = zip(pixels, pixels[1:])
        if style.dashed:
            segments = [piece for start, end in segments for piece in self._dashes(start, end)]
        for start, end in segments:
            frame = sv.draw_line(
                scene=frame,
                start=sv.Point(x=int(round(start[0])), y=int(round(start[1]))),
                end=sv.Point(x=int(round(end[0])), y=int(round(end[1]))),
                color=style.color,
                thickness=max(1, int(style.width)),
            )
        return frame

    def _dashes(self, start: np.ndarray, end: np.ndarray):
        """Split one segment into dash pieces, starting with a dash at start."""
        start = start.astype(float)
        delta = end - start
        length = float(np.linalg.norm(delta))
        if length == 0:
            return []
        direction = delta / length
        return [
            (start + direction * offset, start + direction * min(offset + self.dash_length, length))
            for offset in np.arange(0.0, length, self.dash_length + self.dash_gap)
        ]

    def draw_points(self, frame: np.ndarray, pixels: np.ndarray, description: GeometryDescription) -> np.ndarray:
        for x, y in pixels:
            frame = self._draw_filled_circle(frame, (int(x), int(y)), description.style.color)
        return frame

    def draw_label(self, frame: np.ndarray, pixel: np.ndarray, description: GeometryDescription) -> np.ndarray:
        if not description.text:
            return frame
        return sv.draw_text(
            scene=frame,
            text=description.text,
            text_anchor=sv.Point(x=int(pixel[0]), y=max(int(pixel[1]) - 10, 10)),
            text_color=self.text_color,
            text_scale=self.text_scale,
            text_thickness=self.text_thickness,
            text_padding=self.text_padding,
            background_color=self.text_background_color,
        )

    def _draw_filled_circle(self, frame: np.ndarray, center: Tuple[int, int], color: sv.Color) -> np.ndarray:
        """Draw a filled circle using polygon approximation."""
        angles = np.linspace(0, 2 * np.pi, 16)
        points = np.array([
            [int(center[0] + self.point_radius * np.cos(a)), int(center[1] + self.point_radius * np.sin(a))]
            for a in angles
        ], dtype=np.int64)
        return sv.draw_filled_polygon(scene=frame, polygon=points, color=color)
