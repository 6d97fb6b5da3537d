"""
Measure Session Module
======================

Bounded Context: Distance and area measurement on top of a DrawSession.

Design:
- One DrawSession does the vertex capture; this module only reacts to its
  finalize callback
- Results are immutable value objects; their geometry and label entities
  are owned here until clear()/clear_all()
- Values are stored in SI units (m, m²); labels use km / km²
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
import supervision as sv

from terrakit_geometry import (
    Cartesian3,
    KILOMETRES_TO_METRES,
    SQUARE_KILOMETRES_TO_SQUARE_METRES,
    path_length,
    polygon_area,
)
from terrakit_engine.protocol import (
    GeometryDescription,
    GeometryHandle,
    GeometryKind,
    GeometryStyle,
    RenderingEngine,
)
from terrakit_draw.config import MeasureConfig
from terrakit_draw.logging import LogEvent, StructuredLogger, create_logger
from terrakit_draw.session import DrawSession, DrawShape


class MeasurementKind(str, Enum):
    DISTANCE = "distance"
    AREA = "area"


@dataclass(frozen=True)
class MeasurementResult:
    """
    Completed measurement.

    Attributes:
        id: "distance_<n>" or "area_<n>"
        kind: DISTANCE or AREA
        value: Metres (distance) or square metres (area)
        vertices: Measured vertices (polygon rings are closed)
        label_anchor: World position of the label
        display_text: Label text, e.g. "12.34 km"
    """
    id: str
    kind: MeasurementKind
    value: float
    vertices: Tuple[Cartesian3, ...]
    label_anchor: Cartesian3
    display_text: str

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'kind': self.kind.value,
            'value': self.value,
            'display_text': self.display_text,
            'vertex_count': len(self.vertices),
        }


MeasureCallback = Callable[[MeasurementResult], None]


class MeasureSession:
    """
    Interactive distance / area measurement.

    Usage:
        measure = MeasureSession(engine)
        measure.measure_distance(on_complete=print)
        # ... user clicks a path and right-clicks ...
        measure.results   # (MeasurementResult(id='distance_1', ...),)
    """

    def __init__(
        self,
        engine: RenderingEngine,
        draw_session: DrawSession | None = None,
        config: MeasureConfig | None = None,
        logger: StructuredLogger | None = None,
    ):
        self.engine = engine
        self.config = config or MeasureConfig()
        self.logger = logger or create_logger("measure")
        self.draw_session = draw_session or DrawSession(engine)

        self._counter = 0
        self._results: Dict[str, MeasurementResult] = {}
        self._handles: Dict[str, List[GeometryHandle]] = {}

    @property
    def results(self) -> Tuple[MeasurementResult, ...]:
        """Stored results in creation order."""
        return tuple(self._results.values())

    def get(self, measurement_id: str) -> Optional[MeasurementResult]:
        return self._results.get(measurement_id)

    def measure_distance(self, on_complete: MeasureCallback | None = None) -> str:
        """
        Start a polyline measurement.

        Clears every previous measurement first, so the id is always
        "distance_1".

        Returns:
            Measurement id the result will carry
        """
        self.clear_all()
        measurement_id = self._next_id(MeasurementKind.DISTANCE)

        def finished(vertices, shape):
            kilometres = path_length(vertices)
            self._store(
                MeasurementResult(
                    id=measurement_id,
                    kind=MeasurementKind.DISTANCE,
                    value=kilometres * KILOMETRES_TO_METRES,
                    vertices=vertices,
                    label_anchor=vertices[-1],
                    display_text=self._format(kilometres, self.config.distance_unit_label),
                ),
                on_complete,
            )

        self._start(measurement_id, DrawShape.POLYLINE, finished)
        return measurement_id

    def measure_area(self, on_complete: MeasureCallback | None = None) -> str:
        """
        Start a polygon measurement. Earlier results are kept.

        Returns:
            Measurement id the result will carry
        """
        measurement_id = self._next_id(MeasurementKind.AREA)

        def finished(vertices, shape):
            square_kilometres = polygon_area(vertices[:-1])
            self._store(
                MeasurementResult(
                    id=measurement_id,
                    kind=MeasurementKind.AREA,
                    value=square_kilometres * SQUARE_KILOMETRES_TO_SQUARE_METRES,
                    vertices=vertices,
                    label_anchor=self._centroid(vertices),
                    display_text=self._format(square_kilometres, self.config.area_unit_label),
                ),
                on_complete,
            )

        self._start(measurement_id, DrawShape.POLYGON, finished)
        return measurement_id

    def clear(self, measurement_id: str) -> None:
        """Remove one result and its entities; unknown ids are ignored."""
        if self._results.pop(measurement_id, None) is None:
            return
        for handle in self._handles.pop(measurement_id, []):
            self.engine.remove_renderable_geometry(handle)
        self.logger.info(
            event=LogEvent.MEASURE_CLEARED,
            message=f"Measurement {measurement_id} cleared",
            metadata={'measurement_id': measurement_id}
        )

    def clear_all(self) -> None:
        """Remove every result, cancel any in-progress measurement, reset the counter."""
        self.draw_session.cancel()
        cleared = len(self._results)
        for handles in self._handles.values():
            for handle in handles:
                self.engine.remove_renderable_geometry(handle)
        self._results.clear()
        self._handles.clear()
        self._counter = 0
        if cleared:
            self.logger.info(
                event=LogEvent.MEASURE_CLEARED,
                message="All measurements cleared",
                metadata={'count': cleared}
            )

    # ===== Internals =====

    def _next_id(self, kind: MeasurementKind) -> str:
        self._counter += 1
        return f"{kind.value}_{self._counter}"

    def _start(self, measurement_id: str, shape: DrawShape, finished) -> None:
        self.draw_session.draw(shape, on_finalize=finished)
        self.logger.info(
            event=LogEvent.MEASURE_STARTED,
            message=f"Measurement {measurement_id} started",
            metadata={'measurement_id': measurement_id, 'shape': shape.value}
        )

    def _store(self, result: MeasurementResult, on_complete: MeasureCallback | None) -> None:
        handles = []
        geometry = self.draw_session.detach_result()
        if geometry is not None:
            handles.append(geometry)
        handles.append(self.engine.add_renderable_geometry(
            GeometryDescription(
                GeometryKind.LABEL,
                (result.label_anchor,),
                GeometryStyle(color=sv.Color(r=255, g=255, b=255), clamp_to_ground=False),
                text=result.display_text,
            )
        ))
        self._results[result.id] = result
        self._handles[result.id] = handles

        self.logger.info(
            event=LogEvent.MEASURE_COMPLETED,
            message=f"Measurement {result.id}: {result.display_text}",
            metadata=result.to_dict()
        )
        if on_complete is not None:
            on_complete(result)

    def _format(self, value: float, unit: str) -> str:
        return f"{value:.{self.config.label_decimals}f} {unit}"

    def _centroid(self, ring: Tuple[Cartesian3, ...]) -> Cartesian3:
        # world-space mean of the closed ring, dropped onto the surface
        mean = np.mean([vertex.as_array() for vertex in ring], axis=0)
        geo = self.engine.world_to_geographic(Cartesian3.from_array(mean))
        return self.engine.geographic_to_world(geo.longitude, geo.latitude, 0.0)
