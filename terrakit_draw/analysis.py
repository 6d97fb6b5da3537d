"""
Spatial Analysis Service
========================

Bounded Context: Geometric queries and buffer generation.

Every query is a pure pass-through to terrakit_geometry. The only state is
the registry of analysis entities (rendered buffer rings), keyed by UUID.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

import supervision as sv

from terrakit_geometry import (
    Cartesian3,
    InsufficientVerticesError,
    PositionLike,
    circle_buffer_ring,
    is_point_in_polygon,
    point_to_polygon_distance,
    point_to_polyline_distance,
    polygon_buffer_ring,
    polygons_intersect,
    segment_buffer_ring,
    spherical_cap_area,
    straight_line_distance,
    surface_distance,
)
from terrakit_geometry.coordinates import is_single_position
from terrakit_engine.protocol import (
    GeometryDescription,
    GeometryHandle,
    GeometryKind,
    GeometryStyle,
    RenderingEngine,
)
from terrakit_draw.config import AnalysisConfig
from terrakit_draw.logging import LogEvent, StructuredLogger, create_logger


class AnalysisKind(str, Enum):
    CIRCLE_BUFFER = "circle_buffer"
    SEGMENT_BUFFER = "segment_buffer"
    POLYGON_BUFFER = "polygon_buffer"


@dataclass(frozen=True)
class AnalysisEntity:
    """A computed geometry registered with the engine."""
    entity_id: str
    kind: AnalysisKind
    ring: Tuple[Cartesian3, ...]
    handle: GeometryHandle
    style: GeometryStyle


@dataclass(frozen=True)
class IntersectionResult:
    """
    Outcome of a polygon intersection query.

    region is never computed and is always None.
    """
    intersects: bool
    region: Optional[Tuple[Cartesian3, ...]] = field(default=None)


class SpatialAnalysisService:
    """
    Facade over the geometry kernel plus an analysis-entity registry.

    Example:
        analysis = SpatialAnalysisService(engine)
        entity_id = analysis.create_buffer([10.0, 45.0], 1000.0)
        analysis.get_analysis_entity(entity_id).ring   # 64 vertices
    """

    def __init__(
        self,
        engine: RenderingEngine,
        config: AnalysisConfig | None = None,
        logger: StructuredLogger | None = None,
    ):
        self.engine = engine
        self.config = config or AnalysisConfig()
        self.logger = logger or create_logger("analysis")
        self._entities: Dict[str, AnalysisEntity] = {}

    @property
    def default_buffer_style(self) -> GeometryStyle:
        return GeometryStyle(
            color=sv.Color(r=0, g=0, b=255),
            fill_color=sv.Color(r=0, g=0, b=255),
            fill_opacity=self.config.buffer_fill_opacity,
            outline=True,
            outline_color=sv.Color(r=255, g=255, b=255),
            width=2.0,
        )

    # ===== Measurements =====

    def calculate_distance(
        self, a: PositionLike, b: PositionLike, include_surface_path: bool = False
    ) -> float:
        """
        Distance in metres.

        Straight 3D line by default; along the surface with the configured
        solver when include_surface_path is set.
        """
        if include_surface_path:
            return surface_distance(a, b, solver=self.config.geodesic_solver)
        return straight_line_distance(a, b)

    def calculate_area(self, vertices: Sequence[PositionLike]) -> float:
        """Polygon area in m² (spherical-cap formula)."""
        return spherical_cap_area(vertices)

    def calculate_point_to_line_distance(
        self, point: PositionLike, vertices: Sequence[PositionLike]
    ) -> float:
        return point_to_polyline_distance(point, vertices)

    def calculate_point_to_polygon_distance(
        self, point: PositionLike, ring: Sequence[PositionLike]
    ) -> float:
        return point_to_polygon_distance(point, ring)

    def is_point_in_polygon(self, point: PositionLike, ring: Sequence[PositionLike]) -> bool:
        return is_point_in_polygon(point, ring)

    # ===== Intersections =====

    def do_polygons_intersect(
        self, ring_a: Sequence[PositionLike], ring_b: Sequence[PositionLike]
    ) -> bool:
        return polygons_intersect(ring_a, ring_b)

    def calculate_intersection(
        self, ring_a: Sequence[PositionLike], ring_b: Sequence[PositionLike]
    ) -> IntersectionResult:
        return IntersectionResult(intersects=polygons_intersect(ring_a, ring_b))

    # ===== Buffers =====

    def create_buffer(self, geometry, distance_m: float, style: dict | None = None) -> str:
        """
        Generate, render and register a buffer ring.

        Args:
            geometry: One position (bare or in a list), two positions
                (segment) or three or more (polygon ring)
            distance_m: Buffer distance in metres
            style: GeometryStyle field overrides

        Returns:
            UUID of the new analysis entity

        Raises:
            InsufficientVerticesError: If geometry is empty
            ValueError: If style names an unknown field or an invalid value
        """
        try:
            resolved_style = self.default_buffer_style.merged(**(style or {}))
        except TypeError as e:
            raise ValueError(f"Invalid buffer style: {e}") from e

        positions = [geometry] if is_single_position(geometry) else list(geometry)

        if len(positions) == 0:
            raise InsufficientVerticesError(1, 0, "create_buffer")
        if len(positions) == 1:
            kind = AnalysisKind.CIRCLE_BUFFER
            ring = circle_buffer_ring(positions[0], distance_m, segments=self.config.circle_segments)
        elif len(positions) == 2:
            kind = AnalysisKind.SEGMENT_BUFFER
            ring = segment_buffer_ring(positions[0], positions[1], distance_m)
        else:
            kind = AnalysisKind.POLYGON_BUFFER
            ring = polygon_buffer_ring(positions, distance_m)

        handle = self.engine.add_renderable_geometry(
            GeometryDescription(GeometryKind.POLYGON, ring, resolved_style)
        )
        entity_id = str(uuid.uuid4())
        self._entities[entity_id] = AnalysisEntity(
            entity_id=entity_id, kind=kind, ring=ring, handle=handle, style=resolved_style
        )

        self.logger.info(
            event=LogEvent.ANALYSIS_BUFFER_CREATED,
            message=f"{kind.value} created",
            metadata={
                'entity_id': entity_id,
                'distance_m': distance_m,
                'vertex_count': len(ring),
            }
        )
        return entity_id

    # ===== Registry =====

    def get_all_analysis_entities(self) -> Tuple[AnalysisEntity, ...]:
        return tuple(self._entities.values())

    def get_analysis_entity(self, entity_id: str) -> Optional[AnalysisEntity]:
        return self._entities.get(entity_id)

    def remove_analysis_entity(self, entity_id: str) -> bool:
        """Remove one entity; returns False if the id is unknown."""
        entity = self._entities.pop(entity_id, None)
        if entity is None:
            return False
        self.engine.remove_renderable_geometry(entity.handle)
        self.logger.info(
            event=LogEvent.ANALYSIS_ENTITY_REMOVED,
            message=f"Analysis entity {entity_id} removed",
            metadata={'entity_id': entity_id, 'kind': entity.kind.value}
        )
        return True

    def clear_all_analysis_entities(self) -> None:
        count = len(self._entities)
        for entity in self._entities.values():
            self.engine.remove_renderable_geometry(entity.handle)
        self._entities.clear()
        if count:
            self.logger.info(
                event=LogEvent.ANALYSIS_CLEARED,
                message="All analysis entities cleared",
                metadata={'count': count}
            )
