"""
Geometry Layer
==============

Bounded Context: Pure geodesy and spatial queries.

Responsibilities:
- Coordinate value objects and input normalisation
- Haversine distance and the two polygon-area approximations
- Point-in-polygon, proximity and intersection tests
- Buffer ring generation
- NO interactive state, NO rendering

Design Philosophy:
- Pure functions
- Immutable data structures
- Fail-fast validation
"""

from terrakit_geometry.errors import (
    TerrakitError,
    InvalidCoordinateError,
    InsufficientVerticesError,
)
from terrakit_geometry.coordinates import (
    Cartesian3,
    GeographicPoint,
    PositionLike,
    to_cartesian,
    to_geographic,
)
from terrakit_geometry.ellipsoid import Ellipsoid, get_ellipsoid
from terrakit_geometry.geodesy import (
    geodesic_distance,
    path_length,
    polygon_area,
    spherical_cap_area,
    straight_line_distance,
    surface_distance,
    KILOMETRES_TO_METRES,
    SQUARE_KILOMETRES_TO_SQUARE_METRES,
)
from terrakit_geometry.planar import (
    point_to_segment_distance,
    point_to_polyline_distance,
    is_point_in_polygon,
    point_to_polygon_distance,
    segments_intersect_2d,
    polygons_intersect,
)
from terrakit_geometry.buffers import (
    circle_buffer_ring,
    segment_buffer_ring,
    polygon_buffer_ring,
)

__all__ = [
    # Errors
    "TerrakitError",
    "InvalidCoordinateError",
    "InsufficientVerticesError",
    # Coordinates
    "Cartesian3",
    "GeographicPoint",
    "PositionLike",
    "to_cartesian",
    "to_geographic",
    "Ellipsoid",
    "get_ellipsoid",
    # Geodesy
    "geodesic_distance",
    "path_length",
    "polygon_area",
    "spherical_cap_area",
    "straight_line_distance",
    "surface_distance",
    "KILOMETRES_TO_METRES",
    "SQUARE_KILOMETRES_TO_SQUARE_METRES",
    # Planar
    "point_to_segment_distance",
    "point_to_polyline_distance",
    "is_point_in_polygon",
    "point_to_polygon_distance",
    "segments_intersect_2d",
    "polygons_intersect",
    # Buffers
    "circle_buffer_ring",
    "segment_buffer_ring",
    "polygon_buffer_ring",
]
