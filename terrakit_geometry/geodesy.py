"""
Geodesy Module
==============

Distances and areas on the reference surface - NO state, NO side effects.

Two polygon-area approximations live here on purpose:
- polygon_area: planar shoelace on degrees scaled to km² (measurement tool)
- spherical_cap_area: longitude-delta integral in m² (spatial analysis)
They give different numbers for the same ring and must not be unified.
"""

import math
from typing import Sequence

from terrakit_geometry.coordinates import (
    PositionLike,
    to_cartesian,
    to_geographic,
    to_geographic_list,
)
from terrakit_geometry.ellipsoid import get_ellipsoid
from terrakit_geometry.errors import InsufficientVerticesError

EARTH_MEAN_RADIUS_KM = 6371.0
EARTH_MEAN_RADIUS_M = 6371000.0
KM_PER_DEGREE = 111.32
KILOMETRES_TO_METRES = 1000.0
SQUARE_KILOMETRES_TO_SQUARE_METRES = 1.0e6

SOLVER_ELLIPSOID = "ellipsoid"
SOLVER_HAVERSINE = "haversine"
SURFACE_SOLVERS = {SOLVER_ELLIPSOID, SOLVER_HAVERSINE}


def geodesic_distance(a: PositionLike, b: PositionLike) -> float:
    """
    Haversine great-circle distance on a sphere of radius 6371 km.

    Args:
        a: Start position
        b: End position

    Returns:
        Distance in kilometres
    """
    start = to_geographic(a)
    end = to_geographic(b)

    d_lat = math.radians(end.latitude - start.latitude)
    d_lon = math.radians(end.longitude - start.longitude)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(start.latitude))
        * math.cos(math.radians(end.latitude))
        * math.sin(d_lon / 2) ** 2
    )
    # rounding can push antipodal pairs just past 1
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_MEAN_RADIUS_KM * c


def path_length(vertices: Sequence[PositionLike]) -> float:
    """Sum of Haversine segment lengths along the path, in kilometres."""
    total = 0.0
    for start, end in zip(vertices, vertices[1:]):
        total += geodesic_distance(start, end)
    return total


def polygon_area(vertices: Sequence[PositionLike]) -> float:
    """
    Small-polygon planar area approximation in km².

    Shoelace sum over (longitude, latitude) degrees, scaled by
    111.32² x cos(latitude of the first vertex). Only valid for polygons
    that are small relative to the Earth's radius.

    Raises:
        InsufficientVerticesError: If fewer than 3 vertices
    """
    if len(vertices) < 3:
        raise InsufficientVerticesError(3, len(vertices), "polygon_area")

    points = to_geographic_list(vertices)
    twice_area = 0.0
    for i, current in enumerate(points):
        following = points[(i + 1) % len(points)]
        twice_area += current.longitude * following.latitude
        twice_area -= following.longitude * current.latitude

    reference_latitude = math.radians(points[0].latitude)
    return (
        abs(twice_area)
        * KM_PER_DEGREE
        * KM_PER_DEGREE
        * math.cos(reference_latitude)
        / 2
    )


def spherical_cap_area(vertices: Sequence[PositionLike]) -> float:
    """
    Spherical-cap-style polygon area in m².

    |sum((lon[i+1] - lon[i]) * sin(lat[i])) * R² / 2| with R = 6371 km and
    angles in radians.

    Raises:
        InsufficientVerticesError: If fewer than 3 vertices
    """
    if len(vertices) < 3:
        raise InsufficientVerticesError(3, len(vertices), "spherical_cap_area")

    points = to_geographic_list(vertices)
    total = 0.0
    for i, current in enumerate(points):
        following = points[(i + 1) % len(points)]
        d_lon = math.radians(following.longitude) - math.radians(current.longitude)
        total += d_lon * math.sin(math.radians(current.latitude))

    return abs(total * EARTH_MEAN_RADIUS_M * EARTH_MEAN_RADIUS_M / 2.0)


def straight_line_distance(a: PositionLike, b: PositionLike) -> float:
    """3D chord distance between two positions, in metres."""
    return to_cartesian(a).distance_to(to_cartesian(b))


def surface_distance(
    a: PositionLike, b: PositionLike, solver: str = SOLVER_ELLIPSOID
) -> float:
    """
    Distance along the reference surface, in metres.

    Args:
        a: Start position
        b: End position
        solver: "ellipsoid" (WGS84 inverse geodesic) or "haversine"

    Raises:
        ValueError: If solver is unknown
    """
    if solver not in SURFACE_SOLVERS:
        raise ValueError(
            f"Invalid solver: {solver}. Must be one of {sorted(SURFACE_SOLVERS)}"
        )
    if solver == SOLVER_HAVERSINE:
        return geodesic_distance(a, b) * KILOMETRES_TO_METRES

    start = to_geographic(a)
    end = to_geographic(b)
    return get_ellipsoid().inverse_distance(
        start.longitude, start.latitude, end.longitude, end.latitude
    )
