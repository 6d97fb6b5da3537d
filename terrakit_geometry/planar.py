"""
Planar Queries
==============

Containment, proximity and intersection tests.

Design:
- Containment and intersection run in the (longitude, latitude) plane
- Proximity runs on 3D world vectors (metres)
- Pure functions, inputs never mutated
"""

from typing import Sequence, Tuple

import numpy as np

from terrakit_geometry.coordinates import (
    PositionLike,
    lon_lat_array,
    to_cartesian,
    to_cartesian_list,
    to_geographic,
)
from terrakit_geometry.errors import InsufficientVerticesError

Point2D = Tuple[float, float]


def point_to_segment_distance(
    point: PositionLike, segment_start: PositionLike, segment_end: PositionLike
) -> float:
    """
    Distance from a point to the closest point of a closed 3D segment.

    Projection parameter is clamped to [0, 1]; a zero-length segment
    short-circuits to point-to-point distance.

    Returns:
        Distance in metres
    """
    p = to_cartesian(point).as_array()
    a = to_cartesian(segment_start).as_array()
    b = to_cartesian(segment_end).as_array()

    v = b - a
    w = p - a

    c1 = float(np.dot(w, v))
    if c1 <= 0:
        return float(np.linalg.norm(p - a))

    c2 = float(np.dot(v, v))
    if c2 <= c1:
        return float(np.linalg.norm(p - b))

    projection = a + v * (c1 / c2)
    return float(np.linalg.norm(p - projection))


def point_to_polyline_distance(point: PositionLike, vertices: Sequence[PositionLike]) -> float:
    """
    Minimum distance from a point to any segment of an open polyline.

    Raises:
        InsufficientVerticesError: If fewer than 2 vertices
    """
    if len(vertices) < 2:
        raise InsufficientVerticesError(2, len(vertices), "point_to_polyline_distance")

    p = to_cartesian(point)
    line = to_cartesian_list(vertices)
    return min(
        point_to_segment_distance(p, start, end)
        for start, end in zip(line, line[1:])
    )


def is_point_in_polygon_2d(point: Point2D, polygon: np.ndarray) -> bool:
    """
    Even-odd ray casting on 2D (x, y) pairs.

    Each edge is tested half-open: (y_i > y) != (y_j > y) with a strict
    x < x_intersect comparison. For an axis-aligned box this counts the
    left and bottom edges as inside and the right and top edges as outside.
    """
    x, y = point
    inside = False
    count = len(polygon)
    j = count - 1
    for i in range(count):
        xi, yi = polygon[i][0], polygon[i][1]
        xj, yj = polygon[j][0], polygon[j][1]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def is_point_in_polygon(point: PositionLike, ring: Sequence[PositionLike]) -> bool:
    """
    Check if a position lies inside a ring, in the lon/lat projection.

    Rings with fewer than 3 vertices contain nothing.
    """
    if len(ring) < 3:
        return False
    return is_point_in_polygon_2d(to_geographic(point).as_lon_lat(), lon_lat_array(ring))


def point_to_polygon_distance(point: PositionLike, ring: Sequence[PositionLike]) -> float:
    """
    Distance to a polygon: 0 inside, else distance to its closed boundary.

    Raises:
        InsufficientVerticesError: If fewer than 3 vertices
    """
    if len(ring) < 3:
        raise InsufficientVerticesError(3, len(ring), "point_to_polygon_distance")
    if is_point_in_polygon(point, ring):
        return 0.0

    boundary = list(ring)
    if to_cartesian(boundary[0]) != to_cartesian(boundary[-1]):
        boundary.append(boundary[0])
    return point_to_polyline_distance(point, boundary)


def segments_intersect_2d(p1: Point2D, p2: Point2D, p3: Point2D, p4: Point2D) -> bool:
    """
    Parametric intersection test of segments p1-p2 and p3-p4.

    Parallel and collinear segments (zero denominator) are reported as
    non-intersecting, so collinear overlap is never detected.
    """
    d1x = p2[0] - p1[0]
    d1y = p2[1] - p1[1]
    d2x = p4[0] - p3[0]
    d2y = p4[1] - p3[1]

    denominator = d1y * d2x - d1x * d2y
    if denominator == 0:
        return False

    d3x = p1[0] - p3[0]
    d3y = p1[1] - p3[1]

    t1 = (d2y * d3x - d2x * d3y) / denominator
    t2 = (d1y * d3x - d1x * d3y) / denominator

    return 0 <= t1 <= 1 and 0 <= t2 <= 1


def polygons_intersect(ring_a: Sequence[PositionLike], ring_b: Sequence[PositionLike]) -> bool:
    """
    True if a vertex of one ring lies inside the other or any edges cross.

    Under-approximates true intersection: overlaps only along collinear
    edges are missed.
    """
    poly_a = lon_lat_array(ring_a)
    poly_b = lon_lat_array(ring_b)

    if len(poly_b) >= 3 and any(is_point_in_polygon_2d(tuple(p), poly_b) for p in poly_a):
        return True
    if len(poly_a) >= 3 and any(is_point_in_polygon_2d(tuple(p), poly_a) for p in poly_b):
        return True

    for i in range(len(poly_a)):
        a_start, a_end = poly_a[i], poly_a[(i + 1) % len(poly_a)]
        for j in range(len(poly_b)):
            b_start, b_end = poly_b[j], poly_b[(j + 1) % len(poly_b)]
            if segments_intersect_2d(a_start, a_end, b_start, b_end):
                return True
    return False
