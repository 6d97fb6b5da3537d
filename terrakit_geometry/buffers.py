"""
Buffer Rings
============

Tangent-plane buffer generation for points, segments and rings.

All offsets are first-order: a metric distance d becomes an angular offset
d / (a * cos(lat)) in longitude and d / a in latitude, with a the ellipsoid
semi-major axis. Accuracy degrades for large distances and long segments.
"""

import math
from typing import Sequence, Tuple

import numpy as np

from terrakit_geometry.coordinates import (
    Cartesian3,
    PositionLike,
    to_geographic,
    to_geographic_list,
)
from terrakit_geometry.ellipsoid import get_ellipsoid
from terrakit_geometry.errors import InsufficientVerticesError

DEFAULT_CIRCLE_SEGMENTS = 64

Ring = Tuple[Cartesian3, ...]


def _to_ring(longitudes: np.ndarray, latitudes: np.ndarray, heights: np.ndarray) -> Ring:
    """Radians in, world-space ring out."""
    world = get_ellipsoid().geographic_to_world_many(
        np.degrees(longitudes), np.degrees(latitudes), heights
    )
    return tuple(Cartesian3.from_array(row) for row in world)


def circle_buffer_ring(
    center: PositionLike, radius_m: float, segments: int = DEFAULT_CIRCLE_SEGMENTS
) -> Ring:
    """
    Regular polygon approximating a circle, counter-clockwise.

    Args:
        center: Circle centre (its height is kept for every vertex)
        radius_m: Radius in metres
        segments: Number of vertices

    Returns:
        Ring of `segments` world positions (not closed)
    """
    if segments < 3:
        raise ValueError(f"segments must be >= 3, got {segments}")
    if radius_m < 0:
        raise ValueError(f"radius_m must be >= 0, got {radius_m}")

    geo = to_geographic(center)
    a = get_ellipsoid().semi_major_axis
    lon0 = math.radians(geo.longitude)
    lat0 = math.radians(geo.latitude)

    angles = np.arange(segments) / segments * 2 * np.pi
    longitudes = lon0 + np.cos(angles) * radius_m / (a * math.cos(lat0))
    latitudes = lat0 + np.sin(angles) * radius_m / a
    heights = np.full(segments, geo.height)
    return _to_ring(longitudes, latitudes, heights)


def segment_buffer_ring(start: PositionLike, end: PositionLike, distance_m: float) -> Ring:
    """
    Rectangle around a segment: [start+n, end+n, end-n, start-n].

    The perpendicular n is computed once, in the tangent plane at the start
    latitude. A zero-length segment degrades to a circle ring.
    """
    s = to_geographic(start)
    e = to_geographic(end)

    s_lon, s_lat = math.radians(s.longitude), math.radians(s.latitude)
    e_lon, e_lat = math.radians(e.longitude), math.radians(e.latitude)

    dx = e_lon - s_lon
    dy = e_lat - s_lat
    length = math.hypot(dx, dy)
    if length == 0:
        return circle_buffer_ring(start, distance_m)

    nx = -dy / length
    ny = dx / length
    factor = distance_m / (get_ellipsoid().semi_major_axis * math.cos(s_lat))
    offset_x = nx * factor
    offset_y = ny * factor

    longitudes = np.array([s_lon + offset_x, e_lon + offset_x, e_lon - offset_x, s_lon - offset_x])
    latitudes = np.array([s_lat + offset_y, e_lat + offset_y, e_lat - offset_y, s_lat - offset_y])
    heights = np.array([s.height, e.height, e.height, s.height])
    return _to_ring(longitudes, latitudes, heights)


def polygon_buffer_ring(ring: Sequence[PositionLike], distance_m: float) -> Ring:
    """
    Miter-style offset of every vertex.

    Each vertex moves along the normalised mean of the right-hand normals of
    its incoming and outgoing edges. The direction follows the winding in
    lon/lat: counter-clockwise rings grow, clockwise rings shrink. Concave
    rings or tight angles can make the result self-intersect.

    Raises:
        InsufficientVerticesError: If fewer than 3 vertices
    """
    if len(ring) < 3:
        raise InsufficientVerticesError(3, len(ring), "polygon_buffer_ring")

    points = to_geographic_list(ring)
    # closed rings repeat the first vertex, which would give a zero-length edge
    if len(points) > 3 and points[0] == points[-1]:
        points = points[:-1]
    lons = np.radians([p.longitude for p in points])
    lats = np.radians([p.latitude for p in points])
    heights = np.array([p.height for p in points])

    incoming = np.column_stack([lons - np.roll(lons, 1), lats - np.roll(lats, 1)])
    outgoing = np.column_stack([np.roll(lons, -1) - lons, np.roll(lats, -1) - lats])

    # right-hand normal of (vx, vy) is (vy, -vx)
    n_in = np.column_stack([incoming[:, 1], -incoming[:, 0]])
    n_in /= np.linalg.norm(incoming, axis=1)[:, None]
    n_out = np.column_stack([outgoing[:, 1], -outgoing[:, 0]])
    n_out /= np.linalg.norm(outgoing, axis=1)[:, None]

    normals = (n_in + n_out) / 2
    normals /= np.linalg.norm(normals, axis=1)[:, None]

    factors = distance_m / (get_ellipsoid().semi_major_axis * np.cos(lats))
    return _to_ring(
        lons + normals[:, 0] * factors,
        lats + normals[:, 1] * factors,
        heights,
    )
