"""
Coordinate Types
================

Immutable world and geographic positions plus input normalisation.

Design:
- Frozen dataclasses (value objects, thread-safe reads)
- Every public operation accepts a Cartesian3, a GeographicPoint or a
  [longitude, latitude, height?] sequence interchangeably
- Fail-fast validation with InvalidCoordinateError
"""

import math
from dataclasses import dataclass, asdict
from numbers import Real
from typing import Dict, Iterable, Sequence, Tuple, Union

import numpy as np

from terrakit_geometry.ellipsoid import Ellipsoid, get_ellipsoid
from terrakit_geometry.errors import InvalidCoordinateError


@dataclass(frozen=True)
class Cartesian3:
    """
    World-space position (Earth-centred, Earth-fixed, metres).

    Example:
        >>> p = Cartesian3(6378137.0, 0.0, 0.0)
        >>> p.distance_to(Cartesian3(6378137.0, 3.0, 4.0))
        5.0
    """
    x: float
    y: float
    z: float

    def as_array(self) -> np.ndarray:
        """Return a length-3 float array."""
        return np.array([self.x, self.y, self.z], dtype=float)

    @classmethod
    def from_array(cls, values: Sequence[float]) -> 'Cartesian3':
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def distance_to(self, other: 'Cartesian3') -> float:
        """Straight-line distance in metres."""
        return float(np.linalg.norm(self.as_array() - other.as_array()))


@dataclass(frozen=True)
class GeographicPoint:
    """
    Geographic position in degrees/degrees/metres.

    Invariants:
        - longitude in [-180, 180]
        - latitude in [-90, 90]
        - all components finite
    """
    longitude: float
    latitude: float
    height: float = 0.0

    def __post_init__(self):
        """Validate invariants."""
        for name in ("longitude", "latitude", "height"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidCoordinateError(f"{name} must be finite, got {value}")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidCoordinateError(
                f"longitude must be in [-180, 180], got {self.longitude}"
            )
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidCoordinateError(
                f"latitude must be in [-90, 90], got {self.latitude}"
            )

    def to_dict(self) -> Dict[str, float]:
        """Serialize to JSON-compatible dict."""
        return asdict(self)

    def as_lon_lat(self) -> Tuple[float, float]:
        return self.longitude, self.latitude


PositionLike = Union[Cartesian3, GeographicPoint, Sequence[float]]


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def parse_geographic(position: PositionLike) -> GeographicPoint:
    """
    Interpret a [lon, lat, height?] sequence or GeographicPoint.

    Raises:
        InvalidCoordinateError: If the input is not a 2- or 3-number sequence
            or lies outside the valid longitude/latitude range
    """
    if isinstance(position, GeographicPoint):
        return position
    if isinstance(position, (str, bytes)) or not isinstance(position, Sequence):
        raise InvalidCoordinateError(
            f"Expected Cartesian3, GeographicPoint or [lon, lat, height?], got {position!r}"
        )
    if len(position) not in (2, 3):
        raise InvalidCoordinateError(
            f"Geographic position needs 2 or 3 components, got {len(position)}"
        )
    if not all(_is_number(v) for v in position):
        raise InvalidCoordinateError(f"Non-numeric coordinate in {position!r}")

    height = float(position[2]) if len(position) == 3 else 0.0
    return GeographicPoint(float(position[0]), float(position[1]), height)


def to_cartesian(position: PositionLike, ellipsoid: Ellipsoid | None = None) -> Cartesian3:
    """Normalise any accepted position input to world space."""
    if isinstance(position, Cartesian3):
        for value in (position.x, position.y, position.z):
            if not math.isfinite(value):
                raise InvalidCoordinateError(f"Non-finite world position {position!r}")
        return position
    geo = parse_geographic(position)
    ellipsoid = ellipsoid or get_ellipsoid()
    return Cartesian3(*ellipsoid.geographic_to_world(geo.longitude, geo.latitude, geo.height))


def to_geographic(position: PositionLike, ellipsoid: Ellipsoid | None = None) -> GeographicPoint:
    """Normalise any accepted position input to geographic coordinates."""
    if isinstance(position, Cartesian3):
        ellipsoid = ellipsoid or get_ellipsoid()
        lon, lat, height = ellipsoid.world_to_geographic(position.x, position.y, position.z)
        if not (math.isfinite(lon) and math.isfinite(lat)):
            raise InvalidCoordinateError(
                f"World position {position!r} has no geographic equivalent"
            )
        return GeographicPoint(lon, lat, height)
    return parse_geographic(position)


def to_cartesian_list(
    positions: Iterable[PositionLike], ellipsoid: Ellipsoid | None = None
) -> Tuple[Cartesian3, ...]:
    return tuple(to_cartesian(p, ellipsoid) for p in positions)


def to_geographic_list(
    positions: Iterable[PositionLike], ellipsoid: Ellipsoid | None = None
) -> Tuple[GeographicPoint, ...]:
    return tuple(to_geographic(p, ellipsoid) for p in positions)


def lon_lat_array(positions: Iterable[PositionLike]) -> np.ndarray:
    """
    Project positions to the (longitude, latitude) plane.

    Returns:
        Nx2 array of degrees
    """
    points = to_geographic_list(positions)
    if not points:
        return np.zeros((0, 2), dtype=float)
    return np.array([p.as_lon_lat() for p in points], dtype=float)


def is_single_position(geometry) -> bool:
    """True if `geometry` is one position rather than a list of positions."""
    if isinstance(geometry, (Cartesian3, GeographicPoint)):
        return True
    return (
        isinstance(geometry, Sequence)
        and not isinstance(geometry, (str, bytes))
        and len(geometry) > 0
        and _is_number(geometry[0])
    )
