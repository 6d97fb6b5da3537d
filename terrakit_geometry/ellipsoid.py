"""
Reference Ellipsoid
===================

WGS84 conversions between geographic (lon, lat, height) and Earth-centred
Earth-fixed world coordinates, plus the inverse geodesic problem.

Note: always_xy=True so coordinates are always ordered
(longitude, latitude) regardless of the EPSG axis convention.
"""

from functools import lru_cache
from typing import Tuple

import numpy as np
from pyproj import Geod, Transformer

# EPSG:4979 = WGS84 geographic 3D, EPSG:4978 = WGS84 geocentric
GEOGRAPHIC_CRS = "EPSG:4979"
GEOCENTRIC_CRS = "EPSG:4978"


class Ellipsoid:
    """
    Reference ellipsoid with forward/inverse world conversions.

    Attributes:
        name: pyproj ellipsoid name (e.g. "WGS84")
        semi_major_axis: Equatorial radius in metres
        semi_minor_axis: Polar radius in metres
    """

    def __init__(self, name: str = "WGS84"):
        self.name = name
        self._geod = Geod(ellps=name)
        self.semi_major_axis = float(self._geod.a)
        self.semi_minor_axis = float(self._geod.b)
        self._to_world = Transformer.from_crs(
            GEOGRAPHIC_CRS, GEOCENTRIC_CRS, always_xy=True
        )
        self._to_geographic = Transformer.from_crs(
            GEOCENTRIC_CRS, GEOGRAPHIC_CRS, always_xy=True
        )

    def geographic_to_world(
        self, longitude: float, latitude: float, height: float = 0.0
    ) -> Tuple[float, float, float]:
        """Convert degrees/degrees/metres to ECEF metres."""
        x, y, z = self._to_world.transform(longitude, latitude, height)
        return float(x), float(y), float(z)

    def world_to_geographic(
        self, x: float, y: float, z: float
    ) -> Tuple[float, float, float]:
        """Convert ECEF metres to (longitude, latitude, height)."""
        lon, lat, height = self._to_geographic.transform(x, y, z)
        return float(lon), float(lat), float(height)

    def geographic_to_world_many(
        self, longitudes: np.ndarray, latitudes: np.ndarray, heights: np.ndarray
    ) -> np.ndarray:
        """
        Vectorised forward conversion.

        Returns:
            Nx3 array of ECEF coordinates
        """
        x, y, z = self._to_world.transform(
            np.asarray(longitudes, dtype=float),
            np.asarray(latitudes, dtype=float),
            np.asarray(heights, dtype=float),
        )
        return np.column_stack([x, y, z])

    def inverse_distance(
        self, lon1: float, lat1: float, lon2: float, lat2: float
    ) -> float:
        """Ellipsoidal surface distance in metres (inverse geodesic problem)."""
        _, _, distance = self._geod.inv(lon1, lat1, lon2, lat2)
        return float(distance)

    def __repr__(self) -> str:
        return f"Ellipsoid(name={self.name!r}, a={self.semi_major_axis})"


@lru_cache(maxsize=None)
def get_ellipsoid(name: str = "WGS84") -> Ellipsoid:
    """Shared ellipsoid instance (transformers are costly to build)."""
    return Ellipsoid(name)
