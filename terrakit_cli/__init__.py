"""
terrakit CLI - Command-line interface for ad-hoc spatial queries.

This package wraps the geometry kernel and SpatialAnalysisService so that
distances, areas, containment, buffers and intersections can be computed
without writing Python.

Usage:
    terrakit distance 2.35,48.85 13.40,52.52 --surface
    terrakit area config/examples/plaza.yaml
    terrakit contains 10.005,45.005 config/examples/plaza.yaml
    terrakit buffer config/examples/plaza.yaml 250 --output buffer.png
    terrakit intersects a.yaml b.yaml
"""

__version__ = "0.1.0"
