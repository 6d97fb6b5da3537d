"""
terrakit CLI - Main entry point.

Positions on the command line are "lon,lat[,height]". Vertex files are YAML
lists of [lon, lat] or [lon, lat, height] entries.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List

import cv2
import yaml

from terrakit_geometry import (
    InvalidCoordinateError,
    KILOMETRES_TO_METRES,
    SQUARE_KILOMETRES_TO_SQUARE_METRES,
    polygon_area,
)
from terrakit_engine import EquirectangularPicker, HeadlessEngine, SceneVisualizer
from terrakit_draw import SpatialAnalysisService, ToolkitConfig
from terrakit_draw.logging import LogEvent, StructuredLogger, create_logger

FORMULA_PLANAR = "planar"
FORMULA_SPHERICAL_CAP = "spherical-cap"

RENDER_WIDTH = 800
RENDER_MARGIN = 0.1


def parse_position(text: str) -> List[float]:
    """
    Parse "lon,lat[,height]".

    Raises:
        ValueError: If the text is not 2 or 3 comma-separated numbers
    """
    parts = [part.strip() for part in text.split(",")]
    if len(parts) not in (2, 3):
        raise ValueError(f"Position must be 'lon,lat[,height]', got '{text}'")
    try:
        return [float(part) for part in parts]
    except ValueError:
        raise ValueError(f"Position must be numeric, got '{text}'")


def load_vertices(path_like: str) -> List[List[float]]:
    """
    Load a YAML vertex list.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If YAML is invalid or not a list of positions
    """
    path = Path(path_like)

    if not path.exists():
        raise FileNotFoundError(f"Vertex file not found: {path_like}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path_like}: {e}")

    if not isinstance(data, list) or not all(isinstance(v, list) for v in data):
        raise ValueError(f"{path_like} must contain a list of [lon, lat, height?] entries")
    return data


def fit_viewport(engine: HeadlessEngine, positions, width: int = RENDER_WIDTH) -> EquirectangularPicker:
    """Equirectangular viewport framing the given world positions with a margin."""
    geographic = [engine.world_to_geographic(p) for p in positions]
    lons = [g.longitude for g in geographic]
    lats = [g.latitude for g in geographic]

    span_lon = max(max(lons) - min(lons), 1e-6)
    span_lat = max(max(lats) - min(lats), 1e-6)
    west = max(min(lons) - span_lon * RENDER_MARGIN, -180.0)
    east = min(max(lons) + span_lon * RENDER_MARGIN, 180.0)
    south = max(min(lats) - span_lat * RENDER_MARGIN, -90.0)
    north = min(max(lats) + span_lat * RENDER_MARGIN, 90.0)

    height = max(int(round(width * (north - south) / (east - west))), 1)
    return EquirectangularPicker(
        width=width, height=height, west=west, south=south, east=east, north=north
    )


def render_scene(engine: HeadlessEngine, positions, output: str) -> None:
    """Write the engine's scene to a PNG framed on `positions`."""
    visualizer = SceneVisualizer(projection=fit_viewport(engine, positions))
    frame = visualizer.render(engine)
    if not cv2.imwrite(output, frame):
        raise ValueError(f"Could not write image to {output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="terrakit",
        description="terrakit - Spatial queries on the WGS84 globe",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Straight-line and surface distance (metres)
  terrakit distance 2.35,48.85 13.40,52.52
  terrakit distance 2.35,48.85 13.40,52.52 --surface --solver haversine

  # Polygon area (km² planar, or m² spherical-cap)
  terrakit area plaza.yaml
  terrakit area plaza.yaml --formula spherical-cap

  # Point in polygon
  terrakit contains 10.005,45.005 plaza.yaml

  # Buffer (metres) rendered to PNG
  terrakit buffer plaza.yaml 250 --output buffer.png

  # Polygon intersection
  terrakit intersects a.yaml b.yaml

  # Negative coordinates: end options with --
  terrakit distance -- -58.38,-34.60 -70.66,-33.45
"""
    )

    # Global arguments
    parser.add_argument(
        "--config",
        help="Toolkit config YAML (analysis section is used)"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for structured logs on stderr (default: WARNING)"
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    distance = subparsers.add_parser('distance', help='Distance between two positions (m)')
    distance.add_argument('start', help='lon,lat[,height]')
    distance.add_argument('end', help='lon,lat[,height]')
    distance.add_argument('--surface', action='store_true', help='Measure along the surface')
    distance.add_argument(
        '--solver', choices=['ellipsoid', 'haversine'],
        help='Surface solver (default: from config)'
    )

    area = subparsers.add_parser('area', help='Polygon area')
    area.add_argument('vertices', help='Vertex YAML file')
    area.add_argument(
        '--formula', choices=[FORMULA_PLANAR, FORMULA_SPHERICAL_CAP], default=FORMULA_PLANAR,
        help='planar (measurement tool) or spherical-cap (analysis) (default: planar)'
    )

    contains = subparsers.add_parser('contains', help='Test if a point lies inside a polygon')
    contains.add_argument('point', help='lon,lat[,height]')
    contains.add_argument('vertices', help='Vertex YAML file')

    buffer = subparsers.add_parser('buffer', help='Buffer a point, segment or polygon')
    buffer.add_argument('vertices', help='Vertex YAML file')
    buffer.add_argument('distance', type=float, help='Buffer distance in metres')
    buffer.add_argument('--output', help='Write the buffered scene to this PNG')

    intersects = subparsers.add_parser('intersects', help='Test if two polygons intersect')
    intersects.add_argument('vertices_a', help='First polygon YAML file')
    intersects.add_argument('vertices_b', help='Second polygon YAML file')

    return parser


def run(args: argparse.Namespace, logger: StructuredLogger) -> None:
    """Execute one parsed command, printing its result."""
    config = ToolkitConfig.from_yaml(args.config) if args.config else ToolkitConfig()
    analysis_config = config.analysis
    if getattr(args, 'solver', None):
        analysis_config = replace(analysis_config, geodesic_solver=args.solver)

    engine = HeadlessEngine()
    analysis = SpatialAnalysisService(
        engine,
        config=analysis_config,
        logger=logger,
    )

    if args.command == 'distance':
        start = parse_position(args.start)
        end = parse_position(args.end)
        metres = analysis.calculate_distance(start, end, include_surface_path=args.surface)
        print(f"{metres:.3f} m ({metres / KILOMETRES_TO_METRES:.3f} km)")

    elif args.command == 'area':
        vertices = load_vertices(args.vertices)
        if args.formula == FORMULA_PLANAR:
            square_km = polygon_area(vertices)
        else:
            square_km = analysis.calculate_area(vertices) / SQUARE_KILOMETRES_TO_SQUARE_METRES
        print(f"{square_km:.6f} km² ({square_km * SQUARE_KILOMETRES_TO_SQUARE_METRES:.1f} m²)")

    elif args.command == 'contains':
        point = parse_position(args.point)
        inside = analysis.is_point_in_polygon(point, load_vertices(args.vertices))
        print("inside" if inside else "outside")

    elif args.command == 'buffer':
        vertices = load_vertices(args.vertices)
        entity = analysis.get_analysis_entity(analysis.create_buffer(vertices, args.distance))
        print(f"{entity.kind.value}: {len(entity.ring)} vertices")
        for vertex in entity.ring:
            geo = engine.world_to_geographic(vertex)
            print(f"{geo.longitude:.8f},{geo.latitude:.8f},{geo.height:.3f}")
        if args.output:
            render_scene(engine, entity.ring, args.output)
            print(f"Image written to {args.output}")

    elif args.command == 'intersects':
        result = analysis.calculate_intersection(
            load_vertices(args.vertices_a), load_vertices(args.vertices_b)
        )
        print("intersects" if result.intersects else "disjoint")


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logger = create_logger("cli", logging.getLevelName(args.log_level.upper()))
    try:
        run(args, logger)
    except InvalidCoordinateError as e:
        logger.error(
            event=LogEvent.INVALID_COORDINATE,
            message=f"{args.command}: invalid coordinate",
            metadata={'command': args.command},
            exc_info=e
        )
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
