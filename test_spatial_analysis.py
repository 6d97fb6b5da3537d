"""
Test Spatial Analysis Service
=============================

Queries, buffer creation and the analysis-entity registry.

Usage:
    pytest test_spatial_analysis.py
"""

import math
import uuid

import pytest
import supervision as sv

from terrakit_geometry import (
    InsufficientVerticesError,
    geodesic_distance,
    spherical_cap_area,
    surface_distance,
)
from terrakit_engine import GeometryKind
from terrakit_draw import AnalysisConfig, AnalysisKind, SpatialAnalysisService

BOX = [[10.0, 45.0], [10.01, 45.0], [10.01, 45.01], [10.0, 45.01]]


def test_straight_and_surface_distance(analysis):
    assert analysis.calculate_distance([10.0, 45.0, 0.0], [10.0, 45.0, 100.0]) == pytest.approx(100.0, abs=1e-6)
    assert analysis.calculate_distance(
        [0.0, 0.0], [1.0, 0.0], include_surface_path=True
    ) == pytest.approx(6378137.0 * math.pi / 180, rel=1e-9)


def test_haversine_solver_from_config(engine, quiet_logger):
    analysis = SpatialAnalysisService(
        engine, config=AnalysisConfig(geodesic_solver="haversine"), logger=quiet_logger
    )
    a, b = [2.35, 48.85], [13.40, 52.52]
    assert analysis.calculate_distance(a, b, include_surface_path=True) == pytest.approx(
        geodesic_distance(a, b) * 1000.0
    )

    # antipodal pair
    a, b = [-127.37498272316023, -40.006511974130035], [52.62501727683977, 40.006511974130035]
    assert analysis.calculate_distance(a, b, include_surface_path=True) == pytest.approx(
        math.pi * 6371000.0, rel=1e-6
    )


def test_area_uses_spherical_cap_formula(analysis):
    assert analysis.calculate_area(BOX) == spherical_cap_area(BOX)


def test_pass_through_queries(analysis):
    assert analysis.is_point_in_polygon([10.005, 45.005], BOX)
    assert analysis.calculate_point_to_polygon_distance([10.005, 45.005], BOX) == 0.0
    assert analysis.calculate_point_to_line_distance([10.0, 45.0], BOX[:2]) == pytest.approx(0.0, abs=1e-6)


def test_point_buffer_is_a_circle(engine, analysis):
    center = [10.0, 45.0]
    entity_id = analysis.create_buffer(center, 500.0)

    uuid.UUID(entity_id)
    entity = analysis.get_analysis_entity(entity_id)
    assert entity.kind == AnalysisKind.CIRCLE_BUFFER
    assert len(entity.ring) == 64
    for vertex in entity.ring:
        assert surface_distance(center, vertex) == pytest.approx(500.0, rel=0.01)

    rendered = engine.get_entity(entity.handle)
    assert rendered.kind == GeometryKind.POLYGON
    assert rendered.positions == entity.ring


def test_wrapped_point_buffer_is_a_circle(analysis):
    entity_id = analysis.create_buffer([[10.0, 45.0]], 500.0)
    assert analysis.get_analysis_entity(entity_id).kind == AnalysisKind.CIRCLE_BUFFER


def test_segment_and_polygon_buffers(analysis):
    segment = analysis.get_analysis_entity(analysis.create_buffer(BOX[:2], 50.0))
    polygon = analysis.get_analysis_entity(analysis.create_buffer(BOX, 50.0))

    assert segment.kind == AnalysisKind.SEGMENT_BUFFER
    assert len(segment.ring) == 4
    assert polygon.kind == AnalysisKind.POLYGON_BUFFER
    assert len(polygon.ring) == 4


def test_circle_segments_from_config(engine, quiet_logger):
    analysis = SpatialAnalysisService(
        engine, config=AnalysisConfig(circle_segments=16), logger=quiet_logger
    )
    entity_id = analysis.create_buffer([10.0, 45.0], 100.0)
    assert len(analysis.get_analysis_entity(entity_id).ring) == 16


def test_buffer_default_style(analysis):
    style = analysis.get_analysis_entity(analysis.create_buffer([10.0, 45.0], 100.0)).style

    assert style.fill_color == sv.Color(r=0, g=0, b=255)
    assert style.fill_opacity == 0.5
    assert style.outline
    assert style.outline_color == sv.Color(r=255, g=255, b=255)
    assert style.width == 2.0


@pytest.mark.parametrize("style", [{'no_such_field': 1}, {'fill_opacity': 2.0}])
def test_buffer_with_invalid_style_is_rejected(engine, analysis, style):
    with pytest.raises(ValueError):
        analysis.create_buffer([10.0, 45.0], 100.0, style=style)

    assert analysis.get_all_analysis_entities() == ()
    assert engine.entities == {}


def test_buffer_style_override_keeps_defaults(analysis):
    entity_id = analysis.create_buffer(
        [10.0, 45.0], 100.0, style={'fill_opacity': 0.2, 'fill_color': sv.Color(r=0, g=255, b=0)}
    )
    style = analysis.get_analysis_entity(entity_id).style

    assert style.fill_opacity == 0.2
    assert style.fill_color == sv.Color(r=0, g=255, b=0)
    assert style.outline_color == sv.Color(r=255, g=255, b=255)
    assert style.width == 2.0


def test_buffer_of_nothing_is_rejected(engine, analysis):
    with pytest.raises(InsufficientVerticesError):
        analysis.create_buffer([], 100.0)
    assert analysis.get_all_analysis_entities() == ()
    assert engine.entities == {}


def test_intersection_queries(analysis):
    other = [[10.005, 45.005], [10.02, 45.005], [10.02, 45.02], [10.005, 45.02]]
    far = [[11.0, 46.0], [11.01, 46.0], [11.01, 46.01]]

    assert analysis.do_polygons_intersect(BOX, other)
    assert not analysis.do_polygons_intersect(BOX, far)

    result = analysis.calculate_intersection(BOX, other)
    assert result.intersects
    assert result.region is None


def test_entity_registry(engine, analysis):
    first = analysis.create_buffer([10.0, 45.0], 100.0)
    second = analysis.create_buffer(BOX, 100.0)

    assert [e.entity_id for e in analysis.get_all_analysis_entities()] == [first, second]
    assert len(engine.entities) == 2

    # 1. Remove one
    handle = analysis.get_analysis_entity(first).handle
    assert analysis.remove_analysis_entity(first)
    assert not analysis.remove_analysis_entity(first)
    assert analysis.get_analysis_entity(first) is None
    assert engine.get_entity(handle) is None

    # 2. Clear the rest
    analysis.clear_all_analysis_entities()
    assert analysis.get_all_analysis_entities() == ()
    assert engine.entities == {}
