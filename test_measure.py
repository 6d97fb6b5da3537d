"""
Test Measure Session
====================

End-to-end distance and area measurement through pointer events.

Usage:
    pytest test_measure.py
"""

import numpy as np
import pytest

from terrakit_geometry import Cartesian3, geodesic_distance, is_point_in_polygon, polygon_area, to_geographic
from terrakit_engine import GeometryKind
from terrakit_draw import DrawState, MeasurementKind

PATH = [(0.1, 0.1), (0.2, 0.1), (0.2, 0.3)]
SQUARE = [(0.1, 0.1), (0.11, 0.1), (0.11, 0.11), (0.1, 0.11)]


def _draw(click, finish, positions):
    for lon, lat in positions:
        click(lon, lat)
    finish()


def test_distance_is_sum_of_haversine_legs(engine, measure, click, finish):
    completed = []
    measurement_id = measure.measure_distance(on_complete=completed.append)
    _draw(click, finish, PATH)

    expected_km = geodesic_distance(PATH[0], PATH[1]) + geodesic_distance(PATH[1], PATH[2])
    (result,) = measure.results

    assert measurement_id == "distance_1"
    assert completed == [result]
    assert result.id == "distance_1"
    assert result.kind == MeasurementKind.DISTANCE
    assert result.value == pytest.approx(expected_km * 1000.0, rel=1e-9)
    assert result.display_text == f"{expected_km:.2f} km"
    assert result.label_anchor == result.vertices[-1]


def test_distance_renders_path_and_label(engine, measure, click, finish):
    measure.measure_distance()
    _draw(click, finish, PATH)

    descriptions = list(engine.entities.values())
    assert sorted(d.kind.value for d in descriptions) == ["label", "polyline"]
    label = next(d for d in descriptions if d.kind == GeometryKind.LABEL)
    assert label.text == measure.get("distance_1").display_text


def test_area_of_small_square(engine, measure, click, finish):
    measure.measure_area()
    _draw(click, finish, SQUARE)

    result = measure.get("area_1")
    assert result.kind == MeasurementKind.AREA
    assert len(result.vertices) == 5
    assert result.vertices[0] == result.vertices[-1]
    assert result.value == pytest.approx(polygon_area(SQUARE) * 1e6, rel=1e-6)
    assert result.display_text.endswith(" km²")

    # label sits at the mean of the closed ring, on the surface
    mean = np.mean([vertex.as_array() for vertex in result.vertices], axis=0)
    expected = to_geographic(Cartesian3.from_array(mean))
    anchor = to_geographic(result.label_anchor)
    assert (anchor.longitude, anchor.latitude) == pytest.approx(
        (expected.longitude, expected.latitude), abs=1e-9
    )
    # first vertex counted twice pulls the anchor towards it
    assert (anchor.longitude, anchor.latitude) == pytest.approx((0.104, 0.104), abs=1e-5)
    assert is_point_in_polygon(result.label_anchor, SQUARE)
    assert to_geographic(result.label_anchor).height == pytest.approx(0.0, abs=1e-3)


def test_area_needs_three_vertices(engine, measure, click, finish):
    measure.measure_area()
    click(0.1, 0.1)
    click(0.11, 0.1)
    finish()

    assert measure.results == ()
    assert len(engine.notifications) == 1
    assert measure.draw_session.state == DrawState.ACTIVE

    click(0.11, 0.11)
    finish()
    assert [r.id for r in measure.results] == ["area_1"]


def test_measure_area_keeps_previous_results(measure, click, finish):
    measure.measure_area()
    _draw(click, finish, SQUARE)
    measure.measure_area()
    _draw(click, finish, [(0.3, 0.3), (0.32, 0.3), (0.31, 0.32)])

    assert [r.id for r in measure.results] == ["area_1", "area_2"]


def test_measure_distance_clears_everything_first(engine, measure, click, finish):
    measure.measure_area()
    _draw(click, finish, SQUARE)
    measure.measure_distance()
    _draw(click, finish, PATH)

    assert [r.id for r in measure.results] == ["distance_1"]
    assert len(engine.entities) == 2

    measure.measure_distance()
    _draw(click, finish, PATH)
    assert [r.id for r in measure.results] == ["distance_1"]

    measure.measure_area()
    _draw(click, finish, SQUARE)
    assert [r.id for r in measure.results] == ["distance_1", "area_2"]


def test_clear_one_result(engine, measure, click, finish):
    measure.measure_area()
    _draw(click, finish, SQUARE)
    measure.measure_area()
    _draw(click, finish, [(0.3, 0.3), (0.32, 0.3), (0.31, 0.32)])

    measure.clear("area_1")
    measure.clear("no_such_measurement")

    assert [r.id for r in measure.results] == ["area_2"]
    assert measure.get("area_1") is None
    assert len(engine.entities) == 2


def test_clear_all_cancels_and_resets_counter(engine, measure, click, finish):
    measure.measure_area()
    _draw(click, finish, SQUARE)
    measure.measure_area()
    click(0.5, 0.5)

    measure.clear_all()

    assert measure.results == ()
    assert measure.draw_session.state == DrawState.IDLE
    assert engine.entities == {}
    assert engine.active_handler_count == 0
    assert measure.measure_area() == "area_1"
