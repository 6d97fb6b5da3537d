"""
Test GlobeToolkit and Configuration
===================================

Usage:
    pytest test_toolkit.py
"""

import logging

import pytest

from terrakit_draw import (
    AnalysisConfig,
    DrawConfig,
    DrawState,
    GlobeToolkit,
    MeasureConfig,
    ToolkitConfig,
)


# ========== Configuration ==========

def test_defaults():
    config = ToolkitConfig()

    assert config.draw.drawing_cursor == "crosshair"
    assert config.draw.point_height_offset == 50.0
    assert config.measure.label_decimals == 2
    assert config.analysis.circle_segments == 64
    assert config.analysis.geodesic_solver == "ellipsoid"
    assert config.log_level_value == logging.INFO


@pytest.mark.parametrize("factory", [
    lambda: DrawConfig(drawing_cursor=""),
    lambda: DrawConfig(preview_line_width=0.0),
    lambda: DrawConfig(polygon_fill_opacity=1.5),
    lambda: MeasureConfig(label_decimals=11),
    lambda: AnalysisConfig(circle_segments=2),
    lambda: AnalysisConfig(geodesic_solver="vincenty"),
    lambda: ToolkitConfig(log_level="LOUD"),
])
def test_invalid_values_fail_fast(factory):
    with pytest.raises(ValueError):
        factory()


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError):
        ToolkitConfig.from_dict({'draw': {'cursor': 'pointer'}})


def test_from_yaml(tmp_path):
    path = tmp_path / "toolkit.yaml"
    path.write_text(
        "log_level: DEBUG\n"
        "measure:\n"
        "  label_decimals: 3\n"
        "analysis:\n"
        "  geodesic_solver: haversine\n"
    )

    config = ToolkitConfig.from_yaml(path)

    assert config.log_level_value == logging.DEBUG
    assert config.measure.label_decimals == 3
    assert config.analysis.geodesic_solver == "haversine"
    assert config.draw == DrawConfig()


def test_from_yaml_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        ToolkitConfig.from_yaml(tmp_path / "missing.yaml")

    broken = tmp_path / "broken.yaml"
    broken.write_text("draw: [unclosed\n")
    with pytest.raises(ValueError):
        ToolkitConfig.from_yaml(broken)


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert ToolkitConfig.from_yaml(path) == ToolkitConfig()


# ========== Toolkit ==========

def test_toolkit_wires_tools_to_one_engine(engine):
    toolkit = GlobeToolkit(engine, config=ToolkitConfig(log_level="ERROR"))

    assert toolkit.measure.draw_session is not toolkit.draw
    assert toolkit.measure.draw_session.engine is engine
    assert toolkit.draw.engine is engine
    assert toolkit.analysis.engine is engine


def test_toolkit_config_reaches_tools(engine):
    config = ToolkitConfig.from_dict({
        'log_level': 'ERROR',
        'draw': {'drawing_cursor': 'cell'},
        'measure': {'label_decimals': 4},
    })
    toolkit = GlobeToolkit(engine, config=config)

    toolkit.draw.draw("polyline")
    assert engine.get_cursor() == "cell"

    toolkit.draw.append_vertex([0.1, 0.1])
    toolkit.draw.append_vertex([0.2, 0.1])
    toolkit.draw.cancel()

    measurement_id = toolkit.measure.measure_distance()
    assert engine.get_cursor() == "cell"
    capture = toolkit.measure.draw_session
    capture.append_vertex([0.1, 0.1])
    capture.append_vertex([0.2, 0.1])
    capture.finalize()
    text = toolkit.measure.get(measurement_id).display_text
    assert len(text.split()[0].split(".")[1]) == 4


def test_toolkit_from_yaml(engine, tmp_path):
    path = tmp_path / "toolkit.yaml"
    path.write_text("log_level: ERROR\nanalysis:\n  circle_segments: 8\n")

    toolkit = GlobeToolkit.from_yaml(engine, path)
    entity_id = toolkit.analysis.create_buffer([0.5, 0.5], 100.0)
    assert len(toolkit.analysis.get_analysis_entity(entity_id).ring) == 8


def test_toolkit_clear_all(engine, click, finish):
    toolkit = GlobeToolkit(engine, config=ToolkitConfig(log_level="ERROR"))

    toolkit.analysis.create_buffer([0.5, 0.5], 100.0)
    toolkit.measure.measure_area()
    for lon, lat in [(0.1, 0.1), (0.2, 0.1), (0.2, 0.2)]:
        click(lon, lat)
    finish()
    toolkit.draw.draw("polyline")
    click(0.3, 0.3)

    toolkit.clear_all()

    assert engine.entities == {}
    assert engine.active_handler_count == 0
    assert toolkit.draw.state == DrawState.IDLE
    assert toolkit.measure.results == ()
    assert toolkit.analysis.get_all_analysis_entities() == ()


def test_drawing_and_measuring_do_not_interfere(engine, click, finish):
    toolkit = GlobeToolkit(engine, config=ToolkitConfig(log_level="ERROR"))

    # 1. A finished drawing survives a new measurement
    toolkit.draw.draw("polyline")
    click(0.1, 0.1)
    click(0.2, 0.1)
    finish()
    drawing = toolkit.draw.vertices
    toolkit.measure.measure_area()

    assert toolkit.draw.state == DrawState.FINALIZED
    assert toolkit.draw.vertices == drawing
    assert toolkit.measure.draw_session.state == DrawState.ACTIVE

    # 2. Starting a drawing does not cancel a measurement in progress
    completed = []
    toolkit.measure.measure_distance(on_complete=completed.append)
    click(0.3, 0.3)
    toolkit.draw.draw("point")
    click(0.4, 0.3)
    finish()

    assert [r.id for r in completed] == ["distance_1"]
    assert len(completed[0].vertices) == 2
    assert toolkit.draw.state == DrawState.FINALIZED
    assert len(toolkit.draw.vertices) == 1
    assert engine.active_handler_count == 0
    assert engine.get_cursor() == "default"
