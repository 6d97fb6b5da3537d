"""
Test terrakit CLI
=================

Usage:
    pytest test_cli.py
"""

import json
import logging
import math

import pytest
import yaml

from terrakit_geometry import straight_line_distance
from terrakit_cli.cli import load_vertices, main, parse_position

EQUATOR_BOX = [[0.0, 0.0], [0.01, 0.0], [0.01, 0.01], [0.0, 0.01]]


@pytest.fixture
def box_file(tmp_path):
    path = tmp_path / "box.yaml"
    path.write_text(yaml.safe_dump(EQUATOR_BOX))
    return str(path)


def _first_number(text):
    return float(text.split()[0])


def test_parse_position():
    assert parse_position("10.5,45") == [10.5, 45.0]
    assert parse_position(" 10 , 45 , 120 ") == [10.0, 45.0, 120.0]
    with pytest.raises(ValueError):
        parse_position("10")
    with pytest.raises(ValueError):
        parse_position("east,north")


def test_load_vertices(box_file, tmp_path):
    assert load_vertices(box_file) == EQUATOR_BOX

    scalar = tmp_path / "scalar.yaml"
    scalar.write_text("42\n")
    with pytest.raises(ValueError):
        load_vertices(str(scalar))
    with pytest.raises(FileNotFoundError):
        load_vertices(str(tmp_path / "missing.yaml"))


def test_distance(capsys):
    main(["distance", "0,0", "1,0"])
    out = capsys.readouterr().out
    assert _first_number(out) == pytest.approx(straight_line_distance([0.0, 0.0], [1.0, 0.0]), abs=1e-3)


def test_surface_distance(capsys):
    main(["distance", "0,0", "1,0", "--surface"])
    ellipsoid = _first_number(capsys.readouterr().out)
    main(["distance", "0,0", "1,0", "--surface", "--solver", "haversine"])
    haversine = _first_number(capsys.readouterr().out)

    assert ellipsoid == pytest.approx(6378137.0 * math.pi / 180, abs=1e-3)
    assert haversine == pytest.approx(6371000.0 * math.pi / 180, abs=1e-3)


def test_area(capsys, box_file):
    main(["area", box_file])
    assert _first_number(capsys.readouterr().out) == pytest.approx(0.0001 * 111.32 ** 2, abs=1e-6)

    main(["area", box_file, "--formula", "spherical-cap"])
    assert _first_number(capsys.readouterr().out) > 0


def test_contains(capsys, box_file):
    main(["contains", "0.005,0.005", box_file])
    assert capsys.readouterr().out.strip() == "inside"
    main(["contains", "0.5,0.5", box_file])
    assert capsys.readouterr().out.strip() == "outside"


def test_intersects(capsys, box_file, tmp_path):
    far = tmp_path / "far.yaml"
    far.write_text(yaml.safe_dump([[1.0, 1.0], [1.01, 1.0], [1.01, 1.01]]))

    main(["intersects", box_file, box_file])
    assert capsys.readouterr().out.strip() == "intersects"
    main(["intersects", box_file, str(far)])
    assert capsys.readouterr().out.strip() == "disjoint"


def test_buffer_with_image(capsys, tmp_path):
    point = tmp_path / "point.yaml"
    point.write_text(yaml.safe_dump([[10.0, 45.0]]))
    image = tmp_path / "buffer.png"

    main(["buffer", str(point), "250", "--output", str(image)])
    lines = capsys.readouterr().out.splitlines()

    assert lines[0] == "circle_buffer: 64 vertices"
    assert len(lines) == 1 + 64 + 1
    assert image.exists() and image.stat().st_size > 0


@pytest.mark.parametrize("argv", [
    ["distance", "0,0", "nowhere"],
    ["area", "missing.yaml"],
    ["buffer", "missing.yaml", "10"],
    [],
])
def test_errors_exit_with_status_1(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 1


def test_error_message_on_stderr(capsys):
    with pytest.raises(SystemExit):
        main(["distance", "0,0", "200,0"])
    assert "Error:" in capsys.readouterr().err


def test_invalid_coordinate_is_logged(capsys, caplog):
    with caplog.at_level(logging.ERROR, logger="terrakit.cli"):
        with pytest.raises(SystemExit) as excinfo:
            main(["distance", "0,0", "200,0"])

    assert excinfo.value.code == 1
    (record,) = [r for r in caplog.records if r.name == "terrakit.cli"]
    entry = json.loads(record.getMessage())
    assert entry['event'] == "error.invalid_coordinate"
    assert entry['metadata'] == {'command': 'distance'}
    assert entry['exception']['type'] == "InvalidCoordinateError"
