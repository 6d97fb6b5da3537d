"""
Shared fixtures: a headless engine whose viewport maps 1000 x 1000 pixels
onto the unit lon/lat box [0, 1] x [0, 1] (1 pixel = 0.001 degree).
"""

import logging

import pytest

from terrakit_engine import EquirectangularPicker, HeadlessEngine
from terrakit_draw import DrawSession, MeasureSession, SpatialAnalysisService
from terrakit_draw.logging import create_logger


@pytest.fixture
def picker():
    return EquirectangularPicker(width=1000, height=1000, west=0.0, south=0.0, east=1.0, north=1.0)


@pytest.fixture
def engine(picker):
    return HeadlessEngine(picker=picker)


@pytest.fixture
def quiet_logger():
    return create_logger("test", level=logging.ERROR)


@pytest.fixture
def draw_session(engine, quiet_logger):
    return DrawSession(engine, logger=quiet_logger)


@pytest.fixture
def measure(engine, draw_session, quiet_logger):
    return MeasureSession(engine, draw_session=draw_session, logger=quiet_logger)


@pytest.fixture
def analysis(engine, quiet_logger):
    return SpatialAnalysisService(engine, logger=quiet_logger)


@pytest.fixture
def click(engine, picker):
    """Left-click at a lon/lat position."""
    def _click(lon, lat):
        return engine.click(picker.to_screen(lon, lat))
    return _click


@pytest.fixture
def finish(engine, picker):
    """Right-click (finalize) at a lon/lat position."""
    def _finish(lon=0.5, lat=0.5):
        return engine.right_click(picker.to_screen(lon, lat))
    return _finish
