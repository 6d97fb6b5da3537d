"""
HeadlessEngine - In-process reference engine

Bounded Context: A RenderingEngine without a GPU
Responsibilities:
  - Entity registry (integer handles -> geometry descriptions)
  - Pointer dispatch to live handlers, in creation order
  - Surface picking through a pluggable picker
  - WGS84 geographic <-> world conversion
  - Cursor state and notification log

Used by the CLI, the demo script and the test-suite to drive draw and
measure sessions exactly as a real globe would.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from terrakit_geometry import Cartesian3, Ellipsoid, GeographicPoint, get_ellipsoid
from terrakit_engine.events import PointerHandlerRegistry
from terrakit_engine.protocol import (
    GeometryDescription,
    GeometryHandle,
    PointerEvent,
    PointerEventKind,
    ScreenPoint,
)

logger = logging.getLogger(__name__)

Picker = Callable[[ScreenPoint], Optional[GeographicPoint]]


@dataclass(frozen=True)
class EquirectangularPicker:
    """
    Maps a pixel viewport linearly onto a lon/lat bounding box.

    Pixels outside the viewport miss (return None), like a ray that hits
    no surface.

    Attributes:
        width: Viewport width in pixels
        height: Viewport height in pixels
        west, south, east, north: Visible bounds in degrees
        surface_height: Height of the picked surface in metres
    """
    width: int = 360
    height: int = 180
    west: float = -180.0
    south: float = -90.0
    east: float = 180.0
    north: float = 90.0
    surface_height: float = 0.0

    def __post_init__(self):
        """Validate viewport."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"viewport must have positive dimensions, got {(self.width, self.height)}"
            )
        if self.west >= self.east or self.south >= self.north:
            raise ValueError("bounds must satisfy west < east and south < north")

    def __call__(self, screen: ScreenPoint) -> Optional[GeographicPoint]:
        if not (0 <= screen.x <= self.width and 0 <= screen.y <= self.height):
            return None
        longitude = self.west + screen.x / self.width * (self.east - self.west)
        latitude = self.north - screen.y / self.height * (self.north - self.south)
        return GeographicPoint(longitude, latitude, self.surface_height)

    def to_screen(self, longitude: float, latitude: float) -> ScreenPoint:
        """Inverse mapping (degrees -> pixels)."""
        x = (longitude - self.west) / (self.east - self.west) * self.width
        y = (self.north - latitude) / (self.north - self.south) * self.height
        return ScreenPoint(x, y)


class HeadlessEngine:
    """
    Reference implementation of the RenderingEngine protocol.

    Example:
        picker = EquirectangularPicker()
        engine = HeadlessEngine(picker=picker)
        engine.click(picker.to_screen(10.0, 45.0))
    """

    def __init__(
        self,
        picker: Picker | None = None,
        ellipsoid: Ellipsoid | None = None,
        cursor: str = "default",
    ):
        self.picker: Picker = picker or EquirectangularPicker()
        self.ellipsoid = ellipsoid or get_ellipsoid()
        self._cursor = cursor
        self._entities: Dict[GeometryHandle, GeometryDescription] = {}
        self._next_handle: GeometryHandle = 1
        self._handlers: List[PointerHandlerRegistry] = []
        self.notifications: List[str] = []

    # ===== Picking & conversion =====

    def pick_world_position(self, screen: ScreenPoint) -> Optional[Cartesian3]:
        picked = self.picker(screen)
        if picked is None:
            return None
        return self.geographic_to_world(picked.longitude, picked.latitude, picked.height)

    def geographic_to_world(self, longitude: float, latitude: float, height: float = 0.0) -> Cartesian3:
        return Cartesian3(*self.ellipsoid.geographic_to_world(longitude, latitude, height))

    def world_to_geographic(self, point: Cartesian3) -> GeographicPoint:
        return GeographicPoint(*self.ellipsoid.world_to_geographic(point.x, point.y, point.z))

    # ===== Entity registry =====

    def add_renderable_geometry(self, description: GeometryDescription) -> GeometryHandle:
        handle = self._next_handle
        self._next_handle += 1
        self._entities[handle] = description
        logger.debug(f"Entity {handle} added ({description.kind.value})")
        return handle

    def remove_renderable_geometry(self, handle: GeometryHandle) -> None:
        if self._entities.pop(handle, None) is not None:
            logger.debug(f"Entity {handle} removed")

    def get_entity(self, handle: GeometryHandle) -> Optional[GeometryDescription]:
        return self._entities.get(handle)

    @property
    def entities(self) -> Dict[GeometryHandle, GeometryDescription]:
        """Snapshot of live entities."""
        return dict(self._entities)

    # ===== Pointer dispatch =====

    def create_pointer_handler(self) -> PointerHandlerRegistry:
        handler = PointerHandlerRegistry(on_release=self._release_handler)
        self._handlers.append(handler)
        return handler

    def _release_handler(self, handler: PointerHandlerRegistry) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    @property
    def active_handler_count(self) -> int:
        return len(self._handlers)

    def dispatch(self, event: PointerEvent) -> int:
        """
        Deliver an event to every live handler, in creation order.

        Handlers created while dispatching do not see the current event.

        Returns:
            Number of callbacks that ran
        """
        delivered = 0
        for handler in list(self._handlers):
            if handler.dispatch(event):
                delivered += 1
        return delivered

    def click(self, screen: ScreenPoint) -> int:
        return self.dispatch(PointerEvent(PointerEventKind.LEFT_CLICK, screen))

    def move(self, screen: ScreenPoint) -> int:
        return self.dispatch(PointerEvent(PointerEventKind.MOUSE_MOVE, screen))

    def right_click(self, screen: ScreenPoint) -> int:
        return self.dispatch(PointerEvent(PointerEventKind.RIGHT_CLICK, screen))

    def double_click(self, screen: ScreenPoint) -> int:
        return self.dispatch(PointerEvent(PointerEventKind.LEFT_DOUBLE_CLICK, screen))

    # ===== Cosmetics =====

    def get_cursor(self) -> str:
        return self._cursor

    def set_cursor(self, style: str) -> None:
        self._cursor = style

    def notify(self, message: str) -> None:
        logger.warning(message)
        self.notifications.append(message)

    def __repr__(self) -> str:
        return (
            f"HeadlessEngine(entities={len(self._entities)}, "
            f"handlers={len(self._handlers)})"
        )
