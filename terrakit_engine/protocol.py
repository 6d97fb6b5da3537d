"""
Engine Capability Set
=====================

Bounded Context: What the tools need from a 3D globe rendering engine.

The engine itself (scene graph, tiles, terrain, picking) is external. This
module pins down the capabilities the drawing and analysis tools consume:

- surface picking (screen -> world)
- a renderable-entity registry
- pointer-event dispatch in screen space
- geographic <-> world conversion
- cosmetic cursor and non-blocking notifications
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional, Protocol, Set, Tuple, Union

import supervision as sv

from terrakit_geometry import Cartesian3, GeographicPoint


class PointerEventKind(str, Enum):
    """Screen-space pointer events the tools bind to."""
    LEFT_CLICK = "left_click"
    LEFT_DOUBLE_CLICK = "left_double_click"
    RIGHT_CLICK = "right_click"
    MOUSE_MOVE = "mouse_move"


@dataclass(frozen=True)
class ScreenPoint:
    """Pixel position, origin top-left."""
    x: float
    y: float


@dataclass(frozen=True)
class PointerEvent:
    """A pointer event at a screen position."""
    kind: PointerEventKind
    position: ScreenPoint


PointerCallback = Callable[[PointerEvent], None]


class GeometryKind(str, Enum):
    """Renderable geometry primitives."""
    POINT = "point"
    POLYLINE = "polyline"
    POLYGON = "polygon"
    LABEL = "label"


@dataclass(frozen=True)
class GeometryStyle:
    """
    Immutable rendering style.

    Attributes:
        color: Line / point / text colour
        fill_color: Polygon fill colour
        fill_opacity: Polygon fill opacity (0-1)
        outline: Draw polygon outline
        outline_color: Polygon outline colour
        width: Line width or point size in pixels
        dashed: Dashed polyline material
        clamp_to_ground: Drape geometry on terrain
    """
    color: sv.Color = field(default_factory=lambda: sv.Color(r=255, g=255, b=0))
    fill_color: sv.Color = field(default_factory=lambda: sv.Color(r=255, g=0, b=0))
    fill_opacity: float = 0.4
    outline: bool = True
    outline_color: sv.Color = field(default_factory=lambda: sv.Color(r=255, g=255, b=0))
    width: float = 3.0
    dashed: bool = False
    clamp_to_ground: bool = True

    def __post_init__(self):
        """Validate style."""
        if not 0.0 <= self.fill_opacity <= 1.0:
            raise ValueError(f"fill_opacity must be in [0.0, 1.0], got {self.fill_opacity}")
        if self.width <= 0:
            raise ValueError(f"width must be > 0, got {self.width}")

    def merged(self, **overrides) -> "GeometryStyle":
        """Return a copy with explicit field overrides."""
        return replace(self, **overrides)


PositionsProvider = Callable[[], Tuple[Cartesian3, ...]]


@dataclass(frozen=True)
class GeometryDescription:
    """
    What to render.

    `positions` is either a fixed tuple or a provider the engine calls on
    every render (a live, continuously re-evaluated view).
    """
    kind: GeometryKind
    positions: Union[Tuple[Cartesian3, ...], PositionsProvider]
    style: GeometryStyle = field(default_factory=GeometryStyle)
    text: Optional[str] = None

    @property
    def is_live(self) -> bool:
        return callable(self.positions)

    def resolve(self) -> Tuple[Cartesian3, ...]:
        """Evaluate positions now."""
        if callable(self.positions):
            return tuple(self.positions())
        return tuple(self.positions)


GeometryHandle = int


class PointerHandler(Protocol):
    """A set of pointer bindings that can be torn down together."""

    def register(self, kind: PointerEventKind, callback: PointerCallback) -> None:
        ...

    def unregister_all(self) -> None:
        ...

    @property
    def bound_kinds(self) -> Set[PointerEventKind]:
        ...


class RenderingEngine(Protocol):
    """Protocol for the external globe engine (interface)."""

    def pick_world_position(self, screen: ScreenPoint) -> Optional[Cartesian3]:
        """Project a screen point onto rendered surfaces; None on a miss."""
        ...

    def add_renderable_geometry(self, description: GeometryDescription) -> GeometryHandle:
        ...

    def remove_renderable_geometry(self, handle: GeometryHandle) -> None:
        ...

    def create_pointer_handler(self) -> PointerHandler:
        ...

    def geographic_to_world(self, longitude: float, latitude: float, height: float = 0.0) -> Cartesian3:
        ...

    def world_to_geographic(self, point: Cartesian3) -> GeographicPoint:
        ...

    def get_cursor(self) -> str:
        ...

    def set_cursor(self, style: str) -> None:
        ...

    def notify(self, message: str) -> None:
        """Show a non-blocking user-facing warning."""
        ...

