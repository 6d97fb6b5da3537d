"""
Draw Session Module
===================

Bounded Context: Interactive vertex capture for one shape at a time.

Design:
- Explicit finite-state object: IDLE -> ACTIVE -> FINALIZED -> IDLE
- Pointer bindings are created on entering ACTIVE and torn down on leaving it
- Every activation carries a generation number; callbacks of a superseded
  activation are ignored even if an engine delivers them late
- Vertices are owned by the session; callers only ever see tuples

Failure semantics:
- Pick miss: silently dropped (debug log)
- Finalize below the shape minimum: InsufficientVerticesError to direct
  callers; on the pointer path a warning is logged and shown, and the
  session stays ACTIVE
"""

from enum import Enum
from typing import Callable, List, Optional, Tuple

from terrakit_geometry import (
    Cartesian3,
    InsufficientVerticesError,
    InvalidCoordinateError,
    PositionLike,
    TerrakitError,
    to_cartesian,
)
from terrakit_engine.protocol import (
    GeometryDescription,
    GeometryHandle,
    GeometryKind,
    GeometryStyle,
    PointerEvent,
    PointerEventKind,
    PointerHandler,
    RenderingEngine,
)
from terrakit_draw.config import DrawConfig
from terrakit_draw.logging import LogEvent, StructuredLogger, create_logger
from terrakit_draw.preview import LivePreview


class DrawShape(str, Enum):
    """Shape being drawn; fixes the minimum vertex count."""
    POINT = "point"
    POLYLINE = "polyline"
    POLYGON = "polygon"

    @property
    def min_vertices(self) -> int:
        return {DrawShape.POINT: 1, DrawShape.POLYLINE: 2, DrawShape.POLYGON: 3}[self]


class DrawState(str, Enum):
    """Draw session lifecycle state."""
    IDLE = "idle"
    ACTIVE = "active"
    FINALIZED = "finalized"


class DrawSessionError(TerrakitError, RuntimeError):
    """Raised when an operation is not valid in the session's current state."""
    pass


Vertices = Tuple[Cartesian3, ...]
FinalizeCallback = Callable[[Vertices, DrawShape], None]


class DrawSession:
    """
    Accumulates vertices from pointer events for one active shape.

    State:
        IDLE: nothing bound, no vertices
        ACTIVE(shape, vertices, pending_vertex): pointer bound, preview live
        FINALIZED: vertices frozen, final geometry rendered

    Usage:
        session = DrawSession(engine)
        session.draw(DrawShape.POLYGON, on_finalize=lambda vertices, shape: ...)

        # pointer events arrive from the engine...
        # or drive it programmatically:
        session.append_vertex([0.0, 0.0])
        session.append_vertex([0.0, 1.0])
        session.append_vertex([1.0, 1.0])
        ring = session.finalize()   # closed ring, 4 vertices
    """

    def __init__(
        self,
        engine: RenderingEngine,
        config: DrawConfig | None = None,
        logger: StructuredLogger | None = None,
    ):
        self.engine = engine
        self.config = config or DrawConfig()
        self.logger = logger or create_logger("draw")

        self._state = DrawState.IDLE
        self._generation = 0
        self._shape: Optional[DrawShape] = None
        self._on_finalize: Optional[FinalizeCallback] = None
        self._vertices: List[Cartesian3] = []
        self._pending: Optional[Cartesian3] = None
        self._preview: Optional[LivePreview] = None

        self._pointer: Optional[PointerHandler] = None
        self._saved_cursor: Optional[str] = None
        self._preview_handles: List[GeometryHandle] = []
        self._preview_layout: Optional[str] = None
        self._result_handle: Optional[GeometryHandle] = None

    # ===== Read access =====

    @property
    def state(self) -> DrawState:
        return self._state

    @property
    def shape(self) -> Optional[DrawShape]:
        return self._shape

    @property
    def vertices(self) -> Vertices:
        """Snapshot of committed (or finalized) vertices."""
        return tuple(self._vertices)

    @property
    def pending_vertex(self) -> Optional[Cartesian3]:
        return self._pending

    @property
    def preview(self) -> Optional[LivePreview]:
        return self._preview

    @property
    def result_handle(self) -> Optional[GeometryHandle]:
        """Engine handle of the finalized geometry still owned by the session."""
        return self._result_handle

    @property
    def is_active(self) -> bool:
        return self._state == DrawState.ACTIVE

    # ===== Transitions =====

    def draw(self, shape: DrawShape, on_finalize: FinalizeCallback | None = None) -> None:
        """
        Start drawing a new shape, discarding any previous session.

        Args:
            shape: Shape to capture
            on_finalize: Called with (vertices, shape) once the shape completes
        """
        shape = DrawShape(shape)
        self.clear_all()

        self._generation += 1
        self._shape = shape
        self._on_finalize = on_finalize
        self._vertices = []
        self._pending = None
        self._preview = LivePreview(lambda: tuple(self._vertices), lambda: self._pending)
        self._enter_active()

        self.logger.info(
            event=LogEvent.DRAW_STARTED,
            message=f"{shape.value.capitalize()} draw started",
            metadata={'shape': shape.value, 'generation': self._generation}
        )

    def append_vertex(self, position: PositionLike) -> Cartesian3:
        """
        Commit a vertex to the active shape.

        Raises:
            DrawSessionError: If no shape is being drawn
            InvalidCoordinateError: If the position is malformed
        """
        self._require_active("append_vertex")
        vertex = to_cartesian(position)
        self._vertices.append(vertex)
        self._refresh_preview(vertex)

        self.logger.info(
            event=LogEvent.DRAW_VERTEX_ADDED,
            message="Vertex committed",
            metadata={'shape': self._shape.value, 'vertex_count': len(self._vertices)}
        )
        return vertex

    def update_preview(self, position: PositionLike | None) -> None:
        """Move the pending preview vertex; committed vertices are untouched."""
        self._require_active("update_preview")
        self._pending = None if position is None else to_cartesian(position)

    def finalize(self) -> Vertices:
        """
        Complete the active shape.

        Polygons are closed by appending their first vertex.

        Returns:
            Frozen vertex tuple

        Raises:
            DrawSessionError: If no shape is being drawn
            InsufficientVerticesError: If below the shape minimum (session
                stays ACTIVE)
        """
        self._require_active("finalize")
        shape = self._shape
        if len(self._vertices) < shape.min_vertices:
            raise InsufficientVerticesError(
                shape.min_vertices, len(self._vertices), f"{shape.value} finalize"
            )

        vertices = tuple(self._vertices)
        if shape == DrawShape.POLYGON:
            vertices = vertices + (vertices[0],)

        on_finalize = self._on_finalize
        self._exit_active()
        self._vertices = list(vertices)
        self._result_handle = self.engine.add_renderable_geometry(
            self._final_description(shape, vertices)
        )
        self._state = DrawState.FINALIZED

        self.logger.info(
            event=LogEvent.DRAW_FINALIZED,
            message=f"{shape.value.capitalize()} finalized",
            metadata={'shape': shape.value, 'vertex_count': len(vertices)}
        )

        if on_finalize is not None:
            on_finalize(vertices, shape)
        return vertices

    def cancel(self) -> None:
        """Discard the session from any state and return to IDLE."""
        previous = self._state
        if previous == DrawState.ACTIVE:
            self._exit_active()
        if self._result_handle is not None:
            self.engine.remove_renderable_geometry(self._result_handle)
            self._result_handle = None

        self._state = DrawState.IDLE
        self._shape = None
        self._on_finalize = None
        self._vertices = []
        self._pending = None
        self._preview = None

        if previous != DrawState.IDLE:
            self.logger.info(
                event=LogEvent.DRAW_CANCELLED,
                message="Draw session discarded",
                metadata={'previous_state': previous.value}
            )

    def clear_all(self) -> None:
        """Unbind, discard vertices and rendered geometry, return to IDLE."""
        self.cancel()

    def detach_result(self) -> Optional[GeometryHandle]:
        """
        Hand the finalized geometry over to the caller.

        After this the session no longer removes it on reset.
        """
        handle = self._result_handle
        self._result_handle = None
        return handle

    # ===== State entry / exit actions =====

    def _enter_active(self) -> None:
        self._state = DrawState.ACTIVE
        generation = self._generation

        self._pointer = self.engine.create_pointer_handler()
        self._pointer.register(PointerEventKind.LEFT_CLICK, self._guard(generation, self._on_click))
        self._pointer.register(PointerEventKind.MOUSE_MOVE, self._guard(generation, self._on_move))
        self._pointer.register(PointerEventKind.RIGHT_CLICK, self._guard(generation, self._on_finish))
        self._pointer.register(PointerEventKind.LEFT_DOUBLE_CLICK, self._guard(generation, self._on_finish))

        # only the session that set the drawing cursor restores it
        current = self.engine.get_cursor()
        if current != self.config.drawing_cursor:
            self._saved_cursor = current
            self.engine.set_cursor(self.config.drawing_cursor)

    def _exit_active(self) -> None:
        if self._pointer is not None:
            self._pointer.unregister_all()
            self._pointer = None
        if self._saved_cursor is not None:
            self.engine.set_cursor(self._saved_cursor)
            self._saved_cursor = None
        for handle in self._preview_handles:
            self.engine.remove_renderable_geometry(handle)
        self._preview_handles = []
        self._preview_layout = None
        self._pending = None
        # bump so stray callbacks of this activation become no-ops
        self._generation += 1

    def _guard(self, generation: int, callback: Callable[[PointerEvent], None]) -> Callable[[PointerEvent], None]:
        def guarded(event: PointerEvent) -> None:
            if generation == self._generation and self._state == DrawState.ACTIVE:
                callback(event)
        return guarded

    def _require_active(self, operation: str) -> None:
        if self._state != DrawState.ACTIVE:
            raise DrawSessionError(
                f"{operation} requires an active draw session (state: {self._state.value})"
            )

    # ===== Pointer callbacks =====

    def _pick(self, event: PointerEvent) -> Optional[Cartesian3]:
        picked = self.engine.pick_world_position(event.position)
        if picked is None:
            self.logger.debug(
                event=LogEvent.DRAW_PICK_MISSED,
                message="Pick missed, event dropped",
                metadata={'kind': event.kind.value, 'x': event.position.x, 'y': event.position.y}
            )
        return picked

    def _on_click(self, event: PointerEvent) -> None:
        picked = self._pick(event)
        if picked is None:
            return
        try:
            self.append_vertex(picked)
        except InvalidCoordinateError as e:
            self.logger.error(
                event=LogEvent.INVALID_COORDINATE,
                message="Picked position rejected, event dropped",
                metadata={'x': event.position.x, 'y': event.position.y},
                exc_info=e
            )

    def _on_move(self, event: PointerEvent) -> None:
        picked = self._pick(event)
        if picked is not None:
            self._pending = picked

    def _on_finish(self, event: PointerEvent) -> None:
        if self._pick(event) is None:
            return
        try:
            self.finalize()
        except InsufficientVerticesError as e:
            message = self.config.warning_message.format(
                required=e.required, shape=self._shape.value
            )
            self.logger.warning(
                event=LogEvent.DRAW_FINALIZE_REJECTED,
                message=message,
                metadata={'shape': self._shape.value, 'vertex_count': e.actual}
            )
            self.engine.notify(message)

    # ===== Rendering =====

    def _line_style(self) -> GeometryStyle:
        return GeometryStyle(width=self.config.preview_line_width, dashed=True)

    def _polygon_style(self) -> GeometryStyle:
        return GeometryStyle(
            width=self.config.preview_line_width,
            fill_opacity=self.config.polygon_fill_opacity,
            dashed=True,
        )

    def _point_style(self) -> GeometryStyle:
        return GeometryStyle(width=10.0, clamp_to_ground=False)

    def _lifted(self, vertex: Cartesian3) -> Cartesian3:
        geo = self.engine.world_to_geographic(vertex)
        return self.engine.geographic_to_world(
            geo.longitude, geo.latitude, geo.height + self.config.point_height_offset
        )

    def _refresh_preview(self, vertex: Cartesian3) -> None:
        """Keep preview entities matching the composition rule for the vertex count."""
        if self._shape == DrawShape.POINT:
            self._preview_handles.append(self.engine.add_renderable_geometry(
                GeometryDescription(GeometryKind.POINT, (self._lifted(vertex),), self._point_style())
            ))
            return

        layout = "polygon" if self._shape == DrawShape.POLYGON and len(self._vertices) >= 2 else "line"
        if layout == self._preview_layout:
            return

        for handle in self._preview_handles:
            self.engine.remove_renderable_geometry(handle)
        self._preview_handles = []
        self._preview_layout = layout

        preview = self._preview
        if layout == "line":
            self._preview_handles.append(self.engine.add_renderable_geometry(
                GeometryDescription(GeometryKind.POLYLINE, preview.positions, self._line_style())
            ))
        else:
            self._preview_handles.append(self.engine.add_renderable_geometry(
                GeometryDescription(GeometryKind.POLYGON, preview.positions, self._polygon_style().merged(outline=False))
            ))
            self._preview_handles.append(self.engine.add_renderable_geometry(
                GeometryDescription(GeometryKind.POLYLINE, preview.outline, self._line_style())
            ))

    def _final_description(self, shape: DrawShape, vertices: Vertices) -> GeometryDescription:
        if shape == DrawShape.POINT:
            return GeometryDescription(
                GeometryKind.POINT, tuple(self._lifted(v) for v in vertices), self._point_style()
            )
        if shape == DrawShape.POLYLINE:
            return GeometryDescription(GeometryKind.POLYLINE, vertices, self._line_style())
        return GeometryDescription(GeometryKind.POLYGON, vertices, self._polygon_style())

    def __repr__(self) -> str:
        shape = self._shape.value if self._shape else None
        return f"DrawSession(state={self._state.value}, shape={shape}, vertices={len(self._vertices)})"
