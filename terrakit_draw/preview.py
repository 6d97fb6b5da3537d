"""
Live Preview
============

Read-only, lazily re-evaluated view of an in-progress shape.

The engine calls the provider on every render, so the preview always
reflects the session's current committed vertices plus the pending
(mouse-move) vertex. Nothing is cached.
"""

from typing import Callable, Iterator, Optional, Tuple

from terrakit_geometry import Cartesian3

VertexSource = Callable[[], Tuple[Cartesian3, ...]]
PendingSource = Callable[[], Optional[Cartesian3]]


class LivePreview:
    """
    Derived geometry of the shape being drawn.

    Usage:
        preview = LivePreview(lambda: session.vertices, lambda: session.pending_vertex)
        preview()            # committed + pending
        preview.outline()    # committed + pending + first (polygon edge back home)
        next(preview.snapshots())
    """

    def __init__(self, vertices: VertexSource, pending: PendingSource):
        self._vertices = vertices
        self._pending = pending

    def positions(self) -> Tuple[Cartesian3, ...]:
        """Committed vertices followed by the pending vertex, if any."""
        committed = self._vertices()
        pending = self._pending()
        if pending is None:
            return committed
        return committed + (pending,)

    def outline(self) -> Tuple[Cartesian3, ...]:
        """Polygon outline; closed back to the first vertex while the pointer moves."""
        committed = self._vertices()
        pending = self._pending()
        if pending is None or not committed:
            return committed
        return committed + (pending, committed[0])

    def __call__(self) -> Tuple[Cartesian3, ...]:
        return self.positions()

    def snapshots(self) -> Iterator[Tuple[Cartesian3, ...]]:
        """Endless stream of current vertex snapshots, one per next()."""
        while True:
            yield self.positions()
