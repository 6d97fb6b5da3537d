"""
PointerHandlerRegistry - Explicit pointer binding pattern

Bounded Context: Pointer-event binding and dispatch
Responsibilities:
  - Register one callback per pointer event kind
  - Dispatch events to the bound callback (unbound kinds are ignored)
  - Tear down every binding at once (unregister_all)
  - Provide introspection (bound_kinds, is_bound)

Problem: Anonymous callbacks make it unclear what a tool is listening to
Solution: Explicit registration per event kind, torn down as a unit

Threading: Single-threaded; events arrive from the engine's event loop
"""

from typing import Callable, Dict, Set

from terrakit_engine.protocol import PointerCallback, PointerEvent, PointerEventKind


class PointerHandlerRegistry:
    """
    Registry of pointer callbacks for one owner (e.g. one draw activation).

    Key Features:
      - Fail-fast: double registration of a kind is rejected
      - Introspection: bound kinds can be queried at runtime
      - Teardown: unregister_all() detaches every callback; a detached
        registry silently drops further events

    Example:
        handler = engine.create_pointer_handler()
        handler.register(PointerEventKind.LEFT_CLICK, on_click)
        handler.dispatch(PointerEvent(PointerEventKind.LEFT_CLICK, ScreenPoint(10, 20)))
        handler.unregister_all()
    """

    def __init__(self, on_release: Callable[["PointerHandlerRegistry"], None] | None = None):
        self._callbacks: Dict[PointerEventKind, PointerCallback] = {}
        self._on_release = on_release
        self._released = False

    def register(self, kind: PointerEventKind, callback: PointerCallback) -> None:
        """
        Bind a callback to an event kind.

        Raises:
            ValueError: If the kind is already bound or the registry was released
        """
        if self._released:
            raise ValueError("Pointer handler already released")
        if kind in self._callbacks:
            raise ValueError(f"Pointer event '{kind.value}' already registered")
        self._callbacks[kind] = callback

    def dispatch(self, event: PointerEvent) -> bool:
        """
        Deliver an event to its bound callback.

        Returns:
            True if a callback ran, False if the kind is unbound
        """
        callback = self._callbacks.get(event.kind)
        if callback is None:
            return False
        callback(event)
        return True

    def unregister_all(self) -> None:
        """Detach every callback. Safe to call multiple times."""
        self._callbacks.clear()
        if not self._released:
            self._released = True
            if self._on_release is not None:
                self._on_release(self)

    def is_bound(self, kind: PointerEventKind) -> bool:
        return kind in self._callbacks

    @property
    def bound_kinds(self) -> Set[PointerEventKind]:
        """Snapshot of bound event kinds."""
        return set(self._callbacks.keys())

    @property
    def released(self) -> bool:
        return self._released

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        kinds = ", ".join(sorted(k.value for k in self._callbacks))
        return f"PointerHandlerRegistry(bound=[{kinds}])"
