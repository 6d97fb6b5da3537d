"""
Geometry Errors
===============

Synchronous failures raised to the immediate caller.

A picking miss is NOT an error: the engine returns None and the pointer
event is dropped.
"""


class TerrakitError(Exception):
    """Base class for all terrakit failures."""
    pass


class InvalidCoordinateError(TerrakitError, ValueError):
    """Raised when a position cannot be interpreted as a point on the globe."""
    pass


class InsufficientVerticesError(TerrakitError, ValueError):
    """
    Raised when an operation needs more vertices than it was given.

    Attributes:
        required: Minimum vertex count for the operation
        actual: Vertex count that was supplied
    """

    def __init__(self, required: int, actual: int, operation: str = "operation"):
        self.required = required
        self.actual = actual
        self.operation = operation
        super().__init__(
            f"{operation} requires at least {required} vertices, got {actual}"
        )
