"""
Structured Logging for terrakit
===============================

Bounded Context: Observability

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from terrakit_draw.logging import StructuredLogger, LogEvent
    >>> logger = StructuredLogger(component="draw")
    >>> logger.info(
    ...     event=LogEvent.DRAW_STARTED,
    ...     message="Polyline draw started",
    ...     metadata={'shape': 'polyline'}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
