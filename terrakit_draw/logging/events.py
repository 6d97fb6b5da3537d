"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

This module defines typed event names for structured logging.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (namespace.category.action)
- Searchable in log aggregators

Event Naming Convention:
    <component>.<category>.<action>

    component: draw, measure, analysis, error
    category: vertex, pick, finalize, buffer
    action: added, missed, rejected, created

Example Log Query:
    fields @timestamp, event, message, metadata.measurement_id
    | filter event = "measure.completed"
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - draw.*: Interactive draw session lifecycle
    - measure.*: Measurement results
    - analysis.*: Analysis entity registry
    - error.*: Error conditions
    """

    # ========== Draw Events ==========
    DRAW_STARTED = "draw.started"
    """Draw session entered the active state."""

    DRAW_VERTEX_ADDED = "draw.vertex.added"
    """Picked position committed as a vertex."""

    DRAW_PICK_MISSED = "draw.pick.missed"
    """Pointer event dropped because picking hit no surface."""

    DRAW_FINALIZED = "draw.finalized"
    """Shape completed and vertex list frozen."""

    DRAW_FINALIZE_REJECTED = "draw.finalize.rejected"
    """Finalize attempted below the shape's minimum vertex count."""

    DRAW_CANCELLED = "draw.cancelled"
    """Session discarded (cancel, clear or superseded)."""

    # ========== Measure Events ==========
    MEASURE_STARTED = "measure.started"
    """Measurement session started."""

    MEASURE_COMPLETED = "measure.completed"
    """Measurement result computed and stored."""

    MEASURE_CLEARED = "measure.cleared"
    """One or all measurement results removed."""

    # ========== Analysis Events ==========
    ANALYSIS_BUFFER_CREATED = "analysis.buffer.created"
    """Buffer ring generated and registered."""

    ANALYSIS_ENTITY_REMOVED = "analysis.entity.removed"
    """Analysis entity removed from the registry."""

    ANALYSIS_CLEARED = "analysis.cleared"
    """All analysis entities removed."""

    # ========== Error Events ==========
    INVALID_COORDINATE = "error.invalid_coordinate"
    """Position input could not be interpreted."""


# Event categories for filtering
DRAW_EVENTS = {
    LogEvent.DRAW_STARTED,
    LogEvent.DRAW_VERTEX_ADDED,
    LogEvent.DRAW_PICK_MISSED,
    LogEvent.DRAW_FINALIZED,
    LogEvent.DRAW_FINALIZE_REJECTED,
    LogEvent.DRAW_CANCELLED,
}

MEASURE_EVENTS = {
    LogEvent.MEASURE_STARTED,
    LogEvent.MEASURE_COMPLETED,
    LogEvent.MEASURE_CLEARED,
}

ANALYSIS_EVENTS = {
    LogEvent.ANALYSIS_BUFFER_CREATED,
    LogEvent.ANALYSIS_ENTITY_REMOVED,
    LogEvent.ANALYSIS_CLEARED,
}

ERROR_EVENTS = {
    LogEvent.INVALID_COORDINATE,
}
