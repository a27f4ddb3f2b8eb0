"""Top-level package for the timeline lane layout engine."""

from __future__ import annotations

from .boundaries import TimelineBoundaries, calculate_boundaries, days_between, total_days
from .config import ConfigError, TimelineSettings
from .items import TimelineItem, apply_item_update
from .lanes import assign_lanes, max_overlap
from .timeline import TimelineLayout
from .viewport import (
    DEFAULT_ZOOM_LEVELS,
    Viewport,
    ZoomLevels,
    item_position,
    month_markers,
    visible_range,
    wheel_zoom,
)

__all__ = [
    "__version__",
    "ConfigError",
    "DEFAULT_ZOOM_LEVELS",
    "TimelineBoundaries",
    "TimelineItem",
    "TimelineLayout",
    "TimelineSettings",
    "Viewport",
    "ZoomLevels",
    "apply_item_update",
    "assign_lanes",
    "calculate_boundaries",
    "days_between",
    "item_position",
    "max_overlap",
    "month_markers",
    "total_days",
    "visible_range",
    "wheel_zoom",
]

__version__ = "0.1.0"
