"""Zoom/pan viewport math mapping calendar dates to screen percentages."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import MAXYEAR, date, datetime, time, timedelta, timezone
from typing import Any, Final, List

from .boundaries import days_between, normalization_days, shift_datetime, total_days
from .items import TimelineItem, to_datetime

DEFAULT_WHEEL_SENSITIVITY = 0.001
CENTER_PERCENT = 50.0


@dataclass(frozen=True)
class ZoomLevels:
    """Bounds and increments for the zoom factor."""

    minimum: float = 0.1
    maximum: float = 5.0
    default: float = 1.0
    step: float = 0.1

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, value))


DEFAULT_ZOOM_LEVELS: Final[ZoomLevels] = ZoomLevels()


@dataclass(frozen=True)
class VisibleRange:
    visible_start: datetime
    visible_end: datetime
    visible_days: float


@dataclass(frozen=True)
class ItemPosition:
    left_percent: float
    width_percent: float


@dataclass(frozen=True)
class MonthMarker:
    date: datetime
    left_percent: float

    @property
    def label(self) -> str:
        return format_month_label(self.date)


def clamp_zoom(value: float, levels: ZoomLevels = DEFAULT_ZOOM_LEVELS) -> float:
    return levels.clamp(value)


def _clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, value))


def visible_range(
    timeline_start: datetime,
    timeline_end: datetime,
    zoom_level: float,
    focal_percent: float,
    *,
    levels: ZoomLevels = DEFAULT_ZOOM_LEVELS,
) -> VisibleRange:
    """Return the calendar window shown at ``zoom_level`` around ``focal_percent``.

    The window is clamped to the full span rather than re-centred, so near
    either edge it can be narrower than ``visible_days``.
    """

    zoom = levels.clamp(zoom_level)
    focal = _clamp_percent(focal_percent)
    days = total_days(timeline_start, timeline_end)
    visible_days = days / zoom
    center_days = days * focal / 100
    offset_start = max(0, center_days - visible_days / 2)
    offset_end = min(days, center_days + visible_days / 2)
    return VisibleRange(
        visible_start=shift_datetime(timeline_start, timedelta(days=offset_start)),
        visible_end=shift_datetime(timeline_start, timedelta(days=offset_end)),
        visible_days=visible_days,
    )


def item_position(item: TimelineItem, visible_start: Any, visible_days: float) -> ItemPosition:
    """Return left/width percentages of ``item`` within a window of ``visible_days``.

    The end date is inclusive, so a single-day item is one day wide. Values are
    not clamped; items outside the window produce negative or >100 offsets and
    unparsable dates produce ``nan``.
    """

    days = normalization_days(visible_days)
    start_offset = days_between(visible_start, item.start)
    duration = days_between(item.start, item.end) + 1
    return ItemPosition(
        left_percent=start_offset / days * 100,
        width_percent=duration / days * 100,
    )


def wheel_zoom(
    current_zoom: float,
    delta_y: float,
    sensitivity: float = DEFAULT_WHEEL_SENSITIVITY,
    *,
    levels: ZoomLevels = DEFAULT_ZOOM_LEVELS,
) -> float:
    return levels.clamp(current_zoom * (1 - delta_y * sensitivity))


def pointer_focal_percent(pointer_x: float, container_left: float, container_width: float) -> float:
    """Return the pointer's horizontal position within a container as 0-100."""

    if container_width <= 0:
        return CENTER_PERCENT
    return _clamp_percent((pointer_x - container_left) / container_width * 100)


def _first_of_month(value: datetime) -> datetime:
    return datetime.combine(value.date().replace(day=1), time.min, tzinfo=timezone.utc)


def _next_month(value: datetime) -> datetime | None:
    if value.month == 12:
        if value.year == MAXYEAR:
            return None
        return value.replace(year=value.year + 1, month=1)
    return value.replace(month=value.month + 1)


def month_markers(range_start: Any, range_end: Any, range_days: float) -> List[MonthMarker]:
    """Return first-of-month markers from ``range_start``'s month through ``range_end``'s."""

    start = to_datetime(range_start)
    end = to_datetime(range_end)
    if start is None or end is None:
        return []

    days = normalization_days(range_days)
    markers: List[MonthMarker] = []
    current: datetime | None = _first_of_month(start)
    while current is not None and current <= end:
        offset = days_between(start, current)
        markers.append(MonthMarker(date=current, left_percent=offset / days * 100))
        current = _next_month(current)
    return markers


def format_month_label(value: date | datetime) -> str:
    return value.strftime("%b %Y")


def format_zoom_level(zoom_level: float) -> str:
    return f"{round(zoom_level * 100)}%"


def item_tooltip(item: TimelineItem) -> str:
    return f"{item.name} ({item.start} to {item.end})"


@dataclass(frozen=True)
class Viewport:
    """Zoom factor and focal point persisted by the caller between renders."""

    zoom_level: float = DEFAULT_ZOOM_LEVELS.default
    focal_percent: float = CENTER_PERCENT

    def visible_range(
        self,
        timeline_start: datetime,
        timeline_end: datetime,
        *,
        levels: ZoomLevels = DEFAULT_ZOOM_LEVELS,
    ) -> VisibleRange:
        return visible_range(
            timeline_start,
            timeline_end,
            self.zoom_level,
            self.focal_percent,
            levels=levels,
        )

    def with_zoom(self, zoom_level: float, *, levels: ZoomLevels = DEFAULT_ZOOM_LEVELS) -> "Viewport":
        return replace(self, zoom_level=levels.clamp(zoom_level))

    def zoom_in(self, *, levels: ZoomLevels = DEFAULT_ZOOM_LEVELS) -> "Viewport":
        return self.with_zoom(self.zoom_level + levels.step, levels=levels)

    def zoom_out(self, *, levels: ZoomLevels = DEFAULT_ZOOM_LEVELS) -> "Viewport":
        return self.with_zoom(self.zoom_level - levels.step, levels=levels)

    def reset(self, *, levels: ZoomLevels = DEFAULT_ZOOM_LEVELS) -> "Viewport":
        return Viewport(zoom_level=levels.default, focal_percent=CENTER_PERCENT)

    def can_zoom_in(self, *, levels: ZoomLevels = DEFAULT_ZOOM_LEVELS) -> bool:
        return self.zoom_level < levels.maximum

    def can_zoom_out(self, *, levels: ZoomLevels = DEFAULT_ZOOM_LEVELS) -> bool:
        return self.zoom_level > levels.minimum

    def is_default(self, *, levels: ZoomLevels = DEFAULT_ZOOM_LEVELS) -> bool:
        return self.zoom_level == levels.default

    def apply_wheel(
        self,
        delta_y: float,
        pointer_x: float,
        container_left: float,
        container_width: float,
        *,
        sensitivity: float = DEFAULT_WHEEL_SENSITIVITY,
        levels: ZoomLevels = DEFAULT_ZOOM_LEVELS,
    ) -> "Viewport":
        """Zoom by a wheel step, keeping the point under the pointer as the focal point."""

        return Viewport(
            zoom_level=wheel_zoom(self.zoom_level, delta_y, sensitivity, levels=levels),
            focal_percent=pointer_focal_percent(pointer_x, container_left, container_width),
        )


__all__ = [
    "CENTER_PERCENT",
    "DEFAULT_WHEEL_SENSITIVITY",
    "DEFAULT_ZOOM_LEVELS",
    "ItemPosition",
    "MonthMarker",
    "Viewport",
    "VisibleRange",
    "ZoomLevels",
    "clamp_zoom",
    "format_month_label",
    "format_zoom_level",
    "item_position",
    "item_tooltip",
    "month_markers",
    "pointer_focal_percent",
    "visible_range",
    "wheel_zoom",
]
