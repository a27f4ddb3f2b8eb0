"""Facade tying boundaries, lanes and the viewport together for a renderer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Hashable, Iterable, List, Mapping, Optional, Sequence

from .boundaries import TimelineBoundaries, calculate_boundaries, total_days
from .config import TimelineSettings
from .items import TimelineItem, apply_item_update, coerce_items
from .lanes import assign_lanes
from .viewport import (
    CENTER_PERCENT,
    ItemPosition,
    MonthMarker,
    Viewport,
    VisibleRange,
    item_position,
    month_markers,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionedItem:
    item: TimelineItem
    lane: int
    position: ItemPosition


@dataclass(frozen=True)
class TimelineSummary:
    item_count: int
    lane_count: int


class TimelineLayout:
    """Lay out one item set and map it through any number of viewports.

    Boundaries and lanes depend only on the items and are computed once per
    item set; viewport changes reuse them.
    """

    def __init__(
        self,
        items: Iterable[TimelineItem | Mapping[str, Any]] = (),
        *,
        settings: TimelineSettings | None = None,
        now: Optional[datetime] = None,
    ) -> None:
        self.settings = settings or TimelineSettings()
        self.now = now
        self._items: List[TimelineItem] = coerce_items(items)
        self._boundaries: TimelineBoundaries | None = None
        self._lanes: List[List[TimelineItem]] | None = None

    @property
    def items(self) -> List[TimelineItem]:
        return list(self._items)

    @items.setter
    def items(self, items: Iterable[TimelineItem | Mapping[str, Any]]) -> None:
        self._items = coerce_items(items)
        self._boundaries = None
        self._lanes = None

    @property
    def boundaries(self) -> TimelineBoundaries:
        if self._boundaries is None:
            self._boundaries = calculate_boundaries(
                self._items,
                self.settings.boundary_padding_days,
                now=self.now,
            )
        return self._boundaries

    @property
    def total_days(self) -> float:
        bounds = self.boundaries
        return total_days(bounds.timeline_start, bounds.timeline_end)

    @property
    def lanes(self) -> List[List[TimelineItem]]:
        if self._lanes is None:
            self._lanes = assign_lanes(self._items)
            LOGGER.debug("Assigned %d items to %d lanes", len(self._items), len(self._lanes))
        return self._lanes

    def summary(self) -> TimelineSummary:
        return TimelineSummary(item_count=len(self._items), lane_count=len(self.lanes))

    def default_viewport(self) -> Viewport:
        """Return the configured starting zoom, centred on the span."""

        return Viewport(zoom_level=self.settings.zoom.default, focal_percent=CENTER_PERCENT)

    def apply_wheel(
        self,
        viewport: Viewport,
        delta_y: float,
        pointer_x: float,
        container_left: float,
        container_width: float,
    ) -> Viewport:
        """Apply a wheel step with the configured sensitivity and zoom limits."""

        return viewport.apply_wheel(
            delta_y,
            pointer_x,
            container_left,
            container_width,
            sensitivity=self.settings.wheel_sensitivity,
            levels=self.settings.zoom,
        )

    def visible_range(self, viewport: Viewport | None = None) -> VisibleRange:
        viewport = viewport or self.default_viewport()
        bounds = self.boundaries
        return viewport.visible_range(
            bounds.timeline_start,
            bounds.timeline_end,
            levels=self.settings.zoom,
        )

    def positions(self, viewport: Viewport | None = None) -> List[List[PositionedItem]]:
        window = self.visible_range(viewport)
        return [
            [
                PositionedItem(
                    item=item,
                    lane=lane_index,
                    position=item_position(item, window.visible_start, window.visible_days),
                )
                for item in lane
            ]
            for lane_index, lane in enumerate(self.lanes)
        ]

    def month_markers(self, viewport: Viewport | None = None) -> List[MonthMarker]:
        window = self.visible_range(viewport)
        return month_markers(window.visible_start, window.visible_end, window.visible_days)

    def find(self, item_id: Hashable) -> TimelineItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def apply_update(self, item_id: Hashable, fields: Mapping[str, Any]) -> Sequence[TimelineItem]:
        """Merge a committed change and invalidate the cached layout."""

        self.items = apply_item_update(self._items, item_id, fields)
        return self.items


__all__ = ["PositionedItem", "TimelineLayout", "TimelineSummary"]
