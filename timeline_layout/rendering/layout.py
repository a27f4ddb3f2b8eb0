"""Layout constants and helpers for the timeline preview image."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class PreviewLayout:
    """Collection of reusable layout constants for the preview canvas."""

    canvas_width: int = 1200
    min_canvas_height: int = 240
    padding_x: int = 24
    header_height: int = 56
    ruler_height: int = 32
    lane_height: int = 40
    lane_gap: int = 6
    lane_label_width: int = 64
    item_corner_radius: int = 6
    item_padding_x: int = 8
    min_item_width: int = 2
    footer_height: int = 24
    grid_line_thickness: int = 1

    @property
    def track_left(self) -> int:
        return self.padding_x + self.lane_label_width

    @property
    def track_right(self) -> int:
        return self.canvas_width - self.padding_x

    @property
    def track_width(self) -> int:
        return self.track_right - self.track_left

    @property
    def ruler_top(self) -> int:
        return self.header_height

    @property
    def lanes_top(self) -> int:
        return self.ruler_top + self.ruler_height

    def lane_top(self, lane_index: int) -> int:
        return self.lanes_top + lane_index * (self.lane_height + self.lane_gap)

    def canvas_height(self, lane_count: int) -> int:
        height = self.lane_top(max(lane_count, 1)) + self.footer_height
        return max(self.min_canvas_height, height)

    def x_for_percent(self, percent: float) -> float:
        """Return the horizontal pixel offset for a 0-100 track percentage."""

        return self.track_left + percent / 100 * self.track_width

    def span_for_position(self, left_percent: float, width_percent: float) -> tuple[float, float] | None:
        """Clip an item span to the track, or ``None`` when nothing is visible."""

        if not (math.isfinite(left_percent) and math.isfinite(width_percent)):
            return None
        x1 = self.x_for_percent(left_percent)
        x2 = self.x_for_percent(left_percent + width_percent)
        x1 = max(x1, self.track_left)
        x2 = min(x2, self.track_right)
        if x2 <= x1:
            return None
        return x1, max(x2, x1 + self.min_item_width)


DEFAULT_PREVIEW_LAYOUT: Final[PreviewLayout] = PreviewLayout()

__all__ = ["DEFAULT_PREVIEW_LAYOUT", "PreviewLayout"]
