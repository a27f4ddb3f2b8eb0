"""Greedy lane assignment for overlapping timeline items."""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Sequence

from .items import TimelineItem

LOGGER = logging.getLogger(__name__)


def _start_sort_key(entry: tuple[int, float, TimelineItem]) -> tuple[bool, float]:
    _, start, _ = entry
    if math.isnan(start):
        return (True, 0.0)
    return (False, start)


def assign_lanes(items: Iterable[TimelineItem]) -> List[List[TimelineItem]]:
    """Partition ``items`` into the fewest lanes of mutually non-overlapping items.

    Items are visited in start order and dropped into the first lane whose last
    item ends strictly before the new item starts. Item ranges are closed, so an
    item starting on the day another ends does not share its lane. Unparsable
    dates never share a lane: such an item opens a lane of its own that
    stays closed to later items. Nothing raises. The returned lanes hold the
    original item objects.
    """

    entries = [(idx, item.start_timestamp, item) for idx, item in enumerate(items)]
    # sorted() is stable; unparsable starts go last in input order
    entries = sorted(entries, key=_start_sort_key)

    lanes: List[List[TimelineItem]] = []
    lane_ends: List[float] = []

    for _, start, item in entries:
        end = item.end_timestamp
        if math.isnan(start) or math.isnan(end):
            LOGGER.warning("Item %r has unparsable dates; isolating it in its own lane", item.id)
            lanes.append([item])
            lane_ends.append(math.nan)
            continue
        for lane_index, lane_end in enumerate(lane_ends):
            if lane_end < start:
                lanes[lane_index].append(item)
                lane_ends[lane_index] = end
                break
        else:
            lanes.append([item])
            lane_ends.append(end)

    return lanes


def max_overlap(items: Sequence[TimelineItem]) -> int:
    """Return the largest number of items covering a single instant.

    Only items with parsable start and end dates are counted. Ranges are closed:
    an item ending when another starts counts as overlapping at that instant.
    """

    events: List[tuple[float, int]] = []
    for item in items:
        start, end = item.start_timestamp, item.end_timestamp
        if math.isnan(start) or math.isnan(end):
            continue
        # starts sort before ends at the same instant
        events.append((start, 0))
        events.append((end, 1))

    events.sort()
    active = 0
    peak = 0
    for _, kind in events:
        if kind == 0:
            active += 1
            peak = max(peak, active)
        else:
            active -= 1
    return peak


def lanes_are_disjoint(lanes: Sequence[Sequence[TimelineItem]]) -> bool:
    """Return ``True`` when no lane holds two items whose closed ranges intersect."""

    for lane in lanes:
        for position, item in enumerate(lane):
            for other in lane[position + 1 :]:
                if not (
                    item.end_timestamp < other.start_timestamp
                    or other.end_timestamp < item.start_timestamp
                ):
                    return False
    return True


__all__ = ["assign_lanes", "lanes_are_disjoint", "max_overlap"]
