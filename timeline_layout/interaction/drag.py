"""Resize-by-drag state machine for a single timeline item.

A drag starts when the pointer goes down on the start or end handle of an
item. Pointer movement is snapped to whole days and applied to the grabbed
edge only; the other edge stays put. The item itself is never touched while
dragging: callers read :attr:`DragInteractionController.preview` to draw the
live range and receive a single ``on_item_update`` call when the pointer is
released on a different range than the one grabbed.

State machine::

    IDLE -> (begin) -> DRAGGING -> (pointer up) -> IDLE  [commit if changed]
                          |
                          +-> (cancel / close) -> IDLE   [no commit]
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Optional

from ..config import DEFAULT_PIXELS_PER_DAY
from ..items import DAY_SECONDS, TimelineItem, to_date
from .events import PointerEventKind, PointerEventSource, Subscription

LOGGER = logging.getLogger(__name__)

ItemUpdateCallback = Callable[[Hashable, Dict[str, Any]], None]


class DragEdge(str, Enum):
    START = "start"
    END = "end"


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def shifted(self, edge: DragEdge, days: int) -> "DateRange":
        """Move ``edge`` by ``days`` while keeping ``start`` strictly before ``end``."""

        delta = timedelta(days=days)
        if edge is DragEdge.START:
            new_start = self.start + delta
            if new_start >= self.end:
                new_start = self.end - timedelta(days=1)
            return DateRange(start=new_start, end=self.end)

        new_end = self.end + delta
        if new_end <= self.start:
            new_end = self.start + timedelta(days=1)
        return DateRange(start=self.start, end=new_end)


@dataclass
class DragSession:
    item_id: Hashable
    edge: DragEdge
    anchor_x: float
    original: DateRange
    live: DateRange
    # the item's start/end exactly as stored when the drag began
    original_values: tuple[Any, Any] = (None, None)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _shift_like(template: Any, days: int, fallback: date) -> Any:
    """Move a stored date value by ``days``, keeping its type, format and time of day."""

    if isinstance(template, date):
        return template + timedelta(days=days)
    if isinstance(template, (int, float)) and not isinstance(template, bool):
        return template + days * DAY_SECONDS
    if isinstance(template, str):
        text = template.strip()
        if len(text) <= len("YYYY-MM-DD"):
            return fallback.isoformat()
        zulu = text.endswith("Z")
        try:
            parsed = datetime.fromisoformat(text[:-1] + "+00:00" if zulu else text)
        except ValueError:
            return fallback.isoformat()
        shifted = (parsed + timedelta(days=days)).isoformat()
        if zulu and shifted.endswith("+00:00"):
            shifted = shifted[: -len("+00:00")] + "Z"
        return shifted
    return fallback


class DragInteractionController:
    """Turn pointer gestures on an item's edge handles into validated date edits."""

    def __init__(
        self,
        item: TimelineItem,
        on_item_update: ItemUpdateCallback,
        *,
        pointer_events: PointerEventSource,
        pixels_per_day: float = DEFAULT_PIXELS_PER_DAY,
        is_blocked: Optional[Callable[[], bool]] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if pixels_per_day <= 0:
            raise ValueError("pixels_per_day must be positive")
        self.item = item
        self.on_item_update = on_item_update
        self.pointer_events = pointer_events
        self.pixels_per_day = pixels_per_day
        self.is_blocked = is_blocked
        self.logger = logger or LOGGER

        self._session: DragSession | None = None
        self._subscriptions: list[Subscription] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def state(self) -> DragState:
        return DragState.DRAGGING if self._session is not None else DragState.IDLE

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def preview(self) -> DateRange | None:
        """Live dates while dragging, otherwise the item's own dates."""

        if self._session is not None:
            return self._session.live
        return self._item_range()

    def sync_item(self, item: TimelineItem) -> None:
        """Accept a fresh copy of the item from the store; an active drag keeps its snapshot."""

        self.item = item

    def begin(self, edge: DragEdge | str, pointer_x: float) -> bool:
        """Start dragging ``edge``. Returns ``False`` when the drag is refused."""

        if self._session is not None:
            self.logger.warning("Item %r is already being dragged", self.item.id)
            return False
        if self.is_blocked is not None and self.is_blocked():
            self.logger.warning("Item %r is busy; drag refused", self.item.id)
            return False

        original = self._item_range()
        if original is None:
            self.logger.warning("Item %r has unparsable dates; drag refused", self.item.id)
            return False

        self._session = DragSession(
            item_id=self.item.id,
            edge=DragEdge(edge),
            anchor_x=pointer_x,
            original=original,
            live=original,
            original_values=(self.item.start, self.item.end),
        )
        self._subscriptions = [
            self.pointer_events.subscribe(PointerEventKind.MOVE, self.move),
            self.pointer_events.subscribe(PointerEventKind.UP, self._on_pointer_up),
        ]
        self.logger.debug("Started %s-edge drag on item %r", self._session.edge.value, self.item.id)
        return True

    def move(self, pointer_x: float) -> DateRange | None:
        session = self._session
        if session is None:
            return None

        day_delta = round_half_up((pointer_x - session.anchor_x) / self.pixels_per_day)
        if abs(day_delta) < 1:
            # back within a day of the anchor
            session.live = session.original
            return session.live

        session.live = session.original.shifted(session.edge, day_delta)
        self.logger.debug(
            "Drag preview for item %r: %s -> %s",
            session.item_id,
            session.live.start.isoformat(),
            session.live.end.isoformat(),
        )
        return session.live

    def end(self) -> DateRange | None:
        """Finish the drag, committing the live range when it differs from the original."""

        session = self._session
        if session is None:
            return None
        self._teardown()

        if session.live == session.original:
            self.logger.debug("Drag on item %r ended without a change", session.item_id)
            return None

        start_value, end_value = session.original_values
        if session.edge is DragEdge.START:
            shift = (session.live.start - session.original.start).days
            start_value = _shift_like(start_value, shift, session.live.start)
        else:
            shift = (session.live.end - session.original.end).days
            end_value = _shift_like(end_value, shift, session.live.end)
        # the edge that was not dragged is passed through exactly as stored
        fields = {"start": start_value, "end": end_value}
        self.logger.info("Committing new dates for item %r: %s", session.item_id, fields)
        self.on_item_update(session.item_id, fields)
        return session.live

    def cancel(self) -> None:
        if self._session is not None:
            self.logger.debug("Drag on item %r cancelled", self._session.item_id)
        self._teardown()

    def close(self) -> None:
        """Release listeners when the item goes away; an active drag is discarded."""

        self.cancel()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _on_pointer_up(self, pointer_x: float) -> None:
        self.move(pointer_x)
        self.end()

    def _teardown(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []
        self._session = None

    def _item_range(self) -> DateRange | None:
        start = to_date(self.item.start)
        end = to_date(self.item.end)
        if start is None or end is None:
            return None
        return DateRange(start=start, end=end)


__all__ = [
    "DEFAULT_PIXELS_PER_DAY",
    "DateRange",
    "DragEdge",
    "DragInteractionController",
    "DragSession",
    "DragState",
    "ItemUpdateCallback",
    "round_half_up",
]
