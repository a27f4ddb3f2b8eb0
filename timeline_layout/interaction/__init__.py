"""Per-item drag and rename sessions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable

from ..config import TimelineSettings
from ..items import TimelineItem
from ..timers import TimerQueue
from .drag import (
    DateRange,
    DragEdge,
    DragInteractionController,
    DragSession,
    DragState,
    ItemUpdateCallback,
)
from .events import PointerEventKind, PointerEventSource, Subscription
from .rename import (
    InlineRenameController,
    RenameState,
    ValidationResult,
    sanitize_name,
    validate_name,
)

LOGGER = logging.getLogger(__name__)


@dataclass
class ItemInteractions:
    """The drag and rename controllers bound to one item, mutually exclusive."""

    drag: DragInteractionController
    rename: InlineRenameController

    @property
    def busy(self) -> bool:
        return self.drag.is_dragging or self.rename.is_editing

    def sync_item(self, item: TimelineItem) -> None:
        self.drag.sync_item(item)
        self.rename.sync_item(item)

    def close(self) -> None:
        self.drag.close()
        self.rename.close()


class InteractionRegistry:
    """Create and track interaction controllers for the items currently on screen."""

    def __init__(
        self,
        on_item_update: ItemUpdateCallback,
        *,
        pointer_events: PointerEventSource | None = None,
        timers: TimerQueue | None = None,
        settings: TimelineSettings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.on_item_update = on_item_update
        self.pointer_events = pointer_events or PointerEventSource()
        self.timers = timers or TimerQueue()
        self.settings = settings or TimelineSettings()
        self.logger = logger or LOGGER
        self._controllers: Dict[Hashable, ItemInteractions] = {}

    def __contains__(self, item_id: Hashable) -> bool:
        return item_id in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)

    def for_item(self, item: TimelineItem) -> ItemInteractions:
        existing = self._controllers.get(item.id)
        if existing is not None:
            existing.sync_item(item)
            return existing

        settings = self.settings
        drag = DragInteractionController(
            item,
            self.on_item_update,
            pointer_events=self.pointer_events,
            pixels_per_day=settings.pixels_per_day,
            logger=self.logger,
        )
        rename = InlineRenameController(
            item,
            self.on_item_update,
            timers=self.timers,
            autosave_delay=settings.rename_autosave_delay,
            min_length=settings.name_min_length,
            max_length=settings.name_max_length,
            is_blocked=lambda: drag.is_dragging,
            logger=self.logger,
        )
        drag.is_blocked = lambda: rename.is_editing
        interactions = ItemInteractions(drag=drag, rename=rename)
        self._controllers[item.id] = interactions
        return interactions

    def sync(self, items: Iterable[TimelineItem]) -> None:
        """Refresh controllers from the store and release those of removed items."""

        seen = set()
        for item in items:
            seen.add(item.id)
            if item.id in self._controllers:
                self._controllers[item.id].sync_item(item)

        for item_id in [key for key in self._controllers if key not in seen]:
            self.release(item_id)

    def release(self, item_id: Hashable) -> None:
        interactions = self._controllers.pop(item_id, None)
        if interactions is not None:
            self.logger.debug("Releasing interaction controllers for item %r", item_id)
            interactions.close()

    def close(self) -> None:
        for item_id in list(self._controllers):
            self.release(item_id)


__all__ = [
    "DateRange",
    "DragEdge",
    "DragInteractionController",
    "DragSession",
    "DragState",
    "InlineRenameController",
    "InteractionRegistry",
    "ItemInteractions",
    "ItemUpdateCallback",
    "PointerEventKind",
    "PointerEventSource",
    "RenameState",
    "Subscription",
    "ValidationResult",
    "sanitize_name",
    "validate_name",
]
