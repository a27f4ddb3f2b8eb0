"""Inline rename state machine for a single timeline item."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..config import DEFAULT_AUTOSAVE_DELAY, DEFAULT_MAX_NAME_LENGTH, DEFAULT_MIN_NAME_LENGTH
from ..items import TimelineItem
from ..timers import Debouncer, TimerQueue
from .drag import ItemUpdateCallback

LOGGER = logging.getLogger(__name__)


class RenameState(Enum):
    IDLE = "idle"
    EDITING = "editing"


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: str | None = None


def sanitize_name(value: str) -> str:
    """Trim ``value`` and collapse internal whitespace runs to single spaces."""

    return " ".join(value.split())


def validate_name(
    value: str,
    *,
    min_length: int = DEFAULT_MIN_NAME_LENGTH,
    max_length: int = DEFAULT_MAX_NAME_LENGTH,
) -> ValidationResult:
    length = len(value.strip())
    if length == 0 and min_length > 0:
        return ValidationResult(False, "Name cannot be empty")
    if length < min_length:
        return ValidationResult(False, f"Name must be at least {min_length} characters")
    if length > max_length:
        return ValidationResult(False, f"Name must be {max_length} characters or fewer")
    return ValidationResult(True)


class InlineRenameController:
    """Turn keystrokes into a validated name change for one item.

    ``change`` re-arms a debounced autosave that proposes the current value
    without leaving the editing state. ``commit`` (Enter, Tab or blur) and
    ``cancel`` (Escape) end the session.
    """

    def __init__(
        self,
        item: TimelineItem,
        on_item_update: ItemUpdateCallback,
        *,
        timers: TimerQueue,
        autosave_delay: float = DEFAULT_AUTOSAVE_DELAY,
        min_length: int = DEFAULT_MIN_NAME_LENGTH,
        max_length: int = DEFAULT_MAX_NAME_LENGTH,
        is_blocked: Optional[Callable[[], bool]] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.item = item
        self.on_item_update = on_item_update
        self.min_length = min_length
        self.max_length = max_length
        self.is_blocked = is_blocked
        self.logger = logger or LOGGER

        self._state = RenameState.IDLE
        self._edit_value = item.name
        self._error: str | None = None
        self._last_proposed: str | None = None
        self._autosave = Debouncer(timers, self._autosave_now, autosave_delay)

    @property
    def state(self) -> RenameState:
        return self._state

    @property
    def is_editing(self) -> bool:
        return self._state is RenameState.EDITING

    @property
    def edit_value(self) -> str:
        return self._edit_value

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def display_name(self) -> str:
        return self._edit_value if self.is_editing else self.item.name

    @property
    def autosave_pending(self) -> bool:
        return self._autosave.pending

    def validate(self, value: str) -> ValidationResult:
        return validate_name(value, min_length=self.min_length, max_length=self.max_length)

    def activate(self) -> bool:
        if self.is_editing:
            return False
        if self.is_blocked is not None and self.is_blocked():
            self.logger.warning("Item %r is busy; rename refused", self.item.id)
            return False
        self._state = RenameState.EDITING
        self._edit_value = self.item.name
        self._error = None
        self._last_proposed = None
        return True

    def change(self, value: str) -> None:
        if not self.is_editing:
            return
        self._edit_value = value
        self._error = None
        self._autosave.trigger()

    def commit(self) -> ValidationResult:
        """Validate and finish the edit. Invalid input keeps the session open."""

        if not self.is_editing:
            return ValidationResult(True)

        self._autosave.cancel()
        sanitized = sanitize_name(self._edit_value)
        result = self.validate(sanitized)
        if not result.is_valid:
            self._error = result.error
            self.logger.debug("Rename of item %r rejected: %s", self.item.id, result.error)
            return result

        if sanitized != self._current_name():
            self._propose(sanitized)
        self._finish()
        return result

    def cancel(self) -> None:
        self._autosave.cancel()
        self._finish()

    def close(self) -> None:
        self.cancel()

    def sync_item(self, item: TimelineItem) -> None:
        """Take an updated item from the store without clobbering an edit in progress."""

        self.item = item
        if not self.is_editing:
            self._edit_value = item.name

    # ------------------------------------------------------------------
    def _autosave_now(self) -> None:
        if not self.is_editing:
            return
        sanitized = sanitize_name(self._edit_value)
        result = self.validate(sanitized)
        if not result.is_valid:
            self._error = result.error
            return
        if sanitized == self._current_name():
            return
        self.logger.debug("Autosaving name for item %r", self.item.id)
        self._propose(sanitized)

    def _current_name(self) -> str:
        # an autosaved name is what the store holds now, even before sync_item
        return self._last_proposed if self._last_proposed is not None else self.item.name

    def _propose(self, name: str) -> None:
        self._last_proposed = name
        self.logger.info("Committing new name for item %r: %r", self.item.id, name)
        self.on_item_update(self.item.id, {"name": name})

    def _finish(self) -> None:
        self._state = RenameState.IDLE
        self._edit_value = self.item.name
        self._error = None


__all__ = [
    "DEFAULT_AUTOSAVE_DELAY",
    "DEFAULT_MAX_NAME_LENGTH",
    "DEFAULT_MIN_NAME_LENGTH",
    "InlineRenameController",
    "RenameState",
    "ValidationResult",
    "sanitize_name",
    "validate_name",
]
