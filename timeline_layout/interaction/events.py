"""Pointer event fan-out with scoped subscriptions."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, List

LOGGER = logging.getLogger(__name__)

PointerHandler = Callable[[float], None]


class PointerEventKind(str, Enum):
    MOVE = "pointermove"
    UP = "pointerup"


class Subscription:
    """Registration returned by :meth:`PointerEventSource.subscribe`.

    Usable as a context manager; leaving the block unsubscribes.
    """

    def __init__(self, source: "PointerEventSource", kind: PointerEventKind, handler: PointerHandler) -> None:
        self._source = source
        self.kind = kind
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._source._remove(self)
            self._active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class PointerEventSource:
    """Document-level pointer events a drag session listens to while active."""

    def __init__(self) -> None:
        self._subscriptions: Dict[PointerEventKind, List[Subscription]] = {
            kind: [] for kind in PointerEventKind
        }

    def subscribe(self, kind: PointerEventKind, handler: PointerHandler) -> Subscription:
        subscription = Subscription(self, PointerEventKind(kind), handler)
        self._subscriptions[subscription.kind].append(subscription)
        return subscription

    def listener_count(self, kind: PointerEventKind | None = None) -> int:
        if kind is not None:
            return len(self._subscriptions[PointerEventKind(kind)])
        return sum(len(subs) for subs in self._subscriptions.values())

    def dispatch(self, kind: PointerEventKind, pointer_x: float) -> None:
        # handlers may unsubscribe while we iterate
        for subscription in list(self._subscriptions[PointerEventKind(kind)]):
            if subscription.active:
                subscription.handler(pointer_x)

    def move(self, pointer_x: float) -> None:
        self.dispatch(PointerEventKind.MOVE, pointer_x)

    def release(self, pointer_x: float) -> None:
        self.dispatch(PointerEventKind.UP, pointer_x)

    def _remove(self, subscription: Subscription) -> None:
        try:
            self._subscriptions[subscription.kind].remove(subscription)
        except ValueError:
            LOGGER.debug("Subscription for %s already removed", subscription.kind.value)


__all__ = ["PointerEventKind", "PointerEventSource", "PointerHandler", "Subscription"]
