"""Timeline item records and date coercion helpers."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timezone
from typing import Any, Hashable, Iterable, List, Mapping

LOGGER = logging.getLogger(__name__)

DAY_SECONDS = 24 * 60 * 60

_CORE_FIELDS = ("id", "start", "end", "name")


@dataclass(frozen=True)
class TimelineItem:
    """A time-bounded item placed on the timeline.

    ``start`` and ``end`` keep whatever the caller supplied (ISO strings, dates,
    datetimes or POSIX numbers). Both dates are inclusive. Caller-defined
    attributes travel untouched in ``extra``.
    """

    id: Hashable
    start: Any
    end: Any
    name: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TimelineItem":
        if "id" not in data:
            raise KeyError("Timeline item mapping requires an 'id' key")
        extra = {key: value for key, value in data.items() if key not in _CORE_FIELDS}
        return cls(
            id=data["id"],
            start=data.get("start"),
            end=data.get("end"),
            name=str(data.get("name") or ""),
            extra=extra,
        )

    def to_mapping(self) -> dict[str, Any]:
        payload = dict(self.extra)
        payload.update(id=self.id, start=self.start, end=self.end, name=self.name)
        return payload

    @property
    def start_timestamp(self) -> float:
        return to_timestamp(self.start)

    @property
    def end_timestamp(self) -> float:
        return to_timestamp(self.end)


def to_timestamp(value: Any) -> float:
    """Return POSIX seconds for a date-like ``value`` or ``nan`` when it cannot be parsed.

    Plain dates and naive datetimes are interpreted as UTC so results do not
    depend on the host timezone.
    """

    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, datetime):
        return _ensure_utc(value).timestamp()
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc).timestamp()
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        parsed = parse_datetime(value)
        return parsed.timestamp() if parsed is not None else math.nan
    return math.nan


def to_datetime(value: Any) -> datetime | None:
    """Return an aware UTC datetime for ``value`` or ``None`` when it is unparsable."""

    if isinstance(value, datetime):
        return _ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        return parse_datetime(value)
    timestamp = to_timestamp(value)
    if math.isnan(timestamp) or math.isinf(timestamp):
        return None
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def to_date(value: Any) -> date | None:
    parsed = to_datetime(value)
    return parsed.date() if parsed is not None else None


def parse_datetime(value: str) -> datetime | None:
    text = value.strip()
    if not text:
        return None
    cleaned = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError:
        return None
    return _ensure_utc(parsed)


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def coerce_items(raw_items: Iterable[TimelineItem | Mapping[str, Any]]) -> List[TimelineItem]:
    """Normalize a mix of records and plain mappings into :class:`TimelineItem` objects."""

    items: List[TimelineItem] = []
    for raw in raw_items:
        if isinstance(raw, TimelineItem):
            items.append(raw)
        else:
            items.append(TimelineItem.from_mapping(raw))
    return items


def apply_item_update(
    items: Iterable[TimelineItem],
    item_id: Hashable,
    fields: Mapping[str, Any],
) -> List[TimelineItem]:
    """Return a new item list with ``fields`` merged into the item matching ``item_id``.

    Unknown field names are merged into ``extra``. Items are replaced, never
    mutated, and the input order is preserved.
    """

    core = {key: value for key, value in fields.items() if key in _CORE_FIELDS and key != "id"}
    extra = {key: value for key, value in fields.items() if key not in _CORE_FIELDS}

    updated: List[TimelineItem] = []
    matched = False
    for item in items:
        if item.id == item_id:
            matched = True
            changes: dict[str, Any] = dict(core)
            if extra:
                changes["extra"] = {**item.extra, **extra}
            updated.append(replace(item, **changes))
        else:
            updated.append(item)

    if not matched:
        LOGGER.warning("Ignoring update for unknown timeline item %r", item_id)
    return updated


__all__ = [
    "DAY_SECONDS",
    "TimelineItem",
    "apply_item_update",
    "coerce_items",
    "parse_datetime",
    "to_date",
    "to_datetime",
    "to_timestamp",
]
