"""Overall calendar span and day arithmetic for a set of timeline items."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from .items import DAY_SECONDS, TimelineItem, to_datetime, to_timestamp

LOGGER = logging.getLogger(__name__)

DEFAULT_PADDING_DAYS = 2


@dataclass(frozen=True)
class TimelineBoundaries:
    timeline_start: datetime
    timeline_end: datetime

    @property
    def total_days(self) -> float:
        return total_days(self.timeline_start, self.timeline_end)


def days_between(start: Any, end: Any) -> float:
    """Return the whole number of days from ``start`` to ``end``, rounded up.

    Negative spans yield negative counts. Any unparsable endpoint yields ``nan``.
    """

    delta = to_timestamp(end) - to_timestamp(start)
    if math.isnan(delta) or math.isinf(delta):
        return delta
    return math.ceil(delta / DAY_SECONDS)


def total_days(timeline_start: Any, timeline_end: Any) -> float:
    return days_between(timeline_start, timeline_end)


def normalization_days(days: float) -> float:
    """Return ``days`` for use as a divisor, treating an empty span as one day."""

    return 1 if days == 0 else days


def shift_datetime(moment: datetime, delta: timedelta) -> datetime:
    """Add ``delta`` to ``moment``, saturating at the ends of the datetime range."""

    try:
        return moment + delta
    except OverflowError:
        limit = datetime.max if delta > timedelta(0) else datetime.min
        return limit.replace(tzinfo=timezone.utc)


def calculate_boundaries(
    items: Iterable[TimelineItem],
    padding_days: float = DEFAULT_PADDING_DAYS,
    *,
    now: Optional[datetime] = None,
) -> TimelineBoundaries:
    """Return the padded calendar span covering every parsable item date.

    When no item carries a parsable date the span is centred on ``now``
    (defaulting to the current UTC time), so two well-formed datetimes are
    always returned.
    """

    moments = []
    for item in items:
        for value in (item.start, item.end):
            # numbers outside the datetime range count as unparsable
            moment = to_datetime(value)
            if moment is not None:
                moments.append(moment)

    padding = timedelta(days=padding_days)
    lowest = min(moments) if moments else None
    highest = max(moments) if moments else None

    if lowest is None or highest is None:
        reference = now or datetime.now(tz=timezone.utc)
        if reference.tzinfo is None:
            reference = reference.replace(tzinfo=timezone.utc)
        LOGGER.debug("No parsable item dates; centring timeline on %s", reference.isoformat())
        lowest = highest = reference

    return TimelineBoundaries(
        timeline_start=shift_datetime(lowest, -padding),
        timeline_end=shift_datetime(highest, padding),
    )


__all__ = [
    "DEFAULT_PADDING_DAYS",
    "TimelineBoundaries",
    "calculate_boundaries",
    "days_between",
    "normalization_days",
    "shift_datetime",
    "total_days",
]
