from __future__ import annotations

from datetime import date, datetime
from unittest import mock

import pytest

from timeline_layout.interaction import (
    DateRange,
    DragEdge,
    DragInteractionController,
    DragState,
    PointerEventSource,
)
from timeline_layout.interaction.drag import round_half_up
from timeline_layout.items import TimelineItem

ITEM = TimelineItem(id=1, start="2021-01-10", end="2021-01-20", name="Sprint")


@pytest.fixture
def pointer() -> PointerEventSource:
    return PointerEventSource()


@pytest.fixture
def on_update() -> mock.Mock:
    return mock.Mock()


@pytest.fixture
def controller(pointer: PointerEventSource, on_update: mock.Mock) -> DragInteractionController:
    return DragInteractionController(ITEM, on_update, pointer_events=pointer, pixels_per_day=50)


def test_dragging_start_edge_commits_on_release(
    controller: DragInteractionController, pointer: PointerEventSource, on_update: mock.Mock
) -> None:
    assert controller.begin(DragEdge.START, 100)
    assert controller.state is DragState.DRAGGING
    assert pointer.listener_count() == 2

    pointer.move(200)

    assert controller.preview == DateRange(date(2021, 1, 12), date(2021, 1, 20))
    assert controller.item.start == "2021-01-10"
    on_update.assert_not_called()

    pointer.release(200)

    on_update.assert_called_once_with(1, {"start": "2021-01-12", "end": "2021-01-20"})
    assert controller.state is DragState.IDLE
    assert pointer.listener_count() == 0


def test_dragging_end_edge_backwards(
    controller: DragInteractionController, pointer: PointerEventSource, on_update: mock.Mock
) -> None:
    controller.begin("end", 500)
    pointer.release(350)

    on_update.assert_called_once_with(1, {"start": "2021-01-10", "end": "2021-01-17"})


def test_release_position_is_applied_before_commit(
    controller: DragInteractionController, pointer: PointerEventSource, on_update: mock.Mock
) -> None:
    controller.begin(DragEdge.END, 0)
    pointer.move(100)
    pointer.release(250)

    on_update.assert_called_once_with(1, {"start": "2021-01-10", "end": "2021-01-25"})


@pytest.mark.parametrize(
    "edge, anchor, pointer_x, expected",
    [
        (DragEdge.START, 100, 100 + 50 * 100, DateRange(date(2021, 1, 19), date(2021, 1, 20))),
        (DragEdge.END, 0, -5000, DateRange(date(2021, 1, 10), date(2021, 1, 11))),
        (DragEdge.START, 100, 100 + 50 * 10, DateRange(date(2021, 1, 19), date(2021, 1, 20))),
        (DragEdge.END, 100, 100 - 50 * 10, DateRange(date(2021, 1, 10), date(2021, 1, 11))),
    ],
)
def test_edges_never_cross(
    controller: DragInteractionController,
    pointer: PointerEventSource,
    edge: DragEdge,
    anchor: float,
    pointer_x: float,
    expected: DateRange,
) -> None:
    controller.begin(edge, anchor)
    pointer.move(pointer_x)

    assert controller.preview == expected
    assert controller.preview.start < controller.preview.end


def test_sub_day_movement_does_not_commit(
    controller: DragInteractionController, pointer: PointerEventSource, on_update: mock.Mock
) -> None:
    controller.begin(DragEdge.START, 100)
    pointer.move(124)

    assert controller.preview == DateRange(date(2021, 1, 10), date(2021, 1, 20))

    pointer.release(124)

    on_update.assert_not_called()
    assert not controller.is_dragging


def test_half_a_day_rounds_up(controller: DragInteractionController, pointer: PointerEventSource) -> None:
    controller.begin(DragEdge.START, 100)
    pointer.move(125)

    assert controller.preview.start == date(2021, 1, 11)


def test_returning_to_the_anchor_reverts_preview(
    controller: DragInteractionController, pointer: PointerEventSource, on_update: mock.Mock
) -> None:
    controller.begin(DragEdge.END, 100)
    pointer.move(300)
    pointer.move(110)

    assert controller.preview == DateRange(date(2021, 1, 10), date(2021, 1, 20))

    pointer.release(110)
    on_update.assert_not_called()


def test_cancel_discards_the_drag(
    controller: DragInteractionController, pointer: PointerEventSource, on_update: mock.Mock
) -> None:
    controller.begin(DragEdge.START, 0)
    pointer.move(200)
    controller.cancel()
    pointer.release(200)

    on_update.assert_not_called()
    assert pointer.listener_count() == 0
    assert controller.preview == DateRange(date(2021, 1, 10), date(2021, 1, 20))


def test_close_mid_drag_releases_listeners(
    controller: DragInteractionController, pointer: PointerEventSource, on_update: mock.Mock
) -> None:
    controller.begin(DragEdge.START, 0)

    controller.close()

    assert pointer.listener_count() == 0
    on_update.assert_not_called()


def test_second_begin_is_refused(controller: DragInteractionController, pointer: PointerEventSource) -> None:
    assert controller.begin(DragEdge.START, 0)
    assert not controller.begin(DragEdge.END, 0)
    assert controller.session.edge is DragEdge.START
    assert pointer.listener_count() == 2


def test_blocked_controller_refuses_to_drag(pointer: PointerEventSource, on_update: mock.Mock) -> None:
    controller = DragInteractionController(ITEM, on_update, pointer_events=pointer, is_blocked=lambda: True)

    assert not controller.begin(DragEdge.START, 0)
    assert pointer.listener_count() == 0


def test_unparsable_dates_refuse_to_drag(pointer: PointerEventSource, on_update: mock.Mock) -> None:
    item = TimelineItem(id=2, start="not-a-date", end="2021-01-20")
    controller = DragInteractionController(item, on_update, pointer_events=pointer)

    assert not controller.begin(DragEdge.END, 0)
    assert controller.preview is None


def test_date_values_are_committed_as_dates(pointer: PointerEventSource, on_update: mock.Mock) -> None:
    item = TimelineItem(id=3, start=date(2021, 1, 10), end=date(2021, 1, 20))
    controller = DragInteractionController(item, on_update, pointer_events=pointer, pixels_per_day=10)

    controller.begin(DragEdge.END, 0)
    pointer.release(30)

    on_update.assert_called_once_with(3, {"start": date(2021, 1, 10), "end": date(2021, 1, 23)})


def test_pixels_per_day_must_be_positive(pointer: PointerEventSource, on_update: mock.Mock) -> None:
    with pytest.raises(ValueError):
        DragInteractionController(ITEM, on_update, pointer_events=pointer, pixels_per_day=0)


def test_sync_item_during_drag_keeps_the_snapshot(
    controller: DragInteractionController, pointer: PointerEventSource, on_update: mock.Mock
) -> None:
    controller.begin(DragEdge.START, 0)
    controller.sync_item(TimelineItem(id=1, start="2021-01-01", end="2021-01-31", name="Sprint"))
    pointer.release(100)

    on_update.assert_called_once_with(1, {"start": "2021-01-12", "end": "2021-01-20"})


@pytest.mark.parametrize("value, expected", [(0.5, 1), (0.49, 0), (-0.5, 0), (-0.6, -1), (2.5, 3)])
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected


def test_untouched_edge_is_committed_as_stored(pointer: PointerEventSource, on_update: mock.Mock) -> None:
    item = TimelineItem(id=1, start="2021-01-01T09:00:00Z", end="2021-01-01T18:30:00Z")
    controller = DragInteractionController(item, on_update, pointer_events=pointer, pixels_per_day=10)

    controller.begin(DragEdge.END, 0)
    pointer.release(50)

    on_update.assert_called_once_with(1, {"start": "2021-01-01T09:00:00Z", "end": "2021-01-06T18:30:00Z"})


@pytest.mark.parametrize(
    "stored, expected",
    [
        ("2021-01-10T08:15:00", "2021-01-08T08:15:00"),
        ("2021-01-10T08:15:00+02:00", "2021-01-08T08:15:00+02:00"),
        (datetime(2021, 1, 10, 8, 15), datetime(2021, 1, 8, 8, 15)),
        (1610236800.0, 1610236800.0 - 2 * 86400),
    ],
)
def test_dragged_edge_keeps_its_format_and_time(
    pointer: PointerEventSource, on_update: mock.Mock, stored: object, expected: object
) -> None:
    item = TimelineItem(id=4, start=stored, end="2021-01-20")
    controller = DragInteractionController(item, on_update, pointer_events=pointer, pixels_per_day=10)

    controller.begin(DragEdge.START, 100)
    pointer.release(80)

    on_update.assert_called_once_with(4, {"start": expected, "end": "2021-01-20"})
