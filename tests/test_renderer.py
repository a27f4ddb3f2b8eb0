from __future__ import annotations

from pathlib import Path

import pytest

from timeline_layout import TimelineLayout, TimelineSettings, Viewport, ZoomLevels
from timeline_layout.rendering import DEFAULT_PREVIEW_LAYOUT, PreviewConfig, PreviewLayout, TimelinePreviewRenderer

ITEMS = [{"id": 1, "start": "2021-01-01", "end": "2021-01-10", "name": "Alpha"}]


def test_render_returns_grayscale_canvas() -> None:
    image = TimelinePreviewRenderer().render(TimelineLayout(ITEMS))

    assert image.mode == "L"
    assert image.size == (DEFAULT_PREVIEW_LAYOUT.canvas_width, DEFAULT_PREVIEW_LAYOUT.canvas_height(1))


def test_render_draws_item_bars_inside_their_lane() -> None:
    config = PreviewConfig()
    layout = config.layout
    timeline = TimelineLayout(ITEMS)
    position = timeline.positions(Viewport())[0][0].position

    image = TimelinePreviewRenderer(config).render(timeline)

    x1, _ = layout.span_for_position(position.left_percent, position.width_percent)
    middle_y = layout.lane_top(0) + layout.lane_height // 2
    assert image.getpixel((int(x1) + 4, middle_y)) == config.item_fill_color
    assert image.getpixel((layout.track_left + 2, middle_y)) == config.lane_fill_color


def test_render_saves_preview(tmp_path: Path) -> None:
    output_dir = tmp_path / "previews"
    renderer = TimelinePreviewRenderer(PreviewConfig(preview_output_dir=output_dir))

    renderer.render(TimelineLayout(ITEMS), Viewport(zoom_level=2.0), preview_name="zoomed")

    assert (output_dir / "zoomed.png").exists()


def test_canvas_grows_with_lane_count() -> None:
    layout = PreviewLayout()

    assert layout.canvas_height(0) == layout.min_canvas_height
    assert layout.canvas_height(10) == layout.lane_top(10) + layout.footer_height


@pytest.mark.parametrize(
    "left, width, expected",
    [
        (float("nan"), 10.0, None),
        (120.0, 10.0, None),
        (-50.0, 10.0, None),
        (-10.0, 20.0, (DEFAULT_PREVIEW_LAYOUT.track_left, DEFAULT_PREVIEW_LAYOUT.x_for_percent(10.0))),
    ],
)
def test_span_for_position_clips_to_track(left: float, width: float, expected: tuple[float, float] | None) -> None:
    assert DEFAULT_PREVIEW_LAYOUT.span_for_position(left, width) == expected


def test_render_defaults_to_the_configured_starting_zoom() -> None:
    settings = TimelineSettings(zoom=ZoomLevels(default=2.0))
    timeline = TimelineLayout(ITEMS, settings=settings)
    renderer = TimelinePreviewRenderer()

    implicit = renderer.render(timeline)
    explicit = renderer.render(timeline, Viewport(zoom_level=2.0))

    assert implicit.tobytes() == explicit.tobytes()
    assert implicit.tobytes() != renderer.render(timeline, Viewport()).tobytes()
