"""Renderer for composing a preview image of the laid-out timeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from PIL import Image, ImageDraw, ImageFont

from ..timeline import PositionedItem, TimelineLayout
from ..viewport import MonthMarker, Viewport, format_zoom_level
from .layout import DEFAULT_PREVIEW_LAYOUT, PreviewLayout

LOGGER = logging.getLogger(__name__)


def _font_length(font: ImageFont.ImageFont, text: str) -> float:
    try:
        return font.getlength(text)  # type: ignore[attr-defined]
    except AttributeError:  # pragma: no cover - fallback for older Pillow
        dummy_img = Image.new("L", (1, 1), color=255)
        draw = ImageDraw.Draw(dummy_img)
        return float(draw.textlength(text, font=font))


def _load_font(path_candidates: Sequence[Path], size: int) -> ImageFont.ImageFont:
    for candidate in path_candidates:
        if candidate and candidate.exists():
            return ImageFont.truetype(str(candidate), size=size)
    return ImageFont.load_default()


def _default_font_candidates(bold: bool) -> List[Path]:
    names = [
        "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf",
        "Arial Bold.ttf" if bold else "Arial.ttf",
    ]
    search_dirs = [
        Path("/usr/share/fonts/truetype/dejavu"),
        Path("/usr/share/fonts"),
        Path("/Library/Fonts"),
        Path.home() / ".fonts",
    ]
    return [directory / name for name in names for directory in search_dirs]


def _font_size(font: ImageFont.ImageFont) -> int:
    return int(getattr(font, "size", 10))


def _truncate_line(text: str, font: ImageFont.ImageFont, max_width: float) -> str:
    if _font_length(font, text) <= max_width:
        return text
    ellipsis = "…"
    current = text
    while current and _font_length(font, current + ellipsis) > max_width:
        current = current[:-1].rstrip()
    return (current + ellipsis) if current else ""


@dataclass
class PreviewConfig:
    """Configuration values and font management for the preview renderer."""

    layout: PreviewLayout = DEFAULT_PREVIEW_LAYOUT
    font_regular_path: Path | None = None
    font_bold_path: Path | None = None
    preview_output_dir: Path | None = None
    background_color: int = 255
    foreground_color: int = 17
    secondary_color: int = 90
    grid_color: int = 210
    lane_fill_color: int = 245
    item_fill_color: int = 200
    title_font_size: int = 20
    label_font_size: int = 12
    item_font_size: int = 13

    def __post_init__(self) -> None:
        if self.preview_output_dir is not None:
            self.preview_output_dir = Path(self.preview_output_dir)
            self.preview_output_dir.mkdir(parents=True, exist_ok=True)

    def _font_candidates(self, bold: bool) -> List[Path]:
        provided = self.font_bold_path if bold else self.font_regular_path
        candidates: List[Path] = []
        if provided is not None:
            candidates.append(Path(provided))
        candidates.extend(_default_font_candidates(bold))
        return candidates

    def font(self, size: int, *, bold: bool = False) -> ImageFont.ImageFont:
        return _load_font(self._font_candidates(bold), size)


class TimelinePreviewRenderer:
    """Rasterize lanes, item bars and the month ruler into a grayscale image."""

    def __init__(self, config: PreviewConfig | None = None) -> None:
        self.config = config or PreviewConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def render(
        self,
        timeline: TimelineLayout,
        viewport: Viewport | None = None,
        *,
        preview_name: str | None = None,
    ) -> Image.Image:
        """Render ``timeline`` as seen through ``viewport``.

        Args:
            timeline: Laid-out item set to draw.
            viewport: Zoom and focal point; defaults to the timeline's
                configured starting viewport.
            preview_name: Optional file stem used when a preview directory is
                configured.
        Returns:
            A Pillow image of the timeline.
        """

        cfg = self.config
        layout = cfg.layout
        viewport = viewport or timeline.default_viewport()
        positioned = timeline.positions(viewport)
        markers = timeline.month_markers(viewport)

        image = Image.new(
            "L",
            (layout.canvas_width, layout.canvas_height(len(positioned))),
            color=cfg.background_color,
        )
        draw = ImageDraw.Draw(image)

        self._draw_header(draw, timeline, viewport)
        self._draw_lanes(draw, len(positioned))
        self._draw_ruler(draw, markers, image.height)
        for lane in positioned:
            self._draw_items(draw, lane)

        if cfg.preview_output_dir is not None and preview_name is not None:
            output_path = cfg.preview_output_dir / f"{preview_name}.png"
            image.save(output_path)
            LOGGER.info("Wrote timeline preview to %s", output_path)

        return image

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------
    def _draw_header(self, draw: ImageDraw.ImageDraw, timeline: TimelineLayout, viewport: Viewport) -> None:
        cfg = self.config
        layout = cfg.layout
        title_font = cfg.font(cfg.title_font_size, bold=True)
        label_font = cfg.font(cfg.label_font_size)

        summary = timeline.summary()
        draw.text(
            (layout.padding_x, 14),
            f"{summary.item_count} items in {summary.lane_count} lanes",
            font=title_font,
            fill=cfg.foreground_color,
        )
        zoom_text = f"Zoom {format_zoom_level(viewport.zoom_level)}"
        zoom_x = layout.track_right - _font_length(label_font, zoom_text)
        draw.text((zoom_x, 20), zoom_text, font=label_font, fill=cfg.secondary_color)

    def _draw_lanes(self, draw: ImageDraw.ImageDraw, lane_count: int) -> None:
        cfg = self.config
        layout = cfg.layout
        label_font = cfg.font(cfg.label_font_size)

        for lane_index in range(lane_count):
            top = layout.lane_top(lane_index)
            draw.rectangle(
                (layout.track_left, top, layout.track_right, top + layout.lane_height),
                fill=cfg.lane_fill_color,
            )
            draw.text(
                (layout.padding_x, top + layout.lane_height // 2 - _font_size(label_font) // 2),
                f"Lane {lane_index + 1}",
                font=label_font,
                fill=cfg.secondary_color,
            )

    def _draw_ruler(self, draw: ImageDraw.ImageDraw, markers: Sequence[MonthMarker], height: int) -> None:
        cfg = self.config
        layout = cfg.layout
        label_font = cfg.font(cfg.label_font_size)
        bottom = height - layout.footer_height

        draw.line(
            (layout.track_left, layout.lanes_top - 1, layout.track_right, layout.lanes_top - 1),
            fill=cfg.grid_color,
            width=layout.grid_line_thickness,
        )
        for marker in markers:
            if not 0 <= marker.left_percent <= 100:
                continue
            x = layout.x_for_percent(marker.left_percent)
            draw.line((x, layout.ruler_top, x, bottom), fill=cfg.grid_color, width=layout.grid_line_thickness)
            draw.text((x + 4, layout.ruler_top + 6), marker.label, font=label_font, fill=cfg.secondary_color)

    def _draw_items(self, draw: ImageDraw.ImageDraw, lane: Sequence[PositionedItem]) -> None:
        cfg = self.config
        layout = cfg.layout
        item_font = cfg.font(cfg.item_font_size)

        for entry in lane:
            span = layout.span_for_position(entry.position.left_percent, entry.position.width_percent)
            if span is None:
                continue
            x1, x2 = span
            top = layout.lane_top(entry.lane) + 4
            bottom = top + layout.lane_height - 8
            draw.rounded_rectangle(
                (x1, top, x2, bottom),
                radius=layout.item_corner_radius,
                fill=cfg.item_fill_color,
                outline=cfg.foreground_color,
                width=1,
            )
            label = _truncate_line(entry.item.name, item_font, x2 - x1 - 2 * layout.item_padding_x)
            if label:
                draw.text(
                    (x1 + layout.item_padding_x, top + (bottom - top) // 2 - _font_size(item_font) // 2),
                    label,
                    font=item_font,
                    fill=cfg.foreground_color,
                )


__all__ = ["PreviewConfig", "TimelinePreviewRenderer"]
