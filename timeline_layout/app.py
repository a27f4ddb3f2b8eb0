"""Command line entry point for laying out a timeline from a JSON item file."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, TextIO

from .config import ConfigError, TimelineSettings, load_env_file
from .items import TimelineItem, coerce_items
from .rendering import PreviewConfig, TimelinePreviewRenderer
from .timeline import TimelineLayout
from .viewport import CENTER_PERCENT, Viewport, format_zoom_level

LOGGER = logging.getLogger(__name__)
DEFAULT_PREVIEW_NAME = "timeline"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Timeline lane layout")
    parser.add_argument(
        "items_file",
        type=Path,
        help="JSON file holding an array of items with id, start, end and name.",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Optional path to a .env file loaded before settings are read.",
    )
    parser.add_argument(
        "--padding-days",
        type=float,
        default=None,
        help="Days of padding around the item span (overrides TIMELINE_PADDING_DAYS).",
    )

    viewport_group = parser.add_argument_group("Viewport options")
    viewport_group.add_argument(
        "--zoom",
        type=float,
        default=None,
        help="Zoom level; clamped to the configured range. Defaults to the configured default.",
    )
    viewport_group.add_argument(
        "--focal",
        type=float,
        default=CENTER_PERCENT,
        help="Focal point as a percentage (0-100) of the full span.",
    )

    preview_group = parser.add_argument_group("Preview options")
    preview_group.add_argument(
        "--preview-output-dir",
        type=Path,
        default=None,
        help="Directory where a PNG preview of the layout is written.",
    )
    preview_group.add_argument(
        "--preview-name",
        type=str,
        default=DEFAULT_PREVIEW_NAME,
        help="File stem of the PNG preview.",
    )

    return parser


@dataclass
class AppSettings:
    items_file: Path
    timeline: TimelineSettings
    viewport: Viewport
    preview_output_dir: Path | None
    preview_name: str


def resolve_settings(args: argparse.Namespace) -> AppSettings:
    load_env_file(args.env_file)
    timeline_settings = TimelineSettings.from_env()
    if args.padding_days is not None:
        timeline_settings = replace(timeline_settings, boundary_padding_days=args.padding_days)

    zoom = args.zoom if args.zoom is not None else timeline_settings.zoom.default
    viewport = Viewport(focal_percent=args.focal).with_zoom(zoom, levels=timeline_settings.zoom)

    return AppSettings(
        items_file=args.items_file,
        timeline=timeline_settings,
        viewport=viewport,
        preview_output_dir=args.preview_output_dir,
        preview_name=args.preview_name,
    )


def load_items(path: Path) -> List[TimelineItem]:
    """Read timeline items from a JSON array of objects."""

    payload: Any = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"{path.name} must contain a JSON array of items")
    for index, entry in enumerate(payload):
        if not isinstance(entry, dict):
            raise ValueError(f"Item #{index} in {path.name} is not an object")
    return coerce_items(payload)


def describe_layout(timeline: TimelineLayout, viewport: Viewport) -> List[str]:
    """Return a printable, one-line-per-lane summary of the layout."""

    bounds = timeline.boundaries
    window = timeline.visible_range(viewport)
    summary = timeline.summary()
    lines = [
        f"{summary.item_count} items in {summary.lane_count} lanes",
        (
            f"Span {bounds.timeline_start.date().isoformat()} to "
            f"{bounds.timeline_end.date().isoformat()} ({timeline.total_days} days), "
            f"zoom {format_zoom_level(viewport.zoom_level)}, "
            f"visible {window.visible_start.date().isoformat()} to "
            f"{window.visible_end.date().isoformat()}"
        ),
    ]
    for lane in timeline.positions(viewport):
        if not lane:
            continue
        entries = ", ".join(
            f"{entry.item.name or entry.item.id} "
            f"[{entry.position.left_percent:.1f}%+{entry.position.width_percent:.1f}%]"
            for entry in lane
        )
        lines.append(f"Lane {lane[0].lane + 1}: {entries}")
    return lines


def main(
    argv: Optional[Iterable[str]] = None,
    *,
    renderer_factory: Callable[..., TimelinePreviewRenderer] = TimelinePreviewRenderer,
    now_provider: Optional[Callable[[], datetime]] = None,
    stdout: TextIO | None = None,
) -> int:
    logging.basicConfig(level=logging.INFO)
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = resolve_settings(args)
    except ConfigError as exc:
        parser.error(str(exc))

    try:
        items = load_items(settings.items_file)
    except (OSError, ValueError, KeyError) as exc:
        parser.error(f"Could not load items from {settings.items_file}: {exc}")

    now = now_provider() if now_provider is not None else None
    timeline = TimelineLayout(items, settings=settings.timeline, now=now)
    LOGGER.info(
        "Loaded %d items from %s spanning %s to %s",
        len(items),
        settings.items_file,
        timeline.boundaries.timeline_start.isoformat(),
        timeline.boundaries.timeline_end.isoformat(),
    )

    for line in describe_layout(timeline, settings.viewport):
        print(line, file=stdout)

    if settings.preview_output_dir is not None:
        renderer = renderer_factory(PreviewConfig(preview_output_dir=settings.preview_output_dir))
        renderer.render(timeline, settings.viewport, preview_name=settings.preview_name)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
