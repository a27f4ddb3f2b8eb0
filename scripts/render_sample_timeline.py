#!/usr/bin/env python3
"""Generate a sample timeline preview PNG from built-in demo items."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from timeline_layout import TimelineItem, TimelineLayout, Viewport
from timeline_layout.rendering import PreviewConfig, TimelinePreviewRenderer


PREVIEWS_DIR = PROJECT_ROOT / "previews"

SAMPLE_ITEMS = [
    TimelineItem(id=1, start="2021-01-14", end="2021-02-22", name="First item"),
    TimelineItem(id=2, start="2021-02-02", end="2021-05-31", name="Second item"),
    TimelineItem(id=3, start="2021-01-05", end="2021-01-05", name="Another item"),
    TimelineItem(id=4, start="2021-01-03", end="2021-01-05", name="Another item"),
    TimelineItem(id=5, start="2021-02-23", end="2021-03-13", name="Fifth item"),
    TimelineItem(id=6, start="2021-01-12", end="2021-02-16", name="Sixth item"),
    TimelineItem(id=7, start="2021-01-19", end="2021-01-23", name="Seventh item"),
    TimelineItem(id=8, start="2021-03-28", end="2021-04-03", name="Eighth item"),
    TimelineItem(id=9, start="2021-06-03", end="2021-06-17", name="Ninth item"),
    TimelineItem(id=10, start="2021-04-14", end="2021-04-29", name="Tenth item"),
]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=PREVIEWS_DIR,
        help="Directory for the preview PNG (defaults to previews/).",
    )
    parser.add_argument("--zoom", type=float, default=1.0, help="Zoom level of the preview.")
    parser.add_argument("--focal", type=float, default=50.0, help="Focal percentage of the preview.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    timeline = TimelineLayout(SAMPLE_ITEMS)
    renderer = TimelinePreviewRenderer(PreviewConfig(preview_output_dir=args.output_dir))
    viewport = Viewport(zoom_level=args.zoom, focal_percent=args.focal)
    renderer.render(timeline, viewport, preview_name="timeline_sample")
    print(f"Wrote preview to {args.output_dir / 'timeline_sample.png'}")


if __name__ == "__main__":
    main()
