"""Pillow preview of the laid-out timeline."""

from .layout import DEFAULT_PREVIEW_LAYOUT, PreviewLayout
from .renderer import PreviewConfig, TimelinePreviewRenderer

__all__ = [
    "DEFAULT_PREVIEW_LAYOUT",
    "PreviewConfig",
    "PreviewLayout",
    "TimelinePreviewRenderer",
]
