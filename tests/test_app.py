from __future__ import annotations

import io
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from timeline_layout import app

ITEMS = [
    {"id": 1, "start": "2021-01-15", "end": "2021-01-20", "name": "Design"},
    {"id": 2, "start": "2021-01-18", "end": "2021-01-30", "name": "Build"},
    {"id": 3, "start": "2021-02-05", "end": "2021-02-10", "name": "Launch"},
]


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(os, "environ", {k: v for k, v in os.environ.items() if not k.startswith("TIMELINE_")})


def _write_items(tmp_path: Path, payload: Any) -> Path:
    path = tmp_path / "items.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class FakeRenderer:
    def __init__(self, config: Any, calls: list[dict[str, Any]]) -> None:
        self.config = config
        self.calls = calls

    def render(self, timeline: Any, viewport: Any = None, *, preview_name: str | None = None) -> None:
        self.calls.append({"items": len(timeline.items), "viewport": viewport, "name": preview_name})


def test_main_prints_lane_summary(tmp_path: Path) -> None:
    stdout = io.StringIO()

    assert app.main([str(_write_items(tmp_path, ITEMS))], stdout=stdout) == 0

    lines = stdout.getvalue().splitlines()
    assert lines[0] == "3 items in 2 lanes"
    assert lines[1].startswith("Span 2021-01-13 to 2021-02-12 (30 days), zoom 100%")
    assert lines[2] == "Lane 1: Design [6.7%+20.0%], Launch [76.7%+20.0%]"
    assert lines[3] == "Lane 2: Build [16.7%+43.3%]"


def test_main_renders_preview_when_requested(tmp_path: Path) -> None:
    calls: list[dict[str, Any]] = []

    app.main(
        [
            str(_write_items(tmp_path, ITEMS)),
            "--zoom",
            "9",
            "--focal",
            "25",
            "--preview-output-dir",
            str(tmp_path / "out"),
            "--preview-name",
            "demo",
        ],
        renderer_factory=lambda config: FakeRenderer(config, calls),
        stdout=io.StringIO(),
    )

    assert len(calls) == 1
    assert calls[0]["items"] == 3
    assert calls[0]["name"] == "demo"
    assert calls[0]["viewport"] == app.Viewport(zoom_level=5.0, focal_percent=25.0)


def test_main_skips_preview_by_default(tmp_path: Path) -> None:
    calls: list[dict[str, Any]] = []

    app.main(
        [str(_write_items(tmp_path, ITEMS))],
        renderer_factory=lambda config: FakeRenderer(config, calls),
        stdout=io.StringIO(),
    )

    assert calls == []


def test_empty_item_file_uses_now(tmp_path: Path) -> None:
    stdout = io.StringIO()

    app.main(
        [str(_write_items(tmp_path, []))],
        now_provider=lambda: datetime(2024, 6, 1, tzinfo=timezone.utc),
        stdout=stdout,
    )

    lines = stdout.getvalue().splitlines()
    assert lines[0] == "0 items in 0 lanes"
    assert lines[1].startswith("Span 2024-05-30 to 2024-06-03")


def test_env_file_and_flags_feed_settings(tmp_path: Path) -> None:
    env_file = tmp_path / "custom.env"
    env_file.write_text("TIMELINE_ZOOM_MAX=3\n", encoding="utf-8")
    parser = app.build_parser()

    settings = app.resolve_settings(
        parser.parse_args(["items.json", "--env-file", str(env_file), "--zoom", "4", "--padding-days", "0"])
    )

    assert settings.timeline.zoom.maximum == 3.0
    assert settings.timeline.boundary_padding_days == 0
    assert settings.viewport.zoom_level == 3.0
    assert settings.preview_output_dir is None


@pytest.mark.parametrize(
    "payload",
    [{"id": 1}, [1, 2], [{"start": "2021-01-01"}]],
)
def test_malformed_item_files_exit_with_usage_error(tmp_path: Path, payload: Any) -> None:
    with pytest.raises(SystemExit) as excinfo:
        app.main([str(_write_items(tmp_path, payload))], stdout=io.StringIO())

    assert excinfo.value.code == 2


def test_invalid_settings_exit_with_usage_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TIMELINE_ZOOM_MIN", "oops")

    with pytest.raises(SystemExit):
        app.main([str(_write_items(tmp_path, ITEMS))], stdout=io.StringIO())
