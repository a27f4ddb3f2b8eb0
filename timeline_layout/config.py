"""Configuration for the timeline engine, read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional, TypeVar

from .boundaries import DEFAULT_PADDING_DAYS
from .viewport import DEFAULT_WHEEL_SENSITIVITY, ZoomLevels

__all__ = [
    "ConfigError",
    "DEFAULT_AUTOSAVE_DELAY",
    "DEFAULT_MAX_NAME_LENGTH",
    "DEFAULT_MIN_NAME_LENGTH",
    "DEFAULT_PADDING_DAYS",
    "DEFAULT_PIXELS_PER_DAY",
    "ENV_PREFIX",
    "TimelineSettings",
    "load_env_file",
]

ENV_PREFIX = "TIMELINE_"
DEFAULT_PIXELS_PER_DAY = 50.0
DEFAULT_AUTOSAVE_DELAY = 2.0
DEFAULT_MIN_NAME_LENGTH = 1
DEFAULT_MAX_NAME_LENGTH = 100

T = TypeVar("T")


class ConfigError(RuntimeError):
    """Raised when configuration values are malformed."""


def load_env_file(env_file: str | Path | None = None) -> None:
    """Load environment variables from ``env_file`` if provided.

    When ``env_file`` is :data:`None`, the loader looks for a ``.env`` file in the
    current working directory. Existing environment variables are never overwritten.
    """

    path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
    if not path.exists() or not path.is_file():
        return

    for key, value in _iter_env_entries(path):
        os.environ.setdefault(key, value)


def _iter_env_entries(path: Path) -> Iterable[tuple[str, str]]:
    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ConfigError(
                f"Invalid line in {path.name!r}: {raw_line!r}. Expected KEY=VALUE format."
            )
        key, raw_value = line.split("=", 1)
        key = key.strip()
        value = raw_value.strip().strip('"').strip("'")
        if not key:
            raise ConfigError(f"Environment variable key is missing in line: {raw_line!r}")
        yield key, value


def _read(
    environ: Mapping[str, str],
    name: str,
    default: T,
    convert: Callable[[str], T],
) -> T:
    key = ENV_PREFIX + name
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return convert(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{key} must be a {convert.__name__}, got {raw!r}") from exc


@dataclass(frozen=True)
class TimelineSettings:
    """Tunable constants of the layout engine and its interaction controllers."""

    zoom: ZoomLevels = field(default_factory=ZoomLevels)
    wheel_sensitivity: float = DEFAULT_WHEEL_SENSITIVITY
    pixels_per_day: float = DEFAULT_PIXELS_PER_DAY
    rename_autosave_delay: float = DEFAULT_AUTOSAVE_DELAY
    name_min_length: int = DEFAULT_MIN_NAME_LENGTH
    name_max_length: int = DEFAULT_MAX_NAME_LENGTH
    boundary_padding_days: float = DEFAULT_PADDING_DAYS

    def __post_init__(self) -> None:
        zoom = self.zoom
        if not 0 < zoom.minimum <= zoom.default <= zoom.maximum:
            raise ConfigError(
                "Zoom levels must satisfy 0 < min <= default <= max, got "
                f"min={zoom.minimum}, default={zoom.default}, max={zoom.maximum}"
            )
        if zoom.step <= 0:
            raise ConfigError(f"Zoom step must be positive, got {zoom.step}")
        if self.pixels_per_day <= 0:
            raise ConfigError(f"Pixels per day must be positive, got {self.pixels_per_day}")
        if self.rename_autosave_delay < 0:
            raise ConfigError("Rename autosave delay cannot be negative")
        if not 0 <= self.name_min_length <= self.name_max_length:
            raise ConfigError(
                "Name length bounds must satisfy 0 <= min <= max, got "
                f"min={self.name_min_length}, max={self.name_max_length}"
            )
        if self.boundary_padding_days < 0:
            raise ConfigError("Boundary padding cannot be negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TimelineSettings":
        """Build settings from ``TIMELINE_*`` variables, falling back to the defaults."""

        env = os.environ if environ is None else environ
        defaults = ZoomLevels()
        zoom = ZoomLevels(
            minimum=_read(env, "ZOOM_MIN", defaults.minimum, float),
            maximum=_read(env, "ZOOM_MAX", defaults.maximum, float),
            default=_read(env, "ZOOM_DEFAULT", defaults.default, float),
            step=_read(env, "ZOOM_STEP", defaults.step, float),
        )
        return cls(
            zoom=zoom,
            wheel_sensitivity=_read(env, "WHEEL_SENSITIVITY", DEFAULT_WHEEL_SENSITIVITY, float),
            pixels_per_day=_read(env, "PIXELS_PER_DAY", DEFAULT_PIXELS_PER_DAY, float),
            rename_autosave_delay=_read(
                env, "RENAME_AUTOSAVE_DELAY", DEFAULT_AUTOSAVE_DELAY, float
            ),
            name_min_length=_read(env, "NAME_MIN_LENGTH", DEFAULT_MIN_NAME_LENGTH, int),
            name_max_length=_read(env, "NAME_MAX_LENGTH", DEFAULT_MAX_NAME_LENGTH, int),
            boundary_padding_days=_read(env, "PADDING_DAYS", DEFAULT_PADDING_DAYS, float),
        )
