"""
Central configuration for trajectory playback.

Values come from DEFAULTS, deep-merged with an optional JSON file (explicit
path or $SIGHTLINE_CONFIG) and then with caller overrides (CLI flags).
The merged result is validated once and frozen into PlaybackConfig; an
invalid value is fatal at startup.
"""

from __future__ import annotations

import copy
import json
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from sightline.errors import ConfigError, InvalidAngleError
from sightline.geometry.fov import validate_half_angle
from sightline.geometry.walls import WallSet, default_walls
from sightline.poses.source import DEFAULT_RESOURCES

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SIGHTLINE_CONFIG"

# Agent colour phases, see sightline.playback.agent.AgentPhase
PHASE_NAMES = frozenset({"A", "B"})

# ── Defaults ──────────────────────────────────────────────────────────────

DEFAULTS: dict[str, Any] = {
    "field_of_view_degrees": 60.0,
    "slide_duration_ms": 1000.0,
    "frame_count": 363,
    "tick_hz": 60.0,
    "step_delay_ms": 1.0,
    "ground_level": 0.0,
    "wall_segments": default_walls().to_dicts(),
    "resources": dict(DEFAULT_RESOURCES),
    "phase_colors": {
        "A": "#ff0000",
        "B": "#0000ff",
    },
}


@dataclass(frozen=True)
class PlaybackConfig:
    """Validated playback settings."""

    field_of_view_degrees: float = 60.0
    slide_duration_ms: float = 1000.0
    frame_count: int = 363
    tick_hz: float = 60.0
    step_delay_ms: float = 1.0
    ground_level: float = 0.0
    walls: WallSet = field(default_factory=lambda: WallSet.from_dicts(DEFAULTS["wall_segments"]))
    resources: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_RESOURCES))
    phase_colors: dict[str, str] = field(default_factory=lambda: dict(DEFAULTS["phase_colors"]))

    @property
    def half_angle_degrees(self) -> float:
        return self.field_of_view_degrees / 2.0

    @property
    def slide_duration_s(self) -> float:
        return self.slide_duration_ms / 1000.0

    @property
    def tick_interval_s(self) -> float:
        return 1.0 / self.tick_hz

    @property
    def step_delay_s(self) -> float:
        return self.step_delay_ms / 1000.0

    def color_for(self, phase: str) -> str:
        """Agent colour for a phase name (AgentPhase values are str)."""
        return self.phase_colors[phase]

    def to_dict(self) -> dict[str, Any]:
        return {
            "field_of_view_degrees": self.field_of_view_degrees,
            "slide_duration_ms": self.slide_duration_ms,
            "frame_count": self.frame_count,
            "tick_hz": self.tick_hz,
            "step_delay_ms": self.step_delay_ms,
            "ground_level": self.ground_level,
            "wall_segments": self.walls.to_dicts(),
            "resources": dict(self.resources),
            "phase_colors": dict(self.phase_colors),
        }


def _merge(base: dict, overlay: dict) -> None:
    """Deep-merge overlay into base."""
    for k, v in overlay.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _merge(base[k], v)
        else:
            base[k] = v


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text())
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must contain a JSON object")
    return data


def _number(data: dict[str, Any], key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigError(f"{key} must be finite, got {value!r}")
    return float(value)


def build_config(data: dict[str, Any]) -> PlaybackConfig:
    """Validate a merged settings dict and freeze it."""
    unknown = set(data) - set(DEFAULTS)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))

    fov = _number(data, "field_of_view_degrees")
    # 0 < fov/2 < 180
    validate_half_angle(fov / 2.0)

    slide_ms = _number(data, "slide_duration_ms")
    if slide_ms < 0:
        raise ConfigError(f"slide_duration_ms must be >= 0, got {slide_ms}")

    frame_count = data["frame_count"]
    if isinstance(frame_count, bool) or not isinstance(frame_count, int) or frame_count < 0:
        raise ConfigError(f"frame_count must be a non-negative integer, got {frame_count!r}")

    tick_hz = _number(data, "tick_hz")
    if tick_hz <= 0:
        raise ConfigError(f"tick_hz must be > 0, got {tick_hz}")

    step_delay_ms = _number(data, "step_delay_ms")
    if step_delay_ms < 0:
        raise ConfigError(f"step_delay_ms must be >= 0, got {step_delay_ms}")

    try:
        walls = WallSet.from_dicts(data["wall_segments"])
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"invalid wall_segments: {e}") from e
    if len(walls) == 0:
        raise ConfigError("wall_segments must contain at least one wall")

    phase_colors = data["phase_colors"]
    if not isinstance(phase_colors, dict):
        raise ConfigError(f"phase_colors must be an object, got {phase_colors!r}")
    missing = PHASE_NAMES - set(phase_colors)
    if missing:
        raise ConfigError(f"phase_colors missing phases: {', '.join(sorted(missing))}")

    return PlaybackConfig(
        field_of_view_degrees=fov,
        slide_duration_ms=slide_ms,
        frame_count=frame_count,
        tick_hz=tick_hz,
        step_delay_ms=step_delay_ms,
        ground_level=_number(data, "ground_level"),
        walls=walls,
        resources={str(k): str(v) for k, v in data["resources"].items()},
        phase_colors={str(k): str(v) for k, v in phase_colors.items()},
    )


def load_playback_config(
    path: Optional[str | Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> PlaybackConfig:
    """Load, merge and validate playback configuration.

    Raises ConfigError or InvalidAngleError on bad input.
    """
    data: dict[str, Any] = copy.deepcopy(DEFAULTS)

    if path is None and os.getenv(CONFIG_ENV_VAR):
        path = os.environ[CONFIG_ENV_VAR]
    if path is not None:
        _merge(data, _read_json(Path(path)))
        logger.info("Loaded playback config from %s", path)

    if overrides:
        _merge(data, {k: v for k, v in overrides.items() if v is not None})

    try:
        return build_config(data)
    except InvalidAngleError:
        logger.error("Rejected field_of_view_degrees=%s", data.get("field_of_view_degrees"))
        raise
