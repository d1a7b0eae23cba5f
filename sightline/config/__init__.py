"""Playback configuration."""

from sightline.config.playback_config import (
    DEFAULTS,
    PlaybackConfig,
    build_config,
    load_playback_config,
)

__all__ = ["DEFAULTS", "PlaybackConfig", "build_config", "load_playback_config"]
