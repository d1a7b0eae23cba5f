"""Error taxonomy for sightline.

Decoding errors stay local to the frame step that hit them; configuration
errors are fatal at startup. See sightline.playback.player for the per-step
policy.
"""

from __future__ import annotations

from typing import Optional


class SightlineError(Exception):
    """Base class for all sightline errors."""


class ParseError(SightlineError, ValueError):
    """A text record could not be decoded into numeric fields."""

    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}: {line.strip()!r}")


class IndexOutOfRangeError(SightlineError, IndexError):
    """A frame index exceeds the records available in the trajectory."""

    def __init__(self, index: int, available: int):
        self.index = index
        self.available = available
        super().__init__(f"frame {index} out of range ({available} records available)")


class FrameDecodeError(IndexOutOfRangeError):
    """Playback asked for a frame the trajectory resource does not contain."""


class DegeneratePoseError(SightlineError):
    """Pose data has no usable orientation (near-zero quaternion or direction)."""


class InvalidAngleError(SightlineError, ValueError):
    """Field-of-view half-angle outside (0, 180) degrees."""

    def __init__(self, half_angle_deg: float):
        self.half_angle_deg = half_angle_deg
        super().__init__(
            f"half-angle must satisfy 0 < angle < 180 degrees, got {half_angle_deg}"
        )


class ResourceFetchError(SightlineError):
    """A named pose/point resource could not be retrieved."""

    def __init__(self, name: str, reason: str, location: Optional[str] = None):
        self.name = name
        self.reason = reason
        self.location = location
        where = f" ({location})" if location else ""
        super().__init__(f"failed to fetch {name!r}{where}: {reason}")


class ConfigError(SightlineError, ValueError):
    """Configuration file or override is malformed."""
