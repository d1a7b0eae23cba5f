"""
Linear agent slide between two ground-plane positions.

The slide is sampled by elapsed time, once per rendering tick. The vertical
coordinate is pinned to the ground level for every sample, including the
target, so the final sample equals the target exactly.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def on_ground(position: np.ndarray, ground_level: float = 0.0) -> np.ndarray:
    pinned = np.array(position, dtype=np.float64)
    pinned[1] = ground_level
    return pinned


@dataclass(frozen=True)
class LinearSlide:
    """Constant-velocity move from start to target over duration_s."""

    start: np.ndarray
    target: np.ndarray
    duration_s: float
    ground_level: float = 0.0

    def __post_init__(self) -> None:
        if self.duration_s < 0:
            raise ValueError(f"duration must be >= 0, got {self.duration_s}")
        object.__setattr__(self, "start", on_ground(self.start, self.ground_level))
        object.__setattr__(self, "target", on_ground(self.target, self.ground_level))

    def fraction(self, elapsed_s: float) -> float:
        """Interpolation factor in [0, 1]."""
        if self.duration_s <= 0:
            return 1.0
        return float(np.clip(elapsed_s / self.duration_s, 0.0, 1.0))

    def position_at(self, elapsed_s: float) -> np.ndarray:
        """Agent position *elapsed_s* seconds into the slide."""
        t = self.fraction(elapsed_s)
        if t >= 1.0:
            return self.target.copy()
        pos = self.start + (self.target - self.start) * t
        pos[1] = self.ground_level
        return pos

    def is_complete(self, elapsed_s: float) -> bool:
        return self.fraction(elapsed_s) >= 1.0
