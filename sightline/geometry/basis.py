"""
Reconstruction-space -> scene-space basis change.

COLMAP reconstructions and the rendered scene disagree on two axis signs,
and the disagreement is different for points and for directions:

  - directions (camera look axis): X is negated
  - positions (agent targets):     Z is negated

Both corrections live here and are applied exactly once, at the point where
a value leaves reconstruction space. Nothing else in the code base flips
axis signs.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class SceneBasis:
    """Per-axis sign changes for positions and directions."""

    position_signs: tuple[float, float, float] = (1.0, 1.0, -1.0)
    direction_signs: tuple[float, float, float] = (-1.0, 1.0, 1.0)

    def position_to_scene(self, position: np.ndarray) -> np.ndarray:
        return np.asarray(position, dtype=np.float64) * np.array(self.position_signs)

    def direction_to_scene(self, direction: np.ndarray) -> np.ndarray:
        return np.asarray(direction, dtype=np.float64) * np.array(self.direction_signs)


COLMAP_TO_SCENE = SceneBasis()
