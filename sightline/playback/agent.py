"""The single agent replaying the camera trajectory."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import numpy as np


class AgentPhase(str, enum.Enum):
    """Colour phase: A for the first half of the frames, B for the rest."""

    A = "A"
    B = "B"


def phase_for_frame(index: int, frame_count: int) -> AgentPhase:
    return AgentPhase.A if index < frame_count / 2 else AgentPhase.B


@dataclass
class Agent:
    """Mutable agent state. Only TrajectoryPlayer writes to it."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    phase: AgentPhase = AgentPhase.A

    def snapshot(self) -> np.ndarray:
        return self.position.copy()
