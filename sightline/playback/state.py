"""
Playback state machine.

    IDLE --begin(frame_count > 0)--> PLAYING(0)
    IDLE --begin(frame_count == 0)--> DONE
    PLAYING(n) --completed/skipped--> PLAYING(n + 1) or DONE when n + 1 == frame_count
    PLAYING(n) --out of range--> HALTED (n is kept)

DONE and HALTED are terminal. Transitions are pure; timing lives in
sightline.playback.scheduler.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace


class PlaybackPhase(str, enum.Enum):
    IDLE = "idle"
    PLAYING = "playing"
    DONE = "done"
    HALTED = "halted"


class StepOutcome(str, enum.Enum):
    COMPLETED = "completed"  # agent moved, sight lines published
    SKIPPED = "skipped"  # frame abandoned, playback continues
    OUT_OF_RANGE = "out_of_range"  # frame missing from the trajectory


TERMINAL_PHASES = frozenset({PlaybackPhase.DONE, PlaybackPhase.HALTED})


@dataclass(frozen=True)
class PlaybackState:
    phase: PlaybackPhase = PlaybackPhase.IDLE
    frame_index: int = 0
    frame_count: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES


def begin(state: PlaybackState, frame_count: int) -> PlaybackState:
    """Leave IDLE for the first frame, or finish straight away."""
    if state.phase is not PlaybackPhase.IDLE:
        raise RuntimeError(f"cannot begin playback from {state.phase.value}")
    if frame_count < 0:
        raise ValueError(f"frame_count must be >= 0, got {frame_count}")
    if frame_count == 0:
        return PlaybackState(PlaybackPhase.DONE, 0, 0)
    return PlaybackState(PlaybackPhase.PLAYING, 0, frame_count)


def next_state(state: PlaybackState, outcome: StepOutcome) -> PlaybackState:
    """State after the step for state.frame_index finished with *outcome*."""
    if state.phase is not PlaybackPhase.PLAYING:
        raise RuntimeError(f"no step runs in {state.phase.value}")

    if outcome is StepOutcome.OUT_OF_RANGE:
        return replace(state, phase=PlaybackPhase.HALTED)

    n = state.frame_index + 1
    if n >= state.frame_count:
        return replace(state, phase=PlaybackPhase.DONE, frame_index=n)
    return replace(state, frame_index=n)
