"""
Rendering sink interface.

The playback engine never draws anything itself. It hands geometric
primitives to a RenderSink:

  - build_walls(walls)             once, at startup
  - create_line(name)              once per named sight line
  - set_agent_phase(phase, color)  per frame, before the step runs
  - move_agent(position)           per interpolation tick
  - set_line(name, segment)        per frame; None clears the line
  - publish(update)                per frame, the complete FrameUpdate

RecordingSink keeps everything in memory (tests, offline analysis);
LoggingSink writes a line per frame to the logger.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from sightline.geometry.walls import WallSegment
from sightline.messages.frame_update import FrameUpdate, SightSegment
from sightline.playback.agent import AgentPhase

logger = logging.getLogger("sightline.playback.sink")


@runtime_checkable
class RenderSink(Protocol):
    def build_walls(self, walls: Sequence[WallSegment]) -> None: ...

    def create_line(self, name: str) -> None: ...

    def set_line(self, name: str, segment: Optional[SightSegment]) -> None: ...

    def move_agent(self, position: np.ndarray) -> None: ...

    def set_agent_phase(self, phase: AgentPhase, color: str) -> None: ...

    def publish(self, update: FrameUpdate) -> None: ...


class RecordingSink:
    """In-memory sink that keeps the current scene and a history."""

    def __init__(self):
        self.walls: list[WallSegment] = []
        self.lines: dict[str, Optional[SightSegment]] = {}
        self.agent_position: Optional[np.ndarray] = None
        self.agent_phase: Optional[AgentPhase] = None
        self.agent_color: Optional[str] = None
        self.agent_track: list[np.ndarray] = []
        self.phase_history: list[AgentPhase] = []
        self.updates: list[FrameUpdate] = []

    def build_walls(self, walls: Sequence[WallSegment]) -> None:
        if self.walls:
            raise RuntimeError("walls are built once")
        self.walls = list(walls)

    def create_line(self, name: str) -> None:
        if name in self.lines:
            raise RuntimeError(f"line {name!r} already exists")
        self.lines[name] = None

    def set_line(self, name: str, segment: Optional[SightSegment]) -> None:
        if name not in self.lines:
            raise KeyError(f"unknown line {name!r}")
        self.lines[name] = segment

    def move_agent(self, position: np.ndarray) -> None:
        self.agent_position = np.array(position, dtype=np.float64)
        self.agent_track.append(self.agent_position.copy())

    def set_agent_phase(self, phase: AgentPhase, color: str) -> None:
        self.agent_phase = phase
        self.agent_color = color
        self.phase_history.append(phase)

    def publish(self, update: FrameUpdate) -> None:
        self.updates.append(update)


class LoggingSink:
    """Logs one line per frame; tick-level agent moves go to DEBUG."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self._lines: set[str] = set()

    def build_walls(self, walls: Sequence[WallSegment]) -> None:
        self.log.info("Scene has %d walls", len(walls))

    def create_line(self, name: str) -> None:
        self._lines.add(name)

    def set_line(self, name: str, segment: Optional[SightSegment]) -> None:
        if name not in self._lines:
            raise KeyError(f"unknown line {name!r}")

    def move_agent(self, position: np.ndarray) -> None:
        self.log.debug("agent -> %s", np.round(position, 3).tolist())

    def set_agent_phase(self, phase: AgentPhase, color: str) -> None:
        self.log.debug("agent phase %s (%s)", phase.value, color)

    def publish(self, update: FrameUpdate) -> None:
        if update.skipped:
            self.log.warning("frame %d skipped: %s", update.frame_index, update.reason)
            return

        def _end(seg: Optional[SightSegment]) -> str:
            return "open" if seg is None else str([round(v, 3) for v in seg.end])

        self.log.info(
            "frame %d [%s] agent=%s left=%s right=%s",
            update.frame_index,
            update.phase,
            [round(v, 3) for v in update.agent_position],
            _end(update.left),
            _end(update.right),
        )
