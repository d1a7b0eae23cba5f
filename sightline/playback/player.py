"""
Trajectory playback: pose fetch + agent slide + line-of-sight per frame.

Per-frame step (frame n):
  1. Colour phase: A for the first half of the frames, B for the rest
  2. Fetch the trajectory resource and resolve pose record n
  3. Target = camera centre in scene space
  4. Slide the agent to the target, one sample per tick, on the ground
  5. Field-of-view boundary rays from the scene-space forward direction
  6. Nearest wall hit per ray, published as the "left"/"right" sight lines
  7. Advance to n + 1

Error policy per step:
  - ResourceFetchError / ParseError: step abandoned, playback continues
  - DegeneratePoseError: agent keeps its position, playback continues
  - FrameDecodeError: playback halts at n

Usage:
    source = DirectoryPoseSource("data/sparse/0")
    player = TrajectoryPlayer(source, RecordingSink())
    report = await player.play("camera_trajectory", frame_count=363)
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

import numpy as np

from sightline.config.playback_config import PlaybackConfig
from sightline.errors import (
    DegeneratePoseError,
    FrameDecodeError,
    IndexOutOfRangeError,
    ParseError,
    ResourceFetchError,
)
from sightline.geometry.basis import COLMAP_TO_SCENE, SceneBasis
from sightline.geometry.fov import field_of_view_boundaries
from sightline.geometry.pose import scene_forward, scene_position
from sightline.geometry.walls import IntersectionQueryResult, intersect_field_of_view
from sightline.messages.frame_update import FrameUpdate, SightSegment
from sightline.playback.agent import Agent, phase_for_frame
from sightline.playback.interpolation import LinearSlide, on_ground
from sightline.playback.scheduler import run_playback
from sightline.playback.sink import RenderSink
from sightline.playback import state as sm
from sightline.poses.decoder import resolve_frame
from sightline.poses.records import CameraPoseRecord
from sightline.poses.source import CAMERA_TRAJECTORY, PoseSource

logger = logging.getLogger("sightline.playback.player")

LINE_NAMES = ("left", "right")


@dataclass
class PlaybackReport:
    """Summary of one playback run."""

    final_phase: sm.PlaybackPhase
    frames_completed: int = 0
    skipped: list[tuple[int, str]] = field(default_factory=list)
    halted_at: Optional[int] = None
    final_position: Optional[np.ndarray] = None

    def to_dict(self) -> dict:
        return {
            "final_phase": self.final_phase.value,
            "frames_completed": self.frames_completed,
            "skipped": [{"frame": n, "reason": r} for n, r in self.skipped],
            "halted_at": self.halted_at,
            "final_position": (
                None if self.final_position is None
                else [round(v, 4) for v in self.final_position.tolist()]
            ),
        }


def _segment(origin: np.ndarray, hit: Optional[np.ndarray]) -> Optional[SightSegment]:
    if hit is None:
        return None
    return SightSegment(start=origin.tolist(), end=hit.tolist())


class TrajectoryPlayer:
    """Replays a camera trajectory with a single agent.

    The player owns the agent; nothing else writes its position. Pass a
    fake *clock* and *tick* to drive interpolation without real time.
    """

    def __init__(
        self,
        source: PoseSource,
        sink: RenderSink,
        config: Optional[PlaybackConfig] = None,
        basis: SceneBasis = COLMAP_TO_SCENE,
        clock: Callable[[], float] = time.monotonic,
        tick: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        self.source = source
        self.sink = sink
        self.config = config or PlaybackConfig()
        self.basis = basis
        self._clock = clock
        self._tick = tick or self._sleep_one_tick

        self.agent = Agent(position=on_ground(np.zeros(3), self.config.ground_level))
        self.state = sm.PlaybackState()
        self.last_intersections: Optional[IntersectionQueryResult] = None

        self._scene_ready = False
        self._frames_completed = 0
        self._skipped: list[tuple[int, str]] = []
        self._task: Optional[asyncio.Task] = None

    async def _sleep_one_tick(self) -> None:
        await asyncio.sleep(self.config.tick_interval_s)

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    async def play(
        self,
        pose_ref: str = CAMERA_TRAJECTORY,
        frame_count: Optional[int] = None,
    ) -> PlaybackReport:
        """Play frames 0..frame_count-1 and return the report."""
        if frame_count is None:
            frame_count = self.config.frame_count
        return await run_playback(
            self, pose_ref, frame_count, step_delay_s=self.config.step_delay_s
        )

    async def start(
        self,
        pose_ref: str = CAMERA_TRAJECTORY,
        frame_count: Optional[int] = None,
    ) -> asyncio.Task:
        """Start playback as a background task."""
        if self._task is not None:
            raise RuntimeError("Playback already started")
        self._task = asyncio.create_task(self.play(pose_ref, frame_count))
        return self._task

    # ------------------------------------------------------------------
    # State machine hooks used by the scheduler
    # ------------------------------------------------------------------

    def prepare_scene(self) -> None:
        """Build walls and the named sight lines in the sink, once."""
        if self._scene_ready:
            return
        self.sink.build_walls(self.config.walls)
        for name in LINE_NAMES:
            self.sink.create_line(name)
        self._scene_ready = True

    def begin(self, frame_count: int) -> None:
        self.prepare_scene()
        self.state = sm.begin(self.state, frame_count)

    async def advance(self, pose_ref: str) -> sm.StepOutcome:
        """Run the current frame step, apply the error policy, transition."""
        n = self.state.frame_index
        self.assign_phase(n)
        try:
            await self.step(pose_ref)
            outcome = sm.StepOutcome.COMPLETED
            self._frames_completed += 1
        except FrameDecodeError as e:
            logger.error("Frame %d: %s", n, e)
            outcome = sm.StepOutcome.OUT_OF_RANGE
        except (ResourceFetchError, ParseError, DegeneratePoseError) as e:
            logger.warning("Frame %d skipped: %s", n, e)
            self._skipped.append((n, str(e)))
            self.sink.publish(
                FrameUpdate(
                    frame_index=n,
                    agent_position=self.agent.position.tolist(),
                    phase=self.agent.phase.value,
                    color=self.config.color_for(self.agent.phase.value),
                    skipped=True,
                    reason=str(e),
                )
            )
            outcome = sm.StepOutcome.SKIPPED

        self.state = sm.next_state(self.state, outcome)
        return outcome

    def assign_phase(self, index: int) -> None:
        """Colour phase for frame *index*, set whether or not its step succeeds."""
        self.agent.phase = phase_for_frame(index, self.state.frame_count)
        self.sink.set_agent_phase(self.agent.phase, self.config.color_for(self.agent.phase.value))

    def report(self) -> PlaybackReport:
        halted = self.state.phase is sm.PlaybackPhase.HALTED
        return PlaybackReport(
            final_phase=self.state.phase,
            frames_completed=self._frames_completed,
            skipped=list(self._skipped),
            halted_at=self.state.frame_index if halted else None,
            final_position=self.agent.snapshot(),
        )

    # ------------------------------------------------------------------
    # Frame step
    # ------------------------------------------------------------------

    async def resolve_record(self, pose_ref: str, index: int) -> CameraPoseRecord:
        text = await self.source.fetch_text(pose_ref)
        try:
            return resolve_frame(text, index)
        except IndexOutOfRangeError as e:
            raise FrameDecodeError(e.index, e.available) from e

    async def step(self, pose_ref: str) -> FrameUpdate:
        """Execute the step for the current frame index and publish it."""
        if self.state.phase is not sm.PlaybackPhase.PLAYING:
            raise RuntimeError(f"cannot step while {self.state.phase.value}")
        n = self.state.frame_index

        record = await self.resolve_record(pose_ref, n)

        # Both derived from this frame's record; nothing carries over.
        target = scene_position(record, self.basis)
        forward = scene_forward(record, self.basis)
        boundaries = field_of_view_boundaries(forward, self.config.half_angle_degrees)

        await self.slide_to(target)

        origin = on_ground(self.agent.position, self.config.ground_level)
        hits = intersect_field_of_view(origin, boundaries, self.config.walls)
        self.last_intersections = hits

        update = FrameUpdate(
            frame_index=n,
            image_id=record.image_id,
            agent_position=self.agent.position.tolist(),
            phase=self.agent.phase.value,
            color=self.config.color_for(self.agent.phase.value),
            left=_segment(origin, hits.left_hit),
            right=_segment(origin, hits.right_hit),
        )
        for name, segment in update.segments().items():
            self.sink.set_line(name, segment)
        self.sink.publish(update)

        logger.debug(
            "Frame %d (image %d): agent=%s",
            n,
            record.image_id,
            np.round(self.agent.position, 3).tolist(),
        )
        return update

    async def slide_to(self, target: np.ndarray) -> None:
        """Move the agent linearly to *target*, one sample per tick."""
        slide = LinearSlide(
            start=self.agent.position,
            target=target,
            duration_s=self.config.slide_duration_s,
            ground_level=self.config.ground_level,
        )
        started = self._clock()
        while True:
            elapsed = self._clock() - started
            self.agent.position = slide.position_at(elapsed)
            self.sink.move_agent(self.agent.snapshot())
            if slide.is_complete(elapsed):
                return
            await self._tick()
