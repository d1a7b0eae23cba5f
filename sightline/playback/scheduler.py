"""Sequential scheduler driving a TrajectoryPlayer frame by frame."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable

from sightline.playback.state import PlaybackPhase

if TYPE_CHECKING:
    from sightline.playback.player import PlaybackReport, TrajectoryPlayer

logger = logging.getLogger("sightline.playback.scheduler")


async def run_playback(
    player: "TrajectoryPlayer",
    pose_ref: str,
    frame_count: int,
    step_delay_s: float = 0.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> "PlaybackReport":
    """Run every frame step in order, one at a time.

    Step n + 1 starts only after step n (fetch and slide) has resolved.
    Cancelling the surrounding task stops scheduling and leaves the agent
    wherever the last tick put it.
    """
    player.begin(frame_count)
    logger.info("Playback of %r started (%d frames)", pose_ref, frame_count)

    while player.state.phase is PlaybackPhase.PLAYING:
        await player.advance(pose_ref)
        if player.state.phase is PlaybackPhase.PLAYING and step_delay_s > 0:
            await sleep(step_delay_s)

    report = player.report()
    if report.halted_at is not None:
        logger.error("Playback halted at frame %d", report.halted_at)
    else:
        logger.info(
            "Playback finished: %d frames completed, %d skipped",
            report.frames_completed,
            len(report.skipped),
        )
    return report
