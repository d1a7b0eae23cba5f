"""Trajectory playback: agent, interpolation, state machine and sinks."""

from sightline.playback.agent import Agent, AgentPhase
from sightline.playback.player import PlaybackReport, TrajectoryPlayer
from sightline.playback.sink import LoggingSink, RecordingSink, RenderSink
from sightline.playback.state import PlaybackPhase, PlaybackState, StepOutcome

__all__ = [
    "Agent",
    "AgentPhase",
    "PlaybackReport",
    "TrajectoryPlayer",
    "LoggingSink",
    "RecordingSink",
    "RenderSink",
    "PlaybackPhase",
    "PlaybackState",
    "StepOutcome",
]
