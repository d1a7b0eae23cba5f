"""Pydantic models for the per-frame playback update."""

from typing import Optional

from pydantic import BaseModel, Field


class SightSegment(BaseModel):
    """A line of sight from the agent to the wall it hits."""
    start: list[float] = Field(description="[x, y, z] origin of the ray")
    end: list[float] = Field(description="[x, y, z] nearest wall hit")


class FrameUpdate(BaseModel):
    """Primitives one frame step hands to the rendering sink.

    A None segment means the ray hit no wall; the sink clears that line.
    """

    frame_index: int
    image_id: Optional[int] = None
    agent_position: list[float] = Field(description="[x, y, z] after interpolation")
    phase: str = Field(default="A", description="agent colour phase, A or B")
    color: str = Field(default="", description="configured colour for the phase")
    left: Optional[SightSegment] = None
    right: Optional[SightSegment] = None
    skipped: bool = False
    reason: str = ""

    def segments(self) -> dict[str, Optional[SightSegment]]:
        return {"left": self.left, "right": self.right}
