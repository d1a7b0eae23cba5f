"""Pydantic message schemas published to the rendering sink."""

from sightline.messages.frame_update import FrameUpdate, SightSegment

__all__ = ["FrameUpdate", "SightSegment"]
