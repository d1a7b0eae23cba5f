"""
sightline: camera trajectory playback with line-of-sight against walls.

Replays a COLMAP-reconstructed camera trajectory with a single agent and,
for every frame, finds where the edges of a horizontal field of view meet
the scene's walls.
"""

__version__ = "0.1.0"
