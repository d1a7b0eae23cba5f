"""
Shared test fixtures and configuration for the sightline test suite.

Provides small COLMAP text models, a square test room, and a fake clock
that lets playback interpolation run without real time passing.
"""

import pytest

from sightline.config.playback_config import PlaybackConfig
from sightline.geometry.walls import WallSet
from sightline.playback.sink import RecordingSink


# ---------------------------------------------------------------------------
# Text models
# ---------------------------------------------------------------------------

IMAGES_HEADER = """\
# Image list with two lines of data per image:
#   IMAGE_ID, QW, QX, QY, QZ, TX, TY, TZ, CAMERA_ID, NAME
#   POINTS2D[] as (X, Y, POINT3D_ID)
# Number of images: {count}
"""


def images_txt(*pose_lines: str) -> str:
    """Build images.txt text with one observation line after every pose."""
    body = "".join(f"{line}\n10.0 20.0 -1\n" for line in pose_lines)
    return IMAGES_HEADER.format(count=len(pose_lines)) + body


# Identity rotation, camera centres (0, 0, -5), (1, 0, -2), (-2, 0, 3), (3, 0, 1)
IDENTITY_POSES = (
    "1 1 0 0 0 0 0 5 1 frame_0.jpg",
    "2 1 0 0 0 -1 0 2 1 frame_1.jpg",
    "3 1 0 0 0 2 0 -3 1 frame_2.jpg",
    "4 1 0 0 0 -3 0 -1 1 frame_3.jpg",
)

CAMERAS_TXT = """\
# Camera list with one line of data per camera:
#   CAMERA_ID, MODEL, WIDTH, HEIGHT, PARAMS[]
# Number of cameras: 2
1 PINHOLE 1920 1080 1400.0 1410.0 960.0 540.0
2 SIMPLE_RADIAL 640 480 500.0 320.0 240.0 0.01
"""

POINTS3D_TXT = """\
# 3D point list with one line of data per point:
#   POINT3D_ID, X, Y, Z, R, G, B, ERROR, TRACK[] as (IMAGE_ID, POINT2D_IDX)
1 0.5 1.0 -2.0 255 128 0 0.42 1 0 2 3
2 -1.5 0.2 4.0 10 20 30 0.1
"""


@pytest.fixture
def identity_images_txt():
    return images_txt(*IDENTITY_POSES)


@pytest.fixture
def colmap_dir(tmp_path, identity_images_txt):
    """Directory with cameras.txt, images.txt and points3D.txt."""
    (tmp_path / "cameras.txt").write_text(CAMERAS_TXT)
    (tmp_path / "images.txt").write_text(identity_images_txt)
    (tmp_path / "points3D.txt").write_text(POINTS3D_TXT)
    return tmp_path


# ---------------------------------------------------------------------------
# Scene and playback helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def square_room():
    """20 x 20 room centred on the origin."""
    return WallSet.closed_polygon([(-10.0, -10.0), (10.0, -10.0), (10.0, 10.0), (-10.0, 10.0)])


@pytest.fixture
def playback_config(square_room):
    return PlaybackConfig(
        field_of_view_degrees=60.0,
        slide_duration_ms=1000.0,
        frame_count=4,
        step_delay_ms=0.0,
        walls=square_room,
    )


class FakeClock:
    """Monotonic clock advanced only by tick()."""

    def __init__(self, tick_s: float = 0.25):
        self.now = 0.0
        self.tick_s = tick_s
        self.ticks = 0

    def __call__(self) -> float:
        return self.now

    async def tick(self) -> None:
        self.now += self.tick_s
        self.ticks += 1


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def recording_sink():
    return RecordingSink()
