"""
Decoders for COLMAP text models (images.txt, cameras.txt, points3D.txt).

All decoders are pure: they take the resource text and return records.
Blank lines and ``#`` comment lines are dropped first; line numbers reported
in ParseError are 1-based positions in the source text.

images.txt stores two lines per image:
  Line 1: IMAGE_ID QW QX QY QZ TX TY TZ [CAMERA_ID NAME]
  Line 2: POINTS2D[] as (X, Y, POINT3D_ID)
Only the even-indexed surviving lines are pose records.
"""

from __future__ import annotations

import logging
import math
from typing import Iterator

from sightline.errors import IndexOutOfRangeError, ParseError
from sightline.poses.records import (
    SINGLE_FOCAL_MODELS,
    CameraIntrinsics,
    CameraPoseRecord,
    Point3DRecord,
)

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
POSE_FIELD_COUNT = 8


def iter_data_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (line_number, line) for every non-blank, non-comment line."""
    for line_number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_MARKER):
            continue
        yield line_number, stripped


def pose_lines(text: str) -> list[tuple[int, str]]:
    """Select the camera-pose lines (even indices after filtering)."""
    return [entry for i, entry in enumerate(iter_data_lines(text)) if i % 2 == 0]


def _to_float(value: str, line_number: int, line: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise ParseError(line_number, line, f"non-numeric field {value!r}") from None
    if not math.isfinite(number):
        raise ParseError(line_number, line, f"non-finite field {value!r}")
    return number


def _to_int(value: str, line_number: int, line: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ParseError(line_number, line, f"expected integer id, got {value!r}") from None


def parse_pose_line(line_number: int, line: str) -> CameraPoseRecord:
    """Decode a single images.txt pose line."""
    fields = line.split()
    if len(fields) < POSE_FIELD_COUNT:
        raise ParseError(
            line_number,
            line,
            f"expected {POSE_FIELD_COUNT} numeric fields, got {len(fields)}",
        )

    image_id = _to_int(fields[0], line_number, line)
    qw, qx, qy, qz, tx, ty, tz = (
        _to_float(v, line_number, line) for v in fields[1:POSE_FIELD_COUNT]
    )

    # Trailing CAMERA_ID NAME are optional
    camera_id = None
    name = None
    if len(fields) > POSE_FIELD_COUNT:
        camera_id = _to_int(fields[POSE_FIELD_COUNT], line_number, line)
    if len(fields) > POSE_FIELD_COUNT + 1:
        name = " ".join(fields[POSE_FIELD_COUNT + 1:])

    return CameraPoseRecord(
        image_id=image_id,
        qw=qw,
        qx=qx,
        qy=qy,
        qz=qz,
        tx=tx,
        ty=ty,
        tz=tz,
        line_number=line_number,
        camera_id=camera_id,
        name=name,
    )


def decode_poses(text: str) -> list[CameraPoseRecord]:
    """Decode every pose record in images.txt text, in frame order.

    Raises ParseError on the first malformed pose line.
    """
    records = [parse_pose_line(n, line) for n, line in pose_lines(text)]
    logger.debug("Decoded %d pose records", len(records))
    return records


def resolve_frame(text: str, index: int) -> CameraPoseRecord:
    """Decode only the pose record for frame *index*.

    Other pose lines are not parsed, so a malformed record elsewhere in the
    file does not affect this frame.
    """
    lines = pose_lines(text)
    if index < 0 or index >= len(lines):
        raise IndexOutOfRangeError(index, len(lines))
    line_number, line = lines[index]
    return parse_pose_line(line_number, line)


def decode_intrinsics(text: str) -> list[CameraIntrinsics]:
    """Decode cameras.txt: CAMERA_ID MODEL WIDTH HEIGHT PARAMS[]."""
    cameras: list[CameraIntrinsics] = []
    for line_number, line in iter_data_lines(text):
        fields = line.split()
        if len(fields) < 5:
            raise ParseError(line_number, line, "expected CAMERA_ID MODEL WIDTH HEIGHT PARAMS[]")

        camera_id = _to_int(fields[0], line_number, line)
        model = fields[1].upper()
        width = _to_int(fields[2], line_number, line)
        height = _to_int(fields[3], line_number, line)
        params = tuple(_to_float(v, line_number, line) for v in fields[4:])

        if model in SINGLE_FOCAL_MODELS:
            if len(params) < 3:
                raise ParseError(line_number, line, f"{model} needs f, cx, cy")
            fx = fy = params[0]
            cx, cy = params[1], params[2]
        else:
            if len(params) < 4:
                raise ParseError(line_number, line, f"{model} needs fx, fy, cx, cy")
            fx, fy, cx, cy = params[:4]

        cameras.append(
            CameraIntrinsics(
                camera_id=camera_id,
                model=model,
                width=width,
                height=height,
                fx=fx,
                fy=fy,
                cx=cx,
                cy=cy,
                params=params,
            )
        )
    return cameras


def decode_points(text: str) -> list[Point3DRecord]:
    """Decode points3D.txt: POINT3D_ID X Y Z [R G B ERROR TRACK[]]."""
    points: list[Point3DRecord] = []
    for line_number, line in iter_data_lines(text):
        fields = line.split()
        if len(fields) < 4:
            raise ParseError(line_number, line, "expected POINT3D_ID X Y Z")

        point_id = _to_int(fields[0], line_number, line)
        x, y, z = (_to_float(v, line_number, line) for v in fields[1:4])

        rgb = None
        error = None
        if len(fields) >= 7:
            r, g, b = (_to_int(v, line_number, line) for v in fields[4:7])
            rgb = (r, g, b)
        if len(fields) >= 8:
            error = _to_float(fields[7], line_number, line)

        points.append(Point3DRecord(point_id=point_id, x=x, y=y, z=z, rgb=rgb, error=error))
    return points
