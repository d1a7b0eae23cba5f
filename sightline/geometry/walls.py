"""
Wall geometry and ray/wall intersection.

Walls are vertical obstructions described by their footprint on the ground
plane. Intersection treats each wall as the infinite line through its start
point; the hit is NOT checked against the wall's end points.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence

import numpy as np

from sightline.geometry.fov import FieldOfViewBoundaries

logger = logging.getLogger(__name__)

PARALLEL_EPS = 1e-6

# Closed six-segment polygon of the reference scene, as (x, z) corners.
DEFAULT_WALL_CORNERS: tuple[tuple[float, float], ...] = (
    (-0.982, -9.937),
    (11.475, 3.963),
    (4.767, 11.339),
    (-4.14024, 1.88082),
    (-8.60343, 7.32546),
    (-11.8252, 3.25773),
)


def _as_point(value: Iterable[float]) -> np.ndarray:
    point = np.array(list(value), dtype=np.float64)
    if point.shape != (3,):
        raise ValueError(f"expected a 3D point, got shape {point.shape}")
    if not np.all(np.isfinite(point)):
        raise ValueError(f"wall point must be finite, got {point.tolist()}")
    point.setflags(write=False)
    return point


@dataclass(frozen=True, eq=False)
class WallSegment:
    """A wall between two ground-plane points."""

    start: np.ndarray
    end: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", _as_point(self.start))
        object.__setattr__(self, "end", _as_point(self.end))
        delta = self.end - self.start
        if np.hypot(delta[0], delta[2]) < PARALLEL_EPS:
            raise ValueError(f"wall has zero horizontal length: {self.start} -> {self.end}")

    @property
    def direction(self) -> np.ndarray:
        """Unit direction from start to end."""
        delta = self.end - self.start
        return delta / np.linalg.norm(delta)

    @property
    def normal(self) -> np.ndarray:
        """Horizontal normal, perpendicular to the wall."""
        d = self.direction
        return np.array([-d[2], 0.0, d[0]])

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    def to_dict(self) -> dict:
        return {"start": self.start.tolist(), "end": self.end.tolist()}


class WallSet(Sequence[WallSegment]):
    """Immutable, ordered collection of walls shared by all queries."""

    def __init__(self, walls: Iterable[WallSegment]):
        self._walls: tuple[WallSegment, ...] = tuple(walls)

    @classmethod
    def from_dicts(cls, entries: Iterable[Mapping[str, Any]]) -> "WallSet":
        """Build from ``[{"start": [x, y, z], "end": [x, y, z]}, ...]``."""
        return cls(WallSegment(start=e["start"], end=e["end"]) for e in entries)

    @classmethod
    def closed_polygon(cls, corners: Sequence[tuple[float, float]], y: float = 0.0) -> "WallSet":
        """Walls joining consecutive (x, z) corners, last back to first."""
        points = [(x, y, z) for x, z in corners]
        return cls(
            WallSegment(start=points[i], end=points[(i + 1) % len(points)])
            for i in range(len(points))
        )

    def __getitem__(self, index):
        return self._walls[index]

    def __len__(self) -> int:
        return len(self._walls)

    def __iter__(self) -> Iterator[WallSegment]:
        return iter(self._walls)

    def to_dicts(self) -> list[dict]:
        return [w.to_dict() for w in self._walls]


def default_walls() -> WallSet:
    return WallSet.closed_polygon(DEFAULT_WALL_CORNERS)


def ray_line_parameter(
    origin: np.ndarray, direction: np.ndarray, wall: WallSegment
) -> Optional[float]:
    """Ray parameter t where origin + t*direction meets the wall's line.

    Returns None when the ray is parallel to the wall.
    """
    normal = wall.normal
    denom = float(np.dot(normal, direction))
    if abs(denom) <= PARALLEL_EPS:
        return None
    return float(np.dot(wall.start - origin, normal)) / denom


def nearest_intersection(
    origin: np.ndarray,
    direction: np.ndarray,
    walls: Iterable[WallSegment],
) -> Optional[np.ndarray]:
    """Closest point in front of *origin* where the ray meets a wall line.

    Walls the ray is parallel to, and hits at t <= 0, are ignored. On exactly
    equal distances the earlier wall wins.
    """
    origin = np.asarray(origin, dtype=np.float64)
    direction = np.asarray(direction, dtype=np.float64)

    closest: Optional[np.ndarray] = None
    min_distance = np.inf

    for wall in walls:
        t = ray_line_parameter(origin, direction, wall)
        if t is None or t <= 0:
            continue
        hit = origin + direction * t
        distance = float(np.linalg.norm(hit - origin))
        if distance < min_distance:
            min_distance = distance
            closest = hit

    return closest


@dataclass(frozen=True)
class IntersectionQueryResult:
    left_hit: Optional[np.ndarray]
    right_hit: Optional[np.ndarray]


def intersect_field_of_view(
    origin: np.ndarray,
    boundaries: FieldOfViewBoundaries,
    walls: Iterable[WallSegment],
) -> IntersectionQueryResult:
    """Nearest wall hit for both field-of-view boundary rays."""
    walls = tuple(walls)
    result = IntersectionQueryResult(
        left_hit=nearest_intersection(origin, boundaries.left, walls),
        right_hit=nearest_intersection(origin, boundaries.right, walls),
    )
    if result.left_hit is None or result.right_hit is None:
        logger.debug(
            "Open sight line from %s (left=%s, right=%s)",
            np.round(origin, 3).tolist(),
            result.left_hit is not None,
            result.right_hit is not None,
        )
    return result
