"""
Asynchronous retrieval of COLMAP text resources by logical name.

Logical names map to file names through a resource table (see
sightline.config.playback_config.DEFAULTS["resources"]). A name missing
from the table is used as a file name directly, so callers can also pass
e.g. "images.txt".

Two sources are provided:
  - DirectoryPoseSource: files under a local directory (read in a thread)
  - HttpPoseSource: files under an HTTP base URL (httpx.AsyncClient)

Neither retries; a failed fetch raises ResourceFetchError.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Mapping, Optional

import httpx

from sightline.errors import ResourceFetchError
from sightline.poses.decoder import decode_intrinsics, decode_points, decode_poses
from sightline.poses.records import CameraIntrinsics, CameraPoseRecord, Point3DRecord

logger = logging.getLogger("sightline.poses.source")

CAMERA_INTRINSICS = "camera_intrinsics"
CAMERA_TRAJECTORY = "camera_trajectory"
POINTS = "points"

DEFAULT_RESOURCES: dict[str, str] = {
    CAMERA_INTRINSICS: "cameras.txt",
    CAMERA_TRAJECTORY: "images.txt",
    POINTS: "points3D.txt",
}


class PoseSource:
    """Base class: fetch resource text by logical name."""

    def __init__(self, resources: Optional[Mapping[str, str]] = None):
        self.resources = dict(DEFAULT_RESOURCES)
        if resources:
            self.resources.update(resources)

    def resolve(self, name: str) -> str:
        """Logical name -> file name."""
        return self.resources.get(name, name)

    async def fetch_text(self, name: str) -> str:
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release any held connections."""

    async def __aenter__(self) -> "PoseSource":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    # -- decoded convenience loaders ---------------------------------------

    async def load_trajectory(self, name: str = CAMERA_TRAJECTORY) -> list[CameraPoseRecord]:
        return decode_poses(await self.fetch_text(name))

    async def load_intrinsics(self, name: str = CAMERA_INTRINSICS) -> list[CameraIntrinsics]:
        return decode_intrinsics(await self.fetch_text(name))

    async def load_points(self, name: str = POINTS) -> list[Point3DRecord]:
        return decode_points(await self.fetch_text(name))


class DirectoryPoseSource(PoseSource):
    """Read resources from files under *root*."""

    def __init__(self, root: str | Path, resources: Optional[Mapping[str, str]] = None):
        super().__init__(resources)
        self.root = Path(root)

    def path_for(self, name: str) -> Path:
        return self.root / self.resolve(name)

    async def fetch_text(self, name: str) -> str:
        path = self.path_for(name)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as e:
            raise ResourceFetchError(name, str(e), location=str(path)) from e


class HttpPoseSource(PoseSource):
    """Fetch resources relative to *base_url* over HTTP."""

    DEFAULT_TIMEOUT = 10.0  # seconds

    def __init__(
        self,
        base_url: str,
        resources: Optional[Mapping[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(resources)
        self.base_url = base_url.rstrip("/") + "/"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def url_for(self, name: str) -> str:
        return self.base_url + self.resolve(name).lstrip("/")

    async def fetch_text(self, name: str) -> str:
        url = self.url_for(name)
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ResourceFetchError(
                name, f"HTTP {e.response.status_code}", location=url
            ) from e
        except httpx.HTTPError as e:
            raise ResourceFetchError(name, str(e) or type(e).__name__, location=url) from e
        return resp.text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def open_source(location: str, resources: Optional[Mapping[str, str]] = None) -> PoseSource:
    """DirectoryPoseSource for paths, HttpPoseSource for http(s) URLs."""
    if location.startswith(("http://", "https://")):
        return HttpPoseSource(location, resources=resources)
    return DirectoryPoseSource(location, resources=resources)
