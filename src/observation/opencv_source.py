"""
Camera and video-file frames through cv2.VideoCapture.

The capture size comes from a resolution policy over the sizes the camera
is known to support: the lowest, the highest, or an exact requested size.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from models.config import CameraConfig
from .base import CameraError, FrameSource, SourceConfig

RESOLUTION_POLICIES = ("lowest", "highest", "exact")

_ROTATIONS = {
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


def select_resolution(
    supported: Sequence[Sequence[int]],
    policy: str,
    requested: Optional[Sequence[int]] = None,
) -> Tuple[int, int]:
    """
    Pick a capture size from the supported sizes.

    Args:
        supported: Supported (width, height) sizes.
        policy: "lowest" or "highest" pixel count, or "exact" to require
            ``requested``.
        requested: (width, height) for the "exact" policy.

    Raises:
        CameraError: If no sizes are supported, the policy is unknown, or the
            exact size is not among them.
    """
    sizes = [(int(w), int(h)) for w, h in supported]
    if not sizes:
        raise CameraError("Camera reports no supported resolutions")

    if policy == "lowest":
        return min(sizes, key=lambda s: s[0] * s[1])
    if policy == "highest":
        return max(sizes, key=lambda s: s[0] * s[1])
    if policy == "exact":
        if requested is not None and (int(requested[0]), int(requested[1])) in sizes:
            return (int(requested[0]), int(requested[1]))
        listing = ", ".join(f"{w}x{h}" for w, h in sizes)
        raise CameraError(
            f"Camera does not support requested resolution {requested}. "
            f"Supported resolutions are {listing}"
        )
    raise CameraError(f"Unknown resolution policy '{policy}' (expected one of {RESOLUTION_POLICIES})")


@dataclass
class CameraSourceConfig(SourceConfig):
    """
    Attributes:
        device: Camera index, or a video file path.
        resolution: Requested (width, height); required by the "exact" policy.
        resolution_policy: "lowest", "highest" or "exact".
        supported_resolutions: Sizes the camera supports. When empty,
            ``resolution`` (if any) is requested as-is.
        fps: Requested frame rate, or None for the camera default.
        open_attempts: Tries before giving up on opening the device.
        rotate: Clockwise rotation in degrees (0, 90, 180, 270).
        flip_horizontal: Mirror left/right after rotating.
        flip_vertical: Mirror top/bottom after rotating.
    """
    device: Union[int, str] = 0
    resolution: Optional[Tuple[int, int]] = None
    resolution_policy: str = "lowest"
    supported_resolutions: List[Tuple[int, int]] = field(default_factory=list)
    fps: Optional[int] = None
    open_attempts: int = 3
    rotate: int = 0
    flip_horizontal: bool = False
    flip_vertical: bool = False

    @classmethod
    def from_camera_config(cls, camera: CameraConfig, name: str = "camera") -> "CameraSourceConfig":
        """Adapter: build from the typed ``camera`` config section."""
        return cls(
            name=name,
            device=camera.device_id,
            resolution=tuple(camera.resolution) if camera.resolution else None,
            resolution_policy=camera.resolution_policy,
            supported_resolutions=[tuple(r) for r in camera.supported_resolutions],
            fps=camera.fps,
            open_attempts=max(1, camera.max_retries),
            rotate=camera.rotate,
            flip_horizontal=camera.flip_horizontal,
            flip_vertical=camera.flip_vertical,
        )

    def capture_resolution(self) -> Optional[Tuple[int, int]]:
        """Size to request from the camera once the policy is applied."""
        if self.supported_resolutions:
            return select_resolution(self.supported_resolutions, self.resolution_policy, self.resolution)
        return tuple(self.resolution) if self.resolution else None


class CameraSource(FrameSource):
    """Frames from a webcam index or a video file."""

    def __init__(self, config: CameraSourceConfig):
        super().__init__(config)
        self.camera_config = config
        self._cap: Optional[cv2.VideoCapture] = None
        self._capture_size: Optional[Tuple[int, int]] = None

    @property
    def capture_size(self) -> Optional[Tuple[int, int]]:
        """Size requested from the camera (None for files or camera default)."""
        return self._capture_size

    def _start(self) -> None:
        cfg = self.camera_config
        if isinstance(cfg.device, int):
            self._capture_size = cfg.capture_resolution()

        for attempt in range(1, cfg.open_attempts + 1):
            cap = cv2.VideoCapture(cfg.device)
            if cap.isOpened():
                self._cap = cap
                break
            cap.release()
            logging.warning(f"Could not open {cfg.device} (attempt {attempt}/{cfg.open_attempts})")
            if attempt < cfg.open_attempts:
                time.sleep(1.0)
        else:
            raise CameraError(f"Could not open {cfg.device} after {cfg.open_attempts} attempts")

        if self._capture_size:
            width, height = self._capture_size
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        if cfg.fps:
            self._cap.set(cv2.CAP_PROP_FPS, cfg.fps)

        logging.info(
            f"Camera source '{self.name}' opened: device={cfg.device}, "
            f"requested={self._capture_size}, "
            f"actual={self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)}x{self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)}"
        )

    def _grab(self) -> Optional[np.ndarray]:
        ok, image = self._cap.read()
        if not ok or image is None:
            logging.info(f"Camera source '{self.name}' has no more frames")
            return None
        return self._orient(image)

    def _orient(self, image: np.ndarray) -> np.ndarray:
        cfg = self.camera_config
        if cfg.rotate in _ROTATIONS:
            image = cv2.rotate(image, _ROTATIONS[cfg.rotate])
        if cfg.flip_horizontal and cfg.flip_vertical:
            image = cv2.flip(image, -1)
        elif cfg.flip_horizontal:
            image = cv2.flip(image, 1)
        elif cfg.flip_vertical:
            image = cv2.flip(image, 0)
        return image

    def _stop(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        logging.info(f"Camera source '{self.name}' closed after {self.frames_read} frames")
