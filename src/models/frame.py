"""
FrameData model for captured camera frames.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass
class FrameData:
    """
    Payload and capture metadata for a single frame.

    Attributes:
        frame: The raw frame as an HxWxC uint8 numpy array.
        width: Frame width in pixels.
        height: Frame height in pixels.
        timestamp: Unix timestamp when the frame was captured.
        frame_index: Sequential frame number since the source was opened.
        source: Identifier for the camera/image source.
    """
    frame: np.ndarray
    width: int
    height: int
    timestamp: float
    frame_index: int = 0
    source: Optional[str] = None

    @classmethod
    def from_numpy(
        cls,
        frame: np.ndarray,
        timestamp: Optional[float] = None,
        frame_index: int = 0,
        source: Optional[str] = None,
    ) -> "FrameData":
        """Create FrameData from a numpy array. Timestamp defaults to now."""
        h, w = frame.shape[:2]
        return cls(
            frame=frame,
            width=w,
            height=h,
            timestamp=time.time() if timestamp is None else timestamp,
            frame_index=frame_index,
            source=source,
        )

    @classmethod
    def from_argb(
        cls,
        pixels: np.ndarray,
        timestamp: Optional[float] = None,
        source: Optional[str] = None,
    ) -> "FrameData":
        """
        Adapter: Create FrameData from a packed 32-bit ARGB pixel matrix.

        The result holds a 4-channel RGBA frame, which the preprocessor
        reduces to RGB like any other 4-channel input.
        """
        from preprocessing.frame import argb_to_rgba

        return cls.from_numpy(argb_to_rgba(pixels), timestamp=timestamp, source=source)

    @property
    def shape(self) -> Tuple[int, ...]:
        """Return (height, width, channels)."""
        return self.frame.shape

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)
