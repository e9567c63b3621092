"""
Frame sources feeding the recognizers.

A source hands out FrameData until it runs dry. The base class owns the
open/closed state, frame numbering and capture timestamps; subclasses only
know how to start, grab one image and stop.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from models.frame import FrameData


class CameraError(RuntimeError):
    """The camera cannot be opened or configured as requested."""


@dataclass
class SourceConfig:
    """
    Attributes:
        name: Label stamped on every FrameData this source produces.
    """
    name: str = "default"


class FrameSource(ABC):
    """
    Start/grab/stop template shared by cameras and image files.

        with CameraSource(cfg) as source:
            for frame_data in source:
                recognizer.recognize(frame_data)
    """

    def __init__(self, config: SourceConfig):
        self.config = config
        self._opened = False
        self._frames_read = 0

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def opened(self) -> bool:
        return self._opened

    @property
    def frames_read(self) -> int:
        return self._frames_read

    @property
    def frame_label(self) -> str:
        """Label for the frame just grabbed."""
        return self.name

    @abstractmethod
    def _start(self) -> None:
        """Acquire the underlying device or files. Raises CameraError."""

    @abstractmethod
    def _grab(self) -> Optional[np.ndarray]:
        """Next image, or None when the source is exhausted."""

    def _stop(self) -> None:
        pass

    def open(self) -> None:
        if self._opened:
            return
        self._start()
        self._opened = True
        self._frames_read = 0

    def read(self) -> Optional[FrameData]:
        if not self._opened:
            return None
        image = self._grab()
        captured_at = time.time()
        if image is None:
            return None
        self._frames_read += 1
        return FrameData.from_numpy(
            image,
            timestamp=captured_at,
            frame_index=self._frames_read,
            source=self.frame_label,
        )

    def close(self) -> None:
        if self._opened:
            self._stop()
        self._opened = False

    def __enter__(self) -> "FrameSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[FrameData]:
        if not self._opened:
            raise RuntimeError(f"Frame source '{self.name}' is not open")
        frame_data = self.read()
        while frame_data is not None:
            yield frame_data
            frame_data = self.read()
