"""
Still images from disk, one FrameData per readable file.

Images keep their stored channel count (alpha included) so the
preprocessor sees them unchanged.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

import cv2
import numpy as np

from .base import FrameSource, SourceConfig


@dataclass
class ImageSourceConfig(SourceConfig):
    """
    Attributes:
        paths: Image files to read, in order.
    """
    paths: List[str] = field(default_factory=list)


class ImageFileSource(FrameSource):
    """Reads each configured path once; unreadable files are skipped."""

    def __init__(self, config: ImageSourceConfig):
        super().__init__(config)
        self._pending: List[str] = []
        self._current = ""

    @property
    def frame_label(self) -> str:
        return os.path.basename(self._current)

    def _start(self) -> None:
        self._pending = list(self.config.paths)

    def _grab(self) -> Optional[np.ndarray]:
        while self._pending:
            self._current = self._pending.pop(0)
            image = cv2.imread(self._current, cv2.IMREAD_UNCHANGED)
            if image is not None:
                return image
            logging.warning(f"Skipping unreadable image: {self._current}")
        return None
