"""
Recognizer interface.

Both the image classifier and the object detector take a frame and return a
list of results. The frame may be a bare numpy image (timestamped on arrival)
or a FrameData carrying its capture timestamp.
"""

from __future__ import annotations

import time
from typing import Generic, List, Tuple, TypeVar, Union

import numpy as np

from models.frame import FrameData

ResultT = TypeVar("ResultT")
FrameInput = Union[np.ndarray, FrameData]


def unpack_frame(frame: FrameInput) -> Tuple[np.ndarray, float]:
    """Return (image, capture timestamp) for either frame form."""
    if isinstance(frame, FrameData):
        return frame.frame, frame.timestamp
    return frame, time.time()


class Recognizer(Generic[ResultT]):
    """Recognizer interface returning results for one frame."""

    def recognize(self, frame: FrameInput) -> List[ResultT]:
        raise NotImplementedError
