"""
Draw detections onto a frame, in place.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import cv2
import numpy as np

from models.detection import Detection

# Neon green, RGB.
ANNOTATION_RGB: Tuple[int, int, int] = (57, 255, 20)


def annotation_color(color_order: str, channels: int) -> Tuple[int, ...]:
    """Annotation color in the frame's own channel layout."""
    r, g, b = ANNOTATION_RGB
    color: Tuple[int, ...] = (b, g, r) if color_order == "bgr" else (r, g, b)
    if channels == 4:
        color = color + (255,)
    return color


def caption(detection: Detection) -> str:
    return f"{detection.label} {detection.confidence * 100.0:.0f}%"


def draw_detections(
    frame: np.ndarray,
    detections: Sequence[Detection],
    color_order: str = "rgb",
    thickness: int = 2,
) -> np.ndarray:
    """
    Paint each detection's box and a "label NN%" caption onto ``frame``.

    The frame is modified in place and also returned for chaining.
    """
    color = annotation_color(color_order, frame.shape[2] if frame.ndim == 3 else 1)
    for det in detections:
        left, top, right, bottom = det.location.as_int_tuple()
        cv2.rectangle(frame, (left, top), (right, bottom), color, thickness)
        cv2.putText(
            frame,
            caption(det),
            (left, max(top - 6, 12)),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            color,
            1,
            cv2.LINE_AA,
        )
    return frame
