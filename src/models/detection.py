"""
Detection models for object detection results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    A bounding box in image pixel coordinates.

    Attributes:
        left: Left edge x coordinate.
        top: Top edge y coordinate.
        right: Right edge x coordinate.
        bottom: Bottom edge y coordinate.
    """
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)

    @property
    def area(self) -> float:
        return self.width * self.height

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return as (left, top, right, bottom) tuple."""
        return (self.left, self.top, self.right, self.bottom)

    def as_int_tuple(self) -> Tuple[int, int, int, int]:
        """Return as integer (left, top, right, bottom) tuple."""
        return (int(self.left), int(self.top), int(self.right), int(self.bottom))

    @classmethod
    def from_normalized(
        cls,
        ymin: float,
        xmin: float,
        ymax: float,
        xmax: float,
        width: int,
        height: int,
    ) -> "BoundingBox":
        """Create from SSD-style normalized (ymin, xmin, ymax, xmax) in [0, 1]."""
        return cls(
            left=float(xmin) * width,
            top=float(ymin) * height,
            right=float(xmax) * width,
            bottom=float(ymax) * height,
        )


class Detection:
    """
    A single detection from an object detection model.

    Only ``location`` may be reassigned after construction (callers remap
    boxes into their own coordinate frames); every other field is read-only.

    Attributes:
        sequence_id: Candidate index in the model output, as a string. This is
            not a track identity.
        label: Class label.
        confidence: Model score, passed through unmodified.
        location: Bounding box in image pixel coordinates.
        timestamp: Capture time of the frame (seconds since epoch).
    """

    __slots__ = ("_sequence_id", "_label", "_confidence", "location", "_timestamp")

    def __init__(
        self,
        sequence_id: str,
        label: str,
        confidence: float,
        location: BoundingBox,
        timestamp: float,
    ) -> None:
        self._sequence_id = sequence_id
        self._label = label
        self._confidence = confidence
        self.location = location
        self._timestamp = timestamp

    @property
    def sequence_id(self) -> str:
        return self._sequence_id

    @property
    def label(self) -> str:
        return self._label

    @property
    def confidence(self) -> float:
        return self._confidence

    @property
    def timestamp(self) -> float:
        return self._timestamp

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Detection):
            return NotImplemented
        return (
            self._sequence_id == other._sequence_id
            and self._label == other._label
            and self._confidence == other._confidence
            and self.location == other.location
            and self._timestamp == other._timestamp
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Detection(sequence_id={self._sequence_id!r}, label={self._label!r}, "
            f"confidence={self._confidence!r}, location={self.location!r}, "
            f"timestamp={self._timestamp!r})"
        )

    def __str__(self) -> str:
        parts = []
        if self._sequence_id is not None:
            parts.append(f"[{self._sequence_id}]")
        if self._label is not None:
            parts.append(self._label)
        if self._confidence is not None:
            parts.append(f"({self._confidence * 100.0:.1f}%)")
        if self.location is not None:
            parts.append(str(self.location.as_tuple()))
        return " ".join(parts)

    def to_dict(self) -> dict:
        """Convert to a plain dict (for logging or JSON output)."""
        return {
            "sequence_id": self._sequence_id,
            "label": self._label,
            "confidence": float(self._confidence),
            "location": list(self.location.as_tuple()),
            "timestamp": self._timestamp,
        }
