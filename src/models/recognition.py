"""
Recognition model for image classification results.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Recognition:
    """
    One labelled class probability from an image classifier.

    Attributes:
        label: Class label.
        confidence: Probability reported by the model, passed through unmodified.
    """
    label: str
    confidence: float

    def __str__(self) -> str:
        return f"[{self.label}] {self.label} ({self.confidence * 100.0:.1f}%)"

    def to_dict(self) -> dict:
        return {"label": self.label, "confidence": float(self.confidence)}
