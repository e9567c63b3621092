"""
Classification output decoding: probability vector -> ranked recognitions.
"""

from __future__ import annotations

import heapq
from typing import Dict, List, Sequence

import numpy as np

from inference.errors import LabelCountMismatch
from models.recognition import Recognition


def label_probabilities(
    labels: Sequence[str],
    probabilities: np.ndarray,
    quantized: bool = False,
) -> Dict[str, float]:
    """
    Pair each label with its probability.

    Quantized models emit 0-255 integers, which are scaled to [0, 1]. Float
    outputs are passed through unchanged.

    Raises:
        LabelCountMismatch: If the label count differs from the output size.
    """
    values = np.asarray(probabilities).reshape(-1)
    if len(labels) != values.shape[0]:
        raise LabelCountMismatch(
            f"Model produced {values.shape[0]} class probabilities but {len(labels)} labels "
            f"were supplied"
        )
    values = values.astype(np.float32)
    if quantized:
        values = values / np.float32(255.0)
    return {label: float(value) for label, value in zip(labels, values)}


def top_k_recognitions(labelled: Dict[str, float], k: int) -> List[Recognition]:
    """
    Keep the ``k`` most confident labels, highest first.

    ``k == 0`` returns every label exactly once. Order among equal
    confidences is not guaranteed.
    """
    if k < 0:
        raise ValueError(f"k must be >= 0, got {k}")
    limit = len(labelled) if k == 0 else k
    best = heapq.nlargest(limit, labelled.items(), key=lambda item: item[1])
    return [Recognition(label=label, confidence=confidence) for label, confidence in best]
