"""
Detection output decoding: SSD-style output tensors -> image-space detections.
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from inference.errors import LabelCountMismatch
from inference.invoker import DetectionOutputs
from models.detection import BoundingBox, Detection


def considered_candidates(outputs: DetectionOutputs) -> int:
    """
    Number of candidates to decode.

    Models may report fewer valid detections than they have slots, and some
    report more than they have slots; the smaller bound wins.
    """
    if not math.isfinite(outputs.count):
        logging.warning(f"Model reported a non-finite detection count ({outputs.count}); decoding none")
        return 0
    return max(0, min(outputs.num_candidates, int(outputs.count)))


def _out_of_range(values: np.ndarray, num_labels: int) -> np.ndarray:
    indices = values.astype(np.int64)
    return (indices < 0) | (indices >= num_labels)


def resolve_class_score_swap(
    classes: np.ndarray,
    scores: np.ndarray,
    num_labels: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Detect models whose class and score outputs arrive in swapped slots.

    Some exported models order their outputs (locations, scores, classes, ...)
    instead of (locations, classes, scores, ...). When any class index falls
    outside the label set, the two tensors are swapped, provided every score
    is then a valid index.

    Args:
        classes: Class values of the considered candidates.
        scores: Score values of the considered candidates.
        num_labels: Size of the label set.

    Returns:
        ``(classes, scores)``, swapped if the outputs were swapped.

    Raises:
        LabelCountMismatch: If class indices overflow and swapping would not
            fix it.
    """
    if classes.size == 0 or not _out_of_range(classes, num_labels).any():
        return classes, scores

    if not _out_of_range(scores, num_labels).any():
        logging.warning(
            f"Class indices exceed the {num_labels} labels; model outputs look swapped. "
            "Reading classes from the score slot."
        )
        return scores, classes

    raise LabelCountMismatch(
        f"Model class indices do not fit {num_labels} labels: max class value "
        f"{float(classes.max()):g} (needs {int(classes.max()) + 1} labels), max score value "
        f"{float(scores.max()):g} (needs {int(scores.max()) + 1} labels). "
        "Check the label list and the model's output tensor order."
    )


def decode_detections(
    outputs: DetectionOutputs,
    labels: Sequence[str],
    frame_width: int,
    frame_height: int,
    min_confidence: float,
    timestamp: float,
) -> List[Detection]:
    """
    Convert detection tensors into detections in frame pixel coordinates.

    Candidates scoring strictly above ``min_confidence`` are kept, in the
    order the model emitted them (not sorted by confidence).
    """
    n = considered_candidates(outputs)
    classes, scores = resolve_class_score_swap(
        outputs.classes[:n], outputs.scores[:n], len(labels)
    )
    locations = outputs.locations[:n]

    detections: List[Detection] = []
    for i in range(n):
        score = float(scores[i])
        if not score > min_confidence:
            continue
        ymin, xmin, ymax, xmax = locations[i]
        detections.append(
            Detection(
                sequence_id=str(i),
                label=labels[int(classes[i])],
                confidence=score,
                location=BoundingBox.from_normalized(
                    ymin, xmin, ymax, xmax, frame_width, frame_height
                ),
                timestamp=timestamp,
            )
        )
    return detections
