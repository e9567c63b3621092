"""
Output decoding: raw model tensors -> Recognition / Detection results.
"""

from .classification import label_probabilities, top_k_recognitions
from .detection import decode_detections, resolve_class_score_swap, considered_candidates
from .annotate import draw_detections

__all__ = [
    "label_probabilities",
    "top_k_recognitions",
    "decode_detections",
    "resolve_class_score_swap",
    "considered_candidates",
    "draw_detections",
]
