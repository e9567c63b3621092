"""
TFLite inference engine layer: errors, model loading, delegates and the
single-pass invoker.
"""

from .errors import (
    TensorProcessingError,
    AssetLoadFailure,
    UnsupportedInputFormat,
    LabelCountMismatch,
    InferenceFailure,
)
from .invoker import DetectionOutputs, run_detection, run_classification

__all__ = [
    "TensorProcessingError",
    "AssetLoadFailure",
    "UnsupportedInputFormat",
    "LabelCountMismatch",
    "InferenceFailure",
    "DetectionOutputs",
    "run_detection",
    "run_classification",
]
