"""
Classifier and detector front-ends over the TFLite pipeline.
"""

from .base import Recognizer, FrameInput
from .classifier import TensorImageClassifier
from .detector import TensorObjectDetector
from .factory import build_classifier, build_detector, create_recognizer_from_config

__all__ = [
    "Recognizer",
    "FrameInput",
    "TensorImageClassifier",
    "TensorObjectDetector",
    "build_classifier",
    "build_detector",
    "create_recognizer_from_config",
]
