"""
Typed models for the TFLite vision runtime.

Value objects returned by the classifier/detector, the frame payload and the
typed configuration tree built from the YAML config.
"""

from .frame import FrameData
from .detection import Detection, BoundingBox
from .recognition import Recognition
from .model_spec import ModelSpec
from .config import (
    Config,
    CameraConfig,
    EngineConfig,
    AccelerationMode,
    ClassifierConfig,
    DetectorConfig,
)

__all__ = [
    # Frame
    "FrameData",
    # Results
    "Detection",
    "BoundingBox",
    "Recognition",
    # Model contract
    "ModelSpec",
    # Config
    "Config",
    "CameraConfig",
    "EngineConfig",
    "AccelerationMode",
    "ClassifierConfig",
    "DetectorConfig",
]
