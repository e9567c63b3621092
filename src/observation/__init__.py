"""
Frame sources: cameras, video files and still images, all yielding FrameData.
"""

from .base import CameraError, FrameSource, SourceConfig
from .opencv_source import CameraSource, CameraSourceConfig, select_resolution
from .image_source import ImageFileSource, ImageSourceConfig

__all__ = [
    "CameraError",
    "FrameSource",
    "SourceConfig",
    "CameraSource",
    "CameraSourceConfig",
    "select_resolution",
    "ImageFileSource",
    "ImageSourceConfig",
]
