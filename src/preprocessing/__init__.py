"""
Frame preprocessing for TFLite model inputs.
"""

from .frame import FramePreprocessor, argb_to_rgba, check_frame_format

__all__ = [
    "FramePreprocessor",
    "argb_to_rgba",
    "check_frame_format",
]
