"""
Frame preprocessing: camera frame -> model input tensor.

Steps, in order:
1. reject anything that is not an 8-bit 3- or 4-channel image
2. drop alpha / reorder channels to RGB
3. promote to uint16 so arithmetic cannot overflow
4. bilinear resize to the model input size (always, even when sizes match)
5. copy raw pixel bytes (uint8 models), shift by -128 (int8 models) or
   normalize to [-1, 1] (float models)

Gray or other channel counts are rejected, never expanded.
"""

from __future__ import annotations

import cv2
import numpy as np

from inference.errors import UnsupportedInputFormat
from models.model_spec import ModelSpec

FLOAT_MEAN = 127.5
FLOAT_STD = 127.5
INT8_PIXEL_OFFSET = 128

_TO_RGB = {
    ("rgb", 3): None,
    ("rgb", 4): cv2.COLOR_RGBA2RGB,
    ("bgr", 3): cv2.COLOR_BGR2RGB,
    ("bgr", 4): cv2.COLOR_BGRA2RGB,
}


def argb_to_rgba(pixels: np.ndarray) -> np.ndarray:
    """
    Unpack a packed 32-bit ARGB pixel matrix into an HxWx4 RGBA uint8 array.

    Raises:
        UnsupportedInputFormat: If ``pixels`` is not a 2-D integer matrix.
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 2 or not np.issubdtype(pixels.dtype, np.integer):
        raise UnsupportedInputFormat(
            f"Packed ARGB input must be a 2-D integer matrix (got shape {pixels.shape}, "
            f"dtype {pixels.dtype})"
        )
    packed = pixels.astype(np.uint32)
    rgba = np.empty(packed.shape + (4,), dtype=np.uint8)
    rgba[..., 0] = (packed >> 16) & 0xFF
    rgba[..., 1] = (packed >> 8) & 0xFF
    rgba[..., 2] = packed & 0xFF
    rgba[..., 3] = (packed >> 24) & 0xFF
    return rgba


def check_frame_format(frame: np.ndarray) -> int:
    """
    Validate the frame layout and return its channel count.

    Raises:
        UnsupportedInputFormat: If the frame is not 8-bit with 3 or 4 channels.
    """
    if not isinstance(frame, np.ndarray):
        raise UnsupportedInputFormat(f"Expected a numpy image, got {type(frame).__name__}")
    if frame.dtype != np.uint8 or frame.ndim != 3 or frame.shape[2] not in (3, 4):
        raise UnsupportedInputFormat(
            "At this time only 8-bit images with 3 or 4 channels are supported "
            f"(got shape {frame.shape}, dtype {frame.dtype})"
        )
    return int(frame.shape[2])


class FramePreprocessor:
    """
    Converts frames into the input tensor a model expects.

    The returned tensor lives in a buffer owned by this instance and is
    overwritten by the next call. One instance must not be shared across
    threads.
    """

    def __init__(self, spec: ModelSpec, color_order: str = "rgb") -> None:
        """
        Args:
            spec: Input contract of the loaded model.
            color_order: Channel order of incoming frames, "rgb" or "bgr".
        """
        if color_order not in ("rgb", "bgr"):
            raise ValueError(f"color_order must be 'rgb' or 'bgr', got {color_order!r}")
        self.spec = spec
        self.color_order = color_order

        if spec.quantized:
            dtype = spec.input_dtype if np.issubdtype(spec.input_dtype, np.integer) else np.uint8
        else:
            dtype = np.float32
        self._buffer = np.zeros(spec.input_shape, dtype=dtype)

    @property
    def dtype(self) -> np.dtype:
        return self._buffer.dtype

    def process(self, frame: np.ndarray) -> np.ndarray:
        """
        Preprocess one frame.

        Args:
            frame: HxWx3 or HxWx4 uint8 image in ``color_order``.

        Returns:
            (1, H, W, 3) C-contiguous tensor for the model input slot.

        Raises:
            UnsupportedInputFormat: If the frame layout is not supported.
        """
        channels = check_frame_format(frame)

        code = _TO_RGB[(self.color_order, channels)]
        rgb = frame if code is None else cv2.cvtColor(frame, code)

        promoted = rgb.astype(np.uint16)
        resized = cv2.resize(
            promoted,
            (self.spec.input_width, self.spec.input_height),
            interpolation=cv2.INTER_LINEAR,
        )

        if self.spec.quantized:
            self._quantize_into(resized)
        else:
            np.subtract(resized, FLOAT_MEAN, out=self._buffer[0], dtype=np.float32, casting="unsafe")
            np.divide(self._buffer[0], FLOAT_STD, out=self._buffer[0])
        return self._buffer

    def _quantize_into(self, resized: np.ndarray) -> None:
        # Integer models take pixel bytes as-is; the reported input scale and
        # zero point are not applied.
        if np.issubdtype(self._buffer.dtype, np.signedinteger):
            np.subtract(resized, INT8_PIXEL_OFFSET, out=self._buffer[0], dtype=np.int16, casting="unsafe")
        else:
            self._buffer[0] = resized

    def tensor_bytes(self) -> bytes:
        """Raw bytes of the current input buffer (channel-interleaved, native byte order)."""
        return self._buffer.tobytes()
