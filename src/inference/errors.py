"""
Exception taxonomy for the inference pipeline.

Every error is raised synchronously at the call that detects it and is never
retried inside the pipeline. An unavailable hardware accelerator is not an
error: it is reported through the global warnings channel instead.
"""

from __future__ import annotations


class TensorProcessingError(Exception):
    """Base class for all inference pipeline errors."""


class AssetLoadFailure(TensorProcessingError, OSError):
    """The model (or labels) asset is missing or cannot be mapped. Raised at build time."""


class UnsupportedInputFormat(TensorProcessingError, ValueError):
    """The frame is not an 8-bit 3- or 4-channel image."""


class LabelCountMismatch(TensorProcessingError, ValueError):
    """Decoded class indices do not fit the label set, even after the class/score swap check."""


class InferenceFailure(TensorProcessingError, RuntimeError):
    """The underlying engine failed while binding tensors or running the model."""
