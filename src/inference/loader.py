"""
Model loading.

Resolves a named model asset, maps it read-only, and builds a TFLite
interpreter bound to that buffer and an EngineConfig. The model's input and
output tensor shapes are then read back into a ModelSpec.
"""

from __future__ import annotations

import logging
import mmap
import os
from typing import Any, List, Optional, Sequence

import numpy as np

from models.config import EngineConfig
from models.model_spec import ModelSpec
from .backend import Interpreter
from .delegates import load_acceleration_delegates
from .errors import AssetLoadFailure
from ops.logging import add_global_warning


def import_tflite_runtime() -> Any:
    """Return the ``tflite_runtime.interpreter`` module."""
    try:
        import tflite_runtime.interpreter as tflite  # type: ignore
    except ImportError as e:  # pragma: no cover
        raise ImportError(
            "tflite-runtime is not installed. Install with `pip install tflite-runtime` "
            "(or the project's `tflite` extra)."
        ) from e
    return tflite


def resolve_model_path(model_name: str, asset_dirs: Optional[Sequence[str]] = None) -> str:
    """
    Resolve a model asset name to a file path.

    Absolute paths and paths that exist relative to the working directory are
    used as-is; otherwise each asset directory is searched in order.

    Raises:
        AssetLoadFailure: If the asset cannot be found.
    """
    if not model_name:
        raise AssetLoadFailure("No model asset configured")

    if os.path.isabs(model_name) or os.path.isfile(model_name):
        if os.path.isfile(model_name):
            return model_name
        raise AssetLoadFailure(f"Model asset not found: {model_name}")

    for asset_dir in asset_dirs or []:
        candidate = os.path.join(asset_dir, model_name)
        if os.path.isfile(candidate):
            return candidate

    searched = ", ".join(asset_dirs or []) or "(no asset dirs)"
    raise AssetLoadFailure(f"Model asset '{model_name}' not found in: {searched}")


def map_model_file(path: str, offset: int = 0, length: Optional[int] = None) -> bytes:
    """
    Map a model file read-only and return the declared region.

    Args:
        path: Model file path.
        offset: Start of the model inside the file (assets may be packed).
        length: Declared model length. None means "to the end of the file".

    Raises:
        AssetLoadFailure: If the file cannot be opened or mapped, or the
            declared region falls outside the file.
    """
    try:
        with open(path, "rb") as f:
            with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as mapped:
                end = len(mapped) if length is None else offset + length
                if offset < 0 or end > len(mapped) or end <= offset:
                    raise AssetLoadFailure(
                        f"Declared model region [{offset}, {end}) is outside {path} "
                        f"({len(mapped)} bytes)"
                    )
                return mapped[offset:end]
    except AssetLoadFailure:
        raise
    except (OSError, ValueError) as e:
        raise AssetLoadFailure(f"Failed to map model asset {path}: {e}") from e


def load_labels(path: str) -> List[str]:
    """
    Load a labels file with one label per line. Blank lines are skipped.

    Raises:
        AssetLoadFailure: If the file cannot be read.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return [line.strip() for line in f if line.strip()]
    except OSError as e:
        raise AssetLoadFailure(f"Failed to read labels file {path}: {e}") from e


def _engine_thread_count(cfg: EngineConfig) -> Optional[int]:
    if cfg.num_threads is None:
        return None
    if cfg.num_threads < 1:
        add_global_warning(
            f"WARNING! num_threads={cfg.num_threads} is invalid. Using the engine default."
        )
        return -1
    return cfg.num_threads


def create_interpreter(
    model_content: bytes,
    cfg: EngineConfig,
    runtime: Any = None,
) -> Interpreter:
    """
    Build and allocate an interpreter for a mapped model.

    Args:
        model_content: The mapped model buffer.
        cfg: Engine configuration.
        runtime: The ``tflite_runtime.interpreter`` module. Imported when None.

    Raises:
        AssetLoadFailure: If the engine rejects the model buffer.
    """
    if runtime is None:
        runtime = import_tflite_runtime()

    kwargs = {
        "model_content": model_content,
        "num_threads": _engine_thread_count(cfg),
        "experimental_delegates": load_acceleration_delegates(cfg, runtime),
    }
    if not cfg.use_xnnpack:
        kwargs["experimental_op_resolver_type"] = runtime.OpResolverType.BUILTIN_WITHOUT_DEFAULT_DELEGATES

    logging.debug(
        f"Engine options: allow_buffer_handle_output={cfg.allow_buffer_handle_output}, "
        f"cancellable={cfg.cancellable} (not exposed by the Python interpreter)"
    )

    try:
        interpreter = runtime.Interpreter(**kwargs)
        interpreter.allocate_tensors()
    except (ValueError, RuntimeError) as e:
        raise AssetLoadFailure(f"Inference engine rejected the model: {e}") from e

    logging.info(
        f"Interpreter ready (threads={cfg.num_threads}, acceleration={cfg.acceleration.value}, "
        f"xnnpack={cfg.use_xnnpack}, delegates={len(kwargs['experimental_delegates'])})"
    )
    return interpreter


def read_model_spec(interpreter: Interpreter, quantized: bool, detection: bool = False) -> ModelSpec:
    """
    Read the model's input contract (and detection candidate count).

    The input tensor is NHWC with batch 1: ``[1, height, width, channels]``.
    """
    input_detail = interpreter.get_input_details()[0]
    shape = [int(x) for x in input_detail["shape"]]
    height, width = shape[1], shape[2]

    scale, zero_point = input_detail.get("quantization", (0.0, 0)) or (0.0, 0)

    num_candidates = None
    if detection:
        outputs = interpreter.get_output_details()
        if outputs:
            num_candidates = int(outputs[0]["shape"][1])

    return ModelSpec(
        input_width=width,
        input_height=height,
        input_channels=3,
        quantized=quantized,
        input_dtype=np.dtype(input_detail.get("dtype", np.uint8 if quantized else np.float32)).type,
        input_scale=float(scale),
        input_zero_point=int(zero_point),
        num_candidates=num_candidates,
    )
