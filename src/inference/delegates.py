"""
Hardware acceleration delegates.

Delegates are opaque engine plugins. This module only decides which one to
ask the engine for and degrades to CPU execution when the device cannot
provide it.
"""

from __future__ import annotations

import logging
from typing import Any, List

from models.config import AccelerationMode, EngineConfig
from ops.logging import add_global_warning


def load_acceleration_delegates(cfg: EngineConfig, runtime: Any) -> List[Any]:
    """
    Load the delegate requested by ``cfg.acceleration``.

    Args:
        cfg: Engine configuration.
        runtime: The ``tflite_runtime.interpreter`` module (or a stand-in
            exposing ``load_delegate``).

    Returns:
        A list with zero or one delegate, ready for ``experimental_delegates``.
    """
    if cfg.acceleration == AccelerationMode.NONE:
        return []

    mode = cfg.acceleration.value
    library = cfg.delegate_paths.get(mode)
    if not library:
        add_global_warning(
            f"WARNING! No delegate library configured for {mode.upper()} acceleration. "
            f"Disabling {mode.upper()} acceleration."
        )
        return []

    try:
        delegate = runtime.load_delegate(library)
    except (ValueError, OSError, RuntimeError) as e:
        add_global_warning(
            f"WARNING! {mode.upper()} acceleration is NOT supported on this device ({e}). "
            f"Disabling {mode.upper()} acceleration."
        )
        return []

    logging.info(f"Loaded {mode.upper()} delegate from {library}")
    return [delegate]
