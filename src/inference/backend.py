"""
Inference engine interface.

The pipeline drives the engine only through this surface, which the TFLite
``Interpreter`` provides. Tests substitute a fake with the same methods.
"""

from __future__ import annotations

from typing import Any, Dict, List, Protocol

import numpy as np


class Interpreter(Protocol):
    def get_input_details(self) -> List[Dict[str, Any]]:
        ...

    def get_output_details(self) -> List[Dict[str, Any]]:
        ...

    def set_tensor(self, tensor_index: int, value: np.ndarray) -> None:
        ...

    def invoke(self) -> None:
        ...

    def get_tensor(self, tensor_index: int) -> np.ndarray:
        ...
