"""
Single forward pass through the interpreter.

Detection models follow the SSD post-processing convention: four output
slots in the fixed order locations, classes, scores, count.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .backend import Interpreter
from .errors import InferenceFailure

DETECTION_OUTPUT_SLOTS = ("locations", "classes", "scores", "count")


@dataclass(frozen=True)
class DetectionOutputs:
    """
    Raw detection tensors with the batch dimension removed.

    Attributes:
        locations: (N, 4) normalized ``(ymin, xmin, ymax, xmax)`` boxes.
        classes: (N,) class indices, as floats.
        scores: (N,) candidate scores.
        count: Number of valid candidates reported by the model.
    """
    locations: np.ndarray
    classes: np.ndarray
    scores: np.ndarray
    count: float

    @property
    def num_candidates(self) -> int:
        return int(self.classes.shape[0])


def _bind_input(interpreter: Interpreter, input_tensor: np.ndarray) -> None:
    input_index = interpreter.get_input_details()[0]["index"]
    interpreter.set_tensor(input_index, input_tensor)


def run_detection(interpreter: Interpreter, input_tensor: np.ndarray) -> DetectionOutputs:
    """
    Run one detection pass and collect the four output slots.

    Raises:
        InferenceFailure: If the engine fails, or the model does not expose
            the four detection outputs.
    """
    try:
        _bind_input(interpreter, input_tensor)
        interpreter.invoke()
        output_details = interpreter.get_output_details()
        if len(output_details) < len(DETECTION_OUTPUT_SLOTS):
            raise InferenceFailure(
                f"Detection model exposes {len(output_details)} outputs, expected "
                f"{len(DETECTION_OUTPUT_SLOTS)} ({', '.join(DETECTION_OUTPUT_SLOTS)})"
            )
        locations, classes, scores, count = (
            np.asarray(interpreter.get_tensor(output_details[i]["index"]))
            for i in range(len(DETECTION_OUTPUT_SLOTS))
        )
    except InferenceFailure:
        raise
    except Exception as e:
        raise InferenceFailure(f"Detection inference failed: {e}") from e

    return DetectionOutputs(
        locations=locations.reshape(-1, 4).astype(np.float32, copy=False),
        classes=classes.reshape(-1).astype(np.float32, copy=False),
        scores=scores.reshape(-1).astype(np.float32, copy=False),
        count=float(count.reshape(-1)[0]),
    )


def run_classification(interpreter: Interpreter, input_tensor: np.ndarray) -> np.ndarray:
    """
    Run one classification pass and return the raw probability vector.

    Raises:
        InferenceFailure: If the engine fails.
    """
    try:
        _bind_input(interpreter, input_tensor)
        interpreter.invoke()
        output_index = interpreter.get_output_details()[0]["index"]
        probabilities = np.asarray(interpreter.get_tensor(output_index))
    except Exception as e:
        raise InferenceFailure(f"Classification inference failed: {e}") from e

    return probabilities.reshape(-1)
