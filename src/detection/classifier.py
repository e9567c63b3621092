"""
TFLite image classifier.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from decoding.classification import label_probabilities, top_k_recognitions
from inference.backend import Interpreter
from inference.invoker import run_classification
from models.config import ClassifierConfig
from models.model_spec import ModelSpec
from models.recognition import Recognition
from preprocessing.frame import FramePreprocessor
from .base import FrameInput, Recognizer, unpack_frame


class TensorImageClassifier(Recognizer[Recognition]):
    """
    Image classifier over a loaded TFLite interpreter.

    Returns the ``top_k`` most confident labels, highest first. ``top_k == 0``
    returns every label. Not safe for concurrent use.
    """

    def __init__(
        self,
        interpreter: Interpreter,
        spec: ModelSpec,
        labels: Sequence[str],
        config: ClassifierConfig,
    ) -> None:
        self.interpreter = interpreter
        self.spec = spec
        self.labels = list(labels)
        self.config = config
        self.top_k = config.top_k
        self.preprocessor = FramePreprocessor(spec, color_order=config.color_order)

        logging.info(
            f"Image classifier initialized: input={spec.input_width}x{spec.input_height}, "
            f"labels={len(self.labels)}, top_k={self.top_k}, quantized={spec.quantized}"
        )

    def recognize(self, frame: FrameInput) -> List[Recognition]:
        """
        Classify one frame.

        Raises:
            UnsupportedInputFormat: If the frame is not 8-bit 3/4-channel.
            InferenceFailure: If the engine call fails.
            LabelCountMismatch: If the label count differs from the output size.
        """
        image, _ = unpack_frame(frame)
        input_tensor = self.preprocessor.process(image)
        probabilities = run_classification(self.interpreter, input_tensor)
        labelled = label_probabilities(self.labels, probabilities, quantized=self.spec.quantized)
        return top_k_recognitions(labelled, self.top_k)
