"""
TFLite object detector.

Runs an SSD-style detection model (outputs: locations, classes, scores,
count) on camera frames and returns detections in frame pixel coordinates.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from decoding.annotate import draw_detections
from decoding.detection import decode_detections
from inference.backend import Interpreter
from inference.invoker import run_detection
from models.config import DetectorConfig
from models.detection import Detection
from models.model_spec import ModelSpec
from preprocessing.frame import FramePreprocessor, check_frame_format
from .base import FrameInput, Recognizer, unpack_frame


class TensorObjectDetector(Recognizer[Detection]):
    """
    Object detector over a loaded TFLite interpreter.

    Not safe for concurrent use: the preprocessor input buffer is reused on
    every call. Use one instance per thread.

    Example:
        detector = build_detector(DetectorConfig(model_path="ssd.tflite", labels=labels))
        for det in detector.recognize(frame):
            print(det)
    """

    def __init__(
        self,
        interpreter: Interpreter,
        spec: ModelSpec,
        labels: Sequence[str],
        config: DetectorConfig,
    ) -> None:
        self.interpreter = interpreter
        self.spec = spec
        self.labels = list(labels)
        self.config = config
        self.preprocessor = FramePreprocessor(spec, color_order=config.color_order)

        logging.info(
            f"Object detector initialized: input={spec.input_width}x{spec.input_height}, "
            f"candidates={spec.num_candidates}, labels={len(self.labels)}, "
            f"quantized={spec.quantized}, min_confidence={config.min_confidence}"
        )

    def recognize(self, frame: FrameInput) -> List[Detection]:
        """
        Run detection on one frame.

        When ``draw_annotations`` is enabled the kept detections are painted
        onto the caller's frame in place.

        Returns:
            Detections above ``min_confidence`` in model output order.

        Raises:
            UnsupportedInputFormat: If the frame is not 8-bit 3/4-channel.
            InferenceFailure: If the engine call fails.
            LabelCountMismatch: If class indices do not fit the labels.
        """
        image, timestamp = unpack_frame(frame)
        check_frame_format(image)
        height, width = image.shape[:2]

        input_tensor = self.preprocessor.process(image)
        outputs = run_detection(self.interpreter, input_tensor)

        detections = decode_detections(
            outputs,
            self.labels,
            frame_width=width,
            frame_height=height,
            min_confidence=self.config.min_confidence,
            timestamp=timestamp,
        )

        if self.config.draw_annotations and detections:
            draw_detections(image, detections, color_order=self.config.color_order)

        return detections
