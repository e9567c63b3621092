"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


class FakeInterpreter:
    """
    Stand-in for a TFLite interpreter.

    Serves canned output tensors and records what was bound to the input
    slot. Output tensors are given in slot order and keep their batch
    dimension, as the real engine returns them.
    """

    def __init__(
        self,
        input_shape=(1, 4, 4, 3),
        input_dtype=np.float32,
        quantization=(0.0, 0),
        outputs=None,
        fail_on_invoke=False,
    ):
        self.input_shape = tuple(input_shape)
        self.input_dtype = input_dtype
        self.quantization = quantization
        self.outputs = [np.asarray(o) for o in (outputs or [])]
        self.fail_on_invoke = fail_on_invoke
        self.bound = {}
        self.invocations = 0

    def get_input_details(self):
        return [{
            "name": "input",
            "index": 0,
            "shape": np.array(self.input_shape, dtype=np.int32),
            "dtype": self.input_dtype,
            "quantization": self.quantization,
        }]

    def get_output_details(self):
        return [
            {"name": f"output_{i}", "index": 100 + i, "shape": np.array(o.shape, dtype=np.int32)}
            for i, o in enumerate(self.outputs)
        ]

    def set_tensor(self, index, value):
        self.bound[index] = np.array(value, copy=True)

    def invoke(self):
        if self.fail_on_invoke:
            raise RuntimeError("engine exploded")
        self.invocations += 1

    def get_tensor(self, index):
        return self.outputs[index - 100]

    def allocate_tensors(self):
        pass


def detection_outputs(locations, classes, scores, count=None):
    """Build the four SSD output tensors with a batch dimension."""
    locations = np.asarray(locations, dtype=np.float32).reshape(1, -1, 4)
    classes = np.asarray(classes, dtype=np.float32).reshape(1, -1)
    scores = np.asarray(scores, dtype=np.float32).reshape(1, -1)
    if count is None:
        count = classes.shape[1]
    return [locations, classes, scores, np.array([count], dtype=np.float32)]


@pytest.fixture
def fake_interpreter_factory():
    """Return the FakeInterpreter class for per-test construction."""
    return FakeInterpreter


@pytest.fixture
def rgb_frame():
    """A 6x8 RGB frame with a constant (255, 128, 0) color."""
    frame = np.zeros((6, 8, 3), dtype=np.uint8)
    frame[...] = (255, 128, 0)
    return frame


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  backend: "opencv"
  device_id: 0
  supported_resolutions: [[320, 240], [640, 480]]
  resolution_policy: "lowest"
  fps: 30

engine:
  num_threads: 2
  acceleration: "none"

model:
  task: "detection"
  path: "detect.tflite"
  labels: ["person", "dog", "cat"]
  min_confidence: 0.6

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "backend": "opencv",
            "device_id": 0,
            "resolution": [640, 480],
            "resolution_policy": "exact",
            "supported_resolutions": [[320, 240], [640, 480]],
            "fps": 30,
        },
        "engine": {
            "num_threads": 4,
            "acceleration": "gpu",
            "use_xnnpack": True,
        },
        "model": {
            "task": "detection",
            "path": "detect.tflite",
            "asset_dirs": ["models"],
            "labels": ["person", "dog", "cat"],
            "quantized": True,
            "min_confidence": 0.5,
            "draw_annotations": False,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
