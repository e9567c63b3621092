"""
Tests for result and frame models.
"""

import dataclasses

import numpy as np
import pytest

from models.detection import BoundingBox, Detection
from models.frame import FrameData
from models.model_spec import ModelSpec
from models.recognition import Recognition


class TestBoundingBox:
    def test_dimensions(self):
        box = BoundingBox(left=10, top=20, right=50, bottom=100)

        assert box.width == 40
        assert box.height == 80
        assert box.area == 3200
        assert box.center == (30, 60)

    def test_from_normalized_scales_to_frame(self):
        box = BoundingBox.from_normalized(0.1, 0.2, 0.5, 0.6, width=640, height=480)

        assert box.left == pytest.approx(128.0)
        assert box.top == pytest.approx(48.0)
        assert box.right == pytest.approx(384.0)
        assert box.bottom == pytest.approx(240.0)

    def test_as_int_tuple(self):
        box = BoundingBox(1.9, 2.2, 3.7, 4.1)

        assert box.as_int_tuple() == (1, 2, 3, 4)


class TestDetection:
    def _make(self, **overrides):
        fields = dict(
            sequence_id="0",
            label="dog",
            confidence=0.875,
            location=BoundingBox(1, 2, 3, 4),
            timestamp=1234.5,
        )
        fields.update(overrides)
        return Detection(**fields)

    def test_fields(self):
        det = self._make()

        assert det.sequence_id == "0"
        assert det.label == "dog"
        assert det.confidence == 0.875
        assert det.timestamp == 1234.5

    def test_location_is_reassignable(self):
        det = self._make()
        det.location = BoundingBox(5, 6, 7, 8)

        assert det.location == BoundingBox(5, 6, 7, 8)

    @pytest.mark.parametrize("attr", ["sequence_id", "label", "confidence", "timestamp"])
    def test_other_fields_read_only(self, attr):
        det = self._make()

        with pytest.raises(AttributeError):
            setattr(det, attr, "x")

    def test_equality(self):
        assert self._make() == self._make()
        assert self._make() != self._make(confidence=0.5)

    def test_str(self):
        det = self._make()

        assert str(det) == "[0] dog (87.5%) (1, 2, 3, 4)"

    def test_to_dict(self):
        d = self._make().to_dict()

        assert d["label"] == "dog"
        assert d["location"] == [1, 2, 3, 4]


class TestRecognition:
    def test_str(self):
        rec = Recognition(label="cat", confidence=0.25)

        assert str(rec) == "[cat] cat (25.0%)"

    def test_immutable(self):
        rec = Recognition(label="cat", confidence=0.25)

        with pytest.raises(dataclasses.FrozenInstanceError):
            rec.label = "dog"


class TestFrameData:
    def test_from_numpy(self):
        frame = np.zeros((480, 640, 3), dtype=np.uint8)

        fd = FrameData.from_numpy(frame, timestamp=12.0, source="cam")

        assert fd.width == 640
        assert fd.height == 480
        assert fd.size == (640, 480)
        assert fd.timestamp == 12.0
        assert fd.shape == (480, 640, 3)

    def test_from_numpy_defaults_timestamp(self):
        fd = FrameData.from_numpy(np.zeros((2, 2, 3), dtype=np.uint8))

        assert fd.timestamp > 0

    def test_from_argb(self):
        pixels = np.array([[0xFF102030, 0x80FF0000]], dtype=np.uint32)

        fd = FrameData.from_argb(pixels, timestamp=1.0)

        assert fd.shape == (1, 2, 4)
        assert tuple(fd.frame[0, 0]) == (0x10, 0x20, 0x30, 0xFF)
        assert tuple(fd.frame[0, 1]) == (0xFF, 0x00, 0x00, 0x80)


class TestModelSpec:
    def test_input_shape_is_nhwc(self):
        spec = ModelSpec(input_width=300, input_height=200)

        assert spec.input_shape == (1, 200, 300, 3)
        assert spec.input_size == (300, 200)
