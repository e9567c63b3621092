"""
Tests for the command-line runner.
"""

from unittest.mock import MagicMock, patch

import cv2
import numpy as np

import main
from inference.errors import AssetLoadFailure
from models.recognition import Recognition


def _write_image(path):
    cv2.imwrite(str(path), np.zeros((4, 4, 3), dtype=np.uint8))
    return str(path)


class TestMain:
    def test_runs_over_images(self, temp_config_dir, tmp_path):
        image = _write_image(tmp_path / "a.png")
        out_dir = tmp_path / "out"
        recognizer = MagicMock()
        recognizer.recognize.return_value = [Recognition("dog", 0.9)]

        with patch("main.setup_logging"), \
                patch("main.create_recognizer_from_config", return_value=recognizer) as create:
            code = main.main([
                "--config", str(temp_config_dir / "config.yaml"),
                "--image", image,
                "--output-dir", str(out_dir),
            ])

        assert code == 0
        recognizer.recognize.assert_called_once()
        assert create.call_args[0][0].model.color_order == "bgr"
        assert (out_dir / "frame_000001.png").exists()

    def test_max_frames(self, temp_config_dir, tmp_path):
        images = [_write_image(tmp_path / f"{i}.png") for i in range(3)]
        recognizer = MagicMock()
        recognizer.recognize.return_value = []

        with patch("main.setup_logging"), \
                patch("main.create_recognizer_from_config", return_value=recognizer):
            code = main.main([
                "--config", str(temp_config_dir / "config.yaml"),
                "--image", *images,
                "--max-frames", "2",
            ])

        assert code == 0
        assert recognizer.recognize.call_count == 2

    def test_build_failure_exits_nonzero(self, temp_config_dir, tmp_path):
        image = _write_image(tmp_path / "a.png")

        with patch("main.setup_logging"), \
                patch("main.create_recognizer_from_config", side_effect=AssetLoadFailure("no model")):
            code = main.main(["--config", str(temp_config_dir / "config.yaml"), "--image", image])

        assert code == 2

    def test_invalid_config_exits_nonzero(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("log_level: LOUD\n")

        with patch("main.setup_logging"):
            code = main.main(["--config", str(temp_config_dir / "config.yaml")])

        assert code == 1
