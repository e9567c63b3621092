"""
Command-line runner for on-device TFLite classification and detection.

Builds a classifier or detector from the layered YAML configuration and runs
it over camera frames or still images, logging results and per-frame latency.

Usage:
    python src/main.py --config config/config.yaml --display
    python src/main.py --image photo.jpg --output-dir output/annotated

Arguments:
    --config: Path to configuration file
    --image: One or more still images to run instead of the camera
    --display: Show annotated frames in a window
    --output-dir: Write annotated frames to this directory
    --max-frames: Stop after this many frames
"""

import os
import sys
import argparse
import dataclasses
import logging
import time
from typing import Any, Dict, Optional, Tuple

import cv2
import yaml

from detection.factory import create_recognizer_from_config
from inference.errors import TensorProcessingError
from models.config import AccelerationMode, Config
from observation import (
    CameraError,
    CameraSource,
    CameraSourceConfig,
    ImageFileSource,
    ImageSourceConfig,
)
from observation.opencv_source import RESOLUTION_POLICIES
from ops.logging import get_global_warnings, setup_logging


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        base_path = os.path.join(os.path.dirname(config_path), "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            with open(base_path, "r") as f:
                base_cfg = yaml.safe_load(f) or {}

        local_overrides_path = os.path.join(os.path.dirname(config_path), "config.yaml")
        local_cfg: Dict[str, Any] = {}
        if os.path.exists(local_overrides_path):
            with open(local_overrides_path, "r") as f:
                local_cfg = yaml.safe_load(f) or {}

        merged = _deep_merge(base_cfg, local_cfg)

        if os.path.exists(config_path) and os.path.abspath(config_path) != os.path.abspath(local_overrides_path):
            with open(config_path, "r") as f:
                explicit_cfg = yaml.safe_load(f) or {}
            merged = _deep_merge(merged, explicit_cfg)

        return merged
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_size(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and all(isinstance(x, int) and x > 0 for x in value)
    )


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['camera', 'engine', 'model', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Camera
    camera = config.get('camera') or {}
    device_id = camera.get('device_id', 0)
    if not isinstance(device_id, (int, str)):
        return False, "camera.device_id must be an integer (index) or string (path)"
    if isinstance(device_id, int) and device_id < 0:
        return False, "camera.device_id integer must be non-negative"
    if camera.get('backend', 'opencv') != 'opencv':
        return False, "camera.backend must be: opencv"
    if 'resolution' in camera and camera['resolution'] is not None and not _is_size(camera['resolution']):
        return False, "camera.resolution must be a list of [width, height] positive integers"
    if camera.get('resolution_policy', 'lowest') not in RESOLUTION_POLICIES:
        return False, f"camera.resolution_policy must be one of: {', '.join(RESOLUTION_POLICIES)}"
    for size in camera.get('supported_resolutions') or []:
        if not _is_size(size):
            return False, "camera.supported_resolutions entries must be [width, height] positive integers"
    if 'fps' in camera and (not isinstance(camera['fps'], int) or camera['fps'] <= 0):
        return False, "camera.fps must be a positive integer"

    # Engine
    engine = config.get('engine') or {}
    threads = engine.get('num_threads')
    if threads is not None and not isinstance(threads, int):
        return False, "engine.num_threads must be an integer or null"
    try:
        AccelerationMode.parse(engine.get('acceleration'))
    except ValueError:
        modes = ', '.join(m.value for m in AccelerationMode)
        return False, f"engine.acceleration must be one of: {modes}"
    for key in ('use_xnnpack', 'allow_buffer_handle_output', 'cancellable'):
        if key in engine and not isinstance(engine[key], bool):
            return False, f"engine.{key} must be a boolean"

    # Model
    model = config.get('model') or {}
    task = model.get('task', 'detection')
    if task not in ('classification', 'detection'):
        return False, "model.task must be one of: classification, detection"
    if not isinstance(model.get('path'), str) or not model.get('path'):
        return False, "model.path is required"
    if model.get('color_order', 'rgb') not in ('rgb', 'bgr'):
        return False, "model.color_order must be one of: rgb, bgr"
    if task == 'classification':
        top_k = model.get('top_k', 10)
        if not isinstance(top_k, int) or top_k < 0:
            return False, "model.top_k must be a non-negative integer"
    else:
        conf = model.get('min_confidence', 0.6)
        if not isinstance(conf, (int, float)) or not (0 <= conf <= 1):
            return False, "model.min_confidence must be between 0 and 1"
    if not model.get('labels') and not model.get('labels_path'):
        return False, "model.labels or model.labels_path is required"

    # Logging
    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config['log_level'] not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def _format_results(results) -> str:
    if not results:
        return "no results"
    return "; ".join(str(r) for r in results)


def run(args: argparse.Namespace, config: Config) -> int:
    """Run the recognizer over the selected source. Returns the exit code."""
    # OpenCV hands out BGR(A) frames for both cameras and image files.
    config.model = dataclasses.replace(config.model, color_order="bgr")
    recognizer = create_recognizer_from_config(config)

    if args.image:
        source = ImageFileSource(ImageSourceConfig(name="images", paths=args.image))
    else:
        source = CameraSource(CameraSourceConfig.from_camera_config(config.camera))

    if args.output_dir and not os.path.exists(args.output_dir):
        os.makedirs(args.output_dir)

    processed = 0
    total_latency = 0.0
    try:
        with source:
            for frame_data in source:
                start = time.perf_counter()
                results = recognizer.recognize(frame_data)
                latency_ms = (time.perf_counter() - start) * 1000.0
                total_latency += latency_ms
                processed += 1

                logging.info(
                    f"Frame {frame_data.frame_index} ({frame_data.source}): "
                    f"{_format_results(results)} [{latency_ms:.1f} ms]"
                )

                if args.output_dir:
                    name = f"frame_{frame_data.frame_index:06d}.png"
                    cv2.imwrite(os.path.join(args.output_dir, name), frame_data.frame)

                if args.display:
                    cv2.imshow('TFLite Vision', frame_data.frame)
                    if cv2.waitKey(1) & 0xFF == ord('q'):
                        break

                if args.max_frames and processed >= args.max_frames:
                    break
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
    finally:
        if args.display:
            cv2.destroyAllWindows()

    if processed:
        logging.info(f"Processed {processed} frames, mean latency {total_latency / processed:.1f} ms")
    for warning in get_global_warnings():
        logging.info(f"Active warning: {warning}")
    return 0


def main(argv=None) -> int:
    """Main application function."""
    parser = argparse.ArgumentParser(description='On-device TFLite classification and detection')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--image', type=str, nargs='+',
                        help='Run on still images instead of the camera')
    parser.add_argument('--display', action='store_true',
                        help='Enable visual display')
    parser.add_argument('--output-dir', type=str, default=None,
                        help='Directory for annotated output frames')
    parser.add_argument('--max-frames', type=int, default=0,
                        help='Stop after this many frames (0 = no limit)')
    args = parser.parse_args(argv)

    raw = load_config(args.config)

    is_valid, error_msg = validate_config(raw)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        return 1

    setup_logging(raw['log_path'], raw['log_level'])
    config = Config.from_dict(raw)
    logging.info(f"Starting TFLite vision runner ({config.task})")

    try:
        return run(args, config)
    except TensorProcessingError as e:
        logging.error(f"{type(e).__name__}: {e}")
        return 2
    except CameraError as e:
        logging.error(f"Camera error: {e}")
        return 3
    finally:
        logging.info("TFLite vision runner stopped")


if __name__ == "__main__":
    sys.exit(main())
