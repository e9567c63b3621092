"""
Build classifiers and detectors from configuration.

Building is the only step that touches the model asset, so it is the only
point that raises AssetLoadFailure. Other configuration problems surface on
the first recognize() call.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Union

from inference.loader import (
    create_interpreter,
    load_labels,
    map_model_file,
    read_model_spec,
    resolve_model_path,
)
from models.config import ClassifierConfig, Config, DetectorConfig
from .classifier import TensorImageClassifier
from .detector import TensorObjectDetector


def resolve_labels(cfg: Union[ClassifierConfig, DetectorConfig]) -> List[str]:
    """Inline labels win; otherwise read the labels file, if any."""
    if cfg.labels:
        return list(cfg.labels)
    if cfg.labels_path:
        return load_labels(cfg.labels_path)
    return []


def build_detector(
    cfg: DetectorConfig,
    asset_dirs: Optional[Sequence[str]] = None,
    runtime: Any = None,
    offset: int = 0,
    length: Optional[int] = None,
) -> TensorObjectDetector:
    """
    Load the model asset and build an object detector.

    Raises:
        AssetLoadFailure: If the model or labels asset cannot be loaded.
    """
    path = resolve_model_path(cfg.model_path, asset_dirs)
    labels = resolve_labels(cfg)
    interpreter = create_interpreter(map_model_file(path, offset, length), cfg.engine, runtime=runtime)
    spec = read_model_spec(interpreter, quantized=cfg.quantized, detection=True)
    logging.info(f"Loaded detection model {path}")
    return TensorObjectDetector(interpreter, spec, labels, cfg)


def build_classifier(
    cfg: ClassifierConfig,
    asset_dirs: Optional[Sequence[str]] = None,
    runtime: Any = None,
    offset: int = 0,
    length: Optional[int] = None,
) -> TensorImageClassifier:
    """
    Load the model asset and build an image classifier.

    Raises:
        AssetLoadFailure: If the model or labels asset cannot be loaded.
    """
    path = resolve_model_path(cfg.model_path, asset_dirs)
    labels = resolve_labels(cfg)
    interpreter = create_interpreter(map_model_file(path, offset, length), cfg.engine, runtime=runtime)
    spec = read_model_spec(interpreter, quantized=cfg.quantized, detection=False)
    logging.info(f"Loaded classification model {path}")
    return TensorImageClassifier(interpreter, spec, labels, cfg)


def create_recognizer_from_config(
    config: Config,
    runtime: Any = None,
) -> Union[TensorImageClassifier, TensorObjectDetector]:
    """Build the recognizer selected by ``model.task``."""
    if isinstance(config.model, ClassifierConfig):
        return build_classifier(config.model, config.asset_dirs, runtime=runtime)
    return build_detector(config.model, config.asset_dirs, runtime=runtime)
