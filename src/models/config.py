"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


DEFAULT_DELEGATE_PATHS: Dict[str, str] = {
    "gpu": "libtensorflowlite_gpu_delegate.so",
    "nnapi": "libvx_delegate.so",
}


class AccelerationMode(str, Enum):
    """Hardware delegate requested for the inference engine."""
    NONE = "none"
    GPU = "gpu"
    NNAPI = "nnapi"

    @classmethod
    def parse(cls, value: Union[str, "AccelerationMode", None]) -> "AccelerationMode":
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())


@dataclass(frozen=True)
class EngineConfig:
    """
    Inference engine options, fixed once the interpreter is built.

    Attributes:
        num_threads: Intra-op thread count. None uses the engine default.
            Values below 1 are mapped to the engine default at load time.
        acceleration: Hardware delegate to try. Falls back to CPU with a
            warning when the device cannot provide it.
        use_xnnpack: Keep the engine's default XNNPACK CPU delegate.
        allow_buffer_handle_output: Read outputs straight from delegate
            buffers where the engine supports it.
        cancellable: Whether the engine may be cancelled between calls.
        delegate_paths: Delegate library per acceleration mode.
    """
    num_threads: Optional[int] = None
    acceleration: AccelerationMode = AccelerationMode.NONE
    use_xnnpack: bool = True
    allow_buffer_handle_output: bool = False
    cancellable: bool = True
    delegate_paths: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_DELEGATE_PATHS))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EngineConfig":
        paths = dict(DEFAULT_DELEGATE_PATHS)
        paths.update(d.get("delegate_paths") or {})
        return cls(
            num_threads=d.get("num_threads"),
            acceleration=AccelerationMode.parse(d.get("acceleration")),
            use_xnnpack=d.get("use_xnnpack", True),
            allow_buffer_handle_output=d.get("allow_buffer_handle_output", False),
            cancellable=d.get("cancellable", True),
            delegate_paths=paths,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num_threads": self.num_threads,
            "acceleration": self.acceleration.value,
            "use_xnnpack": self.use_xnnpack,
            "allow_buffer_handle_output": self.allow_buffer_handle_output,
            "cancellable": self.cancellable,
            "delegate_paths": dict(self.delegate_paths),
        }


@dataclass(frozen=True)
class ClassifierConfig:
    """Image classifier configuration."""
    model_path: str = ""
    labels: List[str] = field(default_factory=list)
    labels_path: Optional[str] = None
    quantized: bool = False
    top_k: int = 10
    color_order: str = "rgb"
    engine: EngineConfig = field(default_factory=EngineConfig)

    @classmethod
    def from_dict(cls, d: Dict[str, Any], engine: Optional[EngineConfig] = None) -> "ClassifierConfig":
        return cls(
            model_path=d.get("path", ""),
            labels=list(d.get("labels") or []),
            labels_path=d.get("labels_path"),
            quantized=d.get("quantized", False),
            top_k=d.get("top_k", 10),
            color_order=d.get("color_order", "rgb"),
            engine=engine or EngineConfig(),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "task": "classification",
            "path": self.model_path,
            "labels": list(self.labels),
            "quantized": self.quantized,
            "top_k": self.top_k,
            "color_order": self.color_order,
        }
        if self.labels_path is not None:
            d["labels_path"] = self.labels_path
        return d


@dataclass(frozen=True)
class DetectorConfig:
    """Object detector configuration."""
    model_path: str = ""
    labels: List[str] = field(default_factory=list)
    labels_path: Optional[str] = None
    quantized: bool = False
    min_confidence: float = 0.6
    draw_annotations: bool = True
    color_order: str = "rgb"
    engine: EngineConfig = field(default_factory=EngineConfig)

    @classmethod
    def from_dict(cls, d: Dict[str, Any], engine: Optional[EngineConfig] = None) -> "DetectorConfig":
        return cls(
            model_path=d.get("path", ""),
            labels=list(d.get("labels") or []),
            labels_path=d.get("labels_path"),
            quantized=d.get("quantized", False),
            min_confidence=d.get("min_confidence", 0.6),
            draw_annotations=d.get("draw_annotations", True),
            color_order=d.get("color_order", "rgb"),
            engine=engine or EngineConfig(),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "task": "detection",
            "path": self.model_path,
            "labels": list(self.labels),
            "quantized": self.quantized,
            "min_confidence": self.min_confidence,
            "draw_annotations": self.draw_annotations,
            "color_order": self.color_order,
        }
        if self.labels_path is not None:
            d["labels_path"] = self.labels_path
        return d


@dataclass
class CameraConfig:
    """Camera configuration."""
    backend: str = "opencv"
    device_id: Union[int, str] = 0
    resolution: Optional[List[int]] = None
    resolution_policy: str = "lowest"
    supported_resolutions: List[List[int]] = field(default_factory=list)
    fps: int = 30
    max_retries: int = 3
    rotate: int = 0
    flip_horizontal: bool = False
    flip_vertical: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            backend=d.get("backend", "opencv"),
            device_id=d.get("device_id", 0),
            resolution=d.get("resolution"),
            resolution_policy=d.get("resolution_policy", "lowest"),
            supported_resolutions=[list(r) for r in d.get("supported_resolutions") or []],
            fps=d.get("fps", 30),
            max_retries=d.get("max_retries", 3),
            rotate=d.get("rotate", 0) or 0,
            flip_horizontal=d.get("flip_horizontal", False),
            flip_vertical=d.get("flip_vertical", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "backend": self.backend,
            "device_id": self.device_id,
            "resolution_policy": self.resolution_policy,
            "supported_resolutions": [list(r) for r in self.supported_resolutions],
            "fps": self.fps,
            "max_retries": self.max_retries,
            "rotate": self.rotate,
            "flip_horizontal": self.flip_horizontal,
            "flip_vertical": self.flip_vertical,
        }
        if self.resolution is not None:
            d["resolution"] = list(self.resolution)
        return d


ModelConfig = Union[ClassifierConfig, DetectorConfig]


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    model: ModelConfig = field(default_factory=DetectorConfig)
    asset_dirs: List[str] = field(default_factory=list)
    log_path: str = "logs/tflite_vision.log"
    log_level: str = "INFO"

    @property
    def task(self) -> str:
        return "classification" if isinstance(self.model, ClassifierConfig) else "detection"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        engine = EngineConfig.from_dict(d.get("engine", {}) or {})
        model_dict = d.get("model", {}) or {}
        if model_dict.get("task", "detection") == "classification":
            model: ModelConfig = ClassifierConfig.from_dict(model_dict, engine=engine)
        else:
            model = DetectorConfig.from_dict(model_dict, engine=engine)

        return cls(
            camera=CameraConfig.from_dict(d.get("camera", {}) or {}),
            engine=engine,
            model=model,
            asset_dirs=list(model_dict.get("asset_dirs") or []),
            log_path=d.get("log_path", "logs/tflite_vision.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or passing to existing code)."""
        model = self.model.to_dict()
        if self.asset_dirs:
            model["asset_dirs"] = list(self.asset_dirs)
        return {
            "camera": self.camera.to_dict(),
            "engine": self.engine.to_dict(),
            "model": model,
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
