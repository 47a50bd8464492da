"""
Configuration for pass prediction runs.

Settings are read from an optional YAML file and can be overridden with
environment variables:

    PASS_PREDICTOR_MAX_WORKERS
    PASS_PREDICTOR_TIMEOUT_S
    PASS_PREDICTOR_LOG_LEVEL
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
import logging
import math
import os

import yaml  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

DEFAULT_MIN_ELEVATION_DEG = 25.0
DEFAULT_FALLBACK_THRESHOLDS: Tuple[float, ...] = (25.0, 15.0, 5.0)
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class PredictorConfig:
    """Tunable settings for scans and the threshold fallback ladder."""

    default_min_elevation_deg: float = DEFAULT_MIN_ELEVATION_DEG
    fallback_thresholds: Tuple[float, ...] = DEFAULT_FALLBACK_THRESHOLDS
    max_workers: Optional[int] = None  # None = auto-detect
    timeout_s: Optional[float] = None  # None = no timeout
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate configuration."""
        self.fallback_thresholds = tuple(float(t) for t in self.fallback_thresholds)
        for threshold in (self.default_min_elevation_deg,) + self.fallback_thresholds:
            if not math.isfinite(threshold) or not -90 <= threshold <= 90:
                raise ValueError(f"Elevation threshold must be in [-90, 90], got {threshold}")

        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

        if self.timeout_s is not None and not self.timeout_s > 0:
            raise ValueError(f"timeout_s must be positive, got {self.timeout_s}")

        self.log_level = self.log_level.upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got {self.log_level}")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["fallback_thresholds"] = list(self.fallback_thresholds)
        return data


def load_config(config_path: Optional[Union[str, Path]] = None) -> PredictorConfig:
    """
    Load configuration from YAML and environment variables.

    Args:
        config_path: Optional YAML file path; missing files fall back to defaults

    Returns:
        PredictorConfig instance

    Raises:
        ValueError: If the file or an override holds an invalid value
    """
    data: Dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path, "r") as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"Config file {path} must contain a mapping")
            data.update(loaded)
            logger.info(f"Loaded configuration from {path}")
        else:
            logger.warning(f"Config file not found: {path}, using defaults")

    known = {f.name for f in fields(PredictorConfig)}
    for key in list(data):
        if key not in known:
            logger.warning(f"Ignoring unknown config key: {key}")
            del data[key]

    env_workers = os.environ.get("PASS_PREDICTOR_MAX_WORKERS")
    if env_workers:
        data["max_workers"] = int(env_workers)

    env_timeout = os.environ.get("PASS_PREDICTOR_TIMEOUT_S")
    if env_timeout:
        data["timeout_s"] = float(env_timeout)

    env_level = os.environ.get("PASS_PREDICTOR_LOG_LEVEL")
    if env_level:
        data["log_level"] = env_level

    return PredictorConfig(**data)


def get_optimal_workers(max_workers: Optional[int] = None, num_satellites: int = 0) -> int:
    """
    Determine the number of scan worker threads.

    Args:
        max_workers: Maximum number of workers (None = auto-detect)
        num_satellites: Number of satellites to scan

    Returns:
        Worker count, at least 1
    """
    cpu_count = os.cpu_count() or 4

    if max_workers is not None:
        optimal = min(max_workers, cpu_count)
    else:
        optimal = cpu_count

    # Don't spawn more workers than satellites
    if num_satellites > 0:
        optimal = min(optimal, num_satellites)

    return max(1, optimal)
