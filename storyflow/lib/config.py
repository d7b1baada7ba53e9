"""
Configuration loader for storyflow.

Loads storyflow.yaml to determine which point scales exist and which one new
projects use. If no config file exists, returns the built-in defaults.

Example storyflow.yaml:

    default_point_scale: linear
    point_scales:
      tshirt: [1, 2, 4, 8]
      fibonacci: [0, 1, 2, 3, 5, 8]

Scales listed in the file are added to, or replace, the built-in ones.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from . import validate
from .point_scales import (
    BUILTIN_POINT_SCALES,
    DEFAULT_POINT_SCALE,
    PointScaleRegistry,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "storyflow.yaml"
CONFIG_DIR_ENV = "STORYFLOW_CONFIG_DIR"


@dataclass
class StoryflowConfig:
    """Settings from storyflow.yaml."""
    default_point_scale: str = DEFAULT_POINT_SCALE
    point_scales: dict[str, tuple] = field(default_factory=lambda: dict(BUILTIN_POINT_SCALES))

    def registry(self) -> PointScaleRegistry:
        return PointScaleRegistry(self.point_scales)


def _resolve_config_dir(config_dir: Optional[Path]) -> Optional[Path]:
    if config_dir is not None:
        return config_dir
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    return Path(env_dir) if env_dir else None


def load_config(config_dir: Optional[Path] = None) -> StoryflowConfig:
    """Load storyflow.yaml and return StoryflowConfig.

    If config_dir is None, STORYFLOW_CONFIG_DIR is consulted. When neither
    points at an existing file, or the file is malformed, returns defaults.
    """
    config_dir = _resolve_config_dir(config_dir)
    if config_dir is None:
        return StoryflowConfig()

    config_path = config_dir / CONFIG_FILENAME
    if not config_path.exists():
        return StoryflowConfig()

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
        validate.validate(data, "point_scales")
    except (yaml.YAMLError, validate.SchemaValidationError) as e:
        logger.warning(f"Failed to parse {config_path}: {e}")
        return StoryflowConfig()

    scales = dict(BUILTIN_POINT_SCALES)
    for name, values in data.get("point_scales", {}).items():
        scales[name] = tuple(values)

    default = data.get("default_point_scale", DEFAULT_POINT_SCALE)
    if default not in scales:
        logger.warning(
            f"Unknown default_point_scale '{default}' in {config_path}, "
            f"using '{DEFAULT_POINT_SCALE}'"
        )
        default = DEFAULT_POINT_SCALE

    return StoryflowConfig(default_point_scale=default, point_scales=scales)
