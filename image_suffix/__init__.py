"""
Gemini image model suffix normalization and request image config injection.
"""

from .constants import (
    GEMINI_CLI_IMAGE_CONFIG_PATH,
    GEMINI_IMAGE_CONFIG_PATH,
    IMAGE_ASPECT_RATIO_METADATA_KEY,
    IMAGE_ORIGINAL_MODEL_METADATA_KEY,
    IMAGE_SIZE_METADATA_KEY,
)
from .jsonset import JSONPathError, set_bytes
from .metadata import (
    apply_image_config,
    apply_image_config_from_metadata,
    apply_image_config_from_metadata_cli,
    image_config_from_metadata,
)
from .models import ImageConfig
from .suffix import is_image_model, normalize_image_model, parse_image_suffix

__all__ = [
    "GEMINI_CLI_IMAGE_CONFIG_PATH",
    "GEMINI_IMAGE_CONFIG_PATH",
    "IMAGE_ASPECT_RATIO_METADATA_KEY",
    "IMAGE_ORIGINAL_MODEL_METADATA_KEY",
    "IMAGE_SIZE_METADATA_KEY",
    "ImageConfig",
    "JSONPathError",
    "apply_image_config",
    "apply_image_config_from_metadata",
    "apply_image_config_from_metadata_cli",
    "image_config_from_metadata",
    "is_image_model",
    "normalize_image_model",
    "parse_image_suffix",
    "set_bytes",
]
