"""
Inject image configuration extracted from a model name into request payloads.

Supported fields:
- aspectRatio: e.g. "16:9", "4:3", "1:1"
- imageSize: e.g. "1K", "2K", "4K"
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Tuple

from .constants import (
    ASPECT_RATIO_FIELD,
    GEMINI_CLI_IMAGE_CONFIG_PATH,
    GEMINI_IMAGE_CONFIG_PATH,
    IMAGE_SIZE_FIELD,
)
from .jsonset import JSONPathError, set_bytes
from .models import ImageConfig

logger = logging.getLogger(__name__)


def image_config_from_metadata(metadata: Optional[Mapping[str, Any]]) -> Tuple[str, str, bool]:
    """
    Returns (aspect_ratio, image_size, found); absent values are "".
    """
    config = ImageConfig.from_metadata(metadata)
    return config.aspect_ratio or "", config.image_size or "", config.found


def apply_image_config(
    metadata: Optional[Mapping[str, Any]],
    raw_json: bytes,
    base_path: str,
) -> bytes:
    """
    Write aspectRatio / imageSize under base_path.

    A field that cannot be written (malformed payload) is skipped and the
    payload from the previous step is kept.
    """
    if not metadata:
        return raw_json

    aspect_ratio, image_size, found = image_config_from_metadata(metadata)
    if not found:
        return raw_json

    result = raw_json
    for field, value in ((ASPECT_RATIO_FIELD, aspect_ratio), (IMAGE_SIZE_FIELD, image_size)):
        if not value:
            continue
        path = f"{base_path}.{field}"
        try:
            result = set_bytes(result, path, value)
        except JSONPathError as exc:
            logger.warning(
                "Skipping image config field",
                extra={"path": path, "reason": str(exc)},
            )
    return result


def apply_image_config_from_metadata(
    model: str,
    metadata: Optional[Mapping[str, Any]],
    raw_json: bytes,
) -> bytes:
    """
    Gemini REST format: generationConfig.imageConfig.

    model is accepted for call-site symmetry and not used yet.
    """
    return apply_image_config(metadata, raw_json, GEMINI_IMAGE_CONFIG_PATH)


def apply_image_config_from_metadata_cli(
    model: str,
    metadata: Optional[Mapping[str, Any]],
    raw_json: bytes,
) -> bytes:
    """
    Gemini CLI envelope format: request.generationConfig.imageConfig.
    """
    return apply_image_config(metadata, raw_json, GEMINI_CLI_IMAGE_CONFIG_PATH)


__all__ = [
    "apply_image_config",
    "apply_image_config_from_metadata",
    "apply_image_config_from_metadata_cli",
    "image_config_from_metadata",
]
