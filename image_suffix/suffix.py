"""
Model name suffix parsing for the Gemini 3 Pro Image family.

Image parameters can be requested through the model name itself:

- gemini-3-pro-image-16-9       -> aspect ratio 16:9
- gemini-3-pro-image-4k         -> image size 4K
- gemini-3-pro-image-4k-16x9    -> 16:9 at 4K
- gemini-3-pro-image-21-9-2k    -> 21:9 at 2K
- gemini-3-pro-image-16x9-4k    -> 16:9 at 4K

Unrecognized suffixes are not an error; the name is returned untouched.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Tuple

from .constants import (
    ASPECT_RATIOS,
    BASE_IMAGE_MODELS,
    IMAGE_MODEL_FAMILY,
    IMAGE_MODEL_PREVIEW,
    IMAGE_SIZES,
)
from .models import ImageConfig

logger = logging.getLogger(__name__)

_SUFFIX_PATTERN = re.compile(rf"({re.escape(IMAGE_MODEL_FAMILY)}(?:-preview)?)-(.+)")


def is_image_model(model_name: str) -> bool:
    return bool(model_name) and IMAGE_MODEL_FAMILY in model_name


def _scan_tokens(parts: List[str]) -> Tuple[Optional[str], Optional[str]]:
    aspect_ratio: Optional[str] = None
    image_size: Optional[str] = None

    i = 0
    while i < len(parts):
        part = parts[i].lower()

        if part in IMAGE_SIZES:
            image_size = IMAGE_SIZES[part]
            i += 1
            continue

        # "16-9" arrives split in two fragments
        if i + 1 < len(parts):
            ratio_key = f"{part}-{parts[i + 1].lower()}"
            if ratio_key in ASPECT_RATIOS:
                aspect_ratio = ASPECT_RATIOS[ratio_key]
                i += 2
                continue

        if "x" in part:
            ratio_key = part.replace("x", "-")
            if ratio_key in ASPECT_RATIOS:
                aspect_ratio = ASPECT_RATIOS[ratio_key]

        i += 1

    return aspect_ratio, image_size


def parse_image_suffix(model_name: str) -> Tuple[str, Optional[ImageConfig]]:
    """
    Split a suffixed model name into its written base and the parsed config.

    Returns (model_name, None) when the name has no suffix or nothing in the
    suffix is recognized.
    """
    match = _SUFFIX_PATTERN.fullmatch(model_name)
    if match is None:
        return model_name, None

    base, suffix = match.group(1), match.group(2)
    aspect_ratio, image_size = _scan_tokens(suffix.split("-"))
    if aspect_ratio is None and image_size is None:
        return model_name, None

    return base, ImageConfig(
        aspect_ratio=aspect_ratio,
        image_size=image_size,
        original_model=model_name,
    )


def normalize_image_model(
    model_name: str,
    *,
    force_preview: bool = True,
) -> Tuple[str, Optional[Dict[str, str]]]:
    """
    Returns (base_model, metadata).

    metadata is None unless an aspect ratio or image size was extracted, in
    which case it also records the original model name. The base model is
    always the -preview variant unless force_preview is False, in which case
    the base as written in the input is kept.
    """
    if not is_image_model(model_name):
        return model_name, None

    if model_name in BASE_IMAGE_MODELS:
        return model_name, None

    base, config = parse_image_suffix(model_name)
    if config is None:
        return model_name, None

    base_model = IMAGE_MODEL_PREVIEW if force_preview else base
    metadata = config.to_metadata()
    logger.debug(
        "Image config extracted from model name",
        extra={"model": model_name, "base_model": base_model, "image_metadata": metadata},
    )
    return base_model, metadata


__all__ = [
    "is_image_model",
    "normalize_image_model",
    "parse_image_suffix",
]
