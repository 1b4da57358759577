# image_suffix/models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .constants import (
    IMAGE_ASPECT_RATIO_METADATA_KEY,
    IMAGE_ORIGINAL_MODEL_METADATA_KEY,
    IMAGE_SIZE_METADATA_KEY,
)


def _clean(value: Any) -> Optional[str]:
    """
    Keep only non-blank strings, trimmed.
    """
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@dataclass(frozen=True)
class ImageConfig:
    """
    Image generation parameters carried by a model name suffix.
    """

    aspect_ratio: Optional[str] = None
    image_size: Optional[str] = None
    original_model: Optional[str] = None

    @property
    def found(self) -> bool:
        return bool(self.aspect_ratio or self.image_size)

    def to_metadata(self) -> Dict[str, str]:
        if not self.found:
            return {}
        metadata: Dict[str, str] = {}
        if self.original_model is not None:
            metadata[IMAGE_ORIGINAL_MODEL_METADATA_KEY] = self.original_model
        if self.aspect_ratio:
            metadata[IMAGE_ASPECT_RATIO_METADATA_KEY] = self.aspect_ratio
        if self.image_size:
            metadata[IMAGE_SIZE_METADATA_KEY] = self.image_size
        return metadata

    @classmethod
    def from_metadata(cls, metadata: Optional[Mapping[str, Any]]) -> "ImageConfig":
        if not metadata:
            return cls()
        return cls(
            aspect_ratio=_clean(metadata.get(IMAGE_ASPECT_RATIO_METADATA_KEY)),
            image_size=_clean(metadata.get(IMAGE_SIZE_METADATA_KEY)),
            original_model=_clean(metadata.get(IMAGE_ORIGINAL_MODEL_METADATA_KEY)),
        )
