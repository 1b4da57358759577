from types import MappingProxyType

# ---- Model Family ----

IMAGE_MODEL_FAMILY = "gemini-3-pro-image"

IMAGE_MODEL_PREVIEW = f"{IMAGE_MODEL_FAMILY}-preview"

BASE_IMAGE_MODELS = frozenset(
    {
        IMAGE_MODEL_FAMILY,
        IMAGE_MODEL_PREVIEW,
    }
)


# ---- Suffix Tokens ----

# Keys use the dash convention; "16x9" is looked up as "16-9".
ASPECT_RATIOS = MappingProxyType(
    {
        "1-1": "1:1",
        "16-9": "16:9",
        "9-16": "9:16",
        "21-9": "21:9",
        "4-3": "4:3",
        "3-4": "3:4",
        "3-2": "3:2",
        "2-3": "2:3",
    }
)

IMAGE_SIZES = MappingProxyType(
    {
        "1k": "1K",
        "2k": "2K",
        "4k": "4K",
    }
)


# ---- Metadata Keys ----

IMAGE_ASPECT_RATIO_METADATA_KEY = "image_aspect_ratio"
IMAGE_SIZE_METADATA_KEY = "image_size"
IMAGE_ORIGINAL_MODEL_METADATA_KEY = "image_original_model"


# ---- Injection Paths ----

GEMINI_IMAGE_CONFIG_PATH = "generationConfig.imageConfig"
GEMINI_CLI_IMAGE_CONFIG_PATH = "request.generationConfig.imageConfig"

ASPECT_RATIO_FIELD = "aspectRatio"
IMAGE_SIZE_FIELD = "imageSize"
