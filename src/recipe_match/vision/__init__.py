"""
Vision collaborators: caption a food photo, then parse the caption into
canonical ingredient names.
"""
from recipe_match.vision.captioning import (
    CaptionError,
    DetectionResult,
    HuggingFaceCaptioner,
    LocalCaptioner,
    build_captioner,
    detect_ingredients,
)

__all__ = [
    "CaptionError",
    "DetectionResult",
    "HuggingFaceCaptioner",
    "LocalCaptioner",
    "build_captioner",
    "detect_ingredients",
]
