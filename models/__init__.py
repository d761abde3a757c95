"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.analysis import AICategorization, AnalysisResult, TransformationGuide
from models.style_profile import StyleProfile
from models.wardrobe_item import WardrobeItem, from_raw_metadata

__all__ = [
    "AICategorization",
    "AnalysisResult",
    "StyleProfile",
    "TransformationGuide",
    "WardrobeItem",
    "from_raw_metadata",
]
