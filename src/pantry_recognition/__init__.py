"""Public exports for the pantry ingredient recognition package."""

from .aggregator import IngredientDetectionAggregator
from .errors import (
    DetectorError,
    ImageDecodeError,
    ObjectDetectionError,
    RecognitionError,
    TextRecognitionError,
)
from .merging import merge_detection, merge_results, normalize_ingredient_name
from .types import (
    BoundingBox,
    ConfidenceLevel,
    DetectedIngredient,
    DetectionSource,
    LabelObservation,
    ProcessingState,
    RawDetection,
    TextCandidate,
    TextObservation,
)
from .vocabulary import FoodVocabulary

__all__ = [
    "IngredientDetectionAggregator",
    "FoodVocabulary",
    "normalize_ingredient_name",
    "merge_detection",
    "merge_results",
    "BoundingBox",
    "ConfidenceLevel",
    "DetectedIngredient",
    "DetectionSource",
    "LabelObservation",
    "ProcessingState",
    "RawDetection",
    "TextCandidate",
    "TextObservation",
    "RecognitionError",
    "ImageDecodeError",
    "DetectorError",
    "ObjectDetectionError",
    "TextRecognitionError",
]
