"""Detector exports."""

from .base import IngredientDetector
from .objects import ImageClassifier, ObjectIngredientDetector
from .text import TextIngredientDetector, TextReader
from .yolo import YOLOImageClassifier

__all__ = [
    "IngredientDetector",
    "ImageClassifier",
    "ObjectIngredientDetector",
    "TextReader",
    "TextIngredientDetector",
    "YOLOImageClassifier",
]
