"""Whole-image label classification filtered down to food."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

import numpy as np

from .. import config
from ..errors import ObjectDetectionError
from ..types import BoundingBox, DetectionSource, LabelObservation, RawDetection
from ..vocabulary import FoodVocabulary
from .base import IngredientDetector

logger = logging.getLogger(__name__)


class ImageClassifier(Protocol):
    """Anything that labels a whole image, in no particular order."""

    def classify(self, image: np.ndarray) -> List[LabelObservation]:
        ...


class ObjectIngredientDetector(IngredientDetector):
    """Admits classifier labels that are food related and confident enough.

    The classifier describes the whole image, so admitted detections carry an
    empty region.
    """

    def __init__(
        self,
        classifier: ImageClassifier,
        vocabulary: Optional[FoodVocabulary] = None,
        confidence_threshold: float = config.OBJECT_CONFIDENCE_THRESHOLD,
    ) -> None:
        super().__init__(DetectionSource.OBJECT, vocabulary or FoodVocabulary.default())
        self.classifier = classifier
        self.confidence_threshold = confidence_threshold

    def detect(self, image: np.ndarray) -> List[RawDetection]:
        try:
            observations = self.classifier.classify(image)
        except Exception as exc:
            raise ObjectDetectionError(f"Object recognition failed: {exc}") from exc

        detections: List[RawDetection] = []
        for observation in observations:
            label = observation.label.lower()
            if observation.confidence <= self.confidence_threshold:
                continue
            if not self.vocabulary.is_food_related(label):
                continue
            detections.append(
                RawDetection(
                    label=label,
                    confidence=self._clip_confidence(observation.confidence),
                    source=self.source,
                    region=BoundingBox.zero(),
                )
            )

        logger.debug(
            "Object detector admitted %d of %d labels", len(detections), len(observations)
        )
        return detections
