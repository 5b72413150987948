"""Food keywords found in recognized text lines."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

import numpy as np

from .. import config
from ..errors import TextRecognitionError
from ..ocr import LightweightTextRecognizer
from ..types import DetectionSource, RawDetection, TextObservation
from ..vocabulary import FoodVocabulary
from .base import IngredientDetector

logger = logging.getLogger(__name__)


class TextReader(Protocol):
    """Anything that returns recognized text lines for an image."""

    def read(self, image: np.ndarray) -> List[TextObservation]:
        ...


class TextIngredientDetector(IngredientDetector):
    """Scans each line's top reading for the first vocabulary keyword.

    The emitted label is the keyword itself rather than the raw text, and at
    most one detection is produced per line.
    """

    def __init__(
        self,
        reader: Optional[TextReader] = None,
        vocabulary: Optional[FoodVocabulary] = None,
        confidence_threshold: float = config.TEXT_CONFIDENCE_THRESHOLD,
    ) -> None:
        super().__init__(DetectionSource.TEXT, vocabulary or FoodVocabulary.default())
        self.reader = reader or LightweightTextRecognizer(lexicon=self.vocabulary.keywords)
        self.confidence_threshold = confidence_threshold

    def detect(self, image: np.ndarray) -> List[RawDetection]:
        try:
            observations = self.reader.read(image)
        except Exception as exc:
            raise TextRecognitionError(f"Text recognition failed: {exc}") from exc

        detections: List[RawDetection] = []
        for observation in observations:
            candidate = observation.top_candidate
            if candidate is None or candidate.confidence <= self.confidence_threshold:
                continue
            text = candidate.text.lower()
            keyword = self.vocabulary.first_keyword_in(text)
            if keyword is None:
                continue
            detections.append(
                RawDetection(
                    label=keyword,
                    confidence=self._clip_confidence(candidate.confidence),
                    source=self.source,
                    region=observation.bounding_box,
                    details={"recognized_text": candidate.text},
                )
            )

        logger.debug(
            "Text detector matched %d of %d lines", len(detections), len(observations)
        )
        return detections
