"""Base detector definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

import numpy as np

from ..types import DetectionSource, RawDetection
from ..vocabulary import FoodVocabulary


class IngredientDetector(ABC):
    """Abstract base class for one independent ingredient detector."""

    source: DetectionSource

    def __init__(self, source: DetectionSource, vocabulary: FoodVocabulary) -> None:
        self.source = source
        self.vocabulary = vocabulary

    @abstractmethod
    def detect(self, image: np.ndarray) -> List[RawDetection]:
        """Return every food match found in the image, possibly none.

        Implementations raise a ``DetectorError`` subclass when their engine
        fails.
        """

    # engines occasionally report scores slightly outside [0, 1]
    def _clip_confidence(self, value: float) -> float:
        return float(max(0.0, min(1.0, value)))
