"""YOLO-based whole-image classification."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import numpy as np

from .. import config
from ..types import LabelObservation

logger = logging.getLogger(__name__)

try:
    from ultralytics import YOLO
    YOLO_AVAILABLE = True
except ImportError:
    YOLO_AVAILABLE = False


class YOLOImageClassifier:
    """Wraps an ultralytics classification model (ImageNet classes by default)."""

    def __init__(
        self,
        model_name: str = config.CLASSIFIER_MODEL,
        device: str = config.DEVICE,
        min_score: float = config.CLASSIFIER_MIN_SCORE,
        model: Optional[Any] = None,
    ) -> None:
        """
        Args:
            model_name: classification weights (yolov8n-cls.pt, yolov8s-cls.pt, ...)
            device: device to run inference on ('cpu' or 'cuda')
            min_score: probabilities below this are not reported
            model: an already loaded model; skips loading ``model_name``
        """
        if model is None:
            if not YOLO_AVAILABLE:
                raise ImportError(
                    "ultralytics is not installed. Install it with: pip install ultralytics"
                )
            logger.info("Loading classifier weights %s on %s", model_name, device)
            model = YOLO(model_name)

        self.model = model
        self.device = device
        self.min_score = min_score

    def classify(self, image: np.ndarray) -> List[LabelObservation]:
        """Return every class at or above ``min_score``, highest first."""

        results = self.model(image, device=self.device, verbose=False)
        if not results:
            return []

        result = results[0]
        if result.probs is None:
            return []

        scores = result.probs.data
        if hasattr(scores, "cpu"):
            scores = scores.cpu().numpy()
        scores = np.asarray(scores, dtype=np.float32).reshape(-1)

        observations: List[LabelObservation] = []
        for class_id in np.argsort(scores)[::-1]:
            score = float(scores[class_id])
            if score < self.min_score:
                break
            name = str(result.names[int(class_id)]).replace("_", " ")
            observations.append(LabelObservation(label=name, confidence=score))

        logger.debug("Classifier returned %d labels", len(observations))
        return observations
