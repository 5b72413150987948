"""Tests for the ultralytics classifier adapter with an in-memory model."""

from __future__ import annotations

import numpy as np

from pantry_recognition.detectors import ObjectIngredientDetector, YOLOImageClassifier
from pantry_recognition.merging import to_ingredient

from . import image_factory as factory


class _Tensor:
    def __init__(self, values):
        self._values = np.asarray(values, dtype=np.float32)

    def cpu(self):
        return self

    def numpy(self):
        return self._values


class _Probs:
    def __init__(self, values):
        self.data = _Tensor(values)


class _Result:
    def __init__(self, values, names):
        self.probs = _Probs(values)
        self.names = names


class _Model:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def __call__(self, image, device, verbose):
        self.calls.append(device)
        return [self.result]


NAMES = {0: "Granny_Smith", 1: "bell_pepper", 2: "toaster"}


def test_classifier_reports_ranked_labels_above_min_score():
    model = _Model(_Result([0.2, 0.7, 0.005], NAMES))
    classifier = YOLOImageClassifier(model=model, device="cpu", min_score=0.01)

    observations = classifier.classify(factory.create_produce_image())

    assert [(o.label, round(o.confidence, 3)) for o in observations] == [
        ("bell pepper", 0.7),
        ("Granny Smith", 0.2),
    ]
    assert model.calls == ["cpu"]


def test_classifier_handles_missing_probabilities():
    result = _Result([0.5], {0: "apple"})
    result.probs = None
    classifier = YOLOImageClassifier(model=_Model(result))

    assert classifier.classify(factory.create_blank_image()) == []


def test_classifier_feeds_object_detector():
    classifier = YOLOImageClassifier(model=_Model(_Result([0.2, 0.7, 0.05], NAMES)))
    detections = ObjectIngredientDetector(classifier).detect(factory.create_produce_image())

    assert [to_ingredient(d).name for d in detections] == ["Bell Pepper"]
