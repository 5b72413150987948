"""Unit tests for the object and text detectors using stand-in engines."""

from __future__ import annotations

import pytest

from pantry_recognition import (
    BoundingBox,
    DetectionSource,
    FoodVocabulary,
    ObjectDetectionError,
    TextRecognitionError,
)
from pantry_recognition.detectors import ObjectIngredientDetector, TextIngredientDetector

from . import image_factory as factory


@pytest.fixture
def image():
    return factory.create_produce_image()


@pytest.mark.parametrize("confidence", [0.5, 0.49, 0.1, 0.0])
def test_object_detector_rejects_labels_at_or_below_threshold(image, confidence):
    detector = ObjectIngredientDetector(factory.FakeClassifier(factory.labels(("tomato", confidence))))
    assert detector.detect(image) == []


def test_object_detector_admits_confident_food_labels(image):
    classifier = factory.FakeClassifier(
        factory.labels(("Tomato", 0.9), ("toaster", 0.95), ("fruit salad", 0.51))
    )
    detections = ObjectIngredientDetector(classifier).detect(image)

    assert [(d.label, d.confidence) for d in detections] == [("tomato", 0.9), ("fruit salad", 0.51)]
    for detection in detections:
        assert detection.source is DetectionSource.OBJECT
        assert detection.region.is_empty


def test_object_detector_uses_injected_vocabulary(image):
    vocabulary = FoodVocabulary.create(["kimchi"])
    classifier = factory.FakeClassifier(factory.labels(("kimchi", 0.8), ("tomato", 0.9)))

    detections = ObjectIngredientDetector(classifier, vocabulary=vocabulary).detect(image)

    assert [d.label for d in detections] == ["kimchi"]


def test_object_detector_wraps_engine_failure(image):
    detector = ObjectIngredientDetector(factory.FakeClassifier(error=RuntimeError("model crashed")))

    with pytest.raises(ObjectDetectionError, match="Object recognition failed: model crashed"):
        detector.detect(image)


@pytest.mark.parametrize("confidence", [0.3, 0.29, 0.0])
def test_text_detector_rejects_low_confidence_lines(image, confidence):
    reader = factory.FakeTextReader([factory.text_line("ONIONS 1KG", confidence)])
    assert TextIngredientDetector(reader).detect(image) == []


def test_text_detector_emits_first_matching_keyword_only(image):
    box = BoundingBox(0.2, 0.3, 0.4, 0.05)
    reader = factory.FakeTextReader([factory.text_line("Milk & Cheese", 0.8, box)])

    detections = TextIngredientDetector(reader).detect(image)

    assert len(detections) == 1
    detection = detections[0]
    assert detection.label == "milk"
    assert detection.confidence == 0.8
    assert detection.source is DetectionSource.TEXT
    assert detection.region == box
    assert detection.details["recognized_text"] == "Milk & Cheese"


def test_text_detector_uses_top_candidate_only(image):
    line = factory.text_line("BREAO", 0.7, alternatives=[("BREAD", 0.65)])
    reader = factory.FakeTextReader([line])

    assert TextIngredientDetector(reader).detect(image) == []


def test_text_detector_one_detection_per_line(image):
    reader = factory.FakeTextReader(
        [
            factory.text_line("garlic", 0.9),
            factory.text_line("receipt total", 0.95),
            factory.text_line("lemons", 0.35),
        ]
    )

    detections = TextIngredientDetector(reader).detect(image)

    assert [(d.label, d.confidence) for d in detections] == [("garlic", 0.9), ("lemon", 0.35)]


def test_text_detector_wraps_engine_failure(image):
    detector = TextIngredientDetector(factory.FakeTextReader(error=ValueError("no text layer")))

    with pytest.raises(TextRecognitionError, match="Text recognition failed: no text layer"):
        detector.detect(image)


def test_engine_confidences_outside_unit_range_are_clamped(image):
    classifier = factory.FakeClassifier(factory.labels(("tomato", 1.7)))
    reader = factory.FakeTextReader([factory.text_line("corn", 1.2)])

    assert ObjectIngredientDetector(classifier).detect(image)[0].confidence == 1.0
    assert TextIngredientDetector(reader).detect(image)[0].confidence == 1.0
