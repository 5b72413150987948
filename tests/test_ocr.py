"""Tests for the local text recognizer on synthetic images."""

from __future__ import annotations

import pytest

from pantry_recognition.detectors import TextIngredientDetector
from pantry_recognition.ocr import LightweightTextRecognizer

from . import image_factory as factory


@pytest.fixture(scope="module")
def recognizer() -> LightweightTextRecognizer:
    return LightweightTextRecognizer()


def test_blank_image_has_no_text(recognizer):
    assert recognizer.read(factory.create_blank_image()) == []


def test_observations_are_well_formed(recognizer):
    observations = recognizer.read(factory.create_text_image("ONION"))

    for observation in observations:
        assert observation.candidates
        assert observation.top_candidate is observation.candidates[0]
        for candidate in observation.candidates:
            assert 0.0 <= candidate.confidence <= 1.0
            assert candidate.text.isupper() or candidate.text.isdigit()
        box = observation.bounding_box
        assert 0.0 <= box.x <= 1.0 and 0.0 <= box.y <= 1.0
        assert box.x + box.width <= 1.0 + 1e-6
        assert box.y + box.height <= 1.0 + 1e-6

    confidences = [o.top_candidate.confidence for o in observations]
    assert confidences == sorted(confidences, reverse=True)


def test_text_detector_on_blank_image_finds_nothing(recognizer):
    detector = TextIngredientDetector(recognizer)
    assert detector.detect(factory.create_blank_image()) == []


def test_no_templates_reads_nothing():
    recognizer = LightweightTextRecognizer(char_set="", lexicon=None)
    assert recognizer.read(factory.create_text_image("MILK")) == []


@pytest.mark.parametrize("word", ["ONION", "MILK", "GARLIC"])
def test_lexicon_words_are_read_whole(word):
    recognizer = LightweightTextRecognizer(lexicon=["onion", "milk", "garlic", "lemon", "salmon"])
    observations = recognizer.read(factory.create_text_image(word))

    assert len(observations) == 1
    assert observations[0].top_candidate.text == word
    assert observations[0].top_candidate.confidence >= recognizer.min_word_score


def test_default_text_detector_finds_printed_onion():
    detections = TextIngredientDetector().detect(factory.create_text_image("ONION"))

    assert [d.label for d in detections] == ["onion"]
    assert detections[0].confidence > 0.3
    assert not detections[0].region.is_empty
