"""Exceptions raised by the ingredient detection pipeline."""

from __future__ import annotations

from .types import DetectionSource


class RecognitionError(Exception):
    """Base class for every error raised by this package."""


class ImageDecodeError(RecognitionError):
    """The input could not be turned into a pixel buffer."""


class DetectorError(RecognitionError):
    """A detector's underlying engine failed."""

    source: DetectionSource


class ObjectDetectionError(DetectorError):
    source = DetectionSource.OBJECT


class TextRecognitionError(DetectorError):
    source = DetectionSource.TEXT
