"""Common types used throughout the ingredient detection pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class DetectionSource(str, Enum):
    """Which detector produced a detection."""

    OBJECT = "object"
    TEXT = "text"

    @property
    def description(self) -> str:
        if self is DetectionSource.OBJECT:
            return "Object Detection"
        return "Text Recognition"


class ConfidenceLevel(str, Enum):
    """Coarse confidence tiers shown next to a detected ingredient."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_confidence(cls, confidence: float) -> "ConfidenceLevel":
        if confidence > 0.8:
            return cls.HIGH
        if confidence > 0.6:
            return cls.MEDIUM
        return cls.LOW


@dataclass(frozen=True)
class BoundingBox:
    """Axis aligned box in fractional image coordinates (0..1)."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def zero(cls) -> "BoundingBox":
        return cls()

    @classmethod
    def from_pixels(
        cls, box: Tuple[int, int, int, int], image_width: int, image_height: int
    ) -> "BoundingBox":
        """Convert an ``(x, y, w, h)`` pixel box to fractional coordinates."""

        if image_width <= 0 or image_height <= 0:
            return cls.zero()
        x, y, w, h = box
        return cls(
            x=float(x) / image_width,
            y=float(y) / image_height,
            width=float(w) / image_width,
            height=float(h) / image_height,
        )

    @property
    def is_empty(self) -> bool:
        return self.width <= 0.0 or self.height <= 0.0

    def as_list(self) -> list[float]:
        return [self.x, self.y, self.width, self.height]


@dataclass(frozen=True)
class LabelObservation:
    """A whole-image classification label produced by an image classifier."""

    label: str
    confidence: float


@dataclass(frozen=True)
class TextCandidate:
    """One reading of a text line together with its confidence."""

    text: str
    confidence: float


@dataclass(frozen=True)
class TextObservation:
    """A recognized text line; candidates are ranked best first."""

    candidates: Tuple[TextCandidate, ...]
    bounding_box: BoundingBox = field(default_factory=BoundingBox.zero)

    @property
    def top_candidate(self) -> Optional[TextCandidate]:
        return self.candidates[0] if self.candidates else None


@dataclass(frozen=True)
class RawDetection:
    """A food match emitted by either detector, before normalization."""

    label: str
    confidence: float
    source: DetectionSource
    region: BoundingBox = field(default_factory=BoundingBox.zero)
    details: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class DetectedIngredient:
    """A normalized, de-duplicated ingredient ready for display."""

    name: str
    confidence: float
    source: DetectionSource
    region: BoundingBox = field(default_factory=BoundingBox.zero)

    @property
    def key(self) -> str:
        return self.name.lower()

    @property
    def confidence_level(self) -> ConfidenceLevel:
        return ConfidenceLevel.from_confidence(self.confidence)

    @property
    def percent(self) -> int:
        return int(self.confidence * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "confidence": round(self.confidence, 4),
            "source": self.source.value,
            "region": None if self.region.is_empty else self.region.as_list(),
            "confidence_level": self.confidence_level.value,
        }


@dataclass(frozen=True)
class ProcessingState:
    """Snapshot of what a caller observes about the aggregator."""

    is_running: bool = False
    detected_ingredients: Tuple[DetectedIngredient, ...] = ()
    last_error: Optional[str] = None
