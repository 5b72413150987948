"""Name normalization and the keep-most-confident merge policy."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .types import DetectedIngredient, RawDetection


def normalize_ingredient_name(name: str) -> str:
    """Turn a raw label into a display name.

    Plural handling is deliberately naive: one trailing "s" is dropped from
    words longer than three characters, so "Tomatoes" becomes "Tomatoe".
    """

    normalized = name.strip().lower()
    if normalized.endswith("s") and len(normalized) > 3:
        normalized = normalized[:-1]
    return " ".join(word.capitalize() for word in normalized.split())


def to_ingredient(detection: RawDetection) -> DetectedIngredient:
    return DetectedIngredient(
        name=normalize_ingredient_name(detection.label),
        confidence=float(detection.confidence),
        source=detection.source,
        region=detection.region,
    )


def merge_detection(
    ingredients: Sequence[DetectedIngredient], incoming: DetectedIngredient
) -> List[DetectedIngredient]:
    """Return a new list with ``incoming`` merged in.

    Names are compared case-insensitively. A duplicate only replaces the
    existing entry when it is strictly more confident. The result is sorted by
    confidence descending; the sort is stable so equal confidences keep their
    insertion order.
    """

    merged = list(ingredients)
    for index, existing in enumerate(merged):
        if existing.key == incoming.key:
            if incoming.confidence > existing.confidence:
                merged[index] = incoming
            break
    else:
        merged.append(incoming)

    merged.sort(key=lambda item: item.confidence, reverse=True)
    return merged


def merge_results(
    existing: Sequence[DetectedIngredient], incoming: Iterable[DetectedIngredient]
) -> List[DetectedIngredient]:
    """Fold the results of another scan into ``existing``."""

    merged = sorted(existing, key=lambda item: item.confidence, reverse=True)
    for ingredient in incoming:
        merged = merge_detection(merged, ingredient)
    return merged
