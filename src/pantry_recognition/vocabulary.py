"""Food vocabulary shared by the relevance filter and the OCR keyword scan."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

DEFAULT_FOOD_KEYWORDS: Tuple[str, ...] = (
    "tomato", "tomatoes", "onion", "onions", "garlic", "potato", "potatoes",
    "carrot", "carrots", "lettuce", "spinach", "kale", "broccoli", "cauliflower",
    "pepper", "peppers", "bell pepper", "bell peppers", "cucumber", "cucumbers",
    "mushroom", "mushrooms", "eggplant", "zucchini", "squash", "corn",
    "apple", "apples", "banana", "bananas", "orange", "oranges", "lemon", "lemons",
    "lime", "limes", "grape", "grapes", "strawberry", "strawberries", "blueberry", "blueberries",
    "chicken", "beef", "pork", "fish", "salmon", "tuna", "shrimp", "eggs",
    "milk", "cheese", "yogurt", "butter", "cream", "bread", "pasta", "rice",
    "flour", "sugar", "salt", "oil", "olive oil", "vinegar", "sauce",
    "herb", "herbs", "basil", "oregano", "thyme", "rosemary", "parsley", "cilantro",
)

DEFAULT_FOOD_CATEGORIES: Tuple[str, ...] = (
    "food", "fruit", "vegetable", "meat", "dairy", "grain", "spice",
    "herb", "condiment", "beverage", "snack", "produce",
)


def _prepare(words: Iterable[str]) -> Tuple[str, ...]:
    # lower-cased, blanks dropped, first occurrence wins so scan order is kept
    prepared = (word.strip().lower() for word in words)
    return tuple(dict.fromkeys(word for word in prepared if word))


@dataclass(frozen=True)
class FoodVocabulary:
    """Immutable keyword table.

    ``keywords`` are concrete ingredients and are scanned in order, so the
    first entry that matches a piece of OCR text wins. ``categories`` are
    broader words ("fruit", "dairy") that only make a classifier label count
    as food related.
    """

    keywords: Tuple[str, ...]
    categories: Tuple[str, ...] = ()

    @classmethod
    def create(
        cls, keywords: Iterable[str], categories: Iterable[str] = ()
    ) -> "FoodVocabulary":
        return cls(keywords=_prepare(keywords), categories=_prepare(categories))

    @classmethod
    def default(cls) -> "FoodVocabulary":
        return cls.create(DEFAULT_FOOD_KEYWORDS, DEFAULT_FOOD_CATEGORIES)

    def is_food_related(self, label: str) -> bool:
        """True if the label contains any category word or ingredient keyword."""

        text = label.lower()
        return any(category in text for category in self.categories) or any(
            keyword in text for keyword in self.keywords
        )

    def first_keyword_in(self, text: str) -> Optional[str]:
        lowered = text.lower()
        for keyword in self.keywords:
            if keyword in lowered:
                return keyword
        return None

    def __len__(self) -> int:
        return len(self.keywords)
