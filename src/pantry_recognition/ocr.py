"""Lightweight local OCR for reading printed words on packaging and shopping lists."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from .image_utils import ensure_gray
from .types import BoundingBox, TextCandidate, TextObservation

logger = logging.getLogger(__name__)

PixelBox = Tuple[int, int, int, int]  # x, y, w, h

_FONTS = (cv2.FONT_HERSHEY_SIMPLEX, cv2.FONT_HERSHEY_DUPLEX, cv2.FONT_HERSHEY_PLAIN)
# stroke width as a fraction of cap height
_STROKE_RATIOS = (0.04, 0.06, 0.08, 0.10)
_REFERENCE_HEIGHT = 48


class LightweightTextRecognizer:
    """A template-matching OCR for clean, high-contrast printed text.

    It runs on OpenCV alone, without Tesseract or a neural model. Glyphs are
    grouped into words using a gap sized from the median glyph height. Each
    word is then read two ways:

    * against ``lexicon``, a list of expected words rendered whole in the
      Hershey fonts, which is reliable for known ingredient names;
    * character by character against single-glyph templates, which covers
      anything outside the lexicon.

    The lexicon reading, when it scores at least ``min_word_score``, is the
    top candidate; the character reading follows it.
    """

    def __init__(
        self,
        lexicon: Optional[Iterable[str]] = None,
        char_set: Sequence[str] | str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789",
        glyph_size: int = 32,
        min_word_score: float = 0.6,
        min_line_score: float = 0.45,
        min_char_score: float = 0.35,
        letter_gap_ratio: float = 0.45,
        min_glyph_area: int = 30,
        max_lines: int = 32,
    ) -> None:
        self.char_set = [c.upper() for c in dict.fromkeys(char_set)]
        self.lexicon = [w.strip().upper() for w in dict.fromkeys(lexicon or ()) if w.strip()]
        self.glyph_size = glyph_size
        self.min_word_score = min_word_score
        self.min_line_score = min_line_score
        self.min_char_score = min_char_score
        self.letter_gap_ratio = letter_gap_ratio
        self.min_glyph_area = min_glyph_area
        self.max_lines = max_lines
        self._glyphs = self._build_glyph_templates()
        self._words = self._build_word_templates()

    def read(self, image: np.ndarray) -> List[TextObservation]:
        """Return one observation per recognized word, most confident first."""

        binary = self._binarize(image)
        height, width = binary.shape[:2]

        found: List[Tuple[TextObservation, PixelBox]] = []
        for box in self._group_words(binary):
            x, y, w, h = box
            word = binary[y : y + h, x : x + w]
            candidates = self._read_word(word)
            if not candidates or candidates[0].confidence < self.min_line_score:
                continue
            found.append(
                (
                    TextObservation(
                        candidates=tuple(candidates),
                        bounding_box=BoundingBox.from_pixels(box, width, height),
                    ),
                    box,
                )
            )

        found.sort(key=lambda item: (-item[0].candidates[0].confidence, item[1][1], item[1][0]))
        logger.debug("OCR read %d words", len(found))
        return [observation for observation, _ in found]

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    @staticmethod
    def _binarize(image: np.ndarray) -> np.ndarray:
        gray = cv2.GaussianBlur(ensure_gray(image), (3, 3), 0)
        _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
        # ink is expected to be the minority of pixels
        if cv2.countNonZero(binary) > binary.size // 2:
            binary = cv2.bitwise_not(binary)
        return binary

    def _group_words(self, binary: np.ndarray) -> List[PixelBox]:
        count, _, stats, _ = cv2.connectedComponentsWithStats(binary, connectivity=8)
        heights = [
            int(stats[i, cv2.CC_STAT_HEIGHT])
            for i in range(1, count)
            if stats[i, cv2.CC_STAT_AREA] >= self.min_glyph_area
        ]
        if not heights:
            return []

        glyph_height = float(np.median(heights))
        gap = max(3, int(round(glyph_height * self.letter_gap_ratio)))
        # a one-row kernel joins neighbouring letters without merging lines
        bridged = cv2.dilate(binary, cv2.getStructuringElement(cv2.MORPH_RECT, (gap, 1)))
        contours, _ = cv2.findContours(bridged, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        words: List[PixelBox] = []
        for contour in contours:
            x, y, w, h = cv2.boundingRect(contour)
            tight = _ink_box(binary[y : y + h, x : x + w])
            if tight is None:
                continue
            tx, ty, tw, th = tight
            if th < glyph_height * 0.5 or tw * th < self.min_glyph_area:
                continue
            words.append((x + tx, y + ty, tw, th))

        words.sort(key=lambda box: (box[1], box[0]))
        return words[: self.max_lines]

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _read_word(self, word: np.ndarray) -> List[TextCandidate]:
        candidates: List[TextCandidate] = []
        matched = self._match_lexicon(word)
        if matched is not None:
            candidates.append(matched)

        spelled = self._spell_out(word)
        if spelled is not None and (matched is None or spelled.text != matched.text):
            candidates.append(spelled)
        return candidates

    def _match_lexicon(self, word: np.ndarray) -> Optional[TextCandidate]:
        if not self._words:
            return None

        h, w = word.shape[:2]
        aspect = w / float(h)
        target = _standardize(word)

        best_text, best_score = None, 0.0
        for text, variants in self._words.items():
            for template in variants:
                ratio = (template.shape[1] / float(template.shape[0])) / aspect
                if not 0.75 <= ratio <= 1.33:
                    continue
                resized = cv2.resize(template, (w, h), interpolation=cv2.INTER_LINEAR)
                score = float(np.dot(target, _standardize(resized)))
                if score > best_score:
                    best_text, best_score = text, score

        if best_text is None or best_score < self.min_word_score:
            return None
        return TextCandidate(text=best_text, confidence=min(1.0, best_score))

    def _spell_out(self, word: np.ndarray) -> Optional[TextCandidate]:
        if not self._glyphs:
            return None

        count, _, stats, _ = cv2.connectedComponentsWithStats(word, connectivity=8)
        boxes = sorted(
            (
                tuple(int(v) for v in stats[i, :4])
                for i in range(1, count)
                if stats[i, cv2.CC_STAT_AREA] >= self.min_glyph_area
            ),
            key=lambda box: box[0],
        )

        chars: List[str] = []
        scores: List[float] = []
        for x, y, w, h in boxes:
            glyph = _fit_to_square(word[y : y + h, x : x + w], self.glyph_size)
            char, score = self._closest_glyph(glyph)
            if char is None or score < self.min_char_score:
                continue
            chars.append(char)
            scores.append(score)

        if not chars:
            return None
        return TextCandidate(text="".join(chars), confidence=float(sum(scores) / len(scores)))

    def _closest_glyph(self, glyph: np.ndarray) -> Tuple[Optional[str], float]:
        target = _standardize(glyph)
        best_char, best_score = None, 0.0
        for char, variants in self._glyphs.items():
            for template in variants:
                score = float(np.dot(target, template))
                if score > best_score:
                    best_char, best_score = char, score
        return best_char, min(1.0, best_score)

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def _build_glyph_templates(self) -> Dict[str, List[np.ndarray]]:
        templates: Dict[str, List[np.ndarray]] = {}
        for char in self.char_set:
            variants = [
                _standardize(_fit_to_square(rendered, self.glyph_size))
                for rendered in _render_variants(char)
            ]
            if variants:
                templates[char] = variants
        return templates

    def _build_word_templates(self) -> Dict[str, List[np.ndarray]]:
        templates: Dict[str, List[np.ndarray]] = {}
        for text in self.lexicon:
            variants = _render_variants(text)
            if variants:
                templates[text] = variants
        return templates


def _render_variants(text: str) -> List[np.ndarray]:
    variants = []
    for font in _FONTS:
        for ratio in _STROKE_RATIOS:
            rendered = _render(text, font, ratio)
            if rendered is not None:
                variants.append(rendered)
    return variants


def _render(text: str, font: int, stroke_ratio: float, height: int = _REFERENCE_HEIGHT) -> Optional[np.ndarray]:
    """Draw ``text`` white on black with a cap height of about ``height`` pixels."""

    (_, base_height), _ = cv2.getTextSize(text, font, 1.0, 1)
    if base_height <= 0:
        return None
    scale = height / float(base_height)
    thickness = max(1, int(round(height * stroke_ratio)))
    (text_w, text_h), baseline = cv2.getTextSize(text, font, scale, thickness)
    pad = thickness * 2 + 4
    canvas = np.zeros((text_h + baseline + 2 * pad, text_w + 2 * pad), dtype=np.uint8)
    cv2.putText(canvas, text, (pad, pad + text_h), font, scale, 255, thickness, lineType=cv2.LINE_AA)
    box = _ink_box(canvas)
    if box is None:
        return None
    x, y, w, h = box
    return canvas[y : y + h, x : x + w]


def _ink_box(image: np.ndarray) -> Optional[PixelBox]:
    coords = cv2.findNonZero(image)
    if coords is None:
        return None
    x, y, w, h = cv2.boundingRect(coords)
    return int(x), int(y), int(w), int(h)


def _fit_to_square(image: np.ndarray, size: int) -> np.ndarray:
    """Scale a glyph to fit ``size`` x ``size`` keeping its aspect ratio, centered."""

    canvas = np.zeros((size, size), dtype=np.uint8)
    h, w = image.shape[:2]
    if h == 0 or w == 0:
        return canvas
    scale = (size - 4) / float(max(h, w))
    new_w = max(1, int(round(w * scale)))
    new_h = max(1, int(round(h * scale)))
    resized = cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_AREA)
    top = (size - new_h) // 2
    left = (size - new_w) // 2
    canvas[top : top + new_h, left : left + new_w] = resized
    return canvas


def _standardize(image: np.ndarray) -> np.ndarray:
    """Zero-mean, unit-norm vector, so a dot product is a Pearson correlation."""

    vector = image.astype(np.float32).flatten()
    vector -= vector.mean()
    norm = float(np.linalg.norm(vector))
    if norm == 0.0:
        return vector
    return vector / norm
