"""Utility helpers for turning caller input into a pixel buffer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image

from .errors import ImageDecodeError

logger = logging.getLogger(__name__)

ImageInput = Union[str, Path, np.ndarray, Image.Image]


def load_image(image_input: ImageInput) -> np.ndarray:
    """Load an image input into an OpenCV-compatible BGR ndarray.

    Raises ImageDecodeError when no pixel buffer can be extracted.
    """

    if isinstance(image_input, np.ndarray):
        image = image_input.copy()
    elif isinstance(image_input, Image.Image):
        try:
            rgb = image_input.convert("RGB")
        except (OSError, ValueError) as exc:
            raise ImageDecodeError(f"Failed to process image: {exc}") from exc
        image = cv2.cvtColor(np.asarray(rgb), cv2.COLOR_RGB2BGR)
    elif isinstance(image_input, (str, Path)):
        path = Path(image_input)
        if not path.exists():
            raise ImageDecodeError(f"Image path not found: {path}")
        image = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if image is None:
            raise ImageDecodeError(f"Unable to read image from path: {path}")
    else:
        raise ImageDecodeError(f"Unsupported image input: {type(image_input).__name__}")

    if image.size == 0 or image.ndim not in (2, 3):
        raise ImageDecodeError(f"Failed to process image: unexpected shape {image.shape}")
    if image.ndim == 3 and image.shape[2] not in (1, 3, 4):
        raise ImageDecodeError(f"Failed to process image: {image.shape[2]} channels")
    if image.dtype == np.bool_:
        image = image.astype(np.uint8) * 255
    elif not (np.issubdtype(image.dtype, np.integer) or np.issubdtype(image.dtype, np.floating)):
        raise ImageDecodeError(f"Failed to process image: unsupported pixel type {image.dtype}")
    elif image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)

    logger.debug("Loaded image with shape %s", image.shape)
    return ensure_color(image)


def ensure_color(image: np.ndarray) -> np.ndarray:
    """Ensure the ndarray is three-channel BGR."""

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 1:
        return cv2.cvtColor(image[:, :, 0], cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image


def ensure_gray(image: np.ndarray) -> np.ndarray:
    """Convert a BGR image to grayscale if necessary."""

    if image.ndim == 2:
        return image
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
