"""High level API that runs both ingredient detectors and merges their output."""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Union

import numpy as np

from . import config
from .detectors import (
    ImageClassifier,
    IngredientDetector,
    ObjectIngredientDetector,
    TextIngredientDetector,
    TextReader,
    YOLOImageClassifier,
)
from .errors import DetectorError, ImageDecodeError
from .image_utils import ImageInput, load_image
from .merging import merge_detection, to_ingredient
from .types import DetectedIngredient, DetectionSource, ProcessingState, RawDetection
from .vocabulary import FoodVocabulary

logger = logging.getLogger(__name__)

StateListener = Callable[[ProcessingState], None]


@dataclass(frozen=True)
class _DetectorFailed:
    source: DetectionSource
    message: str


@dataclass(frozen=True)
class _DetectorFinished:
    source: DetectionSource


_Event = Union[RawDetection, _DetectorFailed, _DetectorFinished]


class IngredientDetectionAggregator:
    """Runs every detector on an image concurrently and merges the results.

    Detector workers never touch the result list. They post events onto a
    queue that a single merge loop drains, so each detection is merged and
    re-sorted one at a time. Callers observe ``is_running``,
    ``detected_ingredients`` and ``last_error``, or ``subscribe`` to state
    snapshots.

    A scan is never cancelled and has no timeout. Starting a scan while one is
    in flight is ignored.
    """

    def __init__(
        self,
        detectors: Optional[Sequence[IngredientDetector]] = None,
        *,
        classifier: Optional[ImageClassifier] = None,
        text_reader: Optional[TextReader] = None,
        vocabulary: Optional[FoodVocabulary] = None,
        object_threshold: float = config.OBJECT_CONFIDENCE_THRESHOLD,
        text_threshold: float = config.TEXT_CONFIDENCE_THRESHOLD,
    ) -> None:
        self.vocabulary = vocabulary or FoodVocabulary.default()
        if detectors is None:
            detectors = self._default_detectors(
                classifier, text_reader, self.vocabulary, object_threshold, text_threshold
            )
        self.detectors: List[IngredientDetector] = list(detectors)

        self._lock = threading.RLock()
        self._listeners: List[StateListener] = []
        self._is_running = False
        self._ingredients: List[DetectedIngredient] = []
        self._last_error: Optional[str] = None

        self._workers = ThreadPoolExecutor(
            max_workers=max(1, len(self.detectors)), thread_name_prefix="pantry-detector"
        )
        self._merger = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pantry-merge")

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._is_running

    @property
    def detected_ingredients(self) -> List[DetectedIngredient]:
        with self._lock:
            return list(self._ingredients)

    @property
    def last_error(self) -> Optional[str]:
        with self._lock:
            return self._last_error

    @property
    def state(self) -> ProcessingState:
        with self._lock:
            return ProcessingState(
                is_running=self._is_running,
                detected_ingredients=tuple(self._ingredients),
                last_error=self._last_error,
            )

    def subscribe(self, listener: StateListener) -> None:
        """Call ``listener`` with a fresh snapshot after every state change."""

        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def start_processing(self, image_input: ImageInput) -> Optional["Future[List[DetectedIngredient]]"]:
        """Begin a scan and return a future for the final ingredient list.

        Returns None, without touching any state, if a scan is already running.
        """

        with self._lock:
            if self._is_running:
                logger.warning("Scan already in progress; ignoring new image")
                return None
            self._is_running = True
            self._ingredients = []
            self._last_error = None
        self._notify()

        try:
            image = load_image(image_input)
        except ImageDecodeError as exc:
            logger.error("Skipping detectors: %s", exc)
            return self._finish_early(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while loading image")
            return self._finish_early(f"Failed to process image: {exc}")

        logger.info(
            "Running %d detectors on image of shape %s", len(self.detectors), image.shape
        )
        try:
            events: "queue.Queue[_Event]" = queue.Queue()
            for detector in self.detectors:
                self._workers.submit(self._run_detector, detector, image, events)
            return self._merger.submit(self._merge_events, events, len(self.detectors))
        except RuntimeError as exc:
            # raised by the executors once close() has shut them down
            logger.error("Cannot start detectors: %s", exc)
            return self._finish_early(f"Failed to start detection: {exc}")

    def process_image(
        self, image_input: ImageInput, timeout: Optional[float] = None
    ) -> List[DetectedIngredient]:
        """Scan an image and wait for both detectors to finish.

        Detector failures end up in ``last_error`` rather than being raised.
        If a scan is already running, or ``timeout`` elapses first, the current
        results are returned as-is and the scan keeps running.
        """

        future = self.start_processing(image_input)
        if future is None:
            return self.detected_ingredients
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            logger.warning("Scan still running after %ss; returning partial results", timeout)
            return self.detected_ingredients

    def clear_results(self) -> None:
        """Drop results and the error message; ``is_running`` is left alone."""

        with self._lock:
            self._ingredients = []
            self._last_error = None
        self._notify()

    def close(self) -> None:
        self._workers.shutdown(wait=True)
        self._merger.shutdown(wait=True)

    def __enter__(self) -> "IngredientDetectionAggregator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _finish_early(self, message: str) -> "Future[List[DetectedIngredient]]":
        with self._lock:
            self._last_error = message
            self._is_running = False
        self._notify()
        done: "Future[List[DetectedIngredient]]" = Future()
        done.set_result([])
        return done

    @staticmethod
    def _run_detector(
        detector: IngredientDetector, image: np.ndarray, events: "queue.Queue[_Event]"
    ) -> None:
        try:
            detections = detector.detect(image)
        except DetectorError as exc:
            logger.error("%s failed: %s", detector.source.description, exc)
            events.put(_DetectorFailed(detector.source, str(exc)))
        except Exception as exc:
            logger.exception("%s raised unexpectedly", detector.source.description)
            events.put(_DetectorFailed(detector.source, f"{detector.source.description} failed: {exc}"))
        else:
            for detection in detections:
                events.put(detection)
        finally:
            events.put(_DetectorFinished(detector.source))

    def _merge_events(self, events: "queue.Queue[_Event]", expected: int) -> List[DetectedIngredient]:
        pending = expected
        try:
            while pending:
                event = events.get()
                if isinstance(event, _DetectorFinished):
                    pending -= 1
                    continue
                with self._lock:
                    if isinstance(event, _DetectorFailed):
                        self._last_error = event.message
                    else:
                        self._ingredients = merge_detection(self._ingredients, to_ingredient(event))
                self._notify()
        finally:
            with self._lock:
                self._is_running = False
                results = list(self._ingredients)
            self._notify()

        logger.info("Scan finished with %d ingredients", len(results))
        return results

    def _notify(self) -> None:
        snapshot = self.state
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("State listener failed")

    @staticmethod
    def _default_detectors(
        classifier: Optional[ImageClassifier],
        text_reader: Optional[TextReader],
        vocabulary: FoodVocabulary,
        object_threshold: float,
        text_threshold: float,
    ) -> Iterable[IngredientDetector]:
        return (
            ObjectIngredientDetector(
                classifier or YOLOImageClassifier(),
                vocabulary=vocabulary,
                confidence_threshold=object_threshold,
            ),
            TextIngredientDetector(
                text_reader,
                vocabulary=vocabulary,
                confidence_threshold=text_threshold,
            ),
        )
