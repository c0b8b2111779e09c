# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Prediction adapter.

Sits between callers and the raw classifier:
  1. formats the input text for single-line feature extraction
  2. skips the classifier entirely for text that formats to nothing
  3. applies the optional per-call timeout
  4. strips the backend's label prefix so labels compare directly against
     canonical language codes
"""

import asyncio

from lidbench.detection.classifier import Classifier
from lidbench.detection.exceptions import PredictionTimeoutError
from lidbench.detection.formatter import format_input
from lidbench.detection.models import PredictionResult
from lidbench.logging.logger import get_logger

logger = get_logger(__name__)

DEFAULT_LABEL_PREFIX = "__label__"


def normalize_label(label: str, prefix: str = DEFAULT_LABEL_PREFIX) -> str:
    """Strip the classifier's label prefix: "__label__fra" -> "fra"."""
    if prefix and label.startswith(prefix):
        return label[len(prefix):]
    return label


class PredictionAdapter:
    """
    Normalized access to a shared classifier.

    The classifier is never mutated here, so one adapter (and one
    classifier) can serve any number of concurrent predictions.
    """

    def __init__(
        self,
        classifier: Classifier,
        label_prefix: str = DEFAULT_LABEL_PREFIX,
        timeout_seconds: float | None = None,
    ) -> None:
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")
        self.classifier = classifier
        self.label_prefix = label_prefix
        self.timeout_seconds = timeout_seconds

    async def predict(self, text: str, k: int = 1) -> list[PredictionResult]:
        """
        Ranked predictions for `text` with bare canonical labels.

        Returns an empty list for text that is empty after formatting.

        Raises:
            PredictionTimeoutError: The classifier didn't answer within
                timeout_seconds.
        """
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")

        formatted = format_input(text)
        if not formatted:
            return []

        try:
            if self.timeout_seconds is None:
                raw = await self.classifier.predict(formatted, k)
            else:
                raw = await asyncio.wait_for(
                    self.classifier.predict(formatted, k), timeout=self.timeout_seconds
                )
        except asyncio.TimeoutError as err:
            raise PredictionTimeoutError(
                f"Prediction did not complete within {self.timeout_seconds}s"
            ) from err

        return [
            PredictionResult(
                label=normalize_label(item.label, self.label_prefix),
                probability=item.probability,
            )
            for item in raw
        ]

    async def predict_top_label(self, text: str) -> str | None:
        """
        The single most likely canonical code, or None.

        None covers empty input, a classifier that returned nothing, and a
        timed-out call. Any other classifier error propagates.
        """
        try:
            predictions = await self.predict(text, k=1)
        except PredictionTimeoutError as err:
            logger.warning(
                "Prediction timed out, counting as no prediction",
                extra={"error": str(err), "text_length": len(text)},
            )
            return None

        if not predictions:
            return None
        return predictions[0].label
