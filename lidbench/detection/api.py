# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The public predict API.

    detector = LanguageDetector.from_model_file(Path("model/lid.176.bin"))
    detector.predict_sync("Ceci est une phrase en français.", k=2)
    # [PredictionResult(label='fr', probability=0.98), PredictionResult(label='en', ...)]

The detector owns one classifier for its whole lifetime. Constructing it
loads the model; every prediction after that shares it.
"""

import asyncio
from pathlib import Path

from lidbench.detection.adapter import DEFAULT_LABEL_PREFIX, PredictionAdapter
from lidbench.detection.classifier import Classifier, FastTextClassifier
from lidbench.detection.models import PredictionResult


class LanguageDetector:
    """Ranked language predictions for arbitrary text."""

    def __init__(
        self,
        classifier: Classifier,
        label_prefix: str = DEFAULT_LABEL_PREFIX,
        timeout_seconds: float | None = None,
    ) -> None:
        self.adapter = PredictionAdapter(classifier, label_prefix, timeout_seconds)

    @classmethod
    def from_model_file(
        cls,
        model_path: Path,
        label_prefix: str = DEFAULT_LABEL_PREFIX,
        timeout_seconds: float | None = None,
    ) -> "LanguageDetector":
        return cls(FastTextClassifier(model_path), label_prefix, timeout_seconds)

    async def predict(self, text: str, k: int = 1) -> list[PredictionResult]:
        """Top-k canonical codes with probabilities, most likely first."""
        return await self.adapter.predict(text, k)

    def predict_sync(self, text: str, k: int = 1) -> list[PredictionResult]:
        """Blocking variant of predict for callers without an event loop."""
        return asyncio.run(self.predict(text, k))
