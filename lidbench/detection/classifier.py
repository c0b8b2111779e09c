# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Classifier service.

The benchmark and the predict API only ever talk to a classifier through
the `Classifier` protocol: an awaitable `predict(text, k)` that returns
ranked labels with scores, highest first, labels still carrying the
backend's prefix.

FastTextClassifier is the real backend. The model is loaded once when the
service is constructed and then shared read-only by every concurrent
prediction. fastText's predict is a blocking C++ call, so it runs in a
worker thread and the event loop stays free to schedule other work.
"""

import asyncio
from pathlib import Path
from typing import Any, Protocol

from lidbench.detection.exceptions import ModelLoadError
from lidbench.detection.models import PredictionResult
from lidbench.logging.logger import get_logger

logger = get_logger(__name__)


class Classifier(Protocol):
    """What the rest of lidbench needs from a language classifier."""

    async def predict(self, text: str, k: int) -> list[PredictionResult]:
        ...


class FastTextClassifier:
    """
    A fastText supervised model behind the Classifier protocol.

    Construction is the expensive part (the lid.176 model is ~130 MB), so
    build one per process and pass it around.
    """

    def __init__(self, model_path: Path) -> None:
        if not model_path.is_file():
            raise ModelLoadError(
                f"fastText model not found at {model_path}. "
                "Download lid.176.bin (or lid.176.ftz) and point model_path at it."
            )

        try:
            import fasttext
        except ImportError as err:
            raise ModelLoadError(
                "fastText is not installed, install lidbench with the 'model' extra"
            ) from err

        # fastText prints a deprecation warning to stderr on every load_model.
        fasttext.FastText.eprint = lambda *args, **kwargs: None

        try:
            self._model: Any = fasttext.load_model(str(model_path))
        except ValueError as err:
            raise ModelLoadError(
                f"Failed to load fastText model at {model_path}, the file may be corrupted: {err}"
            ) from err

        self.model_path = model_path
        logger.info("Classifier model loaded", extra={"model_path": str(model_path)})

    def _predict_blocking(self, text: str, k: int) -> list[PredictionResult]:
        # The Python-side FastText.predict wraps scores in np.array(copy=False),
        # which numpy 2 rejects. The binding returns (prob, label) pairs directly.
        pairs = self._model.f.predict(text, k, 0.0, "strict")
        return [
            PredictionResult(label=str(label), probability=min(float(prob), 1.0))
            for prob, label in pairs
        ]

    async def predict(self, text: str, k: int) -> list[PredictionResult]:
        return await asyncio.to_thread(self._predict_blocking, text, k)
