# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data types shared by the detection layer.

Frozen dataclasses: a prediction or a registry row never changes after it
is built.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PredictionResult:
    """
    One ranked label from the classifier.

    Raw classifier output carries the backend's label prefix
    (`__label__fr`); results coming out of the adapter carry the bare
    canonical code (`fr`). Sequences of these are ordered highest
    probability first.
    """

    label: str
    probability: float


@dataclass(frozen=True)
class LanguageEntry:
    """
    One row of the language registry.

    corpus_code is the ISO 639-3 code used in Tatoeba file names,
    canonical_code is what the classifier predicts for that language.
    """

    corpus_code: str
    canonical_code: str
    display_name: str
