# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models for the benchmark pipeline.

Everything that describes finished data is a frozen dataclass. The one
mutable type is LanguageCounter, which only lives while a language's
predictions are running and is owned by exactly one coroutine.
"""

import math
from dataclasses import dataclass, field

from lidbench.config.schema import SentenceFilterConfig


@dataclass(frozen=True)
class LanguageCorpus:
    """The filtered sentence sample for one language, keyed by canonical code."""

    language_code: str
    sentences: tuple[str, ...]


@dataclass(frozen=True)
class LanguageAccuracy:
    """
    Final top-1 accuracy numbers for one language.

    accuracy is correct_count / sample_count, NaN when nothing was sampled.
    Languages with no samples never make it into a report.
    """

    language_code: str
    sample_count: int
    correct_count: int

    def __post_init__(self) -> None:
        if self.sample_count < 0:
            raise ValueError(f"sample_count must be >= 0, got {self.sample_count}")
        if not 0 <= self.correct_count <= self.sample_count:
            raise ValueError(
                f"correct_count must be within [0, {self.sample_count}], got {self.correct_count}"
            )

    @property
    def accuracy(self) -> float:
        if self.sample_count == 0:
            return math.nan
        return self.correct_count / self.sample_count

    def to_dict(self) -> dict[str, object]:
        return {
            "count": self.sample_count,
            "accuratePredictions": self.correct_count,
            "accuracy": self.accuracy,
        }


@dataclass
class LanguageCounter:
    """Running counts for one language while its predictions are in flight."""

    language_code: str
    sample_count: int = 0
    correct_count: int = 0

    def record(self, predicted_label: str | None) -> None:
        """Count one sentence; it's correct only on an exact, case-sensitive match."""
        self.sample_count += 1
        if predicted_label == self.language_code:
            self.correct_count += 1

    def finalize(self) -> LanguageAccuracy:
        return LanguageAccuracy(
            language_code=self.language_code,
            sample_count=self.sample_count,
            correct_count=self.correct_count,
        )


@dataclass(frozen=True)
class BenchmarkReport:
    """
    The outcome of one benchmark run.

    `results` is already ranked: accuracy descending, sample count
    descending on exact ties. skipped_languages had no usable corpus,
    failed_languages broke during prediction; neither appears in `results`.
    generated_at is left out of equality, two runs over the same data
    compare equal.
    """

    results: tuple[LanguageAccuracy, ...]
    sentence_filter: SentenceFilterConfig
    version: str
    generated_at: str = field(compare=False)
    skipped_languages: tuple[str, ...] = field(default_factory=tuple)
    failed_languages: tuple[str, ...] = field(default_factory=tuple)

    @property
    def total_languages(self) -> int:
        return len(self.results)

    @property
    def total_sentences(self) -> int:
        return sum(result.sample_count for result in self.results)

    def results_by_language(self) -> dict[str, dict[str, object]]:
        return {result.language_code: result.to_dict() for result in self.results}

    def to_dict(self) -> dict[str, object]:
        return {
            "version": self.version,
            "generated_at": self.generated_at,
            "filter": self.sentence_filter.model_dump(),
            "total_languages": self.total_languages,
            "total_sentences": self.total_sentences,
            "skipped_languages": list(self.skipped_languages),
            "failed_languages": list(self.failed_languages),
            "results": self.results_by_language(),
        }
