# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for lidbench.

Every config section is a frozen pydantic model:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

Every recognized benchmark option is listed here with its default. Nothing
reads options out of loose dicts anywhere else in the package.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version and logging."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )


class SentenceFilterConfig(BaseModel):
    """
    How a corpus file gets cut down to a benchmark sample.

    The first `limit` lines are taken, then only sentences whose length is
    within [min_length, max_length] survive.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    min_length: int = Field(default=30, ge=0, description="Shortest sentence kept, in characters")
    max_length: int = Field(default=250, ge=0, description="Longest sentence kept, in characters")
    limit: int = Field(default=30000, ge=0, description="Lines read per corpus file before filtering")

    @model_validator(mode="after")
    def _check_bounds(self) -> "SentenceFilterConfig":
        if self.max_length < self.min_length:
            raise ValueError(
                f"max_length ({self.max_length}) must be >= min_length ({self.min_length})"
            )
        return self


class BenchmarkConfig(BaseModel):
    """
    Everything a benchmark run needs: where corpora and the model live,
    how sentences are sampled, how much prediction work may be in flight,
    and where the artifacts land.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(default="1.0.0", description="Schema version")
    corpus_directory: str = Field(
        default="data",
        description="Directory holding <code>_sentences.tsv files",
    )
    output_directory: str = Field(
        default="results",
        description="Where benchmark artifacts get written",
    )
    model_path: str = Field(
        default="model/lid.176.bin",
        description="fastText language identification model",
    )
    registry_path: Optional[str] = Field(
        default=None,
        description="Custom language registry YAML; the bundled one is used when unset",
    )
    label_prefix: str = Field(
        default="__label__",
        description="Prefix the classifier puts in front of every label",
    )
    include_only: Optional[list[str]] = Field(
        default=None,
        description="Allow-list of canonical codes; every language with a corpus when unset",
    )
    per_language_sentence_limit: int = Field(default=30000, ge=0)
    min_sentence_length: int = Field(default=30, ge=0)
    max_sentence_length: int = Field(default=250, ge=0)
    per_language_concurrency: int = Field(
        default=10,
        ge=1,
        description="Predictions in flight at once for one language",
    )
    language_concurrency: int = Field(
        default=8,
        ge=1,
        description="Languages loaded and benchmarked at once",
    )
    prediction_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="Per-prediction timeout; a timed-out sentence counts as a miss",
    )
    tolerate_prediction_errors: bool = Field(
        default=True,
        description="Drop a language whose predictions fail instead of failing the run",
    )

    @model_validator(mode="after")
    def _check_lengths(self) -> "BenchmarkConfig":
        if self.max_sentence_length < self.min_sentence_length:
            raise ValueError(
                f"max_sentence_length ({self.max_sentence_length}) must be >= "
                f"min_sentence_length ({self.min_sentence_length})"
            )
        return self

    @property
    def sentence_filter(self) -> SentenceFilterConfig:
        return SentenceFilterConfig(
            min_length=self.min_sentence_length,
            max_length=self.max_sentence_length,
            limit=self.per_language_sentence_limit,
        )


class LidbenchConfig(BaseModel):
    """
    Top-level config container.

    A YAML file may hold just `global:`; the benchmark section is optional
    and commands fall back to BenchmarkConfig defaults when it is missing.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    benchmark: Optional[BenchmarkConfig] = Field(default=None)
