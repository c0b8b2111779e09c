# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions raised by the benchmark pipeline.

How each one is handled during a run:
  - CorpusReadError: logged, that language is skipped, the run continues
  - WorkerError: aborts the pool it came from; the orchestrator drops the
    affected language and reports it as failed
  - UnknownLanguageCodeError: fatal, the registry and the results disagree
  - ArtifactWriteError: fatal, a run without its artifacts didn't happen
"""

from typing import Any


class BenchmarkError(Exception):
    """Base for all benchmark errors."""


class CorpusReadError(BenchmarkError):
    """Raised when a corpus file or directory is missing or unreadable."""

    def __init__(self, message: str, language_code: str | None = None) -> None:
        super().__init__(message)
        self.language_code = language_code


class WorkerError(BenchmarkError):
    """
    Raised by the pool when a worker fails.

    The original exception is chained as __cause__ and kept on `cause`.
    """

    def __init__(self, item: Any, index: int, cause: BaseException) -> None:
        super().__init__(f"Worker failed on item {index}: {type(cause).__name__}: {cause}")
        self.item = item
        self.index = index
        self.cause = cause


class UnknownLanguageCodeError(BenchmarkError):
    """Raised when a result's language code has no entry in the registry."""

    def __init__(self, language_code: str) -> None:
        super().__init__(f"No registry entry for language code '{language_code}'")
        self.language_code = language_code


class ArtifactWriteError(BenchmarkError):
    """Raised when a benchmark artifact can't be written to disk."""
