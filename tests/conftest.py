# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for lidbench tests.

Fixtures here are available to every test file automatically. The fake
classifier stands in for fastText everywhere, so no test needs a model file.
"""

import asyncio
import textwrap
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from lidbench.detection.models import LanguageEntry, PredictionResult
from lidbench.detection.registry import LanguageRegistry


class FakeClassifier:
    """
    Classifier double that answers from a lookup function.

    `answer(text)` returns the bare label to predict, or None for no
    prediction. Every call is recorded, and the number of predictions in
    flight at once is tracked so concurrency limits can be asserted.
    """

    def __init__(
        self,
        answer: Callable[[str], str | None],
        delay: float = 0.0,
        fail_on: Callable[[str], bool] | None = None,
    ) -> None:
        self.answer = answer
        self.delay = delay
        self.fail_on = fail_on
        self.calls: list[str] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def predict(self, text: str, k: int) -> list[PredictionResult]:
        self.calls.append(text)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if self.fail_on is not None and self.fail_on(text):
                raise RuntimeError(f"classifier exploded on {text!r}")
            label = self.answer(text)
            if label is None:
                return []
            return [PredictionResult(label=f"__label__{label}", probability=0.9)][:k]
        finally:
            self.in_flight -= 1


def tsv_line(index: int, corpus_code: str, sentence: str) -> str:
    return f"{index}\t{corpus_code}\t{sentence}"


def write_corpus(corpus_dir: Path, corpus_code: str, sentences: Iterable[str]) -> Path:
    """Write a Tatoeba-style <code>_sentences.tsv file."""
    corpus_dir.mkdir(parents=True, exist_ok=True)
    path = corpus_dir / f"{corpus_code}_sentences.tsv"
    lines = [tsv_line(i, corpus_code, sentence) for i, sentence in enumerate(sentences, start=1)]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture()
def small_registry() -> LanguageRegistry:
    return LanguageRegistry([
        LanguageEntry(corpus_code="eng", canonical_code="en", display_name="English"),
        LanguageEntry(corpus_code="fra", canonical_code="fr", display_name="French"),
        LanguageEntry(corpus_code="deu", canonical_code="de", display_name="German"),
        LanguageEntry(corpus_code="spa", canonical_code="es", display_name="Spanish"),
    ])


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """
    Create a minimal valid config YAML file in a temp directory.

    This is the smallest config that passes schema validation.
    Tests that need specific config values should write their own files.
    """
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def benchmark_config_file(tmp_path: Path) -> Path:
    """A config with a benchmark section pointing into tmp_path."""
    config_content = textwrap.dedent(f"""\
        global:
          config_version: "1.0.0"
          log_level: "WARNING"
        benchmark:
          corpus_directory: "{tmp_path / 'data'}"
          output_directory: "{tmp_path / 'results'}"
          min_sentence_length: 5
          max_sentence_length: 100
          per_language_concurrency: 4
    """)
    config_file = tmp_path / "benchmark.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """A config file that's valid YAML but fails schema validation (missing required field)."""
    config_content = textwrap.dedent("""\
        global:
          log_level: "INFO"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


@pytest.fixture()
def fake_classifier() -> type[FakeClassifier]:
    """The FakeClassifier class, so tests can build one with their own answers."""
    return FakeClassifier


@pytest.fixture()
def corpus_writer() -> Callable[[Path, str, Iterable[str]], Path]:
    return write_corpus
