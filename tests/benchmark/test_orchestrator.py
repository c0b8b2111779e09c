# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
End-to-end tests for a benchmark run, with a fake classifier.

The fake answers by looking for a marker word in the sentence, so every
test controls exactly which predictions are right, wrong, slow, or broken.
"""

import asyncio
import json
from pathlib import Path
from typing import Any

import pytest

from lidbench.benchmark.exceptions import WorkerError
from lidbench.benchmark.orchestrator import BenchmarkOrchestrator, run_benchmark
from lidbench.benchmark.report import DATA_FILE, RESULTS_FILE, RESULTS_MD_FILE, snapshot_file_name
from lidbench.config.schema import BenchmarkConfig
from lidbench.detection.adapter import PredictionAdapter
from lidbench.detection.registry import LanguageRegistry

_MARKERS = {"english": "en", "french": "fr", "german": "de", "spanish": "es"}


def _answer_by_marker(text: str) -> str | None:
    for marker, code in _MARKERS.items():
        if marker in text:
            return code
    return None


def _sentences(marker: str, count: int) -> list[str]:
    return [f"this is {marker} sentence number {i}" for i in range(count)]


def _config(tmp_path: Path, **overrides: Any) -> BenchmarkConfig:
    values: dict[str, Any] = {
        "corpus_directory": str(tmp_path / "data"),
        "output_directory": str(tmp_path / "results"),
        "min_sentence_length": 10,
        "max_sentence_length": 100,
        "per_language_concurrency": 3,
        "language_concurrency": 2,
    }
    values.update(overrides)
    return BenchmarkConfig(**values)


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture()
def corpora(tmp_path: Path, corpus_writer: Any) -> Path:
    """English, French and German corpora; French has one mislabeled-looking sentence."""
    data = tmp_path / "data"
    corpus_writer(data, "eng", _sentences("english", 4))
    corpus_writer(data, "fra", _sentences("french", 3) + ["this sentence looks german to the model"])
    corpus_writer(data, "deu", _sentences("german", 2))
    return data


class TestBenchmarkRun:
    def test_counts_exact_top_label_matches(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, fake_classifier: Any
    ) -> None:
        report = run_benchmark(_config(tmp_path), fake_classifier(_answer_by_marker), small_registry)

        by_code = {result.language_code: result for result in report.results}
        assert by_code["en"].sample_count == 4
        assert by_code["en"].correct_count == 4
        assert by_code["fr"].sample_count == 4
        assert by_code["fr"].correct_count == 3
        assert by_code["de"].accuracy == 1.0
        # ranked: accuracy desc, then sample count desc
        assert [r.language_code for r in report.results] == ["en", "de", "fr"]
        assert report.total_sentences == 10

    def test_writes_every_artifact(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, fake_classifier: Any
    ) -> None:
        report = run_benchmark(_config(tmp_path), fake_classifier(_answer_by_marker), small_registry)
        results_dir = tmp_path / "results"

        assert (results_dir / DATA_FILE).exists()
        assert (results_dir / RESULTS_FILE).exists()
        assert (results_dir / snapshot_file_name(report.version)).exists()
        markdown = (results_dir / RESULTS_MD_FILE).read_text(encoding="utf-8")
        assert markdown.startswith("| Language (3) | Symbol | Count (10)| Accuracy (10 - 100 chars) |")

    def test_sample_data_matches_recorded_counts(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, fake_classifier: Any
    ) -> None:
        run_benchmark(_config(tmp_path), fake_classifier(_answer_by_marker), small_registry)

        samples = _read_json(tmp_path / "results" / DATA_FILE)
        counters = _read_json(tmp_path / "results" / RESULTS_FILE)

        assert [entry["language"] for entry in samples] == ["de", "en", "fr"]
        for entry in samples:
            assert len(entry["texts"]) == counters[entry["language"]]["count"]

    def test_every_sentence_is_predicted_once(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, fake_classifier: Any
    ) -> None:
        classifier = fake_classifier(_answer_by_marker)
        run_benchmark(_config(tmp_path), classifier, small_registry)

        samples = _read_json(tmp_path / "results" / DATA_FILE)
        expected = sorted(text for entry in samples for text in entry["texts"])
        assert sorted(classifier.calls) == expected

    def test_run_is_idempotent(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, fake_classifier: Any
    ) -> None:
        config = _config(tmp_path)
        results_dir = tmp_path / "results"

        first_report = run_benchmark(config, fake_classifier(_answer_by_marker), small_registry)
        first_counters = (results_dir / RESULTS_FILE).read_text(encoding="utf-8")
        first_markdown = (results_dir / RESULTS_MD_FILE).read_text(encoding="utf-8")
        first_data = (results_dir / DATA_FILE).read_text(encoding="utf-8")

        second_report = run_benchmark(config, fake_classifier(_answer_by_marker), small_registry)

        assert second_report == first_report
        assert (results_dir / RESULTS_FILE).read_text(encoding="utf-8") == first_counters
        assert (results_dir / RESULTS_MD_FILE).read_text(encoding="utf-8") == first_markdown
        assert (results_dir / DATA_FILE).read_text(encoding="utf-8") == first_data

    def test_respects_concurrency_limits(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, fake_classifier: Any
    ) -> None:
        classifier = fake_classifier(_answer_by_marker, delay=0.01)
        config = _config(tmp_path, per_language_concurrency=2, language_concurrency=1)
        run_benchmark(config, classifier, small_registry)

        assert classifier.peak_in_flight <= 2


class TestLanguageSelection:
    def test_include_only_restricts_languages(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, fake_classifier: Any
    ) -> None:
        report = run_benchmark(
            _config(tmp_path, include_only=["fr", "es"]),
            fake_classifier(_answer_by_marker),
            small_registry,
        )
        assert [r.language_code for r in report.results] == ["fr"]

    def test_corpus_without_registry_entry_is_ignored(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, corpus_writer: Any
    ) -> None:
        corpus_writer(corpora, "xxx", _sentences("unknown", 3))
        adapter = PredictionAdapter(object())  # type: ignore[arg-type]
        orchestrator = BenchmarkOrchestrator(_config(tmp_path), adapter, small_registry)

        codes = [entry.corpus_code for entry in orchestrator.select_languages()]
        assert codes == ["deu", "eng", "fra"]

    def test_empty_sample_language_is_excluded(
        self,
        tmp_path: Path,
        corpora: Path,
        small_registry: LanguageRegistry,
        fake_classifier: Any,
        corpus_writer: Any,
    ) -> None:
        corpus_writer(corpora, "spa", ["corto", "breve"])
        report = run_benchmark(_config(tmp_path), fake_classifier(_answer_by_marker), small_registry)

        assert "es" not in {r.language_code for r in report.results}
        assert report.skipped_languages == ("es",)
        counters = _read_json(tmp_path / "results" / RESULTS_FILE)
        assert "es" not in counters

    def test_unreadable_corpus_is_skipped(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, fake_classifier: Any
    ) -> None:
        (corpora / "spa_sentences.tsv").write_bytes(b"1\tspa\t\xff\xfe\xfa broken bytes here\n")
        report = run_benchmark(_config(tmp_path), fake_classifier(_answer_by_marker), small_registry)

        assert report.skipped_languages == ("es",)
        assert report.total_languages == 3


class TestPredictionFailures:
    def test_failing_language_is_dropped_and_reported(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, fake_classifier: Any
    ) -> None:
        classifier = fake_classifier(_answer_by_marker, fail_on=lambda text: "french" in text)
        report = run_benchmark(_config(tmp_path), classifier, small_registry)

        assert report.failed_languages == ("fr",)
        assert {r.language_code for r in report.results} == {"en", "de"}
        snapshot = _read_json(tmp_path / "results" / snapshot_file_name(report.version))
        assert snapshot["failed_languages"] == ["fr"]
        assert "fr" not in snapshot["results"]

    def test_failure_is_fatal_when_not_tolerated(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, fake_classifier: Any
    ) -> None:
        classifier = fake_classifier(_answer_by_marker, fail_on=lambda text: "german" in text)
        config = _config(tmp_path, tolerate_prediction_errors=False)

        with pytest.raises(WorkerError):
            run_benchmark(config, classifier, small_registry)

        # raw samples go out before predictions start
        assert (tmp_path / "results" / DATA_FILE).exists()
        assert not (tmp_path / "results" / RESULTS_FILE).exists()

    def test_timed_out_prediction_counts_as_miss(
        self, tmp_path: Path, small_registry: LanguageRegistry, fake_classifier: Any, corpus_writer: Any
    ) -> None:
        corpus_writer(tmp_path / "data", "eng", _sentences("english", 2))
        classifier = fake_classifier(_answer_by_marker, delay=0.5)
        config = _config(tmp_path, prediction_timeout_seconds=0.01)

        report = run_benchmark(config, classifier, small_registry)

        (result,) = report.results
        assert result.sample_count == 2
        assert result.correct_count == 0


class TestBuildDataset:
    def test_corpora_are_sorted_by_code(
        self, tmp_path: Path, corpora: Path, small_registry: LanguageRegistry, fake_classifier: Any
    ) -> None:
        adapter = PredictionAdapter(fake_classifier(_answer_by_marker))
        orchestrator = BenchmarkOrchestrator(_config(tmp_path), adapter, small_registry)

        loaded, skipped = asyncio.run(orchestrator.build_dataset(orchestrator.select_languages()))

        assert [corpus.language_code for corpus in loaded] == ["de", "en", "fr"]
        assert skipped == []
