# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Benchmark orchestrator, the heart of the benchmark pipeline.

A run goes through these steps:
  1. Pick the languages: registry entries with a corpus file, narrowed by
     the optional include_only allow-list of canonical codes
  2. Load each language's filtered sample (outer pool); missing corpora and
     empty samples are logged and skipped
  3. Write the raw samples to disk before any prediction starts
  4. Predict every sentence of every language (outer pool over languages,
     inner pool over sentences) and count exact top-1 matches
  5. Rank the per-language results and write the report artifacts

A prediction failure aborts the remaining predictions for that language
only. The language is logged, listed as failed in the snapshot, and left
out of the ranking. Artifact write failures and report rendering failures
end the run.

Each language's counter is touched only by continuations of that
language's own predictions, all on the event loop thread, so no locks.
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path

from lidbench import __version__
from lidbench.benchmark.corpus import discover_corpus_codes, load_sentences
from lidbench.benchmark.exceptions import CorpusReadError, WorkerError
from lidbench.benchmark.models import BenchmarkReport, LanguageAccuracy, LanguageCorpus, LanguageCounter
from lidbench.benchmark.pool import run_all
from lidbench.benchmark.report import sort_results, write_report, write_sample_data
from lidbench.config.schema import BenchmarkConfig
from lidbench.detection.adapter import PredictionAdapter
from lidbench.detection.classifier import Classifier
from lidbench.detection.models import LanguageEntry
from lidbench.detection.registry import LanguageRegistry
from lidbench.logging.logger import get_logger

logger = get_logger(__name__)


class BenchmarkOrchestrator:
    """
    Runs one benchmark over a corpus directory.

    The adapter (and the classifier behind it) is shared read-only by every
    prediction of the run.
    """

    def __init__(
        self,
        config: BenchmarkConfig,
        adapter: PredictionAdapter,
        registry: LanguageRegistry,
        version: str = __version__,
    ) -> None:
        self.config = config
        self.adapter = adapter
        self.registry = registry
        self.version = version
        self.corpus_dir = Path(config.corpus_directory)
        self.output_dir = Path(config.output_directory)
        self.sentence_filter = config.sentence_filter

    def select_languages(self) -> list[LanguageEntry]:
        """
        Registry languages that have a corpus file and pass include_only.

        Raises:
            CorpusReadError: If the corpus directory doesn't exist.
        """
        entries: list[LanguageEntry] = []
        for corpus_code in discover_corpus_codes(self.corpus_dir):
            entry = self.registry.find_by_corpus_code(corpus_code)
            if entry is None:
                logger.debug("Corpus file has no registry entry, ignoring", extra={"corpus_code": corpus_code})
                continue
            entries.append(entry)

        include_only = self.config.include_only
        if include_only is not None:
            wanted = set(include_only)
            unavailable = sorted(wanted - {entry.canonical_code for entry in entries})
            if unavailable:
                logger.warning(
                    "Requested languages have no corpus or registry entry",
                    extra={"languages": unavailable},
                )
            entries = [entry for entry in entries if entry.canonical_code in wanted]

        return entries

    async def build_dataset(self, entries: list[LanguageEntry]) -> tuple[list[LanguageCorpus], list[str]]:
        """
        Load the filtered samples for `entries`.

        Returns the non-empty corpora sorted by canonical code, plus the
        canonical codes of the languages that were skipped.
        """
        corpora: list[LanguageCorpus] = []
        skipped: list[str] = []

        async def load(entry: LanguageEntry) -> None:
            try:
                sentences = await asyncio.to_thread(
                    load_sentences, self.corpus_dir, entry.corpus_code, self.sentence_filter
                )
            except CorpusReadError as err:
                logger.warning(
                    "Skipping language, corpus unreadable",
                    extra={"language": entry.canonical_code, "error": str(err)},
                )
                skipped.append(entry.canonical_code)
                return

            if not sentences:
                logger.info(
                    "Skipping language, no sentences within bounds",
                    extra={"language": entry.canonical_code},
                )
                skipped.append(entry.canonical_code)
                return

            logger.info(
                "Language sample loaded",
                extra={"language": entry.canonical_code, "sentences": len(sentences)},
            )
            corpora.append(LanguageCorpus(language_code=entry.canonical_code, sentences=tuple(sentences)))

        await run_all(entries, load, self.config.language_concurrency)

        # Loads finish in any order; sort so every run sees the same sequence.
        corpora.sort(key=lambda corpus: corpus.language_code)
        skipped.sort()

        logger.info(
            "Dataset built",
            extra={
                "languages": len(corpora),
                "sentences": sum(len(corpus.sentences) for corpus in corpora),
                "skipped": skipped,
            },
        )
        return corpora, skipped

    async def benchmark_language(self, corpus: LanguageCorpus) -> LanguageAccuracy:
        """
        Predict every sentence of one language and count exact matches.

        Raises:
            WorkerError: If a prediction failed; no further sentences of this
                language are scheduled after the first failure.
        """
        counter = LanguageCounter(language_code=corpus.language_code)

        async def predict(text: str) -> None:
            predicted = await self.adapter.predict_top_label(text)
            counter.record(predicted)

        await run_all(corpus.sentences, predict, self.config.per_language_concurrency)

        result = counter.finalize()
        logger.info(
            "Language benchmarked",
            extra={
                "language": result.language_code,
                "count": result.sample_count,
                "correct": result.correct_count,
                "accuracy": result.accuracy,
            },
        )
        return result

    async def run(self) -> BenchmarkReport:
        """
        Execute the whole benchmark and write its artifacts.

        Raises:
            CorpusReadError: If the corpus directory doesn't exist.
            ArtifactWriteError: If an artifact can't be written.
            UnknownLanguageCodeError: If a result can't be rendered.
            WorkerError: Only when tolerate_prediction_errors is off and a
                language's predictions failed.
        """
        entries = self.select_languages()
        logger.info(
            "Benchmark started",
            extra={
                "languages": len(entries),
                "filter": self.sentence_filter.model_dump(),
                "per_language_concurrency": self.config.per_language_concurrency,
                "language_concurrency": self.config.language_concurrency,
            },
        )

        corpora, skipped = await self.build_dataset(entries)
        write_sample_data(corpora, self.output_dir)

        results: dict[str, LanguageAccuracy] = {}
        failed: list[str] = []

        async def benchmark(corpus: LanguageCorpus) -> None:
            try:
                result = await self.benchmark_language(corpus)
            except WorkerError as err:
                logger.error(
                    "Predictions failed for language",
                    extra={
                        "language": corpus.language_code,
                        "sentence_index": err.index,
                        "error": f"{type(err.cause).__name__}: {err.cause}",
                    },
                )
                failed.append(corpus.language_code)
                if not self.config.tolerate_prediction_errors:
                    raise
                return
            if result.sample_count > 0:
                results[corpus.language_code] = result

        await run_all(corpora, benchmark, self.config.language_concurrency)

        failed.sort()
        if failed:
            logger.warning(
                "Benchmark finished with failed languages, they are missing from the report",
                extra={"failed_languages": failed},
            )

        ordered = [results[corpus.language_code] for corpus in corpora if corpus.language_code in results]
        report = BenchmarkReport(
            results=tuple(sort_results(ordered)),
            sentence_filter=self.sentence_filter,
            version=self.version,
            generated_at=datetime.now(tz=timezone.utc).isoformat(),
            skipped_languages=tuple(skipped),
            failed_languages=tuple(failed),
        )

        write_report(report, self.output_dir, self.registry)
        logger.info(
            "Benchmark finished",
            extra={
                "languages": report.total_languages,
                "sentences": report.total_sentences,
                "skipped": len(skipped),
                "failed": len(failed),
            },
        )
        return report


def run_benchmark(
    config: BenchmarkConfig,
    classifier: Classifier,
    registry: LanguageRegistry,
) -> BenchmarkReport:
    """Build the adapter from `config` and run a benchmark to completion."""
    adapter = PredictionAdapter(
        classifier,
        label_prefix=config.label_prefix,
        timeout_seconds=config.prediction_timeout_seconds,
    )
    orchestrator = BenchmarkOrchestrator(config, adapter, registry)
    return asyncio.run(orchestrator.run())
