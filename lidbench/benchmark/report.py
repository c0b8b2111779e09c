# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Benchmark report builder and artifact writer.

A run leaves four files in the output directory:

    results/
    ├── benchmark_data.json               # the exact sentences fed to the classifier
    ├── benchmark_results.json            # per-language counters
    ├── benchmark_results_<version>.json  # versioned snapshot with filter and totals
    └── RESULTS.md                        # ranked markdown table

The JSON files are the authoritative output. RESULTS.md is a rendering of
the same numbers and can be regenerated from either results file with
`lidbench report`.

Ranking: accuracy descending; on an exact accuracy tie, the language with
more samples goes first; on a full tie, input order is kept.
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path

from lidbench.benchmark.exceptions import ArtifactWriteError, UnknownLanguageCodeError
from lidbench.benchmark.models import BenchmarkReport, LanguageAccuracy, LanguageCorpus
from lidbench.config.schema import SentenceFilterConfig
from lidbench.detection.registry import LanguageRegistry
from lidbench.logging.logger import get_logger
from lidbench.utils.filesystem import atomic_write, safe_read

logger = get_logger(__name__)

DATA_FILE = "benchmark_data.json"
RESULTS_FILE = "benchmark_results.json"
RESULTS_MD_FILE = "RESULTS.md"


def snapshot_file_name(version: str) -> str:
    return f"benchmark_results_{version}.json"


def sort_results(results: Iterable[LanguageAccuracy]) -> list[LanguageAccuracy]:
    """
    Rank results by accuracy, then sample count, both descending.

    Python's sort is stable, so results that tie on both keys keep their
    input order. Results without samples have no accuracy to rank by and
    are rejected.
    """
    ranked = list(results)
    for result in ranked:
        if result.sample_count == 0:
            raise ValueError(f"Cannot rank '{result.language_code}': it has no samples")
    ranked.sort(key=lambda r: (-r.accuracy, -r.sample_count))
    return ranked


def _display_row(result: LanguageAccuracy, registry: LanguageRegistry) -> str:
    entry = registry.find_by_canonical_code(result.language_code)
    if entry is None:
        raise UnknownLanguageCodeError(result.language_code)
    return f"| {entry.display_name} | {result.language_code} | {result.sample_count} | {result.accuracy!r} |"


def render_results_table(
    results: Mapping[str, LanguageAccuracy],
    total_languages: int,
    total_sentences: int,
    min_length: int,
    max_length: int,
    registry: LanguageRegistry,
) -> str:
    """
    Render ranked results as a markdown table.

    Accuracy is printed as the raw float, unrounded.

    Raises:
        UnknownLanguageCodeError: If a result's code has no registry entry.
    """
    lines = [
        f"| Language ({total_languages}) | Symbol | Count ({total_sentences})| "
        f"Accuracy ({min_length} - {max_length} chars) |",
        "| -------- | ------ | ----- | -------- |",
    ]
    lines.extend(_display_row(result, registry) for result in sort_results(results.values()))
    return "\n".join(lines)


def _write_json(path: Path, payload: object) -> None:
    try:
        atomic_write(path, json.dumps(payload, ensure_ascii=False, indent=2))
    except (OSError, TypeError, ValueError) as err:
        raise ArtifactWriteError(f"Failed to write {path}: {err}") from err


def write_sample_data(corpora: Iterable[LanguageCorpus], output_dir: Path) -> Path:
    """
    Persist the raw per-language samples before any prediction runs.

    Raises:
        ArtifactWriteError: If the file can't be written.
    """
    path = output_dir / DATA_FILE
    payload = [{"language": corpus.language_code, "texts": list(corpus.sentences)} for corpus in corpora]
    _write_json(path, payload)
    logger.info("Sample data written", extra={"path": str(path), "languages": len(payload)})
    return path


def write_report(report: BenchmarkReport, output_dir: Path, registry: LanguageRegistry) -> Path:
    """
    Write the counters, the versioned snapshot, and RESULTS.md.

    The JSON files go first, so a registry mismatch during rendering still
    leaves the numbers on disk.

    Raises:
        ArtifactWriteError: If any file can't be written.
        UnknownLanguageCodeError: If a result can't be rendered.
    """
    _write_json(output_dir / RESULTS_FILE, report.results_by_language())
    _write_json(output_dir / snapshot_file_name(report.version), report.to_dict())

    table = render_results_table(
        {result.language_code: result for result in report.results},
        total_languages=report.total_languages,
        total_sentences=report.total_sentences,
        min_length=report.sentence_filter.min_length,
        max_length=report.sentence_filter.max_length,
        registry=registry,
    )
    write_results_markdown(table, output_dir)

    logger.info(
        "Benchmark report written",
        extra={
            "output_dir": str(output_dir),
            "languages": report.total_languages,
            "sentences": report.total_sentences,
        },
    )
    return output_dir


def write_results_markdown(table: str, output_dir: Path) -> Path:
    path = output_dir / RESULTS_MD_FILE
    try:
        atomic_write(path, table)
    except OSError as err:
        raise ArtifactWriteError(f"Failed to write {path}: {err}") from err
    return path


def _parse_result(language_code: str, raw: object) -> LanguageAccuracy:
    if not isinstance(raw, dict):
        raise ValueError(f"Result for '{language_code}' is not a mapping")
    try:
        return LanguageAccuracy(
            language_code=language_code,
            sample_count=int(raw["count"]),
            correct_count=int(raw["accuratePredictions"]),
        )
    except KeyError as err:
        raise ValueError(f"Result for '{language_code}' is missing {err}") from err
    except TypeError as err:
        raise ValueError(f"Result for '{language_code}' has a non-numeric counter: {err}") from err


def load_results(path: Path) -> tuple[dict[str, LanguageAccuracy], SentenceFilterConfig | None]:
    """
    Read results back from benchmark_results.json or a versioned snapshot.

    Returns the results and, for snapshots, the filter the run used.
    Accuracy is recomputed from the counters rather than trusted from disk.

    Raises:
        FileNotFoundError / OSError: If the file can't be read.
        ValueError: If the JSON doesn't look like benchmark results.
    """
    raw = json.loads(safe_read(path))
    if not isinstance(raw, dict):
        raise ValueError(f"{path} does not contain a results mapping")

    sentence_filter = None
    if "results" in raw and "version" in raw:
        sentence_filter = SentenceFilterConfig.model_validate(raw.get("filter", {}))
        raw = raw["results"]
        if not isinstance(raw, dict):
            raise ValueError(f"{path} has a malformed 'results' section")

    results = {code: _parse_result(code, value) for code, value in raw.items()}
    empty = [code for code, result in results.items() if result.sample_count == 0]
    for code in empty:
        logger.warning("Dropping result without samples", extra={"language": code})
        del results[code]

    return results, sentence_filter
