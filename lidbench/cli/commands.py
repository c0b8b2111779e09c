# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the lidbench CLI.

Each function here corresponds to one CLI subcommand and returns an exit
code. Output goes through the structured logger, never print().
"""

import argparse
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from lidbench.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, USER_ERROR, VALIDATION_ERROR
from lidbench.config.exceptions import ConfigError, ConfigValidationError
from lidbench.config.loader import load_config
from lidbench.config.schema import BenchmarkConfig, LidbenchConfig
from lidbench.logging.logger import configure_logging, get_logger
from lidbench.runtime.bootstrap import bootstrap


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, LidbenchConfig | None, logging.Logger]:
    """
    The shared setup every command needs: load config, run bootstrap.

    Returns (exit_code, config, logger). If exit_code is not SUCCESS the
    caller returns it immediately.
    """
    configure_logging(args.log_level or "INFO")
    logger = get_logger(f"lidbench.cli.{command_name}")

    config = None
    if args.config is not None:
        try:
            config = load_config(Path(args.config))
        except ConfigError as err:
            logger.error(
                "Configuration error",
                extra={"command": command_name, "error": str(err)},
            )
            return CONFIG_ERROR, None, logger

    if config is not None:
        bootstrap(config.global_config, log_level_override=args.log_level)
    else:
        logger.debug(
            "No config provided, running with defaults",
            extra={"command": command_name},
        )

    return SUCCESS, config, logger


def _benchmark_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Command-line values that should replace config values, when given."""
    mapping = {
        "model_path": "model_path",
        "timeout": "prediction_timeout_seconds",
        "corpus_dir": "corpus_directory",
        "output_dir": "output_directory",
        "registry_path": "registry_path",
        "limit": "per_language_sentence_limit",
        "min_length": "min_sentence_length",
        "max_length": "max_sentence_length",
        "concurrency": "per_language_concurrency",
        "language_concurrency": "language_concurrency",
    }
    overrides: dict[str, Any] = {}
    for arg_name, field_name in mapping.items():
        value = getattr(args, arg_name, None)
        if value is not None:
            overrides[field_name] = value

    include_only = getattr(args, "include_only", None)
    if include_only:
        overrides["include_only"] = [code.strip() for code in include_only.split(",") if code.strip()]

    return overrides


def resolve_benchmark_config(args: argparse.Namespace, config: LidbenchConfig | None) -> BenchmarkConfig:
    """
    Merge the config file's benchmark section with command-line overrides.

    The merged values are validated again, so a bad flag fails the same way
    a bad config value does.

    Raises:
        ConfigValidationError: If the merged settings are invalid.
    """
    base = config.benchmark if config is not None and config.benchmark is not None else BenchmarkConfig()
    merged = {**base.model_dump(), **_benchmark_overrides(args)}
    try:
        return BenchmarkConfig.model_validate(merged)
    except ValidationError as err:
        raise ConfigValidationError(f"Invalid benchmark settings:\n{err}") from err


def handle_predict(args: argparse.Namespace) -> int:
    """Predict the language of --text with the configured model."""
    exit_code, config, logger = _load_and_bootstrap(args, "predict")
    if exit_code != SUCCESS:
        return exit_code

    if not args.text:
        logger.error("No text provided, use --text")
        return USER_ERROR
    if args.k < 1:
        logger.error("-k must be at least 1", extra={"k": args.k})
        return USER_ERROR

    try:
        settings = resolve_benchmark_config(args, config)
    except ConfigError as err:
        logger.error("Configuration error", extra={"command": "predict", "error": str(err)})
        return CONFIG_ERROR

    if args.dry_run:
        logger.info("Dry run, would predict", extra={"model_path": settings.model_path, "k": args.k})
        return SUCCESS

    from lidbench.detection.api import LanguageDetector
    from lidbench.detection.exceptions import ModelLoadError

    try:
        detector = LanguageDetector.from_model_file(
            Path(settings.model_path),
            label_prefix=settings.label_prefix,
            timeout_seconds=settings.prediction_timeout_seconds,
        )
    except ModelLoadError as err:
        logger.error("Model unavailable", extra={"error": str(err)})
        return VALIDATION_ERROR

    try:
        predictions = detector.predict_sync(args.text, k=args.k)
    except Exception as err:
        logger.error("Prediction failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    logger.info(
        "Prediction complete",
        extra={
            "predictions": [{"lang": p.label, "prob": p.probability} for p in predictions],
        },
    )
    return SUCCESS


def handle_benchmark(args: argparse.Namespace) -> int:
    """
    Run the accuracy benchmark against the per-language corpora.

    Loads the registry and the model once, runs every selected language,
    and writes the data, results, snapshot and RESULTS.md artifacts.
    """
    exit_code, config, logger = _load_and_bootstrap(args, "benchmark")
    if exit_code != SUCCESS:
        return exit_code

    try:
        settings = resolve_benchmark_config(args, config)
    except ConfigError as err:
        logger.error("Configuration error", extra={"command": "benchmark", "error": str(err)})
        return CONFIG_ERROR

    from lidbench.benchmark.exceptions import WorkerError
    from lidbench.benchmark.orchestrator import run_benchmark
    from lidbench.detection.classifier import FastTextClassifier
    from lidbench.detection.exceptions import ModelLoadError, RegistryError
    from lidbench.detection.registry import load_registry

    try:
        registry_path = Path(settings.registry_path) if settings.registry_path else None
        registry = load_registry(registry_path)
    except RegistryError as err:
        logger.error("Language registry error", extra={"error": str(err)})
        return CONFIG_ERROR

    corpus_dir = Path(settings.corpus_directory)
    if not corpus_dir.is_dir():
        logger.error("Corpus directory not found", extra={"path": str(corpus_dir)})
        return VALIDATION_ERROR

    logger.info(
        "Starting benchmark",
        extra={
            "command": "benchmark",
            "dry_run": args.dry_run,
            "settings": settings.model_dump(),
        },
    )

    if args.dry_run:
        logger.info("Dry run, would benchmark corpora", extra={"corpus_dir": str(corpus_dir)})
        return SUCCESS

    try:
        classifier = FastTextClassifier(Path(settings.model_path))
    except ModelLoadError as err:
        logger.error("Model unavailable", extra={"error": str(err)})
        return VALIDATION_ERROR

    try:
        report = run_benchmark(settings, classifier, registry)
    except WorkerError as err:
        item = err.item
        logger.error(
            "Benchmark aborted by a prediction failure",
            extra={"language": getattr(item, "language_code", None), "error": str(err.cause)},
        )
        return RUNTIME_ERROR
    except Exception as err:
        logger.error("Benchmark failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    logger.info(
        "Benchmark complete",
        extra={
            "languages": report.total_languages,
            "sentences": report.total_sentences,
            "skipped_languages": list(report.skipped_languages),
            "failed_languages": list(report.failed_languages),
            "output_dir": settings.output_directory,
        },
    )
    return SUCCESS


def handle_report(args: argparse.Namespace) -> int:
    """Re-render RESULTS.md from benchmark_results.json or a versioned snapshot."""
    exit_code, config, logger = _load_and_bootstrap(args, "report")
    if exit_code != SUCCESS:
        return exit_code

    from lidbench.benchmark.exceptions import BenchmarkError
    from lidbench.benchmark.report import load_results, render_results_table, write_results_markdown
    from lidbench.detection.exceptions import RegistryError
    from lidbench.detection.registry import load_registry

    try:
        settings = resolve_benchmark_config(args, config)
        registry = load_registry(Path(settings.registry_path) if settings.registry_path else None)
    except (ConfigError, RegistryError) as err:
        logger.error("Configuration error", extra={"command": "report", "error": str(err)})
        return CONFIG_ERROR

    results_path = Path(args.results_path)
    try:
        results, sentence_filter = load_results(results_path)
    except FileNotFoundError as err:
        logger.error("Results file not found", extra={"path": str(results_path), "error": str(err)})
        return VALIDATION_ERROR
    except (OSError, ValueError) as err:
        logger.error("Results file unreadable", extra={"path": str(results_path), "error": str(err)})
        return VALIDATION_ERROR

    if sentence_filter is None:
        sentence_filter = settings.sentence_filter

    output_dir = Path(args.output_dir) if args.output_dir else results_path.parent

    if args.dry_run:
        logger.info(
            "Dry run, would render report",
            extra={"languages": len(results), "output_dir": str(output_dir)},
        )
        return SUCCESS

    try:
        table = render_results_table(
            results,
            total_languages=len(results),
            total_sentences=sum(result.sample_count for result in results.values()),
            min_length=sentence_filter.min_length,
            max_length=sentence_filter.max_length,
            registry=registry,
        )
        path = write_results_markdown(table, output_dir)
    except BenchmarkError as err:
        logger.error("Report rendering failed", extra={"error": str(err)})
        return RUNTIME_ERROR

    logger.info("Report written", extra={"path": str(path), "languages": len(results)})
    return SUCCESS


def handle_languages(args: argparse.Namespace) -> int:
    """List the registry: corpus code, canonical code, display name."""
    exit_code, config, logger = _load_and_bootstrap(args, "languages")
    if exit_code != SUCCESS:
        return exit_code

    from lidbench.detection.exceptions import RegistryError
    from lidbench.detection.registry import load_registry

    registry_path = args.registry_path
    if registry_path is None and config is not None and config.benchmark is not None:
        registry_path = config.benchmark.registry_path

    try:
        registry = load_registry(Path(registry_path) if registry_path else None)
    except RegistryError as err:
        logger.error("Language registry error", extra={"error": str(err)})
        return CONFIG_ERROR

    for entry in registry:
        logger.info(
            "Language",
            extra={
                "corpus_code": entry.corpus_code,
                "canonical_code": entry.canonical_code,
                "display_name": entry.display_name,
            },
        )
    logger.info("Registry summary", extra={"languages": len(registry)})
    return SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Display version and environment information."""
    configure_logging(args.log_level or "INFO")
    logger = get_logger("lidbench.cli.info")

    from lidbench import __version__
    from lidbench.runtime.environment import get_system_info

    system_info = get_system_info()

    logger.info(
        "System information",
        extra={
            "lidbench_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "fasttext_available": system_info.fasttext_available,
            "config": args.config,
        },
    )
    return SUCCESS
