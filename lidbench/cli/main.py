# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for lidbench.

Every operation is a subcommand of `lidbench`. The global options
(--config, --log-level, --dry-run) are inherited by every subcommand
through argparse's parent parser mechanism.

Usage:
    lidbench predict --text "Ceci est une phrase." -k 3
    lidbench benchmark --config configs/benchmark.yaml --include-only en,fr,de
    lidbench report --results results/benchmark_results_0.3.0.json
    lidbench languages
    lidbench info
"""

import argparse
import sys

from lidbench.cli.commands import (
    handle_benchmark,
    handle_info,
    handle_languages,
    handle_predict,
    handle_report,
)
from lidbench.cli.exit_codes import USER_ERROR


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False so its help doesn't collide with the subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (overrides the config).",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Resolve configuration and report what would run, without running it.",
    )
    return parent


def _add_model_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--model", type=str, default=None, dest="model_path", help="fastText model file.")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        dest="timeout",
        help="Per-prediction timeout in seconds.",
    )


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    """
    Register all subcommands with their handler functions.

    Each subcommand sets its handler through set_defaults(func=...), so
    `lidbench benchmark` ends up with args.func == handle_benchmark.
    """
    commands = [
        ("predict", "Predict the language of a text.", handle_predict),
        ("benchmark", "Measure accuracy against per-language sentence corpora.", handle_benchmark),
        ("report", "Regenerate RESULTS.md from a saved results file.", handle_report),
        ("languages", "List the languages in the registry.", handle_languages),
        ("info", "Display version and environment info.", handle_info),
    ]

    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler)

    predict_parser = subparsers.choices["predict"]
    predict_parser.add_argument("--text", type=str, default=None, help="Text to classify.")
    predict_parser.add_argument("-k", type=int, default=1, dest="k", help="Number of ranked labels.")
    _add_model_args(predict_parser)

    benchmark_parser = subparsers.choices["benchmark"]
    _add_model_args(benchmark_parser)
    benchmark_parser.add_argument("--corpus-dir", type=str, default=None, dest="corpus_dir")
    benchmark_parser.add_argument("--output-dir", type=str, default=None, dest="output_dir")
    benchmark_parser.add_argument("--registry", type=str, default=None, dest="registry_path")
    benchmark_parser.add_argument(
        "--include-only",
        type=str,
        default=None,
        dest="include_only",
        help="Comma-separated canonical codes to benchmark, e.g. en,fr,de.",
    )
    benchmark_parser.add_argument("--limit", type=int, default=None, dest="limit")
    benchmark_parser.add_argument("--min-length", type=int, default=None, dest="min_length")
    benchmark_parser.add_argument("--max-length", type=int, default=None, dest="max_length")
    benchmark_parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        dest="concurrency",
        help="Predictions in flight per language.",
    )
    benchmark_parser.add_argument(
        "--language-concurrency",
        type=int,
        default=None,
        dest="language_concurrency",
        help="Languages processed at once.",
    )

    report_parser = subparsers.choices["report"]
    report_parser.add_argument("--results", type=str, required=True, dest="results_path")
    report_parser.add_argument("--output-dir", type=str, default=None, dest="output_dir")
    report_parser.add_argument("--registry", type=str, default=None, dest="registry_path")

    languages_parser = subparsers.choices["languages"]
    languages_parser.add_argument("--registry", type=str, default=None, dest="registry_path")


def build_parser() -> argparse.ArgumentParser:
    parent = _build_global_parser()
    root_parser = argparse.ArgumentParser(
        prog="lidbench",
        description="lidbench: fastText language identification and accuracy benchmarking.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)
    return root_parser


def main() -> None:
    """
    Main CLI entrypoint, what pyproject.toml's [project.scripts] points to.

    Parses the command line, calls the chosen subcommand's handler, and
    exits with its return code. No subcommand shows help and exits with
    USER_ERROR.
    """
    root_parser = build_parser()
    args = root_parser.parse_args()

    if getattr(args, "func", None) is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
