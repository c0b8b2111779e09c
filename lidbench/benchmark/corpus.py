# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Corpus loader.

Reads Tatoeba per-language sentence exports and cuts them down to a
benchmark sample. The file layout is fixed:

    <corpus_dir>/
    ├── eng_sentences.tsv
    ├── fra_sentences.tsv
    └── ...

Each line is `<sentence id>\\t<language code>\\t<sentence>`. Lines with any
other number of fields are dropped.

The processing order is part of the contract: the first `limit` lines are
taken, and only then filtered by length. A line past the limit is never
looked at, even if it would have passed the filter. Changing the order
changes which sentences get sampled and makes results incomparable with
earlier runs.
"""

from pathlib import Path

from lidbench.benchmark.exceptions import CorpusReadError
from lidbench.config.schema import SentenceFilterConfig
from lidbench.logging.logger import get_logger
from lidbench.utils.filesystem import safe_read

logger = get_logger(__name__)

CORPUS_FILE_SUFFIX = "_sentences.tsv"
_FIELDS_PER_RECORD = 3


def corpus_file_path(corpus_dir: Path, language_code: str) -> Path:
    """Where the corpus for `language_code` lives, by naming convention."""
    return corpus_dir / f"{language_code}{CORPUS_FILE_SUFFIX}"


def discover_corpus_codes(corpus_dir: Path) -> list[str]:
    """
    Every language code that has a corpus file in `corpus_dir`, sorted.

    Raises:
        CorpusReadError: If the directory doesn't exist.
    """
    if not corpus_dir.is_dir():
        raise CorpusReadError(f"Corpus directory not found: {corpus_dir}")

    return sorted(
        path.name[: -len(CORPUS_FILE_SUFFIX)]
        for path in corpus_dir.iterdir()
        if path.is_file() and path.name.endswith(CORPUS_FILE_SUFFIX) and len(path.name) > len(CORPUS_FILE_SUFFIX)
    )


def filter_sentences(lines: list[str], filter_config: SentenceFilterConfig) -> list[str]:
    """
    Truncate to `limit` lines, then keep the third field of every
    well-formed line whose length is within the configured bounds.
    """
    sentences: list[str] = []
    for line in lines[: filter_config.limit]:
        fields = line.split("\t")
        if len(fields) != _FIELDS_PER_RECORD:
            continue
        sentence = fields[2]
        if filter_config.min_length <= len(sentence) <= filter_config.max_length:
            sentences.append(sentence)
    return sentences


def load_sentences(
    corpus_dir: Path,
    language_code: str,
    filter_config: SentenceFilterConfig,
) -> list[str]:
    """
    Load the filtered sentence sample for one language.

    Raises:
        CorpusReadError: If the corpus file is missing, unreadable, or not
            valid UTF-8.
    """
    path = corpus_file_path(corpus_dir, language_code)
    try:
        content = safe_read(path)
    except (OSError, UnicodeDecodeError) as err:
        raise CorpusReadError(
            f"Cannot read corpus for '{language_code}' at {path}: {err}",
            language_code=language_code,
        ) from err

    # Split on \n only; a trailing \r stays part of the sentence.
    lines = content.split("\n")
    sentences = filter_sentences(lines, filter_config)

    logger.debug(
        "Corpus loaded",
        extra={
            "language": language_code,
            "lines": len(lines),
            "considered": min(len(lines), filter_config.limit),
            "kept": len(sentences),
        },
    )
    return sentences
