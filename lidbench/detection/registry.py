# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Language registry.

Static mapping from Tatoeba corpus codes to the classifier's canonical codes
and human-readable names. The benchmark uses it twice: to decide which
corpus files are in scope, and to put display names in the ranked report.

The bundled registry lives next to this module in languages.yaml. A custom
one with the same shape can be passed in through the benchmark config:

    languages:
      - {corpus: "eng", canonical: "en", name: "English"}
"""

from collections.abc import Iterable, Iterator
from importlib import resources
from pathlib import Path

import yaml

from lidbench.detection.exceptions import RegistryError
from lidbench.detection.models import LanguageEntry
from lidbench.logging.logger import get_logger

logger = get_logger(__name__)

_BUNDLED_REGISTRY = "languages.yaml"


class LanguageRegistry:
    """Lookup tables over a fixed list of LanguageEntry rows."""

    def __init__(self, entries: Iterable[LanguageEntry]) -> None:
        self._entries = tuple(entries)
        self._by_corpus: dict[str, LanguageEntry] = {}
        self._by_canonical: dict[str, LanguageEntry] = {}

        for entry in self._entries:
            if entry.corpus_code in self._by_corpus:
                raise RegistryError(f"Duplicate corpus code in registry: {entry.corpus_code}")
            if entry.canonical_code in self._by_canonical:
                raise RegistryError(f"Duplicate canonical code in registry: {entry.canonical_code}")
            self._by_corpus[entry.corpus_code] = entry
            self._by_canonical[entry.canonical_code] = entry

    def __iter__(self) -> Iterator[LanguageEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def find_by_corpus_code(self, corpus_code: str) -> LanguageEntry | None:
        return self._by_corpus.get(corpus_code)

    def find_by_canonical_code(self, canonical_code: str) -> LanguageEntry | None:
        return self._by_canonical.get(canonical_code)


def parse_registry(raw: object, source: str) -> LanguageRegistry:
    """
    Build a registry from parsed YAML.

    Raises:
        RegistryError: If the document doesn't have the expected shape.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("languages"), list):
        raise RegistryError(f"Registry {source} must be a mapping with a 'languages' list")

    entries: list[LanguageEntry] = []
    for index, item in enumerate(raw["languages"]):
        if not isinstance(item, dict):
            raise RegistryError(f"Registry {source}: entry {index} is not a mapping")
        try:
            values = [item["corpus"], item["canonical"], item["name"]]
        except KeyError as err:
            raise RegistryError(f"Registry {source}: entry {index} is missing {err}") from err
        if not all(isinstance(value, str) and value for value in values):
            raise RegistryError(
                f"Registry {source}: entry {index} must have non-empty string fields, got {item}"
            )
        entries.append(LanguageEntry(corpus_code=values[0], canonical_code=values[1], display_name=values[2]))

    return LanguageRegistry(entries)


def load_registry(path: Path | None = None) -> LanguageRegistry:
    """
    Load a registry from `path`, or the bundled one when no path is given.

    Raises:
        RegistryError: Missing file, invalid YAML, or malformed entries.
    """
    if path is None:
        source = f"<bundled {_BUNDLED_REGISTRY}>"
        text = resources.files("lidbench.detection").joinpath(_BUNDLED_REGISTRY).read_text(encoding="utf-8")
    else:
        source = str(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as err:
            raise RegistryError(f"Cannot read language registry {path}: {err}") from err

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise RegistryError(f"Invalid YAML in language registry {source}: {err}") from err

    registry = parse_registry(raw, source)
    logger.debug("Language registry loaded", extra={"source": source, "languages": len(registry)})
    return registry
