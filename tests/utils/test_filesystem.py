# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for filesystem utilities: atomic writes and safe reads.

Atomic writes are tested by verifying that the target file either has the full
new content or doesn't exist at all.
"""

from pathlib import Path

import pytest

from lidbench.utils.filesystem import atomic_write, safe_read


class TestAtomicWrite:
    def test_writes_content_successfully(self, tmp_path: Path) -> None:
        target = tmp_path / "output.json"
        atomic_write(target, '{"en": 1}')

        assert target.read_text(encoding="utf-8") == '{"en": 1}'

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "results" / "nested" / "RESULTS.md"
        atomic_write(target, "| Language |")

        assert target.read_text(encoding="utf-8") == "| Language |"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "overwrite.txt"
        atomic_write(target, "first version")
        atomic_write(target, "second version")

        assert target.read_text(encoding="utf-8") == "second version"

    def test_no_leftover_temp_files_on_success(self, tmp_path: Path) -> None:
        atomic_write(tmp_path / "clean.txt", "clean write")

        assert list(tmp_path.glob(".lidbench_tmp_*")) == []

    def test_non_ascii_content(self, tmp_path: Path) -> None:
        target = tmp_path / "unicode.txt"
        atomic_write(target, "Ceci est une phrase en français. 日本語")

        assert target.read_text(encoding="utf-8") == "Ceci est une phrase en français. 日本語"


class TestSafeRead:
    def test_reads_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "readable.txt"
        target.write_text("some content", encoding="utf-8")

        assert safe_read(target) == "some content"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            safe_read(tmp_path / "nonexistent.txt")

    def test_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(IsADirectoryError):
            safe_read(tmp_path)

    def test_invalid_utf8_raises(self, tmp_path: Path) -> None:
        target = tmp_path / "latin1.txt"
        target.write_bytes(b"caf\xe9")

        with pytest.raises(UnicodeDecodeError):
            safe_read(target)
