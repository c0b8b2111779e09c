# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Safe filesystem operations for lidbench.

Benchmark artifacts are written atomically: content goes to a temp file in
the target's directory, then gets renamed over the target. A crash mid-write
leaves a stray temp file, never a half-written results file that a later
`lidbench report` would happily parse.
"""

import os
import tempfile
from pathlib import Path

_TEMP_PREFIX = ".lidbench_tmp_"


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Replace `target_path` with `content` in one step.

    Readers see either the previous file or the complete new one. Parent
    directories are created as needed.

    Raises:
        OSError: If the temp file can't be written or renamed.
    """
    directory = target_path.parent
    directory.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(prefix=_TEMP_PREFIX, suffix=".tmp", dir=directory)
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            handle.write(content)
        os.replace(temp_path, target_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def safe_read(file_path: Path, encoding: str = "utf-8") -> str:
    """
    Read a whole text file, failing with the path in the message.

    Raises:
        FileNotFoundError: Nothing exists at `file_path`.
        IsADirectoryError: `file_path` is a directory.
        UnicodeDecodeError: The bytes aren't valid `encoding`.
        OSError: Any other read failure.
    """
    if file_path.is_dir():
        raise IsADirectoryError(f"{file_path} is a directory, not a file")
    if not file_path.is_file():
        raise FileNotFoundError(f"No such file: {file_path}")
    with file_path.open("r", encoding=encoding) as handle:
        return handle.read()
