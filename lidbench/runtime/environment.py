# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Environment checks for lidbench.

The interpreter version is checked before anything else runs, so a
benchmark doesn't die on a syntax error after loading a 130 MB model.
"""

import importlib.util
import platform
import sys
from typing import NamedTuple

MINIMUM_PYTHON = (3, 10)


class SystemInfo(NamedTuple):
    """What `lidbench info` and the bootstrap log line report about the host."""

    python_version: str
    platform: str
    architecture: str
    hostname: str
    fasttext_available: bool


def get_python_version() -> tuple[int, int, int]:
    major, minor, micro = sys.version_info[:3]
    return major, minor, micro


def check_minimum_python() -> None:
    """
    Raises:
        RuntimeError: If the interpreter is older than MINIMUM_PYTHON.
    """
    current = get_python_version()
    if current[:2] < MINIMUM_PYTHON:
        required = ".".join(str(part) for part in MINIMUM_PYTHON)
        raise RuntimeError(
            f"lidbench requires Python >= {required}, "
            f"found {current[0]}.{current[1]}"
        )


def fasttext_available() -> bool:
    """Whether the optional fastText backend can be imported."""
    return importlib.util.find_spec("fasttext") is not None


def get_system_info() -> SystemInfo:
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        architecture=platform.machine(),
        hostname=platform.node(),
        fasttext_available=fasttext_available(),
    )
