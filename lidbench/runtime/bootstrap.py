# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for lidbench.

The one-time setup every CLI command goes through:
  1. Validate the environment
  2. Apply the configured log level to all package loggers
  3. Attach the optional log file
  4. Log a startup line with version and platform
"""

from pathlib import Path

from lidbench import __version__
from lidbench.config.schema import GlobalConfig
from lidbench.logging.logger import configure_logging, get_logger
from lidbench.runtime.environment import check_minimum_python, get_system_info


def bootstrap(config: GlobalConfig, log_level_override: str | None = None) -> None:
    """
    Put the process into a known state before a command does real work.

    Args:
        config: The validated global configuration.
        log_level_override: Level from the command line; wins over the config.
    """
    check_minimum_python()

    log_level = log_level_override or config.log_level

    log_file = None
    if config.log_file is not None:
        log_file = Path(config.log_file)

    configure_logging(log_level, log_file)
    logger = get_logger("lidbench.runtime")

    system_info = get_system_info()
    logger.info(
        "lidbench bootstrap complete",
        extra={
            "version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "fasttext_available": system_info.fasttext_available,
        },
    )
