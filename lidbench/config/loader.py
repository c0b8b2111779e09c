# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: reads YAML from disk and produces a validated, frozen LidbenchConfig.

The pipeline is linear: read the file, parse the YAML into a plain dict,
let pydantic validate it, return the frozen result. Any failure stops right
there. A broken config should never get as far as loading a model or
reading corpora.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from lidbench.config.exceptions import ConfigLoadError, ConfigValidationError
from lidbench.config.schema import LidbenchConfig
from lidbench.utils.filesystem import safe_read


def _read_yaml_mapping(config_path: Path) -> dict[str, Any]:
    """
    Raises:
        ConfigLoadError: Missing or unreadable file, invalid YAML, or a
            document that isn't a mapping at the top level.
    """
    try:
        raw_text = safe_read(config_path)
    except FileNotFoundError as err:
        raise ConfigLoadError(f"Config file not found: {config_path}") from err
    except IsADirectoryError as err:
        raise ConfigLoadError(f"Config path is not a file: {config_path}") from err
    except (OSError, UnicodeDecodeError) as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        document = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(document, dict):
        raise ConfigLoadError(
            f"{config_path} must hold a YAML mapping at the top level, "
            f"got {type(document).__name__}"
        )
    return document


def load_config(config_path: Path) -> LidbenchConfig:
    """
    Load and validate a config file.

    Raises:
        ConfigLoadError: The file couldn't be read or parsed.
        ConfigValidationError: Unknown keys, wrong types, out-of-range or
            inconsistent values.
    """
    document = _read_yaml_mapping(config_path)
    try:
        return LidbenchConfig.model_validate(document)
    except ValidationError as err:
        raise ConfigValidationError(f"{config_path} failed validation:\n{err}") from err
