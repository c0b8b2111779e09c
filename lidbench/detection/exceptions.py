# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Exceptions raised by the detection layer."""


class DetectionError(Exception):
    """Base for all detection errors."""


class ModelLoadError(DetectionError):
    """Raised when the classifier model file is missing or can't be loaded."""


class PredictionTimeoutError(DetectionError):
    """Raised when a single prediction call exceeds its timeout."""


class RegistryError(DetectionError):
    """Raised when a language registry file is malformed or has duplicate codes."""
