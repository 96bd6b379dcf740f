"""Error types raised by the feature frontend."""

from pathlib import Path
from typing import Union


class FrontendError(Exception):
    """Base class for all frontend errors."""


class InvalidConfigurationError(FrontendError, ValueError):
    """Raised when extractor or transform parameters are out of range."""


class TransformPreconditionError(FrontendError, ValueError):
    """Raised when a transform is requested for an unsupported size."""


class DecodeError(FrontendError):
    """Raised when an audio file cannot be read or decoded."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to decode audio file {self.path}: {reason}")
