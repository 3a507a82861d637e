"""frameshot core: step base, shared contracts, batch and job runners."""

from .errors import (
    DecodeError,
    EngineUnavailableError,
    FetchError,
    FrameNotFoundError,
    FrameshotError,
    PackagingError,
)
from .logging import setup_logging
from .step_base import BaseStep

__all__ = [
    "BaseStep",
    "DecodeError",
    "EngineUnavailableError",
    "FetchError",
    "FrameNotFoundError",
    "FrameshotError",
    "PackagingError",
    "setup_logging",
]
