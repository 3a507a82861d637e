"""Grab one still frame from each of many remote videos and zip them up."""

from frameshot.core.batch_runner import process_batch
from frameshot.core.contracts import BatchConfig, BatchResult, ExtractedImage, FailureRecord, VideoInput
from frameshot.core.errors import (
    DecodeError,
    FetchError,
    FrameNotFoundError,
    FrameshotError,
    PackagingError,
)
from frameshot.core.session import FrameSession
from frameshot.steps.s01_fetch_media.step import fetch
from frameshot.steps.s02_extract_frame.step import extract_frame
from frameshot.steps.s03_package_archive.step import package_archive
from frameshot.utils.naming import derive_image_filename

__version__ = "0.1.0"

__all__ = [
    "BatchConfig",
    "BatchResult",
    "DecodeError",
    "ExtractedImage",
    "FailureRecord",
    "FetchError",
    "FrameNotFoundError",
    "FrameSession",
    "FrameshotError",
    "PackagingError",
    "VideoInput",
    "derive_image_filename",
    "extract_frame",
    "fetch",
    "package_archive",
    "process_batch",
]
