"""Exception hierarchy for the frame extraction pipeline."""

from __future__ import annotations


class FrameshotError(Exception):
    """Base class for every error raised by frameshot."""


class FetchError(FrameshotError):
    """The video could not be retrieved (transport failure or non-2xx status)."""

    def __init__(self, message: str, url: str = "", status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DecodeError(FrameshotError):
    """The video bytes are not a valid or supported container/codec."""


class FrameNotFoundError(DecodeError):
    """The requested frame index is past the last decoded frame."""

    def __init__(self, message: str, frame_index: int = -1):
        super().__init__(message)
        self.frame_index = frame_index


class EngineUnavailableError(DecodeError):
    """The decoding engine could not be initialised."""


class PackagingError(FrameshotError):
    """The archive could not be written or finalised."""
