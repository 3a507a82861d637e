"""Shared pytest fixtures for frameshot tests."""

from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from frameshot.core.contracts import ExtractedImage, VideoInput
from frameshot.core.errors import FetchError, FrameNotFoundError

WEBP_STUB = b"RIFF\x1a\x00\x00\x00WEBPVP8 stub"


def is_webp(data: bytes) -> bool:
    return data[:4] == b"RIFF" and data[8:12] == b"WEBP"


@pytest.fixture
def make_image() -> Callable[..., ExtractedImage]:
    """Factory for ExtractedImage instances with small fake payloads."""

    def _make(filename: str, data: bytes = WEBP_STUB, url: str = "") -> ExtractedImage:
        return ExtractedImage(filename=filename, data=data, source_url=url)

    return _make


class FakeMedia:
    """In-memory stand-in for the network and the decoder.

    ``videos`` maps URL -> number of frames. URLs not in the map are
    unreachable; frame indices past the count are out of range.
    """

    def __init__(self, videos: dict[str, int]):
        self.videos = videos
        self.fetched: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.fetched.append(url)
        if url not in self.videos:
            raise FetchError(f"Could not fetch {url}: connection refused", url=url)
        return f"{url}|{self.videos[url]}".encode()

    def extract(self, video: bytes, frame_index: int, source_name: str = "") -> bytes:
        url, _, count = video.decode().rpartition("|")
        if frame_index >= int(count):
            raise FrameNotFoundError(f"Frame {frame_index} is out of range", frame_index=frame_index)
        return WEBP_STUB + f"{url}#{frame_index}".encode()


@pytest.fixture
def fake_media() -> FakeMedia:
    return FakeMedia({
        "https://x.com/a/clip.mp4": 30,
        "https://x.com/b/intro.mov": 10,
        "https://x.com/noext": 5,
    })


@pytest.fixture
def valid_inputs() -> list[VideoInput]:
    return [
        VideoInput(url="https://x.com/a/clip.mp4", frame_index=3),
        VideoInput(url="https://x.com/b/intro.mov", frame_index=0),
        VideoInput(url="https://x.com/noext", frame_index=4),
    ]


@pytest.fixture
def sample_video(tmp_path: Path) -> bytes:
    """Encode a 12-frame test video and return its bytes."""
    cv2 = pytest.importorskip("cv2")
    video_path = tmp_path / "sample.mp4"
    fourcc = cv2.VideoWriter_fourcc(*"mp4v")
    writer = cv2.VideoWriter(str(video_path), fourcc, 12.0, (64, 48))
    if not writer.isOpened():
        pytest.skip("OpenCV build cannot write mp4v video")
    for i in range(12):
        frame = np.full((48, 64, 3), i * 20, dtype=np.uint8)
        writer.write(frame)
    writer.release()
    return video_path.read_bytes()
