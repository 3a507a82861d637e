"""Decoding engines and their once-per-process initialisation.

An engine turns a video file on disk into a single WebP still. Engines are
created lazily through ``get_engine()``: the first caller initialises the
engine while holding the registry lock, later (or concurrent) callers block
on that lock and then reuse the published instance. A failed initialisation
is not published, so the next caller tries again.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from frameshot.core.errors import DecodeError, EngineUnavailableError, FrameNotFoundError
from frameshot.utils.subprocess_utils import resolve_executable, run_command
from .config import ExtractFrameConfig

logger = logging.getLogger(__name__)

# ffmpeg exits 0 (older releases) or non-zero (newer ones) with one of these
# when the select filter never matched a frame.
_EMPTY_OUTPUT_MARKERS = ("Output file is empty", "nothing was encoded")


def _last_line(text: str) -> str:
    lines = [line for line in text.strip().splitlines() if line.strip()]
    return lines[-1] if lines else "no diagnostic output"


class DecodingEngine(ABC):
    name: ClassVar[str] = ""

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the engine. Raises EngineUnavailableError."""
        ...

    @abstractmethod
    def grab_frame(
        self,
        video_path: Path,
        frame_index: int,
        output_path: Path,
        quality: int = 80,
        timeout: float | None = None,
    ) -> None:
        """Decode ``video_path`` and write frame ``frame_index`` to ``output_path`` as WebP."""
        ...


class FfmpegEngine(DecodingEngine):
    name: ClassVar[str] = "ffmpeg"

    def __init__(self, binary: str = "ffmpeg"):
        self.binary = binary
        self.executable: str | None = None
        self.version = ""

    def initialize(self) -> None:
        try:
            executable = resolve_executable(self.binary)
            version_out = run_command([executable, "-hide_banner", "-version"]).stdout
            encoders_out = run_command([executable, "-hide_banner", "-encoders"]).stdout
        except (OSError, subprocess.CalledProcessError) as exc:
            raise EngineUnavailableError(f"ffmpeg is not usable ({self.binary}): {exc}") from exc

        if "webp" not in encoders_out:
            raise EngineUnavailableError(f"{executable} was built without a WebP encoder")

        self.executable = executable
        self.version = version_out.splitlines()[0] if version_out else "unknown"
        logger.info(f"Initialised {self.version} at {executable}")

    def build_command(self, video_path: Path, frame_index: int, output_path: Path, quality: int) -> list[str]:
        return [
            self.executable or self.binary,
            "-hide_banner",
            "-nostdin",
            "-loglevel", "warning",
            "-y",
            "-i", str(video_path),
            "-vf", f"select=eq(n\\,{frame_index})",
            "-frames:v", "1",
            "-an",
            "-quality", str(quality),
            "-update", "1",
            str(output_path),
        ]

    def grab_frame(
        self,
        video_path: Path,
        frame_index: int,
        output_path: Path,
        quality: int = 80,
        timeout: float | None = None,
    ) -> None:
        cmd = self.build_command(video_path, frame_index, output_path, quality)
        try:
            result = run_command(cmd, timeout=timeout, check=False)
        except subprocess.TimeoutExpired as exc:
            raise DecodeError(f"ffmpeg timed out after {timeout}s") from exc
        except OSError as exc:
            raise DecodeError(f"Could not run ffmpeg: {exc}") from exc

        produced = output_path.exists() and output_path.stat().st_size > 0
        if result.returncode == 0 and produced:
            return

        stderr = result.stderr or ""
        if result.returncode == 0 or any(marker in stderr for marker in _EMPTY_OUTPUT_MARKERS):
            raise FrameNotFoundError(
                f"Frame {frame_index} is out of range for this video", frame_index=frame_index
            )
        raise DecodeError(f"ffmpeg failed (exit {result.returncode}): {_last_line(stderr)}")


class OpenCVEngine(DecodingEngine):
    name: ClassVar[str] = "opencv"

    def __init__(self):
        self.version = ""

    def initialize(self) -> None:
        try:
            import cv2
        except ImportError as exc:
            raise EngineUnavailableError("OpenCV (cv2) is not installed") from exc

        if not cv2.haveImageWriter("frame.webp"):
            raise EngineUnavailableError("This OpenCV build cannot write WebP images")
        self.version = cv2.__version__
        logger.info(f"Initialised OpenCV {self.version}")

    def grab_frame(
        self,
        video_path: Path,
        frame_index: int,
        output_path: Path,
        quality: int = 80,
        timeout: float | None = None,
    ) -> None:
        import cv2

        # OpenCV reads in-process, so ``timeout`` cannot be enforced here.
        cap = cv2.VideoCapture(str(video_path))
        try:
            if not cap.isOpened():
                raise DecodeError("OpenCV could not open the video (unsupported container or codec)")

            frame = None
            for idx in range(frame_index + 1):
                ret, frame = cap.read()
                if not ret:
                    if idx == 0:
                        raise DecodeError("OpenCV could not decode any frame from the video")
                    raise FrameNotFoundError(
                        f"Frame {frame_index} is out of range (video has {idx} frames)",
                        frame_index=frame_index,
                    )
        finally:
            cap.release()

        params = [cv2.IMWRITE_WEBP_QUALITY, max(1, quality)]
        if not cv2.imwrite(str(output_path), frame, params):
            raise DecodeError(f"OpenCV could not encode frame {frame_index} as WebP")


_ENGINE_TYPES: dict[str, type[DecodingEngine]] = {
    FfmpegEngine.name: FfmpegEngine,
    OpenCVEngine.name: OpenCVEngine,
}

_engines: dict[tuple[str, str], DecodingEngine] = {}
_engines_lock = threading.Lock()


def _engine_key(config: ExtractFrameConfig) -> tuple[str, str]:
    if config.engine == FfmpegEngine.name:
        return config.engine, config.ffmpeg_binary
    return config.engine, ""


def _create_engine(config: ExtractFrameConfig) -> DecodingEngine:
    engine_cls = _ENGINE_TYPES.get(config.engine)
    if engine_cls is None:
        raise EngineUnavailableError(f"Unknown decoding engine: {config.engine}")
    if engine_cls is FfmpegEngine:
        return FfmpegEngine(binary=config.ffmpeg_binary)
    return engine_cls()


def get_engine(config: ExtractFrameConfig) -> DecodingEngine:
    """Return the shared, initialised engine for ``config``."""
    key = _engine_key(config)
    engine = _engines.get(key)
    if engine is not None:
        return engine

    with _engines_lock:
        engine = _engines.get(key)
        if engine is None:
            engine = _create_engine(config)
            engine.initialize()
            _engines[key] = engine
    return engine


def reset_engines() -> None:
    """Forget every initialised engine."""
    with _engines_lock:
        _engines.clear()
