"""In-process session state for interactive callers.

A session holds two things: the list of inputs being edited and the result
of the last batch run. Each is replaced wholesale: editing produces a new
input list and every ``process()`` call replaces the previous result.
"""

from __future__ import annotations

import logging
import threading

from frameshot.steps.s03_package_archive.contracts import PackageArchiveInput, PackageArchiveOutput
from frameshot.steps.s03_package_archive.step import PackageArchiveStep
from .batch_runner import Extractor, Fetcher, process_batch
from .contracts import BatchConfig, BatchResult, ExtractedImage, FailureRecord, VideoInput

logger = logging.getLogger(__name__)


class FrameSession:
    def __init__(
        self,
        config: BatchConfig | None = None,
        fetcher: Fetcher | None = None,
        extractor: Extractor | None = None,
    ):
        self.config = config or BatchConfig()
        self._fetcher = fetcher
        self._extractor = extractor
        self._inputs: tuple[VideoInput, ...] = (VideoInput(url="", frame_index=0),)
        self._result = BatchResult()
        self._processing = threading.Lock()

    @property
    def inputs(self) -> list[VideoInput]:
        return list(self._inputs)

    @property
    def is_processing(self) -> bool:
        return self._processing.locked()

    @property
    def last_result(self) -> BatchResult:
        return self._result

    @property
    def images(self) -> list[ExtractedImage]:
        return list(self._result.results)

    @property
    def failures(self) -> list[FailureRecord]:
        return list(self._result.failures)

    def replace_inputs(self, inputs: list[VideoInput]) -> None:
        self._inputs = tuple(inputs)

    def add_input(self, url: str = "", frame_index: int = 0) -> None:
        self._inputs = self._inputs + (VideoInput(url=url, frame_index=frame_index),)

    def update_input(self, index: int, url: str | None = None, frame_index: int | None = None) -> None:
        current = self._inputs[index]
        changes = {}
        if url is not None:
            changes["url"] = url
        if frame_index is not None:
            changes["frame_index"] = frame_index
        updated = VideoInput(**{**current.model_dump(), **changes})
        self._inputs = self._inputs[:index] + (updated,) + self._inputs[index + 1:]

    def remove_input(self, index: int) -> None:
        """Drop the input at ``index``; the rest keep their order."""
        remaining = list(self._inputs)
        del remaining[index]
        self._inputs = tuple(remaining)

    def process(self) -> BatchResult:
        """Run the current inputs and replace the last result with the outcome."""
        if not self._processing.acquire(blocking=False):
            raise RuntimeError("A batch is already being processed")
        try:
            result = process_batch(
                self._inputs, self.config, fetcher=self._fetcher, extractor=self._extractor
            )
        finally:
            self._processing.release()
        self._result = result
        return result

    def download_archive(self) -> PackageArchiveOutput:
        """Package the images of the last run. Recomputed on every call."""
        step = PackageArchiveStep(self.config.archive)
        return step.execute(PackageArchiveInput(images=self._result.results))
