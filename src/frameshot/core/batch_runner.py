"""Batch orchestrator: fetch and extract one frame per input, isolating failures.

Each input runs fetch -> extract -> name on its own. Whatever goes wrong for
one input is recorded as a FailureRecord against that input and the batch
moves on; nothing raised by a stage escapes ``process_batch``.

With ``workers == 1`` inputs run one at a time in submission order. With more
workers a bounded thread pool runs them concurrently; outcomes are collected
back in submission order, so both modes return identical results.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence

from frameshot.steps.s01_fetch_media.contracts import FetchMediaInput
from frameshot.steps.s01_fetch_media.step import FetchMediaStep
from frameshot.steps.s02_extract_frame.contracts import ExtractFrameInput
from frameshot.steps.s02_extract_frame.step import ExtractFrameStep
from frameshot.utils.naming import derive_image_filename
from .contracts import BatchConfig, BatchResult, ExtractedImage, FailureRecord, VideoInput

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], bytes]
Extractor = Callable[[bytes, int, str], bytes]
Outcome = ExtractedImage | FailureRecord


def default_fetcher(config: BatchConfig) -> Fetcher:
    step = FetchMediaStep(config.fetch)

    def fetch(url: str) -> bytes:
        return step.execute(FetchMediaInput(url=url)).data

    return fetch


def default_extractor(config: BatchConfig) -> Extractor:
    step = ExtractFrameStep(config.extract)

    def extract(video: bytes, frame_index: int, source_name: str) -> bytes:
        return step.execute(
            ExtractFrameInput(video=video, frame_index=frame_index, source_name=source_name)
        ).data

    return extract


def process_item(item: VideoInput, fetcher: Fetcher, extractor: Extractor) -> Outcome:
    """Run one input through fetch and extract, returning an image or a failure."""
    stage = "fetch"
    try:
        video = fetcher(item.url)
        stage = "extract"
        image = extractor(video, item.frame_index, item.url)
    except Exception as exc:  # recorded against this item only
        logger.warning(f"Failed to process {item.url} (frame {item.frame_index}) at {stage}: {exc}")
        return FailureRecord(
            input=item,
            stage=stage,
            error_type=type(exc).__name__,
            message=str(exc) or type(exc).__name__,
        )

    return ExtractedImage(
        filename=derive_image_filename(item.url),
        data=image,
        source_url=item.url,
        frame_index=item.frame_index,
    )


def process_batch(
    inputs: Sequence[VideoInput],
    config: BatchConfig | None = None,
    *,
    fetcher: Fetcher | None = None,
    extractor: Extractor | None = None,
) -> BatchResult:
    """Extract one frame per input. Never raises for per-item failures."""
    config = config or BatchConfig()
    fetcher = fetcher or default_fetcher(config)
    extractor = extractor or default_extractor(config)

    items = list(inputs)
    workers = min(config.workers, len(items))
    logger.info(f"Processing batch of {len(items)} videos (workers={max(workers, 1)})")
    t0 = time.time()

    if workers <= 1:
        outcomes = [process_item(item, fetcher, extractor) for item in items]
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="frameshot") as pool:
            futures = [pool.submit(process_item, item, fetcher, extractor) for item in items]
            outcomes = [future.result() for future in futures]

    result = BatchResult(
        results=[o for o in outcomes if isinstance(o, ExtractedImage)],
        failures=[o for o in outcomes if isinstance(o, FailureRecord)],
    )
    logger.info(
        f"Batch done in {time.time() - t0:.1f}s: "
        f"{result.succeeded} extracted, {result.failed} failed"
    )
    return result
