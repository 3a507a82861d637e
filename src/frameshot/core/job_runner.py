"""Job runner: reads a batch YAML file, runs it, and writes the archive."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel

from frameshot.steps.s03_package_archive.contracts import PackageArchiveInput, PackageArchiveOutput
from frameshot.steps.s03_package_archive.step import PackageArchiveStep
from .batch_runner import process_batch
from .contracts import BatchFile, BatchResult, VideoInput

logger = logging.getLogger(__name__)


class JobReport(BaseModel):
    """What a job run produced: the batch outcome and where the archive went."""

    batch: BatchResult
    archive_path: Path
    archive_size: int
    entry_names: list[str]


def load_batch_file(path: Path) -> BatchFile:
    """Load and validate a batch YAML file."""
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return BatchFile(**raw)


def parse_input_spec(spec: str) -> VideoInput:
    """Parse ``URL`` or ``URL@FRAME`` into a VideoInput."""
    url, sep, frame = spec.rpartition("@")
    if sep and frame.isdigit():
        return VideoInput(url=url, frame_index=int(frame))
    return VideoInput(url=spec, frame_index=0)


def write_archive(archive: PackageArchiveOutput, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(archive.data)
    logger.info(f"Wrote {archive.entry_count} images to {path}")
    return path


def run_job(job: BatchFile) -> JobReport:
    """Process every input of ``job`` and write whatever succeeded to ``job.output``."""
    logger.info(f"Job: {len(job.inputs)} inputs -> {job.output}")
    batch = process_batch(job.inputs, job)

    archive = PackageArchiveStep(job.archive).execute(PackageArchiveInput(images=batch.results))
    write_archive(archive, job.output)

    for failure in batch.failures:
        logger.error(f"Not extracted: {failure.describe()}")

    return JobReport(
        batch=batch,
        archive_path=job.output,
        archive_size=len(archive.data),
        entry_names=archive.entry_names,
    )


def run_batch_file(config_path: Path, output: Path | None = None, workers: int | None = None) -> JobReport:
    """Execute a batch file, optionally overriding its output path and worker count."""
    job = load_batch_file(config_path)
    overrides = {}
    if output is not None:
        overrides["output"] = output
    if workers is not None:
        overrides["workers"] = workers
    if overrides:
        job = job.model_copy(update=overrides)
    return run_job(job)
