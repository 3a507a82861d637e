"""Common Pydantic models shared across pipeline steps and the batch runner."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from frameshot.steps.s01_fetch_media.config import FetchMediaConfig
from frameshot.steps.s02_extract_frame.config import ExtractFrameConfig
from frameshot.steps.s03_package_archive.config import PackageArchiveConfig

WEBP_MIME_TYPE = "image/webp"


class VideoInput(BaseModel):
    """One unit of work: which frame to grab from which video."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(..., description="HTTP(S) URL of the source video")
    frame_index: int = Field(
        0,
        ge=0,
        validation_alias=AliasChoices("frame_index", "frame"),
        description="Zero-based index of the frame to extract",
    )


class ExtractedImage(BaseModel):
    """A still frame ready to be shown or archived."""

    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    filename: str = Field(..., description="Archive entry name, always ends in .webp")
    data: bytes = Field(..., repr=False, description="Encoded WebP image")
    mime_type: Literal["image/webp"] = WEBP_MIME_TYPE
    source_url: str = ""
    frame_index: int = 0


class FailureRecord(BaseModel):
    """Why one input produced no image."""

    input: VideoInput
    stage: Literal["fetch", "extract"]
    error_type: str
    message: str

    def describe(self) -> str:
        return f"{self.input.url} (frame {self.input.frame_index}): {self.message}"


class BatchResult(BaseModel):
    """Outcome of one batch run: successes and failures, in submission order."""

    results: list[ExtractedImage] = Field(default_factory=list)
    failures: list[FailureRecord] = Field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


class BatchConfig(BaseModel):
    """Settings for one batch run, one section per step."""

    workers: int = Field(1, ge=1, description="Concurrent items; 1 = sequential")
    fetch: FetchMediaConfig = Field(default_factory=FetchMediaConfig)
    extract: ExtractFrameConfig = Field(default_factory=ExtractFrameConfig)
    archive: PackageArchiveConfig = Field(default_factory=PackageArchiveConfig)


class BatchFile(BatchConfig):
    """A batch job as written in YAML: the inputs plus where to put the archive."""

    inputs: list[VideoInput] = Field(default_factory=list)
    output: Path = Field(Path("images.zip"), description="Where to write the archive")
