"""Configuration for Step 02: Extract Frame."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class ExtractFrameConfig(BaseModel):
    engine: Literal["ffmpeg", "opencv"] = Field("ffmpeg", description="Decoding engine: ffmpeg|opencv")
    ffmpeg_binary: str = Field("ffmpeg", description="ffmpeg executable name or path")
    webp_quality: int = Field(80, ge=0, le=100, description="WebP encoder quality")
    timeout: float | None = Field(None, description="Per-frame decoder timeout in seconds (None = no limit)")
    scratch_dir: Path | None = Field(None, description="Parent directory for scratch files (None = system temp)")
