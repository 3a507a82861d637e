"""Configuration for Step 03: Package Archive."""

from typing import Literal

from pydantic import BaseModel, Field


class PackageArchiveConfig(BaseModel):
    compression: Literal["deflated", "stored"] = Field("deflated", description="ZIP compression: deflated|stored")
    compress_level: int | None = Field(None, ge=0, le=9, description="Deflate level (None = zlib default)")
    deterministic: bool = Field(True, description="Fixed timestamps so identical input gives identical bytes")
    deduplicate_names: bool = Field(False, description="Rename repeated filenames to name_1.webp, name_2.webp, ...")
    archive_name: str = Field("images.zip", description="Suggested download filename")
