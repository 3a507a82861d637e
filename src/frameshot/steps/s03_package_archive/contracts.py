"""I/O contracts for Step 03: Package Archive."""

from pydantic import BaseModel, ConfigDict, Field

from frameshot.core.contracts import ExtractedImage


class PackageArchiveInput(BaseModel):
    images: list[ExtractedImage] = Field(default_factory=list, description="Images in archive order")


class PackageArchiveOutput(BaseModel):
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    data: bytes = Field(..., repr=False, description="The ZIP archive")
    filename: str = Field("images.zip", description="Suggested download filename")
    entry_count: int = Field(..., description="Number of entries written")
    entry_names: list[str] = Field(default_factory=list, description="Entry names in archive order")
