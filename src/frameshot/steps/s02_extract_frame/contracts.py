"""I/O contracts for Step 02: Extract Frame."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ExtractFrameInput(BaseModel):
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    video: bytes = Field(..., repr=False, description="Raw bytes of the video container")
    frame_index: int = Field(0, ge=0, description="Zero-based index of the frame to extract")
    source_name: str = Field("", description="Where the bytes came from, for log messages")


class ExtractFrameOutput(BaseModel):
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    data: bytes = Field(..., repr=False, description="Encoded WebP image")
    mime_type: Literal["image/webp"] = "image/webp"
    frame_index: int = Field(..., description="Index of the extracted frame")
    size: int = Field(..., description="Encoded image size in bytes")
    engine: str = Field(..., description="Engine that decoded the frame")
