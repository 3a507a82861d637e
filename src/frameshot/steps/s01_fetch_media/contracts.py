"""I/O contracts for Step 01: Fetch Media."""

from pydantic import BaseModel, ConfigDict, Field


class FetchMediaInput(BaseModel):
    url: str = Field(..., description="HTTP(S) URL of the video")


class FetchMediaOutput(BaseModel):
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    url: str = Field(..., description="URL the bytes were fetched from")
    data: bytes = Field(..., repr=False, description="Raw video bytes")
    content_type: str | None = Field(None, description="Content-Type reported by the server")
    size: int = Field(..., description="Number of bytes received")
