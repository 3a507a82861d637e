"""Configuration for Step 01: Fetch Media."""

from pydantic import BaseModel, Field


class FetchMediaConfig(BaseModel):
    timeout: float | None = Field(None, description="Request timeout in seconds (None = wait forever)")
    chunk_size: int = Field(65536, gt=0, description="Streaming chunk size in bytes")
    user_agent: str = Field("frameshot/0.1", description="User-Agent header sent with each request")
