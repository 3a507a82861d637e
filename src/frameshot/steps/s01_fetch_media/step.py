"""Step 01: Download a video over HTTP(S) into memory."""

from __future__ import annotations

import logging
from typing import ClassVar
from urllib.parse import urlparse

import requests

from frameshot.core.errors import FetchError
from frameshot.core.step_base import BaseStep
from .config import FetchMediaConfig
from .contracts import FetchMediaInput, FetchMediaOutput

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https")


class FetchMediaStep(BaseStep[FetchMediaInput, FetchMediaOutput, FetchMediaConfig]):
    name: ClassVar[str] = "fetch_media"
    input_type: ClassVar = FetchMediaInput
    output_type: ClassVar = FetchMediaOutput
    config_type: ClassVar = FetchMediaConfig
    error_type: ClassVar = FetchError

    def validate_inputs(self, inputs: FetchMediaInput) -> bool:
        scheme = urlparse(inputs.url).scheme.lower()
        if scheme not in SUPPORTED_SCHEMES:
            logger.error(f"Unsupported URL scheme {scheme!r}: {inputs.url!r}")
            return False
        return True

    def run(self, inputs: FetchMediaInput) -> FetchMediaOutput:
        url = inputs.url
        headers = {"User-Agent": self.config.user_agent}
        try:
            response = requests.get(url, headers=headers, stream=True, timeout=self.config.timeout)
            response.raise_for_status()
            buffer = bytearray()
            for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                if chunk:
                    buffer.extend(chunk)
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise FetchError(f"HTTP error fetching {url}: {exc}", url=url, status_code=status) from exc
        except requests.RequestException as exc:
            raise FetchError(f"Could not fetch {url}: {exc}", url=url) from exc

        logger.info(f"Fetched {len(buffer)} bytes from {url}")
        return FetchMediaOutput(
            url=url,
            data=bytes(buffer),
            content_type=response.headers.get("content-type"),
            size=len(buffer),
        )


def fetch(url: str, config: FetchMediaConfig | None = None) -> bytes:
    """Fetch ``url`` and return the raw body. Raises FetchError."""
    return FetchMediaStep(config).execute(FetchMediaInput(url=url)).data
