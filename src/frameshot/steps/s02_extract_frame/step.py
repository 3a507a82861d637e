"""Step 02: Decode one frame of an in-memory video and encode it as WebP."""

from __future__ import annotations

import logging
from typing import ClassVar

from frameshot.core.errors import DecodeError
from frameshot.core.step_base import BaseStep
from ._engine import get_engine
from ._scratch import scratch_workspace
from .config import ExtractFrameConfig
from .contracts import ExtractFrameInput, ExtractFrameOutput

logger = logging.getLogger(__name__)

# Staged input name suffix; both engines detect the container from its content.
VIDEO_SUFFIX = ".mp4"


class ExtractFrameStep(BaseStep[ExtractFrameInput, ExtractFrameOutput, ExtractFrameConfig]):
    name: ClassVar[str] = "extract_frame"
    input_type: ClassVar = ExtractFrameInput
    output_type: ClassVar = ExtractFrameOutput
    config_type: ClassVar = ExtractFrameConfig
    error_type: ClassVar = DecodeError

    def validate_inputs(self, inputs: ExtractFrameInput) -> bool:
        if not inputs.video:
            logger.error(f"Empty video buffer: {inputs.source_name or '<memory>'}")
            return False
        return True

    def run(self, inputs: ExtractFrameInput) -> ExtractFrameOutput:
        engine = get_engine(self.config)

        with scratch_workspace(self.config.scratch_dir) as workspace:
            video_path = workspace.new_file(VIDEO_SUFFIX)
            output_path = workspace.new_file(".webp")
            video_path.write_bytes(inputs.video)

            engine.grab_frame(
                video_path,
                inputs.frame_index,
                output_path,
                quality=self.config.webp_quality,
                timeout=self.config.timeout,
            )
            try:
                data = output_path.read_bytes()
            except OSError as exc:
                raise DecodeError(f"Engine produced no readable image: {exc}") from exc

        logger.info(
            f"Extracted frame {inputs.frame_index} ({len(data)} bytes) "
            f"from {inputs.source_name or '<memory>'} with {engine.name}"
        )
        return ExtractFrameOutput(
            data=data,
            frame_index=inputs.frame_index,
            size=len(data),
            engine=engine.name,
        )


def extract_frame(video: bytes, frame_index: int, config: ExtractFrameConfig | None = None) -> bytes:
    """Return frame ``frame_index`` of ``video`` as WebP bytes. Raises DecodeError."""
    step = ExtractFrameStep(config)
    return step.execute(ExtractFrameInput(video=video, frame_index=frame_index)).data
