"""Base class for all pipeline steps.

Every step declares typed Input, Output, Config via Pydantic models.
The batch runner only talks to steps through ``execute()``, so a step can
be swapped (or faked in tests) as long as it honours the same contracts.
"""

from __future__ import annotations

import time
import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar, ClassVar

from pydantic import BaseModel

from .errors import FrameshotError

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)
ConfigT = TypeVar("ConfigT", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseStep(ABC, Generic[InputT, OutputT, ConfigT]):
    """Abstract base for pipeline steps.

    Subclasses must:
    1. Define concrete Pydantic models for InputT, OutputT, ConfigT
    2. Set class variables: input_type, output_type, config_type
    3. Implement run() and validate_inputs()
    4. Optionally set error_type, raised when validate_inputs() rejects input

    Example:
        class FetchMediaStep(BaseStep[FetchMediaInput, FetchMediaOutput, FetchMediaConfig]):
            input_type = FetchMediaInput
            output_type = FetchMediaOutput
            config_type = FetchMediaConfig
            error_type = FetchError

            def run(self, inputs: FetchMediaInput) -> FetchMediaOutput: ...
            def validate_inputs(self, inputs: FetchMediaInput) -> bool: ...
    """

    name: ClassVar[str] = ""
    input_type: ClassVar[type[BaseModel]]
    output_type: ClassVar[type[BaseModel]]
    config_type: ClassVar[type[BaseModel]]
    error_type: ClassVar[type[FrameshotError]] = FrameshotError

    def __init__(self, config: ConfigT | None = None):
        self.config = config if config is not None else self.config_type()

    @abstractmethod
    def run(self, inputs: InputT) -> OutputT:
        """Execute this pipeline step. Returns output model."""
        ...

    @abstractmethod
    def validate_inputs(self, inputs: InputT) -> bool:
        """Check that the inputs can be processed by this step."""
        ...

    def execute(self, inputs: InputT) -> OutputT:
        """Run with logging, timing, and validation."""
        step_name = self.name or self.__class__.__name__
        logger.debug(f"[{step_name}] Validating inputs...")

        if not self.validate_inputs(inputs):
            raise self.error_type(f"[{step_name}] Input validation failed")

        logger.debug(f"[{step_name}] Starting...")
        t0 = time.time()
        result = self.run(inputs)
        elapsed = time.time() - t0
        logger.info(f"[{step_name}] Done in {elapsed:.2f}s")
        return result

    @classmethod
    def get_input_schema(cls) -> dict:
        """Return JSON schema for inputs."""
        return cls.input_type.model_json_schema()

    @classmethod
    def get_output_schema(cls) -> dict:
        """Return JSON schema for outputs."""
        return cls.output_type.model_json_schema()

    @classmethod
    def get_config_schema(cls) -> dict:
        """Return JSON schema for config."""
        return cls.config_type.model_json_schema()
