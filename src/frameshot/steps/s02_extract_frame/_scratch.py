"""Per-call scratch directories for the decoding engines."""

from __future__ import annotations

import logging
import tempfile
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "frameshot-"


@dataclass(frozen=True)
class ScratchWorkspace:
    path: Path

    def new_file(self, suffix: str) -> Path:
        """Return a fresh, unused file name inside the workspace."""
        return self.path / f"{uuid.uuid4().hex}{suffix}"


@contextmanager
def scratch_workspace(root: Path | None = None) -> Iterator[ScratchWorkspace]:
    """Yield a private directory that is removed on exit, whether or not the body raised."""
    if root is not None:
        root.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory(prefix=SCRATCH_PREFIX, dir=root) as tmp:
        logger.debug(f"Scratch workspace: {tmp}")
        yield ScratchWorkspace(Path(tmp))
