"""Subprocess helpers for the external media tools (ffmpeg)."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

_TAIL_CHARS = 500


def _tail(text: str) -> str:
    return text[-_TAIL_CHARS:].strip()


def resolve_executable(name: str) -> str:
    """Return the absolute path of ``name`` on PATH (or ``name`` itself if it is a path)."""
    path = shutil.which(name)
    if path is None:
        raise FileNotFoundError(f"Executable not found: {name}")
    return path


def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    timeout: float | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run an external command, logging its output tails.

    Output is decoded leniently: media tools print stream metadata that is
    not always valid UTF-8.
    """
    cmd_str = " ".join(str(part) for part in cmd)
    logger.debug(f"Running: {cmd_str}")

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"Timed out after {timeout}s: {cmd_str}")
        raise

    if result.stdout:
        logger.debug(f"stdout: {_tail(result.stdout)}")
    if result.stderr:
        logger.debug(f"stderr: {_tail(result.stderr)}")

    if check and result.returncode != 0:
        raise subprocess.CalledProcessError(
            result.returncode, cmd_str, result.stdout, result.stderr
        )
    return result
