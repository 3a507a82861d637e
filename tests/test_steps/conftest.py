"""Shared fixtures and markers for step tests."""

import shutil

import pytest

from frameshot.steps.s02_extract_frame._engine import reset_engines

needs_ffmpeg = pytest.mark.skipif(shutil.which("ffmpeg") is None, reason="ffmpeg not on PATH")


@pytest.fixture(autouse=True)
def fresh_engines():
    """Each test starts without initialised decoding engines."""
    reset_engines()
    yield
    reset_engines()
