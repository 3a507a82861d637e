"""Tests for S02: Extract Frame step and its decoding engines."""

import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from frameshot.core.errors import DecodeError, EngineUnavailableError, FrameNotFoundError
from frameshot.steps.s02_extract_frame import _engine
from frameshot.steps.s02_extract_frame._engine import DecodingEngine, FfmpegEngine, get_engine
from frameshot.steps.s02_extract_frame._scratch import SCRATCH_PREFIX, scratch_workspace
from frameshot.steps.s02_extract_frame.config import ExtractFrameConfig
from frameshot.steps.s02_extract_frame.contracts import ExtractFrameInput, ExtractFrameOutput
from frameshot.steps.s02_extract_frame.step import ExtractFrameStep, extract_frame
from tests.conftest import WEBP_STUB, is_webp
from tests.test_steps.conftest import needs_ffmpeg


class CountingEngine(DecodingEngine):
    name = "counting"
    init_calls = 0

    def initialize(self):
        CountingEngine.init_calls += 1

    def grab_frame(self, video_path, frame_index, output_path, quality=80, timeout=None):
        if video_path.read_bytes() == b"bad":
            raise DecodeError("not a video")
        output_path.write_bytes(WEBP_STUB)


class TestExtractFrameContracts:
    def test_config_defaults(self):
        cfg = ExtractFrameConfig()
        assert cfg.engine == "ffmpeg"
        assert cfg.webp_quality == 80
        assert cfg.timeout is None

    def test_quality_bounds(self):
        with pytest.raises(ValueError):
            ExtractFrameConfig(webp_quality=101)

    def test_output_schema(self):
        schema = ExtractFrameOutput.model_json_schema()
        assert "data" in schema["properties"]
        assert "mime_type" in schema["properties"]

    def test_negative_frame_rejected(self):
        with pytest.raises(ValueError):
            ExtractFrameInput(video=b"x", frame_index=-1)


class TestEngineRegistry:
    def test_initialised_once(self):
        CountingEngine.init_calls = 0
        cfg = ExtractFrameConfig()
        with patch.object(_engine, "_create_engine", side_effect=lambda c: CountingEngine()):
            first = get_engine(cfg)
            second = get_engine(cfg)
        assert first is second
        assert CountingEngine.init_calls == 1

    def test_concurrent_callers_share_one_initialisation(self):
        init_calls = []
        started = threading.Event()
        release = threading.Event()

        class SlowEngine(CountingEngine):
            def initialize(self):
                started.set()
                release.wait(timeout=5)
                init_calls.append(threading.current_thread().name)

        cfg = ExtractFrameConfig()
        engines = []
        with patch.object(_engine, "_create_engine", side_effect=lambda c: SlowEngine()):
            threads = [threading.Thread(target=lambda: engines.append(get_engine(cfg))) for _ in range(8)]
            for t in threads:
                t.start()
            started.wait(timeout=5)
            release.set()
            for t in threads:
                t.join(timeout=5)

        assert len(engines) == 8
        assert len({id(e) for e in engines}) == 1
        assert len(init_calls) == 1

    def test_failed_initialisation_is_retried(self):
        attempts = []

        class FlakyEngine(CountingEngine):
            def initialize(self):
                attempts.append(1)
                if len(attempts) == 1:
                    raise EngineUnavailableError("not yet")

        with patch.object(_engine, "_create_engine", side_effect=lambda c: FlakyEngine()):
            with pytest.raises(EngineUnavailableError):
                get_engine(ExtractFrameConfig())
            engine = get_engine(ExtractFrameConfig())
        assert isinstance(engine, FlakyEngine)
        assert len(attempts) == 2

    def test_missing_ffmpeg_binary(self):
        cfg = ExtractFrameConfig(ffmpeg_binary="definitely-not-ffmpeg-binary")
        with pytest.raises(EngineUnavailableError):
            get_engine(cfg)

    def test_ffmpeg_command_selects_frame(self, tmp_path: Path):
        engine = FfmpegEngine()
        cmd = engine.build_command(tmp_path / "in.mp4", 42, tmp_path / "out.webp", 75)
        assert "select=eq(n\\,42)" in cmd
        assert cmd[cmd.index("-frames:v") + 1] == "1"
        assert cmd[cmd.index("-quality") + 1] == "75"
        assert cmd[-1] == str(tmp_path / "out.webp")


class TestScratchWorkspace:
    def test_removed_on_success(self, tmp_path: Path):
        with scratch_workspace(tmp_path) as ws:
            f = ws.new_file(".mp4")
            f.write_bytes(b"x")
            assert ws.path.name.startswith(SCRATCH_PREFIX)
        assert not ws.path.exists()

    def test_removed_on_error(self, tmp_path: Path):
        with pytest.raises(DecodeError):
            with scratch_workspace(tmp_path) as ws:
                ws.new_file(".mp4").write_bytes(b"x")
                raise DecodeError("boom")
        assert list(tmp_path.iterdir()) == []

    def test_unique_names(self, tmp_path: Path):
        with scratch_workspace(tmp_path) as a, scratch_workspace(tmp_path) as b:
            assert a.path != b.path
            assert a.new_file(".webp") != a.new_file(".webp")


class TestExtractFrameStep:
    def test_validate_empty_video(self):
        step = ExtractFrameStep()
        assert step.validate_inputs(ExtractFrameInput(video=b"", frame_index=0)) is False
        with pytest.raises(DecodeError):
            step.execute(ExtractFrameInput(video=b"", frame_index=0))

    def test_runs_through_engine(self, tmp_path: Path):
        cfg = ExtractFrameConfig(scratch_dir=tmp_path / "scratch")
        with patch("frameshot.steps.s02_extract_frame.step.get_engine", return_value=CountingEngine()):
            output = ExtractFrameStep(cfg).execute(ExtractFrameInput(video=b"video", frame_index=2))
        assert output.data == WEBP_STUB
        assert output.frame_index == 2
        assert output.engine == "counting"
        assert list((tmp_path / "scratch").iterdir()) == []

    def test_repeated_failures_leave_no_scratch(self, tmp_path: Path):
        cfg = ExtractFrameConfig(scratch_dir=tmp_path / "scratch")
        step = ExtractFrameStep(cfg)
        with patch("frameshot.steps.s02_extract_frame.step.get_engine", return_value=CountingEngine()):
            for _ in range(5):
                with pytest.raises(DecodeError):
                    step.execute(ExtractFrameInput(video=b"bad", frame_index=0))
        assert list((tmp_path / "scratch").iterdir()) == []


class TestOpenCVEngine:
    @pytest.fixture
    def cfg(self, tmp_path: Path) -> ExtractFrameConfig:
        pytest.importorskip("cv2")
        return ExtractFrameConfig(engine="opencv", scratch_dir=tmp_path / "scratch")

    def test_extracts_webp(self, sample_video: bytes, cfg: ExtractFrameConfig):
        data = extract_frame(sample_video, 5, cfg)
        assert is_webp(data)

    def test_last_frame(self, sample_video: bytes, cfg: ExtractFrameConfig):
        assert is_webp(extract_frame(sample_video, 11, cfg))

    def test_frame_out_of_range(self, sample_video: bytes, cfg: ExtractFrameConfig):
        with pytest.raises(FrameNotFoundError):
            extract_frame(sample_video, 500, cfg)
        assert list(cfg.scratch_dir.iterdir()) == []

    def test_invalid_video(self, cfg: ExtractFrameConfig):
        with pytest.raises(DecodeError):
            extract_frame(b"this is not a video at all", 0, cfg)
        assert list(cfg.scratch_dir.iterdir()) == []


@needs_ffmpeg
class TestFfmpegEngine:
    @pytest.fixture
    def cfg(self, tmp_path: Path) -> ExtractFrameConfig:
        return ExtractFrameConfig(engine="ffmpeg", scratch_dir=tmp_path / "scratch")

    def test_extracts_webp(self, sample_video: bytes, cfg: ExtractFrameConfig):
        assert is_webp(extract_frame(sample_video, 3, cfg))

    def test_frame_out_of_range(self, sample_video: bytes, cfg: ExtractFrameConfig):
        with pytest.raises(FrameNotFoundError):
            extract_frame(sample_video, 500, cfg)
        assert list(cfg.scratch_dir.iterdir()) == []

    def test_invalid_video(self, cfg: ExtractFrameConfig):
        with pytest.raises(DecodeError):
            extract_frame(b"this is not a video at all", 0, cfg)
        assert list(cfg.scratch_dir.iterdir()) == []
