"""Tests for thumbnail generation and temp file cleanup."""

from __future__ import annotations

import asyncio
import subprocess
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from services.ffmpeg import FFmpegFrameExtractor
from utils.thumbnail import generate_thumbnail, temp_thumbnail_path

from conftest import FakeFrameExtractor


class TestGenerateThumbnail:
    @pytest.mark.asyncio
    async def test_resized_jpeg(self, tmp_path: Path) -> None:
        extractor = FakeFrameExtractor(size=(1280, 720))
        thumb = await generate_thumbnail(tmp_path / "v.mp4", extractor, temp_dir=tmp_path)

        assert thumb is not None
        assert thumb.filename == "thumb.jpg"
        with Image.open(BytesIO(thumb.data)) as img:
            assert img.format == "JPEG"
            assert img.size == (320, 180)

    @pytest.mark.asyncio
    async def test_portrait_keeps_aspect(self, tmp_path: Path) -> None:
        extractor = FakeFrameExtractor(size=(720, 1440))
        thumb = await generate_thumbnail(tmp_path / "v.mp4", extractor, temp_dir=tmp_path)

        assert thumb is not None
        with Image.open(BytesIO(thumb.data)) as img:
            assert img.size == (160, 320)

    @pytest.mark.asyncio
    async def test_small_frame_not_enlarged(self, tmp_path: Path) -> None:
        extractor = FakeFrameExtractor(size=(200, 100))
        thumb = await generate_thumbnail(tmp_path / "v.mp4", extractor, temp_dir=tmp_path)

        assert thumb is not None
        with Image.open(BytesIO(thumb.data)) as img:
            assert img.size == (200, 100)

    @pytest.mark.asyncio
    async def test_temp_file_removed_on_success(self, tmp_path: Path) -> None:
        extractor = FakeFrameExtractor()
        await generate_thumbnail(tmp_path / "v.mp4", extractor, temp_dir=tmp_path)

        assert len(extractor.outputs) == 1
        assert not extractor.outputs[0].exists()

    @pytest.mark.asyncio
    async def test_extractor_failure(self, tmp_path: Path) -> None:
        extractor = FakeFrameExtractor(succeed=False)
        thumb = await generate_thumbnail(tmp_path / "v.mp4", extractor, temp_dir=tmp_path)

        assert thumb is None
        assert not extractor.outputs[0].exists()

    @pytest.mark.asyncio
    async def test_undecodable_frame(self, tmp_path: Path) -> None:
        extractor = FakeFrameExtractor(payload=b"definitely not an image")
        thumb = await generate_thumbnail(tmp_path / "v.mp4", extractor, temp_dir=tmp_path)

        assert thumb is None
        assert not extractor.outputs[0].exists()

    @pytest.mark.asyncio
    async def test_extractor_that_raises(self, tmp_path: Path) -> None:
        class ExplodingExtractor(FakeFrameExtractor):
            def extract_frame(self, video_path, output_path):
                super().extract_frame(video_path, output_path)
                raise OSError("disk full")

        extractor = ExplodingExtractor()
        thumb = await generate_thumbnail(tmp_path / "v.mp4", extractor, temp_dir=tmp_path)

        assert thumb is None
        assert not extractor.outputs[0].exists()

    @pytest.mark.asyncio
    async def test_concurrent_calls_use_distinct_temp_files(self, tmp_path: Path) -> None:
        extractor = FakeFrameExtractor()
        thumbs = await asyncio.gather(
            *(generate_thumbnail(tmp_path / f"v{i}.mp4", extractor, temp_dir=tmp_path) for i in range(8))
        )

        assert all(t is not None for t in thumbs)
        assert len(set(extractor.outputs)) == 8
        assert list(tmp_path.iterdir()) == []


class TestTempThumbnailPath:
    def test_unique_and_in_dir(self, tmp_path: Path) -> None:
        paths = {temp_thumbnail_path(tmp_path) for _ in range(100)}
        assert len(paths) == 100
        assert all(p.parent == tmp_path and p.suffix == ".jpg" for p in paths)


class TestFFmpegFrameExtractor:
    def test_command(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            return subprocess.CompletedProcess(cmd, 0, stdout=None, stderr="")

        monkeypatch.setattr("services.ffmpeg.subprocess.run", fake_run)
        ok = FFmpegFrameExtractor().extract_frame(Path("in.mp4"), Path("out.jpg"))

        assert ok is True
        cmd = calls[0]
        assert cmd[0] == "ffmpeg"
        assert cmd[cmd.index("-i") + 1] == "in.mp4"
        assert cmd[cmd.index("-frames:v") + 1] == "1"
        assert cmd[cmd.index("-q:v") + 1] == "2"
        assert cmd[-1] == "out.jpg"

    def test_failure_exit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "services.ffmpeg.subprocess.run",
            lambda cmd, **kw: subprocess.CompletedProcess(cmd, 1, stdout=None, stderr="bad input"),
        )
        assert FFmpegFrameExtractor().extract_frame(Path("in.mp4"), Path("out.jpg")) is False

    def test_missing_binary(self, tmp_path: Path) -> None:
        extractor = FFmpegFrameExtractor(binary=str(tmp_path / "no-such-ffmpeg"))
        assert extractor.extract_frame(tmp_path / "in.mp4", tmp_path / "out.jpg") is False
