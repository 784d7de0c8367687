"""Shared fakes for the uploader tests."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from managers.rate_limiter import RateLimiter
from services.base_service import FrameExtractor, ProbeTool

SEND_METHODS = (
    "send_photo",
    "send_video",
    "send_audio",
    "send_document",
    "send_animation",
    "send_media_group",
    "send_message",
)


class FakeProbe(ProbeTool):
    def __init__(
        self,
        width: Optional[int] = 1920,
        height: Optional[int] = 1080,
        duration: Optional[int] = 42,
    ) -> None:
        self.width = width
        self.height = height
        self.duration = duration
        self.calls: List[Path] = []

    def probe_dimensions(self, path: Path) -> Tuple[Optional[int], Optional[int]]:
        self.calls.append(path)
        return self.width, self.height

    def probe_duration(self, path: Path) -> Optional[int]:
        return self.duration


class FakeFrameExtractor(FrameExtractor):
    def __init__(
        self,
        size: Tuple[int, int] = (1280, 720),
        succeed: bool = True,
        payload: Optional[bytes] = None,
    ) -> None:
        self.size = size
        self.succeed = succeed
        self.payload = payload
        self.outputs: List[Path] = []

    def extract_frame(self, video_path: Path, output_path: Path) -> bool:
        self.outputs.append(output_path)
        if not self.succeed:
            return False
        if self.payload is not None:
            output_path.write_bytes(self.payload)
            return True
        Image.new("RGB", self.size, color=(200, 30, 30)).save(output_path, format="JPEG")
        return True


class RecordingRateLimiter(RateLimiter):
    def __init__(self, events: Optional[list] = None) -> None:
        self.calls = 0
        self.events = events

    async def wait(self) -> None:
        self.calls += 1
        if self.events is not None:
            self.events.append("wait")


def make_bot() -> MagicMock:
    bot = MagicMock()
    for name in SEND_METHODS:
        setattr(bot, name, AsyncMock(return_value=None))
    return bot


@pytest.fixture()
def bot() -> MagicMock:
    return make_bot()


@pytest.fixture()
def probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture()
def extractor() -> FakeFrameExtractor:
    return FakeFrameExtractor()


@pytest.fixture()
def limiter() -> RecordingRateLimiter:
    return RecordingRateLimiter()


@pytest.fixture()
def make_files(tmp_path: Path):
    """Create empty media files in tmp_path and return their paths in order."""

    def _make(*names: str) -> List[Path]:
        paths = []
        for name in names:
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"\x00")
            paths.append(path)
        return paths

    return _make
