from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import List, Optional

from aiogram import types
from aiogram.enums import InputMediaType


class MediaType(Enum):
    PHOTO = "photo"
    VIDEO = "video"
    ANIMATION = "animation"
    AUDIO = "audio"
    DOCUMENT = "document"
    UNSUPPORTED = "unsupported"


class UnknownFilePolicy(Enum):
    SKIP = "skip"
    DOCUMENT = "document"


class SendMode(Enum):
    GROUP = "group"
    SEQUENTIAL = "sequential"


class OutcomeStatus(Enum):
    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True)
class MediaFile:
    path: Path
    kind: MediaType
    caption: str = ""

    def with_caption(self, caption: str) -> "MediaFile":
        return replace(self, caption=caption)


@dataclass(frozen=True)
class VideoMetadata:
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.width is None and self.height is None and self.duration is None


@dataclass(frozen=True)
class Thumbnail:
    data: bytes
    filename: str = "thumb.jpg"

    def as_input_file(self) -> types.BufferedInputFile:
        return types.BufferedInputFile(self.data, filename=self.filename)


@dataclass
class SendRequest:
    """A single item ready to be handed to the Bot API."""

    media_file: MediaFile
    caption: Optional[str] = None
    metadata: Optional[VideoMetadata] = None
    thumbnail: Optional[Thumbnail] = None

    @property
    def kind(self) -> MediaType:
        return self.media_file.kind

    @property
    def path(self) -> Path:
        return self.media_file.path

    def input_file(self) -> types.FSInputFile:
        return types.FSInputFile(self.path)

    def video_kwargs(self) -> dict:
        """Optional video attributes, only the ones that are present."""
        kwargs = {}
        if self.thumbnail is not None:
            kwargs["thumbnail"] = self.thumbnail.as_input_file()
        if self.metadata is not None:
            if self.metadata.width is not None:
                kwargs["width"] = self.metadata.width
            if self.metadata.height is not None:
                kwargs["height"] = self.metadata.height
            if self.metadata.duration is not None:
                kwargs["duration"] = self.metadata.duration
        return kwargs

    def album_item(self, caption: Optional[str] = None) -> dict:
        """Keyword arguments for ``MediaGroupBuilder.add``."""
        if self.kind == MediaType.PHOTO:
            return {
                "type": InputMediaType.PHOTO,
                "media": self.input_file(),
                "caption": caption,
            }
        if self.kind == MediaType.VIDEO:
            return {
                "type": InputMediaType.VIDEO,
                "media": self.input_file(),
                "caption": caption,
                "supports_streaming": True,
                **self.video_kwargs(),
            }
        raise ValueError(f"{self.kind.value} can't be part of an album")


@dataclass(frozen=True)
class ItemOutcome:
    path: Path
    status: OutcomeStatus
    reason: Optional[str] = None


@dataclass
class BatchResult:
    outcomes: List[ItemOutcome] = field(default_factory=list)

    def record_sent(self, path: Path) -> None:
        self.outcomes.append(ItemOutcome(path=path, status=OutcomeStatus.SENT))

    def record_failed(self, path: Path, reason: str) -> None:
        self.outcomes.append(
            ItemOutcome(path=path, status=OutcomeStatus.FAILED, reason=reason)
        )

    @property
    def sent(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.SENT]

    @property
    def failed(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.FAILED]


@dataclass
class UploadProgress:
    total: int = 0
    sent: int = 0
    failed: int = 0
    current: Optional[Path] = None
    finished: bool = False

    def describe(self) -> str:
        text = f"Uploaded {self.sent}/{self.total}, failed {self.failed}"
        if self.finished:
            return f"{text}. Done."
        if self.current is not None:
            return f"{text}. Now sending: {self.current.name}"
        return text
