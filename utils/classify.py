from pathlib import Path
from typing import Union

from models.media_models import MediaType, UnknownFilePolicy

PHOTO_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp"})
VIDEO_EXTENSIONS = frozenset({"mp4", "mov", "avi", "mkv", "webm", "m4v"})
ANIMATION_EXTENSIONS = frozenset({"gif"})
AUDIO_EXTENSIONS = frozenset({"mp3", "m4a", "ogg", "oga", "flac", "wav", "opus", "aac"})

ALBUM_TYPES = (MediaType.PHOTO, MediaType.VIDEO)


def get_extension(path: Union[str, Path]) -> str:
    return Path(path).suffix[1:].lower()


def classify(
    path: Union[str, Path], unknown_policy: UnknownFilePolicy = UnknownFilePolicy.SKIP
) -> MediaType:
    """Map a file path to its media type by extension alone."""
    ext = get_extension(path)

    if ext in PHOTO_EXTENSIONS:
        return MediaType.PHOTO
    if ext in VIDEO_EXTENSIONS:
        return MediaType.VIDEO
    if ext in ANIMATION_EXTENSIONS:
        return MediaType.ANIMATION
    if ext in AUDIO_EXTENSIONS:
        return MediaType.AUDIO

    if unknown_policy == UnknownFilePolicy.DOCUMENT:
        return MediaType.DOCUMENT
    return MediaType.UNSUPPORTED


def is_sendable(kind: MediaType) -> bool:
    return kind != MediaType.UNSUPPORTED
