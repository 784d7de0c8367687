import logging
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiofiles.os

logger = logging.getLogger(__name__)

CAPTION_EXTENSION = ".txt"


def sidecar_path(path: Union[str, Path]) -> Path:
    return Path(path).with_suffix(CAPTION_EXTENSION)


async def read_text(path: Union[str, Path]) -> str:
    """Full contents of a text file, or an empty string if it can't be read."""
    if not await aiofiles.os.path.isfile(path):
        return ""
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            return await f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read caption file {path}: {e}")
        return ""


async def read_sidecar(path: Union[str, Path]) -> str:
    caption_file = sidecar_path(path)
    if caption_file == Path(path):
        return ""
    return await read_text(caption_file)


async def compose_caption(path: Union[str, Path], static_caption: str) -> str:
    """Sidecar caption of ``path`` followed by the static caption, no separator."""
    return await read_sidecar(path) + static_caption


async def load_static_caption(path: Optional[Union[str, Path]]) -> str:
    if not path:
        return ""
    caption = await read_text(path)
    if caption:
        logger.info(f"Loaded static caption from {path}")
    return caption


def caption_for_position(index: int, caption: str) -> Optional[str]:
    """Albums carry a caption only on their first item."""
    if index != 0 or not caption:
        return None
    return caption
