import asyncio
import logging
import tempfile
import uuid
from concurrent.futures import ThreadPoolExecutor
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from models.media_models import Thumbnail
from services.base_service import FrameExtractor
from services.ffmpeg import FFmpegFrameExtractor
from utils.delete_files import delete_files

logger = logging.getLogger(__name__)

# Bot API limits thumbnails to 320px on the long edge
THUMBNAIL_SIZE = (320, 320)
THUMBNAIL_QUALITY = 100
THUMBNAIL_FILENAME = "thumb.jpg"

_image_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="thumbnail")


def temp_thumbnail_path(temp_dir: Optional[Union[str, Path]] = None) -> Path:
    directory = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
    return directory / f"temp_thumb_{uuid.uuid4().hex}.jpg"


def render_thumbnail(frame_path: Path, quality: int = THUMBNAIL_QUALITY) -> bytes:
    with Image.open(frame_path) as img:
        if img.mode != "RGB":
            img = img.convert("RGB")
        img.thumbnail(THUMBNAIL_SIZE, Image.LANCZOS)

        buffer = BytesIO()
        img.save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue()


def _extract_and_render(extractor: FrameExtractor, video_path: Path, frame_path: Path) -> Optional[bytes]:
    if not extractor.extract_frame(video_path, frame_path):
        return None
    return render_thumbnail(frame_path)


async def generate_thumbnail(
    video_path: Path,
    extractor: Optional[FrameExtractor] = None,
    temp_dir: Optional[Union[str, Path]] = None,
) -> Optional[Thumbnail]:
    """
    Build a JPEG thumbnail from the first frame of a video.

    The intermediate frame is written to a uniquely named temp file which
    is removed before returning, whatever the outcome.

    :param video_path: Path to the video file.
    :param extractor: Frame extractor to use, ffmpeg by default.
    :param temp_dir: Where to put the intermediate frame.
    :return: Thumbnail or None if anything went wrong.
    """
    if extractor is None:
        extractor = FFmpegFrameExtractor()

    frame_path = temp_thumbnail_path(temp_dir)
    loop = asyncio.get_running_loop()
    try:
        data = await loop.run_in_executor(
            _image_executor, _extract_and_render, extractor, video_path, frame_path
        )
    except Exception as e:
        logger.warning(f"Thumbnail for {video_path} failed: {e}")
        data = None
    finally:
        await delete_files([frame_path])

    if data is None:
        logger.warning(f"Sending {video_path} without thumbnail")
        return None
    return Thumbnail(data=data, filename=THUMBNAIL_FILENAME)
