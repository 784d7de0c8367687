import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

from models.media_models import VideoMetadata
from services.base_service import ProbeTool
from services.ffprobe import FFprobeTool

logger = logging.getLogger(__name__)

_probe_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="probe")


def _probe(probe: ProbeTool, path: Path) -> VideoMetadata:
    width, height = probe.probe_dimensions(path)
    duration = probe.probe_duration(path)
    return VideoMetadata(width=width, height=height, duration=duration)


async def get_video_metadata(
    path: Union[str, Path], probe: Optional[ProbeTool] = None
) -> VideoMetadata:
    """
    Probe width, height and duration of a video.

    Never raises: whatever could not be determined is left as None.

    :param path: Path to the video file.
    :param probe: Probe tool to use, ffprobe by default.
    :return: VideoMetadata with the fields that were found.
    """
    path = Path(path)
    if probe is None:
        probe = FFprobeTool()

    loop = asyncio.get_running_loop()
    try:
        metadata = await loop.run_in_executor(_probe_executor, _probe, probe, path)
    except Exception as e:
        logger.warning(f"Probing {path} failed: {e}")
        return VideoMetadata()

    if metadata.is_empty:
        logger.warning(f"No metadata found for {path}")
    else:
        logger.info(
            f"Metadata for {path.name}: {metadata.width}x{metadata.height}, {metadata.duration}s"
        )
    return metadata
