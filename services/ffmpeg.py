import logging
import subprocess
from pathlib import Path

from services.base_service import FrameExtractor

logger = logging.getLogger(__name__)


class FFmpegFrameExtractor(FrameExtractor):
    name = "ffmpeg"

    def __init__(
        self,
        binary: str = "ffmpeg",
        timeout: float = 60,
        seek: str = "00:00:00.000",
        quality: int = 2,
    ) -> None:
        self.binary = binary
        self.timeout = timeout
        self.seek = seek
        self.quality = quality

    def extract_frame(self, video_path: Path, output_path: Path) -> bool:
        cmd = [
            self.binary,
            "-hide_banner",
            "-v",
            "error",
            "-y",
            "-i",
            str(video_path),
            "-ss",
            self.seek,
            "-frames:v",
            "1",
            "-update",
            "1",
            "-q:v",
            str(self.quality),
            str(output_path),
        ]
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"{self.binary} could not be run for {video_path}: {e}")
            return False

        if result.returncode != 0:
            logger.warning(
                f"{self.binary} failed on {video_path} ({result.returncode}): {result.stderr.strip()}"
            )
            return False
        return True
