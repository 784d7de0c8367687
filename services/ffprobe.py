import logging
import math
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from services.base_service import ProbeTool

logger = logging.getLogger(__name__)


def parse_positive_int(line: Optional[str]) -> Optional[int]:
    if line is None:
        return None
    try:
        value = int(line.strip())
    except ValueError:
        return None
    return value if value > 0 else None


def parse_dimensions(text: str) -> Tuple[Optional[int], Optional[int]]:
    lines = text.splitlines()
    width = parse_positive_int(lines[0] if len(lines) > 0 else None)
    height = parse_positive_int(lines[1] if len(lines) > 1 else None)
    return width, height


def parse_duration(text: str) -> Optional[int]:
    try:
        seconds = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds <= 0:
        return None

    # half-up, 2.5 -> 3
    rounded = int(math.floor(seconds + 0.5))
    return rounded if rounded > 0 else None


class FFprobeTool(ProbeTool):
    name = "ffprobe"

    def __init__(self, binary: str = "ffprobe", timeout: float = 60) -> None:
        self.binary = binary
        self.timeout = timeout

    def _run(self, args: List[str]) -> Optional[str]:
        cmd = [self.binary, "-v", "error", *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"{self.binary} could not be run: {e}")
            return None

        if result.returncode != 0:
            logger.warning(
                f"{self.binary} exited with {result.returncode}: {result.stderr.strip()}"
            )
            return None
        return result.stdout

    def probe_dimensions(self, path: Path) -> Tuple[Optional[int], Optional[int]]:
        output = self._run([
            "-select_streams",
            "v:0",
            "-show_entries",
            "stream=width,height",
            "-of",
            "default=noprint_wrappers=1:nokey=1",
            str(path),
        ])
        if output is None:
            return None, None
        return parse_dimensions(output)

    def probe_duration(self, path: Path) -> Optional[int]:
        output = self._run([
            "-show_entries",
            "format=duration",
            "-of",
            "default=noprint_wrappers=1:nokey=1",
            str(path),
        ])
        if output is None:
            return None
        return parse_duration(output)
