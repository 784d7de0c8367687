from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple


class ProbeTool(ABC):
    @abstractmethod
    def probe_dimensions(self, path: Path) -> Tuple[Optional[int], Optional[int]]:
        """Returns (width, height) of the first video stream, None for anything unknown."""
        pass

    @abstractmethod
    def probe_duration(self, path: Path) -> Optional[int]:
        """Returns container duration in whole seconds or None."""
        pass


class FrameExtractor(ABC):
    @abstractmethod
    def extract_frame(self, video_path: Path, output_path: Path) -> bool:
        """Writes a single frame of ``video_path`` to ``output_path``.

        Returns True only when the frame was written.
        """
        pass
