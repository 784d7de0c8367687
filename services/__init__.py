from .base_service import FrameExtractor, ProbeTool
from .ffmpeg import FFmpegFrameExtractor
from .ffprobe import FFprobeTool

__all__ = [
    "FrameExtractor",
    "ProbeTool",
    "FFmpegFrameExtractor",
    "FFprobeTool",
]
