from .caption import caption_for_position, compose_caption, load_static_caption
from .classify import classify, is_sendable
from .collect_files import collect_files
from .delete_files import delete_files
from .error_handler import ErrorCode, UploadError, handle_upload_error
from .thumbnail import generate_thumbnail
from .video_metadata import get_video_metadata

__all__ = [
    "caption_for_position",
    "compose_caption",
    "load_static_caption",
    "classify",
    "is_sendable",
    "collect_files",
    "delete_files",
    "ErrorCode",
    "UploadError",
    "handle_upload_error",
    "generate_thumbnail",
    "get_video_metadata",
]
