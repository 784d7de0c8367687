import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    NO_MEDIA = "E001"
    MISSING_CHAT_ID = "E002"
    SEND_FAILED = "E003"
    GROUP_SEND_FAILED = "E004"
    INTERNAL_ERROR = "E500"


@dataclass
class UploadError(Exception):
    code: ErrorCode
    path: Optional[Path] = None  # File that failed
    message: Optional[str] = None  # Details, usually the API error
    critical: bool = False  # Notify the target chat?
    is_logged: bool = False  # Need to be logged?

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message or self.code.name}"


def describe_error(error: UploadError) -> str:
    """Human readable text for a failure notification."""
    match error.code:
        case ErrorCode.NO_MEDIA:
            text = "No valid media found to send."
        case ErrorCode.MISSING_CHAT_ID:
            text = "Chat ID not found in config, environment or command line."
        case ErrorCode.SEND_FAILED:
            text = f"Failed to send {error.path}"
        case ErrorCode.GROUP_SEND_FAILED:
            text = "Failed to send media group"
            if error.path is not None:
                text = f"{text} starting at {error.path}"
        case _:
            text = "Upload failed with an internal error"

    if error.message and error.code != ErrorCode.NO_MEDIA:
        text = f"{text}: {error.message}"
    return text


async def handle_upload_error(
    bot: Optional[Bot], chat_id: Optional[Union[int, str]], error: UploadError
) -> None:
    """Log an upload error and report it back to the chat when it is critical."""
    text = describe_error(error)

    if error.is_logged:
        logger.error(f"[{error.code.value}] {text}")

    if not error.critical or bot is None or chat_id is None:
        return

    try:
        await bot.send_message(chat_id, text, parse_mode=None)
    except (TelegramAPIError, OSError) as e:
        logger.error(f"Could not deliver failure notification: {e}")
