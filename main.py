import argparse
import asyncio
import contextlib
import importlib
import logging
import os
import pkgutil
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import List, Optional

from config import settings
from config.secrets import BOT_TOKEN
from managers.rate_limiter import FixedDelayRateLimiter
from managers.upload_manager import UploadManager
from models.media_models import SendMode, UnknownFilePolicy, UploadProgress
from services import FFmpegFrameExtractor, FFprobeTool
from utils import collect_files, load_static_caption
from utils.error_handler import ErrorCode, UploadError, handle_upload_error

logger = logging.getLogger()

LOG_FORMAT = "%(asctime)s - %(filename)s - %(funcName)s - %(lineno)d - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_dir: str) -> None:
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "logging.log")

    # File to log with rotation
    file_handler = TimedRotatingFileHandler(
        log_file, when="midnight", interval=1, backupCount=7, encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Console Handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.setLevel(logging.INFO)

    # Add logger handler to console and file
    if not logger.hasHandlers():
        logger.addHandler(file_handler)
        logger.addHandler(console_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload media files to a Telegram chat")
    parser.add_argument("files", nargs="+", help="Files or directories to upload")
    parser.add_argument("-c", "--chat-id", help="Target chat ID (overrides config/env)")
    parser.add_argument(
        "-s",
        "--static-caption-path",
        default=settings.STATIC_CAPTION_PATH,
        help="File with the caption appended to every item",
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=[mode.value for mode in SendMode],
        default=settings.SEND_MODE,
        help="Send everything as one album or item by item",
    )
    parser.add_argument(
        "-r", "--recursive", action="store_true", help="Scan directories recursively"
    )
    parser.add_argument(
        "--unknown-files",
        choices=[policy.value for policy in UnknownFilePolicy],
        default=settings.UNKNOWN_FILES,
        help="Skip files of unknown type or send them as documents",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=settings.SEND_DELAY,
        help="Seconds to wait between items in sequential mode",
    )
    parser.add_argument(
        "--listen",
        action="store_true",
        help="Answer /status commands while uploading",
    )
    return parser


def resolve_chat_id(cli_chat_id: Optional[str], configured_chat_id: Optional[str]) -> str:
    """Command line chat ID wins over config and environment."""
    chat_id = cli_chat_id or configured_chat_id
    if not chat_id:
        raise UploadError(
            code=ErrorCode.MISSING_CHAT_ID,
            message="pass --chat-id or set TELEGOY_CHAT_ID",
            is_logged=True,
        )
    return chat_id


def load_modules(plugin_packages, ignore_files=None):
    ignore_files = list(ignore_files or [])
    ignore_files.append("__init__")
    for plugin_package in plugin_packages:
        package = importlib.import_module(plugin_package)
        for _, name, is_pkg in pkgutil.iter_modules(package.__path__):
            if not is_pkg and name not in ignore_files:
                logger.info(f"Loading module: {plugin_package}.{name}")
                importlib.import_module(f"{plugin_package}.{name}")


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, upload the files and return the exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Defaults come from the environment, argparse doesn't check them against choices
    try:
        mode = SendMode(args.mode)
        unknown_policy = UnknownFilePolicy(args.unknown_files)
    except ValueError as e:
        parser.error(str(e))

    setup_logging(settings.LOG_DIR)

    try:
        chat_id = resolve_chat_id(args.chat_id, settings.CHAT_ID)
    except UploadError as e:
        await handle_upload_error(None, None, e)
        return 1

    if not BOT_TOKEN:
        logger.error("BOT_TOKEN is not set")
        return 1

    # Imported late, the dispatcher is only needed once config is valid
    from loader import create_bot, dp

    logger.info(f"Starting uploader. Target Chat: {chat_id}")
    bot = create_bot(settings.API_URL)
    progress = UploadProgress()
    polling = None

    try:
        manager = UploadManager(
            bot,
            chat_id,
            static_caption=await load_static_caption(args.static_caption_path),
            probe=FFprobeTool(settings.FFPROBE_BINARY, settings.TOOL_TIMEOUT),
            extractor=FFmpegFrameExtractor(settings.FFMPEG_BINARY, settings.TOOL_TIMEOUT),
            rate_limiter=FixedDelayRateLimiter(args.delay),
            unknown_policy=unknown_policy,
            progress=progress,
            temp_dir=settings.TEMP_DIR,
        )

        if args.listen:
            logger.info("Loading modules...")
            load_modules(["handlers.user"])
            dp["progress"] = progress
            dp["target_chat_id"] = chat_id
            await bot.delete_webhook(drop_pending_updates=True)
            polling = asyncio.create_task(
                dp.start_polling(bot, handle_signals=False, close_bot_session=False)
            )

        files = collect_files(args.files, recursive=args.recursive)
        result = await manager.dispatch(files, mode)
    except UploadError as e:
        await handle_upload_error(bot, chat_id, e)
        return 1
    finally:
        if polling is not None:
            polling.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await polling
        await bot.session.close()

    return 1 if result.failed else 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
