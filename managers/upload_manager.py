import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from aiogram import Bot
from aiogram.utils.media_group import MediaGroupBuilder

from managers.rate_limiter import FixedDelayRateLimiter, RateLimiter
from models.media_models import (
    BatchResult,
    MediaFile,
    MediaType,
    SendMode,
    SendRequest,
    UnknownFilePolicy,
    UploadProgress,
)
from services.base_service import FrameExtractor, ProbeTool
from utils.caption import caption_for_position, compose_caption
from utils.classify import ALBUM_TYPES, classify, is_sendable
from utils.error_handler import ErrorCode, UploadError, handle_upload_error
from utils.thumbnail import generate_thumbnail
from utils.video_metadata import get_video_metadata

logger = logging.getLogger(__name__)

# Bot API accepts at most 10 items per sendMediaGroup
MEDIA_GROUP_LIMIT = 10


class UploadManager:
    def __init__(
        self,
        bot: Bot,
        chat_id: Union[int, str],
        static_caption: str = "",
        probe: Optional[ProbeTool] = None,
        extractor: Optional[FrameExtractor] = None,
        rate_limiter: Optional[RateLimiter] = None,
        unknown_policy: UnknownFilePolicy = UnknownFilePolicy.SKIP,
        progress: Optional[UploadProgress] = None,
        temp_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        self.bot = bot
        self.chat_id = chat_id
        self.static_caption = static_caption
        self.probe = probe
        self.extractor = extractor
        self.rate_limiter = rate_limiter or FixedDelayRateLimiter()
        self.unknown_policy = unknown_policy
        self.progress = progress or UploadProgress()
        self.temp_dir = temp_dir

    def classify_files(self, paths: Iterable[Union[str, Path]]) -> List[MediaFile]:
        """Classify paths in order, dropping the ones that can't be sent."""
        media_files = []
        for path in paths:
            path = Path(path)
            kind = classify(path, self.unknown_policy)
            if not is_sendable(kind):
                logger.warning(f"Skipping unsupported file type: {path}")
                continue
            media_files.append(MediaFile(path=path, kind=kind))
        return media_files

    async def build_request(self, media_file: MediaFile) -> SendRequest:
        """Turn a captioned file into a request, probing videos on the way."""
        caption = media_file.caption or None
        if media_file.kind != MediaType.VIDEO:
            return SendRequest(media_file=media_file, caption=caption)

        thumbnail = await generate_thumbnail(media_file.path, self.extractor, self.temp_dir)
        metadata = await get_video_metadata(media_file.path, self.probe)
        return SendRequest(
            media_file=media_file,
            caption=caption,
            metadata=metadata,
            thumbnail=thumbnail,
        )

    async def send_request(self, request: SendRequest) -> None:
        media = request.input_file()
        caption = request.caption

        if request.kind == MediaType.PHOTO:
            await self.bot.send_photo(self.chat_id, photo=media, caption=caption)
        elif request.kind == MediaType.VIDEO:
            await self.bot.send_video(
                self.chat_id,
                video=media,
                caption=caption,
                supports_streaming=True,
                **request.video_kwargs(),
            )
        elif request.kind == MediaType.AUDIO:
            await self.bot.send_audio(self.chat_id, audio=media, caption=caption)
        elif request.kind == MediaType.ANIMATION:
            await self.bot.send_animation(self.chat_id, animation=media, caption=caption)
        elif request.kind == MediaType.DOCUMENT:
            await self.bot.send_document(self.chat_id, document=media, caption=caption)
        else:
            raise ValueError(f"Can't send {request.path} as {request.kind.value}")

    async def dispatch(self, paths: Iterable[Union[str, Path]], mode: SendMode) -> BatchResult:
        if mode == SendMode.GROUP:
            return await self.send_group(paths)
        return await self.send_sequential(paths)

    async def send_sequential(self, paths: Iterable[Union[str, Path]]) -> BatchResult:
        """Send files one by one in order, a failed file doesn't stop the rest."""
        media_files = self.classify_files(paths)
        self._require_media(media_files)
        self._start(len(media_files))

        result = BatchResult()
        for media_file in media_files:
            caption = await compose_caption(media_file.path, self.static_caption)
            await self._send_single(media_file.with_caption(caption), result)
            await self.rate_limiter.wait()

        self._finish(result)
        return result

    async def send_group(self, paths: Iterable[Union[str, Path]]) -> BatchResult:
        """
        Send photos and videos as albums, then the other files one by one.

        Only the first item of the batch carries the caption. A failed album
        fails everything that hasn't been sent yet.
        """
        media_files = self.classify_files(paths)
        self._require_media(media_files)
        self._start(len(media_files))

        album = [m for m in media_files if m.kind in ALBUM_TYPES]
        singles = [m for m in media_files if m.kind not in ALBUM_TYPES]
        ordered = album + singles

        caption = await compose_caption(ordered[0].path, self.static_caption)
        captioned = [
            media_file.with_caption(caption_for_position(index, caption) or "")
            for index, media_file in enumerate(ordered)
        ]

        result = BatchResult()
        album_sent = await self._send_albums(captioned[: len(album)], captioned[len(album) :], result)

        if album_sent:
            for index, media_file in enumerate(captioned[len(album) :]):
                if album or index > 0:
                    await self.rate_limiter.wait()
                await self._send_single(media_file, result)

        self._finish(result)
        return result

    async def _send_single(self, media_file: MediaFile, result: BatchResult) -> None:
        self.progress.current = media_file.path
        logger.info(f"Processing file: {media_file.path}")

        try:
            request = await self.build_request(media_file)
            await self.send_request(request)
        except Exception as e:
            result.record_failed(media_file.path, str(e))
            self.progress.failed += 1
            await handle_upload_error(
                self.bot,
                self.chat_id,
                UploadError(
                    code=ErrorCode.SEND_FAILED,
                    path=media_file.path,
                    message=str(e),
                    critical=True,
                    is_logged=True,
                ),
            )
        else:
            result.record_sent(media_file.path)
            self.progress.sent += 1
            logger.info(f"Sent {media_file.path}")

    async def _send_albums(
        self, album: List[MediaFile], pending: List[MediaFile], result: BatchResult
    ) -> bool:
        """Send album chunks, returns False once a chunk fails."""
        requests: List[SendRequest] = []
        for media_file in album:
            self.progress.current = media_file.path
            logger.info(f"Processing file: {media_file.path}")
            requests.append(await self.build_request(media_file))

        for start in range(0, len(requests), MEDIA_GROUP_LIMIT):
            if start > 0:
                await self.rate_limiter.wait()

            chunk = requests[start : start + MEDIA_GROUP_LIMIT]
            media_group = MediaGroupBuilder()
            for request in chunk:
                media_group.add(**request.album_item(request.caption))

            logger.info(f"Sending {len(chunk)} media items...")
            try:
                await self.bot.send_media_group(self.chat_id, media=media_group.build())
            except Exception as e:
                # The rest of the batch is dropped, albums are all or nothing
                dropped = [r.path for r in requests[start:]] + [m.path for m in pending]
                for path in dropped:
                    result.record_failed(path, str(e))
                self.progress.failed += len(dropped)
                await handle_upload_error(
                    self.bot,
                    self.chat_id,
                    UploadError(
                        code=ErrorCode.GROUP_SEND_FAILED,
                        path=chunk[0].path,
                        message=str(e),
                        critical=True,
                        is_logged=True,
                    ),
                )
                return False

            for request in chunk:
                result.record_sent(request.path)
            self.progress.sent += len(chunk)
            logger.info("Successfully sent media group!")

        return True

    def _require_media(self, media_files: List[MediaFile]) -> None:
        if not media_files:
            raise UploadError(
                code=ErrorCode.NO_MEDIA,
                message="No valid media found to send.",
                is_logged=True,
            )

    def _start(self, total: int) -> None:
        self.progress.total = total
        self.progress.sent = 0
        self.progress.failed = 0
        self.progress.finished = False

    def _finish(self, result: BatchResult) -> None:
        self.progress.current = None
        self.progress.finished = True
        logger.info(f"Batch done: {len(result.sent)} sent, {len(result.failed)} failed")
