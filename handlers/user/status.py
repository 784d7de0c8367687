from typing import Union

from aiogram import types
from aiogram.filters import Command

from loader import dp
from models.media_models import UploadProgress


def is_target_chat(chat: types.Chat, target_chat_id: Union[int, str]) -> bool:
    """Matches a numeric chat ID or an @username."""
    target = str(target_chat_id)
    if target == str(chat.id):
        return True
    return bool(chat.username) and target.lower() == f"@{chat.username}".lower()


@dp.message(Command("status"))
async def status_command(
    message: types.Message, progress: UploadProgress, target_chat_id: Union[int, str]
) -> None:
    # File names are private to the target chat
    if not is_target_chat(message.chat, target_chat_id):
        return
    await message.answer(progress.describe(), parse_mode=None)
