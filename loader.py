from typing import Optional

from aiogram import Bot, Dispatcher
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.client.telegram import TelegramAPIServer
from aiogram.fsm.storage.memory import MemoryStorage

from config.secrets import BOT_TOKEN

# Initialize memory storage for the dispatcher
storage = MemoryStorage()

# Initialize the dispatcher with the memory storage
dp = Dispatcher(storage=storage)


def create_bot(api_url: Optional[str] = None, token: Optional[str] = BOT_TOKEN) -> Bot:
    """Create the bot, pointed at a self-hosted Bot API server when api_url is given."""
    if api_url:
        session = AiohttpSession(api=TelegramAPIServer.from_base(api_url))
        return Bot(token=token, session=session)
    return Bot(token=token)
