import asyncio
from abc import ABC, abstractmethod

# Telegram allows roughly one message per second to the same chat
DEFAULT_SEND_DELAY = 1.1


class RateLimiter(ABC):
    @abstractmethod
    async def wait(self) -> None:
        """Block until the next send is allowed."""
        pass


class FixedDelayRateLimiter(RateLimiter):
    def __init__(self, delay: float = DEFAULT_SEND_DELAY) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = delay

    async def wait(self) -> None:
        await asyncio.sleep(self.delay)
