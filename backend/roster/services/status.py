import asyncio
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class StatusBoard:
    """One transient status message per user, cleared after a fixed delay."""

    def __init__(self, clear_after: float = 3.0):
        self.clear_after = clear_after
        self._messages: Dict[str, str] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}

    def post(self, user_id: str, message: str):
        self._messages[user_id] = message
        timer = self._timers.pop(user_id, None)
        if timer is not None:
            timer.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop to clear it later; the next post replaces it
            return
        self._timers[user_id] = loop.call_later(self.clear_after, self.clear, user_id)

    def get(self, user_id: str) -> Optional[str]:
        return self._messages.get(user_id)

    def clear(self, user_id: str):
        self._messages.pop(user_id, None)
        timer = self._timers.pop(user_id, None)
        if timer is not None:
            timer.cancel()

    def clear_all(self):
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._messages.clear()
