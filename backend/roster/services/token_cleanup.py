import asyncio
import logging
from typing import Optional
from roster.services.token_service import TokenService
from roster.utils.logger import log_error

logger = logging.getLogger(__name__)


class TokenCleanupService:
    """Periodically drops sign-out revocations for tokens that have expired anyway."""

    def __init__(self, tokens: TokenService, interval_seconds: float = 3600):
        self.tokens = tokens
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep(self) -> int:
        try:
            removed = self.tokens.cleanup_expired_tokens()
        except Exception as e:
            log_error("Error during token cleanup", e)
            return 0
        if removed:
            logger.info(f"Forgot {removed} expired revocations")
        return removed

    async def start(self):
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Token cleanup started")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Token cleanup stopped")

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.sweep()
