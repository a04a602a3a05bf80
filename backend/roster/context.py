import logging
from typing import Optional

from roster.config import CollectionPaths, Settings
from roster.db import create_store
from roster.services.actions import RosterActions
from roster.services.collection_cache import CollectionCache, SkillsCache, UsersCache
from roster.services.identity import IdentityProvider
from roster.services.session import SessionProvider
from roster.services.status import StatusBoard
from roster.services.token_cleanup import TokenCleanupService
from roster.services.token_service import TokenService
from roster.utils.ws_manager import ConnectionManager

logger = logging.getLogger(__name__)


class RosterContext:
    """Everything the routes share: store, live caches, tokens and status.

    Built once at process start and handed to whoever needs it.  ``init``
    opens the two collection subscriptions, ``teardown`` closes them.
    """

    def __init__(self, settings: Settings, store=None):
        self.settings = settings
        self.paths = CollectionPaths(settings.app_id)
        self.store = store if store is not None else create_store(settings)
        self.tokens = TokenService(settings.secret_key, settings.session_token_expire_minutes)
        self.users = UsersCache()
        self.skills = SkillsCache()
        self.status = StatusBoard(settings.status_clear_seconds)
        self.actions = RosterActions(self.store, self.paths, self.status)
        self.connections = ConnectionManager()
        self.token_cleanup = TokenCleanupService(self.tokens)
        self._listener_handles = []

    async def init(self):
        self.connections.start()
        await self.token_cleanup.start()
        self._listener_handles = [
            self.users.subscribe(self._broadcast_snapshot),
            self.skills.subscribe(self._broadcast_snapshot),
        ]
        self.users.open(self.store, self.paths.users)
        self.skills.open(self.store, self.paths.skills)
        logger.info(f"Roster context initialised for app {self.paths.app_id}")

    async def teardown(self):
        self.users.close()
        self.skills.close()
        for unsubscribe in self._listener_handles:
            unsubscribe()
        self._listener_handles = []
        await self.connections.stop()
        await self.token_cleanup.stop()
        self.status.clear_all()
        self.store.close()
        logger.info("Roster context torn down")

    def session_provider(self) -> SessionProvider:
        """A fresh identity handle and session tracker for one client."""
        return SessionProvider(IdentityProvider(self.tokens), self.store, self.paths)

    @property
    def loading(self) -> bool:
        return self.users.loading or self.skills.loading

    @property
    def error(self) -> Optional[str]:
        return self.users.error or self.skills.error

    @staticmethod
    def snapshot_message(cache: CollectionCache) -> dict:
        return {
            "type": "snapshot",
            "collection": cache.name,
            "loading": cache.loading,
            "error": cache.error,
            "items": cache.records,
        }

    async def _broadcast_snapshot(self, cache: CollectionCache):
        await self.connections.broadcast(self.snapshot_message(cache))
