import logging
from typing import Callable, List, Optional

from roster.services.derivation import sort_users
from roster.utils.callbacks import emit
from roster.utils.logger import log_event, log_error, EventTypes

logger = logging.getLogger(__name__)


class CollectionCache:
    """Local copy of one remote collection, replaced wholesale on every snapshot.

    Only the subscription callbacks write to it.  Readers either look at
    ``records`` directly or register a listener with ``subscribe`` and are
    called with the cache after each snapshot or failure.
    """

    def __init__(self, name: str):
        self.name = name
        self.records: List[dict] = []
        self.loading = True
        self.error: Optional[str] = None
        self._listeners: List[Callable] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    def open(self, store, path: str):
        self._unsubscribe = store.subscribe_to_collection(path, self.apply_snapshot, self.fail)

    def close(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def order(self, records: List[dict]) -> List[dict]:
        return records

    async def apply_snapshot(self, records: List[dict]):
        self.records = self.order(list(records))
        self.loading = False
        await self._publish()

    async def fail(self, error: Exception):
        log_error(f"Error fetching {self.name}", error)
        log_event(EventTypes.SUBSCRIPTION_FAILED, {"collection": self.name})
        self.error = f"Failed to load {self.name}."
        self.loading = False
        await self._publish()

    def subscribe(self, listener: Callable) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _publish(self):
        for listener in list(self._listeners):
            try:
                await emit(listener, self)
            except Exception as e:
                # one broken consumer must not stop the others
                log_error(f"Listener on {self.name} failed", e)


class UsersCache(CollectionCache):
    def __init__(self):
        super().__init__("users")

    def order(self, records: List[dict]) -> List[dict]:
        return sort_users(records)


class SkillsCache(CollectionCache):
    def __init__(self):
        super().__init__("skills")
