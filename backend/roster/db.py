import asyncio
import logging
from typing import Any, Callable, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from roster.utils.callbacks import emit

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "team_roster"

SnapshotCallback = Callable[[List[dict]], Any]
ErrorCallback = Callable[[Exception], Any]


class DocumentNotFound(Exception):
    def __init__(self, path: str, doc_id: str):
        super().__init__(f"No document to update: {path}/{doc_id}")
        self.path = path
        self.doc_id = doc_id


def to_record(doc: dict) -> dict:
    record = {k: v for k, v in doc.items() if k != "_id"}
    record["id"] = str(doc["_id"])
    return record


class MongoDocumentStore:
    """Document store reached through collection paths.

    A path such as ``artifacts/<appId>/public/data/users`` names the Mongo
    collection ``artifacts.<appId>.public.data.users``.  Records come back
    as plain dicts carrying their store id under ``id``.
    """

    def __init__(self, client: AsyncIOMotorClient, database_name: Optional[str] = None):
        self.client = client
        if database_name:
            self.db = client[database_name]
        else:
            self.db = client.get_default_database(DEFAULT_DATABASE)

    def _collection(self, path: str):
        return self.db[path.strip("/").replace("/", ".")]

    async def get_document(self, path: str, doc_id: str) -> Optional[dict]:
        doc = await self._collection(path).find_one({"_id": doc_id})
        if doc is None:
            return None
        return to_record(doc)

    async def create_document(self, path: str, data: dict) -> str:
        payload = {k: v for k, v in data.items() if k != "id"}
        doc_id = str(ObjectId())
        await self._collection(path).insert_one({"_id": doc_id, **payload})
        return doc_id

    async def set_document(self, path: str, doc_id: str, data: dict):
        payload = {k: v for k, v in data.items() if k != "id"}
        await self._collection(path).replace_one({"_id": doc_id}, payload, upsert=True)

    async def update_document(self, path: str, doc_id: str, partial: dict):
        payload = {k: v for k, v in partial.items() if k != "id"}
        res = await self._collection(path).update_one({"_id": doc_id}, {"$set": payload})
        if res.matched_count == 0:
            raise DocumentNotFound(path, doc_id)

    async def delete_document(self, path: str, doc_id: str):
        await self._collection(path).delete_one({"_id": doc_id})

    def subscribe_to_collection(
        self,
        path: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Callable[[], None]:
        """Deliver the whole collection now and again after every change.

        Returns the unsubscribe handle.  Must be called from a running
        event loop.
        """
        task = asyncio.create_task(self._watch(path, on_snapshot, on_error))

        def unsubscribe():
            task.cancel()

        return unsubscribe

    async def _snapshot(self, collection) -> List[dict]:
        docs = await collection.find({}).to_list(None)
        return [to_record(doc) for doc in docs]

    async def _watch(self, path: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback):
        collection = self._collection(path)
        try:
            # stream is opened before the first read so no change falls in between
            async with collection.watch() as stream:
                await emit(on_snapshot, await self._snapshot(collection))
                async for _change in stream:
                    await emit(on_snapshot, await self._snapshot(collection))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Subscription to {path} failed: {e}")
            await emit(on_error, e)

    async def ping(self):
        await self.db.command("ping")

    def close(self):
        self.client.close()


def create_store(settings) -> MongoDocumentStore:
    client = AsyncIOMotorClient(settings.mongodb_uri)
    return MongoDocumentStore(client, settings.database_name)
