# tests/conftest.py
import asyncio
import copy
import os
import time
import pytest
from fastapi.testclient import TestClient

# Set environment variables for testing
os.environ["SECRET_KEY"] = "testing_secret_key_for_development_only"
os.environ["APP_ID"] = "test-app"
os.environ["STATUS_CLEAR_SECONDS"] = "3"

from roster.config import Settings, CollectionPaths
from roster.db import DocumentNotFound
from roster.utils.callbacks import emit
from main import create_app

PATHS = CollectionPaths("test-app")


class FakeStore:
    """In-memory stand-in for the Mongo document store.

    Every successful write re-delivers the full collection to its
    subscribers before returning, so caches are current by the time a
    request finishes.
    """

    def __init__(self):
        self.collections = {}
        self.writes = []
        self.fail_writes = None
        self.fail_subscriptions = None
        self.closed = False
        self._subscribers = {}
        self._counter = 0

    def seed(self, path, doc_id, data):
        self.collections.setdefault(path, {})[doc_id] = copy.deepcopy(data)

    def records(self, path):
        return [
            {**copy.deepcopy(data), "id": doc_id}
            for doc_id, data in self.collections.get(path, {}).items()
        ]

    def writes_to(self, path):
        return [w for w in self.writes if w[1] == path]

    async def _write(self, op, path, doc_id, data=None):
        if self.fail_writes is not None:
            raise self.fail_writes
        self.writes.append((op, path, doc_id, copy.deepcopy(data)))
        for on_snapshot in list(self._subscribers.get(path, [])):
            await emit(on_snapshot, self.records(path))

    async def get_document(self, path, doc_id):
        data = self.collections.get(path, {}).get(doc_id)
        if data is None:
            return None
        return {**copy.deepcopy(data), "id": doc_id}

    async def create_document(self, path, data):
        if self.fail_writes is not None:
            raise self.fail_writes
        self._counter += 1
        doc_id = f"doc-{self._counter}"
        self.seed(path, doc_id, {k: v for k, v in data.items() if k != "id"})
        await self._write("create", path, doc_id, data)
        return doc_id

    async def set_document(self, path, doc_id, data):
        if self.fail_writes is not None:
            raise self.fail_writes
        self.seed(path, doc_id, data)
        await self._write("set", path, doc_id, data)

    async def update_document(self, path, doc_id, partial):
        if self.fail_writes is not None:
            raise self.fail_writes
        if doc_id not in self.collections.get(path, {}):
            raise DocumentNotFound(path, doc_id)
        self.collections[path][doc_id].update(copy.deepcopy(partial))
        await self._write("update", path, doc_id, partial)

    async def delete_document(self, path, doc_id):
        if self.fail_writes is not None:
            raise self.fail_writes
        self.collections.get(path, {}).pop(doc_id, None)
        await self._write("delete", path, doc_id)

    def subscribe_to_collection(self, path, on_snapshot, on_error):
        self._subscribers.setdefault(path, []).append(on_snapshot)
        if self.fail_subscriptions is not None:
            task = asyncio.get_running_loop().create_task(emit(on_error, self.fail_subscriptions))
        else:
            task = asyncio.get_running_loop().create_task(emit(on_snapshot, self.records(path)))

        def unsubscribe():
            task.cancel()
            if on_snapshot in self._subscribers.get(path, []):
                self._subscribers[path].remove(on_snapshot)

        return unsubscribe

    async def ping(self):
        return True

    def close(self):
        self.closed = True


def make_user(name, role, **fields):
    user = {
        "name": name,
        "email": f"{name.lower().replace(' ', '.')}@example.com",
        "role": role,
        "managerId": None,
        "workingHours": "9 AM - 5 PM",
        "shiftPattern": "Day Shift",
        "vacationDates": [],
        "skills": [],
        "srThreshold": 0,
        "currentSrCount": 0,
    }
    user.update(fields)
    return user


@pytest.fixture
def paths():
    return PATHS


@pytest.fixture
def store():
    fake = FakeStore()
    fake.seed(PATHS.skills, "skill-py", {"name": "Python"})
    fake.seed(PATHS.skills, "skill-net", {"name": "Networking"})
    fake.seed(PATHS.users, "admin-1", make_user("Ada Admin", "Admin"))
    fake.seed(PATHS.users, "mgr-1", make_user("Mona Manager", "Manager"))
    fake.seed(PATHS.users, "eng-1", make_user(
        "Eli Engineer", "Engineer", managerId="mgr-1", srThreshold=2, currentSrCount=2,
        skills=["skill-py", "skill-gone"], vacationDates=["2024-03-01", "2024-05-10"],
    ))
    fake.seed(PATHS.users, "eng-2", make_user("Bea Engineer", "Engineer", managerId="mgr-2"))
    fake.seed(PATHS.users, "view-1", make_user("Vic Viewer", "Viewer"))
    fake.seed(PATHS.users, "odd-1", make_user("Cal Contractor", "Contractor"))
    return fake


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def client(settings, store):
    app = create_app(settings, store)
    with TestClient(app) as c:
        context = app.state.roster
        # the first snapshots are delivered by tasks started at startup
        for _ in range(100):
            if not context.loading:
                break
            time.sleep(0.01)
        c.context = context
        yield c


@pytest.fixture
def auth_headers(client):
    def headers_for(uid):
        token = client.context.tokens.create_session_token(uid)
        return {"Authorization": f"Bearer {token}"}
    return headers_for
