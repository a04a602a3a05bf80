import asyncio
import pytest

from conftest import PATHS
from roster.services.collection_cache import SkillsCache, UsersCache
from roster.services.status import StatusBoard

pytestmark = pytest.mark.asyncio


async def settle():
    for _ in range(5):
        await asyncio.sleep(0)


async def test_cache_starts_loading_and_fills_from_store(store):
    users = UsersCache()
    assert users.loading is True
    assert users.records == []

    users.open(store, PATHS.users)
    await settle()

    assert users.loading is False
    assert users.error is None
    # Admin, Manager, Engineers by name, Viewer, then the unrecognised role
    assert [u["id"] for u in users.records] == ["admin-1", "mgr-1", "eng-2", "eng-1", "view-1", "odd-1"]
    users.close()


async def test_snapshots_replace_records_and_notify_listeners(store):
    skills = SkillsCache()
    seen = []
    unsubscribe = skills.subscribe(lambda cache: seen.append([s["name"] for s in cache.records]))

    skills.open(store, PATHS.skills)
    await settle()
    await store.create_document(PATHS.skills, {"name": "SQL"})

    assert seen == [["Python", "Networking"], ["Python", "Networking", "SQL"]]

    unsubscribe()
    await store.delete_document(PATHS.skills, "skill-py")
    assert len(seen) == 2
    assert [s["name"] for s in skills.records] == ["Networking", "SQL"]
    skills.close()


async def test_subscription_failure_sets_error(store):
    store.fail_subscriptions = RuntimeError("permission denied")
    users = UsersCache()
    users.open(store, PATHS.users)
    await settle()

    assert users.loading is False
    assert users.error == "Failed to load users."
    assert users.records == []


async def test_broken_listener_does_not_stop_others():
    skills = SkillsCache()
    calls = []

    def broken(cache):
        raise ValueError("boom")

    async def working(cache):
        calls.append(len(cache.records))

    skills.subscribe(broken)
    skills.subscribe(working)
    await skills.apply_snapshot([{"id": "s1", "name": "Python"}])

    assert calls == [1]


async def test_status_message_clears_itself():
    status = StatusBoard(clear_after=0.01)
    status.post("u1", "Skill added successfully!")
    assert status.get("u1") == "Skill added successfully!"

    await asyncio.sleep(0.05)
    assert status.get("u1") is None


async def test_newer_status_message_replaces_older():
    status = StatusBoard(clear_after=0.05)
    status.post("u1", "first")
    await asyncio.sleep(0.03)
    status.post("u1", "second")
    await asyncio.sleep(0.03)
    assert status.get("u1") == "second"
    status.clear_all()
