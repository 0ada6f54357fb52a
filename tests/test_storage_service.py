# tests/test_storage_service.py

from __future__ import annotations

import json
from dataclasses import replace
from datetime import timedelta

import pytest

from taskdesk.auth.auth_models import AuthError, AuthFailure, AuthSuccess, Provider
from taskdesk.notifications.notification_models import Notification, NotificationKind
from taskdesk.storage.kv_store import MemoryKeyValueStore
from taskdesk.storage.storage_service import (
    NOTIFICATIONS_STORAGE_KEY,
    TASKS_STORAGE_KEY,
    USERS_STORAGE_KEY,
    StorageService,
)
from taskdesk.tasks.task_models import Task, TaskStatus

from .conftest import NOW
from .fakes import ReadOnlyKeyValueStore


def make_task(task_id: str, user_id: str = "u1", **kw) -> Task:
    fields = dict(
        id=task_id,
        user_id=user_id,
        title=f"task {task_id}",
        description=None,
        deadline=NOW + timedelta(days=2),
        created_at=NOW,
    )
    fields.update(kw)
    return Task(**fields)


def make_notification(nid: str, task_id: str = "t1", kind=NotificationKind.UPCOMING, **kw) -> Notification:
    fields = dict(
        id=nid,
        user_id="u1",
        task_id=task_id,
        message="msg",
        kind=kind,
        created_at=NOW,
        email_sent=True,
    )
    fields.update(kw)
    return Notification(**fields)


@pytest.mark.asyncio
async def test_save_then_get_round_trips_all_fields(storage: StorageService) -> None:
    task = make_task(
        "t1",
        description="details",
        status=TaskStatus.DONE,
        finished_at=NOW + timedelta(hours=1),
    )
    returned = await storage.save_task(task)
    assert returned is task

    assert await storage.get_tasks("u1") == [task]


@pytest.mark.asyncio
async def test_save_task_upserts_in_place(storage: StorageService, kv: MemoryKeyValueStore) -> None:
    for tid in ("a", "b", "c"):
        await storage.save_task(make_task(tid))

    edited = replace(make_task("b"), title="edited")
    await storage.save_task(edited)

    tasks = await storage.get_tasks("u1")
    assert [t.id for t in tasks] == ["a", "b", "c"]
    assert tasks[1].title == "edited"
    assert tasks[0] == make_task("a")
    assert tasks[2] == make_task("c")
    assert len(json.loads(kv.get_item(TASKS_STORAGE_KEY))) == 3


@pytest.mark.asyncio
async def test_delete_all_tasks_only_touches_owner(storage: StorageService) -> None:
    owners = ["u1", "u2", "u1", "u3", "u2", "u1"]
    for i, owner in enumerate(owners):
        await storage.save_task(make_task(f"t{i}", user_id=owner))

    await storage.delete_all_tasks("u1")

    assert await storage.get_tasks("u1") == []
    assert [t.id for t in await storage.get_tasks("u2")] == ["t1", "t4"]
    assert [t.id for t in await storage.get_tasks("u3")] == ["t3"]


@pytest.mark.asyncio
async def test_delete_task_removes_only_that_id(storage: StorageService) -> None:
    await storage.save_task(make_task("a"))
    await storage.save_task(make_task("b"))

    await storage.delete_task("a")
    await storage.delete_task("missing")

    assert [t.id for t in await storage.get_tasks("u1")] == ["b"]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", ["{not json", '{"id": "x"}', '"text"', "42"])
async def test_corrupt_store_reads_as_empty(payload: str) -> None:
    kv = MemoryKeyValueStore(
        {TASKS_STORAGE_KEY: payload, NOTIFICATIONS_STORAGE_KEY: payload, USERS_STORAGE_KEY: payload}
    )
    storage = StorageService(kv, latency_scale=0.0)

    assert await storage.get_tasks("u1") == []
    assert await storage.get_notifications("u1") == []
    await storage.delete_task("x")
    await storage.mark_notification_read("x")

    result = await storage.login(Provider.CREDENTIALS, "alice", "pw")
    assert isinstance(result, AuthFailure)


@pytest.mark.asyncio
async def test_malformed_records_are_skipped_but_kept(storage: StorageService, kv: MemoryKeyValueStore) -> None:
    good = make_task("good").to_record()
    kv.set_item(TASKS_STORAGE_KEY, json.dumps([good, {"id": "bad", "userId": "u1"}, "junk"]))

    assert [t.id for t in await storage.get_tasks("u1")] == ["good"]

    await storage.save_task(make_task("new"))
    stored = json.loads(kv.get_item(TASKS_STORAGE_KEY))
    assert len(stored) == 4
    assert "junk" in stored


@pytest.mark.asyncio
async def test_write_failure_is_swallowed() -> None:
    storage = StorageService(ReadOnlyKeyValueStore(), latency_scale=0.0)
    task = make_task("t1")

    assert await storage.save_task(task) is task
    await storage.add_notification(make_notification("n1"))
    await storage.delete_all_tasks("u1")

    assert await storage.get_tasks("u1") == []


@pytest.mark.asyncio
async def test_add_notification_is_unique_per_user_task_kind(storage: StorageService) -> None:
    await storage.add_notification(make_notification("n1"))
    await storage.add_notification(make_notification("n2"))

    items = await storage.get_notifications("u1")
    assert [n.id for n in items] == ["n1"]

    # A different kind or a different user is a different notification.
    await storage.add_notification(make_notification("n3", kind=NotificationKind.OVERDUE))
    await storage.add_notification(make_notification("n4", user_id="u2"))
    assert {n.id for n in await storage.get_notifications("u1")} == {"n1", "n3"}
    assert [n.id for n in await storage.get_notifications("u2")] == ["n4"]


@pytest.mark.asyncio
async def test_stored_record_blocks_duplicate_by_dedupe_key(
    storage: StorageService, kv: MemoryKeyValueStore
) -> None:
    existing = make_notification("old")
    kv.set_item(NOTIFICATIONS_STORAGE_KEY, json.dumps([existing.to_record()]))

    fresh = make_notification("new", message="other text")
    assert fresh.dedupe_key() == existing.dedupe_key()
    await storage.add_notification(fresh)

    assert [n.id for n in await storage.get_notifications("u1")] == ["old"]


@pytest.mark.asyncio
async def test_notifications_newest_first(storage: StorageService) -> None:
    await storage.add_notification(make_notification("old", task_id="t1", created_at=NOW))
    await storage.add_notification(
        make_notification("new", task_id="t2", created_at=NOW + timedelta(minutes=5))
    )
    await storage.add_notification(
        make_notification("mid", task_id="t3", created_at=NOW + timedelta(minutes=1))
    )

    assert [n.id for n in await storage.get_notifications("u1")] == ["new", "mid", "old"]


@pytest.mark.asyncio
async def test_mark_read_single_and_all(storage: StorageService) -> None:
    await storage.add_notification(make_notification("n1", task_id="t1"))
    await storage.add_notification(make_notification("n2", task_id="t2"))
    await storage.add_notification(make_notification("other", task_id="t1", user_id="u2"))

    await storage.mark_notification_read("n1")
    await storage.mark_notification_read("missing")
    read = {n.id: n.is_read for n in await storage.get_notifications("u1")}
    assert read == {"n1": True, "n2": False}

    await storage.mark_all_notifications_read("u1")
    assert all(n.is_read for n in await storage.get_notifications("u1"))
    assert not (await storage.get_notifications("u2"))[0].is_read


@pytest.mark.asyncio
async def test_register_and_login_scenario(storage: StorageService, kv: MemoryKeyValueStore) -> None:
    first = await storage.register("alice", "pw1")
    assert isinstance(first, AuthSuccess)
    assert first.user.provider == Provider.CREDENTIALS
    assert first.user.email == "alice@example.com"

    again = await storage.register("alice", "other")
    assert isinstance(again, AuthFailure)
    assert again.error == AuthError.USERNAME_TAKEN

    wrong = await storage.login(Provider.CREDENTIALS, "alice", "wrong")
    assert isinstance(wrong, AuthFailure)
    assert wrong.error == AuthError.INVALID_CREDENTIALS

    ok = await storage.login("credentials", "alice", "pw1")
    assert isinstance(ok, AuthSuccess)
    assert ok.ok
    assert ok.user == first.user
    assert not hasattr(ok.user, "password")
    assert "password" not in ok.user.to_record()

    # The credential record itself is stored as-is (plain text, simulation only).
    records = json.loads(kv.get_item(USERS_STORAGE_KEY))
    assert records[0]["username"] == "alice"
    assert records[0]["password"] == "pw1"


@pytest.mark.asyncio
async def test_register_ids_are_unique(storage: StorageService) -> None:
    a = await storage.register("a", "x")
    b = await storage.register("b", "x")
    assert isinstance(a, AuthSuccess) and isinstance(b, AuthSuccess)
    assert a.user.id != b.user.id
    assert a.user.id.startswith("user_cred_")


@pytest.mark.asyncio
async def test_federated_login_returns_fixed_identity(storage: StorageService) -> None:
    g1 = await storage.login(Provider.GOOGLE)
    g2 = await storage.login("google")
    gh = await storage.login(Provider.GITHUB)

    assert isinstance(g1, AuthSuccess) and isinstance(g2, AuthSuccess) and isinstance(gh, AuthSuccess)
    assert g1.user == g2.user
    assert g1.user.id == "user_google_123"
    assert gh.user.id == "user_github_456"


@pytest.mark.asyncio
async def test_unknown_provider_and_missing_credentials(storage: StorageService) -> None:
    unknown = await storage.login("myspace")
    assert isinstance(unknown, AuthFailure)
    assert unknown.error == AuthError.UNKNOWN_PROVIDER

    await storage.register("alice", "pw1")
    missing = await storage.login(Provider.CREDENTIALS)
    assert isinstance(missing, AuthFailure)
    assert missing.error == AuthError.INVALID_CREDENTIALS


@pytest.mark.asyncio
async def test_latency_is_scaled(monkeypatch, kv: MemoryKeyValueStore) -> None:
    slept: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        slept.append(seconds)

    monkeypatch.setattr("taskdesk.storage.storage_service.asyncio.sleep", fake_sleep)

    await StorageService(kv, latency_scale=0.5).get_tasks("u1")
    await StorageService(kv, latency_scale=0.0).get_tasks("u1")

    assert slept == [pytest.approx(0.1)]
