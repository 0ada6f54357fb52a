# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime
from types import SimpleNamespace

import pytest

from taskdesk.core.state import AppState
from taskdesk.notifications.email import MockEmailSender
from taskdesk.storage.kv_store import MemoryKeyValueStore
from taskdesk.storage.storage_service import StorageService

from .fakes import FakeClock

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture()
def settings(tmp_path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the controller modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskdesk-test",
        data_dir=tmp_path,
        store_dir=tmp_path / "store",
        session_dir=tmp_path / "session",
        log_dir=tmp_path,
        latency_scale=0.0,
        upcoming_window_hours=24,
        deadline_check_interval_seconds=1.0,
        console_enabled=False,
    )


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def storage(kv: MemoryKeyValueStore) -> StorageService:
    return StorageService(kv, latency_scale=0.0)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    storage: StorageService,
    kv: MemoryKeyValueStore,
    clock: FakeClock,
) -> AppState:
    """
    AppState wired with in-memory stores and a controllable clock.

    NOTE: the real StorageService is used here because its read-modify-write
    behaviour is part of what we want to test.
    """
    return AppState(
        settings=settings,
        storage=storage,
        session_kv=MemoryKeyValueStore(),
        prefs_kv=kv,
        email_sender=MockEmailSender(),
        clock=clock,
    )
