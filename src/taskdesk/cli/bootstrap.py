# src/taskdesk/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (key-value stores, storage façade, mail).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..notifications.email import MockEmailSender
from ..storage.kv_store import JsonFileKeyValueStore
from ..storage.storage_service import StorageService

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_dir.mkdir(parents=True, exist_ok=True)
    settings.session_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    durable = JsonFileKeyValueStore(settings.store_dir)

    state = AppState(
        settings=settings,
        storage=StorageService(durable, latency_scale=settings.latency_scale),
        session_kv=JsonFileKeyValueStore(settings.session_dir),
        prefs_kv=durable,
        email_sender=MockEmailSender(),
    )
    logger.debug("AppState created store=%s session=%s", settings.store_dir, settings.session_dir)
    return state
