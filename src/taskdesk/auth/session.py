# src/taskdesk/auth/session.py

from __future__ import annotations

import contextlib
import json
import logging

from ..core.state import AppState
from ..notifications.deadline_checker import check_deadlines
from ..tasks.task_api import load_data
from .auth_models import AuthResult, AuthSuccess, Provider, User

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "tm_active_user"
THEME_KEY = "theme"
THEMES = ("light", "dark")


async def _switch_user(state: AppState, user: User) -> None:
    # Drop the previous user's tasks before the id changes, so nothing
    # (the watcher included) sees one user's data under another's id.
    state.clear_user_data()
    state.user = user
    await load_data(state)
    await check_deadlines(state)


async def _enter(state: AppState, user: User) -> None:
    try:
        state.session_kv.set_item(SESSION_USER_KEY, json.dumps(user.to_record(), ensure_ascii=False))
    except Exception:
        logger.exception("Failed to persist session user=%s", user.id)
    await _switch_user(state, user)


async def restore_session(state: AppState) -> User | None:
    """Pick up the user stored in the session slot, if any."""
    try:
        raw = state.session_kv.get_item(SESSION_USER_KEY)
    except Exception:
        logger.warning("Session slot unreadable; ignoring.", exc_info=True)
        return None
    if not raw:
        return None

    try:
        user = User.from_record(json.loads(raw))
    except (ValueError, KeyError, TypeError, AttributeError):
        logger.warning("Session slot corrupted; clearing.")
        with contextlib.suppress(Exception):
            state.session_kv.remove_item(SESSION_USER_KEY)
        return None

    await _switch_user(state, user)
    logger.info("Session restored user=%s", user.id)
    return user


async def login(
    state: AppState,
    provider: Provider | str,
    username: str | None = None,
    password: str | None = None,
) -> AuthResult:
    result = await state.storage.login(provider, username, password)
    if isinstance(result, AuthSuccess):
        await _enter(state, result.user)
    else:
        logger.info("Login rejected provider=%s reason=%s", provider, result.error.value)
    return result


async def register(state: AppState, username: str, password: str) -> AuthResult:
    result = await state.storage.register(username, password)
    if isinstance(result, AuthSuccess):
        await _enter(state, result.user)
    return result


def logout(state: AppState) -> None:
    user_id = state.user.id if state.user else None
    try:
        state.session_kv.remove_item(SESSION_USER_KEY)
    except Exception:
        logger.exception("Failed to clear session slot")
    state.clear_user_data()
    logger.info("Logged out user=%s", user_id)


# ---- theme preference ----

def load_theme(state: AppState) -> str:
    try:
        raw = state.prefs_kv.get_item(THEME_KEY)
    except Exception:
        raw = None
    state.theme = raw if raw in THEMES else "light"
    return state.theme


def set_theme(state: AppState, theme: str) -> str:
    if theme not in THEMES:
        raise ValueError(f"unknown theme: {theme!r}")
    state.theme = theme
    try:
        state.prefs_kv.set_item(THEME_KEY, theme)
    except Exception:
        logger.exception("Failed to persist theme")
    return theme


def toggle_theme(state: AppState) -> str:
    return set_theme(state, "dark" if state.theme == "light" else "light")
