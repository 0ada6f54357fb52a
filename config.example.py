# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.

Storage key names (tm_tasks_db_v1, tm_users_db_v1, tm_notifications_db_v1,
tm_active_user, theme) are fixed in code and intentionally not configurable.
"""

ENV_VARS = {
    # App / logging
    "TASKDESK_APP_NAME": "App display name (default: taskdesk).",
    "TASKDESK_LOG_LEVEL": "Console logging level (default: INFO).",
    # Connectors
    "TASKDESK_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Paths (gitignored)
    "TASKDESK_DATA_DIR": "Local data directory (default: .local/taskdesk).",
    "TASKDESK_STORE_DIR": "Durable task/notification/user blobs (default: <data_dir>/store).",
    "TASKDESK_SESSION_DIR": "Active-session slot (default: <data_dir>/session).",
    "TASKDESK_LOG_DIR": "Where taskdesk.log is written (default: <data_dir>).",
    # Tuning
    "TASKDESK_LATENCY_SCALE": "Multiplier for simulated storage round-trips; 0 disables (default: 1.0).",
    "TASKDESK_UPCOMING_WINDOW_HOURS": "Deadline distance that counts as 'upcoming' (default: 24).",
    "TASKDESK_DEADLINE_CHECK_INTERVAL_SECONDS": "Background deadline re-check period (default: 60).",
}
