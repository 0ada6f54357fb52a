"""
Storage subsystem.

Components:
- kv_store.py: key-value backends (JSON files per key, in-memory)
- storage_service.py: the façade over tasks, notifications and credentials
"""
