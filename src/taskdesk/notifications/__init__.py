"""
Notification subsystem.

Components:
- notification_models.py: Notification, NotificationKind
- deadline_checker.py: classifies tasks by deadline and creates notifications
- deadline_watcher.py: polling loop that re-runs the checker
- notification_api.py: mark read / unread count
- email.py: mock mail transport
"""
