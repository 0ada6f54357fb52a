"""
Identity subsystem.

Components:
- auth_models.py: User, Provider, AuthSuccess / AuthFailure
- session.py: login / register / logout / session restore, theme preference
"""
