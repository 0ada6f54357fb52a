"""taskdesk: personal task manager with deadline notifications."""

__version__ = "0.1.0"
