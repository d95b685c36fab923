"""
Configuration entry point.

Callers import the settings module directly: ``from config import settings``.
"""

from . import settings

__all__ = ["settings"]
