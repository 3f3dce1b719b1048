"""API routes"""

from jirasync.api import service_hooks

__all__ = ["service_hooks"]
