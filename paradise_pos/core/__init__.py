# Core modules

from .config import settings, get_settings, Settings
from .session import RegisterSession, SessionManager, SessionNotFoundError

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "RegisterSession",
    "SessionManager",
    "SessionNotFoundError",
]
