# Core modules

from .config import settings, get_settings, Settings
from .session import SessionManager, UserSession

__all__ = ["settings", "get_settings", "Settings", "SessionManager", "UserSession"]
