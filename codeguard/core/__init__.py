"""Core app configuration and database."""

from codeguard.core.config import get_settings, settings
from codeguard.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
