"""Core app configuration and database."""

from botanical.core.config import get_settings, settings
from botanical.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
