"""Core app configuration and database."""

from signalsafe.core.config import get_settings, settings
from signalsafe.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
