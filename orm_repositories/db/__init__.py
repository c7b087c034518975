"""
Database package initializer exposing key public interfaces for configuration,
engine/session management, migrations and the startup lifecycle.
"""

from .base import Base, TimestampMixin, UUIDPkMixin
from .config import get_settings, Settings
from .session import (
    DataContextFactory,
    dispose_engine,
    get_async_session,
    get_data_context_factory,
    get_engine,
)
from .startup import StartupResult, run_database_startup

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPkMixin",
    "Settings",
    "get_settings",
    "DataContextFactory",
    "dispose_engine",
    "get_async_session",
    "get_data_context_factory",
    "get_engine",
    "StartupResult",
    "run_database_startup",
]
