"""
Generic SQLAlchemy repositories and a database startup lifecycle helper.
"""

from .core.errors import MissingArgumentError, ModelNotFoundError, RepositoryError
from .core.settings import RepositoryOptions, get_repository_options
from .db import Base, DataContextFactory, StartupResult, run_database_startup
from .repositories import CrudRepository, QueryableRepository

__all__ = [
    "Base",
    "CrudRepository",
    "DataContextFactory",
    "MissingArgumentError",
    "ModelNotFoundError",
    "QueryableRepository",
    "RepositoryError",
    "RepositoryOptions",
    "StartupResult",
    "get_repository_options",
    "run_database_startup",
]
