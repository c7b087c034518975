"""
FastAPI integration: a lifespan hook that runs the database startup lifecycle.
"""

from .lifespan import database_lifespan

__all__ = ["database_lifespan"]
