"""
Repository layer for data access.

Repositories adapt an AsyncSession (the data context) to a small set of
operations: a lazy queryable surface for every model, and add/update/delete
for models keyed by one to three primary-key columns.
"""

from .base import QueryableRepository
from .crud import CrudRepository
from .keys import MAX_KEY_PARTS, key_names, key_of, snapshot_of

__all__ = [
    "QueryableRepository",
    "CrudRepository",
    "MAX_KEY_PARTS",
    "key_names",
    "key_of",
    "snapshot_of",
]
