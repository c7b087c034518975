"""
Exception types raised by the repository layer.

RepositoryError wraps lower-level exceptions to provide a stable, domain-friendly
API. ModelNotFoundError is raised when an update or delete targets a key tuple
that is not in the store.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple


class MissingArgumentError(ValueError):
    """Raised synchronously when a required argument is None."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Argument '{name}' must not be None.")
        self.name = name


class RepositoryError(RuntimeError):
    """
    Raised when a repository operation fails.

    Attributes:
      repository: class name of the repository that failed
      model_name: class name of the model being written
      snapshot: JSON snapshot of the model as it was passed in
    """

    def __init__(
        self,
        message: str,
        *,
        repository: Optional[str] = None,
        model_name: Optional[str] = None,
        snapshot: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.repository = repository
        self.model_name = model_name
        self.snapshot = snapshot


class ModelNotFoundError(RepositoryError, LookupError):
    """Raised when no row matches the key tuple of the model being updated or deleted."""

    def __init__(
        self,
        model_name: str,
        key: Tuple[Any, ...],
        *,
        repository: Optional[str] = None,
        snapshot: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"No {model_name} found for key {key!r}.",
            repository=repository,
            model_name=model_name,
            snapshot=snapshot,
        )
        self.key = key


# PUBLIC_INTERFACE
def require(value: Any, name: str) -> Any:
    """Return value, or raise MissingArgumentError if it is None."""
    if value is None:
        raise MissingArgumentError(name)
    return value
