"""
Key tuple and snapshot helpers built on the SQLAlchemy mapper.

A model's key tuple is its primary key in mapper column order. Single and
composite keys are handled the same way, which is what lets one CrudRepository
serve 1, 2 and 3 part keys.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple, Type

from pydantic_core import to_json
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapper

MAX_KEY_PARTS = 3


# PUBLIC_INTERFACE
def key_names(model_cls: Type[Any]) -> Tuple[str, ...]:
    """Attribute names of the primary key columns, in key order."""
    mapper: Mapper = sa_inspect(model_cls)
    return tuple(mapper.get_property_by_column(col).key for col in mapper.primary_key)


# PUBLIC_INTERFACE
def key_of(model: Any) -> Tuple[Any, ...]:
    """Return the key tuple of a model instance."""
    return tuple(getattr(model, name) for name in key_names(type(model)))


# PUBLIC_INTERFACE
def loaded_values(model: Any) -> Dict[str, Any]:
    """
    Column values currently present on the instance.

    Attributes never assigned on a new instance (and expired attributes) are
    left out, so callers can tell "set to None" apart from "not given".
    """
    state = sa_inspect(model)
    return {
        attr.key: state.dict[attr.key]
        for attr in state.mapper.column_attrs
        if attr.key in state.dict
    }


# PUBLIC_INTERFACE
def snapshot_of(model: Any) -> str:
    """JSON snapshot of the model's loaded column values, for error reports."""
    try:
        return to_json(loaded_values(model), fallback=str).decode("utf-8")
    except Exception:  # noqa: BLE001
        return repr(model)
