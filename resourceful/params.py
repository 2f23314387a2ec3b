"""
Request parameter helpers.
"""

import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from .exceptions import ParameterError

ID_PATTERN = re.compile(r"\d+")


def validate_id_param(value: Any) -> None:
    """Accept only non-negative integer ids (``7`` or ``"7"``)."""
    if isinstance(value, bool) or not ID_PATTERN.fullmatch(str(value)):
        raise ParameterError(f"Invalid ID parameter: {value!r}")


def id_param(params: Mapping, key: str = "id") -> Optional[Any]:
    """The validated id parameter, or ``None`` when absent."""
    value = params.get(key)
    if value is None:
        return None
    validate_id_param(value)
    return value


def require(params: Mapping, key: str) -> Mapping:
    """Return the nested parameter mapping under ``key``.

    Raises:
        ParameterError: If the key is missing or does not hold a mapping.
    """
    value = params.get(key)
    if value is None:
        raise ParameterError(f"Missing required parameter: {key}")
    if not isinstance(value, Mapping):
        raise ParameterError(f"Expected mapping for {key}, got {type(value).__name__}")
    return value


def permit(params: Mapping, *fields: str) -> Dict[str, Any]:
    """Keep only the listed fields."""
    return {name: params[name] for name in fields if name in params}


def validate_params(model: Type[BaseModel], params: Mapping) -> Dict[str, Any]:
    """Validate ``params`` with a pydantic model, keeping only the fields that were given.

    Raises:
        pydantic.ValidationError: If the parameters do not satisfy ``model``.
    """
    return model.model_validate(dict(params)).model_dump(exclude_unset=True)


def bulk_params(params: Mapping, key: str,
                permit_item: Optional[Callable[[Mapping], Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
    """Parameters for bulk operations: a list of per-item mappings under ``key``.

    Missing key gives ``[]``. Each item is passed through ``permit_item``
    (default: a plain ``dict`` copy).
    """
    items = params.get(key)
    if items is None:
        return []
    if not isinstance(items, (list, tuple)):
        raise ParameterError(f"Expected list for {key}, got {type(items).__name__}")
    permit_item = permit_item or dict
    return [permit_item(item) for item in items]
