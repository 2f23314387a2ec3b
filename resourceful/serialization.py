"""
Serialization of resources, collections and errors for API responses.
"""

import dataclasses
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, Optional, Type, Union

from pydantic import BaseModel

from .exceptions import ParameterError
from .pagination import pagination_meta

logger = logging.getLogger(__name__)

SerializerType = Union[Type[BaseModel], Callable[..., Any]]


def _is_collection(obj: Any) -> bool:
    return isinstance(obj, Sequence) and not isinstance(obj, (str, bytes))


def _check_serializer(serializer: Any) -> None:
    if isinstance(serializer, type) and issubclass(serializer, BaseModel):
        return
    if callable(serializer):
        return
    raise ParameterError(f"Invalid serializer: {serializer!r}")


def serialize_fallback(obj: Any, **options: Any) -> Any:
    """Default serialization when no serializer is configured.

    Tries ``model_dump()``, then ``to_dict()``, then dataclass fields, then
    mappings and sequences element-wise; anything else is returned as is.
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", **options)
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, Mapping):
        return {key: serialize_fallback(value) for key, value in obj.items()}
    if _is_collection(obj):
        return [serialize_fallback(item, **options) for item in obj]
    return obj


def serialize_errors_fallback(errors: Any) -> Dict[str, Any]:
    """Wrap an errors object as ``{"errors": ...}``."""
    full_messages = getattr(errors, "full_messages", None)
    if full_messages is not None:
        return {"errors": list(full_messages() if callable(full_messages) else full_messages)}
    messages = getattr(errors, "messages", None)
    if messages is not None:
        return {"errors": messages() if callable(messages) else messages}
    if isinstance(errors, Mapping):
        return {"errors": dict(errors)}
    if _is_collection(errors):
        return {"errors": list(errors)}
    return {"errors": [str(errors)]}


class Serializer:
    """Serializes API payloads with optional per-controller serializers.

    A serializer is either a pydantic model class, validated from the object's
    attributes and dumped to JSON-ready data, or any callable taking the object
    and the serialization options. A failing serializer is logged and the
    default serialization is used instead.

    Examples:
        class PostOut(BaseModel):
            id: int
            title: str

        Serializer(resource_serializer=PostOut).serialize_resource(post)
        Serializer(resource_serializer=lambda post, **_: {"title": post.title})
    """

    def __init__(
        self,
        resource_serializer: Optional[SerializerType] = None,
        collection_serializer: Optional[SerializerType] = None,
        error_serializer: Optional[SerializerType] = None,
    ):
        for serializer in (resource_serializer, collection_serializer, error_serializer):
            if serializer is not None:
                _check_serializer(serializer)
        self.resource_serializer = resource_serializer
        self.collection_serializer = collection_serializer
        self.error_serializer = error_serializer

    def serialize_resource(self, resource: Any, **options: Any) -> Any:
        if self.resource_serializer is not None:
            return self._serialize_with(resource, self.resource_serializer, **options)
        return serialize_fallback(resource, **options)

    def serialize_collection(self, collection: Any, **options: Any) -> Any:
        serializer = self.collection_serializer or self.resource_serializer
        if serializer is not None:
            return self._serialize_with(collection, serializer, **options)
        return serialize_fallback(list(collection), **options)

    def serialize_errors(self, errors: Any, **options: Any) -> Any:
        if self.error_serializer is not None:
            try:
                return self._apply(errors, self.error_serializer, **options)
            except Exception as e:
                logger.warning(f"Error serialization failed: {e}, falling back to default")
        return serialize_errors_fallback(errors)

    def add_pagination_meta(self, collection: Any, data: Any) -> Any:
        """Attach ``{"meta": {"pagination": ...}}`` when ``collection`` is paged."""
        meta = pagination_meta(collection)
        if not meta:
            return data
        if isinstance(data, Mapping):
            return {**data, "meta": {"pagination": meta}}
        return {"data": data, "meta": {"pagination": meta}}

    def _serialize_with(self, obj: Any, serializer: SerializerType, **options: Any) -> Any:
        try:
            return self._apply(obj, serializer, **options)
        except Exception as e:
            logger.warning(f"Serialization failed: {e}, falling back to default")
            return serialize_fallback(list(obj) if _is_collection(obj) else obj, **options)

    def _apply(self, obj: Any, serializer: SerializerType, **options: Any) -> Any:
        if isinstance(serializer, type) and issubclass(serializer, BaseModel):
            if _is_collection(obj):
                return [self._apply(item, serializer, **options) for item in obj]
            model = serializer.model_validate(obj, from_attributes=True)
            return model.model_dump(mode="json", **options)
        return serializer(obj, **options)
