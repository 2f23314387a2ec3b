"""
Explicit registry of resource types, looked up by class name.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional, Type

logger = logging.getLogger(__name__)


class TypeRegistry:
    """Maps resource class names to the classes themselves.

    Controllers never reach into module globals to find their resource class;
    every type that can be inferred from a controller name must be registered here.
    """

    def __init__(self, types: Optional[Iterable[type]] = None):
        self._types: Dict[str, type] = {}
        self._lock = threading.Lock()
        for cls in types or ():
            self.register(cls)

    def register(self, cls: Optional[Type] = None, *, name: Optional[str] = None):
        """Register a resource type. Usable directly or as a decorator.

        Args:
            cls: The class to register.
            name: Optional lookup name. Defaults to the class ``__name__``.

        Examples:
            registry.register(Post)

            @registry.register
            class Comment: ...

            @registry.register(name="Article")
            class BlogPost: ...
        """

        def decorator(klass: Type) -> Type:
            key = name or klass.__name__
            with self._lock:
                existing = self._types.get(key)
                if existing is not None and existing is not klass:
                    raise ValueError(f"'{key}' is already registered to {existing!r}")
                self._types[key] = klass
            logger.debug(f"Registered resource type {key}")
            return klass

        if cls is None:
            return decorator
        return decorator(cls)

    def resolve(self, name: str) -> type:
        """Look up a registered type by name.

        Raises:
            LookupError: If nothing is registered under ``name``.
        """
        if not name:
            raise LookupError("empty resource name")
        try:
            return self._types[name]
        except KeyError:
            raise LookupError(f"uninitialized constant {name}") from None

    def names(self) -> List[str]:
        return sorted(self._types)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)


# Process-wide registry used when a controller does not configure its own
default_registry = TypeRegistry()
register = default_registry.register
