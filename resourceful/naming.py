"""
Resource name inference from controller names.

A controller called ``Admin::PostsController`` (or, for Python classes,
``app.admin.PostsController``) manages the ``Post`` resource. The resolver
strips the ``Controller`` suffix, keeps the last namespace segment, singularizes
it and looks the result up in a :class:`~resourceful.registry.TypeRegistry`.
"""

import logging
import re
import threading
from dataclasses import dataclass
from typing import Dict, Optional

import inflection

from .exceptions import ResolutionError
from .registry import TypeRegistry, default_registry

logger = logging.getLogger(__name__)

CONTROLLER_SUFFIX = "Controller"
NAMESPACE_SEPARATOR = re.compile(r"::|\.")


class Inflector:
    """Naming-convention transforms, backed by the ``inflection`` package.

    Subclass and pass to :class:`NameResolver` to add irregular words.
    """

    def singularize(self, word: str) -> str:
        return inflection.singularize(word)

    def pluralize(self, word: str) -> str:
        return inflection.pluralize(word)

    def underscore(self, word: str) -> str:
        return inflection.underscore(word)

    def humanize(self, word: str) -> str:
        return inflection.humanize(word)


class ModelName:
    """Naming capability a resource class can expose as ``model_name``.

    Examples:
        class BlogPost:
            model_name = ModelName("BlogPost")               # human -> "Blog post"

        class Person:
            model_name = ModelName("Person", human="Member")
    """

    def __init__(self, name: str, human: Optional[str] = None, inflector: Optional[Inflector] = None):
        self.name = name
        self._human = human
        self._inflector = inflector or Inflector()

    @property
    def human(self) -> str:
        if self._human is not None:
            return self._human
        return self._inflector.humanize(self._inflector.underscore(self.name))

    def __repr__(self) -> str:
        return f"ModelName({self.name!r}, human={self.human!r})"


@dataclass(frozen=True)
class ResourceIdentity:
    """Every naming form of the resource a controller manages."""

    entity_class: type
    entity_class_name: str
    singular_name: str
    plural_name: str
    human_name: str


def last_segment(name: str) -> str:
    """Return the part of a qualified name after its last namespace separator."""
    return NAMESPACE_SEPARATOR.split(name)[-1]


class NameResolver:
    """Infers resource classes and names from controller identities.

    Resolved classes are cached per identity, so a resolver shared by a
    controller class performs the registry lookup once no matter how many
    requests ask for it.
    """

    def __init__(self, registry: Optional[TypeRegistry] = None, inflector: Optional[Inflector] = None):
        self.registry = registry if registry is not None else default_registry
        self.inflector = inflector or Inflector()
        self._entity_classes: Dict[str, type] = {}
        self._lock = threading.Lock()

    def resolve_entity_class_name(self, identity: str) -> str:
        """Map a controller identity to the singular class name it manages.

        ``"Admin::PostsController"`` -> ``"Post"``; ``"Posts"`` -> ``"Post"``.
        """
        if not isinstance(identity, str):
            raise ResolutionError(repr(identity), f"identity must be a string, got {type(identity).__name__}")
        name = identity
        if name.endswith(CONTROLLER_SUFFIX):
            name = name[: -len(CONTROLLER_SUFFIX)]
        name = last_segment(name)
        if not name:
            return ""
        return self.inflector.singularize(name)

    def resolve_entity_class(self, identity: str) -> type:
        """Resolve the resource class for a controller identity.

        Raises:
            ResolutionError: If the name cannot be inferred or the registry has no type for it.
        """
        cached = self._entity_classes.get(identity)
        if cached is not None:
            return cached

        with self._lock:
            # Another thread may have populated it while we waited
            cached = self._entity_classes.get(identity)
            if cached is not None:
                return cached

            class_name = self.resolve_entity_class_name(identity)
            if not class_name:
                raise ResolutionError(identity, "no resource name left after removing the controller suffix")
            try:
                entity_class = self.registry.resolve(class_name)
            except Exception as e:
                raise ResolutionError(identity, str(e) or type(e).__name__) from e
            if entity_class is None:
                raise ResolutionError(identity, f"registry returned no type for {class_name}")

            self._entity_classes[identity] = entity_class
            logger.debug(f"Resolved {identity} to resource class {class_name}")
            return entity_class

    def resolve_singular_name(self, entity_class_name: str) -> str:
        """``"BlogPost"`` -> ``"blog_post"``."""
        return self.inflector.underscore(last_segment(entity_class_name))

    def resolve_plural_name(self, entity_class_name: str) -> str:
        """``"BlogPost"`` -> ``"blog_posts"``."""
        return self.inflector.pluralize(self.resolve_singular_name(entity_class_name))

    def resolve_human_name(self, entity_type: type) -> str:
        """Human-readable resource name.

        Any type exposing a ``model_name`` with a ``human`` label qualifies;
        everything else falls back to the class name.
        """
        naming = getattr(entity_type, "model_name", None)
        if callable(naming) and not hasattr(naming, "human"):
            naming = naming()
        human = getattr(naming, "human", None)
        if callable(human):
            human = human()
        if isinstance(human, str) and human:
            return human
        return entity_type.__name__

    def identity_for(self, entity_class: type) -> ResourceIdentity:
        """Build the naming forms for an already known resource class."""
        class_name = entity_class.__name__
        return ResourceIdentity(
            entity_class=entity_class,
            entity_class_name=class_name,
            singular_name=self.resolve_singular_name(class_name),
            plural_name=self.resolve_plural_name(class_name),
            human_name=self.resolve_human_name(entity_class),
        )

    def resolve(self, identity: str) -> ResourceIdentity:
        """Resolve the resource class and every naming form for a controller identity."""
        return self.identity_for(self.resolve_entity_class(identity))

    def clear(self) -> None:
        """Forget every cached resolution."""
        with self._lock:
            self._entity_classes.clear()
