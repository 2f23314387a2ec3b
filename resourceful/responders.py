"""
Side-effecting response actions: redirect, render and head.

The dispatcher and controllers only ever call a :class:`Responder`; the default
:class:`ResponseBuilder` turns those calls into :class:`~resourceful.models.Response`
values, rendering views with Jinja2 and payloads as JSON.
"""

import logging
from http import HTTPStatus
from typing import Any, Callable, Dict, Optional

from .models import Response
from .naming import NameResolver
from .renderers import JSONRenderer, TemplateRenderer

logger = logging.getLogger(__name__)


class Responder:
    """Base class for response actions."""

    def redirect_to(self, target: Any, notice: Optional[str] = None,
                    status: HTTPStatus = HTTPStatus.FOUND) -> Any:
        raise NotImplementedError

    def render(self, view: Optional[str] = None, *, json: Any = None, format: str = "html",
               status: HTTPStatus = HTTPStatus.OK, location: Any = None, resource: Any = None) -> Any:
        raise NotImplementedError

    def head(self, status: HTTPStatus) -> Any:
        raise NotImplementedError


class PathBuilder:
    """Builds resource paths following REST conventions.

    - a resource class maps to its collection: ``Post`` -> ``/posts``
    - an instance maps to its member: ``post`` (id 7) -> ``/posts/7``
    - objects with a ``to_path()`` method and plain strings are used as given
    """

    def __init__(self, resolver: Optional[NameResolver] = None, prefix: str = ""):
        self.resolver = resolver or NameResolver()
        self.prefix = prefix.rstrip("/")

    def collection_path(self, entity_class: type) -> str:
        plural = self.resolver.resolve_plural_name(entity_class.__name__)
        return f"{self.prefix}/{plural}"

    def path_for(self, target: Any) -> str:
        if isinstance(target, str):
            return target
        to_path = getattr(target, "to_path", None)
        if callable(to_path):
            return to_path()
        if isinstance(target, type):
            return self.collection_path(target)
        resource_id = getattr(target, "id", None)
        if resource_id is None:
            return self.collection_path(type(target))
        return f"{self.collection_path(type(target))}/{resource_id}"


class ResponseBuilder(Responder):
    """Responder producing :class:`Response` values.

    Args:
        templates: Renderer for HTML views.
        paths: Builder for redirect targets and ``Location`` headers.
        template_prefix: Directory of this controller's views, e.g. ``"posts"``.
        context: Zero-argument callable supplying the view context at render time.
        serializer: Turns a resource into JSON-ready data for JSON views.
    """

    def __init__(
        self,
        templates: Optional[TemplateRenderer] = None,
        paths: Optional[PathBuilder] = None,
        template_prefix: Optional[str] = None,
        context: Optional[Callable[[], Dict[str, Any]]] = None,
        serializer: Optional[Callable[[Any], Any]] = None,
        json_renderer: Optional[JSONRenderer] = None,
    ):
        self.templates = templates or TemplateRenderer()
        self.paths = paths or PathBuilder()
        self.template_prefix = template_prefix
        self.context = context or dict
        self.serializer = serializer
        self.json_renderer = json_renderer or JSONRenderer()

    def redirect_to(self, target: Any, notice: Optional[str] = None,
                    status: HTTPStatus = HTTPStatus.FOUND) -> Response:
        location = self.paths.path_for(target)
        logger.debug(f"Redirecting to {location} ({int(status)})")
        return Response(status, location=location, notice=notice)

    def render(self, view: Optional[str] = None, *, json: Any = None, format: str = "html",
               status: HTTPStatus = HTTPStatus.OK, location: Any = None, resource: Any = None) -> Response:
        location_path = self.paths.path_for(location) if location is not None else None

        if json is not None:
            return self._json_response(json, status, location_path)

        if view is None:
            raise ValueError("render() needs either a view or a json payload")

        if format == "json":
            # JSON views are the serialized resource
            data = resource if resource is not None else self.context().get("resource")
            if self.serializer is not None:
                data = self.serializer(data)
            return self._json_response(data, status, location_path)

        context = self.context()
        if resource is not None:
            context["resource"] = resource
        body = self.templates.render(view, self.template_prefix, **context)
        return Response(status, body, content_type=self.templates.media_type, location=location_path)

    def head(self, status: HTTPStatus) -> Response:
        return Response(status)

    def _json_response(self, data: Any, status: HTTPStatus, location: Optional[str]) -> Response:
        body = self.json_renderer.render(data)
        return Response(status, body, content_type=self.json_renderer.media_type, location=location)
