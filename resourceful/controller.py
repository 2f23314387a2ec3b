"""
RESTful resource controller.

Subclass :class:`ResourceController` and name the subclass after the resource
it manages; everything else follows from the name::

    registry.register(Post)

    class PostsController(ResourceController):
        params_model = PostParams

    response = PostsController(request).create()

One controller instance handles one request.
"""

import logging
import threading
from enum import Enum
from functools import cached_property
from http import HTTPStatus
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel

from .dispatch import ResponseDispatcher
from .exceptions import MissingImplementationError, ParameterError, ResourceNotFoundError
from .models import Request, Response
from .naming import NameResolver, ResourceIdentity
from .negotiation import AcceptNegotiator, FormatNegotiator
from .pagination import (
    DEFAULT_BULK_BATCH_SIZE,
    DEFAULT_PAGE_SIZE,
    paginate,
    paginate_bulk_operation,
    pagination_meta,
)
from .params import bulk_params, id_param, require, validate_params
from .registry import TypeRegistry, default_registry
from .renderers import TemplateRenderer
from .responders import PathBuilder, Responder, ResponseBuilder
from .serialization import Serializer

logger = logging.getLogger(__name__)

_resolver_lock = threading.Lock()


class NotFoundPolicy(str, Enum):
    """What ``find_resource`` does when the id matches nothing."""

    FAIL = "fail"  # raise ResourceNotFoundError
    NULL = "null"  # leave the resource unset (None)
    NEW = "new"    # fall back to a fresh, unsaved instance


class ResourceController:
    """Standard index/show/new/create/edit/update/destroy actions.

    Configuration is done with class attributes:

    - ``identity``: qualified controller name used for inference; defaults to
      ``"<module>.<qualname>"``.
    - ``model``: resource class, bypassing inference from the name.
    - ``registry`` / ``resolver``: where inferred names are looked up.
    - ``params_id_key``: request parameter holding the resource id.
    - ``params_model``: pydantic model validating the resource parameters.
    - ``per_page`` / ``paginate_collection``: index pagination.
    - ``on_not_found``: a :class:`NotFoundPolicy` value.
    - ``include_notice_on_destroy_redirect``: flash a notice after destroy.
    - ``views``: template directory or package for HTML views.
    - ``resource_serializer`` / ``collection_serializer`` / ``error_serializer``.

    Resource classes are expected to provide ``all()`` and ``find(id)`` class
    methods, and ``save()``, ``update(**attrs)`` and ``destroy()`` instance
    methods returning a truthy value on success.
    """

    identity: Optional[str] = None
    model: Optional[type] = None
    registry: TypeRegistry = default_registry
    resolver: Optional[NameResolver] = None

    params_id_key: str = "id"
    params_model: Optional[Type[BaseModel]] = None
    per_page: int = DEFAULT_PAGE_SIZE
    paginate_collection: bool = False
    on_not_found: NotFoundPolicy = NotFoundPolicy.NEW
    include_notice_on_destroy_redirect: bool = True
    views: str = "views"

    resource_serializer: Any = None
    collection_serializer: Any = None
    error_serializer: Any = None

    def __init__(
        self,
        request: Request,
        responder: Optional[Responder] = None,
        negotiator: Optional[FormatNegotiator] = None,
        dispatcher: Optional[ResponseDispatcher] = None,
    ):
        self.request = request
        self.params: Mapping[str, Any] = request.params
        self.negotiator = negotiator or AcceptNegotiator(request)
        self._responder = responder
        self._dispatcher = dispatcher
        self.resource: Any = None
        self.collection: Any = None

    # Class-level naming

    @classmethod
    def controller_identity(cls) -> str:
        return cls.identity or f"{cls.__module__}.{cls.__qualname__}"

    @classmethod
    def name_resolver(cls) -> NameResolver:
        """The resolver shared by every instance of this controller class."""
        if cls.resolver is not None:
            return cls.resolver
        resolver = cls.__dict__.get("_class_resolver")
        if resolver is None:
            with _resolver_lock:
                resolver = cls.__dict__.get("_class_resolver")
                if resolver is None:
                    resolver = NameResolver(cls.registry)
                    cls._class_resolver = resolver
        return resolver

    @classmethod
    def resolve_resource(cls) -> ResourceIdentity:
        resolver = cls.name_resolver()
        if cls.model is not None:
            return resolver.identity_for(cls.model)
        return resolver.resolve(cls.controller_identity())

    # Instance-level naming

    @cached_property
    def resource_identity(self) -> ResourceIdentity:
        return type(self).resolve_resource()

    @property
    def resource_class(self) -> type:
        return self.resource_identity.entity_class

    @property
    def resource_name(self) -> str:
        return self.resource_identity.singular_name

    @property
    def collection_name(self) -> str:
        return self.resource_identity.plural_name

    @property
    def resource_class_name(self) -> str:
        return self.resource_identity.human_name

    # Collaborators

    @property
    def responder(self) -> Responder:
        if self._responder is None:
            self._responder = ResponseBuilder(
                templates=TemplateRenderer(self.views),
                paths=PathBuilder(self.name_resolver()),
                template_prefix=self.collection_name,
                context=self.view_context,
                serializer=self.serializer.serialize_resource,
            )
        return self._responder

    @property
    def dispatcher(self) -> ResponseDispatcher:
        if self._dispatcher is None:
            self._dispatcher = ResponseDispatcher(
                self.responder, serialize_errors=self.serializer.serialize_errors
            )
        return self._dispatcher

    @cached_property
    def serializer(self) -> Serializer:
        # Read from the class so plain functions are not bound to the instance
        cls = type(self)
        return Serializer(
            resource_serializer=cls.resource_serializer,
            collection_serializer=cls.collection_serializer,
            error_serializer=cls.error_serializer,
        )

    def view_context(self) -> Dict[str, Any]:
        """Variables available to HTML views."""
        context = {
            "controller": self,
            "request": self.request,
            "resource": self.resource,
            "collection": self.collection,
            "resource_class_name": self.resource_class_name,
        }
        context[self.resource_name] = self.resource
        context[self.collection_name] = self.collection
        return context

    # Actions

    def index(self) -> Response:
        collection = self.find_collection()
        if self.paginate_collection:
            collection = self.paginate(collection)
        self.collection = collection
        return self.negotiator.respond({
            "html": lambda: self.responder.render("index"),
            "json": lambda: self.responder.render(json=self.serialize_collection(collection)),
        })

    def show(self) -> Response:
        self.resource = self.find_resource()
        return self._respond_with_view("show")

    def edit(self) -> Response:
        self.resource = self.find_resource()
        return self._respond_with_view("edit")

    def new(self) -> Response:
        self.resource = self.resource_class()
        return self._respond_with_view("new")

    def create(self) -> Response:
        self.resource = self.resource_class(**self.resource_params())
        return self.format_response(
            self.resource,
            notice=f"{self.resource_class_name} was successfully created.",
            status=HTTPStatus.CREATED,
            on_error_render="new",
            evaluate=self.create_resource,
        )

    def update(self) -> Response:
        self.resource = self.find_resource()
        return self.format_response(
            self.resource,
            notice=f"{self.resource_class_name} was successfully updated.",
            status=HTTPStatus.OK,
            on_error_render="edit",
            evaluate=self.update_resource,
        )

    def destroy(self) -> Response:
        self.resource = self.find_resource()
        notice = f"{self.resource_class_name} was successfully destroyed."
        redirect_notice = notice if self.include_notice_on_destroy_redirect else None
        return self.format_response(
            self.resource,
            notice=notice,
            status=HTTPStatus.SEE_OTHER,
            on_error_render="show",
            evaluate=self.destroy_resource,
            overrides={
                "html": lambda: self.responder.redirect_to(
                    self.resource_class, notice=redirect_notice, status=HTTPStatus.SEE_OTHER
                ),
                "json": lambda: self.responder.head(HTTPStatus.NO_CONTENT),
            },
        )

    def _respond_with_view(self, view: str) -> Response:
        return self.negotiator.respond({
            "html": lambda: self.responder.render(view),
            "json": lambda: self.responder.render(view, format="json"),
        })

    def format_response(
        self,
        resource: Any,
        *,
        notice: str,
        status: HTTPStatus,
        on_error_render: str,
        evaluate: Callable[[], Any],
        overrides: Optional[Mapping[str, Callable[[], Any]]] = None,
    ) -> Response:
        """Run ``evaluate`` and respond with success or error handling per format."""
        return self.dispatcher.dispatch(
            self.negotiator,
            resource,
            evaluate,
            notice=notice,
            status=status,
            on_error_render=on_error_render,
            overrides=overrides,
        )

    # Persistence hooks

    def find_collection(self) -> Any:
        return self.resource_class.all()

    def create_resource(self) -> Any:
        return self.resource.save()

    def update_resource(self) -> Any:
        return self.resource.update(**self.resource_params())

    def destroy_resource(self) -> Any:
        return self.resource.destroy()

    def find_resource(self) -> Any:
        """Find the resource named by the id parameter.

        When nothing is found the outcome depends on ``on_not_found``.
        """
        try:
            policy = NotFoundPolicy(self.on_not_found)
        except ValueError:
            raise ParameterError(
                f"on_not_found must be one of {', '.join(p.value for p in NotFoundPolicy)}, "
                f"got {self.on_not_found!r}"
            ) from None

        resource_id = self.id_param()
        found = None
        if resource_id is not None:
            try:
                found = self.resource_class.find(resource_id)
            except LookupError as e:
                logger.debug(f"{self.resource_class_name} {resource_id} not found: {e}")

        if found is not None:
            return found
        if policy is NotFoundPolicy.FAIL:
            raise ResourceNotFoundError(self.resource_class_name, resource_id)
        if policy is NotFoundPolicy.NULL:
            return None
        return self.resource_class()

    # Parameters

    def id_param(self) -> Optional[Any]:
        return id_param(self.params, self.params_id_key)

    def resource_params(self) -> Dict[str, Any]:
        """Permitted attributes for the resource.

        With ``params_model`` set, the parameters nested under the resource
        name are validated by it. Otherwise subclasses must override this.
        """
        if self.params_model is None:
            raise MissingImplementationError(
                f"{type(self).__name__} must define `resource_params` or `params_model`. "
                f"Example: `return permit(require(self.params, \"{self.resource_name}\"), \"title\", \"body\")`"
            )
        return validate_params(self.params_model, require(self.params, self.resource_name))

    def bulk_params(self, key: Optional[str] = None) -> List[Dict[str, Any]]:
        return bulk_params(self.params, key or self.collection_name, self.permit_bulk_item_params)

    def permit_bulk_item_params(self, item_params: Mapping) -> Dict[str, Any]:
        if self.params_model is not None:
            return validate_params(self.params_model, item_params)
        return dict(item_params)

    # Pagination and serialization

    def paginate(self, collection: Any, page: Any = None, per_page: Any = None) -> Any:
        return paginate(
            collection,
            page=self.params.get("page") if page is None else page,
            per_page=self.params.get("per_page") if per_page is None else per_page,
            default_per_page=self.per_page,
        )

    def paginate_bulk_operation(self, collection: Any, operation: Callable[[Any], Any],
                                batch_size: Any = DEFAULT_BULK_BATCH_SIZE) -> List[Any]:
        return paginate_bulk_operation(collection, operation, batch_size)

    def pagination_meta(self, collection: Any) -> Dict[str, int]:
        return pagination_meta(collection)

    def serialize_collection(self, collection: Any) -> Any:
        data = self.serializer.serialize_collection(collection)
        return self.serializer.add_pagination_meta(collection, data)
