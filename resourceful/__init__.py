"""
Convention-over-configuration RESTful resource controllers.

Controllers infer the resource they manage from their own name, provide the
standard index/show/new/create/edit/update/destroy actions, and format
success and error responses consistently across HTML and JSON with per-call
overrides.
"""

from http import HTTPStatus

from .controller import NotFoundPolicy, ResourceController
from .dispatch import DispatchState, ResponseDispatcher, ResponseOutcome, extract_errors
from .exceptions import (
    MissingImplementationError,
    ParameterError,
    ResolutionError,
    ResourceNotFoundError,
    ResourcefulError,
    UnknownFormatError,
    ValidationError,
)
from .models import HTTPMethod, Request, Response
from .naming import Inflector, ModelName, NameResolver, ResourceIdentity
from .negotiation import AcceptNegotiator, FormatNegotiator
from .pagination import Page, paginate, paginate_bulk_operation, pagination_meta
from .params import bulk_params, id_param, permit, require, validate_params
from .registry import TypeRegistry, default_registry, register
from .renderers import JSONRenderer, TemplateRenderer
from .responders import PathBuilder, Responder, ResponseBuilder
from .serialization import Serializer

__version__ = "0.1.0"
__author__ = "resourceful contributors"
__license__ = "MIT"

__all__ = [
    "ResourceController",
    "NotFoundPolicy",
    "ResponseDispatcher",
    "ResponseOutcome",
    "DispatchState",
    "extract_errors",
    "NameResolver",
    "ResourceIdentity",
    "Inflector",
    "ModelName",
    "TypeRegistry",
    "default_registry",
    "register",
    "FormatNegotiator",
    "AcceptNegotiator",
    "Responder",
    "ResponseBuilder",
    "PathBuilder",
    "JSONRenderer",
    "TemplateRenderer",
    "Serializer",
    "Page",
    "paginate",
    "paginate_bulk_operation",
    "pagination_meta",
    "bulk_params",
    "id_param",
    "permit",
    "require",
    "validate_params",
    "Request",
    "Response",
    "HTTPMethod",
    "HTTPStatus",
    "ResourcefulError",
    "ResolutionError",
    "ParameterError",
    "MissingImplementationError",
    "ResourceNotFoundError",
    "UnknownFormatError",
    "ValidationError",
]
