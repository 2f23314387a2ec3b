"""
Response dispatch for create/update/destroy style actions.

Given a resource and an operation that decides success, the dispatcher picks
one response action per format: a built-in default or a caller supplied
override. Overrides always win; there is no blending.

Per call the dispatcher moves through::

    VALIDATING -> EVALUATING_OUTCOME -> SUCCESS | FAILURE -> DISPATCHED
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Any, Callable, Dict, Mapping, Optional

from .exceptions import ParameterError
from .negotiation import FormatNegotiator
from .responders import Responder

HTML_FORMAT = "html"
JSON_FORMAT = "json"
ERROR_PREFIX = "error_"
DEFAULT_ERROR_PAYLOAD = {"error": "An error occurred"}

Overrides = Mapping[str, Callable[[], Any]]


class DispatchState(Enum):
    """States of a single dispatch call."""

    VALIDATING = "validating"
    EVALUATING_OUTCOME = "evaluating_outcome"
    SUCCESS = "success"
    FAILURE = "failure"
    DISPATCHED = "dispatched"


@dataclass(frozen=True)
class ResponseOutcome:
    """The evaluated result of an operation, ready to be turned into a response."""

    succeeded: bool
    resource: Any
    notice: str
    success_status: HTTPStatus
    error_template: str
    overrides: Mapping[str, Callable[[], Any]] = field(default_factory=dict)


def extract_errors(resource: Any, serialize: Optional[Callable[[Any], Any]] = None) -> Any:
    """Error payload for a failed operation on ``resource``.

    Uses the resource's ``errors`` (calling it if it is a method), passed
    through ``serialize`` when given, or a generic payload when the resource
    has no errors.
    """
    errors = getattr(resource, "errors", None)
    if callable(errors):
        errors = errors()
    if errors is None:
        return dict(DEFAULT_ERROR_PAYLOAD)
    if serialize is not None:
        return serialize(errors)
    return errors


class ResponseDispatcher:
    """Chooses and invokes the response action for an operation's outcome.

    Args:
        responder: Performs the redirect/render actions.
        logger: Logger for the state trace and for errors raised while dispatching.
            Defaults to this module's logger.
        serialize_errors: Formats a resource's errors for JSON responses.
    """

    def __init__(self, responder: Responder, logger: Optional[logging.Logger] = None,
                 serialize_errors: Optional[Callable[[Any], Any]] = None):
        self.responder = responder
        self.serialize_errors = serialize_errors
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.state: Optional[DispatchState] = None

    def _enter(self, state: DispatchState) -> None:
        self.state = state
        self.logger.debug(f"Dispatch state {state.name}")

    def validate(self, resource: Any, notice: Any, status: Any, on_error_render: Any,
                 evaluate: Any, overrides: Any) -> None:
        """Check dispatch arguments.

        Raises:
            ParameterError: Naming the first violated constraint.
        """
        if resource is None:
            raise ParameterError("Resource cannot be None")
        if not isinstance(notice, str):
            raise ParameterError(f"Notice must be a string, got {type(notice).__name__}")
        if not isinstance(status, HTTPStatus):
            raise ParameterError(f"Status must be an HTTPStatus, got {type(status).__name__}")
        if not isinstance(on_error_render, str) or not on_error_render.isidentifier():
            raise ParameterError(
                f"on_error_render must be a template identifier, got {on_error_render!r}"
            )
        if evaluate is None or not callable(evaluate):
            raise ParameterError("An outcome evaluating callable is required")
        if not isinstance(overrides, Mapping):
            raise ParameterError(f"Overrides must be a mapping, got {type(overrides).__name__}")
        for key, handler in overrides.items():
            if not callable(handler):
                raise ParameterError(f"Override for '{key}' must be callable")

    def dispatch(
        self,
        negotiator: FormatNegotiator,
        resource: Any,
        evaluate: Callable[[], Any],
        *,
        notice: str,
        status: HTTPStatus,
        on_error_render: str,
        overrides: Optional[Overrides] = None,
    ) -> Any:
        """Evaluate the operation and respond in the negotiated format.

        Args:
            negotiator: Picks the format and invokes its callback.
            resource: The resource operated on; must not be None.
            evaluate: Runs the operation; a truthy result means success.
            notice: Flash message for HTML success redirects.
            status: Status for JSON success responses.
            on_error_render: View rendered for HTML failures.
            overrides: Replacement actions keyed by format (``html``, ``json``,
                ``xml`` ...) or by ``error_<format>`` for failures.

        Returns:
            Whatever the chosen action returned.
        """
        self._enter(DispatchState.VALIDATING)
        overrides = {} if overrides is None else overrides
        self.validate(resource, notice, status, on_error_render, evaluate, overrides)

        try:
            self._enter(DispatchState.EVALUATING_OUTCOME)
            outcome = ResponseOutcome(
                succeeded=bool(evaluate()),
                resource=resource,
                notice=notice,
                success_status=status,
                error_template=on_error_render,
                overrides=dict(overrides),
            )

            if outcome.succeeded:
                self._enter(DispatchState.SUCCESS)
                callbacks = self.success_callbacks(outcome, negotiator)
            else:
                self._enter(DispatchState.FAILURE)
                callbacks = self.error_callbacks(outcome, negotiator)

            result = negotiator.respond(callbacks)
        except Exception as e:
            self.logger.error(f"Error dispatching response for {type(resource).__name__}: {e}", exc_info=True)
            raise

        self._enter(DispatchState.DISPATCHED)
        return result

    def success_callbacks(self, outcome: ResponseOutcome,
                          negotiator: FormatNegotiator) -> Dict[str, Callable[[], Any]]:
        responder = self.responder
        defaults: Dict[str, Callable[[], Any]] = {
            HTML_FORMAT: lambda: responder.redirect_to(outcome.resource, notice=outcome.notice),
            JSON_FORMAT: lambda: responder.render(
                "show", format=JSON_FORMAT, status=outcome.success_status,
                location=outcome.resource, resource=outcome.resource,
            ),
        }
        callbacks = {fmt: outcome.overrides.get(fmt, default) for fmt, default in defaults.items()}

        for key, handler in outcome.overrides.items():
            if key in callbacks or key.startswith(ERROR_PREFIX):
                continue
            if negotiator.supports(key):
                callbacks[key] = handler
        return callbacks

    def error_callbacks(self, outcome: ResponseOutcome,
                        negotiator: FormatNegotiator) -> Dict[str, Callable[[], Any]]:
        responder = self.responder
        defaults: Dict[str, Callable[[], Any]] = {
            HTML_FORMAT: lambda: responder.render(
                outcome.error_template, status=HTTPStatus.UNPROCESSABLE_ENTITY
            ),
            JSON_FORMAT: lambda: responder.render(
                json=extract_errors(outcome.resource, self.serialize_errors), status=HTTPStatus.UNPROCESSABLE_ENTITY
            ),
        }
        callbacks = {
            fmt: outcome.overrides.get(ERROR_PREFIX + fmt, default) for fmt, default in defaults.items()
        }

        for key, handler in outcome.overrides.items():
            if not key.startswith(ERROR_PREFIX):
                continue
            fmt = key[len(ERROR_PREFIX):]
            if fmt in callbacks:
                continue
            if negotiator.supports(fmt):
                callbacks[fmt] = handler
        return callbacks
