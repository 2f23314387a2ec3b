"""
Core data models for resourceful controllers.
"""

import posixpath
from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, Optional, Union


class HTTPMethod(Enum):
    """Enumeration of supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


@dataclass
class Request:
    """Represents the inbound request a controller is handling."""

    method: HTTPMethod
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    body: Optional[str] = None

    def get_accept_header(self) -> str:
        """Get the Accept header, defaulting to */* if not present."""
        for name, value in self.headers.items():
            if name.lower() == "accept":
                return value
        return "*/*"

    def get_format(self) -> Optional[str]:
        """Get an explicitly requested format.

        A ``format`` parameter wins over a path extension such as ``/posts/1.json``.
        """
        explicit = self.params.get("format")
        if explicit:
            return str(explicit).lower()
        _, ext = posixpath.splitext(self.path)
        if ext:
            return ext[1:].lower()
        return None


@dataclass
class Response:
    """Represents the response produced by a controller action."""

    status_code: Union[int, HTTPStatus]
    body: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    content_type: Optional[str] = None
    location: Optional[str] = None
    notice: Optional[str] = None

    def __post_init__(self):
        self.status_code = int(self.status_code)
        if self.headers is None:
            self.headers = {}

        if self.content_type:
            self.headers["Content-Type"] = self.content_type

        if self.location:
            self.headers["Location"] = self.location

        # No Content-Length for bodiless statuses
        if self.status_code not in (HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED):
            body_bytes = self.body.encode("utf-8") if self.body else b""
            self.headers["Content-Length"] = str(len(body_bytes))

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400 and self.location is not None
