"""
Renderers for controller views and JSON payloads.
"""

import json
import os
from typing import Any, List, Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    PackageLoader,
    TemplateNotFound,
    select_autoescape,
)
from jinja2.loaders import BaseLoader


class JSONRenderer:
    """JSON payload renderer."""

    media_type = "application/json"

    def __init__(self, indent: Optional[int] = None):
        self.indent = indent

    def render(self, data: Any) -> str:
        """Render data as JSON."""
        if isinstance(data, str):
            # Already serialized
            return data

        data = self._serialize_pydantic(data)

        try:
            return json.dumps(data, indent=self.indent)
        except (TypeError, ValueError):
            return json.dumps({"data": str(data)}, indent=self.indent)

    def _serialize_pydantic(self, data: Any) -> Any:
        """Convert Pydantic models to dictionaries for JSON serialization."""
        if hasattr(data, "model_dump"):
            return data.model_dump(mode="json")
        elif isinstance(data, (list, tuple)):
            return [self._serialize_pydantic(item) for item in data]
        elif isinstance(data, dict):
            return {key: self._serialize_pydantic(value) for key, value in data.items()}
        else:
            return data


class TemplateRenderer:
    """Renders controller views with Jinja2.

    ``views`` is either a directory path or an importable package containing a
    ``templates`` directory. Templates are addressed as ``<prefix>/<view>.html``,
    e.g. ``posts/new.html``.
    """

    media_type = "text/html"

    def __init__(self, views: str = "views", unsafe: bool = False, extension: str = "html"):
        self.views = views
        self.unsafe = unsafe
        self.extension = extension
        self._env: Optional[Environment] = None

    @property
    def environment(self) -> Environment:
        if self._env is None:
            # autoescape is only disabled when the caller asks for it via unsafe=True
            self._env = Environment(  # nosec B701
                loader=self._find_loader(),
                autoescape=select_autoescape() if not self.unsafe else False,
            )
        return self._env

    def _find_loader(self) -> BaseLoader:
        candidates: List[str] = [
            self.views,
            os.path.join(os.getcwd(), self.views),
        ]
        for path in candidates:
            if os.path.isdir(path):
                return FileSystemLoader(path)

        try:
            return PackageLoader(self.views)
        except (ImportError, ValueError, ModuleNotFoundError) as e:
            raise ValueError(
                f"Could not find template directory or package '{self.views}'. "
                f"Tried paths: {candidates}"
            ) from e

    def template_name(self, view: str, prefix: Optional[str] = None) -> str:
        name = f"{view}.{self.extension}"
        return f"{prefix}/{name}" if prefix else name

    def render(self, view: str, prefix: Optional[str] = None, **context: Any) -> str:
        """Render ``view`` (under ``prefix``) with the given context.

        Raises:
            ValueError: If the template does not exist.
        """
        name = self.template_name(view, prefix)
        try:
            template = self.environment.get_template(name)
        except TemplateNotFound as e:
            raise ValueError(
                f"Template '{name}' not found in '{self.views}'. "
                f"Ensure the directory or package contains the view."
            ) from e
        return template.render(**context)

