"""
Shared fixtures for resourceful tests.

Provides an in-memory resource model, a fresh type registry per test,
recording collaborators for the dispatcher and a directory of Jinja2 views.
"""

from http import HTTPStatus
from typing import Optional

import pytest
from pydantic import BaseModel

from resourceful import (
    FormatNegotiator,
    HTTPMethod,
    ModelName,
    Request,
    ResourceController,
    Responder,
    TypeRegistry,
)


class MemoryModel:
    """Minimal in-memory resource with ActiveRecord-like persistence methods."""

    fields = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._store = {}
        cls._next_id = 1

    def __init__(self, **attrs):
        self.id = None
        self.errors = {}
        for name in self.fields:
            setattr(self, name, attrs.get(name))

    @classmethod
    def all(cls):
        return [cls._store[key] for key in sorted(cls._store)]

    @classmethod
    def find(cls, resource_id):
        return cls._store.get(int(resource_id))

    def validate(self):
        self.errors = {}

    def save(self):
        self.validate()
        if self.errors:
            return False
        if self.id is None:
            self.id = type(self)._next_id
            type(self)._next_id += 1
        type(self)._store[self.id] = self
        return True

    def update(self, **attrs):
        for name, value in attrs.items():
            setattr(self, name, value)
        return self.save()

    def destroy(self):
        return type(self)._store.pop(self.id, None) is not None

    def to_dict(self):
        data = {"id": self.id}
        data.update({name: getattr(self, name) for name in self.fields})
        return data


class PostParams(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None


class RecordingResponder(Responder):
    """Responder that records every action instead of building responses."""

    def __init__(self):
        self.calls = []

    def redirect_to(self, target, notice=None, status=HTTPStatus.FOUND):
        self.calls.append(("redirect_to", {"target": target, "notice": notice, "status": status}))
        return "redirect_to"

    def render(self, view=None, *, json=None, format="html", status=HTTPStatus.OK, location=None,
               resource=None):
        self.calls.append(
            ("render", {"view": view, "json": json, "format": format, "status": status,
                        "location": location, "resource": resource})
        )
        return "render"

    def head(self, status):
        self.calls.append(("head", {"status": status}))
        return "head"

    @property
    def actions(self):
        return [name for name, _ in self.calls]


class StubNegotiator(FormatNegotiator):
    """Negotiator that always picks ``fmt`` and records the registered formats."""

    def __init__(self, fmt, supported=("html", "json")):
        self.fmt = fmt
        self.supported = set(supported)
        self.registered = []

    def supports(self, fmt):
        return fmt in self.supported

    def respond(self, callbacks):
        self.registered = list(callbacks)
        return callbacks[self.fmt]()


@pytest.fixture
def registry():
    return TypeRegistry()


@pytest.fixture
def post_model(registry):
    class Post(MemoryModel):
        fields = ("title", "body")
        model_name = ModelName("Post")

        def validate(self):
            self.errors = {}
            if not self.title:
                self.errors["title"] = ["can't be blank"]

    registry.register(Post)
    return Post


@pytest.fixture
def responder():
    return RecordingResponder()


@pytest.fixture
def negotiator():
    return StubNegotiator


@pytest.fixture
def views_dir(tmp_path):
    posts = tmp_path / "posts"
    posts.mkdir()
    (posts / "index.html").write_text(
        "<ul>{% for post in posts %}<li>{{ post.title }}</li>{% endfor %}</ul>"
    )
    (posts / "show.html").write_text("<h1>{{ post.title }}</h1>")
    (posts / "new.html").write_text(
        "<h1>New {{ resource_class_name }}</h1>"
        "{% for field, messages in post.errors.items() %}<p>{{ field }} {{ messages[0] }}</p>{% endfor %}"
    )
    (posts / "edit.html").write_text(
        "<h1>Editing {{ post.title }}</h1>"
        "{% for field, messages in post.errors.items() %}<p>{{ field }} {{ messages[0] }}</p>{% endfor %}"
    )
    return tmp_path


@pytest.fixture
def posts_controller(registry, post_model, views_dir):
    class PostsController(ResourceController):
        params_model = PostParams

    PostsController.registry = registry
    PostsController.views = str(views_dir)
    return PostsController


@pytest.fixture
def make_request():
    def factory(method=HTTPMethod.GET, path="/posts", accept="text/html", **params):
        return Request(method=method, path=path, headers={"Accept": accept}, params=params)

    return factory
