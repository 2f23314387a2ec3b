"""
Basic usage example for resourceful.

This example demonstrates:
- Inferring the resource class from the controller name
- Validating resource parameters with a pydantic model
- JSON responses for create, show, update and destroy
- Validation failures answered with 422 and the resource errors
"""

import logging
from typing import Optional

from pydantic import BaseModel

from resourceful import HTTPMethod, NotFoundPolicy, Request, ResourceController, register

logging.basicConfig(level=logging.INFO)


@register
class User:
    """In-memory user record."""

    _store = {}
    _next_id = 1

    def __init__(self, name=None, email=None):
        self.id = None
        self.name = name
        self.email = email
        self.errors = {}

    @classmethod
    def all(cls):
        return list(cls._store.values())

    @classmethod
    def find(cls, user_id):
        return cls._store.get(int(user_id))

    def save(self):
        self.errors = {}
        if not self.email or "@" not in self.email:
            self.errors["email"] = ["is invalid"]
            return False
        if self.id is None:
            self.id = User._next_id
            User._next_id += 1
        User._store[self.id] = self
        return True

    def update(self, **attrs):
        for name, value in attrs.items():
            setattr(self, name, value)
        return self.save()

    def destroy(self):
        return User._store.pop(self.id, None) is not None

    def to_dict(self):
        return {"id": self.id, "name": self.name, "email": self.email}


class UserParams(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class UsersController(ResourceController):
    params_model = UserParams
    on_not_found = NotFoundPolicy.FAIL


def json_request(method, path, **params):
    return Request(method=method, path=path, headers={"Accept": "application/json"}, params=params)


def main():
    """Run example requests."""
    response = UsersController(
        json_request(HTTPMethod.POST, "/users", user={"name": "Alice", "email": "alice@example.com"})
    ).create()
    print(f"POST /users: {response.status_code} {response.headers.get('Location')}")
    print(f"Response: {response.body}")
    print()

    response = UsersController(json_request(HTTPMethod.POST, "/users", user={"name": "Bob"})).create()
    print(f"POST /users (invalid): {response.status_code}")
    print(f"Response: {response.body}")
    print()

    response = UsersController(json_request(HTTPMethod.GET, "/users/1", id="1")).show()
    print(f"GET /users/1: {response.status_code}")
    print(f"Response: {response.body}")
    print()

    response = UsersController(
        json_request(HTTPMethod.PATCH, "/users/1", id="1", user={"name": "Alice Smith"})
    ).update()
    print(f"PATCH /users/1: {response.status_code}")
    print(f"Response: {response.body}")
    print()

    response = UsersController(json_request(HTTPMethod.GET, "/users")).index()
    print(f"GET /users: {response.status_code}")
    print(f"Response: {response.body}")
    print()

    response = UsersController(json_request(HTTPMethod.DELETE, "/users/1", id="1")).destroy()
    print(f"DELETE /users/1: {response.status_code}")
    print()


if __name__ == "__main__":
    main()
