"""
Tests for the resource type registry.
"""

import pytest

from resourceful import TypeRegistry


class Post:
    pass


class TestTypeRegistry:
    """Test registering and resolving resource types."""

    def test_register_and_resolve(self):
        registry = TypeRegistry()
        registry.register(Post)

        assert registry.resolve("Post") is Post
        assert "Post" in registry
        assert len(registry) == 1

    def test_decorator(self):
        registry = TypeRegistry()

        @registry.register
        class Comment:
            pass

        assert registry.resolve("Comment") is Comment

    def test_decorator_with_name(self):
        registry = TypeRegistry()

        @registry.register(name="Article")
        class BlogPost:
            pass

        assert registry.resolve("Article") is BlogPost
        assert "BlogPost" not in registry

    def test_initial_types(self):
        assert TypeRegistry([Post]).names() == ["Post"]

    def test_registering_twice_is_allowed(self):
        registry = TypeRegistry([Post])
        registry.register(Post)
        assert len(registry) == 1

    def test_name_clash(self):
        registry = TypeRegistry([Post])

        class Other:
            pass

        with pytest.raises(ValueError, match="already registered"):
            registry.register(Other, name="Post")

    def test_unknown_name(self):
        with pytest.raises(LookupError, match="uninitialized constant Missing"):
            TypeRegistry().resolve("Missing")

    def test_empty_name(self):
        with pytest.raises(LookupError):
            TypeRegistry([Post]).resolve("")
