"""
Tests for the request and response models.
"""

from http import HTTPStatus

from resourceful import HTTPMethod, Request, Response


class TestRequest:
    """Test request helpers."""

    def test_accept_header_is_case_insensitive(self):
        request = Request(method=HTTPMethod.GET, path="/", headers={"accept": "application/json"})
        assert request.get_accept_header() == "application/json"

    def test_accept_header_default(self):
        assert Request(method=HTTPMethod.GET, path="/").get_accept_header() == "*/*"

    def test_format_from_extension(self):
        assert Request(method=HTTPMethod.GET, path="/posts/1.JSON").get_format() == "json"

    def test_format_parameter_wins(self):
        request = Request(method=HTTPMethod.GET, path="/posts/1.json", params={"format": "HTML"})
        assert request.get_format() == "html"

    def test_no_format(self):
        assert Request(method=HTTPMethod.GET, path="/posts").get_format() is None


class TestResponse:
    """Test response header handling."""

    def test_headers(self):
        response = Response(HTTPStatus.CREATED, body="{}", content_type="application/json",
                            location="/posts/1")

        assert response.status_code == 201
        assert response.headers == {
            "Content-Type": "application/json",
            "Location": "/posts/1",
            "Content-Length": "2",
        }

    def test_content_length_counts_bytes(self):
        assert Response(200, body="é").headers["Content-Length"] == "2"

    def test_no_content_has_no_length(self):
        assert "Content-Length" not in Response(HTTPStatus.NO_CONTENT).headers

    def test_is_redirect(self):
        assert Response(HTTPStatus.FOUND, location="/posts").is_redirect
        assert not Response(HTTPStatus.OK, location="/posts").is_redirect
        assert not Response(HTTPStatus.FOUND).is_redirect
