"""Tests for API error responses."""

import orjson

from cdnpurge.api.errors import error_response


class TestErrorResponse:
    """Tests for error_response."""

    def test_body_and_header(self) -> None:
        """Message is sent in the body and the x-error header."""
        response = error_response(400, "products array cannot be empty")

        assert response.status_code == 400
        assert orjson.loads(response.body) == {"error": "products array cannot be empty"}
        assert response.headers["x-error"] == "products array cannot be empty"

    def test_multiline_message_header(self) -> None:
        """The header is flattened to one line; the body keeps the message."""
        response = error_response(500, "cache purge failed: 503 - <html>\n<body>")

        assert response.headers["x-error"] == "cache purge failed: 503 - <html> <body>"
        assert orjson.loads(response.body)["error"] == "cache purge failed: 503 - <html>\n<body>"
