"""Unit tests for rhodium.api.errors domain exceptions and error handlers.

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_errors.py

"""

from __future__ import annotations

import falcon
import falcon.asgi
import falcon.testing
import pytest

from rhodium.adapters.errors import (
    AdapterConfigError,
    PayloadDecodeError,
    PlatformError,
    RateLimitedError,
    RepoNotFoundError,
    UnsupportedPlatformError,
    WebhookVerificationError,
)
from rhodium.api.errors import (
    ComplianceNotFoundError,
    InvalidInputError,
    register_error_handlers,
)


class _RaisingResource:
    """Resource that raises whatever exception it was given."""

    def __init__(self) -> None:
        self.error: Exception = RuntimeError("unset")

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        raise self.error


@pytest.fixture
def resource() -> _RaisingResource:
    """Provide the raising resource."""
    return _RaisingResource()


@pytest.fixture
def client(resource: _RaisingResource) -> falcon.testing.TestClient:
    """Build a test client with every error handler registered."""
    app = falcon.asgi.App()
    app.add_route("/boom", resource)
    register_error_handlers(app)
    return falcon.testing.TestClient(app)


@pytest.mark.parametrize(
    ("error", "status", "title"),
    [
        (
            WebhookVerificationError.signature_mismatch(),
            falcon.HTTP_401,
            "Webhook verification failed",
        ),
        (UnsupportedPlatformError("gitlab"), falcon.HTTP_404, "Unknown platform"),
        (
            PayloadDecodeError.invalid_json("eof"),
            falcon.HTTP_422,
            "Malformed payload",
        ),
        (
            PlatformError.unsupported_event_type("fork"),
            falcon.HTTP_422,
            "Unsupported webhook",
        ),
        (
            PlatformError.api_error("post commit status", 500, "oops"),
            falcon.HTTP_502,
            "Platform API error",
        ),
        (
            AdapterConfigError.missing_token("github"),
            falcon.HTTP_500,
            "Adapter misconfigured",
        ),
        (RepoNotFoundError("octo", "reef"), falcon.HTTP_404, "Repository not found"),
        (
            ComplianceNotFoundError("github", "octo", "reef"),
            falcon.HTTP_404,
            "Compliance report not found",
        ),
    ],
)
def test_errors_map_to_status_and_body(
    client: falcon.testing.TestClient,
    resource: _RaisingResource,
    error: Exception,
    status: str,
    title: str,
) -> None:
    """Each error maps to its status with a title and description."""
    resource.error = error

    result = client.simulate_get("/boom")

    assert result.status == status, f"expected {status} for {type(error).__name__}"
    assert result.json == {"title": title, "description": str(error)}, (
        "wrong error body"
    )


def test_rate_limited_sets_retry_after(
    client: falcon.testing.TestClient, resource: _RaisingResource
) -> None:
    """Rate limiting answers 503 and forwards the retry hint."""
    resource.error = RateLimitedError(42)

    result = client.simulate_get("/boom")

    assert result.status == falcon.HTTP_503, "expected HTTP 503"
    assert result.headers.get("retry-after") == "42", "expected Retry-After"


def test_rate_limited_without_hint_omits_header(
    client: falcon.testing.TestClient, resource: _RaisingResource
) -> None:
    """No hint means no Retry-After header."""
    resource.error = RateLimitedError()

    result = client.simulate_get("/boom")

    assert result.status == falcon.HTTP_503, "expected HTTP 503"
    assert "retry-after" not in result.headers, "unexpected Retry-After"


def test_invalid_input_includes_field(
    client: falcon.testing.TestClient, resource: _RaisingResource
) -> None:
    """Field-level validation errors name the field."""
    resource.error = InvalidInputError("must be an integer", field="limit")

    result = client.simulate_get("/boom")

    assert result.status == falcon.HTTP_400, "expected HTTP 400"
    assert result.json == {
        "title": "Invalid input",
        "description": "must be an integer",
        "field": "limit",
    }, "wrong error body"


def test_invalid_input_without_field(
    client: falcon.testing.TestClient, resource: _RaisingResource
) -> None:
    """Validation errors without a field omit it."""
    resource.error = InvalidInputError("bad query")

    result = client.simulate_get("/boom")

    assert result.json == {"title": "Invalid input", "description": "bad query"}


def test_compliance_not_found_message() -> None:
    """The message names the repository key."""
    error = ComplianceNotFoundError("github", "octo", "reef")
    assert str(error) == "No compliance report for github:octo/reef.", (
        "unexpected message"
    )
