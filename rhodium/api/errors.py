"""Domain exceptions and Falcon error handlers for the API layer.

Adapter errors raised while handling a request are translated into JSON
bodies carrying ``title`` and ``description``. Falcon picks the handler
registered for the most specific exception class, so subclasses such as
``PayloadDecodeError`` and ``UnsupportedPlatformError`` get their own
mapping ahead of ``PlatformError``.

Usage
-----
Register every handler on the Falcon app::

    from rhodium.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from rhodium.adapters.errors import (
    AdapterConfigError,
    PayloadDecodeError,
    PlatformError,
    RateLimitedError,
    RepoNotFoundError,
    UnsupportedPlatformError,
    WebhookVerificationError,
)

if typ.TYPE_CHECKING:
    import falcon.asgi
    from falcon.asgi import Request, Response

__all__ = [
    "ComplianceNotFoundError",
    "InvalidInputError",
    "register_error_handlers",
]


class ComplianceNotFoundError(Exception):
    """Raised when no compliance report exists for a repository.

    Attributes
    ----------
    platform
        Hosting platform identifier.
    owner
        Repository owner.
    name
        Repository name.

    """

    def __init__(self, platform: str, owner: str, name: str) -> None:
        """Initialize with the repository coordinates."""
        self.platform = platform
        self.owner = owner
        self.name = name
        super().__init__(f"No compliance report for {platform}:{owner}/{name}.")


class InvalidInputError(Exception):
    """Raised for client validation errors that should map to HTTP 400.

    Attributes
    ----------
    reason
        Human-readable description of the validation failure.
    field
        Optional name of the input field that failed validation.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialize with a validation reason and optional field name."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


def _problem(resp: Response, status: str, title: str, description: str) -> None:
    resp.status = status
    resp.media = {"title": title, "description": description}


async def handle_verification_error(
    _req: Request,
    resp: Response,
    ex: WebhookVerificationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``WebhookVerificationError`` to HTTP 401."""
    _problem(resp, falcon.HTTP_401, "Webhook verification failed", str(ex))


async def handle_unsupported_platform(
    _req: Request,
    resp: Response,
    ex: UnsupportedPlatformError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``UnsupportedPlatformError`` to HTTP 404."""
    _problem(resp, falcon.HTTP_404, "Unknown platform", str(ex))


async def handle_payload_decode_error(
    _req: Request,
    resp: Response,
    ex: PayloadDecodeError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``PayloadDecodeError`` to HTTP 422."""
    _problem(resp, falcon.HTTP_422, "Malformed payload", str(ex))


async def handle_platform_error(
    _req: Request,
    resp: Response,
    ex: PlatformError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``PlatformError`` to HTTP 422, or 502 for upstream API failures.

    Errors carrying a ``status_code`` came from a platform API response,
    not from the inbound request.
    """
    if ex.status_code is not None:
        _problem(resp, falcon.HTTP_502, "Platform API error", str(ex))
        return
    _problem(resp, falcon.HTTP_422, "Unsupported webhook", str(ex))


async def handle_config_error(
    _req: Request,
    resp: Response,
    ex: AdapterConfigError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AdapterConfigError`` to HTTP 500."""
    _problem(resp, falcon.HTTP_500, "Adapter misconfigured", str(ex))


async def handle_rate_limited(
    _req: Request,
    resp: Response,
    ex: RateLimitedError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``RateLimitedError`` to HTTP 503, forwarding ``Retry-After``."""
    _problem(resp, falcon.HTTP_503, "Platform rate limited", str(ex))
    if ex.retry_after is not None:
        resp.set_header("Retry-After", str(ex.retry_after))


async def handle_repo_not_found(
    _req: Request,
    resp: Response,
    ex: RepoNotFoundError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``RepoNotFoundError`` to HTTP 404."""
    _problem(resp, falcon.HTTP_404, "Repository not found", str(ex))


async def handle_compliance_not_found(
    _req: Request,
    resp: Response,
    ex: ComplianceNotFoundError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``ComplianceNotFoundError`` to HTTP 404."""
    _problem(resp, falcon.HTTP_404, "Compliance report not found", str(ex))


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to HTTP 400."""
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Invalid input",
        "description": ex.reason,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Attach every handler in this module to ``app``."""
    app.add_error_handler(WebhookVerificationError, handle_verification_error)
    app.add_error_handler(UnsupportedPlatformError, handle_unsupported_platform)
    app.add_error_handler(PayloadDecodeError, handle_payload_decode_error)
    app.add_error_handler(PlatformError, handle_platform_error)
    app.add_error_handler(AdapterConfigError, handle_config_error)
    app.add_error_handler(RateLimitedError, handle_rate_limited)
    app.add_error_handler(RepoNotFoundError, handle_repo_not_found)
    app.add_error_handler(ComplianceNotFoundError, handle_compliance_not_found)
    app.add_error_handler(InvalidInputError, handle_invalid_input)
