"""GitHub implementation of :class:`rhodium.adapters.base.PlatformAdapter`."""

from __future__ import annotations

import typing as typ
import urllib.parse

import httpx
import msgspec

from rhodium.adapters.base import RepoMetadata, as_headers
from rhodium.adapters.errors import (
    AdapterConfigError,
    PlatformError,
    RateLimitedError,
    RepoNotFoundError,
    WebhookVerificationError,
)
from rhodium.adapters.payload import (
    bool_at,
    has_object,
    int_at,
    objects_at,
    opt_str_at,
    str_at,
    strs_at,
)
from rhodium.adapters.signature import signature_matches
from rhodium.adapters.status import build_status_payload, status_payload_to_dict
from rhodium.common.time import parse_rfc3339
from rhodium.logging import get_logger, log_warning

from .parsing import parse_event

if typ.TYPE_CHECKING:
    from rhodium.adapters.base import Headers
    from rhodium.adapters.config import AdapterConfig
    from rhodium.compliance.models import ComplianceStatus, RepoRef
    from rhodium.events.models import RepoEvent

logger = get_logger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
EVENT_HEADER = "X-GitHub-Event"
SIGNATURE_HEADER = "X-Hub-Signature-256"
PING_EVENT_TYPE = "ping"

_JSON_MEDIA_TYPE = "application/vnd.github+json"
_RAW_MEDIA_TYPE = "application/vnd.github.raw+json"
_DEFAULT_REF = "HEAD"
_HTTP_NOT_FOUND = 404
_HTTP_FORBIDDEN = 403
_HTTP_TOO_MANY_REQUESTS = 429
_HTTP_ERROR_STATUS_THRESHOLD = 400


def _retry_after(response: httpx.Response) -> int | None:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == _HTTP_TOO_MANY_REQUESTS:
        return True
    return (
        response.status_code == _HTTP_FORBIDDEN
        and response.headers.get("X-RateLimit-Remaining") == "0"
    )


def _check_response(response: httpx.Response, repo: RepoRef, operation: str) -> None:
    """Raise the adapter error matching a non-2xx ``response``.

    Classification order is 404, then rate limiting, then any other status
    of 400 or above.
    """
    if response.status_code == _HTTP_NOT_FOUND:
        raise RepoNotFoundError(repo.owner, repo.repo)
    if _is_rate_limited(response):
        raise RateLimitedError(_retry_after(response))
    if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
        raise PlatformError.api_error(operation, response.status_code, response.text)


def _decode_json(response: httpx.Response) -> object:
    try:
        return msgspec.json.decode(response.content)
    except msgspec.DecodeError:
        return None


class GitHubAdapter:
    """Webhook verification, normalization, and REST access for GitHub.

    Parameters
    ----------
    config
        Adapter configuration. ``api_url`` overrides the public API origin
        for GitHub Enterprise Server.
    http_client
        Optional pre-built client, used by tests to inject an
        ``httpx.MockTransport``. Clients passed in are not closed by
        :meth:`aclose`.

    """

    def __init__(
        self,
        config: AdapterConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the adapter with ``config`` and an optional client."""
        self._config = config
        self._api_url = (config.api_url or GITHUB_API_URL).rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client

    @property
    def platform_id(self) -> str:
        """Return ``"github"``."""
        return "github"

    @property
    def config(self) -> AdapterConfig:
        """Return the configuration the adapter was built with."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def verify_webhook(self, payload: bytes, headers: Headers) -> bool:
        """Verify the ``X-Hub-Signature-256`` HMAC over ``payload``.

        Returns ``True`` without checking anything when no secret is
        configured, logging a warning each time, unless the configuration
        requires a secret.

        Raises
        ------
        AdapterConfigError
            If no secret is configured and ``require_webhook_secret`` is set.
        WebhookVerificationError
            If the signature header is absent or lacks the ``sha256=`` prefix.

        """
        secret = self._config.webhook_secret
        if secret is None:
            if self._config.require_webhook_secret:
                raise AdapterConfigError.missing_webhook_secret(self.platform_id)
            log_warning(
                logger,
                "No webhook secret configured for %s; skipping signature check",
                self.platform_id,
            )
            return True

        header_value = as_headers(headers).get(SIGNATURE_HEADER)
        if header_value is None:
            raise WebhookVerificationError.missing_signature(SIGNATURE_HEADER)
        matched = signature_matches(secret, payload, header_value)
        if matched is None:
            raise WebhookVerificationError.malformed_signature(SIGNATURE_HEADER)
        return matched

    def event_type(self, headers: Headers) -> str:
        """Return the ``X-GitHub-Event`` value.

        Raises
        ------
        PlatformError
            If the header is absent.

        """
        event_type = as_headers(headers).get(EVENT_HEADER)
        if event_type is None:
            raise PlatformError.missing_event_type(EVENT_HEADER)
        return event_type

    def is_ping(self, headers: Headers) -> bool:
        """Return whether the request is the ``ping`` sent when a hook is created."""
        return as_headers(headers).get(EVENT_HEADER) == PING_EVENT_TYPE

    def parse_webhook(self, payload: bytes, headers: Headers) -> RepoEvent:
        """Normalize a GitHub webhook body into a canonical event."""
        return parse_event(self.event_type(headers), payload)

    def _http(self) -> httpx.AsyncClient:
        # Created on first REST call; webhook-only use never opens a client.
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._config.timeout_s)
        return self._client

    def _require_token(self) -> str:
        token = self._config.api_token
        if not token:
            raise AdapterConfigError.missing_token(self.platform_id)
        return token

    def _headers(self, token: str, accept: str = _JSON_MEDIA_TYPE) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": accept,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": self._config.user_agent,
        }

    @staticmethod
    def _path_parts(path: str) -> list[str]:
        return [urllib.parse.quote(part, safe="") for part in path.split("/") if part]

    def _repo_url(self, repo: RepoRef, *parts: str) -> str:
        segments = [
            urllib.parse.quote(repo.owner, safe=""),
            urllib.parse.quote(repo.repo, safe=""),
        ]
        segments.extend(parts)
        return f"{self._api_url}/repos/{'/'.join(segments)}"

    async def post_status(
        self, repo: RepoRef, commit_sha: str, status: ComplianceStatus
    ) -> None:
        """Create a commit status under the ``RSR / Compliance Check`` context.

        Posting again for the same commit replaces the earlier status.
        """
        token = self._require_token()
        body = build_status_payload(
            repo, status, report_url_base=self._config.report_url_base
        )
        response = await self._http().post(
            self._repo_url(repo, "statuses", commit_sha),
            headers=self._headers(token),
            json=status_payload_to_dict(body),
        )
        _check_response(response, repo, "post commit status")

    async def fetch_file(self, repo: RepoRef, path: str) -> bytes:
        """Return the raw bytes of ``path`` at ``repo.branch`` or ``HEAD``."""
        token = self._require_token()
        response = await self._http().get(
            self._repo_url(repo, "contents", *self._path_parts(path)),
            headers=self._headers(token, accept=_RAW_MEDIA_TYPE),
            params={"ref": repo.branch or _DEFAULT_REF},
        )
        _check_response(response, repo, "fetch file")
        return response.content

    async def list_files(self, repo: RepoRef, path: str | None = None) -> list[str]:
        """Return the ``path`` of each entry in a directory listing.

        A response that is not a JSON array, such as the object returned for
        a file path, yields an empty list.
        """
        token = self._require_token()
        parts = ("contents", *self._path_parts(path or ""))
        response = await self._http().get(
            self._repo_url(repo, *parts),
            headers=self._headers(token),
            params={"ref": repo.branch or _DEFAULT_REF},
        )
        _check_response(response, repo, "list files")
        entries = {"entries": _decode_json(response)}
        return [
            entry_path
            for item in objects_at(entries, "entries")
            if (entry_path := opt_str_at(item, "path")) is not None
        ]

    async def get_metadata(self, repo: RepoRef) -> RepoMetadata:
        """Return repository metadata from ``GET /repos/{owner}/{repo}``."""
        token = self._require_token()
        response = await self._http().get(
            self._repo_url(repo), headers=self._headers(token)
        )
        _check_response(response, repo, "get repository metadata")
        data = _decode_json(response)
        return RepoMetadata(
            default_branch=str_at(data, "default_branch", default="main"),
            description=opt_str_at(data, "description"),
            has_issues=bool_at(data, "has_issues"),
            has_wiki=bool_at(data, "has_wiki"),
            has_pages=bool_at(data, "has_pages"),
            has_security_policy=has_object(data, "security_and_analysis"),
            open_issues_count=int_at(data, "open_issues_count"),
            stargazers_count=int_at(data, "stargazers_count"),
            forks_count=int_at(data, "forks_count"),
            license=opt_str_at(data, "license", "spdx_id"),
            topics=strs_at(data, "topics"),
            last_push=parse_rfc3339(opt_str_at(data, "pushed_at")),
        )
