"""Platform adapter protocol and shared adapter types."""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import typing as typ

import httpx
import msgspec

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from rhodium.compliance.models import ComplianceStatus, RepoRef
    from rhodium.events.models import RepoEvent

Headers: typ.TypeAlias = httpx.Headers
"""Case-insensitive header mapping for one inbound request."""


def as_headers(raw: cabc.Mapping[str, str] | Headers) -> Headers:
    """Wrap ``raw`` in a case-insensitive :class:`httpx.Headers`.

    Values are stored as UTF-8 so non-ASCII text, such as the latin-1
    decoded ``obs-text`` Falcon hands over, reads back unchanged.
    """
    if isinstance(raw, httpx.Headers):
        return raw
    return httpx.Headers(dict(raw), encoding="utf-8")


class RepoMetadata(msgspec.Struct, kw_only=True, frozen=True):
    """Repository facts read from a single platform metadata call.

    ``has_ci`` and ``has_branch_protection`` need extra API calls and are
    always ``False`` here: they mean "not established", not "known absent".
    """

    default_branch: str = "main"
    description: str | None = None
    has_issues: bool = False
    has_wiki: bool = False
    has_pages: bool = False
    has_ci: bool = False
    has_branch_protection: bool = False
    has_security_policy: bool = False
    open_issues_count: int = 0
    stargazers_count: int = 0
    forks_count: int = 0
    license: str | None = None
    topics: tuple[str, ...] = ()
    last_push: dt.datetime | None = None


@typ.runtime_checkable
class PlatformAdapter(typ.Protocol):
    """Operations every source-hosting platform adapter provides.

    Webhook verification and parsing are pure CPU work and run synchronously;
    REST operations are coroutines that suspend only on HTTP I/O. Adapters
    keep no mutable state after construction, so one instance may serve
    concurrent requests.

    New platforms implement this protocol and register with
    :class:`rhodium.adapters.registry.AdapterRegistry`.
    """

    @property
    def platform_id(self) -> str:
        """Return the stable identifier used for routing and storage keys."""
        ...

    def event_type(self, headers: Headers) -> str:
        """Return the platform event type named by the request headers.

        Raises
        ------
        PlatformError
            If the event type header is absent.

        """
        ...

    def is_ping(self, headers: Headers) -> bool:
        """Return whether the request is a connectivity check, not an event."""
        ...

    def verify_webhook(self, payload: bytes, headers: Headers) -> bool:
        """Check the webhook signature over the raw ``payload`` bytes.

        Raises
        ------
        WebhookVerificationError
            If the signature header is absent or malformed.

        """
        ...

    def parse_webhook(self, payload: bytes, headers: Headers) -> RepoEvent:
        """Normalize a webhook body into a canonical event.

        Raises
        ------
        PlatformError
            If the event type header is absent or names an unsupported type,
            or the body is not a JSON object.

        """
        ...

    async def post_status(
        self, repo: RepoRef, commit_sha: str, status: ComplianceStatus
    ) -> None:
        """Publish ``status`` as a commit status on ``commit_sha``."""
        ...

    async def fetch_file(self, repo: RepoRef, path: str) -> bytes:
        """Return the raw content of ``path`` at the repository ref."""
        ...

    async def list_files(self, repo: RepoRef, path: str | None = None) -> list[str]:
        """Return the entry paths of a directory, or the root when unset."""
        ...

    async def get_metadata(self, repo: RepoRef) -> RepoMetadata:
        """Return repository metadata."""
        ...

    async def aclose(self) -> None:
        """Release any owned HTTP resources."""
        ...
