"""Per-platform adapter configuration."""

from __future__ import annotations

import dataclasses
import os

from rhodium.adapters.errors import AdapterConfigError

_DEFAULT_TIMEOUT_S = 20.0
_DEFAULT_USER_AGENT = "RSR-Certified/0.1"
_DEFAULT_REPORT_URL_BASE = "https://rsr-certified.dev"
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _optional_env(name: str) -> str | None:
    """Return the stripped value of ``name`` or ``None`` when unset or blank."""
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip()
    return value or None


@dataclasses.dataclass(frozen=True, slots=True)
class AdapterConfig:
    """Configuration for one hosting-platform adapter.

    Built once when the adapter is created and never mutated afterwards.

    Attributes
    ----------
    webhook_secret
        Shared secret used to verify webhook signatures. ``None`` is a valid,
        degraded configuration: verification is skipped with a warning.
    api_token
        Bearer token for REST calls. Required by every REST operation.
    api_url
        Base URL override for self-hosted deployments. ``None`` selects the
        platform's public API origin.
    timeout_s
        Timeout applied by the adapter-owned HTTP client.
    user_agent
        ``User-Agent`` sent with every REST call.
    report_url_base
        Origin of the compliance report site linked from commit statuses.
    require_webhook_secret
        When set, a missing ``webhook_secret`` fails verification instead of
        skipping it.

    """

    webhook_secret: str | None = None
    api_token: str | None = None
    api_url: str | None = None
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = _DEFAULT_USER_AGENT
    report_url_base: str = _DEFAULT_REPORT_URL_BASE
    require_webhook_secret: bool = False

    @classmethod
    def from_env(cls, platform: str) -> AdapterConfig:
        """Build configuration from ``RHODIUM_<PLATFORM>_*`` variables.

        Reads, for ``platform="github"``:

        - ``RHODIUM_GITHUB_WEBHOOK_SECRET``: optional webhook secret
        - ``RHODIUM_GITHUB_TOKEN``: optional API token
        - ``RHODIUM_GITHUB_API_URL``: optional API base URL
        - ``RHODIUM_GITHUB_TIMEOUT_S``: optional request timeout in seconds

        and the platform-independent ``RHODIUM_REPORT_URL_BASE`` and
        ``RHODIUM_REQUIRE_WEBHOOK_SECRET``.

        Raises
        ------
        AdapterConfigError
            If the timeout is not a positive number.

        """
        prefix = f"RHODIUM_{platform.upper()}"
        timeout_name = f"{prefix}_TIMEOUT_S"
        raw_timeout = _optional_env(timeout_name)
        timeout_s = _DEFAULT_TIMEOUT_S
        if raw_timeout is not None:
            try:
                timeout_s = float(raw_timeout)
            except ValueError as exc:
                error = AdapterConfigError.invalid_value(timeout_name, raw_timeout)
                raise error from exc
            if timeout_s <= 0:
                raise AdapterConfigError.invalid_value(timeout_name, raw_timeout)

        require_raw = _optional_env("RHODIUM_REQUIRE_WEBHOOK_SECRET") or ""
        return cls(
            webhook_secret=_optional_env(f"{prefix}_WEBHOOK_SECRET"),
            api_token=_optional_env(f"{prefix}_TOKEN"),
            api_url=_optional_env(f"{prefix}_API_URL"),
            timeout_s=timeout_s,
            report_url_base=(
                _optional_env("RHODIUM_REPORT_URL_BASE") or _DEFAULT_REPORT_URL_BASE
            ),
            require_webhook_secret=require_raw.lower() in _TRUTHY,
        )
