"""Rhodium: hosting-platform webhook gateway for repository compliance.

Rhodium receives webhooks from source-code hosting platforms, verifies their
signatures, and normalizes provider payloads into the canonical events defined
in :mod:`rhodium.events`. Platform adapters also post commit statuses and read
repository content for the compliance engine.

Examples
--------
>>> from rhodium.adapters import AdapterConfig, GitHubAdapter
>>> adapter = GitHubAdapter(AdapterConfig(api_token="ghp_example"))
>>> adapter.platform_id
'github'

"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
