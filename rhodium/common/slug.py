"""Repository slug and storage key utilities.

Repository slugs are hosting-platform identifiers in ``owner/name`` format.
They are not filesystem paths, even though they use ``/`` as a separator, so
they should be built with these helpers rather than ``pathlib``.
"""

from __future__ import annotations


def repo_slug(owner: str, name: str) -> str:
    """Build a repository slug from owner and name.

    Examples
    --------
    >>> repo_slug("rhodium-org", "engine")
    'rhodium-org/engine'

    """
    return f"{owner}/{name}"


def platform_repo_key(platform: str, owner: str, name: str) -> str:
    """Build the ``platform:owner/name`` key used by caches and graphs.

    Examples
    --------
    >>> platform_repo_key("github", "rhodium-org", "engine")
    'github:rhodium-org/engine'

    """
    return f"{platform}:{repo_slug(owner, name)}"
