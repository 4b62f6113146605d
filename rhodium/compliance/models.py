"""Repository references and compliance status value types.

The compliance engine owns scoring; Rhodium only carries its results so a
platform adapter can render them as a commit status and the document store can
round-trip them.
"""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import enum
import typing as typ

import msgspec

from rhodium.common.slug import repo_slug


class CertificationTier(enum.IntEnum):
    """Ordered certification levels assigned by the compliance engine.

    ``NONE`` means the repository has not reached the lowest tier. Comparisons
    follow the integer ordering, so ``tier >= CertificationTier.BRONZE``
    reads as "is certified".
    """

    NONE = 0
    BRONZE = 1
    SILVER = 2
    GOLD = 3
    RHODIUM = 4

    @property
    def label(self) -> str:
        """Return the human-readable tier name used in status descriptions."""
        return self.name.capitalize()

    @property
    def is_certified(self) -> bool:
        """Return ``True`` when the tier is Bronze or better."""
        return self >= CertificationTier.BRONZE


class RepoRef(msgspec.Struct, kw_only=True, frozen=True):
    """Identify a repository on a hosting platform.

    Attributes
    ----------
    owner
        Organisation or user that owns the repository.
    repo
        Repository name.
    branch
        Optional branch or ref. Adapters fall back to a platform default
        (``HEAD`` on GitHub) when unset.

    """

    owner: str
    repo: str
    branch: str | None = None

    @property
    def slug(self) -> str:
        """Return ``owner/repo``."""
        return repo_slug(self.owner, self.repo)


Score = typ.Annotated[float, msgspec.Meta(ge=0.0, le=1.0)]


class ComplianceStatus(msgspec.Struct, kw_only=True, frozen=True):
    """Compliance outcome for one repository.

    Attributes
    ----------
    platform
        Identifier of the hosting platform, e.g. ``github``.
    repo
        Repository the status applies to.
    tier
        Certification tier reached.
    score
        Normalised score in ``[0, 1]``.
    checked_at
        When the compliance engine produced the result, if known.

    """

    platform: str
    repo: RepoRef
    tier: CertificationTier
    score: Score
    checked_at: dt.datetime | None = None

    @property
    def percent(self) -> float:
        """Return the score as a percentage."""
        return self.score * 100.0


def decode_compliance_status(raw: bytes | str) -> ComplianceStatus:
    """Decode a JSON-encoded ``ComplianceStatus``, validating the score range."""
    return msgspec.json.decode(raw, type=ComplianceStatus)


def encode_compliance_status(status: ComplianceStatus) -> bytes:
    """Encode ``status`` as JSON bytes."""
    return msgspec.json.encode(status)
