"""Render compliance results as provider commit-status payloads."""

from __future__ import annotations

import enum
import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    from rhodium.compliance.models import ComplianceStatus, RepoRef

STATUS_CONTEXT = "RSR / Compliance Check"


class CommitState(enum.StrEnum):
    """Commit status states understood by hosting platforms."""

    SUCCESS = "success"
    FAILURE = "failure"


class CommitStatusPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Body of a commit-status request."""

    state: CommitState
    target_url: str
    description: str
    context: str = STATUS_CONTEXT


def commit_state_for(status: ComplianceStatus) -> CommitState:
    """Return ``SUCCESS`` for Bronze or better and ``FAILURE`` otherwise."""
    return CommitState.SUCCESS if status.tier.is_certified else CommitState.FAILURE


def build_status_payload(
    repo: RepoRef,
    status: ComplianceStatus,
    *,
    report_url_base: str,
) -> CommitStatusPayload:
    """Build the commit-status payload for ``status``.

    Examples
    --------
    >>> from rhodium.compliance import CertificationTier, ComplianceStatus, RepoRef
    >>> repo = RepoRef(owner="octo", repo="reef")
    >>> status = ComplianceStatus(
    ...     platform="github", repo=repo, tier=CertificationTier.GOLD, score=0.914
    ... )
    >>> payload = build_status_payload(repo, status, report_url_base="https://x.dev")
    >>> payload.state, payload.description
    (<CommitState.SUCCESS: 'success'>, 'RSR Compliance: Gold (91%)')

    """
    base = report_url_base.rstrip("/")
    return CommitStatusPayload(
        state=commit_state_for(status),
        target_url=f"{base}/report/{repo.owner}/{repo.repo}",
        description=f"RSR Compliance: {status.tier.label} ({status.percent:.0f}%)",
    )


def status_payload_to_dict(payload: CommitStatusPayload) -> dict[str, str]:
    """Return ``payload`` as a JSON-ready mapping."""
    return {
        "state": payload.state.value,
        "target_url": payload.target_url,
        "description": payload.description,
        "context": payload.context,
    }
