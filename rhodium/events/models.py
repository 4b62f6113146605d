"""Canonical repository events shared by every platform adapter.

Each webhook family maps onto exactly one event class below. ``RepoEvent`` is
a closed union: consumers ``match`` on the concrete classes, and adding a new
family means adding a class here and to the union. Events encode to JSON with
a ``kind`` tag so queued events decode back into the right class.

Examples
--------
>>> import msgspec
>>> event = PushEvent(repo_owner="octo", repo_name="reef", branch="main")
>>> msgspec.json.decode(msgspec.json.encode(event), type=RepoEvent) == event
True

"""

from __future__ import annotations

import enum
import typing as typ

import msgspec


class PullRequestAction(enum.StrEnum):
    """Pull request lifecycle actions."""

    OPENED = "opened"
    CLOSED = "closed"
    MERGED = "merged"
    REOPENED = "reopened"
    EDITED = "edited"
    SYNCHRONIZE = "synchronize"
    REVIEW_REQUESTED = "review_requested"
    REVIEW_REQUEST_REMOVED = "review_request_removed"
    LABELED = "labeled"
    UNLABELED = "unlabeled"
    READY_FOR_REVIEW = "ready_for_review"
    CONVERTED_TO_DRAFT = "converted_to_draft"


class IssueAction(enum.StrEnum):
    """Issue lifecycle actions."""

    OPENED = "opened"
    CLOSED = "closed"
    REOPENED = "reopened"
    EDITED = "edited"
    LABELED = "labeled"
    UNLABELED = "unlabeled"
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"


class ReleaseAction(enum.StrEnum):
    """Release lifecycle actions."""

    PUBLISHED = "published"
    CREATED = "created"
    EDITED = "edited"
    DELETED = "deleted"
    PRERELEASED = "prereleased"
    RELEASED = "released"


class SecurityAlertAction(enum.StrEnum):
    """Security alert lifecycle actions."""

    CREATED = "created"
    DISMISSED = "dismissed"
    FIXED = "fixed"
    REOPENED = "reopened"


class Severity(enum.StrEnum):
    """Normalised vulnerability severity."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


class WorkflowAction(enum.StrEnum):
    """Workflow run webhook actions."""

    REQUESTED = "requested"
    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"


class WorkflowStatus(enum.StrEnum):
    """Execution status of a workflow run."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class WorkflowConclusion(enum.StrEnum):
    """Outcome of a completed workflow run."""

    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"
    ACTION_REQUIRED = "action_required"


class CommentAction(enum.StrEnum):
    """Comment lifecycle actions."""

    CREATED = "created"
    EDITED = "edited"
    DELETED = "deleted"


class CommentType(enum.StrEnum):
    """Where a comment was left."""

    ISSUE = "issue"
    PULL_REQUEST = "pull_request"
    REVIEW = "review"
    COMMIT = "commit"


class User(msgspec.Struct, kw_only=True, frozen=True):
    """Actor referenced by an event.

    Attributes
    ----------
    id
        Platform-specific identifier rendered as a string. Empty when the
        payload did not carry one.
    username
        Login or display name.
    email
        Email address, when the platform exposes it.
    avatar_url
        Avatar image URL, when present.

    """

    id: str = ""
    username: str = ""
    email: str | None = None
    avatar_url: str | None = None


class Commit(msgspec.Struct, kw_only=True, frozen=True):
    """Commit carried by a push event.

    ``timestamp`` keeps the platform's own format; it is not reparsed.
    """

    sha: str = ""
    message: str = ""
    author: User = msgspec.field(default_factory=User)
    timestamp: str = ""
    added: tuple[str, ...] = ()
    modified: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()


class _EventBase(msgspec.Struct, kw_only=True, frozen=True, tag_field="kind"):
    """Fields shared by every canonical event."""

    repo_owner: str = ""
    repo_name: str = ""

    @property
    def repo_slug(self) -> str:
        """Return ``owner/name`` for the repository the event belongs to."""
        return f"{self.repo_owner}/{self.repo_name}"


class PushEvent(_EventBase, kw_only=True, frozen=True, tag="push"):
    """Commits pushed to a branch."""

    branch: str = ""
    before: str = ""
    after: str = ""
    commits: tuple[Commit, ...] = ()
    pusher: User = msgspec.field(default_factory=User)


class PullRequestEvent(_EventBase, kw_only=True, frozen=True, tag="pull_request"):
    """Pull request activity."""

    action: PullRequestAction
    number: int = 0
    title: str = ""
    body: str | None = None
    source_branch: str = ""
    target_branch: str = ""
    author: User = msgspec.field(default_factory=User)
    draft: bool = False


class IssueEvent(_EventBase, kw_only=True, frozen=True, tag="issue"):
    """Issue activity."""

    action: IssueAction
    number: int = 0
    title: str = ""
    body: str | None = None
    author: User = msgspec.field(default_factory=User)
    labels: tuple[str, ...] = ()


class ReleaseEvent(_EventBase, kw_only=True, frozen=True, tag="release"):
    """Release activity."""

    action: ReleaseAction
    tag_name: str = ""
    name: str | None = None
    body: str | None = None
    draft: bool = False
    prerelease: bool = False
    author: User = msgspec.field(default_factory=User)


class SecurityAlertEvent(_EventBase, kw_only=True, frozen=True, tag="security_alert"):
    """Security advisory or dependency alert."""

    action: SecurityAlertAction
    severity: Severity = Severity.UNKNOWN
    package_name: str | None = None
    vulnerable_version: str | None = None
    patched_version: str | None = None
    cve_id: str | None = None


class WorkflowRunEvent(_EventBase, kw_only=True, frozen=True, tag="workflow_run"):
    """CI workflow run activity.

    ``conclusion`` is only meaningful once ``status`` is ``COMPLETED``.
    """

    workflow_name: str = ""
    action: WorkflowAction
    status: WorkflowStatus
    conclusion: WorkflowConclusion | None = None
    branch: str = ""
    commit_sha: str = ""


class CommentEvent(_EventBase, kw_only=True, frozen=True, tag="comment"):
    """Comment on an issue, pull request, review, or commit."""

    action: CommentAction
    comment_type: CommentType
    body: str = ""
    author: User = msgspec.field(default_factory=User)
    parent_id: int | None = None


RepoEvent: typ.TypeAlias = (
    PushEvent
    | PullRequestEvent
    | IssueEvent
    | ReleaseEvent
    | SecurityAlertEvent
    | WorkflowRunEvent
    | CommentEvent
)


def event_kind(event: RepoEvent) -> str:
    """Return the ``kind`` tag of ``event``, e.g. ``"pull_request"``."""
    return typ.cast("str", type(event).__struct_config__.tag)


def encode_event(event: RepoEvent) -> bytes:
    """Encode ``event`` as tagged JSON bytes."""
    return msgspec.json.encode(event)


def decode_event(raw: bytes | str) -> RepoEvent:
    """Decode tagged JSON produced by :func:`encode_event`."""
    return msgspec.json.decode(raw, type=RepoEvent)
