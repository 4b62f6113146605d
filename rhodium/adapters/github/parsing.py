"""Normalize GitHub webhook payloads into canonical repository events.

Each supported ``X-GitHub-Event`` value maps to one parser in ``_PARSERS``.
Parsers read every field through :mod:`rhodium.adapters.payload`, so a
missing or mistyped field becomes that field's default and never an error.
"""

from __future__ import annotations

import typing as typ

from rhodium.adapters.errors import PlatformError
from rhodium.adapters.payload import (
    Payload,
    bool_at,
    decode_object,
    first_object,
    has_object,
    id_at,
    int_at,
    names_at,
    object_at,
    objects_at,
    opt_int_at,
    opt_str_at,
    str_at,
    strs_at,
)
from rhodium.events.models import (
    Commit,
    CommentAction,
    CommentEvent,
    CommentType,
    IssueAction,
    IssueEvent,
    PullRequestAction,
    PullRequestEvent,
    PushEvent,
    ReleaseAction,
    ReleaseEvent,
    SecurityAlertAction,
    SecurityAlertEvent,
    Severity,
    User,
    WorkflowAction,
    WorkflowConclusion,
    WorkflowRunEvent,
    WorkflowStatus,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from rhodium.events.models import RepoEvent

_BRANCH_REF_PREFIX = "refs/heads/"

_PR_ACTIONS: dict[str, PullRequestAction] = {
    action.value: action
    for action in PullRequestAction
    if action is not PullRequestAction.MERGED
}
_ISSUE_ACTIONS = {action.value: action for action in IssueAction}
_RELEASE_ACTIONS = {action.value: action for action in ReleaseAction}
_ALERT_ACTIONS = {action.value: action for action in SecurityAlertAction}
_WORKFLOW_ACTIONS = {action.value: action for action in WorkflowAction}
_WORKFLOW_STATUSES = {status.value: status for status in WorkflowStatus}
_WORKFLOW_CONCLUSIONS = {item.value: item for item in WorkflowConclusion}
_COMMENT_ACTIONS = {action.value: action for action in CommentAction}
_SEVERITIES: dict[str, Severity] = {
    "critical": Severity.CRITICAL,
    "high": Severity.HIGH,
    "medium": Severity.MEDIUM,
    "moderate": Severity.MEDIUM,
    "low": Severity.LOW,
}


def _repo_coordinates(data: Payload) -> dict[str, str]:
    return {
        "repo_owner": str_at(data, "repository", "owner", "login"),
        "repo_name": str_at(data, "repository", "name"),
    }


def _user(data: object, *keys: str) -> User:
    """Build a user from an object carrying numeric ``id`` and ``login``."""
    node = object_at(data, *keys)
    return User(
        id=id_at(node, "id"),
        username=str_at(node, "login"),
        email=opt_str_at(node, "email"),
        avatar_url=opt_str_at(node, "avatar_url"),
    )


def _named_user(node: object) -> User:
    # Push payloads identify people by name only; the id mirrors the name.
    name = str_at(node, "name")
    return User(id=name, username=name, email=opt_str_at(node, "email"))


def _commit(node: Payload) -> Commit:
    author = object_at(node, "author")
    username = str_at(author, "username")
    return Commit(
        sha=str_at(node, "id"),
        message=str_at(node, "message"),
        author=User(
            id=username,
            username=username,
            email=opt_str_at(author, "email"),
        ),
        timestamp=str_at(node, "timestamp"),
        added=strs_at(node, "added"),
        modified=strs_at(node, "modified"),
        removed=strs_at(node, "removed"),
    )


def parse_push(data: Payload, event_type: str) -> PushEvent:
    """Normalize a ``push`` payload."""
    ref = str_at(data, "ref")
    return PushEvent(
        **_repo_coordinates(data),
        branch=ref.removeprefix(_BRANCH_REF_PREFIX),
        before=str_at(data, "before"),
        after=str_at(data, "after"),
        commits=tuple(_commit(node) for node in objects_at(data, "commits")),
        pusher=_named_user(object_at(data, "pusher")),
    )


def parse_pull_request(data: Payload, event_type: str) -> PullRequestEvent:
    """Normalize a ``pull_request`` payload.

    GitHub reports a merge as ``closed`` with ``pull_request.merged`` set;
    that combination becomes ``MERGED``.
    """
    pr = object_at(data, "pull_request")
    action = _PR_ACTIONS.get(str_at(data, "action"), PullRequestAction.EDITED)
    if action is PullRequestAction.CLOSED and bool_at(pr, "merged"):
        action = PullRequestAction.MERGED
    return PullRequestEvent(
        **_repo_coordinates(data),
        action=action,
        number=int_at(pr, "number"),
        title=str_at(pr, "title"),
        body=opt_str_at(pr, "body"),
        source_branch=str_at(pr, "head", "ref"),
        target_branch=str_at(pr, "base", "ref"),
        author=_user(pr, "user"),
        draft=bool_at(pr, "draft"),
    )


def parse_issue(data: Payload, event_type: str) -> IssueEvent:
    """Normalize an ``issues`` payload."""
    issue = object_at(data, "issue")
    return IssueEvent(
        **_repo_coordinates(data),
        action=_ISSUE_ACTIONS.get(str_at(data, "action"), IssueAction.EDITED),
        number=int_at(issue, "number"),
        title=str_at(issue, "title"),
        body=opt_str_at(issue, "body"),
        author=_user(issue, "user"),
        labels=names_at(issue, "labels"),
    )


def parse_release(data: Payload, event_type: str) -> ReleaseEvent:
    """Normalize a ``release`` payload."""
    release = object_at(data, "release")
    return ReleaseEvent(
        **_repo_coordinates(data),
        action=_RELEASE_ACTIONS.get(str_at(data, "action"), ReleaseAction.CREATED),
        tag_name=str_at(release, "tag_name"),
        name=opt_str_at(release, "name"),
        body=opt_str_at(release, "body"),
        draft=bool_at(release, "draft"),
        prerelease=bool_at(release, "prerelease"),
        author=_user(release, "author"),
    )


def parse_security_alert(data: Payload, event_type: str) -> SecurityAlertEvent:
    """Normalize ``dependabot_alert`` and ``security_advisory`` payloads."""
    alert = first_object(data, "alert", "security_advisory")
    severity = str_at(alert, "severity").casefold()
    return SecurityAlertEvent(
        **_repo_coordinates(data),
        action=_ALERT_ACTIONS.get(
            str_at(data, "action"), SecurityAlertAction.CREATED
        ),
        severity=_SEVERITIES.get(severity, Severity.UNKNOWN),
        package_name=opt_str_at(alert, "package", "name"),
        vulnerable_version=opt_str_at(alert, "vulnerable_version_range"),
        patched_version=opt_str_at(alert, "patched_versions"),
        cve_id=opt_str_at(alert, "cve_id"),
    )


def _workflow_conclusion(raw: str | None) -> WorkflowConclusion | None:
    if not raw:
        return None
    return _WORKFLOW_CONCLUSIONS.get(raw, WorkflowConclusion.FAILURE)


def parse_workflow_run(data: Payload, event_type: str) -> WorkflowRunEvent:
    """Normalize a ``workflow_run`` payload."""
    run = object_at(data, "workflow_run")
    return WorkflowRunEvent(
        **_repo_coordinates(data),
        workflow_name=str_at(run, "name"),
        action=_WORKFLOW_ACTIONS.get(
            str_at(data, "action"), WorkflowAction.REQUESTED
        ),
        status=_WORKFLOW_STATUSES.get(str_at(run, "status"), WorkflowStatus.QUEUED),
        conclusion=_workflow_conclusion(opt_str_at(run, "conclusion")),
        branch=str_at(run, "head_branch"),
        commit_sha=str_at(run, "head_sha"),
    )


def _comment_type(data: Payload, event_type: str) -> CommentType:
    if event_type == "pull_request_review_comment":
        return CommentType.REVIEW
    if event_type == "commit_comment":
        return CommentType.COMMIT
    if has_object(data, "issue", "pull_request"):
        return CommentType.PULL_REQUEST
    return CommentType.ISSUE


def parse_comment(data: Payload, event_type: str) -> CommentEvent:
    """Normalize issue, review, and commit comment payloads."""
    parent_id = opt_int_at(data, "issue", "number")
    if parent_id is None:
        parent_id = opt_int_at(data, "pull_request", "number")
    return CommentEvent(
        **_repo_coordinates(data),
        action=_COMMENT_ACTIONS.get(str_at(data, "action"), CommentAction.CREATED),
        comment_type=_comment_type(data, event_type),
        body=str_at(data, "comment", "body"),
        author=_user(data, "comment", "user"),
        parent_id=parent_id,
    )


_PARSERS: dict[str, cabc.Callable[[Payload, str], RepoEvent]] = {
    "push": parse_push,
    "pull_request": parse_pull_request,
    "issues": parse_issue,
    "release": parse_release,
    "security_advisory": parse_security_alert,
    "dependabot_alert": parse_security_alert,
    "workflow_run": parse_workflow_run,
    "issue_comment": parse_comment,
    "pull_request_review_comment": parse_comment,
    "commit_comment": parse_comment,
}

SUPPORTED_EVENT_TYPES: frozenset[str] = frozenset(_PARSERS)


def parse_event(event_type: str, payload: bytes) -> RepoEvent:
    """Parse ``payload`` as the GitHub webhook named by ``event_type``.

    The event type is checked before the body is decoded, so an unsupported
    type is reported even when the body is not JSON.

    Raises
    ------
    PlatformError
        If ``event_type`` has no parser.
    PayloadDecodeError
        If the body is not a JSON object.

    """
    parser = _PARSERS.get(event_type)
    if parser is None:
        raise PlatformError.unsupported_event_type(event_type)
    return parser(decode_object(payload), event_type)
