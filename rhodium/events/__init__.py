"""Canonical, platform-independent repository events."""

from __future__ import annotations

from .models import (
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
    RepoEvent,
    SecurityAlertAction,
    SecurityAlertEvent,
    Severity,
    User,
    WorkflowAction,
    WorkflowConclusion,
    WorkflowRunEvent,
    WorkflowStatus,
    decode_event,
    encode_event,
    event_kind,
)

__all__ = [
    "CommentAction",
    "CommentEvent",
    "CommentType",
    "Commit",
    "IssueAction",
    "IssueEvent",
    "PullRequestAction",
    "PullRequestEvent",
    "PushEvent",
    "ReleaseAction",
    "ReleaseEvent",
    "RepoEvent",
    "SecurityAlertAction",
    "SecurityAlertEvent",
    "Severity",
    "User",
    "WorkflowAction",
    "WorkflowConclusion",
    "WorkflowRunEvent",
    "WorkflowStatus",
    "decode_event",
    "encode_event",
    "event_kind",
]
