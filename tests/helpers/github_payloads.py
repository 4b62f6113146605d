"""Builders for GitHub webhook bodies used across unit and feature tests."""

from __future__ import annotations

import typing as typ

import msgspec

from rhodium.adapters.signature import signature_header_value

WEBHOOK_SECRET = "It's a Secret to Everybody"


def _repository(owner: str = "octo", name: str = "reef") -> dict[str, typ.Any]:
    return {
        "id": 1296269,
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner, "id": 1},
    }


def _user(login: str = "mona", user_id: int = 583231) -> dict[str, typ.Any]:
    return {
        "login": login,
        "id": user_id,
        "avatar_url": f"https://avatars.example/{login}.png",
    }


def push_payload(
    *, owner: str = "octo", name: str = "reef", ref: str = "refs/heads/main"
) -> dict[str, typ.Any]:
    """Return a ``push`` body with one commit."""
    return {
        "ref": ref,
        "before": "0" * 40,
        "after": "a" * 40,
        "repository": _repository(owner, name),
        "pusher": {"name": "mona", "email": "mona@example.com"},
        "commits": [
            {
                "id": "a" * 40,
                "message": "Add compliance badge",
                "timestamp": "2024-05-01T12:00:00Z",
                "author": {
                    "name": "Mona Lisa",
                    "email": "mona@example.com",
                    "username": "mona",
                },
                "added": ["BADGE.md"],
                "modified": ["README.md"],
                "removed": [],
            }
        ],
    }


def pull_request_payload(
    *, action: str = "opened", merged: bool = False, draft: bool = False
) -> dict[str, typ.Any]:
    """Return a ``pull_request`` body."""
    return {
        "action": action,
        "number": 42,
        "repository": _repository(),
        "pull_request": {
            "number": 42,
            "title": "Tighten CI",
            "body": "Adds a lint job.",
            "merged": merged,
            "draft": draft,
            "user": _user(),
            "head": {"ref": "feature/lint"},
            "base": {"ref": "main"},
        },
    }


def issue_payload(*, action: str = "opened") -> dict[str, typ.Any]:
    """Return an ``issues`` body with two labels."""
    return {
        "action": action,
        "repository": _repository(),
        "issue": {
            "number": 7,
            "title": "Missing SECURITY.md",
            "body": None,
            "user": _user(),
            "labels": [{"name": "bug"}, {"name": "docs"}, {"colour": "red"}],
        },
    }


def release_payload(*, action: str = "published") -> dict[str, typ.Any]:
    """Return a ``release`` body."""
    return {
        "action": action,
        "repository": _repository(),
        "release": {
            "tag_name": "v1.2.0",
            "name": "Coral",
            "body": "Notes",
            "draft": False,
            "prerelease": True,
            "author": _user("hubot", 2),
        },
    }


def dependabot_alert_payload(*, severity: str = "high") -> dict[str, typ.Any]:
    """Return a ``dependabot_alert`` body."""
    return {
        "action": "created",
        "repository": _repository(),
        "alert": {
            "severity": severity,
            "package": {"name": "lodash"},
            "vulnerable_version_range": "< 4.17.21",
            "patched_versions": "4.17.21",
            "cve_id": "CVE-2021-23337",
        },
    }


def workflow_run_payload(
    *, status: str = "completed", conclusion: str | None = "success"
) -> dict[str, typ.Any]:
    """Return a ``workflow_run`` body."""
    return {
        "action": "completed",
        "repository": _repository(),
        "workflow_run": {
            "name": "CI",
            "status": status,
            "conclusion": conclusion,
            "head_branch": "main",
            "head_sha": "b" * 40,
        },
    }


def issue_comment_payload(*, on_pull_request: bool = False) -> dict[str, typ.Any]:
    """Return an ``issue_comment`` body, optionally on a pull request."""
    issue: dict[str, typ.Any] = {"number": 7}
    if on_pull_request:
        issue["pull_request"] = {
            "url": "https://api.github.com/repos/octo/reef/pulls/7"
        }
    return {
        "action": "created",
        "repository": _repository(),
        "issue": issue,
        "comment": {"body": "Looks good", "user": _user()},
    }


def encode(payload: dict[str, typ.Any]) -> bytes:
    """Return ``payload`` as JSON bytes."""
    return msgspec.json.encode(payload)


def signed_headers(
    event_type: str, body: bytes, secret: str = WEBHOOK_SECRET
) -> dict[str, str]:
    """Return the headers GitHub sends for a signed delivery of ``body``."""
    return {
        "X-GitHub-Event": event_type,
        "X-Hub-Signature-256": signature_header_value(secret, body),
        "Content-Type": "application/json",
    }
