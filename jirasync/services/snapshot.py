"""Projection of raw Jira issues into stable snapshots"""

from typing import Any, Dict, Iterable, List, Optional

from jirasync.config import DEFAULT_SNAPSHOT_FIELDS

SELF_LINK = "self"


def strip_self_links(value: Any) -> Any:
    """Return a copy of ``value`` with every ``self`` key removed, at any depth."""
    if isinstance(value, dict):
        return {k: strip_self_links(v) for k, v in value.items() if k != SELF_LINK}
    if isinstance(value, list):
        return [strip_self_links(v) for v in value]
    return value


def _issue_comments(fields: Dict[str, Any]) -> List[Dict[str, Any]]:
    # Jira nests comments as fields.comment.comments
    container = fields.get("comment")
    if isinstance(container, dict):
        return list(container.get("comments") or [])
    if isinstance(container, list):
        return list(container)
    return []


def project_issue(
    issue: Dict[str, Any], fields: Optional[Iterable[str]] = None
) -> Dict[str, Any]:
    """Build the snapshot handed back to the crash platform.

    Only allow-listed fields are copied. A requested field missing from the
    issue comes back as ``None`` so callers can tell "absent" from "not
    requested". Comments keep their original order.
    """
    issue_fields = issue.get("fields") or {}
    snapshot: Dict[str, Any] = {"id": issue.get("id"), "key": issue.get("key")}

    for name in fields if fields is not None else DEFAULT_SNAPSHOT_FIELDS:
        snapshot[name] = strip_self_links(issue_fields.get(name))

    comments = _issue_comments(issue_fields)
    if comments:
        snapshot["comments"] = [strip_self_links(comment) for comment in comments]

    return snapshot
