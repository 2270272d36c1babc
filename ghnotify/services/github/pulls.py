"""Pull requests, reviews, review comments and review threads."""

from __future__ import annotations

from typing import Any, Mapping

from ghnotify.services.markdown import escape, format_safe, truncate
from ghnotify.services.github.common import (
    RenderedMessage,
    action_of,
    actor,
    bold,
    code,
    dig,
    ensure_mapping,
    italic,
    join,
    link,
    logins,
    note,
    org_login,
    repo_link,
    repo_name,
    row,
    user_link,
    with_button,
)

REVIEW_BODY_LIMIT = 150
REVIEW_COMMENT_LIMIT = 169

_PR_NOTES: dict[str, tuple[str, str]] = {
    "reopened": ("🔄", "The pull request was reopened."),
    "unassigned": ("🙅", "An assignee was removed from the pull request."),
    "review_request_removed": ("❌", "A review request was removed from the pull request."),
    "unlabeled": ("🏷️❌", "A label was removed from the pull request."),
    "locked": ("🔒", "The pull request was locked."),
    "unlocked": ("🔓", "The pull request was unlocked."),
    "synchronize": ("🔄", "The pull request was synchronized (updated with new commits)."),
    "converted_to_draft": ("📝", "The pull request was converted to a draft."),
    "ready_for_review": ("👀", "The pull request is ready for review."),
    "auto_merge_enabled": ("🤖", "Auto-merge was enabled."),
    "auto_merge_disabled": ("🤖", "Auto-merge was disabled."),
}


def _review_actor(payload: Mapping[str, Any]) -> str:
    """Sender login, else the organization, else a placeholder."""
    login = dig(payload, ("sender", "login"))
    if login:
        return user_link(login)
    org = org_login(payload)
    if org:
        return escape(f"Organization: {org}")
    return escape("Unknown Actor")


def format_pull_request(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    pr = ensure_mapping(payload.get("pull_request"))
    number = pr.get("number") or payload.get("number") or "?"
    head = dig(pr, ("head", "ref")) or "?"
    base = dig(pr, ("base", "ref")) or "?"

    lines = [
        row("📂", "Repository", repo_link(repo_name(payload))),
        row("⚡", "Action", escape(action or "?")),
        row("👤", "Sender", user_link(actor(payload))),
        row("🔗", f"Pull Request #{number}", escape(pr.get("title") or "")),
        row("🌿", "Branches", f"{code(head)} → {code(base)}"),
        row("📌", "State", escape(pr.get("state") or "?")),
    ]

    if action == "opened":
        lines.append(join(["✍️ *Description:*", format_safe(pr.get("body")) or italic("No description provided.")]))
    elif action == "edited":
        lines.append(note("✏️", "The pull request was edited."))
        lines.append(join(["✍️ *Description:*", format_safe(pr.get("body")) or italic("No description provided.")]))
    elif action == "closed":
        if pr.get("merged"):
            merged_by = dig(pr, ("merged_by", "login"))
            if merged_by:
                lines.append(row("🔀", "Merged by", user_link(merged_by)))
            lines.append(note("✅", "The pull request was successfully merged."))
        else:
            lines.append(note("❌", "The pull request was closed without merging."))
    elif action == "assigned":
        assignee = dig(payload, ("assignee", "login"))
        names = [assignee] if assignee else logins(pr.get("assignees"))
        lines.append(row("🙋", "Assigned to", ", ".join(user_link(n) for n in names) or escape("-")))
    elif action == "review_requested":
        reviewer = dig(payload, ("requested_reviewer", "login"))
        team = dig(payload, ("requested_team", "name"))
        names = [reviewer] if reviewer else logins(pr.get("requested_reviewers"))
        targets = [user_link(n) for n in names]
        if team:
            targets.append(escape(f"team {team}"))
        lines.append(row("📝", "Review requested from", ", ".join(targets) or escape("-")))
    elif action == "labeled":
        label = dig(payload, ("label", "name"))
        names = [label] if label else logins(pr.get("labels"), key="name")
        lines.append(row("🏷️", "Labels", escape(", ".join(names) or "-")))
    elif action in _PR_NOTES:
        lines.append(note(*_PR_NOTES[action]))
    else:
        lines.append(note("❓", f"Unhandled action: {action or 'unknown'}"))

    return with_button(join(lines), "View Pull Request", pr.get("html_url"))


_REVIEW_STATES: dict[str, str] = {
    "approved": "✅",
    "changes_requested": "🛠️",
    "commented": "💬",
    "dismissed": "🚫",
}


def format_pull_request_review(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    review = ensure_mapping(payload.get("review"))
    pr = ensure_mapping(payload.get("pull_request"))
    number = pr.get("number") or "?"
    state = str(review.get("state") or "").lower()

    lines = [
        f"🔍 A pull request review event occurred in {repo_link(repo_name(payload))}",
        row("👤", "Actor", _review_actor(payload)),
        row("🔧", "Action", bold(action or "?")),
        row(_REVIEW_STATES.get(state, "🌟"), "Review State", bold(state.replace("_", " ") or "?")),
        row("🔗", f"Pull Request #{number}", link(pr.get("title") or "?", pr.get("html_url"))),
    ]
    body = truncate(review.get("body"), REVIEW_BODY_LIMIT)
    if body:
        lines.append(row("💡", "Review Comment", format_safe(body)))
    url = review.get("html_url") or pr.get("html_url")
    return with_button(join(lines), "View Review", url)


def format_pull_request_review_comment(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    comment = ensure_mapping(payload.get("comment"))
    pr = ensure_mapping(payload.get("pull_request"))
    number = pr.get("number") or "?"

    lines = [
        f"💬 A pull request review comment event occurred in {repo_link(repo_name(payload))}",
        row("👤", "Actor", _review_actor(payload)),
        row("🔧", "Action", bold(action or "?")),
        row("🔗", f"Pull Request #{number}", link(pr.get("title") or "?", pr.get("html_url"))),
    ]
    path = comment.get("path")
    if path:
        line_no = comment.get("line") or comment.get("original_line")
        where = code(path) + (escape(f" (line {line_no})") if line_no else "")
        lines.append(row("📄", "File", where))
    body = truncate(comment.get("body"), REVIEW_COMMENT_LIMIT)
    if body:
        lines.append(row("💡", "Comment", format_safe(body)))
    url = comment.get("html_url") or pr.get("html_url")
    return with_button(join(lines), "View Comment", url)


_THREAD_VERBS = {
    "resolved": ("✅", "resolved"),
    "unresolved": ("🔁", "unresolved"),
}


def format_pull_request_review_thread(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    pr = ensure_mapping(payload.get("pull_request"))
    thread = ensure_mapping(payload.get("thread"))
    number = pr.get("number") or "?"

    emoji, verb = _THREAD_VERBS.get(action, ("⚠️", f"changed ({action or '?'})"))
    lines = [
        f"{emoji} {user_link(actor(payload))} {escape(verb)} a review thread on "
        f"{escape(f'pull request #{number}')} in {repo_link(repo_name(payload))}",
        row("📌", "Title", escape(pr.get("title") or "")),
    ]
    comments = [c for c in (thread.get("comments") or []) if isinstance(c, Mapping)]
    first = comments[0] if comments else {}
    if first.get("path"):
        lines.append(row("📄", "File", code(first["path"])))
    url = first.get("html_url") or pr.get("html_url")
    return with_button(join(lines), "View Thread", url)
