"""Issues, comments, labels, milestones and discussions."""

from __future__ import annotations

from typing import Any, Mapping

from ghnotify.services.markdown import escape, format_safe, truncate
from ghnotify.services.github.common import (
    RenderedMessage,
    action_of,
    actor,
    bold,
    dig,
    ensure_mapping,
    italic,
    join,
    logins,
    note,
    repo_link,
    repo_name,
    repo_url,
    row,
    user_link,
    with_button,
)

COMMENT_LIMIT = 500

_ISSUE_NOTES: dict[str, tuple[str, str]] = {
    "deleted": ("🗑️", "The issue was deleted."),
    "transferred": ("🔄", "The issue was transferred to a different repository."),
    "pinned": ("📌", "The issue was pinned."),
    "unpinned": ("📌❌", "The issue was unpinned."),
    "reopened": ("🔓", "The issue was reopened."),
    "unassigned": ("🙅", "An assignee was removed from the issue."),
    "unlabeled": ("🏷️❌", "A label was removed from the issue."),
    "locked": ("🔒", "The issue was locked."),
    "unlocked": ("🔓", "The issue was unlocked."),
    "demilestoned": ("🏁❌", "The issue was removed from a milestone."),
}


def _description(body: Any) -> str:
    rendered = format_safe(body)
    return join(["✍️ *Description:*", rendered or italic("No description provided.")])


def format_issues(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    issue = ensure_mapping(payload.get("issue"))
    number = issue.get("number") or "?"
    title = issue.get("title") or ""

    lines = [
        row("📂", "Repository", repo_link(repo_name(payload))),
        row("⚡", "Action", escape(action or "?")),
        row("👤", "Sender", user_link(actor(payload))),
        row("📝", f"Issue #{number}", escape(title)),
    ]

    if action == "opened":
        lines.append(_description(issue.get("body")))
    elif action == "edited":
        lines.append(note("✏️", "Issue was edited."))
        lines.append(_description(issue.get("body")))
    elif action == "closed":
        closer = dig(issue, ("closed_by", "login"))
        if closer:
            lines.append(row("🔒", "Closed by", user_link(closer)))
        reason = issue.get("state_reason")
        if reason:
            lines.append(row("📋", "Reason", escape(str(reason).replace("_", " "))))
        lines.append(note("🔒", "The issue is now closed."))
    elif action == "assigned":
        assignee = dig(payload, ("assignee", "login"))
        names = [assignee] if assignee else logins(issue.get("assignees"))
        lines.append(row("🙋", "Assignees", ", ".join(user_link(n) for n in names) or escape("-")))
    elif action == "labeled":
        label = dig(payload, ("label", "name"))
        names = [label] if label else logins(issue.get("labels"), key="name")
        lines.append(row("🏷️", "Labels", escape(", ".join(names) or "-")))
    elif action == "milestoned":
        milestone = dig(issue, ("milestone", "title"))
        if milestone:
            lines.append(row("🏁", "Milestone", escape(milestone)))
        else:
            lines.append(note("🏁", "The issue was added to a milestone."))
    elif action in _ISSUE_NOTES:
        lines.append(note(*_ISSUE_NOTES[action]))
    else:
        lines.append(note("❓", f"Unhandled action: {action or 'unknown'}"))

    return with_button(join(lines), "View Issue", issue.get("html_url"))


_COMMENT_VERBS: dict[str, tuple[str, str]] = {
    "created": ("💬", "commented on"),
    "edited": ("✏️", "edited a comment on"),
    "deleted": ("❌", "deleted a comment on"),
}


def format_issue_comment(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    issue = ensure_mapping(payload.get("issue"))
    comment = ensure_mapping(payload.get("comment"))
    number = issue.get("number") or "?"
    kind = "pull request" if issue.get("pull_request") else "issue"

    emoji, verb = _COMMENT_VERBS.get(
        action, ("⚠️", f"performed an unknown action ({action or '?'}) on a comment on")
    )
    lines = [
        f"{emoji} {user_link(actor(payload))} {escape(verb)} "
        f"{escape(f'{kind} #{number}')} in {repo_link(repo_name(payload))}",
        row("📌", "Title", escape(issue.get("title") or "")),
    ]
    if action != "deleted":
        body = format_safe(truncate(comment.get("body"), COMMENT_LIMIT))
        if body:
            lines.append(join(["📝 *Comment:*", body]))

    url = comment.get("html_url") or issue.get("html_url")
    return with_button(join(lines), "View Comment", url)


_LABEL_VERBS = {
    "created": ("🏷️", "created"),
    "edited": ("✏️", "edited"),
    "deleted": ("🗑️", "deleted"),
}


def format_label(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    label = ensure_mapping(payload.get("label"))
    name = label.get("name") or "?"

    emoji, verb = _LABEL_VERBS.get(action, ("⚠️", f"changed ({action or '?'})"))
    lines = [
        f"{emoji} Label {bold(name)} {escape(verb)} in {repo_link(repo_name(payload))} "
        f"by {user_link(actor(payload))}",
    ]
    if label.get("color"):
        lines.append(row("🎨", "Color", escape(f"#{label['color']}")))
    if label.get("description"):
        lines.append(row("📝", "Description", escape(label["description"])))
    previous = dig(payload, ("changes", "name", "from"))
    if previous:
        lines.append(row("🔄", "Previous name", escape(previous)))

    base = repo_url(payload)
    return with_button(join(lines), "View Labels", f"{base}/labels" if base else "")


_MILESTONE_VERBS = {
    "created": ("🏁", "created"),
    "opened": ("🏁", "opened"),
    "closed": ("✅", "closed"),
    "edited": ("✏️", "edited"),
    "deleted": ("🗑️", "deleted"),
}


def format_milestone(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    milestone = ensure_mapping(payload.get("milestone"))

    emoji, verb = _MILESTONE_VERBS.get(action, ("⚠️", f"changed ({action or '?'})"))
    lines = [
        f"{emoji} Milestone {bold(milestone.get('title') or '?')} {escape(verb)} "
        f"in {repo_link(repo_name(payload))}",
        row("👤", "Sender", user_link(actor(payload))),
    ]
    if milestone.get("description"):
        lines.append(row("📝", "Description", escape(milestone["description"])))
    if milestone.get("due_on"):
        lines.append(row("📅", "Due", escape(milestone["due_on"])))
    open_issues = milestone.get("open_issues")
    closed_issues = milestone.get("closed_issues")
    if open_issues is not None and closed_issues is not None:
        lines.append(
            row("📊", "Issues", escape(f"{open_issues} open / {closed_issues} closed"))
        )
    return with_button(join(lines), "View Milestone", milestone.get("html_url"))


_DISCUSSION_VERBS = {
    "created": ("💭", "started"),
    "edited": ("✏️", "edited"),
    "deleted": ("🗑️", "deleted"),
    "answered": ("✅", "answered"),
    "unanswered": ("↩️", "unmarked the answer of"),
    "closed": ("🔒", "closed"),
    "reopened": ("🔓", "reopened"),
    "locked": ("🔒", "locked"),
    "unlocked": ("🔓", "unlocked"),
    "pinned": ("📌", "pinned"),
    "unpinned": ("📌", "unpinned"),
    "labeled": ("🏷️", "labeled"),
    "unlabeled": ("🏷️", "unlabeled"),
    "transferred": ("🔄", "transferred"),
    "category_changed": ("🗂️", "recategorized"),
}


def format_discussion(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    discussion = ensure_mapping(payload.get("discussion"))
    number = discussion.get("number") or "?"

    emoji, verb = _DISCUSSION_VERBS.get(action, ("⚠️", f"changed ({action or '?'})"))
    lines = [
        f"{emoji} {user_link(actor(payload))} {escape(verb)} discussion "
        f"{escape(f'#{number}')} in {repo_link(repo_name(payload))}",
        row("📌", "Title", escape(discussion.get("title") or "")),
    ]
    category = dig(discussion, ("category", "name"))
    if category:
        lines.append(row("🗂️", "Category", escape(category)))
    if action == "created":
        body = format_safe(truncate(discussion.get("body"), COMMENT_LIMIT))
        if body:
            lines.append(join(["📝 *Body:*", body]))
    return with_button(join(lines), "View Discussion", discussion.get("html_url"))


def format_discussion_comment(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    discussion = ensure_mapping(payload.get("discussion"))
    comment = ensure_mapping(payload.get("comment"))
    number = discussion.get("number") or "?"

    emoji, verb = _COMMENT_VERBS.get(
        action, ("⚠️", f"performed an unknown action ({action or '?'}) on a comment on")
    )
    lines = [
        f"{emoji} {user_link(actor(payload))} {escape(verb)} discussion "
        f"{escape(f'#{number}')} in {repo_link(repo_name(payload))}",
        row("📌", "Title", escape(discussion.get("title") or "")),
    ]
    if action != "deleted":
        body = format_safe(truncate(comment.get("body"), COMMENT_LIMIT))
        if body:
            lines.append(join(["📝 *Comment:*", body]))
    url = comment.get("html_url") or discussion.get("html_url")
    return with_button(join(lines), "View Comment", url)
