"""Pushes, refs, releases and commit comments."""

from __future__ import annotations

from typing import Any, Mapping

from ghnotify.services.markdown import escape, escape_url, first_line, format_quoted, format_safe, truncate
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
    note,
    repo_link,
    repo_name,
    repo_url,
    row,
    short_sha,
    user_link,
    with_button,
)

MAX_COMMITS = 10  # Longer pushes end with a "+N more commits" line.
COMMENT_LIMIT = 500


def _ref_name(ref: str) -> str:
    # refs/heads/feature/x -> feature/x
    if ref.startswith("refs/"):
        parts = ref.split("/", 2)
        return parts[2] if len(parts) == 3 else ref
    return ref


def _commit_line(commit: Mapping[str, Any]) -> str:
    sha = short_sha(commit.get("id"))
    message = first_line(commit.get("message"))
    author = dig(commit, ("author", "username")) or dig(commit, ("author", "name"))
    url = commit.get("url")
    head = f"[{escape(sha)}]({escape_url(url)})" if url else code(sha)
    line = f"• {head}: {escape(message)}"
    if author:
        line += f" by {italic(author)}"
    return line


def format_push(payload: Mapping[str, Any]) -> RenderedMessage:
    """
    Summarize a push.

    A push without commits and without a head commit (a plain branch
    deletion) has nothing worth reporting and renders as an empty message.
    """
    payload = ensure_mapping(payload)
    commits = [c for c in (payload.get("commits") or []) if isinstance(c, Mapping)]
    head_commit = payload.get("head_commit")
    if not commits and not isinstance(head_commit, Mapping):
        return RenderedMessage("")

    name = dig(payload, ("repository", "name")) or repo_name(payload) or "?"
    ref = payload.get("ref") or ""
    branch = _ref_name(ref) or "?"
    target = f"{escape(name)}:{escape(branch)}"
    pusher = dig(payload, ("sender", "login")) or dig(payload, ("pusher", "name"))

    if commits:
        count = len(commits)
        noun = "commit" if count == 1 else "commits"
        lines = [f"🔨 {count} new {noun} to `{target}`"]
    else:
        lines = [f"📍 Head commit on `{target}`"]
    lines.append(row("👤", "Pushed by", user_link(pusher)))

    if payload.get("created"):
        kind = "tag" if ref.startswith("refs/tags/") else "branch"
        lines.append(note("🌱", f"A new {kind} was created."))
    elif payload.get("deleted"):
        lines.append(note("🗑️", "The branch was deleted."))
    elif payload.get("forced"):
        lines.append(note("⚠️", "This was a force-push."))

    lines.append("")
    shown = commits[:MAX_COMMITS] if commits else [head_commit]
    lines.extend(_commit_line(commit) for commit in shown)
    overflow = len(commits) - MAX_COMMITS
    if overflow > 0:
        lines.append(italic(f"+{overflow} more commits"))

    return with_button(join(lines), "View Commits", payload.get("compare"))


def format_create(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    ref_type = payload.get("ref_type") or "ref"
    ref = payload.get("ref") or "?"

    lines = [
        f"🆕 {user_link(actor(payload))} created a new {escape(ref_type)} "
        f"{code(ref)} in {repo_link(repo_name(payload))}",
    ]
    if payload.get("description"):
        lines.append(row("📖", "Repository Description", escape(payload["description"])))
    if ref_type == "branch" and payload.get("master_branch"):
        lines.append(row("🌟", "Default Branch", bold(payload["master_branch"])))
    if payload.get("pusher_type"):
        lines.append(row("👤", "Pusher Type", bold(payload["pusher_type"])))

    base = repo_url(payload)
    if not base:
        return RenderedMessage(join(lines))
    if ref_type == "tag":
        return with_button(join(lines), "View Tag", f"{base}/releases/tag/{ref}")
    return with_button(join(lines), "View Branch", f"{base}/tree/{ref}")


_DELETE_EMOJI = {"branch": "🗑️", "tag": "🏷️"}


def format_delete(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    ref_type = payload.get("ref_type") or "ref"
    ref = payload.get("ref") or "?"
    emoji = _DELETE_EMOJI.get(ref_type, "❌")
    article = "the" if ref_type in _DELETE_EMOJI else "a"

    text = (
        f"{emoji} {user_link(actor(payload))} deleted {article} {escape(ref_type)} "
        f"{code(ref)} in {repo_link(repo_name(payload))}"
    )
    return with_button(text, "View Repository", repo_url(payload))


_RELEASE_HEADS: dict[str, tuple[str, str]] = {
    "created": ("🎉", "A new release has been created in"),
    "published": ("🚀", "A release has been published in"),
    "released": ("🚀", "A release is now live in"),
    "prereleased": ("🧪", "A pre-release has been published in"),
    "edited": ("📝", "A release has been edited in"),
    "deleted": ("🗑️", "A release has been deleted from"),
    "unpublished": ("📦", "A release has been unpublished in"),
}


def format_release(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    release = ensure_mapping(payload.get("release"))
    tag = release.get("tag_name") or "?"
    name = release.get("name") or tag

    emoji, head = _RELEASE_HEADS.get(
        action, ("⚠️", f"An unknown action ({action or '?'}) was performed on a release in")
    )
    lines = [
        f"{emoji} {escape(head)} {repo_link(repo_name(payload))}",
        row("📦", "Release Name", bold(name)),
        row("🏷️", "Tag", code(tag)),
        row("👤", "By", user_link(actor(payload))),
    ]
    if action in {"created", "published", "released", "prereleased", "edited"}:
        notes = format_quoted(release.get("body"))
        lines.append(join(["📝 *Description:*", notes or italic("No description provided.")]))

    if action == "deleted":
        return RenderedMessage(join(lines))
    return with_button(join(lines), "View Release", release.get("html_url"))


_COMMIT_COMMENT_VERBS = {
    "created": ("💬", "commented on"),
    "edited": ("✏️", "edited their comment on"),
    "deleted": ("❌", "deleted their comment on"),
}


def format_commit_comment(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload) or "created"
    comment = ensure_mapping(payload.get("comment"))
    sha = short_sha(comment.get("commit_id")) or "?"

    emoji, verb = _COMMIT_COMMENT_VERBS.get(
        action, ("⚠️", "performed an unknown action on their comment on")
    )
    lines = [
        f"{emoji} {user_link(actor(payload))} {escape(verb)} commit {code(sha)} "
        f"in {repo_link(repo_name(payload))}",
    ]
    if action != "deleted":
        body = format_safe(truncate(comment.get("body"), COMMENT_LIMIT))
        if body:
            lines.append(join(["📝 *Comment:*", body]))
    return with_button(join(lines), "View Comment", comment.get("html_url"))
