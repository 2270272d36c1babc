"""Repository lifecycle, stars, forks, wiki, pages, packages and hooks."""

from __future__ import annotations

import json
from typing import Any, Mapping

from ghnotify.services.markdown import escape
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
    org_login,
    repo_link,
    repo_name,
    repo_url,
    row,
    user_link,
    with_button,
)

DISPATCH_PAYLOAD_LIMIT = 1000

_REPOSITORY_VERBS: dict[str, tuple[str, str]] = {
    "created": ("🎉", "has been created"),
    "deleted": ("🗑️", "has been deleted"),
    "archived": ("🔒", "has been archived"),
    "unarchived": ("🔓", "has been unarchived"),
    "publicized": ("🌐", "is now public"),
    "privatized": ("🔐", "is now private"),
    "transferred": ("🔄", "has been transferred"),
    "edited": ("✏️", "has been edited"),
}


def format_repository(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    full_name = repo_name(payload)

    if action == "renamed":
        previous = dig(payload, ("changes", "repository", "name", "from")) or "?"
        head = (
            f"🔄 Repository {bold(previous)} has been renamed to "
            f"{repo_link(full_name)}"
        )
    elif action in _REPOSITORY_VERBS:
        emoji, verb = _REPOSITORY_VERBS[action]
        head = f"{emoji} Repository {repo_link(full_name)} {escape(verb)}"
    else:
        head = (
            f"⚠️ Unknown action {italic(action or '?')} on repository "
            f"{repo_link(full_name)}"
        )
    lines = [head, row("👤", "By", user_link(actor(payload)))]

    if action == "deleted":
        return RenderedMessage(join(lines))
    return with_button(join(lines), "View Repository", repo_url(payload))


def format_fork(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    forkee = ensure_mapping(payload.get("forkee"))
    repository = ensure_mapping(payload.get("repository"))
    stars = repository.get("stargazers_count", 0)
    forks = repository.get("forks_count", 0)

    text = join([
        f"🍴 {user_link(actor(payload))} forked {repo_link(repo_name(payload))} "
        f"to create {repo_link(forkee.get('full_name'))}",
        f"🌟 The original repository has {bold(f'{stars} stars')} and {bold(f'{forks} forks')}\\.",
    ])
    return with_button(text, "View Fork", forkee.get("html_url"))


def format_star(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    stars = dig(payload, ("repository", "stargazers_count"))

    if action == "deleted":
        head = f"💔 {user_link(actor(payload))} unstarred {repo_link(repo_name(payload))}"
    else:
        head = f"⭐ {user_link(actor(payload))} starred {repo_link(repo_name(payload))}"
    lines = [head]
    if stars is not None:
        lines.append(row("✨", "Total Stars", bold(stars)))
    return with_button(join(lines), "View Repository", repo_url(payload))


def format_watch(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    if action == "started":
        text = f"⭐ {user_link(actor(payload))} has starred the repository {repo_link(repo_name(payload))}"
    else:
        text = (
            f"⚠️ {user_link(actor(payload))} performed an unknown action "
            f"{italic(action or '?')} on the repository {repo_link(repo_name(payload))}"
        )
    return with_button(text, "View Repository", repo_url(payload))


def format_public(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    text = join([
        f"🔓 The repository {repo_link(repo_name(payload))} is now public\\!",
        row("👤", "Made public by", user_link(actor(payload))),
    ])
    return with_button(text, "View Repository", repo_url(payload))


def format_repository_dispatch(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    client_payload = payload.get("client_payload")
    if client_payload is None:
        rendered = "{}"
    else:
        rendered = json.dumps(client_payload, indent=2, ensure_ascii=False, default=str)
    if len(rendered) > DISPATCH_PAYLOAD_LIMIT:
        rendered = rendered[:DISPATCH_PAYLOAD_LIMIT] + "\n..."

    lines = [
        f"📦 Repository dispatch triggered for {repo_link(repo_name(payload))} "
        f"by {user_link(actor(payload))}",
        row("🔧", "Action", code(action_of(payload) or "?")),
        row("🌿", "Branch", escape(payload.get("branch") or "default branch")),
    ]
    org = org_login(payload)
    if org:
        lines.append(row("🏢", "Organization", escape(org)))
    lines.append("📋 *Client Payload:*")
    lines.append(f"```\n{escape(rendered)}\n```")
    return RenderedMessage(join(lines))


def format_gollum(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    pages = [p for p in (payload.get("pages") or []) if isinstance(p, Mapping)]

    lines = [
        f"📚 {user_link(actor(payload))} updated the wiki of {repo_link(repo_name(payload))}",
    ]
    for page in pages:
        title = page.get("title") or page.get("page_name") or "?"
        lines.append(f"• {escape(page.get('action') or 'edited')}: {link(title, page.get('html_url'))}")

    url = pages[0].get("html_url") if len(pages) == 1 else None
    if url:
        return with_button(join(lines), "View Page", url)
    base = repo_url(payload)
    return with_button(join(lines), "View Wiki", f"{base}/wiki" if base else "")


def format_deploy_key(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    key = ensure_mapping(payload.get("key"))
    verb = {"created": "added", "deleted": "removed"}.get(action, action or "changed")

    lines = [
        f"🔑 Deploy key {bold(key.get('title') or '?')} {escape(verb)} in "
        f"{repo_link(repo_name(payload))}",
        row("👤", "Sender", user_link(actor(payload))),
    ]
    if "read_only" in key:
        lines.append(row("🔒", "Access", escape("read-only" if key["read_only"] else "read/write")))
    base = repo_url(payload)
    return with_button(join(lines), "View Deploy Keys", f"{base}/settings/keys" if base else "")


_PAGE_BUILD_EMOJI = {"built": "✅", "building": "⏳", "errored": "❌"}


def format_page_build(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    build = ensure_mapping(payload.get("build"))
    status = build.get("status") or "unknown"
    error = dig(build, ("error", "message"))

    lines = [
        f"{_PAGE_BUILD_EMOJI.get(status, '⚠️')} GitHub Pages build {bold(status)} "
        f"for {repo_link(repo_name(payload))}",
        row("🆔", "Page Build ID", code(payload.get("id") or "?")),
        row("👤", "Sender", user_link(actor(payload))),
    ]
    if error:
        lines.append(row("❗", "Build Error", escape(error)))
    base = repo_url(payload)
    return with_button(join(lines), "View Pages Settings", f"{base}/settings/pages" if base else "")


def format_meta(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    hook_id = payload.get("hook_id") or dig(payload, ("hook", "id")) or "?"

    lines = [f"🪝 Webhook {code(hook_id)} was {escape(action or 'changed')}"]
    if repo_name(payload):
        lines.append(row("📂", "Repository", repo_link(repo_name(payload))))
    org = org_login(payload)
    if org:
        lines.append(row("🏢", "Organization", escape(org)))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    installation = dig(payload, ("installation", "id"))
    if installation:
        lines.append(row("🧩", "Installation ID", code(installation)))
    return RenderedMessage(join(lines))


def format_package(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    package = ensure_mapping(payload.get("package"))
    version = dig(package, ("package_version", "version"))

    lines = [
        f"📦 Package {bold(package.get('name') or '?')} {escape(action or 'changed')} "
        f"in {repo_link(repo_name(payload))}",
    ]
    if package.get("package_type"):
        lines.append(row("🧰", "Type", escape(package["package_type"])))
    if version:
        lines.append(row("🏷️", "Version", code(version)))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    org = org_login(payload)
    if org:
        lines.append(row("🏢", "Organization", escape(org)))
    return with_button(join(lines), "View Package", package.get("html_url"))


def format_ping(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    hook = ensure_mapping(payload.get("hook"))
    events = hook.get("events") or []

    lines = ["🏓 *Webhook ping received successfully\\!*"]
    if payload.get("zen"):
        lines.append(row("🧘", "Zen", italic(payload["zen"])))
    if repo_name(payload):
        lines.append(row("📂", "Repository", repo_link(repo_name(payload))))
        description = dig(payload, ("repository", "description"))
        if description:
            lines.append(row("📝", "Description", escape(description)))
    org = org_login(payload)
    if org:
        lines.append(row("🏢", "Organization", escape(org)))
    lines.append(row("🪝", "Hook ID", code(payload.get("hook_id") or hook.get("id") or "?")))
    if events:
        lines.append(row("📡", "Events", ", ".join(code(e) for e in events)))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    return with_button(join(lines), "View Repository", repo_url(payload))


def format_branch_protection_rule(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    rule = ensure_mapping(payload.get("rule"))

    lines = [
        f"🛡️ Branch protection rule {code(rule.get('name') or '?')} "
        f"{escape(action or 'changed')} in {repo_link(repo_name(payload))}",
        row("👤", "Sender", user_link(actor(payload))),
    ]
    reviews = rule.get("required_approving_review_count")
    if reviews is not None:
        lines.append(row("✅", "Required approvals", bold(reviews)))
    base = repo_url(payload)
    return with_button(join(lines), "View Branch Settings", f"{base}/settings/branches" if base else "")
