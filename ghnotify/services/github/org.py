"""Organizations, members, teams, app installations and billing events."""

from __future__ import annotations

from typing import Any, Mapping

from ghnotify.services.markdown import escape
from ghnotify.services.github.common import (
    GITHUB_URL,
    RenderedMessage,
    action_of,
    actor,
    bold,
    code,
    dig,
    ensure_mapping,
    join,
    logins,
    org_login,
    repo_link,
    repo_name,
    row,
    user_link,
    with_button,
)


def _org_url(payload: Mapping[str, Any]) -> str:
    org = org_login(payload)
    return f"{GITHUB_URL}/{org}" if org else ""


_ORGANIZATION_VERBS: dict[str, tuple[str, str]] = {
    "member_added": ("➕", "joined"),
    "member_removed": ("➖", "left"),
    "member_invited": ("✉️", "was invited to"),
    "renamed": ("🔄", "renamed"),
    "deleted": ("🗑️", "deleted"),
}


def format_organization(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    org = org_login(payload) or "?"
    member = dig(payload, ("membership", "user", "login")) or dig(
        payload, ("invitation", "login")
    )

    emoji, verb = _ORGANIZATION_VERBS.get(action, ("🏢", action or "changed"))
    if member and action.startswith("member_"):
        head = f"{emoji} {user_link(member)} {escape(verb)} the organization {bold(org)}"
    else:
        head = f"{emoji} Organization {bold(org)} {escape(verb)}"
    lines = [head, row("⚡", "Action", escape(action or "?"))]
    role = dig(payload, ("membership", "role"))
    if role:
        lines.append(row("🎭", "Role", escape(role)))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    return with_button(join(lines), "View Organization", _org_url(payload))


def format_org_block(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    blocked = dig(payload, ("blocked_user", "login"))
    verb = "unblocked" if action == "unblocked" else "blocked"

    text = join([
        f"🚫 {user_link(blocked)} was {escape(verb)} in the organization "
        f"{bold(org_login(payload) or '?')}",
        row("👤", "Sender", user_link(actor(payload))),
    ])
    return with_button(text, "View Organization", _org_url(payload))


def format_member(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    member = user_link(dig(payload, ("member", "login")))
    repo = repo_link(repo_name(payload))
    sender = user_link(actor(payload))

    if action == "added":
        lines = [f"🔹 {member} was added as a collaborator of {repo}", row("👤", "Added by", sender)]
    elif action == "removed":
        lines = [f"🔸 {member} was removed from {repo}", row("👤", "Removed by", sender)]
    elif action == "edited":
        lines = [f"✏️ {member}'s role was updated in {repo}"]
        changes = ensure_mapping(payload.get("changes"))
        for key, change in changes.items():
            change = ensure_mapping(change)
            before, after = change.get("from"), change.get("to")
            if before is not None or after is not None:
                lines.append(row("🔄", key.replace("_", " ").capitalize(), escape(f"{before} → {after}")))
        lines.append(row("👤", "Updated by", sender))
    else:
        lines = [f"⚠️ {sender} performed an unknown action {code(action or '?')} on {repo}"]
    return RenderedMessage(join(lines))


def format_membership(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    team = ensure_mapping(payload.get("team"))
    emoji = {"added": "➕", "removed": "➖"}.get(action, "👥")

    lines = [
        f"{emoji} {user_link(dig(payload, ('member', 'login')))} was {escape(action or 'changed')} "
        f"{'to' if action == 'added' else 'from'} team {bold(team.get('name') or '?')}",
        row("🏢", "Organization", escape(org_login(payload) or "?")),
        row("🔭", "Scope", escape(payload.get("scope") or "team")),
    ]
    if team.get("description"):
        lines.append(row("📝", "Team Description", escape(team["description"])))
    lines.append(row("👤", "Action by", user_link(actor(payload))))
    return with_button(join(lines), "View Team", team.get("html_url"))


_TEAM_VERBS: dict[str, tuple[str, str]] = {
    "created": ("🎉", "has been created in"),
    "edited": ("✏️", "has been edited in"),
    "deleted": ("❌", "has been deleted from"),
    "added_to_repository": ("📂", "was given access to a repository in"),
    "removed_from_repository": ("🚪", "lost access to a repository in"),
}


def format_team(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    team = ensure_mapping(payload.get("team"))

    emoji, verb = _TEAM_VERBS.get(action, ("⚙️", f"had an event ({action or '?'}) in"))
    lines = [
        f"{emoji} Team {bold(team.get('name') or '(Unnamed team)')} {escape(verb)} "
        f"the organization {bold(org_login(payload) or '(Unknown organization)')}",
    ]
    if repo_name(payload):
        lines.append(row("📂", "Repository", repo_link(repo_name(payload))))
    lines.append(row("👤", "By", user_link(actor(payload))))
    if action == "deleted":
        return RenderedMessage(join(lines))
    return with_button(join(lines), "View Team", team.get("html_url"))


def format_team_add(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    team = ensure_mapping(payload.get("team"))
    text = (
        f"👥 Team {bold(team.get('name') or '(Unnamed team)')} has been added to "
        f"{repo_link(repo_name(payload))} in the organization "
        f"{bold(org_login(payload) or '(Unknown organization)')} by {user_link(actor(payload))}"
    )
    return with_button(text, "View Team", team.get("html_url"))


_INSTALLATION_VERBS: dict[str, tuple[str, str]] = {
    "created": ("🧩", "installed"),
    "deleted": ("🗑️", "uninstalled"),
    "suspend": ("⏸️", "suspended"),
    "unsuspend": ("▶️", "unsuspended"),
    "new_permissions_accepted": ("🔐", "had new permissions accepted"),
}


def format_installation(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    installation = ensure_mapping(payload.get("installation"))
    app = installation.get("app_slug") or installation.get("app_id") or "?"
    account = dig(installation, ("account", "login"))

    emoji, verb = _INSTALLATION_VERBS.get(action, ("⚠️", f"changed ({action or '?'})"))
    lines = [f"{emoji} GitHub App {bold(app)} {escape(verb)}"]
    if account:
        lines.append(row("🏢", "Account", user_link(account)))
    repos = logins(payload.get("repositories"), key="full_name")
    if repos:
        lines.append(row("📂", "Repositories", ", ".join(repo_link(r) for r in repos)))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    return with_button(join(lines), "View Installation", installation.get("html_url"))


def format_installation_repositories(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    installation = ensure_mapping(payload.get("installation"))
    app = installation.get("app_slug") or installation.get("app_id") or "?"
    added = logins(payload.get("repositories_added"), key="full_name")
    removed = logins(payload.get("repositories_removed"), key="full_name")

    lines = [f"🧩 Repositories of GitHub App {bold(app)} changed"]
    if added:
        lines.append(row("➕", "Added", ", ".join(repo_link(r) for r in added)))
    if removed:
        lines.append(row("➖", "Removed", ", ".join(repo_link(r) for r in removed)))
    if payload.get("repository_selection"):
        lines.append(row("🔭", "Selection", escape(payload["repository_selection"])))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    return with_button(join(lines), "View Installation", installation.get("html_url"))


def format_marketplace_purchase(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    purchase = ensure_mapping(payload.get("marketplace_purchase"))
    plan = ensure_mapping(purchase.get("plan"))
    account = ensure_mapping(purchase.get("account"))

    lines = [f"🛒 Marketplace purchase {bold(action.replace('_', ' ') or '?')}"]
    if plan.get("name"):
        lines.append(row("📋", "Plan Name", escape(plan["name"])))
    if purchase.get("billing_cycle"):
        lines.append(row("🔁", "Billing Cycle", escape(purchase["billing_cycle"])))
    if purchase.get("unit_count") is not None:
        lines.append(row("🔢", "Unit Count", escape(purchase["unit_count"])))
    if purchase.get("next_billing_date"):
        lines.append(row("📅", "Next Billing Date", escape(purchase["next_billing_date"])))
    if account.get("login"):
        type_ = f" ({account['type']})" if account.get("type") else ""
        lines.append(row("🏢", "Account", user_link(account["login"]) + escape(type_)))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    return RenderedMessage(join(lines))


_SPONSORSHIP_VERBS: dict[str, tuple[str, str]] = {
    "created": ("💖", "started sponsoring"),
    "cancelled": ("💔", "cancelled their sponsorship of"),
    "edited": ("✏️", "edited their sponsorship of"),
    "tier_changed": ("🔁", "changed their sponsorship tier for"),
    "pending_cancellation": ("⏳", "will cancel their sponsorship of"),
    "pending_tier_change": ("⏳", "will change their sponsorship tier for"),
}


def format_sponsorship(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    sponsorship = ensure_mapping(payload.get("sponsorship"))
    sponsor = dig(sponsorship, ("sponsor", "login")) or actor(payload)
    sponsorable = dig(sponsorship, ("sponsorable", "login"))

    emoji, verb = _SPONSORSHIP_VERBS.get(action, ("⚠️", f"changed ({action or '?'}) a sponsorship of"))
    lines = [f"{emoji} {user_link(sponsor)} {escape(verb)} {user_link(sponsorable)}"]
    tier = dig(sponsorship, ("tier", "name"))
    if tier:
        lines.append(row("🎟️", "Tier", escape(tier)))
    url = f"{GITHUB_URL}/sponsors/{sponsorable}" if sponsorable else ""
    return with_button(join(lines), "View Sponsors", url)
