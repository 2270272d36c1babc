"""Security advisories and code, secret and dependency alerts."""

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
    join,
    repo_link,
    repo_name,
    row,
    user_link,
    with_button,
)

DESCRIPTION_LIMIT = 300

_SEVERITY_EMOJI: dict[str, str] = {
    "critical": "🚨",
    "high": "🔴",
    "medium": "🟠",
    "moderate": "🟠",
    "low": "🟡",
    "warning": "🟡",
    "note": "🔵",
    "error": "🔴",
}


def _severity(value: Any) -> str:
    text = str(value or "unknown").lower()
    return f"{_SEVERITY_EMOJI.get(text, '⚠️')} {bold(text.upper())}"


def _alert_number(alert: Mapping[str, Any]) -> str:
    return f"#{alert.get('number') or '?'}"


def format_security_advisory(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    advisory = ensure_mapping(payload.get("security_advisory"))

    lines = [
        f"🛡️ Security advisory {escape(action or 'updated')}: "
        f"{bold(advisory.get('summary') or advisory.get('ghsa_id') or '?')}",
        row("📊", "Severity", _severity(advisory.get("severity"))),
    ]
    if advisory.get("ghsa_id"):
        lines.append(row("🆔", "GHSA ID", code(advisory["ghsa_id"])))
    if advisory.get("cve_id"):
        lines.append(row("🆔", "CVE ID", code(advisory["cve_id"])))
    description = truncate(advisory.get("description"), DESCRIPTION_LIMIT)
    if description:
        lines.append(row("📝", "Description", format_safe(description)))
    if advisory.get("published_at"):
        lines.append(row("📅", "Published At", escape(advisory["published_at"])))
    if advisory.get("withdrawn_at"):
        lines.append(row("🚫", "Withdrawn At", escape(advisory["withdrawn_at"])))
    author = dig(advisory, ("author", "login"))
    if author:
        lines.append(row("🕵️", "Reported By", user_link(author)))
    if repo_name(payload):
        lines.append(row("📂", "Repository", repo_link(repo_name(payload))))
    url = advisory.get("html_url") or advisory.get("permalink")
    return with_button(join(lines), "View Advisory", url)


def format_dependabot_alert(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    alert = ensure_mapping(payload.get("alert"))
    package = dig(alert, ("dependency", "package", "name")) or "?"
    ecosystem = dig(alert, ("dependency", "package", "ecosystem"))
    advisory = ensure_mapping(alert.get("security_advisory"))

    lines = [
        f"🤖 Dependabot alert {code(_alert_number(alert))} "
        f"{escape(action or 'updated')} in {repo_link(repo_name(payload))}",
        row("📦", "Package", code(package) + (escape(f" ({ecosystem})") if ecosystem else "")),
        row("📊", "Severity", _severity(advisory.get("severity") or dig(alert, ("security_vulnerability", "severity")))),
    ]
    if advisory.get("summary"):
        lines.append(row("📝", "Summary", escape(advisory["summary"])))
    patched = dig(alert, ("security_vulnerability", "first_patched_version", "identifier"))
    if patched:
        lines.append(row("🩹", "Patched in", code(patched)))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    return with_button(join(lines), "View Alert", alert.get("html_url"))


def format_code_scanning_alert(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    alert = ensure_mapping(payload.get("alert"))
    rule = ensure_mapping(alert.get("rule"))
    severity = rule.get("security_severity_level") or rule.get("severity")

    lines = [
        f"🔎 Code scanning alert {code(_alert_number(alert))} "
        f"{escape(action or 'updated')} in {repo_link(repo_name(payload))}",
        row("📏", "Rule", escape(rule.get("description") or rule.get("id") or "?")),
        row("📊", "Severity", _severity(severity)),
    ]
    tool = dig(alert, ("tool", "name"))
    if tool:
        lines.append(row("🧰", "Tool", escape(tool)))
    path = dig(alert, ("most_recent_instance", "location", "path"))
    if path:
        lines.append(row("📄", "File", code(path)))
    if payload.get("ref"):
        lines.append(row("🌿", "Ref", code(payload["ref"])))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    return with_button(join(lines), "View Alert", alert.get("html_url"))


def format_secret_scanning_alert(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    alert = ensure_mapping(payload.get("alert"))

    lines = [
        f"🔐 Secret scanning alert {code(_alert_number(alert))} "
        f"{escape(action or 'updated')} in {repo_link(repo_name(payload))}",
        row("🔑", "Secret Type", escape(alert.get("secret_type_display_name") or alert.get("secret_type") or "?")),
    ]
    if alert.get("resolution"):
        lines.append(row("✅", "Resolution", escape(alert["resolution"])))
    resolver = dig(alert, ("resolved_by", "login"))
    if resolver:
        lines.append(row("👮", "Resolved By", user_link(resolver)))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    return with_button(join(lines), "View Alert", alert.get("html_url"))


def format_repository_vulnerability_alert(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    alert = ensure_mapping(payload.get("alert"))
    package = alert.get("affected_package_name") or "?"

    lines = [
        f"⚠️ Vulnerability alert {escape(action or 'updated')} for {code(package)} "
        f"in {repo_link(repo_name(payload))}",
        row("📊", "Severity", _severity(alert.get("severity"))),
    ]
    if alert.get("affected_range"):
        lines.append(row("📉", "Affected", code(alert["affected_range"])))
    if alert.get("fixed_in"):
        lines.append(row("🩹", "Fixed in", code(alert["fixed_in"])))
    if alert.get("external_identifier"):
        lines.append(row("🆔", "Identifier", code(alert["external_identifier"])))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    return with_button(join(lines), "View Advisory", alert.get("external_reference"))
