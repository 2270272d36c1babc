"""Actions workflows, checks, commit statuses and deployments."""

from __future__ import annotations

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
    repo_link,
    repo_name,
    row,
    short_sha,
    user_link,
    with_button,
)

# status -> (emoji, phrase) while a run or job has not finished
_PENDING_STATES: dict[str, tuple[str, str]] = {
    "requested": ("📨", "is REQUESTED"),
    "queued": ("🔄", "is QUEUED"),
    "waiting": ("⏸️", "is WAITING"),
    "pending": ("⏳", "is PENDING"),
    "in_progress": ("⏳", "is IN PROGRESS"),
}

# conclusion -> (emoji, phrase) once completed
_CONCLUSIONS: dict[str, tuple[str, str]] = {
    "success": ("✅", "COMPLETED successfully"),
    "failure": ("❌", "FAILED"),
    "neutral": ("⚖️", "ended with NEUTRAL conclusion"),
    "cancelled": ("⛔", "was CANCELLED"),
    "skipped": ("⏭️", "was SKIPPED"),
    "timed_out": ("⌛", "TIMED OUT"),
    "action_required": ("✋", "requires ACTION"),
    "stale": ("🥀", "is STALE"),
}


def _run_state(status: str, conclusion: str) -> tuple[str, str]:
    if status == "completed":
        return _CONCLUSIONS.get(conclusion, ("⚠️", "COMPLETED with an unknown conclusion"))
    return _PENDING_STATES.get(status, ("⚠️", f"has an UNKNOWN status ({status or '?'})"))


def format_workflow_run(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    run = ensure_mapping(payload.get("workflow_run"))
    name = dig(payload, ("workflow", "name")) or run.get("name") or "workflow"
    emoji, phrase = _run_state(run.get("status") or "", run.get("conclusion") or "")

    lines = [
        f"{emoji} Workflow run {bold(name)} {escape(phrase)} in {repo_link(repo_name(payload))}",
        row("🆔", "Run", code(f"#{run.get('run_number') or '?'} ({run.get('id') or '?'})")),
    ]
    if run.get("head_branch"):
        lines.append(row("🌿", "Branch", code(run["head_branch"])))
    if run.get("event"):
        lines.append(row("📡", "Trigger", escape(run["event"])))
    lines.append(row("👤", "By", user_link(actor(payload))))
    return with_button(join(lines), "View Run", run.get("html_url"))


def format_workflow_job(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    job = ensure_mapping(payload.get("workflow_job"))
    emoji, phrase = _run_state(job.get("status") or "", job.get("conclusion") or "")

    lines = [
        f"{emoji} Job {bold(job.get('name') or '?')} {escape(phrase)} in {repo_link(repo_name(payload))}",
        row("🆔", "Workflow run", code(job.get("run_id") or "?")),
        row("🔢", "Job ID", code(job.get("id") or "?")),
    ]
    if job.get("workflow_name"):
        lines.append(row("⚙️", "Workflow", escape(job["workflow_name"])))
    if job.get("runner_name"):
        lines.append(row("🖥️", "Runner", escape(job["runner_name"])))
    lines.append(row("👤", "By", user_link(actor(payload))))
    return with_button(join(lines), "Job Details", job.get("html_url"))


def format_workflow_dispatch(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    workflow = payload.get("workflow") or "(Unnamed workflow)"
    inputs = payload.get("inputs")

    if isinstance(inputs, Mapping) and inputs:
        rendered_inputs = ", ".join(f"{bold(k)}: {italic(v)}" for k, v in inputs.items())
    elif inputs:
        rendered_inputs = italic("(Invalid inputs)")
    else:
        rendered_inputs = italic("No inputs provided")

    text = join([
        f"🔧 Workflow {code(workflow)} has been manually triggered in "
        f"{repo_link(repo_name(payload))} by {user_link(actor(payload))}",
        row("📡", "Event", code("workflow_dispatch")),
        row("🌿", "Ref", code(payload.get("ref") or "?")),
        row("🧾", "Inputs", rendered_inputs),
    ])
    repo_html = dig(payload, ("repository", "html_url"))
    return with_button(text, "View Actions", f"{repo_html}/actions" if repo_html else "")


def format_check_run(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    check = ensure_mapping(payload.get("check_run"))
    emoji, phrase = _run_state(check.get("status") or "", check.get("conclusion") or "")

    lines = [
        f"{emoji} Check run {bold(check.get('name') or '?')} {escape(phrase)} "
        f"in {repo_link(repo_name(payload))}",
        row("🔧", "Action", escape(action or "?")),
    ]
    if check.get("head_sha"):
        lines.append(row("🔖", "Commit", code(short_sha(check["head_sha"]))))
    if check.get("started_at"):
        lines.append(row("🕐", "Started At", escape(check["started_at"])))
    if check.get("completed_at"):
        lines.append(row("🏁", "Completed At", escape(check["completed_at"])))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    url = check.get("html_url") or check.get("details_url")
    return with_button(join(lines), "View Check", url)


def format_check_suite(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    action = action_of(payload)
    suite = ensure_mapping(payload.get("check_suite"))
    emoji, phrase = _run_state(suite.get("status") or "", suite.get("conclusion") or "")

    lines = [
        f"{emoji} Check suite {escape(phrase)} in {repo_link(repo_name(payload))}",
        row("🔧", "Action", escape(action or "?")),
    ]
    if suite.get("head_branch"):
        lines.append(row("🌿", "Branch", code(suite["head_branch"])))
    if suite.get("head_sha"):
        lines.append(row("🔖", "Commit", code(short_sha(suite["head_sha"]))))
    app_name = dig(suite, ("app", "name"))
    if app_name:
        lines.append(row("🧩", "App", escape(app_name)))
    lines.append(row("👤", "Sender", user_link(actor(payload))))

    sha = suite.get("head_sha")
    repo_html = dig(payload, ("repository", "html_url"))
    url = f"{repo_html}/commit/{sha}/checks" if repo_html and sha else None
    return with_button(join(lines), "View Checks", url)


_STATUS_STATES: dict[str, tuple[str, str]] = {
    "success": ("✅", "SUCCESS"),
    "error": ("❌", "ERROR"),
    "failure": ("❌", "FAILURE"),
    "pending": ("⏳", "PENDING"),
}


def format_status(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    state = payload.get("state") or ""
    sha = short_sha(payload.get("sha") or dig(payload, ("commit", "sha"))) or "?"
    emoji, label = _STATUS_STATES.get(state, ("⚠️", "an unknown state"))

    lines = [
        f"{emoji} The status for commit {code(sha)} in {repo_link(repo_name(payload))} "
        f"is {bold(label)}",
    ]
    if payload.get("context"):
        lines.append(row("🏷️", "Context", code(payload["context"])))
    if payload.get("description"):
        lines.append(italic(payload["description"]))
    lines.append(row("👤", "By", user_link(actor(payload))))
    url = payload.get("target_url") or dig(payload, ("commit", "html_url"))
    return with_button(join(lines), "View Details", url)


def format_deployment(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    deployment = ensure_mapping(payload.get("deployment"))

    lines = [
        f"🚢 Deployment {code(deployment.get('id') or '?')} {escape(action_of(payload) or 'created')} "
        f"in {repo_link(repo_name(payload))}",
    ]
    if deployment.get("environment"):
        lines.append(row("🌍", "Environment", code(deployment["environment"])))
    if deployment.get("ref"):
        lines.append(row("🌿", "Ref", code(deployment["ref"])))
    if deployment.get("description"):
        lines.append(row("📝", "Description", escape(deployment["description"])))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    installation = dig(payload, ("installation", "id"))
    if installation:
        lines.append(row("🧩", "Installation ID", code(installation)))
    url = dig(payload, ("workflow_run", "html_url")) or dig(payload, ("repository", "html_url"))
    return with_button(join(lines), "View Deployment", url)


_DEPLOYMENT_STATES: dict[str, str] = {
    "success": "✅",
    "failure": "❌",
    "error": "❌",
    "inactive": "💤",
    "in_progress": "⏳",
    "queued": "🔄",
    "pending": "⏳",
}


def format_deployment_status(payload: Mapping[str, Any]) -> RenderedMessage:
    payload = ensure_mapping(payload)
    status = ensure_mapping(payload.get("deployment_status"))
    deployment = ensure_mapping(payload.get("deployment"))
    state = status.get("state") or "unknown"

    lines = [
        f"{_DEPLOYMENT_STATES.get(state, '⚠️')} Deployment status {bold(state.upper())} "
        f"in {repo_link(repo_name(payload))}",
    ]
    environment = status.get("environment") or deployment.get("environment")
    if environment:
        lines.append(row("🌍", "Environment", code(environment)))
    if status.get("description"):
        lines.append(row("📝", "Description", escape(status["description"])))
    lines.append(row("👤", "Sender", user_link(actor(payload))))
    installation = dig(payload, ("installation", "id"))
    if installation:
        lines.append(row("🧩", "Installation ID", code(installation)))
    url = status.get("environment_url") or status.get("log_url") or status.get("target_url")
    return with_button(join(lines), "View Deployment", url)
