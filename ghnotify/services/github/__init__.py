"""Render GitHub webhook events as Telegram MarkdownV2 messages."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ghnotify.logger import get_logger
from ghnotify.services.github import ci, issues, org, pulls, refs, repository, security
from ghnotify.services.github.common import Formatter, RenderedMessage, ensure_mapping

log = get_logger(__name__)

HANDLERS: dict[str, Formatter] = {
    "branch_protection_rule": repository.format_branch_protection_rule,
    "check_run": ci.format_check_run,
    "check_suite": ci.format_check_suite,
    "code_scanning_alert": security.format_code_scanning_alert,
    "commit_comment": refs.format_commit_comment,
    "create": refs.format_create,
    "delete": refs.format_delete,
    "dependabot_alert": security.format_dependabot_alert,
    "deploy_key": repository.format_deploy_key,
    "deployment": ci.format_deployment,
    "deployment_status": ci.format_deployment_status,
    "discussion": issues.format_discussion,
    "discussion_comment": issues.format_discussion_comment,
    "fork": repository.format_fork,
    "gollum": repository.format_gollum,
    "installation": org.format_installation,
    "installation_repositories": org.format_installation_repositories,
    "issue_comment": issues.format_issue_comment,
    "issues": issues.format_issues,
    "label": issues.format_label,
    "marketplace_purchase": org.format_marketplace_purchase,
    "member": org.format_member,
    "membership": org.format_membership,
    "meta": repository.format_meta,
    "milestone": issues.format_milestone,
    "org_block": org.format_org_block,
    "organization": org.format_organization,
    "package": repository.format_package,
    "page_build": repository.format_page_build,
    "ping": repository.format_ping,
    "public": repository.format_public,
    "pull_request": pulls.format_pull_request,
    "pull_request_review": pulls.format_pull_request_review,
    "pull_request_review_comment": pulls.format_pull_request_review_comment,
    "pull_request_review_thread": pulls.format_pull_request_review_thread,
    "push": refs.format_push,
    "release": refs.format_release,
    "repository": repository.format_repository,
    "repository_dispatch": repository.format_repository_dispatch,
    "repository_vulnerability_alert": security.format_repository_vulnerability_alert,
    "secret_scanning_alert": security.format_secret_scanning_alert,
    "security_advisory": security.format_security_advisory,
    "sponsorship": org.format_sponsorship,
    "star": repository.format_star,
    "status": ci.format_status,
    "team": org.format_team,
    "team_add": org.format_team_add,
    "watch": repository.format_watch,
    "workflow_dispatch": ci.format_workflow_dispatch,
    "workflow_job": ci.format_workflow_job,
    "workflow_run": ci.format_workflow_run,
}


def unhandled_message(event: str) -> RenderedMessage:
    return RenderedMessage(f"Unhandled event type: {event}")


def select_formatter(event: Optional[str]) -> Optional[Formatter]:
    return HANDLERS.get((event or "").strip().lower())


def render_event(event: str, payload: Mapping[str, Any] | None) -> RenderedMessage:
    """
    Render one webhook delivery.

    Unknown event types produce an informational "Unhandled event type"
    message instead of an error. An empty `text` means nothing should be sent.
    """
    handler = select_formatter(event)
    if handler is None:
        log.info("unhandled_event_type", github_event=event)
        return unhandled_message(event)
    return handler(ensure_mapping(payload))


__all__ = [
    "HANDLERS",
    "RenderedMessage",
    "render_event",
    "select_formatter",
    "unhandled_message",
]
