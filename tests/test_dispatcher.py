"""Tests for event type → formatter dispatch."""

from ghnotify.services.github import HANDLERS, render_event, select_formatter
from ghnotify.services.github.refs import format_push

EXPECTED_EVENTS = {
    "branch_protection_rule", "check_run", "check_suite", "code_scanning_alert",
    "commit_comment", "create", "delete", "dependabot_alert", "deploy_key",
    "deployment", "deployment_status", "discussion", "discussion_comment", "fork",
    "gollum", "installation", "installation_repositories", "issue_comment",
    "issues", "label", "marketplace_purchase", "member", "membership", "meta",
    "milestone", "org_block", "organization", "package", "page_build", "ping",
    "public", "pull_request", "pull_request_review", "pull_request_review_comment",
    "pull_request_review_thread", "push", "release", "repository",
    "repository_dispatch", "repository_vulnerability_alert", "secret_scanning_alert",
    "security_advisory", "sponsorship", "star", "status", "team", "team_add",
    "watch", "workflow_dispatch", "workflow_job", "workflow_run",
}


def test_registry_covers_every_event():
    assert set(HANDLERS) == EXPECTED_EVENTS
    assert len(HANDLERS) == 51


def test_unknown_event_type():
    message = render_event("foo_event", {"action": "x"})
    assert message.text == "Unhandled event type: foo_event"
    assert message.button is None


def test_select_formatter_normalizes_tag():
    assert select_formatter(" Push ") is format_push
    assert select_formatter(None) is None


def test_render_event_tolerates_non_mapping_payload():
    message = render_event("push", ["not", "a", "dict"])
    assert message.text == ""


def test_render_push(push_payload):
    message = render_event("push", push_payload)
    assert "2 new commits" in message.text
    assert message.button.text == "View Commits"
