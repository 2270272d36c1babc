"""Tests for individual GitHub event formatters."""

import pytest

from ghnotify.services.github import ci, issues, org, pulls, refs, repository, security


class TestPush:
    def test_two_commits(self, push_payload):
        message = refs.format_push(push_payload)

        assert "2 new commits to `repo:main`" in message.text
        commit_lines = [line for line in message.text.split("\n") if line.startswith("• ")]
        assert commit_lines == [
            "• [abcdef1](https://github.com/octo/repo/commit/abcdef1234567890): Fix bug by _octocat_",
            "• [1234567](https://github.com/octo/repo/commit/1234567abcdef000): Add feature by _hubot_",
        ]
        assert message.button is not None
        assert message.button.text == "View Commits"
        assert message.button.url == push_payload["compare"]

    def test_no_commits_and_no_head_commit_is_empty(self, push_payload):
        push_payload.update(commits=[], head_commit=None, deleted=True)
        message = refs.format_push(push_payload)
        assert message.text == ""
        assert message.button is None

    def test_single_commit_noun(self, push_payload):
        push_payload["commits"] = push_payload["commits"][:1]
        assert "1 new commit to `repo:main`" in refs.format_push(push_payload).text

    def test_long_push_is_capped(self, push_payload, make_commit):
        push_payload["commits"] = [make_commit(f"{i:040d}", f"commit {i}") for i in range(12)]
        text = refs.format_push(push_payload).text
        assert sum(line.startswith("• ") for line in text.split("\n")) == refs.MAX_COMMITS
        assert "\\+2 more commits" in text

    def test_forced_and_created_notes(self, push_payload):
        push_payload["forced"] = True
        assert "force\\-push" in refs.format_push(push_payload).text
        push_payload.update(forced=False, created=True, ref="refs/tags/v1.0")
        text = refs.format_push(push_payload).text
        assert "A new tag was created\\." in text
        assert "`repo:v1\\.0`" in text

    def test_head_commit_only(self, push_payload):
        push_payload["commits"] = []
        text = refs.format_push(push_payload).text
        assert "Head commit on `repo:main`" in text
        assert "Add feature" in text


class TestIssues:
    def test_opened_with_html_body(self, issue_payload):
        message = issues.format_issues(issue_payload)

        assert "*Issue \\#7:* Fix crash \\(v1\\.2\\)\\!" in message.text
        description = message.text.split("✍️ *Description:*\n", 1)[1]
        assert description.startswith("\\*\\*bold\\*\\* text")
        assert message.button.text == "View Issue"
        assert message.button.url == "https://github.com/octo/repo/issues/7"

    def test_opened_without_body(self, issue_payload):
        issue_payload["issue"]["body"] = None
        assert "_No description provided\\._" in issues.format_issues(issue_payload).text

    def test_unknown_action(self, issue_payload):
        issue_payload["action"] = "frobbed"
        assert "Unhandled action: frobbed" in issues.format_issues(issue_payload).text

    def test_closed(self, issue_payload):
        issue_payload["action"] = "closed"
        issue_payload["issue"]["state_reason"] = "not_planned"
        text = issues.format_issues(issue_payload).text
        assert "*Reason:* not planned" in text
        assert "The issue is now closed\\." in text

    def test_comment_is_truncated(self, issue_payload):
        issue_payload.update(
            action="created",
            comment={"body": "x" * 600, "html_url": "https://github.com/c/1"},
        )
        message = issues.format_issue_comment(issue_payload)
        assert "x" * issues.COMMENT_LIMIT + "\\.\\.\\." in message.text
        assert "commented on issue \\#7" in message.text
        assert message.button.url == "https://github.com/c/1"


class TestPullRequests:
    @pytest.fixture
    def pr_payload(self):
        return {
            "action": "closed",
            "number": 3,
            "pull_request": {
                "number": 3,
                "title": "Add thing",
                "state": "closed",
                "merged": True,
                "merged_by": {"login": "hubot"},
                "head": {"ref": "feature"},
                "base": {"ref": "main"},
                "html_url": "https://github.com/octo/repo/pull/3",
            },
            "repository": {"full_name": "octo/repo"},
            "sender": {"login": "octocat"},
        }

    def test_merged(self, pr_payload):
        message = pulls.format_pull_request(pr_payload)
        assert "*Merged by:* [hubot](https://github.com/hubot)" in message.text
        assert "`feature` → `main`" in message.text
        assert message.button.text == "View Pull Request"

    def test_review_without_sender_falls_back_to_organization(self, pr_payload):
        del pr_payload["sender"]
        pr_payload.update(
            action="submitted",
            organization={"login": "octo-org"},
            review={"state": "approved", "body": "LGTM", "html_url": "https://github.com/r/1"},
        )
        text = pulls.format_pull_request_review(pr_payload).text
        assert "Organization: octo\\-org" in text

    def test_review_thread_ignores_non_list_comments(self, pr_payload):
        pr_payload.update(action="resolved", thread={"comments": {"node": {"path": "a.py"}}})
        message = pulls.format_pull_request_review_thread(pr_payload)
        assert "resolved a review thread" in message.text
        assert message.button.url == "https://github.com/octo/repo/pull/3"

    def test_review_thread_first_comment(self, pr_payload):
        pr_payload.update(
            action="resolved",
            thread={"comments": [{"path": "src/a.py", "html_url": "https://github.com/t/1"}]},
        )
        message = pulls.format_pull_request_review_thread(pr_payload)
        assert "`src/a\\.py`" in message.text
        assert message.button.url == "https://github.com/t/1"


class TestReleases:
    def test_long_notes_are_collapsed(self):
        payload = {
            "action": "published",
            "release": {
                "tag_name": "v2.0",
                "name": "Two",
                "body": "\n".join(f"- change {i}" for i in range(15)),
                "html_url": "https://github.com/octo/repo/releases/tag/v2.0",
            },
            "repository": {"full_name": "octo/repo"},
            "sender": {"login": "octocat"},
        }
        message = refs.format_release(payload)
        assert "\n**>\n" in message.text
        assert message.text.endswith("||")
        assert message.button.text == "View Release"

    def test_deleted_has_no_button(self):
        payload = {"action": "deleted", "release": {"tag_name": "v1", "html_url": "https://x"}}
        assert refs.format_release(payload).button is None


class TestRepository:
    def test_star_and_unstar(self):
        payload = {
            "action": "created",
            "repository": {"full_name": "octo/repo", "stargazers_count": 42},
            "sender": {"login": "octocat"},
        }
        assert "starred [octo/repo](https://github.com/octo/repo)" in repository.format_star(payload).text
        payload["action"] = "deleted"
        assert "unstarred" in repository.format_star(payload).text

    def test_ping(self):
        payload = {"zen": "Keep it simple.", "hook_id": 9, "hook": {"events": ["push"]}}
        text = repository.format_ping(payload).text
        assert "Webhook ping received successfully\\!" in text
        assert "_Keep it simple\\._" in text
        assert "`push`" in text

    def test_repository_dispatch_payload_block(self):
        payload = {"action": "deploy", "client_payload": {"env": "prod"}}
        text = repository.format_repository_dispatch(payload).text
        assert "```\n\\{" in text
        assert '"env": "prod"' in text


class TestCI:
    def test_workflow_run_states(self):
        payload = {
            "workflow_run": {"name": "CI", "status": "completed", "conclusion": "failure"},
            "repository": {"full_name": "octo/repo"},
        }
        assert "❌ Workflow run *CI* FAILED" in ci.format_workflow_run(payload).text
        payload["workflow_run"].update(status="in_progress", conclusion=None)
        assert "is IN PROGRESS" in ci.format_workflow_run(payload).text

    def test_check_run_button_falls_back_to_details_url(self):
        payload = {"check_run": {"name": "lint", "status": "queued", "details_url": "https://ci.test/1"}}
        assert ci.format_check_run(payload).button.url == "https://ci.test/1"


class TestOrgAndSecurity:
    def test_member_unknown_action(self):
        payload = {"action": "frobbed", "member": {"login": "x"}, "repository": {"full_name": "o/r"}}
        assert "unknown action `frobbed`" in org.format_member(payload).text

    def test_dependabot_alert(self):
        payload = {
            "action": "created",
            "alert": {
                "number": 5,
                "dependency": {"package": {"name": "requests", "ecosystem": "pip"}},
                "security_advisory": {"severity": "high", "summary": "Bad thing"},
                "html_url": "https://github.com/octo/repo/security/dependabot/5",
            },
            "repository": {"full_name": "octo/repo"},
        }
        message = security.format_dependabot_alert(payload)
        assert "`\\#5`" in message.text
        assert "*HIGH*" in message.text
        assert message.button.text == "View Alert"


@pytest.mark.parametrize("payload", [{}, None])
def test_formatters_tolerate_missing_fields(payload):
    from ghnotify.services.github import HANDLERS

    for event, handler in HANDLERS.items():
        message = handler(payload)
        assert isinstance(message.text, str), event
