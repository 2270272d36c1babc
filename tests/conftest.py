"""
Shared pytest fixtures: settings with a fake bot token, an app client,
and minimal GitHub payloads.
"""

import pytest
from fastapi.testclient import TestClient

from ghnotify.app import create_app
from ghnotify.config import Settings

BOT_TOKEN = "123456:ABC-test-token"


@pytest.fixture
def settings():
    return Settings(bot_token=BOT_TOKEN, telegram_api_base="https://telegram.test")


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


def _commit(sha, message, author="octocat"):
    return {
        "id": sha,
        "message": message,
        "url": f"https://github.com/octo/repo/commit/{sha}",
        "author": {"name": "Octo Cat", "username": author},
    }


@pytest.fixture
def make_commit():
    return _commit


@pytest.fixture
def push_payload():
    commits = [
        _commit("abcdef1234567890", "Fix bug\n\nLonger explanation"),
        _commit("1234567abcdef000", "Add feature", author="hubot"),
    ]
    return {
        "ref": "refs/heads/main",
        "compare": "https://github.com/octo/repo/compare/abcdef1...1234567",
        "created": False,
        "deleted": False,
        "forced": False,
        "commits": commits,
        "head_commit": commits[-1],
        "repository": {
            "name": "repo",
            "full_name": "octo/repo",
            "html_url": "https://github.com/octo/repo",
        },
        "pusher": {"name": "octocat"},
        "sender": {"login": "octocat"},
    }


@pytest.fixture
def issue_payload():
    return {
        "action": "opened",
        "issue": {
            "number": 7,
            "title": "Fix crash (v1.2)!",
            "body": "<b>bold</b> text",
            "html_url": "https://github.com/octo/repo/issues/7",
        },
        "repository": {"name": "repo", "full_name": "octo/repo"},
        "sender": {"login": "octocat"},
    }
