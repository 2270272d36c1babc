"""End-to-end tests for the webhook and info endpoints."""

import hashlib
import hmac
import json
from unittest.mock import AsyncMock, patch
from urllib.parse import urlencode

import pytest
from fastapi.testclient import TestClient

from ghnotify.app import create_app
from ghnotify.config import Settings
from ghnotify.errors import TelegramAPIError

from conftest import BOT_TOKEN


@pytest.fixture
def send():
    with patch("ghnotify.routers.gh.send_message", new_callable=AsyncMock) as mock:
        mock.return_value = {"ok": True}
        yield mock


def post(client, event, payload, chat_id="42", **kwargs):
    params = {"chat_id": chat_id} if chat_id else {}
    headers = {"X-GitHub-Event": event, "Content-Type": "application/json"}
    headers.update(kwargs.pop("headers", {}))
    body = kwargs.pop("content", None)
    if body is None:
        body = json.dumps(payload).encode()
    return client.post("/github", params=params, headers=headers, content=body)


class TestWebhook:
    def test_push_is_forwarded(self, client, send, settings, push_payload):
        response = post(client, "push", push_payload)

        assert response.status_code == 200
        assert "2 new commits to `repo:main`" in response.text
        send.assert_awaited_once()
        args = send.await_args.args
        assert args[0] == settings
        assert args[1] == "42"
        assert args[2] == response.text
        assert args[3].text == "View Commits"

    def test_empty_push_is_not_sent(self, client, send, push_payload):
        push_payload.update(commits=[], head_commit=None)
        response = post(client, "push", push_payload)
        assert response.status_code == 200
        assert response.text == "OK"
        send.assert_not_awaited()

    def test_missing_chat_id(self, client, send, push_payload):
        response = post(client, "push", push_payload, chat_id=None)
        assert response.status_code == 400
        assert response.text == "Missing chat_id query parameter"
        send.assert_not_awaited()

    def test_unknown_event_type(self, client, send):
        response = post(client, "foo_event", {"action": "x"})
        assert response.status_code == 200
        assert response.text == "Unhandled event type: foo_event"
        send.assert_awaited_once()
        assert send.await_args.args[2] == "Unhandled event type: foo\\_event"

    def test_unknown_event_type_send_failure_still_succeeds(self, client, send):
        send.side_effect = TelegramAPIError("telegram API error: 400 Bad Request", 400)
        response = post(client, "foo_event", {})
        assert response.status_code == 200
        assert response.text == "Unhandled event type: foo_event"

    def test_send_failure_redacts_token(self, client, send, issue_payload):
        send.side_effect = TelegramAPIError(
            f"POST https://telegram.test/bot{BOT_TOKEN}/sendMessage failed", None
        )
        response = post(client, "issues", issue_payload)
        assert response.status_code == 500
        assert BOT_TOKEN not in response.text
        assert "/bot$Bot/sendMessage" in response.text

    def test_missing_token(self, push_payload):
        client = TestClient(create_app(Settings()))
        response = post(client, "push", push_payload)
        assert response.status_code == 500
        assert response.text == "telegram bot token is not set"

    def test_malformed_json(self, client, send):
        response = post(client, "push", None, content=b"{not json")
        assert response.status_code == 500
        assert response.text == "Error parsing webhook"
        send.assert_not_awaited()

    def test_non_object_json(self, client, send):
        response = post(client, "push", [1, 2, 3])
        assert response.status_code == 500

    def test_missing_event_header(self, client, send, push_payload):
        response = client.post("/github", params={"chat_id": "42"}, json=push_payload)
        assert response.status_code == 500
        assert response.text == "Error parsing webhook"

    def test_empty_body(self, client, send):
        response = post(client, "push", None, content=b"")
        assert response.status_code == 401
        assert response.text == "Invalid payload"

    def test_form_encoded_payload(self, client, send, push_payload):
        body = urlencode({"payload": json.dumps(push_payload)}).encode()
        response = post(
            client,
            "push",
            None,
            content=body,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert response.status_code == 200
        assert "2 new commits" in response.text

    def test_get_not_allowed(self, client):
        assert client.get("/github").status_code == 405


class TestSignature:
    SECRET = "s3cret"

    @pytest.fixture
    def signed_client(self):
        settings = Settings(bot_token=BOT_TOKEN, webhook_secret=self.SECRET)
        return TestClient(create_app(settings))

    def _sign(self, body):
        digest = hmac.new(self.SECRET.encode(), body, hashlib.sha256).hexdigest()
        return f"sha256={digest}"

    def test_valid_signature(self, signed_client, send, push_payload):
        body = json.dumps(push_payload).encode()
        response = post(
            signed_client, "push", None, content=body,
            headers={"X-Hub-Signature-256": self._sign(body)},
        )
        assert response.status_code == 200

    def test_invalid_signature(self, signed_client, send, push_payload):
        response = post(
            signed_client, "push", push_payload,
            headers={"X-Hub-Signature-256": "sha256=deadbeef"},
        )
        assert response.status_code == 401
        assert response.text == "Invalid payload"
        send.assert_not_awaited()

    def test_missing_signature(self, signed_client, send, push_payload):
        response = post(signed_client, "push", push_payload)
        assert response.status_code == 401


class TestInfo:
    def test_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "/github?chat_id=" in response.text
        assert "pull_request_review_thread" in response.text

    def test_healthz(self, client):
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.text == "ok"
