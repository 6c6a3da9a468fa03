"""Tests for the webhook HTTP server (real socket on localhost)."""

import http.client
import threading
from http.server import ThreadingHTTPServer
from typing import Iterator
from unittest.mock import patch

import pytest
import requests

from commitrelay.config import AppConfig, DownstreamConfig, GitHubConfig, WebhookConfig
from commitrelay.models import WebhookResponse
from commitrelay.webhook.server import build_settings, make_server


@pytest.fixture
def server_url(monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    config = AppConfig(
        github=GitHubConfig(owner="owner", repo="repo", token="token"),
        downstream=DownstreamConfig(base_url="https://notion.example.com"),
        webhook=WebhookConfig(host="127.0.0.1", port=0, path="/api/getgitcommit"),
    )
    server = make_server(config)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


def test_health(server_url: str) -> None:
    resp = requests.get(f"{server_url}/health", timeout=5)
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "commitrelay"}


def test_unknown_path_404(server_url: str) -> None:
    assert requests.post(f"{server_url}/other", timeout=5).status_code == 404
    assert requests.get(f"{server_url}/other", timeout=5).status_code == 404


def test_webhook_passes_event_header(server_url: str) -> None:
    """POST on the webhook path dispatches X-GitHub-Event and writes the reply."""
    reply = WebhookResponse(status=200, body={"branches": ["main"]})
    with patch("commitrelay.webhook.server.handle_github_event", return_value=reply) as mock_handle:
        resp = requests.post(
            f"{server_url}/api/getgitcommit",
            headers={"X-GitHub-Event": "getBranch"},
            json={"ref": "refs/heads/main"},
            timeout=5,
        )

    assert resp.status_code == 200
    assert resp.json() == {"branches": ["main"]}
    settings, event = mock_handle.call_args[0]
    assert event == "getBranch"
    assert settings.downstream_url == "https://notion.example.com/api/updatenotioncalendar"


def test_webhook_unsupported_event(server_url: str) -> None:
    resp = requests.post(f"{server_url}/api/getgitcommit", headers={"X-GitHub-Event": "ping"}, timeout=5)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Event not supported"}


def test_build_settings_none_when_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    config = AppConfig(github=GitHubConfig(owner="owner", repo=None, token=None))
    assert build_settings(config) is None


def test_make_server_is_threaded() -> None:
    config = AppConfig(webhook=WebhookConfig(host="127.0.0.1", port=0))
    server = make_server(config)
    try:
        assert isinstance(server, ThreadingHTTPServer)
    finally:
        server.server_close()


def test_health_answers_while_webhook_is_blocked(server_url: str) -> None:
    """A hung webhook request does not block other requests."""
    entered = threading.Event()
    release = threading.Event()

    def blocking_handler(settings, event):
        entered.set()
        release.wait(10)
        return WebhookResponse(status=200, body={"message": "done"})

    results: dict = {}

    def send_push() -> None:
        resp = requests.post(f"{server_url}/api/getgitcommit", headers={"X-GitHub-Event": "push"}, timeout=15)
        results["push"] = resp.status_code

    with patch("commitrelay.webhook.server.handle_github_event", side_effect=blocking_handler):
        pusher = threading.Thread(target=send_push)
        pusher.start()
        try:
            assert entered.wait(5)
            health = requests.get(f"{server_url}/health", timeout=2)
            assert health.status_code == 200
        finally:
            release.set()
            pusher.join(15)

    assert results["push"] == 200


def test_webhook_unexpected_error_is_500(server_url: str) -> None:
    """Errors escaping the dispatcher still produce a JSON reply."""
    with patch(
        "commitrelay.webhook.server.handle_github_event",
        side_effect=AttributeError("'list' object has no attribute 'get'"),
    ):
        resp = requests.post(f"{server_url}/api/getgitcommit", headers={"X-GitHub-Event": "push"}, timeout=5)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal Server Error"}


def test_webhook_bad_content_length_is_500(server_url: str) -> None:
    host, port = server_url.removeprefix("http://").split(":")
    conn = http.client.HTTPConnection(host, int(port), timeout=5)
    try:
        conn.putrequest("POST", "/api/getgitcommit")
        conn.putheader("X-GitHub-Event", "ping")
        conn.putheader("Content-Length", "abc")
        conn.endheaders()
        resp = conn.getresponse()
        assert resp.status == 500
        assert b"Internal Server Error" in resp.read()
    finally:
        conn.close()
