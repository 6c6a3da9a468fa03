"""Minimal webhook HTTP server.

Serves the health check and the webhook path. Each request runs in its
own thread; handlers share only the read-only config and settings, so a
slow GitHub or downstream call blocks nothing but its own request.
"""

import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict

from commitrelay.config import AppConfig, ConfigError, RelaySettings, resolve_settings
from commitrelay.forwarder import INTERNAL_ERROR
from commitrelay.webhook.handlers import handle_github_event

LOG = logging.getLogger("commitrelay.webhook")


class WebhookHandler(BaseHTTPRequestHandler):
    """Handle GET /health and POST on the configured webhook path."""

    config: AppConfig
    settings: RelaySettings | None = None

    def _send_json(self, status: int, body: Dict[str, Any]) -> None:
        data = json.dumps(body).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def do_GET(self) -> None:
        if self.path == "/health" or self.path == "/":
            self._send_json(200, {"status": "ok", "service": "commitrelay"})
            return
        self.send_response(404)
        self.end_headers()

    def do_POST(self) -> None:
        if self.path.split("?", 1)[0] == self.config.webhook.path:
            self._handle_webhook()
            return
        self.send_response(404)
        self.end_headers()

    def _handle_webhook(self) -> None:
        event = self.headers.get("X-GitHub-Event")
        try:
            # Body is drained but unused: everything is fetched from the API
            length = int(self.headers.get("Content-Length", 0))
            body = self.rfile.read(length) if length > 0 else b""
            LOG.info("Webhook event: %s (%d bytes)", event, len(body))
            response = handle_github_event(self.settings, event)
        except Exception as e:
            LOG.exception("Failed to handle %r event: %s", event, e)
            self._send_json(500, {"error": INTERNAL_ERROR})
            return
        self._send_json(response.status, response.body)

    def log_message(self, format: str, *args: Any) -> None:
        LOG.debug(format, *args)


def build_settings(config: AppConfig) -> RelaySettings | None:
    """Resolve settings once; None (logged) when something is missing."""
    try:
        return resolve_settings(config)
    except ConfigError as e:
        LOG.error("%s; webhook requests will be rejected", e)
        return None


def make_server(config: AppConfig) -> ThreadingHTTPServer:
    """Create the HTTP server bound to config.webhook host/port."""
    WebhookHandler.config = config
    WebhookHandler.settings = build_settings(config)
    return ThreadingHTTPServer((config.webhook.host, config.webhook.port), WebhookHandler)


def run_webhook_server(config: AppConfig) -> None:
    """Run HTTP server for webhooks and health check."""
    server = make_server(config)
    LOG.info("Webhook server listening on %s:%s%s", config.webhook.host, config.webhook.port, config.webhook.path)
    server.serve_forever()
