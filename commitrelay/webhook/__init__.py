"""Webhook server and event dispatch."""

from commitrelay.webhook.handlers import handle_github_event
from commitrelay.webhook.server import run_webhook_server

__all__ = ["handle_github_event", "run_webhook_server"]
