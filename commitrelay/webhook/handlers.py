"""Handle GitHub webhook events.

Routes by event type (X-GitHub-Event header):
- push: fetch commits from the last window with file details and forward
  them to the downstream update service.
- getBranch: return the repository branch names.
- anything else: 400 "Event not supported".
"""

import logging
from typing import Callable

from commitrelay.adapters.base import GitPlatformAdapter
from commitrelay.adapters.github import GitHubAdapter
from commitrelay.config import RelaySettings
from commitrelay.fetcher import fetch_commits
from commitrelay.forwarder import INTERNAL_ERROR, forward
from commitrelay.models import WebhookResponse

MISCONFIGURED = "Environment variables not set correctly."
NOT_SUPPORTED = "Event not supported"


def make_github_adapter(settings: RelaySettings) -> GitPlatformAdapter:
    """Build the GitHub adapter for the configured repository."""
    return GitHubAdapter(
        token=settings.token,
        owner=settings.owner,
        repo=settings.repo,
        api_url=settings.api_url,
        timeout=settings.github_timeout,
    )


def handle_github_event(
    settings: RelaySettings | None,
    event: str | None,
    adapter_factory: Callable[[RelaySettings], GitPlatformAdapter] = make_github_adapter,
    log: logging.Logger | None = None,
) -> WebhookResponse:
    """Handle one webhook request and return the reply for the caller.

    settings is None when required configuration did not resolve at
    startup; every request is then rejected before any network call.
    """
    logger = log or logging.getLogger("commitrelay.webhook.handlers")

    if settings is None:
        logger.error("Rejecting %r event: required settings are missing", event)
        return WebhookResponse(status=500, body={"error": MISCONFIGURED})

    if event == "push":
        adapter = adapter_factory(settings)
        try:
            result = fetch_commits(
                adapter,
                include_details=True,
                window_minutes=settings.window_minutes,
                max_workers=settings.max_workers,
            )
        finally:
            adapter.close()
        if not result.ok:
            return WebhookResponse(status=500, body={"error": INTERNAL_ERROR})
        return forward(settings.downstream_url, result.commits, timeout=settings.downstream_timeout)

    if event == "getBranch":
        adapter = adapter_factory(settings)
        try:
            result = fetch_commits(adapter, include_details=False)
        finally:
            adapter.close()
        if not result.ok or result.branches is None:
            return WebhookResponse(status=500, body={"error": INTERNAL_ERROR})
        return WebhookResponse(status=200, body=result.branches.model_dump())

    logger.warning("Unsupported event: %r", event)
    return WebhookResponse(status=400, body={"message": NOT_SUPPORTED})
