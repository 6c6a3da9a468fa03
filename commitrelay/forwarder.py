"""Forward commit details to the downstream update service.

The downstream answer is relayed to the webhook caller: its body on
success, its status code and reason phrase for any non-2xx status, and a
generic 500 when no response was received.
"""

import logging
from typing import Any, List

import requests

from commitrelay.models import CommitDetail, WebhookResponse

LOG = logging.getLogger("commitrelay.forwarder")

SUCCESS_MESSAGE = "Commits processed and sent to Notion API"
INTERNAL_ERROR = "Internal Server Error"


def _response_body(resp: requests.Response) -> Any:
    """Downstream body as JSON when it parses, else as text."""
    try:
        return resp.json()
    except ValueError:
        return resp.text


def forward(
    url: str,
    commits: List[CommitDetail],
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> WebhookResponse:
    """POST ``commits`` as a JSON array to ``url`` and build the reply."""
    payload = [c.to_payload() for c in commits]
    post = session.post if session is not None else requests.post
    try:
        resp = post(
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
    except requests.RequestException as e:
        LOG.error("Downstream request failed: %s", e)
        return WebhookResponse(status=500, body={"error": INTERNAL_ERROR})

    # Only 2xx counts as success; redirects were already followed
    if not 200 <= resp.status_code < 300:
        LOG.error("Downstream returned %s %s", resp.status_code, resp.reason)
        return WebhookResponse(status=resp.status_code, body={"error": resp.reason})

    LOG.info("Forwarded %d commits to %s (status %s)", len(commits), url, resp.status_code)
    return WebhookResponse(
        status=200,
        body={
            "message": SUCCESS_MESSAGE,
            "notionResponse": _response_body(resp),
            "commits": payload,
        },
    )
