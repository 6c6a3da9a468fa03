"""Fetch recent commits (with file details) or branch names from the
repository.

Commit details are fetched concurrently in a bounded thread pool. Results
keep the order of the commit list, and the first failure aborts the whole
fetch: remaining requests are cancelled and no partial result is returned.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from datetime import datetime, timedelta, timezone
from typing import List

from pydantic import BaseModel, Field

from commitrelay.adapters.base import GitPlatformAdapter, GitPlatformError
from commitrelay.models import BranchList, CommitDetail

LOG = logging.getLogger("commitrelay.fetcher")

DEFAULT_WINDOW_MINUTES = 5
DEFAULT_MAX_WORKERS = 8


class FetchResult(BaseModel):
    """Outcome of fetch_commits: commits or branches, or an error."""

    commits: List[CommitDetail] = Field(default_factory=list)
    branches: BranchList | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def since_timestamp(now: datetime | None = None, window_minutes: int = DEFAULT_WINDOW_MINUTES) -> str:
    """Return ``now - window`` as ISO-8601 UTC with milliseconds and Z suffix.

    Example: 2024-01-15T09:55:00.000Z
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = (now - timedelta(minutes=window_minutes)).astimezone(timezone.utc)
    return cutoff.strftime("%Y-%m-%dT%H:%M:%S.") + f"{cutoff.microsecond // 1000:03d}Z"


def fetch_details(
    adapter: GitPlatformAdapter,
    shas: List[str],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[CommitDetail]:
    """Fetch commit details for ``shas`` concurrently, in input order.

    Raises the first GitPlatformError encountered; pending requests are
    cancelled.
    """
    if not shas:
        return []
    results: List[CommitDetail | None] = [None] * len(shas)
    executor = ThreadPoolExecutor(max_workers=min(max_workers, len(shas)))
    try:
        futures = {executor.submit(adapter.get_commit, sha): i for i, sha in enumerate(shas)}
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        for future in done:
            exc = future.exception()
            if exc is not None:
                raise exc
        for future, i in futures.items():
            results[i] = future.result()
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
    return [r for r in results if r is not None]


def fetch_commits(
    adapter: GitPlatformAdapter,
    include_details: bool = True,
    window_minutes: int = DEFAULT_WINDOW_MINUTES,
    max_workers: int = DEFAULT_MAX_WORKERS,
    now: datetime | None = None,
) -> FetchResult:
    """Fetch commit details from the last ``window_minutes``, or branch names.

    include_details=False only lists branches (the commit list is not
    requested). Errors from the platform are returned in FetchResult.error.
    """
    try:
        if not include_details:
            branches = adapter.list_branches()
            LOG.info("Fetched %d branches", len(branches))
            return FetchResult(branches=BranchList(branches=branches))

        since = since_timestamp(now, window_minutes)
        stubs = adapter.list_commits(since)
        LOG.info("Found %d commits since %s", len(stubs), since)
        commits = fetch_details(adapter, [s.sha for s in stubs], max_workers=max_workers)
    except (GitPlatformError, AttributeError, KeyError, TypeError, ValueError) as e:
        # Non-platform errors here mean a malformed API payload
        LOG.error("Error fetching data: %s", e)
        return FetchResult(error=str(e))
    return FetchResult(commits=commits)
