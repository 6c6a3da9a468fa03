"""Abstract base for Git platform adapters."""

from abc import ABC, abstractmethod
from typing import List

from commitrelay.models import CommitDetail, CommitStub


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails.

    status_code is None when no response was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitPlatformAdapter(ABC):
    """Read-only view of one repository on a Git hosting platform."""

    @abstractmethod
    def list_commits(self, since: str) -> List[CommitStub]:
        """List commits newer than the ISO-8601 timestamp ``since``."""
        ...

    @abstractmethod
    def get_commit(self, sha: str) -> CommitDetail:
        """Fetch one commit with its file changes."""
        ...

    @abstractmethod
    def list_branches(self) -> List[str]:
        """Return branch names."""
        ...

    def close(self) -> None:
        """Release HTTP resources. Override if needed."""

    def __enter__(self) -> "GitPlatformAdapter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
