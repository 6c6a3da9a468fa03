"""Git platform adapters (base and implementations)."""

from commitrelay.adapters.base import GitPlatformAdapter, GitPlatformError
from commitrelay.adapters.github import GitHubAdapter

__all__ = ["GitPlatformAdapter", "GitPlatformError", "GitHubAdapter"]
