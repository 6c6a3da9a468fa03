"""GitHub API adapter."""

from typing import Any, Dict, List

import requests

from commitrelay.adapters.base import GitPlatformAdapter, GitPlatformError
from commitrelay.models import CommitDetail, CommitStub, FileChange


def _file_from_api(data: Dict[str, Any]) -> FileChange:
    return FileChange(
        filename=data["filename"],
        additions=data.get("additions", 0),
        deletions=data.get("deletions", 0),
        changes=data.get("changes", 0),
        patch=data.get("patch"),
    )


def _commit_from_api(data: Dict[str, Any]) -> CommitDetail:
    commit = data.get("commit") or {}
    author = commit.get("author") or {}
    return CommitDetail(
        sha=data["sha"],
        author=author.get("name", ""),
        date=author.get("date", ""),
        message=commit.get("message", ""),
        files=[_file_from_api(f) for f in (data.get("files") or [])],
    )


class GitHubAdapter(GitPlatformAdapter):
    """GitHub REST API for a single repository."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        api_url: str = "https://api.github.com",
        timeout: float | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._repo_path = f"/repos/{owner}/{repo}"
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"Bearer {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{self._repo_path}{path}"
        try:
            resp = self._session.request(method, url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            raise GitPlatformError(f"{method} {url} failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except (ValueError, AttributeError):
                pass
            raise GitPlatformError(f"{resp.status_code}: {msg}", status_code=resp.status_code)
        return resp

    def list_commits(self, since: str) -> List[CommitStub]:
        data = self._request("GET", "/commits", params={"since": since}).json() or []
        return [CommitStub(**d) for d in data]

    def get_commit(self, sha: str) -> CommitDetail:
        return _commit_from_api(self._request("GET", f"/commits/{sha}").json())

    def list_branches(self) -> List[str]:
        data = self._request("GET", "/branches").json() or []
        return [b["name"] for b in data]

    def close(self) -> None:
        self._session.close()
