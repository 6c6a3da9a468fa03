"""Data models for commits, file changes and branches (Pydantic)."""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class FileChange(BaseModel):
    """One file touched by a commit."""

    filename: str
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    changes: int = Field(default=0, ge=0)
    # Absent for binary files and very large diffs
    patch: str | None = None


class CommitStub(BaseModel):
    """Entry of the commit list; only the SHA is used."""

    model_config = ConfigDict(extra="ignore")

    sha: str


class CommitDetail(BaseModel):
    """Commit with author, message and per-file diff statistics."""

    sha: str
    author: str
    date: str
    message: str
    files: List[FileChange] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict; files without a patch omit the key."""
        return self.model_dump(exclude_none=True)


class BranchList(BaseModel):
    """Branch names of the repository, in API order."""

    branches: List[str] = Field(default_factory=list)


class WebhookResponse(BaseModel):
    """Status code and JSON body returned to the webhook caller."""

    status: int
    body: Dict[str, Any]
