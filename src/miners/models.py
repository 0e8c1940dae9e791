"""
Data Service Response Models.

Typed records for every response the repository data service returns. Optional
upstream fields are made explicit here so the pipeline never branches on
whether a field exists.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class RepositoryListing(BaseModel):
    """One entry of an organization's repository listing."""

    name: str
    html_url: str
    stargazers_count: int = 0


class CommitSummary(BaseModel):
    """One entry of a repository's commit listing."""

    sha: str


class CommitFile(BaseModel):
    """A file changed by a commit. Binary or oversized files carry no patch."""

    filename: str
    patch: Optional[str] = None


class CommitStatsData(BaseModel):
    """Line counts reported for a commit."""

    additions: int = 0
    deletions: int = 0
    total: int = 0


class CommitDetail(BaseModel):
    """Full commit detail with per-file patches."""

    sha: str
    message: str = ""
    author_login: Optional[str] = None  # linked profile handle
    author_name: Optional[str] = None  # name recorded in commit metadata
    files: List[CommitFile] = Field(default_factory=list)
    stats: Optional[CommitStatsData] = None


class ContributorListing(BaseModel):
    """One entry of a repository's ranked contributor listing."""

    login: str
    contributions: int = 0


class UserProfile(BaseModel):
    """Public profile of a user."""

    login: str
    name: Optional[str] = None
    bio: Optional[str] = None


class UserRepository(BaseModel):
    """A repository owned by a user."""

    name: str
    stargazers_count: int = 0
