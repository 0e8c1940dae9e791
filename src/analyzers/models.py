"""
Pipeline Data Models.

Defines the company record and the repository snapshots each pipeline stage
produces. Uses Pydantic for validation and serialization; snapshots are
persisted wholesale into the company record.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

UNKNOWN_AUTHOR = "Unknown"
NO_FILE_CHANGES = "No file changes found for this commit."
NO_REPOSITORY_DATA = "No repository data available."
NO_SUMMARY = "No summary available."
SUMMARY_NOT_AVAILABLE = "Summary not available."
NO_MESSAGE = "No message available."
NO_DIFF = "No diff available."


class CommitStats(BaseModel):
    """Line counts of a commit."""

    additions: int = 0
    deletions: int = 0
    total: int = 0


class CommitRecord(BaseModel):
    """A commit with its author, rendered diff and stats."""

    sha: str = ""
    message: str = ""
    author: str = UNKNOWN_AUTHOR
    diff: str = NO_FILE_CHANGES
    stats: Optional[CommitStats] = None
    message_summary: Optional[str] = None
    diff_summary: Optional[str] = None


class RepositorySample(BaseModel):
    """Snapshot of one selected repository at fetch time."""

    name: str
    link: str
    stars: int = 0
    contributors: List[str] = Field(default_factory=list)
    commits: List[CommitRecord] = Field(default_factory=list)
    average_additions: int = 0
    average_deletions: int = 0


class ContributorProfile(BaseModel):
    """A commit author with display name and inferred technologies."""

    username: str
    name: str
    technologies: List[str] = Field(default_factory=list)


class EnrichedRepository(RepositorySample):
    """Repository snapshot with one profile per distinct commit author."""

    people: List[ContributorProfile] = Field(default_factory=list)


class CompanyProfile(BaseModel):
    """Company record, the root of everything the pipeline persists."""

    id: int
    name: str
    website: str
    manager_name: Optional[str] = None
    scraped_data: Optional[List[RepositorySample]] = None
    nice_data: Optional[List[EnrichedRepository]] = None
    email: Optional[str] = None


class ItemFailure(BaseModel):
    """A single degraded item: what failed, where, and why."""

    kind: str  # repositories, commit, contributor, technologies, ...
    item: str
    error: str


class BatchReport(BaseModel):
    """Per-item failures collected while a stage runs."""

    failures: List[ItemFailure] = Field(default_factory=list)

    def record(self, kind: str, item: str, error: Exception) -> None:
        self.failures.append(ItemFailure(kind=kind, item=item, error=str(error)))

    def extend(self, other: "BatchReport") -> None:
        self.failures.extend(other.failures)

    def count(self, kind: Optional[str] = None) -> int:
        """Number of degraded items, optionally of a single kind."""
        if kind is None:
            return len(self.failures)
        return len([f for f in self.failures if f.kind == kind])

    @property
    def degraded(self) -> bool:
        return bool(self.failures)
