"""
Abstract Base Class for Repository Data Services.

Defines the interface the pipeline uses to read public repository activity.
Implementations translate their service's responses into the records in
``miners.models`` and their failures into the ``errors`` taxonomy.
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from miners.models import (
    CommitDetail,
    CommitSummary,
    ContributorListing,
    RepositoryListing,
    UserProfile,
    UserRepository,
)


class ActivityMiner(ABC):
    """
    Abstract base class for repository data services.

    Every method performs a single request and returns a single page of
    results. Implementations raise:
    - OrgNotFound when an organization does not exist
    - UpstreamUnavailable on any other service or network failure
    """

    @abstractmethod
    async def list_org_repositories(
        self, org: str, page_size: int = 100
    ) -> List[RepositoryListing]:
        """
        List an organization's public repositories in service order.

        Args:
            org (str): Organization login
            page_size (int): Maximum number of repositories returned
        """

    @abstractmethod
    async def list_commits(
        self, owner: str, repo: str, page_size: int = 10
    ) -> List[CommitSummary]:
        """List the most recent commits of a repository, newest first."""

    @abstractmethod
    async def get_commit(self, owner: str, repo: str, sha: str) -> CommitDetail:
        """Fetch one commit with its patches and stats."""

    @abstractmethod
    async def list_contributors(
        self, owner: str, repo: str, page_size: int = 50
    ) -> List[ContributorListing]:
        """List contributors ranked by contribution count."""

    @abstractmethod
    async def get_user(self, username: str) -> UserProfile:
        """Fetch a user's public profile."""

    @abstractmethod
    async def list_user_repositories(
        self, username: str, page_size: int = 30
    ) -> List[UserRepository]:
        """List repositories owned by a user."""

    @abstractmethod
    async def list_repository_languages(self, owner: str, repo: str) -> Dict[str, int]:
        """Return the languages declared for a repository, keyed by name."""

    def check_rate_limit(self, check_name: str = None) -> None:
        """
        Report the service's remaining request budget. No-op by default.

        Raises:
            UpstreamUnavailable: When the budget is exhausted
        """
