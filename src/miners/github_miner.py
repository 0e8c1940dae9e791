"""
GitHub Data Service Module.

Reads public organization, repository, commit and user data through PyGithub and
converts every response into the typed records in ``miners.models``. PyGithub is
blocking, so each request runs in a worker thread and the event loop stays free
for the bounded fan-outs in the pipeline.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Type

from github import Auth, Github, GithubException, UnknownObjectException
from github.Commit import Commit

from config import logger
from errors import OrgNotFound, PipelineError, UpstreamUnavailable
from miners.base import ActivityMiner
from miners.models import (
    CommitDetail,
    CommitFile,
    CommitStatsData,
    CommitSummary,
    ContributorListing,
    RepositoryListing,
    UserProfile,
    UserRepository,
)

# Largest page the REST API serves; slices below this size cost one request
MAX_PAGE_SIZE = 100


class GitHubMiner(ActivityMiner):
    """
    GitHubMiner reads repository activity from the GitHub REST API.
    Failures are translated into OrgNotFound or UpstreamUnavailable.
    """

    def __init__(self, github_token: Optional[str] = None, client: Github = None):
        """Initialize GitHub miner with authentication.

        Args:
            github_token (Optional[str]): GitHub API token. Anonymous access is
                used when empty.
            client (Github): Preconfigured client, mainly for tests.
        """
        if client is not None:
            self.github = client
        elif github_token:
            self.github = Github(auth=Auth.Token(github_token), per_page=MAX_PAGE_SIZE)
        else:
            self.github = Github(per_page=MAX_PAGE_SIZE)

    def check_rate_limit(self, check_name: str = None) -> None:
        """
        Log the GitHub API rate limit status seen on the last response.

        Args:
            check_name (Optional[str]): Identifier for the rate limit check point.

        Raises:
            UpstreamUnavailable: When the rate limit is exhausted.
        """
        remaining, limit = self.github.rate_limiting
        reset_time = datetime.fromtimestamp(
            self.github.rate_limiting_resettime, tz=timezone.utc
        )
        now = datetime.now(timezone.utc)

        logger.info(
            {
                "message": f"{check_name} API rate limit status",
                "remaining_points": remaining,
                "total_points": limit,
                "reset_time": reset_time.isoformat(),
                "minutes_to_reset": (reset_time - now).total_seconds() / 60,
            }
        )

        # If less than 10% of rate limit remains, log a warning
        if remaining < (limit * 0.1) and remaining > 0:
            logger.warning(
                {
                    "message": "GitHub API rate limit running low",
                    "remaining_points": remaining,
                    "reset_time": reset_time.isoformat(),
                }
            )

        if remaining == 0:
            wait_time = (reset_time - now).total_seconds()
            logger.critical(
                {
                    "message": "GitHub API rate limit exhausted",
                    "reset_time": reset_time.isoformat(),
                    "wait_time_seconds": wait_time,
                }
            )
            raise UpstreamUnavailable(
                f"GitHub API rate limit exhausted. Resets in {wait_time/60:.1f} minutes"
            )

    async def _request(
        self,
        context: str,
        fn: Callable[[], Any],
        not_found: Type[PipelineError] = UpstreamUnavailable,
    ) -> Any:
        """Run one blocking request in a worker thread and translate failures.

        Args:
            context (str): Human readable description of the request.
            fn (Callable[[], Any]): Callable performing the request and conversion.
            not_found (Type[PipelineError]): Error raised on a 404 response.
        """
        try:
            return await asyncio.to_thread(fn)
        except UnknownObjectException as e:
            raise not_found(f"{context}: not found") from e
        except GithubException as e:
            raise UpstreamUnavailable(f"{context}: HTTP {e.status}") from e
        except OSError as e:
            # requests' connection errors derive from OSError
            raise UpstreamUnavailable(f"{context}: {e}") from e

    @staticmethod
    def _get_commit_data(commit: Commit) -> CommitDetail:
        """Convert a PyGithub Commit into a CommitDetail record."""
        git_author = commit.commit.author
        stats = commit.stats
        return CommitDetail(
            sha=commit.sha,
            message=commit.commit.message or "",
            author_login=commit.author.login if commit.author else None,
            author_name=git_author.name if git_author else None,
            files=[
                CommitFile(filename=file.filename, patch=file.patch)
                for file in (commit.files or [])
            ],
            stats=(
                CommitStatsData(
                    additions=stats.additions,
                    deletions=stats.deletions,
                    total=stats.total,
                )
                if stats is not None
                else None
            ),
        )

    async def list_org_repositories(
        self, org: str, page_size: int = 100
    ) -> List[RepositoryListing]:
        def fetch() -> List[RepositoryListing]:
            organization = self.github.get_organization(org)
            repos = organization.get_repos(type="public")[:page_size]
            return [
                RepositoryListing(
                    name=repo.name,
                    html_url=repo.html_url,
                    stargazers_count=repo.stargazers_count,
                )
                for repo in repos
            ]

        return await self._request(
            f"list repositories for {org}", fetch, not_found=OrgNotFound
        )

    async def list_commits(
        self, owner: str, repo: str, page_size: int = 10
    ) -> List[CommitSummary]:
        def fetch() -> List[CommitSummary]:
            repository = self.github.get_repo(f"{owner}/{repo}", lazy=True)
            return [
                CommitSummary(sha=commit.sha)
                for commit in repository.get_commits()[:page_size]
            ]

        return await self._request(f"list commits for {owner}/{repo}", fetch)

    async def get_commit(self, owner: str, repo: str, sha: str) -> CommitDetail:
        def fetch() -> CommitDetail:
            repository = self.github.get_repo(f"{owner}/{repo}", lazy=True)
            return self._get_commit_data(repository.get_commit(sha))

        return await self._request(f"get commit {sha} in {owner}/{repo}", fetch)

    async def list_contributors(
        self, owner: str, repo: str, page_size: int = 50
    ) -> List[ContributorListing]:
        def fetch() -> List[ContributorListing]:
            repository = self.github.get_repo(f"{owner}/{repo}", lazy=True)
            return [
                ContributorListing(
                    login=contributor.login, contributions=contributor.contributions
                )
                for contributor in repository.get_contributors()[:page_size]
            ]

        return await self._request(f"list contributors for {owner}/{repo}", fetch)

    async def get_user(self, username: str) -> UserProfile:
        def fetch() -> UserProfile:
            user = self.github.get_user(username)
            return UserProfile(login=user.login, name=user.name, bio=user.bio)

        return await self._request(f"get user {username}", fetch)

    async def list_user_repositories(
        self, username: str, page_size: int = 30
    ) -> List[UserRepository]:
        def fetch() -> List[UserRepository]:
            user = self.github.get_user(username)
            return [
                UserRepository(name=repo.name, stargazers_count=repo.stargazers_count)
                for repo in user.get_repos(type="owner")[:page_size]
            ]

        return await self._request(f"list repositories for user {username}", fetch)

    async def list_repository_languages(self, owner: str, repo: str) -> Dict[str, int]:
        def fetch() -> Dict[str, int]:
            repository = self.github.get_repo(f"{owner}/{repo}", lazy=True)
            return dict(repository.get_languages())

        return await self._request(f"list languages for {owner}/{repo}", fetch)
