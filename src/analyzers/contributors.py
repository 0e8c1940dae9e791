"""
Contributor Enricher.

Two independent jobs per repository:

- resolve the ranked top contributors to display names, falling back to the
  login when a profile lookup fails;
- build a profile for every distinct commit author, with technologies inferred
  from the author's bio and most starred repository.

Neither job raises on item failures. Degraded items are logged and recorded in
the returned BatchReport.
"""

import asyncio
from typing import List, Optional, Tuple

from config import logger
from errors import PipelineError
from analyzers.models import (
    BatchReport,
    CommitRecord,
    ContributorProfile,
    UNKNOWN_AUTHOR,
)
from miners.base import ActivityMiner
from miners.models import UserProfile
from narrative.generator import NarrativeGenerator


def unique_authors(commits: List[CommitRecord]) -> List[str]:
    """Distinct author strings in first-seen order."""
    return list(dict.fromkeys(commit.author for commit in commits))


class ContributorEnricher:
    """
    Resolves contributor names and infers commit authors' technologies.

    Attributes:
        miner (ActivityMiner): Repository data service
        generator (Optional[NarrativeGenerator]): Needed for technology inference only
        contributor_limit (int): Size of the ranked contributor sample
        concurrency (int): Maximum concurrent profile lookups
    """

    def __init__(
        self,
        miner: ActivityMiner,
        generator: Optional[NarrativeGenerator] = None,
        contributor_limit: int = 50,
        concurrency: int = 4,
    ):
        self.miner = miner
        self.generator = generator
        self.contributor_limit = contributor_limit
        self.concurrency = max(concurrency, 1)

    async def _display_name(
        self, semaphore: asyncio.Semaphore, login: str
    ) -> Tuple[str, Optional[PipelineError]]:
        async with semaphore:
            try:
                profile = await self.miner.get_user(login)
            except PipelineError as e:
                return login, e
        return profile.name or login, None

    async def resolve_contributor_names(
        self, owner: str, repo: str
    ) -> Tuple[List[str], BatchReport]:
        """
        Display names of the top contributors, ranked by contribution count.

        Args:
            owner (str): Repository owner
            repo (str): Repository name

        Returns:
            Tuple[List[str], BatchReport]: Names in service order and the
                degraded items
        """
        report = BatchReport()
        try:
            contributors = await self.miner.list_contributors(
                owner, repo, page_size=self.contributor_limit
            )
        except PipelineError as e:
            logger.error(
                {
                    "message": "Error fetching contributors for repository",
                    "repository": f"{owner}/{repo}",
                    "error": str(e),
                }
            )
            report.record("contributors", f"{owner}/{repo}", e)
            return [], report

        contributors = contributors[: self.contributor_limit]
        semaphore = asyncio.Semaphore(self.concurrency)
        results = await asyncio.gather(
            *[self._display_name(semaphore, c.login) for c in contributors]
        )

        names: List[str] = []
        for contributor, (name, error) in zip(contributors, results):
            if error is not None:
                logger.warning(
                    {
                        "message": "Error fetching contributor profile",
                        "repository": f"{owner}/{repo}",
                        "contributor": contributor.login,
                        "error": str(error),
                    }
                )
                report.record("contributor", contributor.login, error)
            names.append(name)
        return names, report

    async def _repository_info(self, username: str) -> str:
        repositories = await self.miner.list_user_repositories(username)
        if not repositories:
            return ""
        top_repo = max(repositories, key=lambda repo: repo.stargazers_count)
        languages = await self.miner.list_repository_languages(username, top_repo.name)
        return f"Repository: {top_repo.name}. Languages: {', '.join(languages)}."

    async def infer_technologies(
        self, username: str, profile: Optional[UserProfile] = None
    ) -> List[str]:
        """
        Technologies a user appears proficient in.

        Args:
            username (str): User login
            profile (Optional[UserProfile]): Already fetched profile, if any

        Raises:
            PipelineError: From any step of the lookup chain
        """
        if self.generator is None:
            raise ValueError("Technology inference requires a NarrativeGenerator")
        if profile is None:
            profile = await self.miner.get_user(username)
        repo_info = await self._repository_info(username)
        return await self.generator.infer_technologies(profile.bio or "", repo_info)

    async def _build_profile(
        self, semaphore: asyncio.Semaphore, author: str, report: BatchReport
    ) -> ContributorProfile:
        if author == UNKNOWN_AUTHOR:
            return ContributorProfile(username=author, name=author)

        async with semaphore:
            try:
                profile = await self.miner.get_user(author)
            except PipelineError as e:
                logger.warning(
                    {
                        "message": "Error fetching commit author profile",
                        "contributor": author,
                        "error": str(e),
                    }
                )
                report.record("contributor", author, e)
                return ContributorProfile(username=author, name=author)

            try:
                technologies = await self.infer_technologies(author, profile)
            except PipelineError as e:
                logger.warning(
                    {
                        "message": "Error fetching technologies for contributor",
                        "contributor": author,
                        "error": str(e),
                    }
                )
                report.record("technologies", author, e)
                technologies = []

        return ContributorProfile(
            username=author, name=profile.name or author, technologies=technologies
        )

    async def build_people(
        self, commits: List[CommitRecord]
    ) -> Tuple[List[ContributorProfile], BatchReport]:
        """
        One profile per distinct commit author, in first-seen order.

        Args:
            commits (List[CommitRecord]): Commits of one repository

        Returns:
            Tuple[List[ContributorProfile], BatchReport]: Profiles and the
                degraded items
        """
        report = BatchReport()
        semaphore = asyncio.Semaphore(self.concurrency)
        people = await asyncio.gather(
            *[
                self._build_profile(semaphore, author, report)
                for author in unique_authors(commits)
            ]
        )
        return list(people), report
