"""
Organization Sampler.

Coordinates the fetch side of the pipeline for one organization: selects the
top repositories, gathers each one's contributors and recent commits, and
computes average churn. Repositories are processed one after another; failures
degrade single items. An organization that cannot be listed because the
service is unavailable yields an empty sample; an unknown organization raises.
"""

from typing import List, Tuple

from config import logger
from errors import PipelineError, UpstreamError
from analyzers.commits import CommitAggregator
from analyzers.contributors import ContributorEnricher
from analyzers.metrics import compute_average_churn
from analyzers.models import BatchReport, RepositorySample
from analyzers.selector import select_repositories
from miners.base import ActivityMiner
from miners.models import RepositoryListing


class OrganizationSampler:
    """
    Builds RepositorySample snapshots for an organization.

    Attributes:
        miner (ActivityMiner): Repository data service
        aggregator (CommitAggregator): Commit window builder
        enricher (ContributorEnricher): Contributor name resolver
        repository_limit (int): Number of repositories sampled
        page_size (int): Repository listing page size
        metrics_window (int): Commits used for average churn
    """

    def __init__(
        self,
        miner: ActivityMiner,
        aggregator: CommitAggregator,
        enricher: ContributorEnricher,
        repository_limit: int = 1,
        page_size: int = 100,
        metrics_window: int = 3,
    ):
        self.miner = miner
        self.aggregator = aggregator
        self.enricher = enricher
        self.repository_limit = repository_limit
        self.page_size = page_size
        self.metrics_window = metrics_window

    async def sample_repository(
        self, org: str, repo: RepositoryListing
    ) -> Tuple[RepositorySample, BatchReport]:
        """
        Snapshot one repository.

        Args:
            org (str): Organization login, the repository owner
            repo (RepositoryListing): Selected repository

        Returns:
            Tuple[RepositorySample, BatchReport]: Snapshot and degraded items
        """
        logger.info({"message": "Processing repository", "repository": f"{org}/{repo.name}"})
        report = BatchReport()

        contributors, contributor_report = await self.enricher.resolve_contributor_names(
            org, repo.name
        )
        report.extend(contributor_report)

        commits, commit_report = await self.aggregator.aggregate(org, repo.name)
        report.extend(commit_report)

        average_additions, average_deletions = compute_average_churn(
            commits, self.metrics_window
        )

        sample = RepositorySample(
            name=repo.name,
            link=repo.html_url,
            stars=repo.stargazers_count,
            contributors=contributors,
            commits=commits,
            average_additions=average_additions,
            average_deletions=average_deletions,
        )
        return sample, report

    async def sample_organization(
        self, org: str
    ) -> Tuple[List[RepositorySample], BatchReport]:
        """
        Snapshot the top repositories of an organization.

        Args:
            org (str): Organization login

        Returns:
            Tuple[List[RepositorySample], BatchReport]: Snapshots, most starred
                first, and the degraded items

        Raises:
            OrgNotFound: If the service reports no such organization
        """
        report = BatchReport()
        try:
            selected = await select_repositories(
                self.miner, org, limit=self.repository_limit, page_size=self.page_size
            )
        except UpstreamError as e:
            logger.error(
                {
                    "message": "Error fetching repositories for organization",
                    "organization": org,
                    "error": str(e),
                }
            )
            report.record("repositories", org, e)
            return [], report

        samples: List[RepositorySample] = []
        for repo in selected:
            sample, repo_report = await self.sample_repository(org, repo)
            samples.append(sample)
            report.extend(repo_report)

            try:
                self.miner.check_rate_limit(f"Repository {org}/{repo.name}")
            except PipelineError as e:
                report.record("repositories", org, e)
                logger.error(
                    {
                        "message": "Stopping repository sampling",
                        "organization": org,
                        "sampled": len(samples),
                        "error": str(e),
                    }
                )
                break

        return samples, report
