"""
Repository Selector.

Ranks an organization's public repositories by popularity and keeps a fixed-size
sample.
"""

from typing import List

from config import logger
from miners.base import ActivityMiner
from miners.models import RepositoryListing


def rank_repositories(
    repositories: List[RepositoryListing], limit: int
) -> List[RepositoryListing]:
    """Sort by descending star count, keeping service order for ties, and cut to limit."""
    ranked = sorted(repositories, key=lambda repo: repo.stargazers_count, reverse=True)
    return ranked[: max(limit, 0)]


async def select_repositories(
    miner: ActivityMiner, org: str, limit: int = 1, page_size: int = 100
) -> List[RepositoryListing]:
    """
    Fetch one page of public repositories and return the most starred ones.

    Args:
        miner (ActivityMiner): Repository data service
        org (str): Organization login
        limit (int): Sample size
        page_size (int): Listing page size

    Returns:
        List[RepositoryListing]: At most ``limit`` repositories, most starred first

    Raises:
        OrgNotFound: If the organization does not exist
        UpstreamUnavailable: On service failure
    """
    logger.info(
        {"message": "Fetching repositories for organization", "organization": org}
    )
    repositories = await miner.list_org_repositories(org, page_size=page_size)
    selected = rank_repositories(repositories, limit)
    logger.info(
        {
            "message": "Selected top repositories",
            "organization": org,
            "listed": len(repositories),
            "selected": [repo.name for repo in selected],
        }
    )
    return selected
