"""
Organization Sampler tests.
"""

import pytest

from analyzers.commits import CommitAggregator
from analyzers.contributors import ContributorEnricher
from analyzers.sampler import OrganizationSampler
from conftest import make_detail
from errors import OrgNotFound, UpstreamUnavailable
from miners.models import CommitSummary, ContributorListing, RepositoryListing


@pytest.fixture
def sampler(mock_miner):
    """OrganizationSampler sampling the top two repositories."""
    return OrganizationSampler(
        mock_miner,
        CommitAggregator(mock_miner, commit_limit=10),
        ContributorEnricher(mock_miner),
        repository_limit=2,
    )


@pytest.mark.asyncio
async def test_sample_organization(mock_miner, sampler):
    mock_miner.list_org_repositories.return_value = [
        RepositoryListing(name="low", html_url="https://github.com/org/low", stargazers_count=1),
        RepositoryListing(name="top", html_url="https://github.com/org/top", stargazers_count=90),
        RepositoryListing(name="mid", html_url="https://github.com/org/mid", stargazers_count=40),
    ]
    mock_miner.list_contributors.return_value = [ContributorListing(login="alice")]
    mock_miner.list_commits.return_value = [CommitSummary(sha=s) for s in ("1", "2", "3", "4")]
    stats = {"1": (10, 2), "2": (20, 4), "3": (30, 6), "4": (500, 500)}
    mock_miner.get_commit.side_effect = lambda owner, repo, sha: make_detail(
        sha, additions=stats[sha][0], deletions=stats[sha][1]
    )

    samples, report = await sampler.sample_organization("org")

    assert [sample.name for sample in samples] == ["top", "mid"]
    top = samples[0]
    assert top.link == "https://github.com/org/top"
    assert top.stars == 90
    assert top.contributors == ["Alice Name"]
    assert len(top.commits) == 4
    assert (top.average_additions, top.average_deletions) == (20, 4)
    assert not report.degraded
    assert mock_miner.check_rate_limit.call_count == 2


@pytest.mark.asyncio
async def test_unavailable_listing_yields_empty_sample(mock_miner, sampler):
    mock_miner.list_org_repositories.side_effect = UpstreamUnavailable("down")

    samples, report = await sampler.sample_organization("org")

    assert samples == []
    assert report.count("repositories") == 1
    mock_miner.list_commits.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_organization_raises(mock_miner, sampler):
    mock_miner.list_org_repositories.side_effect = OrgNotFound("gone")

    with pytest.raises(OrgNotFound):
        await sampler.sample_organization("org")

    mock_miner.list_commits.assert_not_awaited()


@pytest.mark.asyncio
async def test_rate_limit_exhaustion_stops_sampling(mock_miner, sampler):
    mock_miner.list_org_repositories.return_value = [
        RepositoryListing(name=n, html_url=f"https://github.com/org/{n}", stargazers_count=s)
        for n, s in (("a", 2), ("b", 1))
    ]
    mock_miner.check_rate_limit.side_effect = UpstreamUnavailable("exhausted")

    samples, report = await sampler.sample_organization("org")

    assert [sample.name for sample in samples] == ["a"]
    assert report.count("repositories") == 1
