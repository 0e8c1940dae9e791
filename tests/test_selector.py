"""
Repository Selector tests.
"""

import pytest

from analyzers.selector import rank_repositories, select_repositories
from errors import OrgNotFound
from miners.models import RepositoryListing


def listing(name, stars):
    return RepositoryListing(
        name=name, html_url=f"https://github.com/org/{name}", stargazers_count=stars
    )


def test_rank_keeps_most_starred():
    repos = [listing("a", 10), listing("b", 50), listing("c", 5)]

    selected = rank_repositories(repos, 1)

    assert [repo.name for repo in selected] == ["b"]


def test_rank_is_stable_for_ties():
    repos = [listing("a", 5), listing("b", 9), listing("c", 5), listing("d", 5)]

    selected = rank_repositories(repos, 4)

    assert [repo.name for repo in selected] == ["b", "a", "c", "d"]


def test_rank_never_exceeds_limit():
    repos = [listing(str(i), i) for i in range(10)]

    selected = rank_repositories(repos, 4)

    assert len(selected) == 4
    stars = [repo.stargazers_count for repo in selected]
    assert stars == sorted(stars, reverse=True)


@pytest.mark.asyncio
async def test_select_repositories_calls_single_page(mock_miner):
    mock_miner.list_org_repositories.return_value = [
        listing("a", 10),
        listing("b", 50),
        listing("c", 5),
    ]

    selected = await select_repositories(mock_miner, "org", limit=1, page_size=100)

    assert [repo.stargazers_count for repo in selected] == [50]
    mock_miner.list_org_repositories.assert_awaited_once_with("org", page_size=100)


@pytest.mark.asyncio
async def test_select_repositories_propagates_org_not_found(mock_miner):
    mock_miner.list_org_repositories.side_effect = OrgNotFound("missing")

    with pytest.raises(OrgNotFound):
        await select_repositories(mock_miner, "missing")
