"""
GitHub data service tests with a mocked PyGithub client.
"""

import time

import pytest
from unittest.mock import Mock
from github import GithubException, UnknownObjectException

from errors import OrgNotFound, UpstreamUnavailable
from miners.github_miner import GitHubMiner


@pytest.fixture
def mock_github():
    """Mock PyGithub client."""
    client = Mock()
    client.rate_limiting = (4000, 5000)
    client.rate_limiting_resettime = int(time.time()) + 600
    return client


@pytest.fixture
def miner(mock_github):
    return GitHubMiner(client=mock_github)


def make_repo(name, stars):
    repo = Mock()
    repo.name = name
    repo.html_url = f"https://github.com/org/{name}"
    repo.stargazers_count = stars
    return repo


@pytest.mark.asyncio
async def test_list_org_repositories(miner, mock_github):
    organization = Mock()
    organization.get_repos.return_value = [make_repo("a", 3), make_repo("b", 8)]
    mock_github.get_organization.return_value = organization

    repos = await miner.list_org_repositories("org")

    assert [(r.name, r.stargazers_count) for r in repos] == [("a", 3), ("b", 8)]
    assert repos[1].html_url == "https://github.com/org/b"
    organization.get_repos.assert_called_once_with(type="public")


@pytest.mark.asyncio
async def test_unknown_org_raises_org_not_found(miner, mock_github):
    mock_github.get_organization.side_effect = UnknownObjectException(404, {}, {})

    with pytest.raises(OrgNotFound):
        await miner.list_org_repositories("missing")


@pytest.mark.asyncio
async def test_service_error_raises_upstream_unavailable(miner, mock_github):
    mock_github.get_user.side_effect = GithubException(502, {}, {})

    with pytest.raises(UpstreamUnavailable):
        await miner.get_user("octocat")


@pytest.mark.asyncio
async def test_connection_error_raises_upstream_unavailable(miner, mock_github):
    mock_github.get_user.side_effect = ConnectionError("reset")

    with pytest.raises(UpstreamUnavailable):
        await miner.get_user("octocat")


@pytest.mark.asyncio
async def test_get_commit_converts_detail(miner, mock_github):
    patched = Mock(filename="app.py", patch="+x")
    binary = Mock(filename="logo.png", patch=None)
    commit = Mock()
    commit.sha = "abc"
    commit.author = None
    commit.commit.message = "Fix login"
    commit.commit.author.name = "Jane Doe"
    commit.files = [patched, binary]
    commit.stats.additions = 3
    commit.stats.deletions = 1
    commit.stats.total = 4
    mock_github.get_repo.return_value.get_commit.return_value = commit

    detail = await miner.get_commit("org", "repo", "abc")

    assert detail.sha == "abc"
    assert detail.message == "Fix login"
    assert detail.author_login is None
    assert detail.author_name == "Jane Doe"
    assert [(f.filename, f.patch) for f in detail.files] == [
        ("app.py", "+x"),
        ("logo.png", None),
    ]
    assert detail.stats.total == 4
    mock_github.get_repo.assert_called_once_with("org/repo", lazy=True)


@pytest.mark.asyncio
async def test_list_commits_and_contributors_are_bounded(miner, mock_github):
    repository = mock_github.get_repo.return_value
    repository.get_commits.return_value = [Mock(sha=str(i)) for i in range(30)]
    repository.get_contributors.return_value = [
        Mock(login=f"user{i}", contributions=100 - i) for i in range(60)
    ]

    commits = await miner.list_commits("org", "repo", page_size=10)
    contributors = await miner.list_contributors("org", "repo", page_size=50)

    assert [c.sha for c in commits] == [str(i) for i in range(10)]
    assert len(contributors) == 50
    assert contributors[0].login == "user0"
    assert contributors[0].contributions == 100


@pytest.mark.asyncio
async def test_user_profile_and_repositories(miner, mock_github):
    user = Mock(login="octocat", bio=None)
    user.name = "The Octocat"
    user.get_repos.return_value = [make_repo("hello", 12)]
    mock_github.get_user.return_value = user
    mock_github.get_repo.return_value.get_languages.return_value = {"Ruby": 100}

    profile = await miner.get_user("octocat")
    repos = await miner.list_user_repositories("octocat")
    languages = await miner.list_repository_languages("octocat", "hello")

    assert profile.name == "The Octocat"
    assert profile.bio is None
    assert repos[0].stargazers_count == 12
    assert languages == {"Ruby": 100}
    user.get_repos.assert_called_once_with(type="owner")


def test_rate_limit_exhausted(miner, mock_github):
    mock_github.rate_limiting = (0, 5000)

    with pytest.raises(UpstreamUnavailable):
        miner.check_rate_limit("test")


def test_rate_limit_ok(miner):
    miner.check_rate_limit("test")
