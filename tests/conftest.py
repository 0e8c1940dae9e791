"""
Shared fixtures: a mocked repository data service and completion service.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from analyzers.models import CommitRecord, CommitStats, RepositorySample
from miners.base import ActivityMiner
from miners.models import CommitDetail, CommitFile, CommitStatsData, UserProfile
from narrative.completion import CompletionService
from narrative.generator import NarrativeGenerator


def make_detail(sha, login="octocat", additions=1, deletions=1, files=None):
    """Build a CommitDetail with one patched file unless files are given."""
    return CommitDetail(
        sha=sha,
        message=f"commit {sha}",
        author_login=login,
        author_name="The Octocat",
        files=files
        if files is not None
        else [CommitFile(filename=f"{sha}.py", patch=f"@@ -0,0 +1 @@\n+{sha}")],
        stats=CommitStatsData(
            additions=additions, deletions=deletions, total=additions + deletions
        ),
    )


def make_commit(sha, author="octocat", diff="File: a.py\n+line\n", stats=(1, 1)):
    return CommitRecord(
        sha=sha,
        message=f"commit {sha}",
        author=author,
        diff=diff,
        stats=CommitStats(additions=stats[0], deletions=stats[1], total=sum(stats))
        if stats
        else None,
    )


def make_sample(name="repo", stars=10, commits=None):
    return RepositorySample(
        name=name,
        link=f"https://github.com/org/{name}",
        stars=stars,
        commits=commits or [],
    )


@pytest.fixture
def mock_miner():
    """Mock repository data service with empty defaults."""
    miner = Mock(spec=ActivityMiner)
    miner.list_org_repositories = AsyncMock(return_value=[])
    miner.list_commits = AsyncMock(return_value=[])
    miner.get_commit = AsyncMock()
    miner.list_contributors = AsyncMock(return_value=[])
    miner.get_user = AsyncMock(
        side_effect=lambda username: UserProfile(
            login=username, name=f"{username.title()} Name", bio="Go and Rust"
        )
    )
    miner.list_user_repositories = AsyncMock(return_value=[])
    miner.list_repository_languages = AsyncMock(return_value={})
    miner.check_rate_limit = Mock(return_value=None)
    return miner


@pytest.fixture
def mock_service():
    """Mock completion service answering every prompt with the same text."""
    service = Mock(spec=CompletionService)
    service.complete = AsyncMock(return_value="generated text")
    service.truncate = Mock(side_effect=lambda text, max_tokens: text)
    return service


@pytest.fixture
def generator(mock_service):
    return NarrativeGenerator(mock_service, max_diff_tokens=100)
