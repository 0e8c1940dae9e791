"""
Contributor Enricher tests.
"""

import pytest

from analyzers.contributors import ContributorEnricher, unique_authors
from conftest import make_commit
from errors import ParseError, UpstreamUnavailable
from miners.models import ContributorListing, UserProfile, UserRepository


@pytest.fixture
def enricher(mock_miner, generator):
    """ContributorEnricher over the mocked services."""
    return ContributorEnricher(mock_miner, generator, contributor_limit=50)


@pytest.mark.asyncio
async def test_names_fall_back_to_login(mock_miner, enricher):
    mock_miner.list_contributors.return_value = [
        ContributorListing(login=login, contributions=c)
        for login, c in (("alice", 30), ("bob", 20), ("carol", 10))
    ]

    async def get_user(username):
        if username == "bob":
            raise UpstreamUnavailable("profile down")
        if username == "carol":
            return UserProfile(login="carol", name=None)
        return UserProfile(login=username, name="Alice Liddell")

    mock_miner.get_user.side_effect = get_user

    names, report = await enricher.resolve_contributor_names("org", "repo")

    assert names == ["Alice Liddell", "bob", "carol"]
    assert report.count("contributor") == 1
    mock_miner.list_contributors.assert_awaited_once_with("org", "repo", page_size=50)


@pytest.mark.asyncio
async def test_names_listing_failure(mock_miner, enricher):
    mock_miner.list_contributors.side_effect = UpstreamUnavailable("down")

    names, report = await enricher.resolve_contributor_names("org", "repo")

    assert names == []
    assert report.count("contributors") == 1


def test_unique_authors_keeps_first_seen_order():
    commits = [make_commit(str(i), author=a) for i, a in enumerate("abac")]

    assert unique_authors(commits) == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_build_people_deduplicates_authors(mock_miner, mock_service, enricher):
    commits = [make_commit(str(i), author=a) for i, a in enumerate("abac")]
    mock_service.complete.side_effect = UpstreamUnavailable("llm down")

    people, report = await enricher.build_people(commits)

    assert [person.username for person in people] == ["a", "b", "c"]
    assert all(person.technologies == [] for person in people)
    assert people[0].name == "A Name"
    assert report.count("technologies") == 3


@pytest.mark.asyncio
async def test_build_people_profile_failure(mock_miner, enricher):
    mock_miner.get_user.side_effect = UpstreamUnavailable("profile down")

    people, report = await enricher.build_people([make_commit("1", author="ghost")])

    assert people[0].username == "ghost"
    assert people[0].name == "ghost"
    assert people[0].technologies == []
    assert report.count("contributor") == 1


@pytest.mark.asyncio
async def test_unknown_author_is_not_looked_up(mock_miner, enricher):
    people, report = await enricher.build_people([make_commit("1", author="Unknown")])

    assert people[0].name == "Unknown"
    mock_miner.get_user.assert_not_awaited()
    assert not report.degraded


@pytest.mark.asyncio
async def test_infer_technologies_uses_top_starred_repository(
    mock_miner, mock_service, enricher
):
    mock_miner.list_user_repositories.return_value = [
        UserRepository(name="dotfiles", stargazers_count=2),
        UserRepository(name="engine", stargazers_count=80),
        UserRepository(name="notes", stargazers_count=80),
    ]
    mock_miner.list_repository_languages.return_value = {"Rust": 900, "C": 100}
    mock_service.complete.return_value = "Rust, C,  , Go, Rust"

    technologies = await enricher.infer_technologies("alice")

    assert technologies == ["Rust", "C", "Go"]
    mock_miner.list_repository_languages.assert_awaited_once_with("alice", "engine")
    prompt = mock_service.complete.await_args.args[0]
    assert "GitHub Bio: Go and Rust" in prompt
    assert "Repository: engine. Languages: Rust, C." in prompt


@pytest.mark.asyncio
async def test_infer_technologies_empty_response_degrades(mock_service, enricher):
    mock_service.complete.side_effect = ParseError("empty")

    people, report = await enricher.build_people([make_commit("1", author="alice")])

    assert people[0].technologies == []
    assert people[0].name == "Alice Name"
    assert report.count("technologies") == 1
