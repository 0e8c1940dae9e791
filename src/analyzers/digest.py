"""
Digest Summarizer.

Renders the bounded plain-text synopsis of an organization's top repository
that is fed to email generation: repository header, up to three recent commit
excerpts and their average churn.
"""

from typing import List

from analyzers.metrics import compute_average_churn
from analyzers.models import NO_REPOSITORY_DATA, RepositorySample

DIGEST_COMMITS = 3
EXCERPT_LENGTH = 200


def commit_excerpt(diff: str, length: int = EXCERPT_LENGTH) -> str:
    """Leading characters of a diff on a single line."""
    return diff[:length].replace("\n", " ")


def summarize_samples(samples: List[RepositorySample]) -> str:
    """
    Build the digest for the most starred repository.

    Args:
        samples (List[RepositorySample]): Repository snapshots, any order

    Returns:
        str: Digest text, or "No repository data available." when empty
    """
    if not samples:
        return NO_REPOSITORY_DATA

    top_repo = sorted(samples, key=lambda sample: sample.stars, reverse=True)[0]

    summary = "Top Repository:\n"
    summary += f"Name: {top_repo.name}\nStars: {top_repo.stars}\nLink: {top_repo.link}\n\n"

    included = top_repo.commits[:DIGEST_COMMITS]
    if included:
        summary += f"Top {DIGEST_COMMITS} Recent Commits:\n"
        for index, commit in enumerate(included, start=1):
            summary += (
                f"Commit {index} by {commit.author}:\n{commit_excerpt(commit.diff)}...\n\n"
            )

    if any(commit.stats is not None for commit in included):
        additions, deletions = compute_average_churn(included, window=len(included))
        summary += (
            f"Average changes per commit: +{additions} lines, -{deletions} lines.\n"
        )

    return summary
