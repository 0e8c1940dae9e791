"""
Commit Aggregator.

Fetches the most recent commits of a repository and turns each into a
CommitRecord with its author, rendered diff and stats. Detail fetches run
concurrently up to a fixed limit; results are put back into listing order so
"most recent N" stays meaningful for metrics and the digest.
"""

import asyncio
from typing import List, Optional, Tuple

from config import logger
from errors import PipelineError
from analyzers.models import (
    BatchReport,
    CommitRecord,
    CommitStats,
    NO_FILE_CHANGES,
    UNKNOWN_AUTHOR,
)
from miners.base import ActivityMiner
from miners.models import CommitDetail, CommitFile


def resolve_author(detail: CommitDetail) -> str:
    """Linked profile handle, else the recorded author name, else "Unknown"."""
    return detail.author_login or detail.author_name or UNKNOWN_AUTHOR


def render_file(file: CommitFile) -> str:
    if file.patch:
        return f"File: {file.filename}\n{file.patch}\n"
    return f"File: {file.filename} (no patch available)\n"


def render_diff(files: List[CommitFile]) -> str:
    """Concatenate per-file patches, one blank line between file blocks."""
    if not files:
        return NO_FILE_CHANGES
    return "\n".join(render_file(file) for file in files)


def to_commit_record(detail: CommitDetail) -> CommitRecord:
    return CommitRecord(
        sha=detail.sha,
        message=detail.message,
        author=resolve_author(detail),
        diff=render_diff(detail.files),
        stats=CommitStats(**detail.stats.model_dump()) if detail.stats else None,
    )


class CommitAggregator:
    """
    Builds the commit window of a repository.

    Attributes:
        miner (ActivityMiner): Repository data service
        commit_limit (int): Number of recent commits fetched
        concurrency (int): Maximum concurrent detail fetches
    """

    def __init__(self, miner: ActivityMiner, commit_limit: int = 10, concurrency: int = 4):
        self.miner = miner
        self.commit_limit = commit_limit
        self.concurrency = max(concurrency, 1)

    async def _fetch_detail(
        self,
        semaphore: asyncio.Semaphore,
        owner: str,
        repo: str,
        position: int,
        sha: str,
    ) -> Tuple[int, str, Optional[CommitRecord], Optional[PipelineError]]:
        async with semaphore:
            try:
                detail = await self.miner.get_commit(owner, repo, sha)
            except PipelineError as e:
                return position, sha, None, e
        return position, sha, to_commit_record(detail), None

    async def aggregate(
        self, owner: str, repo: str
    ) -> Tuple[List[CommitRecord], BatchReport]:
        """
        Fetch and render the recent commits of a repository.

        A failed listing yields an empty window; a failed detail fetch drops
        that commit only. Both are logged and recorded in the report.

        Args:
            owner (str): Repository owner
            repo (str): Repository name

        Returns:
            Tuple[List[CommitRecord], BatchReport]: Commits in listing order and
                the degraded items
        """
        report = BatchReport()
        try:
            summaries = await self.miner.list_commits(
                owner, repo, page_size=self.commit_limit
            )
        except PipelineError as e:
            logger.error(
                {
                    "message": "Error fetching commits for repository",
                    "repository": f"{owner}/{repo}",
                    "error": str(e),
                }
            )
            report.record("commits", f"{owner}/{repo}", e)
            return [], report

        semaphore = asyncio.Semaphore(self.concurrency)
        results = await asyncio.gather(
            *[
                self._fetch_detail(semaphore, owner, repo, position, summary.sha)
                for position, summary in enumerate(summaries[: self.commit_limit])
            ]
        )

        commits: List[CommitRecord] = []
        for _, sha, record, error in sorted(results, key=lambda result: result[0]):
            if error is not None:
                logger.error(
                    {
                        "message": "Error fetching commit details",
                        "repository": f"{owner}/{repo}",
                        "sha": sha,
                        "error": str(error),
                    }
                )
                report.record("commit", f"{owner}/{repo}@{sha}", error)
                continue
            commits.append(record)

        logger.info(
            {
                "message": "Aggregated commits",
                "repository": f"{owner}/{repo}",
                "listed": len(summaries),
                "aggregated": len(commits),
            }
        )
        return commits, report
