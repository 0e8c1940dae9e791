"""
Enrich stage: build ``nice_data`` from the stored ``scraped_data``.

Every commit gets a non-technical message summary and diff summary, and every
repository gets one profile per distinct commit author.
"""

import asyncio
from typing import List, Tuple

from config import logger
from errors import NotFoundError, UpstreamError
from analyzers.contributors import ContributorEnricher
from analyzers.models import (
    BatchReport,
    CommitRecord,
    EnrichedRepository,
    NO_SUMMARY,
    RepositorySample,
    SUMMARY_NOT_AVAILABLE,
)
from narrative.generator import NarrativeGenerator
from storage.company_store import CompanyStore


async def summarize_commit(
    generator: NarrativeGenerator, semaphore: asyncio.Semaphore, commit: CommitRecord
) -> CommitRecord:
    async with semaphore:
        diff_summary = await generator.summarize_commit_diff(commit.diff)
        message_summary = await generator.summarize_commit_message(commit.message)
    return commit.model_copy(
        update={"diff_summary": diff_summary, "message_summary": message_summary}
    )


async def enrich_repository(
    sample: RepositorySample,
    generator: NarrativeGenerator,
    enricher: ContributorEnricher,
    concurrency: int = 4,
) -> Tuple[EnrichedRepository, BatchReport]:
    """
    Summarize a repository's commits and profile its commit authors.

    Returns:
        Tuple[EnrichedRepository, BatchReport]: New snapshot and degraded items
    """
    report = BatchReport()
    semaphore = asyncio.Semaphore(max(concurrency, 1))
    commits: List[CommitRecord] = list(
        await asyncio.gather(
            *[summarize_commit(generator, semaphore, commit) for commit in sample.commits]
        )
    )
    for commit in commits:
        if commit.diff_summary == SUMMARY_NOT_AVAILABLE:
            report.record("diff_summary", commit.sha, UpstreamError("diff summary failed"))
        if commit.message_summary == NO_SUMMARY:
            report.record(
                "message_summary", commit.sha, UpstreamError("message summary failed")
            )

    people, people_report = await enricher.build_people(sample.commits)
    report.extend(people_report)

    enriched = EnrichedRepository(
        **sample.model_dump(exclude={"commits"}), commits=commits, people=people
    )
    return enriched, report


async def run_enrich_stage(
    company_id: int,
    store: CompanyStore,
    generator: NarrativeGenerator,
    enricher: ContributorEnricher,
    concurrency: int = 4,
) -> BatchReport:
    """
    Build and store ``nice_data`` for a company.

    Raises:
        CompanyNotFound: If the company does not exist
        NotFoundError: If the record carries no ``scraped_data`` yet
    """
    company = store.get_company(company_id)
    if company.scraped_data is None:
        raise NotFoundError(
            f"No scraped_data available in the record of company {company_id}"
        )

    report = BatchReport()
    nice_data: List[EnrichedRepository] = []
    for sample in company.scraped_data:
        logger.info(
            {"message": "Enriching repository", "company_id": company_id, "repository": sample.name}
        )
        enriched, repo_report = await enrich_repository(
            sample, generator, enricher, concurrency
        )
        nice_data.append(enriched)
        report.extend(repo_report)

    store.update_company(company_id, {"nice_data": nice_data})
    logger.info(
        {
            "message": "Stored nice data",
            "company_id": company_id,
            "repositories": len(nice_data),
            "people": sum(len(repo.people) for repo in nice_data),
            "degraded_items": report.count(),
        }
    )
    return report
