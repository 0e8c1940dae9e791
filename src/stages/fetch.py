"""
Fetch stage: sample a company's GitHub organization and persist ``scraped_data``.
"""

from config import logger
from analyzers.models import BatchReport
from analyzers.organization import resolve_organization
from analyzers.sampler import OrganizationSampler
from storage.company_store import CompanyStore


async def run_fetch_stage(
    company_id: int, store: CompanyStore, sampler: OrganizationSampler
) -> BatchReport:
    """
    Resolve the company's organization, sample it and store the snapshots.

    Args:
        company_id (int): Company identifier
        store (CompanyStore): Record store
        sampler (OrganizationSampler): Organization sampler

    Returns:
        BatchReport: Items that degraded while sampling

    Raises:
        CompanyNotFound: If the company does not exist
        InvalidProfileURL: If the website does not name an organization
        OrgNotFound: If the organization does not exist; the record is left
            untouched
    """
    company = store.get_company(company_id)
    logger.info(
        {"message": "Company website", "company_id": company_id, "website": company.website}
    )

    org = resolve_organization(company.website)
    logger.info(
        {"message": "Parsed GitHub organization", "company_id": company_id, "organization": org}
    )

    samples, report = await sampler.sample_organization(org)
    store.update_company(company_id, {"scraped_data": samples})

    logger.info(
        {
            "message": "Stored scraped data",
            "company_id": company_id,
            "repositories": len(samples),
            "commits": sum(len(sample.commits) for sample in samples),
            "degraded_items": report.count(),
        }
    )
    return report
