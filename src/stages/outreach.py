"""
Outreach stage: turn the stored ``scraped_data`` into a digest and persist the
generated ``email``.
"""

from config import logger
from errors import UpstreamError
from analyzers.digest import summarize_samples
from analyzers.models import BatchReport, NO_SUMMARY
from narrative.generator import NarrativeGenerator
from storage.company_store import CompanyStore


async def run_outreach_stage(
    company_id: int, store: CompanyStore, generator: NarrativeGenerator
) -> BatchReport:
    """
    Generate and store the outreach email for a company.

    A failed generation stores the "No summary available." sentinel.

    Raises:
        CompanyNotFound: If the company does not exist
    """
    report = BatchReport()
    company = store.get_company(company_id)

    digest = summarize_samples(company.scraped_data or [])
    logger.debug({"message": "Digest", "company_id": company_id, "digest": digest})

    email = await generator.write_email(company, digest)
    if email == NO_SUMMARY:
        report.record("email", str(company_id), UpstreamError("email generation failed"))

    store.update_company(company_id, {"email": email})
    logger.info(
        {
            "message": "Stored generated email",
            "company_id": company_id,
            "degraded_items": report.count(),
        }
    )
    return report
