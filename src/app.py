"""
Main Application Entry Point.

Command line entry points for the three pipeline stages and the orchestrator:

- ``scrape <company_id>``: sample the company's GitHub organization into ``scraped_data``
- ``email <company_id>``: generate the outreach email from ``scraped_data``
- ``nice <company_id>``: build ``nice_data`` with commit summaries and people
- ``run <company_id>``: all three in order, stopping at the first failing stage
- ``seed``: insert the seed company records

Each stage checks its credentials before any network activity and exits
non-zero when they are missing, when the company or its organization is unknown,
or when its website does not name an organization. Item-level degradation does
not change the exit status.
"""

import argparse
import asyncio
import sys
from typing import Awaitable, Callable, Dict, List, Optional

from openai import AsyncOpenAI
import tiktoken

from config import Settings, settings as default_settings, logger
from errors import ConfigurationError, NotFoundError, ParseError
from analyzers.commits import CommitAggregator
from analyzers.contributors import ContributorEnricher
from analyzers.models import BatchReport
from analyzers.sampler import OrganizationSampler
from miners.base import ActivityMiner
from miners.github_miner import GitHubMiner
from narrative.completion import OpenAICompletionService
from narrative.generator import NarrativeGenerator
from stages.enrich import run_enrich_stage
from stages.fetch import run_fetch_stage
from stages.outreach import run_outreach_stage
from storage.company_store import CompanyStore, JsonCompanyStore
from storage.seed import seed_companies

STAGE_ORDER = ("scrape", "email", "nice")

# GitHub access falls back to anonymous requests without a token
STAGE_CREDENTIALS = {
    "scrape": (),
    "email": ("openai_api_key",),
    "nice": ("openai_api_key",),
}


def build_miner(settings: Settings) -> ActivityMiner:
    token = settings.github_token.get_secret_value() if settings.github_token else ""
    return GitHubMiner(token or None)


def build_generator(settings: Settings) -> NarrativeGenerator:
    service = OpenAICompletionService(
        AsyncOpenAI(api_key=settings.openai_api_key.get_secret_value()),
        tiktoken.get_encoding(settings.openai_encoding_name),
        settings.openai_llm_model,
        settings.openai_max_requests_per_minute,
        settings.openai_max_tokens_per_minute,
        settings.openai_period,
        settings.openai_request_timeout,
    )
    return NarrativeGenerator(service, settings.max_diff_tokens)


def build_sampler(settings: Settings, miner: ActivityMiner) -> OrganizationSampler:
    return OrganizationSampler(
        miner,
        CommitAggregator(
            miner, settings.commit_sample_size, settings.commit_fetch_concurrency
        ),
        ContributorEnricher(
            miner,
            contributor_limit=settings.contributor_sample_size,
            concurrency=settings.commit_fetch_concurrency,
        ),
        repository_limit=settings.repository_sample_size,
        page_size=settings.repository_page_size,
        metrics_window=settings.metrics_window,
    )


async def run_scrape(company_id: int, settings: Settings, store: CompanyStore) -> BatchReport:
    sampler = build_sampler(settings, build_miner(settings))
    return await run_fetch_stage(company_id, store, sampler)


async def run_email(company_id: int, settings: Settings, store: CompanyStore) -> BatchReport:
    return await run_outreach_stage(company_id, store, build_generator(settings))


async def run_nice(company_id: int, settings: Settings, store: CompanyStore) -> BatchReport:
    generator = build_generator(settings)
    enricher = ContributorEnricher(
        build_miner(settings),
        generator,
        contributor_limit=settings.contributor_sample_size,
        concurrency=settings.commit_fetch_concurrency,
    )
    return await run_enrich_stage(
        company_id, store, generator, enricher, settings.commit_fetch_concurrency
    )


STAGES: Dict[str, Callable[[int, Settings, CompanyStore], Awaitable[BatchReport]]] = {
    "scrape": run_scrape,
    "email": run_email,
    "nice": run_nice,
}


async def execute_stage(
    name: str,
    company_id: int,
    settings: Settings,
    store: Optional[CompanyStore] = None,
) -> int:
    """
    Run one stage and map its outcome to an exit status.

    Returns:
        int: 0 on success (even with degraded items), 1 otherwise
    """
    try:
        settings.require(*STAGE_CREDENTIALS[name])
    except ConfigurationError as e:
        logger.critical({"message": str(e), "stage": name, "company_id": company_id})
        print(f"Error: {e}", file=sys.stderr)
        return 1

    store = store or JsonCompanyStore(settings.data_dir)
    logger.info({"message": "Starting stage", "stage": name, "company_id": company_id})
    try:
        report = await STAGES[name](company_id, settings, store)
    except (NotFoundError, ParseError) as e:
        logger.error(
            {"message": "Stage aborted", "stage": name, "company_id": company_id, "error": str(e)}
        )
        return 1
    except Exception as e:
        logger.exception(
            {"message": "Unexpected error", "stage": name, "company_id": company_id, "error": str(e)}
        )
        return 1

    logger.info(
        {
            "message": "Stage finished",
            "stage": name,
            "company_id": company_id,
            "degraded_items": report.count(),
            "failures": [failure.model_dump() for failure in report.failures],
        }
    )
    return 0


async def run_pipeline(
    company_id: int, settings: Settings, store: Optional[CompanyStore] = None
) -> int:
    """Run every stage in order; stop at the first non-zero exit status."""
    for name in STAGE_ORDER:
        logger.info({"message": f"Running {name}", "company_id": company_id})
        code = await execute_stage(name, company_id, settings, store)
        if code != 0:
            logger.error(
                {"message": "Pipeline aborted", "stage": name, "company_id": company_id}
            )
            return code
    logger.info({"message": "All stages executed successfully", "company_id": company_id})
    return 0


def seed(settings: Settings, store: Optional[CompanyStore] = None) -> int:
    store = store or JsonCompanyStore(settings.data_dir)
    store.insert_companies(seed_companies())
    return 0


def _add_company_id(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("company_id", type=int, help="Identifier of the company record.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orgpulse",
        description="Summarize an organization's GitHub activity into an outreach email.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("scrape", "Sample the company's GitHub organization into scraped_data."),
        ("email", "Generate the outreach email from scraped_data."),
        ("nice", "Build nice_data with commit summaries and people."),
        ("run", "Run scrape, email and nice in order."),
    ):
        _add_company_id(subparsers.add_parser(name, help=help_text))

    subparsers.add_parser("seed", help="Insert the seed company records.")
    return parser


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or default_settings

    if args.command == "seed":
        return seed(settings)
    if args.command == "run":
        return asyncio.run(run_pipeline(args.company_id, settings))
    return asyncio.run(execute_stage(args.command, args.company_id, settings))


def _stage_main(name: str, argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog=f"orgpulse-{name}")
    _add_company_id(parser)
    args = parser.parse_args(argv)
    if name == "run":
        return asyncio.run(run_pipeline(args.company_id, default_settings))
    return asyncio.run(execute_stage(name, args.company_id, default_settings))


def scrape_main() -> None:
    sys.exit(_stage_main("scrape"))


def email_main() -> None:
    sys.exit(_stage_main("email"))


def nice_main() -> None:
    sys.exit(_stage_main("nice"))


def run_main() -> None:
    sys.exit(_stage_main("run"))


if __name__ == "__main__":
    sys.exit(main())
