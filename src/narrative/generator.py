"""
Narrative Generator.

Owns the prompt templates and turns pipeline data into prose through a
CompletionService. Email and commit summaries degrade to a sentinel string when
the service fails; technology inference raises and leaves the fallback to the
caller.
"""

from typing import List, Optional

from config import logger
from errors import PipelineError
from analyzers.models import (
    CompanyProfile,
    NO_DIFF,
    NO_MESSAGE,
    NO_SUMMARY,
    SUMMARY_NOT_AVAILABLE,
)
from narrative.completion import CompletionService

MANAGER_PLACEHOLDER = "[Manager Name]"

EMAIL_PROMPT = """
You are a friendly email copywriter who translates technical commit diffs and code metrics into clear, actionable insights for nontechnical managers.

Write a concise email that tells a short story. For example, your email might say:

"I noticed that last week your top repository, [Repo Name], received important updates, especially in areas like authentication and UI improvements. This indicates that your team is making significant progress.

Key insights:
- [Author 1]'s commits added impressive improvements (averaging +[avgAdditions] lines and -[avgDeletions] lines per commit).
- [Author 2] contributed meaningful fixes that enhance stability.
- [Author 3] made critical updates that boost overall quality.

These automated insights help managers quickly understand technical progress. Check out odem.ai and let's schedule a call to see if our AI Manager Assistant can benefit your company."

Now, fill in the following:
- Company Name: {company_name}
- Manager Name: {manager_name}
- GitHub Data Summary:
{digest}

Generate a complete email (just the body, no subject) that replaces all placeholders with the appropriate information, provides clear and engaging insights, and ends with a call to action.
"""

MESSAGE_SUMMARY_PROMPT = (
    "Explain the following commit message in a few words (less than 20 words) "
    "for a non-technical person. Include the fully summarized message, not just "
    "the first few words. Also don't include any filler words:\n\n"
    '"{message}"\n\nSummary:'
)

DIFF_SUMMARY_PROMPT = (
    "Summarize the following commit diff in simple, nontechnical language "
    "suitable for a manager, highlighting the key improvements or changes:"
    "\n\n{diff}\n\nSummary:"
)

TECHNOLOGY_PROMPT = (
    "Based on the following GitHub bio and repository information, list the "
    "technologies this person appears proficient in. Return your answer as a "
    "comma-separated list.\n\nGitHub Bio: {bio}\n"
    "Contributor Repository Info: {repo_info}\n\nTechnologies:"
)


def parse_technologies(response: str) -> List[str]:
    """Split a comma-separated answer, dropping blanks and repeats."""
    technologies: List[str] = []
    for entry in response.split(","):
        entry = entry.strip()
        if entry and entry not in technologies:
            technologies.append(entry)
    return technologies


class NarrativeGenerator:
    """
    Prompt-templated text generation for the outreach pipeline.

    Attributes:
        service (CompletionService): Text completion backend
        max_diff_tokens (int): Token budget for a diff submitted for summary
    """

    def __init__(self, service: CompletionService, max_diff_tokens: int = 6000):
        self.service = service
        self.max_diff_tokens = max_diff_tokens

    def build_email_prompt(self, company: CompanyProfile, digest: str) -> str:
        return EMAIL_PROMPT.format(
            company_name=company.name,
            manager_name=company.manager_name or MANAGER_PLACEHOLDER,
            digest=digest,
        )

    async def write_email(self, company: CompanyProfile, digest: str) -> str:
        """
        Generate the outreach email body for a company.

        Returns:
            str: Email text, or "No summary available." if generation fails
        """
        try:
            return await self.service.complete(self.build_email_prompt(company, digest))
        except PipelineError as e:
            logger.error(
                {
                    "message": "Error generating email",
                    "company_id": company.id,
                    "error": str(e),
                }
            )
            return NO_SUMMARY

    async def summarize_commit_message(self, message: Optional[str]) -> str:
        if not message:
            return NO_MESSAGE
        try:
            return await self.service.complete(
                MESSAGE_SUMMARY_PROMPT.format(message=message),
                max_tokens=100,
                temperature=0.5,
            )
        except PipelineError as e:
            logger.error({"message": "Error summarizing commit message", "error": str(e)})
            return NO_SUMMARY

    async def summarize_commit_diff(self, diff: Optional[str]) -> str:
        if not diff:
            return NO_DIFF
        try:
            excerpt = self.service.truncate(diff, self.max_diff_tokens)
            return await self.service.complete(DIFF_SUMMARY_PROMPT.format(diff=excerpt))
        except PipelineError as e:
            logger.error({"message": "Error summarizing diff", "error": str(e)})
            return SUMMARY_NOT_AVAILABLE

    async def infer_technologies(self, bio: str, repo_info: str) -> List[str]:
        """
        Ask the model which technologies a person is proficient in.

        Raises:
            UpstreamError: If the completion call fails
            ParseError: If the response is empty
        """
        response = await self.service.complete(
            TECHNOLOGY_PROMPT.format(bio=bio, repo_info=repo_info),
            max_tokens=50,
            temperature=0.5,
        )
        return parse_technologies(response)
