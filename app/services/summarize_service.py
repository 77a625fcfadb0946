# app/services/summarize_service.py
"""
Report summarization prompts and OpenAI calls
"""

from typing import List, Optional
import logging

from app.config.settings import settings
from app.services.openai_client import first_choice_text

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = 'Unable to generate summary'


def create_individual_summary_prompt(report: str, max_length: int) -> str:
    return f"""Please summarize the following team member report in approximately {max_length} characters or less. Focus on:
- Key accomplishments and progress
- Current challenges or blockers
- Next steps or priorities

Report:
{report}

Summary:"""


def _numbered_reports(reports: List[str]) -> str:
    return "\n\n".join(f"Report {index + 1}: {report}" for index, report in enumerate(reports))


def create_aggregate_summary_prompt(reports: List[str], context: Optional[str], max_length: int) -> str:
    context_section = f"\nContext: {context}\n" if context else ""

    return f"""Please create an aggregate summary of the following team reports in approximately {max_length} characters or less. {context_section}

Focus on:
- Overall team progress and achievements
- Common themes and patterns
- Key challenges across the team
- Priority items that need attention

Reports:
{_numbered_reports(reports)}

Aggregate Summary:"""


def create_executive_summary_prompt(reports: List[str], context: Optional[str], max_length: int) -> str:
    context_section = f"\nContext: {context}\n" if context else ""

    return f"""Please create an executive summary of the following team reports for leadership review in approximately {max_length} characters or less. {context_section}

Focus on:
- High-level business impact and outcomes
- Critical risks or blockers requiring leadership attention
- Strategic wins and progress on key objectives
- Resource needs or recommendations

Present this as a concise, actionable summary suitable for executive decision-making.

Reports:
{_numbered_reports(reports)}

Executive Summary:"""


def filter_valid_reports(reports) -> List[str]:
    """Keep only non-blank string reports"""
    return [r for r in reports or [] if isinstance(r, str) and r.strip()]


class SummarizationService:
    """Generates individual, aggregate and executive summaries"""

    def __init__(self, client):
        self.client = client
        self.model = settings.OPENAI['chat_model']

    async def _complete(self, prompt: str, max_tokens: int, temperature: float) -> str:
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return first_choice_text(completion, FALLBACK_SUMMARY)

    async def generate_individual_summaries(self, reports: List[str], max_length: int = 500) -> List[str]:
        # One request per report, in input order
        summaries = []
        for report in reports:
            prompt = create_individual_summary_prompt(report, max_length)
            summaries.append(await self._complete(prompt, min(max_length * 2, 1000), 0.3))
        return summaries

    async def generate_aggregate_summary(self, reports: List[str], context: Optional[str] = None,
                                         max_length: int = 500) -> str:
        prompt = create_aggregate_summary_prompt(reports, context, max_length)
        return await self._complete(prompt, min(max_length * 3, 1500), 0.3)

    async def generate_executive_summary(self, reports: List[str], context: Optional[str] = None,
                                         max_length: int = 500) -> str:
        prompt = create_executive_summary_prompt(reports, context, max_length)
        # Lower temperature for leadership-facing output
        return await self._complete(prompt, min(max_length * 3, 1500), 0.2)

    async def summarize(self, reports: List[str], context: Optional[str] = None,
                        summary_type: str = "aggregate", max_length: int = 500) -> dict:
        """Dispatch on summary type; returns summary and, for 'individual', the per-report list"""
        individual_summaries = None

        if summary_type == "individual":
            individual_summaries = await self.generate_individual_summaries(reports, max_length)
            summary = "\n\n---\n\n".join(individual_summaries)
        elif summary_type == "executive":
            summary = await self.generate_executive_summary(reports, context, max_length)
        else:
            summary = await self.generate_aggregate_summary(reports, context, max_length)

        logger.info(f"Generated {summary_type} summary for {len(reports)} reports ({len(summary)} chars)")
        return {"summary": summary, "individual_summaries": individual_summaries}
