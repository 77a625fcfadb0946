# app/services/aggregation_service.py
"""
Combines a manager's team reports into one upward-facing narrative
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence
import logging
import math
import re

from app.schemas.aggregation import AggregationResult, ReportingRate
from app.schemas.report import Report
from app.schemas.user import User, UserRole

logger = logging.getLogger(__name__)

WIN_KEYWORDS = ['completed', 'finished', 'launched', 'deployed', 'delivered', 'achieved']
RISK_KEYWORDS = ['blocked', 'issue', 'problem', 'delayed', 'stuck']
BLOCKER_KEYWORDS = ['blocked', 'issue', 'problem']
WIN_MARKER = '✅'
RISK_MARKER = '⚠️'
MAX_HIGHLIGHTS = 5
SENTENCE_SPLIT = re.compile(r'[.!?]+')
DETAILED_REPORTS_HEADER = '## Detailed Team Reports:'


class AggregationError(Exception):
    """Raised when team reports cannot be aggregated"""


def round_half_up(value: float) -> int:
    """Nearest integer with halves rounded up (2.5 -> 3)"""
    return int(math.floor(value + 0.5))


def calculate_reporting_rate(reported: int, total: int) -> int:
    """Percentage of the team that reported, rounded half-up; 0 for an empty team"""
    if total <= 0:
        return 0
    return round_half_up(100 * reported / total)


def format_report_date(date: str) -> str:
    try:
        parsed = datetime.strptime(date, "%Y-%m-%d")
    except (TypeError, ValueError):
        return date
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def extract_key_highlights(reports: Sequence[Report]) -> List[str]:
    """First matching sentence per keyword hit, wins before risks, deduplicated, at most 5"""
    highlights = []

    for report in reports:
        content = report.content.lower()
        sentences = SENTENCE_SPLIT.split(report.content)

        for keywords, marker in ((WIN_KEYWORDS, WIN_MARKER), (RISK_KEYWORDS, RISK_MARKER)):
            for word in keywords:
                if word not in content:
                    continue
                sentence = next((s for s in sentences if word in s.lower()), None)
                if sentence and sentence.strip():
                    highlights.append(f"{marker} {sentence.strip()}")

    return list(dict.fromkeys(highlights))[:MAX_HIGHLIGHTS]


class ReportAggregationService:
    """Aggregates team reports, optionally delegating the narrative to a summarizer"""

    def __init__(self, summarizer=None):
        self.summarizer = summarizer

    @staticmethod
    def _members_by_id(team_members: Sequence[User]) -> Dict[str, User]:
        return {member.id: member for member in team_members}

    @staticmethod
    def _reporting_rate(reports: Sequence[Report], team_members: Sequence[User]) -> ReportingRate:
        return ReportingRate(
            reported=len(reports),
            total=len(team_members),
            percentage=calculate_reporting_rate(len(reports), len(team_members)),
        )

    def _author_label(self, report: Report, members: Dict[str, User]) -> str:
        author = members.get(report.user_id)
        if author is None:
            return "Unknown (Unknown)"
        return f"{author.name} ({author.role.value})"

    def _detailed_reports(self, reports: Sequence[Report], team_members: Sequence[User]) -> str:
        members = self._members_by_id(team_members)
        return "\n\n---\n\n".join(
            f"**{self._author_label(report, members)}**:\n{report.content}" for report in reports
        )

    def generate_overview_text(self, reporting_rate: int) -> str:
        if reporting_rate >= 80:
            return 'Team is actively engaged with strong communication and progress across multiple initiatives.'
        if reporting_rate >= 60:
            return 'Good team engagement with most members providing regular updates on their work.'
        if reporting_rate >= 40:
            return 'Moderate team reporting with some members actively communicating progress.'
        return 'Limited team reporting this period. Follow-up with team members may be needed.'

    def generate_team_status(self, reports: Sequence[Report]) -> str:
        total_words = sum(len(report.content.split(' ')) for report in reports)
        avg_words = int(math.floor(total_words / max(len(reports), 1) + 0.5))

        status_elements = [
            'Multiple projects and initiatives in progress',
            'Regular communication and updates being provided',
            f'Average report depth: {avg_words} words',
        ]

        if any(word in report.content.lower() for report in reports for word in BLOCKER_KEYWORDS):
            status_elements.append('Some challenges or blockers identified - requiring attention')
        else:
            status_elements.append('No significant blockers or issues reported')

        return '. '.join(status_elements)

    def generate_executive_summary(self, reports: Sequence[Report], team_members: Sequence[User],
                                   reporting_rate: int, date: str) -> str:
        return f"""## Team Summary for {format_report_date(date)}

**Reporting Rate**: {len(reports)}/{len(team_members)} team members ({reporting_rate}%)

**Overview**: {self.generate_overview_text(reporting_rate)}

**Team Status**: {self.generate_team_status(reports)}

**Manager Notes**: This aggregated report combines insights from {len(reports)} team member reports for effective upward communication."""

    def _local_aggregation(self, reports: Sequence[Report], team_members: Sequence[User],
                           date: str) -> Dict[str, object]:
        reporting_rate = calculate_reporting_rate(len(reports), len(team_members))
        summary = self.generate_executive_summary(reports, team_members, reporting_rate, date)
        content = f"{summary}\n\n{DETAILED_REPORTS_HEADER}\n\n{self._detailed_reports(reports, team_members)}"
        return {
            "summary": summary,
            "content": content,
            "highlights": extract_key_highlights(reports),
        }

    def aggregate_reports(self, reports: Sequence[Report], team_members: Sequence[User],
                          manager_role: UserRole, date: str) -> AggregationResult:
        """Deterministic local aggregation"""
        try:
            result = self._local_aggregation(reports, team_members, date)
        except Exception as e:
            logger.error(f"Error aggregating reports for {manager_role} on {date}: {e}")
            raise AggregationError('Failed to aggregate team reports') from e

        return AggregationResult(
            summary=result["summary"],
            aggregated_content=result["content"],
            key_highlights=result["highlights"],
            reporting_rate=self._reporting_rate(reports, team_members),
        )

    async def aggregate_reports_with_ai(self, reports: Sequence[Report], team_members: Sequence[User],
                                        manager_role: UserRole, date: str) -> AggregationResult:
        """Let the summarizer write the narrative; any failure falls back to the local formatter"""
        if self.summarizer is None or not reports:
            return self.aggregate_reports(reports, team_members, manager_role, date)

        members = self._members_by_id(team_members)
        report_texts = [f"{self._author_label(r, members)}: {r.content}" for r in reports]
        role = UserRole.parse(manager_role)
        level = role.value.lower() if role else str(manager_role).lower()
        context = f"{level} level team update for {date}"

        try:
            summary = await self.summarizer.generate_aggregate_summary(report_texts, context)
            if not isinstance(summary, str) or not summary.strip():
                raise ValueError("summarizer returned an empty summary")
        except Exception as e:
            logger.warning(f"AI aggregation failed, falling back to local formatter: {e}")
            return self.aggregate_reports(reports, team_members, manager_role, date)

        summary = summary.strip()
        return AggregationResult(
            summary=summary,
            aggregated_content=f"{summary}\n\n{DETAILED_REPORTS_HEADER}\n\n{self._detailed_reports(reports, team_members)}",
            key_highlights=extract_key_highlights(reports),
            reporting_rate=self._reporting_rate(reports, team_members),
        )

    def format_for_management_level(self, content: str, from_role: UserRole, to_role: UserRole) -> str:
        """Trim detail when a manager's report skips levels on the way up"""
        from_role, to_role = UserRole.parse(from_role), UserRole.parse(to_role)

        if to_role == UserRole.CTO and from_role == UserRole.MANAGER:
            return self.create_executive_summary(content)
        if to_role == UserRole.VP and from_role == UserRole.MANAGER:
            return self.create_mid_level_summary(content)
        return content

    @staticmethod
    def create_executive_summary(content: str) -> str:
        match = re.search(r'## Team Summary[^#]*', content)
        return match.group(0) if match else content[:500] + '...'

    @staticmethod
    def create_mid_level_summary(content: str) -> str:
        lines = content.split('\n')
        for index, line in enumerate(lines):
            if '## Detailed Team Reports' in line:
                return '\n'.join(lines[:index])
        return content
