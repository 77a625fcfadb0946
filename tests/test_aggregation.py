"""
Team aggregation tests
"""

from unittest.mock import AsyncMock

import pytest

from app.schemas.report import Report
from app.schemas.user import User, UserRole
from app.services.aggregation_service import (
    DETAILED_REPORTS_HEADER,
    ReportAggregationService,
    calculate_reporting_rate,
    extract_key_highlights,
    format_report_date,
)

DAY = "2025-09-11"


def _report(report_id, user_id, content):
    return Report(
        id=report_id, user_id=user_id, date=DAY, content=content,
        created_at=f"{DAY}T09:00:00Z", updated_at=f"{DAY}T09:00:00Z",
    )


@pytest.fixture
def team():
    return [
        User(id="eng-a", name="Ana Lopez", role=UserRole.ENGINEER, manager_id="mgr-x"),
        User(id="eng-b", name="Ben Ito", role=UserRole.ENGINEER, manager_id="mgr-x"),
        User(id="eng-c", name="Cleo Ray", role=UserRole.ENGINEER, manager_id="mgr-x"),
        User(id="eng-d", name="Dev Shah", role=UserRole.ENGINEER, manager_id="mgr-x"),
    ]


@pytest.fixture
def team_reports():
    return [
        _report("r1", "eng-a", "Finished the billing export. Waiting on review."),
        _report("r2", "eng-b", "Deployed the new cache layer to staging."),
        _report("r3", "eng-c", "Blocked on database credentials for prod."),
    ]


def test_reporting_rate_rounds_half_up():
    assert calculate_reporting_rate(3, 4) == 75
    assert calculate_reporting_rate(1, 3) == 33
    assert calculate_reporting_rate(2, 3) == 67
    assert calculate_reporting_rate(1, 8) == 13


def test_reporting_rate_for_empty_team_is_zero():
    assert calculate_reporting_rate(0, 0) == 0
    assert calculate_reporting_rate(2, 0) == 0


def test_format_report_date():
    assert format_report_date("2025-09-01") == "9/1/2025"
    assert format_report_date("not a date") == "not a date"


def test_highlights_mark_wins_and_risks(team_reports):
    highlights = extract_key_highlights(team_reports)
    assert highlights == [
        "✅ Finished the billing export",
        "✅ Deployed the new cache layer to staging",
        "⚠️ Blocked on database credentials for prod",
    ]


def test_highlights_are_deduplicated_and_capped():
    reports = [_report(f"r{i}", "eng-a", f"Completed task {i}. Task {i} delayed elsewhere.") for i in range(4)]
    reports.append(_report("dup", "eng-b", "Completed task 0."))
    highlights = extract_key_highlights(reports)

    assert len(highlights) == 5
    assert len(set(highlights)) == 5
    assert highlights[0] == "✅ Completed task 0"
    assert highlights[1] == "⚠️ Task 0 delayed elsewhere"


def test_no_keywords_no_highlights():
    assert extract_key_highlights([_report("r1", "eng-a", "Paired with design on layouts.")]) == []


def test_aggregate_reports_builds_summary(team, team_reports):
    result = ReportAggregationService().aggregate_reports(team_reports, team, UserRole.MANAGER, DAY)

    assert result.reporting_rate.reported == 3
    assert result.reporting_rate.total == 4
    assert result.reporting_rate.percentage == 75
    assert result.summary.startswith("## Team Summary for 9/11/2025")
    assert "**Reporting Rate**: 3/4 team members (75%)" in result.summary
    assert "Some challenges or blockers identified" in result.summary
    assert DETAILED_REPORTS_HEADER in result.aggregated_content
    assert "**Ana Lopez (Engineer)**:" in result.aggregated_content


def test_overview_text_thresholds():
    service = ReportAggregationService()
    assert service.generate_overview_text(80).startswith("Team is actively engaged")
    assert service.generate_overview_text(60).startswith("Good team engagement")
    assert service.generate_overview_text(40).startswith("Moderate team reporting")
    assert service.generate_overview_text(39).startswith("Limited team reporting")


def test_unknown_author_is_labelled(team):
    stranger = _report("r9", "someone-else", "Launched the beta.")
    result = ReportAggregationService().aggregate_reports([stranger], team, UserRole.MANAGER, DAY)
    assert "**Unknown (Unknown)**:" in result.aggregated_content


@pytest.mark.asyncio
async def test_ai_aggregation_uses_summarizer(team, team_reports):
    summarizer = AsyncMock()
    summarizer.generate_aggregate_summary.return_value = "  Team shipped billing and cache work.  "

    result = await ReportAggregationService(summarizer).aggregate_reports_with_ai(
        team_reports, team, UserRole.MANAGER, DAY
    )

    assert result.summary == "Team shipped billing and cache work."
    assert DETAILED_REPORTS_HEADER in result.aggregated_content
    assert result.key_highlights == extract_key_highlights(team_reports)
    args, _ = summarizer.generate_aggregate_summary.call_args
    assert args[0][0] == "Ana Lopez (Engineer): Finished the billing export. Waiting on review."
    assert args[1] == f"manager level team update for {DAY}"


@pytest.mark.asyncio
async def test_ai_aggregation_falls_back_on_failure(team, team_reports):
    summarizer = AsyncMock()
    summarizer.generate_aggregate_summary.side_effect = RuntimeError("provider down")
    service = ReportAggregationService(summarizer)

    result = await service.aggregate_reports_with_ai(team_reports, team, UserRole.MANAGER, DAY)

    assert result == service.aggregate_reports(team_reports, team, UserRole.MANAGER, DAY)


@pytest.mark.asyncio
async def test_ai_aggregation_falls_back_on_empty_summary(team, team_reports):
    summarizer = AsyncMock()
    summarizer.generate_aggregate_summary.return_value = "   "

    result = await ReportAggregationService(summarizer).aggregate_reports_with_ai(
        team_reports, team, UserRole.MANAGER, DAY
    )
    assert result.summary.startswith("## Team Summary")


@pytest.mark.asyncio
async def test_ai_aggregation_without_summarizer_is_local(team, team_reports):
    result = await ReportAggregationService().aggregate_reports_with_ai(team_reports, team, UserRole.MANAGER, DAY)
    assert result.summary.startswith("## Team Summary")


def test_format_for_cto_keeps_team_summary_only(team, team_reports):
    service = ReportAggregationService()
    content = service.aggregate_reports(team_reports, team, UserRole.MANAGER, DAY).aggregated_content

    executive = service.format_for_management_level(content, UserRole.MANAGER, UserRole.CTO)
    assert executive.startswith("## Team Summary")
    assert DETAILED_REPORTS_HEADER not in executive


def test_format_for_vp_cuts_detailed_reports(team, team_reports):
    service = ReportAggregationService()
    content = service.aggregate_reports(team_reports, team, UserRole.MANAGER, DAY).aggregated_content

    mid_level = service.format_for_management_level(content, UserRole.MANAGER, UserRole.VP)
    assert "## Team Summary" in mid_level
    assert "Detailed Team Reports" not in mid_level


def test_format_other_levels_is_identity():
    service = ReportAggregationService()
    assert service.format_for_management_level("plain", UserRole.DIRECTOR, UserRole.VP) == "plain"


def test_executive_summary_without_header_is_truncated():
    text = "x" * 600
    assert ReportAggregationService.create_executive_summary(text) == "x" * 500 + "..."


def test_highlight_examples_from_status_updates():
    highlights = extract_key_highlights([
        _report("r1", "eng-a", "Completed OAuth integration"),
        _report("r2", "eng-b", "Still blocked on certificates"),
    ])
    assert highlights == ["✅ Completed OAuth integration", "⚠️ Still blocked on certificates"]
