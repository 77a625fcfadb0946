# app/routers/reports.py
from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Callable, List, Optional
import logging

from app.config.settings import settings
from app.schemas.aggregation import AggregationRequest, AggregationResult, ManagementLevelFormatRequest
from app.schemas.report import Report, ReportCreate, ReportUpdate, StorageStats, StoredReport
from app.schemas.user import UserRole
from app.services.aggregation_service import AggregationError, ReportAggregationService
from app.services.cache import response_cache
from app.services.report_storage import (
    NoRoleSelectedError,
    ReportAuthorizationError,
    ReportNotFoundError,
    ReportStorageError,
    ReportStorageService,
)
from app.services.summarize_service import SummarizationService
from app.utils.hierarchy import HierarchyManager
from app.utils.session import get_hierarchy, get_openai_client_factory, get_report_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


def storage_http_error(error: ReportStorageError) -> HTTPException:
    """Map report store errors onto HTTP status codes"""
    if isinstance(error, NoRoleSelectedError):
        code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(error, ReportAuthorizationError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(error, ReportNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=str(error))


def forget_chat_answers() -> None:
    """Cached chat answers may cite reports that just changed"""
    removed = response_cache.delete_prefix("chat::")
    if removed:
        logger.info(f"Dropped {removed} cached chat answers after a report change")


@router.get("/visible", response_model=List[Report])
def get_visible_reports(
    role: str = Query(..., description="Viewer role: CTO, VP, Director, Manager, Engineer"),
    user_id: Optional[str] = Query(None),
    date: Optional[str] = Query(None, description="YYYY-MM-DD; omit for all dates"),
    hierarchy: HierarchyManager = Depends(get_hierarchy)
):
    """Reports the given role/user may read"""
    return hierarchy.resolve_reports(role, user_id, date)


@router.post("/aggregate", response_model=AggregationResult)
async def aggregate_team_reports(
    request: AggregationRequest,
    hierarchy: HierarchyManager = Depends(get_hierarchy),
    client_factory: Callable = Depends(get_openai_client_factory)
):
    """Roll a manager's direct reports for one day into a single upward report"""
    manager = hierarchy.get_user(request.manager_id)
    if not manager:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Manager not found"
        )

    team_members = hierarchy.get_direct_reports(manager.id)
    reports = hierarchy.get_team_reports(manager.id, request.date)

    summarizer = None
    if request.use_ai and settings.is_openai_configured():
        summarizer = SummarizationService(client_factory())

    service = ReportAggregationService(summarizer)
    try:
        if summarizer is not None:
            return await service.aggregate_reports_with_ai(reports, team_members, manager.role, request.date)
        return service.aggregate_reports(reports, team_members, manager.role, request.date)
    except AggregationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.post("/format")
def format_for_management_level(request: ManagementLevelFormatRequest):
    """Condense aggregated content for the level it is sent to"""
    from_role = UserRole.parse(request.from_role)
    to_role = UserRole.parse(request.to_role)
    if from_role is None or to_role is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from_role and to_role must be valid roles"
        )

    content = ReportAggregationService().format_for_management_level(request.content, from_role, to_role)
    return {"success": True, "content": content}


# Session-scoped report store for the selected demo role

@router.get("/mine", response_model=List[StoredReport], response_model_exclude_none=True)
def list_my_reports(
    date: Optional[str] = Query(None, description="YYYY-MM-DD; omit for all dates"),
    storage: ReportStorageService = Depends(get_report_storage)
):
    if date:
        return storage.get_reports_by_date(date)
    return storage.get_all_reports_for_current_user()


@router.post("/mine", response_model=StoredReport, response_model_exclude_none=True,
             status_code=status.HTTP_201_CREATED)
def create_my_report(
    report: ReportCreate,
    storage: ReportStorageService = Depends(get_report_storage)
):
    try:
        created = storage.create_report(report)
    except ReportStorageError as e:
        raise storage_http_error(e)

    forget_chat_answers()
    return created


@router.get("/mine/stats", response_model=StorageStats)
def get_my_storage_stats(storage: ReportStorageService = Depends(get_report_storage)):
    return storage.get_storage_stats()


@router.delete("/mine")
def clear_my_storage(storage: ReportStorageService = Depends(get_report_storage)):
    """Remove every stored report and audio reference"""
    removed = storage.clear_all_data()
    forget_chat_answers()
    return {"success": True, "removed_keys": removed}


@router.get("/mine/{report_id}", response_model=StoredReport, response_model_exclude_none=True)
def get_my_report(
    report_id: str,
    storage: ReportStorageService = Depends(get_report_storage)
):
    report = storage.get_report_by_id(report_id)
    if not report:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Report not found"
        )

    if report.user_id != storage.get_current_user()["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view this report"
        )
    return report


@router.put("/mine/{report_id}", response_model=StoredReport, response_model_exclude_none=True)
def update_my_report(
    report_id: str,
    updates: ReportUpdate,
    storage: ReportStorageService = Depends(get_report_storage)
):
    try:
        updated = storage.update_report(report_id, updates)
    except ReportStorageError as e:
        raise storage_http_error(e)

    forget_chat_answers()
    return updated


@router.delete("/mine/{report_id}")
def delete_my_report(
    report_id: str,
    storage: ReportStorageService = Depends(get_report_storage)
):
    try:
        deleted = storage.delete_report(report_id)
    except ReportStorageError as e:
        raise storage_http_error(e)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Report not found"
        )

    forget_chat_answers()
    return {"success": True, "message": "Report deleted successfully"}
