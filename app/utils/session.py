# app/utils/session.py
# Request-scoped dependencies: demo role and user, organization data, report store, OpenAI client
from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.data.organization import OrganizationSnapshot, default_snapshot
from app.database import get_db
from app.schemas.user import UserRole
from app.services.openai_client import create_openai_client
from app.services.report_storage import ReportStorageService
from app.services.storage_backends import DatabaseStore, KeyValueStore
from app.utils.hierarchy import HierarchyManager

DEMO_ROLE_HEADER = "X-Demo-Role"
DEMO_USER_HEADER = "X-Demo-User"


@lru_cache()
def get_snapshot() -> OrganizationSnapshot:
    return default_snapshot()


def get_report_store(db: Session = Depends(get_db)) -> KeyValueStore:
    return DatabaseStore(db)


def get_hierarchy(
    snapshot: OrganizationSnapshot = Depends(get_snapshot),
    store: KeyValueStore = Depends(get_report_store)
) -> HierarchyManager:
    """Demo organization plus every report saved through the report store"""
    stored = ReportStorageService(store, None).get_all_reports()
    return HierarchyManager(snapshot.with_reports(stored))


def get_demo_role(x_demo_role: Optional[str] = Header(None, alias=DEMO_ROLE_HEADER)) -> Optional[UserRole]:
    """Role picked on the role-select screen; there is no login"""
    return UserRole.parse(x_demo_role)


def require_demo_role(role: Optional[UserRole] = Depends(get_demo_role)) -> UserRole:
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No user role selected",
        )
    return role


def get_demo_user_id(
    x_demo_user: Optional[str] = Header(None, alias=DEMO_USER_HEADER),
    role: UserRole = Depends(require_demo_role),
    snapshot: OrganizationSnapshot = Depends(get_snapshot)
) -> Optional[str]:
    """Organization member the session acts as, if one was picked"""
    if not x_demo_user:
        return None

    user = next((u for u in snapshot.users if u.id == x_demo_user), None)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unknown demo user",
        )

    if user.role != role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Demo user does not hold the selected role",
        )
    return user.id


def get_report_storage(
    store: KeyValueStore = Depends(get_report_store),
    role: UserRole = Depends(require_demo_role),
    user_id: Optional[str] = Depends(get_demo_user_id)
) -> ReportStorageService:
    return ReportStorageService(store, role, user_id)


def get_openai_client_factory() -> Callable:
    """Returns a callable building the client, so a missing key surfaces inside the handler"""
    return create_openai_client
