# app/routers/organization.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional

from app.schemas.project import Project
from app.schemas.user import AccessScope, OrganizationNode, User, UserRole
from app.utils.hierarchy import HierarchyManager
from app.utils.session import get_hierarchy

router = APIRouter(prefix="/organization", tags=["Organization"])


# 1. All users, optionally by role
@router.get("/users", response_model=List[User])
def get_users(
    role: Optional[str] = Query(None),
    hierarchy: HierarchyManager = Depends(get_hierarchy),
):
    users = list(hierarchy.snapshot.users)
    if role:
        parsed = UserRole.parse(role)
        users = [u for u in users if u.role == parsed]
    return users


# 2. One user with manager and direct reports
@router.get("/users/{user_id}")
def get_user(
    user_id: str,
    hierarchy: HierarchyManager = Depends(get_hierarchy),
):
    user = hierarchy.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return {
        "user": user,
        "manager": hierarchy.get_manager(user_id),
        "direct_reports": hierarchy.get_direct_reports(user_id),
        "level": hierarchy.get_user_level(user_id),
    }


# 3. Tree view for a role
@router.get("/tree", response_model=List[OrganizationNode])
def get_organization_tree(
    role: str = Query(...),
    user_id: Optional[str] = Query(None),
    date: Optional[str] = Query(None),
    hierarchy: HierarchyManager = Depends(get_hierarchy),
):
    return hierarchy.build_organization_tree(role, user_id, date)


# 4. What a role can see
@router.get("/scope", response_model=AccessScope)
def get_access_scope(
    role: str = Query(...),
    user_id: Optional[str] = Query(None),
    hierarchy: HierarchyManager = Depends(get_hierarchy),
):
    return hierarchy.get_access_scope_info(role, user_id)


# 5. Projects
@router.get("/projects", response_model=List[Project])
def get_projects(
    team_id: Optional[str] = Query(None),
    hierarchy: HierarchyManager = Depends(get_hierarchy),
):
    projects = list(hierarchy.snapshot.projects)
    if team_id:
        projects = [p for p in projects if p.team_id == team_id]
    return projects


# 6. Nested team structure under a user
@router.get("/users/{user_id}/team")
def get_user_team(
    user_id: str,
    hierarchy: HierarchyManager = Depends(get_hierarchy),
):
    if not hierarchy.get_user(user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return hierarchy.get_team_hierarchy(user_id)
