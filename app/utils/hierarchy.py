# app/utils/hierarchy.py
from typing import Dict, FrozenSet, List, Optional, Union
import logging

from app.data.organization import OrganizationSnapshot
from app.schemas.report import Report
from app.schemas.user import OrganizationNode, User, UserRole

logger = logging.getLogger(__name__)

RoleLike = Union[UserRole, str, None]

# Leaders see reports by author role class, not by walking their own subtree.
# Two VPs therefore see the same set; None means everyone.
LEADERSHIP_VISIBLE_ROLES: Dict[UserRole, Optional[FrozenSet[UserRole]]] = {
    UserRole.DIRECTOR: frozenset({UserRole.ENGINEER, UserRole.MANAGER}),
    UserRole.VP: frozenset({UserRole.ENGINEER, UserRole.MANAGER, UserRole.DIRECTOR}),
    UserRole.CTO: None,
}

SCOPE_DESCRIPTIONS = {
    UserRole.CTO: 'Can view reports from the entire organization',
    UserRole.VP: 'Can view Director, Manager and Engineer reports',
    UserRole.DIRECTOR: 'Can view Manager and Engineer reports',
    UserRole.MANAGER: 'Can view reports from direct reports',
    UserRole.ENGINEER: 'Can view only own reports',
}


class HierarchyManager:
    """Organizational hierarchy queries and role-based visibility over a snapshot"""

    def __init__(self, snapshot: OrganizationSnapshot):
        self.snapshot = snapshot
        self._users_by_id = {user.id: user for user in snapshot.users}

    def get_user(self, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        return self._users_by_id.get(user_id)

    def get_direct_reports(self, manager_id: Optional[str]) -> List[User]:
        """Get only direct subordinates for a given user"""
        if not manager_id:
            return []
        return [user for user in self.snapshot.users if user.manager_id == manager_id]

    def get_all_team_members(self, manager_id: str) -> List[User]:
        """Get all subordinates (direct and indirect) for a given user"""
        members = []
        visited = set()

        def collect(supervisor_id: str):
            if supervisor_id in visited:
                return
            visited.add(supervisor_id)

            for subordinate in self.get_direct_reports(supervisor_id):
                members.append(subordinate)
                # Engineers have no reports of their own
                if subordinate.role != UserRole.ENGINEER:
                    collect(subordinate.id)

        collect(manager_id)
        return members

    def get_manager(self, user_id: str) -> Optional[User]:
        user = self.get_user(user_id)
        if not user or not user.manager_id:
            return None
        return self.get_user(user.manager_id)

    def get_supervisory_chain(self, user_id: str) -> List[User]:
        """Get the complete supervisory chain from user to top level"""
        chain = []
        seen = {user_id}
        current = self.get_manager(user_id)

        while current and current.id not in seen:
            chain.append(current)
            seen.add(current.id)
            current = self.get_manager(current.id)

        return chain

    def is_subordinate_of(self, user_id: str, potential_supervisor_id: str) -> bool:
        """Check if user_id is a subordinate (direct or indirect) of potential_supervisor_id"""
        return any(s.id == potential_supervisor_id for s in self.get_supervisory_chain(user_id))

    def get_user_level(self, user_id: str) -> int:
        """Get the hierarchical level of a user (0 = top level)"""
        return len(self.get_supervisory_chain(user_id))

    def get_team_hierarchy(self, user_id: str) -> dict:
        """Get a hierarchical view of the user's team structure"""
        def build_tree(supervisor_id: str) -> dict:
            return {
                "user_id": supervisor_id,
                "subordinates": [build_tree(sub.id) for sub in self.get_direct_reports(supervisor_id)]
            }

        return build_tree(user_id)

    def get_viewable_user_ids_by_role(self, role: RoleLike, user_id: Optional[str] = None) -> Optional[List[str]]:
        """User ids whose reports the role may read; None means unrestricted"""
        parsed = UserRole.parse(role)

        if parsed == UserRole.ENGINEER:
            return [user_id] if user_id else []

        if parsed == UserRole.MANAGER:
            return [u.id for u in self.get_direct_reports(user_id)]

        if parsed in LEADERSHIP_VISIBLE_ROLES:
            allowed_roles = LEADERSHIP_VISIBLE_ROLES[parsed]
            if not user_id or allowed_roles is None:
                return [u.id for u in self.snapshot.users]
            return [u.id for u in self.snapshot.users if u.role in allowed_roles]

        logger.warning(f"Unknown role '{role}' requested report visibility, returning all reports")
        return None

    def resolve_reports(self, role: RoleLike, user_id: Optional[str] = None, date: Optional[str] = None) -> List[Report]:
        """Reports visible to a role/user on a date; never raises, degrades to empty or everything"""
        reports = list(self.snapshot.reports)

        if date:
            reports = [r for r in reports if r.date == date]

        viewable_ids = self.get_viewable_user_ids_by_role(role, user_id)
        if viewable_ids is None:
            return reports

        viewable = set(viewable_ids)
        return [r for r in reports if r.user_id in viewable]

    def get_reports_by_user(self, user_id: str, date: Optional[str] = None) -> List[Report]:
        """A user's reports, newest first"""
        reports = [r for r in self.snapshot.reports if r.user_id == user_id]
        if date:
            reports = [r for r in reports if r.date == date]
        return sorted(reports, key=lambda r: r.created_at, reverse=True)

    def get_team_reports(self, manager_id: str, date: Optional[str] = None) -> List[Report]:
        """Reports from a manager's direct reports, newest first"""
        team_ids = {u.id for u in self.get_direct_reports(manager_id)}
        reports = [r for r in self.snapshot.reports if r.user_id in team_ids]
        if date:
            reports = [r for r in reports if r.date == date]
        return sorted(reports, key=lambda r: r.created_at, reverse=True)

    def build_organization_tree(self, role: RoleLike, user_id: Optional[str] = None,
                                date: Optional[str] = None) -> List[OrganizationNode]:
        """Tree view for the role: whole org for the CTO, own subtree for leaders, self for engineers"""
        parsed = UserRole.parse(role)

        def build_tree(users: List[User], level: int) -> List[OrganizationNode]:
            return [
                OrganizationNode(
                    id=user.id,
                    name=user.name,
                    role=user.role,
                    manager_id=user.manager_id,
                    level=level,
                    children=build_tree(self.get_direct_reports(user.id), level + 1),
                    reports=self.get_reports_by_user(user.id, date),
                )
                for user in users
            ]

        if parsed == UserRole.CTO:
            roots = [u for u in self.snapshot.users if u.manager_id is None]
            return build_tree(roots, 0)

        if parsed in (UserRole.VP, UserRole.DIRECTOR, UserRole.MANAGER):
            leader = self.get_user(user_id)
            if leader is None or leader.role != parsed:
                # Demo sessions without a concrete id view the first leader of that role
                leader = next((u for u in self.snapshot.users if u.role == parsed), None)
            if leader is None:
                return []
            return build_tree(self.get_direct_reports(leader.id), 0)

        if parsed == UserRole.ENGINEER:
            engineer = self.get_user(user_id)
            if engineer is None:
                return []
            return [
                OrganizationNode(
                    id=engineer.id,
                    name=engineer.name,
                    role=engineer.role,
                    manager_id=engineer.manager_id,
                    level=0,
                    reports=self.get_reports_by_user(engineer.id, date),
                )
            ]

        return []

    def get_access_scope_info(self, role: RoleLike, user_id: Optional[str] = None) -> dict:
        """Get information about what the user can access based on their role"""
        parsed = UserRole.parse(role)
        viewable_ids = self.get_viewable_user_ids_by_role(role, user_id)

        if viewable_ids is None:
            viewable_users = list(self.snapshot.users)
        else:
            viewable = set(viewable_ids)
            viewable_users = [u for u in self.snapshot.users if u.id in viewable]

        return {
            "user_role": parsed.value if parsed else str(role),
            "scope_description": SCOPE_DESCRIPTIONS.get(parsed, "Unknown role"),
            "viewable_user_count": len(viewable_users),
            "viewable_users": [
                {
                    "id": u.id,
                    "name": u.name,
                    "role": u.role.value,
                } for u in viewable_users
            ]
        }
