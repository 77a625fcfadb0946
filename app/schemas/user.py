from pydantic import BaseModel, Field
from typing import List, Optional
from enum import Enum

from app.schemas.report import Report


class UserRole(str, Enum):
    CTO = "CTO"
    VP = "VP"
    DIRECTOR = "Director"
    MANAGER = "Manager"
    ENGINEER = "Engineer"

    @classmethod
    def parse(cls, value) -> Optional["UserRole"]:
        """Return the matching role or None for unknown/missing values"""
        if isinstance(value, cls):
            return value
        if not value or not isinstance(value, str):
            return None
        for role in cls:
            if role.value.lower() == value.strip().lower():
                return role
        return None


class User(BaseModel):
    id: str
    name: str
    role: UserRole
    manager_id: Optional[str] = None

    model_config = {
        "frozen": True
    }


class UserBasic(BaseModel):
    id: str
    name: str
    role: str

    model_config = {
        "from_attributes": True
    }


class OrganizationNode(BaseModel):
    id: str
    name: str
    role: UserRole
    manager_id: Optional[str] = None
    level: int
    children: List["OrganizationNode"] = Field(default_factory=list)
    reports: List[Report] = Field(default_factory=list)


class AccessScope(BaseModel):
    user_role: str
    scope_description: str
    viewable_user_count: int
    viewable_users: List[UserBasic]
